"""
WhatsApp Media Download

Two-step fetch of a media asset:
1. Resolve the media id to a temporary URL (Graph API lookup)
2. Download the binary from that URL

Both calls carry the bearer access token. No retries, never raises.
"""

import logging

import httpx

from infra.config import RelayConfig

from .schemas import MediaResponse

logger = logging.getLogger(__name__)


async def fetch_media(media_id: str, config: RelayConfig) -> MediaResponse:
    """
    Resolve and download a WhatsApp media asset.

    Args:
        media_id: Media reference id from the webhook message
        config: Relay configuration (access token, API version)

    Returns:
        MediaResponse with the audio bytes, or status="error" and the failing step
    """

    headers = {"Authorization": f"Bearer {config.whatsapp_access_token or ''}"}
    lookup_url = f"{config.graph_api_base}/{media_id}"

    try:
        async with httpx.AsyncClient(timeout=config.http_timeout_s) as client:
            # Step 1: media id → temporary URL
            lookup = await client.get(lookup_url, headers=headers)

            if not lookup.is_success:
                logger.error(
                    f"Failed to get media URL: {lookup.status_code}",
                    extra={"media_id": media_id, "status_code": lookup.status_code},
                )
                return MediaResponse(
                    status="error",
                    error_type="lookup_failed",
                    status_code=lookup.status_code,
                )

            try:
                media_url = lookup.json().get("url")
            except (ValueError, AttributeError):
                media_url = None

            if not media_url:
                logger.error(
                    "Media lookup response has no url",
                    extra={"media_id": media_id},
                )
                return MediaResponse(status="error", error_type="missing_url")

            # Step 2: download the binary
            download = await client.get(media_url, headers=headers)

            if not download.is_success:
                logger.error(
                    f"Failed to download media: {download.status_code}",
                    extra={"media_id": media_id, "status_code": download.status_code},
                )
                return MediaResponse(
                    status="error",
                    media_url=media_url,
                    error_type="download_failed",
                    status_code=download.status_code,
                )

    except httpx.RequestError as e:
        logger.error(
            f"Error downloading WhatsApp media: {e}",
            exc_info=True,
            extra={"media_id": media_id},
        )
        return MediaResponse(status="error", error_type="network_error")

    logger.debug(
        f"Downloaded media {media_id} ({len(download.content)} bytes)",
        extra={"media_id": media_id},
    )
    return MediaResponse(status="success", content=download.content, media_url=media_url)
