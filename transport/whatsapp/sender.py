"""
WhatsApp Reply Sender

Sends the transcript (and optional summary) back to the sender.
Fixed text template. No retries. Failures are returned, not raised.
"""

import logging
from typing import Optional

import httpx

from infra.config import RelayConfig

from .schemas import ReplyResult

logger = logging.getLogger(__name__)


def compose_reply(transcript: str, summary: Optional[str] = None) -> str:
    """
    Build the reply body.

    Summary block only when a summary was produced, transcript block always.
    """
    message_text = ""

    if summary:
        message_text += f"*Summary:*\n{summary}\n\n"

    message_text += f"*Transcript:*\n{transcript}"
    return message_text


async def send_reply(
    to: str,
    body: str,
    config: RelayConfig,
    phone_number_id: Optional[str] = None,
) -> ReplyResult:
    """
    Send a text message via WhatsApp Cloud API.

    Args:
        to: Recipient phone number (the original sender)
        body: Message text
        config: Relay configuration (access token, phone number id)
        phone_number_id: Fallback business phone number id, used when
            WHATSAPP_PHONE_NUMBER_ID is not configured

    Returns:
        ReplyResult with the Meta message id, or status="error"
    """

    sender_number_id = config.whatsapp_phone_number_id or phone_number_id
    if not sender_number_id:
        logger.error("WHATSAPP_PHONE_NUMBER_ID not configured", extra={"sender_id": to})
        return ReplyResult(status="error", error_type="not_configured")

    endpoint = f"{config.graph_api_base}/{sender_number_id}/messages"

    payload = {
        "messaging_product": "whatsapp",
        "to": to,
        "type": "text",
        "text": {
            "body": body
        }
    }

    headers = {
        "Authorization": f"Bearer {config.whatsapp_access_token or ''}",
        "Content-Type": "application/json"
    }

    # Send (no retries)
    try:
        async with httpx.AsyncClient(timeout=config.http_timeout_s) as client:
            response = await client.post(
                endpoint,
                json=payload,
                headers=headers,
            )
    except httpx.RequestError as e:
        logger.error(
            f"HTTP request failed: {e}",
            exc_info=True,
            extra={"sender_id": to, "error": str(e)},
        )
        return ReplyResult(status="error", error_type="network_error")

    if not response.is_success:
        logger.error(
            f"WhatsApp API error: {response.status_code} - {response.text}",
            extra={"sender_id": to, "status_code": response.status_code},
        )
        return ReplyResult(status="error", error_type="http_error", status_code=response.status_code)

    try:
        response_id = response.json().get("messages", [{}])[0].get("id")
    except (ValueError, AttributeError, IndexError):
        response_id = None

    logger.info(
        f"Message sent successfully to {to}",
        extra={"sender_id": to, "response_id": response_id},
    )
    return ReplyResult(status="sent", response_id=response_id, status_code=response.status_code)
