"""
WhatsApp Webhook Handler

Receives WhatsApp Cloud API webhooks and hands voice messages to the relay.

Routes:
  GET  /webhook  - subscription challenge (hub.mode / hub.verify_token / hub.challenge)
  POST /webhook  - message notifications

Update Flow:
  webhook → verify signature → parse → WhatsAppVoiceRelay → 200 OK
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import PlainTextResponse

from infra.config import RelayConfig, get_config
from transport.whatsapp.normalize import NormalizationError
from transport.whatsapp.security import (
    ChallengeVerificationError,
    SignatureVerificationError,
    verify_signature,
    verify_webhook_challenge,
)
from webhook.voice_relay import WhatsAppVoiceRelay

# Setup logging
logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=["WhatsApp Webhook"])


def get_relay_config() -> RelayConfig:
    """Fresh configuration per request."""
    return get_config()


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/webhook")
async def whatsapp_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    config: RelayConfig = Depends(get_relay_config),
) -> PlainTextResponse:
    """
    Verify webhook subscription challenge from Meta.

    Echoes hub.challenge as plain text when the token matches WEBHOOK_SECRET.
    """
    try:
        challenge = verify_webhook_challenge(
            hub_mode, hub_verify_token, hub_challenge, config.webhook_secret
        )
    except ChallengeVerificationError as e:
        logger.warning(f"Webhook challenge rejected: {e}")
        return PlainTextResponse("Forbidden", status_code=status.HTTP_403_FORBIDDEN)

    logger.info("Webhook subscription verified")
    return PlainTextResponse(challenge, status_code=status.HTTP_200_OK)


# ============================================================================
# WEBHOOK RECEIVER (Message processing)
# ============================================================================

@router.post("/webhook")
async def whatsapp_webhook_receiver(
    request: Request,
    config: RelayConfig = Depends(get_relay_config),
) -> PlainTextResponse:
    """
    Receive WhatsApp messages via webhook.

    Flow:
    1. Read raw body
    2. Verify signature (401 if missing/invalid, skipped without app secret)
    3. Parse JSON (500 if malformed)
    4. Run every voice note through the relay
    5. Return 200 OK, whatever happened to individual messages
    """
    body = await request.body()

    if config.app_secret:
        try:
            verify_signature(request.headers, body, config.app_secret)
        except SignatureVerificationError as e:
            logger.warning(f"Signature verification failed: {e}")
            return PlainTextResponse("Unauthorized", status_code=status.HTTP_401_UNAUTHORIZED)

    try:
        payload = json.loads(body)
        results = await WhatsAppVoiceRelay(config).process_payload(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, NormalizationError) as e:
        # Sender's fault: no traceback
        logger.warning(f"Rejected malformed webhook payload: {e}")
        return PlainTextResponse(
            "Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except Exception as e:
        logger.error(f"Error processing webhook: {e}", exc_info=True)
        return PlainTextResponse(
            "Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    if results:
        logger.info(
            f"Processed {len(results)} voice message(s)",
            extra={"statuses": [r.status for r in results]},
        )

    return PlainTextResponse("OK", status_code=status.HTTP_200_OK)
