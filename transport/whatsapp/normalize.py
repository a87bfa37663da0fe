"""
WhatsApp Input Normalization

PURE CONVERSION - NO NETWORK CALLS

Walks the nested webhook payload (entry → changes → value → messages)
and turns every audio message into a VoiceNote.
- Missing levels: nothing to do, not an error
- Non-audio messages: ignored
- Unparseable single messages: logged and skipped
"""

import logging
from typing import Iterator

from pydantic import ValidationError

from .schemas import ChangeValue, MessageObject, VoiceNote, WhatsAppWebhookPayload

logger = logging.getLogger(__name__)


class NormalizationError(Exception):
    """Webhook envelope could not be parsed."""
    pass


def parse_payload(payload: dict | WhatsAppWebhookPayload) -> WhatsAppWebhookPayload:
    """
    Validate the webhook envelope.

    Raises:
        NormalizationError: payload is not an object, or a present level has
            the wrong shape (e.g. `entry` is not a list)
    """
    if isinstance(payload, WhatsAppWebhookPayload):
        return payload

    if not isinstance(payload, dict):
        raise NormalizationError(f"Expected JSON object, got {type(payload).__name__}")

    try:
        return WhatsAppWebhookPayload.model_validate(payload)
    except ValidationError as e:
        raise NormalizationError(f"Invalid payload structure: {e}") from e


def iter_change_values(payload: WhatsAppWebhookPayload) -> Iterator[ChangeValue]:
    """Yield every change value that exists in the payload."""
    for entry in payload.entry:
        for change in entry.changes:
            if change.value is not None:
                yield change.value


def extract_voice_notes(payload: dict | WhatsAppWebhookPayload) -> list[VoiceNote]:
    """
    Extract every audio message from a webhook payload.

    Args:
        payload: Raw WhatsApp webhook payload

    Returns:
        VoiceNotes in payload order (empty if there is nothing to do)

    Raises:
        NormalizationError: Envelope has the wrong shape
    """
    parsed = parse_payload(payload)
    notes: list[VoiceNote] = []

    for value in iter_change_values(parsed):
        phone_number_id = value.metadata.phone_number_id if value.metadata else None

        for raw_message in value.messages:
            if not isinstance(raw_message, dict) or raw_message.get("type") != "audio":
                continue

            try:
                message = MessageObject.model_validate(raw_message)
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed audio message: {e.error_count()} error(s)",
                    extra={"message_id": raw_message.get("id")},
                )
                continue

            if message.audio is None:
                logger.warning(
                    "Skipping audio message without 'audio' object",
                    extra={"message_id": message.id},
                )
                continue

            notes.append(
                VoiceNote(
                    sender_id=message.from_,
                    message_id=message.id,
                    media_id=message.audio.id,
                    mime_type=message.audio.mime_type,
                    phone_number_id=phone_number_id,
                )
            )

    return notes
