"""
WhatsApp Voice Relay

Processes voice messages from WhatsApp:
1. Check the sender against the allow-list
2. Resolve transcription / summary providers from configuration
3. Download the audio from WhatsApp
4. Transcribe to text (STT)
5. Summarize (optional)
6. Send the transcript back to the sender

Each stage either hands its result to the next one or ends the message
with a VoiceMessageResult. Nothing is retried and nothing is shared
between messages.
"""

import logging
import time
from typing import Literal, Optional

from pydantic import BaseModel

from infra.config import ConfigurationError, RelayConfig
from services.stt import STTRequest
from services.summary import SummaryRequest
from transport.whatsapp.media import fetch_media
from transport.whatsapp.normalize import extract_voice_notes
from transport.whatsapp.schemas import VoiceNote, WhatsAppWebhookPayload
from transport.whatsapp.sender import compose_reply, send_reply

logger = logging.getLogger(__name__)


class VoiceMessageResult(BaseModel):
    """Result of voice message processing."""
    message_id: str
    sender_id: str
    status: Literal["success", "skipped", "error"]
    transcribed_text: str = ""
    summary: str = ""
    error: Optional[str] = None
    processing_time_ms: float = 0.0


class WhatsAppVoiceRelay:
    """
    Voice note → transcript → reply pipeline.

    Built per webhook request from a RelayConfig snapshot.
    """

    def __init__(self, config: RelayConfig):
        self.config = config

    async def process_payload(self, payload: dict | WhatsAppWebhookPayload) -> list[VoiceMessageResult]:
        """
        Process every voice note of a webhook payload, one after another.

        Raises:
            NormalizationError: Envelope has the wrong shape
        """
        notes = extract_voice_notes(payload)
        if not notes:
            logger.debug("No voice messages in payload")
            return []

        results = []
        for note in notes:
            results.append(await self.process_voice_note(note))
        return results

    async def process_voice_note(self, note: VoiceNote) -> VoiceMessageResult:
        """Run one voice note through the pipeline. Never raises."""
        start = time.perf_counter()

        try:
            result = await self._process(note)
        except Exception as e:
            logger.error(
                f"Error handling voice message: {e}",
                exc_info=True,
                extra={"sender_id": note.sender_id, "message_id": note.message_id},
            )
            result = self._result(note, "error", error=f"unexpected: {e}")

        result.processing_time_ms = (time.perf_counter() - start) * 1000
        return result

    async def _process(self, note: VoiceNote) -> VoiceMessageResult:
        logger.info(
            f"Processing voice message {note.message_id} from {note.sender_id}",
            extra={
                "sender_id": note.sender_id,
                "message_id": note.message_id,
                "mime_type": note.mime_type,
            },
        )

        if not self.config.is_sender_allowed(note.sender_id):
            logger.info(
                f"Rejected voice message from non-whitelisted number: {note.sender_id}",
                extra={"sender_id": note.sender_id, "message_id": note.message_id},
            )
            return self._result(note, "skipped", error="sender_not_allowed")

        # Unknown provider names abort this message only
        try:
            stt_backend = self.config.create_stt_backend()
            summary_backend = self.config.create_summary_backend()
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}", extra={"message_id": note.message_id})
            return self._result(note, "error", error=f"configuration: {e}")

        media = await fetch_media(note.media_id, self.config)
        if not media.ok:
            logger.error(
                "Failed to download audio file",
                extra={"message_id": note.message_id, "error_type": media.error_type},
            )
            return self._result(note, "error", error=f"media: {media.error_type}")

        transcription = await stt_backend.transcribe(
            STTRequest(audio_data=media.content, trace_id=note.message_id)
        )
        if not transcription.ok:
            logger.error(
                "Failed to transcribe audio",
                extra={
                    "message_id": note.message_id,
                    "backend": stt_backend.name,
                    "error_type": transcription.error_type,
                },
            )
            return self._result(note, "error", error=f"transcription: {transcription.error_type}")

        transcript = transcription.text

        summary = ""
        if summary_backend is not None:
            summary_response = await summary_backend.summarize(
                SummaryRequest(text=transcript, trace_id=note.message_id)
            )
            # A failed summary still lets the transcript through
            summary = summary_response.output

        reply = await send_reply(
            note.sender_id,
            compose_reply(transcript, summary),
            self.config,
            phone_number_id=note.phone_number_id,
        )
        if not reply.ok:
            return self._result(
                note,
                "error",
                transcribed_text=transcript,
                summary=summary,
                error=f"reply: {reply.error_type}",
            )

        return self._result(note, "success", transcribed_text=transcript, summary=summary)

    @staticmethod
    def _result(note: VoiceNote, status: str, **fields) -> VoiceMessageResult:
        return VoiceMessageResult(
            message_id=note.message_id,
            sender_id=note.sender_id,
            status=status,
            **fields,
        )
