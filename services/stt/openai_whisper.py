"""
OpenAI Whisper STT backend (hosted API).

Uploads the audio as multipart/form-data to /v1/audio/transcriptions.
"""

import logging

import httpx

from .base import STTBackend, STTRequest, STTResponse

logger = logging.getLogger(__name__)

OPENAI_TRANSCRIPTIONS_URL = "https://api.openai.com/v1/audio/transcriptions"

# Asks Whisper to keep the transcript readable when sent back as a chat message
TRANSCRIPTION_PROMPT = (
    "The transcript should have natural paragraph breaks and bullet points "
    "for any action steps. The output should be easy to read and follow."
)


class OpenAIWhisperSTTBackend(STTBackend):
    """Transcription via OpenAI's hosted Whisper model."""

    name = "openai_whisper"

    def __init__(self, api_key: str, model_name: str = "whisper-1", timeout_s: float = 30.0):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_s = timeout_s

    async def transcribe(self, request: STTRequest) -> STTResponse:
        files = {
            "file": (request.filename, request.audio_data, request.mime_type),
        }
        data = {
            "model": self.model_name,
            "response_format": "json",
            "prompt": TRANSCRIPTION_PROMPT,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    OPENAI_TRANSCRIPTIONS_URL,
                    headers=headers,
                    data=data,
                    files=files,
                )
        except httpx.RequestError as e:
            logger.error(f"OpenAI transcription request failed: {e}", exc_info=True)
            return self._failure(request, "backend_unavailable", status="fatal_error", error=str(e))

        if not response.is_success:
            logger.error(
                f"OpenAI API error: {response.status_code}",
                extra={"status_code": response.status_code, "backend": self.name},
            )
            return self._failure(request, "http_error", status_code=response.status_code)

        try:
            text = response.json()["text"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Unexpected OpenAI transcription response: {e}")
            return self._failure(request, "invalid_response")

        text = (text or "").strip()
        if not text:
            return self._failure(request, "empty_transcript")

        return STTResponse(
            status="success",
            text=text,
            metadata={
                "backend": self.name,
                "model": self.model_name,
                "trace_id": request.trace_id,
            },
        )
