"""
Deepgram STT backend.

Posts the raw audio body to /v1/listen and reads the first alternative
of the first channel.
"""

import logging

import httpx

from .base import STTBackend, STTRequest, STTResponse

logger = logging.getLogger(__name__)

DEEPGRAM_LISTEN_URL = "https://api.deepgram.com/v1/listen"


class DeepgramSTTBackend(STTBackend):
    """Transcription via Deepgram's pre-recorded audio API."""

    name = "deepgram"

    def __init__(self, api_key: str, timeout_s: float = 30.0):
        self.api_key = api_key
        self.timeout_s = timeout_s

    async def transcribe(self, request: STTRequest) -> STTResponse:
        headers = {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": request.mime_type,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout_s) as client:
                response = await client.post(
                    DEEPGRAM_LISTEN_URL,
                    headers=headers,
                    content=request.audio_data,
                )
        except httpx.RequestError as e:
            logger.error(f"Deepgram request failed: {e}", exc_info=True)
            return self._failure(request, "backend_unavailable", status="fatal_error", error=str(e))

        if not response.is_success:
            logger.error(
                f"Deepgram API error: {response.status_code}",
                extra={"status_code": response.status_code, "backend": self.name},
            )
            return self._failure(request, "http_error", status_code=response.status_code)

        try:
            result = response.json()
            transcript = result["results"]["channels"][0]["alternatives"][0]["transcript"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error(f"Unexpected Deepgram response shape: {e}")
            return self._failure(request, "invalid_response")

        transcript = (transcript or "").strip()
        if not transcript:
            return self._failure(request, "empty_transcript")

        return STTResponse(
            status="success",
            text=transcript,
            metadata={"backend": self.name, "trace_id": request.trace_id},
        )
