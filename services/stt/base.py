"""
Speech-to-Text (STT) abstract interface.

Role: Audio bytes → transcript text, over a remote provider API.

Rules:
- Pure transformation (no state mutation)
- One HTTP call per request, no retries
- Failure → typed STTResponse (never raises)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any, Literal


STTStatus = Literal["success", "recoverable_error", "fatal_error"]


@dataclass
class STTRequest:
    """Speech-to-Text request."""

    audio_data: bytes  # Raw audio bytes as downloaded from WhatsApp
    mime_type: str = "audio/ogg"
    filename: str = "audio.ogg"
    trace_id: Optional[str] = None


@dataclass
class STTResponse:
    """Speech-to-Text response."""

    status: STTStatus
    text: Optional[str] = None
    error_type: Optional[str] = None  # http_error | backend_unavailable | invalid_response | empty_transcript
    metadata: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == "success" and bool(self.text)


class STTBackend(ABC):
    """
    Abstract STT boundary.
    The relay depends ONLY on this interface.
    """

    name: str = "stt"

    @abstractmethod
    async def transcribe(self, request: STTRequest) -> STTResponse:
        """
        Transcribe audio to text.

        Args:
            request: STTRequest with audio data

        Returns:
            STTResponse with text or explicit error status
        """
        raise NotImplementedError

    def _failure(
        self,
        request: STTRequest,
        error_type: str,
        status: STTStatus = "recoverable_error",
        **extra: Any,
    ) -> STTResponse:
        """Build a failed response tagged with this backend's name."""
        return STTResponse(
            status=status,
            error_type=error_type,
            metadata={"backend": self.name, "trace_id": request.trace_id, **extra},
        )
