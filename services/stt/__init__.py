"""
Speech-to-Text service exports.

Clean interface for the relay to import STT components.
"""

from .base import STTBackend, STTRequest, STTResponse, STTStatus
from .deepgram import DeepgramSTTBackend
from .openai_whisper import OpenAIWhisperSTTBackend

__all__ = [
    "STTBackend",
    "STTRequest",
    "STTResponse",
    "STTStatus",
    "OpenAIWhisperSTTBackend",
    "DeepgramSTTBackend",
]
