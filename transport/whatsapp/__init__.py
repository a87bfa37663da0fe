"""WhatsApp Transport Layer - Module Exports"""

from .media import fetch_media
from .normalize import (
    NormalizationError,
    extract_voice_notes,
    parse_payload,
)
from .schemas import (
    AudioObject,
    MediaResponse,
    MessageObject,
    ReplyResult,
    VoiceNote,
    WhatsAppWebhookPayload,
)
from .security import (
    ChallengeVerificationError,
    SignatureVerificationError,
    compute_signature,
    verify_signature,
    verify_webhook_challenge,
)
from .sender import compose_reply, send_reply

__all__ = [
    # Schemas
    "VoiceNote",
    "WhatsAppWebhookPayload",
    "MessageObject",
    "AudioObject",
    "MediaResponse",
    "ReplyResult",
    # Normalization
    "parse_payload",
    "extract_voice_notes",
    "NormalizationError",
    # Security
    "compute_signature",
    "verify_signature",
    "verify_webhook_challenge",
    "SignatureVerificationError",
    "ChallengeVerificationError",
    # Media
    "fetch_media",
    # Sender
    "compose_reply",
    "send_reply",
]
