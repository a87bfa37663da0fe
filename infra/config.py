"""
Relay configuration system.

Environment-based provider selection with the defaults the relay shipped
with. Values are read per request, so a changed environment is picked up
without a restart.
"""

import logging
import os
from typing import Optional, Literal, Tuple
from dataclasses import dataclass

from services.stt import STTBackend, OpenAIWhisperSTTBackend, DeepgramSTTBackend
from services.summary import SummaryBackend, OpenAIChatSummaryBackend, AnthropicSummaryBackend


STTBackendType = Literal["OPENAI", "DEEPGRAM"]
SummaryBackendType = Literal["OPENAI", "ANTHROPIC"]

STT_BACKENDS: Tuple[str, ...] = ("OPENAI", "DEEPGRAM")
SUMMARY_BACKENDS: Tuple[str, ...] = ("OPENAI", "ANTHROPIC")

DEFAULT_HTTP_TIMEOUT_S = 30.0

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Relay configuration is invalid."""
    pass


class UnsupportedProviderError(ConfigurationError):
    """Configured provider name is not one the relay knows."""

    def __init__(self, capability: str, provider: str, supported: Tuple[str, ...]):
        self.capability = capability
        self.provider = provider
        self.supported = supported
        super().__init__(
            f"Unsupported {capability} service: {provider!r} "
            f"(expected one of {', '.join(supported)})"
        )


def _timeout_from_env() -> float:
    """HTTP_TIMEOUT_S in seconds; unusable values fall back to the default."""
    raw = os.getenv("HTTP_TIMEOUT_S")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_S
    try:
        timeout = float(raw)
    except ValueError:
        timeout = 0.0
    if not timeout > 0:  # also rejects nan
        logger.warning(
            f"Invalid HTTP_TIMEOUT_S={raw!r}, using {DEFAULT_HTTP_TIMEOUT_S:g}s"
        )
        return DEFAULT_HTTP_TIMEOUT_S
    return timeout


@dataclass(frozen=True)
class RelayConfig:
    """Relay configuration from environment."""

    # Webhook security
    webhook_secret: Optional[str]
    app_secret: Optional[str]

    # WhatsApp Cloud API
    whatsapp_access_token: Optional[str]
    whatsapp_phone_number_id: Optional[str]
    whatsapp_api_version: str

    # Sender allow-list (raw comma-separated value)
    whitelisted_phone_numbers: Optional[str]

    # Transcription
    transcription_service: str
    openai_api_key: Optional[str]
    whisper_model: str
    deepgram_api_key: Optional[str]

    # Summarization
    generate_summary: bool
    ai_service: str
    openai_model: str
    anthropic_api_key: Optional[str]
    anthropic_model: str

    # Outbound HTTP
    http_timeout_s: float = DEFAULT_HTTP_TIMEOUT_S

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """
        Load configuration from environment variables.

        Defaults:
        - Transcription: OpenAI Whisper (whisper-1)
        - Summaries: disabled; OpenAI gpt-3.5-turbo when enabled
        - Allow-list: unset (every sender allowed)
        """
        return cls(
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            app_secret=os.getenv("WHATSAPP_APP_SECRET") or None,

            whatsapp_access_token=os.getenv("WHATSAPP_ACCESS_TOKEN") or None,
            whatsapp_phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID") or None,
            whatsapp_api_version=os.getenv("WHATSAPP_API_VERSION", "v18.0"),

            whitelisted_phone_numbers=os.getenv("WHITELISTED_PHONE_NUMBERS") or None,

            transcription_service=os.getenv("VOICE_TRANSCRIPTION_SERVICE", "OPENAI"),
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            whisper_model=os.getenv("WHISPER_MODEL", "whisper-1"),
            deepgram_api_key=os.getenv("DEEPGRAM_API_KEY") or None,

            generate_summary=os.getenv("GENERATE_SUMMARY") == "true",
            ai_service=os.getenv("AI_SERVICE", "OPENAI"),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-3.5-turbo"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY") or None,
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-3-haiku-20240307"),

            http_timeout_s=_timeout_from_env(),
        )

    # ------------------------------------------------------------------
    # Allow-list
    # ------------------------------------------------------------------

    @property
    def allowed_senders(self) -> frozenset:
        """Trimmed, non-empty entries of the allow-list. Empty means allow all."""
        if not self.whitelisted_phone_numbers:
            return frozenset()
        return frozenset(
            number.strip()
            for number in self.whitelisted_phone_numbers.split(",")
            if number.strip()
        )

    def is_sender_allowed(self, sender_id: str) -> bool:
        """Check a sender against the allow-list."""
        allowed = self.allowed_senders
        if not allowed:
            return True
        return sender_id in allowed

    # ------------------------------------------------------------------
    # Provider selection
    # ------------------------------------------------------------------

    def create_stt_backend(self) -> STTBackend:
        """Create the transcription backend selected by VOICE_TRANSCRIPTION_SERVICE."""
        service = self.transcription_service.strip().upper()

        if service == "OPENAI":
            return OpenAIWhisperSTTBackend(
                api_key=self.openai_api_key or "",
                model_name=self.whisper_model,
                timeout_s=self.http_timeout_s,
            )
        elif service == "DEEPGRAM":
            return DeepgramSTTBackend(
                api_key=self.deepgram_api_key or "",
                timeout_s=self.http_timeout_s,
            )
        else:
            raise UnsupportedProviderError("transcription", self.transcription_service, STT_BACKENDS)

    def create_summary_backend(self) -> Optional[SummaryBackend]:
        """Create the summary backend selected by AI_SERVICE (None if disabled)."""
        if not self.generate_summary:
            return None

        service = self.ai_service.strip().upper()

        if service == "OPENAI":
            return OpenAIChatSummaryBackend(
                api_key=self.openai_api_key or "",
                model_name=self.openai_model,
                timeout_s=self.http_timeout_s,
            )
        elif service == "ANTHROPIC":
            return AnthropicSummaryBackend(
                api_key=self.anthropic_api_key or "",
                model_name=self.anthropic_model,
                timeout_s=self.http_timeout_s,
            )
        else:
            raise UnsupportedProviderError("summary", self.ai_service, SUMMARY_BACKENDS)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def missing_settings(self) -> list:
        """Names of required environment variables that are not set."""
        missing = []
        if not self.webhook_secret:
            missing.append("WEBHOOK_SECRET")
        if not self.whatsapp_access_token:
            missing.append("WHATSAPP_ACCESS_TOKEN")
        if not self.whatsapp_phone_number_id:
            missing.append("WHATSAPP_PHONE_NUMBER_ID")

        service = self.transcription_service.strip().upper()
        if service == "OPENAI" and not self.openai_api_key:
            missing.append("OPENAI_API_KEY")
        elif service == "DEEPGRAM" and not self.deepgram_api_key:
            missing.append("DEEPGRAM_API_KEY")

        if self.generate_summary:
            ai_service = self.ai_service.strip().upper()
            if ai_service == "OPENAI" and not self.openai_api_key and "OPENAI_API_KEY" not in missing:
                missing.append("OPENAI_API_KEY")
            elif ai_service == "ANTHROPIC" and not self.anthropic_api_key:
                missing.append("ANTHROPIC_API_KEY")

        return missing

    @property
    def graph_api_base(self) -> str:
        return f"https://graph.facebook.com/{self.whatsapp_api_version}"


def get_config() -> RelayConfig:
    """Get relay configuration from the current environment."""
    return RelayConfig.from_env()
