"""Pytest configuration and fixtures."""

import sys
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from infra.config import RelayConfig  # noqa: E402


BASE_ENV = {
    "WEBHOOK_SECRET": "verify_me",
    "WHATSAPP_ACCESS_TOKEN": "wa_token",
    "WHATSAPP_PHONE_NUMBER_ID": "555000111",
    "VOICE_TRANSCRIPTION_SERVICE": "OPENAI",
    "OPENAI_API_KEY": "sk-test",
    "DEEPGRAM_API_KEY": "dg-test",
    "ANTHROPIC_API_KEY": "ak-test",
    "GENERATE_SUMMARY": "false",
}


@pytest.fixture
def relay_env():
    """Environment with every credential set; tests override single keys."""
    return dict(BASE_ENV)


@pytest.fixture
def make_config():
    """Build a RelayConfig from BASE_ENV plus overrides (None removes a key)."""

    def _make(**overrides) -> RelayConfig:
        env = dict(BASE_ENV)
        for key, value in overrides.items():
            if value is None:
                env.pop(key, None)
            else:
                env[key] = value
        with patch.dict("os.environ", env, clear=True):
            return RelayConfig.from_env()

    return _make


@pytest.fixture
def audio_payload():
    """WhatsApp webhook payload with one audio message."""

    def _payload(sender="15551234567", message_id="wamid.audio_123", media_id="media_abc"):
        return {
            "object": "whatsapp_business_account",
            "entry": [{
                "id": "WABA_ID",
                "changes": [{
                    "field": "messages",
                    "value": {
                        "messaging_product": "whatsapp",
                        "metadata": {
                            "display_phone_number": "15550001111",
                            "phone_number_id": "555000111",
                        },
                        "messages": [{
                            "from": sender,
                            "id": message_id,
                            "timestamp": "1707500000",
                            "type": "audio",
                            "audio": {
                                "id": media_id,
                                "mime_type": "audio/ogg; codecs=opus",
                                "voice": True,
                            },
                        }],
                    },
                }],
            }],
        }

    return _payload


def json_response(status_code: int, data) -> httpx.Response:
    return httpx.Response(status_code, json=data)


def bytes_response(status_code: int, content: bytes) -> httpx.Response:
    return httpx.Response(status_code, content=content)


@contextmanager
def mock_async_client(get=None, post=None):
    """
    Patch httpx.AsyncClient with one AsyncMock client.

    `get` / `post` are lists of responses (or exceptions) returned in call
    order across every `async with httpx.AsyncClient()` block.
    """
    with patch("httpx.AsyncClient") as mock_class:
        mock_instance = AsyncMock()
        mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
        mock_instance.__aexit__ = AsyncMock(return_value=False)
        mock_instance.get.side_effect = list(get or [])
        mock_instance.post.side_effect = list(post or [])
        mock_class.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def http_mock():
    """Factory for the patched httpx.AsyncClient context manager."""
    return mock_async_client


@pytest.fixture
def responses():
    """Builders for real httpx.Response objects."""

    class _Responses:
        json = staticmethod(json_response)
        content = staticmethod(bytes_response)

    return _Responses
