"""
STT Backend Tests

OpenAI Whisper (multipart) and Deepgram (raw body) behind one interface.
"""

import httpx
import pytest

from services.stt import (
    DeepgramSTTBackend,
    OpenAIWhisperSTTBackend,
    STTBackend,
    STTRequest,
)


def deepgram_result(transcript):
    return {
        "results": {
            "channels": [{
                "alternatives": [{"transcript": transcript, "confidence": 0.98}],
            }],
        },
    }


class TestOpenAIWhisper:

    @pytest.mark.asyncio
    async def test_multipart_upload(self, http_mock, responses):
        backend = OpenAIWhisperSTTBackend(api_key="sk-test")

        with http_mock(post=[responses.json(200, {"text": " Hello from the bus. "})]) as client:
            result = await backend.transcribe(STTRequest(audio_data=b"OggS"))

        assert result.ok
        assert result.text == "Hello from the bus."

        call = client.post.call_args
        assert call.args[0] == "https://api.openai.com/v1/audio/transcriptions"
        assert call.kwargs["headers"] == {"Authorization": "Bearer sk-test"}
        assert call.kwargs["files"] == {"file": ("audio.ogg", b"OggS", "audio/ogg")}
        assert call.kwargs["data"]["model"] == "whisper-1"
        assert call.kwargs["data"]["response_format"] == "json"
        assert call.kwargs["data"]["prompt"]

    @pytest.mark.asyncio
    async def test_custom_model(self, http_mock, responses):
        backend = OpenAIWhisperSTTBackend(api_key="k", model_name="whisper-large")

        with http_mock(post=[responses.json(200, {"text": "hi"})]) as client:
            await backend.transcribe(STTRequest(audio_data=b"a"))

        assert client.post.call_args.kwargs["data"]["model"] == "whisper-large"

    @pytest.mark.asyncio
    async def test_http_error(self, http_mock, responses):
        backend = OpenAIWhisperSTTBackend(api_key="k")

        with http_mock(post=[responses.json(429, {"error": "rate limited"})]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert not result.ok
        assert result.error_type == "http_error"
        assert result.metadata["status_code"] == 429

    @pytest.mark.asyncio
    async def test_network_error_does_not_raise(self, http_mock):
        backend = OpenAIWhisperSTTBackend(api_key="k")

        with http_mock(post=[httpx.ConnectError("down")]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert result.status == "fatal_error"
        assert result.error_type == "backend_unavailable"

    @pytest.mark.asyncio
    async def test_empty_transcript(self, http_mock, responses):
        backend = OpenAIWhisperSTTBackend(api_key="k")

        with http_mock(post=[responses.json(200, {"text": "   "})]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert not result.ok
        assert result.error_type == "empty_transcript"

    @pytest.mark.asyncio
    async def test_missing_text_field(self, http_mock, responses):
        backend = OpenAIWhisperSTTBackend(api_key="k")

        with http_mock(post=[responses.json(200, {"unexpected": True})]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert result.error_type == "invalid_response"


class TestDeepgram:

    @pytest.mark.asyncio
    async def test_raw_body_post(self, http_mock, responses):
        backend = DeepgramSTTBackend(api_key="dg-test")

        with http_mock(post=[responses.json(200, deepgram_result("see you at noon"))]) as client:
            result = await backend.transcribe(STTRequest(audio_data=b"OggS"))

        assert result.text == "see you at noon"

        call = client.post.call_args
        assert call.args[0] == "https://api.deepgram.com/v1/listen"
        assert call.kwargs["headers"] == {
            "Authorization": "Token dg-test",
            "Content-Type": "audio/ogg",
        }
        assert call.kwargs["content"] == b"OggS"

    @pytest.mark.asyncio
    async def test_no_channels(self, http_mock, responses):
        backend = DeepgramSTTBackend(api_key="k")

        with http_mock(post=[responses.json(200, {"results": {"channels": []}})]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert result.error_type == "invalid_response"

    @pytest.mark.asyncio
    async def test_empty_transcript(self, http_mock, responses):
        backend = DeepgramSTTBackend(api_key="k")

        with http_mock(post=[responses.json(200, deepgram_result(""))]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert result.error_type == "empty_transcript"
        assert result.text is None

    @pytest.mark.asyncio
    async def test_http_error(self, http_mock, responses):
        backend = DeepgramSTTBackend(api_key="k")

        with http_mock(post=[responses.json(401, {"err_msg": "Invalid credentials."})]):
            result = await backend.transcribe(STTRequest(audio_data=b"a"))

        assert result.error_type == "http_error"


class TestInterchangeable:

    def test_both_backends_share_interface(self):
        assert isinstance(OpenAIWhisperSTTBackend(api_key="k"), STTBackend)
        assert isinstance(DeepgramSTTBackend(api_key="k"), STTBackend)
