"""
WhatsApp Input Normalization Tests

Test extraction of voice notes from WhatsApp webhook payloads.
"""

import pytest

from transport.whatsapp.normalize import (
    NormalizationError,
    extract_voice_notes,
    parse_payload,
)
from transport.whatsapp.schemas import VoiceNote, WhatsAppWebhookPayload


def _payload_with_messages(messages, metadata=None):
    value = {"messages": messages}
    if metadata is not None:
        value["metadata"] = metadata
    return {"entry": [{"changes": [{"value": value}]}]}


class TestExtractAudio:
    """Test audio message extraction."""

    def test_extract_audio_message(self, audio_payload):
        """Audio message becomes a VoiceNote."""
        notes = extract_voice_notes(audio_payload())

        assert len(notes) == 1
        note = notes[0]
        assert isinstance(note, VoiceNote)
        assert note.sender_id == "15551234567"
        assert note.message_id == "wamid.audio_123"
        assert note.media_id == "media_abc"
        assert note.mime_type == "audio/ogg; codecs=opus"
        assert note.phone_number_id == "555000111"

    def test_text_and_image_messages_ignored(self):
        """Only audio messages are relayed."""
        payload = _payload_with_messages([
            {"from": "1", "id": "m1", "type": "text", "text": {"body": "hi"}},
            {"from": "1", "id": "m2", "type": "image", "image": {"id": "img"}},
            {"from": "1", "id": "m3", "type": "audio", "audio": {"id": "aud"}},
        ])

        notes = extract_voice_notes(payload)

        assert [n.message_id for n in notes] == ["m3"]

    def test_multiple_entries_and_changes(self):
        """Every entry and every change is visited, in order."""
        payload = {
            "entry": [
                {"changes": [
                    {"value": {"messages": [{"from": "1", "id": "a", "type": "audio", "audio": {"id": "x"}}]}},
                    {"value": {"messages": [{"from": "2", "id": "b", "type": "audio", "audio": {"id": "y"}}]}},
                ]},
                {"changes": [
                    {"value": {"messages": [{"from": "3", "id": "c", "type": "audio", "audio": {"id": "z"}}]}},
                ]},
            ]
        }

        notes = extract_voice_notes(payload)

        assert [(n.sender_id, n.media_id) for n in notes] == [("1", "x"), ("2", "y"), ("3", "z")]

    def test_voice_note_immutable(self, audio_payload):
        """VoiceNote is frozen."""
        note = extract_voice_notes(audio_payload())[0]

        with pytest.raises(Exception):
            note.sender_id = "Modified"  # type: ignore


class TestMissingLevels:
    """Any missing nesting level means nothing to do."""

    @pytest.mark.parametrize("payload", [
        {},
        {"object": "whatsapp_business_account"},
        {"entry": []},
        {"entry": [{}]},
        {"entry": [{"changes": []}]},
        {"entry": [{"changes": [{}]}]},
        {"entry": [{"changes": [{"value": {}}]}]},
        {"entry": [{"changes": [{"value": {"messages": []}}]}]},
        {"entry": None},
        {"entry": [{"changes": None}]},
        {"entry": [{"changes": [{"value": None}]}]},
        {"entry": [{"changes": [{"value": {"messages": None}}]}]},
        {"entry": [{"changes": [{"value": {"statuses": [{"id": "s1", "status": "read"}]}}]}]},
    ])
    def test_no_voice_notes(self, payload):
        assert extract_voice_notes(payload) == []


class TestMalformedMessages:
    """Single bad messages are skipped, the rest still go through."""

    def test_audio_without_id_skipped(self):
        payload = _payload_with_messages([
            {"from": "1", "id": "bad", "type": "audio", "audio": {"mime_type": "audio/ogg"}},
            {"from": "1", "id": "good", "type": "audio", "audio": {"id": "aud"}},
        ])

        notes = extract_voice_notes(payload)

        assert [n.message_id for n in notes] == ["good"]

    def test_audio_without_audio_object_skipped(self):
        payload = _payload_with_messages([
            {"from": "1", "id": "m1", "type": "audio"},
        ])

        assert extract_voice_notes(payload) == []

    def test_audio_without_sender_skipped(self):
        payload = _payload_with_messages([
            {"id": "m1", "type": "audio", "audio": {"id": "aud"}},
        ])

        assert extract_voice_notes(payload) == []

    def test_phone_number_id_optional(self):
        payload = _payload_with_messages([
            {"from": "1", "id": "m1", "type": "audio", "audio": {"id": "aud"}},
        ])

        assert extract_voice_notes(payload)[0].phone_number_id is None


class TestEnvelopeErrors:
    """Wrongly typed envelopes raise NormalizationError."""

    def test_non_object_payload(self):
        with pytest.raises(NormalizationError):
            parse_payload(["not", "an", "object"])  # type: ignore[arg-type]

    def test_entry_not_a_list(self):
        with pytest.raises(NormalizationError):
            extract_voice_notes({"entry": "oops"})

    def test_parsed_payload_passthrough(self):
        parsed = WhatsAppWebhookPayload(entry=[])
        assert parse_payload(parsed) is parsed
