"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Only defines the contract between WhatsApp and the relay pipeline.
"""

from dataclasses import dataclass
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# WHATSAPP WEBHOOK PAYLOAD SCHEMAS (INPUT)
# ============================================================================
#
# Every nesting level defaults to empty: a payload missing entry, changes,
# value or messages (absent or null) is simply a payload with nothing to do.

class ValueMetadata(BaseModel):
    """Business phone number the message was sent to."""
    display_phone_number: Optional[str] = None
    phone_number_id: Optional[str] = None

    class Config:
        extra = "allow"


class ChangeValue(BaseModel):
    """The `value` object of a webhook change."""
    messaging_product: Optional[str] = None
    metadata: Optional[ValueMetadata] = None
    contacts: list[dict] = Field(default_factory=list)
    messages: list[dict] = Field(default_factory=list)  # parsed one by one

    @field_validator("messages", mode="before")
    @classmethod
    def null_messages_as_empty(cls, value):
        return [] if value is None else value

    class Config:
        extra = "allow"  # statuses, errors, ...


class Change(BaseModel):
    """One change notification inside an entry."""
    field: Optional[str] = None
    value: Optional[ChangeValue] = None

    class Config:
        extra = "allow"


class Entry(BaseModel):
    """One WhatsApp Business Account entry."""
    id: Optional[str] = None
    changes: list[Change] = Field(default_factory=list)

    @field_validator("changes", mode="before")
    @classmethod
    def null_changes_as_empty(cls, value):
        return [] if value is None else value

    class Config:
        extra = "allow"


class WhatsAppWebhookPayload(BaseModel):
    """
    Full WhatsApp webhook payload.

    ref: https://developers.facebook.com/docs/whatsapp/cloud-api/webhooks/payload-example
    """

    object: Optional[str] = Field(None, description="Always 'whatsapp_business_account'")
    entry: list[Entry] = Field(default_factory=list, description="Webhook entries")

    @field_validator("entry", mode="before")
    @classmethod
    def null_entry_as_empty(cls, value):
        return [] if value is None else value

    class Config:
        extra = "allow"  # WhatsApp may add fields


class AudioObject(BaseModel):
    """Media reference of an audio / voice message."""
    id: str
    mime_type: Optional[str] = None
    voice: Optional[bool] = None

    class Config:
        extra = "allow"


class MessageObject(BaseModel):
    """A single WhatsApp message."""
    from_: str = Field(..., alias="from")
    id: str
    type: str
    timestamp: Optional[str] = None

    audio: Optional[AudioObject] = None

    class Config:
        populate_by_name = True
        extra = "allow"


# ============================================================================
# NORMALIZED VOICE NOTE (THE CONTRACT)
# ============================================================================

class VoiceNote(BaseModel):
    """
    Canonical audio message the relay pipeline consumes.

    One per inbound audio message; lives for one webhook request.
    """

    sender_id: str = Field(..., description="WhatsApp phone number of the sender")
    message_id: str = Field(..., description="Unique WhatsApp message ID")
    media_id: str = Field(..., description="Media reference id of the audio")
    mime_type: Optional[str] = Field(
        None,
        description="Mime type reported by WhatsApp (informational; audio is always uploaded as audio/ogg)"
    )
    phone_number_id: Optional[str] = Field(
        None,
        description="Business phone number id the message arrived on"
    )

    class Config:
        """Pydantic config."""
        frozen = True


# ============================================================================
# WHATSAPP API RESULTS (OUTPUT)
# ============================================================================

MediaStatus = Literal["success", "error"]
ReplyStatus = Literal["sent", "error"]


@dataclass
class MediaResponse:
    """Outcome of resolving and downloading one media id."""

    status: MediaStatus
    content: Optional[bytes] = None
    media_url: Optional[str] = None
    error_type: Optional[str] = None  # lookup_failed | missing_url | download_failed | network_error
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "success" and self.content is not None


@dataclass
class ReplyResult:
    """Outcome of sending one text message."""

    status: ReplyStatus
    response_id: Optional[str] = None
    error_type: Optional[str] = None  # not_configured | http_error | network_error
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == "sent"
