"""Data models for Twilio webhook payloads and the voice note pipeline."""

from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict

from voice_relay.exceptions import FailureReason


class InboundVoiceNote(BaseModel):
    """A voice note attached to an incoming WhatsApp message."""

    url: str
    content_type: str
    declared_size: Optional[int] = None  # Bytes, when the provider declares it


class AudioPayload(BaseModel):
    """Raw audio bytes downloaded for a single request."""

    data: bytes
    content_type: str

    def __repr__(self) -> str:
        return f"AudioPayload(content_type={self.content_type!r}, size={len(self.data)})"


class TranscriptionResult(BaseModel):
    """Outcome of the voice pipeline for one voice note."""

    text: str
    success: bool
    failure_reason: Optional[FailureReason] = None

    @classmethod
    def succeeded(cls, text: str) -> "TranscriptionResult":
        return cls(text=text, success=True)

    @classmethod
    def failed(cls, reason: FailureReason) -> "TranscriptionResult":
        return cls(text="", success=False, failure_reason=reason)


class TwilioWebhookPayload(BaseModel):
    """Twilio WhatsApp webhook payload.

    Twilio posts the webhook as a flat, form-encoded set of fields; unknown
    fields are kept so new Twilio parameters don't break parsing.
    """

    # Message identifiers
    MessageSid: str
    SmsSid: Optional[str] = None
    SmsMessageSid: Optional[str] = None
    AccountSid: str

    # Sender information
    From: str  # Format: "whatsapp:+14155552671"
    To: str    # Format: "whatsapp:+15551238886"
    ProfileName: Optional[str] = None
    WaId: Optional[str] = None  # WhatsApp ID without prefix

    # Message content
    Body: Optional[str] = None
    MessageType: Optional[str] = None

    # Media information
    NumMedia: str = "0"  # String number of media attachments
    MediaContentType0: Optional[str] = None
    MediaUrl0: Optional[str] = None

    # Status and metadata
    SmsStatus: Optional[str] = None
    ApiVersion: Optional[str] = None
    NumSegments: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    def get_message_type(self) -> Literal["text", "audio", "image", "video", "document", "unknown"]:
        """Determine message type based on media content type."""
        if self.MessageType:
            # Map Twilio's MessageType to our internal types
            msg_type = self.MessageType.lower()
            if msg_type in ["text", "audio", "image", "video", "document"]:
                return msg_type
            if msg_type == "file":
                return "document"

        # Fallback for older webhook formats
        if int(self.NumMedia or "0") == 0 and not self.MediaUrl0:
            return "text"

        if self.MediaContentType0:
            content_type = self.MediaContentType0.lower()
            if content_type.startswith("audio/"):
                return "audio"
            elif content_type.startswith("image/"):
                return "image"
            elif content_type.startswith("video/"):
                return "video"
            else:
                return "document"

        return "unknown"

    def get_media_url(self) -> Optional[str]:
        """Extract the first media URL."""
        return self.MediaUrl0 or None

    def get_voice_note(self) -> Optional[InboundVoiceNote]:
        """Return the attached voice note, or None when the message carries no audio."""
        media_url = self.get_media_url()
        if not media_url or self.get_message_type() != "audio":
            return None
        # WhatsApp voice notes are ogg/opus when Twilio omits the media type
        return InboundVoiceNote(url=media_url, content_type=self.MediaContentType0 or "audio/ogg")

    def get_phone_number(self) -> str:
        """Extract sender's phone number (with whatsapp: prefix)."""
        return self.From
