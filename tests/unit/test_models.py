import pytest
from pydantic import ValidationError

from voice_relay.exceptions import FailureReason
from voice_relay.models import AudioPayload, TranscriptionResult, TwilioWebhookPayload

BASE_FIELDS = {
    "MessageSid": "SM123",
    "AccountSid": "ACtest",
    "From": "whatsapp:+15551234567",
    "To": "whatsapp:+14155238886",
}


def test_text_payload_has_no_voice_note(text_payload):
    assert text_payload.get_message_type() == "text"
    assert text_payload.get_media_url() is None
    assert text_payload.get_voice_note() is None


def test_audio_payload_voice_note(audio_payload):
    assert audio_payload.get_message_type() == "audio"

    note = audio_payload.get_voice_note()
    assert note is not None
    assert note.url == audio_payload.MediaUrl0
    assert note.content_type == "audio/ogg"
    assert note.declared_size is None


def test_message_type_from_media_content_type():
    payload = TwilioWebhookPayload(
        **BASE_FIELDS,
        NumMedia="1",
        MediaUrl0="https://api.twilio.com/media/ME1",
        MediaContentType0="audio/mpeg",
    )
    assert payload.get_message_type() == "audio"
    assert payload.get_voice_note().content_type == "audio/mpeg"


def test_image_payload_has_no_voice_note():
    payload = TwilioWebhookPayload(
        **BASE_FIELDS,
        NumMedia="1",
        MediaUrl0="https://api.twilio.com/media/ME2",
        MediaContentType0="image/jpeg",
    )
    assert payload.get_message_type() == "image"
    assert payload.get_voice_note() is None


def test_twilio_file_type_maps_to_document():
    payload = TwilioWebhookPayload(**BASE_FIELDS, MessageType="file")
    assert payload.get_message_type() == "document"


def test_unknown_fields_are_kept():
    payload = TwilioWebhookPayload(**BASE_FIELDS, Latitude="52.5")
    assert payload.model_extra == {"Latitude": "52.5"}


def test_missing_sender_fails_validation():
    fields = {key: value for key, value in BASE_FIELDS.items() if key != "From"}
    with pytest.raises(ValidationError):
        TwilioWebhookPayload(**fields)


def test_transcription_result_constructors():
    assert TranscriptionResult.succeeded("hi") == TranscriptionResult(text="hi", success=True)

    failed = TranscriptionResult.failed(FailureReason.EMPTY_RESULT)
    assert failed.success is False
    assert failed.text == ""
    assert failed.failure_reason == FailureReason.EMPTY_RESULT


def test_audio_payload_repr_hides_bytes():
    audio = AudioPayload(data=b"\x00" * 2048, content_type="audio/ogg")
    assert repr(audio) == "AudioPayload(content_type='audio/ogg', size=2048)"


def test_audio_message_without_media_type_defaults_to_ogg():
    payload = TwilioWebhookPayload(
        **BASE_FIELDS,
        MessageType="audio",
        NumMedia="1",
        MediaUrl0="https://api.twilio.com/media/ME3",
    )
    note = payload.get_voice_note()
    assert note is not None
    assert note.content_type == "audio/ogg"


def test_voice_note_requires_audio_message_type():
    payload = TwilioWebhookPayload(
        **BASE_FIELDS,
        MessageType="image",
        NumMedia="1",
        MediaUrl0="https://api.twilio.com/media/ME4",
        MediaContentType0="audio/ogg",
    )
    assert payload.get_message_type() == "image"
    assert payload.get_voice_note() is None
