"""Turns the outcome of the voice pipeline into the text forwarded to the language model."""

from voice_relay.models import TranscriptionResult

VOICE_FAILURE_PLACEHOLDER = "[Couldn't process voice message. Please try again or type your message.]"


def resolve_text(result: TranscriptionResult) -> str:
    """Return the transcription on success, otherwise the fixed placeholder.

    Never raises, and never exposes the failure reason to the end user.
    """
    if result.success and result.text:
        return result.text
    return VOICE_FAILURE_PLACEHOLDER
