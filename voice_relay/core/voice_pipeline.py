"""
Voice note pipeline: fetch the audio, transcribe it, and fall back to placeholder text on failure.

The pipeline is the error boundary for voice processing. Every failure in the
fetch and transcription stages ends up as a failed TranscriptionResult, so
callers always get text to forward.
"""

import logging
from typing import Optional

from voice_relay.core.fallback import resolve_text
from voice_relay.exceptions import FailureReason, PayloadTooLargeError, VoiceProcessingError
from voice_relay.models import InboundVoiceNote, TranscriptionResult
from voice_relay.services.media_fetcher import MediaFetcher
from voice_relay.services.transcription import TranscriptionClient

logger = logging.getLogger(__name__)


class VoicePipeline:
    def __init__(
        self,
        fetcher: Optional[MediaFetcher] = None,
        transcriber: Optional[TranscriptionClient] = None,
    ):
        if fetcher is None:
            fetcher = MediaFetcher.from_settings()
        if transcriber is None:
            transcriber = TranscriptionClient()
        self.fetcher = fetcher
        self.transcriber = transcriber

    async def run(self, note: InboundVoiceNote) -> TranscriptionResult:
        """
        Fetch and transcribe a voice note.

        Args:
            note: The voice note attached to the incoming message

        Returns:
            TranscriptionResult: Successful text, or a failure with its reason
        """
        try:
            if note.declared_size is not None and note.declared_size > self.fetcher.max_bytes:
                raise PayloadTooLargeError(note.declared_size, self.fetcher.max_bytes)

            logger.info(f"Downloading voice note ({note.content_type})")
            audio = await self.fetcher.fetch(note.url, fallback_content_type=note.content_type)

            logger.info(f"Transcribing voice note: {len(audio.data)} bytes")
            result = await self.transcriber.transcribe(audio)

        except VoiceProcessingError as e:
            logger.warning(f"Voice processing failed ({e.reason.value}): {e}")
            return TranscriptionResult.failed(e.reason)

        except Exception as e:
            logger.error(f"Unexpected voice processing error: {e}", exc_info=True)
            return TranscriptionResult.failed(FailureReason.UNEXPECTED)

        logger.info(f"Transcription completed: {len(result.text)} characters")
        return result

    async def transcribe(self, note: InboundVoiceNote) -> str:
        """Run the pipeline and return the text to forward downstream."""
        return resolve_text(await self.run(note))

    async def close(self) -> None:
        await self.transcriber.close()
