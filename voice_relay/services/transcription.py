import asyncio
import logging
from io import BytesIO
from typing import Optional

import openai
from openai import AsyncOpenAI

from voice_relay.core.settings import OpenAISettings, VoiceSettings
from voice_relay.exceptions import EmptyTranscriptionError, TranscriptionNetworkError
from voice_relay.models import AudioPayload, TranscriptionResult

logger = logging.getLogger(__name__)

# Whisper infers the container from the file extension
AUDIO_EXTENSIONS = {
    "audio/ogg": "ogg",
    "audio/opus": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
    "audio/m4a": "m4a",
    "audio/x-m4a": "m4a",
    "audio/aac": "m4a",
    "audio/amr": "amr",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/wave": "wav",
    "audio/webm": "webm",
}
DEFAULT_AUDIO_EXTENSION = "ogg"


def audio_filename(content_type: str, stem: str = "voice_message") -> str:
    """Build a filename whose extension matches the audio content type.

    Parameters such as "; codecs=opus" are ignored and unknown types fall back
    to .ogg, the container WhatsApp uses for voice notes.
    """
    mime_type = content_type.split(";", 1)[0].strip().lower()
    extension = AUDIO_EXTENSIONS.get(mime_type, DEFAULT_AUDIO_EXTENSION)
    return f"{stem}.{extension}"


class TranscriptionClient:
    def __init__(
        self,
        settings: Optional[OpenAISettings] = None,
        voice_settings: Optional[VoiceSettings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        if voice_settings is None:
            voice_settings = VoiceSettings()
        self.model = voice_settings.whisper_model
        self.timeout_seconds = voice_settings.voice_transcription_timeout_ms / 1000
        self.temperature = 0.2

        # A client passed in belongs to the caller and is left open by close()
        self.owns_client = client is None
        if client is None:
            if settings is None:
                settings = OpenAISettings()
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        self.client = client

    async def close(self) -> None:
        """Release the HTTP connection pool of the client this instance created."""
        if self.owns_client:
            await self.client.close()

    async def transcribe(self, audio: AudioPayload) -> TranscriptionResult:
        """
        Transcribe an audio payload with a single API call.

        Args:
            audio: Downloaded audio bytes and content type

        Returns:
            TranscriptionResult: The successful transcription, text unchanged

        Raises:
            TranscriptionNetworkError: If the API call fails or exceeds the transcription timeout
            EmptyTranscriptionError: If the API returns empty or whitespace-only text
        """
        filename = audio_filename(audio.content_type)

        # Create a file-like object from bytes
        audio_file = BytesIO(audio.data)
        audio_file.name = filename

        try:
            transcription = await asyncio.wait_for(
                self.client.audio.transcriptions.create(
                    model=self.model,
                    file=audio_file,
                    response_format="text",
                    temperature=self.temperature,
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Transcription of {filename} timed out after {self.timeout_seconds}s")
            raise TranscriptionNetworkError(filename, e) from e
        except openai.APIError as e:
            logger.warning(f"Transcription API call failed for {filename}: {e}")
            raise TranscriptionNetworkError(filename, e) from e
        finally:
            audio_file.close()

        # response_format="text" returns a plain string
        text = transcription if isinstance(transcription, str) else transcription.text

        if not text or not text.strip():
            raise EmptyTranscriptionError(filename)

        return TranscriptionResult.succeeded(text)
