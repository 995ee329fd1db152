"""Settings for the voice relay service, loaded from environment variables or a .env file."""

from pydantic import ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional


class OpenAISettings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")
    openai_api_key: str


class TwilioWhatsAppSettings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    twilio_account_sid: str
    twilio_auth_token: str
    twilio_whatsapp_number: Optional[str] = None  # Format: "whatsapp:+14155238886"


class VoiceSettings(BaseSettings):
    """Limits for the voice note pipeline.

    The fetch and transcription timeouts are independent budgets, and both are
    separate from the completion timeout in CompletionSettings.
    """

    model_config = ConfigDict(env_file=".env", extra="ignore")

    voice_fetch_timeout_ms: int = 4500
    voice_transcription_timeout_ms: int = 10000
    voice_max_audio_bytes: int = 16 * 1024 * 1024  # WhatsApp media ceiling
    whisper_model: str = "whisper-1"


class CompletionSettings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    gpt_model: str = "gpt-4o-2024-05-13"
    max_tokens: int = 120
    completion_temperature: float = 0.7
    completion_timeout_ms: int = 10000
    reply_max_chars: int = 160


class ServerSettings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    port: int = 3000
    log_level: str = "INFO"
