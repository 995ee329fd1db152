"""Voice Relay - relays WhatsApp text and voice messages through Whisper and a chat model."""

__version__ = "0.1.0"
