"""
Core message processing logic for incoming WhatsApp messages.

This module contains the business logic for relaying a WhatsApp message:
1. Takes the text body, or transcribes the attached voice note
2. Asks the language model for a reply
3. Flattens and truncates the reply for WhatsApp
4. Sends the reply back to the sender via Twilio
"""

import logging
from typing import Any, Dict

from voice_relay.core.fallback import resolve_text
from voice_relay.core.settings import CompletionSettings
from voice_relay.core.voice_pipeline import VoicePipeline
from voice_relay.models import TwilioWebhookPayload
from voice_relay.services.llm import LLMClient
from voice_relay.services.twilio_whatsapp_client import TwilioWhatsAppClient

logger = logging.getLogger(__name__)

EMPTY_MESSAGE_PLACEHOLDER = "[Empty message received]"


def format_reply(text: str, max_chars: int = 160) -> str:
    """Put the reply on a single line and cut it to max_chars."""
    return text.replace("\n", " ")[:max_chars]


async def process_message(payload: TwilioWebhookPayload) -> Dict[str, Any]:
    """
    Process a single WhatsApp message.

    Args:
        payload: Parsed Twilio webhook payload

    Returns:
        dict: Processing result with status and details

    Raises:
        Exception: If the completion or the reply fails. Voice note failures
            never raise; they are replaced by placeholder text.
    """
    # Initialize Twilio WhatsApp client first (needed for sending responses)
    whatsapp_client = TwilioWhatsAppClient()
    llm_client = LLMClient()
    completion_settings = CompletionSettings()

    message_phonenumber = payload.get_phone_number()
    message_id = payload.MessageSid
    message_type = payload.get_message_type()
    logger.info(f"Received message {message_id} of type {message_type} from {message_phonenumber}")

    text_to_process = payload.Body or ""
    transcription = None

    try:
        voice_note = payload.get_voice_note()
        if voice_note:
            logger.info(f"Processing voice message: {message_id}")
            voice_pipeline = VoicePipeline()
            try:
                transcription = await voice_pipeline.run(voice_note)
            finally:
                await voice_pipeline.close()
            text_to_process = resolve_text(transcription)

        # The voice placeholder is forwarded too, so the sender always gets a reply
        logger.info(f"Requesting completion for {message_id}")
        reply = await llm_client.complete(text_to_process or EMPTY_MESSAGE_PLACEHOLDER)
    finally:
        await llm_client.close()

    reply_text = format_reply(reply, completion_settings.reply_max_chars)

    twilio_response = await whatsapp_client.send_message(
        recipient_phone=message_phonenumber,
        body=reply_text,
        from_number=payload.To,
    )
    logger.info(f"Sent reply, Twilio SID: {twilio_response.get('sid')}, Status: {twilio_response.get('status')}")

    logger.info(f"Processing complete for {message_id}")

    return {
        "status": "success",
        "message_id": message_id,
        "voice_message": voice_note is not None,
        "transcription": transcription.model_dump(mode="json") if transcription else None,
        "reply_length": len(reply_text),
        "twilio_sid": twilio_response.get("sid"),
    }
