import logging

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from voice_relay.core.processor import process_message
from voice_relay.models import TwilioWebhookPayload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/whatsapp")
async def whatsapp_webhook(request: Request) -> Response:
    """
    Receive a Twilio WhatsApp webhook and reply to the sender.

    Twilio posts the message as form-encoded fields. Voice note failures are
    handled inside the processor; anything else that fails is logged and
    answered with a 500 that carries no detail.
    """
    form = await request.form()

    try:
        payload = TwilioWebhookPayload.model_validate(dict(form))
    except ValidationError as e:
        logger.error(f"Invalid webhook payload: {e}")
        return PlainTextResponse("Bad Request", status_code=400)

    try:
        result = await process_message(payload)
    except Exception as e:
        logger.error(f"Endpoint error for message {payload.MessageSid}: {e}", exc_info=True)
        return PlainTextResponse("Server Error", status_code=500)

    logger.info(f"Message {payload.MessageSid} processed: {result['status']}")
    return Response(status_code=200)
