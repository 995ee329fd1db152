import httpx
from typing import Optional
from voice_relay.core.settings import TwilioWhatsAppSettings
import logging

logger = logging.getLogger(__name__)


class TwilioWhatsAppClient:
    def __init__(
        self,
        settings: Optional[TwilioWhatsAppSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if settings is None:
            settings = TwilioWhatsAppSettings()
        self.account_sid = settings.twilio_account_sid
        self.auth_token = settings.twilio_auth_token
        self.from_number = settings.twilio_whatsapp_number
        self.base_url = f"https://api.twilio.com/2010-04-01/Accounts/{self.account_sid}"
        self.auth = (self.account_sid, self.auth_token)
        self.transport = transport

    async def send_message(
        self,
        recipient_phone: str,
        body: str,
        from_number: Optional[str] = None,
    ) -> dict:
        """
        Send a text message to a WhatsApp number via Twilio.

        Args:
            recipient_phone: WhatsApp phone number in format "whatsapp:+1234567890"
            body: Text message body
            from_number: Sender number; defaults to the configured WhatsApp number

        Returns:
            dict: Response from Twilio API
        """
        # Ensure recipient_phone has whatsapp: prefix
        if not recipient_phone.startswith("whatsapp:"):
            recipient_phone = f"whatsapp:{recipient_phone}"

        sender = from_number or self.from_number
        if not sender:
            raise ValueError("No sender number given and TWILIO_WHATSAPP_NUMBER is not configured")

        url = f"{self.base_url}/Messages.json"
        payload = {
            "From": sender,
            "To": recipient_phone,
            "Body": body,
            "ShortenUrls": "true",
        }

        logger.info(f"Sending reply of {len(body)} characters to {recipient_phone}")
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.post(url, data=payload, auth=self.auth)
            response.raise_for_status()
            return response.json()
