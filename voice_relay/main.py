"""FastAPI application for the WhatsApp voice relay."""

import logging

from fastapi import FastAPI
from mangum import Mangum

from voice_relay.api.routes.health import router as health_router
from voice_relay.api.routes.webhook import router as webhook_router
from voice_relay.core.settings import ServerSettings

settings = ServerSettings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Voice Relay",
    description="Relays WhatsApp text and voice messages to a language model and replies via Twilio",
    version="0.1.0",
)

app.include_router(health_router)
app.include_router(webhook_router)

# Mangum wraps the FastAPI app to make it compatible with AWS Lambda
handler = Mangum(app, lifespan="off")


def main() -> None:
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
