import json
from pathlib import Path

import pytest
from dotenv import load_dotenv

from voice_relay.models import TwilioWebhookPayload

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def load_test_env():
    """Load test environment variables from .env.test"""
    load_dotenv(".env.test")


def load_payload_data(name: str) -> dict:
    with open(FIXTURES_DIR / name, "r") as f:
        return json.load(f)


@pytest.fixture
def text_payload_data():
    """Raw text message webhook fields"""
    return load_payload_data("webhook_payload_text.json")


@pytest.fixture
def audio_payload_data():
    """Raw voice message webhook fields"""
    return load_payload_data("webhook_payload_audio.json")


@pytest.fixture
def text_payload(text_payload_data):
    """Load text message webhook payload"""
    return TwilioWebhookPayload(**text_payload_data)


@pytest.fixture
def audio_payload(audio_payload_data):
    """Load audio message webhook payload"""
    return TwilioWebhookPayload(**audio_payload_data)
