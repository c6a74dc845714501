"""
Shared fixtures and fake external clients.
"""
import io
import json
import asyncio
import random
import sys
from pathlib import Path

import pytest
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent))

from stylist_service.config import Settings
from stylist_service.core.models import GarmentAttributes, ImageInput
from stylist_service.observability import reset_metrics


BLAZER_JSON = {
    "garment_type": "oversized blazer",
    "material": "wool",
    "primary_color": "#000000",
    "secondary_colors": ["white"],
    "aesthetic_style": "Business Casual",
    "fit": "oversized",
    "occasion": ["business"],
    "details": "notched lapel {two buttons}",
    "versatility_score": 8,
}

WEATHER_PAYLOAD = {
    "name": "London",
    "sys": {"country": "GB"},
    "main": {"temp": 8.0, "feels_like": 5.5, "humidity": 81},
    "weather": [{"main": "Rain", "description": "light rain"}],
    "wind": {"speed": 4.1},
}


class FakeVisionClient:
    """Returns queued replies (str) or raises queued exceptions, in call order."""

    def __init__(self, *replies, delay: float = 0.0):
        self.replies = list(replies)
        self.delay = delay
        self.calls = []

    async def invoke(self, image_base64, mime_type, instruction_prompt):
        self.calls.append((image_base64, mime_type))
        if self.delay:
            await asyncio.sleep(self.delay)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


class FakeImageClient:
    def __init__(self, url="https://img.example/outfit.png", error=None, delay: float = 0.0):
        self.url = url
        self.error = error
        self.delay = delay
        self.prompts = []

    async def generate(self, prompt, size, quality):
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.url


class FakeWeatherClient:
    def __init__(self, payload=None, error=None, delay: float = 0.0):
        self.payload = payload
        self.error = error
        self.delay = delay
        self.queries = []

    async def fetch(self, location_query):
        self.queries.append(location_query)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.payload


class HttpError(Exception):
    """SDK-style exception carrying an HTTP status."""
    def __init__(self, status_code: int, message: str = "http error"):
        self.status_code = status_code
        super().__init__(message)


@pytest.fixture(autouse=True)
def clean_metrics():
    reset_metrics()
    yield
    reset_metrics()


@pytest.fixture
def settings():
    return Settings(request_timeout_seconds=1.0, logging_enabled=False, session_max_entries=10)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def blazer_json_text():
    return f"Here is the analysis:\n```json\n{json.dumps(BLAZER_JSON)}\n```"


@pytest.fixture
def blazer():
    return GarmentAttributes.from_model_output(BLAZER_JSON)


@pytest.fixture
def jpeg_bytes():
    """Create a small valid JPEG image."""
    img = Image.new("RGB", (64, 64), color="blue")
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def image_input(jpeg_bytes):
    return ImageInput(data=jpeg_bytes, mime_type="image/jpeg", filename="blazer.jpg")
