"""
OpenAI Client (v2.0.0)
Image generation for outfit previews (DALL-E).

generate(prompt, size, quality) -> publicly fetchable image URL.
"""
import logging
from typing import Optional

from stylist_service.config import get_settings
from stylist_service.core.errors import (
    MalformedOutput,
    UpstreamFailure,
    REASON_NOT_CONFIGURED,
    upstream_failure_from,
)

logger = logging.getLogger(__name__)

PROVIDER = "openai"

# Values people leave in .env templates
PLACEHOLDER_KEYS = {"sk-mock-key", "your_openai_api_key_here"}


class OpenAIImageClient:
    """Image generation client over the OpenAI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.openai_api_key
        self.model = model or settings.image_model
        self.timeout = timeout or settings.request_timeout_seconds
        self._client = None

    def is_configured(self) -> bool:
        """Check if a real OpenAI API key is configured."""
        return bool(self.api_key) and self.api_key not in PLACEHOLDER_KEYS

    def _get_client(self):
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def generate(self, prompt: str, size: str = "1024x1024", quality: str = "standard") -> str:
        """
        Generate one image and return its URL.

        Raises:
            UpstreamFailure: Missing key, auth, rate limit or network errors
            MalformedOutput: Response had no image URL
        """
        if not self.is_configured():
            raise UpstreamFailure("OpenAI API key not configured", reason=REASON_NOT_CONFIGURED, provider=PROVIDER)

        logger.info(f"Calling OpenAI {self.model}: {prompt[:100]}...")

        try:
            response = await self._get_client().images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=size,
                quality=quality,
                style="natural"
            )
        except Exception as e:
            raise upstream_failure_from(e, PROVIDER)

        data = getattr(response, "data", None) or []
        url = getattr(data[0], "url", None) if data else None
        if not url:
            raise MalformedOutput("No image URL in OpenAI response")

        logger.info(f"✓ Image generated: {url[:50]}...")
        return url
