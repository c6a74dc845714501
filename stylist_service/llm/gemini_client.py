"""
Gemini Client (v2.0.0)
Multimodal vision model used for garment classification.

invoke(image_base64, mime_type, instruction_prompt) -> raw text.
Primary model first, fallback model once on failure.
"""
import base64
import logging
from typing import Optional

from stylist_service.config import get_settings
from stylist_service.core.errors import (
    MalformedOutput,
    UpstreamFailure,
    REASON_INVALID_CREDENTIALS,
    REASON_NOT_CONFIGURED,
    upstream_failure_from,
)

logger = logging.getLogger(__name__)

PROVIDER = "gemini"


class GeminiVisionClient:
    """
    Vision client over google-generativeai.

    Usage:
        client = GeminiVisionClient()
        text = await client.invoke(image_b64, "image/jpeg", prompt)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.vision_model
        self.fallback_model = fallback_model or settings.vision_fallback_model
        self._configured = False

    def is_configured(self) -> bool:
        """Check if Gemini API key is configured."""
        return bool(self.api_key)

    def _get_model(self, model_name: str):
        import google.generativeai as genai

        if not self._configured:
            genai.configure(api_key=self.api_key)
            self._configured = True
        return genai.GenerativeModel(model_name)

    async def _generate(self, model_name: str, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        model = self._get_model(model_name)
        response = await model.generate_content_async(
            [prompt, {"mime_type": mime_type, "data": image_bytes}]
        )
        try:
            return response.text
        except ValueError as e:
            # Blocked or empty candidates
            raise MalformedOutput(f"Gemini returned no text: {e}")

    async def invoke(self, image_base64: str, mime_type: str, instruction_prompt: str) -> str:
        """
        Send one image plus instructions, return the model's free-form text.

        Raises:
            UpstreamFailure: Missing key, auth, rate limit or network errors
            MalformedOutput: Response carried no text
        """
        if not self.api_key:
            raise UpstreamFailure("GEMINI_API_KEY not set", reason=REASON_NOT_CONFIGURED, provider=PROVIDER)

        image_bytes = base64.b64decode(image_base64)

        try:
            return await self._generate(self.model, image_bytes, mime_type, instruction_prompt)
        except MalformedOutput:
            raise
        except Exception as e:
            failure = upstream_failure_from(e, PROVIDER)
            if failure.reason == REASON_INVALID_CREDENTIALS or self.fallback_model == self.model:
                raise failure
            logger.warning(f"Primary vision model {self.model} failed ({failure.reason}), trying {self.fallback_model}...")

        try:
            return await self._generate(self.fallback_model, image_bytes, mime_type, instruction_prompt)
        except MalformedOutput:
            raise
        except Exception as e:
            raise upstream_failure_from(e, PROVIDER)

    def get_status(self) -> dict:
        return {
            "provider": PROVIDER,
            "model": self.model,
            "fallback_model": self.fallback_model,
            "configured": self.is_configured(),
        }
