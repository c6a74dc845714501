"""
Outfit Image Synthesizer (v2.0.0)
Text-to-image preview of a styled outfit.

Builds an editorial prompt from the styling result and calls the image
client. Any failure falls back to a placeholder URL so the response always
carries an image.
"""
import asyncio
import logging
from dataclasses import replace
from typing import Dict, List, Optional

from stylist_service.config import get_settings
from stylist_service.core.color_rules import describe_color_for_prompt
from stylist_service.core.errors import InvalidInput, UpstreamFailure, REASON_NOT_CONFIGURED, REASON_TIMEOUT
from stylist_service.core.models import StylingResult

logger = logging.getLogger(__name__)


PLACEHOLDER_IMAGE_URL = (
    "https://images.unsplash.com/photo-1567567739554-9a3a1a5d3b11"
    "?w=1024&h=1024&fit=crop&q=80"
)


# ==================== PROMPT DISCIPLINE ====================

PROMPT_STYLE_SUFFIX = [
    "high-quality studio photography with professional lighting",
    "clean neutral background",
    "magazine-quality fashion editorial",
    "modern styling",
    "4K high quality",
]

NEGATIVE_PROMPT = (
    "blurry, distorted, low quality, poorly proportioned, wrinkled, messy, "
    "unrealistic proportions, ugly"
)

MIN_PROMPT_LENGTH = 20
MAX_PROMPT_LENGTH = 4000  # DALL-E 3 limit

LOGIC_SNIPPET_CHARS = 100
RECOMMENDATION_SNIPPET_CHARS = 50

VARIATION_STYLES = [
    ("casual", "relaxed, comfortable vibe"),
    ("formal", "polished, professional look"),
    ("trendy", "on-trend, fashion-forward"),
]

GENERATION_TIME_SECONDS = {"low": 10, "medium": 20, "high": 30}
DEFAULT_GENERATION_TIME = 20


def build_prompt(styling: StylingResult, context: Optional[Dict[str, Optional[str]]] = None) -> str:
    """Editorial photo prompt for one styling result."""
    context = context or {}
    garment = styling.base_garment
    occasion = context.get("occasion") or "casual"

    parts = [
        "A professional fashion editorial photograph",
        f"of a stylish person wearing a complete {occasion} outfit built around a {garment.garment_type or 'outfit'}",
        f"featuring coordinated garments in {describe_color_for_prompt(garment.primary_color)} color palette",
        f"{garment.aesthetic_style or 'modern'} style and aesthetic",
        *PROMPT_STYLE_SUFFIX,
    ]

    setting = context.get("setting")
    if setting:
        parts.append(f"styled for {setting}")

    if styling.styling_logic:
        parts.append(styling.styling_logic[:LOGIC_SNIPPET_CHARS])

    if styling.recommendations and styling.recommendations[0]:
        parts.append(styling.recommendations[0][:RECOMMENDATION_SNIPPET_CHARS])

    return ", ".join(parts)


def validate_prompt(prompt: str) -> None:
    """
    Raises:
        InvalidInput: Prompt shorter than 20 or longer than 4000 characters
    """
    if not prompt or len(prompt) < MIN_PROMPT_LENGTH:
        raise InvalidInput("Prompt too short or invalid")
    if len(prompt) > MAX_PROMPT_LENGTH:
        raise InvalidInput(f"Prompt too long (max {MAX_PROMPT_LENGTH} characters)")


def estimate_generation_time(complexity: str = "medium") -> int:
    """Rough seconds per image for a complexity level."""
    return GENERATION_TIME_SECONDS.get(complexity, DEFAULT_GENERATION_TIME)


class ImageSynthesizer:
    """
    Render outfit previews through an injected image client.

    The client needs: async generate(prompt, size, quality) -> url
    """

    def __init__(self, client=None, settings=None):
        self.client = client
        self.settings = settings or get_settings()

    async def _generate(self, prompt: str) -> str:
        if self.client is None:
            raise UpstreamFailure("No image client configured", reason=REASON_NOT_CONFIGURED, provider="image")

        timeout = self.settings.request_timeout_seconds
        try:
            return await asyncio.wait_for(
                self.client.generate(prompt, self.settings.image_size, self.settings.image_quality),
                timeout=timeout
            )
        except asyncio.TimeoutError:
            raise UpstreamFailure(f"Image call exceeded {timeout}s", reason=REASON_TIMEOUT, provider="image")

    async def synthesize(
        self,
        styling: StylingResult,
        context: Optional[Dict[str, Optional[str]]] = None,
        strict: bool = False
    ) -> str:
        """
        Generate an outfit image URL.

        Returns PLACEHOLDER_IMAGE_URL on any failure. With strict=True the
        prompt is validated first and InvalidInput propagates.
        """
        prompt = build_prompt(styling, context)

        if strict:
            validate_prompt(prompt)

        try:
            url = await self._generate(prompt)
            logger.info(f"✓ Outfit image generated: {url[:50]}...")
            return url
        except UpstreamFailure as e:
            logger.warning(f"Image generation unavailable ({e.reason}): {e.message}. Using placeholder.")
        except Exception as e:
            logger.error(f"Image generation failed: {e}. Using placeholder.")

        return PLACEHOLDER_IMAGE_URL

    async def generate_variations(self, styling: StylingResult, count: int = 3) -> List[Dict[str, str]]:
        """
        Casual / formal / trendy renditions of the same outfit.

        Each variation falls back to the placeholder on its own.
        """
        variations = []
        for style, modifier in VARIATION_STYLES[:max(0, count)]:
            variant = replace(styling, styling_logic=f"{style} version: {modifier}")
            url = await self.synthesize(variant, {"occasion": style})
            variations.append({"style": style, "imageUrl": url})
        return variations
