"""
Garment Vision Classifier (v2.0.0)
Maps a clothing photo to structured GarmentAttributes via a multimodal model.

The model is asked for strict JSON; the first balanced {...} block of its
reply is decoded. Batches settle every image independently.
"""
import json
import base64
import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from stylist_service.config import get_settings
from stylist_service.core.color_rules import COLOR_VOCABULARY, to_color_name
from stylist_service.core.errors import (
    MalformedOutput,
    StylistError,
    UpstreamFailure,
    REASON_TIMEOUT,
    upstream_failure_from,
)
from stylist_service.core.models import FIT_VALUES, GarmentAttributes, ImageInput

logger = logging.getLogger(__name__)


CLASSIFICATION_PROMPT = f"""Analyze this clothing image and respond with a single JSON object:
{{
  "garment_type": "specific type of garment (e.g., maxi skirt, oversized blazer, crop top)",
  "material": "primary material (e.g., cotton, denim, silk, polyester, wool, linen)",
  "primary_color": "one color name from the vocabulary below",
  "secondary_colors": ["other prominent colors, names from the vocabulary below"],
  "aesthetic_style": "fashion style (e.g., Y2K, Business Casual, Streetwear, Minimalist, Bohemian, Preppy)",
  "fit": "one of: {', '.join(FIT_VALUES)}",
  "occasion": ["suitable occasions from: formal, business, casual, party"],
  "details": "notable design details (pockets, buttons, zippers, patterns, embroidery)",
  "versatility_score": "integer 1-10 rating for outfit versatility"
}}

Color vocabulary: {', '.join(COLOR_VOCABULARY)}.
Use a name from the vocabulary, not a hex code.

Return ONLY valid JSON, no additional text."""


def extract_json_block(text: str) -> Optional[str]:
    """
    Return the first balanced {...} block in text, or None.

    Braces inside JSON string literals are ignored.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        # Unbalanced from this brace, try the next one
        start = text.find("{", start + 1)
    return None


def parse_garment_response(text: str) -> GarmentAttributes:
    """
    Decode the model's reply into GarmentAttributes.

    Raises:
        MalformedOutput: No JSON block, invalid JSON, or missing garment type
    """
    block = extract_json_block(text)
    if block is None:
        raise MalformedOutput("Failed to extract JSON from vision response", raw=text)

    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise MalformedOutput(f"Invalid JSON in vision response: {e}", raw=text)

    return GarmentAttributes.from_model_output(data)


@dataclass
class ClassificationResult:
    """Outcome of classifying one image in a batch."""
    index: int
    garment: Optional[GarmentAttributes] = None
    error: Optional[StylistError] = None

    @property
    def success(self) -> bool:
        return self.garment is not None

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "success": self.success,
            "garment": self.garment.to_dict() if self.garment else None,
            "error": self.error.message if self.error else None,
        }


class VisionClassifier:
    """
    Classify garment photos through an injected vision client.

    The client needs: async invoke(image_base64, mime_type, prompt) -> str
    """

    def __init__(self, client, timeout: Optional[float] = None, prompt: str = CLASSIFICATION_PROMPT):
        self.client = client
        self.timeout = timeout or get_settings().request_timeout_seconds
        self.prompt = prompt

    async def classify(self, image_bytes: bytes, mime_type: str = "image/jpeg") -> GarmentAttributes:
        """
        Classify one image.

        Raises:
            UpstreamFailure: Network/auth/rate-limit/timeout
            MalformedOutput: Reply did not parse into GarmentAttributes
        """
        image_base64 = base64.b64encode(image_bytes).decode("ascii")

        try:
            text = await asyncio.wait_for(
                self.client.invoke(image_base64, mime_type, self.prompt),
                timeout=self.timeout
            )
        except (UpstreamFailure, MalformedOutput):
            raise
        except asyncio.TimeoutError:
            raise UpstreamFailure(
                f"Vision call exceeded {self.timeout}s",
                reason=REASON_TIMEOUT,
                provider="vision"
            )
        except Exception as e:
            raise upstream_failure_from(e, "vision")

        garment = parse_garment_response(text)
        logger.info(f"Classified garment: {garment.garment_type} ({garment.primary_color}, {garment.fit})")
        return garment

    async def _classify_settled(self, index: int, image: ImageInput) -> ClassificationResult:
        try:
            garment = await self.classify(image.data, image.mime_type)
            return ClassificationResult(index=index, garment=garment)
        except UpstreamFailure as e:
            logger.warning(f"Image {index + 1}: upstream failure ({e.reason}): {e.message}")
            return ClassificationResult(index=index, error=e)
        except MalformedOutput as e:
            logger.warning(f"Image {index + 1}: malformed vision output: {e.message}")
            return ClassificationResult(index=index, error=e)
        except Exception as e:
            logger.error(f"Image {index + 1}: classification failed: {e}")
            return ClassificationResult(index=index, error=StylistError(f"Image {index + 1}: {e}"))

    async def classify_batch(self, images: Sequence[ImageInput]) -> List[ClassificationResult]:
        """
        Classify all images concurrently.

        One image failing never affects the others; results keep input order.
        """
        if not images:
            return []
        return list(await asyncio.gather(
            *(self._classify_settled(i, image) for i, image in enumerate(images))
        ))


# ==================== WARDROBE HELPERS ====================

def extract_color_palette(garment: GarmentAttributes) -> List[str]:
    """Primary plus secondary colors, as canonical names."""
    colors = [garment.primary_color, *garment.secondary_colors]
    return [to_color_name(c) for c in colors if c]


def build_wardrobe_profile(results: Sequence[ClassificationResult]) -> Dict[str, Any]:
    """Aggregate a batch of classifications into a wardrobe profile."""
    garments = [r.garment for r in results if r.success]

    colors: List[str] = []
    for garment in garments:
        for color in extract_color_palette(garment):
            if color not in colors:
                colors.append(color)

    styles: List[str] = []
    for garment in garments:
        if garment.aesthetic_style and garment.aesthetic_style not in styles:
            styles.append(garment.aesthetic_style)

    average = (
        round(sum(g.versatility_score for g in garments) / len(garments), 1)
        if garments else None
    )

    return {
        "total_items": len(results),
        "analyzed_items": len(garments),
        "items": [g.to_dict() for g in garments],
        "dominant_colors": colors,
        "style_preferences": styles,
        "average_versatility": average,
        "failures": [r.error.message for r in results if r.error is not None],
    }
