"""
Pipeline Records (v1.0.0)
Typed records passed between the vision, rule, context and image stages.

Wire format uses camelCase keys; Python attributes stay snake_case.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from stylist_service.core.errors import MalformedOutput

logger = logging.getLogger(__name__)


FIT_VALUES = ("fitted", "oversized", "relaxed", "bodycon", "loose")
HARMONY_TYPES = ("cool_minimal", "warm_earthy", "vibrant_modern", "soft_romantic")
SEASONS = ("spring", "summer", "fall", "winter")

DEFAULT_VERSATILITY = 5


def _clean_str(value: Any) -> Optional[str]:
    """Strip strings, map empty / non-string values to None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text or text.lower() in ("unknown", "none", "null", "n/a"):
        return None
    return text


def _as_str_tuple(value: Any) -> Tuple[str, ...]:
    """Accept a list or a comma separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(s for s in (_clean_str(v) for v in value) if s)


def _normalize_fit(value: Any) -> Optional[str]:
    fit = _clean_str(value)
    if fit is None:
        return None
    fit = fit.lower()
    return fit if fit in FIT_VALUES else None


def _normalize_versatility(value: Any) -> int:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return DEFAULT_VERSATILITY
    return max(1, min(score, 10))


# ==================== GARMENT ====================

@dataclass(frozen=True)
class GarmentAttributes:
    """Structured attributes of one photographed garment."""
    garment_type: str
    material: Optional[str] = None
    primary_color: Optional[str] = None  # hex string or color name
    secondary_colors: Tuple[str, ...] = ()
    aesthetic_style: Optional[str] = None
    fit: Optional[str] = None
    occasion: Tuple[str, ...] = ()
    details: str = ""
    versatility_score: int = DEFAULT_VERSATILITY

    @classmethod
    def from_model_output(cls, data: Dict[str, Any]) -> "GarmentAttributes":
        """
        Build attributes from the vision model's decoded JSON.

        Raises:
            MalformedOutput: If the payload is not an object or names no garment
        """
        if not isinstance(data, dict):
            raise MalformedOutput(f"Expected JSON object, got {type(data).__name__}")

        garment_type = _clean_str(data.get("garment_type") or data.get("garmentType"))
        if not garment_type:
            raise MalformedOutput("Vision output has no garment_type")

        primary = (
            data.get("primary_color")
            or data.get("primaryColor")
            or data.get("primary_colour_hex")
        )

        return cls(
            garment_type=garment_type,
            material=_clean_str(data.get("material")),
            primary_color=_clean_str(primary),
            secondary_colors=_as_str_tuple(
                data.get("secondary_colors") or data.get("secondaryColors") or data.get("secondary_colours")
            ),
            aesthetic_style=_clean_str(data.get("aesthetic_style") or data.get("aestheticStyle")),
            fit=_normalize_fit(data.get("fit")),
            occasion=tuple(o.lower() for o in _as_str_tuple(data.get("occasion"))),
            details=_clean_str(data.get("details")) or "",
            versatility_score=_normalize_versatility(
                data.get("versatility_score", data.get("versatilityScore"))
            ),
        )

    def to_dict(self) -> dict:
        return {
            "garmentType": self.garment_type,
            "material": self.material,
            "primaryColor": self.primary_color,
            "secondaryColors": list(self.secondary_colors),
            "aestheticStyle": self.aesthetic_style,
            "fit": self.fit,
            "occasion": list(self.occasion),
            "details": self.details,
            "versatilityScore": self.versatility_score,
        }


@dataclass(frozen=True)
class ImageInput:
    """One uploaded image."""
    data: bytes
    mime_type: str = "image/jpeg"
    filename: Optional[str] = None


# ==================== STYLING ====================

@dataclass
class ColorAnalysis:
    primary: str
    complementary: List[str]
    harmony_type: str

    def to_dict(self) -> dict:
        return {
            "primary": self.primary,
            "complementary": list(self.complementary),
            "harmonyType": self.harmony_type,
        }


@dataclass
class OutfitComponents:
    top: Optional[str] = None
    bottom: Optional[str] = None
    outerwear: Optional[str] = None
    shoes: Optional[str] = None
    bag: Optional[str] = None
    accessories: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "top": self.top,
            "bottom": self.bottom,
            "outerwear": self.outerwear,
            "shoes": self.shoes,
            "bag": self.bag,
            "accessories": list(self.accessories),
        }


@dataclass
class StylingResult:
    """Rule engine output for one request."""
    base_garment: GarmentAttributes
    styling_logic: str
    recommendations: List[str]
    color_analysis: ColorAnalysis
    outfit_components: OutfitComponents
    confidence_score: int

    def to_dict(self) -> dict:
        return {
            "baseGarment": self.base_garment.to_dict(),
            "stylingLogic": self.styling_logic,
            "recommendations": list(self.recommendations),
            "colorAnalysis": self.color_analysis.to_dict(),
            "outfitComponents": self.outfit_components.to_dict(),
            "confidenceScore": self.confidence_score,
        }


# ==================== CONTEXT ====================

@dataclass
class WeatherContext:
    """Current weather for outfit adjustments."""
    temperature_c: float
    feels_like_c: float
    humidity_pct: int
    condition: str  # e.g. "Clear", "Rain"
    description: str  # e.g. "light rain"
    wind_speed: float  # m/s
    location: str
    country: str = ""
    is_mock: bool = False

    def to_dict(self) -> dict:
        return {
            "temperatureC": self.temperature_c,
            "feelsLikeC": self.feels_like_c,
            "humidityPct": self.humidity_pct,
            "condition": self.condition,
            "description": self.description,
            "windSpeed": self.wind_speed,
            "location": self.location,
            "country": self.country,
            "isMock": self.is_mock,
        }


@dataclass
class TrendSnapshot:
    season: str
    description: str
    trending_items: List[str]
    trending_colors: List[str]
    trending_styles: List[str]
    color_palette: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "season": self.season,
            "description": self.description,
            "trendingItems": list(self.trending_items),
            "trendingColors": list(self.trending_colors),
            "trendingStyles": list(self.trending_styles),
            "colorPalette": self.color_palette,
        }


@dataclass
class WeatherAdjustments:
    temperature_range: str
    condition: str
    adjustments: List[str]
    humidity: str
    wind_speed: str

    def to_dict(self) -> dict:
        return {
            "temperatureRange": self.temperature_range,
            "condition": self.condition,
            "adjustments": list(self.adjustments),
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
        }


@dataclass
class TrendAlignment:
    trending_alignment: List[str]
    recommendation_score: int
    notes: List[str]

    def to_dict(self) -> dict:
        return {
            "trendingAlignment": list(self.trending_alignment),
            "recommendationScore": self.recommendation_score,
            "notes": list(self.notes),
        }


@dataclass
class ContextualAdjustment:
    """Weather + trend context layered over a styling result."""
    weather: WeatherContext
    trends: TrendSnapshot
    weather_adjustments: WeatherAdjustments
    trend_alignment: TrendAlignment
    layer_hint: str
    final_tip: str
    contextual_notes: str

    def to_dict(self) -> dict:
        return {
            "weather": self.weather.to_dict(),
            "trends": self.trends.to_dict(),
            "weatherAdjustments": self.weather_adjustments.to_dict(),
            "trendAlignment": self.trend_alignment.to_dict(),
            "layerHint": self.layer_hint,
            "finalTip": self.final_tip,
            "contextualNotes": self.contextual_notes,
        }


# ==================== RESPONSE ====================

@dataclass(frozen=True)
class RecommendationResponse:
    """Final pipeline artifact. Every field is mandatory."""
    request_id: str
    explanation: str
    logic: str
    weather_adjustment: str
    recommendations: Tuple[str, ...]
    generated_image_url: str
    color_analysis: ColorAnalysis
    confidence_score: int
    garment_analyses: Tuple[GarmentAttributes, ...]
    used_fallback_garment: bool

    def to_dict(self) -> dict:
        return {
            "requestId": self.request_id,
            "explanation": self.explanation,
            "logic": self.logic,
            "weatherAdjustment": self.weather_adjustment,
            "recommendations": list(self.recommendations),
            "generatedImageUrl": self.generated_image_url,
            "colorAnalysis": self.color_analysis.to_dict(),
            "confidenceScore": self.confidence_score,
            "garmentAnalyses": [g.to_dict() for g in self.garment_analyses],
            "usedFallbackGarment": self.used_fallback_garment,
        }
