"""
Context Provider (v1.0.0)
Layers weather and trend context over a styling result.
"""
import json
import logging
from typing import List, Optional

from stylist_service.core.models import (
    ContextualAdjustment,
    StylingResult,
    TrendAlignment,
    TrendSnapshot,
    WeatherAdjustments,
    WeatherContext,
)
from stylist_service.services.weather import OpenWeatherClient, derive_layer_hint, get_weather
from stylist_service.services.trends import get_trends

logger = logging.getLogger(__name__)


# ==================== ADJUSTMENT TABLES ====================

# (upper bound exclusive, phrases); the last band has no upper bound
TEMPERATURE_BANDS = [
    (0, [
        "Heavy coat or puffer jacket required",
        "Thermal layers underneath",
        "Warm hat, gloves, and scarf recommended",
        "Close-toe boots or insulated footwear",
    ]),
    (10, [
        "Medium-weight jacket or cardigan",
        "Long sleeves or lightweight layers",
        "Optional: hat and light scarf",
        "Closed-toe shoes",
    ]),
    (20, [
        "Light jacket or blazer",
        "Comfortable layers",
        "Breathable fabrics",
        "Versatile footwear",
    ]),
    (25, [
        "Short sleeves or sleeveless possible",
        "Light, breathable fabrics",
        "Minimal layers",
        "Open-toe options viable",
    ]),
    (None, [
        "Lightweight clothing essential",
        "Breathable, moisture-wicking fabrics",
        "Sun protection (hat, sunglasses)",
        "Cooling pastels and light colors",
    ]),
]

CONDITION_ADJUSTMENTS = {
    "rain": [
        "Waterproof jacket or raincoat",
        "Water-resistant shoes or boots",
        "Consider dark colors to hide water spots",
        "Optional: umbrella accessory",
    ],
    "snow": [
        "Insulated, waterproof outerwear",
        "Snow boots with grip",
        "Complete winter accessories",
    ],
    "wind": [
        "Fitted clothing to minimize wind drag",
        "Layered approach for temperature control",
        "Secure accessories",
    ],
    "clear": [
        "Sun protection essential",
        "Light colors to reflect heat",
        "Breathable, loose-fitting options",
    ],
}

TREND_ITEM_MATCH_SCORE = 30
TREND_ITEM_MISS_SCORE = 15
TREND_COLOR_SCORE = 20
TREND_STYLE_SCORE = 25

NOTE_PHRASES_PER_SOURCE = 2


def temperature_adjustments(temp: float) -> List[str]:
    for upper, phrases in TEMPERATURE_BANDS:
        if upper is None or temp < upper:
            return list(phrases)
    return []


def condition_adjustments(condition: str) -> List[str]:
    condition = (condition or "").lower()
    if "rain" in condition:
        return list(CONDITION_ADJUSTMENTS["rain"])
    if "snow" in condition:
        return list(CONDITION_ADJUSTMENTS["snow"])
    if "wind" in condition:
        return list(CONDITION_ADJUSTMENTS["wind"])
    if "clear" in condition or "sunny" in condition:
        return list(CONDITION_ADJUSTMENTS["clear"])
    return []


def generate_weather_adjustments(weather: WeatherContext) -> WeatherAdjustments:
    """Temperature band phrases followed by condition phrases."""
    adjustments = temperature_adjustments(weather.temperature_c)
    adjustments.extend(condition_adjustments(weather.condition))

    return WeatherAdjustments(
        temperature_range=f"{round(weather.temperature_c)}°C (feels like {round(weather.feels_like_c)}°C)",
        condition=weather.description,
        adjustments=adjustments,
        humidity=f"{weather.humidity_pct}%",
        wind_speed=f"{weather.wind_speed} m/s",
    )


def align_with_trends(styling_result: StylingResult, trends: TrendSnapshot) -> TrendAlignment:
    """Score 0-75 for how well the outfit matches current trends."""
    outfit_text = json.dumps(styling_result.to_dict()).lower()
    alignment: List[str] = []
    notes: List[str] = []
    score = 0

    if any(item.lower() in outfit_text for item in trends.trending_items):
        alignment.append("Your outfit aligns with current fashion trends")
        score += TREND_ITEM_MATCH_SCORE
    else:
        alignment.append("Your outfit features classic styles rather than trending pieces")
        score += TREND_ITEM_MISS_SCORE

    if trends.trending_colors:
        alignment.append(f"Trending colors: {', '.join(trends.trending_colors)}")
        score += TREND_COLOR_SCORE

    if trends.trending_styles:
        notes.append(f"Consider incorporating {trends.trending_styles[0]} for on-trend appeal")
        score += TREND_STYLE_SCORE

    return TrendAlignment(trending_alignment=alignment, recommendation_score=score, notes=notes)


def compose_contextual_notes(
    weather: WeatherContext,
    trends: TrendSnapshot,
    alignment: TrendAlignment,
    layer_hint: str
) -> str:
    """
    Single paragraph surfaced as the response's weather adjustment.

    Carries the leading temperature and condition phrases, the layer
    hint and the first trend suggestion.
    """
    guidance = (
        temperature_adjustments(weather.temperature_c)[:NOTE_PHRASES_PER_SOURCE]
        + condition_adjustments(weather.condition)[:NOTE_PHRASES_PER_SOURCE]
    )

    notes = f"In {weather.location}, {weather.description}. {trends.description}"
    if guidance:
        notes += f" Suggested adjustments: {'; '.join(guidance)}."
    notes += f" Dress in {layer_hint} layers."
    if alignment.notes:
        notes += f" {alignment.notes[0]}."
    return notes


async def adjust_outfit_for_weather(
    styling_result: StylingResult,
    city: str,
    country: Optional[str] = None,
    weather_client: Optional[OpenWeatherClient] = None,
    season: Optional[str] = None,
    timeout: Optional[float] = None
) -> ContextualAdjustment:
    """
    Compose weather + trends for a styling result. Never raises.

    The orchestrator surfaces only contextual_notes; the full adjustment
    lists, trend score and final tip stay on the returned record for
    callers that want the detail.

    Args:
        styling_result: Rule engine output
        city: Location used for both weather and trend lookup
        country: Optional country code for the weather query
        weather_client: Injected weather client
        season: Trend season override
        timeout: Weather call ceiling in seconds
    """
    weather = await get_weather(city, country=country, client=weather_client, timeout=timeout)
    trends = get_trends(city, season)

    adjustments = generate_weather_adjustments(weather)
    alignment = align_with_trends(styling_result, trends)
    layer_hint = derive_layer_hint(weather.temperature_c, weather.condition, weather.wind_speed)

    notes = compose_contextual_notes(weather, trends, alignment, layer_hint)

    contextual = ContextualAdjustment(
        weather=weather,
        trends=trends,
        weather_adjustments=adjustments,
        trend_alignment=alignment,
        layer_hint=layer_hint,
        final_tip=(
            f"Perfect outfit for {adjustments.condition} weather. "
            f"Remember the adjustments for optimal comfort and style!"
        ),
        contextual_notes=notes,
    )

    logger.info(
        f"Context for {city}: {weather.temperature_c}°C {weather.condition} "
        f"(mock={weather.is_mock}), layers={layer_hint}, trend score={alignment.recommendation_score}"
    )
    return contextual
