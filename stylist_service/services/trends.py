"""
Trend Service (v1.0.0)
Static seasonal fashion trends keyed by city and season.

Named cities without a per-season breakdown return their single city-level
entry for every season. Unknown cities use the "global" seasonal table.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from stylist_service.core.models import SEASONS, TrendSnapshot
from stylist_service.services.weather import current_season

logger = logging.getLogger(__name__)


GLOBAL_KEY = "global"

TREND_TABLE: Dict[str, Dict[str, Any]] = {
    "global": {
        "spring": {
            "description": "Spring trends emphasize pastels, floral patterns, and lightweight layers.",
            "trending_items": ["linen pants", "oversized blazer", "ballet flats", "light cardigan", "maxi skirt"],
            "trending_colors": ["#FFB6C1", "#98FB98", "#87CEEB"],
            "trending_styles": ["minimalist", "romantic", "preppy"],
            "color_palette": "pastels",
        },
        "summer": {
            "description": "Summer is all about breathable fabrics, bright colors, and minimalist silhouettes.",
            "trending_items": ["crop top", "linen shorts", "sundress", "sandals", "straw hat"],
            "trending_colors": ["#FFD700", "#FF69B4", "#FFA500"],
            "trending_styles": ["casual", "beach", "minimalist"],
            "color_palette": "vibrant",
        },
        "fall": {
            "description": "Fall fashion embraces earth tones, layering, and structured pieces.",
            "trending_items": ["oversized coat", "black trousers", "ankle boots", "turtleneck", "leather jacket"],
            "trending_colors": ["#8B4513", "#A0522D", "#CD853F"],
            "trending_styles": ["business casual", "streetwear", "minimalist"],
            "color_palette": "earth_tones",
        },
        "winter": {
            "description": "Winter calls for cozy textures, neutral tones, and statement outerwear.",
            "trending_items": ["puffer coat", "wool sweater", "wide-leg pants", "boots", "beanie"],
            "trending_colors": ["#000000", "#FFFFFF", "#808080"],
            "trending_styles": ["minimalist", "streetwear", "business casual"],
            "color_palette": "neutrals",
        },
    },
    "Tokyo": {
        "description": "Tokyo fashion leads with minimalist silhouettes, layering, and statement accessories.",
        "trending_items": ["oversized shirt", "slim trousers", "platform shoes", "minimal jewelry"],
        "trending_styles": ["minimalist", "streetwear", "avant-garde"],
        "trending_colors": ["#000000", "#FFFFFF", "#808080"],
    },
    "New York": {
        "description": "NYC style is bold, sophisticated, and trend-forward with power dressing.",
        "trending_items": ["tailored blazer", "black pants", "structured bag", "heels"],
        "trending_styles": ["business", "streetwear", "chic"],
        "trending_colors": ["#000000", "#FFFFFF", "#FF0000"],
    },
    "Paris": {
        "description": "Parisian style emphasizes effortless elegance and timeless pieces.",
        "trending_items": ["striped shirt", "beret", "ballet flats", "trench coat"],
        "trending_styles": ["minimalist", "romantic", "preppy"],
        "trending_colors": ["#000000", "#FFFFFF", "#FFD700"],
    },
}


def _is_seasonal(entry: Dict[str, Any]) -> bool:
    return any(season in entry for season in SEASONS)


def _to_snapshot(entry: Dict[str, Any], season: str) -> TrendSnapshot:
    return TrendSnapshot(
        season=season,
        description=entry.get("description", ""),
        trending_items=list(entry.get("trending_items", [])),
        trending_colors=list(entry.get("trending_colors", [])),
        trending_styles=list(entry.get("trending_styles", [])),
        color_palette=entry.get("color_palette"),
    )


def get_trends(
    city: Optional[str] = GLOBAL_KEY,
    season: Optional[str] = None,
    now: Optional[datetime] = None
) -> TrendSnapshot:
    """
    Get fashion trends for a city.

    Args:
        city: Exact city name ("Tokyo", "New York", "Paris") or anything else
        season: spring/summer/fall/winter, defaults to the current season
        now: Clock override used to derive the default season
    """
    season = (season or current_season(now)).lower()
    if season not in SEASONS:
        logger.warning(f"Unknown season '{season}', using current season")
        season = current_season(now)

    global_entry = TREND_TABLE[GLOBAL_KEY][season]
    entry = TREND_TABLE.get(city or GLOBAL_KEY)

    if entry is None:
        return _to_snapshot(global_entry, season)

    if _is_seasonal(entry):
        return _to_snapshot(entry.get(season, global_entry), season)

    # City-level entries carry no season dimension
    return _to_snapshot(entry, season)
