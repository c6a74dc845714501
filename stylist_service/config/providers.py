"""
Providers Module (v1.0.0)
Availability of the external services behind each pipeline stage.
"""
import logging
from typing import Any, Dict, List

from stylist_service.config.settings import get_settings

logger = logging.getLogger(__name__)


# Stage -> provider backing it
STAGE_PROVIDERS = {
    "vision": "gemini",
    "image": "openai",
    "weather": "openweather",
}


def get_provider_availability() -> Dict[str, bool]:
    """Get availability status for each provider."""
    settings = get_settings()
    return {
        "gemini": settings.has_gemini(),
        "openai": settings.has_openai(),
        "openweather": settings.has_openweather(),
    }


def get_provider_status() -> Dict[str, Any]:
    """
    Get complete provider status for health endpoint.

    Returns:
        Dict with per-stage provider, availability and fallback mode
    """
    settings = get_settings()
    availability = get_provider_availability()

    stages = {}
    for stage, provider in STAGE_PROVIDERS.items():
        available = availability.get(provider, False)
        stages[stage] = {
            "provider": provider,
            "available": available,
            "mode": "live" if available else "fallback",
        }

    return {
        "stages": stages,
        "availability": availability,
        "vision_model": settings.vision_model,
        "image_model": settings.image_model,
    }


def validate_provider_config() -> List[str]:
    """
    Validate provider configuration and return warnings.

    Returns:
        List of warning messages
    """
    availability = get_provider_availability()
    warnings = []

    if not availability["gemini"]:
        warnings.append("GEMINI_API_KEY not set - garment classification will use fallback garments")

    if not availability["openai"]:
        warnings.append("OPENAI_API_KEY not set - outfit previews will use the placeholder image")

    if not availability["openweather"]:
        warnings.append("OPENWEATHER_API_KEY not set - weather will use seasonal mock data")

    return warnings
