"""
Settings Module (v1.0.0)
Centralized configuration from environment variables.
"""
import os
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment variables."""

    # API Keys
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openweather_api_key: Optional[str] = None

    # Vision model (garment classification)
    vision_model: str = "gemini-1.5-flash"
    vision_fallback_model: str = "gemini-1.5-pro"

    # Image generation
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_quality: str = "standard"

    # Pipeline
    request_timeout_seconds: float = 45.0
    default_location: str = "New York"
    default_occasion: str = "casual"

    # Ingress limits
    max_images: int = 10
    max_image_mb: int = 8

    # Session store
    session_max_entries: int = 500
    session_dir: Optional[str] = None  # disk store when set, in-memory otherwise
    session_ttl_minutes: int = 1440

    logging_enabled: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            # API Keys
            gemini_api_key=os.getenv("GEMINI_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            openweather_api_key=os.getenv("OPENWEATHER_API_KEY"),

            # Models
            vision_model=os.getenv("STYLIST_VISION_MODEL", "gemini-1.5-flash"),
            vision_fallback_model=os.getenv("STYLIST_VISION_FALLBACK_MODEL", "gemini-1.5-pro"),
            image_model=os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3"),
            image_size=os.getenv("OPENAI_IMAGE_SIZE", "1024x1024"),
            image_quality=os.getenv("OPENAI_IMAGE_QUALITY", "standard"),

            # Pipeline
            request_timeout_seconds=float(os.getenv("STYLIST_REQUEST_TIMEOUT", "45")),
            default_location=os.getenv("STYLIST_DEFAULT_LOCATION", "New York"),
            default_occasion=os.getenv("STYLIST_DEFAULT_OCCASION", "casual").lower(),

            # Ingress
            max_images=int(os.getenv("STYLIST_MAX_IMAGES", "10")),
            max_image_mb=int(os.getenv("STYLIST_MAX_IMAGE_MB", "8")),

            # Sessions
            session_max_entries=int(os.getenv("STYLIST_SESSION_MAX_ENTRIES", "500")),
            session_dir=os.getenv("STYLIST_SESSION_DIR") or None,
            session_ttl_minutes=int(os.getenv("STYLIST_SESSION_TTL_MINUTES", "1440")),

            logging_enabled=os.getenv("STYLIST_LOGGING_ENABLED", "true").lower() == "true",
        )

    def has_gemini(self) -> bool:
        """Check if Gemini API key is configured."""
        return bool(self.gemini_api_key)

    def has_openai(self) -> bool:
        """Check if OpenAI API key is configured."""
        return bool(self.openai_api_key)

    def has_openweather(self) -> bool:
        return bool(self.openweather_api_key)

    def to_dict(self) -> dict:
        """Export settings as dict (without sensitive keys)."""
        return {
            "vision_model": self.vision_model,
            "vision_fallback_model": self.vision_fallback_model,
            "image_model": self.image_model,
            "request_timeout_seconds": self.request_timeout_seconds,
            "default_location": self.default_location,
            "max_images": self.max_images,
            "session_store": "disk" if self.session_dir else "memory",
            "gemini_configured": self.has_gemini(),
            "openai_configured": self.has_openai(),
            "openweather_configured": self.has_openweather(),
        }


def get_settings() -> Settings:
    """Get application settings (cached singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
        logger.info(f"Settings loaded: {_settings.to_dict()}")
    return _settings


def reload_settings() -> Settings:
    """Force reload settings from environment."""
    global _settings
    _settings = Settings.from_env()
    logger.info(f"Settings reloaded: {_settings.to_dict()}")
    return _settings


# Singleton instance
_settings: Optional[Settings] = None
