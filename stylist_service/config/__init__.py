# Config module
from stylist_service.config.settings import get_settings, reload_settings, Settings
from stylist_service.config.providers import (
    get_provider_status,
    get_provider_availability,
    validate_provider_config,
)
