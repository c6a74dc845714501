"""
Weather Service (v2.2.0)
OpenWeatherMap integration for weather-adjusted outfit recommendations.

get_weather() never raises: any upstream problem yields a season-derived
mock so the pipeline always has a temperature and condition to work with.
"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

import httpx

from stylist_service.config import get_settings
from stylist_service.core.errors import (
    MalformedOutput,
    UpstreamFailure,
    REASON_NOT_CONFIGURED,
    REASON_TIMEOUT,
    upstream_failure_from,
)
from stylist_service.core.models import WeatherContext

logger = logging.getLogger(__name__)

# Configuration
OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"
DEFAULT_UNITS = "metric"  # Celsius
MOCK_LOCATION = "Current Location"

# Month ranges are 0-indexed (0 = January)
MOCK_WEATHER_BY_SEASON = {
    "spring": (15, "Partly Cloudy", "partly cloudy with mild temperatures"),
    "summer": (25, "Sunny", "sunny and warm"),
    "fall": (18, "Cloudy", "cloudy with moderate temperatures"),
    "winter": (5, "Rainy", "rainy and cold"),
}


def season_for_month(month0: int) -> str:
    """Map a 0-indexed month to its season (2-4 spring, 5-7 summer, 8-10 fall)."""
    if 2 <= month0 <= 4:
        return "spring"
    if 5 <= month0 <= 7:
        return "summer"
    if 8 <= month0 <= 10:
        return "fall"
    return "winter"


def current_season(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return season_for_month(now.month - 1)


def derive_layer_hint(temp: float, condition: str, wind_speed: float) -> str:
    """
    Derive clothing layer recommendation based on weather.

    Returns:
        "light", "medium", or "heavy"
    """
    # Wind chill effect
    effective_temp = temp - (wind_speed * 0.5) if wind_speed > 5 else temp

    condition = condition.lower()
    if any(c in condition for c in ("rain", "drizzle", "thunderstorm")):
        effective_temp -= 3  # Rain feels colder
    elif any(c in condition for c in ("snow", "sleet")):
        effective_temp -= 5

    if effective_temp >= 25:
        return "light"
    elif effective_temp >= 15:
        return "medium"
    else:
        return "heavy"


def get_mock_weather(location: Optional[str] = None, now: Optional[datetime] = None) -> WeatherContext:
    """Deterministic weather for the current calendar month."""
    temp, condition, description = MOCK_WEATHER_BY_SEASON[current_season(now)]
    return WeatherContext(
        temperature_c=temp,
        feels_like_c=temp - 2,
        humidity_pct=65,
        condition=condition,
        description=description,
        wind_speed=5,
        location=location or MOCK_LOCATION,
        country="--",
        is_mock=True,
    )


def parse_weather_payload(data: Dict[str, Any], fallback_location: str) -> WeatherContext:
    """
    Convert an OpenWeatherMap payload into a WeatherContext.

    Raises:
        MalformedOutput: If temperature or condition are missing
    """
    try:
        main = data["main"]
        weather = data["weather"][0]
        temp = float(main["temp"])
        condition = str(weather["main"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise MalformedOutput(f"Unexpected weather payload: {e}")

    wind = data.get("wind") or {}
    sys = data.get("sys") or {}

    return WeatherContext(
        temperature_c=temp,
        feels_like_c=float(main.get("feels_like", temp)),
        humidity_pct=int(main.get("humidity", 50)),
        condition=condition,
        description=str(weather.get("description") or condition.lower()),
        wind_speed=float(wind.get("speed", 0)),
        location=data.get("name") or fallback_location,
        country=sys.get("country", ""),
    )


class OpenWeatherClient:
    """Thin OpenWeatherMap client: fetch(location_query) -> raw JSON."""

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        self.api_key = api_key if api_key is not None else get_settings().openweather_api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def fetch(self, location_query: str) -> Dict[str, Any]:
        """
        Raises:
            UpstreamFailure: Missing key, HTTP error or timeout
        """
        if not self.api_key:
            raise UpstreamFailure(
                "OPENWEATHER_API_KEY not set",
                reason=REASON_NOT_CONFIGURED,
                provider="openweather"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(
                    OPENWEATHER_BASE_URL,
                    params={
                        "q": location_query,
                        "appid": self.api_key,
                        "units": DEFAULT_UNITS
                    }
                )
                response.raise_for_status()
                return response.json()
        except httpx.TimeoutException:
            raise UpstreamFailure(
                f"Weather API timeout for {location_query}",
                reason=REASON_TIMEOUT,
                provider="openweather"
            )
        except (httpx.HTTPError, ValueError) as e:
            raise upstream_failure_from(e, "openweather")


async def get_weather(
    city: str,
    country: Optional[str] = None,
    client: Optional[OpenWeatherClient] = None,
    timeout: Optional[float] = None
) -> WeatherContext:
    """
    Fetch current weather for a city.

    Args:
        city: City name (e.g., "Istanbul", "London", "New York")
        country: Optional country code appended to the query
        client: Weather client (defaults to OpenWeatherClient)
        timeout: Overall ceiling in seconds

    Returns:
        WeatherContext, live or mock. Never raises.
    """
    client = client or OpenWeatherClient()
    query = f"{city},{country}" if country else city
    timeout = timeout or get_settings().request_timeout_seconds

    try:
        data = await asyncio.wait_for(client.fetch(query), timeout=timeout)
        weather = parse_weather_payload(data, fallback_location=city)
        logger.info(f"Weather: {weather.location} - {weather.temperature_c}°C, {weather.condition}")
        return weather
    except UpstreamFailure as e:
        if e.reason == REASON_NOT_CONFIGURED:
            logger.info(f"Weather not configured, using seasonal mock for {city}")
        else:
            logger.warning(f"Weather upstream failure for {city} ({e.reason}), using seasonal mock")
    except MalformedOutput as e:
        logger.warning(f"Weather payload malformed for {city}: {e.message}")
    except asyncio.TimeoutError:
        logger.warning(f"Weather API timeout for {city}")
    except Exception as e:
        logger.error(f"Weather API error for {city}: {e}")

    return get_mock_weather(city)
