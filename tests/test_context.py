"""
Tests for weather, trends and the contextual adjustment.
"""
import asyncio
from datetime import datetime

import pytest

from stylist_service.core.errors import UpstreamFailure, REASON_NOT_CONFIGURED
from stylist_service.core.models import WeatherContext
from stylist_service.core.style_rules import recommend
from stylist_service.services.weather import (
    OpenWeatherClient,
    derive_layer_hint,
    get_mock_weather,
    get_weather,
    parse_weather_payload,
    season_for_month,
)
from stylist_service.services.trends import TREND_TABLE, get_trends
from stylist_service.services.context import (
    CONDITION_ADJUSTMENTS,
    TEMPERATURE_BANDS,
    align_with_trends,
    adjust_outfit_for_weather,
    generate_weather_adjustments,
)

from tests.conftest import FakeWeatherClient, HttpError, WEATHER_PAYLOAD


def _weather(temp, condition="Clouds"):
    return WeatherContext(
        temperature_c=temp, feels_like_c=temp, humidity_pct=50, condition=condition,
        description=condition.lower(), wind_speed=2.0, location="Test City",
    )


# ==================== WEATHER ====================

class TestSeasons:
    @pytest.mark.parametrize("month0,season", [
        (0, "winter"), (1, "winter"), (2, "spring"), (4, "spring"), (5, "summer"),
        (7, "summer"), (8, "fall"), (10, "fall"), (11, "winter"),
    ])
    def test_season_for_month(self, month0, season):
        assert season_for_month(month0) == season


class TestMockWeather:
    def test_summer_mock(self):
        weather = get_mock_weather("Oslo", now=datetime(2024, 7, 1))
        assert weather.temperature_c == 25
        assert weather.feels_like_c == 23
        assert weather.humidity_pct == 65
        assert weather.wind_speed == 5
        assert weather.location == "Oslo"
        assert weather.is_mock

    def test_winter_mock_is_rainy(self):
        weather = get_mock_weather(now=datetime(2024, 12, 15))
        assert weather.temperature_c == 5
        assert weather.condition == "Rainy"


class TestGetWeather:
    """get_weather never raises."""

    def test_live_payload(self):
        client = FakeWeatherClient(payload=WEATHER_PAYLOAD)
        weather = asyncio.run(get_weather("London", country="GB", client=client, timeout=1))
        assert client.queries == ["London,GB"]
        assert weather.temperature_c == 8.0
        assert weather.condition == "Rain"
        assert weather.country == "GB"
        assert not weather.is_mock

    @pytest.mark.parametrize("error", [
        UpstreamFailure("no key", reason=REASON_NOT_CONFIGURED),
        HttpError(500),
        RuntimeError("socket closed"),
    ])
    def test_failures_use_mock(self, error):
        client = FakeWeatherClient(error=error)
        weather = asyncio.run(get_weather("Berlin", client=client, timeout=1))
        assert weather.is_mock
        assert weather.location == "Berlin"

    def test_malformed_payload_uses_mock(self):
        client = FakeWeatherClient(payload={"main": {}})
        weather = asyncio.run(get_weather("Rome", client=client, timeout=1))
        assert weather.is_mock

    def test_timeout_uses_mock(self):
        client = FakeWeatherClient(payload=WEATHER_PAYLOAD, delay=1.0)
        weather = asyncio.run(get_weather("Lima", client=client, timeout=0.01))
        assert weather.is_mock

    def test_unconfigured_client_raises_not_configured(self):
        client = OpenWeatherClient(api_key="")
        with pytest.raises(UpstreamFailure) as exc_info:
            asyncio.run(client.fetch("Paris"))
        assert exc_info.value.reason == REASON_NOT_CONFIGURED


class TestPayloadParsing:
    def test_defaults_for_optional_fields(self):
        weather = parse_weather_payload(
            {"main": {"temp": 20}, "weather": [{"main": "Clear"}]},
            fallback_location="Madrid"
        )
        assert weather.location == "Madrid"
        assert weather.description == "clear"
        assert weather.wind_speed == 0


class TestLayerHint:
    @pytest.mark.parametrize("temp,condition,wind,expected", [
        (28, "Clear", 2, "light"),
        (18, "Clouds", 2, "medium"),
        (16, "Rain", 2, "heavy"),
        (5, "Snow", 1, "heavy"),
    ])
    def test_layer_hint(self, temp, condition, wind, expected):
        assert derive_layer_hint(temp, condition, wind) == expected


# ==================== TRENDS ====================

class TestTrends:
    def test_tokyo_is_flat_for_any_season(self):
        summer = get_trends("Tokyo", "summer")
        winter = get_trends("Tokyo", "winter")
        assert summer.trending_items == TREND_TABLE["Tokyo"]["trending_items"]
        assert summer.description == winter.description
        assert summer.season == "summer"

    def test_unknown_city_uses_global_season(self):
        trends = get_trends("Reykjavik", "fall")
        assert trends.trending_items == TREND_TABLE["global"]["fall"]["trending_items"]
        assert trends.color_palette == "earth_tones"

    def test_city_lookup_is_exact(self):
        trends = get_trends("tokyo", "spring")
        assert trends.trending_items == TREND_TABLE["global"]["spring"]["trending_items"]

    def test_season_defaults_from_clock(self):
        trends = get_trends("global", now=datetime(2024, 4, 10))
        assert trends.season == "spring"


# ==================== ADJUSTMENTS ====================

class TestWeatherAdjustments:
    @pytest.mark.parametrize("temp,band", [(-5, 0), (5, 1), (15, 2), (22, 3), (30, 4)])
    def test_temperature_bands(self, temp, band):
        adjustments = generate_weather_adjustments(_weather(temp))
        assert adjustments.adjustments == TEMPERATURE_BANDS[band][1]

    def test_rain_is_additive(self):
        adjustments = generate_weather_adjustments(_weather(5, "Rain"))
        assert adjustments.adjustments == TEMPERATURE_BANDS[1][1] + CONDITION_ADJUSTMENTS["rain"]

    def test_sunny_counts_as_clear(self):
        adjustments = generate_weather_adjustments(_weather(22, "Sunny"))
        assert adjustments.adjustments[-3:] == CONDITION_ADJUSTMENTS["clear"]


class TestTrendAlignment:
    def test_trending_item_match(self, blazer, rng):
        styling = recommend([blazer], {"occasion": "business"}, rng=rng)
        trends = get_trends("global", "spring")  # "oversized blazer" is trending
        alignment = align_with_trends(styling, trends)
        assert alignment.recommendation_score == 75

    def test_no_item_match(self, blazer, rng):
        styling = recommend([blazer], rng=rng)
        trends = get_trends("Paris", "spring")
        alignment = align_with_trends(styling, trends)
        assert alignment.recommendation_score == 60
        assert 0 <= alignment.recommendation_score <= 75


class TestAdjustOutfitForWeather:
    def test_live_weather_note(self, blazer, rng):
        styling = recommend([blazer], rng=rng)
        client = FakeWeatherClient(payload=WEATHER_PAYLOAD)
        contextual = asyncio.run(adjust_outfit_for_weather(styling, "London", weather_client=client, season="winter"))

        assert contextual.contextual_notes.startswith("In London, light rain.")
        assert "Suggested adjustments:" in contextual.contextual_notes
        assert "Medium-weight jacket or cardigan" in contextual.contextual_notes
        assert "Waterproof jacket or raincoat" in contextual.contextual_notes
        assert "Dress in heavy layers." in contextual.contextual_notes
        assert "Consider incorporating" in contextual.contextual_notes
        assert contextual.trends.season == "winter"
        assert contextual.layer_hint == "heavy"

    def test_never_raises(self, blazer, rng):
        styling = recommend([blazer], rng=rng)
        client = FakeWeatherClient(error=HttpError(401))
        contextual = asyncio.run(adjust_outfit_for_weather(styling, "New York", weather_client=client, timeout=1))
        assert contextual.weather.is_mock
        assert contextual.contextual_notes
