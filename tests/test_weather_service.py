"""Tests for the cached weather service and Open-Meteo parsing."""

import pytest

from all_types.internal_types import Err, Ok
from core.errors import ErrorKind, TransportError
from core.response_cache import ResponseCache
from services.weather_service import WeatherService, parse_forecast, parse_locations
from tests.fakes import FakeClock, FakeWeatherSource, open_meteo_payload, provider_down


def make_service(clock=None, source=None):
    source = source or FakeWeatherSource()
    cache = ResponseCache(weather_ttl_seconds=600, geocode_ttl_multiplier=6, clock=clock or FakeClock())
    return WeatherService(source, cache), source


class TestParsing:
    def test_parse_forecast_keeps_raw_celsius(self):
        forecast = parse_forecast(open_meteo_payload(51.5, -0.12, days=3))
        assert forecast.current.temperature == 12.6
        assert forecast.current.apparent_temperature == 10.4
        assert forecast.current.is_day is True
        assert len(forecast.daily) == 3
        assert forecast.daily[0].date == "2026-03-03"
        assert forecast.daily[0].precipitation_probability == 60

    def test_parse_forecast_tolerates_null_readings(self):
        payload = open_meteo_payload(51.5, -0.12)
        payload["current"]["precipitation"] = None
        payload["daily"]["precipitation_sum"] = [None]
        forecast = parse_forecast(payload)
        assert forecast.current.precipitation == 0.0
        assert forecast.daily[0].precipitation_sum == 0.0

    def test_parse_forecast_requires_current_block(self):
        payload = open_meteo_payload(51.5, -0.12)
        del payload["current"]
        with pytest.raises(KeyError):
            parse_forecast(payload)

    def test_parse_locations_without_results(self):
        assert parse_locations({"generationtime_ms": 0.5}) == []

    def test_parse_locations_keeps_order(self):
        data = {
            "results": [
                {"name": "Springfield", "latitude": 39.8, "longitude": -89.6, "admin1": "Illinois"},
                {"name": "Springfield", "latitude": 37.2, "longitude": -93.3, "admin1": "Missouri"},
            ]
        }
        assert [loc.admin1 for loc in parse_locations(data)] == ["Illinois", "Missouri"]


class TestWeatherService:
    @pytest.mark.asyncio
    async def test_forecast_cached_within_ttl(self):
        service, source = make_service()
        first = await service.forecast(51.5, -0.12, 1)
        second = await service.forecast(51.5, -0.12, 1)
        assert isinstance(first, Ok) and isinstance(second, Ok)
        assert first.value == second.value
        assert len(source.forecast_calls) == 1

    @pytest.mark.asyncio
    async def test_forecast_refetched_after_ttl(self):
        clock = FakeClock()
        service, source = make_service(clock=clock)
        await service.forecast(51.5, -0.12, 1)
        clock.advance(600)
        await service.forecast(51.5, -0.12, 1)
        assert len(source.forecast_calls) == 2

    @pytest.mark.asyncio
    async def test_geocode_outlives_weather_ttl(self):
        clock = FakeClock()
        service, source = make_service(clock=clock)
        await service.geocode("London")
        clock.advance(3000)
        await service.geocode("london")
        assert len(source.geocode_calls) == 1

    @pytest.mark.asyncio
    async def test_empty_geocode_result_is_cached(self):
        service, source = make_service()
        assert (await service.geocode("Atlantis")).value == []
        assert (await service.geocode("Atlantis")).value == []
        assert len(source.geocode_calls) == 1

    @pytest.mark.asyncio
    async def test_provider_failure_becomes_err_and_is_not_cached(self):
        service, source = make_service()
        source.fail_with = provider_down()
        result = await service.geocode("London")
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.PROVIDER_FAILURE
        assert "503" in result.detail

        source.fail_with = None
        assert isinstance(await service.geocode("London"), Ok)
        assert len(source.geocode_calls) == 2

    @pytest.mark.asyncio
    async def test_transport_failure_kind_preserved(self):
        service, source = make_service()
        source.fail_with = TransportError("connection refused")
        result = await service.forecast(1.0, 2.0, 1)
        assert isinstance(result, Err)
        assert result.kind == ErrorKind.TRANSPORT_FAILURE

    @pytest.mark.asyncio
    async def test_report_uses_first_candidate(self):
        service, source = make_service()
        result = await service.report_for_city("Springfield")
        assert isinstance(result, Ok)
        assert result.value.location.admin1 == "Illinois"
        assert source.forecast_calls == [(39.80172, -89.64371, 1)]

    @pytest.mark.asyncio
    async def test_report_for_unknown_city(self):
        service, source = make_service()
        result = await service.report_for_city("Atlantis")
        assert isinstance(result, Err)
        assert result.detail.startswith('Could not find location for "Atlantis"')
        assert source.forecast_calls == []

    @pytest.mark.asyncio
    async def test_report_for_coordinates_skips_geocoding(self):
        service, source = make_service()
        result = await service.report_for_coordinates(51.5085, -0.1257, 1, fahrenheit=True)
        assert result.value.location.name == "Location (51.51, -0.13)"
        assert result.value.fahrenheit is True
        assert source.geocode_calls == []
