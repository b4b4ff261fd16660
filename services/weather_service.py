"""
Weather data access built on the Open-Meteo APIs.

``OpenMeteoClient`` is the raw data source (HTTP + parsing, raises on failure).
``WeatherService`` layers the ResponseCache on top and returns Ok/Err results.
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from all_types.internal_types import Err, Ok, Result
from config import ENDPOINTS, EndpointConfig, config
from core.errors import ErrorKind, ProviderError, TransportError, WeatherChatError
from core.response_cache import CacheKey, CacheKind, ResponseCache
from logging_config import get_logger
from models import CurrentConditions, DailyForecast, Forecast, Location, WeatherReport

logger = get_logger(__name__)

CURRENT_FIELDS = ",".join([
    "temperature_2m", "relative_humidity_2m", "apparent_temperature", "is_day",
    "precipitation", "rain", "showers", "snowfall", "weather_code", "cloud_cover",
    "pressure_msl", "surface_pressure", "wind_speed_10m", "wind_direction_10m",
    "wind_gusts_10m",
])

DAILY_FIELDS = ",".join([
    "weather_code", "temperature_2m_max", "temperature_2m_min",
    "apparent_temperature_max", "apparent_temperature_min", "sunrise", "sunset",
    "uv_index_max", "precipitation_sum", "precipitation_hours",
    "precipitation_probability_max", "wind_speed_10m_max", "wind_gusts_10m_max",
    "wind_direction_10m_dominant",
])

def _or_zero(value: Optional[float]) -> float:
    return 0.0 if value is None else value


def parse_locations(data: Dict[str, Any]) -> List[Location]:
    """Map the geocoding ``results`` array onto Location models (provider order kept)."""
    return [
        Location(
            name=item["name"],
            country=item.get("country"),
            admin1=item.get("admin1"),
            latitude=item["latitude"],
            longitude=item["longitude"],
            timezone=item.get("timezone"),
            population=item.get("population"),
            elevation=item.get("elevation"),
        )
        for item in data.get("results") or []
    ]


def parse_forecast(data: Dict[str, Any]) -> Forecast:
    """Map an Open-Meteo forecast body onto the Forecast model."""
    current = data["current"]
    daily = data.get("daily") or {}

    def column(name: str) -> List[Any]:
        return daily.get(name) or []

    def at(name: str, index: int) -> Any:
        values = column(name)
        return values[index] if index < len(values) else None

    days = [
        DailyForecast(
            date=date,
            weather_code=at("weather_code", i),
            temperature_max=at("temperature_2m_max", i),
            temperature_min=at("temperature_2m_min", i),
            apparent_temperature_max=at("apparent_temperature_max", i),
            apparent_temperature_min=at("apparent_temperature_min", i),
            sunrise=at("sunrise", i),
            sunset=at("sunset", i),
            uv_index_max=at("uv_index_max", i),
            precipitation_sum=_or_zero(at("precipitation_sum", i)),
            precipitation_hours=at("precipitation_hours", i),
            precipitation_probability=at("precipitation_probability_max", i),
            wind_speed_max=_or_zero(at("wind_speed_10m_max", i)),
            wind_gusts_max=at("wind_gusts_10m_max", i),
            wind_direction=at("wind_direction_10m_dominant", i),
        )
        for i, date in enumerate(column("time"))
    ]

    return Forecast(
        latitude=data["latitude"],
        longitude=data["longitude"],
        timezone=data.get("timezone"),
        elevation=data.get("elevation"),
        current=CurrentConditions(
            time=current.get("time"),
            temperature=current["temperature_2m"],
            apparent_temperature=current["apparent_temperature"],
            humidity=current.get("relative_humidity_2m"),
            precipitation=_or_zero(current.get("precipitation")),
            rain=_or_zero(current.get("rain")),
            snowfall=_or_zero(current.get("snowfall")),
            weather_code=current.get("weather_code"),
            cloud_cover=current.get("cloud_cover"),
            pressure=current.get("pressure_msl"),
            wind_speed=current.get("wind_speed_10m"),
            wind_direction=current.get("wind_direction_10m"),
            wind_gusts=_or_zero(current.get("wind_gusts_10m")),
            is_day=current.get("is_day", 1) == 1,
        ),
        daily=days,
        units=data.get("current_units") or {},
    )


class OpenMeteoClient:
    """Weather data source. Raises ProviderError / TransportError on failure."""

    def __init__(
        self,
        endpoints: EndpointConfig = ENDPOINTS,
        timeout_seconds: float = config.request_timeout_seconds,
    ):
        self.endpoints = endpoints
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def geocode(self, city: str, max_results: int = 1) -> List[Location]:
        data = await self._get_json(
            self.endpoints.geocode_search,
            {"name": city, "count": str(max_results), "language": "en", "format": "json"},
        )
        try:
            return parse_locations(data)
        except (KeyError, TypeError, ValidationError) as e:
            raise ProviderError(f"Malformed geocoding response: {e}") from e

    async def forecast(self, latitude: float, longitude: float, days: int = 7) -> Forecast:
        data = await self._get_json(
            self.endpoints.forecast,
            {
                "latitude": str(latitude),
                "longitude": str(longitude),
                "current": CURRENT_FIELDS,
                "daily": DAILY_FIELDS,
                "timezone": "auto",
                "forecast_days": str(days),
            },
        )
        try:
            return parse_forecast(data)
        except (KeyError, TypeError, ValidationError) as e:
            raise ProviderError(f"Malformed forecast response: {e}") from e

    async def _get_json(self, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        logger.info(f"Calling Open-Meteo: {url}")
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as http_session:
                async with http_session.get(url, params=params) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.error(f"Open-Meteo error: {response.status} - {error_text[:200]}")
                        raise ProviderError(
                            f"weather API returned {response.status}: {error_text[:200]}"
                        )
                    return await response.json()
        except aiohttp.ClientConnectionError as e:
            raise TransportError(f"weather API is not reachable: {e}") from e
        except asyncio.TimeoutError as e:
            raise ProviderError("weather API request timed out") from e
        except aiohttp.ClientError as e:
            raise ProviderError(f"weather API request failed: {e}") from e


class WeatherService:
    """Cache-first access to the weather data source."""

    def __init__(self, source, cache: ResponseCache):
        self.source = source
        self.cache = cache

    async def geocode(self, city: str, count: int = 1) -> Result[List[Location]]:
        key = CacheKey.build(CacheKind.GEOCODE, "geocode", city=city, count=count)
        cached = self.cache.get(key)
        if cached is not None:
            return Ok(cached)

        try:
            locations = await self.source.geocode(city, count)
        except WeatherChatError as e:
            logger.warning(f"Geocoding failed for {city}: {e.message}")
            return Err(e.kind, f"Failed to geocode {city}: {e.message}")

        self.cache.set(key, locations)
        return Ok(locations)

    async def forecast(self, latitude: float, longitude: float, days: int = 1) -> Result[Forecast]:
        key = CacheKey.build(
            CacheKind.WEATHER, "forecast", latitude=latitude, longitude=longitude, days=days
        )
        cached = self.cache.get(key)
        if cached is not None:
            return Ok(cached)

        try:
            forecast = await self.source.forecast(latitude, longitude, days)
        except WeatherChatError as e:
            logger.warning(f"Forecast failed for {latitude}, {longitude}: {e.message}")
            return Err(
                e.kind,
                f"Failed to get forecast for coordinates {latitude}, {longitude}: {e.message}",
            )

        self.cache.set(key, forecast)
        return Ok(forecast)

    async def report_for_city(
        self, city: str, days: int = 1, fahrenheit: bool = False
    ) -> Result[WeatherReport]:
        """Resolve a city (first geocoding candidate) and fetch its weather."""
        located = await self.geocode(city, 1)
        if isinstance(located, Err):
            return located
        if not located.value:
            return Err(
                ErrorKind.PROVIDER_FAILURE,
                f'Could not find location for "{city}". Please check the city name and try again.',
            )

        location = located.value[0]
        fetched = await self.forecast(location.latitude, location.longitude, days)
        if isinstance(fetched, Err):
            return fetched
        return Ok(WeatherReport(location=location, forecast=fetched.value, fahrenheit=fahrenheit))

    async def report_for_coordinates(
        self, latitude: float, longitude: float, days: int = 1, fahrenheit: bool = False
    ) -> Result[WeatherReport]:
        fetched = await self.forecast(latitude, longitude, days)
        if isinstance(fetched, Err):
            return fetched
        location = Location(
            name=f"Location ({latitude:.2f}, {longitude:.2f})",
            latitude=latitude,
            longitude=longitude,
            timezone=fetched.value.timezone,
            elevation=fetched.value.elevation,
        )
        return Ok(WeatherReport(location=location, forecast=fetched.value, fahrenheit=fahrenheit))
