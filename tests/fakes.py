"""In-memory stand-ins for the providers used in tests."""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from all_types.internal_types import Err, Ok
from core.errors import ErrorKind, ProviderError, SessionRejectedError
from models import Location, SessionInfo, ToolResult
from services.completion_service import CompletionService
from services.weather_service import parse_forecast

START_DATE = date(2026, 3, 3)

LOCATIONS = {
    "london": [
        Location(name="London", country="United Kingdom", admin1="England",
                 latitude=51.50853, longitude=-0.12574, timezone="Europe/London",
                 population=8961989, elevation=25.0),
    ],
    "paris": [
        Location(name="Paris", country="France", admin1="Île-de-France",
                 latitude=48.85341, longitude=2.3488, timezone="Europe/Paris",
                 population=2138551, elevation=42.0),
    ],
    "tokyo": [
        Location(name="Tokyo", country="Japan", admin1="Tokyo",
                 latitude=35.6895, longitude=139.69171, timezone="Asia/Tokyo",
                 population=8336599, elevation=44.0),
    ],
    "springfield": [
        Location(name="Springfield", country="United States", admin1="Illinois",
                 latitude=39.80172, longitude=-89.64371, timezone="America/Chicago",
                 population=116250, elevation=182.0),
        Location(name="Springfield", country="United States", admin1="Missouri",
                 latitude=37.21533, longitude=-93.29824, timezone="America/Chicago",
                 population=169176, elevation=398.0),
    ],
}


def open_meteo_payload(
    latitude: float, longitude: float, days: int = 1, temperature: float = 12.6
) -> Dict[str, Any]:
    """A forecast body shaped like Open-Meteo's ``/v1/forecast`` response."""
    dates = [(START_DATE + timedelta(days=i)).isoformat() for i in range(days)]
    return {
        "latitude": latitude,
        "longitude": longitude,
        "timezone": "Europe/London",
        "elevation": 25.0,
        "current_units": {"temperature_2m": "°C", "wind_speed_10m": "km/h"},
        "current": {
            "time": "2026-03-03T12:00",
            "temperature_2m": temperature,
            "relative_humidity_2m": 71,
            "apparent_temperature": 10.4,
            "is_day": 1,
            "precipitation": 0.0,
            "rain": 0.0,
            "showers": 0.0,
            "snowfall": 0.0,
            "weather_code": 3,
            "cloud_cover": 88,
            "pressure_msl": 1012.3,
            "surface_pressure": 1008.1,
            "wind_speed_10m": 14.2,
            "wind_direction_10m": 230,
            "wind_gusts_10m": 27.4,
        },
        "daily": {
            "time": dates,
            "weather_code": [61] * days,
            "temperature_2m_max": [14.5] * days,
            "temperature_2m_min": [6.4] * days,
            "apparent_temperature_max": [12.0] * days,
            "apparent_temperature_min": [3.1] * days,
            "sunrise": [f"{d}T06:41" for d in dates],
            "sunset": [f"{d}T17:49" for d in dates],
            "uv_index_max": [2.1] * days,
            "precipitation_sum": [1.2] * days,
            "precipitation_hours": [3.0] * days,
            "precipitation_probability_max": [60] * days,
            "wind_speed_10m_max": [22.3] * days,
            "wind_gusts_10m_max": [41.0] * days,
            "wind_direction_10m_dominant": [240] * days,
        },
    }


class FakeWeatherSource:
    """Weather data source that counts calls and never touches the network."""

    def __init__(self, locations: Optional[Dict[str, List[Location]]] = None, temperature: float = 12.6):
        self.locations = LOCATIONS if locations is None else locations
        self.temperature = temperature
        self.geocode_calls: List[tuple] = []
        self.forecast_calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    async def geocode(self, city: str, max_results: int = 1) -> List[Location]:
        self.geocode_calls.append((city, max_results))
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.locations.get(city.strip().lower(), []))[:max_results]

    async def forecast(self, latitude: float, longitude: float, days: int = 7):
        self.forecast_calls.append((latitude, longitude, days))
        if self.fail_with is not None:
            raise self.fail_with
        return parse_forecast(open_meteo_payload(latitude, longitude, days, self.temperature))

    @property
    def total_calls(self) -> int:
        return len(self.geocode_calls) + len(self.forecast_calls)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingCompletion(CompletionService):
    def __init__(self):
        self.prompts: List[str] = []

    async def complete(self, prompt: str):
        self.prompts.append(prompt)
        return Err(ErrorKind.PROVIDER_FAILURE, "completion provider is down")


class RaisingCompletion(CompletionService):
    async def complete(self, prompt: str):
        raise RuntimeError("unexpected completion failure")


class ScriptedCompletion(CompletionService):
    """Returns a fixed answer and records the prompts it was given."""

    def __init__(self, answer: str):
        self.answer = answer
        self.prompts: List[str] = []

    async def complete(self, prompt: str):
        self.prompts.append(prompt)
        return Ok(self.answer)


class FakeTransport:
    """MCP transport double for SessionManager tests.

    Session ids listed in ``rejected`` are refused with SessionRejectedError;
    ``handshake_errors`` are raised by successive initialize() calls.
    """

    def __init__(self):
        self.endpoint = "http://mcp.test/mcp"
        self.rejected = set()
        self.reject_all = False
        self.send_error: Optional[Exception] = None
        self.handshake_errors: List[Exception] = []
        self.terminate_error: Optional[Exception] = None
        self.initialized: List[str] = []
        self.sent: List[tuple] = []
        self.terminated: List[str] = []

    async def initialize(self) -> SessionInfo:
        if self.handshake_errors:
            raise self.handshake_errors.pop(0)
        session_id = f"session-{len(self.initialized) + 1}"
        self.initialized.append(session_id)
        return SessionInfo(
            session_id=session_id,
            protocol_version="2025-06-18",
            server_info={"name": "weather-mcp-server", "version": "1.0.0"},
        )

    async def send(self, request, session_id: str) -> Dict[str, Any]:
        self.sent.append((dict(request), session_id))
        if self.send_error is not None:
            raise self.send_error
        if self.reject_all or session_id in self.rejected:
            raise SessionRejectedError(f"unknown session {session_id}", session_id=session_id)
        return {"echo": request.get("method"), "session": session_id}

    async def terminate(self, session_id: str) -> None:
        if self.terminate_error is not None:
            raise self.terminate_error
        self.terminated.append(session_id)


class FakeToolClient:
    """Gateway-side tool client double."""

    def __init__(self, result: Optional[ToolResult] = None, info: Optional[Dict[str, Any]] = None):
        self.result = result or ToolResult.text("Sunny and 20°C", structured={"type": "current"})
        self.info = info
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []
        self.closed = False

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> ToolResult:
        self.calls.append((name, arguments))
        if self.error is not None:
            raise self.error
        return self.result

    async def server_info(self) -> Optional[Dict[str, Any]]:
        return self.info

    async def close(self) -> None:
        self.closed = True


def provider_down() -> ProviderError:
    return ProviderError("weather API returned 503: Service Unavailable")
