"""
Data models for the weather MCP server and chat gateway.
Sessions, the tool result envelope and the weather readings.
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional


class SessionInfo(BaseModel):
    """Client-side view of an initialized MCP session."""

    session_id: str
    created_at: datetime = Field(default_factory=datetime.now)
    is_active: bool = True

    # Handshake results
    protocol_version: Optional[str] = None
    server_info: Dict[str, Any] = Field(default_factory=dict)
    capabilities: Dict[str, Any] = Field(default_factory=dict)


# ===== Tool envelope =====

class TextContent(BaseModel):
    """A single renderable content block."""

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """Uniform success/error envelope returned by every tool call."""

    model_config = ConfigDict(populate_by_name=True)

    content: List[TextContent] = Field(min_length=1)
    is_error: bool = Field(default=False, alias="isError")
    structured_content: Optional[Dict[str, Any]] = Field(
        default=None, alias="structuredContent"
    )

    @classmethod
    def text(cls, text: str, structured: Optional[Dict[str, Any]] = None) -> "ToolResult":
        return cls(content=[TextContent(text=text)], structured_content=structured)

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)], is_error=True)

    @property
    def first_text(self) -> str:
        return self.content[0].text


class ToolSummary(BaseModel):
    """Capability-discovery view of a registered tool."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")


# ===== Weather readings =====

class Location(BaseModel):
    """Geocoding result."""

    name: str
    country: Optional[str] = None
    admin1: Optional[str] = Field(default=None, description="State or province")
    latitude: float
    longitude: float
    timezone: Optional[str] = None
    population: Optional[int] = None
    elevation: Optional[float] = None


class CurrentConditions(BaseModel):
    """Readings in metric units; temperatures in Celsius, unrounded."""

    time: Optional[str] = None
    temperature: float
    apparent_temperature: float
    humidity: Optional[float] = None
    precipitation: float = 0.0
    rain: float = 0.0
    snowfall: float = 0.0
    weather_code: Optional[int] = None
    cloud_cover: Optional[float] = None
    pressure: Optional[float] = None
    wind_speed: Optional[float] = None
    wind_direction: Optional[float] = None
    wind_gusts: float = 0.0
    is_day: bool = True


class DailyForecast(BaseModel):
    date: str
    weather_code: Optional[int] = None
    temperature_max: float
    temperature_min: float
    apparent_temperature_max: Optional[float] = None
    apparent_temperature_min: Optional[float] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    uv_index_max: Optional[float] = None
    precipitation_sum: float = 0.0
    precipitation_hours: Optional[float] = None
    precipitation_probability: Optional[float] = None
    wind_speed_max: float = 0.0
    wind_gusts_max: Optional[float] = None
    wind_direction: Optional[float] = None


class Forecast(BaseModel):
    """Current conditions plus daily readings for one coordinate pair."""

    latitude: float
    longitude: float
    timezone: Optional[str] = None
    elevation: Optional[float] = None
    current: CurrentConditions
    daily: List[DailyForecast] = Field(default_factory=list)
    units: Dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)


class WeatherReport(BaseModel):
    """Forecast joined with the location it was fetched for."""

    location: Location
    forecast: Forecast
    fahrenheit: bool = False
