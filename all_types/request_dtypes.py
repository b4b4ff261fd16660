from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.tool_registry import ToolArgs

MAX_FORECAST_DAYS = 16
MAX_MESSAGE_LENGTH = 2000


# ===== Tool arguments =====

class ReqCity(ToolArgs):
    city: str = Field(..., min_length=1, description="City name, e.g. 'London' or 'New York'")


class ReqGetWeather(ReqCity):
    fahrenheit: bool = Field(False, description="Report temperatures in Fahrenheit")


class ReqGetForecast(ReqCity):
    days: int = Field(
        7, ge=1, le=MAX_FORECAST_DAYS, description="Number of forecast days (1-16)"
    )
    fahrenheit: bool = Field(False, description="Report temperatures in Fahrenheit")


class ReqWeatherByCoords(ToolArgs):
    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")
    days: int = Field(
        1, ge=1, le=MAX_FORECAST_DAYS,
        description="1 for current conditions, more for a daily forecast",
    )
    fahrenheit: bool = Field(False, description="Report temperatures in Fahrenheit")


class ReqGeocodeCity(ReqCity):
    count: int = Field(1, ge=1, le=100, description="Maximum number of candidates")


class ReqWeatherQuestion(ToolArgs):
    question: str = Field(
        ..., min_length=1, max_length=MAX_MESSAGE_LENGTH, description="Free-text weather question"
    )
    city: Optional[str] = Field(None, description="City the question is about, if known")


class ReqForecastFahrenheit(ReqCity):
    days: int = Field(
        7, ge=1, le=MAX_FORECAST_DAYS, description="Number of forecast days (1-16)"
    )


# ===== Chat gateway =====

class ReqChat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH)
    conversation_history: List[Dict[str, Any]] = Field(
        default_factory=list, alias="conversationHistory"
    )


class ResChat(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    type: Optional[str] = None
    weather_data: Optional[Dict[str, Any]] = Field(default=None, alias="weatherData")
    error: Optional[bool] = None
    needs_city: Optional[bool] = Field(default=None, alias="needsCity")
