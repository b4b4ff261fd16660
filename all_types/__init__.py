"""Data types package for the weather MCP server and chat gateway."""

from .internal_types import Err, Ok, Result
from .request_dtypes import (
    ReqChat,
    ReqForecastFahrenheit,
    ReqGeocodeCity,
    ReqGetForecast,
    ReqGetWeather,
    ReqWeatherByCoords,
    ReqWeatherQuestion,
    ResChat,
)

__all__ = [
    "Err",
    "Ok",
    "Result",
    "ReqChat",
    "ReqForecastFahrenheit",
    "ReqGeocodeCity",
    "ReqGetForecast",
    "ReqGetWeather",
    "ReqWeatherByCoords",
    "ReqWeatherQuestion",
    "ResChat",
]
