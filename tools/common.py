"""
Shared handler pieces for the weather tools: narration with template fallback
and the current/forecast result builders.
"""

from typing import Optional

from all_types.internal_types import Err
from context import AppContext
from logging_config import get_logger
from models import ToolResult, WeatherReport
from services.completion_service import CompletionService
from services.formatting import format_current_weather, format_forecast
from services.prompts import current_weather_prompt, forecast_prompt
from utils.json_handler import convert_to_serializable

logger = get_logger(__name__)


async def narrate(completion: Optional[CompletionService], prompt: str, fallback: str) -> str:
    """Completion text for ``prompt``, or ``fallback`` when completion is unavailable."""
    if completion is None:
        return fallback
    try:
        answer = await completion.complete(prompt)
    except Exception:
        logger.exception("Completion service raised; using template response")
        return fallback
    if isinstance(answer, Err):
        logger.warning(f"Completion unavailable ({answer.kind.value}): {answer.detail}")
        return fallback
    return answer.value


def report_payload(report: WeatherReport, kind: str) -> dict:
    payload = convert_to_serializable(report)
    payload["type"] = kind
    return payload


def place_name(report: WeatherReport) -> str:
    location = report.location
    return ", ".join(part for part in (location.name, location.country) if part)


async def current_weather_result(app_ctx: AppContext, report: WeatherReport) -> ToolResult:
    text = await narrate(
        app_ctx.completion,
        current_weather_prompt(report, place_name(report)),
        format_current_weather(report),
    )
    return ToolResult.text(text, structured=report_payload(report, "current"))


async def forecast_result(app_ctx: AppContext, report: WeatherReport, days: int) -> ToolResult:
    text = await narrate(
        app_ctx.completion,
        forecast_prompt(report, place_name(report), days),
        format_forecast(report, days),
    )
    return ToolResult.text(text, structured=report_payload(report, "forecast"))


async def city_weather(app_ctx: AppContext, city: str, fahrenheit: bool = False) -> ToolResult:
    """Current conditions for the first geocoding match of ``city``."""
    report = await app_ctx.weather.report_for_city(city, 1, fahrenheit)
    if isinstance(report, Err):
        return ToolResult.error(f"Error getting weather for {city}: {report.detail}")
    return await current_weather_result(app_ctx, report.value)


async def city_forecast(app_ctx: AppContext, city: str, days: int = 7, fahrenheit: bool = False) -> ToolResult:
    """Daily forecast for the first geocoding match of ``city``."""
    report = await app_ctx.weather.report_for_city(city, days, fahrenheit)
    if isinstance(report, Err):
        return ToolResult.error(f"Error getting forecast for {city}: {report.detail}")
    return await forecast_result(app_ctx, report.value, days)
