from all_types.internal_types import Err
from all_types.request_dtypes import (
    ReqCity,
    ReqForecastFahrenheit,
    ReqGetForecast,
    ReqGetWeather,
    ReqWeatherByCoords,
)
from context import AppContext
from logging_config import get_logger
from models import ToolResult
from tools.common import city_forecast, city_weather, current_weather_result, forecast_result

logger = get_logger(__name__)


def register_weather_tools(app_ctx: AppContext):
    """Register the current-conditions and forecast tools on the context's registry."""

    logger.info("Registering weather tools")
    registry = app_ctx.registry

    @registry.tool(
        name="get_weather",
        description="""Get current weather conditions for a city.

        Looks the city up with geocoding (first match wins), fetches current
        conditions from Open-Meteo and returns a conversational summary.

        Args:
            city: City name, e.g. "London" or "New York"
            fahrenheit: Report temperatures in Fahrenheit instead of Celsius
        """,
        args_model=ReqGetWeather,
    )
    async def get_weather(args: ReqGetWeather) -> ToolResult:
        return await city_weather(app_ctx, args.city, args.fahrenheit)

    @registry.tool(
        name="get_forecast",
        description="""Get a daily weather forecast (1-16 days) for a city.

        Args:
            city: City name
            days: Number of forecast days, default 7
            fahrenheit: Report temperatures in Fahrenheit instead of Celsius
        """,
        args_model=ReqGetForecast,
    )
    async def get_forecast(args: ReqGetForecast) -> ToolResult:
        return await city_forecast(app_ctx, args.city, args.days, args.fahrenheit)

    @registry.tool(
        name="get_weather_by_coords",
        description="""Get weather for a latitude/longitude pair.

        days=1 returns current conditions, anything larger a daily forecast.
        """,
        args_model=ReqWeatherByCoords,
    )
    async def get_weather_by_coords(args: ReqWeatherByCoords) -> ToolResult:
        report = await app_ctx.weather.report_for_coordinates(
            args.latitude, args.longitude, args.days, args.fahrenheit
        )
        if isinstance(report, Err):
            return ToolResult.error(
                f"Error getting weather for {args.latitude}, {args.longitude}: {report.detail}"
            )
        if args.days == 1:
            return await current_weather_result(app_ctx, report.value)
        return await forecast_result(app_ctx, report.value, args.days)


def register_fahrenheit_tools(app_ctx: AppContext):
    """Fixed-unit variants of get_weather and get_forecast."""

    registry = app_ctx.registry

    @registry.tool(
        name="get_weather_fahrenheit",
        description="Get current weather conditions for a city with temperatures in Fahrenheit.",
        args_model=ReqCity,
    )
    async def get_weather_fahrenheit(args: ReqCity) -> ToolResult:
        return await city_weather(app_ctx, args.city, fahrenheit=True)

    @registry.tool(
        name="get_forecast_fahrenheit",
        description="Get a daily weather forecast for a city with temperatures in Fahrenheit.",
        args_model=ReqForecastFahrenheit,
    )
    async def get_forecast_fahrenheit(args: ReqForecastFahrenheit) -> ToolResult:
        return await city_forecast(app_ctx, args.city, args.days, fahrenheit=True)
