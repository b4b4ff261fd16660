"""Weather MCP tools."""

from .geocoding_tools import register_geocoding_tools
from .question_tools import register_question_tools
from .weather_tools import register_fahrenheit_tools, register_weather_tools


def register_all_tools(app_ctx):
    """Register every tool on ``app_ctx.registry``, in listing order."""
    register_weather_tools(app_ctx)
    register_geocoding_tools(app_ctx)
    register_question_tools(app_ctx)
    register_fahrenheit_tools(app_ctx)


__all__ = [
    "register_all_tools",
    "register_fahrenheit_tools",
    "register_geocoding_tools",
    "register_question_tools",
    "register_weather_tools",
]
