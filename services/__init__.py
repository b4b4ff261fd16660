"""
Services package: weather data, text completion, rendering and intent.
"""
from .completion_service import AnthropicCompletionService, CompletionService, build_completion_service
from .weather_service import OpenMeteoClient, WeatherService

__all__ = [
    'AnthropicCompletionService',
    'CompletionService',
    'OpenMeteoClient',
    'WeatherService',
    'build_completion_service',
]
