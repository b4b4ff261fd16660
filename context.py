"""
Application context for the MCP server.
Holds the per-process collaborators shared by tool handlers.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

# Use forward references to avoid circular imports
if TYPE_CHECKING:
    from core.response_cache import ResponseCache
    from core.tool_registry import ToolRegistry
    from services.completion_service import CompletionService
    from services.weather_service import WeatherService


@dataclass
class AppContext:
    """
    Everything a tool handler needs, created once by the composition root
    (``mcp_server.build_app_context``) and passed to the tool registrars.
    """

    weather: "WeatherService"
    cache: "ResponseCache"
    registry: "ToolRegistry"
    completion: Optional["CompletionService"] = None
