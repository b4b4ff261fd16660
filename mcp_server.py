"""
MCP Server for weather data.
Exposes the ToolRegistry over FastMCP's streamable HTTP transport at /mcp.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import uvicorn

# FastMCP imports
from mcp import types
from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

# Local imports
from config import MCPConfig, config
from context import AppContext
from core.response_cache import ResponseCache
from core.tool_registry import ToolRegistry
from logging_config import get_logger
from services.completion_service import CompletionService, build_completion_service
from services.weather_service import OpenMeteoClient, WeatherService
from tools import register_all_tools
from utils.json_handler import to_json_string_async

logger = get_logger(__name__)


# ===== FastMCP backed by the ToolRegistry =====
class WeatherFastMCP(FastMCP):
    """FastMCP server that lists and dispatches tools through a ToolRegistry.

    Also adds CORS headers so browser-based clients like the MCP Inspector
    can read the ``Mcp-Session-Id`` header.
    """

    def __init__(self, registry: ToolRegistry, name: str, **settings: Any):
        self.registry = registry
        super().__init__(name, **settings)

    async def list_tools(self) -> List[types.Tool]:
        return [
            types.Tool(
                name=summary.name,
                description=summary.description,
                inputSchema=summary.input_schema,
            )
            for summary in self.registry.list()
        ]

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> types.CallToolResult:
        result = await self.registry.call(name, arguments)
        return types.CallToolResult.model_validate(
            result.model_dump(by_alias=True, exclude_none=True)
        )

    def streamable_http_app(self) -> Starlette:
        """Override streamable_http_app to add CORS middleware."""
        app = super().streamable_http_app()
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],  # In production, specify your client domains
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Mcp-Session-Id"],
        )
        return app

    def run(self, transport: str = "streamable-http"):
        """Override run to serve the CORS-wrapped app with uvicorn."""
        if transport == "streamable-http":
            uvicorn.run(self.streamable_http_app(), host=self.settings.host, port=self.settings.port)
        else:
            super().run(transport)


def build_app_context(
    settings: MCPConfig = config,
    source=None,
    completion: Optional[CompletionService] = None,
    use_default_completion: bool = True,
) -> AppContext:
    """Create the cache, weather service, completion service and registry."""
    cache = ResponseCache(
        weather_ttl_seconds=settings.weather_cache_ttl_seconds,
        geocode_ttl_multiplier=settings.geocode_ttl_multiplier,
    )
    if source is None:
        source = OpenMeteoClient(timeout_seconds=settings.request_timeout_seconds)
    if completion is None and use_default_completion:
        completion = build_completion_service()

    app_ctx = AppContext(
        weather=WeatherService(source, cache),
        cache=cache,
        registry=ToolRegistry(),
        completion=completion,
    )
    register_all_tools(app_ctx)
    return app_ctx


def create_server(app_ctx: AppContext, settings: MCPConfig = config) -> WeatherFastMCP:
    mcp = WeatherFastMCP(
        app_ctx.registry,
        settings.server_name,
        host=settings.host,
        port=settings.port,
        streamable_http_path="/mcp",
    )

    # ===== Health =====
    @mcp.custom_route("/health", methods=["GET"])
    async def health(request: Request) -> JSONResponse:
        return JSONResponse(health_payload(app_ctx, settings))

    # ===== Resource Implementations =====
    @mcp.resource("config://server")
    def get_server_config() -> str:
        """Get server configuration information."""
        return f"""Weather MCP Server Configuration:
- Server Name: {settings.server_name} v{settings.server_version}
- Weather Cache TTL: {settings.weather_cache_ttl_seconds:g} seconds
- Geocode Cache TTL: {settings.weather_cache_ttl_seconds * settings.geocode_ttl_multiplier:g} seconds
- Request Timeout: {settings.request_timeout_seconds:g} seconds
- AI Narration: {"enabled" if app_ctx.completion else "disabled (template responses)"}
- Available Tools: {len(app_ctx.registry)} registered tools
- Transport Support: streamable HTTP at /mcp
"""

    @mcp.resource("cache://stats")
    async def get_cache_stats() -> str:
        """Get response cache statistics as JSON."""
        return await to_json_string_async(app_ctx.cache.stats(), indent=2)

    return mcp


def health_payload(app_ctx: AppContext, settings: MCPConfig = config) -> Dict[str, Any]:
    return {
        "status": "healthy",
        "server": settings.server_name,
        "version": settings.server_version,
        "transport": "streamable-http",
        "endpoint": "/mcp",
        "tools": app_ctx.registry.names(),
        "toolCount": len(app_ctx.registry),
        "aiEnabled": app_ctx.completion is not None,
        "cache": app_ctx.cache.stats(),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ===== Main Function =====
def main():
    """Main entry point for the MCP server."""
    logger.info("🌤️  Weather MCP Server")

    app_ctx = build_app_context()
    mcp = create_server(app_ctx)

    logger.info(f"🌐 Starting streamable HTTP transport on http://{config.host}:{config.port}/mcp")
    logger.info(f"🔍 Connect MCP Inspector to: http://localhost:{config.port}/mcp")
    logger.info(f"📋 Registered MCP tools: {', '.join(app_ctx.registry.names())}")

    mcp.run("streamable-http")


if __name__ == "__main__":
    main()
