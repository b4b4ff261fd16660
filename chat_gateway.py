"""
Chat gateway.
HTTP front end for the chat UI: classifies messages, calls the MCP weather
tools through a session-managed client and proxies raw tool results.
"""

import contextlib
import json
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from all_types.internal_types import Err
from all_types.request_dtypes import MAX_MESSAGE_LENGTH, ReqChat, ResChat
from config import GatewayConfig, gateway_config
from core.errors import WeatherChatError
from core.mcp_client import McpHttpTransport, McpToolClient
from core.session_manager import SessionManager
from logging_config import get_logger
from services.completion_service import CompletionService, build_completion_service
from services.intent import (
    detect_fahrenheit,
    extract_city,
    generate_chat_response,
    is_weather_query,
    normalize_city_answer,
    wants_forecast,
)
from services.prompts import city_extraction_prompt

logger = get_logger(__name__)

ASK_FOR_CITY = "I'd be happy to help you with the weather! Which city would you like to know the weather for?"
GENERIC_FAILURE = "Sorry, I encountered an error. Please try again."


def build_tool_client(settings: GatewayConfig = gateway_config) -> McpToolClient:
    transport = McpHttpTransport(
        settings.mcp_server_url,
        timeout_seconds=settings.request_timeout_seconds,
        client_name=settings.client_name,
        client_version=settings.client_version,
    )
    return McpToolClient(SessionManager(transport))


async def resolve_city(message: str, completion: Optional[CompletionService]) -> Optional[str]:
    """City named in ``message``: completion first, regex patterns as fallback."""
    if completion is not None:
        try:
            answer = await completion.complete(city_extraction_prompt(message))
        except Exception:
            logger.exception("LLM city extraction raised; using pattern matching")
            return extract_city(message)
        if isinstance(answer, Err):
            logger.warning(f"LLM city extraction failed: {answer.detail}")
        else:
            city = normalize_city_answer(answer.value)
            logger.info(f"🔍 LLM extracted city: {city}")
            if city:
                return city
    return extract_city(message)


def _chat_json(status_code: int = 200, **fields) -> JSONResponse:
    return JSONResponse(
        ResChat(**fields).model_dump(by_alias=True, exclude_none=True), status_code=status_code
    )


def _query_int(request: Request, name: str, default: int) -> int:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"query parameter '{name}' must be an integer, got {raw!r}") from None


def create_app(
    tool_client=None,
    completion: Optional[CompletionService] = None,
    settings: GatewayConfig = gateway_config,
    use_default_completion: bool = True,
) -> Starlette:
    """Build the gateway app. Collaborators default to the configured ones."""
    if tool_client is None:
        tool_client = build_tool_client(settings)
    if completion is None and use_default_completion:
        completion = build_completion_service()

    async def index(request: Request) -> JSONResponse:
        return JSONResponse({
            "message": "Chat API Server running.",
            "mcpServer": settings.mcp_server_url,
        })

    async def chat(request: Request) -> JSONResponse:
        try:
            body = ReqChat.model_validate(await request.json())
        except (json.JSONDecodeError, ValidationError) as e:
            logger.info(f"Rejected chat request: {e}")
            return _chat_json(
                400,
                response=f"Please send a JSON body with a 'message' string of at most {MAX_MESSAGE_LENGTH} characters.",
                error=True,
            )

        message = body.message
        if not is_weather_query(message):
            return _chat_json(response=generate_chat_response(message))

        city = await resolve_city(message, completion)
        if not city:
            return _chat_json(response=ASK_FOR_CITY, needs_city=True)

        tool_name = "get_forecast" if wants_forecast(message) else "get_weather"
        arguments = {"city": city, "fahrenheit": detect_fahrenheit(message)}
        try:
            result = await tool_client.call_tool(tool_name, arguments)
        except WeatherChatError as e:
            logger.error(f"MCP server error: {e.message}")
            return _chat_json(
                response=f"Sorry, I couldn't get the weather data for {city}. {e.message}",
                error=True,
            )

        if result.is_error:
            return _chat_json(
                response=f"Sorry, I couldn't get the weather data for {city}. {result.first_text}",
                error=True,
            )
        return _chat_json(
            response=result.first_text,
            type="weather",
            weather_data=result.structured_content,
        )

    async def proxy_tool(name: str, arguments: dict) -> JSONResponse:
        try:
            result = await tool_client.call_tool(name, arguments)
        except WeatherChatError as e:
            return JSONResponse({"error": e.message}, status_code=400)
        return JSONResponse(result.model_dump(by_alias=True, exclude_none=True))

    async def weather(request: Request) -> JSONResponse:
        return await proxy_tool("get_weather", {"city": request.path_params["city"]})

    async def forecast(request: Request) -> JSONResponse:
        try:
            days = _query_int(request, "days", 7)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        return await proxy_tool("get_forecast", {"city": request.path_params["city"], "days": days})

    async def geocode(request: Request) -> JSONResponse:
        try:
            count = _query_int(request, "count", 1)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        return await proxy_tool("geocode_city", {"city": request.path_params["city"], "count": count})

    async def weather_by_coordinates(request: Request) -> JSONResponse:
        try:
            latitude = float(request.path_params["lat"])
            longitude = float(request.path_params["lon"])
            days = _query_int(request, "days", 1)
        except ValueError as e:
            return JSONResponse({"error": f"invalid coordinates or days: {e}"}, status_code=400)
        return await proxy_tool(
            "get_weather_by_coords",
            {"latitude": latitude, "longitude": longitude, "days": days},
        )

    async def mcp_info(request: Request) -> JSONResponse:
        info = await tool_client.server_info()
        if info is None:
            return JSONResponse(
                {
                    "error": "MCP server is not available",
                    "suggestion": "Start the MCP server with: weather-mcp-server",
                },
                status_code=503,
            )
        return JSONResponse(info)

    async def health(request: Request) -> JSONResponse:
        info = await tool_client.server_info()
        return JSONResponse({
            "status": "healthy",
            "chatServer": "running",
            "mcpServer": "connected" if info else "disconnected",
            "mcpServerUrl": settings.mcp_server_url,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
        return JSONResponse(
            {"response": GENERIC_FAILURE, "error": True, "detail": str(exc)},
            status_code=500,
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        logger.info(f"💬 Chat gateway ready; MCP server at {settings.mcp_server_url}")
        yield
        await tool_client.close()
        logger.info("Chat gateway stopped")

    routes = [
        Route("/", index),
        Route("/api/chat", chat, methods=["POST"]),
        Route("/api/weather/coordinates/{lat}/{lon}", weather_by_coordinates),
        Route("/api/weather/{city}", weather),
        Route("/api/forecast/{city}", forecast),
        Route("/api/geocode/{city}", geocode),
        Route("/api/mcp/info", mcp_info),
        Route("/api/health", health),
    ]

    app = Starlette(
        routes=routes,
        middleware=[
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
        ],
        exception_handlers={Exception: unhandled_error},
        lifespan=lifespan,
    )
    app.state.tool_client = tool_client
    app.state.completion = completion
    return app


def main():
    """Main entry point for the chat gateway."""
    app = create_app()
    logger.info(f"🚀 Starting chat gateway on http://{gateway_config.host}:{gateway_config.port}")
    uvicorn.run(app, host=gateway_config.host, port=gateway_config.port)


if __name__ == "__main__":
    main()
