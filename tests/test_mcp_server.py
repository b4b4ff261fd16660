"""Tests for the FastMCP wiring: listing, dispatch, health and resources."""

import json

import pytest
from mcp import types
from starlette.testclient import TestClient

from mcp_server import create_server, health_payload
from tests.test_weather_tools import EXPECTED_TOOLS


@pytest.fixture
def server(app_ctx, settings):
    return create_server(app_ctx, settings)


class TestWeatherFastMCP:
    @pytest.mark.asyncio
    async def test_list_tools_comes_from_registry(self, server):
        tools = await server.list_tools()
        assert [tool.name for tool in tools] == EXPECTED_TOOLS
        assert tools[0].inputSchema["required"] == ["city"]

    @pytest.mark.asyncio
    async def test_call_tool_returns_call_tool_result(self, server):
        result = await server.call_tool("get_weather", {"city": "London"})
        assert isinstance(result, types.CallToolResult)
        assert result.isError is False
        assert result.content[0].text.startswith("**Current Weather in London")
        assert result.structuredContent["type"] == "current"

    @pytest.mark.asyncio
    async def test_unknown_tool_is_error_result(self, server):
        result = await server.call_tool("get_stock_price", {})
        assert result.isError is True
        assert result.content[0].text == "Unknown tool: `get_stock_price`"

    @pytest.mark.asyncio
    async def test_cache_stats_resource(self, server):
        await server.call_tool("get_weather", {"city": "London"})
        contents = list(await server.read_resource("cache://stats"))
        stats = json.loads(contents[0].content)
        assert stats["entries"] == 2
        assert stats["geocode_ttl_seconds"] == 3600

    @pytest.mark.asyncio
    async def test_config_resource(self, server):
        contents = list(await server.read_resource("config://server"))
        assert "Available Tools: 7 registered tools" in contents[0].content


class TestHealth:
    def test_health_payload(self, app_ctx, settings):
        payload = health_payload(app_ctx, settings)
        assert payload["status"] == "healthy"
        assert payload["toolCount"] == 7
        assert payload["transport"] == "streamable-http"
        assert payload["aiEnabled"] is False
        assert payload["cache"]["entries"] == 0

    def test_health_route(self, server):
        client = TestClient(server.streamable_http_app())
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["tools"] == EXPECTED_TOOLS
