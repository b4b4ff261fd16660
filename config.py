"""
Configuration for the weather MCP server and chat gateway.
Values come from environment variables with sensible local defaults.
"""

import os
from pydantic import BaseModel, Field


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


class MCPConfig(BaseModel):
    """MCP server configuration."""

    server_name: str = "weather-mcp-server"
    server_version: str = "1.0.0"
    host: str = Field(default_factory=lambda: os.getenv("MCP_HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: _env_int("MCP_SERVER_PORT", 3001))

    # Cache settings
    weather_cache_ttl_seconds: float = Field(
        default_factory=lambda: _env_float("WEATHER_CACHE_TTL_SECONDS", 600)
    )
    geocode_ttl_multiplier: int = Field(
        default_factory=lambda: _env_int("GEOCODE_TTL_MULTIPLIER", 6)
    )

    # Provider calls
    request_timeout_seconds: float = Field(
        default_factory=lambda: _env_float("REQUEST_TIMEOUT_SECONDS", 30)
    )


class LLMConfig(BaseModel):
    """Text-completion provider configuration."""

    api_key: str = Field(
        default_factory=lambda: os.getenv("CLAUDE_API_KEY")
        or os.getenv("ANTHROPIC_API_KEY", "")
    )
    model: str = Field(
        default_factory=lambda: os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5-20250929")
    )
    max_tokens: int = 1000
    timeout_seconds: float = Field(
        default_factory=lambda: _env_float("LLM_TIMEOUT_SECONDS", 30)
    )

    @property
    def enabled(self) -> bool:
        return bool(self.api_key) and self.api_key != "your_claude_api_key_here"


class GatewayConfig(BaseModel):
    """Chat gateway configuration."""

    host: str = Field(default_factory=lambda: os.getenv("GATEWAY_HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: _env_int("PORT", 3000))
    mcp_server_url: str = Field(
        default_factory=lambda: os.getenv("MCP_SERVER_URL", "http://localhost:3001")
    )
    client_name: str = "weather-chat-client"
    client_version: str = "1.0.0"
    request_timeout_seconds: float = Field(
        default_factory=lambda: _env_float("REQUEST_TIMEOUT_SECONDS", 30)
    )


class EndpointConfig:
    """
    Open-Meteo endpoint configuration.
    Both APIs are free and need no key.
    """

    def __init__(self):
        self.geocoding_base_url = os.getenv(
            "GEOCODING_BASE_URL", "https://geocoding-api.open-meteo.com/v1"
        )
        self.weather_base_url = os.getenv(
            "WEATHER_BASE_URL", "https://api.open-meteo.com/v1"
        )

    @property
    def geocode_search(self) -> str:
        """City search endpoint."""
        return self.geocoding_base_url + "/search"

    @property
    def forecast(self) -> str:
        """Current and daily forecast endpoint."""
        return self.weather_base_url + "/forecast"


# Global instances
config = MCPConfig()
llm_config = LLMConfig()
gateway_config = GatewayConfig()
ENDPOINTS = EndpointConfig()
