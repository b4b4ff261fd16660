"""
Shared fixtures: an app context wired to in-memory providers.
"""

import pytest

from config import MCPConfig
from mcp_server import build_app_context
from tests.fakes import FakeClock, FakeWeatherSource


@pytest.fixture
def weather_source():
    return FakeWeatherSource()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return MCPConfig(weather_cache_ttl_seconds=600, geocode_ttl_multiplier=6)


@pytest.fixture
def app_ctx(weather_source, settings):
    """Tools backed by the fake source, template rendering only."""
    return build_app_context(
        settings=settings, source=weather_source, use_default_completion=False
    )


@pytest.fixture
def registry(app_ctx):
    return app_ctx.registry
