"""Tests for the template renderer."""

import pytest

from models import DailyForecast, Location
from services.formatting import (
    day_label,
    describe_weather_code,
    display_temperature,
    format_geocode_results,
    location_label,
)


@pytest.mark.parametrize(
    "celsius, fahrenheit, expected",
    [(14.5, False, 15), (14.4, False, 14), (-0.5, False, 0), (-1.6, False, -2),
     (0, True, 32), (100, True, 212), (-40, True, -40), (21.3, True, 70)],
)
def test_display_temperature(celsius, fahrenheit, expected):
    assert display_temperature(celsius, fahrenheit) == expected


def test_weather_codes():
    assert describe_weather_code(0) == "Clear sky"
    assert describe_weather_code(95) == "Thunderstorm"
    assert describe_weather_code(42) == "Weather code 42"


def test_location_label_skips_missing_parts():
    assert location_label(Location(name="Monaco", latitude=43.7, longitude=7.4)) == "Monaco"


def test_day_label_falls_back_to_raw_date():
    day = DailyForecast(date="someday", temperature_max=1.0, temperature_min=0.0)
    assert day_label(day, 3) == "someday"


def test_geocode_results_without_optional_fields():
    text = format_geocode_results("Monaco", [Location(name="Monaco", latitude=43.73, longitude=7.42)])
    assert "1. **Monaco**" in text
    assert "📍 43.7300, 7.4200" in text
    assert "Population" not in text
