"""
Deterministic Markdown rendering of weather reports.
Used whenever the completion service is absent or fails.
"""

import math
from datetime import date
from typing import List, Optional

from models import CurrentConditions, DailyForecast, Location, WeatherReport

# WMO weather interpretation codes
WEATHER_CODES = {
    0: "Clear sky",
    1: "Mainly clear",
    2: "Partly cloudy",
    3: "Overcast",
    45: "Fog",
    48: "Depositing rime fog",
    51: "Light drizzle",
    53: "Moderate drizzle",
    55: "Dense drizzle",
    56: "Light freezing drizzle",
    57: "Dense freezing drizzle",
    61: "Slight rain",
    63: "Moderate rain",
    65: "Heavy rain",
    66: "Light freezing rain",
    67: "Heavy freezing rain",
    71: "Slight snow fall",
    73: "Moderate snow fall",
    75: "Heavy snow fall",
    77: "Snow grains",
    80: "Slight rain showers",
    81: "Moderate rain showers",
    82: "Violent rain showers",
    85: "Slight snow showers",
    86: "Heavy snow showers",
    95: "Thunderstorm",
    96: "Thunderstorm with slight hail",
    99: "Thunderstorm with heavy hail",
}


def describe_weather_code(code: Optional[int]) -> str:
    return WEATHER_CODES.get(code, f"Weather code {code}")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def display_temperature(celsius: float, fahrenheit: bool = False) -> int:
    """Whole-degree temperature in the requested unit."""
    if fahrenheit:
        return round_half_up(celsius * 9 / 5 + 32)
    return round_half_up(celsius)


def unit_symbol(fahrenheit: bool = False) -> str:
    return "°F" if fahrenheit else "°C"


def location_label(location: Location) -> str:
    parts = [location.name, location.admin1, location.country]
    return ", ".join(part for part in parts if part)


def day_label(day: DailyForecast, index: int) -> str:
    """``Today, Mar 3`` for the first day, ``Tue, Mar 4`` afterwards."""
    try:
        parsed = date.fromisoformat(day.date)
    except ValueError:
        return day.date
    name = "Today" if index == 0 else f"{parsed:%a}"
    return f"{name}, {parsed:%b} {parsed.day}"


def format_current_weather(report: WeatherReport) -> str:
    current: CurrentConditions = report.forecast.current
    location = report.location
    f = report.fahrenheit
    unit = unit_symbol(f)

    text = f"**Current Weather in {location_label(location)}**\n\n"
    text += (
        f"🌡️ **Temperature:** {display_temperature(current.temperature, f)}{unit} "
        f"(feels like {display_temperature(current.apparent_temperature, f)}{unit})\n"
    )
    text += f"☁️ **Condition:** {describe_weather_code(current.weather_code)}\n"
    if current.humidity is not None:
        text += f"💧 **Humidity:** {round_half_up(current.humidity)}%\n"
    if current.wind_speed is not None:
        text += f"🌬️ **Wind:** {current.wind_speed} km/h"
        if current.wind_gusts > 0:
            text += f" (gusts up to {current.wind_gusts} km/h)"
        text += "\n"
    if current.pressure is not None:
        text += f"📊 **Pressure:** {current.pressure} hPa\n"
    if current.cloud_cover is not None:
        text += f"☁️ **Cloud Cover:** {round_half_up(current.cloud_cover)}%\n"
    if current.precipitation > 0:
        text += f"🌧️ **Precipitation:** {current.precipitation} mm\n"

    time_of_day = "☀️ Day" if current.is_day else "🌙 Night"
    text += f"🕐 **Time of Day:** {time_of_day}\n"

    text += f"\n📍 **Location:** {location.latitude:.2f}°, {location.longitude:.2f}°"
    if location.elevation:
        text += f" ({round_half_up(location.elevation)}m elevation)"
    return text


def format_forecast(report: WeatherReport, days: int = 7) -> str:
    location = report.location
    f = report.fahrenheit
    unit = unit_symbol(f)
    shown = report.forecast.daily[:days]

    text = f"**{len(shown)}-Day Weather Forecast for {location_label(location)}**\n\n"
    for index, day in enumerate(shown):
        low = display_temperature(day.temperature_min, f)
        high = display_temperature(day.temperature_max, f)
        text += f"📅 **{day_label(day, index)}**\n"
        text += f"   🌡️ {low}° - {high}{unit}\n"
        text += f"   ☁️ {describe_weather_code(day.weather_code)}\n"

        if day.precipitation_sum > 0:
            text += f"   🌧️ {day.precipitation_sum}mm rain"
            if day.precipitation_probability:
                text += f" ({round_half_up(day.precipitation_probability)}% chance)"
            text += "\n"

        if day.wind_speed_max > 10:
            text += f"   💨 Wind up to {day.wind_speed_max} km/h\n"
        text += "\n"
    return text.rstrip() + "\n"


def format_geocode_results(city: str, locations: List[Location]) -> str:
    text = f'**Geocoding results for "{city}":**\n\n'
    if not locations:
        return text + "No locations found."

    for index, location in enumerate(locations, start=1):
        text += f"{index}. **{location_label(location)}**\n"
        text += f"   📍 {location.latitude:.4f}, {location.longitude:.4f}\n"
        if location.population:
            text += f"   👥 Population: {location.population:,}\n"
        if location.elevation:
            text += f"   ⛰️ Elevation: {round_half_up(location.elevation)}m\n"
        if location.timezone:
            text += f"   🕰️ Timezone: {location.timezone}\n"
        text += "\n"
    return text.rstrip() + "\n"
