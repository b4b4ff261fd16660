"""
Prompt builders for the completion service.
"""

from typing import Optional

from models import WeatherReport
from services.formatting import day_label, describe_weather_code, display_temperature, unit_symbol


def _current_lines(report: WeatherReport) -> str:
    current = report.forecast.current
    f = report.fahrenheit
    unit = unit_symbol(f)
    lines = [
        f"- Temperature: {display_temperature(current.temperature, f)}{unit} "
        f"(feels like {display_temperature(current.apparent_temperature, f)}{unit})",
        f"- Condition: {describe_weather_code(current.weather_code)}",
        f"- Humidity: {current.humidity}%",
        f"- Wind: {current.wind_speed} km/h",
        f"- Pressure: {current.pressure} hPa",
        f"- Cloud Cover: {current.cloud_cover}%",
        f"- Time: {'Day' if current.is_day else 'Night'}",
    ]
    if current.precipitation > 0:
        lines.append(f"- Precipitation: {current.precipitation}mm")
    return "\n".join(lines)


def _daily_lines(report: WeatherReport, days: int) -> str:
    f = report.fahrenheit
    unit = unit_symbol(f)
    lines = []
    for index, day in enumerate(report.forecast.daily[:days]):
        line = (
            f"{day_label(day, index)}: {display_temperature(day.temperature_min, f)}-"
            f"{display_temperature(day.temperature_max, f)}{unit}, "
            f"{describe_weather_code(day.weather_code)}"
        )
        if day.precipitation_sum > 0:
            line += f", {day.precipitation_sum}mm rain"
        lines.append(line)
    return "\n".join(lines)


def current_weather_prompt(report: WeatherReport, place: str) -> str:
    return f"""You are a helpful weather assistant. Analyze this current weather data for {place} and provide a conversational, helpful response.

Weather Data:
{_current_lines(report)}

Please provide:
1. A friendly summary of current conditions
2. What it feels like outside
3. Any practical advice (clothing, activities, etc.)
4. Keep it conversational and helpful (2-3 sentences)

Use {unit_symbol(report.fahrenheit)} for all temperatures.
Format as natural conversational text, not bullet points."""


def forecast_prompt(report: WeatherReport, place: str, days: int) -> str:
    shown = min(days, len(report.forecast.daily))
    return f"""You are a helpful weather assistant. Analyze this {shown}-day weather forecast for {place} and provide useful insights.

Current Weather:
{_current_lines(report)}

{shown}-Day Forecast:
{_daily_lines(report, days)}

Please provide:
1. A summary of the weather pattern
2. Highlight any significant changes or notable weather
3. Practical advice for planning activities
4. Best and worst days in the forecast
5. Keep it conversational and helpful (3-4 sentences)

Use {unit_symbol(report.fahrenheit)} for all temperatures.
Format as natural conversational text, not bullet points."""


def question_prompt(question: str, report: Optional[WeatherReport] = None, city: Optional[str] = None) -> str:
    prompt = f'You are a helpful weather assistant. Answer this weather-related question: "{question}"'
    if report is not None and city:
        prompt += f"\n\nHere's current weather context for {city}:\n{_current_lines(report)}"
    prompt += "\n\nProvide a helpful, conversational response. If you need specific location information, mention that."
    return prompt


def city_extraction_prompt(message: str) -> str:
    return f"""Extract the city or place name the user wants weather information for.

Message: "{message}"

Reply with only the place name, in its usual English spelling (for example "New York" or "Paris").
If the message does not mention a place, reply with exactly NONE."""
