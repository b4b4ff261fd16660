"""
Intent classification for chat messages and weather questions.
Pure functions over the message text.
"""

import random
import re
import string
from dataclasses import dataclass
from typing import Optional

WEATHER_KEYWORDS = ("weather", "forecast", "temp")
FORECAST_KEYWORDS = ("forecast", "week", "days")
FAHRENHEIT_KEYWORDS = ("fahrenheit", "farenheit", "fahrenhiet", "°f", "° f")

# Words that end a captured place name ("weather in paris today" -> "paris")
_TRAILING_WORDS = {
    "today", "tonight", "tomorrow", "now", "right", "currently", "this", "next",
    "week", "weekend", "days", "day", "please", "in", "for", "and", "like",
    "fahrenheit", "farenheit", "celsius", "degrees", "be", "going", "look",
    "looking", "over", "during", "on", "at",
}

# Words that are never a place on their own ("what's the weather" -> no city)
_FILLER_WORDS = {
    "the", "what", "whats", "what's", "s", "is", "it", "a", "an", "any", "my",
    "current", "today", "todays", "today's", "tomorrow", "tomorrows", "tomorrow's",
    "local", "weekly", "daily", "hourly", "good", "bad", "nice", "show", "me",
    "get", "give", "tell", "check", "how", "about", "your", "our", "this", "that",
    "week", "weeks", "week's", "day", "7-day", "10-day", "extended", "latest",
}

_LETTER = r"[^\W\d_]"
_WORD = rf"{_LETTER}(?:{_LETTER}|[.'\-])*"
# Place names span at most five words
_PLACE = rf"({_WORD}(?:\s+{_WORD}){{0,4}})"

_CITY_PATTERNS = (
    re.compile(rf"\b(?:weather|forecast|temperature|temp)\s+(?:like\s+)?(?:in|for|at)\s+{_PLACE}"),
    re.compile(rf"\b(?:in|for)\s+{_PLACE}\s*(?:'s\s+)?(?:weather|forecast)\b"),
    re.compile(rf"\b((?:{_LETTER}|['\-]){{1,40}})\s+(?:weather|forecast)\b"),
)

GREETING_RESPONSE = (
    "Hello! I'm your weather-enabled chat assistant. I can help you with weather "
    "forecasts for any city or just have a normal conversation. What would you like to know?"
)
HELP_RESPONSE = (
    "I can help you with:\n"
    "• **Weather Information:** Current weather for any city\n"
    "• **Forecasts:** Up to 16-day weather outlook\n"
    "• **Weather Details:** Temperature, humidity, wind, and more\n"
    "• **General Chat:** Feel free to ask me anything!\n\n"
    "Just ask me about the weather in any city like \"What's the weather in Paris?\" "
    "or we can chat about anything else!"
)
THANKS_RESPONSE = (
    "You're welcome! Is there anything else I can help you with? "
    "I'm always ready to provide weather updates or just chat."
)
GOODBYE_RESPONSE = (
    "Goodbye! It was nice chatting with you. Come back anytime if you need "
    "weather information or just want to talk!"
)
HOW_ARE_YOU_RESPONSE = (
    "I'm doing great, thank you for asking! I'm always excited to help with weather "
    "information and chat. How are you doing today?"
)
FALLBACK_RESPONSES = (
    "That's an interesting question! While I specialize in weather information, I'm happy to chat. "
    "Is there anything specific you'd like to know about?",
    "I'd love to help with that! I'm particularly good with weather-related questions, "
    "but feel free to ask me anything.",
    "Great question! I'm here to help with weather forecasts and general conversation. "
    "What else would you like to know?",
    "I understand what you're asking! While my specialty is weather information, I enjoy chatting "
    "about various topics. How can I assist you further?",
)


@dataclass(frozen=True)
class QuestionIntent:
    city: Optional[str]
    wants_forecast: bool
    fahrenheit: bool


def _contains_any(text: str, keywords) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def _has_word(text: str, *words: str) -> bool:
    return any(re.search(rf"\b{re.escape(word)}\b", text) for word in words)


def is_weather_query(text: str) -> bool:
    return _contains_any(text, WEATHER_KEYWORDS)


def wants_forecast(text: str) -> bool:
    return _contains_any(text, FORECAST_KEYWORDS)


def detect_fahrenheit(text: Optional[str]) -> bool:
    return _contains_any(text, FAHRENHEIT_KEYWORDS)


def _clean_place(raw: str) -> Optional[str]:
    words = []
    for word in raw.strip(" .'-").split():
        if word.endswith("'s"):
            word = word[:-2]
        if word in _TRAILING_WORDS:
            break
        words.append(word)
    if not words or (len(words) == 1 and words[0] in _FILLER_WORDS):
        return None
    return string.capwords(" ".join(words).strip(" .'-")) or None


def extract_city(text: Optional[str]) -> Optional[str]:
    """Best-effort place name from a free-text weather question."""
    if not text:
        return None
    lowered = re.sub(r"[?!,;:]", " ", text.lower())
    for pattern in _CITY_PATTERNS:
        for match in pattern.finditer(lowered):
            city = _clean_place(match.group(1))
            if city:
                return city
    return None


def normalize_city_answer(answer: Optional[str]) -> Optional[str]:
    """Turn a completion answer into a city name, ``NONE`` meaning no city."""
    if not answer:
        return None
    city = answer.strip().splitlines()[0].strip().strip("\"'.").strip()
    if not city or city.upper() == "NONE":
        return None
    return city


def classify_question(text: str, city: Optional[str] = None) -> QuestionIntent:
    """Decide city, forecast-vs-current and unit for a weather question."""
    return QuestionIntent(
        city=city or extract_city(text),
        wants_forecast=wants_forecast(text),
        fahrenheit=detect_fahrenheit(text),
    )


def generate_chat_response(text: str) -> str:
    """Canned replies for messages that are not about the weather."""
    lowered = (text or "").lower()

    if _has_word(lowered, "hello", "hi", "hey"):
        return GREETING_RESPONSE
    if "help" in lowered or "what can you do" in lowered:
        return HELP_RESPONSE
    if "thank" in lowered:
        return THANKS_RESPONSE
    if _has_word(lowered, "bye", "goodbye"):
        return GOODBYE_RESPONSE
    if "how are you" in lowered or "how do you feel" in lowered:
        return HOW_ARE_YOU_RESPONSE
    if "capital" in lowered and "england" in lowered:
        return (
            "The capital of England is London! It's also the capital of the United Kingdom. "
            "By the way, if you'd like to know the weather in London, just ask!"
        )
    if "capital" in lowered and ("france" in lowered or "french" in lowered):
        return (
            "The capital of France is Paris! It's a beautiful city known for the Eiffel Tower "
            "and its rich culture. Want to check the weather there?"
        )
    if "capital" in lowered and "japan" in lowered:
        return (
            "The capital of Japan is Tokyo! It's one of the largest cities in the world. "
            "I can get you the weather forecast for Tokyo if you're interested!"
        )
    if "favorite color" in lowered or "favourite colour" in lowered:
        return (
            "I'd say blue - like a clear sky on a perfect weather day! Speaking of which, "
            "I can tell you about the weather conditions anywhere you'd like to know."
        )

    return random.choice(FALLBACK_RESPONSES)
