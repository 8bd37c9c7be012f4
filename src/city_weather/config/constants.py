"""
Fixed values for the weather server: Open-Meteo endpoints and query
parameters, envelope identifiers, and the read-only weather-code and
fallback tables.
"""

from types import MappingProxyType

from city_weather.models import WeatherSummary

# ============= HTTP CLIENT CONFIGURATION =============

DEFAULT_HEADERS = {
    "User-Agent": "MCP Weather App",
    "Accept": "application/json",
}

# Max characters of a response body echoed into debug logs
LOG_BODY_PREVIEW = 100

# ============= JSON-LINES TRANSPORT =============

# Longest accepted request line, newline included
MAX_LINE_BYTES = 1024 * 1024

# ============= OPEN-METEO API CONFIGURATION =============

GEOCODING_API_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_API_URL = "https://api.open-meteo.com/v1/forecast"

GEOCODING_RESULT_COUNT = 1
GEOCODING_LANGUAGE = "en"

FORECAST_CURRENT_FIELDS = "temperature_2m,weather_code"
FORECAST_TIMEZONE = "Asia/Tokyo"

# ============= PROTOCOL =============

TOOL_NAME = "get-weather"
REQUEST_TYPE = "request"
RESPONSE_TYPE = "response"
UNKNOWN_REQUEST_ID = "unknown"

# ============= WEATHER CODES (WMO) =============

UNKNOWN_CONDITION = "Unknown"

WEATHER_CODES = MappingProxyType(
    {
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
)

# ============= FALLBACK DATA =============

# Keys are matched exactly (case-sensitive) against the raw city argument
FALLBACK_WEATHER = MappingProxyType(
    {
        "Tokyo": WeatherSummary(
            city_name="Tokyo", temperature="20°C", condition="Clear sky"
        ),
        "Osaka": WeatherSummary(
            city_name="Osaka", temperature="21°C", condition="Mainly clear"
        ),
        "Fukuoka": WeatherSummary(
            city_name="Fukuoka", temperature="22°C", condition="Partly cloudy"
        ),
        "Moscow": WeatherSummary(
            city_name="Moscow", temperature="5°C", condition="Overcast"
        ),
        "New York": WeatherSummary(
            city_name="New York", temperature="15°C", condition="Slight rain"
        ),
    }
)
