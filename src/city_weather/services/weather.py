"""
Weather Lookup Service

Resolves a city name to coordinates through the Open-Meteo geocoding API,
fetches current conditions from the forecast API and maps the WMO weather
code to a readable condition.

Classes:
    WeatherService: Two-stage live lookup plus the resilient wrapper
"""

from typing import Any, Optional

from fastmcp.utilities.logging import get_logger

from city_weather.config.constants import (
    FALLBACK_WEATHER,
    FORECAST_API_URL,
    FORECAST_CURRENT_FIELDS,
    FORECAST_TIMEZONE,
    GEOCODING_API_URL,
    GEOCODING_LANGUAGE,
    GEOCODING_RESULT_COUNT,
    UNKNOWN_CONDITION,
    WEATHER_CODES,
)
from city_weather.config.settings import ServerSettings
from city_weather.errors import NotFoundError, UpstreamError
from city_weather.models import CurrentConditions, GeoResult, WeatherSummary
from city_weather.services.http_client import OpenMeteoClient
from city_weather.services.retry import invoke


def describe_weather_code(code: Any) -> str:
    """Map a WMO weather code to text; unmapped codes give 'Unknown'."""
    return WEATHER_CODES.get(code, UNKNOWN_CONDITION)


def format_temperature(value: float, unit: str) -> str:
    # 20.0 renders as "20", 20.5 stays "20.5"
    if float(value).is_integer():
        return f"{int(value)}{unit}"
    return f"{value}{unit}"


class WeatherService:
    """
    Live weather lookup for a single city.

    Each lookup makes exactly two sequential upstream calls (geocode, then
    forecast); nothing is cached between lookups.
    """

    def __init__(self, settings: ServerSettings, client: OpenMeteoClient):
        """
        Initialize the weather service.

        Args:
            settings: Server settings (retry budget, fallback switch)
            client: Open HTTP client used for both upstream calls
        """
        self.settings = settings
        self.client = client
        self.logger = get_logger(self.__class__.__name__)

    async def geocode(self, name: str) -> GeoResult:
        """
        Resolve a city name to its first geocoding match.

        Raises:
            NotFoundError: If the service returns no results
            UpstreamError: If the call fails or the match is malformed
        """
        data = await self.client.get_json(
            GEOCODING_API_URL,
            {
                "name": name,
                "count": GEOCODING_RESULT_COUNT,
                "language": GEOCODING_LANGUAGE,
            },
        )

        if not isinstance(data, dict):
            raise UpstreamError("Failed to parse response: expected a JSON object")

        results = data.get("results")
        if not results:
            self.logger.debug(f'City "{name}" not found in geocoding API')
            raise NotFoundError(name)

        if not isinstance(results, list):
            raise UpstreamError("Failed to parse response: 'results' is not a list")

        try:
            geo = GeoResult.model_validate(results[0])
        except ValueError as e:
            raise UpstreamError(f"Failed to parse response: {e}") from e

        self.logger.debug(
            f"Found coordinates for {geo.name}: {geo.latitude}, {geo.longitude}"
        )
        return geo

    async def current_conditions(self, geo: GeoResult) -> CurrentConditions:
        """
        Fetch current temperature and weather code for a location.

        Raises:
            UpstreamError: If the call fails or the body lacks current fields
        """
        data = await self.client.get_json(
            FORECAST_API_URL,
            {
                "latitude": geo.latitude,
                "longitude": geo.longitude,
                "current": FORECAST_CURRENT_FIELDS,
                "timezone": FORECAST_TIMEZONE,
            },
        )

        try:
            return CurrentConditions(
                temperature_value=data["current"]["temperature_2m"],
                temperature_unit=data["current_units"]["temperature_2m"],
                weather_code=data["current"]["weather_code"],
            )
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError(f"Failed to parse response: {e!r}") from e

    async def lookup(self, city: str) -> WeatherSummary:
        """
        Look up current weather for a city with one live attempt.

        The input is trimmed but otherwise passed through verbatim; the
        summary carries the geocoder's resolved name.

        Args:
            city: City name as supplied by the caller

        Returns:
            WeatherSummary: Resolved name, formatted temperature, condition
        """
        self.logger.debug(f"Getting weather for city: {city}")
        geo = await self.geocode(city.strip())
        current = await self.current_conditions(geo)

        condition = describe_weather_code(current.weather_code)
        self.logger.debug(f"Weather description: {condition}")

        return WeatherSummary(
            city_name=geo.name,
            temperature=format_temperature(
                current.temperature_value, current.temperature_unit
            ),
            condition=condition,
        )

    def fallback_for(self, city: str) -> Optional[WeatherSummary]:
        """Return built-in data for an exact city key, or None."""
        if not self.settings.fallback_enabled:
            return None
        return FALLBACK_WEATHER.get(city)

    async def get_weather(self, city: str) -> WeatherSummary:
        """
        Look up weather with retry, linear backoff and fallback.

        Raises:
            WeatherError: The last lookup error once attempts are exhausted
                          and no fallback entry exists
        """
        http = self.settings.http
        try:
            return await invoke(
                lambda: self.lookup(city),
                max_attempts=http.max_attempts,
                base_delay=http.retry_base_delay,
                fallback=lambda: self.fallback_for(city),
            )
        except Exception as e:
            self.logger.error(f"Error getting weather for city {city}: {e}")
            raise
