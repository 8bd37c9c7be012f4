from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastmcp import FastMCP
from fastmcp.utilities.logging import get_logger

from city_weather.config.settings import ServerSettings, get_settings
from city_weather.services.http_client import OpenMeteoClient
from city_weather.services.weather import WeatherService

logger = get_logger(__name__)


@dataclass
class AppContext:
    weather_service: WeatherService
    settings: ServerSettings


@asynccontextmanager
async def weather_service_scope(settings: ServerSettings):
    """Open an HTTP client and yield a WeatherService bound to it."""
    async with OpenMeteoClient(settings.http) as client:
        yield WeatherService(settings, client)


@asynccontextmanager
async def app_lifespan(mcp: FastMCP):
    """Initialize the weather service for the MCP server."""
    logger.info("Starting MCP Weather Server")

    settings = get_settings()
    async with weather_service_scope(settings) as weather_service:
        try:
            yield AppContext(weather_service=weather_service, settings=settings)
        finally:
            logger.info("Shutting down MCP Weather Server")
