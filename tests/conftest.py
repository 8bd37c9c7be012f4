import json
from typing import Optional

import httpx
import pytest

from city_weather.config.settings import HttpSettings, ServerSettings
from city_weather.services.http_client import OpenMeteoClient
from city_weather.services.weather import WeatherService

GEOCODING_HOST = "geocoding-api.open-meteo.com"
FORECAST_HOST = "api.open-meteo.com"

TOKYO_GEO = {
    "results": [{"latitude": 35.6895, "longitude": 139.6917, "name": "Tokyo"}]
}
TOKYO_FORECAST = {
    "current": {"temperature_2m": 20, "weather_code": 0},
    "current_units": {"temperature_2m": "°C"},
}


class FakeOpenMeteo:
    """
    Routes requests by host to canned responses and records every call.

    A response may be a dict (served as JSON), an httpx.Response, an
    exception instance (raised) or a callable taking the request.
    """

    def __init__(self, geocoding=TOKYO_GEO, forecast=TOKYO_FORECAST):
        self.geocoding = geocoding
        self.forecast = forecast
        self.requests: list[httpx.Request] = []

    def calls_to(self, host: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == GEOCODING_HOST:
            spec = self.geocoding
        elif request.url.host == FORECAST_HOST:
            spec = self.forecast
        else:
            return httpx.Response(404)

        if callable(spec):
            spec = spec(request)
        if isinstance(spec, Exception):
            raise spec
        if isinstance(spec, httpx.Response):
            return spec
        return httpx.Response(200, content=json.dumps(spec).encode("utf-8"))


def make_settings(
    max_attempts: int = 3, fallback_enabled: bool = False
) -> ServerSettings:
    return ServerSettings(
        fallback_enabled=fallback_enabled,
        http=HttpSettings(
            timeout=5.0, max_attempts=max_attempts, retry_base_delay=0.0
        ),
    )


@pytest.fixture
def fake_api() -> FakeOpenMeteo:
    return FakeOpenMeteo()


@pytest.fixture
async def service_factory(fake_api):
    """Build WeatherServices backed by the fake API; closes clients afterwards."""
    clients: list[httpx.AsyncClient] = []

    def _build(settings: Optional[ServerSettings] = None) -> WeatherService:
        settings = settings or make_settings()
        client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api))
        clients.append(client)
        return WeatherService(settings, OpenMeteoClient(settings.http, client=client))

    yield _build

    for client in clients:
        await client.aclose()
