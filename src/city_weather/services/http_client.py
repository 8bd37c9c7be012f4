"""
HTTP Client for the Open-Meteo APIs

Provides a thin async HTTP client for the geocoding and forecast endpoints:
- Per-request timeout management (expiry cancels the call)
- Explicit proxy mounts built from settings
- Uniform conversion of every transport/status/body failure into UpstreamError
- Debug logging of requests and truncated responses

Retrying is deliberately not done here: a whole lookup is retried by
services.retry so both calls are repeated together.

Classes:
    OpenMeteoClient: Async JSON GET client configured from HttpSettings
"""

import json
from typing import Any, Optional

import httpx
from fastmcp.utilities.logging import get_logger

from city_weather.config.constants import DEFAULT_HEADERS, LOG_BODY_PREVIEW
from city_weather.config.settings import HttpSettings
from city_weather.errors import UpstreamError


class OpenMeteoClient:
    """
    Async JSON client with settings-driven timeouts and proxies.

    Use as an async context manager, or pass an existing
    ``httpx.AsyncClient`` (the caller then owns its lifecycle).
    """

    def __init__(
        self,
        settings: HttpSettings,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings
        self.logger = get_logger(self.__class__.__name__)
        self.timeout = settings.timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client_config(self) -> dict:
        """
        Get standardized HTTP client configuration.

        Returns:
            dict: Configuration for httpx.AsyncClient with timeout, default
                  headers, redirects and proxy mounts
        """
        mounts = {}
        if self.settings.http_proxy:
            mounts["http://"] = httpx.AsyncHTTPTransport(
                proxy=self.settings.http_proxy
            )
        if self.settings.https_proxy:
            mounts["https://"] = httpx.AsyncHTTPTransport(
                proxy=self.settings.https_proxy
            )
        return {
            "timeout": self.timeout,
            "headers": DEFAULT_HEADERS,
            "follow_redirects": True,
            "mounts": mounts,
            # Proxies come from settings only, not from ambient env lookups
            "trust_env": False,
        }

    async def __aenter__(self) -> "OpenMeteoClient":
        if self._client is None:
            self._client = httpx.AsyncClient(**self.client_config)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, params: dict[str, Any]) -> Any:
        """
        Issue one GET request and decode its JSON body.

        Args:
            url: Endpoint URL
            params: Query parameters (URL-encoded by httpx)

        Returns:
            Any: Decoded JSON body

        Raises:
            UpstreamError: On network error, timeout, status >= 400 or a body
                that is not valid JSON
        """
        if self._client is None:
            raise RuntimeError("OpenMeteoClient used outside of 'async with'")

        self.logger.debug(f"Making HTTP request to: {url} params={params}")
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            self.logger.debug(f"Request timed out: {url}")
            raise UpstreamError("Request timed out") from e
        except httpx.HTTPError as e:
            self.logger.debug(f"Request error: {e}")
            raise UpstreamError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            self.logger.debug(f"HTTP error: {response.status_code}")
            raise UpstreamError(f"HTTP error: {response.status_code}")

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.debug(f"Failed to parse response: {e}")
            raise UpstreamError(f"Failed to parse response: {e}") from e

        self.logger.debug(
            f"Received response: {response.text[:LOG_BODY_PREVIEW]}..."
        )
        return data
