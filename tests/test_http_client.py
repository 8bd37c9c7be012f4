import httpx
import pytest

from city_weather.config.settings import HttpSettings
from city_weather.errors import UpstreamError
from city_weather.services.http_client import OpenMeteoClient


def settings(**overrides) -> HttpSettings:
    values = {"timeout": 7.0, "http_proxy": None, "https_proxy": None}
    values.update(overrides)
    return HttpSettings(**values)


def test_client_config_without_proxies():
    config = OpenMeteoClient(settings()).client_config

    assert config["timeout"] == 7.0
    assert config["headers"]["User-Agent"] == "MCP Weather App"
    assert config["mounts"] == {}
    assert config["trust_env"] is False


def test_client_config_mounts_proxies():
    config = OpenMeteoClient(
        settings(https_proxy="http://proxy.local:8080")
    ).client_config

    assert list(config["mounts"]) == ["https://"]
    assert isinstance(config["mounts"]["https://"], httpx.AsyncHTTPTransport)


async def test_get_json_requires_open_client():
    with pytest.raises(RuntimeError):
        await OpenMeteoClient(settings()).get_json("https://example.com", {})


async def test_get_json_decodes_body():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["q"] == "x y"
        return httpx.Response(200, json={"ok": True})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        async with OpenMeteoClient(settings(), client=client) as api:
            assert await api.get_json("https://example.com/a", {"q": "x y"}) == {"ok": True}


async def test_get_json_rejects_error_status():
    transport = httpx.MockTransport(lambda request: httpx.Response(404))

    async with httpx.AsyncClient(transport=transport) as client:
        api = OpenMeteoClient(settings(), client=client)
        with pytest.raises(UpstreamError, match="HTTP error: 404"):
            await api.get_json("https://example.com/missing", {})


async def test_owned_client_is_closed():
    api = OpenMeteoClient(settings())

    async with api:
        assert api._client is not None

    assert api._client is None
