import pytest

from city_weather.config.settings import HttpSettings, ServerSettings

PROXY_VARS = [
    "HTTP_PROXY", "http_proxy", "HTTPS_PROXY", "https_proxy",
    "MCP_HTTP_PROXY", "MCP_HTTPS_PROXY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in PROXY_VARS + ["MCP_HTTP_TIMEOUT", "MCP_HTTP_MAX_ATTEMPTS", "MCP_FALLBACK_ENABLED"]:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = ServerSettings()

    assert settings.fallback_enabled is True
    assert settings.log_level == "INFO"
    assert settings.http.timeout == 10.0
    assert settings.http.max_attempts == 3
    assert settings.http.retry_base_delay == 1.0
    assert settings.http.http_proxy is None
    assert settings.http.https_proxy is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("MCP_HTTP_TIMEOUT", "5")
    monkeypatch.setenv("MCP_HTTP_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("MCP_FALLBACK_ENABLED", "false")

    settings = ServerSettings()

    assert settings.http.timeout == 5.0
    assert settings.http.max_attempts == 5
    assert settings.fallback_enabled is False


def test_standard_proxy_variables(monkeypatch):
    monkeypatch.setenv("HTTPS_PROXY", "http://proxy.local:3128")

    assert HttpSettings().https_proxy == "http://proxy.local:3128"


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        HttpSettings(max_attempts=0)
