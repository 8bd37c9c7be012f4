"""
Weather server settings.

Two sections, both overridable from the environment or a local .env:

    HttpSettings    MCP_HTTP_* : per-call timeout, lookup attempts, backoff
                    unit, and the HTTP(S) proxies (HTTP_PROXY/HTTPS_PROXY
                    are read as well)
    ServerSettings  MCP_*      : server identity, fallback switch, log level

main() reads these once and passes them down; the HTTP client turns the
proxy fields into its own transport mounts.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class HttpSettings(BaseSettings):
    """
    HTTP client configuration for the Open-Meteo calls.

    Controls timeouts, retry budget, linear backoff and outbound proxies.
    """

    model_config = SettingsConfigDict(
        env_prefix="MCP_HTTP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    timeout: float = Field(
        default=10.0, ge=1.0, le=60.0, description="Per-request timeout in seconds"
    )

    max_attempts: int = Field(
        default=3, ge=1, le=10, description="Maximum number of lookup attempts"
    )

    retry_base_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Linear backoff unit in seconds (waits 1x, 2x, 3x, ...)",
    )

    http_proxy: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("http_proxy", "MCP_HTTP_PROXY", "HTTP_PROXY"),
        description="Proxy URL for plain HTTP requests",
    )

    https_proxy: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "https_proxy", "MCP_HTTPS_PROXY", "HTTPS_PROXY"
        ),
        description="Proxy URL for HTTPS requests",
    )


class ServerSettings(BaseSettings):
    """Top-level server settings; HTTP options live in the nested section."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MCP_",
        extra="ignore",
    )

    # ============= Server Identity =============

    server_name: str = Field(
        default="city-weather-mcp-server", description="MCP server name identifier"
    )

    server_version: str = Field(
        default="0.1.0", description="Server version for client compatibility"
    )

    # ============= Lookup Behaviour =============

    fallback_enabled: bool = Field(
        default=True,
        description="Answer known cities from the built-in table when live lookup fails",
    )

    # ============= Nested Configuration Sections =============

    http: HttpSettings = Field(
        default_factory=HttpSettings, description="HTTP client configuration"
    )

    # ============= Logging Configuration =============

    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level for server output",
    )


# ============= Process Settings =============

_settings: Optional[ServerSettings] = None


def get_settings() -> ServerSettings:
    """Return the process settings, reading the environment on first use."""
    global _settings
    if _settings is None:
        _settings = ServerSettings()
    return _settings
