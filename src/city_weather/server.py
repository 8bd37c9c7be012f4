#!/usr/bin/env python3
"""
City Weather MCP Server

Exposes a single ``get-weather`` tool over one of two stdio transports:

- ``lines`` (default): one JSON request envelope per line in, one JSON
  response envelope per line out
- ``stdio``: the standard MCP protocol, handled by FastMCP

Logs go to stderr; stdout carries responses only.
"""

import argparse
import asyncio
import sys

from fastmcp import Context, FastMCP
from fastmcp.utilities.logging import configure_logging, get_logger

from city_weather.app_context import AppContext, app_lifespan, weather_service_scope
from city_weather.config.constants import TOOL_NAME
from city_weather.config.settings import ServerSettings, get_settings
from city_weather.transport import (
    RequestHandler,
    open_stdin_reader,
    run_weather_tool,
    serve,
    write_stdout,
)

# Initialize logger for server lifecycle events
logger = get_logger(__name__)


# ============= MCP SERVER INITIALIZATION =============

mcp = FastMCP(
    name=get_settings().server_name,
    instructions="You are a weather assistant",
    lifespan=app_lifespan,
)


@mcp.tool(name=TOOL_NAME)
async def get_weather(city: str, ctx: Context) -> str:
    """Get current weather for a city.

    Args:
        city: City name (e.g. Tokyo, New York)
    """
    app: AppContext = ctx.request_context.lifespan_context
    return await run_weather_tool(app.weather_service.get_weather, city)


# ============= JSON-LINES TRANSPORT =============


async def serve_lines(settings: ServerSettings) -> None:
    """Serve JSON-lines requests from stdin until EOF."""
    async with weather_service_scope(settings) as weather_service:
        handler = RequestHandler(weather_service.get_weather)
        logger.debug("MCP server ready to receive requests")
        reader = await open_stdin_reader()
        await serve(reader.readline, handler, write_stdout)


# ============= SERVER ENTRY POINT =============


def main() -> None:
    parser = argparse.ArgumentParser(description="City weather MCP server")
    parser.add_argument(
        "--transport",
        choices=["lines", "stdio"],
        default="lines",
        help="'lines' for JSON-lines envelopes, 'stdio' for MCP",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override MCP_LOG_LEVEL",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(level=args.log_level or settings.log_level)
    logger.debug(f"Starting MCP Weather Server ({args.transport})")

    try:
        if args.transport == "stdio":
            mcp.run(transport="stdio")
        else:
            asyncio.run(serve_lines(settings))
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception(f"Fatal error in main: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
