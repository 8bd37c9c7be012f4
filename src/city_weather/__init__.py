"""City weather MCP server: geocoding + forecast lookup with retry and fallback."""

__version__ = "0.1.0"
