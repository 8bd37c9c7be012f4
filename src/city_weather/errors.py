class WeatherError(Exception):
    """Base exception for the weather server."""
    pass


class NotFoundError(WeatherError):
    """Raised when geocoding yields no match for a city."""

    def __init__(self, city: str):
        self.city = city
        super().__init__(f'City "{city}" not found')


class UpstreamError(WeatherError):
    """Raised when a geocoding or forecast call fails (network, timeout, status, body)."""
    pass


class ParseError(WeatherError):
    """Raised when an inbound message is not a valid JSON request object."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to parse request: {detail}")


class UnknownToolError(WeatherError):
    """Raised when a request names a tool this server does not provide."""

    def __init__(self, tool):
        self.tool = tool
        super().__init__(f"Unknown tool: {tool}")
