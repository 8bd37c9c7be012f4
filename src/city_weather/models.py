"""
Data Models

Pydantic models for the upstream Open-Meteo payloads we interpret, the
weather summary handed to the formatter, and the JSON-lines transport
envelopes.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GeoResult(BaseModel):
    """First geocoding match for a queried city name."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    name: str


class CurrentConditions(BaseModel):
    """Current observation for a coordinate pair."""

    model_config = ConfigDict(frozen=True)

    temperature_value: float
    temperature_unit: str
    weather_code: int


class WeatherSummary(BaseModel):
    """
    Rendered unit of output for one city.

    Built either from a complete live lookup or from the fallback table,
    never partially.
    """

    model_config = ConfigDict(frozen=True)

    city_name: str
    temperature: str = Field(description="Value and unit, e.g. '20°C'")
    condition: str


# ============= TRANSPORT ENVELOPES =============


class ToolRequest(BaseModel):
    type: Optional[str] = None
    id: Union[str, int] = "unknown"
    tool: Optional[str] = None
    params: dict[str, Any] = Field(default_factory=dict)


class WeatherParams(BaseModel):
    city: str = Field(min_length=1, description="City name to look up")


class TextContent(BaseModel):
    type: str = "text"
    text: str


class ToolResult(BaseModel):
    content: list[TextContent]


class ErrorBody(BaseModel):
    message: str


class ToolResponse(BaseModel):
    type: str = "response"
    id: Union[str, int]
    result: Optional[ToolResult] = None
    error: Optional[ErrorBody] = None

    def to_wire(self) -> dict:
        """Serialize for the wire, omitting whichever of result/error is unset."""
        return self.model_dump(exclude_none=True)
