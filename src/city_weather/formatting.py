"""Text rendering for get-weather results."""

from city_weather.models import WeatherSummary


def format_summary(summary: WeatherSummary) -> str:
    return (
        f"Weather in {summary.city_name}:\n"
        f"Temperature: {summary.temperature}\n"
        f"Condition: {summary.condition}"
    )


def format_error(city: str, error: BaseException) -> str:
    # Echoes the caller's original input; the lookup never resolved a name
    return f"Error getting weather for {city}: {error}"
