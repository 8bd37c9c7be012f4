from city_weather.errors import NotFoundError
from city_weather.formatting import format_error, format_summary
from city_weather.models import WeatherSummary


def test_summary_text():
    summary = WeatherSummary(city_name="Tokyo", temperature="20°C", condition="Clear sky")

    text = format_summary(summary)

    assert text == "Weather in Tokyo:\nTemperature: 20°C\nCondition: Clear sky"
    assert "Temperature:" in text
    assert "Condition:" in text


def test_error_text_echoes_original_input():
    error = NotFoundError("Paris")

    assert format_error("  Paris ", error) == (
        'Error getting weather for   Paris : City "Paris" not found'
    )
