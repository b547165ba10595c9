from logic.weather_suggestions import DEFAULT_SUGGESTION, get_weather_based_suggestions
from models.weather import WeatherContext


def _joined(weather: WeatherContext) -> str:
    return " | ".join(get_weather_based_suggestions(weather)).lower()


def test_missing_weather_returns_default_advice() -> None:
    assert get_weather_based_suggestions(None) == [DEFAULT_SUGGESTION]
    assert get_weather_based_suggestions({"temperature": 20}) == [DEFAULT_SUGGESTION]


def test_cold_weather_mentions_coat_and_boots() -> None:
    text = _joined(WeatherContext(temperature=35, condition="cloudy"))
    assert "coat" in text
    assert "warm" in text
    assert "waterproof boots" in text


def test_scorching_weather_mentions_breathable_fabric_and_sun() -> None:
    text = _joined(WeatherContext(temperature=95, condition="sunny", humidity=30))
    assert "breathable" in text
    assert "sun protection" in text


def test_rain_and_humidity_add_condition_advice() -> None:
    suggestions = get_weather_based_suggestions(
        WeatherContext(temperature=60, condition="rainy", humidity=90, wind_speed=5)
    )
    text = " | ".join(suggestions).lower()
    assert "waterproof or water-resistant" in text
    assert "quick-dry" in text
    assert "moisture-wicking" in text
    assert len(suggestions) == len(set(suggestions))


def test_wind_advice_only_above_threshold() -> None:
    calm = _joined(WeatherContext(temperature=70, condition="cloudy", wind_speed=15))
    gusty = get_weather_based_suggestions(WeatherContext(temperature=70, condition="windy", wind_speed=25))
    assert "secure loose items" not in calm
    assert "Secure loose items and accessories" in gusty
    # The windy condition and the wind speed both recommend this; it appears once.
    assert gusty.count("Consider wind-resistant outerwear") == 1
