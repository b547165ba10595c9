"""Appropriateness scoring for single wardrobe items."""

import pytest

from logic.weather_scoring import score_item_for_weather, score_item_with_breakdown, temperature_band
from models.wardrobe import WardrobeItemDescriptor
from models.weather import WeatherCondition, WeatherContext


def _weather(temperature: float, condition: str = "cloudy", humidity: float = 50, wind_speed: float = 5) -> WeatherContext:
    return WeatherContext(temperature=temperature, condition=condition, humidity=humidity, wind_speed=wind_speed)


def test_null_and_malformed_items_are_neutral() -> None:
    weather = _weather(35)
    assert score_item_for_weather(None, weather) == 0.5
    assert score_item_for_weather("not an item", weather) == 0.5
    assert score_item_for_weather({"tags": ["warm"]}, weather) == 0.5
    assert score_item_for_weather({"category": "tops", "tags": 42}, weather) == 0.5


def test_invalid_weather_is_neutral() -> None:
    item = WardrobeItemDescriptor(category="tops", tags=["warm"])
    assert score_item_for_weather(item, None) == 0.5
    assert score_item_for_weather(item, {"temperature": 30}) == 0.5


def test_scores_stay_within_bounds() -> None:
    extreme_items = [
        WardrobeItemDescriptor(category="shoes", tags=["light", "summer", "shorts", "sleeveless", "delicate", "suede"]),
        WardrobeItemDescriptor(category="outerwear", tags=["warm", "winter", "waterproof", "fitted", "heavy"]),
        WardrobeItemDescriptor(category="tops", tags=[]),
    ]
    weathers = [
        _weather(-10, "snowy", humidity=95, wind_speed=40),
        _weather(105, "sunny", humidity=95, wind_speed=30),
        _weather(45, "stormy", humidity=80, wind_speed=25),
        _weather(70, "foggy"),
    ]
    for weather in weathers:
        for item in extreme_items:
            assert 0.0 <= score_item_for_weather(item, weather) <= 1.0


def test_cold_weather_prefers_warm_over_light_items() -> None:
    weather = _weather(35)
    warm = WardrobeItemDescriptor(category="tops", tags=["warm", "long-sleeve"])
    light = WardrobeItemDescriptor(category="tops", tags=["light", "sleeveless"])
    assert score_item_for_weather(warm, weather) > score_item_for_weather(light, weather)


def test_rain_prefers_waterproof_over_suede() -> None:
    weather = _weather(60, "rainy")
    waterproof = WardrobeItemDescriptor(category="shoes", tags=["waterproof"])
    suede = WardrobeItemDescriptor(category="shoes", tags=["suede", "delicate"])
    assert score_item_for_weather(waterproof, weather) > score_item_for_weather(suede, weather)


def test_warm_sunny_day_scores_summer_top_high_and_winter_coat_low() -> None:
    weather = _weather(75, "sunny", humidity=60, wind_speed=8)
    summer_top = {"category": "tops", "tags": ["light", "breathable", "summer"]}
    winter_coat = {"category": "outerwear", "tags": ["heavy", "winter", "warm"]}
    assert score_item_for_weather(summer_top, weather) >= 0.7
    assert score_item_for_weather(winter_coat, weather) <= 0.3


def test_wind_rewards_fitted_and_penalises_loose_pieces() -> None:
    weather = _weather(70, "cloudy", wind_speed=20)
    fitted = WardrobeItemDescriptor(category="tops", tags=["fitted"])
    loose = WardrobeItemDescriptor(category="tops", tags=["loose"])
    assert score_item_for_weather(fitted, weather) > score_item_for_weather(loose, weather)


def test_untagged_outerwear_uses_category_as_weak_proxy() -> None:
    cold = _weather(40)
    untagged_coat = WardrobeItemDescriptor(category="outerwear")
    untagged_top = WardrobeItemDescriptor(category="tops")
    assert score_item_for_weather(untagged_coat, cold) > score_item_for_weather(untagged_top, cold)

    # Tags take over as soon as there are any.
    tagged_coat = WardrobeItemDescriptor(category="outerwear", tags=["light"])
    assert score_item_for_weather(tagged_coat, cold) < 0.5


def test_breakdown_names_applied_rules() -> None:
    weather = _weather(40, "rainy", humidity=90)
    score, adjustments = score_item_with_breakdown({"category": "outerwear", "tags": ["Waterproof", "warm"]}, weather)
    assert adjustments["cold_warm_layer"] == 0.2
    assert adjustments["rain_waterproof"] == 0.2
    assert score == pytest.approx(0.9)


def test_temperature_bands() -> None:
    assert temperature_band(20) == "freezing"
    assert temperature_band(49.9) == "cold"
    assert temperature_band(50) == "cool"
    assert temperature_band(74) == "mild"
    assert temperature_band(84) == "warm"
    assert temperature_band(85) == "hot"
    assert WeatherCondition.parse("RAINY") is WeatherCondition.RAINY
