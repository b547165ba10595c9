"""Canned styling advice derived from a weather context."""

from __future__ import annotations

from typing import List

from models.weather import WeatherCondition, is_valid_weather

DEFAULT_SUGGESTION = "Check the weather and dress accordingly"


def _temperature_suggestions(temperature: float) -> List[str]:
    if temperature < 32:
        return [
            "Layer up with warm outerwear",
            "Don't forget gloves and a hat",
            "Waterproof boots recommended",
        ]
    if temperature < 40:
        return [
            "A warm coat is essential",
            "Layer for warmth",
            "Waterproof boots recommended",
        ]
    if temperature < 50:
        return [
            "A warm jacket or coat is essential",
            "Consider layering for warmth",
            "Closed-toe shoes recommended",
        ]
    if temperature < 65:
        return [
            "Light jacket or cardigan recommended",
            "Perfect weather for layering",
        ]
    if temperature < 75:
        return [
            "Ideal weather for most outfits",
            "Light layers work well",
        ]
    if temperature < 85:
        return [
            "Light, breathable fabrics recommended",
            "Consider short sleeves or sleeveless",
        ]
    if temperature < 90:
        return [
            "Light, breathable fabrics recommended",
            "Comfortable shoes for warm weather",
            "Sun protection recommended",
        ]
    return [
        "Stay cool with minimal, light clothing",
        "Breathable fabrics are essential",
        "Sun protection recommended",
    ]


_CONDITION_SUGGESTIONS = {
    WeatherCondition.RAINY: [
        "Waterproof or water-resistant items",
        "Avoid light colors that show water stains",
        "Quick-dry fabrics are ideal",
    ],
    WeatherCondition.STORMY: [
        "Waterproof or water-resistant outerwear",
        "Leave delicate fabrics at home",
        "Quick-dry fabrics are ideal",
    ],
    WeatherCondition.SNOWY: [
        "Waterproof boots are essential",
        "Dark colors hide salt stains",
        "Layer for warmth and protection",
    ],
    WeatherCondition.WINDY: [
        "Avoid loose, flowing garments",
        "Consider wind-resistant outerwear",
    ],
    WeatherCondition.SUNNY: [
        "UV protection recommended",
        "Light colors reflect heat",
    ],
    WeatherCondition.CLEAR: [
        "Light colors reflect heat",
        "Perfect day to showcase your style",
    ],
    WeatherCondition.FOGGY: [
        "Brighter colors keep you visible in the fog",
    ],
}


def get_weather_based_suggestions(weather: object) -> List[str]:
    """Return advisory strings for the given weather, or the default advice."""

    if not is_valid_weather(weather):
        return [DEFAULT_SUGGESTION]

    suggestions = _temperature_suggestions(weather.temperature)
    suggestions.extend(_CONDITION_SUGGESTIONS.get(weather.condition, []))
    if weather.humidity > 70:
        suggestions.append("Breathable, moisture-wicking fabrics")
        suggestions.append("Avoid heavy layering")
    if weather.wind_speed > 15:
        suggestions.append("Secure loose items and accessories")
        suggestions.append("Consider wind-resistant outerwear")

    deduplicated: List[str] = []
    for suggestion in suggestions:
        if suggestion not in deduplicated:
            deduplicated.append(suggestion)
    return deduplicated


__all__ = ["DEFAULT_SUGGESTION", "get_weather_based_suggestions"]
