"""Deterministic weather appropriateness scoring for wardrobe items."""

from __future__ import annotations

import logging
from typing import Dict, Tuple

from mirror_app.logging_config import get_logger, log_event
from models.wardrobe import WardrobeItemDescriptor, from_raw_item
from models.weather import WeatherCondition, WeatherContext, is_valid_weather

LOGGER = get_logger(__name__)

NEUTRAL_SCORE = 0.5

# Temperature band upper bounds in Fahrenheit; anything above WARM_MAX is hot.
FREEZING_MAX = 32.0
COLD_MAX = 50.0
COOL_MAX = 65.0
MILD_MAX = 75.0
WARM_MAX = 85.0

WINDY_SPEED_MPH = 15.0
HUMID_PERCENT = 70.0

WARM_MARKERS = ("warm", "winter", "heavy", "long-sleeve", "thermal", "insulated")
SUMMER_MARKERS = ("light", "summer", "shorts", "sleeveless")
BREEZY_MARKERS = ("light", "breathable", "summer", "sleeveless")
WATERPROOF_MARKERS = ("waterproof", "water-resistant", "rain-resistant")
SECURE_MARKERS = ("fitted", "secure", "structured", "wind-resistant")
LOOSE_MARKERS = ("loose", "flowy")

# Untagged items in these categories are treated as cold-weather pieces.
WARM_CATEGORIES = {"outerwear", "knitwear"}


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _is_warm(item: WardrobeItemDescriptor) -> bool:
    if item.tags:
        return item.has_any(*WARM_MARKERS)
    return item.category in WARM_CATEGORIES


def _is_waterproof(item: WardrobeItemDescriptor) -> bool:
    return item.has_any(*WATERPROOF_MARKERS)


def temperature_band(temperature: float) -> str:
    """Name the temperature band a reading falls into."""

    if temperature < FREEZING_MAX:
        return "freezing"
    if temperature < COLD_MAX:
        return "cold"
    if temperature < COOL_MAX:
        return "cool"
    if temperature < MILD_MAX:
        return "mild"
    if temperature < WARM_MAX:
        return "warm"
    return "hot"


def _temperature_adjustments(item: WardrobeItemDescriptor, temperature: float) -> Dict[str, float]:
    band = temperature_band(temperature)
    adjustments: Dict[str, float] = {}
    if band == "freezing":
        if _is_warm(item):
            adjustments["freezing_warm_layer"] = 0.3
        if item.has_any(*SUMMER_MARKERS):
            adjustments["freezing_summer_piece"] = -0.3
    elif band == "cold":
        if _is_warm(item):
            adjustments["cold_warm_layer"] = 0.2
        if item.has_any("light", "sleeveless", "summer"):
            adjustments["cold_light_piece"] = -0.2
        if item.has_any("shorts"):
            adjustments["cold_shorts"] = -0.2
    elif band == "cool":
        if item.has_any("light-layer", "cardigan"):
            adjustments["cool_light_layer"] = 0.1
        if item.has_any("heavy", "winter"):
            adjustments["cool_heavy_piece"] = -0.1
    elif band == "mild":
        adjustments["mild_any"] = 0.1
    elif band == "warm":
        if item.has_any(*BREEZY_MARKERS):
            adjustments["warm_breezy_piece"] = 0.25
        if _is_warm(item) or item.has_any("long-sleeve"):
            adjustments["warm_heavy_piece"] = -0.25
    else:
        if item.has_any(*BREEZY_MARKERS):
            adjustments["hot_breezy_piece"] = 0.3
        if _is_warm(item) or item.has_any("long-sleeve"):
            adjustments["hot_heavy_piece"] = -0.35
    return adjustments


def _condition_adjustments(item: WardrobeItemDescriptor, condition: WeatherCondition) -> Dict[str, float]:
    adjustments: Dict[str, float] = {}
    if condition == WeatherCondition.RAINY:
        if _is_waterproof(item):
            adjustments["rain_waterproof"] = 0.2
        if item.has_any("suede", "delicate"):
            adjustments["rain_delicate"] = -0.2
        if item.category == "shoes" and not _is_waterproof(item):
            adjustments["rain_unprotected_shoes"] = -0.1
    elif condition == WeatherCondition.STORMY:
        if _is_waterproof(item):
            adjustments["storm_waterproof"] = 0.2
        if item.has_any("suede", "delicate", "formal"):
            adjustments["storm_delicate"] = -0.2
    elif condition == WeatherCondition.SNOWY:
        if _is_waterproof(item) or item.has_any("winter", "warm"):
            adjustments["snow_protective"] = 0.2
        if item.has_any("light", "delicate"):
            adjustments["snow_delicate"] = -0.2
        if item.category == "shoes" and not _is_waterproof(item):
            adjustments["snow_unprotected_shoes"] = -0.3
    elif condition in {WeatherCondition.SUNNY, WeatherCondition.CLEAR}:
        if item.has_any("sun-protection", "light-color", "breathable", "light"):
            adjustments["sun_friendly"] = 0.1
        if item.category == "tops" and item.has_any("dark"):
            adjustments["sun_dark_top"] = -0.05
    return adjustments


def _environment_adjustments(item: WardrobeItemDescriptor, weather: WeatherContext) -> Dict[str, float]:
    adjustments: Dict[str, float] = {}
    if weather.humidity > HUMID_PERCENT:
        if item.has_any("breathable", "moisture-wicking"):
            adjustments["humid_breathable"] = 0.1
        if item.has_any("heavy", "non-breathable"):
            adjustments["humid_heavy"] = -0.1
    breezy = weather.wind_speed > WINDY_SPEED_MPH or weather.condition == WeatherCondition.WINDY
    if breezy:
        if item.has_any(*SECURE_MARKERS):
            adjustments["wind_secure"] = 0.1
        if item.has_any(*LOOSE_MARKERS):
            adjustments["wind_loose"] = -0.1
    return adjustments


def score_item_with_breakdown(item: object, weather: object) -> Tuple[float, Dict[str, float]]:
    """Return the clamped score and the named rule deltas that produced it.

    Malformed items or weather yield the neutral score with no adjustments.
    """

    descriptor = from_raw_item(item) if item is not None else None
    if descriptor is None or not is_valid_weather(weather):
        return NEUTRAL_SCORE, {}

    try:
        adjustments: Dict[str, float] = {}
        adjustments.update(_temperature_adjustments(descriptor, weather.temperature))
        adjustments.update(_condition_adjustments(descriptor, weather.condition))
        adjustments.update(_environment_adjustments(descriptor, weather))
    except (AttributeError, TypeError, ValueError) as exc:
        log_event(LOGGER, logging.WARNING, "item_scoring_failed", error=str(exc))
        return NEUTRAL_SCORE, {}
    return _clamp(NEUTRAL_SCORE + sum(adjustments.values())), adjustments


def score_item_for_weather(item: object, weather: object) -> float:
    """Score how suitable ``item`` is for ``weather`` in [0, 1].

    Starts from a neutral 0.5 and applies tag-driven temperature, condition,
    humidity and wind rules. Category only matters for untagged pieces and
    for shoes in wet weather.
    """

    score, _ = score_item_with_breakdown(item, weather)
    return score


__all__ = [
    "NEUTRAL_SCORE",
    "score_item_for_weather",
    "score_item_with_breakdown",
    "temperature_band",
]
