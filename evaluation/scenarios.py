"""Evaluation scenarios exercising weather-aware outfit ranking."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from models.weather import WeatherCondition, WeatherContext


@dataclass
class EvaluationScenario:
    name: str
    description: str
    weather: WeatherContext
    outfits: List[Dict[str, object]]
    expectations: Dict[str, object] = field(default_factory=dict)


def _outfit(outfit_id: str, *items: Dict[str, object]) -> Dict[str, object]:
    return {"id": outfit_id, "items": list(items)}


def _item(category: str, *tags: str) -> Dict[str, object]:
    return {"category": category, "tags": list(tags)}


SCENARIOS: List[EvaluationScenario] = [
    EvaluationScenario(
        name="cold_snowy_commute",
        description="Freezing snow should favor insulated, waterproof layers.",
        weather=WeatherContext(temperature=30, condition=WeatherCondition.SNOWY, humidity=70, wind_speed=8),
        outfits=[
            _outfit(
                "summer_day",
                _item("tops", "summer", "light"),
                _item("bottoms", "shorts"),
                _item("shoes", "canvas"),
            ),
            _outfit(
                "winter_layers",
                _item("knitwear", "warm", "winter"),
                _item("outerwear", "winter", "waterproof"),
                _item("bottoms", "casual"),
                _item("shoes", "winter", "waterproof"),
            ),
        ],
        expectations={"top_outfit": "winter_layers", "excluded": ["summer_day"]},
    ),
    EvaluationScenario(
        name="hot_sunny_afternoon",
        description="Heat favors breathable pieces and drops heavy tailoring.",
        weather=WeatherContext(temperature=92, condition=WeatherCondition.SUNNY, humidity=40, wind_speed=5),
        outfits=[
            _outfit("wool_suit", _item("outerwear", "heavy", "long-sleeve"), _item("bottoms", "wool", "heavy")),
            _outfit("everyday", _item("tops"), _item("bottoms", "casual")),
            _outfit(
                "linen_set",
                _item("tops", "light", "breathable"),
                _item("bottoms", "light", "summer"),
                _item("shoes", "breathable"),
            ),
        ],
        expectations={"order": ["linen_set", "everyday"], "excluded": ["wool_suit"]},
    ),
    EvaluationScenario(
        name="rainy_office",
        description="Rain rewards waterproof pieces and penalises suede.",
        weather=WeatherContext(temperature=55, condition=WeatherCondition.RAINY, humidity=85, wind_speed=10),
        outfits=[
            _outfit(
                "suede_day",
                _item("shoes", "suede"),
                _item("tops", "delicate"),
                _item("bottoms", "casual"),
            ),
            _outfit(
                "rain_ready",
                _item("outerwear", "waterproof", "fitted"),
                _item("shoes", "waterproof"),
                _item("bottoms", "casual"),
            ),
        ],
        expectations={"top_outfit": "rain_ready", "excluded": ["suede_day"]},
    ),
    EvaluationScenario(
        name="windy_spring",
        description="Strong wind prefers fitted, structured pieces over flowing ones.",
        weather=WeatherContext(temperature=68, condition=WeatherCondition.WINDY, humidity=50, wind_speed=22),
        outfits=[
            _outfit("flowy", _item("dresses", "flowy", "light"), _item("accessories", "loose")),
            _outfit(
                "tailored",
                _item("tops", "fitted"),
                _item("bottoms", "structured"),
                _item("outerwear", "wind-resistant"),
            ),
        ],
        expectations={"order": ["tailored", "flowy"]},
    ),
]


__all__ = ["EvaluationScenario", "SCENARIOS"]
