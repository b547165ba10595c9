"""Filter and rank candidate outfits by weather appropriateness."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from logic.weather_scoring import NEUTRAL_SCORE, score_item_for_weather
from mirror_app.logging_config import get_logger, log_event
from models.wardrobe import OutfitCandidate
from models.weather import is_valid_weather

LOGGER = get_logger(__name__)

DEFAULT_MIN_SCORE = 0.4


@dataclass(frozen=True)
class RankedOutfit:
    """An outfit paired with its aggregate weather score."""

    outfit: OutfitCandidate
    score: float


def score_outfit_for_weather(outfit: OutfitCandidate, weather: object) -> float:
    """Mean item score for ``outfit``; an outfit with no items is neutral."""

    items = list(getattr(outfit, "items", None) or [])
    if not items:
        return NEUTRAL_SCORE
    return sum(score_item_for_weather(item, weather) for item in items) / len(items)


def rank_outfits_with_scores(
    outfits: Sequence[OutfitCandidate], weather: object, min_score: float = DEFAULT_MIN_SCORE
) -> List[RankedOutfit]:
    """Score, threshold and stably sort outfits, keeping their scores."""

    scored = [RankedOutfit(outfit=outfit, score=score_outfit_for_weather(outfit, weather)) for outfit in outfits]
    kept = [entry for entry in scored if entry.score >= min_score]
    # sorted() is stable, so ties keep their input order.
    return sorted(kept, key=lambda entry: entry.score, reverse=True)


def filter_and_rank_by_weather(
    outfits: Sequence[OutfitCandidate], weather: object, min_score: float = DEFAULT_MIN_SCORE
) -> List[OutfitCandidate]:
    """Drop outfits scoring under ``min_score`` and sort the rest best first.

    Fails open: without a usable weather context the input comes back
    unchanged. An empty result is a valid outcome when nothing qualifies.
    """

    if not is_valid_weather(weather):
        log_event(LOGGER, logging.INFO, "weather_filter_skipped", reason="invalid_weather", count=len(outfits))
        return list(outfits)

    ranked = rank_outfits_with_scores(outfits, weather, min_score=min_score)
    removed = len(outfits) - len(ranked)
    log_event(
        LOGGER,
        logging.DEBUG,
        "weather_filter_applied",
        input_count=len(outfits),
        kept_count=len(ranked),
        removed_count=removed,
        min_score=min_score,
    )
    return [entry.outfit for entry in ranked]


def describe_ranking(ranked: Sequence[RankedOutfit]) -> List[Dict[str, object]]:
    """Flatten a ranking into plain dicts for API responses and debugging."""

    return [{"id": entry.outfit.id, "score": round(entry.score, 4)} for entry in ranked]


__all__ = [
    "DEFAULT_MIN_SCORE",
    "RankedOutfit",
    "describe_ranking",
    "filter_and_rank_by_weather",
    "rank_outfits_with_scores",
    "score_outfit_for_weather",
]
