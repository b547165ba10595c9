"""Lightweight evaluation harness for deterministic ranking scenarios."""

from __future__ import annotations

from typing import Dict, List

from evaluation.scenarios import EvaluationScenario, SCENARIOS
from logic.weather_filtering import DEFAULT_MIN_SCORE, describe_ranking, rank_outfits_with_scores
from models.wardrobe import from_raw_outfit


def _evaluate_expectations(expectations: Dict[str, object], ranked_ids: List[str]) -> Dict[str, bool]:
    checks: Dict[str, bool] = {"min_outfits": len(ranked_ids) >= int(expectations.get("min_outfits", 1))}
    if "top_outfit" in expectations:
        checks["top_outfit"] = bool(ranked_ids) and ranked_ids[0] == expectations["top_outfit"]
    if "order" in expectations:
        checks["order"] = ranked_ids == list(expectations["order"])
    if "excluded" in expectations:
        checks["excluded"] = not set(expectations["excluded"]).intersection(ranked_ids)
    return checks


def run_scenario(scenario: EvaluationScenario, min_score: float = DEFAULT_MIN_SCORE) -> Dict[str, object]:
    outfits = [from_raw_outfit(raw) for raw in scenario.outfits]
    ranked = rank_outfits_with_scores(outfits, scenario.weather, min_score=min_score)
    ranked_ids = [entry.outfit.id for entry in ranked]
    checks = _evaluate_expectations(scenario.expectations, ranked_ids)
    return {
        "scenario": scenario.name,
        "passed": all(checks.values()),
        "checks": checks,
        "outfit_count": len(ranked_ids),
        "ranking": describe_ranking(ranked),
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


__all__ = ["run_evaluation_suite", "run_scenario"]
