import evaluation.harness as harness
from evaluation.harness import run_evaluation_suite, run_scenario
from evaluation.scenarios import EvaluationScenario
from models.weather import WeatherCondition, WeatherContext


def test_evaluation_scenarios_pass():
    results = run_evaluation_suite()
    assert results, "Expected evaluation scenarios to run"
    for result in results:
        assert result["passed"], f"Scenario {result['scenario']} failed checks: {result['checks']}"
        assert result["outfit_count"] >= 1


def test_unmet_expectation_fails_scenario():
    scenario = EvaluationScenario(
        name="wrong_winner",
        description="A shorts outfit cannot win a freezing day.",
        weather=WeatherContext(temperature=30, condition=WeatherCondition.SNOWY),
        outfits=[
            {"id": "parka", "items": [{"category": "outerwear", "tags": ["warm", "insulated", "waterproof"]}]},
            {"id": "beach", "items": [{"category": "bottoms", "tags": ["shorts"]}]},
        ],
        expectations={"top_outfit": "beach"},
    )

    result = run_scenario(scenario)

    assert result["passed"] is False
    assert result["checks"]["top_outfit"] is False


def test_harness_exports_only_suite_entry_points():
    assert sorted(harness.__all__) == ["run_evaluation_suite", "run_scenario"]
