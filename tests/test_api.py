"""HTTP surface smoke tests using offline providers."""

import pytest
from fastapi.testclient import TestClient

from memory.cache_store import InMemoryKeyValueStore
from mirror_app.app import MirrorApp
from mirror_app.config import MirrorConfig
from models.wardrobe import OutfitCandidate, WardrobeItemDescriptor
from models.weather import FailureReason
from server.api import create_app
from tools.location_provider import MockLocationProvider
from tools.weather_provider import MockWeatherProvider


def _mirror(**provider_kwargs) -> MirrorApp:
    return MirrorApp(
        config=MirrorConfig(weather_api_key="test-key"),
        weather_provider=MockWeatherProvider(**provider_kwargs),
        location_provider=MockLocationProvider(geocode_city="Amsterdam"),
        cache=InMemoryKeyValueStore(),
    )


@pytest.fixture()
def client() -> TestClient:
    return TestClient(create_app(_mirror()))


def test_healthcheck(client: TestClient) -> None:
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["live_weather"] is True


def test_current_weather_includes_suggestions(client: TestClient) -> None:
    body = client.get("/weather/user-1").json()
    assert body["weather"]["location"] == "Mockville"
    assert body["weather"]["condition"] == "sunny"
    assert body["suggestions"]


def test_current_weather_falls_back_when_provider_fails() -> None:
    client = TestClient(create_app(_mirror(failure=FailureReason.NETWORK_FAILURE)))
    body = client.get("/weather/user-1").json()
    assert body["weather"]["location"] == "Unknown"
    assert body["weather"]["humidity"] == 50


def test_forecast_days_are_validated(client: TestClient) -> None:
    body = client.get("/weather/forecast", params={"days": 2}).json()
    assert body["days"] == 2
    assert len(body["forecast"]) == 2
    assert client.get("/weather/forecast", params={"days": 0}).status_code == 422


def test_suggestions_endpoint(client: TestClient) -> None:
    response = client.post("/weather/suggestions", json={"temperature": 95, "condition": "sunny"})
    assert response.status_code == 200
    assert "Sun protection recommended" in response.json()["suggestions"]


def test_score_item_endpoint(client: TestClient) -> None:
    payload = {
        "item": {"category": "tops", "tags": ["light", "breathable", "summer"]},
        "weather": {"temperature": 75, "condition": "sunny", "humidity": 60, "wind_speed": 8},
    }
    response = client.post("/outfits/score-item", json=payload)
    assert response.status_code == 200
    assert response.json()["score"] >= 0.7


def test_rank_endpoint_filters_and_orders(client: TestClient) -> None:
    payload = {
        "weather": {"temperature": 40, "condition": "rainy"},
        "outfits": [
            {"id": "beach", "items": [{"category": "tops", "tags": ["light", "summer"]}]},
            {"id": "casual", "items": [{"category": "tops", "tags": ["casual"]}]},
            {"id": "rain_ready", "items": [{"category": "outerwear", "tags": ["waterproof", "warm"]}]},
        ],
    }
    body = client.post("/outfits/rank", json=payload).json()
    assert [entry["id"] for entry in body["ranking"]] == ["rain_ready", "casual"]
    assert body["suggestions"]


def test_rank_endpoint_uses_live_weather_when_omitted(client: TestClient) -> None:
    payload = {"user_id": "user-1", "outfits": [{"id": "everyday", "items": []}]}
    body = client.post("/outfits/rank", json=payload).json()
    assert body["weather"]["location"] == "Mockville"
    assert body["ranking"] == [{"id": "everyday", "score": 0.5}]


def test_plan_for_today_ranks_against_current_weather() -> None:
    mirror = _mirror()
    outfits = [
        OutfitCandidate(id="parka", items=[WardrobeItemDescriptor(category="outerwear", tags=["heavy", "winter"])]),
        OutfitCandidate(id="tee", items=[WardrobeItemDescriptor(category="tops", tags=["casual"])]),
    ]

    plan = mirror.plan_for_today("user-1", outfits)

    # 68F sunny: both score 0.6 and keep their input order.
    assert [entry["id"] for entry in plan["ranking"]] == ["parka", "tee"]
    assert plan["weather"]["location"] == "Mockville"
    assert plan["suggestions"]
