"""FastAPI server exposing the weather styling endpoints."""

from typing import List, Optional

from fastapi import FastAPI, Query
from pydantic import BaseModel, Field

from logic.weather_filtering import DEFAULT_MIN_SCORE, describe_ranking, rank_outfits_with_scores
from mirror_app.app import MirrorApp
from mirror_app.logging_config import configure_logging
from models.wardrobe import OutfitCandidate, WardrobeItemDescriptor
from models.weather import WeatherCondition, WeatherContext

configure_logging()


class WeatherPayload(BaseModel):
    """Weather context supplied by the caller."""

    temperature: float
    condition: WeatherCondition
    humidity: float = Field(50.0, ge=0, le=100)
    wind_speed: float = Field(5.0, ge=0)
    location: str = "Unknown"

    def to_context(self) -> WeatherContext:
        return WeatherContext(
            temperature=self.temperature,
            condition=self.condition,
            humidity=self.humidity,
            wind_speed=self.wind_speed,
            location=self.location,
        )


class ItemPayload(BaseModel):
    category: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)

    def to_descriptor(self) -> WardrobeItemDescriptor:
        return WardrobeItemDescriptor(category=self.category, tags=self.tags)


class OutfitPayload(BaseModel):
    id: str
    items: List[ItemPayload] = Field(default_factory=list)


class ScoreItemRequest(BaseModel):
    item: ItemPayload
    weather: WeatherPayload


class RankOutfitsRequest(BaseModel):
    """Outfits to rank; omit ``weather`` to use the user's current weather."""

    outfits: List[OutfitPayload]
    weather: Optional[WeatherPayload] = None
    user_id: Optional[str] = None
    min_score: float = Field(DEFAULT_MIN_SCORE, ge=0, le=1)


def create_app(mirror: MirrorApp | None = None) -> FastAPI:
    """Build the FastAPI instance around a single :class:`MirrorApp`."""

    mirror_app = mirror or MirrorApp()
    api = FastAPI(title="AYNA Mirror Weather", version="0.1.0")

    @api.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "ayna-mirror-weather",
            "environment": mirror_app.config.environment or "local",
            "live_weather": mirror_app.config.has_weather_api_key,
        }

    @api.get("/weather/forecast")
    def forecast(days: int = Query(3, ge=1, le=5)) -> dict:
        entries = mirror_app.get_weather_forecast(days)
        return {"days": days, "forecast": [entry.to_dict() for entry in entries]}

    @api.get("/weather/{user_id}")
    def current_weather(user_id: str) -> dict:
        weather = mirror_app.get_current_weather_context(user_id)
        return {
            "weather": weather.to_dict(),
            "suggestions": mirror_app.get_weather_based_suggestions(weather),
        }

    @api.post("/weather/suggestions")
    def suggestions(request: WeatherPayload) -> dict:
        return {"suggestions": mirror_app.get_weather_based_suggestions(request.to_context())}

    @api.post("/outfits/score-item")
    def score_item(request: ScoreItemRequest) -> dict:
        score = mirror_app.score_item_for_weather(request.item.to_descriptor(), request.weather.to_context())
        return {"score": score}

    @api.post("/outfits/rank")
    def rank_outfits(request: RankOutfitsRequest) -> dict:
        """Rank outfits against supplied or freshly resolved weather."""

        if request.weather is not None:
            weather = request.weather.to_context()
        else:
            weather = mirror_app.get_current_weather_context(request.user_id)
        outfits = [
            OutfitCandidate(id=outfit.id, items=[item.to_descriptor() for item in outfit.items])
            for outfit in request.outfits
        ]
        ranked = rank_outfits_with_scores(outfits, weather, min_score=request.min_score)
        return {
            "weather": weather.to_dict(),
            "ranking": describe_ranking(ranked),
            "suggestions": mirror_app.get_weather_based_suggestions(weather),
        }

    return api


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
