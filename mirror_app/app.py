"""Composition root wiring the weather styling core together."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from logic.weather_filtering import (
    DEFAULT_MIN_SCORE,
    describe_ranking,
    filter_and_rank_by_weather,
    rank_outfits_with_scores,
)
from logic.weather_scoring import score_item_for_weather
from logic.weather_suggestions import get_weather_based_suggestions
from memory.cache_store import KeyValueStore, build_cache_store
from mirror_app.config import MirrorConfig
from mirror_app.logging_config import configure_logging, get_logger, log_event, operation_context
from models.wardrobe import OutfitCandidate
from models.weather import WeatherContext
from services.weather_context import WeatherContextProvider
from tools.location_provider import LocationProvider, OpenWeatherGeocoder, StaticLocationProvider
from tools.weather_provider import OpenWeatherProvider, WeatherProvider

LOGGER = get_logger(__name__)


class MirrorApp:
    """Builds one weather context provider per process and exposes the caller contract."""

    def __init__(
        self,
        config: MirrorConfig | None = None,
        weather_provider: WeatherProvider | None = None,
        location_provider: LocationProvider | None = None,
        cache: KeyValueStore | None = None,
    ) -> None:
        self.config = config or MirrorConfig.from_env()
        configure_logging()

        self.cache = cache or build_cache_store(self.config.cache_backend, self.config.cache_path)
        self.weather_provider = weather_provider or OpenWeatherProvider(
            api_key=self.config.weather_api_key,
            timeout_seconds=self.config.weather_timeout_seconds,
            forecast_timeout_seconds=self.config.forecast_timeout_seconds,
            max_retries=self.config.weather_max_retries,
        )
        self.location_provider = location_provider or self._build_location_provider()
        self.weather_context = WeatherContextProvider(
            config=self.config,
            weather_provider=self.weather_provider,
            location_provider=self.location_provider,
            cache=self.cache,
        )
        log_event(
            LOGGER,
            logging.INFO,
            "mirror_app_started",
            cache_backend=self.config.cache_backend,
            live_weather=self.config.has_weather_api_key,
            environment=self.config.environment or "local",
        )

    def _build_location_provider(self) -> LocationProvider:
        geocoder = None
        if self.config.has_weather_api_key:
            geocoder = OpenWeatherGeocoder(api_key=self.config.weather_api_key)
        return StaticLocationProvider(
            latitude=self.config.default_latitude,
            longitude=self.config.default_longitude,
            city=self.config.default_city,
            geocoder=geocoder,
        )

    def get_current_weather_context(self, user_id: str | None = None) -> WeatherContext:
        return self.weather_context.get_current_weather_context(user_id)

    def get_weather_forecast(self, days: int = 3) -> List[WeatherContext]:
        return self.weather_context.get_weather_forecast(days)

    def score_item_for_weather(self, item: object, weather: object) -> float:
        return score_item_for_weather(item, weather)

    def filter_and_rank_by_weather(
        self, outfits: Sequence[OutfitCandidate], weather: object, min_score: float = DEFAULT_MIN_SCORE
    ) -> List[OutfitCandidate]:
        return filter_and_rank_by_weather(outfits, weather, min_score=min_score)

    def get_weather_based_suggestions(self, weather: object) -> List[str]:
        return get_weather_based_suggestions(weather)

    def plan_for_today(
        self, user_id: str, outfits: Sequence[OutfitCandidate], min_score: float = DEFAULT_MIN_SCORE
    ) -> Dict[str, Any]:
        """Fetch weather, then rank the candidates and attach suggestions."""

        with operation_context("mirror.plan_for_today", logger=LOGGER):
            weather = self.get_current_weather_context(user_id)
            ranked = rank_outfits_with_scores(outfits, weather, min_score=min_score)
            return {
                "weather": weather.to_dict(),
                "outfits": [entry.outfit for entry in ranked],
                "ranking": describe_ranking(ranked),
                "suggestions": get_weather_based_suggestions(weather),
            }


__all__ = ["MirrorApp"]
