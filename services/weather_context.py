"""Weather context provider: cache, location resolution, live fetch and fallback.

The public methods are total. Every collaborator (permission prompt,
position lookup, reverse geocoding, the HTTP provider and the cache) is
isolated so that a failure only lowers the quality of the answer. Internally
the fetch path returns a :class:`WeatherResult` and the public methods
unwrap it into either the live reading or the seasonal fallback.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Generic, List, Optional, Tuple, TypeVar

from pydantic import ValidationError

from memory.cache_store import KeyValueStore
from mirror_app.config import MirrorConfig
from mirror_app.logging_config import get_logger, log_event, operation_context
from models.weather import (
    DEFAULT_HUMIDITY,
    DEFAULT_WIND_SPEED,
    UNKNOWN_LOCATION,
    CacheEntry,
    FailureReason,
    Location,
    WeatherCondition,
    WeatherContext,
    WeatherServiceError,
)
from tools.location_provider import LocationProvider
from tools.weather_provider import WeatherProvider

LOGGER = get_logger(__name__)

CURRENT_CACHE_PREFIX = "weather_cache_"
FORECAST_CACHE_PREFIX = "weather_forecast_"
LAST_KNOWN_LOCATION_KEY = "last_known_location"
CURRENT_FRESHNESS_SECONDS = 30 * 60
FORECAST_FRESHNESS_SECONDS = 3 * 60 * 60
ANONYMOUS_USER = "anonymous"

# (temperature F, condition) per season, keyed by calendar month.
_SEASONAL_DEFAULTS = {
    "winter": (45.0, WeatherCondition.CLOUDY),
    "spring": (65.0, WeatherCondition.SUNNY),
    "summer": (80.0, WeatherCondition.SUNNY),
    "autumn": (60.0, WeatherCondition.CLOUDY),
}

T = TypeVar("T")


@dataclass(frozen=True)
class WeatherResult(Generic[T]):
    """Either a resolved value or the reason it could not be produced."""

    value: Optional[T] = None
    failure: Optional[FailureReason] = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None and self.value is not None

    @classmethod
    def success(cls, value: T, from_cache: bool = False) -> "WeatherResult[T]":
        return cls(value=value, from_cache=from_cache)

    @classmethod
    def failed(cls, reason: FailureReason) -> "WeatherResult[T]":
        return cls(failure=reason)


def season_for_month(month: int) -> str:
    if month in (12, 1, 2):
        return "winter"
    if month in (3, 4, 5):
        return "spring"
    if month in (6, 7, 8):
        return "summer"
    return "autumn"


def seasonal_fallback(now: datetime) -> WeatherContext:
    """Deterministic, calendar-month based placeholder reading."""

    temperature, condition = _SEASONAL_DEFAULTS[season_for_month(now.month)]
    return WeatherContext(
        temperature=temperature,
        condition=condition,
        humidity=DEFAULT_HUMIDITY,
        wind_speed=DEFAULT_WIND_SPEED,
        location=UNKNOWN_LOCATION,
        timestamp=now,
    )


def fallback_forecast(days: int, now: datetime) -> List[WeatherContext]:
    """One seasonal fallback reading per day, starting today."""

    return [seasonal_fallback(now + timedelta(days=offset)) for offset in range(max(0, days))]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WeatherContextProvider:
    """Resolves the weather context used for outfit scoring.

    Constructed once by the composition root and shared by reference.
    """

    def __init__(
        self,
        config: MirrorConfig,
        weather_provider: WeatherProvider,
        location_provider: LocationProvider,
        cache: KeyValueStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.weather_provider = weather_provider
        self.location_provider = location_provider
        self.cache = cache
        self.clock = clock or _utcnow
        self.live_weather_enabled = config.has_weather_api_key

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------
    def get_current_weather_context(self, user_id: str | None = None) -> WeatherContext:
        """Return the user's current weather; never raises."""

        with operation_context("weather.get_current_weather_context", logger=LOGGER):
            try:
                result = self.fetch_current(user_id)
            except Exception as exc:
                log_event(
                    LOGGER, logging.ERROR, "weather_context_unexpected_error", error=type(exc).__name__, exc_info=True
                )
                result = WeatherResult.failed(FailureReason.UNEXPECTED_ERROR)

            if result.ok:
                return result.value
            log_event(
                LOGGER,
                logging.WARNING,
                "weather_fallback_used",
                user_id=user_id,
                reason=result.failure.value if result.failure else None,
            )
            return seasonal_fallback(self.clock())

    def get_weather_forecast(self, days: int = 3) -> List[WeatherContext]:
        """Return ``days`` daily readings; never raises."""

        if days < 1:
            return []
        with operation_context("weather.get_weather_forecast", logger=LOGGER, days=days):
            try:
                live_days = min(days, self.weather_provider.forecast_horizon_days)
                result = self.fetch_forecast(live_days)
            except Exception as exc:
                log_event(
                    LOGGER, logging.ERROR, "weather_forecast_unexpected_error", error=type(exc).__name__, exc_info=True
                )
                result = WeatherResult.failed(FailureReason.UNEXPECTED_ERROR)

            if result.ok:
                return self._pad_forecast(list(result.value), days)
            log_event(
                LOGGER,
                logging.WARNING,
                "weather_forecast_fallback_used",
                days=days,
                reason=result.failure.value if result.failure else None,
            )
            return fallback_forecast(days, self.clock())

    def _pad_forecast(self, forecast: List[WeatherContext], days: int) -> List[WeatherContext]:
        """Extend a live forecast past the provider horizon with seasonal days."""

        missing = days - len(forecast)
        if missing <= 0:
            return forecast
        start = forecast[-1].timestamp + timedelta(days=1) if forecast else self.clock()
        log_event(LOGGER, logging.INFO, "weather_forecast_padded", live_days=len(forecast), padded_days=missing)
        return forecast + fallback_forecast(missing, start)

    # ------------------------------------------------------------------
    # Result-returning internals
    # ------------------------------------------------------------------
    def fetch_current(self, user_id: str | None) -> WeatherResult[WeatherContext]:
        cache_key = f"{CURRENT_CACHE_PREFIX}{user_id or ANONYMOUS_USER}"
        cached = self._read_cache_entry(cache_key, CURRENT_FRESHNESS_SECONDS)
        if cached is not None:
            try:
                context = WeatherContext.from_dict(cached.data)
            except (ValidationError, TypeError, ValueError):
                log_event(LOGGER, logging.WARNING, "weather_cache_corrupt", cache_key=cache_key)
            else:
                log_event(LOGGER, logging.DEBUG, "weather_cache_hit", user_id=user_id)
                return WeatherResult.success(context, from_cache=True)

        location = self._resolve_location()

        if not self.live_weather_enabled:
            return WeatherResult.failed(FailureReason.CONFIGURATION_MISSING)
        try:
            context = self.weather_provider.fetch_current(location)
        except WeatherServiceError as exc:
            return WeatherResult.failed(exc.reason)

        self._write_cache_entry(cache_key, context.to_dict())
        return WeatherResult.success(context)

    def fetch_forecast(self, days: int) -> WeatherResult[List[WeatherContext]]:
        location = self._resolve_location()
        cache_key = f"{FORECAST_CACHE_PREFIX}{location.cache_suffix()}"
        cached = self._read_cache_entry(cache_key, FORECAST_FRESHNESS_SECONDS)
        if cached is not None and isinstance(cached.data, list) and len(cached.data) >= days:
            try:
                forecast = [WeatherContext.from_dict(entry) for entry in cached.data[:days]]
            except (ValidationError, TypeError, ValueError):
                log_event(LOGGER, logging.WARNING, "weather_cache_corrupt", cache_key=cache_key)
            else:
                return WeatherResult.success(forecast, from_cache=True)

        if not self.live_weather_enabled:
            return WeatherResult.failed(FailureReason.CONFIGURATION_MISSING)
        try:
            forecast = self.weather_provider.fetch_forecast(location, days)
        except WeatherServiceError as exc:
            return WeatherResult.failed(exc.reason)
        if not forecast:
            return WeatherResult.failed(FailureReason.PARSE_FAILURE)

        self._write_cache_entry(cache_key, [entry.to_dict() for entry in forecast])
        return WeatherResult.success(forecast)

    # ------------------------------------------------------------------
    # Location
    # ------------------------------------------------------------------
    def _resolve_location(self) -> Location:
        """Device position, else last known location, else configured default."""

        location, fresh = self._device_location()
        if location is None:
            location = self._last_known_location() or self._default_location()
            return location

        city = self._reverse_geocode(location)
        if city:
            location = Location(latitude=location.latitude, longitude=location.longitude, city=city)
        if fresh:
            self._write_cache(LAST_KNOWN_LOCATION_KEY, json.dumps(location.to_dict()))
        return location

    def _device_location(self) -> Tuple[Optional[Location], bool]:
        try:
            granted = self.location_provider.request_permission()
        except Exception as exc:
            log_event(LOGGER, logging.WARNING, "location_permission_failed", error=type(exc).__name__)
            return None, False
        if not granted:
            log_event(LOGGER, logging.INFO, "location_permission_denied", reason=FailureReason.PERMISSION_DENIED.value)
            return None, False
        try:
            return self.location_provider.current_position(), True
        except Exception as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "location_resolution_failed",
                reason=FailureReason.RESOLUTION_FAILURE.value,
                error=type(exc).__name__,
            )
            return None, False

    def _reverse_geocode(self, location: Location) -> Optional[str]:
        try:
            return self.location_provider.reverse_geocode(location)
        except Exception as exc:
            log_event(
                LOGGER,
                logging.INFO,
                "reverse_geocode_failed",
                reason=FailureReason.RESOLUTION_FAILURE.value,
                error=type(exc).__name__,
            )
            return location.city

    def _last_known_location(self) -> Optional[Location]:
        raw = self._read_cache(LAST_KNOWN_LOCATION_KEY)
        if raw is None:
            return None
        try:
            return Location.from_dict(json.loads(raw))
        except (KeyError, TypeError, ValueError):
            log_event(LOGGER, logging.WARNING, "last_known_location_corrupt")
            return None

    def _default_location(self) -> Location:
        return Location(
            latitude=self.config.default_latitude,
            longitude=self.config.default_longitude,
            city=self.config.default_city,
        )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------
    def _now_ms(self) -> int:
        return int(self.clock().timestamp() * 1000)

    def _read_cache(self, key: str) -> Optional[str]:
        try:
            return self.cache.get(key)
        except Exception as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "cache_read_failed",
                cache_key=key,
                reason=FailureReason.CACHE_FAILURE.value,
                error=type(exc).__name__,
            )
            return None

    def _write_cache(self, key: str, value: str) -> None:
        try:
            self.cache.set(key, value)
        except Exception as exc:
            log_event(
                LOGGER,
                logging.WARNING,
                "cache_write_failed",
                cache_key=key,
                reason=FailureReason.CACHE_FAILURE.value,
                error=type(exc).__name__,
            )

    def _read_cache_entry(self, key: str, window_seconds: float) -> Optional[CacheEntry]:
        raw = self._read_cache(key)
        if raw is None:
            return None
        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValidationError:
            log_event(LOGGER, logging.WARNING, "weather_cache_corrupt", cache_key=key)
            return None
        if not entry.is_fresh(window_seconds, self._now_ms()):
            log_event(LOGGER, logging.DEBUG, "weather_cache_stale", cache_key=key)
            return None
        return entry

    def _write_cache_entry(self, key: str, data: object) -> None:
        entry = CacheEntry(data=data, timestamp=self._now_ms())
        self._write_cache(key, entry.model_dump_json())


__all__ = [
    "CURRENT_FRESHNESS_SECONDS",
    "FORECAST_FRESHNESS_SECONDS",
    "LAST_KNOWN_LOCATION_KEY",
    "WeatherContextProvider",
    "WeatherResult",
    "fallback_forecast",
    "season_for_month",
    "seasonal_fallback",
]
