"""Weather context data model shared by the provider, scorer and filter."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel

UNKNOWN_LOCATION = "Unknown"
DEFAULT_HUMIDITY = 50.0
DEFAULT_WIND_SPEED = 5.0


class WeatherCondition(str, Enum):
    """Closed set of conditions used for styling decisions."""

    SUNNY = "sunny"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    SNOWY = "snowy"
    WINDY = "windy"
    CLEAR = "clear"
    STORMY = "stormy"
    FOGGY = "foggy"

    @classmethod
    def parse(cls, value: object) -> "WeatherCondition":
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().lower())


class FailureReason(str, Enum):
    """Why a live weather reading could not be produced."""

    PERMISSION_DENIED = "permission_denied"
    RESOLUTION_FAILURE = "resolution_failure"
    NETWORK_FAILURE = "network_failure"
    PARSE_FAILURE = "parse_failure"
    CONFIGURATION_MISSING = "configuration_missing"
    CACHE_FAILURE = "cache_failure"
    UNEXPECTED_ERROR = "unexpected_error"


class WeatherServiceError(Exception):
    """Raised by location and weather providers with a classified reason."""

    def __init__(self, reason: FailureReason, message: str | None = None) -> None:
        super().__init__(message or reason.value)
        self.reason = reason


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WeatherContext:
    """Immutable snapshot of ambient conditions, always fully populated."""

    temperature: float
    condition: WeatherCondition
    humidity: float = DEFAULT_HUMIDITY
    wind_speed: float = DEFAULT_WIND_SPEED
    location: str = UNKNOWN_LOCATION
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        object.__setattr__(self, "condition", WeatherCondition.parse(self.condition))
        object.__setattr__(self, "temperature", float(self.temperature))
        object.__setattr__(self, "humidity", float(self.humidity))
        wind = DEFAULT_WIND_SPEED if self.wind_speed is None else float(self.wind_speed)
        object.__setattr__(self, "wind_speed", wind)
        object.__setattr__(self, "location", str(self.location or UNKNOWN_LOCATION))
        timestamp = self.timestamp
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        object.__setattr__(self, "timestamp", timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "temperature": self.temperature,
            "condition": self.condition.value,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed,
            "location": self.location,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "WeatherContext":
        """Rebuild a context from :meth:`to_dict` output, validating every field."""

        validated = _WeatherContextPayload.model_validate(payload)
        return cls(
            temperature=validated.temperature,
            condition=validated.condition,
            humidity=validated.humidity,
            wind_speed=validated.wind_speed,
            location=validated.location,
            timestamp=validated.timestamp,
        )


class _WeatherContextPayload(BaseModel):
    temperature: float
    condition: WeatherCondition
    humidity: float = DEFAULT_HUMIDITY
    wind_speed: float = DEFAULT_WIND_SPEED
    location: str = UNKNOWN_LOCATION
    timestamp: datetime


def is_valid_weather(weather: object) -> bool:
    """Return True when ``weather`` can be used for scoring.

    Callers may hand in ``None`` or a half-built object when the provider is
    unavailable; those are treated as invalid so filtering can fail open.
    """

    if not isinstance(weather, WeatherContext):
        return False
    try:
        values = (weather.temperature, weather.humidity, weather.wind_speed)
    except AttributeError:
        return False
    return all(isinstance(value, (int, float)) and value == value for value in values)


@dataclass(frozen=True)
class Location:
    """A resolved coordinate with an optional display name."""

    latitude: float
    longitude: float
    city: Optional[str] = None

    def cache_suffix(self) -> str:
        return f"{self.latitude:.2f}_{self.longitude:.2f}"

    def to_dict(self) -> Dict[str, Any]:
        return {"latitude": self.latitude, "longitude": self.longitude, "city": self.city}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Location":
        return cls(
            latitude=float(payload["latitude"]),
            longitude=float(payload["longitude"]),
            city=payload.get("city") or None,
        )


class CacheEntry(BaseModel):
    """Cached value plus the epoch-millis instant it was written."""

    data: Any
    timestamp: int

    def is_fresh(self, window_seconds: float, now_ms: int) -> bool:
        """True when written within the window; entries stamped in the future are stale."""

        return 0 <= now_ms - self.timestamp < window_seconds * 1000


__all__ = [
    "CacheEntry",
    "DEFAULT_HUMIDITY",
    "DEFAULT_WIND_SPEED",
    "FailureReason",
    "Location",
    "UNKNOWN_LOCATION",
    "WeatherCondition",
    "WeatherContext",
    "WeatherServiceError",
    "is_valid_weather",
]
