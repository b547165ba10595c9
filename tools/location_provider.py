"""Location provider abstractions: permission, position and reverse geocoding."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from pydantic import BaseModel, ValidationError

from mirror_app.logging_config import get_logger
from models.weather import FailureReason, Location, WeatherServiceError
from tools.observability import instrument_tool
from tools.weather_provider import build_retrying_session

LOGGER = get_logger(__name__)

OPENWEATHER_GEO_URL = "https://api.openweathermap.org/geo/1.0/reverse"


class _GeoPlace(BaseModel):
    name: str = ""
    state: Optional[str] = None
    country: Optional[str] = None


class LocationProvider(ABC):
    """Device or deployment location source.

    ``current_position`` and ``reverse_geocode`` raise
    :class:`WeatherServiceError` when they cannot answer.
    """

    @abstractmethod
    def request_permission(self) -> bool:
        """Return True when location access is granted."""

    @abstractmethod
    def current_position(self) -> Location:
        """Return the current coordinate."""

    def reverse_geocode(self, location: Location) -> Optional[str]:
        """Return a display name for ``location`` if one is known."""

        return location.city


class OpenWeatherGeocoder:
    """Reverse geocoding over the OpenWeather geo API."""

    def __init__(
        self,
        api_key: str | None,
        timeout_seconds: float = 5.0,
        url: str = OPENWEATHER_GEO_URL,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.url = url
        self.session = session or build_retrying_session()

    @instrument_tool("openweather_reverse_geocode")
    def reverse(self, location: Location) -> Optional[str]:
        if not self.api_key:
            raise WeatherServiceError(FailureReason.CONFIGURATION_MISSING, "geocoder API key not configured")
        try:
            response = self.session.get(
                self.url,
                params={"lat": location.latitude, "lon": location.longitude, "limit": 1, "appid": self.api_key},
                headers={"Accept": "application/json"},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
            places = [_GeoPlace.model_validate(place) for place in response.json()]
        except (requests.RequestException, ValueError, ValidationError, TypeError) as exc:
            raise WeatherServiceError(FailureReason.RESOLUTION_FAILURE, "reverse geocoding failed") from exc
        if not places:
            return None
        return places[0].name or None


class StaticLocationProvider(LocationProvider):
    """A fixed coordinate, for server deployments without a device GPS."""

    def __init__(
        self,
        latitude: float,
        longitude: float,
        city: str | None = None,
        geocoder: OpenWeatherGeocoder | None = None,
    ) -> None:
        self.location = Location(latitude=latitude, longitude=longitude, city=city)
        self.geocoder = geocoder

    def request_permission(self) -> bool:
        return True

    def current_position(self) -> Location:
        return self.location

    def reverse_geocode(self, location: Location) -> Optional[str]:
        if self.geocoder is not None:
            return self.geocoder.reverse(location)
        return location.city


class MockLocationProvider(LocationProvider):
    """Scriptable location provider for tests."""

    def __init__(
        self,
        location: Location | None = None,
        permission_granted: bool = True,
        position_error: bool = False,
        geocode_city: str | None = None,
        geocode_error: bool = False,
    ) -> None:
        self.location = location or Location(latitude=52.37, longitude=4.90)
        self.permission_granted = permission_granted
        self.position_error = position_error
        self.geocode_city = geocode_city
        self.geocode_error = geocode_error
        self.calls: List[str] = []

    def request_permission(self) -> bool:
        self.calls.append("request_permission")
        return self.permission_granted

    def current_position(self) -> Location:
        self.calls.append("current_position")
        if self.position_error:
            raise WeatherServiceError(FailureReason.RESOLUTION_FAILURE, "position unavailable")
        return self.location

    def reverse_geocode(self, location: Location) -> Optional[str]:
        self.calls.append("reverse_geocode")
        if self.geocode_error:
            raise WeatherServiceError(FailureReason.RESOLUTION_FAILURE, "geocoder unavailable")
        return self.geocode_city


__all__ = [
    "LocationProvider",
    "MockLocationProvider",
    "OpenWeatherGeocoder",
    "StaticLocationProvider",
]
