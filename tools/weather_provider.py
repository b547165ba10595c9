"""Weather provider abstractions and the OpenWeatherMap implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Sequence

import requests
from pydantic import BaseModel, ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from mirror_app.logging_config import get_logger, log_event
from models.weather import (
    UNKNOWN_LOCATION,
    FailureReason,
    Location,
    WeatherCondition,
    WeatherContext,
    WeatherServiceError,
)
from tools.observability import instrument_tool

LOGGER = get_logger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"
READINGS_PER_DAY = 8
MIDDAY_HOURS = range(10, 15)
# The 5 day / 3 hour endpoint returns at most 40 readings.
MAX_FORECAST_DAYS = 5
RETRY_STATUSES = (429, 500, 502, 503, 504)


class _WeatherCondition(BaseModel):
    main: str = ""
    description: str = ""


class _Wind(BaseModel):
    speed: float = 0.0


class _Main(BaseModel):
    temp: float
    humidity: float


class _CurrentResponse(BaseModel):
    name: str = ""
    main: _Main
    wind: _Wind = _Wind()
    weather: List[_WeatherCondition] = []


class _ForecastEntry(BaseModel):
    dt: int
    main: _Main
    wind: _Wind = _Wind()
    weather: List[_WeatherCondition] = []


class _City(BaseModel):
    name: str = ""
    timezone: int = 0


class _ForecastResponse(BaseModel):
    list: List[_ForecastEntry] = []
    city: _City = _City()


def map_weather_condition(main: str | None, description: str | None) -> WeatherCondition:
    """Map OpenWeatherMap vocabulary onto the internal condition set.

    Unknown vocabulary maps to cloudy.
    """

    main_lower = (main or "").lower()
    desc_lower = (description or "").lower()
    text = f"{main_lower} {desc_lower}"

    if "thunder" in text or "storm" in text or "squall" in text or "tornado" in text:
        return WeatherCondition.STORMY
    if "rain" in text or "drizzle" in text:
        return WeatherCondition.RAINY
    if "snow" in text or "sleet" in text:
        return WeatherCondition.SNOWY
    if "fog" in text or "mist" in text or "haze" in text:
        return WeatherCondition.FOGGY
    if "cloud" in text:
        return WeatherCondition.CLOUDY
    if "clear" in text or "sun" in text:
        return WeatherCondition.SUNNY
    if "wind" in text:
        return WeatherCondition.WINDY
    return WeatherCondition.CLOUDY


def build_retrying_session(max_retries: int = 2, backoff_factor: float = 0.5) -> requests.Session:
    """Session that retries GETs on connection errors, read timeouts and transient statuses.

    Backoff grows exponentially between attempts; each attempt still gets
    the full per-request timeout.
    """

    retry = Retry(
        total=max_retries,
        connect=max_retries,
        read=max_retries,
        status=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset({"GET"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session = requests.Session()
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


class WeatherProvider(ABC):
    """Abstract weather provider interface.

    Implementations raise :class:`WeatherServiceError` with a classified
    reason instead of returning partial data. ``forecast_horizon_days`` is the
    furthest day a forecast can reach.
    """

    forecast_horizon_days: int = MAX_FORECAST_DAYS

    @abstractmethod
    def fetch_current(self, location: Location) -> WeatherContext:
        """Return the current conditions at ``location``."""

    @abstractmethod
    def fetch_forecast(self, location: Location, days: int) -> List[WeatherContext]:
        """Return up to ``days`` daily readings starting today."""


class OpenWeatherProvider(WeatherProvider):
    """OpenWeatherMap provider with schema validation and bounded timeouts."""

    def __init__(
        self,
        api_key: str | None = None,
        timeout_seconds: float = 10.0,
        forecast_timeout_seconds: float = 15.0,
        units: str = "imperial",
        base_url: str = OPENWEATHER_BASE_URL,
        session: requests.Session | None = None,
        max_retries: int = 2,
        backoff_factor: float = 0.5,
    ) -> None:
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self.forecast_timeout_seconds = forecast_timeout_seconds
        self.units = units
        self.base_url = base_url.rstrip("/")
        self.session = session or build_retrying_session(max_retries, backoff_factor)

    def _require_key(self) -> str:
        if not self.api_key:
            raise WeatherServiceError(FailureReason.CONFIGURATION_MISSING, "OpenWeather API key not configured")
        return self.api_key

    def _get_json(self, path: str, params: Dict[str, object], timeout: float) -> object:
        url = f"{self.base_url}/{path}"
        api_key = self._require_key()
        try:
            response = self.session.get(
                url,
                params={**params, "appid": api_key, "units": self.units},
                headers={"Accept": "application/json"},
                timeout=timeout,
            )
            response.raise_for_status()
        except requests.Timeout as exc:
            raise WeatherServiceError(FailureReason.NETWORK_FAILURE, f"{path} request timed out") from exc
        except requests.RequestException as exc:
            raise WeatherServiceError(FailureReason.NETWORK_FAILURE, f"{path} request failed: {type(exc).__name__}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise WeatherServiceError(FailureReason.PARSE_FAILURE, f"{path} returned non-JSON body") from exc

    @instrument_tool("openweather_current")
    def fetch_current(self, location: Location) -> WeatherContext:
        payload = self._get_json(
            "weather",
            {"lat": location.latitude, "lon": location.longitude},
            self.timeout_seconds,
        )
        try:
            parsed = _CurrentResponse.model_validate(payload)
        except ValidationError as exc:
            log_event(LOGGER, logging.ERROR, "weather_payload_invalid", endpoint="weather", errors=exc.error_count())
            raise WeatherServiceError(FailureReason.PARSE_FAILURE, "current weather payload failed validation") from exc

        condition = parsed.weather[0] if parsed.weather else _WeatherCondition()
        return WeatherContext(
            temperature=round(parsed.main.temp),
            condition=map_weather_condition(condition.main, condition.description),
            humidity=parsed.main.humidity,
            wind_speed=parsed.wind.speed,
            location=location.city or parsed.name or UNKNOWN_LOCATION,
            timestamp=datetime.now(timezone.utc),
        )

    @instrument_tool("openweather_forecast")
    def fetch_forecast(self, location: Location, days: int) -> List[WeatherContext]:
        days = min(days, self.forecast_horizon_days)
        payload = self._get_json(
            "forecast",
            {"lat": location.latitude, "lon": location.longitude, "cnt": days * READINGS_PER_DAY},
            self.forecast_timeout_seconds,
        )
        try:
            parsed = _ForecastResponse.model_validate(payload)
        except ValidationError as exc:
            log_event(LOGGER, logging.ERROR, "weather_payload_invalid", endpoint="forecast", errors=exc.error_count())
            raise WeatherServiceError(FailureReason.PARSE_FAILURE, "forecast payload failed validation") from exc
        if not parsed.list:
            raise WeatherServiceError(FailureReason.PARSE_FAILURE, "forecast payload had no entries")

        display_name = location.city or parsed.city.name or UNKNOWN_LOCATION
        daily = select_daily_entries(parsed.list, utc_offset_seconds=parsed.city.timezone)
        forecasts = []
        for entry in daily[:days]:
            condition = entry.weather[0] if entry.weather else _WeatherCondition()
            forecasts.append(
                WeatherContext(
                    temperature=round(entry.main.temp),
                    condition=map_weather_condition(condition.main, condition.description),
                    humidity=entry.main.humidity,
                    wind_speed=entry.wind.speed,
                    location=display_name,
                    timestamp=datetime.fromtimestamp(entry.dt, tz=timezone.utc),
                )
            )
        return forecasts


def select_daily_entries(entries: Sequence[_ForecastEntry], utc_offset_seconds: int = 0) -> List[_ForecastEntry]:
    """Pick one reading per local calendar day, preferring a midday slot."""

    offset = timedelta(seconds=utc_offset_seconds)
    chosen: Dict[str, _ForecastEntry] = {}
    is_midday: Dict[str, bool] = {}
    for entry in entries:
        local = datetime.fromtimestamp(entry.dt, tz=timezone.utc) + offset
        day_key = local.date().isoformat()
        midday = local.hour in MIDDAY_HOURS
        if day_key not in chosen or (midday and not is_midday[day_key]):
            chosen[day_key] = entry
            is_midday[day_key] = midday
    return [chosen[key] for key in sorted(chosen)]


class MockWeatherProvider(WeatherProvider):
    """Offline deterministic weather provider for tests and local runs."""

    def __init__(
        self,
        context: WeatherContext | None = None,
        forecast: List[WeatherContext] | None = None,
        failure: FailureReason | None = None,
    ) -> None:
        self.context = context or WeatherContext(
            temperature=68,
            condition=WeatherCondition.SUNNY,
            humidity=45,
            wind_speed=6,
            location="Mockville",
        )
        self.forecast = forecast
        self.failure = failure
        self.current_calls = 0
        self.forecast_calls = 0
        self.locations: List[Location] = []

    def fetch_current(self, location: Location) -> WeatherContext:
        self.current_calls += 1
        self.locations.append(location)
        if self.failure:
            raise WeatherServiceError(self.failure)
        LOGGER.debug("Returning mock weather", extra={"event": "mock_weather"})
        return self.context

    def fetch_forecast(self, location: Location, days: int) -> List[WeatherContext]:
        self.forecast_calls += 1
        days = min(days, self.forecast_horizon_days)
        self.locations.append(location)
        if self.failure:
            raise WeatherServiceError(self.failure)
        if self.forecast is not None:
            return list(self.forecast[:days])
        return [
            WeatherContext(
                temperature=self.context.temperature,
                condition=self.context.condition,
                humidity=self.context.humidity,
                wind_speed=self.context.wind_speed,
                location=self.context.location,
                timestamp=self.context.timestamp + timedelta(days=offset),
            )
            for offset in range(days)
        ]


__all__ = [
    "MAX_FORECAST_DAYS",
    "MockWeatherProvider",
    "OpenWeatherProvider",
    "WeatherProvider",
    "build_retrying_session",
    "map_weather_condition",
    "select_daily_entries",
]
