from pathlib import Path

import pytest

from mirror_app.config import DEFAULT_LATITUDE, MirrorConfig

_ENV_KEYS = [
    "APP_ENV",
    "APP_CONFIG_PATH",
    "MIRROR_CONFIG_DIR",
    "OPENWEATHER_API_KEY",
    "DEFAULT_LATITUDE",
    "DEFAULT_LONGITUDE",
    "DEFAULT_CITY",
    "CACHE_BACKEND",
    "CACHE_PATH",
    "WEATHER_TIMEOUT_SECONDS",
    "FORECAST_TIMEOUT_SECONDS",
    "WEATHER_MAX_RETRIES",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults_without_environment() -> None:
    config = MirrorConfig.from_env()

    assert config.weather_api_key is None
    assert config.has_weather_api_key is False
    assert config.default_latitude == DEFAULT_LATITUDE
    assert config.default_city == "New York"
    assert config.cache_backend == "memory"
    assert config.weather_timeout_seconds == 10.0
    assert config.weather_max_retries == 2


def test_environment_variables_override_yaml(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / "staging.yaml").write_text(
        "# staging settings\n"
        "default_city: \"Amsterdam\"\n"
        "default_latitude: 52.37\n"
        "default_longitude: 4.90\n"
        "cache_backend: sqlite\n"
    )
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.setenv("MIRROR_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("OPENWEATHER_API_KEY", "env-key")
    monkeypatch.setenv("CACHE_BACKEND", "json")

    config = MirrorConfig.from_env()

    assert config.environment == "staging"
    assert config.default_city == "Amsterdam"
    assert config.default_latitude == 52.37
    assert config.default_longitude == 4.90
    assert config.cache_backend == "json"
    assert config.has_weather_api_key is True


def test_blank_api_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENWEATHER_API_KEY", "")
    assert MirrorConfig.from_env().has_weather_api_key is False


def test_non_numeric_coordinates_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEFAULT_LATITUDE", "north")
    with pytest.raises(ValueError):
        MirrorConfig.from_env()


def test_retry_budget_is_configurable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEATHER_MAX_RETRIES", "0")
    assert MirrorConfig.from_env().weather_max_retries == 0
