"""Configuration helpers for the AYNA Mirror weather styling service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_LATITUDE = 40.7128
DEFAULT_LONGITUDE = -74.0060
DEFAULT_CITY = "New York"


@dataclass
class MirrorConfig:
    """Configuration values for the weather styling core.

    The config is built once by the composition root and handed to the
    weather context provider, so whether an API key is present is a fact
    known at construction time rather than an environment lookup inside the
    business logic.
    """

    weather_api_key: Optional[str] = None
    default_latitude: float = DEFAULT_LATITUDE
    default_longitude: float = DEFAULT_LONGITUDE
    default_city: Optional[str] = DEFAULT_CITY
    cache_backend: str = "memory"
    cache_path: Optional[str] = None
    weather_timeout_seconds: float = 10.0
    forecast_timeout_seconds: float = 15.0
    weather_max_retries: int = 2
    environment: str | None = None

    @property
    def has_weather_api_key(self) -> bool:
        return bool(self.weather_api_key)

    @classmethod
    def from_env(cls) -> "MirrorConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that secrets such
        as the OpenWeather key can be injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("MIRROR_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        weather_api_key = get_value("openweather_api_key")
        default_latitude = get_value("default_latitude")
        default_longitude = get_value("default_longitude")
        default_city = get_value("default_city", DEFAULT_CITY)
        cache_backend = get_value("cache_backend", "memory")
        cache_path = get_value("cache_path")
        weather_timeout = get_value("weather_timeout_seconds")
        forecast_timeout = get_value("forecast_timeout_seconds")
        max_retries = get_value("weather_max_retries")

        return cls(
            weather_api_key=weather_api_key or None,
            default_latitude=_as_float(default_latitude, DEFAULT_LATITUDE),
            default_longitude=_as_float(default_longitude, DEFAULT_LONGITUDE),
            default_city=default_city or None,
            cache_backend=str(cache_backend or "memory"),
            cache_path=cache_path,
            weather_timeout_seconds=_as_float(weather_timeout, 10.0),
            forecast_timeout_seconds=_as_float(forecast_timeout, 15.0),
            weather_max_retries=int(_as_float(max_retries, 2)),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Read flat ``key: value`` pairs; nested blocks and comments are skipped."""

        settings: dict[str, str] = {}
        for line in path.read_text().splitlines():
            if not line.strip() or line[:1].isspace() or line.lstrip().startswith("#"):
                continue
            key, sep, raw_value = line.partition(":")
            if not sep:
                continue
            value = raw_value.strip()
            if value[:1] in {"'", '"'} and value[-1:] == value[:1] and len(value) >= 2:
                value = value[1:-1]
            else:
                value = value.split(" #", 1)[0].strip()
            settings[key.strip().lower()] = value
        return settings


def _as_float(raw: Optional[str], default: float) -> float:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"Expected a number in configuration, got {raw!r}") from exc


__all__ = ["MirrorConfig", "DEFAULT_LATITUDE", "DEFAULT_LONGITUDE", "DEFAULT_CITY"]
