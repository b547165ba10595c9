from pathlib import Path

import pytest

from memory.cache_store import (
    InMemoryKeyValueStore,
    JSONFileKeyValueStore,
    SQLiteKeyValueStore,
    build_cache_store,
)


@pytest.fixture(params=["memory", "json", "sqlite"])
def store(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return InMemoryKeyValueStore()
    if request.param == "json":
        return JSONFileKeyValueStore(tmp_path / "cache")
    return SQLiteKeyValueStore(tmp_path / "cache.db")


def test_set_get_overwrite_delete(store) -> None:
    assert store.get("weather_cache_user-1") is None

    store.set("weather_cache_user-1", '{"data": 1}')
    store.set("weather_cache_user-1", '{"data": 2}')
    assert store.get("weather_cache_user-1") == '{"data": 2}'

    store.delete("weather_cache_user-1")
    assert store.get("weather_cache_user-1") is None
    store.delete("never-written")


def test_json_store_survives_reopen_and_sanitises_names(tmp_path: Path) -> None:
    JSONFileKeyValueStore(tmp_path).set("weather_forecast_52.37_4.90/../x", "value")

    reopened = JSONFileKeyValueStore(tmp_path)
    assert reopened.get("weather_forecast_52.37_4.90/../x") == "value"
    assert all(path.parent == tmp_path for path in tmp_path.iterdir())


def test_sqlite_store_survives_reopen(tmp_path: Path) -> None:
    SQLiteKeyValueStore(tmp_path / "cache.db").set("last_known_location", "{}")
    assert SQLiteKeyValueStore(tmp_path / "cache.db").get("last_known_location") == "{}"


def test_build_cache_store(tmp_path: Path) -> None:
    assert isinstance(build_cache_store("memory"), InMemoryKeyValueStore)
    assert isinstance(build_cache_store("JSON", str(tmp_path / "json")), JSONFileKeyValueStore)
    assert isinstance(build_cache_store("sqlite", str(tmp_path / "db.sqlite")), SQLiteKeyValueStore)
    with pytest.raises(ValueError):
        build_cache_store("redis")
