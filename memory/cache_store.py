"""Key-value cache stores for weather snapshots and the last known location."""
from __future__ import annotations

import json
import re
import sqlite3
import time
from pathlib import Path
from typing import Dict, Optional


class KeyValueStore:
    """Interface for string key-value persistence.

    Values are opaque strings; writes replace the whole value for a key.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store used by default and in tests."""

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._values)


class JSONFileKeyValueStore(KeyValueStore):
    """One JSON file per key, suitable for local runs."""

    _UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, base_dir: str | Path = "data/cache") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{self._UNSAFE.sub('_', key)}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        record = json.loads(path.read_text())
        return record.get("value")

    def set(self, key: str, value: str) -> None:
        record = {"key": key, "value": value, "updated_at": time.time()}
        self._path(key).write_text(json.dumps(record, indent=2))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/weather_cache.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS cache_entries (
                    cache_key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def get(self, key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM cache_entries WHERE cache_key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO cache_entries(cache_key, value, updated_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(cache_key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                (key, value, time.time()),
            )

    def delete(self, key: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM cache_entries WHERE cache_key = ?", (key,))


def build_cache_store(backend: str, path: str | None = None) -> KeyValueStore:
    """Create the configured cache backend (memory, json or sqlite)."""

    normalized = (backend or "memory").lower()
    if normalized == "sqlite":
        return SQLiteKeyValueStore(path or "data/weather_cache.db")
    if normalized == "json":
        return JSONFileKeyValueStore(path or "data/cache")
    if normalized == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unsupported cache backend '{backend}'. Allowed: ['json', 'memory', 'sqlite']")


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "SQLiteKeyValueStore",
    "build_cache_store",
]
