"""Structured JSON logging with correlation ids and privacy scrubbing.

Every log line is a single JSON object. User identifiers, coordinates and
place names never reach the output: the Mirror runs in people's homes, so a
weather lookup would otherwise leak where they live.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator

CORRELATION_ID = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RECORD_ATTRIBUTES = frozenset(logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}
_SENSITIVE_KEYS = frozenset(
    {
        "user_id",
        "location",
        "latitude",
        "longitude",
        "lat",
        "lon",
        "city",
        "appid",
        "api_key",
        "weather_api_key",
        "cache_key",
    }
)
_REDACTED = "[redacted]"
_EMAIL_PATTERN = re.compile(r"[\w.\-]+@[\w.\-]+")
_SECRET_QUERY_PATTERN = re.compile(r"\b((?:appid|api_key|lat|lon)=)[^&\s]+", re.IGNORECASE)


class JsonFormatter(logging.Formatter):
    """Render a record and its ``extra`` fields as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        }
        payload.update(redact_for_log(extras))
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install the JSON formatter on the root logger (``LOG_LEVEL`` overrides INFO)."""

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def _scrub_text(value: str) -> str:
    value = _EMAIL_PATTERN.sub("[redacted-email]", value)
    return _SECRET_QUERY_PATTERN.sub(r"\1" + _REDACTED, value)


def redact_for_log(payload: Any) -> Any:
    """Return a copy of ``payload`` with identifiers, coordinates and keys masked.

    Sensitive dict keys are replaced wholesale; free text keeps its shape
    but loses emails and ``appid``/coordinate query parameters.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, dict):
        return {
            key: _REDACTED if str(key).lower() in _SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id`` if given, else reuse the current one or mint a new id."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    minted = uuid.uuid4().hex
    CORRELATION_ID.set(minted)
    return minted


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Scope a correlation id to a block, restoring the previous one afterwards."""

    token = CORRELATION_ID.set(correlation_id or ensure_correlation_id())
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with scrubbed structured fields and the active correlation id."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    logger.log(
        level,
        event,
        exc_info=exc_info,
        extra={"event": event, "correlation_id": correlation_id, **redact_for_log(fields)},
    )


@contextlib.contextmanager
def operation_context(name: str, logger: logging.Logger | None = None, **attributes: Any) -> Iterator[str]:
    """Run a block under one correlation id and, given a logger, time it at DEBUG."""

    started = time.perf_counter()
    with correlation_context(attributes.pop("correlation_id", None)) as scoped_id:
        try:
            yield scoped_id
        finally:
            if logger is not None:
                log_event(
                    logger,
                    logging.DEBUG,
                    "operation_finished",
                    operation=name,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                    **attributes,
                )


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
