"""Timing and failure logging around outbound provider calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from mirror_app.logging_config import ensure_correlation_id, get_logger, log_event

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def instrument_tool(tool_name: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, outcome and duration of a provider call.

    Failures are logged with their classified reason when they carry one and
    then re-raised; choosing a fallback is up to the caller. Arguments are
    not logged because they are locations.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            started = time.perf_counter()
            log_event(LOGGER, logging.DEBUG, "provider_call_started", tool=tool_name, correlation_id=correlation_id)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                reason = getattr(exc, "reason", None)
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "provider_call_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(started),
                    error=type(exc).__name__,
                    reason=getattr(reason, "value", reason),
                )
                raise
            log_event(
                LOGGER,
                logging.DEBUG,
                "provider_call_completed",
                tool=tool_name,
                correlation_id=correlation_id,
                duration_ms=_elapsed_ms(started),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]
