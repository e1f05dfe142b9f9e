"""Observability helpers for instrumenting collaborator calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from outfit_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value
    return redact_for_log(preview)


def _result_size(result: object) -> int | None:
    try:
        return len(result)  # type: ignore[arg-type]
    except TypeError:
        return None


def instrument_call(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a callable to emit structured start, completion and failure logs."""

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            log_event(
                LOGGER,
                logging.INFO,
                "call_started",
                operation=operation,
                correlation_id=correlation_id,
                kwargs=_preview_kwargs(kwargs),
            )
            try:
                result = func(*args, **kwargs)
            except Exception:
                duration_ms = round((time.perf_counter() - start) * 1000, 2)
                log_event(
                    LOGGER,
                    logging.WARNING,
                    "call_failed",
                    operation=operation,
                    correlation_id=correlation_id,
                    duration_ms=duration_ms,
                    exc_info=True,
                )
                raise
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            log_event(
                LOGGER,
                logging.INFO,
                "call_completed",
                operation=operation,
                correlation_id=correlation_id,
                duration_ms=duration_ms,
                result_size=_result_size(result),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_call"]
