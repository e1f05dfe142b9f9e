"""Structured JSON logging for the outfit deck.

Every record is rendered as one JSON object carrying the event name, the
correlation id of the catalog load or request that produced it, and any extra
fields passed to :func:`log_event`. User ids, storage file ids and image URLs
are scrubbed before they reach the handler.
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
from typing import Any, Dict, Iterator, TextIO
from urllib.parse import urlsplit

CORRELATION_ID: contextvars.ContextVar[str | None] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))) | {"message", "asctime"}

_SENSITIVE_KEYS = frozenset(
    {
        "user_id",
        "email",
        "password",
        "image_id",
        "image_url",
        "preview_source",
        "file",
        "file_id",
    }
)
_EMAIL_PATTERN = re.compile(r"[\w.\-+]+@[\w\-]+(\.[\w\-]+)+")
_NOISY_LOGGERS = ("urllib3", "httpx", "uvicorn.access")


def _mask_url(value: str) -> str:
    parts = urlsplit(value)
    if not parts.netloc:
        return "[redacted-url]"
    return f"{parts.scheme}://{parts.netloc}/[redacted]"


def _scrub_text(value: str) -> str:
    if value.lower().startswith(("http://", "https://")):
        return _mask_url(value)
    return _EMAIL_PATTERN.sub("[redacted-email]", value)


def redact_for_log(payload: Any) -> Any:
    """Return a JSON-safe copy of ``payload`` with identifying values masked.

    Values stored under a sensitive key are replaced outright; URLs keep only
    their host so backend and storage failures stay diagnosable.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in _SENSITIVE_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set, frozenset)):
        return [redact_for_log(item) for item in payload]
    return _scrub_text(str(payload))


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        message = super().format(record)
        document: Dict[str, Any] = {
            "timestamp": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", record.getMessage()),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in document
        }
        document.update(redact_for_log(extras))
        return json.dumps(document, default=str)


def configure_logging(level: int | str | None = None, stream: TextIO | None = None) -> None:
    """Install the JSON handler on the root logger.

    ``LOG_LEVEL`` supplies the level when none is given. HTTP client loggers
    are held at WARNING so catalog fetches do not drown the app's own events.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO").upper())
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id`` or the one already in scope, minting one if neither exists."""

    resolved = correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex
    if resolved != CORRELATION_ID.get():
        CORRELATION_ID.set(resolved)
    return resolved


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the block and restore the previous one."""

    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()  # type: ignore[misc]
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with structured fields attached as record extras."""

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra = {key: value for key, value in redact_for_log(fields).items() if key not in _RECORD_ATTRS}
    extra.update(event=event, correlation_id=correlation_id)
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Scope a correlation id around a named operation and log how long it took."""

    logger = get_logger("outfit_app.operations")
    with correlation_context(attributes.pop("correlation_id", None)) as correlation_id:
        started = time.perf_counter()
        log_event(logger, logging.DEBUG, "operation_started", operation=name, **attributes)
        try:
            yield correlation_id
        finally:
            log_event(
                logger,
                logging.DEBUG,
                "operation_finished",
                operation=name,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )


__all__ = [
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
