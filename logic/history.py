"""Ordering helpers for the generated-image history view."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List

from models.generated import GeneratedRecord

SORT_ORDERS = ("newest", "oldest")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def sort_generated_records(records: Iterable[GeneratedRecord], order: str = "newest") -> List[GeneratedRecord]:
    """Sort records by creation time; undated records sort as the oldest."""

    normalized = (order or "newest").strip().lower()
    if normalized not in SORT_ORDERS:
        raise ValueError(f"Unsupported sort order '{order}'. Allowed: {list(SORT_ORDERS)}")
    return sorted(
        records,
        key=lambda record: record.created_at or _EPOCH,
        reverse=normalized == "newest",
    )


__all__ = ["SORT_ORDERS", "sort_generated_records"]
