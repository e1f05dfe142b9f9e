"""Records of outfits a user has already rendered onto their photo."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        # Millisecond epoch, as produced by JavaScript clients.
        try:
            return datetime.fromtimestamp(float(value) / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class GeneratedRecord:
    """Join between a user and an outfit they produced an image for."""

    image_id: str
    outfit_id: str
    created_at: Optional[datetime] = None

    def to_profile_entry(self) -> Dict[str, Any]:
        """Serialise using the camelCase keys of the cached profile document."""

        return {
            "imageId": self.image_id,
            "outfitId": self.outfit_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


def from_profile_entry(entry: Dict[str, Any]) -> GeneratedRecord:
    """Build a :class:`GeneratedRecord` from a ``createdImages`` entry."""

    image_id = entry.get("imageId") or entry.get("image_id")
    outfit_id = entry.get("outfitId") or entry.get("outfit_id")
    if not image_id or not outfit_id:
        raise ValueError(f"Incomplete generated image entry: {sorted(entry)}")
    return GeneratedRecord(
        image_id=str(image_id),
        outfit_id=str(outfit_id),
        created_at=_parse_timestamp(entry.get("createdAt", entry.get("created_at"))),
    )


def generated_outfit_ids(records: Iterable[GeneratedRecord]) -> set[str]:
    return {record.outfit_id for record in records}


def parse_profile_entries(entries: Any) -> List[GeneratedRecord]:
    """Parse ``createdImages`` entries, skipping incomplete ones.

    Anything other than a list (a corrupted cache) yields no records.
    """

    if not isinstance(entries, list):
        return []
    records: List[GeneratedRecord] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            records.append(from_profile_entry(entry))
        except ValueError:
            continue
    return records


__all__ = [
    "GeneratedRecord",
    "from_profile_entry",
    "generated_outfit_ids",
    "parse_profile_entries",
]
