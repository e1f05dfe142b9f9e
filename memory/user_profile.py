"""Cached user profile documents and generated-image bookkeeping."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from models.generated import GeneratedRecord, parse_profile_entries

# Backend user ids: letters, digits, period, hyphen, underscore or @; no path parts.
_USER_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._@\-]{0,127}$")


class InvalidUserIdError(ValueError):
    """Raised when a user id cannot safely name a cached profile file."""


def validate_user_id(user_id: object) -> str:
    """Return ``user_id`` unchanged or raise :class:`InvalidUserIdError`."""

    if not isinstance(user_id, str) or not _USER_ID_PATTERN.match(user_id) or ".." in user_id:
        raise InvalidUserIdError(f"Invalid user id: {user_id!r}")
    return user_id


class UserProfileCache:
    """JSON-backed mirror of the remote user profile document.

    Each profile lives in ``<base_dir>/<user_id>.json`` and keeps the backend's
    camelCase shape, e.g. ``{"name": ..., "createdImages": [...]}``.
    """

    def __init__(self, base_dir: str | Path = "data/profiles") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _profile_path(self, user_id: str) -> Path:
        path = self.base_dir / f"{validate_user_id(user_id)}.json"
        if path.resolve().parent != self.base_dir.resolve():
            raise InvalidUserIdError(f"Invalid user id: {user_id!r}")
        return path

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        path = self._profile_path(user_id)
        if not path.exists():
            return {"createdImages": []}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {"createdImages": []}
        return data if isinstance(data, dict) else {"createdImages": []}

    def save_profile(self, user_id: str, profile: Dict[str, Any]) -> Dict[str, Any]:
        self._profile_path(user_id).write_text(json.dumps(profile, indent=2), encoding="utf-8")
        return profile

    def update_profile(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        profile = self.get_profile(user_id)
        profile.update(updates)
        return self.save_profile(user_id, profile)

    def get_generated_records(self, user_id: str) -> List[GeneratedRecord]:
        return parse_profile_entries(self.get_profile(user_id).get("createdImages"))

    def record_generated_image(self, user_id: str, image_id: str, outfit_id: str) -> GeneratedRecord:
        """Append a ``createdImages`` entry the way the backend does after a render."""

        record = GeneratedRecord(image_id=image_id, outfit_id=outfit_id, created_at=datetime.now(timezone.utc))
        profile = self.get_profile(user_id)
        entries = profile.get("createdImages")
        if not isinstance(entries, list):
            entries = []
        entries.append(record.to_profile_entry())
        profile["createdImages"] = entries
        self.save_profile(user_id, profile)
        return record

    def clear_profile(self, user_id: str) -> None:
        path = self._profile_path(user_id)
        if path.exists():
            path.unlink()


__all__ = ["InvalidUserIdError", "UserProfileCache", "validate_user_id"]
