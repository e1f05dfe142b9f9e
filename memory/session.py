"""Explicit user session handed to screen controllers."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import List
from uuid import uuid4

from memory.user_profile import UserProfileCache, validate_user_id
from models.generated import GeneratedRecord


class SessionClosedError(RuntimeError):
    """Raised when a closed session is used to read or write profile data."""


@dataclass
class UserSession:
    """Signed-in user state, created at app start and closed at logout."""

    user_id: str
    profile_cache: UserProfileCache
    session_id: str = field(default_factory=lambda: str(uuid4()))
    created_at: float = field(default_factory=lambda: time.time())
    active: bool = True

    def __post_init__(self) -> None:
        validate_user_id(self.user_id)

    def _require_active(self) -> None:
        if not self.active:
            raise SessionClosedError(f"Session {self.session_id} is closed")

    def generated_records(self) -> List[GeneratedRecord]:
        """Outfits this user already rendered; empty once the session is closed."""

        if not self.active:
            return []
        return self.profile_cache.get_generated_records(self.user_id)

    def record_generated_image(self, image_id: str, outfit_id: str) -> GeneratedRecord:
        self._require_active()
        return self.profile_cache.record_generated_image(self.user_id, image_id, outfit_id)

    def close(self, clear_cache: bool = False) -> None:
        """Tear the session down at logout, optionally dropping the cached profile."""

        if clear_cache and self.active:
            self.profile_cache.clear_profile(self.user_id)
        self.active = False


__all__ = ["SessionClosedError", "UserSession"]
