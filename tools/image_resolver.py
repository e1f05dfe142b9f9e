"""Derive display URLs for object-storage file identifiers."""

from __future__ import annotations

import logging
import re
from urllib.parse import quote, urlencode

LOGGER = logging.getLogger(__name__)

# Storage ids: up to 36 chars of a-z, A-Z, 0-9, period, hyphen, underscore,
# not starting with a special character.
_FILE_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]{0,35}$")


class ImageResolutionError(ValueError):
    """Raised when a storage file identifier cannot be turned into a URL."""


class StorageImageResolver:
    """Builds download URLs for files held in an object-storage bucket.

    Resolution is purely local string work; the image layer fetches the URL
    lazily when it renders the card.
    """

    def __init__(self, endpoint: str, project_id: str, bucket_id: str) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.project_id = project_id
        self.bucket_id = bucket_id

    def resolve(self, file_id: object) -> str:
        if not isinstance(file_id, str) or not file_id.strip():
            raise ImageResolutionError("missing storage file id")
        candidate = file_id.strip()
        if not _FILE_ID_PATTERN.match(candidate):
            raise ImageResolutionError(f"malformed storage file id: {candidate!r}")
        if not self.bucket_id:
            raise ImageResolutionError("storage bucket is not configured")
        path = (
            f"{self.endpoint}/storage/buckets/{quote(self.bucket_id, safe='')}"
            f"/files/{quote(candidate, safe='')}/download"
        )
        if self.project_id:
            return f"{path}?{urlencode({'project': self.project_id})}"
        return path

    def try_resolve(self, file_id: object) -> str | None:
        """Return the URL or ``None`` when the id does not resolve."""

        try:
            return self.resolve(file_id)
        except ImageResolutionError as exc:
            LOGGER.debug("Image resolution failed", extra={"reason": str(exc)})
            return None


__all__ = ["ImageResolutionError", "StorageImageResolver"]
