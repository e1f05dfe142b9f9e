"""Outfit collection providers backing the catalog loader."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from models.outfit import RemoteOutfit
from tools.observability import instrument_call

LOGGER = logging.getLogger(__name__)


class OutfitFetchError(RuntimeError):
    """Raised when the remote outfit collection cannot be retrieved or parsed."""


class _OutfitDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    name: str = Field(min_length=1)
    file: Optional[str] = None
    keywords: List[str] = []
    items: List[str] = []

    def to_remote_outfit(self) -> RemoteOutfit:
        return RemoteOutfit(
            name=self.name,
            file=self.file or "",
            keywords=list(self.keywords),
            items=list(self.items),
            remote_id=self.id,
        )


_OUTFIT_COLLECTION = TypeAdapter(List[_OutfitDocument])
_ITEM_COLLECTION = TypeAdapter(List[Dict[str, Any]])


class OutfitProvider(ABC):
    """Abstract source of remote outfit documents."""

    @abstractmethod
    def fetch_outfits(self) -> List[RemoteOutfit]:
        """Return every outfit in the remote collection.

        Raises :class:`OutfitFetchError` on any transport or schema failure.
        """

    def fetch_items(self) -> List[Dict[str, Any]]:
        """Return the loosely-typed garment documents, if the source has any."""

        return []


class HttpOutfitProvider(OutfitProvider):
    """Reads the backend's ``/getAllOutfits`` and ``/getAllItems`` routes."""

    def __init__(self, base_url: str, timeout_seconds: float | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _get_json(self, route: str) -> Any:
        url = f"{self.base_url}/{route}"
        try:
            response = requests.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise OutfitFetchError(f"{route} returned HTTP {status}") from exc
        except requests.RequestException as exc:
            raise OutfitFetchError(f"{route} unreachable: {exc}") from exc
        except ValueError as exc:
            raise OutfitFetchError(f"{route} returned malformed JSON") from exc

    @instrument_call("fetch_outfits")
    def fetch_outfits(self) -> List[RemoteOutfit]:
        payload = self._get_json("getAllOutfits")
        try:
            documents = _OUTFIT_COLLECTION.validate_python(payload)
        except ValidationError as exc:
            LOGGER.error("Outfit payload schema validation failed", exc_info=exc)
            raise OutfitFetchError("getAllOutfits payload failed schema validation") from exc
        return [document.to_remote_outfit() for document in documents]

    @instrument_call("fetch_items")
    def fetch_items(self) -> List[Dict[str, Any]]:
        payload = self._get_json("getAllItems")
        try:
            return _ITEM_COLLECTION.validate_python(payload)
        except ValidationError as exc:
            raise OutfitFetchError("getAllItems payload failed schema validation") from exc


class StaticOutfitProvider(OutfitProvider):
    """Provider used when no backend is configured; always empty."""

    def fetch_outfits(self) -> List[RemoteOutfit]:
        LOGGER.info("No backend configured, serving bundled outfits")
        return []


class MockOutfitProvider(OutfitProvider):
    """Offline deterministic provider for tests."""

    def __init__(
        self,
        outfits: List[RemoteOutfit] | None = None,
        items: List[Dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.outfits = list(outfits or [])
        self.items = list(items or [])
        self.error = error
        self.calls = 0

    def fetch_outfits(self) -> List[RemoteOutfit]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.outfits)

    def fetch_items(self) -> List[Dict[str, Any]]:
        return list(self.items)


__all__ = [
    "HttpOutfitProvider",
    "MockOutfitProvider",
    "OutfitFetchError",
    "OutfitProvider",
    "StaticOutfitProvider",
]
