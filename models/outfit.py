"""Outfit and garment schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models.taxonomy import normalise_keywords, validate_category


@dataclass(frozen=True)
class OutfitItem:
    """A single bundled garment."""

    item_id: str
    name: str
    category: str
    image_ref: str
    keywords: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", validate_category(self.category))
        object.__setattr__(self, "keywords", normalise_keywords(self.keywords))


@dataclass(frozen=True)
class OutfitItemRef:
    """Reference from a predefined outfit to one of its garments."""

    item_id: str
    label: str


@dataclass(frozen=True)
class StaticOutfit:
    """Predefined outfit bundled with the app."""

    outfit_id: str
    name: str
    preview_image: str
    keywords: List[str] = field(default_factory=list)
    items: List[OutfitItemRef] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", normalise_keywords(self.keywords))


@dataclass(frozen=True)
class RemoteOutfit:
    """Outfit document fetched from the backend outfit collection.

    ``items`` holds raw image-storage file identifiers rather than garment ids.
    """

    name: str
    file: str
    keywords: List[str] = field(default_factory=list)
    items: List[str] = field(default_factory=list)
    remote_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", normalise_keywords(self.keywords))
        object.__setattr__(self, "items", [str(item) for item in self.items])


__all__ = [
    "OutfitItem",
    "OutfitItemRef",
    "StaticOutfit",
    "RemoteOutfit",
]
