"""Card view-models displayed in the home screen deck.

A :data:`Card` is one of three variants. The catalog loader is the only place
that turns outfits into cards, so downstream code can branch on ``kind`` (or
``isinstance``) instead of sniffing the shape of the underlying record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Union

from models.outfit import RemoteOutfit, StaticOutfit
from models.taxonomy import CREATE_CARD_KEYWORDS, normalise_keywords

CREATE_CARD_ID = "create"
CREATE_CARD_TITLE = "Create your outfit"


class CardKind(str, Enum):
    CREATE = "create"
    OUTFIT = "outfit"


@dataclass(frozen=True)
class CreateCard:
    """Sentinel card offering the outfit-creation flow."""

    id: str = CREATE_CARD_ID
    title: str = CREATE_CARD_TITLE
    keywords: List[str] = field(default_factory=lambda: list(CREATE_CARD_KEYWORDS))

    @property
    def kind(self) -> CardKind:
        return CardKind.CREATE


@dataclass(frozen=True)
class _OutfitCardBase(ABC):
    id: str
    title: str
    preview_source: str
    keywords: List[str] = field(default_factory=list)
    item_keywords: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", normalise_keywords(self.keywords))
        object.__setattr__(self, "item_keywords", normalise_keywords(self.item_keywords))

    @property
    def kind(self) -> CardKind:
        return CardKind.OUTFIT

    @property
    def searchable_terms(self) -> List[str]:
        """Outfit keywords followed by the flattened item keywords."""

        return list(self.keywords) + list(self.item_keywords)

    @property
    @abstractmethod
    def generation_keys(self) -> FrozenSet[str]:
        """Identifiers a generated-image record may use to reference this outfit."""


@dataclass(frozen=True)
class StaticOutfitCard(_OutfitCardBase):
    """Card built from a bundled predefined outfit."""

    outfit: Optional[StaticOutfit] = None

    @property
    def generation_keys(self) -> FrozenSet[str]:
        return frozenset({self.id})


@dataclass(frozen=True)
class RemoteOutfitCard(_OutfitCardBase):
    """Card built from a backend outfit document."""

    remote_ref: Optional[RemoteOutfit] = None

    @property
    def generation_keys(self) -> FrozenSet[str]:
        # Older profile records reference remote outfits by display name.
        keys = {self.title}
        if self.remote_ref is not None and self.remote_ref.remote_id:
            keys.add(self.remote_ref.remote_id)
        return frozenset(keys)


OutfitCard = Union[StaticOutfitCard, RemoteOutfitCard]
Card = Union[CreateCard, StaticOutfitCard, RemoteOutfitCard]


def is_create_card(card: Card) -> bool:
    return isinstance(card, CreateCard)


def card_to_dict(card: Card) -> Dict[str, Any]:
    """Serialise a card into a JSON-friendly dict."""

    if isinstance(card, CreateCard):
        return {
            "kind": card.kind.value,
            "id": card.id,
            "title": card.title,
            "keywords": list(card.keywords),
        }
    payload: Dict[str, Any] = {
        "kind": card.kind.value,
        "id": card.id,
        "title": card.title,
        "preview_source": card.preview_source,
        "keywords": list(card.keywords),
        "item_keywords": list(card.item_keywords),
        "source": "remote" if isinstance(card, RemoteOutfitCard) else "static",
    }
    if isinstance(card, RemoteOutfitCard) and card.remote_ref is not None:
        payload["remote_ref"] = {
            "name": card.remote_ref.name,
            "remote_id": card.remote_ref.remote_id,
            "items": list(card.remote_ref.items),
        }
    return payload


__all__ = [
    "CREATE_CARD_ID",
    "CREATE_CARD_TITLE",
    "Card",
    "CardKind",
    "CreateCard",
    "OutfitCard",
    "RemoteOutfitCard",
    "StaticOutfitCard",
    "card_to_dict",
    "is_create_card",
]
