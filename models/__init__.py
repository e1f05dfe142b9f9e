"""Model package exports."""

from models.card import Card, CardKind, CreateCard, RemoteOutfitCard, StaticOutfitCard
from models.filter_state import FilterState, GeneratedStatus
from models.generated import GeneratedRecord
from models.outfit import OutfitItem, OutfitItemRef, RemoteOutfit, StaticOutfit

__all__ = [
    "Card",
    "CardKind",
    "CreateCard",
    "FilterState",
    "GeneratedRecord",
    "GeneratedStatus",
    "OutfitItem",
    "OutfitItemRef",
    "RemoteOutfit",
    "RemoteOutfitCard",
    "StaticOutfit",
    "StaticOutfitCard",
]
