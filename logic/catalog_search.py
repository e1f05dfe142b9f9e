"""Deterministic search and filter functions over the card catalog."""

from __future__ import annotations

from typing import Iterable, List

from models.card import Card, CreateCard, OutfitCard, is_create_card
from models.filter_state import FilterState, GeneratedStatus
from models.generated import GeneratedRecord, generated_outfit_ids
from models.taxonomy import expand_occasion, normalize_keyword


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.lower()


def matches_keyword(card: Card, query: str) -> bool:
    """Case-insensitive substring match against the title and every keyword."""

    needle = normalize_keyword(query)
    if not needle:
        return True
    if _contains(card.title, needle):
        return True
    terms = card.keywords if is_create_card(card) else card.searchable_terms
    return any(_contains(term, needle) for term in terms)


def matches_occasions(card: OutfitCard, occasions: Iterable[str]) -> bool:
    """True when any synonym of any selected occasion occurs inside a keyword."""

    selected = list(occasions)
    if not selected:
        return True
    terms = [term.lower() for term in card.searchable_terms]
    for occasion in selected:
        for synonym in expand_occasion(occasion):
            if any(synonym in term for term in terms):
                return True
    return False


def matches_gender(card: OutfitCard, gender: str | None) -> bool:
    if not gender:
        return True
    wanted = normalize_keyword(gender)
    return any(term.lower() == wanted for term in card.searchable_terms)


def matches_generated_status(card: OutfitCard, status: GeneratedStatus, generated_ids: set[str]) -> bool:
    if status is GeneratedStatus.ALL:
        return True
    generated = not card.generation_keys.isdisjoint(generated_ids)
    if status is GeneratedStatus.GENERATED:
        return generated
    return not generated


def _include_create_card(card: CreateCard, state: FilterState) -> bool:
    if state.query:
        return matches_keyword(card, state.query)
    return not state.has_non_text_filters


def apply_filter(
    original: List[Card],
    state: FilterState,
    generated_records: Iterable[GeneratedRecord] = (),
) -> List[Card]:
    """Return the cards that satisfy ``state``, preserving catalog order.

    The default state returns ``original`` itself. The ``create`` card is kept
    for a matching text search or when no filter at all is active, and drops
    out as soon as an occasion, gender or generated-status filter is engaged.
    """

    if state.is_default:
        return original

    generated_ids = generated_outfit_ids(generated_records)
    filtered: List[Card] = []
    for card in original:
        if is_create_card(card):
            if _include_create_card(card, state):
                filtered.append(card)
            continue
        if not matches_keyword(card, state.query):
            continue
        if not matches_occasions(card, state.occasions):
            continue
        if not matches_gender(card, state.gender):
            continue
        if not matches_generated_status(card, state.generated_status, generated_ids):
            continue
        filtered.append(card)
    return filtered


def clear_filter(original: List[Card]) -> List[Card]:
    """Reset to the default filter state, which yields ``original`` unchanged."""

    return apply_filter(original, FilterState())


__all__ = [
    "apply_filter",
    "clear_filter",
    "matches_gender",
    "matches_generated_status",
    "matches_keyword",
    "matches_occasions",
]
