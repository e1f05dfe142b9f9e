"""Canonical taxonomy definitions for outfits and garments.

This module centralises the labels used by the catalog: garment categories,
gender tags and the occasion synonym table consulted by the search engine.
Helper functions keep keyword normalisation consistent across the loader, the
filter engine and the data models.
"""

from typing import Dict, Iterable, List


def normalize_keyword(value: object) -> str:
    """Normalise a free-form keyword for case-insensitive matching."""

    return str(value).strip().lower()


CATEGORIES: List[str] = ["Tops", "Bottoms", "Shoes", "Dresses", "Outerwear", "Accessories"]

GENDERS: List[str] = ["male", "female"]

OCCASION_SYNONYMS: Dict[str, List[str]] = {
    "work": ["work", "office", "business", "professional", "business casual", "formal"],
    "casual": ["casual", "everyday", "relaxed", "weekend", "comfort"],
    "party": ["party", "night out", "club", "celebration", "festive"],
    "date": ["date", "date night", "romantic", "dinner"],
    "vacation": ["vacation", "holiday", "beach", "summer", "travel"],
    "sport": ["sport", "gym", "athletic", "active", "workout"],
    "formal": ["formal", "wedding", "gala", "elegant", "black tie"],
    "street": ["street", "streetwear", "urban", "skate"],
}

CREATE_CARD_KEYWORDS: List[str] = ["create", "new", "custom", "design"]


def expand_occasion(occasion: str) -> List[str]:
    """Return the synonym keywords for an occasion id.

    Unknown ids expand to the raw id itself so that malformed filter input
    simply fails to match instead of raising.
    """

    key = normalize_keyword(occasion)
    return list(OCCASION_SYNONYMS.get(key, [key]))


def normalise_keywords(values: Iterable[object] | None) -> List[str]:
    """Normalise and deduplicate keywords, preserving first-seen order."""

    normalised: List[str] = []
    seen = set()
    for value in values or []:
        key = normalize_keyword(value)
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


def validate_category(value: str) -> str:
    """Validate a garment category against the canonical list.

    The category set is open in the source data, so unknown values are kept as
    given (title-cased) rather than rejected.
    """

    cleaned = str(value).strip()
    if not cleaned:
        raise ValueError(f"Unsupported category '{value}'. Known: {CATEGORIES}")
    for category in CATEGORIES:
        if category.lower() == cleaned.lower():
            return category
    return cleaned.title()


__all__ = [
    "CATEGORIES",
    "GENDERS",
    "OCCASION_SYNONYMS",
    "CREATE_CARD_KEYWORDS",
    "expand_occasion",
    "normalize_keyword",
    "normalise_keywords",
    "validate_category",
]
