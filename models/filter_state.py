"""Transient filter state for the home screen search panel."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional

from models.taxonomy import normalize_keyword


class GeneratedStatus(str, Enum):
    ALL = "all"
    GENERATED = "generated"
    NOT_GENERATED = "not_generated"


def _coerce_status(value: GeneratedStatus | str | None) -> GeneratedStatus:
    if isinstance(value, GeneratedStatus):
        return value
    try:
        return GeneratedStatus(normalize_keyword(value or GeneratedStatus.ALL.value))
    except ValueError:
        return GeneratedStatus.ALL


@dataclass(frozen=True)
class FilterState:
    """Search query plus the occasion, gender and generated-status filters.

    Values are normalised on construction: the query is trimmed, occasion ids
    and the gender tag are lower-cased and an unrecognised generated status
    falls back to ``all``.
    """

    query: str = ""
    occasions: FrozenSet[str] = field(default_factory=frozenset)
    gender: Optional[str] = None
    generated_status: GeneratedStatus = GeneratedStatus.ALL

    def __post_init__(self) -> None:
        object.__setattr__(self, "query", str(self.query or "").strip())
        occasions = frozenset(normalize_keyword(o) for o in (self.occasions or ()) if normalize_keyword(o))
        object.__setattr__(self, "occasions", occasions)
        gender = normalize_keyword(self.gender) if self.gender else ""
        object.__setattr__(self, "gender", gender or None)
        object.__setattr__(self, "generated_status", _coerce_status(self.generated_status))

    @classmethod
    def build(
        cls,
        query: str = "",
        occasions: Iterable[str] | None = None,
        gender: Optional[str] = None,
        generated_status: GeneratedStatus | str | None = None,
    ) -> "FilterState":
        return cls(
            query=query,
            occasions=frozenset(occasions or ()),
            gender=gender,
            generated_status=_coerce_status(generated_status),
        )

    @property
    def normalized_query(self) -> str:
        return self.query.lower()

    @property
    def has_non_text_filters(self) -> bool:
        return bool(self.occasions) or self.gender is not None or self.generated_status is not GeneratedStatus.ALL

    @property
    def is_default(self) -> bool:
        return not self.query and not self.has_non_text_filters


__all__ = ["FilterState", "GeneratedStatus"]
