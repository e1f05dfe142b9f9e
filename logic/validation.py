"""Pydantic schemas for catalog requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from memory.user_profile import validate_user_id
from models.filter_state import FilterState, GeneratedStatus
from models.taxonomy import GENDERS


class SearchRequest(BaseModel):
    """Filter panel payload; omitted fields mean "filter inactive"."""

    user_id: Optional[str] = None
    query: str = Field(default="", max_length=200)
    occasions: List[str] = []
    gender: Optional[str] = None
    generated_status: GeneratedStatus = GeneratedStatus.ALL

    @field_validator("user_id")
    @classmethod
    def _validate_user_id(cls, user_id: Optional[str]) -> Optional[str]:
        return validate_user_id(user_id) if user_id is not None else None

    @field_validator("gender")
    @classmethod
    def _validate_gender(cls, gender: Optional[str]) -> Optional[str]:
        if gender is None or not gender.strip() or gender.strip().lower() == "none":
            return None
        normalized = gender.strip().lower()
        if normalized not in GENDERS:
            raise ValueError(f"gender must be one of {GENDERS}")
        return normalized

    def to_filter_state(self) -> FilterState:
        return FilterState.build(
            query=self.query,
            occasions=self.occasions,
            gender=self.gender,
            generated_status=self.generated_status,
        )


class CatalogResponse(BaseModel):
    """Cards plus the view state the screen should render."""

    view_state: Literal["ready", "no_results"]
    provenance: Optional[Literal["remote", "static"]] = None
    count: int
    cards: List[Dict[str, Any]]


class HistoryEntry(BaseModel):
    image_id: str
    outfit_id: str
    created_at: Optional[str] = None


__all__ = ["CatalogResponse", "HistoryEntry", "SearchRequest"]
