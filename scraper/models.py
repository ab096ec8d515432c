"""Wire models for PokeAPI listing pages."""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class ListingEntry(BaseModel):
    """Minimal ``{name, url}`` reference returned by a paginated listing."""

    name: Optional[str] = None
    url: Optional[str] = None


class CatalogPage(BaseModel):
    """One page of ``GET /<endpoint>?limit=…&offset=…``."""

    count: Optional[int] = None
    next: Optional[str] = None
    results: List[Optional[ListingEntry]] = Field(default_factory=list)

    @field_validator("count", mode="before")
    @classmethod
    def _count_must_be_a_number(cls, value: Any) -> Optional[int]:
        # A missing or non-numeric count means "unknown", never zero
        if isinstance(value, bool):
            return None
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if not isinstance(value, int):
            return None
        return value

    @field_validator("results", mode="before")
    @classmethod
    def _null_results_mean_empty(cls, value: Any) -> Any:
        return [] if value is None else value
