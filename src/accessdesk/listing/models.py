"""Models for list filtering and sorting."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortKind(StrEnum):
    """How values of a sort field are compared."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    RANK = "rank"


class FilterOption(BaseModel):
    label: str
    value: str


class FilterConfig(BaseModel):
    """A categorical filter and the option set it accepts."""

    key: str
    label: str
    options: list[FilterOption] = Field(default_factory=list)

    @property
    def values(self) -> set[str]:
        return {o.value for o in self.options}


class EntityFilterState(BaseModel):
    """Search, filter, and sort criteria of one listing.

    A key mapped to an empty set imposes no constraint.
    """

    search_text: str = ""
    active_filters: dict[str, set[str]] = Field(default_factory=dict)
    sort_key: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
