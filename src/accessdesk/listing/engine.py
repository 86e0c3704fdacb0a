"""Search, filter, and sort a collection into an ordered view.

All functions are pure: they never mutate the input collection and return
lists that reference the input entities by identity.
"""

from __future__ import annotations

import logging
import unicodedata
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Sequence, TypeVar

from accessdesk.listing.models import EntityFilterState, SortDirection, SortKind
from accessdesk.listing.predicates import ListingSpec, SortField

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _fold(text: str) -> str:
    return unicodedata.normalize("NFKD", text).casefold()


def _collation_key(text: str) -> tuple[str, str]:
    """Order by base letters first, accents and case only break ties."""
    folded = _fold(text)
    base = "".join(c for c in folded if not unicodedata.combining(c))
    return base, folded


def filter_token(value: Any) -> str:
    """Render an accessor value as the string used in filter selections."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if value is None:
        return ""
    return str(value)


def _date_key(value: Any) -> datetime | None:
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def sort_value(field: SortField, item: Any) -> Any:
    """Return a comparable key for ``item``, or None when the value is missing."""
    value = field.get(item)
    if value is None:
        return None

    if field.kind == SortKind.STRING:
        text = filter_token(value)
        return _collation_key(text) if text else None
    if field.kind == SortKind.NUMBER:
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    if field.kind == SortKind.DATE:
        return _date_key(value)
    if field.kind == SortKind.RANK:
        return field.ranks.get(value)
    raise ValueError(f"Unsupported sort kind: {field.kind}")


# --- Operations ---


def apply_search(collection: Sequence[T], text: str, spec: ListingSpec) -> list[T]:
    """Keep items with any searchable string containing ``text``.

    Matching is case-insensitive. Blank text keeps everything in order.
    """
    needle = _fold(text.strip()) if text else ""
    if not needle:
        return list(collection)
    return [
        item
        for item in collection
        if any(s and needle in _fold(s) for s in spec.search_fields(item))
    ]


def apply_filters(
    collection: Sequence[T],
    active_filters: dict[str, set[str]],
    spec: ListingSpec,
) -> list[T]:
    """Keep items matching every non-empty selection (AND across keys, OR within).

    Raises:
        ValueError: If a selection names a key the listing cannot filter on.
    """
    selections = {k: v for k, v in active_filters.items() if v}
    for key in selections:
        if key not in spec.filter_fields:
            raise ValueError(f"Unknown filter: {key}")
    if not selections:
        return list(collection)
    return [
        item
        for item in collection
        if all(
            filter_token(spec.filter_fields[key](item)) in values
            for key, values in selections.items()
        )
    ]


def apply_sort(
    collection: Sequence[T],
    key: str | None,
    direction: SortDirection,
    spec: ListingSpec,
) -> list[T]:
    """Stable, type-aware sort. Items without a value for ``key`` go last.

    Raises:
        ValueError: If ``key`` is not a sortable field of the listing.
    """
    if key is None:
        return list(collection)
    field = spec.sort_fields.get(key)
    if field is None:
        raise ValueError(f"Unknown sort key: {key}")

    present: list[tuple[Any, T]] = []
    missing: list[T] = []
    for item in collection:
        value = sort_value(field, item)
        if value is None:
            missing.append(item)
        else:
            present.append((value, item))

    ordered = sorted(
        present,
        key=lambda pair: pair[0],
        reverse=direction == SortDirection.DESC,
    )
    return [item for _, item in ordered] + missing


def derive_view(
    collection: Sequence[T], state: EntityFilterState, spec: ListingSpec
) -> list[T]:
    searched = apply_search(collection, state.search_text, spec)
    filtered = apply_filters(searched, state.active_filters, spec)
    return apply_sort(filtered, state.sort_key, state.sort_direction, spec)


class FilterSortEngine:
    """Derives views for one listing and remembers the last result.

    The memo is keyed on the identity of every item in the collection and an
    equal copy of the filter state; any change recomputes the whole view.
    """

    def __init__(self, spec: ListingSpec) -> None:
        self._spec = spec
        self._memo_items: list[Any] | None = None
        self._memo_state: EntityFilterState | None = None
        self._memo_view: list[Any] = []

    @property
    def spec(self) -> ListingSpec:
        return self._spec

    def validate_state(self, state: EntityFilterState) -> None:
        """Raise ValueError if ``state`` uses undeclared filters, options, or sort keys."""
        filters = self._spec.filter_map
        for key, values in state.active_filters.items():
            config = filters.get(key)
            if config is None:
                raise ValueError(f"Unknown filter: {key}")
            unknown = set(values) - config.values
            if unknown:
                raise ValueError(
                    f"Invalid value(s) for filter {key!r}: {', '.join(sorted(unknown))}"
                )
        if state.sort_key is not None and state.sort_key not in self._spec.sort_fields:
            raise ValueError(f"Unknown sort key: {state.sort_key}")

    def _is_cached(self, collection: Sequence[Any], state: EntityFilterState) -> bool:
        if self._memo_items is None or self._memo_state != state:
            return False
        if len(self._memo_items) != len(collection):
            return False
        return all(a is b for a, b in zip(self._memo_items, collection))

    def derive(self, collection: Sequence[T], state: EntityFilterState) -> list[T]:
        self.validate_state(state)
        if self._is_cached(collection, state):
            return list(self._memo_view)

        view = derive_view(collection, state, self._spec)
        self._memo_items = list(collection)
        self._memo_state = state.model_copy(deep=True)
        self._memo_view = view
        logger.debug(
            "Derived %s view: %d of %d items", self._spec.name, len(view), len(collection)
        )
        return list(view)
