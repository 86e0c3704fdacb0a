"""List holders that fetch a collection and derive its filtered view."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from accessdesk.api.client import ApiError, RestClient
from accessdesk.core.config import ListConfig
from accessdesk.entities.models import AccessibilityIssue, Client, ClientItem, Project, ProjectItem
from accessdesk.listing.engine import FilterSortEngine
from accessdesk.listing.models import EntityFilterState, SortDirection
from accessdesk.listing.predicates import (
    CLIENT_LISTING,
    CombinedKind,
    ListingSpec,
    combine,
    combined_listing,
    issue_listing,
    project_listing,
)

logger = logging.getLogger(__name__)


class ListView:
    """Owns one listing's raw collection, filter state, and engine.

    Only one load runs at a time. A response that arrives after ``close()``
    is dropped. Fetch failures leave an empty collection and set ``error``.
    """

    label = "items"

    def __init__(
        self,
        api_client: RestClient,
        spec: ListingSpec,
        state: EntityFilterState | None = None,
        config: ListConfig | None = None,
    ) -> None:
        self._api = api_client
        self._engine = FilterSortEngine(spec)
        if state is None:
            config = config or ListConfig()
            state = EntityFilterState(
                sort_key=config.default_sort_key,
                sort_direction=SortDirection(config.default_sort_direction),
            )
        self._engine.validate_state(state)
        self._state = state
        self._items: list[Any] = []
        self._loading = False
        self._closed = False
        self.error: str | None = None

    @property
    def spec(self) -> ListingSpec:
        return self._engine.spec

    @property
    def state(self) -> EntityFilterState:
        return self._state.model_copy(deep=True)

    @property
    def items(self) -> list[Any]:
        return list(self._items)

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def view(self) -> list[Any]:
        return self._engine.derive(self._items, self._state)

    async def load(self) -> bool:
        """Fetch the collection. Returns False if the load was skipped or dropped."""
        if self._closed or self._loading:
            return False

        self._loading = True
        error: str | None = None
        spec = self.spec
        try:
            items, spec = await self._fetch()
        except ApiError as exc:
            items = []
            error = f"Failed to load {self.label}: {exc.message}"
        finally:
            self._loading = False

        if self._closed:
            logger.info("Discarding %s response for closed view", self.label)
            return False

        if error:
            logger.warning("%s", error)
        if spec is not self.spec:
            self._engine = FilterSortEngine(spec)
            self._state = _prune_state(self._state, spec)
        self._items = items
        self.error = error
        return True

    async def _fetch(self) -> tuple[list[Any], ListingSpec]:
        raise NotImplementedError

    def close(self) -> None:
        self._closed = True

    # -- state mutators ------------------------------------------------------

    def _apply(self, state: EntityFilterState) -> None:
        self._engine.validate_state(state)
        self._state = state

    def set_search(self, text: str) -> None:
        self._apply(self._state.model_copy(update={"search_text": text}))

    def set_filter(self, key: str, values: Iterable[str]) -> None:
        filters = {k: set(v) for k, v in self._state.active_filters.items()}
        filters[key] = set(values)
        self._apply(self._state.model_copy(update={"active_filters": filters}))

    def toggle_filter(self, key: str, value: str) -> None:
        current = set(self._state.active_filters.get(key, set()))
        current.symmetric_difference_update({value})
        self.set_filter(key, current)

    def clear_filters(self) -> None:
        self._apply(self._state.model_copy(update={"search_text": "", "active_filters": {}}))

    def set_sort(self, key: str | None, direction: SortDirection | None = None) -> None:
        """Sort by ``key``. Without a direction, re-selecting the key flips it."""
        if direction is None:
            if key == self._state.sort_key and self._state.sort_direction == SortDirection.ASC:
                direction = SortDirection.DESC
            else:
                direction = SortDirection.ASC
        self._apply(
            self._state.model_copy(update={"sort_key": key, "sort_direction": direction})
        )


def _prune_state(state: EntityFilterState, spec: ListingSpec) -> EntityFilterState:
    """Drop selections the refreshed listing no longer offers."""
    declared = spec.filter_map
    filters = {
        key: {v for v in values if v in declared[key].values}
        for key, values in state.active_filters.items()
        if key in declared
    }
    sort_key = state.sort_key if state.sort_key in spec.sort_fields else None
    return state.model_copy(update={"active_filters": filters, "sort_key": sort_key})


class ClientListView(ListView):
    label = "clients"

    def __init__(self, api_client: RestClient, **kwargs: Any) -> None:
        super().__init__(api_client, CLIENT_LISTING, **kwargs)

    async def _fetch(self) -> tuple[list[Client], ListingSpec]:
        return await self._api.list_clients(), CLIENT_LISTING


class ProjectListView(ListView):
    label = "projects"

    def __init__(self, api_client: RestClient, **kwargs: Any) -> None:
        super().__init__(api_client, project_listing(), **kwargs)

    async def _fetch(self) -> tuple[list[Project], ListingSpec]:
        clients = await self._api.list_clients()
        projects = await self._api.list_projects()
        return projects, project_listing(clients)


class IssueListView(ListView):
    label = "issues"

    def __init__(self, api_client: RestClient, **kwargs: Any) -> None:
        super().__init__(api_client, issue_listing(), **kwargs)

    async def _fetch(self) -> tuple[list[AccessibilityIssue], ListingSpec]:
        issues = await self._api.list_issues()
        projects = await self._api.list_projects()
        return issues, issue_listing(projects)


class CombinedListView(ListView):
    """Clients and projects in one list, optionally narrowed to one kind."""

    label = "clients and projects"

    def __init__(
        self, api_client: RestClient, kind: CombinedKind = "all", **kwargs: Any
    ) -> None:
        if kind not in ("all", "clients", "projects"):
            raise ValueError(f"Unknown item type {kind!r}")
        self.kind = kind
        super().__init__(api_client, combined_listing(), **kwargs)

    async def _fetch(self) -> tuple[list[ClientItem | ProjectItem], ListingSpec]:
        clients = await self._api.list_clients()
        projects = await self._api.list_projects() if self.kind != "clients" else []
        return combine(clients, projects, self.kind), combined_listing(clients)
