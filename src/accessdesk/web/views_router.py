"""FastAPI router for filtered list views and dashboard summaries."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from accessdesk.api.client import ApiError
from accessdesk.listing.models import SortDirection
from accessdesk.listing.summary import issue_stats, portfolio_summary, project_issue_stats
from accessdesk.listing.view import (
    ClientListView,
    CombinedListView,
    IssueListView,
    ListView,
    ProjectListView,
)

router = APIRouter()

# Shorthand used by the combined view's "Sort by" menu.
RECENT_SORT = "recent"


def _parse_filters(raw: list[str]) -> dict[str, set[str]]:
    """Parse repeated ``filter=key:value`` params into selection sets."""
    filters: dict[str, set[str]] = {}
    for item in raw:
        key, sep, value = item.partition(":")
        if not sep or not key or not value:
            raise ValueError(f"Malformed filter {item!r}; expected key:value")
        filters.setdefault(key, set()).add(value)
    return filters


def _build_view(request: Request, name: str, kind: str) -> ListView:
    api = request.app.state.api_client
    config = request.app.state.settings.listing
    if name == "clients":
        return ClientListView(api, config=config)
    if name == "projects":
        return ProjectListView(api, config=config)
    if name == "issues":
        return IssueListView(api, config=config)
    if name == "combined":
        return CombinedListView(api, kind, config=config)
    raise KeyError(f"Unknown view: {name!r}")


def _dump(item: Any) -> Any:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json", by_alias=True)
    return item


@router.get("/api/views/{name}")
async def get_view(
    name: str,
    request: Request,
    search: str = "",
    filters: list[str] = Query(default=[], alias="filter"),
    sort: str | None = None,
    direction: SortDirection | None = None,
    kind: str = "all",
) -> dict[str, Any]:
    try:
        view = _build_view(request, name, kind)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        selections = _parse_filters(filters)
        await view.load()
        view.set_search(search)
        # Client and project filter options come from the fetch itself.
        if view.error is None:
            for key, values in selections.items():
                view.set_filter(key, values)
        if sort == RECENT_SORT:
            view.set_sort("created_at", SortDirection.DESC)
        elif sort is not None:
            view.set_sort(sort, direction or SortDirection.ASC)
        items = view.view
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    finally:
        view.close()

    state = view.state
    return {
        "items": [_dump(item) for item in items],
        "total": len(items),
        "loaded": len(view.items),
        "error": view.error,
        "state": {
            "search_text": state.search_text,
            "active_filters": {k: sorted(v) for k, v in state.active_filters.items()},
            "sort_key": state.sort_key,
            "sort_direction": state.sort_direction.value,
        },
        "filters": [f.model_dump() for f in view.spec.filters],
        "sort_keys": list(view.spec.sort_fields),
    }


@router.get("/api/dashboard/summary")
async def dashboard_summary(request: Request) -> dict[str, Any]:
    api = request.app.state.api_client
    try:
        clients = await api.list_clients()
        projects = await api.list_projects()
        issues = await api.list_issues()
    except ApiError as e:
        raise HTTPException(status_code=502, detail=e.message)

    return {
        "portfolio": portfolio_summary(clients, projects).model_dump(),
        "issues": issue_stats(issues).model_dump(),
        "projects": [s.model_dump() for s in project_issue_stats(projects, issues)],
    }
