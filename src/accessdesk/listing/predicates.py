"""Per-entity field accessors used for search, filtering, and sorting.

Each listing is described by a ``ListingSpec``: which strings are searched,
which fields can be filtered (with their declared option sets), and which
fields can be sorted and how they compare.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Literal, assert_never

from accessdesk.core.types import (
    ClientStatus,
    ClientType,
    ConformanceLevel,
    DevStatus,
    IssueType,
    Priority,
    ProjectStatus,
    QaStatus,
    Severity,
    WCAGLevel,
)
from accessdesk.entities.models import (
    AccessibilityIssue,
    Client,
    ClientItem,
    Project,
    ProjectItem,
)
from accessdesk.listing.models import FilterConfig, FilterOption, SortKind

UNKNOWN_CLIENT = "Unknown Client"

PROJECT_TYPES = (
    "a3s_program",
    "audit",
    "remediation",
    "monitoring",
    "training",
    "consultation",
    "full_compliance",
)

PRIORITY_RANK = {
    Priority.LOW: 0,
    Priority.MEDIUM: 1,
    Priority.HIGH: 2,
    Priority.URGENT: 3,
}

SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}


@dataclass(frozen=True)
class SortField:
    key: str
    kind: SortKind
    get: Callable[[Any], Any]
    ranks: dict[Any, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ListingSpec:
    name: str
    search_fields: Callable[[Any], Iterable[str | None]]
    filter_fields: dict[str, Callable[[Any], Any]]
    filters: list[FilterConfig]
    sort_fields: dict[str, SortField]

    @property
    def filter_map(self) -> dict[str, FilterConfig]:
        return {f.key: f for f in self.filters}


def _humanize(value: str) -> str:
    return value.replace("_", " ").strip().capitalize()


def enum_filter(key: str, label: str, enum: type[Enum]) -> FilterConfig:
    return FilterConfig(
        key=key,
        label=label,
        options=[FilterOption(label=_humanize(m.value), value=m.value) for m in enum],
    )


def _sort_fields(*fields: SortField) -> dict[str, SortField]:
    return {f.key: f for f in fields}


def client_lookup(clients: Iterable[Client]) -> dict[str, str]:
    """Map client id to the display name used for project rows."""
    return {c.id: c.company for c in clients}


# --- Clients ---


def client_search_fields(client: Client) -> list[str | None]:
    return [client.name, client.company, client.email]


CLIENT_LISTING = ListingSpec(
    name="clients",
    search_fields=client_search_fields,
    filter_fields={
        "status": lambda c: c.status,
        "client_type": lambda c: c.client_type,
    },
    filters=[
        enum_filter("status", "Status", ClientStatus),
        FilterConfig(
            key="client_type",
            label="Client Type",
            options=[FilterOption(label=m.value.upper(), value=m.value) for m in ClientType],
        ),
    ],
    sort_fields=_sort_fields(
        SortField("name", SortKind.STRING, lambda c: c.company),
        SortField("created_at", SortKind.DATE, lambda c: c.created_at),
        SortField("updated_at", SortKind.DATE, lambda c: c.updated_at),
        SortField("status", SortKind.STRING, lambda c: c.status),
    ),
)


# --- Projects ---


def project_search_fields(project: Project, client_names: dict[str, str]) -> list[str | None]:
    return [
        project.name,
        project.description,
        client_names.get(project.client_id, UNKNOWN_CLIENT),
    ]


def project_listing(clients: Iterable[Client] = ()) -> ListingSpec:
    names = client_lookup(clients)
    return ListingSpec(
        name="projects",
        search_fields=lambda p: project_search_fields(p, names),
        filter_fields={
            "status": lambda p: p.status,
            "priority": lambda p: p.priority,
            "wcag_level": lambda p: p.wcag_level,
            "project_type": lambda p: p.project_type,
            "client_id": lambda p: p.client_id,
        },
        filters=[
            enum_filter("status", "Status", ProjectStatus),
            enum_filter("priority", "Priority", Priority),
            FilterConfig(
                key="wcag_level",
                label="WCAG Level",
                options=[FilterOption(label=f"WCAG {m.value}", value=m.value) for m in WCAGLevel],
            ),
            FilterConfig(
                key="project_type",
                label="Project Type",
                options=[FilterOption(label=_humanize(t), value=t) for t in PROJECT_TYPES],
            ),
            FilterConfig(
                key="client_id",
                label="Client",
                options=[FilterOption(label=name, value=cid) for cid, name in names.items()],
            ),
        ],
        sort_fields=_sort_fields(
            SortField("name", SortKind.STRING, lambda p: p.name),
            SortField("created_at", SortKind.DATE, lambda p: p.created_at),
            SortField("updated_at", SortKind.DATE, lambda p: p.updated_at),
            SortField("start_date", SortKind.DATE, lambda p: p.start_date),
            SortField("end_date", SortKind.DATE, lambda p: p.end_date),
            SortField("status", SortKind.STRING, lambda p: p.status),
            SortField("priority", SortKind.RANK, lambda p: p.priority, PRIORITY_RANK),
            SortField("progress_percentage", SortKind.NUMBER, lambda p: p.progress_percentage),
        ),
    )


PROJECT_LISTING = project_listing()


# --- Accessibility issues ---


def issue_search_fields(issue: AccessibilityIssue) -> list[str | None]:
    return [
        issue.issue_title,
        issue.issue_description,
        issue.page_url,
        issue.project.name if issue.project else None,
    ]


def issue_listing(projects: Iterable[Project] = ()) -> ListingSpec:
    return ListingSpec(
        name="issues",
        search_fields=issue_search_fields,
        filter_fields={
            "severity": lambda i: i.severity,
            "issue_type": lambda i: i.issue_type,
            "dev_status": lambda i: i.dev_status,
            "qa_status": lambda i: i.qa_status,
            "conformance_level": lambda i: i.conformance_level,
            "is_duplicate": lambda i: i.is_duplicate,
            "project_id": lambda i: i.project.id if i.project else i.project_id,
        },
        filters=[
            FilterConfig(
                key="severity",
                label="Severity",
                options=[
                    FilterOption(label="Critical", value=Severity.CRITICAL.value),
                    FilterOption(label="High", value=Severity.HIGH.value),
                    FilterOption(label="Medium", value=Severity.MEDIUM.value),
                    FilterOption(label="Low", value=Severity.LOW.value),
                ],
            ),
            enum_filter("issue_type", "Issue Type", IssueType),
            enum_filter("dev_status", "Dev Status", DevStatus),
            enum_filter("qa_status", "QA Status", QaStatus),
            FilterConfig(
                key="conformance_level",
                label="WCAG Level",
                options=[
                    FilterOption(label="Level A", value=ConformanceLevel.LEVEL_A.value),
                    FilterOption(label="Level AA", value=ConformanceLevel.LEVEL_AA.value),
                    FilterOption(label="Level AAA", value=ConformanceLevel.LEVEL_AAA.value),
                ],
            ),
            FilterConfig(
                key="is_duplicate",
                label="Duplicate Status",
                options=[
                    FilterOption(label="Original Issues", value="false"),
                    FilterOption(label="Duplicate Issues", value="true"),
                ],
            ),
            FilterConfig(
                key="project_id",
                label="Project",
                options=[FilterOption(label=p.name, value=p.id) for p in projects],
            ),
        ],
        sort_fields=_sort_fields(
            SortField("created_at", SortKind.DATE, lambda i: i.created_at),
            SortField("updated_at", SortKind.DATE, lambda i: i.updated_at),
            SortField("severity", SortKind.RANK, lambda i: i.severity, SEVERITY_RANK),
            SortField("issue_title", SortKind.STRING, lambda i: i.issue_title),
            SortField("issue_number", SortKind.NUMBER, lambda i: i.issue_number),
        ),
    )


ISSUE_LISTING = issue_listing()


# --- Combined clients + projects ---

CombinedKind = Literal["all", "clients", "projects"]


def combine(
    clients: Iterable[Client],
    projects: Iterable[Project],
    kind: CombinedKind = "all",
) -> list[ClientItem | ProjectItem]:
    """Tag and concatenate clients then projects.

    Raises:
        ValueError: If kind is not one of all, clients, projects.
    """
    if kind not in ("all", "clients", "projects"):
        raise ValueError(f"Unknown item type {kind!r}")
    items: list[ClientItem | ProjectItem] = []
    if kind in ("all", "clients"):
        items.extend(ClientItem(data=c) for c in clients)
    if kind in ("all", "projects"):
        items.extend(ProjectItem(data=p) for p in projects)
    return items


def combined_search_fields(
    item: ClientItem | ProjectItem, client_names: dict[str, str]
) -> list[str | None]:
    if isinstance(item, ClientItem):
        return client_search_fields(item.data)
    elif isinstance(item, ProjectItem):
        return project_search_fields(item.data, client_names)
    else:
        assert_never(item)


def combined_name(item: ClientItem | ProjectItem) -> str:
    if isinstance(item, ClientItem):
        return item.data.company
    elif isinstance(item, ProjectItem):
        return item.data.name
    else:
        assert_never(item)


def combined_listing(clients: Iterable[Client] = ()) -> ListingSpec:
    names = client_lookup(clients)
    statuses = [m.value for m in ClientStatus] + [
        m.value for m in ProjectStatus if m.value not in {s.value for s in ClientStatus}
    ]
    return ListingSpec(
        name="combined",
        search_fields=lambda item: combined_search_fields(item, names),
        filter_fields={
            "kind": lambda item: item.kind,
            "status": lambda item: item.data.status,
        },
        filters=[
            FilterConfig(
                key="kind",
                label="Type",
                options=[
                    FilterOption(label="Clients", value="client"),
                    FilterOption(label="Projects", value="project"),
                ],
            ),
            FilterConfig(
                key="status",
                label="Status",
                options=[FilterOption(label=_humanize(s), value=s) for s in statuses],
            ),
        ],
        sort_fields=_sort_fields(
            SortField("name", SortKind.STRING, combined_name),
            SortField("created_at", SortKind.DATE, lambda item: item.data.created_at),
        ),
    )


COMBINED_LISTING = combined_listing()
