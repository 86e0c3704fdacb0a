"""Dashboard aggregates over clients, projects, and issues."""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from pydantic import BaseModel, Field

from accessdesk.core.types import DevStatus, ProjectStatus, QaStatus, Severity
from accessdesk.entities.models import AccessibilityIssue, Client, Project


class PortfolioSummary(BaseModel):
    total_clients: int = 0
    total_projects: int = 0
    active_projects: int = 0
    average_progress: int = 0
    has_projects: bool = False


class IssueStats(BaseModel):
    total: int = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_dev_status: dict[str, int] = Field(default_factory=dict)
    by_qa_status: dict[str, int] = Field(default_factory=dict)


class ProjectIssueStats(BaseModel):
    project_id: str
    project_name: str = ""
    total: int = 0
    critical: int = 0
    in_progress: int = 0
    completed: int = 0


def portfolio_summary(clients: Iterable[Client], projects: Iterable[Project]) -> PortfolioSummary:
    """Headline numbers for the dashboard.

    ``average_progress`` is 0 when there are no projects; ``has_projects``
    tells that case apart from projects that are genuinely at 0%.
    """
    projects = list(projects)
    total = len(projects)
    average = 0
    if total:
        average = round(sum(p.progress_percentage for p in projects) / total)
    return PortfolioSummary(
        total_clients=sum(1 for _ in clients),
        total_projects=total,
        active_projects=sum(1 for p in projects if p.status == ProjectStatus.ACTIVE),
        average_progress=average,
        has_projects=total > 0,
    )


def client_project_counts(client_id: str, projects: Iterable[Project]) -> tuple[int, int]:
    """Return ``(total, active)`` project counts for one client."""
    owned = [p for p in projects if p.client_id == client_id]
    return len(owned), sum(1 for p in owned if p.status == ProjectStatus.ACTIVE)


def _counts(values: Iterable[str], keys: Iterable[str]) -> dict[str, int]:
    counter = Counter(values)
    return {k: counter.get(k, 0) for k in keys}


def issue_stats(issues: Iterable[AccessibilityIssue]) -> IssueStats:
    issues = list(issues)
    return IssueStats(
        total=len(issues),
        by_severity=_counts((i.severity.value for i in issues), (s.value for s in Severity)),
        by_dev_status=_counts((i.dev_status.value for i in issues), (s.value for s in DevStatus)),
        by_qa_status=_counts((i.qa_status.value for i in issues), (s.value for s in QaStatus)),
    )


def _is_completed(issue: AccessibilityIssue) -> bool:
    return issue.dev_status == DevStatus.DONE and issue.qa_status == QaStatus.VERIFIED


def project_issue_stats(
    projects: Iterable[Project], issues: Iterable[AccessibilityIssue]
) -> list[ProjectIssueStats]:
    """Per-project issue counts, in project order."""
    stats = {p.id: ProjectIssueStats(project_id=p.id, project_name=p.name) for p in projects}
    for issue in issues:
        entry = stats.get(issue.project_id)
        if entry is None:
            continue
        entry.total += 1
        if issue.severity == Severity.CRITICAL:
            entry.critical += 1
        if issue.dev_status == DevStatus.IN_PROGRESS:
            entry.in_progress += 1
        if _is_completed(issue):
            entry.completed += 1
    return list(stats.values())
