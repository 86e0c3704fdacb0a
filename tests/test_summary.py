"""Tests for dashboard summaries."""

from __future__ import annotations

from accessdesk.entities.models import Project
from accessdesk.listing.summary import (
    client_project_counts,
    issue_stats,
    portfolio_summary,
    project_issue_stats,
)


class TestPortfolioSummary:
    def test_counts_and_average(self, clients, projects):
        summary = portfolio_summary(clients, projects)
        assert summary.total_clients == 2
        assert summary.total_projects == 3
        assert summary.active_projects == 1
        assert summary.average_progress == 50
        assert summary.has_projects

    def test_average_rounds(self, clients):
        projects = [
            Project(id="a", progress_percentage=33),
            Project(id="b", progress_percentage=34),
        ]
        assert portfolio_summary(clients, projects).average_progress == 34

    def test_no_projects(self, clients):
        summary = portfolio_summary(clients, [])
        assert summary.average_progress == 0
        assert not summary.has_projects


class TestClientProjectCounts:
    def test_counts(self, projects):
        assert client_project_counts("c1", projects) == (1, 1)
        assert client_project_counts("c2", projects) == (1, 0)
        assert client_project_counts("nobody", projects) == (0, 0)


class TestIssueStats:
    def test_breakdown(self, issues):
        stats = issue_stats(issues)
        assert stats.total == 3
        assert stats.by_severity == {"1_critical": 1, "2_high": 1, "3_medium": 1, "4_low": 0}
        assert stats.by_dev_status["done"] == 1
        assert stats.by_dev_status["blocked"] == 0
        assert stats.by_qa_status["not_started"] == 2

    def test_empty(self):
        stats = issue_stats([])
        assert stats.total == 0
        assert set(stats.by_severity.values()) == {0}


class TestProjectIssueStats:
    def test_per_project(self, projects, issues):
        stats = {s.project_id: s for s in project_issue_stats(projects, issues)}
        assert list(stats) == ["p1", "p2", "p3"]
        assert stats["p1"].total == 2
        assert stats["p1"].critical == 1
        assert stats["p1"].in_progress == 1
        assert stats["p1"].completed == 1
        assert stats["p2"].total == 1
        assert stats["p3"].total == 0
