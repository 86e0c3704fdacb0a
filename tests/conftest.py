"""Shared test fixtures and helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from accessdesk.api.client import ApiError
from accessdesk.entities.models import AccessibilityIssue, Client, Project
from accessdesk.forms.models import FieldDefinition, StepDefinition, WizardDefinition


class FakeApi:
    """In-memory stand-in for RestClient used by shells, views and the app."""

    def __init__(
        self,
        clients: list[Client] | None = None,
        projects: list[Project] | None = None,
        issues: list[AccessibilityIssue] | None = None,
    ) -> None:
        self.clients = clients or []
        self.projects = projects or []
        self.issues = issues or []
        self.created: list[tuple[str, dict[str, Any]]] = []
        self.fail_with: ApiError | None = None
        self.calls: list[str] = []

    def _check(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    async def list_clients(self, **_params: Any) -> list[Client]:
        self._check("clients")
        return list(self.clients)

    async def list_projects(self, **_params: Any) -> list[Project]:
        self._check("projects")
        return list(self.projects)

    async def list_issues(self, **_params: Any) -> list[AccessibilityIssue]:
        self._check("issues")
        return list(self.issues)

    async def create(self, resource: str, payload: dict[str, Any]) -> dict[str, Any]:
        self._check("create")
        self.created.append((resource, payload))
        return {"id": f"new-{len(self.created)}", **payload}

    async def close(self) -> None:
        pass


def ts(year: int, month: int = 1, day: int = 1) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def clients():
    return [
        Client(
            id="c1",
            name="Mike Smith",
            email="mike@acme.com",
            company="Acme",
            status="active",
            client_type="a3s",
            created_at=ts(2024, 1, 10),
        ),
        Client(
            id="c2",
            name="Zoe",
            email="zoe@zed.io",
            company="Zed Inc",
            status="pending",
            client_type="p15r",
            created_at=ts(2024, 3, 5),
        ),
    ]


@pytest.fixture
def projects():
    return [
        Project(
            id="p1",
            client_id="c1",
            name="Beta Launch",
            status="active",
            priority="high",
            progress_percentage=40,
            created_at=ts(2024, 2, 1),
        ),
        Project(
            id="p2",
            client_id="c2",
            name="Portal Audit",
            status="planning",
            priority="low",
            progress_percentage=10,
            created_at=None,
        ),
        Project(
            id="p3",
            client_id="missing",
            name="Docs Review",
            status="completed",
            priority="urgent",
            progress_percentage=100,
            created_at=ts(2024, 4, 20),
        ),
    ]


@pytest.fixture
def issues():
    return [
        AccessibilityIssue(
            id="i1",
            project_id="p1",
            issue_title="Missing alt text",
            severity="1_critical",
            dev_status="in_progress",
            qa_status="not_started",
            issue_number=3,
            created_at=ts(2024, 5, 1),
        ),
        AccessibilityIssue(
            id="i2",
            project_id="p1",
            issue_title="Low contrast button",
            severity="3_medium",
            dev_status="done",
            qa_status="verified",
            issue_number=1,
            created_at=ts(2024, 5, 3),
        ),
        AccessibilityIssue(
            id="i3",
            project_id="p2",
            issue_title="Focus trap in modal",
            severity="2_high",
            dev_status="not_started",
            qa_status="not_started",
            duplicate_of_id="i1",
            issue_number=2,
            created_at=ts(2024, 5, 2),
        ),
    ]


@pytest.fixture
def three_step_wizard():
    """Three steps; only the first is required and it owns ``name``."""
    return WizardDefinition(
        id="three_step",
        title="Three Step",
        resource="/clients",
        fields=[
            FieldDefinition(id="name", label="Name", required=True),
            FieldDefinition(id="email", label="Email", validators=["email"]),
            FieldDefinition(id="notes", label="Notes"),
        ],
        steps=[
            StepDefinition(id="first", title="Basics", field_keys=["name"], is_required=True),
            StepDefinition(id="second", title="Contact", field_keys=["email"], is_required=False),
            StepDefinition(id="third", title="Notes", field_keys=["notes"], is_required=False),
        ],
    )


@pytest.fixture
def conditional_wizard():
    """Middle step only shows for p15r clients."""
    return WizardDefinition(
        id="conditional",
        title="Conditional",
        resource="/clients",
        defaults={"client_type": "a3s"},
        fields=[
            FieldDefinition(id="client_type", label="Type", options=["a3s", "p15r"]),
            FieldDefinition(id="services", label="Services", required=True),
            FieldDefinition(id="status", label="Status", required=True),
        ],
        steps=[
            StepDefinition(id="contact", title="Contact", field_keys=["client_type"]),
            StepDefinition(
                id="services",
                title="Services",
                field_keys=["services"],
                show_if={"field": "client_type", "not_equals": "a3s"},
            ),
            StepDefinition(id="review", title="Review", field_keys=["status"]),
        ],
    )


@pytest.fixture
def make_api():
    """Factory for FakeApi instances holding the given records."""
    return FakeApi
