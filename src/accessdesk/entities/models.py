"""Entity models for clients, projects, and accessibility issues.

The REST backend speaks camelCase JSON; models accept either the alias or
the field name and ignore keys they do not know about.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from accessdesk.core.types import (
    BillingType,
    ClientStatus,
    ClientType,
    DevStatus,
    Priority,
    ProjectStatus,
    QaStatus,
    Severity,
    WCAGLevel,
)


class EntityModel(BaseModel):
    """Base for records owned by the REST backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_api(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Client(EntityModel):
    """A client organisation and its primary contact."""

    id: str
    name: str = ""
    email: str = ""
    company: str = ""
    phone: str | None = None
    address: str | None = None
    client_type: ClientType = ClientType.A3S
    status: ClientStatus = ClientStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None
    notes: str | None = None

    company_size: str | None = None
    industry: str | None = None
    website: str | None = None
    current_accessibility_level: str | None = None
    compliance_deadline: datetime | None = None

    services_needed: list[str] = Field(default_factory=list)
    wcag_level: WCAGLevel | None = None
    priority_areas: list[str] = Field(default_factory=list)
    timeline: str | None = None

    communication_preference: str | None = None
    reporting_frequency: str | None = None
    point_of_contact: str | None = None
    time_zone: str | None = None
    policy_status: str | None = None


class Project(EntityModel):
    """An accessibility engagement for a client."""

    id: str
    client_id: str = ""
    name: str = ""
    description: str | None = None
    status: ProjectStatus = ProjectStatus.PLANNING
    priority: Priority = Priority.MEDIUM
    wcag_level: WCAGLevel = WCAGLevel.AA
    project_type: str = "audit"
    project_platform: str = "website"
    tech_stack: str | None = None
    website_url: str | None = None

    start_date: datetime | None = None
    end_date: datetime | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None

    budget: float | None = None
    billing_type: BillingType = BillingType.FIXED
    hourly_rate: float | None = None

    progress_percentage: float = 0
    milestones_completed: int = 0
    total_milestones: int = 0

    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    notes: str | None = None


class IssueProjectRef(EntityModel):
    """Project summary embedded in issue responses."""

    id: str
    name: str = ""
    client_id: str = ""


class AccessibilityIssue(EntityModel):
    """A WCAG failure found while testing a project."""

    id: str
    project_id: str = ""
    issue_title: str = ""
    issue_description: str | None = None
    issue_type: str = "other"
    severity: Severity = Severity.MEDIUM
    conformance_level: str = "level_aa"
    failed_wcag_criteria: list[str] = Field(default_factory=list)
    dev_status: DevStatus = DevStatus.NOT_STARTED
    qa_status: QaStatus = QaStatus.NOT_STARTED
    duplicate_of_id: str | None = None
    issue_number: int = 0
    page_url: str | None = None
    assigned_to: str | None = None
    client_visible: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
    project: IssueProjectRef | None = None

    @property
    def is_duplicate(self) -> bool:
        return self.duplicate_of_id is not None


# --- Tagged variants for the combined clients + projects view ---


class ClientItem(BaseModel):
    kind: Literal["client"] = "client"
    data: Client


class ProjectItem(BaseModel):
    kind: Literal["project"] = "project"
    data: Project


CombinedItem = Annotated[ClientItem | ProjectItem, Field(discriminator="kind")]
