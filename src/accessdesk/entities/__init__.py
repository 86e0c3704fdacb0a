"""Entity models mirrored from the dashboard REST backend."""

from accessdesk.entities.models import (
    AccessibilityIssue,
    Client,
    ClientItem,
    CombinedItem,
    IssueProjectRef,
    Project,
    ProjectItem,
)

__all__ = [
    "AccessibilityIssue",
    "Client",
    "ClientItem",
    "CombinedItem",
    "IssueProjectRef",
    "Project",
    "ProjectItem",
]
