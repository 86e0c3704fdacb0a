"""Multi-step wizard forms with per-step validation gating."""

from accessdesk.forms.engine import WizardEngine
from accessdesk.forms.models import (
    FieldDefinition,
    FieldType,
    FormError,
    FormErrorKind,
    NavigationResult,
    StepDefinition,
    SubmitResult,
    ValidationResult,
    WizardDefinition,
    WizardState,
)
from accessdesk.forms.registry import WizardRegistry
from accessdesk.forms.shell import FormSessionStore, FormShell
from accessdesk.forms.validation import ValidationEngine

__all__ = [
    "FieldDefinition",
    "FieldType",
    "FormError",
    "FormErrorKind",
    "FormSessionStore",
    "FormShell",
    "NavigationResult",
    "StepDefinition",
    "SubmitResult",
    "ValidationEngine",
    "ValidationResult",
    "WizardDefinition",
    "WizardEngine",
    "WizardRegistry",
    "WizardState",
]
