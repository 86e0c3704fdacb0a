"""Shared models for the wizard form engine."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class FieldType(StrEnum):
    """Supported field types in wizard forms."""

    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    GROUP = "group"


class FieldDefinition(BaseModel):
    """A single entry of a wizard's validation schema."""

    id: str
    label: str
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    validators: list[str] = Field(default_factory=list)
    options: list[str] = Field(default_factory=list)
    placeholder: str = ""
    help_text: str = ""
    show_if: dict[str, Any] | None = None


class StepDefinition(BaseModel):
    """One step of a wizard and the schema fields it owns."""

    id: str
    title: str
    description: str = ""
    field_keys: list[str] = Field(default_factory=list)
    is_required: bool = True
    estimated_time: str = ""
    show_if: dict[str, Any] | None = None


class WizardDefinition(BaseModel):
    """Full definition of a wizard loaded from YAML.

    ``fields`` is the shared schema; each step names the subset of it that
    it collects. Keys are checked here so a step can never reference a field
    the schema does not declare.
    """

    id: str
    title: str
    description: str = ""
    resource: str
    fields: list[FieldDefinition] = Field(default_factory=list)
    steps: list[StepDefinition] = Field(default_factory=list)
    validate_all_on_submit: bool = True
    defaults: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_field_keys(self) -> WizardDefinition:
        if not self.steps:
            raise ValueError(f"Wizard {self.id!r} has no steps")

        known: set[str] = set()
        for field in self.fields:
            if field.id in known:
                raise ValueError(f"Duplicate field {field.id!r} in wizard {self.id!r}")
            known.add(field.id)

        step_ids: set[str] = set()
        for step in self.steps:
            if step.id in step_ids:
                raise ValueError(f"Duplicate step {step.id!r} in wizard {self.id!r}")
            step_ids.add(step.id)
            if len(set(step.field_keys)) != len(step.field_keys):
                raise ValueError(f"Step {step.id!r} lists a field more than once")
            unknown = [key for key in step.field_keys if key not in known]
            if unknown:
                raise ValueError(f"Step {step.id!r} references unknown fields: {unknown}")

        conditions = [s.show_if for s in self.steps] + [f.show_if for f in self.fields]
        for condition in conditions:
            if condition and condition.get("field") not in known:
                raise ValueError(
                    f"show_if condition references unknown field {condition.get('field')!r}"
                )

        unknown_defaults = [key for key in self.defaults if key not in known]
        if unknown_defaults:
            raise ValueError(f"Defaults reference unknown fields: {unknown_defaults}")
        return self

    @property
    def field_map(self) -> dict[str, FieldDefinition]:
        return {f.id: f for f in self.fields}

    def field(self, key: str) -> FieldDefinition:
        for f in self.fields:
            if f.id == key:
                return f
        raise KeyError(f"Unknown field {key!r} in wizard {self.id!r}")


def condition_met(condition: dict[str, Any] | None, record: dict[str, Any]) -> bool:
    """Evaluate a ``show_if`` condition against the current form record.

    Supported keys: ``equals``, ``not_equals``, ``in``. No condition means
    always shown.
    """
    if not condition:
        return True
    actual = record.get(condition.get("field", ""))
    if "equals" in condition:
        return actual == condition["equals"]
    if "not_equals" in condition:
        return actual != condition["not_equals"]
    if "in" in condition:
        return actual in condition["in"]
    return True


class ValidationResult(BaseModel):
    """Result of validating a field set or step."""

    valid: bool
    errors: dict[str, list[str]] = Field(default_factory=dict)


class FormErrorKind(StrEnum):
    FIELD_VALIDATION = "field_validation"
    STEP_GATING = "step_gating"
    SUBMISSION = "submission"


class FormError(BaseModel):
    """User-facing error returned by navigation and submission."""

    kind: FormErrorKind
    message: str
    step_id: str | None = None
    step_title: str | None = None
    field_errors: dict[str, list[str]] = Field(default_factory=dict)


class NavigationResult(BaseModel):
    ok: bool
    current_step_index: int
    error: FormError | None = None


class SubmitResult(BaseModel):
    ok: bool
    data: dict[str, Any] | None = None
    payload: dict[str, Any] | None = None
    error: FormError | None = None


class WizardState(BaseModel):
    """Runtime state of a wizard instance.

    ``step_validity`` has no entry for steps that were never validated.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    wizard_id: str
    current_step_index: int = 0
    completed_steps: set[int] = Field(default_factory=set)
    step_validity: dict[int, bool] = Field(default_factory=dict)
    field_errors: dict[str, list[str]] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
