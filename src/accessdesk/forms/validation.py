"""Validation engine for wizard form steps."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from accessdesk.forms.models import (
    FieldDefinition,
    ValidationResult,
    WizardDefinition,
    condition_met,
)
from accessdesk.forms.validators.common import VALIDATORS
from accessdesk.forms.validators.cross_field import CrossFieldValidator


def _labels(definition: WizardDefinition) -> dict[str, str]:
    return {f.id: f.label for f in definition.fields}


class ValidationEngine:
    """Registry-based validation engine.

    Runs the validators named by each schema field against a form record.
    Hidden fields (``show_if`` not satisfied) are never validated.
    """

    def __init__(self, cross_field_validator: CrossFieldValidator | None = None) -> None:
        self._validators: dict[str, Callable[..., str | None]] = dict(VALIDATORS)
        self._cross_field = cross_field_validator or CrossFieldValidator()

    def register(self, name: str, fn: Callable[..., str | None]) -> None:
        self._validators[name] = fn

    def validate_field(
        self, field: FieldDefinition, value: Any, params: dict[str, Any] | None = None
    ) -> list[str]:
        """Validate a single field value. Returns list of error messages."""
        errors: list[str] = []
        params = {"options": field.options, **(params or {})}

        # Always check required first
        if field.required:
            fn = self._validators.get("required")
            if fn:
                err = fn(value)
                if err:
                    errors.append(err)
                    return errors  # No point running other validators on empty

        for validator_name in field.validators:
            if validator_name == "required" and field.required:
                continue
            # Validator name may include params like "numeric:min_val=0"
            parts = validator_name.split(":", 1)
            name = parts[0]
            extra_params: dict[str, Any] = {}
            if len(parts) > 1:
                for pair in parts[1].split(","):
                    k, _, v = pair.partition("=")
                    extra_params[k.strip()] = v.strip()

            fn = self._validators.get(name)
            if fn is None:
                continue

            merged = {**params, **extra_params}
            err = fn(value, **merged)
            if err:
                errors.append(err)

        return errors

    def validate_fields(
        self,
        definition: WizardDefinition,
        keys: Iterable[str],
        record: dict[str, Any],
    ) -> ValidationResult:
        """Validate exactly ``keys`` of ``record`` against the wizard schema.

        Cross-field rules run too when every field they touch is among the
        visible keys.
        """
        all_errors: dict[str, list[str]] = {}
        visible: set[str] = set()

        for key in keys:
            field = definition.field(key)
            if not condition_met(field.show_if, record):
                continue
            visible.add(key)
            field_errors = self.validate_field(field, record.get(key))
            if field_errors:
                all_errors[key] = field_errors

        cross = self._cross_field.validate(
            definition.id, record, only_fields=visible, labels=_labels(definition)
        )
        for field_id, msgs in cross.items():
            all_errors.setdefault(field_id, []).extend(msgs)

        return ValidationResult(valid=len(all_errors) == 0, errors=all_errors)

    def validate_cross_field(
        self, definition: WizardDefinition, data: dict[str, Any]
    ) -> ValidationResult:
        """Run all cross-field validation rules for a wizard's record."""
        errors = self._cross_field.validate(definition.id, data, labels=_labels(definition))
        return ValidationResult(
            valid=len(errors) == 0,
            errors=errors,
        )
