"""Step-gated wizard state machine.

One engine instance drives one form session. Backward and lateral moves are
always allowed; moving forward first validates the occupied step and is
refused only when that step is required and invalid.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python

from accessdesk.api.client import ApiError
from accessdesk.forms.models import (
    FormError,
    FormErrorKind,
    NavigationResult,
    StepDefinition,
    SubmitResult,
    ValidationResult,
    WizardDefinition,
    WizardState,
    condition_met,
)
from accessdesk.forms.validation import ValidationEngine

logger = logging.getLogger(__name__)

Submitter = Callable[[str, dict[str, Any]], Awaitable[dict[str, Any]]]


def gating_message(step: StepDefinition) -> str:
    return f'Please complete all required fields in "{step.title}" before proceeding.'


class WizardEngine:
    """Sequences the steps of one wizard over a shared form record.

    The record is held by reference, so values written by the owner (see
    ``FormShell``) are seen by the next validation.
    """

    def __init__(
        self,
        definition: WizardDefinition,
        record: dict[str, Any] | None = None,
        validation_engine: ValidationEngine | None = None,
    ) -> None:
        self._definition = definition
        self._record = record if record is not None else {}
        self._validation = validation_engine or ValidationEngine()
        self._state = WizardState(wizard_id=definition.id)
        logger.info("Wizard %s started (state %s)", definition.id, self._state.id)

    # -- accessors -----------------------------------------------------------

    @property
    def definition(self) -> WizardDefinition:
        return self._definition

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def record(self) -> dict[str, Any]:
        return self._record

    @property
    def steps(self) -> list[StepDefinition]:
        return self._definition.steps

    @property
    def current_step_index(self) -> int:
        return self._state.current_step_index

    @property
    def current_step(self) -> StepDefinition:
        return self.steps[self._state.current_step_index]

    def is_step_visible(self, index: int) -> bool:
        return condition_met(self.steps[index].show_if, self._record)

    @property
    def visible_steps(self) -> list[int]:
        return [i for i in range(len(self.steps)) if self.is_step_visible(i)]

    @property
    def is_terminal(self) -> bool:
        visible = self.visible_steps
        last = visible[-1] if visible else len(self.steps) - 1
        return self._state.current_step_index >= last

    @property
    def progress(self) -> float:
        """Percentage of visible steps reached, for display only."""
        visible = self.visible_steps
        if not visible:
            return 0.0
        current = self._state.current_step_index
        position = sum(1 for i in visible if i < current)
        return (position + 1) / len(visible) * 100

    # -- validation ----------------------------------------------------------

    def validate_step(self, index: int) -> ValidationResult:
        """Validate exactly the fields owned by step ``index``.

        Records the outcome in ``step_validity`` and ``completed_steps``;
        never moves the wizard.
        """
        self._check_index(index)
        step = self.steps[index]
        result = self._validation.validate_fields(self._definition, step.field_keys, self._record)

        state = self._state
        state.step_validity[index] = result.valid
        if result.valid:
            state.completed_steps.add(index)
        else:
            state.completed_steps.discard(index)
        for key in step.field_keys:
            state.field_errors.pop(key, None)
        state.field_errors.update(result.errors)
        state.updated_at = datetime.now(timezone.utc)

        if result.valid:
            logger.debug("Step %r of %s valid", step.id, self._definition.id)
        return result

    # -- navigation ----------------------------------------------------------

    def go_to_step(self, target: int) -> NavigationResult:
        """Move to step ``target``.

        Raises:
            ValueError: If target is outside the wizard.
        """
        self._check_index(target)
        current = self._state.current_step_index

        if target > current:
            result = self.validate_step(current)
            step = self.steps[current]
            if not result.valid and step.is_required:
                logger.info(
                    "Navigation from step %r of %s blocked", step.id, self._definition.id
                )
                return NavigationResult(
                    ok=False,
                    current_step_index=current,
                    error=FormError(
                        kind=FormErrorKind.STEP_GATING,
                        message=gating_message(step),
                        step_id=step.id,
                        step_title=step.title,
                        field_errors=result.errors,
                    ),
                )

        resolved = self._resolve_visible(target, forward=target > current)
        self._state.current_step_index = resolved
        self._state.updated_at = datetime.now(timezone.utc)
        return NavigationResult(ok=True, current_step_index=resolved)

    def next(self) -> NavigationResult:
        return self.go_to_step(min(self._state.current_step_index + 1, len(self.steps) - 1))

    def previous(self) -> NavigationResult:
        return self.go_to_step(max(self._state.current_step_index - 1, 0))

    def _resolve_visible(self, target: int, forward: bool) -> int:
        """Return the first visible step from ``target`` in the direction of travel."""
        count = len(self.steps)
        ahead = range(target, count) if forward else range(target, -1, -1)
        behind = range(target, -1, -1) if forward else range(target, count)
        for order in (ahead, behind):
            for index in order:
                if self.is_step_visible(index):
                    return index
        return target

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.steps):
            raise ValueError(
                f"Step index {index} out of range for wizard {self._definition.id!r} "
                f"({len(self.steps)} steps)"
            )

    # -- submission ----------------------------------------------------------

    def visible_field_keys(self) -> list[str]:
        keys: list[str] = []
        for index in self.visible_steps:
            for key in self.steps[index].field_keys:
                if key in keys:
                    continue
                if condition_met(self._definition.field(key).show_if, self._record):
                    keys.append(key)
        return keys

    def visible_record(self) -> dict[str, Any]:
        defaults = self._definition.defaults
        record: dict[str, Any] = {}
        for key in self.visible_field_keys():
            value = self._record.get(key, defaults.get(key))
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            record[key] = value
        return record

    def build_payload(self) -> dict[str, Any]:
        """Snapshot the record in the backend's camelCase JSON shape.

        Fields on hidden steps, hidden fields, and empty values are dropped.
        """
        return {
            to_camel(key): to_jsonable_python(value)
            for key, value in self.visible_record().items()
        }

    async def submit(self, submitter: Submitter) -> SubmitResult:
        """Validate and hand the assembled payload to ``submitter``.

        Only available from the terminal step. A rejected submission leaves
        the wizard where it was so the user can correct and retry.
        """
        if not self.is_terminal:
            return SubmitResult(
                ok=False,
                error=FormError(
                    kind=FormErrorKind.STEP_GATING,
                    message="Submission is only available from the final step.",
                    step_id=self.current_step.id,
                    step_title=self.current_step.title,
                ),
            )

        to_check = [self._state.current_step_index]
        if self._definition.validate_all_on_submit:
            to_check += [
                i for i in self.visible_steps
                if self.steps[i].is_required and i != self._state.current_step_index
            ]
        for index in to_check:
            result = self.validate_step(index)
            if not result.valid:
                step = self.steps[index]
                return SubmitResult(
                    ok=False,
                    error=FormError(
                        kind=FormErrorKind.STEP_GATING,
                        message=gating_message(step),
                        step_id=step.id,
                        step_title=step.title,
                        field_errors=result.errors,
                    ),
                )

        cross = self._validation.validate_cross_field(self._definition, self.visible_record())
        if not cross.valid:
            self._state.field_errors.update(cross.errors)
            return SubmitResult(
                ok=False,
                error=FormError(
                    kind=FormErrorKind.FIELD_VALIDATION,
                    message="Please correct the highlighted fields.",
                    field_errors=cross.errors,
                ),
            )

        payload = self.build_payload()
        try:
            data = await submitter(self._definition.resource, payload)
        except ApiError as exc:
            logger.warning(
                "Submission of %s to %s failed: %s",
                self._definition.id, self._definition.resource, exc,
            )
            return SubmitResult(
                ok=False,
                payload=payload,
                error=FormError(kind=FormErrorKind.SUBMISSION, message=exc.message),
            )

        logger.info("Wizard %s submitted (state %s)", self._definition.id, self._state.id)
        return SubmitResult(ok=True, data=data, payload=payload)
