"""Form holders that own a wizard session and talk to the backend."""

from __future__ import annotations

import copy
import logging
import uuid
from typing import Any

from accessdesk.api.client import RestClient
from accessdesk.forms.engine import WizardEngine
from accessdesk.forms.models import (
    FormError,
    FormErrorKind,
    NavigationResult,
    SubmitResult,
    WizardDefinition,
)
from accessdesk.forms.validation import ValidationEngine

logger = logging.getLogger(__name__)


class FormShell:
    """Owns the form record and wizard engine of one create/edit session.

    At most one submission is in flight at a time. Once closed, a late
    response is dropped instead of being applied to the shell.
    """

    def __init__(
        self,
        definition: WizardDefinition,
        api_client: RestClient,
        validation_engine: ValidationEngine | None = None,
        initial: dict[str, Any] | None = None,
    ) -> None:
        self.id = str(uuid.uuid4())
        self._definition = definition
        self._api = api_client
        self._record: dict[str, Any] = copy.deepcopy(definition.defaults)
        self._engine = WizardEngine(definition, self._record, validation_engine)
        self._submitting = False
        self._closed = False
        self.result: dict[str, Any] | None = None
        if initial:
            self.update(initial)

    @property
    def engine(self) -> WizardEngine:
        return self._engine

    @property
    def definition(self) -> WizardDefinition:
        return self._definition

    @property
    def record(self) -> dict[str, Any]:
        return dict(self._record)

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    @property
    def closed(self) -> bool:
        return self._closed

    # -- record editing ------------------------------------------------------

    def set_field(self, key: str, value: Any) -> None:
        """Set one record value.

        Raises:
            KeyError: If the wizard schema has no such field.
        """
        self._definition.field(key)
        self._record[key] = value

    def update(self, values: dict[str, Any]) -> None:
        """Set several values; nothing is written if any key is unknown."""
        unknown = [k for k in values if k not in self._definition.field_map]
        if unknown:
            raise KeyError(f"Unknown fields for wizard {self._definition.id!r}: {unknown}")
        self._record.update(values)

    # -- navigation ----------------------------------------------------------

    def go_to_step(self, index: int) -> NavigationResult:
        return self._engine.go_to_step(index)

    def next(self) -> NavigationResult:
        return self._engine.next()

    def previous(self) -> NavigationResult:
        return self._engine.previous()

    # -- submission ----------------------------------------------------------

    async def submit(self) -> SubmitResult:
        if self._closed:
            return _submission_error("This form has already been closed.")
        if self._submitting:
            return _submission_error("A submission is already in progress.")

        self._submitting = True
        try:
            result = await self._engine.submit(self._api.create)
        finally:
            self._submitting = False

        if self._closed:
            logger.info("Discarding submission response for closed form %s", self.id)
            return _submission_error("The form was closed before the server responded.")

        if result.ok:
            self.result = result.data
            self._closed = True
        return result

    def close(self) -> None:
        """Abandon the session; any outstanding response will be ignored."""
        self._closed = True

    def snapshot(self) -> dict[str, Any]:
        """Serializable view of the session for the web layer."""
        engine = self._engine
        state = engine.state
        return {
            "id": self.id,
            "wizard_id": self._definition.id,
            "current_step_index": state.current_step_index,
            "current_step": engine.current_step.id,
            "completed_steps": sorted(state.completed_steps),
            "step_validity": {str(k): v for k, v in sorted(state.step_validity.items())},
            "progress": round(engine.progress, 2),
            "is_terminal": engine.is_terminal,
            "steps": [
                {
                    "id": step.id,
                    "title": step.title,
                    "description": step.description,
                    "fields": step.field_keys,
                    "is_required": step.is_required,
                    "estimated_time": step.estimated_time,
                    "visible": engine.is_step_visible(i),
                }
                for i, step in enumerate(engine.steps)
            ],
            "field_errors": state.field_errors,
            "record": self._record,
            "submitting": self._submitting,
            "closed": self._closed,
        }


def _submission_error(message: str) -> SubmitResult:
    return SubmitResult(
        ok=False,
        error=FormError(kind=FormErrorKind.SUBMISSION, message=message),
    )


class FormSessionStore:
    """In-memory dict store for open form sessions."""

    def __init__(self) -> None:
        self._shells: dict[str, FormShell] = {}

    def save(self, shell: FormShell) -> None:
        self._shells[shell.id] = shell

    def get(self, session_id: str) -> FormShell | None:
        return self._shells.get(session_id)

    def remove(self, session_id: str) -> FormShell | None:
        shell = self._shells.pop(session_id, None)
        if shell is not None:
            shell.close()
        return shell

    def list_open(self) -> list[FormShell]:
        return [s for s in self._shells.values() if not s.closed]
