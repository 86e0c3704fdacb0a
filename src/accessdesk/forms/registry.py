"""Loads wizard definitions from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from accessdesk.forms.models import (
    FieldDefinition,
    FieldType,
    StepDefinition,
    WizardDefinition,
)

_DEFAULT_WIZARDS_DIR = Path(__file__).resolve().parents[3] / "config" / "wizards"


def _parse_field(data: dict[str, Any]) -> FieldDefinition:
    return FieldDefinition(
        id=data["id"],
        label=data.get("label", data["id"]),
        field_type=FieldType(data.get("type", "text")),
        required=data.get("required", False),
        validators=data.get("validators", []),
        options=[str(o) for o in data.get("options", [])],
        placeholder=data.get("placeholder", ""),
        help_text=data.get("help_text", ""),
        show_if=data.get("show_if"),
    )


def _parse_step(data: dict[str, Any]) -> StepDefinition:
    return StepDefinition(
        id=data["id"],
        title=data.get("title", data["id"]),
        description=data.get("description", ""),
        field_keys=data.get("fields", []),
        is_required=data.get("required", True),
        estimated_time=data.get("estimated_time", ""),
        show_if=data.get("show_if"),
    )


def parse_wizard(data: dict[str, Any]) -> WizardDefinition:
    """Build a WizardDefinition from its YAML mapping.

    Raises:
        pydantic.ValidationError: If steps reference fields the schema lacks.
    """
    return WizardDefinition(
        id=data["id"],
        title=data.get("title", data["id"]),
        description=data.get("description", ""),
        resource=data["resource"],
        fields=[_parse_field(f) for f in data.get("fields", [])],
        steps=[_parse_step(s) for s in data.get("steps", [])],
        validate_all_on_submit=data.get("validate_all_on_submit", True),
        defaults=data.get("defaults", {}) or {},
    )


def load_wizard(path: Path) -> WizardDefinition:
    with open(path) as fh:
        data = yaml.safe_load(fh)
    return parse_wizard(data)


class WizardRegistry:
    """Registry of wizard definitions keyed by wizard id."""

    def __init__(self, wizards_dir: str | Path | None = None) -> None:
        self._wizards: dict[str, WizardDefinition] = {}
        self._load_wizards(Path(wizards_dir) if wizards_dir else _DEFAULT_WIZARDS_DIR)

    def _load_wizards(self, wizards_dir: Path) -> None:
        if not wizards_dir.exists():
            return
        for path in sorted(wizards_dir.glob("*.yml")):
            defn = load_wizard(path)
            self._wizards[defn.id] = defn

    def register(self, definition: WizardDefinition) -> None:
        self._wizards[definition.id] = definition

    @property
    def definitions(self) -> dict[str, WizardDefinition]:
        return dict(self._wizards)

    def get(self, wizard_id: str) -> WizardDefinition:
        """Return a wizard definition.

        Raises:
            KeyError: If wizard_id is not registered.
        """
        defn = self._wizards.get(wizard_id)
        if defn is None:
            raise KeyError(f"Unknown wizard: {wizard_id!r}")
        return defn
