"""Rules relating two fields of one wizard record.

Rules are declared per wizard in ``config/cross_field_rules.yml`` and parsed
into pydantic models on load; an unknown rule type or a missing field name
raises ``pydantic.ValidationError``. Errors are reported against the
dependent field (``field_b``).
"""

from __future__ import annotations

import operator
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import BaseModel, Field, TypeAdapter

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[4] / "config" / "cross_field_rules.yml"

_COMPARATORS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def _blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class _Rule(BaseModel):
    field_a: str
    field_b: str
    message: str | None = None

    @property
    def fields(self) -> set[str]:
        return {self.field_a, self.field_b}

    @property
    def dependent(self) -> str:
        return self.field_b

    def broken(self, record: dict[str, Any], labels: dict[str, str]) -> str | None:
        raise NotImplementedError


class DateOrderRule(_Rule):
    """``field_b`` may not fall before ``field_a``. Unparseable dates pass."""

    type: Literal["date_order"]

    def broken(self, record: dict[str, Any], labels: dict[str, str]) -> str | None:
        start = _as_date(record.get(self.field_a))
        end = _as_date(record.get(self.field_b))
        if start is None or end is None or start <= end:
            return None
        return self.message or (
            f"{labels.get(self.field_b, self.field_b)} must be on or after "
            f"{labels.get(self.field_a, self.field_a)}."
        )


class ConditionalRequiredRule(_Rule):
    """``field_b`` must be filled in while ``field_a`` equals ``value``."""

    type: Literal["conditional_required"]
    value: Any

    def broken(self, record: dict[str, Any], labels: dict[str, str]) -> str | None:
        if record.get(self.field_a) != self.value or not _blank(record.get(self.field_b)):
            return None
        return self.message or f"{labels.get(self.field_b, self.field_b)} is required."


class MutualExclusionRule(_Rule):
    """At most one of the two fields may be filled in."""

    type: Literal["mutual_exclusion"]

    def broken(self, record: dict[str, Any], labels: dict[str, str]) -> str | None:
        if _blank(record.get(self.field_a)) or _blank(record.get(self.field_b)):
            return None
        return self.message or (
            f"{labels.get(self.field_a, self.field_a)} and "
            f"{labels.get(self.field_b, self.field_b)} cannot both be set."
        )


class NumericRelationshipRule(_Rule):
    """``field_a <operator> field_b`` must hold when both are numbers."""

    type: Literal["numeric_relationship"]
    operator: Literal["<", "<=", ">", ">="] = "<"

    def broken(self, record: dict[str, Any], labels: dict[str, str]) -> str | None:
        left = _as_number(record.get(self.field_a))
        right = _as_number(record.get(self.field_b))
        if left is None or right is None or _COMPARATORS[self.operator](left, right):
            return None
        return self.message or (
            f"{labels.get(self.field_a, self.field_a)} must be {self.operator} "
            f"{labels.get(self.field_b, self.field_b)}."
        )


CrossFieldRule = Annotated[
    Union[DateOrderRule, ConditionalRequiredRule, MutualExclusionRule, NumericRelationshipRule],
    Field(discriminator="type"),
]

_RULES_ADAPTER = TypeAdapter(dict[str, list[CrossFieldRule]])


class CrossFieldValidator:
    """Holds the cross-field rules of every wizard."""

    def __init__(self, config_path: str | Path | None = None) -> None:
        path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH
        self._rules: dict[str, list[_Rule]] = {}
        if path.exists():
            with open(path) as fh:
                data = yaml.safe_load(fh) or {}
            self._rules = _RULES_ADAPTER.validate_python(data.get("wizards") or {})

    def rules_for(self, wizard_id: str) -> list[_Rule]:
        return list(self._rules.get(wizard_id, []))

    def validate(
        self,
        wizard_id: str,
        record: dict[str, Any],
        only_fields: set[str] | None = None,
        labels: dict[str, str] | None = None,
    ) -> dict[str, list[str]]:
        """Return dependent field -> messages for every broken rule.

        With ``only_fields``, rules touching a field outside that set are
        skipped. ``labels`` maps field ids to the names used in default
        messages.
        """
        errors: dict[str, list[str]] = {}
        for rule in self._rules.get(wizard_id, []):
            if only_fields is not None and not rule.fields <= only_fields:
                continue
            message = rule.broken(record, labels or {})
            if message:
                errors.setdefault(rule.dependent, []).append(message)
        return errors
