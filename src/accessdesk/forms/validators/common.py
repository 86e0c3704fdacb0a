"""Built-in validators for common field types."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

# Registry of validator functions: name -> callable(value, **params) -> str | None
# Returns an error message string on failure, None on success.
VALIDATORS: dict[str, Any] = {}


def register(name: str):
    """Decorator to register a validator function."""
    def decorator(fn):
        VALIDATORS[name] = fn
        return fn
    return decorator


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


@register("required")
def validate_required(value: Any, **_kwargs: Any) -> str | None:
    if _is_empty(value):
        return "This field is required."
    return None


@register("min_length")
def validate_min_length(value: Any, length: int | str = 1, **_kwargs: Any) -> str | None:
    if _is_empty(value) or not isinstance(value, str):
        return None
    if len(value.strip()) < int(length):
        return f"Must be at least {length} characters."
    return None


@register("max_length")
def validate_max_length(value: Any, length: int | str = 255, **_kwargs: Any) -> str | None:
    if _is_empty(value) or not isinstance(value, str):
        return None
    if len(value) > int(length):
        return f"Must be at most {length} characters."
    return None


@register("regex")
def validate_regex(value: Any, pattern: str = "", **_kwargs: Any) -> str | None:
    if value is None or not isinstance(value, str):
        return None
    if not re.fullmatch(pattern, value):
        return f"Value does not match required pattern: {pattern}"
    return None


@register("email")
def validate_email(value: Any, **_kwargs: Any) -> str | None:
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    pattern = r"[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}"
    if not re.fullmatch(pattern, value):
        return "Invalid email address."
    return None


@register("url")
def validate_url(value: Any, **_kwargs: Any) -> str | None:
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    if not re.fullmatch(r"https?://[^\s/$.?#][^\s]*\.[^\s]+", value, flags=re.IGNORECASE):
        return "Please enter a valid URL."
    return None


@register("phone")
def validate_phone(value: Any, **_kwargs: Any) -> str | None:
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    digits = re.sub(r"[\s\-\(\)\+\.]", "", value)
    if not digits.isdigit() or len(digits) < 10:
        return "Please enter a valid phone number (at least 10 digits)."
    return None


@register("date")
def validate_date(value: Any, **_kwargs: Any) -> str | None:
    if isinstance(value, (date, datetime)):
        return None
    if value is None or not isinstance(value, str) or not value.strip():
        return None
    if not re.fullmatch(r"\d{4}-\d{2}-\d{2}", value):
        return "Please enter a valid date in YYYY-MM-DD format."
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return "Please enter a valid date in YYYY-MM-DD format."
    return None


@register("numeric")
def validate_numeric(
    value: Any, min_val: float | None = None, max_val: float | None = None, **_kwargs: Any
) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        return "Please enter a valid number."
    try:
        num = float(value)
    except (TypeError, ValueError):
        return "Please enter a valid number."
    if min_val is not None and num < float(min_val):
        return f"Value must be at least {min_val}."
    if max_val is not None and num > float(max_val):
        return f"Value must be at most {max_val}."
    return None


@register("one_of")
def validate_one_of(value: Any, options: list[str] | None = None, **_kwargs: Any) -> str | None:
    if _is_empty(value) or not options:
        return None
    values = value if isinstance(value, (list, tuple, set)) else [value]
    invalid = [v for v in values if v not in options]
    if invalid:
        return f"Invalid choice: {', '.join(str(v) for v in invalid)}."
    return None


@register("accepted")
def validate_accepted(value: Any, **_kwargs: Any) -> str | None:
    if value is not True:
        return "You must agree to the terms and conditions."
    return None


@register("non_empty_list")
def validate_non_empty_list(value: Any, **_kwargs: Any) -> str | None:
    if not isinstance(value, (list, tuple)) or not value:
        return "Select at least one option."
    return None
