"""Per-field input checks shared by the operation handlers.

Each helper either returns the coerced value or raises
:class:`~hactl.errors.ValidationError` with a field-specific message.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from hactl.domain.entities import EntityReference
from hactl.errors import ValidationError

_TRUE = frozenset({"true", "yes", "on", "1"})
_FALSE = frozenset({"false", "no", "off", "0"})


def _fail(field: str, message: str, value: Any = None) -> ValidationError:
    return ValidationError(f"{field} {message}", details={"field": field, "value": value})


def required_string(value: Any, field: str) -> str:
    """Non-empty string after trimming. Non-string scalars are stringified."""
    text = "" if value is None else str(value).strip()
    if not text:
        raise _fail(field, "is required", value)
    return text


def optional_string(value: Any, field: str) -> str | None:
    """Trimmed string, or None when absent or blank."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def to_number(value: Any, field: str) -> int | float:
    """Coerce *value* to a finite int or float.

    Accepts ints, floats, and numeric strings. Booleans are rejected.
    """
    number: int | float | None = None
    if isinstance(value, bool):
        number = None
    elif isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                number = None
    if number is None or not _finite(number):
        raise _fail(field, "must be a valid number", value)
    return number


def _finite(number: int | float) -> bool:
    try:
        return math.isfinite(number)
    except OverflowError:
        # Ints past float range, e.g. a 400-digit JSON literal.
        return False


def bounded_number(
    value: Any, field: str, low: int | float, high: int | float, label: str
) -> int | float:
    """Coerce to a number within ``[low, high]`` inclusive.

    *label* is the human range text, e.g. ``"between 0.0 and 1.0"``.
    """
    number = to_number(value, field)
    if number < low or number > high:
        raise _fail(field, f"must be {label}", value)
    return number


def optional_number(value: Any, field: str) -> int | float | None:
    return None if value is None else to_number(value, field)


def optional_mapping(value: Any, field: str) -> dict[str, Any] | None:
    """A JSON object (dict) or None."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise _fail(field, "must be an object", value)
    return dict(value)


def to_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
    raise _fail(field, "must be a boolean", value)


def rgb_color(value: Any, field: str = "rgb_color") -> list[int | float]:
    """Three channel values, each between 0 and 255."""
    label = "a list of three numbers between 0 and 255"
    if not isinstance(value, (list, tuple)):
        raise _fail(field, f"must be {label}", value)
    if len(value) != 3:
        raise _fail(field, f"must be {label}", value)
    return [bounded_number(v, field, 0, 255, label) for v in value]


def require_domain(ref: EntityReference, domain: str) -> EntityReference:
    """Bind an entity to a capability domain."""
    if ref.domain != domain:
        raise ValidationError(
            f"entity_id must be in {domain} domain",
            details={"entity_id": ref.entity_id, "expected_domain": domain},
        )
    return ref
