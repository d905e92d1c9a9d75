"""
Safe coercion passes for JSON-shaped input.

One pass per primitive kind (string, array, object, boolean). Each always
returns a usable value and, when given a collector, records why the input
did not fit. Callers compose these per field.

A value that is None (JSON null) or absent is treated as "not provided" and
coerced silently; anything else that has the wrong type is recorded.
"""

import math
from typing import Any, Dict, List, Optional

# Anything with a record(section, field, value, reason) method
Collector = Any


def json_type_name(value: Any) -> str:
    """
    Name a Python value by its JSON type.

    Examples:
        >>> json_type_name("x")
        'string'
        >>> json_type_name(3.5)
        'number'
        >>> json_type_name(None)
        'null'
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def scalar_to_string(value: Any) -> str:
    """
    Render a JSON scalar the way it reads in JSON text.

    Booleans become "true"/"false" and integral floats lose their ".0".
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _record(
    collector: Optional[Collector], section: str, field: str, value: Any, reason: str
) -> None:
    if collector is not None:
        collector.record(section, field, value, reason)


def safe_string(
    value: Any,
    collector: Optional[Collector] = None,
    section: str = "",
    field: str = "",
) -> str:
    """
    Coerce a value expected to be a string.

    - str: returned unchanged
    - None: "" (not recorded)
    - number/boolean: its JSON text form (recorded)
    - object/array/other: "" (recorded; the value survives in the record)

    Args:
        value: Input value
        collector: Optional non-conforming data collector
        section: Section name for the record
        field: Field path for the record

    Returns:
        A string, never None
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""

    reason = f"expected string, got {json_type_name(value)}"
    if isinstance(value, (bool, int, float)):
        _record(collector, section, field, value, reason)
        return scalar_to_string(value)

    _record(collector, section, field, value, reason)
    return ""


def safe_array(
    value: Any,
    collector: Optional[Collector] = None,
    section: str = "",
    field: str = "",
) -> List[Any]:
    """
    Coerce a value expected to be an array.

    - list: returned as a new list (elements are not copied)
    - None: [] (not recorded)
    - anything else: [] (recorded as "expected array, got X")
    """
    if isinstance(value, list):
        return list(value)
    if value is None:
        return []
    _record(collector, section, field, value, f"expected array, got {json_type_name(value)}")
    return []


def safe_object(
    value: Any,
    collector: Optional[Collector] = None,
    section: str = "",
    field: str = "",
) -> Dict[str, Any]:
    """
    Coerce a value expected to be an object.

    - dict: returned as-is
    - None: {} (not recorded)
    - anything else: {} (recorded as "expected object, got X")
    """
    if isinstance(value, dict):
        return value
    if value is None:
        return {}
    _record(collector, section, field, value, f"expected object, got {json_type_name(value)}")
    return {}


def safe_visible(
    value: Any,
    collector: Optional[Collector] = None,
    section: str = "",
    field: str = "",
) -> bool:
    """
    Resolve a visibility flag: only an explicit False hides.

    Non-boolean values (other than null) are recorded and treated as visible.
    """
    if value is None or isinstance(value, bool):
        return value is not False
    _record(collector, section, field, value, f"expected boolean, got {json_type_name(value)}")
    return True


def safe_number(
    value: Any,
    default: float,
    collector: Optional[Collector] = None,
    section: str = "",
    field: str = "",
) -> float:
    """
    Coerce a value expected to be a number, falling back to a default.

    Numeric strings are accepted ("24" -> 24). Booleans are not numbers here,
    and neither are NaN or infinities, which have no JSON form.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    if value is None:
        return default
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            pass
        else:
            if math.isfinite(parsed):
                return int(parsed) if parsed.is_integer() else parsed
            _record(collector, section, field, value, "expected finite number")
            return default
    if isinstance(value, float):
        _record(collector, section, field, value, "expected finite number")
        return default
    _record(collector, section, field, value, f"expected number, got {json_type_name(value)}")
    return default
