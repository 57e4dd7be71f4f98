"""
Record sanitizer: draft → canonical symptom record.

Form controls hand back a mix of strings, numbers, booleans and nulls. Before
a record is written it goes through sanitize_record(), which guarantees:

- every integer field is an int or None (never "", never NaN, never text)
- every string field is a str ("" means unset)
- ecg_taken is a bool
- everything else (date, time, id, user_name, ...) passes through untouched

The sanitizer never raises and never mutates its input.
"""
import math
import re
from typing import Any, Dict, Mapping, Optional

from symptom_svc.schemas.symptom import BOOLEAN_FIELD, INTEGER_FIELDS, STRING_FIELDS

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def parse_leading_int(value: Any) -> Optional[int]:
    """
    Parse a base-10 integer from the leading digits of a value.

    Parsing stops at the first non-digit, so "72bpm" gives 72 and "7.9"
    gives 7. Anything without leading digits gives None.

    Examples:
        >>> parse_leading_int("  120 ")
        120
        >>> parse_leading_int("abc") is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None

    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # digit run longer than the interpreter's int conversion limit
        return None


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return parse_leading_int(value)


def _coerce_bool(value: Any) -> bool:
    return value is True or value == "true"


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def sanitize_record(draft: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Convert a draft record into the canonical record shape.

    Args:
        draft: Mapping of field name to raw value.

    Returns:
        A new dict containing every canonical field plus any pass-through keys.
    """
    sanitized = dict(draft)

    for field in INTEGER_FIELDS:
        sanitized[field] = _coerce_int(draft.get(field))

    sanitized[BOOLEAN_FIELD] = _coerce_bool(draft.get(BOOLEAN_FIELD))

    for field in STRING_FIELDS:
        sanitized[field] = _coerce_str(draft.get(field))

    return sanitized


def apply_field_change(draft: Mapping[str, Any], field: str, value: Any) -> Dict[str, Any]:
    """Return a copy of the draft with one field replaced, coercing integer fields on entry."""
    updated = dict(draft)
    updated[field] = _coerce_int(value) if field in INTEGER_FIELDS else value
    return updated
