"""
Value coercion from operator-entered text to MongoDB-native values.

Every form field in the console arrives as text together with a declared type.
This module turns that pair into the value that is actually written or queried:
numbers become int/float, timestamps become timezone-aware UTC datetimes (stored
as BSON dates), arrays and objects are parsed and walked recursively so that
date-like strings nested inside them are promoted to datetimes as well.

Coercion is type-stable: the same (text, type) pair always produces the same
value, and a value that already has the declared type passes through unchanged.
Bad input falls back to a neutral default (0, False, None, a comma split), with
one exception: malformed JSON for the ``object`` type raises ``CoercionError``
so the operator sees the parse error instead of silently writing garbage.
"""
import json
import math
import re
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from app.core.errors import CoercionError


class ValueType(str, Enum):
    """Types an operator can declare for a text value."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    TIMESTAMP = "timestamp"
    NULL = "null"


# Leading numeric prefix, like a browser's parseFloat
_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INFINITY_PREFIX = re.compile(r"^\s*([+-]?)Infinity")

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DATETIME_PATTERN = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?$"
)

# Integral floats beyond this lose precision and may not fit a BSON int64
_MAX_SAFE_INTEGER = 2**53


def is_date_string(text: Any) -> bool:
    """Return True if text looks like an ISO date or date-time."""
    if not isinstance(text, str):
        return False
    return bool(DATE_PATTERN.match(text) or DATETIME_PATTERN.match(text))


def _parse_json_int(text: str) -> int | float:
    """JSON integers beyond the safe range become floats, as in a browser."""
    number = int(text)
    if abs(number) < _MAX_SAFE_INTEGER:
        return number
    return float(text)


def _normalize_number(number: float) -> int | float:
    if math.isnan(number):
        return 0
    if math.isfinite(number) and number.is_integer() and abs(number) < _MAX_SAFE_INTEGER:
        return int(number)
    return number


def parse_number(value: Any) -> int | float:
    """
    Parse a number the way a browser's parseFloat would.

    Only the leading numeric prefix is read ("12.5kg" -> 12.5). Anything
    without one yields 0. Integral results come back as int.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if isinstance(value, float):
            return _normalize_number(value)
        if abs(value) < _MAX_SAFE_INTEGER:
            return value
        # float(int) raises past 1e308, parsing the digits gives inf instead
        return float(str(value))

    text = "" if value is None else str(value)
    match = _NUMBER_PREFIX.match(text)
    if match:
        return _normalize_number(float(match.group()))

    match = _INFINITY_PREFIX.match(text)
    if match:
        return float("-inf") if match.group(1) == "-" else float("inf")

    return 0


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a date or date-time into an aware UTC datetime.

    Empty or unparseable input returns None. Naive values are taken as UTC.
    Numbers are read as milliseconds since the epoch.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def promote_dates(value: Any) -> Any:
    """Walk lists and dicts, turning date-like strings into datetimes."""
    if isinstance(value, str):
        if is_date_string(value):
            parsed = parse_timestamp(value)
            # Shaped like a date but not a real one (2024-13-45): keep the text
            return parsed if parsed is not None else value
        return value
    if isinstance(value, list):
        return [promote_dates(item) for item in value]
    if isinstance(value, dict):
        return {key: promote_dates(item) for key, item in value.items()}
    return value


def _coerce_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return value == "true"


def _coerce_array(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return [promote_dates(item) for item in value]
    if value is None:
        return []
    if not isinstance(value, str):
        return [value]

    if value.strip().startswith("["):
        try:
            parsed = json.loads(value, parse_int=_parse_json_int)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return promote_dates(parsed)

    tokens = (token.strip() for token in value.split(","))
    return [promote_dates(token) for token in tokens if token]


def _coerce_object(value: Any) -> dict:
    if isinstance(value, dict):
        return promote_dates(value)
    if not isinstance(value, str):
        raise CoercionError(f"Expected a JSON object, got {type(value).__name__}")

    try:
        parsed = json.loads(value, parse_int=_parse_json_int)
    except json.JSONDecodeError as e:
        raise CoercionError(f"Invalid JSON object: {e.msg} (line {e.lineno}, column {e.colno})") from e

    if not isinstance(parsed, dict):
        raise CoercionError("Expected a JSON object, e.g. {\"key\": \"value\"}")
    return promote_dates(parsed)


_COERCERS = {
    ValueType.STRING: _coerce_string,
    ValueType.NUMBER: parse_number,
    ValueType.BOOLEAN: _coerce_boolean,
    ValueType.ARRAY: _coerce_array,
    ValueType.OBJECT: _coerce_object,
    ValueType.TIMESTAMP: parse_timestamp,
    ValueType.NULL: lambda value: None,
}


def coerce_value(value: Any, declared_type: ValueType | str = ValueType.STRING) -> Any:
    """
    Convert a form value into the native value for its declared type.

    Args:
        value: Text typed by the operator, or an already typed value
        declared_type: One of the ValueType members (or its string value)

    Returns:
        The value to hand to the database driver

    Raises:
        CoercionError: For an unknown declared type or malformed object JSON
    """
    try:
        value_type = ValueType(declared_type)
    except ValueError:
        raise CoercionError(f"Unknown value type: {declared_type!r}")

    return _COERCERS[value_type](value)
