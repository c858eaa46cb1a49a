"""
Display formatting for document values.

Previews are lossy and only meant for the table and selection lists.
"""
import json
from datetime import datetime
from typing import Any

from bson import ObjectId

from config import SUMMARY_MAX_LENGTH

TIMESTAMP_FORMAT = "%b %d, %Y, %I:%M:%S %p"

# Fields checked first when labelling a document
DATE_FIELDS = ("createdAt", "updatedAt", "timestamp", "date", "created", "modified")

MAX_LIST_PREVIEW = 3
MAX_OBJECT_PREVIEW = 2


def format_timestamp(value: datetime) -> str:
    """Format a datetime as e.g. 'Jan 15, 2024, 10:30:00 AM'."""
    return value.strftime(TIMESTAMP_FORMAT)


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return format_timestamp(value)
    return str(value)


def _preview_item(value: Any) -> str:
    """Format a value nested in a list or object preview."""
    if value is None:
        return "null"
    if isinstance(value, str):
        return f'"{value}"'
    return format_value(value)


def format_value(value: Any) -> str:
    """
    Compact, single-line preview of a field value.

    Lists longer than 3 items show the first 2 and a '+N more' marker,
    objects with more than 2 keys show the first 2 keys the same way.
    """
    if value is None:
        return ""

    if isinstance(value, (list, tuple)):
        if not value:
            return "[]"
        if len(value) <= MAX_LIST_PREVIEW:
            return "[" + ", ".join(_preview_item(item) for item in value) + "]"
        shown = ", ".join(_preview_item(item) for item in value[:2])
        return f"[{shown}, +{len(value) - 2} more]"

    if isinstance(value, dict):
        if not value:
            return "{}"
        items = [f"{key}: {_preview_item(item)}" for key, item in value.items()]
        if len(items) <= MAX_OBJECT_PREVIEW:
            return "{" + ", ".join(items) + "}"
        return "{" + ", ".join(items[:2]) + f", +{len(items) - 2} more}}"

    return _format_scalar(value)


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, ObjectId):
        return str(value)
    return repr(value)


def format_full_value(value: Any) -> str:
    """Full representation of a value for the detail view."""
    if value is None:
        return "null"
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, indent=2, default=_json_default, ensure_ascii=False)
    return _format_scalar(value)


def truncate(text: str, length: int = 30) -> str:
    """Cut text to length characters, marking the cut with '...'."""
    if len(text) <= length:
        return text
    return text[:length] + "..."


def document_summary(fields: dict[str, Any], max_length: int = SUMMARY_MAX_LENGTH) -> str:
    """
    One-line label for a document in selection lists.

    Prefers a well-known date field, then any timestamp field, then the
    first field.
    """
    for name in DATE_FIELDS:
        value = fields.get(name)
        if isinstance(value, datetime):
            return f"{name}: {format_timestamp(value)}"

    for name, value in fields.items():
        if isinstance(value, datetime):
            return f"{name}: {format_timestamp(value)}"

    for name, value in fields.items():
        if name in ("id", "_id"):
            continue
        return f"{name}: {truncate(format_value(value), max_length)}"

    return "No additional data"
