"""
Session state and table helpers shared by the views.
"""
import uuid
from datetime import datetime
from typing import Any, Iterable, Optional

import streamlit as st

from utils.formatters import format_value


def init_session():
    defaults = {
        # Connection
        "connection_id": None,
        "connection_info": None,
        "connection_status": None,
        # Loaded documents, each {"id": str, "fields": dict}
        "documents": [],
        "fields": [],
        "visible_ids": [],
        # Table
        "sort_key": None,
        "sort_direction": "asc",
        "table_search": "",
        # Query console
        "query_filters": [],
        "query_order_field": "",
        "query_order_direction": "asc",
        "query_limit": 0,
        "query_active": False,
        "query_status": None,
        "last_query": None,
        # Migration console
        "selected_ids": [],
        "update_fields": [],
        "delete_fields": [],
        "operation_status": None,
        # Admin auth
        "token": None,
        "user": None,
        "auth_status": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def reset_connection_state():
    """Forget everything tied to the current connection."""
    for key in ("connection_id", "connection_info", "operation_status"):
        st.session_state[key] = None
    for key in ("documents", "fields", "visible_ids", "selected_ids", "query_filters",
                "update_fields", "delete_fields"):
        st.session_state[key] = []
    st.session_state["sort_key"] = None
    st.session_state["sort_direction"] = "asc"
    st.session_state["query_active"] = False
    st.session_state["last_query"] = None
    st.session_state["query_status"] = None


def collect_fields(documents: list[dict]) -> list[str]:
    """Union of field names across documents, in first-seen order."""
    seen: dict[str, None] = {}
    for doc in documents:
        for name in doc.get("fields", {}):
            seen.setdefault(name, None)
    return list(seen)


def _sort_key(value: Any) -> tuple:
    """Order mixed values: missing, booleans, numbers, text, dates, the rest."""
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, int(value))
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, str):
        return (3, value.casefold())
    if isinstance(value, datetime):
        return (4, value.timestamp())
    return (5, format_value(value))


def sort_documents(documents: list[dict], key: Optional[str], direction: str = "asc") -> list[dict]:
    """Sort documents by one field; None key keeps the original order."""
    if not key:
        return list(documents)

    def value_of(doc: dict) -> Any:
        if key == "_id":
            return doc.get("id")
        return doc.get("fields", {}).get(key)

    return sorted(documents, key=lambda doc: _sort_key(value_of(doc)), reverse=direction == "desc")


def toggle_sort(current_key: Optional[str], current_direction: str, clicked: str) -> tuple[str, str]:
    """Column header click: flip direction on the same column, else sort ascending."""
    if clicked == current_key:
        return clicked, "desc" if current_direction == "asc" else "asc"
    return clicked, "asc"


def search_documents(documents: list[dict], text: str) -> list[dict]:
    """Documents whose id or any previewed field contains text, case-insensitively."""
    needle = (text or "").strip().casefold()
    if not needle:
        return list(documents)
    matches = []
    for doc in documents:
        haystack = [doc.get("id", "")] + [format_value(v) for v in doc.get("fields", {}).values()]
        if any(needle in str(item).casefold() for item in haystack):
            matches.append(doc)
    return matches


def table_rows(documents: list[dict], fields: list[str]) -> list[dict]:
    """Rows of compact previews, one column per field plus the id."""
    rows = []
    for doc in documents:
        row = {"_id": doc.get("id", "")}
        values = doc.get("fields", {})
        for name in fields:
            row[name] = format_value(values.get(name))
        rows.append(row)
    return rows


def document_ids(documents: Iterable[dict]) -> list[str]:
    return [doc["id"] for doc in documents]


def toggle_selection(selected: list[str], document_id: str) -> list[str]:
    """Add or remove one id, keeping order."""
    if document_id in selected:
        return [item for item in selected if item != document_id]
    return selected + [document_id]


def prune_selection(selected: list[str], documents: list[dict]) -> list[str]:
    """Drop selected ids that are no longer loaded."""
    loaded = set(document_ids(documents))
    return [item for item in selected if item in loaded]


# ==================== Query and edit descriptors ====================

def new_row(**values) -> dict:
    """A filter or field-edit row with a stable widget key."""
    row = {"key": uuid.uuid4().hex, "field": "", "operator": "==", "value": "", "type": "string"}
    row.update(values)
    return row


def sample_query(fields: list[str]) -> dict:
    """Starter query over the first known field."""
    first = fields[0] if fields else "name"
    return {
        "filters": [new_row(field=first, operator="==", value="example", type="string")],
        "order_field": fields[0] if fields else "_id",
        "order_direction": "asc",
        "limit": 10,
    }


def build_query_payload(
    filters: list[dict],
    order_field: str,
    order_direction: str,
    limit: int,
) -> dict:
    """Request body for /query from the console's form state."""
    payload_filters = [
        {
            "field": row["field"].strip(),
            "operator": row.get("operator", "=="),
            "value": row.get("value", ""),
            "type": row.get("type", "string"),
        }
        for row in filters
        if row.get("field", "").strip()
    ]
    order_by = {"field": order_field, "direction": order_direction} if order_field else None
    return {
        "filters": payload_filters,
        "order_by": order_by,
        "limit": limit if limit and limit > 0 else None,
    }


def build_update_payload(update_rows: list[dict], delete_rows: list[str]) -> tuple[list[dict], list[str]]:
    """(updates, delete_fields) for a batch update, empty names dropped."""
    updates = [
        {"field": row["field"].strip(), "value": row.get("value", ""), "type": row.get("type", "string")}
        for row in update_rows
        if row.get("field", "").strip()
    ]
    delete_fields = [name.strip() for name in delete_rows if name and name.strip()]
    return updates, delete_fields


def render_value_input(value_type: str, key: str, label: str = "Value", value: Any = "") -> Any:
    """Value widget matching a declared type."""
    if value_type == "null":
        st.text_input(label, value="null", key=key, disabled=True)
        return None
    if value_type == "boolean":
        options = ["true", "false"]
        index = options.index(value) if value in options else 0
        return st.selectbox(label, options, index=index, key=key)
    if value_type == "object":
        return st.text_area(label, value=value or "", key=key, placeholder='{"key": "value"}', height=100)

    placeholders = {
        "number": "42",
        "array": 'a, b, c  or  ["x", 1, true]',
        "timestamp": "2024-01-15T10:30",
        "string": "",
    }
    return st.text_input(label, value=value or "", key=key, placeholder=placeholders.get(value_type, ""))
