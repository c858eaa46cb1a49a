"""
Query console: filters, ordering and limit against the connected collection.
"""
import streamlit as st

from config import API_URL, OPERATORS, VALUE_TYPES
from utils.api import APIClient
from utils.errors import error_message
from utils.helper import build_query_payload, new_row, render_value_input, sample_query
from views.connection import apply_documents, refresh_documents

api = APIClient(API_URL)


def _field_input(row: dict, fields: list[str]) -> str:
    key = f"filter_field_{row['key']}"
    if not fields:
        return st.text_input("Field", value=row["field"], key=key)
    options = [""] + fields
    if row["field"] and row["field"] not in options:
        options.append(row["field"])
    return st.selectbox(
        "Field",
        options,
        index=options.index(row["field"]),
        key=key,
        format_func=lambda name: name or "Select field...",
    )


def _render_filter(row: dict, fields: list[str]) -> bool:
    """Draw one filter row; returns False if it was removed."""
    key = row["key"]
    col_field, col_op, col_type, col_value, col_remove = st.columns([3, 3, 2, 4, 1])
    with col_field:
        row["field"] = _field_input(row, fields)
    with col_op:
        operators = list(OPERATORS)
        row["operator"] = st.selectbox(
            "Operator",
            operators,
            index=operators.index(row["operator"]),
            format_func=OPERATORS.get,
            key=f"filter_op_{key}",
        )
    with col_type:
        row["type"] = st.selectbox(
            "Type",
            VALUE_TYPES,
            index=VALUE_TYPES.index(row["type"]),
            key=f"filter_type_{key}",
        )
    with col_value:
        row["value"] = render_value_input(row["type"], f"filter_value_{key}", value=row["value"])
    with col_remove:
        st.write("")
        return not st.button("✕", key=f"filter_remove_{key}")


def _execute():
    payload = build_query_payload(
        st.session_state.query_filters,
        st.session_state.query_order_field,
        st.session_state.query_order_direction,
        st.session_state.query_limit,
    )
    result = api.run_query(st.session_state.connection_id, **payload)
    if result["status"] != 200:
        st.session_state.query_status = {"success": False, "message": f"Query failed: {error_message(result)}"}
        return

    apply_documents(result["data"])
    st.session_state.query_active = True
    st.session_state.last_query = payload
    st.session_state.query_status = {
        "success": True,
        "message": f"Query returned {result['data'].get('count', 0)} documents",
    }


ORDER_WIDGET_KEYS = ("query_order_select", "query_direction_radio", "query_limit_input")


def _clear_order_widgets():
    for key in ORDER_WIDGET_KEYS:
        st.session_state.pop(key, None)


def _reset():
    st.session_state.query_filters = []
    st.session_state.query_order_field = ""
    st.session_state.query_order_direction = "asc"
    st.session_state.query_limit = 0
    st.session_state.query_active = False
    st.session_state.last_query = None
    result = refresh_documents()
    if result["status"] == 200:
        st.session_state.query_status = None
    else:
        st.session_state.query_status = {"success": False, "message": error_message(result)}


def _load_sample():
    sample = sample_query(st.session_state.fields)
    st.session_state.query_filters = sample["filters"]
    st.session_state.query_order_field = sample["order_field"]
    st.session_state.query_order_direction = sample["order_direction"]
    st.session_state.query_limit = sample["limit"]


def render():
    filters = st.session_state.query_filters
    fields = st.session_state.fields
    title = "Query Console"
    if filters:
        title += f" · {len(filters)} filter{'s' if len(filters) != 1 else ''}"

    with st.expander(title, expanded=bool(filters)):
        st.caption("Build and execute queries")

        header, add = st.columns([5, 1])
        with header:
            st.markdown("**Where clauses**")
        with add:
            if st.button("Add Filter", use_container_width=True):
                filters.append(new_row())
                st.rerun()

        if not filters:
            st.caption("No filters added. Click 'Add Filter' to start building your query.")

        kept = [row for row in filters if _render_filter(row, fields)]
        if len(kept) != len(filters):
            st.session_state.query_filters = kept
            st.rerun()

        st.markdown("**Order by**")
        col_field, col_dir, col_limit = st.columns([3, 2, 2])
        with col_field:
            order_options = [""] + ["_id"] + [f for f in fields if f != "_id"]
            if st.session_state.query_order_field not in order_options:
                order_options.append(st.session_state.query_order_field)
            st.session_state.query_order_field = st.selectbox(
                "Field",
                order_options,
                index=order_options.index(st.session_state.query_order_field),
                format_func=lambda name: name or "No ordering",
                key="query_order_select",
            )
        with col_dir:
            st.session_state.query_order_direction = st.radio(
                "Direction",
                ["asc", "desc"],
                index=0 if st.session_state.query_order_direction == "asc" else 1,
                format_func=lambda d: "Ascending" if d == "asc" else "Descending",
                horizontal=True,
                key="query_direction_radio",
            )
        with col_limit:
            st.session_state.query_limit = st.number_input(
                "Limit (0 = none)",
                min_value=0,
                step=1,
                value=int(st.session_state.query_limit or 0),
                key="query_limit_input",
            )

        col_run, col_reset, col_sample = st.columns(3)
        with col_run:
            if st.button("Execute Query", type="primary", use_container_width=True):
                _execute()
                st.rerun()
        with col_reset:
            if st.button("Reset", use_container_width=True):
                _reset()
                _clear_order_widgets()
                st.rerun()
        with col_sample:
            if st.button("Load Sample", use_container_width=True):
                _load_sample()
                _clear_order_widgets()
                st.rerun()

        status = st.session_state.get("query_status")
        if status:
            if status["success"]:
                st.success(status["message"])
            else:
                st.error(status["message"])
