"""
Collection table with click-to-sort headers and a value inspector.
"""
import pandas as pd
import streamlit as st

from utils.formatters import document_summary, format_full_value
from utils.helper import (
    document_ids,
    search_documents,
    sort_documents,
    table_rows,
    toggle_sort,
)

HEADERS_PER_ROW = 6


def _sort_headers(columns: list[str]):
    """One button per column; clicking toggles the sort on that column."""
    sort_key = st.session_state.sort_key
    direction = st.session_state.sort_direction
    for start in range(0, len(columns), HEADERS_PER_ROW):
        chunk = columns[start:start + HEADERS_PER_ROW]
        for col, name in zip(st.columns(HEADERS_PER_ROW), chunk):
            arrow = ""
            if name == sort_key:
                arrow = " ↑" if direction == "asc" else " ↓"
            with col:
                if st.button(f"{name}{arrow}", key=f"sort_{name}", use_container_width=True):
                    st.session_state.sort_key, st.session_state.sort_direction = toggle_sort(
                        sort_key, direction, name
                    )
                    st.rerun()


def _inspector(documents: list[dict]):
    with st.expander("Inspect document"):
        labels = {doc["id"]: f"{doc['id']} · {document_summary(doc['fields'])}" for doc in documents}
        selected = st.selectbox(
            "Document",
            list(labels),
            format_func=lambda doc_id: labels[doc_id],
            key="inspect_document",
        )
        doc = next((d for d in documents if d["id"] == selected), None)
        if doc is None:
            return
        st.markdown(f"**_id**: `{doc['id']}`")
        for name, value in doc["fields"].items():
            st.markdown(f"**{name}**")
            st.code(format_full_value(value), language="json")


def render():
    info = st.session_state.connection_info or {}
    documents = st.session_state.documents
    fields = st.session_state.fields

    col1, col2 = st.columns([3, 1])
    with col1:
        st.subheader(f"Collection Data: {info.get('collection', '')}")
    with col2:
        label = "query results" if st.session_state.query_active else "documents"
        st.caption(f"{len(documents)} {label}")

    if not documents:
        st.info("No data to display")
        st.session_state.visible_ids = []
        return

    search = st.text_input("Search", key="table_search", placeholder="Filter visible rows")
    visible = search_documents(documents, search)
    st.session_state.visible_ids = document_ids(visible)

    columns = ["_id"] + fields
    _sort_headers(columns)

    rows = sort_documents(visible, st.session_state.sort_key, st.session_state.sort_direction)
    st.dataframe(
        pd.DataFrame(table_rows(rows, fields), columns=columns),
        use_container_width=True,
        hide_index=True,
    )
    if len(visible) != len(documents):
        st.caption(f"Showing {len(visible)} of {len(documents)}")

    _inspector(rows)
