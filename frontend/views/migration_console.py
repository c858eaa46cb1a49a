"""
Migration console: batch update, duplicate and delete over selected documents.

Batch operations are locked until an admin signs in; the console follows the
sign-in state through AuthSession.on_change().
"""
from typing import Optional

import streamlit as st
from streamlit_option_menu import option_menu

from config import API_URL, VALUE_TYPES
from utils.api import APIClient
from utils.auth_session import AuthSession
from utils.errors import error_message
from utils.formatters import document_summary
from utils.helper import (
    build_update_payload,
    document_ids,
    new_row,
    render_value_input,
    toggle_selection,
)
from utils.styles import badge
from views.connection import refresh_documents

api = APIClient(API_URL)

OPERATIONS = {
    "Batch Update": "update",
    "Duplicate": "duplicate",
    "Delete": "delete",
}


def _on_auth_change(user: Optional[dict]):
    if user is None:
        st.session_state.operation_status = {
            "success": False,
            "message": "Signed out: batch operations are locked",
        }
    else:
        st.session_state.operation_status = None


def bind(auth: AuthSession):
    """Follow sign-in changes for the rest of this script run."""
    return auth.on_change(_on_auth_change)


def _checkbox_key(document_id: str) -> str:
    return f"select_{document_id}"


def _set_selection(ids: list[str]):
    """Schedule a selection change; applied before the checkboxes are drawn."""
    st.session_state.pending_selection = ids
    st.rerun()


def _apply_pending_selection(documents: list[dict]):
    pending = st.session_state.get("pending_selection")
    if pending is None:
        return
    chosen = set(pending)
    for doc in documents:
        st.session_state[_checkbox_key(doc["id"])] = doc["id"] in chosen
    st.session_state.selected_ids = [doc_id for doc_id in document_ids(documents) if doc_id in chosen]
    st.session_state.pending_selection = None


def _selection(documents: list[dict]):
    all_ids = document_ids(documents)
    visible_ids = st.session_state.visible_ids or all_ids

    header, col_all, col_visible, col_none = st.columns([3, 1, 1, 1])
    with header:
        st.markdown("**Document selection**")
    with col_all:
        if st.button(f"All ({len(all_ids)})", use_container_width=True):
            _set_selection(all_ids)
    with col_visible:
        if st.button(f"Visible ({len(visible_ids)})", use_container_width=True):
            _set_selection(visible_ids)
    with col_none:
        if st.button("None", use_container_width=True):
            _set_selection([])

    with st.container(height=240):
        selected = list(st.session_state.selected_ids)
        for doc in documents:
            key = _checkbox_key(doc["id"])
            if key not in st.session_state:
                st.session_state[key] = doc["id"] in selected
            checked = st.checkbox(f"ID: {doc['id']}", key=key)
            st.caption(document_summary(doc["fields"]))
            if checked != (doc["id"] in selected):
                selected = toggle_selection(selected, doc["id"])
        st.session_state.selected_ids = selected


def _update_form(fields: list[str]):
    st.markdown("**Fields to update**")
    rows = st.session_state.update_fields
    kept = []
    for row in rows:
        key = row["key"]
        col_field, col_type, col_value, col_remove = st.columns([3, 2, 4, 1])
        with col_field:
            row["field"] = st.text_input("Field", value=row["field"], key=f"update_field_{key}",
                                         placeholder=", ".join(fields[:3]))
        with col_type:
            row["type"] = st.selectbox("Type", VALUE_TYPES, index=VALUE_TYPES.index(row["type"]),
                                       key=f"update_type_{key}")
        with col_value:
            row["value"] = render_value_input(row["type"], f"update_value_{key}", value=row["value"])
        with col_remove:
            st.write("")
            if not st.button("✕", key=f"update_remove_{key}"):
                kept.append(row)
    if st.button("Add Field to Update"):
        kept.append(new_row())
    if len(kept) != len(rows):
        st.session_state.update_fields = kept
        st.rerun()

    st.markdown("**Fields to delete**")
    delete_rows = st.session_state.delete_fields
    kept_deletes = []
    for index, name in enumerate(delete_rows):
        col_field, col_remove = st.columns([9, 1])
        with col_field:
            value = st.text_input("Field", value=name, key=f"delete_field_{index}",
                                  label_visibility="collapsed", placeholder="Field name to remove")
        with col_remove:
            if not st.button("✕", key=f"delete_remove_{index}"):
                kept_deletes.append(value)
    if st.button("Add Field to Delete"):
        kept_deletes.append("")
    if len(kept_deletes) != len(delete_rows):
        st.session_state.delete_fields = kept_deletes
        for index in range(len(delete_rows)):
            st.session_state.pop(f"delete_field_{index}", None)
        st.rerun()
    st.session_state.delete_fields = kept_deletes


def _finish(result: dict, auth: AuthSession, failure_prefix: str) -> bool:
    """Record the outcome; on success clear the selection and reload."""
    if result["status"] != 200:
        if result["status"] == 401:
            auth.restore()
        st.session_state.operation_status = {
            "success": False,
            "message": f"{failure_prefix} failed: {error_message(result)}",
        }
        return False

    st.session_state.operation_status = {"success": True, "message": result["data"]["message"]}
    st.session_state.pending_selection = []
    refresh_documents()
    return True


def _run_update(auth: AuthSession):
    selected = st.session_state.selected_ids
    rows, deletes = st.session_state.update_fields, st.session_state.delete_fields
    if not selected or (not rows and not deletes):
        st.session_state.operation_status = {
            "success": False,
            "message": "Select documents and specify fields to update or delete",
        }
        return
    updates, delete_fields = build_update_payload(rows, deletes)
    if not updates and not delete_fields:
        st.session_state.operation_status = {
            "success": False,
            "message": "No valid update or delete fields provided",
        }
        return

    result = api.batch_update(st.session_state.connection_id, selected, updates, delete_fields)
    if _finish(result, auth, "Update"):
        st.session_state.update_fields = []
        st.session_state.delete_fields = []


def _run_duplicate(auth: AuthSession):
    selected = st.session_state.selected_ids
    if not selected:
        st.session_state.operation_status = {"success": False, "message": "Select documents to duplicate"}
        return
    result = api.batch_duplicate(st.session_state.connection_id, selected)
    _finish(result, auth, "Duplication")


def _run_delete(auth: AuthSession):
    selected = st.session_state.selected_ids
    if not selected:
        st.session_state.operation_status = {"success": False, "message": "Select documents to delete"}
        return
    result = api.batch_delete(st.session_state.connection_id, selected)
    _finish(result, auth, "Deletion")


def render(auth: AuthSession):
    documents = st.session_state.documents
    if not documents:
        return

    _apply_pending_selection(documents)

    title = "Migration Console"
    if st.session_state.selected_ids:
        title += f" · {len(st.session_state.selected_ids)} selected"

    with st.expander(title):
        st.caption("Batch operations for editing, duplicating, and deleting documents")

        if not auth.is_admin:
            if auth.is_signed_in:
                st.warning("Admin privileges required for batch operations")
            else:
                st.warning("Sign in with an admin account to run batch operations")
            _show_status()
            return

        st.markdown(badge(f"{len(st.session_state.selected_ids)} selected", "selected"),
                    unsafe_allow_html=True)
        _selection(documents)

        choice = option_menu(
            menu_title=None,
            options=list(OPERATIONS),
            icons=["pencil-square", "files", "trash"],
            orientation="horizontal",
            key="migration_operation",
        )
        operation = OPERATIONS.get(choice, "update")
        count = len(st.session_state.selected_ids)

        if operation == "update":
            _update_form(st.session_state.fields)
            if st.button("Apply Batch Update", type="primary", use_container_width=True):
                _run_update(auth)
                st.rerun()
        elif operation == "duplicate":
            st.info(f"Each of the {count} selected document(s) will be copied with a new id.")
            if st.button("Duplicate Documents", type="primary", use_container_width=True):
                _run_duplicate(auth)
                st.rerun()
        else:
            st.warning(
                f"Are you sure you want to delete {count} document(s)? This action cannot be undone."
            )
            confirmed = st.checkbox("I understand, delete the selected documents", key="confirm_delete")
            if st.button("Delete Documents", type="primary", disabled=not confirmed,
                         use_container_width=True):
                _run_delete(auth)
                st.session_state.pop("confirm_delete", None)
                st.rerun()

        _show_status()


def _show_status():
    status = st.session_state.operation_status
    if not status:
        return
    if status["success"]:
        st.success(status["message"])
    else:
        st.error(status["message"])
