"""
Connection form: credentials JSON plus collection name.
"""
import json
from typing import Optional

import streamlit as st

from config import API_URL, EXAMPLE_CREDENTIALS
from utils.api import APIClient
from utils.errors import error_message
from utils.helper import collect_fields, prune_selection, reset_connection_state
from utils.styles import badge

api = APIClient(API_URL)


def parse_credentials(text: str) -> tuple[Optional[dict], Optional[str]]:
    """Parse the credentials box; returns (credentials, error)."""
    try:
        credentials = json.loads(text)
    except json.JSONDecodeError as e:
        return None, f"Invalid JSON configuration: {e.msg} (line {e.lineno}, column {e.colno})"
    if not isinstance(credentials, dict):
        return None, "Invalid JSON configuration: expected an object"
    return credentials, None


def apply_documents(data: dict):
    """Store a DocumentListResponse in the session."""
    documents = data.get("documents") or []
    st.session_state.documents = documents
    st.session_state.fields = data.get("fields") or collect_fields(documents)
    st.session_state.selected_ids = prune_selection(st.session_state.selected_ids, documents)


def refresh_documents() -> dict:
    """Reload the table, re-running the last query if one is active."""
    connection_id = st.session_state.connection_id
    last_query = st.session_state.get("last_query")
    if st.session_state.query_active and last_query:
        result = api.run_query(connection_id, **last_query)
    else:
        result = api.list_documents(connection_id)
    if result["status"] == 200:
        apply_documents(result["data"])
    return result


def _connect(credentials_text: str, collection: str):
    if not credentials_text.strip() or not collection.strip():
        st.session_state.connection_status = {
            "success": False,
            "message": "Please provide both the connection JSON and a collection name",
        }
        return

    credentials, parse_error = parse_credentials(credentials_text)
    if parse_error:
        st.session_state.connection_status = {"success": False, "message": parse_error}
        return

    result = api.connect(credentials, collection.strip())
    data = result.get("data") or {}
    if result["status"] != 200 or not data.get("success"):
        message = data.get("message") if result["status"] == 200 else error_message(result, "Connection failed")
        st.session_state.connection_status = {"success": False, "message": message}
        return

    st.session_state.connection_id = data["connection_id"]
    st.session_state.connection_info = {
        "database": data.get("database"),
        "collection": data.get("collection"),
    }
    loaded = refresh_documents()
    if loaded["status"] != 200:
        st.session_state.connection_status = {
            "success": False,
            "message": f"Connected, but loading failed: {error_message(loaded)}",
        }
        return

    st.session_state.connection_status = {
        "success": True,
        "message": (
            f"Successfully connected and loaded {len(st.session_state.documents)} "
            f"documents from \"{data.get('collection')}\""
        ),
    }


def _show_status():
    status = st.session_state.connection_status
    if not status:
        return
    if status["success"]:
        st.success(status["message"])
    else:
        st.error(status["message"])


def render():
    st.subheader("Database Connection")

    if st.session_state.connection_id:
        info = st.session_state.connection_info or {}
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(
                f"{badge('Connected')} &nbsp; **{info.get('database')}.{info.get('collection')}**",
                unsafe_allow_html=True,
            )
        with col2:
            if st.button("Disconnect", use_container_width=True):
                api.disconnect(st.session_state.connection_id)
                reset_connection_state()
                st.session_state.connection_status = {"success": True, "message": "Disconnected"}
                st.rerun()
        _show_status()
        return

    with st.form("connection_form"):
        credentials_text = st.text_area(
            "Connection JSON",
            placeholder=EXAMPLE_CREDENTIALS,
            height=180,
            help="Requires a `uri`; `database` may be omitted if the URI names one",
        )
        collection = st.text_input("Collection Name", placeholder="e.g., users, products, orders")
        submitted = st.form_submit_button("Connect & Load Data", use_container_width=True)

    if submitted:
        with st.spinner("Connecting..."):
            _connect(credentials_text, collection)
        if st.session_state.connection_id:
            st.rerun()

    _show_status()
