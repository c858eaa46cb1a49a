from datetime import timezone
from typing import Optional

import requests
import streamlit as st
from bson import json_util

from config import REQUEST_TIMEOUT_SECONDS

# Decode relaxed Extended JSON back into aware datetimes and ObjectIds
WIRE_JSON_OPTIONS = json_util.RELAXED_JSON_OPTIONS.with_options(
    tz_aware=True,
    tzinfo=timezone.utc,
)


class APIClient:
    """Simple API client for backend requests."""

    def __init__(self, base_url: str):
        self.base_url = base_url

    def _token(self) -> Optional[str]:
        return st.session_state.get("token")

    def _headers(self) -> dict:
        """Get headers with auth token if available."""
        headers = {"Content-Type": "application/json"}
        token = self._token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _params(self, params: Optional[dict] = None) -> dict:
        params = dict(params or {})
        token = self._token()
        if token:
            params["token"] = token
        return params

    def _parse_json(self, resp) -> Optional[dict]:
        """Parse Extended JSON, return None or raw text on failure."""
        if resp is None or not resp.text:
            return None
        try:
            return json_util.loads(resp.text, json_options=WIRE_JSON_OPTIONS)
        except ValueError:
            # Non-JSON response
            return {"raw": resp.text}

    def _request(
        self,
        method: str,
        endpoint: str,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> dict:
        """Send a request; never raises, errors come back as status 0."""
        try:
            resp = requests.request(
                method,
                f"{self.base_url}{endpoint}",
                headers=self._headers(),
                json=data,
                params=self._params(params),
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            return {"status": resp.status_code, "data": self._parse_json(resp)}
        except requests.exceptions.ConnectionError:
            return {"status": 0, "error": "Cannot connect to backend"}
        except requests.exceptions.RequestException as e:
            return {"status": 0, "error": str(e)}

    def _get(self, endpoint: str, params: Optional[dict] = None) -> dict:
        """Make GET request."""
        return self._request("GET", endpoint, params=params)

    def _post(self, endpoint: str, data: dict, params: Optional[dict] = None) -> dict:
        """Make POST request."""
        return self._request("POST", endpoint, data=data, params=params)

    def _delete(self, endpoint: str) -> dict:
        """Make DELETE request."""
        return self._request("DELETE", endpoint)

    # Auth endpoints
    def login(self, email: str, password: str) -> dict:
        """Sign in and get token."""
        return self._post("/auth/login", {
            "email": email,
            "password": password,
        })

    def logout(self) -> dict:
        """Revoke the current token."""
        return self._post("/auth/logout", {})

    def refresh(self) -> dict:
        """Get a fresh token for the current session."""
        return self._post("/auth/refresh", {})

    def get_me(self) -> dict:
        """Get current admin profile."""
        return self._get("/auth/me")

    # Health endpoint
    def health(self) -> dict:
        """Check API health."""
        return self._get("/health")

    # Connection endpoints
    def connect(self, credentials: dict, collection: str) -> dict:
        """Open a connection to a collection."""
        return self._post("/connections", {
            "credentials": credentials,
            "collection": collection,
        })

    def disconnect(self, connection_id: str) -> dict:
        """Close a connection."""
        return self._delete(f"/connections/{connection_id}")

    # Document endpoints
    def list_documents(self, connection_id: str) -> dict:
        """Load every document of the connected collection."""
        return self._get(f"/connections/{connection_id}/documents")

    def run_query(
        self,
        connection_id: str,
        filters: list[dict],
        order_by: Optional[dict] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """Run a filter/order/limit query."""
        return self._post(f"/connections/{connection_id}/query", {
            "filters": filters,
            "order_by": order_by,
            "limit": limit,
        })

    # Batch endpoints (admin only)
    def batch_update(
        self,
        connection_id: str,
        document_ids: list[str],
        updates: list[dict],
        delete_fields: list[str],
    ) -> dict:
        """Set and/or delete fields on selected documents."""
        return self._post(f"/connections/{connection_id}/batch/update", {
            "document_ids": document_ids,
            "updates": updates,
            "delete_fields": delete_fields,
        })

    def batch_duplicate(self, connection_id: str, document_ids: list[str]) -> dict:
        """Duplicate selected documents."""
        return self._post(f"/connections/{connection_id}/batch/duplicate", {
            "document_ids": document_ids,
        })

    def batch_delete(self, connection_id: str, document_ids: list[str]) -> dict:
        """Delete selected documents."""
        return self._post(f"/connections/{connection_id}/batch/delete", {
            "document_ids": document_ids,
        })
