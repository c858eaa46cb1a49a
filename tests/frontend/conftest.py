"""
Frontend test fixtures and mocks.

Mocks Streamlit session_state and API client for isolated testing.
"""
import os
import sys
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

# The Streamlit app imports its modules as top-level packages (utils, config, views)
FRONTEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "frontend"))
if FRONTEND_DIR not in sys.path:
    sys.path.insert(0, FRONTEND_DIR)


class MockSessionState(dict):
    """Mock st.session_state that behaves like both dict and attribute access."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Default state
        self.update({
            "connection_id": None,
            "connection_info": None,
            "documents": [],
            "fields": [],
            "selected_ids": [],
            "query_active": False,
            "last_query": None,
            "token": None,
            "user": None,
            "auth_status": None,
        })

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"'SessionState' has no attribute '{name}'")

    def __setattr__(self, name, value):
        self[name] = value


@pytest.fixture
def mock_session_state():
    """Provide a mock session state for testing."""
    return MockSessionState()


@pytest.fixture
def signed_in_session_state():
    """Provide a session state holding an admin token."""
    state = MockSessionState()
    state.update({
        "token": "test-jwt-token",
        "user": {"id": "user-123", "email": "admin@example.com", "roles": ["admin"], "is_admin": True},
    })
    return state


@pytest.fixture
def mock_api():
    """APIClient stand-in; every call returns a result dict."""
    return MagicMock()


@pytest.fixture
def mock_api_responses():
    """Common API response fixtures."""
    return {
        "health_ok": {"status": 200, "data": {"status": "healthy"}},
        "login_success": {
            "status": 200,
            "data": {
                "access_token": "jwt-token-abc123",
                "token_type": "bearer",
                "expires_in": 3600,
                "user_id": "user-123",
                "email": "admin@example.com",
                "roles": ["admin"],
            },
        },
        "login_wrong_password": {
            "status": 401,
            "data": {"detail": {"code": "wrong-password", "message": "Incorrect password"}},
        },
        "login_rate_limited": {
            "status": 429,
            "data": {"detail": {"code": "too-many-requests", "message": "Too many login attempts"}},
        },
        "admin_profile": {
            "status": 200,
            "data": {
                "id": "user-123",
                "email": "admin@example.com",
                "roles": ["admin"],
                "is_admin": True,
            },
        },
        "viewer_profile": {
            "status": 200,
            "data": {
                "id": "user-456",
                "email": "viewer@example.com",
                "roles": ["user"],
                "is_admin": False,
            },
        },
        "token_expired": {
            "status": 401,
            "data": {"detail": {"code": "invalid-token", "message": "Could not validate credentials"}},
        },
        "validation_error": {
            "status": 422,
            "data": {"detail": [{"loc": ["body", "document_ids"], "msg": "Field required", "type": "missing"}]},
        },
        "connection_error": {"status": 0, "error": "Cannot connect to backend"},
    }


@pytest.fixture
def sample_documents():
    """Documents as the backend sends them, after Extended JSON decoding."""
    return [
        {
            "id": "65a000000000000000000001",
            "fields": {
                "name": "order-01",
                "status": "active",
                "total": 10,
                "createdAt": datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc),
            },
        },
        {
            "id": "65a000000000000000000002",
            "fields": {
                "name": "Order-02",
                "status": "archived",
                "total": 2.5,
                "tags": ["a", "b", "c", "d"],
            },
        },
        {
            "id": "65a000000000000000000003",
            "fields": {
                "name": "order-03",
                "status": None,
                "total": None,
            },
        },
    ]
