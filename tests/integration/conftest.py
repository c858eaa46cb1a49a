"""
Integration test fixtures.

These tests require a running backend, a reachable MongoDB to browse and a
bootstrap admin account. Mark with @pytest.mark.integration to skip in
normal test runs.
"""
import os

import httpx
import pytest


@pytest.fixture
def live_backend_url():
    """Get base URL for live backend tests (if running)."""
    return os.getenv("BACKEND_URL", "http://localhost:8000")


@pytest.fixture
def browsed_mongo_uri():
    """MongoDB the backend should connect to on the operator's behalf."""
    return os.getenv("INTEGRATION_MONGO_URI", "mongodb://mongodb:27017")


@pytest.fixture
def admin_credentials():
    """Bootstrap admin configured on the running backend."""
    email = os.getenv("BOOTSTRAP_ADMIN_EMAIL")
    password = os.getenv("BOOTSTRAP_ADMIN_PASSWORD")
    if not email or not password:
        pytest.skip("BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD not set")
    return {"email": email, "password": password}


@pytest.fixture
def test_timeout():
    """Timeout for network requests in integration tests."""
    return 30


@pytest.fixture
def skip_if_backend_down(live_backend_url, test_timeout):
    """Skip test if the backend is not reachable."""
    try:
        httpx.get(f"{live_backend_url}/health", timeout=test_timeout)
    except httpx.HTTPError:
        pytest.skip("Backend not running")
