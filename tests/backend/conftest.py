"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes, services, and database operations.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Redis Override Fixtures
# =============================================================================

@pytest.fixture
def patched_redis(mock_async_redis):
    """
    Route rate limiting, lockout and token revocation to fakeredis.

    Usage in tests:
        async def test_something(patched_redis):
            assert await check_rate_limit("1.2.3.4", "/auth/login")
    """
    async def _get_redis():
        return mock_async_redis

    with patch("app.core.rate_limit.get_redis_client", side_effect=_get_redis), \
         patch("app.core.token_store.get_redis_client", side_effect=_get_redis):
        yield mock_async_redis


# =============================================================================
# Auth Service Fixtures
# =============================================================================

@pytest.fixture
def auth_service(mock_auth_db, patched_redis):
    """A real AuthService over the in-memory auth_db."""
    from app.services.auth_service import AuthService

    return AuthService(mock_auth_db)


@pytest_asyncio.fixture
async def seeded_admin(auth_service, test_admin_data):
    """Create the admin account and return its credentials."""
    await auth_service.ensure_admin(test_admin_data["email"], test_admin_data["password"])
    return test_admin_data


@pytest_asyncio.fixture
async def seeded_viewer(mock_auth_db, test_user_data):
    """Create a non-admin account and return its credentials."""
    from datetime import datetime, timezone

    from app.core.security import hash_password

    await mock_auth_db.users.insert_one({
        "email": test_user_data["email"],
        "hashed_password": hash_password(test_user_data["password"]),
        "roles": ["user"],
        "status": "active",
        "created_at": datetime.now(timezone.utc),
    })
    return test_user_data


@pytest_asyncio.fixture
async def admin_token(auth_service, seeded_admin) -> str:
    """A valid admin access token."""
    from app.schemas.auth import LoginRequest

    response = await auth_service.login(
        LoginRequest(email=seeded_admin["email"], password=seeded_admin["password"])
    )
    return response.access_token


@pytest.fixture
def mock_auth_service():
    """
    Create a fully mocked AuthService.

    All methods are AsyncMock, allowing you to configure return values:

        mock_auth_service.login.return_value = LoginResponse(...)
    """
    service = MagicMock()
    service.login = AsyncMock()
    service.logout = AsyncMock(return_value=True)
    service.refresh_token = AsyncMock()
    service.get_user_by_id = AsyncMock()
    return service


# =============================================================================
# Connection Fixtures
# =============================================================================

@pytest.fixture
def fake_client_factory():
    """
    Client factory returning MagicMock clients whose ping succeeds.

    The created clients are collected on factory.clients.
    """
    def factory(credentials):
        client = MagicMock()
        client.admin.command = AsyncMock(return_value={"ok": 1})
        client.get_default_database.return_value.name = "defaultdb"
        factory.clients.append(client)
        return client

    factory.clients = []
    return factory


@pytest.fixture
def connection_manager(fake_client_factory):
    """An empty ConnectionManager that never touches the network."""
    from app.services.connection_manager import ConnectionManager

    return ConnectionManager(max_connections=3, client_factory=fake_client_factory)


@pytest.fixture
def connection_id(connection_manager, document_store) -> str:
    """Id of the seeded document store registered in connection_manager."""
    return connection_manager.add(document_store)


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest.fixture
def api_app(app, connection_manager, auth_service):
    """
    The FastAPI app wired to in-memory stores.

    Connection lookups go to connection_manager and auth to auth_service.
    """
    from app.dependencies.auth import get_auth_service
    from app.dependencies.connections import connection_manager as connection_manager_dependency

    app.dependency_overrides[connection_manager_dependency] = lambda: connection_manager
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def api_client(api_app):
    """Async client for api_app."""
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=api_app),
        base_url="http://test"
    ) as ac:
        yield ac
