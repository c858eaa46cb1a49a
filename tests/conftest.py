"""
Global test fixtures for DocConsole.

This module provides shared fixtures for all tests including:
- In-memory MongoDB (mongomock-motor) and Redis (fakeredis)
- Admin and viewer credentials
- A seeded `shop.orders` collection to browse
- The FastAPI TestClient
"""

import sys
from datetime import datetime, timezone, timedelta
from pathlib import Path
from typing import Generator
from unittest.mock import AsyncMock, patch

import fakeredis.aioredis
import pytest
import pytest_asyncio
from bson import ObjectId
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))


# =============================================================================
# MongoDB Fixtures (mongomock)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """In-memory motor client (mongomock-motor) shared by a test."""
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_auth_db(mock_async_mongo_client):
    """Provide mock auth_db database."""
    db = mock_async_mongo_client["auth_db"]
    # Create indexes like the real app
    await db.users.create_index("email", unique=True)
    yield db


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_redis():
    """Async fakeredis, flushed after each test."""
    redis_client = fakeredis.aioredis.FakeRedis(decode_responses=True)
    yield redis_client
    await redis_client.flushall()
    await redis_client.aclose()


# =============================================================================
# Admin Fixtures
# =============================================================================

@pytest.fixture
def test_admin_data() -> dict:
    """Admin credentials used to seed and sign in."""
    return {
        "email": "admin@example.com",
        "password": "AdminPassword123!",
        "roles": ["admin"],
    }


@pytest.fixture
def test_user_data() -> dict:
    """Non-admin credentials."""
    return {
        "email": "viewer@example.com",
        "password": "ViewerPassword123!",
        "roles": ["user"],
    }


# =============================================================================
# Browsed Collection Fixtures
# =============================================================================

@pytest.fixture
def sample_documents() -> list[dict]:
    """
    Twelve order documents: eight active, four archived.

    createdAt increases by one day per document, starting 2024-01-01.
    """
    start = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    docs = []
    for i in range(12):
        docs.append({
            "_id": ObjectId(),
            "name": f"order-{i:02d}",
            "status": "active" if i % 3 else "archived",
            "total": 10 * i,
            "tags": ["a", "b"] if i % 2 else ["c"],
            "createdAt": start + timedelta(days=i),
        })
    return docs


@pytest_asyncio.fixture
async def orders_collection(mock_async_mongo_client, sample_documents):
    """The `shop.orders` collection seeded with sample_documents."""
    collection = mock_async_mongo_client["shop"]["orders"]
    await collection.insert_many([dict(doc) for doc in sample_documents])
    yield collection


@pytest_asyncio.fixture
async def document_store(mock_async_mongo_client, orders_collection):
    """A DocumentStore over the seeded collection, without transactions."""
    from app.services.document_store import DocumentStore

    yield DocumentStore(mock_async_mongo_client, "shop", "orders", use_transactions=False)


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    Create FastAPI app for testing.

    Note: This imports the actual app and should be used with mocked
    database connections.
    """
    from app.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Startup runs against an in-memory MongoDB. Use this for synchronous
    endpoint testing.
    """
    startup_client = AsyncMongoMockClient()

    async def get_mongo():
        return startup_client

    with patch("app.main.get_mongo_client", side_effect=get_mongo), \
         patch("app.main.close_connections", AsyncMock()):
        with TestClient(app) as c:
            yield c
