"""
Tests for the connection, document and batch routers.

Connections are served from an in-memory ConnectionManager and batch
routes are checked with a real admin token.
"""

import pytest
from bson import ObjectId
from unittest.mock import AsyncMock, patch

from bson.errors import InvalidDocument
from pymongo.errors import OperationFailure


class TestConnectionsRouter:
    """Tests for /connections."""

    @pytest.mark.asyncio
    async def test_connect_and_disconnect(self, api_client, connection_manager):
        response = await api_client.post("/connections", json={
            "credentials": {"uri": "mongodb://localhost:27017", "database": "shop"},
            "collection": "orders",
        })
        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        assert data["database"] == "shop"
        assert len(connection_manager) == 1

        response = await api_client.delete(f"/connections/{data['connection_id']}")
        assert response.status_code == 204
        assert len(connection_manager) == 0

    @pytest.mark.asyncio
    async def test_failed_connect_is_not_an_http_error(self, api_client, connection_manager):
        response = await api_client.post("/connections", json={
            "credentials": {"apiKey": "firebase-style"},
            "collection": "orders",
        })
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["connection_id"] is None
        assert len(connection_manager) == 0

    @pytest.mark.asyncio
    async def test_disconnect_unknown(self, api_client):
        response = await api_client.delete("/connections/nope")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_oldest_connection_evicted_at_limit(self, api_client, connection_manager, fake_client_factory):
        ids = []
        for _ in range(connection_manager.max_connections + 1):
            response = await api_client.post("/connections", json={
                "credentials": {"uri": "mongodb://localhost:27017", "database": "shop"},
                "collection": "orders",
            })
            ids.append(response.json()["connection_id"])

        assert len(connection_manager) == connection_manager.max_connections
        fake_client_factory.clients[0].close.assert_called_once()
        response = await api_client.get(f"/connections/{ids[0]}/documents")
        assert response.status_code == 404


class TestDocumentsRouter:
    """Tests for loading and querying."""

    @pytest.mark.asyncio
    async def test_list_documents(self, api_client, connection_id, sample_documents):
        response = await api_client.get(f"/connections/{connection_id}/documents")
        data = response.json()

        assert response.status_code == 200
        assert data["collection"] == "orders"
        assert data["count"] == len(sample_documents)
        assert data["fields"] == ["name", "status", "total", "tags", "createdAt"]
        assert "$date" in data["documents"][0]["fields"]["createdAt"]

    @pytest.mark.asyncio
    async def test_query(self, api_client, connection_id):
        response = await api_client.post(f"/connections/{connection_id}/query", json={
            "filters": [{"field": "status", "operator": "==", "value": "active", "type": "string"}],
            "order_by": {"field": "createdAt", "direction": "desc"},
            "limit": 10,
        })
        data = response.json()

        assert response.status_code == 200
        assert 0 < data["count"] <= 10
        assert {doc["fields"]["status"] for doc in data["documents"]} == {"active"}

    @pytest.mark.asyncio
    async def test_query_with_bad_object_is_400(self, api_client, connection_id):
        response = await api_client.post(f"/connections/{connection_id}/query", json={
            "filters": [{"field": "meta", "operator": "==", "value": "{bad", "type": "object"}],
        })
        assert response.status_code == 400
        assert "Invalid JSON object" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_query_with_unknown_operator_is_422(self, api_client, connection_id):
        response = await api_client.post(f"/connections/{connection_id}/query", json={
            "filters": [{"field": "a", "operator": "~=", "value": "x"}],
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_database_error_is_502(self, api_client, connection_id, document_store):
        with patch.object(document_store, "fetch_all", AsyncMock(side_effect=OperationFailure("boom"))):
            response = await api_client.get(f"/connections/{connection_id}/documents")
        assert response.status_code == 502

    @pytest.mark.asyncio
    async def test_query_with_integer_beyond_int64(self, api_client, connection_id):
        response = await api_client.post(f"/connections/{connection_id}/query", json={
            "filters": [{"field": "total", "operator": "in", "value": "[123456789012345678901234]", "type": "array"}],
        })
        assert response.status_code == 200
        assert response.json()["count"] == 0

    @pytest.mark.asyncio
    async def test_unencodable_query_value_is_400(self, api_client, connection_id, document_store):
        error = OverflowError("MongoDB can only handle up to 8-byte ints")
        with patch.object(document_store, "run_query", AsyncMock(side_effect=error)):
            response = await api_client.post(f"/connections/{connection_id}/query", json={"filters": []})
        assert response.status_code == 400
        assert "8-byte ints" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_unknown_connection(self, api_client):
        response = await api_client.get("/connections/unknown/documents")
        assert response.status_code == 404


class TestBatchRouter:
    """Tests for /connections/{id}/batch/*."""

    @pytest.mark.asyncio
    async def test_requires_token(self, api_client, connection_id, sample_documents):
        response = await api_client.post(f"/connections/{connection_id}/batch/delete", json={
            "document_ids": [str(sample_documents[0]["_id"])],
        })
        assert response.status_code == 422  # token query parameter is required

    @pytest.mark.asyncio
    async def test_requires_admin_role(self, api_client, auth_service, seeded_viewer, connection_id,
                                       sample_documents):
        from app.schemas.auth import LoginRequest

        login = await auth_service.login(LoginRequest(
            email=seeded_viewer["email"], password=seeded_viewer["password"],
        ))
        response = await api_client.post(
            f"/connections/{connection_id}/batch/delete",
            params={"token": login.access_token},
            json={"document_ids": [str(sample_documents[0]["_id"])]},
        )
        assert response.status_code == 403
        assert response.json()["detail"]["code"] == "insufficient-permission"

    @pytest.mark.asyncio
    async def test_update(self, api_client, admin_token, connection_id, orders_collection, sample_documents):
        ids = [str(d["_id"]) for d in sample_documents[:2]]
        response = await api_client.post(
            f"/connections/{connection_id}/batch/update",
            params={"token": admin_token},
            json={
                "document_ids": ids,
                "updates": [
                    {"field": "total", "value": "99.5", "type": "number"},
                    {"field": "labels", "value": "x, y", "type": "array"},
                    {"field": "", "value": "ignored", "type": "string"},
                ],
                "delete_fields": ["tags"],
            },
        )
        data = response.json()

        assert response.status_code == 200
        assert data["affected"] == 2
        assert data["message"] == "Successfully updated 2 documents (2 fields updated, 1 fields deleted)"
        stored = await orders_collection.find_one({"_id": ObjectId(ids[0])})
        assert stored["total"] == 99.5
        assert stored["labels"] == ["x", "y"]
        assert "tags" not in stored

    @pytest.mark.asyncio
    async def test_update_unknown_document_is_404(self, api_client, admin_token, connection_id):
        response = await api_client.post(
            f"/connections/{connection_id}/batch/update",
            params={"token": admin_token},
            json={"document_ids": [str(ObjectId())], "updates": [{"field": "a", "value": "1"}]},
        )
        assert response.status_code == 404
        assert "Documents not found" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_update_without_changes_is_400(self, api_client, admin_token, connection_id, sample_documents):
        response = await api_client.post(
            f"/connections/{connection_id}/batch/update",
            params={"token": admin_token},
            json={"document_ids": [str(sample_documents[0]["_id"])]},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate(self, api_client, admin_token, connection_id, orders_collection, sample_documents):
        response = await api_client.post(
            f"/connections/{connection_id}/batch/duplicate",
            params={"token": admin_token},
            json={"document_ids": [str(d["_id"]) for d in sample_documents[:3]]},
        )
        data = response.json()

        assert response.status_code == 200
        assert data["operation"] == "duplicate"
        assert len(data["created_ids"]) == 3
        assert await orders_collection.count_documents({}) == len(sample_documents) + 3

    @pytest.mark.asyncio
    async def test_delete(self, api_client, admin_token, connection_id, orders_collection, sample_documents):
        response = await api_client.post(
            f"/connections/{connection_id}/batch/delete",
            params={"token": admin_token},
            json={"document_ids": [str(sample_documents[0]["_id"])]},
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Successfully deleted 1 documents"
        assert await orders_collection.count_documents({}) == len(sample_documents) - 1

    @pytest.mark.asyncio
    async def test_update_with_integer_beyond_int64(
        self, api_client, admin_token, connection_id, orders_collection, sample_documents,
    ):
        doc_id = str(sample_documents[0]["_id"])
        response = await api_client.post(
            f"/connections/{connection_id}/batch/update",
            params={"token": admin_token},
            json={
                "document_ids": [doc_id],
                "updates": [{"field": "meta", "value": '{"big": 123456789012345678901234}', "type": "object"}],
            },
        )
        assert response.status_code == 200
        stored = await orders_collection.find_one({"_id": ObjectId(doc_id)})
        assert stored["meta"] == {"big": 1.2345678901234568e23}
        assert isinstance(stored["meta"]["big"], float)

    @pytest.mark.asyncio
    async def test_unencodable_update_is_400(self, api_client, admin_token, connection_id, document_store,
                                            sample_documents):
        error = InvalidDocument("cannot encode object")
        with patch.object(document_store, "batch_update", AsyncMock(side_effect=error)):
            response = await api_client.post(
                f"/connections/{connection_id}/batch/update",
                params={"token": admin_token},
                json={
                    "document_ids": [str(sample_documents[0]["_id"])],
                    "updates": [{"field": "a", "value": "1"}],
                },
            )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_document_with_compound_id(self, api_client, admin_token, connection_id, orders_collection):
        await orders_collection.insert_one({"_id": {"region": "eu", "year": 2024}, "total": 5})
        listed = await api_client.get(f"/connections/{connection_id}/documents")
        compound = next(d["id"] for d in listed.json()["documents"] if d["fields"].get("total") == 5)
        assert compound == '{"region": "eu", "year": {"$numberInt": "2024"}}'

        response = await api_client.post(
            f"/connections/{connection_id}/batch/delete",
            params={"token": admin_token},
            json={"document_ids": [compound]},
        )
        assert response.status_code == 200
        assert await orders_collection.find_one({"_id": {"region": "eu", "year": 2024}}) is None
