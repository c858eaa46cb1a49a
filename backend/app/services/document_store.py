"""
Document store: the client object for one browsed collection.

A DocumentStore is built explicitly from operator credentials and handed to
whatever needs it. Construction never raises; failures come back as a
ConnectionResult with success=False so the UI can show the message inline.

Every mutating operation is one batch. Document ids are resolved before the
first write, so an unknown id fails the whole action and nothing is written;
with use_transactions on, the bulk write itself also runs in a transaction.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import certifi
from bson import ObjectId, json_util
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import DeleteOne, InsertOne, UpdateOne
from pymongo.errors import PyMongoError

from app.config import get_settings
from app.core.errors import BatchValidationError, DocumentNotFoundError
from app.core.query import build_query
from app.models.connection import ConnectionCredentials
from app.schemas.query import QueryRequest

logger = logging.getLogger(__name__)

ClientFactory = Callable[[ConnectionCredentials], AsyncIOMotorClient]

# Relaxed Extended JSON keeps dates and ObjectIds recognisable on the wire
WIRE_JSON_OPTIONS = json_util.RELAXED_JSON_OPTIONS
# Ids must round-trip exactly, including int vs float and key order
ID_JSON_OPTIONS = json_util.CANONICAL_JSON_OPTIONS


def create_motor_client(credentials: ConnectionCredentials) -> AsyncIOMotorClient:
    """Build a motor client for the given credentials."""
    settings = get_settings()
    options: dict[str, Any] = {
        "appname": credentials.app_name,
        "serverSelectionTimeoutMS": (
            credentials.server_selection_timeout_ms or settings.server_selection_timeout_ms
        ),
        "tz_aware": True,
    }
    if credentials.uses_tls:
        options["tlsCAFile"] = certifi.where()
    return AsyncIOMotorClient(credentials.uri, **options)


def document_id_to_str(document_id: Any) -> str:
    """
    Render a stored _id the way the API exposes it.

    ObjectIds travel as their 24-character hex string. Every other _id
    (strings, numbers, compound keys, UUIDs) travels as canonical Extended
    JSON, so "7" and 7 stay distinct and any id can be decoded back.
    """
    if isinstance(document_id, ObjectId):
        return str(document_id)
    return json_util.dumps(document_id, json_options=ID_JSON_OPTIONS)


def parse_document_id(document_id: str) -> Any:
    """
    Decode an API id back into the stored _id value.

    Raises:
        ValueError: If the text is neither an ObjectId nor Extended JSON
    """
    if ObjectId.is_valid(document_id):
        return ObjectId(document_id)
    return json_util.loads(document_id, json_options=ID_JSON_OPTIONS)


def serialize_document(doc: dict[str, Any]) -> dict[str, Any]:
    """Split a raw document into its id and JSON-safe fields."""
    fields = {key: value for key, value in doc.items() if key != "_id"}
    return {
        "id": document_id_to_str(doc.get("_id")),
        "fields": json.loads(json_util.dumps(fields, json_options=WIRE_JSON_OPTIONS)),
    }


@dataclass
class ConnectionResult:
    """Outcome of DocumentStore.connect()."""
    success: bool
    message: str
    store: Optional["DocumentStore"] = None
    connection_id: Optional[str] = None


@dataclass
class BatchOutcome:
    """Outcome of a successful batch."""
    operation: str
    affected: int
    message: str
    created_ids: Optional[list[str]] = None


def describe_update(affected: int, updated_fields: int, deleted_fields: int) -> str:
    """Human-readable summary of a batch update."""
    message = f"Successfully updated {affected} documents"
    if updated_fields and deleted_fields:
        return f"{message} ({updated_fields} fields updated, {deleted_fields} fields deleted)"
    if deleted_fields:
        return f"{message} ({deleted_fields} fields deleted)"
    if updated_fields:
        return f"{message} ({updated_fields} fields updated)"
    return message


class DocumentStore:
    """Reads and batched writes against one collection."""

    def __init__(
        self,
        client: AsyncIOMotorClient,
        database_name: str,
        collection_name: str,
        use_transactions: bool = True,
    ):
        self.client = client
        self.database_name = database_name
        self.collection_name = collection_name
        self.use_transactions = use_transactions

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.client[self.database_name][self.collection_name]

    @classmethod
    async def connect(
        cls,
        credentials: dict[str, Any] | ConnectionCredentials,
        collection_name: str,
        client_factory: ClientFactory = create_motor_client,
    ) -> ConnectionResult:
        """
        Validate credentials, open a client and ping the server.

        Args:
            credentials: Parsed credentials JSON blob
            collection_name: Collection to browse
            client_factory: Builds the driver client (overridable for tests)

        Returns:
            ConnectionResult, with the store attached on success
        """
        collection_name = (collection_name or "").strip()
        if not collection_name:
            return ConnectionResult(False, "Collection name is required")

        try:
            creds = ConnectionCredentials.model_validate(credentials)
        except ValidationError as e:
            error = e.errors()[0]
            location = ".".join(str(part) for part in error["loc"]) or "credentials"
            return ConnectionResult(False, f"Invalid credentials: {location}: {error['msg']}")

        client = None
        try:
            client = client_factory(creds)
            if creds.database:
                database_name = creds.database
            else:
                database_name = client.get_default_database().name
            await client.admin.command("ping")
        except (PyMongoError, ValueError, TypeError) as e:
            logger.warning("Connection to %s failed: %s", creds.redacted_uri(), e)
            if client is not None:
                client.close()
            return ConnectionResult(False, f"Connection failed: {e}")

        logger.info(
            "Connected to %s (database=%s, collection=%s)",
            creds.redacted_uri(), database_name, collection_name,
        )
        store = cls(client, database_name, collection_name, creds.use_transactions)
        return ConnectionResult(
            True,
            f'Connected to "{database_name}.{collection_name}"',
            store=store,
        )

    def close(self) -> None:
        """Close the underlying client."""
        self.client.close()

    # ==================== Reads ====================

    async def fetch_all(self) -> list[dict[str, Any]]:
        """Every document in the collection, serialized."""
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [serialize_document(doc) for doc in docs]

    async def run_query(self, request: QueryRequest) -> list[dict[str, Any]]:
        """
        Run a filter/sort/limit query.

        Raises:
            CoercionError: If a filter value cannot be coerced
        """
        query = build_query(request)
        logger.debug(
            "Query on %s: filter=%s sort=%s limit=%s",
            self.collection_name, query.filter, query.sort, query.limit,
        )
        cursor = self.collection.find(query.filter, sort=query.sort, limit=query.limit)
        docs = await cursor.to_list(length=None)
        return [serialize_document(doc) for doc in docs]

    async def resolve_ids(self, document_ids: list[str]) -> list[Any]:
        """
        Map API ids to stored _id values, preserving order.

        Raises:
            BatchValidationError: If no ids are given
            DocumentNotFoundError: If any id does not exist
        """
        unique_ids = list(dict.fromkeys(document_ids))
        if not unique_ids:
            raise BatchValidationError("Select at least one document")

        # Requested id -> canonical form of the decoded value
        requested: dict[str, str] = {}
        values = []
        for doc_id in unique_ids:
            try:
                value = parse_document_id(doc_id)
            except (ValueError, TypeError):
                continue
            requested[doc_id] = document_id_to_str(value)
            values.append(value)

        found: dict[str, Any] = {}
        if values:
            cursor = self.collection.find({"_id": {"$in": values}}, {"_id": 1})
            found = {
                document_id_to_str(doc["_id"]): doc["_id"]
                for doc in await cursor.to_list(length=None)
            }

        missing = [doc_id for doc_id in unique_ids if requested.get(doc_id) not in found]
        if missing:
            raise DocumentNotFoundError(missing)
        # Two spellings of the same id target the document once
        keys = dict.fromkeys(requested[doc_id] for doc_id in unique_ids)
        return [found[key] for key in keys]

    # ==================== Batched writes ====================

    async def _write(self, operations: list) -> None:
        if self.use_transactions:
            async with await self.client.start_session() as session:
                async with session.start_transaction():
                    await self.collection.bulk_write(operations, ordered=True, session=session)
        else:
            await self.collection.bulk_write(operations, ordered=True)

    async def batch_update(
        self,
        document_ids: list[str],
        updates: dict[str, Any],
        delete_fields: list[str],
    ) -> BatchOutcome:
        """
        Set coerced field values and remove fields on every listed document.

        Args:
            document_ids: Target document ids
            updates: Field name -> already coerced value
            delete_fields: Field names to remove

        Raises:
            BatchValidationError: Nothing to change, or a field is both set and removed
            DocumentNotFoundError: If any id does not exist
        """
        delete_fields = list(dict.fromkeys(f for f in delete_fields if f.strip()))
        if not updates and not delete_fields:
            raise BatchValidationError("No valid update or delete fields provided")
        if "_id" in updates or "_id" in delete_fields:
            raise BatchValidationError("The document identifier cannot be modified")
        conflicts = sorted(set(updates) & set(delete_fields))
        if conflicts:
            raise BatchValidationError(
                f"Fields cannot be both updated and deleted: {', '.join(conflicts)}"
            )

        targets = await self.resolve_ids(document_ids)

        change: dict[str, Any] = {}
        if updates:
            change["$set"] = updates
        if delete_fields:
            change["$unset"] = {name: "" for name in delete_fields}

        await self._write([UpdateOne({"_id": target}, change) for target in targets])
        logger.info(
            "Updated %d documents in %s (%d set, %d unset)",
            len(targets), self.collection_name, len(updates), len(delete_fields),
        )
        return BatchOutcome(
            operation="update",
            affected=len(targets),
            message=describe_update(len(targets), len(updates), len(delete_fields)),
        )

    async def duplicate(self, document_ids: list[str]) -> BatchOutcome:
        """Copy every field except _id of each listed document into a new document."""
        targets = await self.resolve_ids(document_ids)
        cursor = self.collection.find({"_id": {"$in": targets}})
        by_id = {document_id_to_str(doc["_id"]): doc for doc in await cursor.to_list(length=None)}

        # Deleted by another client since resolve_ids
        gone = [document_id_to_str(t) for t in targets if document_id_to_str(t) not in by_id]
        if gone:
            raise DocumentNotFoundError(gone)

        operations = []
        created_ids = []
        for target in targets:
            copy = {key: value for key, value in by_id[document_id_to_str(target)].items() if key != "_id"}
            copy["_id"] = ObjectId()
            created_ids.append(str(copy["_id"]))
            operations.append(InsertOne(copy))

        await self._write(operations)
        logger.info("Duplicated %d documents in %s", len(targets), self.collection_name)
        return BatchOutcome(
            operation="duplicate",
            affected=len(targets),
            message=f"Successfully duplicated {len(targets)} documents",
            created_ids=created_ids,
        )

    async def delete(self, document_ids: list[str]) -> BatchOutcome:
        """Delete every listed document."""
        targets = await self.resolve_ids(document_ids)
        await self._write([DeleteOne({"_id": target}) for target in targets])
        logger.info("Deleted %d documents from %s", len(targets), self.collection_name)
        return BatchOutcome(
            operation="delete",
            affected=len(targets),
            message=f"Successfully deleted {len(targets)} documents",
        )
