"""
Registry of open document stores, keyed by an opaque connection id.
"""
import logging
import uuid
from typing import Any, Optional

from app.config import get_settings
from app.core.errors import ConnectionNotFoundError
from app.services.document_store import (
    ClientFactory,
    ConnectionResult,
    DocumentStore,
    create_motor_client,
)

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Owns every DocumentStore opened through the API."""

    def __init__(self, max_connections: int, client_factory: ClientFactory = create_motor_client):
        self.max_connections = max_connections
        self.client_factory = client_factory
        self._stores: dict[str, DocumentStore] = {}

    def __len__(self) -> int:
        return len(self._stores)

    async def open(
        self,
        credentials: dict[str, Any],
        collection_name: str,
    ) -> ConnectionResult:
        """
        Connect and register a new store.

        When the limit is reached the oldest connection is closed first.
        """
        result = await DocumentStore.connect(credentials, collection_name, self.client_factory)
        if not result.success:
            return result

        result.connection_id = self.add(result.store)
        return result

    def add(self, store: DocumentStore) -> str:
        """Register an open store and return its new connection id."""
        while len(self._stores) >= self.max_connections:
            oldest_id = next(iter(self._stores))
            logger.info("Connection limit reached, closing %s", oldest_id)
            self.close(oldest_id)

        connection_id = uuid.uuid4().hex
        self._stores[connection_id] = store
        return connection_id

    def get(self, connection_id: str) -> DocumentStore:
        """
        Look up an open store.

        Raises:
            ConnectionNotFoundError: If the id is unknown or was closed
        """
        store = self._stores.get(connection_id)
        if store is None:
            raise ConnectionNotFoundError(f"Connection {connection_id} not found")
        return store

    def close(self, connection_id: str) -> bool:
        """Close and forget a store. Returns False if it was not open."""
        store = self._stores.pop(connection_id, None)
        if store is None:
            return False
        store.close()
        logger.info("Closed connection %s", connection_id)
        return True

    def close_all(self) -> None:
        for connection_id in list(self._stores):
            self.close(connection_id)


# Singleton instance for shared use
_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Get shared ConnectionManager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager(get_settings().max_open_connections)
    return _connection_manager


def reset_connection_manager() -> None:
    """Close every store and drop the shared instance."""
    global _connection_manager
    if _connection_manager is not None:
        _connection_manager.close_all()
        _connection_manager = None
