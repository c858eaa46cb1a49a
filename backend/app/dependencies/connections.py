"""
Dependencies resolving the document store for a connection id.
"""
from fastapi import Depends, HTTPException, status

from app.core.errors import ConnectionNotFoundError
from app.services.connection_manager import ConnectionManager, get_connection_manager
from app.services.document_store import DocumentStore


def connection_manager() -> ConnectionManager:
    """Dependency returning the shared ConnectionManager."""
    return get_connection_manager()


def get_document_store(
    connection_id: str,
    manager: ConnectionManager = Depends(connection_manager),
) -> DocumentStore:
    """
    Resolve the path's connection id to an open store.

    Raises:
        HTTPException 404: If the connection is unknown or was closed
    """
    try:
        return manager.get(connection_id)
    except ConnectionNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
