"""
Connections router: open and close browsed databases.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies.connections import connection_manager
from app.schemas.connection import ConnectRequest, ConnectResponse
from app.services.connection_manager import ConnectionManager

router = APIRouter(prefix="/connections", tags=["Connections"])


@router.post(
    "",
    response_model=ConnectResponse,
    summary="Connect to a collection",
)
async def connect(
    body: ConnectRequest,
    manager: ConnectionManager = Depends(connection_manager),
):
    """
    Open a connection from a credentials blob and a collection name.

    A failed attempt is not an HTTP error: the response carries
    `success: false` and the reason, for display next to the form.
    """
    result = await manager.open(body.credentials, body.collection)
    if not result.success:
        return ConnectResponse(success=False, message=result.message)

    return ConnectResponse(
        success=True,
        message=result.message,
        connection_id=result.connection_id,
        database=result.store.database_name,
        collection=result.store.collection_name,
    )


@router.delete(
    "/{connection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Disconnect",
)
async def disconnect(
    connection_id: str,
    manager: ConnectionManager = Depends(connection_manager),
):
    """Close a connection and release its client."""
    if not manager.close(connection_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Connection {connection_id} not found",
        )
