"""
Connection request/response schemas.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field


class ConnectRequest(BaseModel):
    """Credentials blob and collection name from the connection form."""
    credentials: dict[str, Any] = Field(
        ...,
        description='Connection JSON, e.g. {"uri": "mongodb+srv://...", "database": "shop"}',
    )
    collection: str = Field(..., description="Collection to browse")


class ConnectResponse(BaseModel):
    """Result of a connection attempt."""
    success: bool = Field(..., description="Whether the connection is usable")
    message: str = Field(..., description="Human-readable status")
    connection_id: Optional[str] = Field(None, description="Id for subsequent calls")
    database: Optional[str] = Field(None, description="Connected database")
    collection: Optional[str] = Field(None, description="Browsed collection")
