"""
Document response schemas.
"""
from typing import Any

from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    """One document: its id and its fields as relaxed Extended JSON."""
    id: str = Field(..., description="Document identifier")
    fields: dict[str, Any] = Field(default_factory=dict, description="Field values")


class DocumentListResponse(BaseModel):
    """Documents returned by a load or a query."""
    collection: str = Field(..., description="Collection name")
    count: int = Field(..., description="Number of documents returned")
    fields: list[str] = Field(default_factory=list, description="Every field name seen, in first-seen order")
    documents: list[DocumentResponse] = Field(default_factory=list, description="Documents")
