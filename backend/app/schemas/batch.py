"""
Batch operation request/response schemas.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.core.coercion import ValueType


class FieldEdit(BaseModel):
    """(field, literal text value, declared type) to set on every selected document."""
    field: str = Field(default="", description="Field name, empty edits are ignored")
    value: Any = Field(default="", description="Value as typed by the operator")
    type: ValueType = Field(default=ValueType.STRING, description="Declared value type")


class DocumentSelection(BaseModel):
    """Documents targeted by a batch."""
    document_ids: list[str] = Field(..., description="Selected document ids")


class BatchUpdateRequest(DocumentSelection):
    """Batch update: set fields and/or delete fields."""
    updates: list[FieldEdit] = Field(default_factory=list, description="Fields to set")
    delete_fields: list[str] = Field(default_factory=list, description="Fields to remove")


class BatchResponse(BaseModel):
    """Outcome of a batch."""
    success: bool = Field(default=True, description="Always true, failures are HTTP errors")
    operation: str = Field(..., description="update, duplicate or delete")
    affected: int = Field(..., description="Number of documents written")
    message: str = Field(..., description="Human-readable summary")
    created_ids: Optional[list[str]] = Field(None, description="Ids of duplicated documents")
