"""
Query request/response schemas.
"""
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from app.core.coercion import ValueType


class FilterOperator(str, Enum):
    """Comparison operators available in the query console."""
    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"
    IN = "in"
    NOT_IN = "not-in"


class QueryFilter(BaseModel):
    """One (field, operator, value, declared type) filter."""
    field: str = Field(default="", description="Field name, empty filters are ignored")
    operator: FilterOperator = Field(default=FilterOperator.EQUAL, description="Comparison operator")
    value: Any = Field(default="", description="Value as typed by the operator")
    type: ValueType = Field(default=ValueType.STRING, description="Declared value type")


class QueryOrder(BaseModel):
    """Single-field ordering."""
    field: str = Field(..., description="Field to sort by")
    direction: Literal["asc", "desc"] = Field(default="asc", description="Sort direction")


class QueryRequest(BaseModel):
    """Ad-hoc query descriptor."""
    filters: list[QueryFilter] = Field(default_factory=list, description="Filters combined with AND")
    order_by: Optional[QueryOrder] = Field(None, description="Optional ordering")
    limit: Optional[int] = Field(None, description="Maximum number of results, ignored unless positive")
