"""
Translation of console query descriptors into MongoDB find() arguments.
"""
from dataclasses import dataclass, field
from typing import Any, Optional

from pymongo import ASCENDING, DESCENDING

from app.core.coercion import coerce_value
from app.schemas.query import FilterOperator, QueryFilter, QueryRequest

# Operators whose right-hand side is a list of candidates
LIST_OPERATORS = {
    FilterOperator.ARRAY_CONTAINS_ANY,
    FilterOperator.IN,
    FilterOperator.NOT_IN,
}

_COMPARISONS = {
    FilterOperator.EQUAL: "$eq",
    FilterOperator.NOT_EQUAL: "$ne",
    FilterOperator.LESS_THAN: "$lt",
    FilterOperator.LESS_THAN_OR_EQUAL: "$lte",
    FilterOperator.GREATER_THAN: "$gt",
    FilterOperator.GREATER_THAN_OR_EQUAL: "$gte",
    FilterOperator.IN: "$in",
    FilterOperator.NOT_IN: "$nin",
}


@dataclass
class MongoQuery:
    """Arguments for Collection.find()."""
    filter: dict[str, Any] = field(default_factory=dict)
    sort: Optional[list[tuple[str, int]]] = None
    limit: int = 0  # 0 means no limit, as in pymongo


def build_condition(operator: FilterOperator, value: Any) -> dict[str, Any]:
    """
    Build the operator document for one field.

    Args:
        operator: Console operator
        value: Already coerced value

    Returns:
        MongoDB operator expression, e.g. {"$gte": 5}
    """
    operator = FilterOperator(operator)

    if operator in LIST_OPERATORS and not isinstance(value, list):
        value = [value]

    if operator == FilterOperator.ARRAY_CONTAINS:
        return {"$elemMatch": {"$eq": value}}
    if operator == FilterOperator.ARRAY_CONTAINS_ANY:
        return {"$elemMatch": {"$in": value}}
    return {_COMPARISONS[operator]: value}


def build_filter(filters: list[QueryFilter]) -> dict[str, Any]:
    """Coerce filter values and combine the usable filters with AND."""
    clauses = []
    for query_filter in filters:
        if not query_filter.field:
            continue
        value = coerce_value(query_filter.value, query_filter.type)
        if value == "":
            continue
        clauses.append({query_filter.field: build_condition(query_filter.operator, value)})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def build_query(request: QueryRequest) -> MongoQuery:
    """
    Convert a query descriptor into find() arguments.

    Raises:
        CoercionError: If a filter value cannot be coerced
    """
    query = MongoQuery(filter=build_filter(request.filters))

    if request.order_by and request.order_by.field:
        direction = DESCENDING if request.order_by.direction == "desc" else ASCENDING
        query.sort = [(request.order_by.field, direction)]

    if request.limit and request.limit > 0:
        query.limit = request.limit

    return query
