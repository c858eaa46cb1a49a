"""
Documents router: load a collection and run ad-hoc queries.
"""
import logging
from contextlib import contextmanager
from typing import Any

from bson.errors import InvalidDocument
from fastapi import APIRouter, Depends, HTTPException, status
from pymongo.errors import PyMongoError

from app.core.errors import DocumentNotFoundError
from app.dependencies.connections import get_document_store
from app.schemas.document import DocumentListResponse
from app.schemas.query import QueryRequest
from app.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connections/{connection_id}", tags=["Documents"])


@contextmanager
def store_errors(action: str):
    """Translate service and driver errors into HTTP errors."""
    try:
        yield
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (ValueError, OverflowError, InvalidDocument) as e:
        # OverflowError and InvalidDocument: values BSON cannot encode
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PyMongoError as e:
        logger.error("%s failed: %s", action, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"{action} failed: {e}",
        )


def collect_fields(documents: list[dict[str, Any]]) -> list[str]:
    """Every field name across documents, in first-seen order."""
    seen: dict[str, None] = {}
    for doc in documents:
        for name in doc["fields"]:
            seen.setdefault(name, None)
    return list(seen)


def _list_response(store: DocumentStore, documents: list[dict[str, Any]]) -> DocumentListResponse:
    return DocumentListResponse(
        collection=store.collection_name,
        count=len(documents),
        fields=collect_fields(documents),
        documents=documents,
    )


@router.get(
    "/documents",
    response_model=DocumentListResponse,
    summary="Load every document",
)
async def list_documents(store: DocumentStore = Depends(get_document_store)):
    """Load the whole collection."""
    with store_errors("Loading documents"):
        documents = await store.fetch_all()
    return _list_response(store, documents)


@router.post(
    "/query",
    response_model=DocumentListResponse,
    summary="Run a query",
)
async def run_query(
    body: QueryRequest,
    store: DocumentStore = Depends(get_document_store),
):
    """
    Run filters, an optional ordering and an optional limit.

    - **filters**: list of `{field, operator, value, type}`, combined with AND
    - **order_by**: `{field, direction}` with direction `asc` or `desc`
    - **limit**: maximum number of documents, ignored unless positive
    """
    with store_errors("Query"):
        documents = await store.run_query(body)
    return _list_response(store, documents)
