"""
Batch router: bulk update, duplicate and delete. Admin only.
"""
from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.coercion import coerce_value
from app.dependencies.connections import get_document_store
from app.dependencies.roles import require_admin
from app.models.user import User
from app.routers.documents import store_errors
from app.schemas.batch import BatchResponse, BatchUpdateRequest, DocumentSelection
from app.services.document_store import BatchOutcome, DocumentStore

router = APIRouter(prefix="/connections/{connection_id}/batch", tags=["Batch"])

AdminUser = Annotated[User, Depends(require_admin())]


def _response(outcome: BatchOutcome) -> BatchResponse:
    return BatchResponse(
        operation=outcome.operation,
        affected=outcome.affected,
        message=outcome.message,
        created_ids=outcome.created_ids,
    )


@router.post(
    "/update",
    response_model=BatchResponse,
    summary="Update fields on selected documents",
)
async def batch_update(
    body: BatchUpdateRequest,
    admin: AdminUser,
    store: DocumentStore = Depends(get_document_store),
):
    """
    Set and/or delete fields on every selected document in one batch.

    Values are coerced from text using each edit's declared type.

    Requires an admin token as query parameter: `?token=xxx`
    """
    with store_errors("Update"):
        updates = {
            edit.field: coerce_value(edit.value, edit.type)
            for edit in body.updates
            if edit.field
        }
        outcome = await store.batch_update(body.document_ids, updates, body.delete_fields)
    return _response(outcome)


@router.post(
    "/duplicate",
    response_model=BatchResponse,
    summary="Duplicate selected documents",
)
async def batch_duplicate(
    body: DocumentSelection,
    admin: AdminUser,
    store: DocumentStore = Depends(get_document_store),
):
    """
    Copy every selected document, minus its id, into a new document.

    Requires an admin token as query parameter: `?token=xxx`
    """
    with store_errors("Duplication"):
        outcome = await store.duplicate(body.document_ids)
    return _response(outcome)


@router.post(
    "/delete",
    response_model=BatchResponse,
    summary="Delete selected documents",
)
async def batch_delete(
    body: DocumentSelection,
    admin: AdminUser,
    store: DocumentStore = Depends(get_document_store),
):
    """
    Delete every selected document in one batch.

    **Warning**: This action cannot be undone.

    Requires an admin token as query parameter: `?token=xxx`
    """
    with store_errors("Deletion"):
        outcome = await store.delete(body.document_ids)
    return _response(outcome)
