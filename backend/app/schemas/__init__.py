"""
Request and response schemas for API endpoints.
"""
from app.schemas.auth import (
    AuthErrorDetail,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    TokenRefreshResponse,
    UserInfoResponse,
)
from app.schemas.batch import BatchResponse, BatchUpdateRequest, DocumentSelection, FieldEdit
from app.schemas.connection import ConnectRequest, ConnectResponse
from app.schemas.document import DocumentListResponse, DocumentResponse
from app.schemas.query import FilterOperator, QueryFilter, QueryOrder, QueryRequest

__all__ = [
    # Auth
    "AuthErrorDetail",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "TokenRefreshResponse",
    "UserInfoResponse",
    # Batch
    "BatchResponse",
    "BatchUpdateRequest",
    "DocumentSelection",
    "FieldEdit",
    # Connection
    "ConnectRequest",
    "ConnectResponse",
    # Documents
    "DocumentListResponse",
    "DocumentResponse",
    # Query
    "FilterOperator",
    "QueryFilter",
    "QueryOrder",
    "QueryRequest",
]
