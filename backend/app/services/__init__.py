"""
Service layer for business logic.
"""
from app.services.auth_service import AuthService
from app.services.connection_manager import ConnectionManager, get_connection_manager
from app.services.document_store import DocumentStore

__all__ = [
    "AuthService",
    "ConnectionManager",
    "DocumentStore",
    "get_connection_manager",
]
