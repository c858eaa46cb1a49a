"""
Pydantic models for database documents and data structures.
"""
from app.models.user import User, UserRole, UserStatus
from app.models.connection import ConnectionCredentials

__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "ConnectionCredentials",
]
