"""
Core module - Security, rate limiting, value coercion and query building.
"""
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)
from app.core.coercion import ValueType, coerce_value, is_date_string
from app.core.errors import (
    AuthError,
    BatchValidationError,
    CoercionError,
    ConnectionNotFoundError,
    DocumentNotFoundError,
)

__all__ = [
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
    "ValueType",
    "coerce_value",
    "is_date_string",
    "AuthError",
    "BatchValidationError",
    "CoercionError",
    "ConnectionNotFoundError",
    "DocumentNotFoundError",
]
