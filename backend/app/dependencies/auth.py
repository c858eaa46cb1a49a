"""
Authentication dependencies for route protection.
"""
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Query, status
from jose import JWTError

from app.core.security import decode_token
from app.core.token_store import is_token_revoked
from app.database.connections import get_mongo_client
from app.database.catalog import AUTH_DB
from app.models.user import User
from app.services.auth_service import AuthService


def _credentials_exception(message: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"code": "invalid-token", "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_auth_service() -> AuthService:
    """Dependency to get AuthService instance."""
    client = await get_mongo_client()
    return AuthService(client[AUTH_DB.name])


async def get_token_payload(
    token: Annotated[str, Query(description="JWT access token")]
) -> dict[str, Any]:
    """
    Dependency returning the decoded payload of a valid, unrevoked token.

    Token is passed as query parameter: ?token=xxx

    Raises:
        HTTPException 401: If token is invalid, expired or signed out
    """
    try:
        payload = decode_token(token)
    except JWTError:
        raise _credentials_exception()

    if payload.get("sub") is None:
        raise _credentials_exception()

    jti = payload.get("jti")
    if jti and await is_token_revoked(jti):
        raise _credentials_exception("Session has been signed out")

    return payload


async def get_current_user(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> User:
    """
    Dependency to get the current authenticated user from JWT token.

    Raises:
        HTTPException 401: If user not found
    """
    user = await auth_service.get_user_by_id(payload["sub"])
    if user is None:
        raise _credentials_exception()
    return user


async def get_current_active_user(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """
    Dependency to ensure the current user is active (not disabled).

    Raises:
        HTTPException 403: If user account is disabled
    """
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"code": "user-disabled", "message": "This admin account has been disabled"},
        )
    return current_user


# Type alias for cleaner route signatures
CurrentUser = Annotated[User, Depends(get_current_active_user)]
