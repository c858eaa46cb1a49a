"""
Authentication router for admin sign-in, sign-out and session checks.
"""
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.core.errors import AuthError
from app.core.rate_limit import check_rate_limit
from app.dependencies.auth import CurrentUser, get_auth_service, get_token_payload
from app.schemas.auth import (
    AuthErrorDetail,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    TokenRefreshResponse,
    UserInfoResponse,
)
from app.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])

# HTTP status for each auth error code, 401 otherwise
_ERROR_STATUS = {
    "invalid-email": status.HTTP_400_BAD_REQUEST,
    "user-disabled": status.HTTP_403_FORBIDDEN,
    "too-many-requests": status.HTTP_429_TOO_MANY_REQUESTS,
}


def auth_http_error(error: AuthError) -> HTTPException:
    """Map an AuthError to an HTTPException carrying {code, message}."""
    code = _ERROR_STATUS.get(error.code, status.HTTP_401_UNAUTHORIZED)
    return HTTPException(
        status_code=code,
        detail=AuthErrorDetail(code=error.code, message=error.message).model_dump(),
        headers={"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None,
    )


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Sign in and get access token",
)
async def login(
    request: Request,
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password to receive a JWT token.

    The token should be passed as a query parameter `token` to protected endpoints.

    Failures return `{"detail": {"code": ..., "message": ...}}` where code is one of
    `invalid-email`, `user-not-found`, `wrong-password`, `user-disabled`,
    `too-many-requests`.
    """
    client_ip = get_client_ip(request)
    if not await check_rate_limit(client_ip, "/auth/login"):
        raise auth_http_error(
            AuthError("too-many-requests", "Too many failed attempts. Try again later")
        )

    try:
        return await auth_service.login(body)
    except AuthError as e:
        raise auth_http_error(e)


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Sign out",
)
async def logout(
    payload: Annotated[dict[str, Any], Depends(get_token_payload)],
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Revoke the current token.

    Requires valid token as query parameter: `?token=xxx`
    """
    if not await auth_service.logout(payload):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Sign out failed: session store unavailable",
        )
    return LogoutResponse(message="Signed out")


@router.post(
    "/refresh",
    response_model=TokenRefreshResponse,
    summary="Refresh access token",
)
async def refresh_token(
    current_user: CurrentUser,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Refresh the JWT token for an authenticated user.

    Requires valid token as query parameter: `?token=xxx`
    """
    try:
        result = await auth_service.refresh_token(current_user.id)
    except AuthError as e:
        raise auth_http_error(e)

    return TokenRefreshResponse(
        access_token=result.access_token,
        token_type=result.token_type,
        expires_in=result.expires_in,
    )


@router.get(
    "/me",
    response_model=UserInfoResponse,
    summary="Get current user info",
)
async def get_current_user_info(
    current_user: CurrentUser,
):
    """
    Get information about the currently authenticated user.

    Requires valid token as query parameter: `?token=xxx`
    """
    return {
        "id": current_user.id,
        "email": current_user.email,
        "roles": current_user.roles,
        "status": current_user.status,
        "is_admin": current_user.is_admin,
        "created_at": current_user.created_at,
    }
