"""
Authentication request/response schemas.
"""
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.user import UserRole, UserStatus


class LoginRequest(BaseModel):
    """Login request body. Email format is checked by the service so it can report a code."""
    email: str = Field(..., description="Admin email address")
    password: str = Field(..., min_length=1, description="Admin password")


class LoginResponse(BaseModel):
    """Login response with JWT token."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user_id: str = Field(..., description="Authenticated user ID")
    email: str = Field(..., description="Authenticated user email")
    roles: list[str] = Field(..., description="User roles")


class LogoutResponse(BaseModel):
    """Logout acknowledgement."""
    message: str = Field(default="Signed out", description="Status message")


class TokenRefreshResponse(BaseModel):
    """Token refresh response."""
    access_token: str = Field(..., description="New JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration time in seconds")


class AuthErrorDetail(BaseModel):
    """Error body for authentication failures."""
    code: str = Field(..., description="Machine-readable error code, e.g. wrong-password")
    message: str = Field(..., description="Human-readable message")


class UserInfoResponse(BaseModel):
    """Current user information response."""
    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User email")
    roles: list[UserRole] = Field(..., description="User roles")
    status: UserStatus = Field(..., description="Account status")
    is_admin: bool = Field(..., description="Whether mutating operations are allowed")
    created_at: datetime = Field(..., description="Account creation timestamp")
