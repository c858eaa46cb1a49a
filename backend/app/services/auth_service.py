"""
Authentication service for admin sign-in, sign-out and bootstrap.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from email_validator import EmailNotValidError, validate_email
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.core.errors import AuthError
from app.core.security import (
    create_access_token,
    hash_password,
    seconds_until_expiry,
    verify_password,
)
from app.core.rate_limit import (
    check_user_lockout,
    increment_failed_login,
    reset_failed_attempts,
    set_user_lockout,
)
from app.core.token_store import revoke_token
from app.config import get_settings
from app.database.catalog import USERS_COLLECTION
from app.models.user import User, UserRole, UserStatus
from app.schemas.auth import LoginRequest, LoginResponse

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication operations."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with auth database."""
        self.db = db
        self.users_collection = db[USERS_COLLECTION]
        self.settings = get_settings()

    def _token_response(self, user_id: str, email: str, roles: list[str]) -> LoginResponse:
        return LoginResponse(
            access_token=create_access_token(user_id=user_id, roles=roles),
            token_type="bearer",
            expires_in=self.settings.jwt_access_token_expire_minutes * 60,
            user_id=user_id,
            email=email,
            roles=roles,
        )

    async def login(self, request: LoginRequest) -> LoginResponse:
        """
        Authenticate user and return JWT token.

        Args:
            request: Login request with email and password

        Returns:
            LoginResponse with JWT token

        Raises:
            AuthError: invalid-email, user-not-found, too-many-requests,
                user-disabled or wrong-password
        """
        try:
            validate_email(request.email, check_deliverability=False)
        except EmailNotValidError:
            raise AuthError("invalid-email", "Invalid email address")

        user_doc = await self.users_collection.find_one({"email": request.email.strip().lower()})
        if not user_doc:
            raise AuthError("user-not-found", "No admin account found with this email")

        user_id = str(user_doc["_id"])

        if await check_user_lockout(user_id):
            raise AuthError("too-many-requests", "Too many failed attempts. Try again later")

        if user_doc.get("status") == UserStatus.DISABLED.value:
            raise AuthError("user-disabled", "This admin account has been disabled")

        if not verify_password(request.password, user_doc["hashed_password"]):
            failed_count = await increment_failed_login(user_id)
            if failed_count >= self.settings.user_lockout_threshold:
                await set_user_lockout(user_id, self.settings.user_lockout_duration_minutes)
            logger.info("Failed sign-in for %s (%d attempts)", user_doc["email"], failed_count)
            raise AuthError("wrong-password", "Incorrect password")

        await reset_failed_attempts(user_id)
        await self.users_collection.update_one(
            {"_id": user_doc["_id"]},
            {"$set": {"last_login_at": datetime.now(timezone.utc)}},
        )
        logger.info("Signed in %s", user_doc["email"])

        roles = user_doc.get("roles", [UserRole.USER.value])
        return self._token_response(user_id, user_doc["email"], roles)

    async def logout(self, payload: dict[str, Any]) -> bool:
        """
        Revoke the token described by a decoded payload.

        Returns:
            False if the revocation could not be stored
        """
        jti = payload.get("jti")
        if not jti:
            return True
        return await revoke_token(jti, seconds_until_expiry(payload))

    async def refresh_token(self, user_id: str) -> LoginResponse:
        """
        Issue a fresh token for an authenticated user.

        Raises:
            AuthError: user-not-found or user-disabled
        """
        user = await self.get_user_by_id(user_id)
        if user is None:
            raise AuthError("user-not-found", "User not found")
        if not user.is_active:
            raise AuthError("user-disabled", "This admin account has been disabled")
        return self._token_response(user_id, user.email, list(user.roles))

    async def get_user_by_id(self, user_id: str) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ObjectId as string

        Returns:
            User model or None if not found
        """
        try:
            user_doc = await self.users_collection.find_one({"_id": ObjectId(user_id)})
        except (InvalidId, TypeError):
            return None

        if not user_doc:
            return None

        user_doc["_id"] = str(user_doc["_id"])
        return User(**user_doc)

    async def ensure_admin(self, email: str, password: str) -> bool:
        """
        Create an admin account unless one already exists for the email.

        Returns:
            True if a new account was created
        """
        email = email.strip().lower()
        result = await self.users_collection.update_one(
            {"email": email},
            {
                "$setOnInsert": {
                    "hashed_password": hash_password(password),
                    "roles": [UserRole.ADMIN.value],
                    "status": UserStatus.ACTIVE.value,
                    "created_at": datetime.now(timezone.utc),
                }
            },
            upsert=True,
        )
        created = result.upserted_id is not None
        if created:
            logger.info("Created bootstrap admin %s", email)
        return created
