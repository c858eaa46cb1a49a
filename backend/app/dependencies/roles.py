"""
Role-based access control dependencies.
"""
from typing import Callable

from fastapi import Depends, HTTPException, status

from app.dependencies.auth import get_current_active_user
from app.models.user import User, UserRole


def require_roles(*allowed_roles: UserRole) -> Callable:
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/danger")
        async def danger(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    allowed = {role.value for role in allowed_roles}

    async def role_checker(
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        user_roles = {
            role.value if isinstance(role, UserRole) else role
            for role in current_user.roles
        }
        if not user_roles & allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "code": "insufficient-permission",
                    "message": "Admin role required for this operation",
                },
            )
        return current_user

    return role_checker


def require_admin() -> Callable:
    """Shortcut dependency for the mutating, admin-only routes."""
    return require_roles(UserRole.ADMIN)
