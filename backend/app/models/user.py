"""
Console operator accounts stored in auth_db.users.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class UserRole(str, Enum):
    """USER may browse and query; ADMIN may also run batch operations."""
    USER = "user"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class User(BaseModel):
    """An operator account. Only ADMIN accounts can change documents."""
    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    email: EmailStr = Field(..., description="Sign-in email, stored lowercased")
    hashed_password: str = Field(..., description="Bcrypt hash")
    roles: list[UserRole] = Field(default=[UserRole.USER])
    status: UserStatus = Field(default=UserStatus.ACTIVE)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    last_login_at: Optional[datetime] = Field(None, description="Set on every successful sign-in")

    class Config:
        populate_by_name = True
        use_enum_values = True

    @property
    def is_admin(self) -> bool:
        return UserRole.ADMIN.value in self.roles

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE.value
