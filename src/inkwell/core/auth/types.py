"""Auth domain types."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr


class UserStatus(str, Enum):
    """Account status. Only ACTIVE accounts may log in or hold a session."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


class User(BaseModel):
    """User domain model."""

    id: UUID
    email: EmailStr
    name: str
    phone: str | None = None
    avatar: str | None = None
    password_hash: str
    status: UserStatus = UserStatus.ACTIVE
    role_id: UUID
    created_at: datetime
    updated_at: datetime | None = None


class Permission(BaseModel):
    """An atomic (resource, action) capability."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    resource: str
    action: str
    description: str | None = None


class Role(BaseModel):
    """A named bundle of permissions."""

    id: UUID
    name: str
    description: str | None = None
    is_default: bool = False
    created_at: datetime | None = None


class RoleWithPermissions(Role):
    """Role together with its currently attached permission set."""

    permissions: list[Permission] = []


class CurrentUser(BaseModel):
    """The authenticated user as seen by one request.

    Built fresh from the store on every request; never from session claims.
    The password hash is deliberately absent.
    """

    id: UUID
    name: str
    email: EmailStr
    phone: str | None = None
    avatar: str | None = None
    status: UserStatus
    role: RoleWithPermissions
    created_at: datetime

    @property
    def permissions(self) -> list[Permission]:
        """Flattened permissions of the user's role."""
        return self.role.permissions


class SessionClaims(BaseModel):
    """Verified session token claims."""

    model_config = ConfigDict(frozen=True)

    user_id: UUID
    role: str
    issued_at: int
    expires_at: int


class IssuedSession(BaseModel):
    """A freshly issued session for a user."""

    token: str
    user_id: UUID
    role: str
    expires_at: int
