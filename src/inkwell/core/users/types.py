"""User administration types."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from inkwell.core.auth.types import Role, User, UserStatus


class RoleRef(BaseModel):
    """Minimal role reference shown alongside a user."""

    id: UUID
    name: str


class UserSummary(BaseModel):
    """A user as listed to administrators. Never carries the password hash."""

    id: UUID
    name: str
    email: str
    phone: str | None = None
    avatar: str | None = None
    status: UserStatus
    role: RoleRef
    created_at: datetime

    @classmethod
    def from_user(cls, user: User, role: Role) -> "UserSummary":
        """Build a summary from a user and their role."""
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            avatar=user.avatar,
            status=user.status,
            role=RoleRef(id=role.id, name=role.name),
            created_at=user.created_at,
        )


class DashboardStats(BaseModel):
    """Site-wide totals shown on the dashboard overview."""

    total_users: int
    total_roles: int
    total_permissions: int
