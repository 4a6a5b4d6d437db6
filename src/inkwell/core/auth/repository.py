"""Auth repository protocol for database operations."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from inkwell.core.auth.types import Role, RoleWithPermissions, User, UserStatus


@runtime_checkable
class AuthRepository(Protocol):
    """Protocol for user and credential storage.

    Implementations provide actual database access (PostgreSQL, in-memory).
    Emails are stored and looked up in their normalized (lowercase) form.
    """

    # User operations
    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        ...

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by normalized email address."""
        ...

    async def create_user(
        self,
        email: str,
        name: str,
        password_hash: str,
        role_id: UUID,
        phone: str | None = None,
    ) -> User:
        """Create a new ACTIVE user bound to a role."""
        ...

    async def list_users(self) -> list[tuple[User, Role]]:
        """List all users with their role, newest first."""
        ...

    async def update_user(
        self,
        user_id: UUID,
        name: str | None = None,
        phone: str | None = None,
        avatar: str | None = None,
        status: UserStatus | None = None,
        role_id: UUID | None = None,
    ) -> User | None:
        """Update user fields. Fields left as None are unchanged."""
        ...

    async def delete_user(self, user_id: UUID) -> bool:
        """Delete a user. Returns False when no such user exists."""
        ...

    async def count_users(self) -> int:
        """Count all users."""
        ...

    # Role lookups needed by authentication
    async def get_default_role(self) -> Role | None:
        """Get the role flagged as default for new signups."""
        ...

    async def get_role_with_permissions(self, role_id: UUID) -> RoleWithPermissions | None:
        """Get a role and its currently attached permissions."""
        ...
