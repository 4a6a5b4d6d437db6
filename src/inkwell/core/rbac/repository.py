"""RBAC repository protocol for role and permission administration."""

from typing import Protocol, runtime_checkable
from uuid import UUID

from inkwell.core.auth.types import Permission, Role
from inkwell.core.rbac.types import RoleSummary


@runtime_checkable
class RbacRepository(Protocol):
    """Protocol for role/permission storage."""

    async def list_roles(self) -> list[RoleSummary]:
        """List roles ordered by name, each with its permissions and user count."""
        ...

    async def count_roles(self) -> int:
        """Count all roles."""
        ...

    async def get_role_by_id(self, role_id: UUID) -> Role | None:
        """Get role by ID."""
        ...

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get role by its normalized (lowercase) name."""
        ...

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        is_default: bool = False,
    ) -> Role:
        """Create a new role."""
        ...

    async def list_permissions(self) -> list[Permission]:
        """List permissions ordered by (resource, action)."""
        ...

    async def count_permissions(self) -> int:
        """Count all permissions."""
        ...

    async def get_permission_by_pair(self, resource: str, action: str) -> Permission | None:
        """Get permission by its (resource, action) pair."""
        ...

    async def create_permission(
        self,
        name: str,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> Permission:
        """Create a new permission."""
        ...

    async def replace_role_permissions(self, role_id: UUID, permission_ids: list[UUID]) -> None:
        """Atomically replace the full permission set of a role."""
        ...
