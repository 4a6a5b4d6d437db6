"""RBAC domain types and admin forms."""

from uuid import UUID

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from inkwell.core.auth.types import RoleWithPermissions


class RoleSummary(RoleWithPermissions):
    """Role with its permissions and the number of users holding it."""

    user_count: int = 0


def _required(value: str, message: str) -> str:
    value = value.strip()
    if not value:
        raise PydanticCustomError("required", message)
    return value


class CreateRoleForm(BaseModel):
    """New role. The name is stored lowercased."""

    name: str
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _required(v, "Role name is required.").lower()


class CreatePermissionForm(BaseModel):
    """New permission. ``name`` defaults to ``resource:action``."""

    name: str | None = None
    resource: str
    action: str
    description: str | None = None

    @field_validator("resource")
    @classmethod
    def _resource(cls, v: str) -> str:
        return _required(v, "Resource is required.")

    @field_validator("action")
    @classmethod
    def _action(cls, v: str) -> str:
        return _required(v, "Action is required.")

    @property
    def display_name(self) -> str:
        """Name to store for the permission."""
        if self.name and self.name.strip():
            return self.name.strip()
        return f"{self.resource}:{self.action}"


class RolePermissionsForm(BaseModel):
    """Full replacement permission set for a role."""

    role_id: UUID
    permission_ids: list[UUID] = []

    @field_validator("permission_ids")
    @classmethod
    def _dedupe(cls, v: list[UUID]) -> list[UUID]:
        return list(dict.fromkeys(v))
