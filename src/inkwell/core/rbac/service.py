"""Role and permission administration.

Every operation requires ``settings:manage``. The permission check is
made on the server regardless of what the UI chose to show.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from inkwell.core.auth.types import Permission, Role
from inkwell.core.rbac.repository import RbacRepository
from inkwell.core.rbac.types import (
    CreatePermissionForm,
    CreateRoleForm,
    RolePermissionsForm,
    RoleSummary,
)
from inkwell.core.results import (
    ErrorKind,
    Failure,
    Result,
    Success,
    not_found,
    store_failure,
)
from inkwell.core.validation import validate_form

if TYPE_CHECKING:
    from inkwell.core.auth.context import RequestContext

logger = structlog.get_logger()

SETTINGS_DENIED = "You do not have permission to manage settings."
ROLE_EXISTS = "A role with this name already exists."
PERMISSION_EXISTS = "A permission with this resource and action already exists."


class RoleService:
    """Service for managing roles and their permission sets."""

    def __init__(self, repo: RbacRepository) -> None:
        """Initialize with RBAC repository.

        Args:
            repo: Repository for role/permission storage.
        """
        self._repo = repo

    async def _authorize(self, ctx: RequestContext) -> Failure | None:
        user = await ctx.require_permission("settings", "manage", SETTINGS_DENIED)
        return user if isinstance(user, Failure) else None

    async def list_roles(self, ctx: RequestContext) -> Result[list[RoleSummary]]:
        """List all roles with their permissions and user counts."""
        if denied := await self._authorize(ctx):
            return denied

        try:
            return Success(await self._repo.list_roles())
        except Exception:
            logger.exception("list_roles_failed")
            return store_failure("Failed to fetch roles.")

    async def list_permissions(self, ctx: RequestContext) -> Result[list[Permission]]:
        """List all permissions ordered by resource then action."""
        if denied := await self._authorize(ctx):
            return denied

        try:
            return Success(await self._repo.list_permissions())
        except Exception:
            logger.exception("list_permissions_failed")
            return store_failure("Failed to fetch permissions.")

    async def update_role_permissions(
        self,
        ctx: RequestContext,
        role_id: Any,
        permission_ids: Any,
    ) -> Result[list[Permission]]:
        """Replace a role's permission set with exactly ``permission_ids``.

        The stored set is deleted and re-inserted in one transaction, never
        patched. Applying the same set twice leaves the same result.

        Args:
            ctx: Request context of the acting user.
            role_id: Role to update.
            permission_ids: The complete new set of permission IDs.

        Returns:
            The permissions now attached to the role.
        """
        if denied := await self._authorize(ctx):
            return denied

        form = validate_form(
            RolePermissionsForm,
            {"role_id": role_id, "permission_ids": permission_ids},
        )
        if isinstance(form, Failure):
            return form

        try:
            role = await self._repo.get_role_by_id(form.role_id)
            if role is None:
                return not_found("Role not found.")

            known = {p.id: p for p in await self._repo.list_permissions()}
            unknown = [str(pid) for pid in form.permission_ids if pid not in known]
            if unknown:
                return Failure(
                    ErrorKind.VALIDATION,
                    "Unknown permissions.",
                    {"permission_ids": [f"Unknown permission: {pid}" for pid in unknown]},
                )

            await self._repo.replace_role_permissions(role.id, form.permission_ids)
        except Exception:
            logger.exception("update_role_permissions_failed", role_id=str(role_id))
            return store_failure("Failed to update role permissions.")

        logger.info(
            "role_permissions_replaced",
            role_id=str(role.id),
            role=role.name,
            count=len(form.permission_ids),
        )
        return Success([known[pid] for pid in form.permission_ids])

    async def create_role(
        self,
        ctx: RequestContext,
        name: Any,
        description: Any = None,
    ) -> Result[Role]:
        """Create a role. Names are unique after lowercasing.

        Args:
            ctx: Request context of the acting user.
            name: Role name.
            description: Optional description.

        Returns:
            The created role.
        """
        if denied := await self._authorize(ctx):
            return denied

        form = validate_form(CreateRoleForm, {"name": name, "description": description})
        if isinstance(form, Failure):
            return form

        try:
            if await self._repo.get_role_by_name(form.name) is not None:
                return Failure(ErrorKind.CONFLICT, ROLE_EXISTS, {"name": [ROLE_EXISTS]})

            role = await self._repo.create_role(name=form.name, description=form.description)
        except Exception:
            logger.exception("create_role_failed", name=form.name)
            return store_failure("Failed to create role.")

        logger.info("role_created", role_id=str(role.id), role=role.name)
        return Success(role)

    async def create_permission(
        self,
        ctx: RequestContext,
        name: Any,
        resource: Any,
        action: Any,
        description: Any = None,
    ) -> Result[Permission]:
        """Create a permission. The (resource, action) pair is unique.

        Args:
            ctx: Request context of the acting user.
            name: Display name, defaults to ``resource:action``.
            resource: Resource category.
            action: Operation.
            description: Optional description.

        Returns:
            The created permission.
        """
        if denied := await self._authorize(ctx):
            return denied

        form = validate_form(
            CreatePermissionForm,
            {"name": name, "resource": resource, "action": action, "description": description},
        )
        if isinstance(form, Failure):
            return form

        try:
            existing = await self._repo.get_permission_by_pair(form.resource, form.action)
            if existing is not None:
                return Failure(ErrorKind.CONFLICT, PERMISSION_EXISTS)

            permission = await self._repo.create_permission(
                name=form.display_name,
                resource=form.resource,
                action=form.action,
                description=form.description,
            )
        except Exception:
            logger.exception(
                "create_permission_failed", resource=form.resource, action=form.action
            )
            return store_failure("Failed to create permission.")

        logger.info(
            "permission_created",
            permission_id=str(permission.id),
            resource=permission.resource,
            action=permission.action,
        )
        return Success(permission)
