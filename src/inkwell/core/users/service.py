"""User administration and profile management."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from inkwell.core.auth.forms import UpdateProfileForm
from inkwell.core.auth.repository import AuthRepository
from inkwell.core.auth.types import UserStatus
from inkwell.core.rbac.repository import RbacRepository
from inkwell.core.results import (
    ErrorKind,
    Failure,
    Result,
    Success,
    not_found,
    permission_denied,
    store_failure,
)
from inkwell.core.users.types import DashboardStats, UserSummary
from inkwell.core.validation import validate_form

if TYPE_CHECKING:
    from inkwell.core.auth.context import RequestContext

logger = structlog.get_logger()

# Holding either of these shows the dashboard totals
STATS_PERMISSIONS = [("users", "read"), ("settings", "manage")]

_uuid = TypeAdapter(UUID)
_status = TypeAdapter(UserStatus)


def _parse(adapter: TypeAdapter[Any], field: str, value: Any, message: str) -> Any:
    try:
        return adapter.validate_python(value)
    except ValidationError:
        return Failure(ErrorKind.VALIDATION, message, {field: [message]})


class UserService:
    """Service for administering users."""

    def __init__(self, users: AuthRepository, roles: RbacRepository) -> None:
        """Initialize with repositories.

        Args:
            users: Repository for user records.
            roles: Repository used to check role references.
        """
        self._users = users
        self._roles = roles

    async def list_users(self, ctx: RequestContext) -> Result[list[UserSummary]]:
        """List all users, newest first. Requires ``users:read``."""
        actor = await ctx.require_permission(
            "users", "read", "You do not have permission to view users."
        )
        if isinstance(actor, Failure):
            return actor

        try:
            rows = await self._users.list_users()
        except Exception:
            logger.exception("list_users_failed")
            return store_failure("Failed to fetch users.")

        return Success([UserSummary.from_user(user, role) for user, role in rows])

    async def update_user_status(
        self,
        ctx: RequestContext,
        user_id: Any,
        status: Any,
    ) -> Result[UserSummary]:
        """Change a user's account status. Requires ``users:update``.

        Suspending a user revokes access on their next request; their
        session token stays valid but is no longer honoured.
        """
        actor = await ctx.require_permission(
            "users", "update", "You do not have permission to update users."
        )
        if isinstance(actor, Failure):
            return actor

        target = _parse(_uuid, "user_id", user_id, "Invalid user ID.")
        if isinstance(target, Failure):
            return target
        new_status = _parse(_status, "status", status, "Invalid status.")
        if isinstance(new_status, Failure):
            return new_status

        try:
            user = await self._users.update_user(target, status=new_status)
            if user is None:
                return not_found("User not found.")
            role = await self._roles.get_role_by_id(user.role_id)
        except Exception:
            logger.exception("update_user_status_failed", user_id=str(target))
            return store_failure("Failed to update user status.")

        if role is None:
            return store_failure("Failed to update user status.")

        logger.info(
            "user_status_changed",
            user_id=str(target),
            status=new_status.value,
            actor_id=str(actor.id),
        )
        return Success(UserSummary.from_user(user, role))

    async def update_user_role(
        self,
        ctx: RequestContext,
        user_id: Any,
        role_id: Any,
    ) -> Result[UserSummary]:
        """Move a user to another role. Requires ``users:update``."""
        actor = await ctx.require_permission(
            "users", "update", "You do not have permission to update users."
        )
        if isinstance(actor, Failure):
            return actor

        target = _parse(_uuid, "user_id", user_id, "Invalid user ID.")
        if isinstance(target, Failure):
            return target
        new_role_id = _parse(_uuid, "role_id", role_id, "Invalid role ID.")
        if isinstance(new_role_id, Failure):
            return new_role_id

        try:
            role = await self._roles.get_role_by_id(new_role_id)
            if role is None:
                return not_found("Role not found.")
            user = await self._users.update_user(target, role_id=role.id)
        except Exception:
            logger.exception("update_user_role_failed", user_id=str(target))
            return store_failure("Failed to update user role.")

        if user is None:
            return not_found("User not found.")

        logger.info(
            "user_role_changed",
            user_id=str(target),
            role=role.name,
            actor_id=str(actor.id),
        )
        return Success(UserSummary.from_user(user, role))

    async def delete_user(self, ctx: RequestContext, user_id: Any) -> Result[None]:
        """Delete a user. Requires ``users:delete``; you cannot delete yourself."""
        actor = await ctx.require_permission(
            "users", "delete", "You do not have permission to delete users."
        )
        if isinstance(actor, Failure):
            return actor

        target = _parse(_uuid, "user_id", user_id, "Invalid user ID.")
        if isinstance(target, Failure):
            return target

        if target == actor.id:
            return Failure(
                ErrorKind.FORBIDDEN_SELF_DELETE,
                "You cannot delete your own account.",
            )

        try:
            deleted = await self._users.delete_user(target)
        except Exception:
            logger.exception("delete_user_failed", user_id=str(target))
            return store_failure("Failed to delete user.")

        if not deleted:
            return not_found("User not found.")

        logger.info("user_deleted", user_id=str(target), actor_id=str(actor.id))
        return Success(None)

    async def update_profile(
        self,
        ctx: RequestContext,
        name: Any = None,
        phone: Any = None,
        avatar: Any = None,
    ) -> Result[UserSummary]:
        """Update the current user's own profile."""
        actor = await ctx.require_user()
        if isinstance(actor, Failure):
            return actor

        form = validate_form(UpdateProfileForm, {"name": name, "phone": phone, "avatar": avatar})
        if isinstance(form, Failure):
            return form

        try:
            user = await self._users.update_user(
                actor.id,
                name=form.name,
                phone=form.phone,
                avatar=form.avatar,
            )
        except Exception:
            logger.exception("update_profile_failed", user_id=str(actor.id))
            return store_failure("Failed to update profile.")

        if user is None:
            return not_found("User not found.")

        logger.info("profile_updated", user_id=str(actor.id))
        return Success(UserSummary.from_user(user, actor.role))

    async def get_dashboard_stats(self, ctx: RequestContext) -> Result[DashboardStats]:
        """Count users, roles and permissions.

        Requires ``users:read`` or ``settings:manage``.
        """
        actor = await ctx.require_user()
        if isinstance(actor, Failure):
            return actor
        if not await ctx.has_any_permission(STATS_PERMISSIONS):
            return permission_denied()

        try:
            stats = DashboardStats(
                total_users=await self._users.count_users(),
                total_roles=await self._roles.count_roles(),
                total_permissions=await self._roles.count_permissions(),
            )
        except Exception:
            logger.exception("dashboard_stats_failed", user_id=str(actor.id))
            return store_failure("Failed to fetch dashboard stats.")

        return Success(stats)
