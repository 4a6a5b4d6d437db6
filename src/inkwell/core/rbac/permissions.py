"""Permission evaluation.

Pure functions of (user, resource, action) and the user's role grant set.
Nothing here touches the store: callers hand in a ``CurrentUser`` that was
loaded once for the request.

Sharp edge: super-admin status is decided by the role *name*. Renaming a
role to ``admin`` grants it blanket access even with no permission rows,
and renaming the admin role away from ``admin`` silently drops it, even if
every permission row is still attached. ``is_super_admin`` is the single
place that encodes this rule.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from inkwell.core.auth.types import CurrentUser, Role

SUPER_ADMIN_ROLE = "admin"

PermissionPair = tuple[str, str]


def is_super_admin(role: Role | None) -> bool:
    """Check whether a role bypasses all permission checks."""
    return role is not None and role.name == SUPER_ADMIN_ROLE


def _grants(user: CurrentUser, resource: str, action: str) -> bool:
    return any(p.resource == resource and p.action == action for p in user.permissions)


def has_permission(user: CurrentUser | None, resource: str, action: str) -> bool:
    """Check if a user may perform ``action`` on ``resource``.

    Args:
        user: The current user, or None when unauthenticated.
        resource: Resource category, e.g. "posts".
        action: Operation, e.g. "update".

    Returns:
        True for super admins, otherwise True iff the exact pair is granted.
    """
    if user is None:
        return False
    if is_super_admin(user.role):
        return True
    return _grants(user, resource, action)


def has_any_permission(user: CurrentUser | None, pairs: Iterable[PermissionPair]) -> bool:
    """Check if a user holds at least one of the given permissions."""
    if user is None:
        return False
    if is_super_admin(user.role):
        return True
    return any(_grants(user, resource, action) for resource, action in pairs)


def has_all_permissions(user: CurrentUser | None, pairs: Iterable[PermissionPair]) -> bool:
    """Check if a user holds every one of the given permissions."""
    if user is None:
        return False
    if is_super_admin(user.role):
        return True
    return all(_grants(user, resource, action) for resource, action in pairs)


def can_act_on_owned(
    user: CurrentUser | None,
    owner_id: UUID | None,
    resource: str,
    action: str,
) -> bool:
    """Authorize an operation on an owned record.

    Allowed when the user owns the record, or holds the elevated
    (all-records) permission for the action.

    Args:
        user: The acting user.
        owner_id: Owner of the record (e.g. a post's author).
        resource: Resource category.
        action: Operation.

    Returns:
        True if the operation is authorized.
    """
    if user is None:
        return False
    if owner_id is not None and owner_id == user.id:
        return True
    return has_permission(user, resource, action)
