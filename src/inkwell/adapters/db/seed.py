"""Standard roles and permissions.

Applied to the in-memory store on startup, and used by the test suite.
Idempotent: rows that already exist are reused and left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from inkwell.core.auth.types import Permission, Role
from inkwell.core.rbac.repository import RbacRepository

logger = structlog.get_logger()

DEFAULT_PERMISSIONS = [
    ("users", "read", "View user list and details"),
    ("users", "create", "Create new users"),
    ("users", "update", "Update user information"),
    ("users", "delete", "Delete users"),
    ("posts", "read", "View all posts"),
    ("posts", "create", "Create new posts"),
    ("posts", "update", "Update any post"),
    ("posts", "delete", "Delete any post"),
    ("dashboard", "access", "Access dashboard"),
    ("settings", "manage", "Manage system settings"),
]

# admin holds nothing: it passes every check by name
DEFAULT_ROLES = {
    "admin": ("Full system access", []),
    "moderator": (
        "Can manage users and posts but not system settings",
        [
            "users:read",
            "users:create",
            "users:update",
            "posts:read",
            "posts:create",
            "posts:update",
            "dashboard:access",
        ],
    ),
    "user": ("Standard user with basic access", ["posts:create", "dashboard:access"]),
}

DEFAULT_SIGNUP_ROLE = "user"


@dataclass
class Seed:
    """Seeded roles and permissions, keyed by name."""

    roles: dict[str, Role]
    permissions: dict[str, Permission]


async def seed_defaults(repo: RbacRepository) -> Seed:
    """Create the standard permissions and the admin/moderator/user roles.

    Args:
        repo: Repository to seed.

    Returns:
        The roles and permissions, whether created now or already present.
    """
    permissions: dict[str, Permission] = {}
    for resource, action, description in DEFAULT_PERMISSIONS:
        name = f"{resource}:{action}"
        existing = await repo.get_permission_by_pair(resource, action)
        permissions[name] = existing or await repo.create_permission(
            name, resource, action, description
        )

    roles: dict[str, Role] = {}
    created = 0
    for name, (description, grants) in DEFAULT_ROLES.items():
        role = await repo.get_role_by_name(name)
        if role is None:
            role = await repo.create_role(
                name, description, is_default=name == DEFAULT_SIGNUP_ROLE
            )
            await repo.replace_role_permissions(role.id, [permissions[g].id for g in grants])
            created += 1
        roles[name] = role

    logger.info("defaults_seeded", roles_created=created, permissions=len(permissions))
    return Seed(roles=roles, permissions=permissions)
