"""RBAC core domain."""

from inkwell.core.rbac.permissions import (
    SUPER_ADMIN_ROLE,
    PermissionPair,
    can_act_on_owned,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_super_admin,
)
from inkwell.core.rbac.repository import RbacRepository
from inkwell.core.rbac.service import RoleService
from inkwell.core.rbac.types import (
    CreatePermissionForm,
    CreateRoleForm,
    RolePermissionsForm,
    RoleSummary,
)

__all__ = [
    "SUPER_ADMIN_ROLE",
    "PermissionPair",
    "is_super_admin",
    "has_permission",
    "has_any_permission",
    "has_all_permissions",
    "can_act_on_owned",
    "RbacRepository",
    "RoleService",
    "RoleSummary",
    "CreateRoleForm",
    "CreatePermissionForm",
    "RolePermissionsForm",
]
