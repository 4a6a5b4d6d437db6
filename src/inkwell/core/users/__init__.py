"""User administration domain."""

from inkwell.core.users.service import UserService
from inkwell.core.users.types import RoleRef, UserSummary

__all__ = ["UserService", "UserSummary", "RoleRef"]
