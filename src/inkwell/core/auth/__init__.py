"""Auth domain types and utilities."""

from inkwell.core.auth.context import UNAUTHENTICATED, RequestContext, Unauthenticated
from inkwell.core.auth.password import hash_password, verify_password
from inkwell.core.auth.repository import AuthRepository
from inkwell.core.auth.service import AuthService
from inkwell.core.auth.session import SessionCodec, SessionConfig
from inkwell.core.auth.transport import MemoryTransport, SessionTransport
from inkwell.core.auth.types import (
    CurrentUser,
    IssuedSession,
    Permission,
    Role,
    RoleWithPermissions,
    SessionClaims,
    User,
    UserStatus,
)

__all__ = [
    "User",
    "UserStatus",
    "Role",
    "RoleWithPermissions",
    "Permission",
    "CurrentUser",
    "SessionClaims",
    "IssuedSession",
    "hash_password",
    "verify_password",
    "SessionCodec",
    "SessionConfig",
    "SessionTransport",
    "MemoryTransport",
    "AuthRepository",
    "AuthService",
    "RequestContext",
    "Unauthenticated",
    "UNAUTHENTICATED",
]
