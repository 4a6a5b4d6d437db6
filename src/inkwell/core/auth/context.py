"""Per-request identity and permission resolution.

A ``RequestContext`` is created for each inbound request and discarded
with it. It lazily resolves the session claims and the current user at
most once, so every permission check made while handling the request
shares a single store round trip. It is never shared between requests.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from uuid import UUID

import structlog

from inkwell.core.auth.repository import AuthRepository
from inkwell.core.auth.session import SessionCodec
from inkwell.core.auth.transport import SessionTransport
from inkwell.core.auth.types import CurrentUser, SessionClaims, UserStatus
from inkwell.core.rbac.permissions import (
    PermissionPair,
    can_act_on_owned,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from inkwell.core.results import Failure, permission_denied, unauthenticated

logger = structlog.get_logger()


class Unauthenticated:
    """Marker returned when a request carries no usable session.

    Callers decide what to do with it (redirect to login, 401, ...).
    """

    _instance: Unauthenticated | None = None

    def __new__(cls) -> Unauthenticated:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNAUTHENTICATED"


UNAUTHENTICATED = Unauthenticated()


class RequestContext:
    """Request-lifetime cache for session claims and the current user."""

    def __init__(
        self,
        codec: SessionCodec,
        repo: AuthRepository,
        transport: SessionTransport,
    ) -> None:
        """Initialize the context.

        Args:
            codec: Session codec shared by the process.
            repo: Auth repository used to re-read the user.
            transport: Carrier of the session token for this request.
        """
        self._codec = codec
        self._repo = repo
        self._transport = transport

        self._claims: SessionClaims | Unauthenticated | None = None
        self._user: CurrentUser | None = None
        self._user_loaded = False
        self._user_lock = asyncio.Lock()

    @property
    def transport(self) -> SessionTransport:
        """The session transport for this request."""
        return self._transport

    def resolve_session(self) -> SessionClaims | Unauthenticated:
        """Decode the presented session token.

        Returns:
            The verified claims, or ``UNAUTHENTICATED`` for a missing,
            corrupt or expired token.
        """
        if self._claims is None:
            claims = self._codec.verify(self._transport.get())
            self._claims = claims if claims is not None else UNAUTHENTICATED
        return self._claims

    async def get_current_user(self) -> CurrentUser | None:
        """Load the authenticated user with role and permissions.

        Identity comes from the session; everything else (status, role,
        grants) is re-read from the store, so a suspended user loses
        access on the next request even with a valid token.

        Returns:
            The active current user, or None.
        """
        if self._user_loaded:
            return self._user

        async with self._user_lock:
            if not self._user_loaded:
                self._user = await self._load_user()
                self._user_loaded = True
        return self._user

    async def _load_user(self) -> CurrentUser | None:
        claims = self.resolve_session()
        if isinstance(claims, Unauthenticated):
            return None

        try:
            user = await self._repo.get_user_by_id(claims.user_id)
            if user is None or user.status != UserStatus.ACTIVE:
                return None

            role = await self._repo.get_role_with_permissions(user.role_id)
        except Exception:
            logger.exception("current_user_fetch_failed", user_id=str(claims.user_id))
            return None

        if role is None:
            logger.error("user_role_missing", user_id=str(user.id), role_id=str(user.role_id))
            return None

        return CurrentUser(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            avatar=user.avatar,
            status=user.status,
            role=role,
            created_at=user.created_at,
        )

    async def require_user(self) -> CurrentUser | Failure:
        """Return the current user, or an UNAUTHENTICATED failure."""
        user = await self.get_current_user()
        if user is None:
            return unauthenticated()
        return user

    async def require_permission(
        self,
        resource: str,
        action: str,
        message: str = "Permission denied",
    ) -> CurrentUser | Failure:
        """Return the current user if they hold the permission.

        Args:
            resource: Resource category.
            action: Operation.
            message: Denial message shown to the user.

        Returns:
            The current user, or an UNAUTHENTICATED / PERMISSION_DENIED failure.
        """
        user = await self.get_current_user()
        if user is None:
            return unauthenticated()
        if not has_permission(user, resource, action):
            logger.info(
                "permission_denied",
                user_id=str(user.id),
                resource=resource,
                action=action,
            )
            return permission_denied(message)
        return user

    async def has_permission(self, resource: str, action: str) -> bool:
        """Check a permission for the current user."""
        return has_permission(await self.get_current_user(), resource, action)

    async def has_any_permission(self, pairs: Iterable[PermissionPair]) -> bool:
        """Check that the current user holds any of the permissions."""
        return has_any_permission(await self.get_current_user(), pairs)

    async def has_all_permissions(self, pairs: Iterable[PermissionPair]) -> bool:
        """Check that the current user holds all of the permissions."""
        return has_all_permissions(await self.get_current_user(), pairs)

    async def can_act_on_owned(self, owner_id: UUID | None, resource: str, action: str) -> bool:
        """Check ownership or the elevated permission for the current user."""
        return can_act_on_owned(await self.get_current_user(), owner_id, resource, action)
