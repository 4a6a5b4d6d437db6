"""Tests for the per-request context."""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from inkwell.adapters.db.memory import InMemoryStore
from inkwell.core.auth.context import UNAUTHENTICATED, RequestContext, Unauthenticated
from inkwell.core.auth.session import SessionCodec
from inkwell.core.auth.transport import MemoryTransport
from inkwell.core.auth.types import RoleWithPermissions, User, UserStatus
from inkwell.core.results import ErrorKind, Failure

ContextFor = Callable[[User | None], RequestContext]
MakeUser = Callable[..., Awaitable[User]]


class TestUnauthenticated:
    """Test the sentinel."""

    def test_singleton_and_falsy(self) -> None:
        """The sentinel should be a falsy singleton."""
        assert Unauthenticated() is UNAUTHENTICATED
        assert not UNAUTHENTICATED


class TestResolveSession:
    """Test session resolution."""

    def test_no_token(self, context_for: ContextFor) -> None:
        """A request without a token should be unauthenticated."""
        assert context_for(None).resolve_session() is UNAUTHENTICATED

    def test_bad_token(self, codec: SessionCodec, store: InMemoryStore) -> None:
        """A corrupt token should be unauthenticated."""
        ctx = RequestContext(codec, store, MemoryTransport("not-a-token"))

        assert ctx.resolve_session() is UNAUTHENTICATED

    async def test_valid_token(self, context_for: ContextFor, make_user: MakeUser) -> None:
        """A valid token should resolve to its claims."""
        user = await make_user()

        claims = context_for(user).resolve_session()

        assert not isinstance(claims, Unauthenticated)
        assert claims.user_id == user.id


class TestGetCurrentUser:
    """Test current user resolution."""

    async def test_active_user(self, context_for: ContextFor, make_user: MakeUser) -> None:
        """An active user should be loaded with role and permissions."""
        user = await make_user(role="moderator")

        current = await context_for(user).get_current_user()

        assert current is not None
        assert current.id == user.id
        assert current.role.name == "moderator"
        assert ("users", "read") in {(p.resource, p.action) for p in current.permissions}

    async def test_anonymous(self, context_for: ContextFor) -> None:
        """No session should mean no user."""
        assert await context_for(None).get_current_user() is None

    @pytest.mark.parametrize("status", [UserStatus.SUSPENDED, UserStatus.INACTIVE])
    async def test_blocked_user_has_no_session(
        self, context_for: ContextFor, make_user: MakeUser, status: UserStatus
    ) -> None:
        """A valid token for a non-active user should yield no user."""
        user = await make_user(status=status)

        assert await context_for(user).get_current_user() is None

    async def test_deleted_user(
        self, context_for: ContextFor, make_user: MakeUser, store: InMemoryStore
    ) -> None:
        """A valid token for a deleted user should yield no user."""
        user = await make_user()
        await store.delete_user(user.id)

        assert await context_for(user).get_current_user() is None

    async def test_suspension_applies_on_next_request(
        self, context_for: ContextFor, make_user: MakeUser, store: InMemoryStore
    ) -> None:
        """Suspending a user should revoke access on their next request."""
        user = await make_user()
        assert await context_for(user).get_current_user() is not None

        await store.update_user(user.id, status=UserStatus.SUSPENDED)

        assert await context_for(user).get_current_user() is None

    async def test_memoized_per_request(self, codec: SessionCodec) -> None:
        """Repeated lookups in one request should hit the store once."""
        user_id = uuid4()
        role_id = uuid4()
        repo = MagicMock()
        repo.get_user_by_id = AsyncMock(
            return_value=User(
                id=user_id,
                email="memo@example.com",
                name="Memo",
                password_hash="hashed",  # pragma: allowlist secret
                role_id=role_id,
                created_at=datetime.now(UTC),
            )
        )
        repo.get_role_with_permissions = AsyncMock(
            return_value=RoleWithPermissions(id=role_id, name="user", permissions=[])
        )
        ctx = RequestContext(codec, repo, MemoryTransport(codec.issue(user_id, "user").token))

        first = await ctx.get_current_user()
        await ctx.has_permission("posts", "create")
        await ctx.has_any_permission([("users", "read")])
        second = await ctx.get_current_user()

        assert first is second
        repo.get_user_by_id.assert_awaited_once_with(user_id)
        repo.get_role_with_permissions.assert_awaited_once_with(role_id)

    async def test_store_error_yields_none(self, codec: SessionCodec) -> None:
        """A store failure should be logged and treated as no user."""
        repo = MagicMock()
        repo.get_user_by_id = AsyncMock(side_effect=ConnectionError("db down"))
        ctx = RequestContext(codec, repo, MemoryTransport(codec.issue(uuid4(), "user").token))

        assert await ctx.get_current_user() is None


class TestContextPermissions:
    """Test permission helpers bound to the request."""

    async def test_require_user_anonymous(self, context_for: ContextFor) -> None:
        """require_user should fail for anonymous requests."""
        result = await context_for(None).require_user()

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.UNAUTHENTICATED

    async def test_require_permission_denied(
        self, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """A missing grant should give PERMISSION_DENIED with the given message."""
        user = await make_user(role="user")

        result = await context_for(user).require_permission(
            "settings", "manage", "You do not have permission to manage settings."
        )

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.PERMISSION_DENIED
        assert result.message == "You do not have permission to manage settings."

    async def test_require_permission_granted(
        self, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """A held grant should return the current user."""
        user = await make_user(role="user")

        result = await context_for(user).require_permission("posts", "create")

        assert not isinstance(result, Failure)
        assert result.id == user.id

    async def test_grant_changes_seen_by_next_request(
        self,
        context_for: ContextFor,
        make_user: MakeUser,
        store: InMemoryStore,
    ) -> None:
        """Replacing a role's permissions should affect the next request."""
        user = await make_user(role="user")
        assert not await context_for(user).has_permission("users", "read")

        read = await store.get_permission_by_pair("users", "read")
        assert read is not None
        await store.replace_role_permissions(user.role_id, [read.id])

        ctx = context_for(user)
        assert await ctx.has_permission("users", "read")
        assert not await ctx.has_permission("posts", "create")

    async def test_has_all_and_any(self, context_for: ContextFor, make_user: MakeUser) -> None:
        """Combined checks should evaluate against the memoized user."""
        ctx = context_for(await make_user(role="user"))

        assert await ctx.has_all_permissions([("posts", "create"), ("dashboard", "access")])
        assert not await ctx.has_all_permissions([("posts", "create"), ("users", "read")])
        assert await ctx.has_any_permission([("users", "read"), ("posts", "create")])

    async def test_can_act_on_owned(self, context_for: ContextFor, make_user: MakeUser) -> None:
        """Owners may act on their own resources without the elevated grant."""
        user = await make_user(role="user")
        ctx = context_for(user)

        assert await ctx.can_act_on_owned(user.id, "posts", "update")
        assert not await ctx.can_act_on_owned(uuid4(), "posts", "update")
