"""Tests for user service."""

from collections.abc import Awaitable, Callable
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from inkwell.adapters.db.memory import InMemoryStore
from inkwell.adapters.db.seed import Seed
from inkwell.core.auth.context import RequestContext
from inkwell.core.auth.types import User, UserStatus
from inkwell.core.posts.types import PostStatus
from inkwell.core.results import ErrorKind, Failure, Success
from inkwell.core.users.service import UserService
from inkwell.core.users.types import DashboardStats

ContextFor = Callable[[User | None], RequestContext]
MakeUser = Callable[..., Awaitable[User]]


@pytest.fixture
def service(store: InMemoryStore) -> UserService:
    """Create service over the in-memory store."""
    return UserService(store, store)


class TestListUsers:
    """Test listing users."""

    async def test_requires_users_read(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Plain users may not list accounts."""
        ctx = context_for(await make_user(role="user"))

        result = await service.list_users(ctx)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.PERMISSION_DENIED

    async def test_lists_newest_first_without_hashes(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should list every user with their role, newest first."""
        moderator = await make_user(role="moderator", name="Mod")
        newest = await make_user(role="user", name="Newest")

        result = await service.list_users(context_for(moderator))

        assert isinstance(result, Success)
        assert [u.id for u in result.value] == [newest.id, moderator.id]
        assert result.value[0].role.name == "user"
        assert "password_hash" not in result.value[0].model_dump()


class TestUpdateUserStatus:
    """Test status changes."""

    async def test_suspend_revokes_access_next_request(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """A suspended user should be anonymous on their next request."""
        moderator = await make_user(role="moderator")
        target = await make_user(role="user")
        assert await context_for(target).get_current_user() is not None

        result = await service.update_user_status(
            context_for(moderator), target.id, "SUSPENDED"
        )

        assert isinstance(result, Success)
        assert result.value.status == UserStatus.SUSPENDED
        assert await context_for(target).get_current_user() is None

    async def test_invalid_status(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should reject unknown statuses."""
        moderator = await make_user(role="moderator")
        target = await make_user()

        result = await service.update_user_status(context_for(moderator), target.id, "BANNED")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.VALIDATION
        assert result.errors == {"status": ["Invalid status."]}

    async def test_unknown_user(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should report a missing user."""
        moderator = await make_user(role="moderator")

        result = await service.update_user_status(context_for(moderator), uuid4(), "ACTIVE")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.NOT_FOUND

    async def test_requires_users_update(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Plain users may not change statuses."""
        actor = await make_user()
        target = await make_user()

        result = await service.update_user_status(context_for(actor), target.id, "SUSPENDED")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.PERMISSION_DENIED


class TestUpdateUserRole:
    """Test role changes."""

    async def test_change_role(
        self,
        service: UserService,
        context_for: ContextFor,
        make_user: MakeUser,
        store: InMemoryStore,
    ) -> None:
        """The new role's grants should apply on the next request."""
        admin = await make_user(role="admin")
        target = await make_user(role="user")
        moderator_role = await store.get_role_by_name("moderator")
        assert moderator_role is not None

        result = await service.update_user_role(context_for(admin), target.id, moderator_role.id)

        assert isinstance(result, Success)
        assert result.value.role.name == "moderator"
        assert await context_for(target).has_permission("users", "read")

    async def test_unknown_role(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should refuse a role that does not exist."""
        admin = await make_user(role="admin")
        target = await make_user()

        result = await service.update_user_role(context_for(admin), target.id, uuid4())

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.message == "Role not found."


class TestDeleteUser:
    """Test user deletion."""

    async def test_cannot_delete_self(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Even an admin may not delete their own account."""
        admin = await make_user(role="admin")

        result = await service.delete_user(context_for(admin), admin.id)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.FORBIDDEN_SELF_DELETE

    async def test_moderator_lacks_delete(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Moderators hold no users:delete grant."""
        moderator = await make_user(role="moderator")
        target = await make_user()

        result = await service.delete_user(context_for(moderator), target.id)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.PERMISSION_DENIED

    async def test_delete_removes_user_and_posts(
        self,
        service: UserService,
        context_for: ContextFor,
        make_user: MakeUser,
        store: InMemoryStore,
    ) -> None:
        """Deleting a user should remove their posts too."""
        admin = await make_user(role="admin")
        target = await make_user()
        await store.create_post(
            author_id=target.id,
            title="Hello",
            content="Some content here",
            excerpt=None,
            status=PostStatus.DRAFT,
            published_at=None,
        )

        result = await service.delete_user(context_for(admin), str(target.id))

        assert isinstance(result, Success)
        assert await store.get_user_by_id(target.id) is None
        posts, total = await store.list_posts(offset=0, limit=10)
        assert posts == []
        assert total == 0

    async def test_delete_missing(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should report a missing user."""
        admin = await make_user(role="admin")

        result = await service.delete_user(context_for(admin), uuid4())

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.NOT_FOUND

    async def test_invalid_id(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should reject malformed IDs."""
        admin = await make_user(role="admin")

        result = await service.delete_user(context_for(admin), "not-a-uuid")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.VALIDATION


class TestUpdateProfile:
    """Test self-service profile edits."""

    async def test_update_profile(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should update only the given fields."""
        user = await make_user(name="Old Name")

        result = await service.update_profile(
            context_for(user), name="  New Name ", phone="+1 555-123-4567"
        )

        assert isinstance(result, Success)
        assert result.value.name == "New Name"
        assert result.value.phone == "+1 555-123-4567"
        assert result.value.email == user.email

    async def test_invalid_fields(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Should report every invalid field."""
        user = await make_user()

        result = await service.update_profile(
            context_for(user), name="A", phone="call me", avatar="not a url"
        )

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.VALIDATION
        assert set(result.errors) == {"name", "phone", "avatar"}

    async def test_anonymous(self, service: UserService, context_for: ContextFor) -> None:
        """Should require a session."""
        result = await service.update_profile(context_for(None), name="Someone")

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.UNAUTHENTICATED


class TestDashboardStats:
    """Test the dashboard totals."""

    async def test_moderator_sees_totals(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """users:read is enough to see the totals."""
        moderator = await make_user(role="moderator")
        await make_user()

        result = await service.get_dashboard_stats(context_for(moderator))

        assert isinstance(result, Success)
        assert result.value == DashboardStats(total_users=2, total_roles=3, total_permissions=10)

    async def test_settings_manage_is_enough(
        self,
        service: UserService,
        store: InMemoryStore,
        seed: Seed,
        context_for: ContextFor,
        make_user: MakeUser,
    ) -> None:
        """settings:manage alone also unlocks the totals."""
        await store.replace_role_permissions(
            seed.roles["user"].id, [seed.permissions["settings:manage"].id]
        )
        user = await make_user()

        result = await service.get_dashboard_stats(context_for(user))

        assert isinstance(result, Success)
        assert result.value.total_users == 1

    async def test_plain_user_denied(
        self, service: UserService, context_for: ContextFor, make_user: MakeUser
    ) -> None:
        """Neither permission means no totals."""
        result = await service.get_dashboard_stats(context_for(await make_user()))

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.PERMISSION_DENIED

    async def test_anonymous(self, service: UserService, context_for: ContextFor) -> None:
        """Should require a session."""
        result = await service.get_dashboard_stats(context_for(None))

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.UNAUTHENTICATED

    async def test_store_error(self, context_for: ContextFor, make_user: MakeUser) -> None:
        """Should hide store failures behind a generic message."""
        users = MagicMock()
        users.count_users = AsyncMock(side_effect=ConnectionError("db down"))
        ctx = context_for(await make_user(role="admin"))

        result = await UserService(users, MagicMock()).get_dashboard_stats(ctx)

        assert isinstance(result, Failure)
        assert result.kind == ErrorKind.STORE
