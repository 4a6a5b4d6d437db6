"""In-memory store implementing every repository protocol.

Used with ``STORE=memory`` for local development and by the test suite.
State lives for the lifetime of the process. Each method runs without
awaiting, so every write is atomic with respect to other coroutines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from itertools import count
from typing import TypeVar
from uuid import UUID, uuid4

from inkwell.core.auth.types import Permission, Role, RoleWithPermissions, User, UserStatus
from inkwell.core.posts.types import Author, Post, PostStatus
from inkwell.core.rbac.types import RoleSummary

T = TypeVar("T", User, Post)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Rows:
    users: dict[UUID, User] = field(default_factory=dict)
    roles: dict[UUID, Role] = field(default_factory=dict)
    permissions: dict[UUID, Permission] = field(default_factory=dict)
    grants: dict[UUID, frozenset[UUID]] = field(default_factory=dict)
    posts: dict[UUID, Post] = field(default_factory=dict)
    order: dict[UUID, int] = field(default_factory=dict)


class InMemoryStore:
    """Implements AuthRepository, RbacRepository and PostRepository."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._rows = _Rows()
        self._seq = count()

    def _stamp(self, key: UUID) -> None:
        self._rows.order[key] = next(self._seq)

    def _newest_first(self, items: list[T], attr: str = "created_at") -> list[T]:
        # Missing timestamps sort last; insertion order breaks ties.
        def key(item: T) -> tuple[datetime, int]:
            stamp = getattr(item, attr) or _EPOCH
            return stamp, self._rows.order.get(item.id, 0)

        return sorted(items, key=key, reverse=True)

    # User operations
    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        return self._rows.users.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by normalized email address."""
        for user in self._rows.users.values():
            if user.email == email:
                return user
        return None

    async def create_user(
        self,
        email: str,
        name: str,
        password_hash: str,
        role_id: UUID,
        phone: str | None = None,
    ) -> User:
        """Create a new ACTIVE user bound to a role."""
        if await self.get_user_by_email(email) is not None:
            raise ValueError(f"duplicate email: {email}")
        user = User(
            id=uuid4(),
            email=email,
            name=name,
            phone=phone,
            password_hash=password_hash,
            status=UserStatus.ACTIVE,
            role_id=role_id,
            created_at=_now(),
        )
        self._rows.users[user.id] = user
        self._stamp(user.id)
        return user

    async def list_users(self) -> list[tuple[User, Role]]:
        """List all users with their role, newest first."""
        return [
            (user, self._rows.roles[user.role_id])
            for user in self._newest_first(list(self._rows.users.values()))
            if user.role_id in self._rows.roles
        ]

    async def update_user(
        self,
        user_id: UUID,
        name: str | None = None,
        phone: str | None = None,
        avatar: str | None = None,
        status: UserStatus | None = None,
        role_id: UUID | None = None,
    ) -> User | None:
        """Update user fields. Fields left as None are unchanged."""
        user = self._rows.users.get(user_id)
        if user is None:
            return None
        changes = {
            key: value
            for key, value in (
                ("name", name),
                ("phone", phone),
                ("avatar", avatar),
                ("status", status),
                ("role_id", role_id),
            )
            if value is not None
        }
        if not changes:
            return user
        updated = user.model_copy(update={**changes, "updated_at": _now()})
        self._rows.users[user_id] = updated
        return updated

    async def delete_user(self, user_id: UUID) -> bool:
        """Delete a user and the posts they authored."""
        if self._rows.users.pop(user_id, None) is None:
            return False
        self._rows.posts = {
            pid: post for pid, post in self._rows.posts.items() if post.author_id != user_id
        }
        return True

    async def count_users(self) -> int:
        """Count all users."""
        return len(self._rows.users)

    # Role operations
    async def get_default_role(self) -> Role | None:
        """Get the role flagged as default for new signups."""
        for role in self._rows.roles.values():
            if role.is_default:
                return role
        return None

    async def get_role_with_permissions(self, role_id: UUID) -> RoleWithPermissions | None:
        """Get a role and its currently attached permissions."""
        role = self._rows.roles.get(role_id)
        if role is None:
            return None
        return RoleWithPermissions(**role.model_dump(), permissions=self._granted(role_id))

    def _granted(self, role_id: UUID) -> list[Permission]:
        granted = [
            self._rows.permissions[pid]
            for pid in self._rows.grants.get(role_id, frozenset())
            if pid in self._rows.permissions
        ]
        return sorted(granted, key=lambda p: (p.resource, p.action))

    async def list_roles(self) -> list[RoleSummary]:
        """List roles ordered by name, each with its permissions and user count."""
        counts: dict[UUID, int] = {}
        for user in self._rows.users.values():
            counts[user.role_id] = counts.get(user.role_id, 0) + 1
        return [
            RoleSummary(
                **role.model_dump(),
                permissions=self._granted(role.id),
                user_count=counts.get(role.id, 0),
            )
            for role in sorted(self._rows.roles.values(), key=lambda r: r.name)
        ]

    async def count_roles(self) -> int:
        """Count all roles."""
        return len(self._rows.roles)

    async def get_role_by_id(self, role_id: UUID) -> Role | None:
        """Get role by ID."""
        return self._rows.roles.get(role_id)

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get role by name, case-insensitively."""
        wanted = name.lower()
        for role in self._rows.roles.values():
            if role.name.lower() == wanted:
                return role
        return None

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        is_default: bool = False,
    ) -> Role:
        """Create a new role."""
        if await self.get_role_by_name(name) is not None:
            raise ValueError(f"duplicate role: {name}")
        role = Role(
            id=uuid4(),
            name=name,
            description=description,
            is_default=is_default,
            created_at=_now(),
        )
        self._rows.roles[role.id] = role
        self._rows.grants[role.id] = frozenset()
        return role

    # Permission operations
    async def list_permissions(self) -> list[Permission]:
        """List permissions ordered by (resource, action)."""
        return sorted(self._rows.permissions.values(), key=lambda p: (p.resource, p.action))

    async def count_permissions(self) -> int:
        """Count all permissions."""
        return len(self._rows.permissions)

    async def get_permission_by_pair(self, resource: str, action: str) -> Permission | None:
        """Get permission by its (resource, action) pair."""
        for permission in self._rows.permissions.values():
            if permission.resource == resource and permission.action == action:
                return permission
        return None

    async def create_permission(
        self,
        name: str,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> Permission:
        """Create a new permission."""
        if await self.get_permission_by_pair(resource, action) is not None:
            raise ValueError(f"duplicate permission: {resource}:{action}")
        permission = Permission(
            id=uuid4(),
            name=name,
            resource=resource,
            action=action,
            description=description,
        )
        self._rows.permissions[permission.id] = permission
        return permission

    async def replace_role_permissions(self, role_id: UUID, permission_ids: list[UUID]) -> None:
        """Swap in the new permission set for a role in one step."""
        if role_id not in self._rows.roles:
            raise KeyError(role_id)
        self._rows.grants[role_id] = frozenset(permission_ids)

    # Post operations
    def _with_author(self, post: Post) -> Post:
        author = self._rows.users.get(post.author_id)
        if author is None:
            return post
        return post.model_copy(
            update={
                "author": Author(
                    id=author.id,
                    name=author.name,
                    email=author.email,
                    avatar=author.avatar,
                )
            }
        )

    async def get_post(self, post_id: UUID) -> Post | None:
        """Get post by ID."""
        post = self._rows.posts.get(post_id)
        return self._with_author(post) if post is not None else None

    async def list_posts(
        self,
        offset: int,
        limit: int,
        author_id: UUID | None = None,
        status: PostStatus | None = None,
        order_by_published: bool = False,
    ) -> tuple[list[Post], int]:
        """List a page of posts and the total matching count."""
        matching = [
            post
            for post in self._rows.posts.values()
            if (author_id is None or post.author_id == author_id)
            and (status is None or post.status == status)
        ]
        ordered = self._newest_first(
            matching, "published_at" if order_by_published else "created_at"
        )
        page = ordered[offset : offset + limit]
        return [self._with_author(post) for post in page], len(matching)

    async def create_post(
        self,
        author_id: UUID,
        title: str,
        content: str,
        excerpt: str | None,
        status: PostStatus,
        published_at: datetime | None,
    ) -> Post:
        """Create a post."""
        if author_id not in self._rows.users:
            raise KeyError(author_id)
        post = Post(
            id=uuid4(),
            title=title,
            content=content,
            excerpt=excerpt,
            status=status,
            author_id=author_id,
            published_at=published_at,
            created_at=_now(),
        )
        self._rows.posts[post.id] = post
        self._stamp(post.id)
        return self._with_author(post)

    async def update_post(
        self,
        post_id: UUID,
        title: str,
        content: str,
        excerpt: str | None,
        status: PostStatus,
        published_at: datetime | None,
    ) -> Post | None:
        """Replace a post's editable fields."""
        return self._update_post(
            post_id,
            title=title,
            content=content,
            excerpt=excerpt,
            status=status,
            published_at=published_at,
        )

    async def update_post_status(
        self,
        post_id: UUID,
        status: PostStatus,
        published_at: datetime | None,
    ) -> Post | None:
        """Change only the status and publication timestamp of a post."""
        return self._update_post(post_id, status=status, published_at=published_at)

    def _update_post(self, post_id: UUID, **changes: object) -> Post | None:
        post = self._rows.posts.get(post_id)
        if post is None:
            return None
        updated = post.model_copy(update={**changes, "updated_at": _now()})
        self._rows.posts[post_id] = updated
        return self._with_author(updated)

    async def delete_post(self, post_id: UUID) -> bool:
        """Delete a post."""
        return self._rows.posts.pop(post_id, None) is not None
