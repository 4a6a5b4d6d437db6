"""Row to domain model conversion shared by the PostgreSQL repositories."""

from typing import Any

from inkwell.core.auth.types import Permission, Role, User, UserStatus
from inkwell.core.posts.types import Author, Post, PostStatus


def row_to_user(row: dict[str, Any]) -> User:
    """Convert a ``users`` row to a User model."""
    return User(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        phone=row.get("phone"),
        avatar=row.get("avatar"),
        password_hash=row["password_hash"],
        status=UserStatus(row.get("status", UserStatus.ACTIVE.value)),
        role_id=row["role_id"],
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )


def row_to_role(row: dict[str, Any]) -> Role:
    """Convert a ``roles`` row to a Role model."""
    return Role(
        id=row["id"],
        name=row["name"],
        description=row.get("description"),
        is_default=row.get("is_default", False),
        created_at=row.get("created_at"),
    )


def row_to_permission(row: dict[str, Any]) -> Permission:
    """Convert a ``permissions`` row to a Permission model."""
    return Permission(
        id=row["id"],
        name=row["name"],
        resource=row["resource"],
        action=row["action"],
        description=row.get("description"),
    )


def row_to_post(row: dict[str, Any]) -> Post:
    """Convert a ``posts`` row joined with its author to a Post model."""
    author = None
    if row.get("author_name") is not None:
        author = Author(
            id=row["author_id"],
            name=row["author_name"],
            email=row.get("author_email"),
            avatar=row.get("author_avatar"),
        )
    return Post(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        excerpt=row.get("excerpt"),
        status=PostStatus(row["status"]),
        author_id=row["author_id"],
        author=author,
        published_at=row.get("published_at"),
        created_at=row["created_at"],
        updated_at=row.get("updated_at"),
    )
