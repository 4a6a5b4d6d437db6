"""PostgreSQL implementation of PostRepository."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from inkwell.adapters.db.app_db import AppDatabase, affected_rows
from inkwell.adapters.db.rows import row_to_post
from inkwell.core.posts.types import Post, PostStatus

_SELECT_POST = """
    SELECT p.*, u.name AS author_name, u.email AS author_email, u.avatar AS author_avatar
    FROM posts p
    JOIN users u ON u.id = p.author_id
"""


class PostgresPostRepository:
    """PostgreSQL implementation of post repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    async def get_post(self, post_id: UUID) -> Post | None:
        """Get post by ID."""
        row = await self._db.fetch_one(f"{_SELECT_POST} WHERE p.id = $1", post_id)
        return row_to_post(row) if row else None

    async def list_posts(
        self,
        offset: int,
        limit: int,
        author_id: UUID | None = None,
        status: PostStatus | None = None,
        order_by_published: bool = False,
    ) -> tuple[list[Post], int]:
        """List a page of posts and the total matching count."""
        conditions = []
        params: list[Any] = []

        if author_id is not None:
            params.append(author_id)
            conditions.append(f"p.author_id = ${len(params)}")
        if status is not None:
            params.append(status.value)
            conditions.append(f"p.status = ${len(params)}")

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        order = "p.published_at DESC NULLS LAST" if order_by_published else "p.created_at DESC"

        total = await self._db.fetch_value(f"SELECT COUNT(*) FROM posts p {where}", *params)
        rows = await self._db.fetch_all(
            f"""
            {_SELECT_POST}
            {where}
            ORDER BY {order}
            LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
            """,
            *params,
            limit,
            offset,
        )
        return [row_to_post(row) for row in rows], int(total or 0)

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
        row = await self._db.fetch_one(
            """
            INSERT INTO posts (title, content, excerpt, status, author_id, published_at)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING id
            """,
            title,
            content,
            excerpt,
            status.value,
            author_id,
            published_at,
        )
        assert row is not None, "INSERT RETURNING should always return a row"
        post = await self.get_post(row["id"])
        assert post is not None, "Created post should be readable"
        return post

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
        row = await self._db.fetch_one(
            """
            UPDATE posts
            SET title = $1, content = $2, excerpt = $3, status = $4,
                published_at = $5, updated_at = $6
            WHERE id = $7
            RETURNING id
            """,
            title,
            content,
            excerpt,
            status.value,
            published_at,
            datetime.now(UTC),
            post_id,
        )
        return await self.get_post(row["id"]) if row else None

    async def update_post_status(
        self,
        post_id: UUID,
        status: PostStatus,
        published_at: datetime | None,
    ) -> Post | None:
        """Change only the status and publication timestamp of a post."""
        row = await self._db.fetch_one(
            """
            UPDATE posts SET status = $1, published_at = $2, updated_at = $3
            WHERE id = $4
            RETURNING id
            """,
            status.value,
            published_at,
            datetime.now(UTC),
            post_id,
        )
        return await self.get_post(row["id"]) if row else None

    async def delete_post(self, post_id: UUID) -> bool:
        """Delete a post."""
        status = await self._db.execute("DELETE FROM posts WHERE id = $1", post_id)
        return affected_rows(status) > 0
