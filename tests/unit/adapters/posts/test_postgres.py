"""Unit tests for PostgresPostRepository."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from inkwell.adapters.posts.postgres import PostgresPostRepository
from inkwell.core.posts.types import PostStatus

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def _post_row(**overrides):
    row = {
        "id": uuid4(),
        "title": "Hello",
        "content": "Some content",
        "excerpt": None,
        "status": "PUBLISHED",
        "author_id": uuid4(),
        "author_name": "Ann",
        "author_email": "ann@example.com",
        "author_avatar": None,
        "published_at": NOW,
        "created_at": NOW,
        "updated_at": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def db() -> MagicMock:
    """Return a mock AppDatabase."""
    db = MagicMock()
    db.fetch_one = AsyncMock(return_value=None)
    db.fetch_all = AsyncMock(return_value=[])
    db.fetch_value = AsyncMock(return_value=0)
    db.execute = AsyncMock(return_value="DELETE 0")
    return db


@pytest.fixture
def repo(db: MagicMock) -> PostgresPostRepository:
    """Return a repository over the mock database."""
    return PostgresPostRepository(db)


class TestPostgresPostRepository:
    """Tests for PostgresPostRepository."""

    async def test_get_post_with_author(self, repo: PostgresPostRepository, db: MagicMock) -> None:
        """The joined author columns become the author."""
        db.fetch_one.return_value = _post_row()

        post = await repo.get_post(uuid4())

        assert post is not None
        assert post.status == PostStatus.PUBLISHED
        assert post.author is not None
        assert post.author.name == "Ann"

    async def test_list_posts_filters(self, repo: PostgresPostRepository, db: MagicMock) -> None:
        """Filters become numbered parameters followed by limit and offset."""
        author_id = uuid4()
        db.fetch_value.return_value = 3
        db.fetch_all.return_value = [_post_row(author_id=author_id)]

        posts, total = await repo.list_posts(
            offset=10, limit=5, author_id=author_id, status=PostStatus.DRAFT
        )

        assert total == 3
        assert len(posts) == 1
        count_query, *count_params = db.fetch_value.call_args.args
        assert "p.author_id = $1 AND p.status = $2" in count_query
        assert count_params == [author_id, "DRAFT"]
        query, *params = db.fetch_all.call_args.args
        assert "LIMIT $3 OFFSET $4" in query
        assert "p.created_at DESC" in query
        assert params == [author_id, "DRAFT", 5, 10]

    async def test_list_posts_by_publication(
        self, repo: PostgresPostRepository, db: MagicMock
    ) -> None:
        """Public listings order by publication date."""
        await repo.list_posts(offset=0, limit=12, order_by_published=True)

        query, *params = db.fetch_all.call_args.args
        assert "WHERE" not in query.split("JOIN users")[1]
        assert "published_at DESC NULLS LAST" in query
        assert params == [12, 0]

    async def test_create_post_rereads(self, repo: PostgresPostRepository, db: MagicMock) -> None:
        """The created post is re-read with its author."""
        row = _post_row(status="DRAFT", published_at=None)
        db.fetch_one.side_effect = [{"id": row["id"]}, row]

        post = await repo.create_post(
            row["author_id"], "Hello", "Some content", None, PostStatus.DRAFT, None
        )

        assert post.id == row["id"]
        assert db.fetch_one.await_count == 2

    async def test_update_missing_post(self, repo: PostgresPostRepository) -> None:
        """Updating an unknown post returns None."""
        result = await repo.update_post(uuid4(), "T", "C", None, PostStatus.DRAFT, None)

        assert result is None

    async def test_update_status(self, repo: PostgresPostRepository, db: MagicMock) -> None:
        """Only status and timestamps are written."""
        row = _post_row(status="ARCHIVED")
        db.fetch_one.side_effect = [{"id": row["id"]}, row]

        post = await repo.update_post_status(row["id"], PostStatus.ARCHIVED, NOW)

        assert post is not None
        assert post.status == PostStatus.ARCHIVED
        query = db.fetch_one.call_args_list[0].args[0]
        assert "SET status = $1, published_at = $2" in query
        assert "title" not in query

    async def test_delete_post(self, repo: PostgresPostRepository, db: MagicMock) -> None:
        """Should report whether a row was removed."""
        db.execute.return_value = "DELETE 1"

        assert await repo.delete_post(uuid4()) is True
