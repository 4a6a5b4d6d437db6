"""Unit tests for AppDatabase."""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from inkwell.adapters.db.app_db import AppDatabase, affected_rows


class TestAppDatabase:
    """Tests for AppDatabase."""

    @pytest.fixture
    def mock_conn(self) -> MagicMock:
        """Return a mock connection with a transaction context."""
        conn = MagicMock()
        conn.fetchrow = AsyncMock()
        conn.fetch = AsyncMock()
        conn.fetchval = AsyncMock()
        conn.execute = AsyncMock()
        conn.events = []

        @asynccontextmanager
        async def transaction():
            conn.events.append("begin")
            try:
                yield
            except Exception:
                conn.events.append("rollback")
                raise
            conn.events.append("commit")

        conn.transaction = transaction
        return conn

    @pytest.fixture
    def db(self, mock_conn: MagicMock) -> AppDatabase:
        """Return an AppDatabase with a mocked pool."""
        db = AppDatabase("postgresql://user:pw@localhost:5432/inkwell")

        mock_pool = MagicMock()

        @asynccontextmanager
        async def mock_acquire():
            yield mock_conn

        mock_pool.acquire = mock_acquire
        mock_pool.close = AsyncMock()
        db.pool = mock_pool
        return db

    async def test_connect_creates_pool(self) -> None:
        """Test that connect creates a connection pool."""
        db = AppDatabase("postgresql://localhost:5432/inkwell")
        mock_pool = MagicMock()

        with patch(
            "inkwell.adapters.db.app_db.asyncpg.create_pool",
            AsyncMock(return_value=mock_pool),
        ):
            await db.connect()

        assert db.pool is mock_pool

    async def test_close(self, db: AppDatabase) -> None:
        """Test that close closes the pool."""
        pool = db.pool
        await db.close()

        pool.close.assert_awaited_once()  # type: ignore[union-attr]

    async def test_acquire_raises_without_pool(self) -> None:
        """Test that queries fail before connect."""
        db = AppDatabase("postgresql://localhost:5432/inkwell")

        with pytest.raises(RuntimeError, match="not initialized"):
            await db.fetch_one("SELECT 1")

    async def test_fetch_one(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test fetch_one converts the record to a dict."""
        mock_conn.fetchrow.return_value = {"id": 1}

        assert await db.fetch_one("SELECT 1") == {"id": 1}

    async def test_fetch_one_none(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test fetch_one returns None for no row."""
        mock_conn.fetchrow.return_value = None

        assert await db.fetch_one("SELECT 1") is None

    async def test_fetch_all(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test fetch_all converts every record."""
        mock_conn.fetch.return_value = [{"id": 1}, {"id": 2}]

        assert await db.fetch_all("SELECT 1") == [{"id": 1}, {"id": 2}]

    async def test_fetch_value(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test fetch_value passes arguments through."""
        mock_conn.fetchval.return_value = 7

        assert await db.fetch_value("SELECT COUNT(*) FROM posts WHERE x = $1", "a") == 7
        mock_conn.fetchval.assert_awaited_once_with(
            "SELECT COUNT(*) FROM posts WHERE x = $1", "a"
        )

    async def test_transaction_commits(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test a clean block commits."""
        async with db.transaction() as conn:
            await conn.execute("DELETE FROM role_permissions")

        assert mock_conn.events == ["begin", "commit"]

    async def test_transaction_rolls_back(self, db: AppDatabase, mock_conn: MagicMock) -> None:
        """Test an exception rolls the block back and propagates."""
        with pytest.raises(ValueError):
            async with db.transaction():
                raise ValueError("boom")

        assert mock_conn.events == ["begin", "rollback"]


class TestAffectedRows:
    """Tests for affected_rows."""

    @pytest.mark.parametrize(
        ("status", "expected"),
        [("DELETE 1", 1), ("DELETE 0", 0), ("UPDATE 12", 12), ("", 0)],
    )
    def test_parse(self, status: str, expected: int) -> None:
        """Test parsing command status strings."""
        assert affected_rows(status) == expected
