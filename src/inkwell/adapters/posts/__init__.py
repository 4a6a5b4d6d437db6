"""Post adapters."""

from inkwell.adapters.posts.postgres import PostgresPostRepository

__all__ = ["PostgresPostRepository"]
