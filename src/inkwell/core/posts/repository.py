"""Post repository protocol."""

from datetime import datetime
from typing import Protocol, runtime_checkable
from uuid import UUID

from inkwell.core.posts.types import Post, PostStatus


@runtime_checkable
class PostRepository(Protocol):
    """Protocol for post storage. Returned posts include their author."""

    async def get_post(self, post_id: UUID) -> Post | None:
        """Get post by ID."""
        ...

    async def list_posts(
        self,
        offset: int,
        limit: int,
        author_id: UUID | None = None,
        status: PostStatus | None = None,
        order_by_published: bool = False,
    ) -> tuple[list[Post], int]:
        """List a page of posts and the total matching count.

        Filters are combined; ordering is newest ``created_at`` first, or
        newest ``published_at`` first when ``order_by_published`` is set.
        """
        ...

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
        ...

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
        ...

    async def update_post_status(
        self,
        post_id: UUID,
        status: PostStatus,
        published_at: datetime | None,
    ) -> Post | None:
        """Change only the status and publication timestamp of a post."""
        ...

    async def delete_post(self, post_id: UUID) -> bool:
        """Delete a post. Returns False when no such post exists."""
        ...
