"""Post management.

Reading and writing other people's posts requires the elevated
``posts:<action>`` permission; authors can always manage their own posts.
Both rules go through ``RequestContext.can_act_on_owned``.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any
from uuid import UUID

import structlog
from pydantic import TypeAdapter, ValidationError

from inkwell.core.posts.repository import PostRepository
from inkwell.core.posts.types import (
    Pagination,
    Post,
    PostForm,
    PostPage,
    PostStatus,
    next_published_at,
)
from inkwell.core.results import (
    ErrorKind,
    Failure,
    Result,
    Success,
    not_found,
    permission_denied,
    store_failure,
)
from inkwell.core.validation import validate_form

if TYPE_CHECKING:
    from inkwell.core.auth.context import RequestContext

logger = structlog.get_logger()

PUBLIC_PAGE_SIZE = 12
DASHBOARD_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_uuid = TypeAdapter(UUID)
_status = TypeAdapter(PostStatus)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _page_bounds(page: int, limit: int) -> tuple[int, int]:
    page = max(1, int(page))
    limit = min(max(1, int(limit)), MAX_PAGE_SIZE)
    return page, limit


class PostService:
    """Service for blog posts."""

    def __init__(
        self,
        repo: PostRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize with post repository.

        Args:
            repo: Repository for post storage.
            clock: Source of the current time, used for ``published_at``.
        """
        self._repo = repo
        self._clock = clock

    async def _load(self, post_id: Any) -> Post | Failure:
        try:
            pid = _uuid.validate_python(post_id)
        except ValidationError:
            return not_found("Post not found")
        try:
            post = await self._repo.get_post(pid)
        except Exception:
            logger.exception("get_post_failed", post_id=str(pid))
            return store_failure("Failed to get post")
        return post if post is not None else not_found("Post not found")

    async def list_published(
        self,
        page: int = 1,
        limit: int = PUBLIC_PAGE_SIZE,
    ) -> Result[PostPage]:
        """List published posts, most recently published first. Public."""
        page, limit = _page_bounds(page, limit)
        try:
            posts, total = await self._repo.list_posts(
                offset=(page - 1) * limit,
                limit=limit,
                status=PostStatus.PUBLISHED,
                order_by_published=True,
            )
        except Exception:
            logger.exception("list_published_failed", page=page)
            return store_failure("Failed to get posts")

        return Success(PostPage(posts=posts, pagination=Pagination.build(page, limit, total)))

    async def list_for_dashboard(
        self,
        ctx: RequestContext,
        page: int = 1,
        limit: int = DASHBOARD_PAGE_SIZE,
    ) -> Result[PostPage]:
        """List posts for the dashboard.

        Users holding ``posts:read`` see every post; everyone else sees
        only their own.
        """
        user = await ctx.require_user()
        if isinstance(user, Failure):
            return user

        show_all = await ctx.has_permission("posts", "read")
        page, limit = _page_bounds(page, limit)
        try:
            posts, total = await self._repo.list_posts(
                offset=(page - 1) * limit,
                limit=limit,
                author_id=None if show_all else user.id,
            )
        except Exception:
            logger.exception("list_dashboard_posts_failed", user_id=str(user.id))
            return store_failure("Failed to get posts")

        return Success(PostPage(posts=posts, pagination=Pagination.build(page, limit, total)))

    async def get_published_post(self, post_id: Any) -> Result[Post]:
        """Get a published post. Public; drafts and archived posts are NOT_FOUND."""
        post = await self._load(post_id)
        if isinstance(post, Failure):
            return post
        if post.status != PostStatus.PUBLISHED:
            return not_found("Post not found")
        return Success(post)

    async def get_post(self, ctx: RequestContext, post_id: Any) -> Result[Post]:
        """Get a single post.

        Readable when published, when owned by the user, or with ``posts:read``.
        """
        user = await ctx.require_user()
        if isinstance(user, Failure):
            return user

        post = await self._load(post_id)
        if isinstance(post, Failure):
            return post

        if post.status == PostStatus.PUBLISHED:
            return Success(post)
        if not await ctx.can_act_on_owned(post.author_id, "posts", "read"):
            return permission_denied()
        return Success(post)

    async def create_post(
        self,
        ctx: RequestContext,
        title: Any,
        content: Any,
        excerpt: Any = None,
        status: Any = None,
    ) -> Result[Post]:
        """Create a post authored by the current user. Requires ``posts:create``."""
        user = await ctx.require_permission("posts", "create")
        if isinstance(user, Failure):
            return user

        form = validate_form(
            PostForm,
            {
                "title": title,
                "content": content,
                "excerpt": excerpt or None,
                "status": status or PostStatus.DRAFT,
            },
            message="Validation failed",
        )
        if isinstance(form, Failure):
            return form

        try:
            post = await self._repo.create_post(
                author_id=user.id,
                title=form.title,
                content=form.content,
                excerpt=form.excerpt,
                status=form.status,
                published_at=next_published_at(None, form.status, self._clock()),
            )
        except Exception:
            logger.exception("create_post_failed", user_id=str(user.id))
            return store_failure("Failed to create post")

        logger.info("post_created", post_id=str(post.id), user_id=str(user.id))
        return Success(post)

    async def update_post(
        self,
        ctx: RequestContext,
        post_id: Any,
        title: Any,
        content: Any,
        excerpt: Any = None,
        status: Any = None,
    ) -> Result[Post]:
        """Edit a post. Allowed for its author or with ``posts:update``."""
        user = await ctx.require_user()
        if isinstance(user, Failure):
            return user

        post = await self._load(post_id)
        if isinstance(post, Failure):
            return post

        if not await ctx.can_act_on_owned(post.author_id, "posts", "update"):
            return permission_denied()

        form = validate_form(
            PostForm,
            {
                "title": title,
                "content": content,
                "excerpt": excerpt or None,
                "status": status or post.status,
            },
            message="Validation failed",
        )
        if isinstance(form, Failure):
            return form

        try:
            updated = await self._repo.update_post(
                post.id,
                title=form.title,
                content=form.content,
                excerpt=form.excerpt,
                status=form.status,
                published_at=next_published_at(post.published_at, form.status, self._clock()),
            )
        except Exception:
            logger.exception("update_post_failed", post_id=str(post.id))
            return store_failure("Failed to update post")

        if updated is None:
            return not_found("Post not found")

        logger.info("post_updated", post_id=str(post.id), user_id=str(user.id))
        return Success(updated)

    async def update_post_status(
        self,
        ctx: RequestContext,
        post_id: Any,
        status: Any,
    ) -> Result[Post]:
        """Change a post's status. Allowed for its author or with ``posts:update``."""
        user = await ctx.require_user()
        if isinstance(user, Failure):
            return user

        post = await self._load(post_id)
        if isinstance(post, Failure):
            return post

        if not await ctx.can_act_on_owned(post.author_id, "posts", "update"):
            return permission_denied()

        try:
            new_status = _status.validate_python(status)
        except ValidationError:
            return Failure(ErrorKind.VALIDATION, "Invalid status", {"status": ["Invalid status"]})

        try:
            updated = await self._repo.update_post_status(
                post.id,
                status=new_status,
                published_at=next_published_at(post.published_at, new_status, self._clock()),
            )
        except Exception:
            logger.exception("update_post_status_failed", post_id=str(post.id))
            return store_failure("Failed to update post status")

        if updated is None:
            return not_found("Post not found")

        logger.info(
            "post_status_changed",
            post_id=str(post.id),
            status=new_status.value,
            user_id=str(user.id),
        )
        return Success(updated)

    async def delete_post(self, ctx: RequestContext, post_id: Any) -> Result[None]:
        """Delete a post. Allowed for its author or with ``posts:delete``."""
        user = await ctx.require_user()
        if isinstance(user, Failure):
            return user

        post = await self._load(post_id)
        if isinstance(post, Failure):
            return post

        if not await ctx.can_act_on_owned(post.author_id, "posts", "delete"):
            return permission_denied()

        try:
            deleted = await self._repo.delete_post(post.id)
        except Exception:
            logger.exception("delete_post_failed", post_id=str(post.id))
            return store_failure("Failed to delete post")

        if not deleted:
            return not_found("Post not found")

        logger.info("post_deleted", post_id=str(post.id), user_id=str(user.id))
        return Success(None)
