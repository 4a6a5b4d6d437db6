"""Post domain types and forms."""

from datetime import datetime
from enum import Enum
from math import ceil
from uuid import UUID

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError


class PostStatus(str, Enum):
    """Publication state of a post."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Author(BaseModel):
    """Public author details embedded in a post."""

    id: UUID
    name: str
    email: str | None = None
    avatar: str | None = None


class Post(BaseModel):
    """A blog post."""

    id: UUID
    title: str
    content: str
    excerpt: str | None = None
    status: PostStatus = PostStatus.DRAFT
    author_id: UUID
    author: Author | None = None
    published_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None


class Pagination(BaseModel):
    """Pagination metadata for a page of results."""

    page: int
    limit: int
    total_count: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> "Pagination":
        """Compute metadata for ``page`` of size ``limit``."""
        total_pages = ceil(total_count / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total_count=total_count,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class PostPage(BaseModel):
    """A page of posts."""

    posts: list[Post]
    pagination: Pagination


class PostForm(BaseModel):
    """Create/update form for a post."""

    title: str
    content: str
    excerpt: str | None = None
    status: PostStatus = PostStatus.DRAFT

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        if len(v) < 3:
            raise PydanticCustomError("title_short", "Title must be at least 3 characters")
        if len(v) > 200:
            raise PydanticCustomError("title_long", "Title must be less than 200 characters")
        return v

    @field_validator("content")
    @classmethod
    def _content(cls, v: str) -> str:
        if len(v) < 10:
            raise PydanticCustomError("content_short", "Content must be at least 10 characters")
        return v

    @field_validator("excerpt")
    @classmethod
    def _excerpt(cls, v: str | None) -> str | None:
        if not v:
            return None
        if len(v) > 500:
            raise PydanticCustomError("excerpt_long", "Excerpt must be less than 500 characters")
        return v


def next_published_at(
    current: datetime | None,
    status: PostStatus,
    now: datetime,
) -> datetime | None:
    """Return the published timestamp after a status change.

    Set once, on the first transition to PUBLISHED, and never reset.
    """
    if current is not None:
        return current
    if status == PostStatus.PUBLISHED:
        return now
    return None
