"""Posts domain."""

from inkwell.core.posts.repository import PostRepository
from inkwell.core.posts.service import PostService
from inkwell.core.posts.types import (
    Author,
    Pagination,
    Post,
    PostForm,
    PostPage,
    PostStatus,
    next_published_at,
)

__all__ = [
    "Author",
    "Pagination",
    "Post",
    "PostForm",
    "PostPage",
    "PostRepository",
    "PostService",
    "PostStatus",
    "next_published_at",
]
