"""Post model."""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from inkwell.models.base import BaseModel

if TYPE_CHECKING:
    from inkwell.models.user import User


class Post(BaseModel):
    """A blog post owned by its author."""

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    excerpt: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="DRAFT", nullable=False)
    author_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # Set on first publish, never reset
    published_at: Mapped[datetime | None] = mapped_column(nullable=True)

    author: Mapped["User"] = relationship("User", back_populates="posts")

    __table_args__ = (
        Index("ix_posts_status_published_at", "status", "published_at"),
        Index("ix_posts_author_id", "author_id"),
    )
