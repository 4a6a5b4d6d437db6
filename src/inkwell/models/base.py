"""Declarative base for the blog tables."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import DateTime, MetaData, func, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, registry

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)

# Every datetime column is stored timezone-aware (UTC)
mapper_registry = registry(
    metadata=metadata,
    type_annotation_map={datetime: DateTime(timezone=True)},
)


class BaseModel(DeclarativeBase):
    """Abstract table with a UUID key and creation/update timestamps."""

    registry = mapper_registry
    metadata = metadata

    __abstract__ = True

    # Filled in by the database when an INSERT omits it.
    id: Mapped[UUID] = mapped_column(
        primary_key=True,
        default=uuid4,
        server_default=text("gen_random_uuid()"),
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime | None] = mapped_column(onupdate=func.now())
