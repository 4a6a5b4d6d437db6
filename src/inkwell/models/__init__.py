"""SQLAlchemy models describing the application database."""

from inkwell.models.base import BaseModel, metadata
from inkwell.models.post import Post
from inkwell.models.role import Permission, Role, role_permissions
from inkwell.models.user import User

__all__ = [
    "BaseModel",
    "metadata",
    "User",
    "Role",
    "Permission",
    "role_permissions",
    "Post",
]
