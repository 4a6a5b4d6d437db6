"""PostgreSQL implementation of AuthRepository."""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from inkwell.adapters.db.app_db import AppDatabase, affected_rows
from inkwell.adapters.db.rows import row_to_permission, row_to_role, row_to_user
from inkwell.core.auth.types import Role, RoleWithPermissions, User, UserStatus

_ROLE_COLUMNS = """
    r.name AS role_name, r.description AS role_description,
    r.is_default AS role_is_default, r.created_at AS role_created_at
"""


class PostgresAuthRepository:
    """PostgreSQL implementation of auth repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    # User operations
    async def get_user_by_id(self, user_id: UUID) -> User | None:
        """Get user by ID."""
        row = await self._db.fetch_one(
            "SELECT * FROM users WHERE id = $1",
            user_id,
        )
        return row_to_user(row) if row else None

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by normalized email address."""
        row = await self._db.fetch_one(
            "SELECT * FROM users WHERE email = $1",
            email,
        )
        return row_to_user(row) if row else None

    async def create_user(
        self,
        email: str,
        name: str,
        password_hash: str,
        role_id: UUID,
        phone: str | None = None,
    ) -> User:
        """Create a new ACTIVE user bound to a role."""
        row = await self._db.fetch_one(
            """
            INSERT INTO users (email, name, password_hash, phone, status, role_id)
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
            """,
            email,
            name,
            password_hash,
            phone,
            UserStatus.ACTIVE.value,
            role_id,
        )
        assert row is not None, "INSERT RETURNING should always return a row"
        return row_to_user(row)

    async def list_users(self) -> list[tuple[User, Role]]:
        """List all users with their role, newest first."""
        rows = await self._db.fetch_all(
            f"""
            SELECT u.*, {_ROLE_COLUMNS}
            FROM users u
            JOIN roles r ON r.id = u.role_id
            ORDER BY u.created_at DESC
            """
        )
        return [(row_to_user(row), _joined_role(row)) for row in rows]

    async def update_user(
        self,
        user_id: UUID,
        name: str | None = None,
        phone: str | None = None,
        avatar: str | None = None,
        status: UserStatus | None = None,
        role_id: UUID | None = None,
    ) -> User | None:
        """Update user fields. Fields left as None are unchanged."""
        updates = []
        params: list[Any] = []
        param_idx = 1

        for column, value in (
            ("name", name),
            ("phone", phone),
            ("avatar", avatar),
            ("status", status.value if status is not None else None),
            ("role_id", role_id),
        ):
            if value is None:
                continue
            updates.append(f"{column} = ${param_idx}")
            params.append(value)
            param_idx += 1

        if not updates:
            return await self.get_user_by_id(user_id)

        updates.append(f"updated_at = ${param_idx}")
        params.append(datetime.now(UTC))
        param_idx += 1

        params.append(user_id)
        query = f"""
            UPDATE users SET {", ".join(updates)}
            WHERE id = ${param_idx}
            RETURNING *
        """
        row = await self._db.fetch_one(query, *params)
        return row_to_user(row) if row else None

    async def delete_user(self, user_id: UUID) -> bool:
        """Delete a user. Their posts go with them (ON DELETE CASCADE)."""
        status = await self._db.execute("DELETE FROM users WHERE id = $1", user_id)
        return affected_rows(status) > 0

    async def count_users(self) -> int:
        """Count all users."""
        return int(await self._db.fetch_value("SELECT COUNT(*) FROM users"))

    # Role lookups
    async def get_default_role(self) -> Role | None:
        """Get the role flagged as default for new signups."""
        row = await self._db.fetch_one(
            "SELECT * FROM roles WHERE is_default = true ORDER BY created_at LIMIT 1"
        )
        return row_to_role(row) if row else None

    async def get_role_with_permissions(self, role_id: UUID) -> RoleWithPermissions | None:
        """Get a role and its currently attached permissions."""
        row = await self._db.fetch_one(
            "SELECT * FROM roles WHERE id = $1",
            role_id,
        )
        if not row:
            return None

        perm_rows = await self._db.fetch_all(
            """
            SELECT p.*
            FROM permissions p
            JOIN role_permissions rp ON rp.permission_id = p.id
            WHERE rp.role_id = $1
            ORDER BY p.resource, p.action
            """,
            role_id,
        )
        role = row_to_role(row)
        return RoleWithPermissions(
            **role.model_dump(),
            permissions=[row_to_permission(p) for p in perm_rows],
        )


def _joined_role(row: dict[str, Any]) -> Role:
    return Role(
        id=row["role_id"],
        name=row["role_name"],
        description=row.get("role_description"),
        is_default=row.get("role_is_default", False),
        created_at=row.get("role_created_at"),
    )
