"""PostgreSQL implementation of RbacRepository."""

from collections import defaultdict
from uuid import UUID

from inkwell.adapters.db.app_db import AppDatabase
from inkwell.adapters.db.rows import row_to_permission, row_to_role
from inkwell.core.auth.types import Permission, Role
from inkwell.core.rbac.types import RoleSummary


class PostgresRbacRepository:
    """PostgreSQL implementation of RBAC repository."""

    def __init__(self, db: AppDatabase) -> None:
        """Initialize with database connection.

        Args:
            db: Application database instance.
        """
        self._db = db

    # Role operations
    async def list_roles(self) -> list[RoleSummary]:
        """List roles ordered by name, each with its permissions and user count."""
        role_rows = await self._db.fetch_all(
            """
            SELECT r.*, COUNT(u.id) AS user_count
            FROM roles r
            LEFT JOIN users u ON u.role_id = r.id
            GROUP BY r.id
            ORDER BY r.name
            """
        )
        grant_rows = await self._db.fetch_all(
            """
            SELECT rp.role_id AS granted_to, p.*
            FROM role_permissions rp
            JOIN permissions p ON p.id = rp.permission_id
            ORDER BY p.resource, p.action
            """
        )

        grants: dict[UUID, list[Permission]] = defaultdict(list)
        for row in grant_rows:
            grants[row["granted_to"]].append(row_to_permission(row))

        return [
            RoleSummary(
                **row_to_role(row).model_dump(),
                permissions=grants.get(row["id"], []),
                user_count=row["user_count"],
            )
            for row in role_rows
        ]

    async def count_roles(self) -> int:
        """Count all roles."""
        return int(await self._db.fetch_value("SELECT COUNT(*) FROM roles"))

    async def get_role_by_id(self, role_id: UUID) -> Role | None:
        """Get role by ID."""
        row = await self._db.fetch_one(
            "SELECT * FROM roles WHERE id = $1",
            role_id,
        )
        return row_to_role(row) if row else None

    async def get_role_by_name(self, name: str) -> Role | None:
        """Get role by name, case-insensitively."""
        row = await self._db.fetch_one(
            "SELECT * FROM roles WHERE lower(name) = lower($1)",
            name,
        )
        return row_to_role(row) if row else None

    async def create_role(
        self,
        name: str,
        description: str | None = None,
        is_default: bool = False,
    ) -> Role:
        """Create a new role."""
        row = await self._db.fetch_one(
            """
            INSERT INTO roles (name, description, is_default)
            VALUES ($1, $2, $3)
            RETURNING *
            """,
            name,
            description,
            is_default,
        )
        assert row is not None, "INSERT RETURNING should always return a row"
        return row_to_role(row)

    # Permission operations
    async def list_permissions(self) -> list[Permission]:
        """List permissions ordered by (resource, action)."""
        rows = await self._db.fetch_all("SELECT * FROM permissions ORDER BY resource, action")
        return [row_to_permission(row) for row in rows]

    async def count_permissions(self) -> int:
        """Count all permissions."""
        return int(await self._db.fetch_value("SELECT COUNT(*) FROM permissions"))

    async def get_permission_by_pair(self, resource: str, action: str) -> Permission | None:
        """Get permission by its (resource, action) pair."""
        row = await self._db.fetch_one(
            "SELECT * FROM permissions WHERE resource = $1 AND action = $2",
            resource,
            action,
        )
        return row_to_permission(row) if row else None

    async def create_permission(
        self,
        name: str,
        resource: str,
        action: str,
        description: str | None = None,
    ) -> Permission:
        """Create a new permission."""
        row = await self._db.fetch_one(
            """
            INSERT INTO permissions (name, resource, action, description)
            VALUES ($1, $2, $3, $4)
            RETURNING *
            """,
            name,
            resource,
            action,
            description,
        )
        assert row is not None, "INSERT RETURNING should always return a row"
        return row_to_permission(row)

    async def replace_role_permissions(self, role_id: UUID, permission_ids: list[UUID]) -> None:
        """Replace the full permission set of a role in one transaction.

        Concurrent replacements serialize on the role row; the last
        committed set wins and no request ever observes a partial set.
        """
        async with self._db.transaction() as conn:
            await conn.execute("SELECT id FROM roles WHERE id = $1 FOR UPDATE", role_id)
            await conn.execute("DELETE FROM role_permissions WHERE role_id = $1", role_id)
            if permission_ids:
                await conn.executemany(
                    "INSERT INTO role_permissions (role_id, permission_id) VALUES ($1, $2)",
                    [(role_id, pid) for pid in permission_ids],
                )
