"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from gatekeeper.domain.entities import Permission
from gatekeeper.domain.exceptions import DuplicateAssignment

PERMISSION_COLUMNS = "id, name, resource_type, action, description, created_at"


def row_to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        name=r[1],
        resource_type=r[2],
        action=r[3],
        description=r[4],
        created_at=r[5],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return row_to_permission(r) if r else None

    async def get_by_name(self, name: str) -> Permission | None:
        """Get permission by unique name."""
        cur = await self._conn.execute(
            f"SELECT {PERMISSION_COLUMNS} FROM permission WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        return row_to_permission(r) if r else None

    async def list_all(self, resource_type: str | None = None) -> list[Permission]:
        """List permissions, optionally for one resource type."""
        if resource_type:
            cur = await self._conn.execute(
                f"SELECT {PERMISSION_COLUMNS} FROM permission "
                "WHERE resource_type = %s ORDER BY name",
                (resource_type,),
            )
        else:
            cur = await self._conn.execute(
                f"SELECT {PERMISSION_COLUMNS} FROM permission ORDER BY name"
            )
        return [row_to_permission(r) for r in await cur.fetchall()]

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        try:
            await self._conn.execute(
                "INSERT INTO permission (id, name, resource_type, action, description, created_at) "
                "VALUES (%s, %s, %s, %s, %s, %s)",
                (
                    permission.id,
                    permission.name,
                    permission.resource_type,
                    permission.action,
                    permission.description,
                    permission.created_at,
                ),
            )
        except UniqueViolation as e:
            raise DuplicateAssignment(f"Permission {permission.name!r} already exists") from e
        return permission
