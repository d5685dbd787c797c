"""PostgreSQL role repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from gatekeeper.domain.entities import Permission, Role
from gatekeeper.domain.exceptions import DuplicateAssignment
from gatekeeper.infrastructure.persistence.postgres.permission_repository import (
    row_to_permission,
)


class PostgresRoleRepository:
    """Role repository implementation, including role_permission links."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            "SELECT id, name, description, created_at FROM role WHERE id = %s",
            (role_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Role(id=r[0], name=r[1], description=r[2], created_at=r[3])

    async def get_by_name(self, name: str) -> Role | None:
        """Get role by name."""
        cur = await self._conn.execute(
            "SELECT id, name, description, created_at FROM role WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return Role(id=r[0], name=r[1], description=r[2], created_at=r[3])

    async def list_all(self) -> list[Role]:
        """List all roles."""
        cur = await self._conn.execute(
            "SELECT id, name, description, created_at FROM role ORDER BY name"
        )
        rows = await cur.fetchall()
        return [Role(id=r[0], name=r[1], description=r[2], created_at=r[3]) for r in rows]

    async def create(self, role: Role) -> Role:
        """Create role."""
        try:
            await self._conn.execute(
                "INSERT INTO role (id, name, description, created_at) VALUES (%s, %s, %s, %s)",
                (role.id, role.name, role.description, role.created_at),
            )
        except UniqueViolation as e:
            raise DuplicateAssignment(f"Role {role.name!r} already exists") from e
        return role

    async def get_permissions(self, role_id: UUID) -> list[Permission]:
        """Get permissions granted by role."""
        cur = await self._conn.execute(
            "SELECT p.id, p.name, p.resource_type, p.action, p.description, p.created_at "
            "FROM role_permission rp JOIN permission p ON p.id = rp.permission_id "
            "WHERE rp.role_id = %s",
            (role_id,),
        )
        return [row_to_permission(r) for r in await cur.fetchall()]

    async def has_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        cur = await self._conn.execute(
            "SELECT 1 FROM role_permission WHERE role_id = %s AND permission_id = %s",
            (role_id, permission_id),
        )
        return await cur.fetchone() is not None

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        try:
            await self._conn.execute(
                "INSERT INTO role_permission (role_id, permission_id) VALUES (%s, %s)",
                (role_id, permission_id),
            )
        except UniqueViolation as e:
            raise DuplicateAssignment("Permission already assigned to role") from e

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        cur = await self._conn.execute(
            "DELETE FROM role_permission WHERE role_id = %s AND permission_id = %s",
            (role_id, permission_id),
        )
        return cur.rowcount > 0
