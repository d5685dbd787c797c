"""PostgreSQL user and user-role repository implementations."""

from uuid import UUID

from psycopg import AsyncConnection
from psycopg.errors import UniqueViolation

from gatekeeper.domain.entities import Role, User, UserRole
from gatekeeper.domain.exceptions import DuplicateAssignment


class PostgresUserRepository:
    """User repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, user_id: str) -> User | None:
        cur = await self._conn.execute(
            "SELECT id, email, display_name, created_at FROM app_user WHERE id = %s",
            (user_id,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return User(id=r[0], email=r[1], display_name=r[2], created_at=r[3])

    async def exists(self, user_id: str) -> bool:
        cur = await self._conn.execute("SELECT 1 FROM app_user WHERE id = %s", (user_id,))
        return await cur.fetchone() is not None

    async def upsert(self, user: User) -> User:
        """Insert the user or refresh email and display name; created_at is kept."""
        cur = await self._conn.execute(
            "INSERT INTO app_user (id, email, display_name, created_at) "
            "VALUES (%s, %s, %s, %s) "
            "ON CONFLICT (id) DO UPDATE SET "
            "email = COALESCE(EXCLUDED.email, app_user.email), "
            "display_name = COALESCE(EXCLUDED.display_name, app_user.display_name) "
            "RETURNING id, email, display_name, created_at",
            (user.id, user.email, user.display_name, user.created_at),
        )
        r = await cur.fetchone()
        return User(id=r[0], email=r[1], display_name=r[2], created_at=r[3])


class PostgresUserRoleRepository:
    """Direct role assignments."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_roles_for_user(self, user_id: str) -> list[Role]:
        """Roles assigned directly to user."""
        cur = await self._conn.execute(
            "SELECT r.id, r.name, r.description, r.created_at "
            "FROM user_role ur JOIN role r ON r.id = ur.role_id "
            "WHERE ur.user_id = %s",
            (user_id,),
        )
        rows = await cur.fetchall()
        return [Role(id=r[0], name=r[1], description=r[2], created_at=r[3]) for r in rows]

    async def get(
        self, user_id: str, role_id: UUID, *, lock: bool = False
    ) -> UserRole | None:
        """Get assignment; lock takes a share lock so it cannot be deleted before commit."""
        sql = (
            "SELECT user_id, role_id, assigned_at, assigned_by FROM user_role "
            "WHERE user_id = %s AND role_id = %s"
        )
        if lock:
            sql += " FOR SHARE"
        cur = await self._conn.execute(sql, (user_id, role_id))
        r = await cur.fetchone()
        if not r:
            return None
        return UserRole(user_id=r[0], role_id=r[1], assigned_at=r[2], assigned_by=r[3])

    async def create(self, user_role: UserRole) -> UserRole:
        try:
            await self._conn.execute(
                "INSERT INTO user_role (user_id, role_id, assigned_at, assigned_by) "
                "VALUES (%s, %s, %s, %s)",
                (
                    user_role.user_id,
                    user_role.role_id,
                    user_role.assigned_at,
                    user_role.assigned_by,
                ),
            )
        except UniqueViolation as e:
            raise DuplicateAssignment("Role already assigned to user") from e
        return user_role

    async def delete(self, user_id: str, role_id: UUID) -> bool:
        cur = await self._conn.execute(
            "DELETE FROM user_role WHERE user_id = %s AND role_id = %s",
            (user_id, role_id),
        )
        return cur.rowcount > 0
