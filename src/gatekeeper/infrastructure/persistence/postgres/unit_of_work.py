"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg import OperationalError
from psycopg_pool import AsyncConnectionPool, PoolTimeout

from gatekeeper.domain.exceptions import StoreUnavailable
from gatekeeper.infrastructure.persistence.postgres.audit_repository import (
    PostgresAuditRepository,
)
from gatekeeper.infrastructure.persistence.postgres.delegation_repository import (
    PostgresDelegationRepository,
)
from gatekeeper.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from gatekeeper.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)
from gatekeeper.infrastructure.persistence.postgres.user_repository import (
    PostgresUserRepository,
    PostgresUserRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._users = PostgresUserRepository(self._conn)
        self._user_roles = PostgresUserRoleRepository(self._conn)
        self._delegations = PostgresDelegationRepository(self._conn)
        self._audit_logs = PostgresAuditRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def users(self) -> PostgresUserRepository:
        return self._users

    @property
    def user_roles(self) -> PostgresUserRoleRepository:
        return self._user_roles

    @property
    def delegations(self) -> PostgresDelegationRepository:
        return self._delegations

    @property
    def audit_logs(self) -> PostgresAuditRepository:
        return self._audit_logs

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Connection failures and pool exhaustion surface as StoreUnavailable.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        try:
            async with uow:
                try:
                    yield uow
                    await uow.commit()
                except BaseException:
                    await uow.rollback()
                    raise
        except (OperationalError, PoolTimeout) as e:
            raise StoreUnavailable(f"Database unavailable: {e}") from e

    return factory
