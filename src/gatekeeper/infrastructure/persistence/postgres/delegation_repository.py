"""PostgreSQL delegation repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from gatekeeper.application.dto.delegation_stats import DelegationStats
from gatekeeper.domain.entities import Delegation, DelegationEndReason

DELEGATION_COLUMNS = (
    "id, delegator_id, delegatee_id, role_id, created_at, expires_at, revoked_at, end_reason"
)


def row_to_delegation(r: tuple) -> Delegation:
    return Delegation(
        id=r[0],
        delegator_id=r[1],
        delegatee_id=r[2],
        role_id=r[3],
        created_at=r[4],
        expires_at=r[5],
        revoked_at=r[6],
        end_reason=DelegationEndReason(r[7]) if r[7] else None,
    )


class PostgresDelegationRepository:
    """Delegation repository. Conditional updates make revocation and expiry race-safe."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, delegation_id: UUID) -> Delegation | None:
        cur = await self._conn.execute(
            f"SELECT {DELEGATION_COLUMNS} FROM permission_delegation WHERE id = %s",
            (delegation_id,),
        )
        r = await cur.fetchone()
        return row_to_delegation(r) if r else None

    async def create(self, delegation: Delegation) -> Delegation:
        await self._conn.execute(
            "INSERT INTO permission_delegation "
            "(id, delegator_id, delegatee_id, role_id, created_at, expires_at, revoked_at, end_reason) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s)",
            (
                delegation.id,
                delegation.delegator_id,
                delegation.delegatee_id,
                delegation.role_id,
                delegation.created_at,
                delegation.expires_at,
                delegation.revoked_at,
                delegation.end_reason.value if delegation.end_reason else None,
            ),
        )
        return delegation

    async def list_unrevoked_by_delegatee(self, delegatee_id: str) -> list[Delegation]:
        cur = await self._conn.execute(
            f"SELECT {DELEGATION_COLUMNS} FROM permission_delegation "
            "WHERE delegatee_id = %s AND revoked_at IS NULL ORDER BY created_at",
            (delegatee_id,),
        )
        return [row_to_delegation(r) for r in await cur.fetchall()]

    async def list_by_delegator(self, delegator_id: str) -> list[Delegation]:
        cur = await self._conn.execute(
            f"SELECT {DELEGATION_COLUMNS} FROM permission_delegation "
            "WHERE delegator_id = %s ORDER BY created_at DESC",
            (delegator_id,),
        )
        return [row_to_delegation(r) for r in await cur.fetchall()]

    async def mark_revoked(self, delegation_id: UUID, at: datetime) -> bool:
        cur = await self._conn.execute(
            "UPDATE permission_delegation SET revoked_at = %s, end_reason = %s "
            "WHERE id = %s AND revoked_at IS NULL AND expires_at > %s",
            (at, DelegationEndReason.REVOKED.value, delegation_id, at),
        )
        return cur.rowcount > 0

    async def mark_expired(self, delegation_id: UUID, at: datetime) -> bool:
        cur = await self._conn.execute(
            "UPDATE permission_delegation SET revoked_at = %s, end_reason = %s "
            "WHERE id = %s AND revoked_at IS NULL AND expires_at <= %s",
            (at, DelegationEndReason.EXPIRED.value, delegation_id, at),
        )
        return cur.rowcount > 0

    async def mark_all_expired(self, at: datetime) -> int:
        cur = await self._conn.execute(
            "UPDATE permission_delegation SET revoked_at = %s, end_reason = %s "
            "WHERE revoked_at IS NULL AND expires_at <= %s",
            (at, DelegationEndReason.EXPIRED.value, at),
        )
        return cur.rowcount

    async def stats(self, at: datetime, user_id: str | None = None) -> DelegationStats:
        sql = (
            "SELECT count(*), "
            "count(*) FILTER (WHERE revoked_at IS NULL AND expires_at > %s), "
            "count(*) FILTER (WHERE end_reason = 'expired' "
            "OR (revoked_at IS NULL AND expires_at <= %s)), "
            "count(*) FILTER (WHERE end_reason = 'revoked') "
            "FROM permission_delegation"
        )
        params: list[object] = [at, at]
        if user_id:
            sql += " WHERE delegator_id = %s OR delegatee_id = %s"
            params.extend([user_id, user_id])
        cur = await self._conn.execute(sql, params)
        r = await cur.fetchone()
        return DelegationStats(total=r[0], active=r[1], expired=r[2], revoked=r[3])
