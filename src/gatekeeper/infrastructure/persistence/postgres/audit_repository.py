"""PostgreSQL audit log repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from gatekeeper.application.dto.audit_query import AuditQuery
from gatekeeper.application.dto.audit_report import AuditCount
from gatekeeper.domain.entities import AuditEntry
from gatekeeper.domain.value_objects import SECURITY_ACTIONS, AuditAction, AuditResult

AUDIT_COLUMNS = (
    "id, timestamp, actor_id, action, resource_type, resource_id, result, "
    "details, ip_address, user_agent"
)


def row_to_entry(r: tuple) -> AuditEntry:
    return AuditEntry(
        id=r[0],
        timestamp=r[1],
        actor_id=r[2],
        action=AuditAction(r[3]),
        resource_type=r[4],
        resource_id=r[5],
        result=AuditResult(r[6]),
        details=r[7] or {},
        ip_address=r[8],
        user_agent=r[9],
    )


def _build_audit_conditions(query: AuditQuery) -> tuple[list[str], list[object]]:
    """Build WHERE conditions and params for an audit query.

    Returns (conditions, params), conditions joined with AND by the caller.
    """
    conditions: list[str] = []
    params: list[object] = []
    if query.actor_id:
        conditions.append("actor_id = %s")
        params.append(query.actor_id)
    if query.action:
        conditions.append("action = %s")
        params.append(str(query.action))
    if query.resource_type:
        conditions.append("resource_type = %s")
        params.append(str(query.resource_type))
    if query.resource_id:
        conditions.append("resource_id = %s")
        params.append(query.resource_id)
    if query.result:
        conditions.append("result = %s")
        params.append(str(query.result))
    if query.start:
        conditions.append("timestamp >= %s")
        params.append(query.start)
    if query.end:
        conditions.append("timestamp < %s")
        params.append(query.end)
    if query.security_events:
        conditions.append("(action = ANY(%s) OR result = %s)")
        params.append(sorted(a.value for a in SECURITY_ACTIONS))
        params.append(AuditResult.FAILURE.value)
    return conditions, params


class PostgresAuditRepository:
    """Append-only audit log. UPDATE and DELETE are rejected by a table trigger."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def append(self, entry: AuditEntry) -> None:
        await self._conn.execute(
            f"INSERT INTO audit_log ({AUDIT_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                entry.id,
                entry.timestamp,
                entry.actor_id,
                entry.action.value,
                entry.resource_type,
                entry.resource_id,
                entry.result.value,
                Jsonb(entry.details),
                entry.ip_address,
                entry.user_agent,
            ),
        )

    async def get_by_id(self, entry_id: UUID) -> AuditEntry | None:
        cur = await self._conn.execute(
            f"SELECT {AUDIT_COLUMNS} FROM audit_log WHERE id = %s",
            (entry_id,),
        )
        r = await cur.fetchone()
        return row_to_entry(r) if r else None

    async def query(self, query: AuditQuery) -> list[AuditEntry]:
        conditions, params = _build_audit_conditions(query)
        sql = f"SELECT {AUDIT_COLUMNS} FROM audit_log"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += " ORDER BY timestamp DESC, id LIMIT %s"
        params.append(query.limit)
        cur = await self._conn.execute(sql, params)
        return [row_to_entry(r) for r in await cur.fetchall()]

    async def count_by_actor_and_action(
        self, start: datetime, end: datetime
    ) -> list[AuditCount]:
        cur = await self._conn.execute(
            "SELECT actor_id, action, result, count(*) FROM audit_log "
            "WHERE timestamp >= %s AND timestamp < %s "
            "GROUP BY actor_id, action, result",
            (start, end),
        )
        rows = await cur.fetchall()
        return [AuditCount(actor_id=r[0], action=r[1], result=r[2], count=r[3]) for r in rows]
