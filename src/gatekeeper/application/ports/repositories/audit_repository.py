"""Audit log repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from gatekeeper.application.dto.audit_query import AuditQuery
from gatekeeper.application.dto.audit_report import AuditCount
from gatekeeper.domain.entities import AuditEntry


class AuditRepository(Protocol):
    """Append-only audit log."""

    async def append(self, entry: AuditEntry) -> None: ...

    async def get_by_id(self, entry_id: UUID) -> AuditEntry | None: ...

    async def query(self, query: AuditQuery) -> list[AuditEntry]: ...

    async def count_by_actor_and_action(
        self, start: datetime, end: datetime
    ) -> list[AuditCount]: ...
