"""Read projections over the audit log."""

from dataclasses import replace
from datetime import datetime, timedelta
from uuid import UUID

from gatekeeper.application.dto.audit_query import AuditQuery
from gatekeeper.application.ports import Clock
from gatekeeper.domain.entities import AuditEntry
from gatekeeper.domain.exceptions import NotFound, ValidationError
from gatekeeper.domain.value_objects import ResourceType

MAX_LIMIT = 1000


def _check_range(start: datetime | None, end: datetime | None) -> None:
    if start and end and start >= end:
        raise ValidationError("start must be before end")


class ReadAuditLogsUseCase:
    """Audit entries for users, projects and security reviews. Newest first."""

    def __init__(
        self,
        unit_of_work_factory: type,
        clock: Clock,
        security_window: timedelta = timedelta(hours=24),
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock
        self._security_window = security_window

    async def get(self, entry_id: UUID) -> AuditEntry:
        async with self._uow_factory() as uow:
            entry = await uow.audit_logs.get_by_id(entry_id)
        if entry is None:
            raise NotFound("Audit log", entry_id)
        return entry

    async def query(self, query: AuditQuery) -> list[AuditEntry]:
        """Run arbitrary filters; limit is clamped to 1..MAX_LIMIT."""
        _check_range(query.start, query.end)
        limit = min(max(query.limit, 1), MAX_LIMIT)
        if limit != query.limit:
            query = replace(query, limit=limit)
        async with self._uow_factory() as uow:
            return await uow.audit_logs.query(query)

    async def for_user(
        self,
        user_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        return await self.query(AuditQuery(actor_id=user_id, start=start, end=end, limit=limit))

    async def for_project(
        self,
        project_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = 100,
    ) -> list[AuditEntry]:
        return await self.query(
            AuditQuery(
                resource_type=ResourceType.PROJECT,
                resource_id=project_id,
                start=start,
                end=end,
                limit=limit,
            )
        )

    async def recent_security_events(
        self, limit: int = 50, since: datetime | None = None
    ) -> list[AuditEntry]:
        """Denials, failures and grant changes since `since` (default: window)."""
        since = since or self._clock.now() - self._security_window
        return await self.query(AuditQuery(start=since, security_events=True, limit=limit))
