"""Cleanup expired delegations use case."""

import logging

from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.value_objects import AuditAction, ResourceType

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "system"


class CleanupExpiredDelegationsUseCase:
    """Mark every lapsed delegation as expired in one pass.

    Housekeeping only: reads apply the same check themselves.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_recorder: AuditRecorder,
        clock: Clock,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder
        self._clock = clock

    async def execute(self, actor_id: str = SYSTEM_ACTOR) -> int:
        now = self._clock.now()
        async with self._uow_factory() as uow:
            count = await uow.delegations.mark_all_expired(now)
            await self._audit.append(
                uow,
                actor_id=actor_id,
                action=AuditAction.DELEGATION_CLEANUP,
                resource_type=ResourceType.DELEGATION,
                resource_id="*",
                details={"expired": count, "as_of": now.isoformat()},
            )
        logger.info("Cleanup marked %d delegations expired", count)
        return count
