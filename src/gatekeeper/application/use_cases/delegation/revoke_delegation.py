"""Revoke delegation use case."""

import logging
from dataclasses import replace
from uuid import UUID

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.application.use_cases.delegation.expiry import settle
from gatekeeper.domain.entities import Delegation, DelegationEndReason
from gatekeeper.domain.exceptions import DelegationNotFound
from gatekeeper.domain.value_objects import AuditAction, ResourceType

logger = logging.getLogger(__name__)


class RevokeDelegationUseCase:
    """Revoke a delegation. Idempotent for revoked and expired delegations."""

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_recorder: AuditRecorder,
        clock: Clock,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder
        self._clock = clock

    async def execute(
        self,
        delegation_id: UUID,
        actor_id: str,
        context: AuditContext | None = None,
    ) -> Delegation:
        """Revoke and return the delegation.

        Every call writes one DELEGATION_REVOKED entry; calls that change
        nothing carry noop=True and the state found.
        """
        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.DELEGATION_REVOKED,
            resource_type=ResourceType.DELEGATION,
            resource_id=str(delegation_id),
            context=context,
        ):
            async with self._uow_factory() as uow:
                delegation = await uow.delegations.get_by_id(delegation_id)
                if not delegation:
                    raise DelegationNotFound(delegation_id)

                now = self._clock.now()
                if await uow.delegations.mark_revoked(delegation_id, now):
                    delegation = replace(
                        delegation, revoked_at=now, end_reason=DelegationEndReason.REVOKED
                    )
                    outcome = "revoked"
                else:
                    current = await uow.delegations.get_by_id(delegation_id) or delegation
                    delegation = await settle(uow, current, now)
                    outcome = (
                        "already_revoked"
                        if delegation.end_reason is DelegationEndReason.REVOKED
                        else "expired"
                    )

                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.DELEGATION_REVOKED,
                    resource_type=ResourceType.DELEGATION,
                    resource_id=str(delegation_id),
                    details={
                        "delegator_id": delegation.delegator_id,
                        "delegatee_id": delegation.delegatee_id,
                        "role_id": str(delegation.role_id),
                        "outcome": outcome,
                        "noop": outcome != "revoked",
                        "revoked_at": delegation.revoked_at.isoformat()
                        if delegation.revoked_at
                        else None,
                    },
                    context=context,
                )

        logger.info("Delegation %s revoke by %s: %s", delegation_id, actor_id, outcome)
        return delegation
