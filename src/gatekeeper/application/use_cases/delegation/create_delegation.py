"""Create delegation use case."""

import logging
from datetime import timedelta
from uuid import UUID, uuid4

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.entities import Delegation
from gatekeeper.domain.exceptions import (
    InvalidTTL,
    PreconditionFailed,
    RoleNotFound,
    RoleNotHeldByDelegator,
    UserNotFound,
)
from gatekeeper.domain.value_objects import AuditAction, ResourceType

logger = logging.getLogger(__name__)


class CreateDelegationUseCase:
    """Delegate a directly held role to another user for a limited time."""

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_recorder: AuditRecorder,
        clock: Clock,
        max_ttl: timedelta | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder
        self._clock = clock
        self._max_ttl = max_ttl

    async def execute(
        self,
        delegator_id: str,
        delegatee_id: str,
        role_id: UUID,
        ttl: timedelta,
        context: AuditContext | None = None,
    ) -> Delegation:
        """Create delegation. Delegator must hold role_id via a direct assignment.

        Roles held only through another delegation cannot be passed on.
        """
        async with self._audit.rejections(
            actor_id=delegator_id,
            action=AuditAction.DELEGATION_CREATED,
            resource_type=ResourceType.DELEGATION,
            resource_id=str(role_id),
            details={"delegatee_id": delegatee_id, "role_id": str(role_id)},
            context=context,
        ):
            self._check_ttl(ttl)
            if delegator_id == delegatee_id:
                raise PreconditionFailed("A user cannot delegate a role to themselves")

            async with self._uow_factory() as uow:
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise RoleNotFound(role_id)
                if not await uow.users.exists(delegatee_id):
                    raise UserNotFound(delegatee_id)

                # Locked until commit so a concurrent role removal cannot slip in.
                held = await uow.user_roles.get(delegator_id, role_id, lock=True)
                if not held:
                    raise RoleNotHeldByDelegator(
                        f"User {delegator_id} does not directly hold role {role.name}"
                    )

                now = self._clock.now()
                delegation = Delegation(
                    id=uuid4(),
                    delegator_id=delegator_id,
                    delegatee_id=delegatee_id,
                    role_id=role_id,
                    created_at=now,
                    expires_at=now + ttl,
                )
                await uow.delegations.create(delegation)
                await self._audit.append(
                    uow,
                    actor_id=delegator_id,
                    action=AuditAction.DELEGATION_CREATED,
                    resource_type=ResourceType.DELEGATION,
                    resource_id=str(delegation.id),
                    details={
                        "delegator_id": delegator_id,
                        "delegatee_id": delegatee_id,
                        "role_id": str(role_id),
                        "role_name": role.name,
                        "expires_at": delegation.expires_at.isoformat(),
                    },
                    context=context,
                )

        logger.info(
            "Delegation %s: %s -> %s role %s until %s",
            delegation.id,
            delegator_id,
            delegatee_id,
            role_id,
            delegation.expires_at.isoformat(),
        )
        return delegation

    def _check_ttl(self, ttl: timedelta) -> None:
        if ttl <= timedelta(0):
            raise InvalidTTL("Delegation TTL must be positive")
        if self._max_ttl is not None and ttl > self._max_ttl:
            raise InvalidTTL(
                f"Delegation TTL exceeds maximum of {int(self._max_ttl.total_seconds())} seconds"
            )
        try:
            self._clock.now() + ttl
        except OverflowError as e:
            raise InvalidTTL("Delegation TTL is out of range") from e
