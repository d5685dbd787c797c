"""Access decision engine."""

import logging

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.access.resolve_permissions import (
    ResolvePermissionsUseCase,
)
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.entities import Decision
from gatekeeper.domain.exceptions import ValidationError
from gatekeeper.domain.value_objects import (
    AuditAction,
    AuditResult,
    ResourceTypeRegistry,
    normalize_token,
)

logger = logging.getLogger(__name__)

# Audit column limits.
UNKNOWN_RESOURCE_TYPE = "UNKNOWN"
MAX_RESOURCE_ID_LENGTH = 255


class EvaluateAccessUseCase:
    """Decide ALLOW/DENY for (user, resource type, action).

    Fails closed: any error while resolving permissions yields DENY. Each
    call writes exactly one ACCESS_APPROVED or ACCESS_DENIED entry before
    the decision is returned; if that write fails, AuditWriteFailed is
    raised instead of a decision.
    """

    def __init__(
        self,
        unit_of_work_factory: type,
        resolver: ResolvePermissionsUseCase,
        audit_recorder: AuditRecorder,
        clock: Clock,
        resource_types: ResourceTypeRegistry | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._resolver = resolver
        self._audit = audit_recorder
        self._clock = clock
        self._resource_types = resource_types or ResourceTypeRegistry()

    async def execute(
        self,
        user_id: str,
        resource_type: str,
        action: str,
        resource_id: str | None = None,
        context: AuditContext | None = None,
    ) -> Decision:
        action = normalize_token(action) if isinstance(action, str) else ""
        details = {}
        try:
            resource_type = self._resource_types.parse(resource_type)
        except ValidationError as e:
            details["requested_resource_type"] = (
                resource_type if isinstance(resource_type, str) else repr(resource_type)
            )
            resource_type = UNKNOWN_RESOURCE_TYPE
            decision = Decision(allowed=False, reason=str(e), timestamp=self._clock.now())
        else:
            decision = await self._decide(user_id, resource_type, action)

        resource_id = str(resource_id) if resource_id else "*"
        if len(resource_id) > MAX_RESOURCE_ID_LENGTH:
            details["resource_id"] = resource_id
            resource_id = resource_id[:MAX_RESOURCE_ID_LENGTH]

        details.update(
            action=action,
            decision=decision.decision,
            reason=decision.reason,
        )
        if decision.grant:
            details["grant"] = decision.grant.as_dict()
            details["permission_id"] = str(decision.permission_id)

        await self._audit.write(
            actor_id=user_id,
            action=AuditAction.ACCESS_APPROVED if decision.allowed else AuditAction.ACCESS_DENIED,
            resource_type=resource_type,
            resource_id=resource_id,
            result=AuditResult.SUCCESS if decision.allowed else AuditResult.FAILURE,
            details=details,
            context=context,
        )
        logger.debug(
            "Access %s for %s on %s:%s (%s)",
            decision.decision,
            user_id,
            resource_type,
            action,
            decision.reason,
        )
        return decision

    async def _decide(self, user_id: str, resource_type: str, action: str) -> Decision:
        now = self._clock.now()
        try:
            async with self._uow_factory() as uow:
                effective = await self._resolver.resolve(uow, user_id, now)
        except Exception as e:
            logger.exception("Permission resolution failed for %s; denying", user_id)
            return Decision(
                allowed=False,
                reason=f"Access check failed: {type(e).__name__}: {e}",
                timestamp=now,
            )

        match = effective.find(resource_type, action)
        if match is None:
            return Decision(
                allowed=False,
                reason=f"User does not have {action} permission for {resource_type}",
                timestamp=now,
            )
        permission, grant = match
        return Decision(
            allowed=True,
            reason=f"Granted by {grant.describe()}",
            timestamp=now,
            grant=grant,
            permission_id=permission.id,
        )
