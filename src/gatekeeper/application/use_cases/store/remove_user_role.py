"""Remove role from user use case."""

from uuid import UUID

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.exceptions import NotFound
from gatekeeper.domain.value_objects import AuditAction, ResourceType


class RemoveUserRoleUseCase:
    """Remove a direct role assignment.

    Takes effect on the next access check. Delegations the user already
    made of this role keep running until they expire or are revoked.
    """

    def __init__(self, unit_of_work_factory: type, audit_recorder: AuditRecorder) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder

    async def execute(
        self,
        actor_id: str,
        user_id: str,
        role_id: UUID,
        context: AuditContext | None = None,
    ) -> None:
        details = {"role_id": str(role_id)}
        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.ROLE_REMOVED,
            resource_type=ResourceType.USER,
            resource_id=user_id,
            details=details,
            context=context,
        ):
            async with self._uow_factory() as uow:
                if not await uow.user_roles.delete(user_id, role_id):
                    raise NotFound("Role assignment", f"{user_id}/{role_id}")
                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.ROLE_REMOVED,
                    resource_type=ResourceType.USER,
                    resource_id=user_id,
                    details=details,
                    context=context,
                )
