"""Assign role to user use case."""

from uuid import UUID

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.entities import UserRole
from gatekeeper.domain.exceptions import DuplicateAssignment, RoleNotFound, UserNotFound
from gatekeeper.domain.value_objects import AuditAction, ResourceType


class AssignUserRoleUseCase:
    """Directly assign a role to a user."""

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
        actor_id: str,
        user_id: str,
        role_id: UUID,
        context: AuditContext | None = None,
    ) -> UserRole:
        details = {"role_id": str(role_id)}
        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.ROLE_ASSIGNED,
            resource_type=ResourceType.USER,
            resource_id=user_id,
            details=details,
            context=context,
        ):
            async with self._uow_factory() as uow:
                if not await uow.users.exists(user_id):
                    raise UserNotFound(user_id)
                role = await uow.roles.get_by_id(role_id)
                if not role:
                    raise RoleNotFound(role_id)
                if await uow.user_roles.get(user_id, role_id):
                    raise DuplicateAssignment(f"Role {role.name} already assigned to user")

                user_role = UserRole(
                    user_id=user_id,
                    role_id=role_id,
                    assigned_at=self._clock.now(),
                    assigned_by=actor_id,
                )
                await uow.user_roles.create(user_role)
                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.ROLE_ASSIGNED,
                    resource_type=ResourceType.USER,
                    resource_id=user_id,
                    details={**details, "role_name": role.name},
                    context=context,
                )
        return user_role
