"""Create role use case."""

from uuid import uuid4

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.entities import Role
from gatekeeper.domain.exceptions import DuplicateAssignment, ValidationError
from gatekeeper.domain.value_objects import AuditAction, ResourceType


class CreateRoleUseCase:
    """Create an empty role."""

    def __init__(
        self, unit_of_work_factory: type, audit_recorder: AuditRecorder, clock: Clock
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder
        self._clock = clock

    async def execute(
        self,
        actor_id: str,
        name: str,
        description: str | None = None,
        context: AuditContext | None = None,
    ) -> Role:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name is required")

        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.ROLE_CREATED,
            resource_type=ResourceType.ROLE,
            resource_id=name,
            context=context,
        ):
            async with self._uow_factory() as uow:
                if await uow.roles.get_by_name(name):
                    raise DuplicateAssignment(f"Role with name {name!r} already exists")
                role = Role(
                    id=uuid4(),
                    name=name,
                    description=description,
                    created_at=self._clock.now(),
                )
                await uow.roles.create(role)
                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.ROLE_CREATED,
                    resource_type=ResourceType.ROLE,
                    resource_id=str(role.id),
                    details={"name": name},
                    context=context,
                )
        return role
