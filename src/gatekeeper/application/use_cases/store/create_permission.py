"""Create permission use case."""

from uuid import uuid4

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.entities import Permission
from gatekeeper.domain.exceptions import DuplicateAssignment, ValidationError
from gatekeeper.domain.value_objects import (
    AuditAction,
    ResourceType,
    ResourceTypeRegistry,
    normalize_token,
)


class CreatePermissionUseCase:
    """Create a (resource_type, action) permission."""

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_recorder: AuditRecorder,
        clock: Clock,
        resource_types: ResourceTypeRegistry | None = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder
        self._clock = clock
        self._resource_types = resource_types or ResourceTypeRegistry()

    async def execute(
        self,
        actor_id: str,
        name: str,
        resource_type: str,
        action: str,
        description: str | None = None,
        context: AuditContext | None = None,
    ) -> Permission:
        name = (name or "").strip()
        action = normalize_token(action or "")
        if not name or not action:
            raise ValidationError("Permission name and action are required")
        resource_type = self._resource_types.parse(resource_type)

        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.PERMISSION_CREATED,
            resource_type=ResourceType.PERMISSION,
            resource_id=name,
            details={"resource_type": resource_type, "action": action},
            context=context,
        ):
            async with self._uow_factory() as uow:
                if await uow.permissions.get_by_name(name):
                    raise DuplicateAssignment(f"Permission with name {name!r} already exists")
                permission = Permission(
                    id=uuid4(),
                    name=name,
                    resource_type=resource_type,
                    action=action,
                    description=description,
                    created_at=self._clock.now(),
                )
                await uow.permissions.create(permission)
                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.PERMISSION_CREATED,
                    resource_type=ResourceType.PERMISSION,
                    resource_id=str(permission.id),
                    details={
                        "name": name,
                        "resource_type": resource_type,
                        "action": action,
                    },
                    context=context,
                )
        return permission
