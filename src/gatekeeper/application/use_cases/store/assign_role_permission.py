"""Assign permission to role use case."""

from uuid import UUID

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.domain.exceptions import (
    DuplicateAssignment,
    PermissionNotFound,
    RoleNotFound,
)
from gatekeeper.domain.value_objects import AuditAction, ResourceType


class AssignRolePermissionUseCase:
    """Add a permission to a role. Holders of the role gain it immediately."""

    def __init__(self, unit_of_work_factory: type, audit_recorder: AuditRecorder) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit = audit_recorder

    async def execute(
        self,
        actor_id: str,
        role_id: UUID,
        permission_id: UUID,
        context: AuditContext | None = None,
    ) -> None:
        details = {"permission_id": str(permission_id)}
        async with self._audit.rejections(
            actor_id=actor_id,
            action=AuditAction.ROLE_PERMISSION_ASSIGNED,
            resource_type=ResourceType.ROLE,
            resource_id=str(role_id),
            details=details,
            context=context,
        ):
            async with self._uow_factory() as uow:
                if not await uow.roles.get_by_id(role_id):
                    raise RoleNotFound(role_id)
                if not await uow.permissions.get_by_id(permission_id):
                    raise PermissionNotFound(permission_id)
                if await uow.roles.has_permission(role_id, permission_id):
                    raise DuplicateAssignment("Permission already assigned to role")
                await uow.roles.add_permission(role_id, permission_id)
                await self._audit.append(
                    uow,
                    actor_id=actor_id,
                    action=AuditAction.ROLE_PERMISSION_ASSIGNED,
                    resource_type=ResourceType.ROLE,
                    resource_id=str(role_id),
                    details=details,
                    context=context,
                )
