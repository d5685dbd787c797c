"""Permission store reads."""

from uuid import UUID

from gatekeeper.domain.entities import Permission, Role
from gatekeeper.domain.exceptions import RoleNotFound


class GetRolePermissionsUseCase:
    """Permissions granted by a role."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, role_id: UUID) -> set[Permission]:
        async with self._uow_factory() as uow:
            role = await uow.roles.get_by_id(role_id)
            if not role:
                raise RoleNotFound(role_id)
            return set(await uow.roles.get_permissions(role_id))


class GetUserRolesUseCase:
    """Roles assigned directly to a user (delegations excluded)."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str) -> list[Role]:
        async with self._uow_factory() as uow:
            return await uow.user_roles.list_roles_for_user(user_id)


class ListCatalogUseCase:
    """All roles and permissions."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def roles(self) -> list[Role]:
        async with self._uow_factory() as uow:
            return await uow.roles.list_all()

    async def permissions(self, resource_type: str | None = None) -> list[Permission]:
        async with self._uow_factory() as uow:
            return await uow.permissions.list_all(resource_type)
