"""Role repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Permission, Role


class RoleRepository(Protocol):
    """Port for role and role -> permission persistence."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_by_name(self, name: str) -> Role | None: ...

    async def list_all(self) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def get_permissions(self, role_id: UUID) -> list[Permission]: ...

    async def has_permission(self, role_id: UUID, permission_id: UUID) -> bool: ...

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None: ...

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool: ...
