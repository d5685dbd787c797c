"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for permission persistence."""

    async def get_by_id(self, permission_id: UUID) -> Permission | None: ...

    async def get_by_name(self, name: str) -> Permission | None: ...

    async def list_all(self, resource_type: str | None = None) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...
