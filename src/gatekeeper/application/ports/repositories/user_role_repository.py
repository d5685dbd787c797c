"""User role repository port."""

from typing import Protocol
from uuid import UUID

from gatekeeper.domain.entities import Role, UserRole


class UserRoleRepository(Protocol):
    """Port for direct role assignments."""

    async def list_roles_for_user(self, user_id: str) -> list[Role]: ...

    async def get(
        self, user_id: str, role_id: UUID, *, lock: bool = False
    ) -> UserRole | None:
        """Get assignment. lock=True holds it until the transaction ends."""
        ...

    async def create(self, user_role: UserRole) -> UserRole: ...

    async def delete(self, user_id: str, role_id: UUID) -> bool: ...
