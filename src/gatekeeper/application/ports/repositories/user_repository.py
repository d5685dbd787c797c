"""User repository port."""

from typing import Protocol

from gatekeeper.domain.entities import User


class UserRepository(Protocol):
    """Port for users. Identities come from the identity provider and are
    recorded here on first sight so roles and delegations can refer to them.
    """

    async def get_by_id(self, user_id: str) -> User | None: ...

    async def exists(self, user_id: str) -> bool: ...

    async def upsert(self, user: User) -> User: ...
