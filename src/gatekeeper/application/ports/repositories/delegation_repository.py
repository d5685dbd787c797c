"""Delegation repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from gatekeeper.application.dto.delegation_stats import DelegationStats
from gatekeeper.domain.entities import Delegation


class DelegationRepository(Protocol):
    """Port for delegation persistence. Rows are never deleted."""

    async def get_by_id(self, delegation_id: UUID) -> Delegation | None: ...

    async def create(self, delegation: Delegation) -> Delegation: ...

    async def list_unrevoked_by_delegatee(self, delegatee_id: str) -> list[Delegation]:
        """Delegations to delegatee_id with revoked_at unset, lapsed ones included."""
        ...

    async def list_by_delegator(self, delegator_id: str) -> list[Delegation]: ...

    async def mark_revoked(self, delegation_id: UUID, at: datetime) -> bool:
        """Set revoked_at if unset and not yet expired at `at`. True if updated."""
        ...

    async def mark_expired(self, delegation_id: UUID, at: datetime) -> bool:
        """Set revoked_at if unset and expired at `at`. True if updated."""
        ...

    async def mark_all_expired(self, at: datetime) -> int: ...

    async def stats(self, at: datetime, user_id: str | None = None) -> DelegationStats: ...
