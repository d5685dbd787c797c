"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from gatekeeper.application.ports.repositories import (
    AuditRepository,
    DelegationRepository,
    PermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - one transaction over all repositories."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def users(self) -> UserRepository: ...

    @property
    def user_roles(self) -> UserRoleRepository: ...

    @property
    def delegations(self) -> DelegationRepository: ...

    @property
    def audit_logs(self) -> AuditRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances (async context manager).

    Commits on clean exit, rolls back on error, and raises StoreUnavailable
    when the store cannot be reached.
    """

    def __call__(self) -> AsyncIterator[UnitOfWork]: ...
