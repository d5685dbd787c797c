"""Pytest fixtures for Gatekeeper tests."""

from __future__ import annotations

import copy
from collections import Counter
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from gatekeeper.application.dto.audit_query import AuditQuery
from gatekeeper.application.dto.audit_report import AuditCount
from gatekeeper.application.dto.delegation_stats import DelegationStats
from gatekeeper.domain.entities import (
    AuditEntry,
    Delegation,
    DelegationEndReason,
    Permission,
    Role,
    User,
    UserRole,
    is_lapsed,
)
from gatekeeper.domain.exceptions import DuplicateAssignment, StoreUnavailable
from gatekeeper.domain.value_objects import SECURITY_ACTIONS, AuditResult
from gatekeeper.interfaces.api.app import Services, build_services

T0 = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)


class FakeClock:
    """Clock the test moves by hand."""

    def __init__(self, start: datetime = T0) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission repository."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Permission] = {}

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_name(self, name: str) -> Permission | None:
        return next((p for p in self._by_id.values() if p.name == name), None)

    async def list_all(self, resource_type: str | None = None) -> list[Permission]:
        items = [
            p for p in self._by_id.values() if not resource_type or p.resource_type == resource_type
        ]
        return sorted(items, key=lambda p: p.name)

    async def create(self, permission: Permission) -> Permission:
        if await self.get_by_name(permission.name):
            raise DuplicateAssignment(f"Permission {permission.name!r} already exists")
        self._by_id[permission.id] = permission
        return permission


class FakeRoleRepository:
    """In-memory role repository with role -> permission links."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self.permission_store = permissions
        self._roles: dict[UUID, Role] = {}
        self._links: dict[UUID, set[UUID]] = {}

    def add_role(self, role: Role) -> None:
        self._roles[role.id] = role

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return self._roles.get(role_id)

    async def get_by_name(self, name: str) -> Role | None:
        return next((r for r in self._roles.values() if r.name == name), None)

    async def list_all(self) -> list[Role]:
        return sorted(self._roles.values(), key=lambda r: r.name)

    async def create(self, role: Role) -> Role:
        self._roles[role.id] = role
        return role

    async def get_permissions(self, role_id: UUID) -> list[Permission]:
        return [
            self.permission_store._by_id[pid]
            for pid in self._links.get(role_id, set())
            if pid in self.permission_store._by_id
        ]

    async def has_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        return permission_id in self._links.get(role_id, set())

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        self._links.setdefault(role_id, set()).add(permission_id)

    async def remove_permission(self, role_id: UUID, permission_id: UUID) -> bool:
        linked = self._links.get(role_id, set())
        if permission_id not in linked:
            return False
        linked.discard(permission_id)
        return True


class FakeUserRepository:
    """In-memory user repository."""

    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def add_user(self, user: User) -> None:
        self._users[user.id] = user

    async def get_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def exists(self, user_id: str) -> bool:
        return user_id in self._users

    async def upsert(self, user: User) -> User:
        current = self._users.get(user.id)
        if current:
            user = replace(
                current,
                email=user.email or current.email,
                display_name=user.display_name or current.display_name,
            )
        self._users[user.id] = user
        return user


class FakeUserRoleRepository:
    """In-memory direct role assignments."""

    def __init__(self, roles: FakeRoleRepository) -> None:
        self.role_store = roles
        self._assignments: dict[tuple[str, UUID], UserRole] = {}
        self.locked: list[tuple[str, UUID]] = []

    async def list_roles_for_user(self, user_id: str) -> list[Role]:
        return [
            self.role_store._roles[role_id]
            for (uid, role_id) in self._assignments
            if uid == user_id and role_id in self.role_store._roles
        ]

    async def get(self, user_id: str, role_id: UUID, *, lock: bool = False) -> UserRole | None:
        if lock:
            self.locked.append((user_id, role_id))
        return self._assignments.get((user_id, role_id))

    async def create(self, user_role: UserRole) -> UserRole:
        key = (user_role.user_id, user_role.role_id)
        if key in self._assignments:
            raise DuplicateAssignment("Role already assigned to user")
        self._assignments[key] = user_role
        return user_role

    async def delete(self, user_id: str, role_id: UUID) -> bool:
        return self._assignments.pop((user_id, role_id), None) is not None


class FakeDelegationRepository:
    """In-memory delegations with the same conditional-update semantics as SQL."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Delegation] = {}

    async def get_by_id(self, delegation_id: UUID) -> Delegation | None:
        return self._by_id.get(delegation_id)

    async def create(self, delegation: Delegation) -> Delegation:
        self._by_id[delegation.id] = delegation
        return delegation

    async def list_unrevoked_by_delegatee(self, delegatee_id: str) -> list[Delegation]:
        items = [
            d for d in self._by_id.values() if d.delegatee_id == delegatee_id and d.revoked_at is None
        ]
        return sorted(items, key=lambda d: d.created_at)

    async def list_by_delegator(self, delegator_id: str) -> list[Delegation]:
        items = [d for d in self._by_id.values() if d.delegator_id == delegator_id]
        return sorted(items, key=lambda d: d.created_at, reverse=True)

    async def mark_revoked(self, delegation_id: UUID, at: datetime) -> bool:
        d = self._by_id.get(delegation_id)
        if not d or d.revoked_at is not None or d.expires_at <= at:
            return False
        self._by_id[delegation_id] = replace(
            d, revoked_at=at, end_reason=DelegationEndReason.REVOKED
        )
        return True

    async def mark_expired(self, delegation_id: UUID, at: datetime) -> bool:
        d = self._by_id.get(delegation_id)
        if not d or not is_lapsed(d, at):
            return False
        self._by_id[delegation_id] = replace(
            d, revoked_at=at, end_reason=DelegationEndReason.EXPIRED
        )
        return True

    async def mark_all_expired(self, at: datetime) -> int:
        lapsed = [d.id for d in self._by_id.values() if is_lapsed(d, at)]
        for delegation_id in lapsed:
            await self.mark_expired(delegation_id, at)
        return len(lapsed)

    async def stats(self, at: datetime, user_id: str | None = None) -> DelegationStats:
        rows = [
            d
            for d in self._by_id.values()
            if user_id is None or user_id in (d.delegator_id, d.delegatee_id)
        ]
        return DelegationStats(
            total=len(rows),
            active=sum(1 for d in rows if d.revoked_at is None and d.expires_at > at),
            expired=sum(
                1
                for d in rows
                if d.end_reason is DelegationEndReason.EXPIRED or is_lapsed(d, at)
            ),
            revoked=sum(1 for d in rows if d.end_reason is DelegationEndReason.REVOKED),
        )


class FakeAuditRepository:
    """In-memory append-only audit log."""

    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    @property
    def entries(self) -> list[AuditEntry]:
        return list(self._entries)

    async def append(self, entry: AuditEntry) -> None:
        self._entries.append(entry)

    async def get_by_id(self, entry_id: UUID) -> AuditEntry | None:
        return next((e for e in self._entries if e.id == entry_id), None)

    async def query(self, query: AuditQuery) -> list[AuditEntry]:
        def keep(e: AuditEntry) -> bool:
            if query.actor_id and e.actor_id != query.actor_id:
                return False
            if query.action and e.action != query.action:
                return False
            if query.resource_type and e.resource_type != query.resource_type:
                return False
            if query.resource_id and e.resource_id != query.resource_id:
                return False
            if query.result and e.result != query.result:
                return False
            if query.start and e.timestamp < query.start:
                return False
            if query.end and e.timestamp >= query.end:
                return False
            if query.security_events and not (
                e.action in SECURITY_ACTIONS or e.result is AuditResult.FAILURE
            ):
                return False
            return True

        # Stable sort keeps insertion order reversed for equal timestamps.
        items = [e for e in reversed(self._entries) if keep(e)]
        items.sort(key=lambda e: e.timestamp, reverse=True)
        return items[: query.limit]

    async def count_by_actor_and_action(self, start: datetime, end: datetime) -> list[AuditCount]:
        counts = Counter(
            (e.actor_id, e.action.value, e.result.value)
            for e in self._entries
            if start <= e.timestamp < end
        )
        return [
            AuditCount(actor_id=a, action=act, result=res, count=n)
            for (a, act, res), n in counts.items()
        ]


class FakeUnitOfWork:
    """Fake UoW. Each factory context snapshots state and restores it on error."""

    def __init__(self) -> None:
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository(self.permissions)
        self.users = FakeUserRepository()
        self.user_roles = FakeUserRoleRepository(self.roles)
        self.delegations = FakeDelegationRepository()
        self.audit_logs = FakeAuditRepository()
        self.commits = 0
        self.rollbacks = 0

    def _repositories(self) -> list:
        return [
            self.permissions,
            self.roles,
            self.users,
            self.user_roles,
            self.delegations,
            self.audit_logs,
        ]

    def snapshot(self) -> list[dict]:
        return [
            {
                name: copy.deepcopy(value)
                for name, value in vars(repo).items()
                if name.startswith("_") and isinstance(value, (dict, list, set))
            }
            for repo in self._repositories()
        ]

    def restore(self, snapshot: list[dict]) -> None:
        for repo, state in zip(self._repositories(), snapshot, strict=True):
            for name, value in state.items():
                setattr(repo, name, value)

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def transactional_factory(uow: FakeUnitOfWork):
    """UoW factory over one shared FakeUnitOfWork: commit on exit, roll back on error."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        state = uow.snapshot()
        try:
            yield uow
        except BaseException:
            uow.restore(state)
            await uow.rollback()
            raise
        await uow.commit()

    return _factory


def unavailable_factory():
    """UoW factory whose store cannot be reached."""

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        raise StoreUnavailable("connection refused")
        yield  # pragma: no cover

    return _factory


# --- Seeding helpers ---


def seed_user(uow: FakeUnitOfWork, user_id: str) -> User:
    user = User(id=user_id, email=f"{user_id}@example.com", display_name=user_id.title())
    uow.users.add_user(user)
    return user


def seed_role(
    uow: FakeUnitOfWork,
    name: str,
    grants: Iterable[tuple[str, str]] = (),
) -> tuple[Role, list[Permission]]:
    """Role with one permission per (resource_type, action), reusing existing ones."""
    role = Role(id=uuid4(), name=name, description=f"{name} role", created_at=T0)
    uow.roles.add_role(role)
    perms = []
    for resource_type, action in grants:
        pname = f"{resource_type.lower()}:{action.lower()}"
        perm = next((p for p in uow.permissions._by_id.values() if p.name == pname), None)
        if perm is None:
            perm = Permission(
                id=uuid4(), name=pname, resource_type=resource_type, action=action, created_at=T0
            )
            uow.permissions._by_id[perm.id] = perm
        uow.roles._links.setdefault(role.id, set()).add(perm.id)
        perms.append(perm)
    return role, perms


def assign(uow: FakeUnitOfWork, user_id: str, role: Role) -> UserRole:
    user_role = UserRole(user_id=user_id, role_id=role.id, assigned_at=T0, assigned_by="seed")
    uow.user_roles._assignments[(user_id, role.id)] = user_role
    return user_role


# --- Fixtures ---


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Shared fake store with users alice, bob, carol."""
    u = FakeUnitOfWork()
    for user_id in ("alice", "bob", "carol"):
        seed_user(u, user_id)
    return u


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork):
    return transactional_factory(uow)


@pytest.fixture
def services(uow_factory, clock: FakeClock) -> Services:
    """All use cases over the fake store, delegations capped at 30 days."""
    return build_services(uow_factory, clock, max_delegation_ttl=timedelta(days=30))
