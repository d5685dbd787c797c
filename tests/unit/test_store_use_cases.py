"""Unit tests for permission store reads and administrative writes."""

from datetime import timedelta
from uuid import uuid4

import pytest

from gatekeeper.domain.exceptions import (
    DuplicateAssignment,
    NotFound,
    PermissionNotFound,
    RoleNotFound,
    UserNotFound,
    ValidationError,
)
from gatekeeper.domain.value_objects import AuditAction, AuditResult

from tests.conftest import assign, seed_role


# --- Reads ---


@pytest.mark.asyncio
async def test_get_role_permissions(services, uow) -> None:
    role, perms = seed_role(uow, "editor", [("DOCUMENT", "READ"), ("DOCUMENT", "WRITE")])
    assert await services.get_role_permissions.execute(role.id) == set(perms)


@pytest.mark.asyncio
async def test_get_role_permissions_unknown_role(services) -> None:
    with pytest.raises(RoleNotFound):
        await services.get_role_permissions.execute(uuid4())


@pytest.mark.asyncio
async def test_get_user_roles_direct_only(services, uow) -> None:
    """Delegated roles are not direct roles."""
    editor, _ = seed_role(uow, "editor", [("DOCUMENT", "WRITE")])
    assign(uow, "alice", editor)
    await services.create_delegation.execute("alice", "bob", editor.id, timedelta(hours=1))

    assert [r.name for r in await services.get_user_roles.execute("alice")] == ["editor"]
    assert await services.get_user_roles.execute("bob") == []


@pytest.mark.asyncio
async def test_catalog_lists(services, uow) -> None:
    seed_role(uow, "viewer", [("DOCUMENT", "READ")])
    seed_role(uow, "pm", [("PROJECT", "MANAGE")])

    assert [r.name for r in await services.catalog.roles()] == ["pm", "viewer"]
    assert [p.name for p in await services.catalog.permissions("PROJECT")] == ["project:manage"]
    assert len(await services.catalog.permissions()) == 2


# --- Writes ---


@pytest.mark.asyncio
async def test_create_permission_normalizes_and_audits(services, uow) -> None:
    perm = await services.create_permission.execute(
        "root", "invoice:approve", "invoice", " approve ", "Approve invoices"
    )

    assert perm.resource_type == "INVOICE"
    assert perm.action == "APPROVE"
    assert await uow.permissions.get_by_id(perm.id) == perm
    [entry] = uow.audit_logs.entries
    assert entry.action is AuditAction.PERMISSION_CREATED
    assert entry.resource_id == str(perm.id)


@pytest.mark.asyncio
async def test_create_permission_duplicate_name(services, uow) -> None:
    await services.create_permission.execute("root", "doc:read", "DOCUMENT", "READ")
    with pytest.raises(DuplicateAssignment):
        await services.create_permission.execute("root", "doc:read", "DOCUMENT", "WRITE")
    assert [e.result for e in uow.audit_logs.entries] == [AuditResult.SUCCESS, AuditResult.FAILURE]


@pytest.mark.asyncio
async def test_create_permission_unknown_resource_type(services) -> None:
    with pytest.raises(ValidationError):
        await services.create_permission.execute("root", "x", "SPACESHIP", "FLY")


@pytest.mark.asyncio
async def test_create_role(services, uow) -> None:
    role = await services.create_role.execute("root", " reviewer ", "Reviews documents")
    assert role.name == "reviewer"
    assert await uow.roles.get_by_name("reviewer") == role

    with pytest.raises(DuplicateAssignment):
        await services.create_role.execute("root", "reviewer")


@pytest.mark.asyncio
async def test_create_role_requires_name(services) -> None:
    with pytest.raises(ValidationError):
        await services.create_role.execute("root", "   ")


@pytest.mark.asyncio
async def test_assign_and_remove_role_permission(services, uow) -> None:
    role = await services.create_role.execute("root", "reviewer")
    perm = await services.create_permission.execute("root", "doc:review", "DOCUMENT", "REVIEW")

    await services.assign_role_permission.execute("root", role.id, perm.id)
    assert await uow.roles.has_permission(role.id, perm.id)

    with pytest.raises(DuplicateAssignment):
        await services.assign_role_permission.execute("root", role.id, perm.id)

    await services.remove_role_permission.execute("root", role.id, perm.id)
    assert not await uow.roles.has_permission(role.id, perm.id)

    with pytest.raises(NotFound):
        await services.remove_role_permission.execute("root", role.id, perm.id)


@pytest.mark.asyncio
async def test_assign_role_permission_unknown_ids(services, uow) -> None:
    role = await services.create_role.execute("root", "reviewer")
    with pytest.raises(RoleNotFound):
        await services.assign_role_permission.execute("root", uuid4(), uuid4())
    with pytest.raises(PermissionNotFound):
        await services.assign_role_permission.execute("root", role.id, uuid4())


@pytest.mark.asyncio
async def test_assign_user_role(services, uow, clock) -> None:
    role, _ = seed_role(uow, "editor", [("DOCUMENT", "WRITE")])

    user_role = await services.assign_user_role.execute("root", "bob", role.id)

    assert user_role.assigned_at == clock.now()
    assert user_role.assigned_by == "root"
    [entry] = uow.audit_logs.entries
    assert entry.action is AuditAction.ROLE_ASSIGNED
    assert entry.resource_id == "bob"
    assert entry.details["role_name"] == "editor"


@pytest.mark.asyncio
async def test_assign_user_role_rejections(services, uow) -> None:
    role, _ = seed_role(uow, "editor", [("DOCUMENT", "WRITE")])
    assign(uow, "alice", role)

    with pytest.raises(UserNotFound):
        await services.assign_user_role.execute("root", "ghost", role.id)
    with pytest.raises(RoleNotFound):
        await services.assign_user_role.execute("root", "bob", uuid4())
    with pytest.raises(DuplicateAssignment):
        await services.assign_user_role.execute("root", "alice", role.id)
    assert all(e.result is AuditResult.FAILURE for e in uow.audit_logs.entries)
    assert len(uow.audit_logs.entries) == 3


@pytest.mark.asyncio
async def test_remove_user_role_keeps_existing_delegations(services, uow) -> None:
    """Removing the delegator's role does not cancel delegations already made."""
    editor, _ = seed_role(uow, "editor", [("DOCUMENT", "WRITE")])
    assign(uow, "alice", editor)
    d = await services.create_delegation.execute("alice", "bob", editor.id, timedelta(hours=1))

    await services.remove_user_role.execute("root", "alice", editor.id)

    assert await services.get_delegation.is_valid(d.id)
    assert (await services.evaluate_access.execute("bob", "DOCUMENT", "WRITE")).allowed
    assert not (await services.evaluate_access.execute("alice", "DOCUMENT", "WRITE")).allowed


@pytest.mark.asyncio
async def test_remove_user_role_not_assigned(services, uow) -> None:
    role, _ = seed_role(uow, "editor", [("DOCUMENT", "WRITE")])
    with pytest.raises(NotFound):
        await services.remove_user_role.execute("root", "bob", role.id)
    [entry] = uow.audit_logs.entries
    assert entry.action is AuditAction.ROLE_REMOVED
    assert entry.result is AuditResult.FAILURE


# --- User registration and admin bootstrap ---


@pytest.mark.asyncio
async def test_register_user_makes_user_assignable(services, uow) -> None:
    """A subject seen only through authentication can be given a role."""
    viewer, _ = seed_role(uow, "viewer", [("DOCUMENT", "READ")])
    assert not await uow.users.exists("dave")

    user = await services.register_user.execute("dave", email="dave@example.com")
    await services.assign_user_role.execute("root", "dave", viewer.id)

    assert user.id == "dave"
    assert (await uow.users.get_by_id("dave")).email == "dave@example.com"
    assert (await services.evaluate_access.execute("dave", "DOCUMENT", "READ")).allowed


@pytest.mark.asyncio
async def test_register_user_is_idempotent(services, uow) -> None:
    first = await services.register_user.execute("dave", email="dave@example.com")
    again = await services.register_user.execute("dave", display_name="Dave")

    assert again.created_at == first.created_at
    assert again.email == "dave@example.com"
    assert again.display_name == "Dave"
    assert uow.audit_logs.entries == []


@pytest.mark.asyncio
@pytest.mark.parametrize("user_id", ["", "   ", "x" * 256])
async def test_register_user_rejects_bad_ids(services, user_id) -> None:
    with pytest.raises(ValidationError):
        await services.register_user.execute(user_id)


@pytest.mark.asyncio
async def test_bootstrap_admin_grants_seeded_role(services, uow) -> None:
    admin, _ = seed_role(uow, "admin", [("ROLE", "MANAGE")])

    granted = await services.bootstrap_admin.execute(["root", "alice"])

    assert granted == ["root", "alice"]
    assert await uow.users.exists("root")
    assert [r.name for r in await services.get_user_roles.execute("root")] == ["admin"]
    entries = [e for e in uow.audit_logs.entries if e.action is AuditAction.ROLE_ASSIGNED]
    assert [e.resource_id for e in entries] == ["root", "alice"]
    assert {e.actor_id for e in entries} == {"system:bootstrap"}


@pytest.mark.asyncio
async def test_bootstrap_admin_skips_existing_holders(services, uow) -> None:
    admin, _ = seed_role(uow, "admin", [("ROLE", "MANAGE")])
    assign(uow, "alice", admin)

    assert await services.bootstrap_admin.execute(["alice"]) == []
    assert uow.audit_logs.entries == []


@pytest.mark.asyncio
async def test_bootstrap_admin_without_role(services) -> None:
    with pytest.raises(NotFound):
        await services.bootstrap_admin.execute(["root"])
