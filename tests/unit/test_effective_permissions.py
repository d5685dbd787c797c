"""Unit tests for EffectivePermissions and permission identity."""

from uuid import uuid4

from gatekeeper.application.dto.effective_permissions import EffectivePermissions
from gatekeeper.domain.entities import Permission
from gatekeeper.domain.value_objects import Grant, GrantSource


def _perm(resource_type: str = "DOCUMENT", action: str = "WRITE", pid=None) -> Permission:
    return Permission(
        id=pid or uuid4(),
        name=f"{resource_type}:{action}",
        resource_type=resource_type,
        action=action,
    )


def test_permission_identity_is_id_only() -> None:
    """Two permissions with the same id are equal even if other fields differ."""
    pid = uuid4()
    a = _perm("DOCUMENT", "WRITE", pid)
    b = Permission(id=pid, name="renamed", resource_type="DOCUMENT", action="WRITE")
    assert a == b
    assert len({a, b}) == 1
    assert a != _perm("DOCUMENT", "WRITE")


def test_find_prefers_direct_grant() -> None:
    """A direct grant satisfies the check before any delegated one."""
    perm = _perm()
    role_id = uuid4()
    delegated = Grant.delegated(uuid4(), uuid4())
    direct = Grant.direct(role_id)
    effective = EffectivePermissions("bob", {perm: (delegated, direct)})

    found = effective.find("DOCUMENT", "WRITE")
    assert found == (perm, direct)


def test_find_falls_back_to_delegated_grant() -> None:
    perm = _perm()
    delegated = Grant.delegated(uuid4(), uuid4())
    effective = EffectivePermissions("bob", {perm: (delegated,)})

    permission, grant = effective.find("DOCUMENT", "WRITE")
    assert permission == perm
    assert grant.source is GrantSource.DELEGATION


def test_find_no_match() -> None:
    effective = EffectivePermissions("bob", {_perm("DOCUMENT", "READ"): (Grant.direct(uuid4()),)})
    assert effective.find("DOCUMENT", "WRITE") is None
    assert effective.find("PROJECT", "READ") is None


def test_container_protocol() -> None:
    perm = _perm()
    effective = EffectivePermissions("bob", {perm: (Grant.direct(uuid4()),)})
    assert perm in effective
    assert len(effective) == 1
    assert effective.permissions == frozenset({perm})


def test_grant_as_dict() -> None:
    role_id, delegation_id = uuid4(), uuid4()
    assert Grant.delegated(role_id, delegation_id).as_dict() == {
        "source": "delegation",
        "role_id": str(role_id),
        "delegation_id": str(delegation_id),
    }
    assert Grant.direct(role_id).as_dict()["delegation_id"] is None
