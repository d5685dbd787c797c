"""Unit tests for domain exceptions."""

from uuid import uuid4

import pytest

from gatekeeper.domain.exceptions import (
    AuditWriteFailed,
    DelegationNotFound,
    DuplicateAssignment,
    GatekeeperError,
    InvalidTTL,
    NotFound,
    PermissionNotFound,
    PreconditionFailed,
    RoleNotFound,
    RoleNotHeldByDelegator,
    StoreUnavailable,
    UserNotFound,
    ValidationError,
)


@pytest.mark.parametrize(
    "exc_type",
    [NotFound, PreconditionFailed, StoreUnavailable, AuditWriteFailed, ValidationError],
)
def test_top_level_errors_inherit_gatekeeper_error(exc_type) -> None:
    """Every error family is a GatekeeperError."""
    assert issubclass(exc_type, GatekeeperError)


@pytest.mark.parametrize(
    "exc_type", [RoleNotFound, UserNotFound, PermissionNotFound, DelegationNotFound]
)
def test_not_found_subclasses(exc_type) -> None:
    """Specific lookup failures are NotFound."""
    assert issubclass(exc_type, NotFound)


@pytest.mark.parametrize("exc_type", [RoleNotHeldByDelegator, InvalidTTL, DuplicateAssignment])
def test_precondition_subclasses(exc_type) -> None:
    """Business rule violations are PreconditionFailed."""
    assert issubclass(exc_type, PreconditionFailed)


def test_not_found_message_names_kind_and_id() -> None:
    """NotFound message includes the kind and the identifier."""
    role_id = uuid4()
    exc = RoleNotFound(role_id)
    assert str(exc) == f"Role not found: {role_id}"
    assert exc.kind == "Role"
    assert exc.identifier == role_id


def test_user_not_found_catchable_as_gatekeeper_error() -> None:
    """UserNotFound can be caught as GatekeeperError."""
    with pytest.raises(GatekeeperError):
        raise UserNotFound("ghost")
