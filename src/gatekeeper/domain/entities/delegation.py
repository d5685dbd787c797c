"""Delegation entity - temporary grant of a role from one user to another."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class DelegationEndReason(StrEnum):
    REVOKED = "revoked"
    EXPIRED = "expired"


class DelegationStatus(StrEnum):
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


@dataclass
class Delegation:
    """Delegation of role_id from delegator to delegatee until expires_at.

    revoked_at is set once, either by an explicit revocation or when the
    delegation is found past expires_at, and is never cleared. end_reason
    records which of the two happened.
    """

    id: UUID
    delegator_id: str
    delegatee_id: str
    role_id: UUID
    created_at: datetime
    expires_at: datetime
    revoked_at: datetime | None = None
    end_reason: DelegationEndReason | None = None


def is_active(delegation: Delegation, now: datetime) -> bool:
    """A delegation is active iff it is not revoked and not yet expired."""
    return delegation.revoked_at is None and delegation.expires_at > now


def is_lapsed(delegation: Delegation, now: datetime) -> bool:
    """Expired by time but not yet marked."""
    return delegation.revoked_at is None and delegation.expires_at <= now


def status_at(delegation: Delegation, now: datetime) -> DelegationStatus:
    if is_active(delegation, now):
        return DelegationStatus.ACTIVE
    if delegation.end_reason is DelegationEndReason.REVOKED:
        return DelegationStatus.REVOKED
    return DelegationStatus.EXPIRED
