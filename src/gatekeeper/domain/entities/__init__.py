"""Domain entities."""

from gatekeeper.domain.entities.audit_entry import AuditEntry
from gatekeeper.domain.entities.decision import Decision
from gatekeeper.domain.entities.delegation import (
    Delegation,
    DelegationEndReason,
    DelegationStatus,
    is_active,
    is_lapsed,
    status_at,
)
from gatekeeper.domain.entities.permission import Permission
from gatekeeper.domain.entities.role import Role
from gatekeeper.domain.entities.user import User
from gatekeeper.domain.entities.user_role import UserRole

__all__ = [
    "AuditEntry",
    "Decision",
    "Delegation",
    "DelegationEndReason",
    "DelegationStatus",
    "Permission",
    "Role",
    "User",
    "UserRole",
    "is_active",
    "is_lapsed",
    "status_at",
]
