"""Audit actions and results."""

from enum import StrEnum


class AuditAction(StrEnum):
    """Kinds of events written to the audit log."""

    ACCESS_APPROVED = "ACCESS_APPROVED"
    ACCESS_DENIED = "ACCESS_DENIED"
    DELEGATION_CREATED = "DELEGATION_CREATED"
    DELEGATION_REVOKED = "DELEGATION_REVOKED"
    DELEGATION_CLEANUP = "DELEGATION_CLEANUP"
    PERMISSION_CREATED = "PERMISSION_CREATED"
    ROLE_CREATED = "ROLE_CREATED"
    ROLE_PERMISSION_ASSIGNED = "ROLE_PERMISSION_ASSIGNED"
    ROLE_PERMISSION_REMOVED = "ROLE_PERMISSION_REMOVED"
    ROLE_ASSIGNED = "ROLE_ASSIGNED"
    ROLE_REMOVED = "ROLE_REMOVED"


class AuditResult(StrEnum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"


# Actions reported as security events regardless of their result.
SECURITY_ACTIONS: frozenset[AuditAction] = frozenset(
    {
        AuditAction.ACCESS_DENIED,
        AuditAction.DELEGATION_CREATED,
        AuditAction.DELEGATION_REVOKED,
        AuditAction.ROLE_ASSIGNED,
        AuditAction.ROLE_REMOVED,
        AuditAction.ROLE_PERMISSION_ASSIGNED,
        AuditAction.ROLE_PERMISSION_REMOVED,
    }
)
