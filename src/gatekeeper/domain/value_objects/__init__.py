"""Domain value objects."""

from gatekeeper.domain.value_objects.audit_action import (
    SECURITY_ACTIONS,
    AuditAction,
    AuditResult,
)
from gatekeeper.domain.value_objects.grant import Grant, GrantSource
from gatekeeper.domain.value_objects.resource_type import (
    ResourceType,
    ResourceTypeRegistry,
    normalize_token,
)

__all__ = [
    "SECURITY_ACTIONS",
    "AuditAction",
    "AuditResult",
    "Grant",
    "GrantSource",
    "ResourceType",
    "ResourceTypeRegistry",
    "normalize_token",
]
