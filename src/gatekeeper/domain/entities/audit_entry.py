"""Audit log entry - immutable record of a decision or mutation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from gatekeeper.domain.value_objects import AuditAction, AuditResult


@dataclass(frozen=True)
class AuditEntry:
    """Append-only. Never updated or deleted once written."""

    id: UUID
    timestamp: datetime
    actor_id: str
    action: AuditAction
    resource_type: str
    resource_id: str
    result: AuditResult
    details: dict[str, Any] = field(default_factory=dict)
    ip_address: str | None = None
    user_agent: str | None = None
