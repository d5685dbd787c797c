"""Audit log query filters."""

from dataclasses import dataclass
from datetime import datetime

from gatekeeper.domain.value_objects import AuditAction, AuditResult


@dataclass(frozen=True)
class AuditQuery:
    """Filters for reading the audit log. Results are newest first.

    security_events selects entries whose action is a security action or
    whose result is FAILURE.
    """

    actor_id: str | None = None
    action: AuditAction | None = None
    resource_type: str | None = None
    resource_id: str | None = None
    result: AuditResult | None = None
    start: datetime | None = None
    end: datetime | None = None
    security_events: bool = False
    limit: int = 100
