"""Aggregated audit report over a date range."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class AuditCount:
    """One aggregate row: entries by actor, action and result."""

    actor_id: str
    action: str
    result: str
    count: int


@dataclass
class UserActivity:
    actor_id: str
    total: int = 0
    failures: int = 0
    by_action: dict[str, int] = field(default_factory=dict)


@dataclass
class AuditReport:
    """Counts by user and by action for [start, end)."""

    start: datetime
    end: datetime
    generated_at: datetime
    total: int = 0
    successes: int = 0
    failures: int = 0
    by_action: dict[str, int] = field(default_factory=dict)
    by_user: list[UserActivity] = field(default_factory=list)
