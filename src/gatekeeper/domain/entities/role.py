"""Role entity for RBAC."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class Role:
    """Role - named set of permissions; no role inherits another."""

    id: UUID
    name: str
    description: str | None = None
    created_at: datetime | None = None
