"""Permission entity - atomic capability on a resource type."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Permission:
    """Permission - (resource_type, action) pair. Identity is the id."""

    id: UUID
    name: str = field(compare=False)
    resource_type: str = field(compare=False)
    action: str = field(compare=False)
    description: str | None = field(default=None, compare=False)
    created_at: datetime | None = field(default=None, compare=False)

    def matches(self, resource_type: str, action: str) -> bool:
        return self.resource_type == resource_type and self.action == action
