"""UserRole entity - direct, permanent role assignment."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class UserRole:
    """Direct assignment of a role to a user. Unique per (user_id, role_id)."""

    user_id: str
    role_id: UUID
    assigned_at: datetime
    assigned_by: str | None = None
