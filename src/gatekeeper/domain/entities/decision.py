"""Access decision returned by the decision engine."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from gatekeeper.domain.value_objects import Grant


@dataclass(frozen=True)
class Decision:
    """ALLOW/DENY with reason. grant is set for approvals only."""

    allowed: bool
    reason: str
    timestamp: datetime
    grant: Grant | None = None
    permission_id: UUID | None = None

    @property
    def decision(self) -> str:
        return "ALLOW" if self.allowed else "DENY"
