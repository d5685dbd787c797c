"""Grant - where an effective permission comes from."""

from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID


class GrantSource(StrEnum):
    DIRECT = "direct"
    DELEGATION = "delegation"


@dataclass(frozen=True)
class Grant:
    """A direct role assignment or an active delegation conferring a role."""

    source: GrantSource
    role_id: UUID
    delegation_id: UUID | None = None

    @classmethod
    def direct(cls, role_id: UUID) -> "Grant":
        return cls(source=GrantSource.DIRECT, role_id=role_id)

    @classmethod
    def delegated(cls, role_id: UUID, delegation_id: UUID) -> "Grant":
        return cls(source=GrantSource.DELEGATION, role_id=role_id, delegation_id=delegation_id)

    def describe(self) -> str:
        if self.source is GrantSource.DELEGATION:
            return f"delegation {self.delegation_id} of role {self.role_id}"
        return f"direct role {self.role_id}"

    def as_dict(self) -> dict[str, str | None]:
        return {
            "source": self.source.value,
            "role_id": str(self.role_id),
            "delegation_id": str(self.delegation_id) if self.delegation_id else None,
        }
