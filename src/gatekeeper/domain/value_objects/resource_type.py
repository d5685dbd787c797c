"""Resource types that permissions and access checks refer to."""

from collections.abc import Iterable
from enum import StrEnum

from gatekeeper.domain.exceptions import ValidationError


class ResourceType(StrEnum):
    """Built-in resource types."""

    DOCUMENT = "DOCUMENT"
    PROJECT = "PROJECT"
    TASK = "TASK"
    INVOICE = "INVOICE"
    ORDER = "ORDER"
    USER = "USER"
    ROLE = "ROLE"
    PERMISSION = "PERMISSION"
    DELEGATION = "DELEGATION"
    AUDIT_LOG = "AUDIT_LOG"
    REPORT = "REPORT"
    SYSTEM = "SYSTEM"


def normalize_token(value: str) -> str:
    """Canonical form of a resource type or action name."""
    return value.strip().upper()


class ResourceTypeRegistry:
    """Built-in resource types plus the ones a deployment registers.

    Unknown names are rejected instead of silently never matching.
    """

    def __init__(self, extra: Iterable[str] = ()) -> None:
        builtin = {rt.value for rt in ResourceType}
        self._extra = frozenset(
            normalize_token(e) for e in extra if e.strip() and normalize_token(e) not in builtin
        )

    @property
    def extra(self) -> frozenset[str]:
        return self._extra

    def parse(self, value: str) -> str:
        """Return the canonical resource type or raise ValidationError."""
        if not isinstance(value, str):
            raise ValidationError(f"Unknown resource type: {value!r}")
        candidate = normalize_token(value)
        try:
            return ResourceType(candidate)
        except ValueError:
            pass
        if candidate in self._extra:
            return candidate
        raise ValidationError(f"Unknown resource type: {value!r}")

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, str):
            return False
        try:
            self.parse(value)
        except ValidationError:
            return False
        return True
