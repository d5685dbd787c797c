"""Effective permissions of a user, with the grants conferring each."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from gatekeeper.domain.entities import Permission
from gatekeeper.domain.value_objects import Grant, GrantSource


@dataclass(frozen=True)
class EffectivePermissions:
    """Union of direct-role and active-delegation permissions for user_id."""

    user_id: str
    grants: Mapping[Permission, tuple[Grant, ...]] = field(default_factory=dict)

    @property
    def permissions(self) -> frozenset[Permission]:
        return frozenset(self.grants)

    def find(self, resource_type: str, action: str) -> tuple[Permission, Grant] | None:
        """Matching permission and the grant satisfying it, direct grants first."""
        best: tuple[Permission, Grant] | None = None
        for permission, grants in self.grants.items():
            if not permission.matches(resource_type, action):
                continue
            for grant in grants:
                if grant.source is GrantSource.DIRECT:
                    return permission, grant
                if best is None:
                    best = (permission, grant)
        return best

    def __contains__(self, permission: object) -> bool:
        return permission in self.grants

    def __len__(self) -> int:
        return len(self.grants)
