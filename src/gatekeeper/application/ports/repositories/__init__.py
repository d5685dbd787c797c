"""Repository ports."""

from gatekeeper.application.ports.repositories.audit_repository import AuditRepository
from gatekeeper.application.ports.repositories.delegation_repository import (
    DelegationRepository,
)
from gatekeeper.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from gatekeeper.application.ports.repositories.role_repository import RoleRepository
from gatekeeper.application.ports.repositories.user_repository import UserRepository
from gatekeeper.application.ports.repositories.user_role_repository import (
    UserRoleRepository,
)

__all__ = [
    "AuditRepository",
    "DelegationRepository",
    "PermissionRepository",
    "RoleRepository",
    "UserRepository",
    "UserRoleRepository",
]
