"""Domain exceptions."""


class GatekeeperError(Exception):
    """Base exception for Gatekeeper."""

    pass


class NotFound(GatekeeperError):
    """Requested role, user, permission or delegation does not exist."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class RoleNotFound(NotFound):
    def __init__(self, role_id: object) -> None:
        super().__init__("Role", role_id)


class UserNotFound(NotFound):
    def __init__(self, user_id: object) -> None:
        super().__init__("User", user_id)


class PermissionNotFound(NotFound):
    def __init__(self, permission_id: object) -> None:
        super().__init__("Permission", permission_id)


class DelegationNotFound(NotFound):
    def __init__(self, delegation_id: object) -> None:
        super().__init__("Delegation", delegation_id)


class PreconditionFailed(GatekeeperError):
    """Operation rejected because a business precondition does not hold."""

    pass


class RoleNotHeldByDelegator(PreconditionFailed):
    """Delegator does not hold the role through a direct assignment."""

    pass


class InvalidTTL(PreconditionFailed):
    """Delegation lifetime is not positive or exceeds the configured maximum."""

    pass


class DuplicateAssignment(PreconditionFailed):
    """Role, permission or assignment already exists."""

    pass


class StoreUnavailable(GatekeeperError):
    """Backing store could not be reached. Safe for the caller to retry."""

    pass


class AuditWriteFailed(GatekeeperError):
    """Audit entry could not be persisted; the triggering operation did not complete."""

    pass


class ValidationError(GatekeeperError):
    """Validation failed for input data."""

    pass
