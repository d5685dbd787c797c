"""Auth middleware - resolves the bearer token into req.context.user."""

from dataclasses import dataclass

import falcon.asgi

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.use_cases.store.register_user import RegisterUserUseCase


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None


class AuthMiddleware:
    """Validates bearer tokens via Keycloak and sets req.context.user.

    Requests without a valid token get user None; there is no anonymous
    principal. Authenticated subjects are registered as users so they can
    be given roles and delegations. req.context.audit carries client
    address and agent for audit entries.
    """

    def __init__(
        self,
        keycloak_provider=None,
        register_user: RegisterUserUseCase | None = None,
    ) -> None:
        self._keycloak = keycloak_provider
        self._register_user = register_user

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        req.context.audit = AuditContext(
            ip_address=req.remote_addr,
            user_agent=req.user_agent,
        )
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = self._keycloak.decode_token(auth[7:])
        if not user:
            return
        if self._register_user:
            await self._register_user.execute(
                user.user_id, email=user.email, display_name=user.username
            )
        req.context.user = RequestUser(
            user_id=user.user_id,
            email=user.email,
            username=user.username,
        )
