"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from gatekeeper.infrastructure.auth.keycloak_provider import OIDCUser
from gatekeeper.interfaces.api.app import create_app
from gatekeeper.interfaces.api.middleware.auth import AuthMiddleware

from tests.conftest import assign, seed_role, seed_user

ADMIN_GRANTS = [
    ("ROLE", "READ"),
    ("ROLE", "MANAGE"),
    ("PERMISSION", "READ"),
    ("PERMISSION", "MANAGE"),
    ("USER", "READ"),
    ("USER", "MANAGE"),
    ("DELEGATION", "READ"),
    ("DELEGATION", "MANAGE"),
    ("AUDIT_LOG", "READ"),
    ("REPORT", "READ"),
    ("SYSTEM", "EVALUATE"),
]


class FakeKeycloakProvider:
    """Accepts '<user>-token' bearer tokens."""

    def decode_token(self, token: str) -> OIDCUser | None:
        if not token.endswith("-token"):
            return None
        user_id = token.removesuffix("-token")
        return OIDCUser(user_id=user_id, email=f"{user_id}@example.com", username=user_id)


def auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_id}-token"}


@pytest.fixture
def roles(uow):
    """root is admin; alice is editor (DOCUMENT:READ/WRITE)."""
    seed_user(uow, "root")
    admin, _ = seed_role(uow, "admin", ADMIN_GRANTS)
    editor, _ = seed_role(uow, "editor", [("DOCUMENT", "READ"), ("DOCUMENT", "WRITE")])
    assign(uow, "root", admin)
    assign(uow, "alice", editor)
    return {"admin": admin, "editor": editor}


@pytest.fixture
def app(services, roles):
    """Falcon ASGI app over the fake store."""
    return create_app(
        services,
        middleware=[AuthMiddleware(FakeKeycloakProvider(), services.register_user)],
    )


@pytest.fixture
def client(app) -> TestClient:
    """Falcon ASGI test client."""
    return TestClient(app)
