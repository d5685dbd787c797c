"""Application entry point and composition root."""

import argparse
import asyncio
import logging

from gatekeeper import __version__
from gatekeeper.config import Settings, get_settings
from gatekeeper.domain.value_objects import ResourceTypeRegistry
from gatekeeper.infrastructure.auth.keycloak_provider import KeycloakProvider
from gatekeeper.infrastructure.clock.system_clock import SystemClock
from gatekeeper.infrastructure.persistence.postgres.connection import create_pool
from gatekeeper.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from gatekeeper.interfaces.api.app import Services, build_services, create_app
from gatekeeper.interfaces.api.middleware.auth import AuthMiddleware
from gatekeeper.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from gatekeeper.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _services(settings: Settings, uow_factory) -> Services:
    return build_services(
        uow_factory,
        SystemClock(),
        resource_types=ResourceTypeRegistry(settings.extra_resource_type_list),
        max_delegation_ttl=settings.max_delegation_ttl,
        security_window=settings.security_events_window,
    )


def create_gatekeeper_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)
    pool = create_pool(
        settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.pool_timeout,
    )
    uow_factory = create_uow_factory(pool)

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("KEYCLOAK_CLIENT_SECRET not set; all requests are unauthenticated")

    services = _services(settings, uow_factory)
    logger.info("Gatekeeper v%s (%s)", __version__, settings.environment)
    return create_app(
        services,
        middleware=[
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak, services.register_user),
        ],
        health_resource=HealthResource(pool),
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    app = create_gatekeeper_app()
    uvicorn.run(app, host=settings.host, port=settings.port)


async def _cleanup() -> int:
    settings = get_settings()
    pool = create_pool(settings.database_url, min_size=1, max_size=1, timeout=settings.pool_timeout)
    await pool.open()
    try:
        services = _services(settings, create_uow_factory(pool))
        return await services.cleanup_expired.execute()
    finally:
        await pool.close()


def cleanup() -> None:
    """CLI entry point: mark lapsed delegations expired once (for cron)."""
    configure_logging(get_settings())
    count = asyncio.run(_cleanup())
    print(f"Expired {count} delegations")


async def _grant_admin(user_ids: list[str]) -> list[str]:
    settings = get_settings()
    pool = create_pool(settings.database_url, min_size=1, max_size=1, timeout=settings.pool_timeout)
    await pool.open()
    try:
        services = _services(settings, create_uow_factory(pool))
        return await services.bootstrap_admin.execute(user_ids)
    finally:
        await pool.close()


def grant_admin() -> None:
    """CLI entry point: give the admin role to the given user ids (first-time setup)."""
    parser = argparse.ArgumentParser(prog="gatekeeper-grant-admin")
    parser.add_argument("user_ids", nargs="+", help="Identity provider subject ids")
    args = parser.parse_args()
    configure_logging(get_settings())
    granted = asyncio.run(_grant_admin(args.user_ids))
    print(f"Granted admin to {len(granted)} of {len(args.user_ids)} users")


def main() -> None:
    """CLI entry point."""
    run_server()
