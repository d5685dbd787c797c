"""Translation of domain exceptions into HTTP responses."""

import logging

import falcon
import falcon.asgi

from gatekeeper.domain.exceptions import (
    AuditWriteFailed,
    GatekeeperError,
    InvalidTTL,
    NotFound,
    PreconditionFailed,
    StoreUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[GatekeeperError], str]] = [
    (NotFound, falcon.HTTP_404),
    (InvalidTTL, falcon.HTTP_400),
    (PreconditionFailed, falcon.HTTP_409),
    (ValidationError, falcon.HTTP_400),
    (StoreUnavailable, falcon.HTTP_503),
    (AuditWriteFailed, falcon.HTTP_500),
]


def status_for(ex: GatekeeperError) -> str:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(ex, error_type):
            return status
    return falcon.HTTP_500


async def handle_domain_error(req, resp, ex: GatekeeperError, params) -> None:
    status = status_for(ex)
    if status == falcon.HTTP_500:
        logger.error("%s %s failed: %s", req.method, req.path, ex)
    resp.status = status
    resp.media = {"error": str(ex), "type": type(ex).__name__}
    if isinstance(ex, StoreUnavailable):
        resp.set_header("Retry-After", "1")


async def handle_unexpected(req, resp, ex: Exception, params) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Most specific handler wins, so HTTPError keeps Falcon's own handler."""
    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(GatekeeperError, handle_domain_error)
