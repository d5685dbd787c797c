"""Request parameter parsing shared by resources."""

from datetime import UTC, datetime
from uuid import UUID

import falcon.asgi

from gatekeeper.domain.exceptions import ValidationError


def parse_uuid(value: str, name: str) -> UUID:
    try:
        return UUID(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid {name}: {value!r}") from e


def get_datetime(req: falcon.asgi.Request, name: str) -> datetime | None:
    """ISO 8601 query parameter; naive values are taken as UTC."""
    raw = req.get_param(name)
    if not raw:
        return None
    try:
        value = datetime.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {raw!r}") from e
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def get_limit(req: falcon.asgi.Request, default: int = 100) -> int:
    return req.get_param_as_int("limit", min_value=1, max_value=1000) or default


async def get_body(req: falcon.asgi.Request) -> dict:
    """JSON request body; anything but an object is a ValidationError."""
    body = await req.get_media()
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
