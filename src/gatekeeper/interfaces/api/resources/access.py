"""Access decision API resources."""

import falcon.asgi

from gatekeeper.application.use_cases.access.evaluate_access import (
    MAX_RESOURCE_ID_LENGTH,
    EvaluateAccessUseCase,
)
from gatekeeper.application.use_cases.access.resolve_permissions import (
    ResolvePermissionsUseCase,
)
from gatekeeper.domain.exceptions import ValidationError
from gatekeeper.domain.value_objects import ResourceType
from gatekeeper.interfaces.api.guard import AccessGuard
from gatekeeper.interfaces.api.params import get_body
from gatekeeper.interfaces.api.serializers import decision_to_dict, effective_to_dict

EVALUATE_FOR_OTHERS = (ResourceType.SYSTEM, "EVALUATE")


class AccessEvaluateResource:
    """POST /v1/access/evaluate - ALLOW (200) or DENY (403) with reason."""

    def __init__(self, evaluate_access: EvaluateAccessUseCase, guard: AccessGuard) -> None:
        self._evaluate = evaluate_access
        self._guard = guard

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Evaluate the caller, or user_id when the caller may evaluate for others."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        body = await get_body(req)
        try:
            resource_type = body["resource_type"]
            action = body["action"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return
        for name in ("resource_type", "action"):
            if not isinstance(body[name], str):
                raise ValidationError(f"{name} must be a string")
        for name in ("resource_id", "user_id"):
            if body.get(name) is not None and not isinstance(body[name], str):
                raise ValidationError(f"{name} must be a string")
        resource_id = body.get("resource_id")
        if resource_id and len(resource_id) > MAX_RESOURCE_ID_LENGTH:
            raise ValidationError(
                f"resource_id must be at most {MAX_RESOURCE_ID_LENGTH} characters"
            )
        subject = body.get("user_id") or user.user_id

        if subject != user.user_id and not await self._guard.allows(req, *EVALUATE_FOR_OTHERS):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        decision = await self._evaluate.execute(
            subject,
            resource_type,
            action,
            resource_id=resource_id,
            context=req.context.audit,
        )
        resp.media = {"user_id": subject, **decision_to_dict(decision)}
        resp.status = falcon.HTTP_200 if decision.allowed else falcon.HTTP_403


class EffectivePermissionsResource:
    """GET /v1/access/permissions - effective permissions with their grants."""

    def __init__(self, resolver: ResolvePermissionsUseCase, guard: AccessGuard) -> None:
        self._resolver = resolver
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        subject = req.get_param("user_id") or user.user_id
        if subject != user.user_id and not await self._guard.allows(
            req, ResourceType.USER, "READ", subject
        ):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        effective = await self._resolver.execute(subject)
        resp.media = effective_to_dict(effective)
        resp.status = falcon.HTTP_200
