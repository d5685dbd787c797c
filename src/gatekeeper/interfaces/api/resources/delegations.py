"""Delegation API resources."""

from datetime import timedelta

import falcon.asgi

from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.delegation.create_delegation import (
    CreateDelegationUseCase,
)
from gatekeeper.application.use_cases.delegation.get_delegation import GetDelegationUseCase
from gatekeeper.application.use_cases.delegation.list_delegations import (
    ListDelegationsUseCase,
)
from gatekeeper.application.use_cases.delegation.revoke_delegation import (
    RevokeDelegationUseCase,
)
from gatekeeper.domain.exceptions import DelegationNotFound, ValidationError
from gatekeeper.domain.value_objects import ResourceType
from gatekeeper.interfaces.api.guard import AccessGuard
from gatekeeper.interfaces.api.params import get_body, parse_uuid
from gatekeeper.interfaces.api.serializers import delegation_to_dict, stats_to_dict

TTL_SECONDS_LIMIT = int(timedelta.max.total_seconds())


class DelegationsResource:
    """GET/POST /v1/delegations - list own delegations and delegate a role."""

    def __init__(
        self,
        create_delegation: CreateDelegationUseCase,
        list_delegations: ListDelegationsUseCase,
        clock: Clock,
    ) -> None:
        self._create = create_delegation
        self._list = list_delegations
        self._clock = clock

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """?as=delegatee (active, default) or ?as=delegator[&include_inactive=true]."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        side = req.get_param("as") or "delegatee"
        if side == "delegatee":
            items = await self._list.for_delegatee(user.user_id)
        elif side == "delegator":
            include_inactive = req.get_param_as_bool("include_inactive") or False
            items = await self._list.for_delegator(user.user_id, include_inactive=include_inactive)
        else:
            raise ValidationError(f"Invalid 'as' parameter: {side!r}")

        now = self._clock.now()
        resp.media = {"items": [delegation_to_dict(d, now) for d in items]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Delegate a role the caller holds directly."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        try:
            body = await get_body(req)
            delegatee_id = body["delegatee_id"]
            role_id = parse_uuid(body["role_id"], "role_id")
            ttl_seconds = body["ttl_seconds"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return
        if not isinstance(ttl_seconds, int) or isinstance(ttl_seconds, bool):
            raise ValidationError("ttl_seconds must be an integer")
        if not isinstance(delegatee_id, str):
            raise ValidationError("delegatee_id must be a string")
        # Out-of-range values still reach the TTL checks, which reject them.
        ttl_seconds = max(-TTL_SECONDS_LIMIT, min(ttl_seconds, TTL_SECONDS_LIMIT))

        delegation = await self._create.execute(
            user.user_id,
            delegatee_id,
            role_id,
            timedelta(seconds=ttl_seconds),
            context=req.context.audit,
        )
        resp.media = delegation_to_dict(delegation, self._clock.now())
        resp.status = falcon.HTTP_201


class DelegationStatsResource:
    """GET /v1/delegations/stats - counts for the caller, or global with DELEGATION:READ."""

    def __init__(self, list_delegations: ListDelegationsUseCase, guard: AccessGuard) -> None:
        self._list = list_delegations
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        scope = req.get_param("user_id")
        if scope is None and req.get_param_as_bool("all"):
            target = None
        else:
            target = scope or user.user_id
        if target != user.user_id and not await self._guard.allows(
            req, ResourceType.DELEGATION, "READ"
        ):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        stats = await self._list.stats(target)
        resp.media = {"user_id": target, **stats_to_dict(stats)}
        resp.status = falcon.HTTP_200


class DelegationResource:
    """GET/DELETE /v1/delegations/{delegation_id} - inspect or revoke."""

    def __init__(
        self,
        get_delegation: GetDelegationUseCase,
        revoke_delegation: RevokeDelegationUseCase,
        guard: AccessGuard,
        clock: Clock,
    ) -> None:
        self._get = get_delegation
        self._revoke = revoke_delegation
        self._guard = guard
        self._clock = clock

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, delegation_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        did = parse_uuid(delegation_id, "delegation ID")
        delegation = await self._get.execute(did)
        parties = (delegation.delegator_id, delegation.delegatee_id)
        if user.user_id not in parties and not await self._guard.allows(
            req, ResourceType.DELEGATION, "READ", delegation_id
        ):
            # Same answer as an unknown id.
            raise DelegationNotFound(did)

        body = delegation_to_dict(delegation, self._clock.now())
        body["valid"] = body["status"] == "ACTIVE"
        resp.media = body
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, delegation_id: str
    ) -> None:
        """Revoke. The delegator may always revoke; others need DELEGATION:MANAGE."""
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return

        did = parse_uuid(delegation_id, "delegation ID")
        try:
            current = await self._get.execute(did)
        except DelegationNotFound:
            current = None
        if (
            current is not None
            and current.delegator_id != user.user_id
            and not await self._guard.allows(req, ResourceType.DELEGATION, "MANAGE", delegation_id)
        ):
            if user.user_id != current.delegatee_id:
                raise DelegationNotFound(did)
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        # Unknown ids go through revoke too so the rejection is audited.
        delegation = await self._revoke.execute(did, user.user_id, context=req.context.audit)
        resp.media = delegation_to_dict(delegation, self._clock.now())
        resp.status = falcon.HTTP_200
