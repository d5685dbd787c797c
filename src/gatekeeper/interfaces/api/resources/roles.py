"""Role, permission and role-assignment API resources."""

import falcon.asgi

from gatekeeper.application.use_cases.store.assign_role_permission import (
    AssignRolePermissionUseCase,
)
from gatekeeper.application.use_cases.store.assign_user_role import AssignUserRoleUseCase
from gatekeeper.application.use_cases.store.create_permission import CreatePermissionUseCase
from gatekeeper.application.use_cases.store.create_role import CreateRoleUseCase
from gatekeeper.application.use_cases.store.get_role_permissions import (
    GetRolePermissionsUseCase,
    GetUserRolesUseCase,
    ListCatalogUseCase,
)
from gatekeeper.application.use_cases.store.remove_role_permission import (
    RemoveRolePermissionUseCase,
)
from gatekeeper.application.use_cases.store.remove_user_role import RemoveUserRoleUseCase
from gatekeeper.domain.value_objects import ResourceType
from gatekeeper.interfaces.api.guard import AccessGuard
from gatekeeper.interfaces.api.params import get_body, parse_uuid
from gatekeeper.interfaces.api.serializers import (
    permission_to_dict,
    role_to_dict,
    user_role_to_dict,
)


class RolesResource:
    """GET/POST /v1/roles."""

    def __init__(
        self,
        catalog: ListCatalogUseCase,
        create_role: CreateRoleUseCase,
        guard: AccessGuard,
    ) -> None:
        self._catalog = catalog
        self._create = create_role
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.ROLE, "READ"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        roles = await self._catalog.roles()
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.ROLE, "MANAGE"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        try:
            body = await get_body(req)
            name = body["name"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        role = await self._create.execute(
            user.user_id, name, body.get("description"), context=req.context.audit
        )
        resp.media = role_to_dict(role)
        resp.status = falcon.HTTP_201


class RolePermissionsResource:
    """GET/POST /v1/roles/{role_id}/permissions."""

    def __init__(
        self,
        get_role_permissions: GetRolePermissionsUseCase,
        assign_permission: AssignRolePermissionUseCase,
        guard: AccessGuard,
    ) -> None:
        self._get = get_role_permissions
        self._assign = assign_permission
        self._guard = guard

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.ROLE, "READ", role_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        perms = await self._get.execute(parse_uuid(role_id, "role ID"))
        resp.media = {
            "items": [permission_to_dict(p) for p in sorted(perms, key=lambda p: p.name)]
        }
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.ROLE, "MANAGE", role_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        try:
            body = await get_body(req)
            permission_id = parse_uuid(body["permission_id"], "permission ID")
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        await self._assign.execute(
            user.user_id,
            parse_uuid(role_id, "role ID"),
            permission_id,
            context=req.context.audit,
        )
        resp.media = {"role_id": role_id, "permission_id": str(permission_id)}
        resp.status = falcon.HTTP_201


class RolePermissionResource:
    """DELETE /v1/roles/{role_id}/permissions/{permission_id}."""

    def __init__(self, remove_permission: RemoveRolePermissionUseCase, guard: AccessGuard) -> None:
        self._remove = remove_permission
        self._guard = guard

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        role_id: str,
        permission_id: str,
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.ROLE, "MANAGE", role_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        await self._remove.execute(
            user.user_id,
            parse_uuid(role_id, "role ID"),
            parse_uuid(permission_id, "permission ID"),
            context=req.context.audit,
        )
        resp.status = falcon.HTTP_204


class PermissionsResource:
    """GET/POST /v1/permissions."""

    def __init__(
        self,
        catalog: ListCatalogUseCase,
        create_permission: CreatePermissionUseCase,
        guard: AccessGuard,
    ) -> None:
        self._catalog = catalog
        self._create = create_permission
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.PERMISSION, "READ"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        resource_type = req.get_param("resource_type")
        perms = await self._catalog.permissions(resource_type.upper() if resource_type else None)
        resp.media = {"items": [permission_to_dict(p) for p in perms]}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.PERMISSION, "MANAGE"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        try:
            body = await get_body(req)
            name = body["name"]
            resource_type = body["resource_type"]
            action = body["action"]
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        permission = await self._create.execute(
            user.user_id,
            name,
            resource_type,
            action,
            body.get("description"),
            context=req.context.audit,
        )
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class UserRolesResource:
    """GET/POST /v1/users/{user_id}/roles - direct role assignments."""

    def __init__(
        self,
        get_user_roles: GetUserRolesUseCase,
        assign_role: AssignUserRoleUseCase,
        guard: AccessGuard,
    ) -> None:
        self._get = get_user_roles
        self._assign = assign_role
        self._guard = guard

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if user_id != user.user_id and not await self._guard.allows(
            req, ResourceType.USER, "READ", user_id
        ):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        roles = await self._get.execute(user_id)
        resp.media = {"items": [role_to_dict(r) for r in roles]}
        resp.status = falcon.HTTP_200

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.USER, "MANAGE", user_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        try:
            body = await get_body(req)
            role_id = parse_uuid(body["role_id"], "role ID")
        except KeyError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"Missing required field: {e}"}
            return

        user_role = await self._assign.execute(
            user.user_id, user_id, role_id, context=req.context.audit
        )
        resp.media = user_role_to_dict(user_role)
        resp.status = falcon.HTTP_201


class UserRoleResource:
    """DELETE /v1/users/{user_id}/roles/{role_id}."""

    def __init__(self, remove_role: RemoveUserRoleUseCase, guard: AccessGuard) -> None:
        self._remove = remove_role
        self._guard = guard

    async def on_delete(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        user_id: str,
        role_id: str,
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.USER, "MANAGE", user_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        await self._remove.execute(
            user.user_id, user_id, parse_uuid(role_id, "role ID"), context=req.context.audit
        )
        resp.status = falcon.HTTP_204
