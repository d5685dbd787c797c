"""Audit log API resources. All require AUDIT_LOG:READ except a user's own trail."""

import falcon.asgi

from gatekeeper.application.dto.audit_query import AuditQuery
from gatekeeper.application.use_cases.audit.generate_report import GenerateAuditReportUseCase
from gatekeeper.application.use_cases.audit.read_audit_logs import ReadAuditLogsUseCase
from gatekeeper.domain.exceptions import ValidationError
from gatekeeper.domain.value_objects import AuditAction, AuditResult, ResourceType
from gatekeeper.interfaces.api.guard import AccessGuard
from gatekeeper.interfaces.api.params import get_datetime, get_limit, parse_uuid
from gatekeeper.interfaces.api.serializers import audit_entry_to_dict, report_to_dict

AUDIT_READ = (ResourceType.AUDIT_LOG, "READ")


def _enum_param(req: falcon.asgi.Request, name: str, enum_type):
    raw = req.get_param(name)
    if not raw:
        return None
    try:
        return enum_type(raw.upper())
    except ValueError as e:
        raise ValidationError(f"Invalid {name}: {raw!r}") from e


class AuditLogsResource:
    """GET /v1/audit/logs - filter by actor, action, resource, result and time range."""

    def __init__(self, read_audit_logs: ReadAuditLogsUseCase, guard: AccessGuard) -> None:
        self._read = read_audit_logs
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, *AUDIT_READ):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        resource_type = req.get_param("resource_type")
        query = AuditQuery(
            actor_id=req.get_param("actor_id"),
            action=_enum_param(req, "action", AuditAction),
            resource_type=resource_type.upper() if resource_type else None,
            resource_id=req.get_param("resource_id"),
            result=_enum_param(req, "result", AuditResult),
            start=get_datetime(req, "start"),
            end=get_datetime(req, "end"),
            limit=get_limit(req),
        )
        entries = await self._read.query(query)
        resp.media = {"items": [audit_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class AuditLogResource:
    """GET /v1/audit/logs/{entry_id}."""

    def __init__(self, read_audit_logs: ReadAuditLogsUseCase, guard: AccessGuard) -> None:
        self._read = read_audit_logs
        self._guard = guard

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, entry_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, *AUDIT_READ, entry_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        entry = await self._read.get(parse_uuid(entry_id, "audit log ID"))
        resp.media = audit_entry_to_dict(entry)
        resp.status = falcon.HTTP_200


class UserAuditLogsResource:
    """GET /v1/audit/users/{user_id} - actions performed by a user."""

    def __init__(self, read_audit_logs: ReadAuditLogsUseCase, guard: AccessGuard) -> None:
        self._read = read_audit_logs
        self._guard = guard

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, user_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if user_id != user.user_id and not await self._guard.allows(req, *AUDIT_READ, user_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        entries = await self._read.for_user(
            user_id,
            start=get_datetime(req, "start"),
            end=get_datetime(req, "end"),
            limit=get_limit(req),
        )
        resp.media = {"items": [audit_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class ProjectAuditLogsResource:
    """GET /v1/audit/projects/{project_id} - entries about one project."""

    def __init__(self, read_audit_logs: ReadAuditLogsUseCase, guard: AccessGuard) -> None:
        self._read = read_audit_logs
        self._guard = guard

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, project_id: str
    ) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, *AUDIT_READ, project_id):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        entries = await self._read.for_project(
            project_id,
            start=get_datetime(req, "start"),
            end=get_datetime(req, "end"),
            limit=get_limit(req),
        )
        resp.media = {"items": [audit_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class SecurityEventsResource:
    """GET /v1/audit/security-events - denials, failures and grant changes."""

    def __init__(self, read_audit_logs: ReadAuditLogsUseCase, guard: AccessGuard) -> None:
        self._read = read_audit_logs
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, *AUDIT_READ):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        entries = await self._read.recent_security_events(
            limit=get_limit(req, default=50),
            since=get_datetime(req, "since"),
        )
        resp.media = {"items": [audit_entry_to_dict(e) for e in entries]}
        resp.status = falcon.HTTP_200


class AuditReportResource:
    """GET /v1/audit/report?start=...&end=..."""

    def __init__(self, generate_report: GenerateAuditReportUseCase, guard: AccessGuard) -> None:
        self._generate = generate_report
        self._guard = guard

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        if not await self._guard.allows(req, ResourceType.REPORT, "READ"):
            resp.status = falcon.HTTP_403
            resp.media = {"error": "Permission denied"}
            return

        start = get_datetime(req, "start")
        end = get_datetime(req, "end")
        if not start or not end:
            raise ValidationError("start and end are required")
        report = await self._generate.execute(start, end)
        resp.media = report_to_dict(report)
        resp.status = falcon.HTTP_200
