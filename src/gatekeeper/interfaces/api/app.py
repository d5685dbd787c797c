"""Falcon ASGI application."""

from dataclasses import dataclass
from datetime import timedelta

import falcon.asgi
from falcon.asgi import App

from gatekeeper.application.ports import Clock
from gatekeeper.application.use_cases.access.evaluate_access import EvaluateAccessUseCase
from gatekeeper.application.use_cases.access.resolve_permissions import (
    ResolvePermissionsUseCase,
)
from gatekeeper.application.use_cases.audit.audit_recorder import AuditRecorder
from gatekeeper.application.use_cases.audit.generate_report import GenerateAuditReportUseCase
from gatekeeper.application.use_cases.audit.read_audit_logs import ReadAuditLogsUseCase
from gatekeeper.application.use_cases.delegation.cleanup_expired import (
    CleanupExpiredDelegationsUseCase,
)
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
from gatekeeper.application.use_cases.store.assign_role_permission import (
    AssignRolePermissionUseCase,
)
from gatekeeper.application.use_cases.store.assign_user_role import AssignUserRoleUseCase
from gatekeeper.application.use_cases.store.bootstrap_admin import BootstrapAdminUseCase
from gatekeeper.application.use_cases.store.create_permission import CreatePermissionUseCase
from gatekeeper.application.use_cases.store.create_role import CreateRoleUseCase
from gatekeeper.application.use_cases.store.get_role_permissions import (
    GetRolePermissionsUseCase,
    GetUserRolesUseCase,
    ListCatalogUseCase,
)
from gatekeeper.application.use_cases.store.register_user import RegisterUserUseCase
from gatekeeper.application.use_cases.store.remove_role_permission import (
    RemoveRolePermissionUseCase,
)
from gatekeeper.application.use_cases.store.remove_user_role import RemoveUserRoleUseCase
from gatekeeper.domain.value_objects import ResourceTypeRegistry
from gatekeeper.interfaces.api.errors import register_error_handlers
from gatekeeper.interfaces.api.guard import AccessGuard
from gatekeeper.interfaces.api.resources.access import (
    AccessEvaluateResource,
    EffectivePermissionsResource,
)
from gatekeeper.interfaces.api.resources.audit import (
    AuditLogResource,
    AuditLogsResource,
    AuditReportResource,
    ProjectAuditLogsResource,
    SecurityEventsResource,
    UserAuditLogsResource,
)
from gatekeeper.interfaces.api.resources.delegations import (
    DelegationResource,
    DelegationsResource,
    DelegationStatsResource,
)
from gatekeeper.interfaces.api.resources.health import HealthResource
from gatekeeper.interfaces.api.resources.roles import (
    PermissionsResource,
    RolePermissionResource,
    RolePermissionsResource,
    RolesResource,
    UserRoleResource,
    UserRolesResource,
)


@dataclass
class Services:
    """Use cases wired to one unit-of-work factory and clock."""

    clock: Clock
    audit_recorder: AuditRecorder
    resolve_permissions: ResolvePermissionsUseCase
    evaluate_access: EvaluateAccessUseCase
    create_delegation: CreateDelegationUseCase
    revoke_delegation: RevokeDelegationUseCase
    get_delegation: GetDelegationUseCase
    list_delegations: ListDelegationsUseCase
    cleanup_expired: CleanupExpiredDelegationsUseCase
    read_audit_logs: ReadAuditLogsUseCase
    generate_report: GenerateAuditReportUseCase
    catalog: ListCatalogUseCase
    get_role_permissions: GetRolePermissionsUseCase
    get_user_roles: GetUserRolesUseCase
    create_permission: CreatePermissionUseCase
    create_role: CreateRoleUseCase
    assign_role_permission: AssignRolePermissionUseCase
    remove_role_permission: RemoveRolePermissionUseCase
    assign_user_role: AssignUserRoleUseCase
    remove_user_role: RemoveUserRoleUseCase
    register_user: RegisterUserUseCase
    bootstrap_admin: BootstrapAdminUseCase


def build_services(
    unit_of_work_factory: type,
    clock: Clock,
    resource_types: ResourceTypeRegistry | None = None,
    max_delegation_ttl: timedelta | None = None,
    security_window: timedelta = timedelta(hours=24),
) -> Services:
    """Wire all use cases."""
    resource_types = resource_types or ResourceTypeRegistry()
    audit = AuditRecorder(unit_of_work_factory, clock)
    resolver = ResolvePermissionsUseCase(unit_of_work_factory, clock)
    register_user = RegisterUserUseCase(unit_of_work_factory, clock)
    assign_user_role = AssignUserRoleUseCase(unit_of_work_factory, audit, clock)
    return Services(
        clock=clock,
        audit_recorder=audit,
        resolve_permissions=resolver,
        evaluate_access=EvaluateAccessUseCase(
            unit_of_work_factory, resolver, audit, clock, resource_types
        ),
        create_delegation=CreateDelegationUseCase(
            unit_of_work_factory, audit, clock, max_ttl=max_delegation_ttl
        ),
        revoke_delegation=RevokeDelegationUseCase(unit_of_work_factory, audit, clock),
        get_delegation=GetDelegationUseCase(unit_of_work_factory, clock),
        list_delegations=ListDelegationsUseCase(unit_of_work_factory, clock),
        cleanup_expired=CleanupExpiredDelegationsUseCase(unit_of_work_factory, audit, clock),
        read_audit_logs=ReadAuditLogsUseCase(
            unit_of_work_factory, clock, security_window=security_window
        ),
        generate_report=GenerateAuditReportUseCase(unit_of_work_factory, clock),
        catalog=ListCatalogUseCase(unit_of_work_factory),
        get_role_permissions=GetRolePermissionsUseCase(unit_of_work_factory),
        get_user_roles=GetUserRolesUseCase(unit_of_work_factory),
        create_permission=CreatePermissionUseCase(
            unit_of_work_factory, audit, clock, resource_types
        ),
        create_role=CreateRoleUseCase(unit_of_work_factory, audit, clock),
        assign_role_permission=AssignRolePermissionUseCase(unit_of_work_factory, audit),
        remove_role_permission=RemoveRolePermissionUseCase(unit_of_work_factory, audit),
        assign_user_role=assign_user_role,
        remove_user_role=RemoveUserRoleUseCase(unit_of_work_factory, audit),
        register_user=register_user,
        bootstrap_admin=BootstrapAdminUseCase(
            unit_of_work_factory, register_user, assign_user_role
        ),
    )


def create_app(
    services: Services,
    middleware: list | None = None,
    health_resource: HealthResource | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    s = services
    guard = AccessGuard(s.evaluate_access)
    health = health_resource or HealthResource()

    app = falcon.asgi.App(middleware=middleware or [])
    register_error_handlers(app)

    app.add_route("/v1/health", health)
    app.add_route("/v1/health/ready", health, suffix="ready")

    app.add_route("/v1/access/evaluate", AccessEvaluateResource(s.evaluate_access, guard))
    app.add_route(
        "/v1/access/permissions", EffectivePermissionsResource(s.resolve_permissions, guard)
    )

    app.add_route(
        "/v1/delegations",
        DelegationsResource(s.create_delegation, s.list_delegations, s.clock),
    )
    app.add_route("/v1/delegations/stats", DelegationStatsResource(s.list_delegations, guard))
    app.add_route(
        "/v1/delegations/{delegation_id}",
        DelegationResource(s.get_delegation, s.revoke_delegation, guard, s.clock),
    )

    app.add_route("/v1/audit/logs", AuditLogsResource(s.read_audit_logs, guard))
    app.add_route("/v1/audit/logs/{entry_id}", AuditLogResource(s.read_audit_logs, guard))
    app.add_route("/v1/audit/users/{user_id}", UserAuditLogsResource(s.read_audit_logs, guard))
    app.add_route(
        "/v1/audit/projects/{project_id}", ProjectAuditLogsResource(s.read_audit_logs, guard)
    )
    app.add_route(
        "/v1/audit/security-events", SecurityEventsResource(s.read_audit_logs, guard)
    )
    app.add_route("/v1/audit/report", AuditReportResource(s.generate_report, guard))

    app.add_route("/v1/roles", RolesResource(s.catalog, s.create_role, guard))
    app.add_route(
        "/v1/roles/{role_id}/permissions",
        RolePermissionsResource(s.get_role_permissions, s.assign_role_permission, guard),
    )
    app.add_route(
        "/v1/roles/{role_id}/permissions/{permission_id}",
        RolePermissionResource(s.remove_role_permission, guard),
    )
    app.add_route("/v1/permissions", PermissionsResource(s.catalog, s.create_permission, guard))
    app.add_route(
        "/v1/users/{user_id}/roles",
        UserRolesResource(s.get_user_roles, s.assign_user_role, guard),
    )
    app.add_route(
        "/v1/users/{user_id}/roles/{role_id}",
        UserRoleResource(s.remove_user_role, guard),
    )
    return app
