"""JSON shapes for API responses."""

from datetime import datetime
from typing import Any

from gatekeeper.application.dto.audit_report import AuditReport
from gatekeeper.application.dto.delegation_stats import DelegationStats
from gatekeeper.application.dto.effective_permissions import EffectivePermissions
from gatekeeper.domain.entities import (
    AuditEntry,
    Decision,
    Delegation,
    Permission,
    Role,
    UserRole,
    status_at,
)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def decision_to_dict(decision: Decision) -> dict[str, Any]:
    return {
        "allowed": decision.allowed,
        "decision": decision.decision,
        "reason": decision.reason,
        "timestamp": decision.timestamp.isoformat(),
        "grant": decision.grant.as_dict() if decision.grant else None,
    }


def permission_to_dict(p: Permission) -> dict[str, Any]:
    return {
        "id": str(p.id),
        "name": p.name,
        "resource_type": p.resource_type,
        "action": p.action,
        "description": p.description,
        "created_at": _iso(p.created_at),
    }


def role_to_dict(r: Role) -> dict[str, Any]:
    return {
        "id": str(r.id),
        "name": r.name,
        "description": r.description,
        "created_at": _iso(r.created_at),
    }


def user_role_to_dict(ur: UserRole) -> dict[str, Any]:
    return {
        "user_id": ur.user_id,
        "role_id": str(ur.role_id),
        "assigned_at": ur.assigned_at.isoformat(),
        "assigned_by": ur.assigned_by,
    }


def delegation_to_dict(d: Delegation, now: datetime) -> dict[str, Any]:
    return {
        "id": str(d.id),
        "delegator_id": d.delegator_id,
        "delegatee_id": d.delegatee_id,
        "role_id": str(d.role_id),
        "created_at": d.created_at.isoformat(),
        "expires_at": d.expires_at.isoformat(),
        "revoked_at": _iso(d.revoked_at),
        "end_reason": d.end_reason.value if d.end_reason else None,
        "status": status_at(d, now).value,
    }


def stats_to_dict(s: DelegationStats) -> dict[str, int]:
    return {"total": s.total, "active": s.active, "expired": s.expired, "revoked": s.revoked}


def effective_to_dict(e: EffectivePermissions) -> dict[str, Any]:
    return {
        "user_id": e.user_id,
        "items": [
            {
                **permission_to_dict(p),
                "grants": [g.as_dict() for g in grants],
            }
            for p, grants in sorted(e.grants.items(), key=lambda kv: kv[0].name)
        ],
    }


def audit_entry_to_dict(e: AuditEntry) -> dict[str, Any]:
    return {
        "id": str(e.id),
        "timestamp": e.timestamp.isoformat(),
        "actor_id": e.actor_id,
        "action": e.action.value,
        "resource_type": e.resource_type,
        "resource_id": e.resource_id,
        "result": e.result.value,
        "details": e.details,
        "ip_address": e.ip_address,
        "user_agent": e.user_agent,
    }


def report_to_dict(r: AuditReport) -> dict[str, Any]:
    return {
        "start": r.start.isoformat(),
        "end": r.end.isoformat(),
        "generated_at": r.generated_at.isoformat(),
        "total": r.total,
        "successes": r.successes,
        "failures": r.failures,
        "by_action": r.by_action,
        "by_user": [
            {
                "actor_id": u.actor_id,
                "total": u.total,
                "failures": u.failures,
                "by_action": u.by_action,
            }
            for u in r.by_user
        ],
    }
