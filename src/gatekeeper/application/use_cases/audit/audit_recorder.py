"""Audit recorder - writes audit entries before operations report completion."""

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any
from uuid import uuid4

from gatekeeper.application.dto.audit_context import AuditContext
from gatekeeper.application.ports import Clock, UnitOfWork
from gatekeeper.domain.entities import AuditEntry
from gatekeeper.domain.exceptions import (
    AuditWriteFailed,
    NotFound,
    PreconditionFailed,
)
from gatekeeper.domain.value_objects import AuditAction, AuditResult

logger = logging.getLogger(__name__)


class AuditRecorder:
    """Builds audit entries and persists them.

    append() writes inside the caller's transaction, so the mutation and its
    entry commit together. write() uses a transaction of its own. Either way
    a failed write surfaces as AuditWriteFailed and is never dropped.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    def _entry(
        self,
        *,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        result: AuditResult,
        details: Mapping[str, Any] | None,
        context: AuditContext | None,
    ) -> AuditEntry:
        context = context or AuditContext()
        return AuditEntry(
            id=uuid4(),
            timestamp=self._clock.now(),
            actor_id=actor_id,
            action=action,
            resource_type=str(resource_type),
            resource_id=resource_id,
            result=result,
            details=dict(details or {}),
            ip_address=context.ip_address,
            user_agent=context.user_agent,
        )

    async def append(
        self,
        uow: UnitOfWork,
        *,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        result: AuditResult = AuditResult.SUCCESS,
        details: Mapping[str, Any] | None = None,
        context: AuditContext | None = None,
    ) -> AuditEntry:
        """Append entry within an open unit of work."""
        entry = self._entry(
            actor_id=actor_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            result=result,
            details=details,
            context=context,
        )
        try:
            await uow.audit_logs.append(entry)
        except Exception as e:
            logger.error("Audit write failed for %s on %s/%s: %s", action, resource_type, resource_id, e)
            raise AuditWriteFailed(f"Could not persist {action} audit entry") from e
        return entry

    async def write(
        self,
        *,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        result: AuditResult = AuditResult.SUCCESS,
        details: Mapping[str, Any] | None = None,
        context: AuditContext | None = None,
    ) -> AuditEntry:
        """Append entry in its own transaction and commit it."""
        try:
            async with self._uow_factory() as uow:
                return await self.append(
                    uow,
                    actor_id=actor_id,
                    action=action,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    result=result,
                    details=details,
                    context=context,
                )
        except AuditWriteFailed:
            raise
        except Exception as e:
            logger.error("Audit commit failed for %s on %s/%s: %s", action, resource_type, resource_id, e)
            raise AuditWriteFailed(f"Could not persist {action} audit entry") from e

    @asynccontextmanager
    async def rejections(
        self,
        *,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        details: Mapping[str, Any] | None = None,
        context: AuditContext | None = None,
    ) -> AsyncIterator[None]:
        """Record a FAILURE entry when the wrapped operation is rejected.

        Only NotFound and PreconditionFailed are recorded; the exception is
        re-raised unchanged.
        """
        try:
            yield
        except (NotFound, PreconditionFailed) as e:
            await self.write(
                actor_id=actor_id,
                action=action,
                resource_type=resource_type,
                resource_id=resource_id,
                result=AuditResult.FAILURE,
                details={**(details or {}), "error": str(e), "error_type": type(e).__name__},
                context=context,
            )
            raise
