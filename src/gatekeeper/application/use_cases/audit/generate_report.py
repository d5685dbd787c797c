"""Generate audit report use case."""

from datetime import datetime

from gatekeeper.application.dto.audit_report import AuditReport, UserActivity
from gatekeeper.application.ports import Clock
from gatekeeper.domain.exceptions import ValidationError
from gatekeeper.domain.value_objects import AuditResult


class GenerateAuditReportUseCase:
    """Aggregate audit counts by user and by action over [start, end)."""

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, start: datetime, end: datetime) -> AuditReport:
        if start >= end:
            raise ValidationError("start must be before end")

        async with self._uow_factory() as uow:
            rows = await uow.audit_logs.count_by_actor_and_action(start, end)

        report = AuditReport(start=start, end=end, generated_at=self._clock.now())
        users: dict[str, UserActivity] = {}
        for row in rows:
            report.total += row.count
            if row.result == AuditResult.FAILURE:
                report.failures += row.count
            else:
                report.successes += row.count
            report.by_action[row.action] = report.by_action.get(row.action, 0) + row.count

            activity = users.setdefault(row.actor_id, UserActivity(actor_id=row.actor_id))
            activity.total += row.count
            if row.result == AuditResult.FAILURE:
                activity.failures += row.count
            activity.by_action[row.action] = activity.by_action.get(row.action, 0) + row.count

        report.by_user = sorted(users.values(), key=lambda a: (-a.total, a.actor_id))
        return report
