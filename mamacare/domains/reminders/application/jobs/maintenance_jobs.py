# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Housekeeping jobs (marker cleanup, receipt reconciliation).
# ============================================================================
"""Maintenance Jobs."""

import logging
from datetime import time, timedelta
from typing import TYPE_CHECKING

from ..dto import JobContext, JobReport
from .cadence import Cadence, DailyCadence, IntervalCadence

if TYPE_CHECKING:
    from ..ports import IAppointmentRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class ReminderCleanupJob:
    """Clears reminder markers of appointments older than the retention."""

    name = "reminder_cleanup"

    def __init__(
        self,
        appointments: "IAppointmentRepository",
        cadence: Cadence | None = None,
        retention: timedelta = timedelta(days=30),
    ) -> None:
        self._appointments = appointments
        self.cadence = cadence or DailyCadence(at=time(0, 0))
        self._retention = retention

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        report.affected = await self._appointments.clear_stale_markers(ctx.now - self._retention)
        logger.info(f"Cleaned up reminder flags for {report.affected} old appointments")
        return report.finish()


class ReceiptReconciliationJob:
    """Periodically reconciles push receipts of accepted tickets."""

    name = "push_receipts"

    def __init__(self, dispatcher: "NotificationDispatcher", cadence: Cadence | None = None) -> None:
        self._dispatcher = dispatcher
        self.cadence = cadence or IntervalCadence(timedelta(minutes=15))

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        reconciliation = await self._dispatcher.reconcile_receipts(ctx.now)
        report.candidates = reconciliation.checked
        report.affected = reconciliation.tokens_cleared
        if reconciliation.errors:
            report.error = "; ".join(reconciliation.errors)
        return report.finish()
