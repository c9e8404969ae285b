# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Daily routine checkup nudges.
# ============================================================================
"""Checkup Reminder Job.

Active patients not seen for ``interval_months`` (or never) and with no
upcoming appointment get a checkup reminder. Nothing suppresses the
reminder across days: an eligible patient is reminded every day.
"""

import logging
from datetime import time
from typing import TYPE_CHECKING

from mamacare.core.shared.time_utils import subtract_months

from ..dto import JobContext, JobReport, OutcomeKind
from ..services.notification_factory import checkup_reminder
from .cadence import Cadence, DailyCadence

if TYPE_CHECKING:
    from datetime import datetime

    from ..ports import IAppointmentRepository, IPatientRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class CheckupReminderJob:
    name = "checkup_reminders"

    def __init__(
        self,
        patients: "IPatientRepository",
        appointments: "IAppointmentRepository",
        dispatcher: "NotificationDispatcher",
        cadence: Cadence | None = None,
        interval_months: int = 6,
    ) -> None:
        self._patients = patients
        self._appointments = appointments
        self._dispatcher = dispatcher
        self.cadence = cadence or DailyCadence(at=time(8, 0))
        self._interval_months = interval_months

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        cutoff = subtract_months(ctx.now, self._interval_months)

        patients = await self._patients.find_due_for_checkup(cutoff)
        report.candidates = len(patients)
        for patient in patients:
            record_id = str(patient.id)
            if not patient.user_id:
                report.record(record_id, OutcomeKind.DATA_ERROR, "patient has no user")
                continue
            try:
                await self._remind(record_id, patient.user_id, ctx.now, report)
            except Exception as e:
                logger.error(f"Checkup reminder for patient {record_id} failed: {e}", exc_info=True)
                report.record(record_id, OutcomeKind.DELIVERY_ERROR, str(e))

        logger.info(f"Checkup reminders sent to {report.ok} of {report.candidates} patients")
        return report.finish()

    async def _remind(self, record_id: str, user_id: str, now: "datetime", report: JobReport) -> None:
        if await self._appointments.count_upcoming(record_id, now) > 0:
            report.record(record_id, OutcomeKind.SKIPPED, "upcoming appointment")
            return

        result = await self._dispatcher.dispatch([user_id], checkup_reminder())
        if result.success:
            report.record(record_id, OutcomeKind.OK)
        elif result.errors:
            report.record(record_id, OutcomeKind.DELIVERY_ERROR, "; ".join(result.errors))
        else:
            report.record(record_id, OutcomeKind.SKIPPED)
