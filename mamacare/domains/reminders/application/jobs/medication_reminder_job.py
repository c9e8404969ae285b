# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Medication dose reminders (every 15 minutes).
# ============================================================================
"""Medication Reminder Job.

Dose times come from the medication frequency and are interpreted in the
reminder timezone. No per-dose marker is stored: with a 15-minute poll and
an inclusive +/-15 minute tolerance, a dose whose time lands exactly on a
poll boundary is matched by up to three consecutive polls.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from pytz import timezone

from ...domain.services.frequency_resolver import resolve_frequency
from ...domain.services.time_window import clock_time_in_window
from ..dto import JobContext, JobReport, OutcomeKind
from ..services.notification_factory import medication_reminder
from .cadence import Cadence, IntervalCadence

if TYPE_CHECKING:
    from ...domain.entities import Medication, Patient
    from ..ports import IPatientRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class MedicationReminderJob:
    """Sends a reminder for every dose time within tolerance of now."""

    name = "medication_reminders"

    def __init__(
        self,
        patients: "IPatientRepository",
        dispatcher: "NotificationDispatcher",
        timezone_name: str = "UTC",
        cadence: Cadence | None = None,
        tolerance: timedelta = timedelta(minutes=15),
    ) -> None:
        self._patients = patients
        self._dispatcher = dispatcher
        self._tz = timezone(timezone_name)
        self.cadence = cadence or IntervalCadence(timedelta(minutes=15))
        self._tolerance = tolerance

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        local_now = ctx.now.astimezone(self._tz)

        for patient in await self._patients.find_with_medications():
            medications = patient.active_medications(ctx.now)
            report.candidates += len(medications)
            if medications and not patient.user_id:
                report.record(str(patient.id), OutcomeKind.DATA_ERROR, "patient has no user")
                continue

            for medication in medications:
                for dose_time in resolve_frequency(medication.frequency):
                    if not clock_time_in_window(local_now, dose_time, self._tolerance):
                        continue
                    record_id = f"{medication.id}@{dose_time:%H:%M}"
                    try:
                        await self._remind_dose(patient, medication, record_id, report)
                    except Exception as e:
                        logger.error(f"Medication reminder {record_id} failed: {e}", exc_info=True)
                        report.record(record_id, OutcomeKind.DELIVERY_ERROR, str(e))

        return report.finish()

    async def _remind_dose(
        self, patient: "Patient", medication: "Medication", record_id: str, report: JobReport
    ) -> None:
        result = await self._dispatcher.dispatch([patient.user_id], medication_reminder(medication))
        if result.success:
            report.record(record_id, OutcomeKind.OK)
            logger.info(f"Sent medication reminder for {medication.name} to patient {patient.id}")
        elif result.errors:
            report.record(record_id, OutcomeKind.DELIVERY_ERROR, "; ".join(result.errors))
        else:
            report.record(record_id, OutcomeKind.SKIPPED)
