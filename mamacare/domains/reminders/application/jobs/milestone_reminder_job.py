# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Pregnancy milestone reminders.
# ============================================================================
"""Milestone Reminder Job.

Reads the stored ``current_week``, so it must run after the gestational
age recalculation of the same day (see ``PregnancyDailyJob``).
"""

import logging
from typing import TYPE_CHECKING

from ...domain.services.milestones import get_milestone
from ..dto import JobContext, JobReport, OutcomeKind
from ..services.notification_factory import milestone_reminder

if TYPE_CHECKING:
    from ...domain.entities import Patient
    from ...domain.services.milestones import Milestone
    from ..ports import IPatientRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class MilestoneReminderJob:
    name = "pregnancy_milestones"

    def __init__(self, patients: "IPatientRepository", dispatcher: "NotificationDispatcher") -> None:
        self._patients = patients
        self._dispatcher = dispatcher

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)

        for patient in await self._patients.find_pregnant():
            week = patient.pregnancy.current_week
            milestone = get_milestone(week)
            if milestone is None:
                continue
            report.candidates += 1
            if not patient.user_id:
                report.record(str(patient.id), OutcomeKind.DATA_ERROR, "patient has no user")
                continue

            try:
                await self._remind(patient, milestone, report)
            except Exception as e:
                logger.error(f"Milestone reminder for patient {patient.id} failed: {e}", exc_info=True)
                report.record(str(patient.id), OutcomeKind.DELIVERY_ERROR, str(e))

        return report.finish()

    async def _remind(self, patient: "Patient", milestone: "Milestone", report: JobReport) -> None:
        week = milestone.week
        result = await self._dispatcher.dispatch([patient.user_id], milestone_reminder(milestone))
        if result.success:
            report.record(str(patient.id), OutcomeKind.OK, f"week {week}")
            logger.info(f"Sent pregnancy milestone for week {week} to patient {patient.id}")
        elif result.errors:
            report.record(str(patient.id), OutcomeKind.DELIVERY_ERROR, "; ".join(result.errors))
        else:
            report.record(str(patient.id), OutcomeKind.SKIPPED)
