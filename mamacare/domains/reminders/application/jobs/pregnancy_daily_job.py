# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Daily pregnancy slot (recalculation, then milestones).
# ============================================================================
"""Pregnancy Daily Job.

Runs the gestational age recalculation and the milestone reminders in one
slot, in that order. The startup run only recalculates.
"""

import logging
from datetime import time
from typing import TYPE_CHECKING

from ..dto import JobContext, JobReport, RunReason
from .cadence import Cadence, DailyCadence
from .gestational_age_job import GestationalAgeRecalculator
from .milestone_reminder_job import MilestoneReminderJob

if TYPE_CHECKING:
    from ..ports import IPatientRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class PregnancyDailyJob:
    name = "pregnancy_daily"

    def __init__(
        self,
        patients: "IPatientRepository",
        dispatcher: "NotificationDispatcher",
        cadence: Cadence | None = None,
    ) -> None:
        self.recalculator = GestationalAgeRecalculator(patients)
        self.milestones = MilestoneReminderJob(patients, dispatcher)
        self.cadence = cadence or DailyCadence(at=time(9, 0), run_on_startup=True)

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)

        recalculation = await self.recalculator.run(ctx)
        report.merge(recalculation)

        if ctx.reason is RunReason.STARTUP:
            logger.info("Startup run: gestational weeks recalculated, milestones deferred to the daily slot")
            return report.finish()

        report.merge(await self.milestones.run(ctx))
        return report.finish()
