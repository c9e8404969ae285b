# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Daily gestational week recalculation.
# ============================================================================
"""Gestational Age Recalculator.

Derives ``current_week`` from the estimated due date of every active
pregnant patient and writes it back only when it changed. Running twice
on the same day performs no additional writes.
"""

import logging
from typing import TYPE_CHECKING

from mamacare.core.domain.exceptions import InvalidRecordError
from mamacare.core.shared.time_utils import utc_date

from ...domain.entities import Patient
from ...domain.services.gestational_age import compute_current_week, parse_due_date
from ..dto import JobContext, JobReport, OutcomeKind

if TYPE_CHECKING:
    from datetime import date

    from ..ports import IPatientRepository

logger = logging.getLogger(__name__)


class GestationalAgeRecalculator:
    name = "gestational_age"

    def __init__(self, patients: "IPatientRepository") -> None:
        self._patients = patients

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)
        today = utc_date(ctx.now)

        patients = await self._patients.find_pregnant_with_due_date()
        report.candidates = len(patients)
        for patient in patients:
            try:
                await self._recalculate(patient, today, report)
            except InvalidRecordError as e:
                logger.warning(f"Skipping patient {patient.id}: {e.message}")
                report.record(str(patient.id), OutcomeKind.DATA_ERROR, e.reason)
            except Exception as e:
                logger.error(f"Gestational week update for patient {patient.id} failed: {e}", exc_info=True)
                report.record(str(patient.id), OutcomeKind.DATA_ERROR, str(e))

        if report.affected:
            logger.info(f"Updated gestational week for {report.affected} patients")
        return report.finish()

    async def _recalculate(self, patient: Patient, today: "date", report: JobReport) -> None:
        pregnancy = patient.pregnancy
        try:
            due_date = parse_due_date(pregnancy.estimated_due_date)
        except ValueError as e:
            raise InvalidRecordError("patient", patient.id, f"invalid due date: {e}") from e

        week = compute_current_week(due_date, today)
        if week == pregnancy.current_week:
            report.record(str(patient.id), OutcomeKind.SKIPPED, "unchanged")
            return

        if await self._patients.update_current_week(str(patient.id), pregnancy.current_week, week):
            pregnancy.current_week = week
            report.affected += 1
            report.record(str(patient.id), OutcomeKind.OK, f"week {week}")
        else:
            report.record(str(patient.id), OutcomeKind.SKIPPED, "changed concurrently")
