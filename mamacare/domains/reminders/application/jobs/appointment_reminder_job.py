# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Hourly 24h / 1h appointment reminders.
# ============================================================================
"""Appointment Reminder Job.

Each poll runs two independent queries, one per reminder class, for
appointments whose time falls inside the class window. A marker is only
advanced after a delivered push; failed sends stay eligible for the next
poll. Once a window has passed it is never caught up.
"""

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from ...domain.entities import Appointment
from ...domain.services.time_window import ReminderWindow, day_before_window, hour_before_window
from ...domain.value_objects import ReminderKind, ReminderMarker
from ..dto import JobContext, JobReport, OutcomeKind
from ..services.notification_factory import appointment_reminder
from .cadence import Cadence, IntervalCadence

if TYPE_CHECKING:
    from datetime import datetime

    from ..ports import IAppointmentRepository
    from ..services import NotificationDispatcher

logger = logging.getLogger(__name__)


class AppointmentReminderJob:
    """Sends day-before and hour-before appointment reminders."""

    name = "appointment_reminders"

    def __init__(
        self,
        appointments: "IAppointmentRepository",
        dispatcher: "NotificationDispatcher",
        cadence: Cadence | None = None,
        day_before_tolerance: timedelta = timedelta(hours=1),
        hour_before_tolerance: timedelta = timedelta(minutes=15),
    ) -> None:
        self._appointments = appointments
        self._dispatcher = dispatcher
        self.cadence = cadence or IntervalCadence(timedelta(hours=1))
        self._windows: tuple[tuple[ReminderKind, ReminderWindow], ...] = (
            (ReminderKind.DAY_BEFORE, day_before_window(day_before_tolerance)),
            (ReminderKind.HOUR_BEFORE, hour_before_window(hour_before_tolerance)),
        )

    async def run(self, ctx: JobContext) -> JobReport:
        report = JobReport(job_name=self.name, started_at=ctx.now)

        for kind, window in self._windows:
            start, end = window.scheduled_range(ctx.now)
            candidates = await self._appointments.find_for_reminder(start, end, ReminderMarker.blocking(kind))
            report.candidates += len(candidates)
            logger.debug(f"{len(candidates)} appointments in {kind.display_name} window [{start}, {end}]")
            for appointment in candidates:
                try:
                    await self._remind(appointment, kind, window, ctx.now, report)
                except Exception as e:
                    logger.error(
                        f"{kind.display_name} reminder for appointment {appointment.id} failed: {e}", exc_info=True
                    )
                    report.record(str(appointment.id), OutcomeKind.DELIVERY_ERROR, str(e))

        return report.finish()

    async def _remind(
        self,
        appointment: Appointment,
        kind: ReminderKind,
        window: ReminderWindow,
        now: "datetime",
        report: JobReport,
    ) -> None:
        record_id = str(appointment.id)

        if appointment.scheduled_at is None:
            report.record(record_id, OutcomeKind.DATA_ERROR, "appointment has no date")
            logger.warning(f"Appointment {record_id} has no date, skipping")
            return
        if not appointment.recipient_id:
            report.record(record_id, OutcomeKind.DATA_ERROR, "appointment has no patient user")
            logger.warning(f"Appointment {record_id} has no patient user, skipping")
            return
        if not appointment.needs_reminder(kind) or not window.matches(now, appointment.scheduled_at):
            report.record(record_id, OutcomeKind.SKIPPED, "not eligible")
            return

        result = await self._dispatcher.dispatch([appointment.recipient_id], appointment_reminder(appointment, kind))

        if not result.success:
            if result.errors:
                report.record(record_id, OutcomeKind.DELIVERY_ERROR, "; ".join(result.errors))
                logger.warning(f"{kind.display_name} reminder for appointment {record_id} failed: {result.errors}")
            else:
                reasons = ", ".join(reason.value for reason in result.skipped.values())
                report.record(record_id, OutcomeKind.SKIPPED, reasons)
            return

        previous = appointment.reminders_sent
        marker = appointment.mark_reminder_sent(kind)
        if await self._appointments.update_reminder_marker(record_id, previous, marker):
            report.affected += 1
        else:
            logger.warning(f"Reminder marker of appointment {record_id} changed concurrently, not overwritten")
        report.record(record_id, OutcomeKind.OK, marker.value)
        logger.info(f"Sent {kind.display_name} reminder for appointment {record_id}")
