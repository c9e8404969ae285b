"""Reminder Runner.

APScheduler-based async runner for the reminder jobs. Each job is armed as a
one-shot ``DateTrigger`` computed from its cadence and re-armed after every
run, always from the current instant. The runner also owns the table of
staff-scheduled one-off reminders.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from apscheduler.jobstores.base import JobLookupError  # type: ignore[import-not-found]
from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-not-found]
from apscheduler.triggers.date import DateTrigger  # type: ignore[import-not-found]
from pytz import utc

from mamacare.core.domain.exceptions import (
    EntityNotFoundException,
    SchedulerNotRunningError,
    ValidationException,
)
from mamacare.core.shared.time_utils import ensure_utc, utc_now

from ...application.dto import JobContext, JobReport, RunReason
from ...application.services.notification_factory import custom_reminder

if TYPE_CHECKING:
    from ...application.jobs import IReminderJob
    from ...application.services import NotificationDispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderHandle:
    """Opaque reference to a scheduled one-off reminder."""

    id: str
    user_id: str
    run_at: datetime


@dataclass
class AdHocReminder:
    handle: ReminderHandle
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)


class AdHocReminderTable:
    """One-off reminders keyed by handle id, owned by a single runner."""

    def __init__(self) -> None:
        self._entries: dict[str, AdHocReminder] = {}

    def add(self, reminder: AdHocReminder) -> None:
        self._entries[reminder.handle.id] = reminder

    def get(self, handle_id: str) -> AdHocReminder | None:
        return self._entries.get(handle_id)

    def remove(self, handle_id: str) -> AdHocReminder | None:
        return self._entries.pop(handle_id, None)

    def handles(self) -> list[ReminderHandle]:
        return [entry.handle for entry in self._entries.values()]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, handle_id: object) -> bool:
        return handle_id in self._entries


class ReminderRunner:
    """Runs reminder jobs on their cadences.

    Jobs never raise into the scheduler: a failing run is recorded as a
    ``JobReport`` with ``error`` set and the job is re-armed as usual.
    """

    def __init__(
        self,
        jobs: Sequence["IReminderJob"],
        dispatcher: "NotificationDispatcher",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize runner.

        Args:
            jobs: Jobs to run; names must be unique.
            dispatcher: Dispatcher used for one-off reminders.
            clock: Returns the current UTC instant.
        """
        self._jobs: dict[str, IReminderJob] = {}
        for job in jobs:
            if job.name in self._jobs:
                raise ValueError(f"Duplicate reminder job name: {job.name}")
            self._jobs[job.name] = job

        self._dispatcher = dispatcher
        self._clock = clock
        self._scheduler: AsyncIOScheduler | None = None
        self._is_running = False
        self._started_at: datetime | None = None
        self._last_reports: dict[str, JobReport] = {}
        self._ad_hoc = AdHocReminderTable()

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def job_names(self) -> list[str]:
        return list(self._jobs)

    async def start(self) -> None:
        """Start the scheduler and arm every job."""
        if self._is_running:
            logger.warning("ReminderRunner already running")
            return

        scheduler = AsyncIOScheduler(timezone=utc)
        scheduler.start()
        self._scheduler = scheduler
        self._is_running = True
        self._started_at = self._clock()

        now = self._started_at
        for job in self._jobs.values():
            if job.cadence.run_on_startup:
                scheduler.add_job(
                    self._run_startup,
                    DateTrigger(run_date=now + job.cadence.startup_delay, timezone=utc),
                    args=[job.name],
                    id=f"startup:{job.name}",
                    name=f"{job.name} (startup)",
                    replace_existing=True,
                    misfire_grace_time=None,
                )
            self._arm(job.name, now)

        logger.info(f"ReminderRunner started with jobs: {', '.join(self._jobs)}")

    async def stop(self) -> None:
        """Stop the scheduler; outstanding one-off reminders are dropped."""
        if self._scheduler and self._is_running:
            self._scheduler.shutdown(wait=False)
            self._is_running = False
            dropped = len(self._ad_hoc)
            self._ad_hoc.clear()
            logger.info(f"ReminderRunner stopped ({dropped} one-off reminders dropped)")
        self._scheduler = None

    def _arm(self, name: str, now: datetime) -> None:
        if self._scheduler is None or not self._is_running:
            return
        job = self._jobs[name]
        run_at = job.cadence.next_run_after(now)
        self._scheduler.add_job(
            self._run_scheduled,
            DateTrigger(run_date=run_at, timezone=utc),
            args=[name],
            id=f"job:{name}",
            name=name,
            replace_existing=True,
            misfire_grace_time=None,
            coalesce=True,
            # the finished run is still counted until its task completes
            max_instances=2,
        )
        logger.debug(f"Job {name} armed for {run_at.isoformat()}")

    async def _run_startup(self, name: str) -> None:
        await self._execute(self._jobs[name], RunReason.STARTUP)

    async def _run_scheduled(self, name: str) -> None:
        try:
            await self._execute(self._jobs[name], RunReason.SCHEDULED)
        finally:
            self._arm(name, self._clock())

    async def _execute(self, job: "IReminderJob", reason: RunReason) -> JobReport:
        ctx = JobContext(now=self._clock(), reason=reason)
        logger.info(f"Starting job {job.name} ({reason.value})")
        try:
            report = await job.run(ctx)
        except Exception as e:
            logger.error(f"Job {job.name} failed: {e}", exc_info=True)
            report = JobReport(job_name=job.name, started_at=ctx.now, error=str(e)).finish(self._clock())

        self._last_reports[job.name] = report
        logger.info(
            f"Job {job.name} finished: ok={report.ok}, skipped={report.skipped}, "
            f"data_errors={report.data_errors}, delivery_errors={report.delivery_errors}",
            extra={"extra_data": report.to_dict()},
        )
        return report

    async def run_job_now(self, name: str) -> JobReport:
        """Run a job immediately, outside its cadence (admin trigger).

        Raises:
            EntityNotFoundException: If no job has that name.
        """
        job = self._jobs.get(name)
        if job is None:
            raise EntityNotFoundException("ReminderJob", name)
        return await self._execute(job, RunReason.MANUAL)

    def last_report(self, name: str) -> JobReport | None:
        return self._last_reports.get(name)

    # =========================================================================
    # One-off reminders
    # =========================================================================

    def schedule_custom_reminder(
        self,
        user_id: str,
        title: str,
        body: str,
        at: datetime,
        data: dict[str, Any] | None = None,
    ) -> ReminderHandle:
        """Schedule a one-off reminder for ``user_id`` at ``at``.

        Raises:
            SchedulerNotRunningError: If the runner is not started.
            ValidationException: If ``at`` is not in the future.
        """
        if self._scheduler is None or not self._is_running:
            raise SchedulerNotRunningError("schedule a custom reminder")

        run_at = ensure_utc(at)
        if run_at <= self._clock():
            raise ValidationException("Reminder time must be in the future", field="at")

        handle = ReminderHandle(id=uuid4().hex, user_id=user_id, run_at=run_at)
        self._ad_hoc.add(AdHocReminder(handle=handle, title=title, body=body, data=dict(data or {})))
        self._scheduler.add_job(
            self._fire_custom,
            DateTrigger(run_date=run_at, timezone=utc),
            args=[handle.id],
            id=f"custom:{handle.id}",
            name=f"custom reminder for {user_id}",
            misfire_grace_time=None,
        )
        logger.info(f"Scheduled custom reminder {handle.id} for user {user_id} at {run_at.isoformat()}")
        return handle

    def cancel_reminder(self, handle: ReminderHandle | str) -> bool:
        """Cancel a one-off reminder; False if it already fired or is unknown."""
        handle_id = handle.id if isinstance(handle, ReminderHandle) else handle
        if self._ad_hoc.remove(handle_id) is None:
            return False
        if self._scheduler is not None:
            try:
                self._scheduler.remove_job(f"custom:{handle_id}")
            except JobLookupError:
                logger.debug(f"Custom reminder {handle_id} had no scheduled job")
        logger.info(f"Cancelled custom reminder {handle_id}")
        return True

    def list_custom_reminders(self) -> list[ReminderHandle]:
        return self._ad_hoc.handles()

    async def _fire_custom(self, handle_id: str) -> None:
        reminder = self._ad_hoc.remove(handle_id)
        if reminder is None:
            return
        result = await self._dispatcher.dispatch(
            [reminder.handle.user_id],
            custom_reminder(reminder.title, reminder.body, reminder.data),
        )
        if result.success:
            logger.info(f"Sent custom reminder {handle_id} to user {reminder.handle.user_id}")
        else:
            logger.warning(f"Custom reminder {handle_id} not delivered: {result.to_dict()}")

    # =========================================================================
    # Introspection
    # =========================================================================

    def get_status(self) -> dict[str, Any]:
        """Runner state: initialized flag, outstanding one-off reminders,
        uptime and per-job schedule."""
        uptime = 0.0
        if self._is_running and self._started_at is not None:
            uptime = (self._clock() - self._started_at).total_seconds()

        jobs: dict[str, dict[str, Any]] = {}
        for name, job in self._jobs.items():
            next_run = None
            if self._scheduler is not None and self._is_running:
                scheduled = self._scheduler.get_job(f"job:{name}")
                if scheduled is not None and scheduled.next_run_time is not None:
                    next_run = scheduled.next_run_time.isoformat()
            report = self._last_reports.get(name)
            jobs[name] = {
                "cadence": job.cadence.describe(),
                "next_run": next_run,
                "last_report": report.to_dict() if report else None,
            }

        return {
            "initialized": self._is_running,
            "active_jobs": len(self._ad_hoc),
            "uptime": uptime,
            "pending_receipts": self._dispatcher.pending_receipts,
            "jobs": jobs,
        }
