# ============================================================================
# SCOPE: GLOBAL
# Description: Wiring of the reminder engine (repositories, push client,
#              dispatcher, jobs, runner).
# ============================================================================
"""
Reminders Container.

Single Responsibility: Build the reminder engine object graph from settings.
"""

import logging
from datetime import time, timedelta
from typing import TYPE_CHECKING, Any

from mamacare.config.settings import Settings, get_settings
from mamacare.domains.reminders.application.jobs import (
    AppointmentReminderJob,
    CheckupReminderJob,
    DailyCadence,
    IntervalCadence,
    IReminderJob,
    MedicationReminderJob,
    PregnancyDailyJob,
    ReceiptReconciliationJob,
    ReminderCleanupJob,
)
from mamacare.domains.reminders.application.services import NotificationDispatcher
from mamacare.domains.reminders.infrastructure.persistence.sqlalchemy import (
    SqlAlchemyAppointmentRepository,
    SqlAlchemyPatientRepository,
    SqlAlchemyPreferenceStore,
    SqlAlchemyRecipientRepository,
)
from mamacare.domains.reminders.infrastructure.scheduler import ReminderRunner
from mamacare.integrations.expo import ExpoPushClient

if TYPE_CHECKING:
    from mamacare.domains.reminders.application.ports import (
        IAppointmentRepository,
        IPatientRepository,
        IPreferenceStore,
        IPushProvider,
        IRecipientRepository,
    )

logger = logging.getLogger(__name__)


class RemindersContainer:
    """Container for reminder engine dependencies.

    Repositories and the push provider can be injected (tests); otherwise
    they are created from the session factory and settings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_session_factory: Any = None,
        push_provider: "IPushProvider | None" = None,
        appointments: "IAppointmentRepository | None" = None,
        patients: "IPatientRepository | None" = None,
        recipients: "IRecipientRepository | None" = None,
        preferences: "IPreferenceStore | None" = None,
    ):
        self.settings = settings or get_settings()

        if db_session_factory is None and None in (appointments, patients, recipients, preferences):
            raise ValueError("db_session_factory is required unless every repository is injected")

        self.appointments = appointments or SqlAlchemyAppointmentRepository(db_session_factory)
        self.patients = patients or SqlAlchemyPatientRepository(db_session_factory)
        self.recipients = recipients or SqlAlchemyRecipientRepository(db_session_factory)
        self.preferences = preferences or SqlAlchemyPreferenceStore(db_session_factory)
        self.push_provider = push_provider or ExpoPushClient(
            api_base=self.settings.EXPO_API_BASE,
            access_token=self.settings.EXPO_ACCESS_TOKEN,
            timeout=self.settings.EXPO_REQUEST_TIMEOUT,
        )

        self._dispatcher: NotificationDispatcher | None = None
        self._runner: ReminderRunner | None = None

    def get_dispatcher(self) -> NotificationDispatcher:
        if self._dispatcher is None:
            s = self.settings
            self._dispatcher = NotificationDispatcher(
                recipients=self.recipients,
                preferences=self.preferences,
                provider=self.push_provider,
                timezone_name=s.REMINDER_TIMEZONE,
                max_concurrent_batches=s.PUSH_MAX_CONCURRENT_BATCHES,
                receipt_delay=timedelta(minutes=s.PUSH_RECEIPT_DELAY_MINUTES),
                receipt_ttl=timedelta(hours=s.PUSH_RECEIPT_TTL_HOURS),
            )
        return self._dispatcher

    def create_jobs(self) -> list[IReminderJob]:
        """Reminder jobs with cadences taken from settings."""
        s = self.settings
        dispatcher = self.get_dispatcher()
        startup_delay = timedelta(seconds=s.REMINDER_STARTUP_DELAY_SECONDS)

        return [
            AppointmentReminderJob(
                self.appointments,
                dispatcher,
                cadence=IntervalCadence(timedelta(minutes=s.APPOINTMENT_POLL_MINUTES)),
                day_before_tolerance=timedelta(minutes=s.DAY_BEFORE_TOLERANCE_MINUTES),
                hour_before_tolerance=timedelta(minutes=s.HOUR_BEFORE_TOLERANCE_MINUTES),
            ),
            MedicationReminderJob(
                self.patients,
                dispatcher,
                timezone_name=s.REMINDER_TIMEZONE,
                cadence=IntervalCadence(timedelta(minutes=s.MEDICATION_POLL_MINUTES)),
                tolerance=timedelta(minutes=s.MEDICATION_TOLERANCE_MINUTES),
            ),
            PregnancyDailyJob(
                self.patients,
                dispatcher,
                cadence=DailyCadence(
                    at=time(s.PREGNANCY_DAILY_HOUR, 0),
                    timezone_name=s.REMINDER_TIMEZONE,
                    run_on_startup=True,
                    startup_delay=startup_delay,
                ),
            ),
            CheckupReminderJob(
                self.patients,
                self.appointments,
                dispatcher,
                cadence=DailyCadence(at=time(s.CHECKUP_DAILY_HOUR, 0), timezone_name=s.REMINDER_TIMEZONE),
                interval_months=s.CHECKUP_INTERVAL_MONTHS,
            ),
            ReminderCleanupJob(
                self.appointments,
                cadence=DailyCadence(at=time(s.CLEANUP_DAILY_HOUR, 0), timezone_name=s.REMINDER_TIMEZONE),
                retention=timedelta(days=s.REMINDER_MARKER_RETENTION_DAYS),
            ),
            ReceiptReconciliationJob(
                dispatcher,
                cadence=IntervalCadence(timedelta(minutes=s.RECEIPT_POLL_MINUTES)),
            ),
        ]

    def get_runner(self) -> ReminderRunner:
        if self._runner is None:
            self._runner = ReminderRunner(self.create_jobs(), self.get_dispatcher())
            logger.info(f"ReminderRunner created with jobs: {', '.join(self._runner.job_names)}")
        return self._runner
