# Reminder Jobs
from .appointment_reminder_job import AppointmentReminderJob
from .base import IReminderJob
from .cadence import Cadence, DailyCadence, IntervalCadence
from .checkup_reminder_job import CheckupReminderJob
from .gestational_age_job import GestationalAgeRecalculator
from .maintenance_jobs import ReceiptReconciliationJob, ReminderCleanupJob
from .medication_reminder_job import MedicationReminderJob
from .milestone_reminder_job import MilestoneReminderJob
from .pregnancy_daily_job import PregnancyDailyJob

__all__ = [
    "AppointmentReminderJob",
    "Cadence",
    "CheckupReminderJob",
    "DailyCadence",
    "GestationalAgeRecalculator",
    "IReminderJob",
    "IntervalCadence",
    "MedicationReminderJob",
    "MilestoneReminderJob",
    "PregnancyDailyJob",
    "ReceiptReconciliationJob",
    "ReminderCleanupJob",
]
