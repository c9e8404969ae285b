"""Appointment Status Value Object.

Lifecycle states of a MamaCare appointment, as stored by the platform.
"""

from enum import Enum


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states."""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    REJECTED = "rejected"

    @classmethod
    def reminder_statuses(cls) -> tuple["AppointmentStatus", ...]:
        """Statuses that receive appointment reminders."""
        return (cls.SCHEDULED, cls.CONFIRMED)

    @classmethod
    def upcoming_statuses(cls) -> tuple["AppointmentStatus", ...]:
        """Statuses that count as an upcoming visit (suppresses checkup nudges)."""
        return (cls.PENDING, cls.SCHEDULED, cls.CONFIRMED)

    def requires_reminder(self) -> bool:
        """Whether the patient should get appointment reminders."""
        return self in AppointmentStatus.reminder_statuses()

    def is_final(self) -> bool:
        """Whether no further transitions are possible."""
        return self in (
            AppointmentStatus.COMPLETED,
            AppointmentStatus.CANCELLED,
            AppointmentStatus.NO_SHOW,
            AppointmentStatus.REJECTED,
        )
