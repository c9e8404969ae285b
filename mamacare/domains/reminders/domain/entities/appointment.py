"""Appointment Entity - Aggregate Root.

A scheduled visit as seen by the reminder engine: when it happens, who to
remind, and which reminder classes were already delivered.
"""

from dataclasses import dataclass
from datetime import datetime

from mamacare.core.domain.entities import AggregateRoot

from ..value_objects.appointment_status import AppointmentStatus
from ..value_objects.reminder_marker import ReminderKind, ReminderMarker


@dataclass
class Appointment(AggregateRoot[str]):
    """Appointment - Aggregate Root.

    Only the fields the reminder jobs read are mapped; the rest of the
    appointment document is owned by the scheduling platform.
    """

    patient_id: str = ""
    recipient_id: str | None = None  # user id of the patient
    provider_name: str = ""
    scheduled_at: datetime | None = None  # UTC instant of the visit
    appointment_time: str = ""  # "HH:MM" as entered by staff
    status: AppointmentStatus = AppointmentStatus.PENDING
    is_active: bool = True
    reminders_sent: ReminderMarker = ReminderMarker.NONE

    def needs_reminder(self, kind: ReminderKind) -> bool:
        """Whether a reminder of ``kind`` may still be sent."""
        return self.is_active and self.status.requires_reminder() and not self.reminders_sent.has_sent(kind)

    def mark_reminder_sent(self, kind: ReminderKind) -> ReminderMarker:
        """Advance the marker after a successful send and return the new value."""
        self.reminders_sent = self.reminders_sent.advance(kind)
        self.mark_changed("reminders_sent")
        return self.reminders_sent

    @property
    def doctor_label(self) -> str:
        """Provider name as shown to the patient."""
        if self.provider_name.strip():
            return f"Dr. {self.provider_name.strip()}"
        return "your healthcare provider"

    @property
    def formatted_time(self) -> str:
        """Display time for messages (HH:MM)."""
        if self.appointment_time:
            return self.appointment_time
        if self.scheduled_at is None:
            return ""
        return self.scheduled_at.strftime("%H:%M")
