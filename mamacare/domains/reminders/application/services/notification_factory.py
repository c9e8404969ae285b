# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Builders for the push messages sent by the reminder jobs.
# ============================================================================
"""Notification Factory.

One builder per message type, so titles, bodies and payload keys stay in a
single place.
"""

from typing import Any

from ...domain.entities import Appointment, Medication
from ...domain.services.milestones import Milestone
from ...domain.value_objects import NotificationCategory, ReminderKind
from ..dto import PushNotification


def appointment_reminder(appointment: Appointment, kind: ReminderKind) -> PushNotification:
    if kind is ReminderKind.DAY_BEFORE:
        title = "Appointment Tomorrow"
        body = f"You have an appointment with {appointment.doctor_label} tomorrow at {appointment.formatted_time}"
    else:
        title = "Appointment in 1 Hour"
        body = f"Your appointment with {appointment.doctor_label} is in 1 hour"
    return PushNotification(
        title=title,
        body=body,
        category=NotificationCategory.APPOINTMENT_REMINDER,
        data={
            "type": "appointment_reminder",
            "appointmentId": str(appointment.id),
            "reminderType": kind.value,
        },
    )


def medication_reminder(medication: Medication) -> PushNotification:
    return PushNotification(
        title="Medication Reminder",
        body=medication.reminder_body,
        category=NotificationCategory.MEDICATION_REMINDER,
        data={"type": "medication_reminder", "medicationId": str(medication.id)},
    )


def milestone_reminder(milestone: Milestone) -> PushNotification:
    return PushNotification(
        title=milestone.title,
        body=milestone.message,
        category=NotificationCategory.GENERAL,
        data={"type": "pregnancy_milestone", "week": milestone.week, "category": milestone.category},
    )


def checkup_reminder() -> PushNotification:
    return PushNotification(
        title="Health Checkup Reminder",
        body=(
            "It's time for your regular health checkup. "
            "Please schedule an appointment with your healthcare provider."
        ),
        category=NotificationCategory.GENERAL,
        data={"type": "checkup_reminder"},
    )


def health_alert(alert_id: str, message: str, severity: str = "info") -> PushNotification:
    return PushNotification(
        title="Health Alert",
        body=message,
        category=NotificationCategory.HEALTH_ALERT,
        data={"type": "health_alert", "alertId": alert_id, "severity": severity},
    )


def custom_reminder(title: str, body: str, data: dict[str, Any] | None = None) -> PushNotification:
    """Staff-scheduled one-off reminder (sent as a general notification)."""
    payload = dict(data or {})
    payload.setdefault("type", "custom_reminder")
    return PushNotification(title=title, body=body, category=NotificationCategory.GENERAL, data=payload)
