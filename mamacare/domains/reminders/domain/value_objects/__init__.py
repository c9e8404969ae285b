# Domain Value Objects
from .appointment_status import AppointmentStatus
from .notification_category import NotificationCategory, PreferenceFlag
from .reminder_marker import ReminderKind, ReminderMarker

__all__ = [
    "AppointmentStatus",
    "NotificationCategory",
    "PreferenceFlag",
    "ReminderKind",
    "ReminderMarker",
]
