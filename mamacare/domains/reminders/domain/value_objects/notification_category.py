"""Notification Category Value Object.

Push categories and the preference flag that gates each of them.
"""

from enum import Enum


class PreferenceFlag(str, Enum):
    """Push preference switches a recipient can turn off."""

    HEALTH_REMINDERS = "health_reminders"
    GENERAL_UPDATES = "general_updates"


class NotificationCategory(str, Enum):
    """Categories sent as the push ``categoryId``."""

    APPOINTMENT_REMINDER = "appointment_reminder"
    MEDICATION_REMINDER = "medication_reminder"
    HEALTH_ALERT = "health_alert"
    GENERAL = "general"

    @property
    def preference_flag(self) -> PreferenceFlag:
        """Preference switch that must be on for this category."""
        if self in (NotificationCategory.APPOINTMENT_REMINDER, NotificationCategory.MEDICATION_REMINDER):
            return PreferenceFlag.HEALTH_REMINDERS
        return PreferenceFlag.GENERAL_UPDATES
