"""Notification Preferences Entity.

Per-user push preferences: category switches and a do-not-disturb period.
"""

from dataclasses import dataclass
from datetime import datetime, time

from ..value_objects.notification_category import NotificationCategory, PreferenceFlag


def parse_clock(value: str) -> time:
    """Parse an ``HH:MM`` string."""
    hours, minutes = value.strip().split(":", 1)
    return time(int(hours), int(minutes))


@dataclass
class NotificationPreferences:
    """Notification preferences of one user.

    Attributes:
        user_id: Owner of the preferences.
        is_active: Inactive preferences are ignored (everything allowed).
        general_updates: Gate for ``health_alert`` and ``general`` pushes.
        health_reminders: Gate for appointment and medication reminders.
        dnd_enabled: Whether the do-not-disturb period applies.
        dnd_start: Start of the DND period, ``HH:MM`` local time.
        dnd_end: End of the DND period, ``HH:MM`` local time.
    """

    user_id: str
    is_active: bool = True
    general_updates: bool = True
    health_reminders: bool = True
    dnd_enabled: bool = False
    dnd_start: str = "22:00"
    dnd_end: str = "08:00"

    def category_enabled(self, category: NotificationCategory) -> bool:
        if category.preference_flag is PreferenceFlag.HEALTH_REMINDERS:
            return self.health_reminders
        return self.general_updates

    def in_quiet_hours(self, local_now: datetime) -> bool:
        """Whether ``local_now`` falls inside the DND period.

        Periods whose start is after their end wrap midnight (22:00-08:00).
        """
        if not self.dnd_enabled:
            return False
        start = parse_clock(self.dnd_start)
        end = parse_clock(self.dnd_end)
        current = local_now.time().replace(second=0, microsecond=0)
        if start <= end:
            return start <= current < end
        return current >= start or current < end

    def allows(self, category: NotificationCategory, local_now: datetime) -> bool:
        """Whether a push of ``category`` may be sent at ``local_now``."""
        if not self.is_active:
            return True
        if not self.category_enabled(category):
            return False
        return not self.in_quiet_hours(local_now)
