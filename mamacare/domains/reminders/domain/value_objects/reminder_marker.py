"""Reminder Marker Value Object.

Idempotency marker persisted on an appointment, recording which reminder
classes were already delivered.
"""

from enum import Enum


class ReminderKind(str, Enum):
    """Appointment reminder classes."""

    DAY_BEFORE = "24h"
    HOUR_BEFORE = "1h"

    @property
    def display_name(self) -> str:
        """Label used in logs and push payloads."""
        return "24-hour" if self is ReminderKind.DAY_BEFORE else "1-hour"


class ReminderMarker(str, Enum):
    """Reminder state of an appointment.

    Transitions are monotonic:
    - none -> 24h -> both
    - none -> 1h (the 24h window was missed)
    """

    NONE = "none"
    SENT_24H = "24h"
    SENT_1H = "1h"
    BOTH = "both"

    @classmethod
    def from_storage(cls, value: str | None) -> "ReminderMarker":
        """Map the stored column value (NULL when unset) to a marker."""
        if value is None or value == "":
            return cls.NONE
        return cls(value)

    def to_storage(self) -> str | None:
        """Column value for this marker (NULL for none)."""
        return None if self is ReminderMarker.NONE else self.value

    def has_sent(self, kind: ReminderKind) -> bool:
        """Whether the given reminder class was already delivered."""
        if self is ReminderMarker.BOTH:
            return True
        if kind is ReminderKind.DAY_BEFORE:
            return self is ReminderMarker.SENT_24H
        return self is ReminderMarker.SENT_1H

    def advance(self, kind: ReminderKind) -> "ReminderMarker":
        """Marker after a successful send of ``kind``."""
        if self.has_sent(kind):
            return self
        if self is ReminderMarker.NONE:
            return ReminderMarker.SENT_24H if kind is ReminderKind.DAY_BEFORE else ReminderMarker.SENT_1H
        return ReminderMarker.BOTH

    @staticmethod
    def blocking(kind: ReminderKind) -> tuple["ReminderMarker", ...]:
        """Markers that make an appointment ineligible for ``kind``."""
        if kind is ReminderKind.DAY_BEFORE:
            return (ReminderMarker.SENT_24H, ReminderMarker.BOTH)
        return (ReminderMarker.SENT_1H, ReminderMarker.BOTH)
