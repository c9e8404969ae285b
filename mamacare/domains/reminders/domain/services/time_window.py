"""Time-window matching for reminders.

A reminder class is eligible while the poll instant lies within a tolerance
of the event time minus the class lead time. Polls run at a fixed cadence, so
the tolerance must be at least half the poll interval for every event to be
seen by some poll.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta

SECONDS_PER_DAY = 24 * 60 * 60


def in_window(now: datetime, target: datetime, tolerance: timedelta) -> bool:
    """True iff ``|now - target| <= tolerance`` (inclusive on both ends)."""
    return abs(now - target) <= tolerance


@dataclass(frozen=True)
class ReminderWindow:
    """Eligibility window of one reminder class.

    Attributes:
        lead: How long before the event the reminder is due.
        tolerance: Accepted distance from the due instant, either way.
    """

    lead: timedelta
    tolerance: timedelta

    def due_at(self, event_time: datetime) -> datetime:
        return event_time - self.lead

    def matches(self, now: datetime, event_time: datetime) -> bool:
        """Whether a poll at ``now`` falls inside the window of ``event_time``."""
        return in_window(now, self.due_at(event_time), self.tolerance)

    def scheduled_range(self, now: datetime) -> tuple[datetime, datetime]:
        """Inclusive range of event times matched by a poll at ``now``."""
        center = now + self.lead
        return center - self.tolerance, center + self.tolerance


def day_before_window(tolerance: timedelta = timedelta(hours=1)) -> ReminderWindow:
    return ReminderWindow(lead=timedelta(hours=24), tolerance=tolerance)


def hour_before_window(tolerance: timedelta = timedelta(minutes=15)) -> ReminderWindow:
    return ReminderWindow(lead=timedelta(hours=1), tolerance=tolerance)


def _seconds_of_day(value: time) -> int:
    return value.hour * 3600 + value.minute * 60 + value.second


def clock_time_in_window(local_now: datetime, clock: time, tolerance: timedelta) -> bool:
    """Match a daily clock time against ``local_now`` on a 24h dial.

    Distance wraps around midnight, so a 00:00 dose is within 15 minutes
    of a 23:50 poll.
    """
    diff = abs(_seconds_of_day(local_now.time()) - _seconds_of_day(clock))
    distance = min(diff, SECONDS_PER_DAY - diff)
    return distance <= tolerance.total_seconds()
