# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Job cadences (replace cron strings).
# ============================================================================
"""Job Cadences.

A cadence answers one question: given "now", when should the job run next.
The runner always computes from the current instant, so a restart never
accumulates drift or replays missed runs.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta

from pytz import timezone


@dataclass(frozen=True)
class IntervalCadence:
    """Run every ``interval``, aligned to multiples of it since the epoch.

    A 15-minute interval fires at :00, :15, :30 and :45.
    """

    interval: timedelta
    run_on_startup: bool = False
    startup_delay: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if self.interval <= timedelta(0):
            raise ValueError("interval must be positive")

    def next_run_after(self, now: datetime) -> datetime:
        step = self.interval.total_seconds()
        slot = math.floor(now.timestamp() / step) + 1
        return datetime.fromtimestamp(slot * step, UTC)

    def describe(self) -> str:
        return f"every {int(self.interval.total_seconds() // 60)} min"


@dataclass(frozen=True)
class DailyCadence:
    """Run once a day at a wall-clock time in ``timezone_name``."""

    at: time
    timezone_name: str = "UTC"
    run_on_startup: bool = False
    startup_delay: timedelta = timedelta(seconds=30)

    def next_run_after(self, now: datetime) -> datetime:
        tz = timezone(self.timezone_name)
        local_date = now.astimezone(tz).date()
        candidate = tz.localize(datetime.combine(local_date, self.at))
        if candidate <= now:
            candidate = tz.localize(datetime.combine(local_date + timedelta(days=1), self.at))
        return candidate.astimezone(UTC)

    def describe(self) -> str:
        return f"daily at {self.at:%H:%M} {self.timezone_name}"


Cadence = IntervalCadence | DailyCadence
