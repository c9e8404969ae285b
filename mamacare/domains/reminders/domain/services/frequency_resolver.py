"""Frequency Resolver.

Maps a free-text medication frequency to the daily clock times at which a
dose reminder is due. The mapping is total: unknown text falls back to a
single morning dose.
"""

import re
from datetime import time

DEFAULT_TIMES: tuple[time, ...] = (time(9, 0),)

# Generic "every N hours" schedules start here
INTERVAL_ANCHOR_HOUR = 8

_KNOWN_FREQUENCIES: dict[str, tuple[time, ...]] = {
    "once daily": (time(9, 0),),
    "twice daily": (time(9, 0), time(21, 0)),
    "3 times daily": (time(8, 0), time(14, 0), time(20, 0)),
    "4 times daily": (time(8, 0), time(12, 0), time(16, 0), time(20, 0)),
    "before meals": (time(7, 30), time(12, 30), time(18, 30)),
    "after meals": (time(8, 30), time(13, 30), time(19, 30)),
    "every 4 hours": (time(6, 0), time(10, 0), time(14, 0), time(18, 0), time(22, 0)),
    "every 6 hours": (time(0, 0), time(6, 0), time(12, 0), time(18, 0)),
    "every 8 hours": (time(0, 0), time(8, 0), time(16, 0)),
    "every 12 hours": (time(8, 0), time(20, 0)),
    "at bedtime": (time(21, 0),),
}

_ALIASES: dict[str, str] = {
    "daily": "once daily",
    "once a day": "once daily",
    "once per day": "once daily",
    "1 time daily": "once daily",
    "twice a day": "twice daily",
    "2 times daily": "twice daily",
    "2 times a day": "twice daily",
    "three times daily": "3 times daily",
    "three times a day": "3 times daily",
    "3 times a day": "3 times daily",
    "four times daily": "4 times daily",
    "four times a day": "4 times daily",
    "4 times a day": "4 times daily",
    "before each meal": "before meals",
    "after each meal": "after meals",
    "bedtime": "at bedtime",
    "at night": "at bedtime",
}

_EVERY_N_HOURS = re.compile(r"^every (\d{1,2}) ?(?:hours?|hrs?|h)$")


def _normalize_frequency(text: str | None) -> str:
    """Lower-case and collapse whitespace."""
    if not text:
        return ""
    return " ".join(str(text).lower().split())


def _every_n_hours(hours: int) -> tuple[time, ...]:
    doses = 24 // hours
    slots = {(INTERVAL_ANCHOR_HOUR + index * hours) % 24 for index in range(doses)}
    return tuple(time(hour, 0) for hour in sorted(slots))


def resolve_frequency(text: str | None) -> tuple[time, ...]:
    """Daily dose times for a frequency phrase.

    Never raises and never returns an empty tuple.

    Example:
        >>> resolve_frequency("Twice  Daily")
        (datetime.time(9, 0), datetime.time(21, 0))
    """
    key = _normalize_frequency(text)
    key = _ALIASES.get(key, key)
    if key in _KNOWN_FREQUENCIES:
        return _KNOWN_FREQUENCIES[key]

    match = _EVERY_N_HOURS.match(key)
    if match:
        hours = int(match.group(1))
        if 1 <= hours <= 24:
            return _every_n_hours(hours)

    return DEFAULT_TIMES
