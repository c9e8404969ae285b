"""Gestational age calculation.

The current week is derived from the estimated due date, assuming a
40-week pregnancy and counting whole weeks left until the due date.
"""

from datetime import date, datetime

from mamacare.core.shared.time_utils import utc_date

FULL_TERM_WEEKS = 40
MIN_WEEK = 1
MAX_WEEK = 42


def parse_due_date(value: date | datetime | str | None) -> date:
    """Normalize a stored due date to a UTC calendar date.

    Raises:
        ValueError: If the value is missing or cannot be parsed.
    """
    if value is None or value == "":
        raise ValueError("due date is missing")
    if isinstance(value, (date, datetime)):
        return utc_date(value)
    text = str(value).strip()
    try:
        return utc_date(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return date.fromisoformat(text[:10])


def compute_current_week(due_date: date, today: date) -> int:
    """Gestational week on ``today`` for a pregnancy due on ``due_date``.

    ``weeks_until`` uses floor division, so a due date 10 days away counts
    as one week left (week 39). The result is clamped to 1..42.
    """
    days_until_due = (due_date - today).days
    weeks_until_due = days_until_due // 7
    return max(MIN_WEEK, min(MAX_WEEK, FULL_TERM_WEEKS - weeks_until_due))
