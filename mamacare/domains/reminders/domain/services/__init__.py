# Domain Services
from .frequency_resolver import resolve_frequency
from .gestational_age import compute_current_week, parse_due_date
from .milestones import Milestone, get_milestone
from .time_window import (
    ReminderWindow,
    clock_time_in_window,
    day_before_window,
    hour_before_window,
    in_window,
)

__all__ = [
    "Milestone",
    "ReminderWindow",
    "clock_time_in_window",
    "compute_current_week",
    "day_before_window",
    "get_milestone",
    "hour_before_window",
    "in_window",
    "parse_due_date",
    "resolve_frequency",
]
