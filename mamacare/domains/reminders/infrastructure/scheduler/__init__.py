# Scheduler
from .reminder_runner import AdHocReminderTable, ReminderHandle, ReminderRunner

__all__ = ["AdHocReminderTable", "ReminderHandle", "ReminderRunner"]
