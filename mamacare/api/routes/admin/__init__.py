"""
Admin API routes.

Includes:
- reminders: Reminder runner status, one-off reminders and manual job runs
"""

from . import reminders

__all__ = ["reminders"]
