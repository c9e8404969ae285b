"""
Database models for the MamaCare tables the reminder engine reads and writes.
"""

from .appointments import Appointment
from .base import Base, TimestampMixin
from .notification_settings import NotificationSettings
from .patients import Medication, Patient
from .users import User

__all__ = [
    "Appointment",
    "Base",
    "Medication",
    "NotificationSettings",
    "Patient",
    "TimestampMixin",
    "User",
]
