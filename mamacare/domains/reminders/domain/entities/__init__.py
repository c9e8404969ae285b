# Domain Entities
from .appointment import Appointment
from .medication import Medication
from .patient import Patient, PregnancyRecord
from .preferences import NotificationPreferences
from .recipient import Recipient

__all__ = [
    "Appointment",
    "Medication",
    "NotificationPreferences",
    "Patient",
    "PregnancyRecord",
    "Recipient",
]
