"""
SQLAlchemy repositories for the reminder engine.
"""

from .appointment_repository import SqlAlchemyAppointmentRepository
from .patient_repository import SqlAlchemyPatientRepository
from .recipient_repository import SqlAlchemyPreferenceStore, SqlAlchemyRecipientRepository

__all__ = [
    "SqlAlchemyAppointmentRepository",
    "SqlAlchemyPatientRepository",
    "SqlAlchemyPreferenceStore",
    "SqlAlchemyRecipientRepository",
]
