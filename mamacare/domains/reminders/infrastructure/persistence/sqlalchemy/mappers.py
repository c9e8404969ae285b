"""
Row to entity mapping for the reminder repositories.

SQLite returns naive datetimes; every instant is normalized to aware UTC.
"""

from mamacare.core.shared.time_utils import ensure_utc
from mamacare.models.db import Appointment as AppointmentModel
from mamacare.models.db import Medication as MedicationModel
from mamacare.models.db import NotificationSettings
from mamacare.models.db import Patient as PatientModel
from mamacare.models.db import User

from ....domain.entities import (
    Appointment,
    Medication,
    NotificationPreferences,
    Patient,
    PregnancyRecord,
    Recipient,
)
from ....domain.value_objects import AppointmentStatus, ReminderMarker


def appointment_to_entity(row: AppointmentModel, user_id: str | None) -> Appointment:
    return Appointment(
        id=row.id,
        patient_id=row.patient_id,
        recipient_id=user_id,
        provider_name=row.provider_name or "",
        scheduled_at=ensure_utc(row.appointment_date) if row.appointment_date else None,
        appointment_time=row.appointment_time or "",
        status=AppointmentStatus(row.status),
        is_active=row.is_active,
        reminders_sent=ReminderMarker.from_storage(row.reminders_sent),
    )


def medication_to_entity(row: MedicationModel) -> Medication:
    return Medication(
        id=row.id,
        name=row.name,
        dosage=row.dosage or "",
        frequency=row.frequency or "",
        start_date=row.start_date,
        end_date=row.end_date,
    )


def patient_to_entity(row: PatientModel, with_medications: bool = False) -> Patient:
    return Patient(
        id=row.id,
        user_id=row.user_id,
        is_active=row.is_active,
        last_visit=ensure_utc(row.last_visit) if row.last_visit else None,
        pregnancy=PregnancyRecord(
            is_pregnant=row.is_pregnant,
            estimated_due_date=row.estimated_due_date,
            current_week=row.current_week,
        ),
        medications=[medication_to_entity(m) for m in row.medications] if with_medications else [],
    )


def user_to_recipient(row: User) -> Recipient:
    return Recipient(user_id=row.id, push_token=row.push_token or None, is_active=row.is_active)


def settings_to_preferences(row: NotificationSettings) -> NotificationPreferences:
    return NotificationPreferences(
        user_id=row.user_id,
        is_active=row.is_active,
        general_updates=row.general_updates,
        health_reminders=row.health_reminders,
        dnd_enabled=row.dnd_enabled,
        dnd_start=row.dnd_start,
        dnd_end=row.dnd_end,
    )
