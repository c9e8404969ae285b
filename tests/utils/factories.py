"""
Factories for reminder domain records.

Simple functions with sensible defaults; pass keyword arguments to override.
"""

from datetime import date, datetime

from mamacare.domains.reminders.domain.entities import (
    Appointment,
    Medication,
    Patient,
    PregnancyRecord,
    Recipient,
)
from mamacare.domains.reminders.domain.value_objects import AppointmentStatus, ReminderMarker


def expo_token(suffix: str | int) -> str:
    return f"ExponentPushToken[{suffix}]"


def create_recipient(user_id: str = "user-1", token: str | None = None, **kwargs) -> Recipient:
    return Recipient(user_id=user_id, push_token=token if token is not None else expo_token(user_id), **kwargs)


def create_appointment(
    appointment_id: str = "appt-1",
    scheduled_at: datetime | None = None,
    recipient_id: str | None = "user-1",
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    reminders_sent: ReminderMarker = ReminderMarker.NONE,
    **kwargs,
) -> Appointment:
    return Appointment(
        id=appointment_id,
        patient_id=kwargs.pop("patient_id", "patient-1"),
        recipient_id=recipient_id,
        provider_name=kwargs.pop("provider_name", "Jane Moyo"),
        scheduled_at=scheduled_at,
        appointment_time=kwargs.pop("appointment_time", scheduled_at.strftime("%H:%M") if scheduled_at else ""),
        status=status,
        reminders_sent=reminders_sent,
        **kwargs,
    )


def create_medication(
    medication_id: str = "med-1",
    frequency: str = "twice daily",
    start_date: date | None = date(2025, 1, 1),
    end_date: date | None = None,
    **kwargs,
) -> Medication:
    return Medication(
        id=medication_id,
        name=kwargs.pop("name", "Folic Acid"),
        dosage=kwargs.pop("dosage", "400mcg"),
        frequency=frequency,
        start_date=start_date,
        end_date=end_date,
        **kwargs,
    )


def create_patient(
    patient_id: str = "patient-1",
    user_id: str | None = "user-1",
    medications: list[Medication] | None = None,
    **kwargs,
) -> Patient:
    return Patient(id=patient_id, user_id=user_id, medications=medications or [], **kwargs)


def create_pregnant_patient(
    patient_id: str = "patient-1",
    user_id: str | None = "user-1",
    due_date: date | datetime | str | None = None,
    current_week: int | None = None,
    **kwargs,
) -> Patient:
    return Patient(
        id=patient_id,
        user_id=user_id,
        pregnancy=PregnancyRecord(is_pregnant=True, estimated_due_date=due_date, current_week=current_week),
        **kwargs,
    )
