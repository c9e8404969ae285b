"""
Unit tests for reminder entities and value objects.

Tests:
- ReminderMarker transitions
- Appointment eligibility
- Medication treatment period
- NotificationPreferences gates and quiet hours
"""

from datetime import UTC, date, datetime

import pytest

from mamacare.domains.reminders.domain.entities import NotificationPreferences
from mamacare.domains.reminders.domain.value_objects import (
    AppointmentStatus,
    NotificationCategory,
    ReminderKind,
    ReminderMarker,
)
from tests.utils.factories import create_appointment, create_medication

DAY = ReminderKind.DAY_BEFORE
HOUR = ReminderKind.HOUR_BEFORE


@pytest.mark.unit
class TestReminderMarker:
    def test_monotonic_transitions(self):
        assert ReminderMarker.NONE.advance(DAY) is ReminderMarker.SENT_24H
        assert ReminderMarker.SENT_24H.advance(HOUR) is ReminderMarker.BOTH
        assert ReminderMarker.NONE.advance(HOUR) is ReminderMarker.SENT_1H
        assert ReminderMarker.SENT_1H.advance(DAY) is ReminderMarker.BOTH

    def test_advance_is_idempotent(self):
        assert ReminderMarker.SENT_24H.advance(DAY) is ReminderMarker.SENT_24H
        assert ReminderMarker.BOTH.advance(HOUR) is ReminderMarker.BOTH

    def test_storage_mapping(self):
        assert ReminderMarker.from_storage(None) is ReminderMarker.NONE
        assert ReminderMarker.from_storage("both") is ReminderMarker.BOTH
        assert ReminderMarker.NONE.to_storage() is None
        assert ReminderMarker.SENT_1H.to_storage() == "1h"

    def test_blocking_markers(self):
        assert ReminderMarker.blocking(DAY) == (ReminderMarker.SENT_24H, ReminderMarker.BOTH)
        assert ReminderMarker.blocking(HOUR) == (ReminderMarker.SENT_1H, ReminderMarker.BOTH)


@pytest.mark.unit
class TestAppointment:
    def test_needs_reminder_for_confirmed(self):
        appointment = create_appointment(scheduled_at=datetime(2025, 3, 10, 9, 0, tzinfo=UTC))
        assert appointment.needs_reminder(DAY)
        assert appointment.needs_reminder(HOUR)

    @pytest.mark.parametrize("status", [AppointmentStatus.PENDING, AppointmentStatus.CANCELLED])
    def test_no_reminder_for_other_statuses(self, status):
        appointment = create_appointment(status=status)
        assert not appointment.needs_reminder(DAY)

    def test_mark_reminder_sent(self):
        appointment = create_appointment(reminders_sent=ReminderMarker.SENT_24H)
        assert not appointment.is_dirty

        assert appointment.mark_reminder_sent(HOUR) is ReminderMarker.BOTH
        assert not appointment.needs_reminder(HOUR)
        assert appointment.changed_fields == {"reminders_sent"}

    def test_doctor_label(self):
        assert create_appointment(provider_name="Jane Moyo").doctor_label == "Dr. Jane Moyo"
        assert create_appointment(provider_name="  ").doctor_label == "your healthcare provider"


@pytest.mark.unit
class TestMedication:
    NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)

    def test_period_is_inclusive(self):
        assert create_medication(start_date=date(2025, 3, 10), end_date=date(2025, 3, 10)).is_active_at(self.NOW)

    def test_not_started_or_ended(self):
        assert not create_medication(start_date=date(2025, 3, 11)).is_active_at(self.NOW)
        assert not create_medication(end_date=date(2025, 3, 9)).is_active_at(self.NOW)

    def test_requires_frequency_and_start(self):
        assert not create_medication(frequency="").is_active_at(self.NOW)
        assert not create_medication(start_date=None).is_active_at(self.NOW)

    def test_reminder_body(self):
        assert create_medication(name="Iron", dosage="65mg").reminder_body == "Time to take your Iron (65mg)"
        assert create_medication(name="Iron", dosage="").reminder_body == "Time to take your Iron"


@pytest.mark.unit
class TestNotificationPreferences:
    def test_category_gates(self):
        prefs = NotificationPreferences(user_id="u", health_reminders=False)

        assert not prefs.category_enabled(NotificationCategory.APPOINTMENT_REMINDER)
        assert not prefs.category_enabled(NotificationCategory.MEDICATION_REMINDER)
        assert prefs.category_enabled(NotificationCategory.HEALTH_ALERT)
        assert prefs.category_enabled(NotificationCategory.GENERAL)

    def test_quiet_hours_wrap_midnight(self):
        prefs = NotificationPreferences(user_id="u", dnd_enabled=True, dnd_start="22:00", dnd_end="08:00")

        assert prefs.in_quiet_hours(datetime(2025, 3, 9, 23, 0))
        assert prefs.in_quiet_hours(datetime(2025, 3, 9, 7, 59))
        assert not prefs.in_quiet_hours(datetime(2025, 3, 9, 8, 0))
        assert not prefs.in_quiet_hours(datetime(2025, 3, 9, 12, 0))

    def test_quiet_hours_same_day(self):
        prefs = NotificationPreferences(user_id="u", dnd_enabled=True, dnd_start="13:00", dnd_end="15:00")

        assert prefs.in_quiet_hours(datetime(2025, 3, 9, 14, 0))
        assert not prefs.in_quiet_hours(datetime(2025, 3, 9, 15, 0))

    def test_inactive_preferences_allow_everything(self):
        prefs = NotificationPreferences(user_id="u", is_active=False, general_updates=False, dnd_enabled=True)

        assert prefs.allows(NotificationCategory.GENERAL, datetime(2025, 3, 9, 23, 0))
