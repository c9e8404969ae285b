# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Store ports consumed by the reminder jobs (DIP compliant).
# ============================================================================
"""Repository Ports.

The reminder engine does not own its store: it reads candidate records and
mutates single fields with conditional updates that only apply while the
stored value still equals the value the job read.
"""

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ...domain.entities import Appointment, NotificationPreferences, Patient, Recipient
    from ...domain.value_objects import ReminderMarker


@runtime_checkable
class IAppointmentRepository(Protocol):
    """Interface for appointment reads and reminder marker writes.

    Implementations: SqlAlchemyAppointmentRepository
    """

    async def find_for_reminder(
        self,
        start: datetime,
        end: datetime,
        exclude_markers: "tuple[ReminderMarker, ...]",
    ) -> "list[Appointment]":
        """Active scheduled/confirmed appointments with start <= date <= end.

        Args:
            start: Lower bound of the appointment instant (inclusive).
            end: Upper bound of the appointment instant (inclusive).
            exclude_markers: Markers that make an appointment ineligible.
        """
        ...

    async def update_reminder_marker(
        self,
        appointment_id: str,
        expected: "ReminderMarker",
        new: "ReminderMarker",
    ) -> bool:
        """Set the marker to ``new`` only if it still equals ``expected``.

        Returns:
            True if a row was updated.
        """
        ...

    async def count_upcoming(self, patient_id: str, now: datetime) -> int:
        """Active pending/scheduled/confirmed appointments dated at or after now."""
        ...

    async def clear_stale_markers(self, before: datetime) -> int:
        """Unset the marker on appointments dated before ``before``.

        Returns:
            Number of rows reset.
        """
        ...


@runtime_checkable
class IPatientRepository(Protocol):
    """Interface for patient reads and gestational week writes.

    Implementations: SqlAlchemyPatientRepository
    """

    async def find_with_medications(self) -> "list[Patient]":
        """Active patients with at least one medication, medications loaded."""
        ...

    async def find_pregnant(self) -> "list[Patient]":
        """Active pregnant patients with a current week."""
        ...

    async def find_pregnant_with_due_date(self) -> "list[Patient]":
        """Active pregnant patients with a due date set."""
        ...

    async def find_due_for_checkup(self, last_visit_before: datetime) -> "list[Patient]":
        """Active patients never seen or last seen before the cutoff."""
        ...

    async def update_current_week(self, patient_id: str, expected: int | None, new: int) -> bool:
        """Write ``current_week`` only if it still equals ``expected``."""
        ...


@runtime_checkable
class IRecipientRepository(Protocol):
    """Interface for push recipients (user accounts).

    Implementations: SqlAlchemyRecipientRepository
    """

    async def get_recipients(self, user_ids: Iterable[str]) -> "dict[str, Recipient]":
        """Recipients keyed by user id; unknown ids are absent."""
        ...

    async def get_active_recipient_ids(self) -> list[str]:
        """Ids of active users holding a push token."""
        ...

    async def clear_push_token(self, user_id: str, token: str) -> bool:
        """Clear the token only if the user still holds exactly ``token``."""
        ...


@runtime_checkable
class IPreferenceStore(Protocol):
    """Interface for notification preferences.

    Implementations: SqlAlchemyPreferenceStore
    """

    async def get_preferences(self, user_ids: Iterable[str]) -> "dict[str, NotificationPreferences]":
        """Preferences keyed by user id; users without settings are absent."""
        ...
