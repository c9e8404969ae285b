"""Patient Entity.

Patient record as read by the reminder engine, including the embedded
pregnancy sub-record and active medications.
"""

from dataclasses import dataclass, field
from datetime import date, datetime

from mamacare.core.domain.entities import Entity

from .medication import Medication


@dataclass
class PregnancyRecord:
    """Pregnancy sub-record of a patient.

    ``current_week`` is derived state maintained by the gestational age
    recalculator; it is the only field the engine writes.
    """

    is_pregnant: bool = False
    estimated_due_date: date | datetime | str | None = None
    current_week: int | None = None

    @property
    def has_due_date(self) -> bool:
        return self.estimated_due_date not in (None, "")


@dataclass
class Patient(Entity[str]):
    """Patient entity."""

    user_id: str | None = None
    is_active: bool = True
    last_visit: datetime | None = None
    pregnancy: PregnancyRecord = field(default_factory=PregnancyRecord)
    medications: list[Medication] = field(default_factory=list)

    @property
    def is_pregnant(self) -> bool:
        return self.pregnancy.is_pregnant

    def active_medications(self, now: datetime) -> list[Medication]:
        """Medications whose treatment period contains ``now``."""
        return [medication for medication in self.medications if medication.is_active_at(now)]
