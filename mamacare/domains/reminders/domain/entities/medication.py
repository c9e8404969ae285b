"""Medication Entity.

A recurring treatment attached to a patient. Dose times are derived from the
free-text ``frequency`` by the frequency resolver.
"""

from dataclasses import dataclass
from datetime import date, datetime

from mamacare.core.domain.entities import Entity
from mamacare.core.shared.time_utils import utc_date


@dataclass
class Medication(Entity[str]):
    """Medication prescribed to a patient."""

    name: str = ""
    dosage: str = ""
    frequency: str = ""
    start_date: date | None = None
    end_date: date | None = None

    def is_active_at(self, now: datetime) -> bool:
        """Whether ``now`` falls inside the treatment period (inclusive).

        Medications without a frequency or a start date are never reminded.
        """
        if not self.frequency or self.start_date is None:
            return False
        today = utc_date(now)
        if utc_date(self.start_date) > today:
            return False
        if self.end_date is not None and utc_date(self.end_date) < today:
            return False
        return True

    @property
    def reminder_body(self) -> str:
        body = f"Time to take your {self.name}"
        if self.dosage:
            body += f" ({self.dosage})"
        return body
