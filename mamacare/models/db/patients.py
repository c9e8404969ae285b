"""
Patient and Medication models.

The pregnancy sub-record is stored inline on the patient row. The reminder
engine writes only ``current_week``.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin


class Patient(Base, TimestampMixin):
    """Patient record."""

    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Unique patient identifier",
    )
    user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_visit: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Last completed visit",
    )

    # Pregnancy sub-record
    is_pregnant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    estimated_due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    current_week: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Gestational week (1-42), derived from estimated_due_date",
    )

    medications: Mapped[list[Medication]] = relationship(
        "Medication",
        back_populates="patient",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Patient(id='{self.id}', pregnant={self.is_pregnant}, week={self.current_week})>"


class Medication(Base, TimestampMixin):
    """Medication prescribed to a patient."""

    __tablename__ = "medications"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    patient_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    dosage: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    frequency: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        comment="Free text, e.g. 'twice daily' or 'every 8 hours'",
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    patient: Mapped[Patient] = relationship("Patient", back_populates="medications")

    def __repr__(self) -> str:
        return f"<Medication(name='{self.name}', frequency='{self.frequency}')>"
