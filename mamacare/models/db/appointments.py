"""
Appointment model.

``reminders_sent`` is the idempotency marker of the reminder engine:
NULL, '24h', '1h' or 'both'.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class Appointment(Base, TimestampMixin):
    """Scheduled patient appointment."""

    __tablename__ = "appointments"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Unique appointment identifier",
    )
    patient_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider_name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        default="",
        comment="Doctor display name (first and last)",
    )
    appointment_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Instant of the appointment (UTC)",
    )
    appointment_time: Mapped[str] = mapped_column(String(5), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    reminders_sent: Mapped[str | None] = mapped_column(
        String(4),
        nullable=True,
        comment="Reminder marker: NULL, 24h, 1h or both",
    )

    __table_args__ = (Index("ix_appointments_reminder_scan", "appointment_date", "status", "is_active"),)

    def __repr__(self) -> str:
        return f"<Appointment(id='{self.id}', date={self.appointment_date}, status='{self.status}')>"
