"""
Appointment Repository (SQLAlchemy)

Reads reminder candidates and applies conditional single-column updates
to the ``reminders_sent`` marker.
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, or_, select, update

from mamacare.models.db import Appointment as AppointmentModel
from mamacare.models.db import Patient as PatientModel

from ....domain.entities import Appointment
from ....domain.value_objects import AppointmentStatus, ReminderMarker
from .mappers import appointment_to_entity

logger = logging.getLogger(__name__)


def _marker_equals(marker: ReminderMarker) -> Any:
    stored = marker.to_storage()
    if stored is None:
        return AppointmentModel.reminders_sent.is_(None)
    return AppointmentModel.reminders_sent == stored


class SqlAlchemyAppointmentRepository:
    """Implements IAppointmentRepository."""

    def __init__(self, db_session_factory: Any):
        """
        Args:
            db_session_factory: Async SQLAlchemy session factory.
        """
        self._db_session_factory = db_session_factory

    async def find_for_reminder(
        self,
        start: datetime,
        end: datetime,
        exclude_markers: tuple[ReminderMarker, ...],
    ) -> list[Appointment]:
        blocked = [stored for marker in exclude_markers if (stored := marker.to_storage()) is not None]
        statuses = [status.value for status in AppointmentStatus.reminder_statuses()]

        stmt = (
            select(AppointmentModel, PatientModel.user_id)
            .outerjoin(PatientModel, PatientModel.id == AppointmentModel.patient_id)
            .where(
                AppointmentModel.appointment_date >= start,
                AppointmentModel.appointment_date <= end,
                AppointmentModel.is_active.is_(True),
                AppointmentModel.status.in_(statuses),
            )
            .order_by(AppointmentModel.appointment_date)
        )
        if blocked:
            stmt = stmt.where(
                or_(
                    AppointmentModel.reminders_sent.is_(None),
                    AppointmentModel.reminders_sent.notin_(blocked),
                )
            )

        async with self._db_session_factory() as session:
            result = await session.execute(stmt)

            appointments: list[Appointment] = []
            for row, user_id in result.all():
                try:
                    appointments.append(appointment_to_entity(row, user_id))
                except ValueError as e:
                    logger.warning(f"Skipping unreadable appointment {row.id}: {e}")
            return appointments

    async def update_reminder_marker(
        self,
        appointment_id: str,
        expected: ReminderMarker,
        new: ReminderMarker,
    ) -> bool:
        stmt = (
            update(AppointmentModel)
            .where(AppointmentModel.id == appointment_id, _marker_equals(expected))
            .values(reminders_sent=new.to_storage())
            .execution_options(synchronize_session=False)
        )
        async with self._db_session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount > 0

    async def count_upcoming(self, patient_id: str, now: datetime) -> int:
        statuses = [status.value for status in AppointmentStatus.upcoming_statuses()]
        stmt = select(func.count(AppointmentModel.id)).where(
            AppointmentModel.patient_id == patient_id,
            AppointmentModel.is_active.is_(True),
            AppointmentModel.status.in_(statuses),
            AppointmentModel.appointment_date >= now,
        )
        async with self._db_session_factory() as session:
            return int((await session.execute(stmt)).scalar_one())

    async def clear_stale_markers(self, before: datetime) -> int:
        stmt = (
            update(AppointmentModel)
            .where(
                AppointmentModel.appointment_date < before,
                AppointmentModel.reminders_sent.is_not(None),
            )
            .values(reminders_sent=None)
            .execution_options(synchronize_session=False)
        )
        async with self._db_session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            logger.debug(f"Cleared reminder markers on {result.rowcount} appointments before {before}")
            return result.rowcount
