"""
Patient Repository (SQLAlchemy)
"""

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.orm import selectinload

from mamacare.models.db import Patient as PatientModel

from ....domain.entities import Patient
from .mappers import patient_to_entity

logger = logging.getLogger(__name__)


class SqlAlchemyPatientRepository:
    """Implements IPatientRepository."""

    def __init__(self, db_session_factory: Any):
        self._db_session_factory = db_session_factory

    async def _find(self, *criteria: Any, with_medications: bool = False) -> list[Patient]:
        stmt = select(PatientModel).where(PatientModel.is_active.is_(True), *criteria)
        if with_medications:
            stmt = stmt.options(selectinload(PatientModel.medications))
        async with self._db_session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()

            patients: list[Patient] = []
            for row in rows:
                try:
                    patients.append(patient_to_entity(row, with_medications))
                except ValueError as e:
                    logger.warning(f"Skipping unreadable patient {row.id}: {e}")
            return patients

    async def find_with_medications(self) -> list[Patient]:
        return await self._find(PatientModel.medications.any(), with_medications=True)

    async def find_pregnant(self) -> list[Patient]:
        return await self._find(
            PatientModel.is_pregnant.is_(True),
            PatientModel.current_week.is_not(None),
        )

    async def find_pregnant_with_due_date(self) -> list[Patient]:
        return await self._find(
            PatientModel.is_pregnant.is_(True),
            PatientModel.estimated_due_date.is_not(None),
        )

    async def find_due_for_checkup(self, last_visit_before: datetime) -> list[Patient]:
        return await self._find(
            or_(
                PatientModel.last_visit.is_(None),
                PatientModel.last_visit < last_visit_before,
            )
        )

    async def update_current_week(self, patient_id: str, expected: int | None, new: int) -> bool:
        current = PatientModel.current_week.is_(None) if expected is None else PatientModel.current_week == expected
        stmt = (
            update(PatientModel)
            .where(PatientModel.id == patient_id, current)
            .values(current_week=new)
            .execution_options(synchronize_session=False)
        )
        async with self._db_session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            return result.rowcount > 0
