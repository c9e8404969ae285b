"""
Recipient and Preference stores (SQLAlchemy)

Both read the platform ``users`` / ``notification_settings`` tables.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select, update

from mamacare.models.db import NotificationSettings, User

from ....domain.entities import NotificationPreferences, Recipient
from .mappers import settings_to_preferences, user_to_recipient

logger = logging.getLogger(__name__)


class SqlAlchemyRecipientRepository:
    """Implements IRecipientRepository."""

    def __init__(self, db_session_factory: Any):
        self._db_session_factory = db_session_factory

    async def get_recipients(self, user_ids: Iterable[str]) -> dict[str, Recipient]:
        ids = list(user_ids)
        if not ids:
            return {}
        async with self._db_session_factory() as session:
            rows = (await session.execute(select(User).where(User.id.in_(ids)))).scalars().all()
            return {row.id: user_to_recipient(row) for row in rows}

    async def get_active_recipient_ids(self) -> list[str]:
        stmt = select(User.id).where(
            User.is_active.is_(True),
            User.push_token.is_not(None),
            User.push_token != "",
        )
        async with self._db_session_factory() as session:
            return list((await session.execute(stmt)).scalars().all())

    async def clear_push_token(self, user_id: str, token: str) -> bool:
        stmt = (
            update(User)
            .where(User.id == user_id, User.push_token == token)
            .values(push_token=None, push_token_updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        async with self._db_session_factory() as session:
            result = await session.execute(stmt)
            await session.commit()
            cleared = result.rowcount > 0
        if cleared:
            logger.info(f"Cleared push token for user {user_id}")
        return cleared


class SqlAlchemyPreferenceStore:
    """Implements IPreferenceStore."""

    def __init__(self, db_session_factory: Any):
        self._db_session_factory = db_session_factory

    async def get_preferences(self, user_ids: Iterable[str]) -> dict[str, NotificationPreferences]:
        ids = list(user_ids)
        if not ids:
            return {}
        stmt = select(NotificationSettings).where(NotificationSettings.user_id.in_(ids))
        async with self._db_session_factory() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return {row.user_id: settings_to_preferences(row) for row in rows}
