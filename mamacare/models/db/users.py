"""
User model - platform accounts that can receive push notifications.

The reminder engine only reads the active flag and the push token, and
clears the token when the push provider reports it as unregistered.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .notification_settings import NotificationSettings


class User(Base, TimestampMixin):
    """Platform user account."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Unique user identifier",
    )
    first_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    push_token: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Expo push token of the user's device",
    )
    push_token_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    notification_settings: Mapped[NotificationSettings | None] = relationship(
        "NotificationSettings",
        back_populates="user",
        uselist=False,
    )

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', active={self.is_active})>"
