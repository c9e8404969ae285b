"""
NotificationSettings model - per-user push preferences.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .users import User


class NotificationSettings(Base, TimestampMixin):
    """Push preferences of a user."""

    __tablename__ = "notification_settings"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    general_updates: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    health_reminders: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    dnd_enabled: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Do-not-disturb period enabled",
    )
    dnd_start: Mapped[str] = mapped_column(String(5), nullable=False, default="22:00")
    dnd_end: Mapped[str] = mapped_column(String(5), nullable=False, default="08:00")

    user: Mapped[User] = relationship("User", back_populates="notification_settings")
