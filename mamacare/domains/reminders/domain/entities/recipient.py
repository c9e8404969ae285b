"""Recipient Entity.

A user account that can receive push notifications.
"""

from dataclasses import dataclass


@dataclass
class Recipient:
    """Push recipient: the user id and its zero-or-one device token."""

    user_id: str
    push_token: str | None = None
    is_active: bool = True

    @property
    def can_receive_push(self) -> bool:
        return self.is_active and bool(self.push_token)
