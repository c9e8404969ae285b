# ============================================================================
# SCOPE: GLOBAL
# Description: Pydantic models for the Expo push API wire format.
# ============================================================================
"""
Expo Push Models.

Models:
- ExpoPushMessage: Outbound message (one per device token)
- ExpoPushTicket: Per-message acknowledgement from /push/send
- ExpoPushReceipt: Delivery status from /push/getReceipts
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mamacare.domains.reminders.application.ports import PushMessage, PushReceipt, PushTicket


class ExpoPushMessage(BaseModel):
    """Outbound Expo push message."""

    model_config = ConfigDict(populate_by_name=True)

    to: str
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)
    sound: str | None = "default"
    priority: str = "high"
    ttl: int | None = None
    channel_id: str | None = Field(default=None, alias="channelId")
    category_id: str | None = Field(default=None, alias="categoryId")

    @classmethod
    def from_message(cls, message: PushMessage) -> "ExpoPushMessage":
        return cls(
            to=message.to,
            title=message.title,
            body=message.body,
            data=message.data,
            sound=message.sound,
            priority=message.priority,
            ttl=message.ttl,
            channel_id=message.channel_id,
            category_id=message.category_id,
        )

    def to_payload(self) -> dict[str, Any]:
        """JSON body entry (camelCase keys, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ExpoPushTicket(BaseModel):
    """Ticket returned for each message of a send request."""

    status: str
    id: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None

    def to_ticket(self) -> PushTicket:
        return PushTicket(status=self.status, id=self.id, message=self.message, details=self.details or {})


class ExpoPushReceipt(BaseModel):
    """Receipt for a previously issued ticket."""

    status: str
    message: str | None = None
    details: dict[str, Any] | None = None

    def to_receipt(self, ticket_id: str) -> PushReceipt:
        return PushReceipt(
            ticket_id=ticket_id,
            status=self.status,
            message=self.message,
            details=self.details or {},
        )
