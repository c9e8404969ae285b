# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Push delivery provider port and its message types.
# ============================================================================
"""Push Provider Port.

A token-addressed push service: batched send returning one ticket per
message, then receipts fetched later by ticket id.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# Provider error code for a token that will never be valid again
DEVICE_NOT_REGISTERED = "DeviceNotRegistered"


@dataclass(frozen=True)
class PushMessage:
    """One message addressed to one device token."""

    to: str
    title: str
    body: str
    data: dict[str, Any] = field(default_factory=dict)
    sound: str | None = "default"
    priority: str = "high"
    ttl: int | None = None
    channel_id: str | None = None
    category_id: str | None = None


@dataclass(frozen=True)
class PushTicket:
    """Provider acknowledgement for one sent message."""

    status: str
    id: str | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def error_code(self) -> str | None:
        return self.details.get("error")


@dataclass(frozen=True)
class PushReceipt:
    """Final delivery status of a ticket."""

    ticket_id: str
    status: str
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def is_ok(self) -> bool:
        return self.status == "ok"

    @property
    def error_code(self) -> str | None:
        return self.details.get("error")


@runtime_checkable
class IPushProvider(Protocol):
    """Interface for push delivery providers.

    Implementations: ExpoPushClient
    """

    @property
    def max_batch_size(self) -> int:
        """Maximum messages per send request."""
        ...

    @property
    def max_receipt_batch_size(self) -> int:
        """Maximum ticket ids per receipt request."""
        ...

    def is_valid_token(self, token: str) -> bool:
        """Syntactic token check (no network)."""
        ...

    async def send(self, messages: Sequence[PushMessage]) -> list[PushTicket]:
        """Send one batch; tickets are returned in message order.

        Raises:
            PushProviderError: On transport or provider failure.
        """
        ...

    async def get_receipts(self, ticket_ids: Sequence[str]) -> dict[str, PushReceipt]:
        """Receipts for the given tickets; ids not yet resolved are absent.

        Raises:
            PushProviderError: On transport or provider failure.
        """
        ...
