# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Push dispatch with preference checks, batching and
#              receipt reconciliation.
# ============================================================================
"""Notification Dispatcher.

Resolves recipients to push tokens, filters them (inactive account, missing
or malformed token, disabled category, do-not-disturb), sends the remaining
messages in provider-sized batches and later reconciles delivery receipts,
clearing tokens the provider reports as permanently unregistered.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from pytz import timezone

from mamacare.core.domain.exceptions import IntegrationException
from mamacare.core.shared.time_utils import utc_now

from ...domain.entities import NotificationPreferences, Recipient
from ..dto import DispatchResult, PushNotification, ReceiptReconciliation, SkipReason
from ..ports import DEVICE_NOT_REGISTERED, PushMessage, PushTicket
from .notification_factory import health_alert

if TYPE_CHECKING:
    from ..ports import IPreferenceStore, IPushProvider, IRecipientRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingReceipt:
    """Ledger entry for an accepted ticket awaiting its receipt."""

    ticket_id: str
    user_id: str
    token: str
    sent_at: datetime


@dataclass(frozen=True)
class _Target:
    user_id: str
    token: str


class NotificationDispatcher:
    """Delivers push notifications to recipients.

    Never raises for business-level non-delivery; provider or transport
    failures of a batch are reported in ``DispatchResult.errors``.
    """

    def __init__(
        self,
        recipients: "IRecipientRepository",
        preferences: "IPreferenceStore",
        provider: "IPushProvider",
        timezone_name: str = "UTC",
        max_concurrent_batches: int = 4,
        receipt_delay: timedelta = timedelta(minutes=15),
        receipt_ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize dispatcher.

        Args:
            recipients: Recipient store (tokens, active flag).
            preferences: Notification preference store.
            provider: Push delivery provider.
            timezone_name: Timezone used for do-not-disturb periods.
            max_concurrent_batches: Upper bound of in-flight send requests.
            receipt_delay: Minimum ticket age before fetching its receipt.
            receipt_ttl: Age after which an unresolved ticket is dropped.
            clock: Returns the current UTC instant.
        """
        self._recipients = recipients
        self._preferences = preferences
        self._provider = provider
        self._tz = timezone(timezone_name)
        self._semaphore = asyncio.Semaphore(max_concurrent_batches)
        self._receipt_delay = receipt_delay
        self._receipt_ttl = receipt_ttl
        self._clock = clock
        self._pending: dict[str, PendingReceipt] = {}

    @property
    def pending_receipts(self) -> int:
        return len(self._pending)

    async def dispatch(self, recipient_ids: Iterable[str], notification: PushNotification) -> DispatchResult:
        """Send ``notification`` to every eligible recipient.

        Args:
            recipient_ids: User ids to notify (duplicates are ignored).
            notification: Message to deliver.

        Returns:
            DispatchResult with delivered count, errors and skip reasons.
        """
        user_ids = list(dict.fromkeys(uid for uid in recipient_ids if uid))
        result = DispatchResult()
        if not user_ids:
            return result

        recipients = await self._recipients.get_recipients(user_ids)
        targets = self._select_targets(user_ids, recipients, result)
        if targets:
            targets = await self._apply_preferences(targets, notification, result)
        if not targets:
            logger.debug(f"No deliverable recipients for '{notification.title}' ({len(result.skipped)} skipped)")
            return result

        batch_size = max(1, self._provider.max_batch_size)
        batches = [targets[i : i + batch_size] for i in range(0, len(targets), batch_size)]
        outcomes = await asyncio.gather(*(self._send_batch(batch, notification) for batch in batches))

        sent_at = self._clock()
        for batch, outcome in zip(batches, outcomes, strict=True):
            if isinstance(outcome, str):
                result.errors.append(outcome)
                continue
            for target, ticket in zip(batch, outcome, strict=True):
                await self._handle_ticket(target, ticket, sent_at, result)

        logger.info(
            f"Dispatched '{notification.title}': delivered={result.delivered}, "
            f"skipped={len(result.skipped)}, errors={len(result.errors)}"
        )
        return result

    def _select_targets(
        self,
        user_ids: list[str],
        recipients: dict[str, Recipient],
        result: DispatchResult,
    ) -> list[_Target]:
        targets: list[_Target] = []
        for user_id in user_ids:
            recipient = recipients.get(user_id)
            if recipient is None:
                result.skipped[user_id] = SkipReason.UNKNOWN_RECIPIENT
            elif not recipient.is_active:
                result.skipped[user_id] = SkipReason.INACTIVE
            elif not recipient.push_token:
                result.skipped[user_id] = SkipReason.NO_TOKEN
            elif not self._provider.is_valid_token(recipient.push_token):
                logger.warning(f"Invalid push token format for user {user_id}")
                result.skipped[user_id] = SkipReason.INVALID_TOKEN
            else:
                targets.append(_Target(user_id=user_id, token=recipient.push_token))
        return targets

    async def _apply_preferences(
        self,
        targets: list[_Target],
        notification: PushNotification,
        result: DispatchResult,
    ) -> list[_Target]:
        try:
            preferences = await self._preferences.get_preferences([t.user_id for t in targets])
        except Exception as e:
            # Missing preferences mean allow
            logger.warning(f"Preference lookup failed, allowing all: {e}")
            return targets

        local_now = self._clock().astimezone(self._tz)
        allowed: list[_Target] = []
        for target in targets:
            prefs: NotificationPreferences | None = preferences.get(target.user_id)
            try:
                permitted = prefs is None or prefs.allows(notification.category, local_now)
            except ValueError as e:
                # Unreadable DND period means no quiet hours
                logger.warning(f"Invalid DND period for user {target.user_id}, ignoring: {e}")
                permitted = True
            if permitted:
                allowed.append(target)
            elif not prefs.category_enabled(notification.category):
                result.skipped[target.user_id] = SkipReason.PREFERENCE_DISABLED
            else:
                result.skipped[target.user_id] = SkipReason.QUIET_HOURS
        return allowed

    def _build_message(self, token: str, notification: PushNotification) -> PushMessage:
        return PushMessage(
            to=token,
            title=notification.title,
            body=notification.body,
            data=dict(notification.data),
            sound=notification.sound,
            priority=notification.priority,
            ttl=notification.ttl,
            channel_id=notification.channel_id,
            category_id=notification.category.value,
        )

    async def _send_batch(self, batch: list[_Target], notification: PushNotification) -> list[PushTicket] | str:
        """Send one batch; returns tickets or an error description."""
        messages = [self._build_message(target.token, notification) for target in batch]
        async with self._semaphore:
            try:
                return await self._provider.send(messages)
            except IntegrationException as e:
                logger.error(f"Push batch of {len(batch)} failed: {e.message}")
                return f"batch of {len(batch)} failed: {e.message}"

    async def _handle_ticket(
        self,
        target: _Target,
        ticket: PushTicket,
        sent_at: datetime,
        result: DispatchResult,
    ) -> None:
        if ticket.is_ok:
            result.delivered += 1
            if ticket.id:
                result.ticket_ids.append(ticket.id)
                self._pending[ticket.id] = PendingReceipt(
                    ticket_id=ticket.id,
                    user_id=target.user_id,
                    token=target.token,
                    sent_at=sent_at,
                )
            return

        if ticket.error_code == DEVICE_NOT_REGISTERED:
            logger.info(f"Token for user {target.user_id} no longer registered, clearing")
            if await self._recipients.clear_push_token(target.user_id, target.token):
                result.invalidated_tokens.append(target.token)
            return

        result.errors.append(f"{target.user_id}: {ticket.message or ticket.error_code or 'push rejected'}")

    async def reconcile_receipts(self, now: datetime | None = None) -> ReceiptReconciliation:
        """Fetch receipts for tickets older than the receipt delay.

        Resolved tickets leave the ledger; unresolved ones stay until they
        exceed the receipt TTL. A failed fetch keeps its tickets.
        """
        now = now or self._clock()
        report = ReceiptReconciliation()

        expired = [entry for entry in self._pending.values() if now - entry.sent_at > self._receipt_ttl]
        for entry in expired:
            del self._pending[entry.ticket_id]
        report.expired = len(expired)

        due = [entry for entry in self._pending.values() if now - entry.sent_at >= self._receipt_delay]
        chunk_size = max(1, self._provider.max_receipt_batch_size)

        for start in range(0, len(due), chunk_size):
            chunk = due[start : start + chunk_size]
            try:
                receipts = await self._provider.get_receipts([entry.ticket_id for entry in chunk])
            except IntegrationException as e:
                logger.error(f"Receipt fetch for {len(chunk)} tickets failed: {e.message}")
                report.errors.append(e.message)
                continue

            for entry in chunk:
                receipt = receipts.get(entry.ticket_id)
                if receipt is None:
                    continue
                report.checked += 1
                del self._pending[entry.ticket_id]
                if receipt.is_ok:
                    report.ok += 1
                    continue
                report.failed += 1
                logger.warning(f"Push receipt error for user {entry.user_id}: {receipt.message or receipt.error_code}")
                if receipt.error_code == DEVICE_NOT_REGISTERED:
                    if await self._recipients.clear_push_token(entry.user_id, entry.token):
                        report.tokens_cleared += 1

        report.pending = len(self._pending)
        if report.checked or report.expired or report.errors:
            logger.info(
                f"Receipts reconciled: checked={report.checked}, failed={report.failed}, "
                f"tokens_cleared={report.tokens_cleared}, expired={report.expired}, pending={report.pending}"
            )
        return report

    async def broadcast(self, notification: PushNotification) -> DispatchResult:
        """Send ``notification`` to every active recipient holding a token."""
        user_ids = await self._recipients.get_active_recipient_ids()
        logger.info(f"Broadcasting '{notification.title}' to {len(user_ids)} recipients")
        return await self.dispatch(user_ids, notification)

    async def send_test_notification(self, user_id: str) -> DispatchResult:
        return await self.dispatch(
            [user_id],
            PushNotification(
                title="Test Notification",
                body="This is a test notification from MamaCare backend",
                data={"type": "test"},
            ),
        )

    async def send_health_alert(self, user_id: str, alert_id: str, message: str, severity: str = "info") -> DispatchResult:
        """Health alert to one user (gated by ``general_updates``)."""
        return await self.dispatch([user_id], health_alert(alert_id, message, severity))
