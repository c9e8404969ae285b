"""
Unit tests for NotificationDispatcher.

Tests:
- Recipient filtering (no token, malformed token, inactive, unknown)
- Partial failure with permanent token errors
- Preferences and quiet hours
- Batching
- Receipt reconciliation
"""

from datetime import UTC, datetime, timedelta

import httpx
import pytest

from mamacare.domains.reminders.application.dto import PushNotification, SkipReason
from mamacare.domains.reminders.application.ports import DEVICE_NOT_REGISTERED, PushReceipt
from mamacare.domains.reminders.application.services import NotificationDispatcher
from mamacare.domains.reminders.domain.entities import NotificationPreferences
from mamacare.domains.reminders.domain.value_objects import NotificationCategory
from mamacare.integrations.expo import ExpoPushClient
from tests.utils.factories import create_recipient, expo_token
from tests.utils.fakes import FakePushProvider

REMINDER = PushNotification(
    title="Appointment Tomorrow",
    body="You have an appointment tomorrow",
    category=NotificationCategory.APPOINTMENT_REMINDER,
    data={"type": "appointment_reminder"},
)


# ============================================================================
# Recipient filtering
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_partial_failure_across_three_recipients(dispatcher, recipients, push_provider):
    """One without token, one rejected as unregistered, one delivered."""
    recipients.add(create_recipient("no-token", token=""))
    recipients.add(create_recipient("dead", token=expo_token("dead")))
    recipients.add(create_recipient("ok", token=expo_token("ok")))
    push_provider.ticket_errors[expo_token("dead")] = DEVICE_NOT_REGISTERED

    result = await dispatcher.dispatch(["no-token", "dead", "ok"], REMINDER)

    assert result.delivered == 1
    assert result.success
    assert result.skipped == {"no-token": SkipReason.NO_TOKEN}
    assert result.invalidated_tokens == [expo_token("dead")]
    assert recipients.recipients["dead"].push_token is None
    assert recipients.recipients["ok"].push_token == expo_token("ok")
    # The recipient without a token never reaches the provider
    assert [m.to for m in push_provider.sent] == [expo_token("dead"), expo_token("ok")]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_malformed_token_is_skipped_not_cleared(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1", token="not-a-token"))

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.skipped == {"u1": SkipReason.INVALID_TOKEN}
    assert push_provider.batches == []
    assert recipients.recipients["u1"].push_token == "not-a-token"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_and_inactive_recipients(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("inactive", is_active=False))

    result = await dispatcher.dispatch(["ghost", "inactive"], REMINDER)

    assert result.delivered == 0
    assert not result.success
    assert result.errors == []
    assert result.skipped == {"ghost": SkipReason.UNKNOWN_RECIPIENT, "inactive": SkipReason.INACTIVE}
    assert push_provider.batches == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_duplicate_ids_are_sent_once(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))

    result = await dispatcher.dispatch(["u1", "u1", ""], REMINDER)

    assert result.delivered == 1
    assert len(push_provider.sent) == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_message_fields(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))

    await dispatcher.dispatch(["u1"], REMINDER)

    message = push_provider.sent[0]
    assert message.title == "Appointment Tomorrow"
    assert message.category_id == "appointment_reminder"
    assert message.data == {"type": "appointment_reminder"}
    assert message.priority == "high"
    assert message.sound == "default"


# ============================================================================
# Delivery errors
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_batch_failure_is_reported_not_raised(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))
    push_provider.fail_send = True

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert not result.success
    assert len(result.errors) == 1
    assert "500" in result.errors[0]
    assert dispatcher.pending_receipts == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unreadable_provider_response_is_reported_not_raised(recipients, preferences, clock):
    recipients.add(create_recipient("u1"))
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="upstream timeout"))
    async with ExpoPushClient(api_base="https://exp.test/--/api/v2", transport=transport) as client:
        dispatcher = NotificationDispatcher(
            recipients=recipients, preferences=preferences, provider=client, timezone_name="UTC", clock=clock
        )

        result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.delivered == 0
    assert len(result.errors) == 1
    assert "invalid JSON" in result.errors[0]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_other_ticket_errors_keep_token(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))
    push_provider.ticket_errors[expo_token("u1")] = "MessageRateExceeded"

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.delivered == 0
    assert result.errors and "MessageRateExceeded" in result.errors[0]
    assert recipients.recipients["u1"].push_token == expo_token("u1")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_batches_respect_provider_limit(recipients, preferences, clock):
    provider = FakePushProvider(max_batch_size=2)
    dispatcher = NotificationDispatcher(recipients, preferences, provider, clock=clock)
    for i in range(5):
        recipients.add(create_recipient(f"u{i}"))

    result = await dispatcher.dispatch([f"u{i}" for i in range(5)], REMINDER)

    assert result.delivered == 5
    assert [len(batch) for batch in provider.batches] == [2, 2, 1]


# ============================================================================
# Preferences
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_disabled_category_is_suppressed(dispatcher, recipients, preferences, push_provider):
    recipients.add(create_recipient("u1"))
    preferences.add(NotificationPreferences(user_id="u1", health_reminders=False))

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.skipped == {"u1": SkipReason.PREFERENCE_DISABLED}
    assert push_provider.batches == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_quiet_hours_suppress(dispatcher, recipients, preferences, push_provider, clock):
    clock.now = datetime(2025, 3, 9, 23, 30, tzinfo=UTC)
    recipients.add(create_recipient("u1"))
    preferences.add(NotificationPreferences(user_id="u1", dnd_enabled=True))

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.skipped == {"u1": SkipReason.QUIET_HOURS}
    assert push_provider.batches == []


@pytest.mark.unit
@pytest.mark.asyncio
@pytest.mark.parametrize("dnd_start", ["", "25:00", "late"])
async def test_malformed_dnd_period_means_no_quiet_hours(
    dispatcher, recipients, preferences, push_provider, dnd_start
):
    recipients.add(create_recipient("u1"))
    recipients.add(create_recipient("u2"))
    preferences.add(NotificationPreferences(user_id="u1", dnd_enabled=True, dnd_start=dnd_start))

    result = await dispatcher.dispatch(["u1", "u2"], REMINDER)

    assert result.delivered == 2
    assert result.skipped == {}
    assert {m.to for m in push_provider.sent} == {expo_token("u1"), expo_token("u2")}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_general_updates_gate_health_alerts(dispatcher, recipients, preferences, push_provider):
    recipients.add(create_recipient("u1"))
    preferences.add(NotificationPreferences(user_id="u1", general_updates=False))

    result = await dispatcher.send_health_alert("u1", "alert-1", "High blood pressure reading", "warning")

    assert result.skipped == {"u1": SkipReason.PREFERENCE_DISABLED}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_preference_lookup_failure_allows(dispatcher, recipients, preferences, push_provider):
    recipients.add(create_recipient("u1"))
    preferences.fail = True

    result = await dispatcher.dispatch(["u1"], REMINDER)

    assert result.delivered == 1


# ============================================================================
# Receipts
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_receipts_wait_for_delay(dispatcher, recipients, push_provider, now):
    recipients.add(create_recipient("u1"))
    await dispatcher.dispatch(["u1"], REMINDER)

    report = await dispatcher.reconcile_receipts(now + timedelta(minutes=5))

    assert report.checked == 0
    assert report.pending == 1
    assert push_provider.receipt_requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unregistered_receipt_clears_token(dispatcher, recipients, push_provider, now):
    recipients.add(create_recipient("u1"))
    recipients.add(create_recipient("u2"))
    result = await dispatcher.dispatch(["u1", "u2"], REMINDER)
    first, second = result.ticket_ids
    push_provider.receipts[first] = PushReceipt(
        ticket_id=first,
        status="error",
        message="device not registered",
        details={"error": DEVICE_NOT_REGISTERED},
    )
    push_provider.receipts[second] = PushReceipt(ticket_id=second, status="ok")

    report = await dispatcher.reconcile_receipts(now + timedelta(minutes=20))

    assert report.checked == 2
    assert report.ok == 1
    assert report.failed == 1
    assert report.tokens_cleared == 1
    assert recipients.recipients["u1"].push_token is None
    assert recipients.recipients["u2"].push_token == expo_token("u2")
    assert dispatcher.pending_receipts == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unresolved_receipts_stay_until_ttl(dispatcher, recipients, push_provider, now):
    recipients.add(create_recipient("u1"))
    await dispatcher.dispatch(["u1"], REMINDER)

    report = await dispatcher.reconcile_receipts(now + timedelta(minutes=20))
    assert report.pending == 1

    report = await dispatcher.reconcile_receipts(now + timedelta(hours=25))
    assert report.expired == 1
    assert report.pending == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_receipt_fetch_failure_keeps_tickets(dispatcher, recipients, push_provider, now):
    recipients.add(create_recipient("u1"))
    await dispatcher.dispatch(["u1"], REMINDER)
    push_provider.fail_receipts = True

    report = await dispatcher.reconcile_receipts(now + timedelta(minutes=20))

    assert report.errors
    assert dispatcher.pending_receipts == 1


# ============================================================================
# Convenience senders
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_broadcast_targets_active_recipients(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))
    recipients.add(create_recipient("u2", token=""))
    recipients.add(create_recipient("u3", is_active=False))

    result = await dispatcher.broadcast(PushNotification(title="Clinic closed", body="Closed on Monday"))

    assert result.delivered == 1
    assert [m.to for m in push_provider.sent] == [expo_token("u1")]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_send_test_notification(dispatcher, recipients, push_provider):
    recipients.add(create_recipient("u1"))

    result = await dispatcher.send_test_notification("u1")

    assert result.delivered == 1
    assert push_provider.sent[0].title == "Test Notification"
    assert push_provider.sent[0].data == {"type": "test"}
