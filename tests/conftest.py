"""
Shared pytest fixtures for all tests.

Provides in-memory stores, a fake push provider, a dispatcher wired to
them and a fixed clock.
"""

import os
from datetime import UTC, datetime

import pytest

from mamacare.domains.reminders.application.services import NotificationDispatcher
from tests.utils.fakes import (
    FakePushProvider,
    InMemoryAppointmentRepository,
    InMemoryPatientRepository,
    InMemoryPreferenceStore,
    InMemoryRecipientRepository,
)

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# CLOCK
# ============================================================================


class FixedClock:
    """Settable clock for dispatcher and runner tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def now() -> datetime:
    return datetime(2025, 3, 9, 12, 0, tzinfo=UTC)


@pytest.fixture
def clock(now) -> FixedClock:
    return FixedClock(now)


# ============================================================================
# STORE FIXTURES
# ============================================================================


@pytest.fixture
def appointments() -> InMemoryAppointmentRepository:
    return InMemoryAppointmentRepository()


@pytest.fixture
def patients() -> InMemoryPatientRepository:
    return InMemoryPatientRepository()


@pytest.fixture
def recipients() -> InMemoryRecipientRepository:
    return InMemoryRecipientRepository()


@pytest.fixture
def preferences() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def push_provider() -> FakePushProvider:
    return FakePushProvider()


# ============================================================================
# SERVICE FIXTURES
# ============================================================================


@pytest.fixture
def dispatcher(recipients, preferences, push_provider, clock) -> NotificationDispatcher:
    """Dispatcher over the in-memory stores, UTC quiet hours."""
    return NotificationDispatcher(
        recipients=recipients,
        preferences=preferences,
        provider=push_provider,
        timezone_name="UTC",
        clock=clock,
    )
