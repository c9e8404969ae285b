# ============================================================================
# SCOPE: APPLICATION LAYER (Reminders)
# Description: Data Transfer Objects for reminder jobs and push dispatch.
# ============================================================================
"""Reminder DTOs.

Structured results exchanged between the reminder jobs, the notification
dispatcher and the runner.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ...domain.value_objects import NotificationCategory

# Expo defaults (four weeks TTL)
DEFAULT_TTL_SECONDS = 2_419_200
DEFAULT_CHANNEL_ID = "default"

# =============================================================================
# Dispatch DTOs
# =============================================================================


@dataclass(frozen=True)
class PushNotification:
    """Message to deliver to one or more recipients."""

    title: str
    body: str
    category: NotificationCategory = NotificationCategory.GENERAL
    data: dict[str, Any] = field(default_factory=dict)
    priority: str = "high"
    sound: str | None = "default"
    ttl: int = DEFAULT_TTL_SECONDS
    channel_id: str = DEFAULT_CHANNEL_ID


class SkipReason(str, Enum):
    """Why a recipient did not get a push."""

    UNKNOWN_RECIPIENT = "unknown_recipient"
    INACTIVE = "inactive"
    NO_TOKEN = "no_token"
    INVALID_TOKEN = "invalid_token"
    PREFERENCE_DISABLED = "preference_disabled"
    QUIET_HOURS = "quiet_hours"


@dataclass
class DispatchResult:
    """Outcome of one dispatch.

    ``delivered`` counts tickets accepted by the provider. ``errors`` holds
    transport or provider failures only; business non-delivery is reported
    in ``skipped``.
    """

    delivered: int = 0
    errors: list[str] = field(default_factory=list)
    skipped: dict[str, SkipReason] = field(default_factory=dict)
    invalidated_tokens: list[str] = field(default_factory=list)
    ticket_ids: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.delivered > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "delivered": self.delivered,
            "errors": list(self.errors),
            "skipped": {user_id: reason.value for user_id, reason in self.skipped.items()},
            "invalidated_tokens": len(self.invalidated_tokens),
        }


@dataclass
class ReceiptReconciliation:
    """Outcome of one receipt reconciliation pass."""

    checked: int = 0
    ok: int = 0
    failed: int = 0
    tokens_cleared: int = 0
    expired: int = 0
    pending: int = 0
    errors: list[str] = field(default_factory=list)


# =============================================================================
# Job DTOs
# =============================================================================


class RunReason(str, Enum):
    """Why the runner invoked a job."""

    STARTUP = "startup"
    SCHEDULED = "scheduled"
    MANUAL = "manual"


@dataclass(frozen=True)
class JobContext:
    """Invocation context handed to ``run``."""

    now: datetime
    reason: RunReason = RunReason.SCHEDULED


class OutcomeKind(str, Enum):
    """Per-record result of a job."""

    OK = "ok"
    SKIPPED = "skipped"
    DATA_ERROR = "data_error"
    DELIVERY_ERROR = "delivery_error"


@dataclass(frozen=True)
class RecordOutcome:
    record_id: str
    kind: OutcomeKind
    detail: str = ""


@dataclass
class JobReport:
    """Summary of one job run, surfaced to the runner.

    ``error`` is set only when the run itself failed (the job raised).
    """

    job_name: str
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    candidates: int = 0
    outcomes: list[RecordOutcome] = field(default_factory=list)
    affected: int = 0
    error: str | None = None

    def record(self, record_id: str, kind: OutcomeKind, detail: str = "") -> RecordOutcome:
        outcome = RecordOutcome(record_id=str(record_id), kind=kind, detail=detail)
        self.outcomes.append(outcome)
        return outcome

    def count(self, kind: OutcomeKind) -> int:
        return sum(1 for outcome in self.outcomes if outcome.kind is kind)

    @property
    def ok(self) -> int:
        return self.count(OutcomeKind.OK)

    @property
    def skipped(self) -> int:
        return self.count(OutcomeKind.SKIPPED)

    @property
    def data_errors(self) -> int:
        return self.count(OutcomeKind.DATA_ERROR)

    @property
    def delivery_errors(self) -> int:
        return self.count(OutcomeKind.DELIVERY_ERROR)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def finish(self, finished_at: datetime | None = None) -> "JobReport":
        self.finished_at = finished_at or datetime.now(UTC)
        return self

    def merge(self, other: "JobReport") -> "JobReport":
        """Fold a sub-job report into this one."""
        self.candidates += other.candidates
        self.outcomes.extend(other.outcomes)
        self.affected += other.affected
        if other.error and not self.error:
            self.error = other.error
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "job": self.job_name,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "candidates": self.candidates,
            "ok": self.ok,
            "skipped": self.skipped,
            "data_errors": self.data_errors,
            "delivery_errors": self.delivery_errors,
            "affected": self.affected,
            "error": self.error,
        }
