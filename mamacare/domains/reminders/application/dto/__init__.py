# Application DTOs
from .reminder_dtos import (
    DispatchResult,
    JobContext,
    JobReport,
    OutcomeKind,
    PushNotification,
    ReceiptReconciliation,
    RecordOutcome,
    RunReason,
    SkipReason,
)

__all__ = [
    "DispatchResult",
    "JobContext",
    "JobReport",
    "OutcomeKind",
    "PushNotification",
    "ReceiptReconciliation",
    "RecordOutcome",
    "RunReason",
    "SkipReason",
]
