"""
Domain Exceptions

Errors raised by the reminder engine. Jobs catch ``InvalidRecordError``
per record and keep going; the admin API maps the rest to HTTP statuses.
"""

from typing import Any


class DomainException(Exception):
    """
    Base exception of the reminder engine.

    ``code`` is a stable machine-readable identifier, ``details`` carries
    the context shown in API error bodies.
    """

    code = "DOMAIN_ERROR"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {key: value for key, value in details.items() if value is not None}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class ValidationException(DomainException):
    """Invalid input to an engine operation (e.g. a reminder time in the past)."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, field=field)
        self.field = field


class EntityNotFoundException(DomainException):
    code = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(f"{entity_type} {entity_id} not found", entity_type=entity_type, entity_id=str(entity_id))
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvalidRecordError(DomainException):
    """
    A stored record is malformed or misses a required field.

    Reminder jobs log the record as a data error and continue the batch.
    """

    code = "INVALID_RECORD"

    def __init__(self, record_type: str, record_id: Any, reason: str):
        super().__init__(
            f"Invalid {record_type} {record_id}: {reason}",
            record_type=record_type,
            record_id=str(record_id),
            reason=reason,
        )
        self.record_type = record_type
        self.record_id = record_id
        self.reason = reason


class SchedulerNotRunningError(DomainException):
    """The operation needs a started reminder runner."""

    code = "SCHEDULER_NOT_RUNNING"

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation}: reminder scheduler is not running", operation=operation)
        self.operation = operation


class IntegrationException(DomainException):
    """An external service (the push provider) failed."""

    code = "INTEGRATION_ERROR"

    def __init__(self, service: str, message: str, original_error: Exception | None = None):
        super().__init__(message, service=service, original_error=str(original_error) if original_error else None)
        self.service = service
        self.original_error = original_error
