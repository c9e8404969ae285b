"""
Domain Layer - Core DDD building blocks

This module provides base classes for Domain-Driven Design:
- Entities: Objects with identity and lifecycle
- Exceptions: Domain-specific error handling
"""

from mamacare.core.domain.entities import AggregateRoot, Entity
from mamacare.core.domain.exceptions import (
    DomainException,
    EntityNotFoundException,
    IntegrationException,
    InvalidRecordError,
    SchedulerNotRunningError,
    ValidationException,
)

__all__ = [
    # Entities
    "Entity",
    "AggregateRoot",
    # Exceptions
    "DomainException",
    "ValidationException",
    "EntityNotFoundException",
    "InvalidRecordError",
    "IntegrationException",
    "SchedulerNotRunningError",
]
