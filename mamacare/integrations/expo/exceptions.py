# ============================================================================
# SCOPE: GLOBAL
# Description: Exceptions for the Expo push integration.
# ============================================================================
"""
Expo Push Integration Exceptions.

Single Responsibility: Define exception types for Expo push operations.
"""

from mamacare.core.domain.exceptions import IntegrationException


class PushProviderError(IntegrationException):
    """Error sending to or reading from the Expo push service."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__("expo", message, original_error)


class PushRetryableError(PushProviderError):
    """
    Transient error that can be retried (5xx server errors).

    Caught by tenacity's retry decorator for automatic retry.
    """


class PushRateLimitError(PushProviderError):
    """
    Rate limiting error (429 Too Many Requests).

    Not retried inline; the batch is reported as failed and the
    reminder stays eligible for the next poll.
    """
