# ============================================================================
# SCOPE: GLOBAL
# Description: Expo push integration module exports.
# ============================================================================
"""
Expo Push Integration Module.

Usage:
    from mamacare.integrations.expo import ExpoPushClient

    async with ExpoPushClient(access_token=settings.EXPO_ACCESS_TOKEN) as client:
        tickets = await client.send(messages)
"""

from .exceptions import PushProviderError, PushRateLimitError, PushRetryableError
from .http_client import ExpoPushClient, is_expo_push_token

__all__ = [
    "ExpoPushClient",
    "PushProviderError",
    "PushRateLimitError",
    "PushRetryableError",
    "is_expo_push_token",
]
