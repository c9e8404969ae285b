# ============================================================================
# SCOPE: GLOBAL
# Description: HTTP client for the Expo push API with automatic retry.
# ============================================================================
"""
Expo Push HTTP Client with Exponential Backoff.

Single Responsibility: Deliver push batches and fetch receipts.

- 429 Rate Limit: Raise PushRateLimitError (caller reports the batch as failed)
- 500/502/503/504: Retry with exponential backoff + jitter
- Other 4xx: Fail immediately
"""

import logging
import re
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError
from tenacity import (
    RetryError,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from mamacare.domains.reminders.application.ports import PushMessage, PushReceipt, PushTicket

from .exceptions import PushProviderError, PushRateLimitError, PushRetryableError
from .models import ExpoPushMessage, ExpoPushReceipt, ExpoPushTicket

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://exp.host/--/api/v2"

# HTTP status codes that warrant retry with exponential backoff
RETRYABLE_STATUS_CODES = frozenset({500, 502, 503, 504})

_EXPO_TOKEN = re.compile(r"^Expo(nent)?PushToken\[.+\]$")
_UUID_TOKEN = re.compile(r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE)


def is_expo_push_token(token: Any) -> bool:
    """Syntactic check for Expo push tokens."""
    if not isinstance(token, str):
        return False
    return bool(_EXPO_TOKEN.match(token) or _UUID_TOKEN.match(token))


class ExpoPushClient:
    """
    Push provider backed by the Expo push service.

    Uses a persistent AsyncClient (connection reuse). Implements IPushProvider.
    """

    DEFAULT_TIMEOUT = 30.0
    MAX_RETRIES = 3

    # Expo request limits
    SEND_CHUNK_SIZE = 100
    RECEIPT_CHUNK_SIZE = 300

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        access_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            api_base: Expo API base URL (without trailing slash)
            access_token: Optional Expo access token for enhanced security
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._api_base = api_base.rstrip("/")
        self._access_token = access_token
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def max_batch_size(self) -> int:
        return self.SEND_CHUNK_SIZE

    @property
    def max_receipt_batch_size(self) -> int:
        return self.RECEIPT_CHUNK_SIZE

    def is_valid_token(self, token: str) -> bool:
        return is_expo_push_token(token)

    async def initialize(self) -> None:
        """Initialize persistent HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def close(self) -> None:
        """Close HTTP client and release resources."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ExpoPushClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            await self.initialize()
        return self._client  # type: ignore

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Accept-Encoding": "gzip, deflate",
            "Content-Type": "application/json",
        }
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        return headers

    async def send(self, messages: Sequence[PushMessage]) -> list[PushTicket]:
        """
        Send one batch of messages.

        Returns:
            One ticket per message, in message order

        Raises:
            PushProviderError: On transport failure or persistent server errors
        """
        if not messages:
            return []
        if len(messages) > self.SEND_CHUNK_SIZE:
            raise ValueError(f"Batch of {len(messages)} exceeds Expo limit of {self.SEND_CHUNK_SIZE}")

        payload = [ExpoPushMessage.from_message(message).to_payload() for message in messages]
        body = await self._post(f"{self._api_base}/push/send", payload)

        data = body.get("data")
        if not isinstance(data, list):
            raise PushProviderError(f"Unexpected send response: {body.get('errors') or body}")
        if len(data) != len(messages):
            raise PushProviderError(f"Expected {len(messages)} tickets, got {len(data)}")

        try:
            return [ExpoPushTicket.model_validate(item).to_ticket() for item in data]
        except ValidationError as e:
            raise PushProviderError(f"Malformed push ticket: {e}", original_error=e) from e

    async def get_receipts(self, ticket_ids: Sequence[str]) -> dict[str, PushReceipt]:
        """
        Fetch receipts for up to RECEIPT_CHUNK_SIZE tickets.

        Tickets Expo has not resolved yet are absent from the result.
        """
        if not ticket_ids:
            return {}
        if len(ticket_ids) > self.RECEIPT_CHUNK_SIZE:
            raise ValueError(f"{len(ticket_ids)} ids exceed Expo limit of {self.RECEIPT_CHUNK_SIZE}")

        body = await self._post(f"{self._api_base}/push/getReceipts", {"ids": list(ticket_ids)})

        data = body.get("data")
        if not isinstance(data, dict):
            raise PushProviderError(f"Unexpected receipts response: {body.get('errors') or body}")

        try:
            return {
                ticket_id: ExpoPushReceipt.model_validate(item).to_receipt(ticket_id)
                for ticket_id, item in data.items()
            }
        except ValidationError as e:
            raise PushProviderError(f"Malformed push receipt: {e}", original_error=e) from e

    async def _post(self, url: str, payload: Any) -> dict[str, Any]:
        """
        POST with retry on transient errors, normalizing failures.

        Raises:
            PushRateLimitError: On 429
            PushProviderError: On any other failure, including a body that is
                not a JSON object
        """
        try:
            body = await self._execute_with_backoff(url, payload)
        except RetryError as e:
            last_exception = e.last_attempt.exception()
            raise PushProviderError(
                f"Max retries ({self.MAX_RETRIES}) exceeded: {last_exception}",
                original_error=last_exception if isinstance(last_exception, Exception) else None,
            ) from e
        except httpx.HTTPStatusError as e:
            raise PushProviderError(
                f"Expo request failed with {e.response.status_code}: {e.response.text[:200]}",
                original_error=e,
            ) from e
        except httpx.HTTPError as e:
            raise PushProviderError(f"Expo transport error: {e}", original_error=e) from e
        except ValueError as e:
            raise PushProviderError(f"Expo returned invalid JSON: {e}", original_error=e) from e

        if not isinstance(body, dict):
            raise PushProviderError(f"Unexpected Expo response body: {str(body)[:200]}")
        return body

    @retry(
        retry=retry_if_exception_type(PushRetryableError),
        stop=stop_after_attempt(3),  # MAX_RETRIES
        wait=wait_exponential_jitter(initial=1.0, max=30.0, jitter=5),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _execute_with_backoff(self, url: str, payload: Any) -> dict[str, Any]:
        """
        Execute request with exponential backoff on 5xx errors.

        Raises:
            PushRetryableError: On 5xx (triggers retry)
            PushRateLimitError: On 429
            httpx.HTTPStatusError: On other 4xx (no retry)
        """
        client = await self._ensure_client()
        response = await client.post(url, headers=self._get_headers(), json=payload)

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After", "60")
            logger.warning(f"Rate limited by Expo (429), Retry-After: {retry_after}s")
            raise PushRateLimitError(f"Rate limited by Expo. Retry after {retry_after}s")

        if response.status_code in RETRYABLE_STATUS_CODES:
            error_preview = response.text[:200] if response.text else "No body"
            logger.warning(f"Expo server error {response.status_code}, will retry: {error_preview}")
            raise PushRetryableError(f"Expo server error {response.status_code}: {error_preview}")

        response.raise_for_status()

        return response.json() if response.text.strip() else {}
