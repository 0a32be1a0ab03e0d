"""Retry transport for resilient service calls.

Retries are off until ``enable_retries()`` is called on a service. When on,
every request goes through :class:`RetryTransport`, which classifies each
failure the same way for every HTTP method:

| Failure | Outcome |
|---------|---------|
| 429, 500, 502, 503, 504 | retry |
| transport error while sending or reading the body | retry |
| unsupported URL scheme | no retry |
| any other status | no retry |

The response body is read inside the retry loop, so a connection dropped
mid-body counts as a transport error and is retried.

Backoff is exponential with full jitter, capped by ``max_interval``. A
``Retry-After`` header wins when present (also capped). Waits use
``asyncio.sleep`` and are therefore cancelled with the calling task.

## Example

```python
from open_toolchain_sdk.transport.retry import RetryPolicy, RetryTransport
import httpx

policy = RetryPolicy.enabled_with(max_retries=3, max_interval=10)
transport = RetryTransport(wrapped_transport=httpx.AsyncHTTPTransport(), policy=policy)
```
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime

import httpx

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 4
DEFAULT_MAX_INTERVAL = 30.0

RETRY_STATUS_CODES: frozenset[int] = frozenset([429, 500, 502, 503, 504])

# Repeating these cannot change the outcome
PERMANENT_ERRORS: tuple[type[httpx.TransportError], ...] = (httpx.UnsupportedProtocol,)


@dataclass(frozen=True)
class RetryPolicy:
    """Immutable retry settings; services swap whole instances."""

    enabled: bool = False
    max_retries: int = DEFAULT_MAX_RETRIES
    max_interval: float = DEFAULT_MAX_INTERVAL
    backoff_factor: float = 1.0

    @classmethod
    def enabled_with(cls, max_retries: int = 0, max_interval: float = 0) -> "RetryPolicy":
        """Build an enabled policy; 0 (or less) selects the default for either value."""
        return cls(
            enabled=True,
            max_retries=max_retries if max_retries > 0 else DEFAULT_MAX_RETRIES,
            max_interval=float(max_interval) if max_interval > 0 else DEFAULT_MAX_INTERVAL,
        )

    @classmethod
    def disabled(cls) -> "RetryPolicy":
        return cls(enabled=False)


class RetryTransport(httpx.AsyncBaseTransport):
    """Transport wrapper that retries retryable failures under a RetryPolicy.

    Args:
        wrapped_transport: The underlying transport to wrap.
        policy: Retry settings. A disabled policy passes requests straight through.
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport, policy: RetryPolicy) -> None:
        self._wrapped_transport = wrapped_transport
        self.policy = policy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request, retrying until success, a non-retryable result, or max retries.

        Returns:
            The final HTTP response (possibly a retryable status once retries run out).

        Raises:
            httpx.TransportError: The final attempt failed at the transport level.
        """
        if not self.policy.enabled:
            return await self._wrapped_transport.handle_async_request(request)

        retries = 0
        while True:
            try:
                response = await self._send_and_read(request)
            except httpx.TransportError as e:
                if not self._should_retry_error(request, e, retries):
                    raise
                retries += 1
                delay = self._calculate_backoff_delay(retries)
                logger.warning(
                    f"Request {request.method} {request.url} failed with {e!r}, "
                    f"retrying in {delay:.2f}s (attempt {retries}/{self.policy.max_retries})"
                )
                await asyncio.sleep(delay)
                continue

            should_retry, delay = self._should_retry_with_delay(request, response, retries)
            if not should_retry:
                return response

            await response.aclose()
            retries += 1
            logger.warning(
                f"Request {request.method} {request.url} failed with {response.status_code}, "
                f"retrying in {delay:.2f}s (attempt {retries}/{self.policy.max_retries})"
            )
            await asyncio.sleep(delay)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def _send_and_read(self, request: httpx.Request) -> httpx.Response:
        response = await self._wrapped_transport.handle_async_request(request)
        try:
            await response.aread()
        except httpx.TransportError:
            await response.aclose()
            raise
        return response

    def _should_retry_error(self, request: httpx.Request, error: httpx.TransportError, current_retries: int) -> bool:
        if current_retries >= self.policy.max_retries:
            return False
        return not isinstance(error, PERMANENT_ERRORS)

    def _should_retry_with_delay(
        self, request: httpx.Request, response: httpx.Response, current_retries: int
    ) -> tuple[bool, float]:
        """Determine if the response should be retried and calculate the delay.

        Returns:
            Tuple of (should_retry, delay_in_seconds)
        """
        if current_retries >= self.policy.max_retries:
            return False, 0.0

        status_code = response.status_code
        if status_code not in RETRY_STATUS_CODES:
            return False, 0.0

        delay = self._parse_retry_after(response)
        if delay is None:
            delay = self._calculate_backoff_delay(current_retries + 1)
        return True, delay

    def _parse_retry_after(self, response: httpx.Response) -> float | None:
        """Parse a Retry-After header in delay-seconds or HTTP-date form.

        Returns:
            Delay in seconds capped at max_interval, or None if missing or invalid.
        """
        retry_after = response.headers.get("Retry-After")
        if not retry_after:
            return None

        try:
            delay = int(retry_after)
            if delay < 0:
                return None
            return float(min(delay, self.policy.max_interval))
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after)
            delay = (retry_date - datetime.now(UTC)).total_seconds()
            # Clock skew
            if delay < 0:
                return None
            return float(min(delay, self.policy.max_interval))
        except (ValueError, TypeError):
            pass

        return None

    def _calculate_backoff_delay(self, retry_number: int) -> float:
        """Exponential backoff with full jitter.

        Draws uniformly from ``[0, min(backoff_factor * 2 ** (retry_number - 1), max_interval)]``.

        Args:
            retry_number: Current retry attempt (1-indexed)
        """
        ceiling = min(self.policy.backoff_factor * (2 ** (retry_number - 1)), self.policy.max_interval)
        return random.uniform(0, ceiling)
