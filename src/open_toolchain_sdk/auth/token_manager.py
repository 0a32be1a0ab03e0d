"""Single-slot bearer token cache with coalesced refresh."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Refresh once this fraction of the token lifetime has passed
REFRESH_FRACTION = 0.8
# ...or at the latest this many seconds before expiry
EXPIRY_MARGIN = 60.0
# Short-lived tokens stay cached for at least this fraction of their lifetime
MIN_REFRESH_FRACTION = 0.5


@dataclass(frozen=True)
class IAMToken:
    access_token: str
    expires_at: float
    refresh_at: float

    @classmethod
    def from_response(cls, data: dict[str, Any], now: float | None = None) -> "IAMToken":
        """Build a token from an IAM token endpoint response.

        Uses ``expiration`` (epoch seconds) when present, else ``expires_in``.

        Raises:
            KeyError: ``access_token`` is missing.
            TypeError, ValueError: Expiry fields are malformed.
        """
        now = time.time() if now is None else now
        access_token = data["access_token"]
        if not isinstance(access_token, str) or not access_token:
            raise ValueError("access_token is empty")

        if data.get("expiration") is not None:
            expires_at = float(data["expiration"])
            lifetime = expires_at - now
        else:
            lifetime = float(data.get("expires_in", 3600))
            expires_at = now + lifetime

        refresh_at = min(now + lifetime * REFRESH_FRACTION, expires_at - EXPIRY_MARGIN)
        refresh_at = max(refresh_at, now + lifetime * MIN_REFRESH_FRACTION, now)
        return cls(access_token=access_token, expires_at=expires_at, refresh_at=refresh_at)

    def needs_refresh(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.refresh_at


class TokenManager:
    """Caches one token and refreshes it at most once at a time.

    Concurrent callers that find the token stale all wait on the same
    refresh task; each receives its token or its exception. A caller that
    is cancelled stops waiting, but the refresh keeps running for the rest.

    Args:
        fetch: Coroutine function that requests a fresh token.
    """

    def __init__(self, fetch: Callable[[], Awaitable[IAMToken]]):
        self._fetch = fetch
        self._token: IAMToken | None = None
        self._inflight: asyncio.Future[IAMToken] | None = None

    @property
    def token(self) -> IAMToken | None:
        return self._token

    def invalidate(self) -> None:
        self._token = None

    async def get_token(self) -> str:
        token = self._token
        if token is not None and not token.needs_refresh():
            return token.access_token
        token = await self._refresh()
        return token.access_token

    async def _refresh(self) -> IAMToken:
        if self._inflight is None:
            logger.debug("Requesting a new bearer token")
            task = asyncio.ensure_future(self._fetch())
            self._inflight = task
            task.add_done_callback(self._refresh_done)
        return await asyncio.shield(self._inflight)

    def _refresh_done(self, task: "asyncio.Future[IAMToken]") -> None:
        if self._inflight is task:
            self._inflight = None
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug(f"Bearer token refresh failed: {exc}")
            return
        self._token = task.result()
