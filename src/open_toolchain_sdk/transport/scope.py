"""Caller-controlled cancellation for SDK operations.

A :class:`CancellationScope` bounds one or more operations by a deadline,
an explicit :meth:`CancellationScope.cancel` call, or both. Everything an
operation awaits (token refresh, transport, retry backoff) runs inside the
scope, so it stops promptly when the scope fires.

Example:
    ```python
    scope = CancellationScope(timeout=5.0)
    response = await service.get_toolchain(options, scope=scope)
    ```
"""

import asyncio
import time
from collections.abc import Awaitable
from typing import TypeVar

from open_toolchain_sdk.errors.exceptions import (
    ERRORMSG_CANCELED,
    ERRORMSG_DEADLINE_EXCEEDED,
    OperationCancelledError,
)

T = TypeVar("T")


class CancellationScope:
    """Deadline plus explicit cancellation shared by one or more calls.

    Args:
        timeout: Seconds from now until the scope expires.
        deadline: Absolute ``time.monotonic()`` value at which the scope
            expires. Ignored when ``timeout`` is given.

    ``cancel()`` must be called from the event loop thread; from other
    threads use ``loop.call_soon_threadsafe(scope.cancel)``.
    """

    def __init__(self, timeout: float | None = None, *, deadline: float | None = None):
        if timeout is not None:
            deadline = time.monotonic() + timeout
        self._deadline = deadline
        self._cancelled = False
        self._event: asyncio.Event | None = None

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise if the scope has already fired."""
        if self._cancelled or self.expired:
            raise self._error()

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable``, abandoning it as soon as the scope fires.

        Raises:
            OperationCancelledError: The deadline passed or cancel() was called
                before ``awaitable`` finished. The awaitable is cancelled.
        """
        try:
            self.check()
        except OperationCancelledError:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise

        task = asyncio.ensure_future(awaitable)
        if self._event is None:
            self._event = asyncio.Event()
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        except BaseException:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        await asyncio.wait({task})
        raise self._error()

    def _error(self) -> OperationCancelledError:
        if self._cancelled:
            return OperationCancelledError(ERRORMSG_CANCELED)
        return OperationCancelledError(ERRORMSG_DEADLINE_EXCEEDED, deadline_exceeded=True)
