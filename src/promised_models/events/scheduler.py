"""Schedulers for debounced change notifications.

A field that changes does not notify its model right away. It asks a
NotificationScheduler to run its flush callback later and remembers the
returned handle; until the flush runs, further changes schedule nothing.
Every synchronous mutation within one event-loop iteration therefore
collapses into a single notification.
"""

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class ScheduledCall(Protocol):
    """Handle of a scheduled callback."""

    def cancel(self) -> None:
        """Prevent the callback from running if it has not run yet."""
        ...


@runtime_checkable
class NotificationScheduler(Protocol):
    """Defers callbacks to a later point of the cooperative loop."""

    def schedule(self, callback: Callable[[], None]) -> ScheduledCall:
        """
        Schedule a callback.

        Args:
            callback: Zero-argument callable to run later

        Returns:
            Handle that can cancel the call
        """
        ...


class _ImmediateCall:
    """Handle of a callback that already ran."""

    def cancel(self) -> None:
        pass


class AsyncioScheduler:
    """
    Schedule callbacks on the running asyncio event loop.

    With ``delay == 0`` callbacks run on the next loop iteration
    (``loop.call_soon``), otherwise after ``delay`` seconds
    (``loop.call_later``). Outside a running loop there is no later point
    to defer to, so the callback runs immediately and notifications are not
    coalesced; a warning is logged the first time. Synchronous hosts should
    use ManualScheduler instead.
    """

    def __init__(self, delay: float = 0.0):
        """
        Initialize the scheduler.

        Args:
            delay: Seconds to wait before running callbacks
        """
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self.delay = delay
        self._warned_no_loop = False

    def schedule(self, callback: Callable[[], None]) -> ScheduledCall:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if not self._warned_no_loop:
                self._warned_no_loop = True
                logger.warning(
                    "No running event loop, notifying immediately without debouncing; "
                    "use ManualScheduler outside asyncio"
                )
            callback()
            return _ImmediateCall()

        if self.delay:
            return loop.call_later(self.delay, callback)
        return loop.call_soon(callback)


class _QueuedCall:
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Queue callbacks until ``run_pending()`` is called.

    For hosts that drive notifications from their own loop, and for tests
    that need deterministic flushing without an event loop.

    Example:
        ```python
        scheduler = ManualScheduler()
        model = User(scheduler=scheduler)
        model.set("name", "a")
        model.set("name", "b")
        scheduler.run_pending()  # one "change" notification
        ```
    """

    def __init__(self):
        self._queue: deque[_QueuedCall] = deque()

    def schedule(self, callback: Callable[[], None]) -> ScheduledCall:
        call = _QueuedCall(callback)
        self._queue.append(call)
        return call

    def run_pending(self) -> int:
        """
        Run the callbacks queued so far.

        Callbacks scheduled while running are left for the next call.

        Returns:
            Number of callbacks that ran
        """
        ran = 0
        for _ in range(len(self._queue)):
            call = self._queue.popleft()
            if call.cancelled:
                continue
            call.callback()
            ran += 1
        return ran

    @property
    def pending(self) -> int:
        """Number of queued, non-cancelled callbacks."""
        return sum(1 for call in self._queue if not call.cancelled)
