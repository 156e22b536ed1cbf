"""Interval schedulers driving the task countdown.

Tasks never talk to the event loop directly; they ask a scheduler for a
repeating callback and keep the returned handle so they can cancel it.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Protocol

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class IntervalHandle(Protocol):
    """Handle of a repeating callback."""

    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Source of repeating callbacks."""

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> IntervalHandle: ...


class _AsyncioInterval:
    """Repeating callback chained on absolute loop deadlines."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._deadline = loop.time() + interval
        self._timer: asyncio.TimerHandle | None = loop.call_at(
            self._deadline, self._fire
        )
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        if self._cancelled:
            return
        # Re-arm first: the callback may cancel this interval.
        self._deadline += self._interval
        self._timer = self._loop.call_at(self._deadline, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class AsyncioScheduler:
    """Scheduler backed by the running asyncio event loop.

    Deadlines are computed from the first one, so a slow callback does not
    push every following tick later.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> _AsyncioInterval:
        if interval <= 0:
            raise ValueError("interval must be positive")
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioInterval(loop, interval, callback)


class _ManualInterval:
    def __init__(self, interval: float):
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualScheduler:
    """Virtual-clock scheduler.

    Nothing fires until :meth:`advance` moves the clock forward, which makes
    countdowns deterministic in tests and simulations.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[
            tuple[float, int, _ManualInterval, Callable[[], None]]
        ] = []
        self._sequence = itertools.count()

    def call_every(
        self, interval: float, callback: Callable[[], None]
    ) -> _ManualInterval:
        if interval <= 0:
            raise ValueError("interval must be positive")
        handle = _ManualInterval(interval)
        self._push(self.now + interval, handle, callback)
        return handle

    def _push(
        self,
        due: float,
        handle: _ManualInterval,
        callback: Callable[[], None],
    ) -> None:
        heapq.heappush(self._queue, (due, next(self._sequence), handle, callback))

    @property
    def pending(self) -> int:
        """Number of live (not cancelled) intervals."""
        return sum(1 for _, _, handle, _ in self._queue if not handle.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing everything that falls due.

        Returns the number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("cannot move the clock backwards")
        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            self._push(due + handle.interval, handle, callback)
            callback()
            fired += 1
        self.now = target
        return fired


@lru_cache(maxsize=1)
def get_scheduler() -> Scheduler:
    """Get the process-wide scheduler."""
    logger.debug("creating asyncio scheduler")
    return AsyncioScheduler()
