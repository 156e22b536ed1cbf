"""Unit tests for interval schedulers."""

import asyncio
from unittest.mock import MagicMock

import pytest

from tasktimer_cli.core.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    get_scheduler,
)

# ---------------------------------------------------------------------------
# ManualScheduler
# ---------------------------------------------------------------------------


class TestManualScheduler:
    def test_nothing_fires_before_advance(self, scheduler):
        callback = MagicMock()
        scheduler.call_every(1.0, callback)
        callback.assert_not_called()
        assert scheduler.pending == 1

    def test_fires_once_per_interval(self, scheduler):
        callback = MagicMock()
        scheduler.call_every(1.0, callback)

        fired = scheduler.advance(3)

        assert fired == 3
        assert callback.call_count == 3
        assert scheduler.now == 3

    def test_partial_interval_does_not_fire(self, scheduler):
        callback = MagicMock()
        scheduler.call_every(1.0, callback)

        scheduler.advance(0.5)
        callback.assert_not_called()
        scheduler.advance(0.5)
        callback.assert_called_once()

    def test_cancel_stops_firing(self, scheduler):
        callback = MagicMock()
        handle = scheduler.call_every(1.0, callback)
        scheduler.advance(1)

        handle.cancel()
        scheduler.advance(5)

        assert callback.call_count == 1
        assert handle.cancelled is True
        assert scheduler.pending == 0

    def test_callback_can_cancel_its_own_interval(self, scheduler):
        handles = []

        def once():
            handles[0].cancel()

        handles.append(scheduler.call_every(1.0, once))
        assert scheduler.advance(10) == 1

    def test_intervals_interleave_by_due_time(self, scheduler):
        order = []
        scheduler.call_every(2.0, lambda: order.append("slow"))
        scheduler.call_every(1.0, lambda: order.append("fast"))

        scheduler.advance(2)

        assert order == ["fast", "slow", "fast"]

    def test_negative_advance_rejected(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.advance(-1)

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            ManualScheduler().call_every(0, lambda: None)


# ---------------------------------------------------------------------------
# AsyncioScheduler
# ---------------------------------------------------------------------------


class TestAsyncioScheduler:
    @pytest.mark.asyncio
    async def test_fires_on_running_loop(self):
        ticks = []
        handle = AsyncioScheduler().call_every(0.01, lambda: ticks.append(1))

        await asyncio.sleep(0.055)
        handle.cancel()

        assert len(ticks) >= 2

    @pytest.mark.asyncio
    async def test_cancel_stops_ticks(self):
        ticks = []
        handle = AsyncioScheduler().call_every(0.01, lambda: ticks.append(1))
        await asyncio.sleep(0.025)
        handle.cancel()
        seen = len(ticks)

        await asyncio.sleep(0.03)

        assert len(ticks) == seen
        assert handle.cancelled is True

    @pytest.mark.asyncio
    async def test_callback_may_cancel_itself(self):
        ticks = []
        holder = {}

        def tick():
            ticks.append(1)
            holder["handle"].cancel()

        holder["handle"] = AsyncioScheduler().call_every(0.01, tick)
        await asyncio.sleep(0.05)

        assert ticks == [1]

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            AsyncioScheduler().call_every(1.0, lambda: None)

    def test_non_positive_interval_rejected(self):
        with pytest.raises(ValueError):
            AsyncioScheduler().call_every(-1, lambda: None)


def test_get_scheduler_is_cached():
    assert get_scheduler() is get_scheduler()
    assert isinstance(get_scheduler(), AsyncioScheduler)
