"""Tests for the rest countdown between sets."""
import asyncio

import pytest

from liftengine.services.rest_timer import RestTimer, TimerStatus


class Completions:
    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


@pytest.fixture
def fired():
    return Completions()


@pytest.fixture
def timer(fired):
    """Timer driven manually through tick()."""
    return RestTimer(on_complete=fired, tick_seconds=None)


class TestCountdown:
    """Start, tick and expiry."""

    def test_start_sets_remaining_to_baseline(self, timer):
        timer.start(90)

        assert timer.status is TimerStatus.RUNNING
        assert timer.remaining == 90
        assert timer.baseline == 90

    def test_tick_decrements_once(self, timer):
        timer.start(3)
        timer.tick()

        assert timer.remaining == 2

    def test_expiry_fires_exactly_once(self, timer, fired):
        timer.start(2)
        for _ in range(5):
            timer.tick()

        assert timer.status is TimerStatus.EXPIRED
        assert timer.remaining == 0
        assert fired.count == 1

    def test_zero_baseline_expires_immediately(self, timer, fired):
        timer.start(0)

        assert timer.status is TimerStatus.EXPIRED
        assert fired.count == 1

    def test_negative_baseline_rejected(self, timer):
        with pytest.raises(ValueError):
            timer.start(-1)


class TestAdjust:
    """Manual +/- adjustments clamp at zero."""

    def test_adjust_below_zero_clamps_to_zero(self, timer, fired):
        timer.start(60)
        for _ in range(50):
            timer.tick()
        assert timer.remaining == 10

        timer.adjust(-30)

        assert timer.remaining == 0
        assert timer.baseline == 30
        assert timer.status is TimerStatus.EXPIRED
        assert fired.count == 1

    def test_adjust_up_while_running(self, timer):
        timer.start(60)
        timer.tick()
        timer.adjust(30)

        assert timer.remaining == 89
        assert timer.baseline == 90
        assert timer.is_running

    def test_adjust_while_paused_does_not_fire(self, timer, fired):
        timer.start(10)
        timer.pause()
        timer.adjust(-30)

        assert timer.remaining == 0
        assert timer.status is TimerStatus.PAUSED
        assert fired.count == 0

        timer.resume()
        assert fired.count == 1


class TestControls:
    """Pause, resume, reset, skip and stop."""

    def test_paused_timer_ignores_ticks(self, timer):
        timer.start(10)
        timer.pause()
        timer.tick()

        assert timer.remaining == 10

        timer.resume()
        timer.tick()
        assert timer.remaining == 9

    def test_reset_restores_baseline(self, timer):
        timer.start(10)
        timer.tick()
        timer.tick()

        timer.reset(running=True)
        assert timer.remaining == 10
        assert timer.is_running

        timer.reset()
        assert timer.status is TimerStatus.IDLE

    def test_skip_fires_early(self, timer, fired):
        timer.start(90)

        assert timer.skip() is True
        assert timer.status is TimerStatus.EXPIRED
        assert fired.count == 1

    def test_skip_without_countdown_returns_false(self, timer, fired):
        assert timer.skip() is False

        timer.start(1)
        timer.tick()
        assert timer.skip() is False
        assert fired.count == 1

    def test_stop_does_not_fire(self, timer, fired):
        timer.start(30)
        timer.stop()

        assert timer.status is TimerStatus.IDLE
        assert fired.count == 0


class TestBackgroundTicker:
    """The asyncio ticker task."""

    @pytest.mark.asyncio
    async def test_ticker_counts_down_and_fires(self):
        done = asyncio.Event()
        timer = RestTimer(on_complete=done.set, tick_seconds=0.01)

        timer.start(3)
        await asyncio.wait_for(done.wait(), timeout=1)

        assert timer.status is TimerStatus.EXPIRED
        await asyncio.sleep(0.02)
        assert not timer.is_ticking

    @pytest.mark.asyncio
    async def test_close_releases_ticker(self, fired):
        timer = RestTimer(on_complete=fired, tick_seconds=0.01)
        timer.start(100)
        assert timer.is_ticking

        await timer.aclose()

        assert not timer.is_ticking
        await asyncio.sleep(0.05)
        assert timer.remaining > 90
        assert fired.count == 0

    @pytest.mark.asyncio
    async def test_pause_cancels_ticker(self, fired):
        timer = RestTimer(on_complete=fired, tick_seconds=0.01)
        timer.start(100)
        timer.pause()
        await asyncio.sleep(0)

        assert not timer.is_ticking
        remaining = timer.remaining
        await asyncio.sleep(0.05)
        assert timer.remaining == remaining

        timer.close()

    @pytest.mark.asyncio
    async def test_failing_callback_is_contained(self):
        def explode():
            raise RuntimeError("boom")

        timer = RestTimer(on_complete=explode, tick_seconds=0.01)
        timer.start(1)
        await asyncio.sleep(0.05)

        assert timer.status is TimerStatus.EXPIRED
        assert not timer.is_ticking
