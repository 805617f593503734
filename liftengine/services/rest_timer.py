"""Countdown between sets.

The timer decrements once per tick while running and fires its completion
callback exactly once, either when the countdown reaches zero or when the
user skips the rest. The background ticker is an asyncio task that is
cancelled whenever the timer leaves the running state.
"""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Callable

from liftengine.core.logging import get_logger


logger = get_logger(__name__)


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"


class RestTimer:
    """Rest countdown with manual adjustment and a single completion signal.

    Args:
        on_complete: Called once per countdown when it expires or is skipped.
        tick_seconds: Interval of the background ticker. ``None`` disables
            the ticker; the owner then drives :meth:`tick` itself.
    """

    def __init__(
        self,
        on_complete: Callable[[], None] | None = None,
        tick_seconds: float | None = 1.0,
    ):
        self._on_complete = on_complete
        self._tick_seconds = tick_seconds
        self._status = TimerStatus.IDLE
        self._baseline = 0
        self._remaining = 0
        self._task: asyncio.Task | None = None

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def baseline(self) -> int:
        return self._baseline

    @property
    def is_running(self) -> bool:
        return self._status is TimerStatus.RUNNING

    @property
    def is_ticking(self) -> bool:
        """Whether a background tick task is still alive."""
        return self._task is not None and not self._task.done()

    def start(self, baseline: int) -> None:
        if baseline < 0:
            raise ValueError(f"baseline must be >= 0, got {baseline}")

        self._cancel_ticker()
        self._baseline = baseline
        self._remaining = baseline
        self._status = TimerStatus.RUNNING
        logger.debug("rest_timer_started", baseline=baseline)

        if baseline == 0:
            self._expire()
            return
        self._schedule()

    def tick(self) -> None:
        if self._status is not TimerStatus.RUNNING:
            return
        self._remaining = max(0, self._remaining - 1)
        if self._remaining == 0:
            self._expire()

    def adjust(self, delta: int) -> None:
        """Shift both baseline and remaining by ``delta`` seconds, floored at 0."""
        self._baseline = max(0, self._baseline + delta)
        self._remaining = max(0, self._remaining + delta)
        logger.debug(
            "rest_timer_adjusted",
            delta=delta,
            baseline=self._baseline,
            remaining=self._remaining,
        )
        if self._status is TimerStatus.RUNNING and self._remaining == 0:
            self._expire()

    def pause(self) -> None:
        if self._status is not TimerStatus.RUNNING:
            return
        self._cancel_ticker()
        self._status = TimerStatus.PAUSED

    def resume(self) -> None:
        if self._status is not TimerStatus.PAUSED:
            return
        self._status = TimerStatus.RUNNING
        if self._remaining == 0:
            self._expire()
            return
        self._schedule()

    def reset(self, running: bool = False) -> None:
        """Restore remaining to baseline and enter RUNNING or IDLE."""
        self._cancel_ticker()
        self._remaining = self._baseline
        if running and self._baseline > 0:
            self._status = TimerStatus.RUNNING
            self._schedule()
        else:
            self._status = TimerStatus.IDLE

    def skip(self) -> bool:
        """Expire now. Returns False when there was no countdown to skip."""
        if self._status not in (TimerStatus.RUNNING, TimerStatus.PAUSED):
            return False
        self._expire()
        return True

    def stop(self) -> None:
        """Stop counting without firing the completion signal."""
        self._cancel_ticker()
        if self._status in (TimerStatus.RUNNING, TimerStatus.PAUSED):
            self._status = TimerStatus.IDLE

    def close(self) -> None:
        self.stop()
        self._on_complete = None

    async def aclose(self) -> None:
        """Close and wait for the ticker task to finish unwinding."""
        task = self._task
        self.close()
        if task is not None and task is not asyncio.current_task():
            try:
                await task
            except asyncio.CancelledError:
                pass

    def _expire(self) -> None:
        self._cancel_ticker()
        self._remaining = 0
        self._status = TimerStatus.EXPIRED
        logger.debug("rest_timer_expired", baseline=self._baseline)
        if self._on_complete is not None:
            self._on_complete()

    def _schedule(self) -> None:
        if self._tick_seconds is None:
            return
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        me = asyncio.current_task()
        while self._task is me and self._status is TimerStatus.RUNNING:
            await asyncio.sleep(self._tick_seconds)
            try:
                self.tick()
            except Exception:
                # Nothing awaits this task, so the failure would otherwise vanish.
                logger.exception("rest_timer_completion_failed")
                self._status = TimerStatus.EXPIRED
                return

    def _cancel_ticker(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None
        if task is not current:
            task.cancel()
