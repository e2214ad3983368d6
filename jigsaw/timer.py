"""Elapsed-time tracking for puzzle sessions."""

import asyncio
import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ElapsedTimer:
    """Wall-clock timer running from creation until frozen.

    Once frozen the timer never resumes.
    """

    def __init__(self, clock: Clock = time.monotonic):
        """Initialize and start the timer.

        Args:
            clock: Monotonic time source in seconds.
        """
        self._clock = clock
        self._started_at = clock()
        self._frozen_at: Optional[float] = None

    @property
    def elapsed(self) -> float:
        """Seconds since the timer started, up to the moment it was frozen."""
        now = self._frozen_at if self._frozen_at is not None else self._clock()
        return max(0.0, now - self._started_at)

    @property
    def is_frozen(self) -> bool:
        return self._frozen_at is not None

    def freeze(self) -> float:
        """Stop the timer. Freezing twice keeps the first value."""
        if self._frozen_at is None:
            self._frozen_at = self._clock()
        return self.elapsed


class SessionTicker:
    """Periodically calls a tick callback on the running asyncio loop.

    The ticker stops when ``should_continue`` returns False or when it is
    cancelled.
    """

    def __init__(
        self,
        on_tick: Callable[[], object],
        should_continue: Callable[[], bool],
        interval: float = 1.0,
    ):
        """Initialize the ticker.

        Args:
            on_tick: Called once per interval.
            should_continue: Checked before every tick.
            interval: Seconds between ticks.
        """
        self.on_tick = on_tick
        self.should_continue = should_continue
        self.interval = interval
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "asyncio.Task[None]":
        """Schedule the ticker on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    def cancel(self) -> None:
        """Stop ticking. Safe to call when not running."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("Ticker cancelled")
        self._task = None

    async def _run(self) -> None:
        while self.should_continue():
            await asyncio.sleep(self.interval)
            if not self.should_continue():
                break
            try:
                self.on_tick()
            except Exception:
                logger.exception("Tick callback failed")
