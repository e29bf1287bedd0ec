"""Cooperative countdown for timed mock exams."""
import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Countdown:
    """
    One-second ticks towards zero.

    Nothing runs in the background: callers either call ``tick()`` once per
    second or call ``sync()`` to apply the ticks owed since the last one.
    Reaching zero while armed calls ``on_expired`` once and disarms.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self.remaining = 0
        self.armed = False
        self._on_expired: Callable[[], None] | None = None
        self._last_tick = 0.0

    def start(self, seconds: int, on_expired: Callable[[], None]) -> None:
        if self.armed:
            self.cancel()
        self.remaining = max(0, int(seconds))
        self._on_expired = on_expired
        self._last_tick = self.clock()
        self.armed = True
        logger.debug("Countdown armed for %d seconds", self.remaining)
        if self.remaining == 0:
            self._expire()

    def cancel(self) -> None:
        self.armed = False
        self._on_expired = None

    def tick(self) -> None:
        if not self.armed:
            return
        self.remaining = max(0, self.remaining - 1)
        self._last_tick += 1
        if self.remaining == 0:
            self._expire()

    def sync(self, now: float | None = None) -> None:
        """Apply one tick per whole second elapsed since the last tick."""
        if not self.armed:
            return
        now = self.clock() if now is None else now
        owed = int(now - self._last_tick)
        for _ in range(min(owed, self.remaining)):
            self.tick()

    def _expire(self) -> None:
        callback = self._on_expired
        self.armed = False
        self._on_expired = None
        logger.info("Countdown expired")
        if callback is not None:
            callback()
