import time
from typing import Callable, Optional

from chip8.constants import TIMER_HZ


class FrameClock:
    """
    Fixed-rate tick source for drivers.

    `advance()` reports how many whole ticks of `1 / hz` seconds elapsed
    since the previous call; leftover time carries over. After a long stall
    at most `max_catch_up` ticks are reported and the backlog is dropped.
    """

    def __init__(
        self,
        hz: int = TIMER_HZ,
        max_catch_up: int = 5,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if hz <= 0:
            raise ValueError("hz must be positive")
        self.hz: int = hz
        self.period: float = 1.0 / hz
        self.max_catch_up: int = max_catch_up
        self._clock: Callable[[], float] = clock if clock is not None else time.perf_counter
        self._last: Optional[float] = None
        self._backlog: float = 0.0
        self.ticks: int = 0

    def start(self) -> None:
        self._last = self._clock()
        self._backlog = 0.0

    def reset(self) -> None:
        self._last = None
        self._backlog = 0.0
        self.ticks = 0

    def advance(self) -> int:
        if self._last is None:
            self.start()
            return 0

        now = self._clock()
        self._backlog += max(now - self._last, 0.0)
        self._last = now

        due = int(self._backlog / self.period)
        if due > self.max_catch_up:
            due = self.max_catch_up
            self._backlog = 0.0
        else:
            self._backlog -= due * self.period

        self.ticks += due
        return due

    def time_until_next(self) -> float:
        """Seconds until the next tick is due (0 when one is already due)."""
        return max(self.period - self._backlog, 0.0)

    def __repr__(self) -> str:
        return f"FrameClock(hz={self.hz}, ticks={self.ticks}, backlog={self._backlog:.6f})"
