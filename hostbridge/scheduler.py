from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, List, Protocol as TypingProtocol
import heapq
import itertools


class TimerHandle(TypingProtocol):
    def cancel(self) -> None: ...


class Scheduler(TypingProtocol):
    """
    "Schedule once / cancel". asyncio event loops satisfy this as-is
    (loop.call_later returns a TimerHandle with cancel()).
    """
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


@dataclass(order=True)
class ManualTimer:
    when: float
    seq: int
    callback: Callable[..., Any] = field(compare=False)
    args: tuple = field(default=(), compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Scheduler driven by simulated time. Nothing fires until advance() or
    run_pending() is called; callbacks run in deadline order, ties in
    scheduling order.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._timers: List[ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self.now + max(0.0, delay), next(self._seq), callback, args)
        heapq.heappush(self._timers, timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire everything now due. Returns the number fired."""
        deadline = self.now + max(0.0, seconds)
        fired = 0
        while self._timers and self._timers[0].when <= deadline:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self.now = max(self.now, timer.when)
            timer.callback(*timer.args)
            fired += 1
        self.now = deadline
        return fired

    def run_pending(self) -> int:
        live = [t.when for t in self._timers if not t.cancelled]
        if not live:
            return 0
        return self.advance(max(live) - self.now)
