"""
Clock and timer abstraction for Heads Up.

Everything time-dependent in the detector goes through a Scheduler: it reads
the current time and arms single-shot, cancellable callbacks. Two
implementations are provided:

- LoopScheduler drives timers from the running asyncio event loop.
- ManualScheduler is a simulated clock that only moves when told to, so
  dwell-time behaviour can be tested deterministically.
"""

import asyncio
import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

TimerCallback = Callable[[], None]

class Timer:
    """
    Handle for a single-shot deferred callback.

    ``cancel()`` is synchronous and idempotent: cancelling a timer that
    already ran or was already cancelled does nothing.
    """

    def __init__(self, when: float, callback: TimerCallback):
        self.when = when
        self._callback = callback
        self._cancelled = False
        self._fired = False

    @property
    def cancelled(self) -> bool:
        """Whether the timer was cancelled before it ran."""
        return self._cancelled

    @property
    def fired(self) -> bool:
        """Whether the callback has run."""
        return self._fired

    @property
    def done(self) -> bool:
        return self._cancelled or self._fired

    def cancel(self) -> None:
        """Cancel the timer if it has not run yet."""
        if not self.done:
            self._cancelled = True

    def _run(self) -> None:
        if self.done:
            return
        self._fired = True
        self._callback()

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "fired" if self._fired else "pending"
        return f"<Timer when={self.when:.3f} {state}>"

class Scheduler(ABC):
    """Source of time and of cancellable deferred callbacks."""

    @abstractmethod
    def now(self) -> float:
        """
        Get the current time.

        Returns:
            Monotonic time in seconds
        """

    @abstractmethod
    def call_at(self, when: float, callback: TimerCallback) -> Timer:
        """
        Arrange for ``callback`` to run once at time ``when``.

        Args:
            when: Absolute time in seconds, on this scheduler's clock
            callback: Zero-argument callable

        Returns:
            A Timer that can cancel the call
        """

    def call_later(self, delay: float, callback: TimerCallback) -> Timer:
        """Arrange for ``callback`` to run once after ``delay`` seconds."""
        return self.call_at(self.now() + delay, callback)

class _LoopTimer(Timer):
    """Timer backed by an asyncio.TimerHandle."""

    def __init__(self, when: float, callback: TimerCallback):
        super().__init__(when, callback)
        self.handle: Optional[asyncio.TimerHandle] = None

    def cancel(self) -> None:
        super().cancel()
        if self.handle is not None:
            self.handle.cancel()

class LoopScheduler(Scheduler):
    """
    Scheduler driven by an asyncio event loop.

    If no loop is given, the loop running at call time is used, so the
    scheduler can be created outside of a coroutine.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def now(self) -> float:
        return self.loop.time()

    def call_at(self, when: float, callback: TimerCallback) -> Timer:
        timer = _LoopTimer(when, callback)
        timer.handle = self.loop.call_at(when, timer._run)
        return timer

class ManualScheduler(Scheduler):
    """
    Simulated clock for deterministic tests.

    Time starts at ``start`` and only moves through ``advance()`` or
    ``advance_to()``. Due timers run in deadline order, ties in the order
    they were scheduled; a timer scheduled in the past runs on the next
    advance.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[Tuple[float, int, Timer]] = []
        self._counter = itertools.count()
        self.logger = logging.getLogger(__name__)

    def now(self) -> float:
        return self._now

    def call_at(self, when: float, callback: TimerCallback) -> Timer:
        timer = Timer(when, callback)
        heapq.heappush(self._queue, (when, next(self._counter), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and run every timer that becomes due.

        Args:
            seconds: Non-negative amount of time to move forward

        Returns:
            Number of timers that ran
        """
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        return self.advance_to(self._now + seconds)

    def advance_to(self, when: float) -> int:
        """
        Move the clock to ``when`` and run every timer due by then.

        Timers armed by a callback also run if they fall due before ``when``.

        Returns:
            Number of timers that ran
        """
        if when < self._now:
            raise ValueError(f"Cannot move clock back from {self._now} to {when}")

        ran = 0
        while self._queue and self._queue[0][0] <= when:
            deadline, _, timer = heapq.heappop(self._queue)
            if timer.done:
                continue
            self._now = max(self._now, deadline)
            timer._run()
            ran += 1

        self._now = when
        if ran:
            self.logger.debug(f"Ran {ran} timer(s), clock now {self._now:.3f}")
        return ran

    @property
    def pending(self) -> int:
        """Number of timers still waiting to run."""
        return sum(1 for _, _, timer in self._queue if not timer.done)
