"""
Clocks and sequencers for deferred work.

All vacancy evaluations run on a single logical sequencer: a queue of
delayed tasks executed one at a time. Delays are expressed as deferred
tasks, never as sleeps, and there is no cancellation. Callers re-validate
live state when their task fires.

Two implementations are provided:
- ManualSequencer: time only moves when advance() is called (tests, demos)
- AsyncioSequencer: tasks run on an asyncio event loop (hosts)
"""

import asyncio
import heapq
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

TaskCallback = Callable[[], None]


class Clock(ABC):
    """Monotonic time source, in seconds."""

    @abstractmethod
    def now(self) -> float:
        """Get the current monotonic time in seconds."""
        pass


class MonotonicClock(Clock):
    """Clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock(Clock):
    """Clock that only moves when told to (for testing)."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        """Jump to an absolute time. Time never moves backwards."""
        if value < self._now:
            raise ValueError(f"Clock cannot move backwards ({value} < {self._now})")
        self._now = value

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.set(self._now + seconds)


def _run_task(name: str, callback: TaskCallback) -> None:
    """Run a task, logging failures instead of propagating them."""
    try:
        callback()
    except Exception as e:
        logger.error(f"Error in scheduled task {name}: {e}", exc_info=True)


class Sequencer(ABC):
    """
    Single logical sequencer for delayed tasks.

    Tasks never run concurrently with each other, so state mutated only
    from sequencer tasks needs no locking.
    """

    @property
    @abstractmethod
    def clock(self) -> Clock:
        """The clock tasks are scheduled against."""
        pass

    @abstractmethod
    def call_later(self, delay: float, callback: TaskCallback, name: str = "task") -> None:
        """
        Schedule a callback to run after a delay.

        Args:
            delay: Seconds to wait (0 = as soon as possible)
            callback: Zero-argument callable
            name: Task name used in log messages
        """
        pass

    def now(self) -> float:
        """Current time on this sequencer's clock."""
        return self.clock.now()


@dataclass(order=True)
class ScheduledTask:
    """A single task in the manual sequencer's queue.

    Ordered by ``due`` so the heap gives us earliest-first.
    """

    due: float
    # heapq tiebreaker (insertion order)
    seq: int
    name: str = field(compare=False, default="task")
    callback: Optional[TaskCallback] = field(compare=False, default=None)


class ManualSequencer(Sequencer):
    """
    Deterministic sequencer driven by a ManualClock.

    Nothing runs until advance() or run_pending() is called. Tasks that
    schedule further tasks inside the advanced window run in the same call,
    in due-time order.
    """

    def __init__(self, clock: Optional[ManualClock] = None) -> None:
        self._clock = clock or ManualClock()
        self._queue: List[ScheduledTask] = []
        self._seq = 0
        self.tasks_run = 0

    @property
    def clock(self) -> ManualClock:
        return self._clock

    def call_later(self, delay: float, callback: TaskCallback, name: str = "task") -> None:
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        self._seq += 1
        task = ScheduledTask(
            due=self._clock.now() + delay,
            seq=self._seq,
            name=name,
            callback=callback,
        )
        heapq.heappush(self._queue, task)
        logger.debug(f"Scheduled {name} in {delay}s (due={task.due})")

    def run_pending(self) -> int:
        """Run every task that is due at the current time.

        Returns:
            Number of tasks run
        """
        count = 0
        while self._queue and self._queue[0].due <= self._clock.now():
            task = heapq.heappop(self._queue)
            assert task.callback is not None
            _run_task(task.name, task.callback)
            count += 1
        self.tasks_run += count
        return count

    def advance(self, seconds: float) -> int:
        """
        Move time forward, running tasks at their due times.

        Args:
            seconds: How far to move the clock

        Returns:
            Number of tasks run
        """
        target = self._clock.now() + seconds
        count = 0
        while self._queue and self._queue[0].due <= target:
            self._clock.set(max(self._queue[0].due, self._clock.now()))
            count += self.run_pending()
        self._clock.set(target)
        count += self.run_pending()
        return count

    def pending_count(self) -> int:
        """Number of tasks waiting to run."""
        return len(self._queue)

    def pending_names(self) -> List[str]:
        """Names of waiting tasks, earliest first."""
        return [t.name for t in sorted(self._queue)]


class _LoopClock(Clock):
    """Clock reading an asyncio loop's monotonic time."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def now(self) -> float:
        return self._loop.time()


class AsyncioSequencer(Sequencer):
    """
    Sequencer backed by an asyncio event loop.

    call_later() is safe to call from any thread: scheduling is handed to
    the loop thread, and every task runs there.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._clock = _LoopClock(loop)

    @property
    def clock(self) -> Clock:
        return self._clock

    def call_later(self, delay: float, callback: TaskCallback, name: str = "task") -> None:
        if delay < 0:
            raise ValueError(f"Delay must be >= 0, got {delay}")
        self._loop.call_soon_threadsafe(self._loop.call_later, delay, _run_task, name, callback)
        logger.debug(f"Scheduled {name} in {delay}s")
