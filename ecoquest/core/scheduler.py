"""Cancellable repeating timers.

A mini-game that needs a clock asks a scheduler for ``call_every`` and keeps
the returned handle. ``cancel()`` on a handle is idempotent and safe from
inside the callback itself.
"""
from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle: ...


class _ThreadTimer:
    def __init__(self, interval: float, callback: Callable[[], None], lock: threading.RLock):
        self.interval = interval
        self.callback = callback
        self.lock = lock
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, name="eco-countdown", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def _run(self) -> None:
        while not self._stop_event.wait(self.interval):
            with self.lock:
                # cancelled while waiting for the lock
                if self._stop_event.is_set():
                    break
                try:
                    self.callback()
                except Exception:
                    logger.exception("Timer callback failed")
                    self._stop_event.set()

    def cancel(self) -> None:
        self._stop_event.set()

    @property
    def active(self) -> bool:
        return not self._stop_event.is_set()


class ThreadScheduler:
    """Real-time scheduler backed by one daemon thread per timer.

    Callbacks run while holding ``lock``. Code on other threads that touches
    the same game state (the CLI command loop) must hold it too.
    """

    def __init__(self, lock: Optional[threading.RLock] = None):
        self.lock = lock or threading.RLock()

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ThreadTimer:
        timer = _ThreadTimer(interval, callback, self.lock)
        timer.start()
        return timer


@dataclass
class _ManualTimer:
    interval: float
    callback: Callable[[], None]
    next_due: float
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled


@dataclass
class ManualScheduler:
    """Deterministic scheduler: time only moves when advance() is called."""
    now: float = 0.0
    timers: List[_ManualTimer] = field(default_factory=list)

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualTimer:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        timer = _ManualTimer(interval=interval, callback=callback, next_due=self.now + interval)
        self.timers.append(timer)
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every due callback in order.

        Returns:
            Number of callbacks fired
        """
        target = self.now + seconds
        fired = 0
        while True:
            due = [t for t in self.timers if t.active and t.next_due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.next_due)
            self.now = timer.next_due
            timer.next_due += timer.interval
            timer.callback()
            fired += 1
        self.now = target
        self.timers = [t for t in self.timers if t.active]
        return fired

    def active_count(self) -> int:
        return sum(1 for t in self.timers if t.active)
