"""
Schedulers: "run now" and "run after a delay", with a substitutable clock.

All pipeline callbacks for an editing surface run through one scheduler.
ThreadingScheduler runs them one at a time on a single worker thread,
so detection and dictionary downloads never block input handling.
VirtualScheduler runs them on a manually advanced clock for tests and
for hosts that drive their own event loop.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

logger = logging.getLogger(__name__)


class ScheduledCall:
    """Handle for a scheduled callback; cancel() prevents it from running."""

    def __init__(self, on_cancel: Callable[[], Any] | None = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()


def _run_logged(callback: Callable[..., Any], args: tuple) -> None:
    try:
        callback(*args)
    except Exception:
        logger.exception("Scheduled callback %r failed", callback)


class Scheduler(ABC):
    """Runs callbacks now or later, and tells the time."""

    @abstractmethod
    def now(self) -> float:
        """Current time in seconds on this scheduler's clock."""

    @abstractmethod
    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ScheduledCall: ...

    @abstractmethod
    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> ScheduledCall: ...

    def shutdown(self) -> None:
        """Release any resources (threads) held by the scheduler."""


# =============================================================================
# THREADED
# =============================================================================


class ThreadingScheduler(Scheduler):
    """
    Runs callbacks serially on one worker thread; delays use threading.Timer.

    Example:
        >>> scheduler = ThreadingScheduler()
        >>> scheduler.call_later(0.25, print, "settled")
        >>> scheduler.shutdown()
    """

    def __init__(self, name: str = "livespell") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._closed = False

    def now(self) -> float:
        return time.monotonic()

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        if self._closed:
            return ScheduledCall()
        future: Future = self._executor.submit(_run_logged, callback, args)
        return ScheduledCall(future.cancel)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        inner: list[ScheduledCall] = []

        def fire() -> None:
            if not handle.cancelled:
                inner.append(self.call_soon(callback, *args))

        def cancel() -> None:
            timer.cancel()
            for call in inner:
                call.cancel()

        handle = ScheduledCall(cancel)
        timer = threading.Timer(delay, fire)
        timer.daemon = True
        timer.start()
        return handle

    def shutdown(self) -> None:
        self._closed = True
        self._executor.shutdown(wait=False, cancel_futures=True)


# =============================================================================
# VIRTUAL CLOCK
# =============================================================================


class VirtualScheduler(Scheduler):
    """
    Scheduler on a manually advanced clock.

    Nothing runs until advance() (or run_pending()) is called; callbacks
    then run in due-time order, ties in scheduling order. Callbacks
    scheduled while advancing run too if they fall inside the window.

    Example:
        >>> scheduler = VirtualScheduler()
        >>> scheduler.call_later(0.25, print, "settled")
        >>> scheduler.advance(0.1)
        >>> scheduler.advance(0.2)
        settled
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, ScheduledCall, Callable[..., Any], tuple]] = []
        self._sequence = itertools.count()

    def now(self) -> float:
        return self._now

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        return self.call_later(0.0, callback, *args)

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ScheduledCall:
        handle = ScheduledCall()
        entry = (self._now + delay, next(self._sequence), handle, callback, args)
        heapq.heappush(self._queue, entry)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running everything that falls due."""
        deadline = self._now + seconds
        while self._queue and self._queue[0][0] <= deadline:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            if not handle.cancelled:
                _run_logged(callback, args)
        self._now = deadline

    def run_pending(self) -> None:
        """Run everything due at the current time."""
        self.advance(0.0)
