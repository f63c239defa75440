"""Event source merging for the run loop.

``EventMerger`` is the single point where the run loop waits. Two producer
threads feed it: ``InputProducer`` (decoded terminal input) and
``TickGenerator`` (periodic ``Tick`` events). The message bus wakes it too, so
a posted message interrupts the wait.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Protocol

from ..errors import TerminalIoError
from ..events import TICK, Event, Tick

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.25
DEFAULT_INPUT_POLL_SECONDS = 0.1


class InputSource(Protocol):
    def read_event(self, timeout: float) -> Event | None:
        """Return the next event or ``None`` after ``timeout`` seconds."""


class EventMerger:
    """Arrival-ordered event queue holding at most one pending ``Tick``.

    A tick pushed while another is still queued is coalesced into it, so a
    slow consumer sees one tick rather than a backlog.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._events: deque[Event] = deque()
        self._tick_pending = False
        self._coalesced_ticks = 0
        self._failure: TerminalIoError | None = None
        self._closed = False

    @property
    def coalesced_ticks(self) -> int:
        return self._coalesced_ticks

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, event: Event) -> bool:
        """Queue ``event``; returns ``False`` if it was coalesced or the merger is closed."""
        with self._cond:
            if self._closed:
                return False
            if isinstance(event, Tick):
                if self._tick_pending:
                    self._coalesced_ticks += 1
                    return False
                self._tick_pending = True
            self._events.append(event)
            self._cond.notify_all()
        return True

    def push_tick(self) -> bool:
        return self.push(TICK)

    def fail(self, error: TerminalIoError) -> None:
        """Record a producer failure; the next wait raises it."""
        with self._cond:
            if self._failure is None:
                self._failure = error
            self._cond.notify_all()

    def wake(self) -> None:
        """Interrupt a waiting consumer so it re-checks its ``ready`` predicate."""
        with self._cond:
            self._cond.notify_all()

    def close(self) -> None:
        with self._cond:
            self._closed = True
            self._events.clear()
            self._tick_pending = False
            self._cond.notify_all()

    def pending(self) -> int:
        with self._cond:
            return len(self._events)

    def next_event(
        self,
        ready: Callable[[], bool] | None = None,
        timeout: float | None = None,
    ) -> Event | None:
        """Block until an event is available and return it.

        Returns ``None`` when ``ready()`` becomes true first (a message is
        waiting), on timeout, or once the merger is closed. A recorded
        producer failure is raised as ``TerminalIoError``.
        """

        def available() -> bool:
            return bool(
                self._events
                or self._failure is not None
                or self._closed
                or (ready is not None and ready())
            )

        with self._cond:
            self._cond.wait_for(available, timeout)
            if self._failure is not None:
                raise self._failure
            if ready is not None and ready():
                return None
            if not self._events:
                return None
            event = self._events.popleft()
            if isinstance(event, Tick):
                self._tick_pending = False
            return event


def next_tick_deadline(previous_deadline: float, now: float, interval: float) -> float:
    """Return the next tick deadline after ``previous_deadline``.

    Deadlines stay on the grid ``previous_deadline + k * interval``; deadlines
    already in the past are skipped instead of fired late in a burst.
    """
    deadline = previous_deadline + interval
    if deadline <= now:
        missed = int((now - deadline) // interval) + 1
        deadline += missed * interval
    return deadline


class _Producer:
    """Daemon thread with a cooperative stop flag."""

    thread_name = "tuiloop-producer"

    def __init__(self) -> None:
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"{self.thread_name} already started")
        self._thread = threading.Thread(target=self._run, name=self.thread_name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = 1.0) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        raise NotImplementedError


class TickGenerator(_Producer):
    """Push a ``Tick`` into the merger every ``interval`` seconds."""

    thread_name = "tuiloop-tick"

    def __init__(
        self,
        merger: EventMerger,
        interval: float = DEFAULT_TICK_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError("tick interval must be positive")
        super().__init__()
        self._merger = merger
        self._interval = interval
        self._clock = clock

    @property
    def interval(self) -> float:
        return self._interval

    def _run(self) -> None:
        deadline = self._clock() + self._interval
        while not self._stop.is_set():
            delay = deadline - self._clock()
            if delay > 0 and self._stop.wait(delay):
                return
            if not self._merger.push_tick():
                logger.debug("tick coalesced into pending tick")
            deadline = next_tick_deadline(deadline, self._clock(), self._interval)


class InputProducer(_Producer):
    """Move events from an input source into the merger.

    Device failures are handed to the merger as ``TerminalIoError`` and end
    the thread.
    """

    thread_name = "tuiloop-input"

    def __init__(
        self,
        source: InputSource,
        merger: EventMerger,
        poll_seconds: float = DEFAULT_INPUT_POLL_SECONDS,
    ) -> None:
        super().__init__()
        self._source = source
        self._merger = merger
        self._poll_seconds = poll_seconds

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                event = self._source.read_event(self._poll_seconds)
            except TerminalIoError as exc:
                self._report(exc)
                return
            except OSError as exc:
                self._report(TerminalIoError(f"input device failure: {exc}"))
                return
            if event is not None:
                self._merger.push(event)

    def _report(self, error: TerminalIoError) -> None:
        if self._stop.is_set():
            return
        logger.error("input producer stopped: %s", error)
        self._merger.fail(error)


__all__ = [
    "DEFAULT_INPUT_POLL_SECONDS",
    "DEFAULT_TICK_INTERVAL",
    "EventMerger",
    "InputProducer",
    "InputSource",
    "TickGenerator",
    "next_tick_deadline",
]
