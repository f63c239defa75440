"""Run loop that owns the terminal, the event feed, and the root component.

One ``Application`` drives ``INIT -> RUNNING -> SHUTTING_DOWN -> TERMINATED``:
render, wait for the next message or event, dispatch, render again. Every way
out of ``run`` passes through the ``finally`` block that releases the terminal.
"""

from __future__ import annotations

import enum
import logging

from ..component import Component
from ..events import Resize
from ..input import TerminalInput
from ..messages import Quit
from ..screen import ScreenWriter, Surface
from .bus import MessageBus, MessageSender
from .config import RuntimeConfig
from .merger import EventMerger, InputProducer, InputSource, TickGenerator
from .terminal import TerminalGuard

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    INIT = "init"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    TERMINATED = "terminated"


class Application:
    """Composed runtime owning the terminal guard, bus, merger, and root component.

    Construction takes the terminal (``TerminalInitError`` propagates before
    anything else is built) and hands the root its message sender. ``run``
    blocks until a ``Quit`` message arrives or the input device fails.
    """

    def __init__(
        self,
        root: Component,
        *,
        config: RuntimeConfig | None = None,
        guard: TerminalGuard | None = None,
        input_source: InputSource | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self._guard = guard or TerminalGuard(mouse_reporting=self.config.mouse_reporting)
        self._guard.acquire()
        try:
            self._root = root
            self._merger = EventMerger()
            self._bus = MessageBus(self.config.message_capacity, on_enqueue=self._merger.wake)
            self._screen = ScreenWriter(self._guard.write)
            if input_source is None:
                controller = self._guard.controller
                assert controller is not None
                input_source = TerminalInput(controller.stdin_fd, size_probe=self._guard.size)
            self._input_source = input_source
            self._state = RunState.INIT
            root.set_message_sender(self._bus.sender())
        except BaseException:
            self._guard.release()
            raise

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def root(self) -> Component:
        return self._root

    @property
    def guard(self) -> TerminalGuard:
        return self._guard

    @property
    def merger(self) -> EventMerger:
        return self._merger

    def sender(self) -> MessageSender:
        """Return a new send handle, e.g. for background work owned by the embedder."""
        return self._bus.sender()

    def run(self) -> None:
        """Run until shutdown; re-raises any error after the terminal is restored."""
        if self._state is not RunState.INIT:
            raise RuntimeError(f"Application.run() called in state {self._state.value}")
        producers: list[InputProducer | TickGenerator] = [
            InputProducer(self._input_source, self._merger, self.config.input_poll_seconds)
        ]
        if self.config.tick_interval_seconds:
            producers.append(TickGenerator(self._merger, self.config.tick_interval_seconds))
        try:
            for producer in producers:
                producer.start()
            self._render()
            self._state = RunState.RUNNING
            self._dispatch_until_quit()
        finally:
            if self._state is not RunState.SHUTTING_DOWN:
                logger.debug("run loop leaving %s abnormally", self._state.value)
                self._state = RunState.SHUTTING_DOWN
            self._shutdown(producers)

    def close(self) -> None:
        """Release the terminal without running; safe to call repeatedly."""
        if self._state is RunState.TERMINATED:
            return
        self._shutdown([])

    def _dispatch_until_quit(self) -> None:
        while True:
            message = self._bus.try_receive()
            if message is not None:
                if isinstance(message, Quit):
                    logger.debug("quit requested")
                    self._state = RunState.SHUTTING_DOWN
                    return
                self._root.update(message)
            else:
                event = self._merger.next_event(ready=self._bus.has_pending)
                if event is None:
                    continue
                if isinstance(event, Resize):
                    self._screen.invalidate()
                self._root.handle_event(event)
            self._render()

    def _render(self) -> None:
        width, height = self._guard.size()
        surface = Surface(width, height)
        self._root.render(surface, surface.area)
        self._screen.flush(surface)

    def _shutdown(self, producers: list[InputProducer | TickGenerator]) -> None:
        discarded = self._bus.close()
        if discarded:
            logger.debug("discarded %d undelivered messages", discarded)
        self._merger.close()
        try:
            for producer in producers:
                producer.stop()
        finally:
            self._guard.release()
            self._state = RunState.TERMINATED

    def __enter__(self) -> Application:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def run_app(root: Component, **kwargs) -> None:
    """Construct an ``Application`` for ``root`` and run it to completion."""
    Application(root, **kwargs).run()


__all__ = ["Application", "RunState", "run_app"]
