"""Tick-driven progress gauge."""

from __future__ import annotations

import time
from collections.abc import Callable

from ..component import Component
from ..events import Event, EventResult, Key, Tick
from ..messages import QUIT
from ..screen import Rect, Surface

CYCLE_SECONDS = 10


class ProgressDemo(Component):
    """Progress bar that advances with wall-clock time on every tick.

    Space pauses, ``r`` resets, ``q`` quits.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self.start_time = clock()
        self.progress = 0
        self.paused = False
        self.ticks = 0

    def _update_progress(self) -> None:
        if self.paused:
            return
        elapsed = int(self._clock() - self.start_time)
        self.progress = (elapsed % CYCLE_SECONDS) * (100 // CYCLE_SECONDS)

    def render(self, surface: Surface, area: Rect) -> None:
        if area.is_empty:
            return
        title, rest = area.take_top(3)
        gauge, rest = rest.take_top(3)
        info, controls = rest.take_bottom(3)
        header = surface.draw_box(title)
        surface.put_text(header.x, header.y, "Progress Bar Demo", "36", clip=header)

        inner = surface.draw_box(gauge, "Progress")
        if not inner.is_empty:
            filled = inner.width * self.progress // 100
            surface.fill(Rect(inner.x, inner.y, filled, inner.height), "█", "32")
            label = f"{self.progress}%"
            surface.put_text(inner.x + max(0, (inner.width - len(label)) // 2), inner.y, label, clip=inner)

        body = surface.draw_box(info, "Info")
        status = "PAUSED" if self.paused else "RUNNING"
        for offset, line in enumerate((f"Status: {status}", f"Progress: {self.progress}%", f"Ticks: {self.ticks}")):
            surface.put_text(body.x, body.y + offset, line, clip=body)

        footer = surface.draw_box(controls)
        surface.put_text(footer.x, footer.y, "Space to pause/resume | r to reset | q to quit", "33", clip=footer)

    def handle_event(self, event: Event) -> EventResult:
        if isinstance(event, Tick):
            self.ticks += 1
            self._update_progress()
            return EventResult.CONSUMED
        if not isinstance(event, Key):
            return EventResult.PROPAGATE
        if event.code == " ":
            self.paused = not self.paused
        elif event.code in {"r", "R"}:
            self.start_time = self._clock()
            self.progress = 0
            self.paused = False
        elif event.code in {"q", "Q"}:
            self.post(QUIT)
        else:
            return EventResult.PROPAGATE
        return EventResult.CONSUMED
