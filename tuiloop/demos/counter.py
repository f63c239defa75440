"""Counter driven by arrow keys."""

from __future__ import annotations

from ..component import Component
from ..events import Event, EventResult, Key, KeyCode, KeyModifiers
from ..messages import QUIT
from ..screen import Rect, Surface


class Counter(Component):
    def __init__(self) -> None:
        self.count = 0

    def render(self, surface: Surface, area: Rect) -> None:
        if area.is_empty:
            return
        text = f"Count: {self.count} (Press ↑/↓, q to quit)"
        x = area.x + max(0, (area.width - len(text)) // 2)
        surface.put_text(x, area.y + area.height // 2, text, clip=area)

    def handle_event(self, event: Event) -> EventResult:
        if not isinstance(event, Key):
            return EventResult.PROPAGATE
        if KeyModifiers.CONTROL in event.modifiers:
            return EventResult.PROPAGATE
        if event.code == KeyCode.UP:
            self.count += 1
        elif event.code == KeyCode.DOWN:
            self.count -= 1
        elif event.code in {"q", "Q"}:
            self.post(QUIT)
        else:
            return EventResult.PROPAGATE
        return EventResult.CONSUMED
