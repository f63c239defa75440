"""Single-line text input that posts what was typed."""

from __future__ import annotations

from dataclasses import dataclass

from ..component import Component
from ..events import Event, EventResult, Key, KeyCode, KeyModifiers
from ..messages import Custom
from ..screen import Rect, Surface


@dataclass(frozen=True)
class InputSubmitted:
    text: str


class TextInput(Component):
    """Editable line; Enter posts ``Custom(InputSubmitted(text))`` and clears.

    Printable keys are consumed, everything else propagates so a parent can
    use it (for example Tab or Esc).
    """

    def __init__(self, prompt: str = "Type something: ") -> None:
        self.prompt = prompt
        self.value = ""

    def render(self, surface: Surface, area: Rect) -> None:
        inner = surface.draw_box(area, "Text Input", "32")
        surface.put_text(inner.x, inner.y, f"{self.prompt}{self.value}_", "1", clip=inner)
        surface.put_text(inner.x, inner.y + 2, "Backspace to delete, Enter to submit", clip=inner)

    def handle_event(self, event: Event) -> EventResult:
        if not isinstance(event, Key):
            return EventResult.PROPAGATE
        if event.code == KeyCode.ENTER:
            if self.value:
                self.post(Custom(InputSubmitted(self.value)))
            self.value = ""
            return EventResult.CONSUMED
        if event.code == KeyCode.BACKSPACE:
            self.value = self.value[:-1]
            return EventResult.CONSUMED
        if event.is_char and event.modifiers in {KeyModifiers.NONE, KeyModifiers.SHIFT}:
            self.value += event.code
            return EventResult.CONSUMED
        return EventResult.PROPAGATE
