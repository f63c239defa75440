"""Composite component switching between child panes.

The parent owns its children and forwards every contract call by hand: the
focused child sees events first, and only what it propagates is handled by the
tab bar.
"""

from __future__ import annotations

from ..component import Component
from ..events import Event, EventResult, Key, KeyCode, KeyModifiers
from ..messages import QUIT, Custom, Message
from ..screen import Rect, Surface
from .counter import Counter
from .text_input import InputSubmitted, TextInput

MAX_HISTORY = 5


class _AboutPane(Component):
    def render(self, surface: Surface, area: Rect) -> None:
        inner = surface.draw_box(area, "About")
        lines = ("tuiloop", "", "A minimal runtime for", "terminal user interfaces.")
        for offset, line in enumerate(lines):
            surface.put_text(inner.x, inner.y + offset, line, clip=inner)


class TabsDemo(Component):
    def __init__(self) -> None:
        self.titles = ["Counter", "Input", "About"]
        self.children: list[Component] = [Counter(), TextInput(), _AboutPane()]
        self.selected = 0
        self.history: list[str] = []

    @property
    def focused(self) -> Component:
        return self.children[self.selected]

    def set_message_sender(self, sender) -> None:
        super().set_message_sender(sender)
        for child in self.children:
            child.set_message_sender(sender.clone())

    def render(self, surface: Surface, area: Rect) -> None:
        if area.is_empty:
            return
        bar, rest = area.take_top(1)
        body, footer = rest.take_bottom(1)
        x = bar.x
        for idx, title in enumerate(self.titles):
            style = "1;33" if idx == self.selected else ""
            x += surface.put_text(x, bar.y, f" {title} ", style, clip=bar) + 1
        self.focused.render(surface, body)
        hint = "Tab/Shift-Tab to switch | Esc to quit"
        if self.history:
            hint = f"last: {self.history[-1]} | {hint}"
        surface.put_text(footer.x, footer.y, hint, "36", clip=footer)

    def handle_event(self, event: Event) -> EventResult:
        if self.focused.handle_event(event) is EventResult.CONSUMED:
            return EventResult.CONSUMED
        if not isinstance(event, Key):
            return EventResult.PROPAGATE
        if event.matches(KeyCode.TAB) or event.matches(KeyCode.RIGHT, KeyModifiers.ALT):
            self.selected = (self.selected + 1) % len(self.children)
        elif event.matches(KeyCode.TAB, KeyModifiers.SHIFT) or event.matches(KeyCode.LEFT, KeyModifiers.ALT):
            self.selected = (self.selected - 1) % len(self.children)
        elif event.matches(KeyCode.ESC):
            self.post(QUIT)
        else:
            return EventResult.PROPAGATE
        return EventResult.CONSUMED

    def update(self, message: Message) -> None:
        submitted = message.payload_as(InputSubmitted) if isinstance(message, Custom) else None
        if submitted is not None:
            self.history = (self.history + [submitted.text])[-MAX_HISTORY:]
        for child in self.children:
            child.update(message)
