"""Event values delivered to the root component.

Events are frozen dataclasses so they can be handed across the producer
threads and the run loop without copying.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class KeyCode:
    """Names used for non-printable keys in ``Key.code``."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    INSERT = "insert"
    DELETE = "delete"
    ENTER = "enter"
    ESC = "esc"
    TAB = "tab"
    BACKSPACE = "backspace"
    F1 = "f1"
    F2 = "f2"
    F3 = "f3"
    F4 = "f4"


class KeyModifiers(enum.Flag):
    NONE = 0
    SHIFT = enum.auto()
    CONTROL = enum.auto()
    ALT = enum.auto()


class MouseKind(enum.Enum):
    DOWN = "down"
    UP = "up"
    DRAG = "drag"
    MOVED = "moved"
    SCROLL_UP = "scroll_up"
    SCROLL_DOWN = "scroll_down"
    SCROLL_LEFT = "scroll_left"
    SCROLL_RIGHT = "scroll_right"


class MouseButton(enum.Enum):
    NONE = "none"
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


@dataclass(frozen=True)
class Key:
    """One key press; ``code`` is a printable character or a ``KeyCode`` name."""

    code: str
    modifiers: KeyModifiers = KeyModifiers.NONE

    def matches(self, code: str, modifiers: KeyModifiers = KeyModifiers.NONE) -> bool:
        """Return whether this key is ``code`` pressed with exactly ``modifiers``."""
        return self.code == code and self.modifiers == modifiers

    @property
    def is_char(self) -> bool:
        return len(self.code) == 1


@dataclass(frozen=True)
class Mouse:
    """Mouse report with zero-based cell coordinates."""

    kind: MouseKind
    column: int
    row: int
    button: MouseButton = MouseButton.NONE
    modifiers: KeyModifiers = KeyModifiers.NONE


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    """Periodic timer event."""


TICK = Tick()

Event = Union[Key, Mouse, Resize, Tick]


class EventResult(enum.Enum):
    """Outcome of ``Component.handle_event``."""

    CONSUMED = "consumed"
    PROPAGATE = "propagate"

    @property
    def consumed(self) -> bool:
        return self is EventResult.CONSUMED


__all__ = [
    "TICK",
    "Event",
    "EventResult",
    "Key",
    "KeyCode",
    "KeyModifiers",
    "Mouse",
    "MouseButton",
    "MouseKind",
    "Resize",
    "Tick",
]
