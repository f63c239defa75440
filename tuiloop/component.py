"""Component contract implemented by every UI object.

The runtime talks to exactly one root component. Components that own children
forward calls to them by hand; ``route_event`` covers the common
"first child that consumes wins" case.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .events import Event, EventResult
from .messages import Message

if TYPE_CHECKING:
    from .runtime.bus import MessageSender
    from .screen import Rect, Surface


class Component:
    """Base class supplying the optional parts of the contract.

    Subclasses must implement ``render``. ``handle_event`` defaults to
    propagating, ``update`` ignores messages, and ``set_message_sender`` keeps
    the injected handle for ``post``.

    ``render`` must not mutate component state and must tolerate an empty
    ``area``. All four methods are called from the run loop thread only.
    """

    _message_sender: MessageSender | None = None

    def render(self, surface: Surface, area: Rect) -> None:
        raise NotImplementedError

    def handle_event(self, event: Event) -> EventResult:
        return EventResult.PROPAGATE

    def update(self, message: Message) -> None:
        return None

    def set_message_sender(self, sender: MessageSender) -> None:
        self._message_sender = sender

    @property
    def message_sender(self) -> MessageSender | None:
        return self._message_sender

    def post(self, message: Message) -> bool:
        """Best-effort send on the bus; ``False`` if dropped or not yet wired."""
        if self._message_sender is None:
            return False
        return self._message_sender.send(message)


def route_event(event: Event, children: Iterable[Component]) -> EventResult:
    """Offer ``event`` to ``children`` in order until one consumes it."""
    for child in children:
        if child.handle_event(event) is EventResult.CONSUMED:
            return EventResult.CONSUMED
    return EventResult.PROPAGATE


__all__ = ["Component", "route_event"]
