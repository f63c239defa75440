"""Messages posted on the bus outside the event cycle."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeVar

T = TypeVar("T")


class Message:
    """Base class for bus messages."""

    __slots__ = ()


@dataclass(frozen=True)
class Quit(Message):
    """Reserved shutdown request, consumed by the run loop itself."""


@dataclass(frozen=True, eq=False)
class Custom(Message):
    """Application-defined message carrying an opaque payload.

    Receivers inspect the payload with ``payload_as`` rather than assuming its
    type, since any component may post to the same bus.
    """

    payload: Any

    def payload_as(self, kind: type[T]) -> T | None:
        """Return the payload if it is an instance of ``kind``, else ``None``."""
        if isinstance(self.payload, kind):
            return self.payload
        return None

    def holds(self, kind: type) -> bool:
        return isinstance(self.payload, kind)


QUIT = Quit()

__all__ = ["QUIT", "Custom", "Message", "Quit"]
