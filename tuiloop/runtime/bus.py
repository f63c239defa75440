"""Bounded many-producer/one-consumer message bus.

Senders never block: a message that does not fit, or arrives after the bus is
closed, is dropped and counted. The run loop is the only consumer.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable

from ..errors import MessageDeliveryFailure
from ..messages import QUIT, Message

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 100


class MessageBus:
    """Queue of pending messages with drop-on-full semantics."""

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        on_enqueue: Callable[[], None] | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("message bus capacity must be >= 1")
        self._capacity = capacity
        self._on_enqueue = on_enqueue
        self._lock = threading.Lock()
        self._pending: deque[Message] = deque()
        self._closed = False
        self._dropped = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped_count(self) -> int:
        return self._dropped

    def sender(self) -> MessageSender:
        return MessageSender(self)

    def put(self, message: Message) -> None:
        """Enqueue ``message`` or raise ``MessageDeliveryFailure``."""
        if not isinstance(message, Message):
            raise TypeError(f"expected a Message, got {type(message).__name__}")
        with self._lock:
            if self._closed:
                self._dropped += 1
                raise MessageDeliveryFailure("closed")
            if len(self._pending) >= self._capacity:
                self._dropped += 1
                raise MessageDeliveryFailure("full")
            self._pending.append(message)
        if self._on_enqueue is not None:
            self._on_enqueue()

    def try_receive(self) -> Message | None:
        """Pop the oldest pending message, if any."""
        with self._lock:
            if not self._pending:
                return None
            return self._pending.popleft()

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._pending)

    def close(self) -> int:
        """Refuse further sends and discard anything still queued.

        Returns the number of discarded messages.
        """
        with self._lock:
            self._closed = True
            discarded = len(self._pending)
            self._pending.clear()
        return discarded

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class MessageSender:
    """Cloneable send handle onto a ``MessageBus``."""

    __slots__ = ("_bus",)

    def __init__(self, bus: MessageBus) -> None:
        self._bus = bus

    def send(self, message: Message) -> bool:
        """Best-effort enqueue; returns ``False`` when the message was dropped."""
        try:
            self._bus.put(message)
        except MessageDeliveryFailure as exc:
            logger.debug("%s (%s)", exc, type(message).__name__)
            return False
        return True

    def quit(self) -> bool:
        """Ask the run loop to shut down."""
        return self.send(QUIT)

    def clone(self) -> MessageSender:
        return MessageSender(self._bus)

    __copy__ = clone

    def __eq__(self, other: object) -> bool:
        return isinstance(other, MessageSender) and other._bus is self._bus

    def __hash__(self) -> int:
        return id(self._bus)


__all__ = ["DEFAULT_CAPACITY", "MessageBus", "MessageSender"]
