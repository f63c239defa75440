"""Error taxonomy for the terminal runtime.

Only ``TerminalInitError`` and ``TerminalIoError`` ever reach embedding code.
``MessageDeliveryFailure`` stays inside the message bus.
"""

from __future__ import annotations


class TuiloopError(Exception):
    """Base class for runtime errors."""


class TerminalInitError(TuiloopError):
    """The terminal could not be placed under exclusive control."""


class TerminalIoError(TuiloopError):
    """The terminal device failed while the runtime was active."""


class MessageDeliveryFailure(TuiloopError):
    """A message could not be enqueued because the bus is full or closed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"message dropped: bus {reason}")
        self.reason = reason


__all__ = [
    "MessageDeliveryFailure",
    "TerminalInitError",
    "TerminalIoError",
    "TuiloopError",
]
