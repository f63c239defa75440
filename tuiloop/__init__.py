"""Public package surface for tuiloop.

A minimal runtime for terminal UIs: implement ``Component``, wrap it in an
``Application``, and call ``run()``.
"""

from __future__ import annotations

import logging

from .component import Component, route_event
from .errors import MessageDeliveryFailure, TerminalInitError, TerminalIoError, TuiloopError
from .events import (
    TICK,
    Event,
    EventResult,
    Key,
    KeyCode,
    KeyModifiers,
    Mouse,
    MouseButton,
    MouseKind,
    Resize,
    Tick,
)
from .messages import QUIT, Custom, Message, Quit
from .runtime import Application, MessageSender, RunState, RuntimeConfig, run_app
from .screen import Rect, Surface

logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "QUIT",
    "TICK",
    "Application",
    "Component",
    "Custom",
    "Event",
    "EventResult",
    "Key",
    "KeyCode",
    "KeyModifiers",
    "Message",
    "MessageDeliveryFailure",
    "MessageSender",
    "Mouse",
    "MouseButton",
    "MouseKind",
    "Quit",
    "Rect",
    "Resize",
    "RunState",
    "RuntimeConfig",
    "Surface",
    "TerminalInitError",
    "TerminalIoError",
    "Tick",
    "TuiloopError",
    "main",
    "route_event",
    "run_app",
]
