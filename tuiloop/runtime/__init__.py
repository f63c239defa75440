"""Runtime orchestration: terminal guard, message bus, event merger, run loop.

``Application`` is the entry point; the other pieces are exported for tests
and for embedders that compose their own loop.
"""

from __future__ import annotations

from .application import Application, RunState, run_app
from .bus import DEFAULT_CAPACITY, MessageBus, MessageSender
from .config import RuntimeConfig, load_runtime_config
from .merger import (
    DEFAULT_TICK_INTERVAL,
    EventMerger,
    InputProducer,
    InputSource,
    TickGenerator,
)
from .terminal import TerminalController, TerminalGuard, TerminalState

__all__ = [
    "Application",
    "DEFAULT_CAPACITY",
    "DEFAULT_TICK_INTERVAL",
    "EventMerger",
    "InputProducer",
    "InputSource",
    "MessageBus",
    "MessageSender",
    "RunState",
    "RuntimeConfig",
    "TerminalController",
    "TerminalGuard",
    "TerminalState",
    "TickGenerator",
    "load_runtime_config",
    "run_app",
]
