"""Terminal ownership for the runtime.

``TerminalController`` issues the raw-mode, alternate-screen, cursor, and mouse
escape sequences. ``TerminalGuard`` wraps one controller with a one-shot
``UNINITIALIZED -> ACTIVE -> RESTORED`` lifecycle and the exit hooks that make
restoration happen on every path out of ``ACTIVE``.
"""

from __future__ import annotations

import atexit
import contextlib
import enum
import logging
import os
import shutil
import signal
import sys
import termios
import threading
import tty
from collections.abc import Callable

from ..errors import TerminalInitError, TerminalIoError

logger = logging.getLogger(__name__)

_ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l"
_LEAVE_SCREEN = b"\x1b[?25h\x1b[?1049l"
_MOUSE_ON = b"\x1b[?1000h\x1b[?1002h\x1b[?1006h"
_MOUSE_OFF = b"\x1b[?1000l\x1b[?1002l\x1b[?1006l"

_HOOKED_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)

# Held while any guard is ACTIVE; a second guard cannot take the terminal.
_TERMINAL_IN_USE = threading.Lock()


class TerminalController:
    """Manage terminal mode transitions for one stdin/stdout pair."""

    def __init__(self, stdin_fd: int, stdout_fd: int, *, mouse_reporting: bool = True) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._wants_mouse = mouse_reporting
        self._mouse_reporting_enabled = False

    @classmethod
    def for_stdio(cls, *, mouse_reporting: bool = True) -> TerminalController:
        """Bind to the process stdin/stdout, which must both be terminals."""
        stdin_fd = sys.stdin.fileno()
        stdout_fd = sys.stdout.fileno()
        if not (os.isatty(stdin_fd) and os.isatty(stdout_fd)):
            raise TerminalInitError("stdin and stdout must be attached to a terminal")
        return cls(stdin_fd, stdout_fd, mouse_reporting=mouse_reporting)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, _ENTER_SCREEN)
        self.set_mouse_reporting(self._wants_mouse)

    def disable_tui_mode(self) -> None:
        """Restore the saved tty state, main screen, and cursor."""
        try:
            self.set_mouse_reporting(False)
            os.write(self.stdout_fd, _LEAVE_SCREEN)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def set_mouse_reporting(self, enabled: bool) -> None:
        """Toggle terminal mouse tracking without changing other TUI state."""
        desired = bool(enabled)
        if desired == self._mouse_reporting_enabled:
            return
        os.write(self.stdout_fd, _MOUSE_ON if desired else _MOUSE_OFF)
        self._mouse_reporting_enabled = desired

    def write(self, data: bytes) -> None:
        """Write ``data`` fully; ``os.write`` is unbuffered so this also flushes."""
        view = memoryview(data)
        while view:
            written = os.write(self.stdout_fd, view)
            view = view[written:]

    def size(self) -> tuple[int, int]:
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines


class TerminalState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    RESTORED = "restored"


class TerminalGuard:
    """Exclusive, one-shot ownership of the terminal mode.

    ``acquire`` enters TUI mode and registers failure hooks (``atexit`` and
    SIGTERM/SIGHUP handlers when called from the main thread). ``release`` is
    idempotent and may be reached from the normal shutdown path, a ``finally``
    block, or one of those hooks; only the first call restores the terminal.
    """

    def __init__(
        self,
        controller_factory: Callable[[], TerminalController] | None = None,
        *,
        mouse_reporting: bool = True,
        install_signal_handlers: bool = True,
    ) -> None:
        self._controller_factory = controller_factory or (
            lambda: TerminalController.for_stdio(mouse_reporting=mouse_reporting)
        )
        self._install_signal_handlers = install_signal_handlers
        self._controller: TerminalController | None = None
        self._state = TerminalState.UNINITIALIZED
        self._lock = threading.RLock()
        self._previous_handlers: dict[int, object] = {}

    @property
    def state(self) -> TerminalState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is TerminalState.ACTIVE

    @property
    def controller(self) -> TerminalController | None:
        return self._controller

    def acquire(self) -> None:
        """Take the terminal; raises ``TerminalInitError`` without side effects on failure."""
        with self._lock:
            if self._state is not TerminalState.UNINITIALIZED:
                raise TerminalInitError(f"terminal guard cannot be reacquired ({self._state.value})")
            if not _TERMINAL_IN_USE.acquire(blocking=False):
                raise TerminalInitError("terminal is already held by another guard")
            controller: TerminalController | None = None
            try:
                controller = self._controller_factory()
                controller.enable_tui_mode()
            except TerminalInitError:
                _TERMINAL_IN_USE.release()
                raise
            except (OSError, termios.error) as exc:
                if controller is not None:
                    with contextlib.suppress(OSError, termios.error):
                        controller.disable_tui_mode()
                _TERMINAL_IN_USE.release()
                raise TerminalInitError(f"cannot configure terminal: {exc}") from exc
            self._controller = controller
            self._state = TerminalState.ACTIVE
            atexit.register(self.release)
            if self._install_signal_handlers:
                self._hook_signals()
        logger.debug("terminal acquired")

    def release(self) -> None:
        """Restore the terminal; a no-op unless the guard is ``ACTIVE``."""
        with self._lock:
            if self._state is not TerminalState.ACTIVE:
                return
            self._state = TerminalState.RESTORED
            controller = self._controller
            try:
                assert controller is not None
                controller.disable_tui_mode()
            except (OSError, termios.error) as exc:
                raise TerminalIoError(f"cannot restore terminal: {exc}") from exc
            finally:
                atexit.unregister(self.release)
                self._unhook_signals()
                _TERMINAL_IN_USE.release()
        logger.debug("terminal restored")

    def write(self, data: bytes) -> None:
        """Write frame output; only the holder of an ``ACTIVE`` guard may write."""
        with self._lock:
            if self._state is not TerminalState.ACTIVE or self._controller is None:
                raise TerminalIoError("terminal is not held")
            try:
                self._controller.write(data)
            except OSError as exc:
                raise TerminalIoError(f"terminal write failed: {exc}") from exc

    def size(self) -> tuple[int, int]:
        if self._controller is None:
            return shutil.get_terminal_size((80, 24))[:2]
        return self._controller.size()

    def _hook_signals(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in _HOOKED_SIGNALS:
            self._previous_handlers[signum] = signal.signal(signum, self._on_signal)

    def _unhook_signals(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum, previous in self._previous_handlers.items():
            signal.signal(signum, previous)
        self._previous_handlers.clear()

    def _on_signal(self, signum: int, frame) -> None:
        previous = self._previous_handlers.get(signum, signal.SIG_DFL)
        logger.debug("terminal released on signal %s", signum)
        self.release()
        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_DFL:
            signal.signal(signum, signal.SIG_DFL)
            os.kill(os.getpid(), signum)

    def __enter__(self) -> TerminalGuard:
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


__all__ = [
    "TerminalController",
    "TerminalGuard",
    "TerminalState",
]
