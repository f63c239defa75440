"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into ``Key``/``Mouse``/``Resize``
events. Handles ESC-sequence timing, modifier parameters, UTF-8 text, and SGR
mouse reports.
"""

from __future__ import annotations

import os
import select
import shutil
from collections.abc import Callable

from .errors import TerminalIoError
from .events import Event, Key, KeyCode, KeyModifiers, Mouse, MouseButton, MouseKind, Resize

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_KEYS: dict[bytes, Key] = {
    b"\r": Key(KeyCode.ENTER),
    b"\n": Key(KeyCode.ENTER),
    b"\t": Key(KeyCode.TAB),
    b"\x7f": Key(KeyCode.BACKSPACE),
    b"\x08": Key(KeyCode.BACKSPACE),
    b"\x00": Key(" ", KeyModifiers.CONTROL),
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": KeyCode.UP,
    b"B": KeyCode.DOWN,
    b"C": KeyCode.RIGHT,
    b"D": KeyCode.LEFT,
    b"H": KeyCode.HOME,
    b"F": KeyCode.END,
    b"P": KeyCode.F1,
    b"Q": KeyCode.F2,
    b"R": KeyCode.F3,
    b"S": KeyCode.F4,
}

_TILDE_KEYS: dict[int, str] = {
    1: KeyCode.HOME,
    2: KeyCode.INSERT,
    3: KeyCode.DELETE,
    4: KeyCode.END,
    5: KeyCode.PAGE_UP,
    6: KeyCode.PAGE_DOWN,
    7: KeyCode.HOME,
    8: KeyCode.END,
}

_MOUSE_BUTTONS = (MouseButton.LEFT, MouseButton.MIDDLE, MouseButton.RIGHT, MouseButton.NONE)
_WHEEL_KINDS = (MouseKind.SCROLL_UP, MouseKind.SCROLL_DOWN, MouseKind.SCROLL_LEFT, MouseKind.SCROLL_RIGHT)


def _modifiers_from_param(value: int) -> KeyModifiers:
    """Decode an xterm modifier parameter (``1 + bitmask``)."""
    bits = max(0, value - 1)
    modifiers = KeyModifiers.NONE
    if bits & 1:
        modifiers |= KeyModifiers.SHIFT
    if bits & 2 or bits & 8:
        modifiers |= KeyModifiers.ALT
    if bits & 4:
        modifiers |= KeyModifiers.CONTROL
    return modifiers


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def decode_sgr_mouse(payload: bytes, final: bytes) -> Mouse | None:
    """Decode the body of ``ESC [ < btn ; col ; row (M|m)``."""
    try:
        btn_s, col_s, row_s = payload.decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return None
    modifiers = KeyModifiers.NONE
    if btn & 4:
        modifiers |= KeyModifiers.SHIFT
    if btn & 8:
        modifiers |= KeyModifiers.ALT
    if btn & 16:
        modifiers |= KeyModifiers.CONTROL
    button_bits = btn & 0b11
    column = max(0, col - 1)
    row_idx = max(0, row - 1)
    if btn & 64:
        return Mouse(_WHEEL_KINDS[button_bits], column, row_idx, MouseButton.NONE, modifiers)
    button = _MOUSE_BUTTONS[button_bits]
    if btn & 32:
        kind = MouseKind.MOVED if button is MouseButton.NONE else MouseKind.DRAG
    else:
        kind = MouseKind.DOWN if final == b"M" else MouseKind.UP
    return Mouse(kind, column, row_idx, button, modifiers)


class KeyReader:
    """Stateful decoder over a raw input file descriptor.

    Bytes read ahead while disambiguating a lone ESC are kept and replayed on
    the next call.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def read(self, timeout_ms: int | None = None) -> Event | None:
        """Return the next decoded event, or ``None`` if nothing arrived in time.

        Raises ``TerminalIoError`` when the input stream reaches end of file.
        """
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return None
            ch = os.read(self.fd, 1)
            if not ch:
                raise TerminalIoError("terminal input closed")

        if ch in _CONTROL_KEYS:
            return _CONTROL_KEYS[ch]
        code = ch[0]
        if 0x01 <= code <= 0x1A:
            return Key(chr(0x60 + code), KeyModifiers.CONTROL)
        if 0x1C <= code <= 0x1F:
            return Key(chr(0x40 + code), KeyModifiers.CONTROL)
        if ch != b"\x1b":
            return Key(self._read_utf8(ch))
        return self._read_escape()

    def _read_utf8(self, lead: bytes) -> str:
        raw = lead
        for _ in range(_utf8_length(lead[0]) - 1):
            part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if part is None:
                break
            raw += part
        return raw.decode("utf-8", errors="replace")[:1]

    def _read_escape(self) -> Event:
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return Key(KeyCode.ESC)
        if seq == b"[":
            return self._read_csi()
        if seq == b"O":
            final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is not None and final in _CSI_FINAL_KEYS:
                return Key(_CSI_FINAL_KEYS[final])
            if final is not None:
                self._pending.append(final)
            return Key("O", KeyModifiers.ALT)
        if seq == b"\x1b":
            self._pending.append(seq)
            return Key(KeyCode.ESC)
        if seq in _CONTROL_KEYS:
            key = _CONTROL_KEYS[seq]
            return Key(key.code, key.modifiers | KeyModifiers.ALT)
        if seq[0] < 0x20:
            self._pending.append(seq)
            return Key(KeyCode.ESC)
        return Key(self._read_utf8(seq), KeyModifiers.ALT)

    def _read_csi(self) -> Event:
        first = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if first is None:
            return Key("[", KeyModifiers.ALT)
        if first == b"<":
            payload: list[bytes] = []
            while True:
                part = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
                if part is None:
                    return Key(KeyCode.ESC)
                if part in {b"M", b"m"}:
                    break
                payload.append(part)
                if len(payload) > 64:
                    return Key(KeyCode.ESC)
            mouse = decode_sgr_mouse(b"".join(payload), part)
            return mouse if mouse is not None else Key(KeyCode.ESC)
        if first == b"Z":
            return Key(KeyCode.TAB, KeyModifiers.SHIFT)

        params = b""
        final = first
        while final.isdigit() or final == b";":
            params += final
            final = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if final is None or len(params) > 16:
                return Key(KeyCode.ESC)

        fields = [int(part) if part else 1 for part in params.decode("ascii").split(";")] if params else []
        modifiers = _modifiers_from_param(fields[1]) if len(fields) > 1 else KeyModifiers.NONE
        if final == b"~" and fields:
            name = _TILDE_KEYS.get(fields[0])
            if name is None:
                return Key(KeyCode.ESC)
            return Key(name, modifiers)
        name = _CSI_FINAL_KEYS.get(final)
        if name is None:
            return Key(KeyCode.ESC)
        return Key(name, modifiers)


class TerminalInput:
    """Input source for the runtime: key/mouse decoding plus size polling.

    Size changes are detected each time ``read_event`` is called, so a resize
    is reported within one poll interval.
    """

    def __init__(
        self,
        stdin_fd: int,
        size_probe: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        self._reader = KeyReader(stdin_fd)
        self._size_probe = size_probe or _terminal_size
        self._last_size = self._size_probe()

    def _resize_event(self) -> Resize | None:
        size = self._size_probe()
        if size == self._last_size:
            return None
        self._last_size = size
        return Resize(size[0], size[1])

    def read_event(self, timeout: float) -> Event | None:
        """Wait up to ``timeout`` seconds for the next event."""
        resized = self._resize_event()
        if resized is not None:
            return resized
        event = self._reader.read(timeout_ms=int(timeout * 1000))
        if event is None:
            return self._resize_event()
        return event


def _terminal_size() -> tuple[int, int]:
    term = shutil.get_terminal_size((80, 24))
    return term.columns, term.lines


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyReader",
    "TerminalInput",
    "decode_sgr_mouse",
]
