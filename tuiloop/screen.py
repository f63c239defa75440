"""Minimal frame buffer and flush logic.

Components draw into a ``Surface`` (a grid of styled cells). ``ScreenWriter``
turns each finished surface into ANSI output, rewriting only rows that changed
since the previous frame.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .ansi import RESET, char_display_width, sgr

# Placeholder stored in the cell to the right of a wide character.
_WIDE_CONTINUATION = ""


@dataclass(frozen=True)
class Rect:
    """Rectangular region in zero-based cell coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def right(self) -> int:
        return self.x + max(0, self.width)

    @property
    def bottom(self) -> int:
        return self.y + max(0, self.height)

    def inner(self, margin: int = 1) -> Rect:
        """Shrink by ``margin`` cells on every side, never below zero size."""
        return Rect(
            self.x + margin,
            self.y + margin,
            max(0, self.width - 2 * margin),
            max(0, self.height - 2 * margin),
        )

    def take_top(self, rows: int) -> tuple[Rect, Rect]:
        """Split into the first ``rows`` rows and the remainder."""
        rows = max(0, min(rows, self.height))
        top = Rect(self.x, self.y, self.width, rows)
        rest = Rect(self.x, self.y + rows, self.width, max(0, self.height - rows))
        return top, rest

    def take_bottom(self, rows: int) -> tuple[Rect, Rect]:
        """Split into the remainder and the last ``rows`` rows."""
        rows = max(0, min(rows, self.height))
        rest = Rect(self.x, self.y, self.width, max(0, self.height - rows))
        bottom = Rect(self.x, self.y + self.height - rows, self.width, rows)
        return rest, bottom

    def intersect(self, other: Rect) -> Rect:
        x = max(self.x, other.x)
        y = max(self.y, other.y)
        return Rect(x, y, max(0, min(self.right, other.right) - x), max(0, min(self.bottom, other.bottom) - y))


class Surface:
    """Drawing surface for one frame.

    All drawing calls clip to the surface, so components can pass degenerate
    areas without checking them first.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._cells: list[list[tuple[str, str]]] = [
            [(" ", "")] * self.width for _ in range(self.height)
        ]

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def put_text(self, x: int, y: int, text: str, style: str = "", clip: Rect | None = None) -> int:
        """Write ``text`` starting at cell ``(x, y)`` and return columns written.

        Text stops at the right edge of ``clip`` (or of the surface). Wide
        characters that would straddle the edge are dropped.
        """
        bounds = self.area if clip is None else clip.intersect(self.area)
        if bounds.is_empty or not (bounds.y <= y < bounds.bottom):
            return 0
        row = self._cells[y]
        col = x
        for ch in text:
            if ch == "\n":
                break
            width = char_display_width(ch, col - x)
            if width == 0:
                continue
            if col + width > bounds.right:
                break
            glyph = " " if ch == "\t" else ch
            for offset in range(width):
                cell_col = col + offset
                if cell_col < bounds.x:
                    continue
                part = glyph if offset == 0 or ch == "\t" else _WIDE_CONTINUATION
                row[cell_col] = (part, style)
            col += width
        return max(0, col - x)

    def fill(self, rect: Rect, ch: str = " ", style: str = "") -> None:
        bounds = rect.intersect(self.area)
        for y in range(bounds.y, bounds.bottom):
            row = self._cells[y]
            for x in range(bounds.x, bounds.right):
                row[x] = (ch, style)

    def draw_box(self, rect: Rect, title: str = "", style: str = "") -> Rect:
        """Draw a single-line border around ``rect`` and return its interior."""
        if rect.width < 2 or rect.height < 2:
            return Rect(rect.x, rect.y, 0, 0)
        horizontal = "─" * (rect.width - 2)
        self.put_text(rect.x, rect.y, f"┌{horizontal}┐", style)
        for y in range(rect.y + 1, rect.bottom - 1):
            self.put_text(rect.x, y, "│", style)
            self.put_text(rect.right - 1, y, "│", style)
        self.put_text(rect.x, rect.bottom - 1, f"└{horizontal}┘", style)
        if title:
            self.put_text(rect.x + 1, rect.y, title, style, clip=Rect(rect.x + 1, rect.y, rect.width - 2, 1))
        return rect.inner()

    def lines(self) -> list[str]:
        """Return the plain text of every row, without styling."""
        return ["".join(ch for ch, _style in row) for row in self._cells]

    def style_at(self, x: int, y: int) -> str:
        return self._cells[y][x][1]

    def render_row(self, y: int) -> str:
        """Return row ``y`` as text with SGR escapes between style changes."""
        out: list[str] = []
        current = ""
        for ch, style in self._cells[y]:
            if style != current:
                out.append(RESET)
                out.append(sgr(style))
                current = style
            out.append(ch)
        if current:
            out.append(RESET)
        return "".join(out)


class ScreenWriter:
    """Flush surfaces to the terminal, repainting only changed rows."""

    def __init__(self, write: Callable[[bytes], None]) -> None:
        self._write = write
        self._previous: list[str] | None = None
        self._size: tuple[int, int] = (0, 0)

    def invalidate(self) -> None:
        """Force the next flush to repaint the whole screen."""
        self._previous = None

    def flush(self, surface: Surface) -> int:
        """Write ``surface`` and return how many rows were emitted."""
        rows = [surface.render_row(y) for y in range(surface.height)]
        size = (surface.width, surface.height)
        out: list[str] = []
        if self._previous is None or size != self._size:
            out.append("\033[H\033[2J")
            changed = range(len(rows))
        else:
            changed = [y for y, row in enumerate(rows) if row != self._previous[y]]
        for y in changed:
            out.append(f"\033[{y + 1};1H")
            out.append(rows[y])
        self._previous = rows
        self._size = size
        if out:
            self._write("".join(out).encode("utf-8", errors="replace"))
        return len(changed)


__all__ = ["Rect", "ScreenWriter", "Surface"]
