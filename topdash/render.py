"""Curses layout and widgets for the dashboard.

A frame is three stacked regions: CPU gauge, memory gauge and the top
process list. ``split_vertical`` carves the window into those regions and
the widget helpers paint into them.
"""

from __future__ import annotations

import curses
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from topdash.config import (
    C_CPU,
    C_MEMORY,
    C_TITLE,
    CPU_TITLE,
    GAUGE_HEIGHT,
    LIST_MIN_HEIGHT,
    LIST_TITLE,
    MARGIN,
    MEMORY_TITLE,
)
from topdash.frame import Frame

BAR_FILL = "█"
BAR_EMPTY = " "


# ── Layout ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Rect:
    y: int
    x: int
    height: int
    width: int


@dataclass(frozen=True)
class Length:
    """Exactly ``rows`` rows."""

    rows: int


@dataclass(frozen=True)
class Min:
    """Whatever is left over, but at least ``rows`` rows."""

    rows: int


def split_vertical(
    area: Rect, constraints: Sequence[Length | Min], margin: int = 0
) -> list[Rect]:
    """Stack regions top to bottom inside ``area`` shrunk by ``margin``.

    Regions that run past the bottom edge are clipped, possibly to zero
    rows, so the result always has one ``Rect`` per constraint.
    """
    top = area.y + margin
    left = area.x + margin
    height = max(0, area.height - 2 * margin)
    width = max(0, area.width - 2 * margin)

    fixed = sum(c.rows for c in constraints if isinstance(c, Length))
    spare = max(0, height - fixed)

    bottom = top + height
    regions: list[Rect] = []
    y = top
    for c in constraints:
        want = c.rows if isinstance(c, Length) else max(c.rows, spare)
        rows = max(0, min(want, bottom - y))
        regions.append(Rect(y, left, rows, width))
        y += rows
    return regions


def dashboard_layout(area: Rect) -> list[Rect]:
    return split_vertical(
        area,
        [Length(GAUGE_HEIGHT), Length(GAUGE_HEIGHT), Min(LIST_MIN_HEIGHT)],
        margin=MARGIN,
    )


def gauge_fill(width: int, percent: int) -> int:
    """Number of bar cells lit for ``percent`` across ``width`` cells."""
    if width <= 0:
        return 0
    return width * max(0, min(percent, 100)) // 100


# ── Curses drawing primitives ──────────────────────────────────────────────


def _init_colors() -> None:
    curses.start_color()
    curses.use_default_colors()
    curses.init_pair(C_CPU, curses.COLOR_GREEN, -1)
    curses.init_pair(C_MEMORY, curses.COLOR_CYAN, -1)
    curses.init_pair(C_TITLE, curses.COLOR_WHITE, -1)


def _safe(win: curses.window, *args: Any) -> None:
    """addstr wrapper that clips writes running off the window edge."""
    try:
        win.addstr(*args)
    except curses.error:
        pass


def _draw_box(win: curses.window, rect: Rect, title: str = "") -> curses.window | None:
    """Draw a bordered box over ``rect`` and return it as a sub-window."""
    if rect.height < 3 or rect.width < 4:
        return None
    try:
        sub = win.subwin(rect.height, rect.width, rect.y, rect.x)
        sub.box()
    except curses.error:
        return None
    if title and len(title) + 4 < rect.width:
        _safe(sub, 0, 2, f" {title} ", curses.color_pair(C_TITLE) | curses.A_BOLD)
    return sub


# ── Widgets ────────────────────────────────────────────────────────────────


def draw_gauge(
    win: curses.window, rect: Rect, title: str, percent: int, color: int
) -> None:
    """Bordered one-row bar with a centred percentage label."""
    box = _draw_box(win, rect, title)
    if box is None:
        return
    inner = rect.width - 2
    filled = gauge_fill(inner, percent)
    _safe(box, 1, 1, BAR_FILL * filled, curses.color_pair(color))
    _safe(box, 1, 1 + filled, BAR_EMPTY * (inner - filled))

    label = f"{percent}%"
    if len(label) <= inner:
        _safe(
            box,
            1,
            1 + (inner - len(label)) // 2,
            label,
            curses.color_pair(color) | curses.A_BOLD | curses.A_REVERSE,
        )


def draw_list(win: curses.window, rect: Rect, title: str, items: Sequence[str]) -> None:
    """Bordered list, one item per row, clipped to the box."""
    box = _draw_box(win, rect, title)
    if box is None:
        return
    inner = rect.width - 2
    for row, item in enumerate(items[: rect.height - 2], start=1):
        _safe(box, row, 1, item[:inner])


class Renderer:
    """Paints a ``Frame`` onto a curses window."""

    def __init__(self, win: curses.window) -> None:
        self._win = win
        _init_colors()

    def draw(self, frame: Frame) -> None:
        self._win.erase()
        max_y, max_x = self._win.getmaxyx()
        cpu, mem, procs = dashboard_layout(Rect(0, 0, max_y, max_x))

        draw_gauge(self._win, cpu, CPU_TITLE, frame.cpu_percent, C_CPU)
        draw_gauge(self._win, mem, MEMORY_TITLE, frame.memory_percent, C_MEMORY)
        draw_list(self._win, procs, LIST_TITLE, frame.process_lines)

        self._win.refresh()
