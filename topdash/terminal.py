"""Curses terminal session: raw input, alternate screen, bounded key polling."""

from __future__ import annotations

import curses
import signal
from types import FrameType, TracebackType
from typing import Any

# External termination that should still restore the terminal
_CLEANUP_SIGNALS = (signal.SIGTERM, signal.SIGHUP)


def _exit_on_signal(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


class TerminalSession:
    """Owns the terminal for the lifetime of the dashboard.

    ``initscr`` switches to the alternate screen and ``endwin`` switches
    back. Use it as a context manager so the terminal is handed back on
    every exit path, including SIGTERM/SIGHUP, which are turned into
    ``SystemExit`` while the session is active.
    """

    def __init__(self) -> None:
        self._stdscr: curses.window | None = None
        self._prev_handlers: dict[int, Any] = {}

    @property
    def active(self) -> bool:
        return self._stdscr is not None

    @property
    def window(self) -> curses.window:
        if self._stdscr is None:
            raise RuntimeError("terminal session is not active")
        return self._stdscr

    def enter(self) -> curses.window:
        if self._stdscr is not None:
            return self._stdscr
        stdscr = curses.initscr()
        self._stdscr = stdscr
        try:
            curses.noecho()
            curses.raw()
            stdscr.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass
            for sig in _CLEANUP_SIGNALS:
                self._prev_handlers[sig] = signal.signal(sig, _exit_on_signal)
        except BaseException as e:
            self._leave_after(e)
            raise
        return stdscr

    def leave(self) -> None:
        """Restore the terminal. Safe to call more than once."""
        if self._stdscr is None:
            return
        stdscr, self._stdscr = self._stdscr, None
        handlers, self._prev_handlers = self._prev_handlers, {}
        try:
            for sig, handler in handlers.items():
                # None means the old handler was not installed from Python
                signal.signal(sig, signal.SIG_DFL if handler is None else handler)
            try:
                curses.curs_set(1)
            except curses.error:
                pass  # terminal cannot show/hide the cursor
            stdscr.keypad(False)
            curses.noraw()
            curses.echo()
        finally:
            curses.endwin()

    def _leave_after(self, exc: BaseException | None) -> None:
        """Release the terminal while ``exc`` is propagating.

        A cleanup failure is only raised when nothing else is in flight;
        otherwise the original exception (and its exit status) wins.
        """
        try:
            self.leave()
        except Exception:
            if exc is None:
                raise

    def poll_key(self, timeout: float) -> int | None:
        """Wait up to ``timeout`` seconds for a key press.

        Returns the key code, or None when nothing arrived in time.
        """
        win = self.window
        win.timeout(max(0, int(timeout * 1000)))
        key = win.getch()
        if key == -1:
            return None
        return key

    def __enter__(self) -> TerminalSession:
        self.enter()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._leave_after(exc)
