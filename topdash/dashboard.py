"""Live terminal dashboard: CPU and memory gauges over the top processes.

Single-threaded refresh loop. Each tick samples metrics, draws a frame and
then waits for input for whatever is left of the tick, so the wait for a
key press doubles as the pacing sleep.

Usage:
    topdash
    python -m topdash

Press q to quit.
"""

from __future__ import annotations

import argparse
import curses
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from topdash.config import QUIT_KEYS, TICK_INTERVAL
from topdash.frame import Frame, derive_frame
from topdash.metrics import MetricSource, Snapshot
from topdash.render import Renderer
from topdash.terminal import TerminalSession

# ── Collaborator interfaces ────────────────────────────────────────────────


class Source(Protocol):
    def refresh(self) -> Snapshot: ...

    @property
    def snapshot(self) -> Snapshot: ...


class Painter(Protocol):
    def draw(self, frame: Frame) -> None: ...


class KeyPoller(Protocol):
    def poll_key(self, timeout: float) -> int | None: ...


# ── Tick clock ─────────────────────────────────────────────────────────────


@dataclass
class TickClock:
    """Paces the loop at ``interval`` seconds between draw phases."""

    interval: float = TICK_INTERVAL
    now: Callable[[], float] = time.monotonic
    last_tick: float = field(init=False)

    def __post_init__(self) -> None:
        self.last_tick = self.now()

    def elapsed(self) -> float:
        return self.now() - self.last_tick

    def remaining(self) -> float:
        """Time left in the current tick, never negative."""
        return max(0.0, self.interval - self.elapsed())

    def maybe_reset(self) -> bool:
        """Start a new tick if the current one has run its course."""
        if self.elapsed() >= self.interval:
            self.last_tick = self.now()
            return True
        return False


# ── Main loop ──────────────────────────────────────────────────────────────


class LoopState(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class Dashboard:
    """Drives refresh, draw and input polling for one session."""

    def __init__(
        self,
        source: Source,
        painter: Painter,
        keys: KeyPoller,
        clock: TickClock | None = None,
    ) -> None:
        self.source = source
        self.painter = painter
        self.keys = keys
        self.clock = clock if clock is not None else TickClock()
        self.state = LoopState.RUNNING

    def step(self) -> LoopState:
        """Run one tick and return the resulting state."""
        self.source.refresh()
        self.painter.draw(derive_frame(self.source.snapshot))

        key = self.keys.poll_key(self.clock.remaining())
        if key in QUIT_KEYS:
            self.state = LoopState.TERMINATED
            return self.state

        self.clock.maybe_reset()
        return self.state

    def run(self) -> None:
        while self.state is LoopState.RUNNING:
            self.step()


def run_dashboard() -> None:
    """Acquire the terminal, loop until q, hand the terminal back."""
    with TerminalSession() as session:
        dashboard = Dashboard(
            source=MetricSource(),
            painter=Renderer(session.window),
            keys=session,
        )
        dashboard.run()


# ── CLI entry point ────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="topdash",
        description="Live CPU, memory and top-process dashboard. Press q to quit.",
    )
    parser.parse_args()

    try:
        run_dashboard()
    except KeyboardInterrupt:
        pass
    except (curses.error, OSError) as e:
        print(f"topdash: terminal error: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
