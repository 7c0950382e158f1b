"""Fixed settings for topdash.

The dashboard has no config file, flags or environment overrides: the refresh
cadence, list length and layout are constants.
"""

from __future__ import annotations

# ── Timing ─────────────────────────────────────────────────────────────────

TICK_INTERVAL = 0.8  # seconds between draw phases

# ── Process list ───────────────────────────────────────────────────────────

TOP_N = 10
PID_WIDTH = 6
NAME_WIDTH = 20  # longer names are cut to this width
CPU_WIDTH = 5
MEM_WIDTH = 5

# ── Layout (rows) ──────────────────────────────────────────────────────────

MARGIN = 1
GAUGE_HEIGHT = 3
LIST_MIN_HEIGHT = 5

# ── Titles ─────────────────────────────────────────────────────────────────

CPU_TITLE = "CPU"
MEMORY_TITLE = "Memory"
LIST_TITLE = "Top Processes"

# ── Input ──────────────────────────────────────────────────────────────────

QUIT_KEYS: frozenset[int] = frozenset({ord("q")})

# Curses colour-pair IDs
C_CPU = 1
C_MEMORY = 2
C_TITLE = 3
