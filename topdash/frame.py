"""Per-tick view derivation: percentages, ranking and row formatting.

Everything here is a pure function of a ``Snapshot``; nothing is carried
from one tick to the next.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from topdash.config import CPU_WIDTH, MEM_WIDTH, NAME_WIDTH, PID_WIDTH, TOP_N
from topdash.metrics import ProcessRecord, Snapshot


@dataclass(frozen=True)
class Frame:
    """What one draw pass paints."""

    cpu_percent: int
    memory_percent: int
    process_lines: list[str]


# ── Percentages ────────────────────────────────────────────────────────────


def memory_percent(used: int, total: int) -> int:
    """Used memory as a whole percentage of total, 0 when total is 0."""
    if total <= 0:
        return 0
    return int(used / total * 100)


def cpu_gauge_percent(value: float) -> int:
    """Clamp a CPU reading to the 0-100 gauge range; NaN reads as 0."""
    if math.isnan(value):
        return 0
    return max(0, min(int(value), 100))


# ── Ranking ────────────────────────────────────────────────────────────────


def _cpu_sort_key(record: ProcessRecord) -> float:
    # NaN compares false both ways; push it below every real reading
    if math.isnan(record.cpu_percent):
        return -math.inf
    return record.cpu_percent


def rank_processes(
    processes: Iterable[ProcessRecord], limit: int = TOP_N
) -> list[ProcessRecord]:
    """Top ``limit`` processes by CPU percent, highest first."""
    ranked = sorted(processes, key=_cpu_sort_key, reverse=True)
    return ranked[:limit]


# ── Formatting ─────────────────────────────────────────────────────────────


def format_process_line(record: ProcessRecord) -> str:
    name = record.name[:NAME_WIDTH]
    mem_mb = record.memory_rss // 1024 // 1024
    return (
        f"PID: {record.pid:<{PID_WIDTH}} | {name:<{NAME_WIDTH}} | "
        f"CPU: {record.cpu_percent:>{CPU_WIDTH}.1f}% | MEM: {mem_mb:>{MEM_WIDTH}} MB"
    )


def derive_frame(snapshot: Snapshot) -> Frame:
    return Frame(
        cpu_percent=cpu_gauge_percent(snapshot.cpu_percent),
        memory_percent=memory_percent(snapshot.memory_used, snapshot.memory_total),
        process_lines=[
            format_process_line(p) for p in rank_processes(snapshot.processes)
        ],
    )
