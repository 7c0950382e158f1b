"""Host metric sampling backed by psutil."""

from __future__ import annotations

from dataclasses import dataclass, field

import psutil

_PROC_ATTRS = ["pid", "name", "cpu_percent", "memory_info"]


# ── Data types ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProcessRecord:
    """One process as seen by a single refresh."""

    pid: int
    name: str
    cpu_percent: float  # can exceed 100 on multi-core saturation
    memory_rss: int  # bytes


@dataclass
class Snapshot:
    """Everything captured by one refresh; replaced wholesale on the next."""

    cpu_percent: float = 0.0
    memory_total: int = 0
    memory_used: int = 0
    processes: list[ProcessRecord] = field(
        default_factory=lambda: list[ProcessRecord]()
    )


# ── Collection ─────────────────────────────────────────────────────────────


def _collect_processes() -> list[ProcessRecord]:
    records: list[ProcessRecord] = []
    for proc in psutil.process_iter(_PROC_ATTRS):
        try:
            info = proc.info
            mem_info = info.get("memory_info")
            records.append(
                ProcessRecord(
                    pid=info.get("pid") or 0,
                    name=info.get("name") or "",
                    cpu_percent=info.get("cpu_percent") or 0.0,
                    memory_rss=mem_info.rss if mem_info else 0,
                )
            )
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            # Gone or hidden since the scan started
            continue
    return records


class MetricSource:
    """Samples global CPU, memory and the process table on demand.

    psutil reports CPU percentages relative to the previous call, so the
    constructor takes a full sample to establish that baseline. Readings
    from the first ``refresh()`` onwards are then meaningful.
    """

    def __init__(self) -> None:
        self._snapshot = Snapshot()
        self.refresh()

    def refresh(self) -> Snapshot:
        """Re-sample everything, discarding the previous snapshot."""
        mem = psutil.virtual_memory()
        self._snapshot = Snapshot(
            cpu_percent=psutil.cpu_percent(interval=None),
            memory_total=mem.total,
            memory_used=mem.used,
            processes=_collect_processes(),
        )
        return self._snapshot

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def cpu_percent(self) -> float:
        return self._snapshot.cpu_percent

    @property
    def memory_total(self) -> int:
        return self._snapshot.memory_total

    @property
    def memory_used(self) -> int:
        return self._snapshot.memory_used

    @property
    def processes(self) -> list[ProcessRecord]:
        return self._snapshot.processes
