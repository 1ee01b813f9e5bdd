from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    end_time: int


@dataclass(frozen=True)
class ProcessMetrics:
    pid: str
    priority: int
    arrival_time: int
    start_time: int
    exit_time: int
    cpu_time: int
    io_time: int
    response_time: int
    waiting_time: int
    turnaround_time: int


@dataclass(frozen=True)
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float
    starvation_count: int = 0


@dataclass(frozen=True)
class SchedulerReport:
    """
    Snapshot of a finished run. Later runs over the same processes do not
    change it.
    """

    algorithm: str
    preemptive: bool
    quantum: Optional[int]
    total_time: int
    processes: Tuple[ProcessMetrics, ...] = ()
    timeline: Tuple[ScheduledSlice, ...] = ()
    system: Optional[SystemMetrics] = None
