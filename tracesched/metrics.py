from __future__ import annotations

from statistics import mean
from typing import Dict, Iterable, Sequence

from .models import ProcessMetrics, SchedulerReport, ScheduledSlice, SystemMetrics
from .process import Process


def process_metrics(process: Process) -> ProcessMetrics:
    """
    Snapshot the timestamps and derived metrics of a finished process.

    Raises FieldsNotSet if the process never exited.
    """
    return ProcessMetrics(
        pid=process.name,
        priority=process.priority,
        arrival_time=process.arrival_time,
        start_time=process.start_time,
        exit_time=process.exit_time,
        cpu_time=process.total_cpu_time,
        io_time=process.total_io_time,
        response_time=process.response_time,
        waiting_time=process.waiting_time,
        turnaround_time=process.turnaround_time,
    )


def compute_system_metrics(
    processes: Sequence[ProcessMetrics],
    timeline: Iterable[ScheduledSlice],
    total_time: int,
) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process metrics
    and timeline slices.
    """
    cpu_busy_time = sum(slice_.end_time - slice_.start_time for slice_ in timeline)
    if not processes:
        return SystemMetrics(cpu_busy_time=cpu_busy_time, makespan=total_time, throughput=0.0, cpu_utilization=0.0)

    throughput = len(processes) / total_time if total_time > 0 else 0.0
    cpu_utilization = cpu_busy_time / total_time if total_time > 0 else 0.0

    # A process counts as starved when it waited more than twice the average.
    avg_wait = sum(p.waiting_time for p in processes) / len(processes)
    starvation_count = sum(1 for p in processes if p.waiting_time > 2 * avg_wait)

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=total_time,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        starvation_count=starvation_count,
    )


def summarize_report(report: SchedulerReport) -> Dict[str, float]:
    """
    Average waiting, turnaround and response time over a finished run, plus
    the run's total simulated time.
    """
    processes = report.processes
    if not processes:
        return {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0, "total_time": report.total_time}

    return {
        "avg_waiting": mean(p.waiting_time for p in processes),
        "avg_turnaround": mean(p.turnaround_time for p in processes),
        "avg_response": mean(p.response_time for p in processes),
        "total_time": report.total_time,
    }
