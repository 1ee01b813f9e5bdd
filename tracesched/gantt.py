from __future__ import annotations

from itertools import groupby
from typing import Dict, List, Optional, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice

COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]
IDLE_MARK = "·"


def cpu_occupancy(timeline: Sequence[ScheduledSlice], total_time: int) -> List[Optional[str]]:
    """Name of the process on the CPU for each tick of the run; None where idle."""
    ticks: List[Optional[str]] = [None] * total_time
    for sl in timeline:
        for t in range(sl.start_time, min(sl.end_time, total_time)):
            ticks[t] = sl.pid
    return ticks


def build_rich_gantt(timeline: Sequence[ScheduledSlice], total_time: int) -> tuple[Panel, str]:
    """
    Build a Rich Panel with one cell per simulated tick, plus the time marks
    at every change of CPU owner and at the end of the run.
    """
    if total_time <= 0:
        return Panel("No execution", title="Gantt Chart"), ""

    pid_to_color: Dict[str, str] = {}
    bars = Text()
    labels = Text()
    time_marks = "0"
    clock = 0

    for owner, run in groupby(cpu_occupancy(timeline, total_time)):
        width = len(list(run))
        if owner is None:
            bars.append(IDLE_MARK * width, style="dim")
            labels.append(" " * width)
        else:
            color = pid_to_color.setdefault(owner, COLORS[len(pid_to_color) % len(COLORS)])
            bars.append(" " * width, style=f"on {color}")
            labels.append(owner[:width].ljust(width), style="bold")
        clock += width
        time_marks += f"{clock:>3}"

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bars)
    grid.add_row(labels)

    return Panel.fit(grid, title=f"Gantt Chart ({total_time} ticks)"), time_marks
