from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple

from .errors import SimulationError
from .models import ScheduledSlice
from .process import Process

logger = logging.getLogger(__name__)

Selector = Callable[[Sequence[Process]], Process]


def by_priority(ready: Sequence[Process]) -> Process:
    """
    Lowest priority number wins; ties go to the earliest arrival, then to
    whichever was queued first.
    """
    _, chosen = min(
        enumerate(ready),
        key=lambda item: (item[1].priority, item[1].arrival_time, item[0]),
    )
    return chosen


def by_queue_order(ready: Sequence[Process]) -> Process:
    return ready[0]


def by_shortest_burst(ready: Sequence[Process]) -> Process:
    # Ready processes sit in a CPU phase, so remaining_time() is the burst left.
    _, chosen = min(
        enumerate(ready),
        key=lambda item: (item[1].remaining_time(), item[1].arrival_time, item[0]),
    )
    return chosen


class Engine:
    """
    Tick-based CPU: a logical clock, a ready queue and a single running slot.

    Every process is in exactly one of these places at any tick: not yet
    arrived, ready queue, running slot, IO wait, or complete. The engine
    only moves processes between them; which ready process gets the CPU is
    up to the selector and the policy driving the engine.
    """

    def __init__(self, selector: Selector = by_priority) -> None:
        self._selector = selector
        self._processes: Tuple[Process, ...] = ()
        self._ready: List[Process] = []
        self._io_wait: List[Process] = []
        self._running: Optional[Process] = None
        self._running_ticks = 0
        self._clock = 0
        self._timeline: List[ScheduledSlice] = []

    def load(self, processes: Sequence[Process]) -> None:
        self._processes = tuple(processes)
        self._ready = []
        self._io_wait = []
        self._running = None
        self._running_ticks = 0
        self._clock = 0
        self._timeline = []
        self._admit_arrivals()

    @property
    def processes(self) -> Tuple[Process, ...]:
        return self._processes

    def all_complete(self) -> bool:
        return all(p.complete for p in self._processes)

    def tick(self) -> None:
        """Advance the clock by one unit."""
        running = self._running
        self._clock += 1
        self._admit_arrivals()
        self._advance_io()

        if running is None:
            return

        self._record_slice(running, self._clock - 1)
        self._running_ticks += 1
        if running.tick_active():
            self._release(running)

    def idle(self) -> bool:
        return self._running is None

    def dispatch_if_idle(self) -> Optional[Process]:
        if self._running is not None or not self._ready:
            return None
        return self._dispatch(self._selector(self._ready))

    def dispatch_preempt(self, process: Optional[Process] = None) -> Optional[Process]:
        """
        Dispatch ``process`` (or the selector's choice) from the ready queue.

        The running slot must already be empty; use ``preempt_running`` first.
        """
        if self._running is not None:
            raise SimulationError(
                f"cannot dispatch while {self._running.name} occupies the CPU; preempt it first"
            )
        if not self._ready:
            return None
        if process is None:
            process = self._selector(self._ready)
        elif process not in self._ready:
            raise SimulationError(f"{process.name} is not in the ready queue")
        return self._dispatch(process)

    def preempt_running(self) -> Optional[Process]:
        process = self._running
        if process is None:
            return None
        self._ready.append(process)
        self._running = None
        self._running_ticks = 0
        logger.debug("t=%d preempted %s (%d left in burst)", self._clock, process.name, process.remaining_time())
        return process

    def ready_snapshot(self) -> Tuple[Process, ...]:
        return tuple(self._ready)

    def running_process(self) -> Optional[Process]:
        return self._running

    def running_ticks(self) -> int:
        """Ticks the running process has spent on the CPU since it was dispatched."""
        return self._running_ticks

    def clock_value(self) -> int:
        return self._clock

    def timeline(self) -> Tuple[ScheduledSlice, ...]:
        return tuple(self._timeline)

    def _dispatch(self, process: Process) -> Process:
        self._ready.remove(process)
        self._running = process
        self._running_ticks = 0
        process.mark_started(self._clock)
        logger.debug("t=%d dispatched %s (priority %d)", self._clock, process.name, process.priority)
        return process

    def _admit_arrivals(self) -> None:
        for process in self._processes:
            if process.release_time == self._clock and process.arrival_time is None:
                process.mark_arrived(self._clock)
                self._ready.append(process)
                logger.debug("t=%d %s arrived", self._clock, process.name)

    def _advance_io(self) -> None:
        still_waiting: List[Process] = []
        for process in self._io_wait:
            if process.tick_active():
                self._ready.append(process)
                logger.debug("t=%d %s finished IO", self._clock, process.name)
            else:
                still_waiting.append(process)
        self._io_wait = still_waiting

    def _release(self, process: Process) -> None:
        self._running = None
        self._running_ticks = 0
        if process.complete:
            logger.debug("t=%d %s completed", self._clock, process.name)
        else:
            self._io_wait.append(process)
            logger.debug("t=%d %s started IO (%d)", self._clock, process.name, process.remaining_time())

    def _record_slice(self, process: Process, start: int) -> None:
        if self._timeline:
            last = self._timeline[-1]
            if last.pid == process.name and last.end_time == start:
                self._timeline[-1] = replace(last, end_time=start + 1)
                return
        self._timeline.append(ScheduledSlice(pid=process.name, start_time=start, end_time=start + 1))
