from __future__ import annotations

from abc import ABC, abstractmethod

from .engine import Engine, Selector, by_priority, by_queue_order, by_shortest_burst

DEFAULT_QUANTUM = 2


class SchedulingPolicy(ABC):
    """
    Per-tick dispatch decision over an engine.

    Policies keep no run state of their own; everything they need is read
    from the engine, so one policy object can drive any number of runs.
    """

    name: str = ""

    @property
    @abstractmethod
    def selector(self) -> Selector:
        """Which ready process the engine dispatches by default."""

    @abstractmethod
    def decide(self, engine: Engine, context_switch: bool) -> None:
        """Issue dispatch/preempt calls for the current tick."""

    @property
    def quantum(self) -> int | None:
        return None


class PriorityPolicy(SchedulingPolicy):
    """
    Priority scheduling. Lower numeric priority means higher priority.

    With context switching enabled, a running process is preempted by the
    first ready process (in queue order) whose priority beats it. Without
    it, the running process keeps the CPU until its burst ends.
    """

    name = "Priority"

    @property
    def selector(self) -> Selector:
        return by_priority

    def decide(self, engine: Engine, context_switch: bool) -> None:
        if not context_switch:
            engine.dispatch_if_idle()
            return

        # The engine frees the slot as soon as a burst reaches zero, so a
        # finished burst shows up here as idle.
        if engine.idle():
            engine.dispatch_preempt()
            return

        running = engine.running_process()
        for candidate in engine.ready_snapshot():
            if candidate.priority < running.priority:
                engine.preempt_running()
                engine.dispatch_preempt(candidate)
                break


class FirstComeFirstServed(SchedulingPolicy):
    """Non-preemptive; the context switch flag has no effect."""

    name = "FCFS"

    @property
    def selector(self) -> Selector:
        return by_queue_order

    def decide(self, engine: Engine, context_switch: bool) -> None:
        engine.dispatch_if_idle()


class ShortestJobFirst(SchedulingPolicy):
    """
    Shortest next CPU burst first.

    With context switching this is shortest-remaining-time-first: a ready
    process whose burst is strictly shorter than what the running process
    has left takes over the CPU.
    """

    name = "SJF"

    @property
    def selector(self) -> Selector:
        return by_shortest_burst

    def decide(self, engine: Engine, context_switch: bool) -> None:
        if engine.idle():
            engine.dispatch_preempt()
            return
        if not context_switch:
            return

        ready = engine.ready_snapshot()
        if not ready:
            return
        running = engine.running_process()
        shortest = by_shortest_burst(ready)
        if shortest.remaining_time() < running.remaining_time():
            engine.preempt_running()
            engine.dispatch_preempt(shortest)


class RoundRobin(SchedulingPolicy):
    """
    Round robin over the ready queue with a fixed quantum.

    Quantum expiry only preempts when context switching is enabled;
    otherwise this degrades to FCFS.
    """

    name = "Round Robin"

    def __init__(self, quantum: int | None = None) -> None:
        if quantum is None:
            quantum = DEFAULT_QUANTUM
        if isinstance(quantum, bool) or not isinstance(quantum, int) or quantum <= 0:
            raise ValueError("Round Robin requires a positive quantum (use --quantum)")
        self._quantum = quantum

    @property
    def quantum(self) -> int:
        return self._quantum

    @property
    def selector(self) -> Selector:
        return by_queue_order

    def decide(self, engine: Engine, context_switch: bool) -> None:
        if engine.idle():
            engine.dispatch_preempt()
            return
        if context_switch and engine.running_ticks() >= self._quantum and engine.ready_snapshot():
            engine.preempt_running()
            engine.dispatch_preempt()
