from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .engine import Engine
from .errors import MetricsNotReady, NotLoaded
from .metrics import compute_system_metrics, process_metrics
from .models import SchedulerReport
from .policies import FirstComeFirstServed, PriorityPolicy, RoundRobin, SchedulingPolicy, ShortestJobFirst
from .process import Process

logger = logging.getLogger(__name__)


class Simulation:
    """
    Drives one policy over a set of processes.

    ``execute`` resets the processes, runs the tick loop to completion and
    keeps a frozen report, so the same processes can be handed to another
    simulation afterwards without disturbing this one's metrics.
    """

    def __init__(self, policy: SchedulingPolicy) -> None:
        self.policy = policy
        self._processes: Optional[List[Process]] = None
        self._report: Optional[SchedulerReport] = None

    def load(self, processes: Sequence[Process]) -> None:
        self._processes = list(processes)
        self._report = None

    def execute(self, context_switch: bool) -> None:
        if self._processes is None:
            raise NotLoaded("load processes before executing")

        self._report = None
        for process in self._processes:
            process.reset()

        engine = Engine(selector=self.policy.selector)
        engine.load(self._processes)
        logger.info(
            "running %s over %d processes (context switch %s)",
            self.policy.name,
            len(self._processes),
            "on" if context_switch else "off",
        )

        # Let the policy dispatch at clock 0 before the first tick.
        self.policy.decide(engine, context_switch)
        while not engine.all_complete():
            engine.tick()
            self._record_exits(engine)
            self.policy.decide(engine, context_switch)

        total_time = engine.clock_value()
        logger.info("%s finished at t=%d", self.policy.name, total_time)

        per_process = tuple(process_metrics(p) for p in self._processes)
        timeline = engine.timeline()
        self._report = SchedulerReport(
            algorithm=self.policy.name,
            preemptive=context_switch,
            quantum=self.policy.quantum,
            total_time=total_time,
            processes=per_process,
            timeline=timeline,
            system=compute_system_metrics(per_process, timeline, total_time),
        )

    def metrics(self) -> SchedulerReport:
        if self._report is None:
            raise MetricsNotReady("execution not finished; call execute() before metrics()")
        return self._report

    def _record_exits(self, engine: Engine) -> None:
        now = engine.clock_value()
        for process in self._processes:
            if process.complete and process.exit_time is None:
                process.mark_exited(now)


ALGORITHMS: Dict[str, Callable[[Optional[int]], SchedulingPolicy]] = {
    "fcfs": lambda quantum: FirstComeFirstServed(),
    "sjf": lambda quantum: ShortestJobFirst(),
    "rr": lambda quantum: RoundRobin(quantum),
    "priority": lambda quantum: PriorityPolicy(),
}


def run_algorithm(
    name: str,
    processes: Sequence[Process],
    context_switch: bool = True,
    quantum: Optional[int] = None,
) -> SchedulerReport:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown or unimplemented algorithm '{name}'")

    simulation = Simulation(ALGORITHMS[name](quantum))
    simulation.load(processes)
    simulation.execute(context_switch)
    return simulation.metrics()


def compare_algorithms(
    names: Sequence[str],
    processes: Sequence[Process],
    context_switch: bool = True,
    quantum: Optional[int] = None,
) -> Mapping[str, SchedulerReport]:
    """Run each algorithm over the same processes; reports keyed by algorithm name."""
    reports: Dict[str, SchedulerReport] = {}
    for name in names:
        report = run_algorithm(name, processes, context_switch=context_switch, quantum=quantum)
        reports[report.algorithm] = report
    return MappingProxyType(reports)
