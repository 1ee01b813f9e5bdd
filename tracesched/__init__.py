"""
Trace-tape CPU scheduling simulator.

Runs workloads of alternating CPU/IO bursts through a tick-based engine
under pluggable scheduling policies and reports response, waiting and
turnaround times.
"""

from .errors import FieldsNotSet, InvalidTraceTape, MetricsNotReady, NotLoaded, SimulationError
from .process import Process
from .engine import Engine
from .simulator import ALGORITHMS, Simulation, compare_algorithms, run_algorithm

__all__ = [
    "ALGORITHMS",
    "Engine",
    "FieldsNotSet",
    "InvalidTraceTape",
    "MetricsNotReady",
    "NotLoaded",
    "Process",
    "Simulation",
    "SimulationError",
    "compare_algorithms",
    "run_algorithm",
    "cli",
]
