from __future__ import annotations


class SimulationError(Exception):
    """Base class for precondition violations raised by the simulator."""


class InvalidTraceTape(SimulationError, ValueError):
    """A trace tape is empty, has even length, or holds a non-positive entry."""


class FieldsNotSet(SimulationError):
    """Derived metrics were requested before arrival, start and exit were recorded."""


class MetricsNotReady(SimulationError):
    """Metrics were requested before a run finished executing."""


class NotLoaded(SimulationError):
    """A run was started without loading processes first."""
