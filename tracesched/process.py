from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .errors import FieldsNotSet, InvalidTraceTape, SimulationError


class Process:
    """
    One simulated workload driven by its trace tape.

    The tape alternates CPU bursts and IO waits and always starts and ends
    with a CPU burst:

        CPU, IO, CPU, IO, ..., CPU

    The cursor walks the tape one entry at a time. Even positions are CPU
    phases, odd positions are IO phases. ``remaining_time()`` counts down the
    entry under the cursor.

    Lower numeric ``priority`` means higher scheduling priority.
    """

    def __init__(
        self,
        name: str,
        tape: Sequence[int],
        priority: int = 0,
        release_time: int = 0,
    ) -> None:
        self._name = name
        self._tape: Tuple[int, ...] = _validate_tape(name, tape)
        if release_time < 0:
            raise ValueError(f"{name}: release_time cannot be negative")

        self.priority = priority
        self.release_time = release_time

        self.total_cpu_time = sum(self._tape[0::2])
        self.total_io_time = sum(self._tape[1::2])
        self.total_time = self.total_cpu_time + self.total_io_time

        self.reset()

    def reset(self) -> None:
        """Restore the pristine state so the same workload can be run again."""
        self._cursor = 0
        self._remaining = self._tape[0]
        self._complete = False

        self._arrival_time: Optional[int] = None
        self._start_time: Optional[int] = None
        self._exit_time: Optional[int] = None

        self._response_time: Optional[int] = None
        self._waiting_time: Optional[int] = None
        self._turnaround_time: Optional[int] = None

    # -- tape ----------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def demand_tape(self) -> Tuple[int, ...]:
        return self._tape

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def in_cpu_phase(self) -> bool:
        return not self._complete and self._cursor % 2 == 0

    @property
    def in_io_phase(self) -> bool:
        return not self._complete and self._cursor % 2 == 1

    def remaining_time(self) -> int:
        return self._remaining

    def advance_tape(self) -> bool:
        """
        Move the cursor past the current entry.

        Returns True when another entry follows. On the last entry the
        process becomes complete and False is returned, now and on every
        later call.
        """
        if self._complete or self._cursor + 1 == len(self._tape):
            self._complete = True
            return False
        self._cursor += 1
        self._remaining = self._tape[self._cursor]
        return True

    def tick_active(self) -> bool:
        """
        Spend one unit on the current entry.

        Returns True if the entry finished on this tick, in which case the
        tape has already moved on to the next phase.
        """
        if self._complete:
            return False
        self._remaining -= 1
        if self._remaining == 0:
            self.advance_tape()
            return True
        return False

    # -- timestamps ----------------------------------------------------------

    @property
    def arrival_time(self) -> Optional[int]:
        return self._arrival_time

    @property
    def start_time(self) -> Optional[int]:
        return self._start_time

    @property
    def exit_time(self) -> Optional[int]:
        return self._exit_time

    def mark_arrived(self, now: int) -> None:
        if self._arrival_time is not None:
            raise SimulationError(f"{self._name}: arrival already recorded at {self._arrival_time}")
        self._arrival_time = now

    def mark_started(self, now: int) -> None:
        # First dispatch wins.
        if self._start_time is None:
            self._start_time = now

    def mark_exited(self, now: int) -> None:
        if self._exit_time is not None:
            raise SimulationError(f"{self._name}: exit already recorded at {self._exit_time}")
        if self._arrival_time is None or self._start_time is None:
            raise FieldsNotSet(f"{self._name}: arrival and start must be recorded before exit")
        self._exit_time = now

        self._response_time = self._start_time - self._arrival_time
        self._waiting_time = now - self._arrival_time - self.total_cpu_time - self.total_io_time
        self._turnaround_time = now - self._arrival_time

    # -- derived metrics -----------------------------------------------------

    @property
    def response_time(self) -> int:
        return self._derived(self._response_time)

    @property
    def waiting_time(self) -> int:
        return self._derived(self._waiting_time)

    @property
    def turnaround_time(self) -> int:
        return self._derived(self._turnaround_time)

    def _derived(self, value: Optional[int]) -> int:
        if value is None:
            raise FieldsNotSet(f"{self._name}: arrival, start and exit have not all been recorded")
        return value

    def __repr__(self) -> str:
        return (
            f"Process(name={self._name!r}, tape={list(self._tape)!r}, priority={self.priority}, "
            f"cursor={self._cursor}, remaining={self._remaining}, complete={self._complete})"
        )


def _validate_tape(name: str, tape: Sequence[int]) -> Tuple[int, ...]:
    values = tuple(tape)
    if not values:
        raise InvalidTraceTape(f"{name}: trace tape must not be empty")
    if len(values) % 2 == 0:
        raise InvalidTraceTape(f"{name}: trace tape must have odd length (CPU, IO, ..., CPU), got {len(values)}")
    for idx, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidTraceTape(f"{name}: tape entry {idx} must be a positive integer, got {value!r}")
    return values
