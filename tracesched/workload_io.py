from __future__ import annotations

import csv
import json
import re
from pathlib import Path
from typing import List

from .process import Process

_INT_TEXT = re.compile(r"-?\d+")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a trace-tape workload from a JSON or CSV file into Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise ValueError(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, list):
        raise ValueError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            tape = (row.get("tape") or "").split()
            processes.append(_process_from_mapping({**row, "tape": tape}))
    return processes


def _process_from_mapping(mapping) -> Process:
    try:
        name = str(mapping["name"])
        raw_tape = mapping["tape"]
        if isinstance(raw_tape, str):
            raise TypeError("tape must be a list of integers")
        tape = [_as_int(value) for value in raw_tape]
        priority = _optional_int(mapping.get("priority"), default=0)
        arrival_time = _optional_int(mapping.get("arrival_time"), default=0)
        return Process(name, tape, priority=priority, release_time=arrival_time)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid process entry: {mapping!r}") from exc


def _optional_int(value, default: int) -> int:
    if value is None or value == "":
        return default
    return _as_int(value)


def _as_int(value) -> int:
    # JSON gives real ints; CSV cells arrive as digit strings. Nothing else is coerced.
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_TEXT.fullmatch(value.strip()):
        return int(value)
    raise TypeError(f"expected an integer, got {value!r}")
