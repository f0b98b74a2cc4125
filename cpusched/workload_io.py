from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping

from .errors import InvalidInputError
from .models import Process

logger = logging.getLogger(__name__)

# Accepted spellings for each field, first match wins.
_FIELD_ALIASES = {
    "pid": ("pid", "id"),
    "arrival_time": ("arrival_time", "arrivalTime", "arrival"),
    "burst_time": ("burst_time", "burstTime", "burst"),
    "priority": ("priority",),
}


def default_workload() -> List[Process]:
    """
    The built-in three-process workload used when no file is given.
    """
    return [
        Process("P1", arrival_time=0, burst_time=4, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=1, priority=3),
    ]


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        processes = _load_json(path)
    elif suffix == ".csv":
        processes = _load_csv(path)
    else:
        raise InvalidInputError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    logger.debug("loaded %d processes from %s", len(processes), path)
    return processes
def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInputError(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise InvalidInputError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    processes: List[Process] = []
    with path.open("r", encoding="utf-8", newline="") as f:
        try:
            for row in csv.DictReader(f):
                processes.append(_process_from_mapping(row))
        except (csv.Error, UnicodeDecodeError) as exc:
            raise InvalidInputError(f"Invalid CSV workload {path}: {exc}") from exc
    return processes


def _lookup(mapping: Mapping, field: str):
    for key in _FIELD_ALIASES[field]:
        if key in mapping:
            return mapping[key]
    raise KeyError(field)


def _as_int(value) -> int:
    """
    Whole-number field value. ``2.0`` is accepted, ``2.7`` and booleans are not.
    """
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"expected an integer, got {value!r}")


def _process_from_mapping(mapping) -> Process:
    try:
        pid = str(_lookup(mapping, "pid")).strip()
        arrival_time = _as_int(_lookup(mapping, "arrival_time"))
        burst_time = _as_int(_lookup(mapping, "burst_time"))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid process entry: {mapping!r}") from exc

    try:
        priority_val = _lookup(mapping, "priority")
    except KeyError:
        priority_val = None
    if isinstance(priority_val, str):
        priority_val = priority_val.strip()

    try:
        priority = _as_int(priority_val) if priority_val not in (None, "") else None
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid priority in process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
