from __future__ import annotations

import logging
from collections import Counter
from typing import Sequence

from .errors import InvalidInputError
from .models import Policy, Process, is_int

logger = logging.getLogger(__name__)


def validate_processes(processes: Sequence[Process], policy: Policy) -> None:
    """
    Check the caller-side preconditions for running ``policy`` on ``processes``.

    Raises InvalidInputError on the first violated rule; nothing is simulated
    before this returns.
    """
    if not processes:
        raise InvalidInputError("At least one process is required")

    counts = Counter(p.pid for p in processes)
    duplicates = sorted(pid for pid, n in counts.items() if n > 1)
    if duplicates:
        raise InvalidInputError(f"Duplicate process ids: {', '.join(duplicates)}")

    for p in processes:
        if not is_int(p.arrival_time) or p.arrival_time < 0:
            raise InvalidInputError(f"{p.pid}: arrival_time must be a non-negative integer")
        if not is_int(p.burst_time) or p.burst_time <= 0:
            raise InvalidInputError(f"{p.pid}: burst_time must be a positive integer")
        if p.priority is not None and not is_int(p.priority):
            raise InvalidInputError(f"{p.pid}: priority must be an integer")

    if policy.needs_priority:
        missing = [p.pid for p in processes if p.priority is None]
        if missing:
            raise InvalidInputError(
                f"{policy.label} needs a priority for every process; missing for: {', '.join(missing)}"
            )

    logger.debug("validated %d processes for %s", len(processes), policy.value)
