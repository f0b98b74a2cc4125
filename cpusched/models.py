from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidInputError, UnknownPolicyError


def is_int(value) -> bool:
    # bool is an int subclass but never a valid tick count.
    return isinstance(value, int) and not isinstance(value, bool)


def check_quantum(quantum) -> None:
    if not is_int(quantum) or quantum <= 0:
        raise InvalidInputError(f"Round Robin requires a positive integer quantum (use --quantum), got {quantum!r}")


@dataclass(frozen=True)
class Process:
    """
    Input record for one process. ``priority`` is ``None`` when absent.
    """

    pid: str
    arrival_time: int
    burst_time: int
    priority: Optional[int] = None

    def __post_init__(self) -> None:
        if not is_int(self.arrival_time) or not is_int(self.burst_time):
            raise InvalidInputError(f"{self.pid}: arrival_time and burst_time must be integers")
        if self.priority is not None and not is_int(self.priority):
            raise InvalidInputError(f"{self.pid}: priority must be an integer")
        if self.arrival_time < 0:
            raise InvalidInputError(f"{self.pid}: arrival_time cannot be negative")
        if self.burst_time <= 0:
            raise InvalidInputError(f"{self.pid}: burst_time must be strictly positive")


@dataclass
class SimProcess:
    """
    Mutable per-run view of a process. ``index`` is the position in the
    caller's input list and doubles as the handle for the running process.
    """

    process: Process
    index: int
    remaining_time: int
    start_time: Optional[int] = None

    @classmethod
    def from_process(cls, process: Process, index: int) -> "SimProcess":
        return cls(process=process, index=index, remaining_time=process.burst_time)

    @property
    def pid(self) -> str:
        return self.process.pid

    @property
    def arrival_time(self) -> int:
        return self.process.arrival_time

    @property
    def burst_time(self) -> int:
        return self.process.burst_time

    @property
    def priority(self) -> Optional[int]:
        return self.process.priority

    def run(self, start: int, duration: int) -> None:
        if self.start_time is None:
            self.start_time = start
        self.remaining_time -= duration

    def is_complete(self) -> bool:
        return self.remaining_time == 0


@dataclass(frozen=True)
class ExecutionBlock:
    """
    One contiguous slice of execution, ``[start_time, end_time)``.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class ProcessMetrics:
    pid: str
    arrival_time: int
    burst_time: int
    start_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int
    response_time: int
    priority: Optional[int] = None


@dataclass(frozen=True)
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    idle_time: int
    throughput: float
    cpu_utilization: float
    context_switches: int = 0


class Policy(str, Enum):
    FCFS = "fcfs"
    SJF = "sjf"
    SRTF = "srtf"
    PRIORITY = "priority"
    PRIORITY_PREEMPTIVE = "priority-p"
    ROUND_ROBIN = "rr"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def needs_priority(self) -> bool:
        return self in (Policy.PRIORITY, Policy.PRIORITY_PREEMPTIVE)

    @property
    def needs_quantum(self) -> bool:
        return self is Policy.ROUND_ROBIN

    @classmethod
    def parse(cls, name: "str | Policy") -> "Policy":
        """
        Resolve a policy from its value, member name or a known alias.
        """
        if isinstance(name, Policy):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        if key in _ALIASES:
            return _ALIASES[key]
        raise UnknownPolicyError(f"Unknown or unimplemented algorithm '{name}'")


_LABELS = {
    Policy.FCFS: "FCFS",
    Policy.SJF: "SJF (non-preemptive)",
    Policy.SRTF: "SRTF",
    Policy.PRIORITY: "Priority (non-preemptive)",
    Policy.PRIORITY_PREEMPTIVE: "Priority (preemptive)",
    Policy.ROUND_ROBIN: "Round Robin",
}

_ALIASES = {
    "priorityp": Policy.PRIORITY_PREEMPTIVE,
    "priority_p": Policy.PRIORITY_PREEMPTIVE,
    "round-robin": Policy.ROUND_ROBIN,
    "round_robin": Policy.ROUND_ROBIN,
}


@dataclass(frozen=True)
class SchedulerConfig:
    """
    A policy plus only the parameters it uses.
    """

    policy: Policy
    quantum: Optional[int] = None
    reverse_priority: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "policy", Policy.parse(self.policy))
        if self.policy.needs_quantum:
            check_quantum(self.quantum)
        else:
            object.__setattr__(self, "quantum", None)
        if not self.policy.needs_priority:
            object.__setattr__(self, "reverse_priority", False)


@dataclass(frozen=True)
class SchedulingResult:
    policy: Policy
    execution_order: Tuple[ExecutionBlock, ...] = field(default_factory=tuple)
    process_metrics: Tuple[ProcessMetrics, ...] = field(default_factory=tuple)
    average_waiting_time: float = float("nan")
    average_turnaround_time: float = float("nan")
    average_response_time: float = float("nan")
    system: Optional[SystemMetrics] = None
    quantum: Optional[int] = None
    reverse_priority: bool = False

    @property
    def algorithm(self) -> str:
        return self.policy.label
