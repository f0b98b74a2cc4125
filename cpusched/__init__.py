"""
CPU scheduling simulator.

Turns a process set and a scheduling policy into an execution timeline plus
per-process and average metrics.
"""

from .algorithms import (
    compare_policies,
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_priority_preemptive,
    schedule_rr,
    schedule_sjf,
    schedule_srtf,
)
from .errors import InvalidInputError, SchedulerError, UnknownPolicyError
from .models import (
    ExecutionBlock,
    Policy,
    Process,
    ProcessMetrics,
    SchedulerConfig,
    SchedulingResult,
    SystemMetrics,
)

__all__ = [
    "ExecutionBlock",
    "InvalidInputError",
    "Policy",
    "Process",
    "ProcessMetrics",
    "SchedulerConfig",
    "SchedulerError",
    "SchedulingResult",
    "SystemMetrics",
    "UnknownPolicyError",
    "compare_policies",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_priority",
    "schedule_priority_preemptive",
    "schedule_rr",
    "schedule_sjf",
    "schedule_srtf",
]
