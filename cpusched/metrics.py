from __future__ import annotations

from typing import Iterable, Optional, Sequence

from .models import (
    ExecutionBlock,
    Policy,
    ProcessMetrics,
    SchedulingResult,
    SimProcess,
    SystemMetrics,
)


def process_metrics_for(proc: SimProcess, completion_time: int) -> ProcessMetrics:
    """
    Final metrics for a process that finished at ``completion_time``.
    """
    turnaround_time = completion_time - proc.arrival_time
    start_time = proc.start_time if proc.start_time is not None else completion_time - proc.burst_time
    return ProcessMetrics(
        pid=proc.pid,
        arrival_time=proc.arrival_time,
        burst_time=proc.burst_time,
        start_time=start_time,
        completion_time=completion_time,
        waiting_time=turnaround_time - proc.burst_time,
        turnaround_time=turnaround_time,
        response_time=start_time - proc.arrival_time,
        priority=proc.priority,
    )


def compute_system_metrics(
    timeline: Sequence[ExecutionBlock], processes: Sequence[ProcessMetrics]
) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given per-process metrics and
    timeline blocks.
    """
    if not processes:
        return SystemMetrics(
            cpu_busy_time=0, makespan=0, idle_time=0, throughput=0.0, cpu_utilization=0.0
        )

    makespan = max(p.completion_time for p in processes)
    cpu_busy_time = sum(block.duration for block in timeline)

    throughput = len(processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0
    context_switches = sum(1 for prev, nxt in zip(timeline, timeline[1:]) if prev.pid != nxt.pid)

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        idle_time=makespan - cpu_busy_time,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
        context_switches=context_switches,
    )


def build_result(
    policy: Policy,
    timeline: Iterable[ExecutionBlock],
    metrics: Iterable[ProcessMetrics],
    quantum: Optional[int] = None,
    reverse_priority: bool = False,
) -> SchedulingResult:
    """
    Single exit point for every policy: freeze the timeline and metrics and
    attach averages.

    Sums are taken over integers and divided once, so averages are identical
    across policies that produce the same per-process numbers. An empty
    metrics list yields NaN averages.
    """
    timeline = tuple(timeline)
    metrics = tuple(metrics)

    n = len(metrics)
    if n:
        average_waiting_time = sum(m.waiting_time for m in metrics) / n
        average_turnaround_time = sum(m.turnaround_time for m in metrics) / n
        average_response_time = sum(m.response_time for m in metrics) / n
    else:
        average_waiting_time = float("nan")
        average_turnaround_time = float("nan")
        average_response_time = float("nan")

    return SchedulingResult(
        policy=policy,
        execution_order=timeline,
        process_metrics=metrics,
        average_waiting_time=average_waiting_time,
        average_turnaround_time=average_turnaround_time,
        average_response_time=average_response_time,
        system=compute_system_metrics(timeline, metrics),
        quantum=quantum,
        reverse_priority=reverse_priority,
    )
