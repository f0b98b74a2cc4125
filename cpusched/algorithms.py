from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .metrics import build_result, process_metrics_for
from .models import (
    ExecutionBlock,
    Policy,
    Process,
    ProcessMetrics,
    SchedulerConfig,
    SchedulingResult,
    SimProcess,
    check_quantum,
)
from .validation import validate_processes

logger = logging.getLogger(__name__)

Rank = Callable[[SimProcess], Tuple]


def _sim_processes(processes: Sequence[Process]) -> List[SimProcess]:
    # Private per-run copies; the caller's records are never touched.
    return [SimProcess.from_process(p, index) for index, p in enumerate(processes)]


def _priority_rank(reverse_priority: bool) -> Rank:
    """
    Comparison key for the priority policies.

    A process without a priority always ranks after every process that has
    one, whichever direction is in use; ``reverse_priority`` only flips the
    order among present priorities.
    """

    def rank(p: SimProcess) -> Tuple:
        if p.priority is None:
            return (1, 0)
        return (0, -p.priority if reverse_priority else p.priority)

    return rank


def schedule_fcfs(processes: Sequence[Process]) -> SchedulingResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.

    The sort is stable, so processes sharing an arrival time keep their
    input order.
    """
    procs = sorted(_sim_processes(processes), key=lambda p: p.arrival_time)

    time = 0
    timeline: List[ExecutionBlock] = []
    metrics: List[ProcessMetrics] = []

    for p in procs:
        start_time = max(time, p.arrival_time)
        end_time = start_time + p.burst_time

        timeline.append(ExecutionBlock(pid=p.pid, start_time=start_time, end_time=end_time))
        p.run(start_time, p.burst_time)
        metrics.append(process_metrics_for(p, end_time))

        time = end_time

    return build_result(Policy.FCFS, timeline, metrics)


def _run_to_completion(processes: Sequence[Process], policy: Policy, rank: Rank, **result_kwargs) -> SchedulingResult:
    """
    Shared loop for the non-preemptive selectors (SJF, cooperative priority).

    At each decision point, among processes that have arrived and are not yet
    completed, run the one with the lowest ``rank`` until it finishes. Ties go
    to the process that came first in the input.
    """
    pending = _sim_processes(processes)

    time = 0
    timeline: List[ExecutionBlock] = []
    metrics: List[ProcessMetrics] = []

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            # CPU idle: jump time to the next arrival.
            time = min(p.arrival_time for p in pending)
            logger.debug("%s: CPU idle until t=%d", policy.value, time)
            continue

        p = min(ready, key=lambda x: (rank(x), x.index))

        start_time = time
        end_time = start_time + p.burst_time

        timeline.append(ExecutionBlock(pid=p.pid, start_time=start_time, end_time=end_time))
        p.run(start_time, p.burst_time)
        metrics.append(process_metrics_for(p, end_time))

        pending.remove(p)
        time = end_time

    return build_result(policy, timeline, metrics, **result_kwargs)


def _run_preemptive(processes: Sequence[Process], policy: Policy, rank: Rank, **result_kwargs) -> SchedulingResult:
    """
    Shared event-driven loop for the preemptive selectors (SRTF, preemptive
    priority).

    Decisions are taken at arrivals and completions. The running process is
    preempted only when a ready process ranks strictly lower; on equal rank it
    keeps the CPU, so a slice is only split by an actual preemption.
    """
    pending = _sim_processes(processes)

    time = 0
    timeline: List[ExecutionBlock] = []
    metrics: List[ProcessMetrics] = []

    current: Optional[SimProcess] = None
    slice_start = 0

    while pending:
        ready = [p for p in pending if p.arrival_time <= time]

        if not ready:
            time = min(p.arrival_time for p in pending)
            logger.debug("%s: CPU idle until t=%d", policy.value, time)
            continue

        best = min(ready, key=lambda x: (rank(x), x.index))

        if current is None:
            current = best
            slice_start = time
        elif rank(best) < rank(current):
            logger.debug("%s: t=%d %s preempts %s", policy.value, time, best.pid, current.pid)
            timeline.append(ExecutionBlock(pid=current.pid, start_time=slice_start, end_time=time))
            current = best
            slice_start = time

        # Run until completion or next arrival, whichever comes first.
        future = [p.arrival_time for p in pending if p.arrival_time > time]
        run_time = current.remaining_time
        if future:
            run_time = min(run_time, min(future) - time)

        current.run(time, run_time)
        time += run_time

        if current.is_complete():
            timeline.append(ExecutionBlock(pid=current.pid, start_time=slice_start, end_time=time))
            metrics.append(process_metrics_for(current, time))
            pending.remove(current)
            current = None

    return build_result(policy, timeline, metrics, **result_kwargs)


def schedule_sjf(processes: Sequence[Process]) -> SchedulingResult:
    """
    Shortest Job First (non-preemptive).
    """
    return _run_to_completion(processes, Policy.SJF, lambda p: (p.burst_time,))


def schedule_srtf(processes: Sequence[Process]) -> SchedulingResult:
    """
    Shortest Remaining Time First (preemptive SJF).
    """
    return _run_preemptive(processes, Policy.SRTF, lambda p: (p.remaining_time,))


def schedule_priority(processes: Sequence[Process], reverse_priority: bool = False) -> SchedulingResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority, unless
    ``reverse_priority`` is set. Processes without a priority run last.
    """
    return _run_to_completion(
        processes,
        Policy.PRIORITY,
        _priority_rank(reverse_priority),
        reverse_priority=reverse_priority,
    )


def schedule_priority_preemptive(processes: Sequence[Process], reverse_priority: bool = False) -> SchedulingResult:
    """
    Preemptive Priority scheduling.

    An arrival with a strictly better priority takes the CPU at its arrival
    tick. Processes without a priority never preempt and are preempted by any
    process that has one.
    """
    return _run_preemptive(
        processes,
        Policy.PRIORITY_PREEMPTIVE,
        _priority_rank(reverse_priority),
        reverse_priority=reverse_priority,
    )


def schedule_rr(processes: Sequence[Process], quantum: int) -> SchedulingResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Processes that arrive during a slice are queued ahead of the process that
    was just preempted.
    """
    check_quantum(quantum)

    procs = sorted(_sim_processes(processes), key=lambda p: p.arrival_time)

    time = 0
    timeline: List[ExecutionBlock] = []
    metrics: List[ProcessMetrics] = []
    ready: Deque[SimProcess] = deque()
    next_index = 0

    def enqueue_new_arrivals(current_time: int) -> None:
        nonlocal next_index
        while next_index < len(procs) and procs[next_index].arrival_time <= current_time:
            ready.append(procs[next_index])
            next_index += 1

    while len(metrics) < len(procs):
        enqueue_new_arrivals(time)

        if not ready:
            time = procs[next_index].arrival_time
            logger.debug("rr: CPU idle until t=%d", time)
            continue

        p = ready.popleft()
        run_time = min(quantum, p.remaining_time)

        timeline.append(ExecutionBlock(pid=p.pid, start_time=time, end_time=time + run_time))
        p.run(time, run_time)
        time += run_time

        enqueue_new_arrivals(time)

        if p.is_complete():
            metrics.append(process_metrics_for(p, time))
        else:
            ready.append(p)

    return build_result(Policy.ROUND_ROBIN, timeline, metrics, quantum=quantum)


def run_algorithm(
    config: Union[SchedulerConfig, Policy, str],
    processes: Sequence[Process],
    quantum: Optional[int] = None,
    reverse_priority: bool = False,
) -> SchedulingResult:
    """
    Validate the input, then dispatch to the requested policy.

    ``config`` may be a SchedulerConfig or a policy name; in the latter case
    ``quantum`` and ``reverse_priority`` fill in the parameters.
    """
    if not isinstance(config, SchedulerConfig):
        config = SchedulerConfig(Policy.parse(config), quantum=quantum, reverse_priority=reverse_priority)

    validate_processes(processes, config.policy)
    logger.debug(
        "running %s on %d processes (quantum=%s, reverse_priority=%s)",
        config.policy.value,
        len(processes),
        config.quantum,
        config.reverse_priority,
    )

    policy = config.policy
    if policy is Policy.FCFS:
        return schedule_fcfs(processes)
    if policy is Policy.SJF:
        return schedule_sjf(processes)
    if policy is Policy.SRTF:
        return schedule_srtf(processes)
    if policy is Policy.PRIORITY:
        return schedule_priority(processes, reverse_priority=config.reverse_priority)
    if policy is Policy.PRIORITY_PREEMPTIVE:
        return schedule_priority_preemptive(processes, reverse_priority=config.reverse_priority)
    return schedule_rr(processes, quantum=config.quantum)


def compare_policies(
    processes: Sequence[Process],
    policies: Optional[Iterable[Union[Policy, str]]] = None,
    quantum: int = 2,
    reverse_priority: bool = False,
) -> Dict[Policy, SchedulingResult]:
    """
    Run several policies on the same workload.

    With the default policy set, priority policies are skipped when some
    process has no priority. Explicitly requested policies always run and
    propagate their errors.
    """
    explicit = policies is not None
    selected = [Policy.parse(p) for p in policies] if explicit else list(Policy)

    results: Dict[Policy, SchedulingResult] = {}
    for policy in selected:
        if not explicit and policy.needs_priority and any(p.priority is None for p in processes):
            logger.warning("skipping %s: not every process has a priority", policy.label)
            continue
        results[policy] = run_algorithm(policy, processes, quantum=quantum, reverse_priority=reverse_priority)
    return results
