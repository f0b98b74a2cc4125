import pytest

from cpusched.algorithms import run_algorithm
from cpusched.models import Policy, Process

WORKLOADS = {
    "textbook": [
        Process("P1", arrival_time=0, burst_time=4, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=1, priority=3),
    ],
    "idle_gaps": [
        Process("A", arrival_time=2, burst_time=3, priority=1),
        Process("B", arrival_time=9, burst_time=2, priority=4),
        Process("C", arrival_time=10, burst_time=6, priority=0),
        Process("D", arrival_time=30, burst_time=1, priority=2),
    ],
    "same_arrival": [
        Process("W", arrival_time=0, burst_time=5, priority=3),
        Process("X", arrival_time=0, burst_time=5, priority=3),
        Process("Y", arrival_time=0, burst_time=2, priority=1),
        Process("Z", arrival_time=0, burst_time=7, priority=2),
    ],
    "staggered": [
        Process("J1", arrival_time=0, burst_time=8, priority=4),
        Process("J2", arrival_time=1, burst_time=4, priority=2),
        Process("J3", arrival_time=2, burst_time=9, priority=5),
        Process("J4", arrival_time=3, burst_time=5, priority=1),
        Process("J5", arrival_time=6, burst_time=2, priority=3),
    ],
}

CASES = [
    (policy, name, quantum)
    for policy in Policy
    for name in WORKLOADS
    for quantum in ([1, 2, 4] if policy is Policy.ROUND_ROBIN else [None])
]


def _run(policy, name, quantum, reverse=False):
    return run_algorithm(policy, WORKLOADS[name], quantum=quantum, reverse_priority=reverse)


@pytest.mark.parametrize("policy,name,quantum", CASES)
def test_cpu_time_matches_burst_per_process(policy, name, quantum):
    res = _run(policy, name, quantum)
    totals = {}
    for b in res.execution_order:
        totals[b.pid] = totals.get(b.pid, 0) + (b.end_time - b.start_time)
    assert totals == {p.pid: p.burst_time for p in WORKLOADS[name]}


@pytest.mark.parametrize("policy,name,quantum", CASES)
def test_blocks_sorted_and_disjoint(policy, name, quantum):
    blocks = _run(policy, name, quantum).execution_order
    for b in blocks:
        assert b.start_time < b.end_time
    for prev, nxt in zip(blocks, blocks[1:]):
        assert prev.end_time <= nxt.start_time


@pytest.mark.parametrize("policy,name,quantum", CASES)
def test_process_metrics_consistent(policy, name, quantum):
    res = _run(policy, name, quantum)
    procs = WORKLOADS[name]
    assert sorted(m.pid for m in res.process_metrics) == sorted(p.pid for p in procs)

    last_end = {}
    first_start = {}
    for b in res.execution_order:
        last_end[b.pid] = b.end_time
        first_start.setdefault(b.pid, b.start_time)

    for m in res.process_metrics:
        assert m.waiting_time >= 0
        assert m.turnaround_time >= m.burst_time
        assert m.completion_time >= m.arrival_time + m.burst_time
        assert m.completion_time == last_end[m.pid]
        assert m.start_time == first_start[m.pid]
        assert m.turnaround_time == m.completion_time - m.arrival_time
        assert m.waiting_time == m.turnaround_time - m.burst_time

    completions = [m.completion_time for m in res.process_metrics]
    assert completions == sorted(completions)


@pytest.mark.parametrize("policy,name,quantum", CASES)
def test_averages_match_process_metrics(policy, name, quantum):
    res = _run(policy, name, quantum)
    n = len(res.process_metrics)
    assert res.average_waiting_time == sum(m.waiting_time for m in res.process_metrics) / n
    assert res.average_turnaround_time == sum(m.turnaround_time for m in res.process_metrics) / n


@pytest.mark.parametrize("policy,name,quantum", CASES)
def test_same_input_same_result(policy, name, quantum):
    before = list(WORKLOADS[name])
    first = _run(policy, name, quantum, reverse=True)
    second = _run(policy, name, quantum, reverse=True)
    assert first == second
    assert WORKLOADS[name] == before


@pytest.mark.parametrize("name", WORKLOADS)
def test_non_preemptive_policies_run_each_process_once(name):
    for policy in (Policy.FCFS, Policy.SJF, Policy.PRIORITY):
        res = _run(policy, name, None)
        assert len(res.execution_order) == len(WORKLOADS[name])
