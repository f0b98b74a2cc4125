from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import compare_policies, run_algorithm
from .errors import SchedulerError
from .gantt import build_rich_gantt
from .models import Policy, Process, SchedulingResult
from .workload_io import default_workload, load_workload

logger = logging.getLogger(__name__)

POLICY_NAMES = [p.value for p in Policy]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpusched",
        description="CPU scheduling simulator (FCFS, SJF, SRTF, Priority, Priority-P, RR).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log scheduling decisions (preemptions, idle time).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help=f"Algorithm to use ({', '.join(POLICY_NAMES)}).",
    )
    _add_workload_args(run_parser, default_quantum=None)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=None,
        help="Algorithms to compare (default: all; priority policies only if every process has a priority).",
    )
    _add_workload_args(compare_parser, default_quantum=2)

    return parser


def _add_workload_args(parser: argparse.ArgumentParser, default_quantum: Optional[int]) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        default=None,
        help="Path to JSON or CSV workload file (default: built-in three-process example).",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=default_quantum,
        help="Time quantum for round-robin (ignored by the other algorithms).",
    )
    parser.add_argument(
        "--reverse-priority",
        action="store_true",
        help="Treat larger priority numbers as higher priority.",
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
    )


def _load_processes(workload: Optional[str]) -> List[Process]:
    if workload is None:
        return default_workload()
    return load_workload(Path(workload))


def _print_result(result: SchedulingResult, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")
    if result.reverse_priority:
        console.print("[bold]Priority order:[/bold] larger number wins")

    console.print()

    panel, time_marks = build_rich_gantt(result.execution_order)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"PID", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.process_metrics:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.burst_time),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
            "" if p.priority is None else str(p.priority),
        )

    console.print(proc_table)
    console.print()

    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Avg waiting", f"{result.average_waiting_time:.2f}")
    sys_table.add_row("Avg turnaround", f"{result.average_turnaround_time:.2f}")
    sys_table.add_row("Avg response", f"{result.average_response_time:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("Idle time", str(sys.idle_time))
        sys_table.add_row("Context switches", str(sys.context_switches))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

    console.print(sys_table)


def _print_comparison(results: dict, console: Console) -> None:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for result in results.values():
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{result.average_waiting_time:.2f}",
            f"{result.average_turnaround_time:.2f}",
            f"{result.average_response_time:.2f}",
        )

    console.print(summary_table)


def main(argv: list[str] | None = None, console: Optional[Console] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = console or Console()

    try:
        processes = _load_processes(args.workload)

        if args.command == "run":
            result = run_algorithm(
                args.algorithm,
                processes,
                quantum=args.quantum,
                reverse_priority=args.reverse_priority,
            )
            _print_result(result, console)
            return 0

        if args.command == "compare":
            results = compare_policies(
                processes,
                policies=args.algorithms,
                quantum=args.quantum,
                reverse_priority=args.reverse_priority,
            )
            _print_comparison(results, console)
            return 0
    except (SchedulerError, OSError) as exc:
        logger.debug("run failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
