from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .gantt import build_rich_gantt, cpu_occupancy
from .metrics import summarize_report
from .models import SchedulerReport
from .policies import DEFAULT_QUANTUM
from .simulator import ALGORITHMS, compare_algorithms, run_algorithm
from .workload_io import load_workload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tracesched",
        description="Trace-tape CPU scheduling simulator (FCFS, SJF, RR, Priority).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log dispatch, preemption and IO events as the simulation ticks.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        help="Algorithm to use (fcfs, sjf, rr, priority).",
    )
    _add_common_arguments(run_parser)
    run_parser.add_argument(
        "--step",
        action="store_true",
        help="Replay the schedule tick by tick in the terminal.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=0.3,
        help="Seconds to wait between steps when --step is used (default: 0.3).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: fcfs sjf rr priority).",
    )
    _add_common_arguments(compare_parser)

    return parser


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV trace-tape workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--no-preempt",
        dest="context_switch",
        action="store_false",
        help="Disable context switching; a running process keeps the CPU until its burst ends.",
    )


def _print_result(result: SchedulerReport, console: Console) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    console.print(f"[bold]Preemptive:[/bold] {'yes' if result.preemptive else 'no'}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    panel, time_marks = build_rich_gantt(result.timeline, result.total_time)
    console.print(panel)
    if time_marks:
        console.print(time_marks)

    console.print()

    headers = [
        "Name",
        "Arrive",
        "CPU",
        "IO",
        "Start",
        "Exit",
        "Wait",
        "Turnaround",
        "Response",
        "Priority",
    ]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        justify = "center" if h in {"Name", "Priority"} else "right"
        proc_table.add_column(h, justify=justify)

    for p in result.processes:
        proc_table.add_row(
            p.pid,
            str(p.arrival_time),
            str(p.cpu_time),
            str(p.io_time),
            str(p.start_time),
            str(p.exit_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
            str(p.priority),
        )

    console.print(proc_table)
    console.print()

    summary = summarize_report(result)
    sys_table = Table(title="System metrics", box=box.SIMPLE_HEAVY)
    sys_table.add_column("Metric")
    sys_table.add_column("Value", justify="right")

    sys_table.add_row("Total time", str(summary["total_time"]))
    sys_table.add_row("Avg waiting", f"{summary['avg_waiting']:.2f}")
    sys_table.add_row("Avg turnaround", f"{summary['avg_turnaround']:.2f}")
    sys_table.add_row("Avg response", f"{summary['avg_response']:.2f}")
    if result.system:
        sys = result.system
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")
        sys_table.add_row("Starvation count", str(sys.starvation_count))

    console.print(sys_table)


def _print_comparison(reports, title: str, console: Console) -> None:
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Total time", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg response", justify="right")

    for algorithm, report in reports.items():
        summary = summarize_report(report)
        summary_table.add_row(
            algorithm,
            "" if report.quantum is None else str(report.quantum),
            str(summary["total_time"]),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
        )

    console.print(summary_table)


def _animate_result(result: SchedulerReport, delay: float, console: Console) -> None:
    """
    Replay the recorded timeline one tick per line.
    """
    if not result.timeline:
        console.print("[red]No execution to animate.[/red]")
        return

    console.print(f"[bold]Simulating {result.algorithm}[/bold] (duration {result.total_time} time units)")
    console.print("[dim]Press Ctrl+C to skip animation.[/dim]")

    streak = 0
    previous = None
    for t, running in enumerate(cpu_occupancy(result.timeline, result.total_time)):
        streak = streak + 1 if running is not None and running == previous else 1
        previous = running
        if running is None:
            console.print(f"t={t:2d}: [idle]", markup=False)
        else:
            console.print(f"t={t:2d}: {escape(running)} [green]{'█' * streak}[/green]")
        time.sleep(delay)


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    console = Console()

    workload_path = Path(args.workload)
    try:
        processes = load_workload(workload_path)

        if args.command == "run":
            result = run_algorithm(
                args.algorithm,
                processes,
                context_switch=args.context_switch,
                quantum=args.quantum,
            )
            if args.step:
                try:
                    _animate_result(result, delay=args.step_delay, console=console)
                except KeyboardInterrupt:
                    console.print("[yellow]Animation skipped.[/yellow]")
            _print_result(result, console)
        else:
            reports = compare_algorithms(
                args.algorithms,
                processes,
                context_switch=args.context_switch,
                quantum=args.quantum,
            )
            _print_comparison(reports, f"Algorithm comparison: {workload_path}", console)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
