from __future__ import annotations

import argparse
import os
import sys

# Ensure repo root is on sys.path when running as a script
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
REPO_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, os.pardir, os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from colorama import Fore, Style, init as colorama_init

from cpu_sched_simulator.backend.core import InvalidWorkloadError, SchedulingError
from cpu_sched_simulator.backend.schedulers import Scheduler
from cpu_sched_simulator.backend.runner import SimulationConfig, SimulationRunner, compare_policies
from cpu_sched_simulator.backend.utils import format_trace, generate_workload, load_workload, summary_frame
from cpu_sched_simulator.backend.visualizer import plot_gantt


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Discrete-time CPU scheduling simulator")
    p.add_argument("--policy", choices=list(Scheduler.ALL), default=Scheduler.RR)
    p.add_argument("--quantum", type=int, default=2)
    p.add_argument("--preemptive-srt", action="store_true", help="Re-evaluate SRT on every tick")
    p.add_argument("--workload", type=str, default=None, help="CSV or JSON workload file")
    p.add_argument("--n", type=int, default=8, help="Number of synthetic processes when no workload is given")
    p.add_argument("--seed", type=int, default=42)
    p.add_argument("--compare", action="store_true", help="Run every policy and print a comparison table")
    p.add_argument("--trace", action="store_true", help="Print a text Gantt trace")
    p.add_argument("--out", type=str, default=None, help="Save a Gantt chart image to this path")
    p.add_argument("--log", type=str, default=None, help="Base path for JSON/CSV event logs")
    return p.parse_args()


def main() -> None:
    colorama_init(autoreset=True)
    args = parse_args()
    try:
        procs = load_workload(args.workload) if args.workload else generate_workload(args.n, args.seed)
    except (OSError, InvalidWorkloadError) as e:
        print(Fore.RED + f"Could not load workload: {e}")
        sys.exit(1)

    config = SimulationConfig(policy=args.policy, time_quantum=args.quantum, preemptive_srt=args.preemptive_srt)

    if args.compare:
        try:
            table = compare_policies(procs, config=config)
        except (InvalidWorkloadError, SchedulingError) as e:
            print(Fore.RED + f"Comparison failed: {e}")
            sys.exit(1)
        print(table.to_string(float_format=lambda v: f"{v:.3f}"))
        return

    try:
        result = SimulationRunner(config).run(procs)
    except (InvalidWorkloadError, SchedulingError) as e:
        print(Fore.RED + f"Simulation failed: {e}")
        sys.exit(1)

    print(Style.BRIGHT + f"{result.policy}: total time {result.total_time}")
    print(f"Avg waiting: {result.avg_waiting_time:.3f}, Avg turnaround: {result.avg_turnaround_time:.3f}, Throughput: {result.throughput:.3f}")
    print(summary_frame(result.processes).to_string())
    if args.trace:
        print()
        print(format_trace(result.schedule, result.processes))
    if args.log:
        result.logger.export_json(f"{args.log}.json")
        result.logger.export_csv(args.log)
        print(Fore.CYAN + f"Logs written to {args.log}.json / {args.log}_*.csv")
    if args.out:
        plot_gantt(result.processes, result.logger, args.out)
        print(Fore.CYAN + f"Saved plot to {args.out}")


if __name__ == "__main__":
    main()
