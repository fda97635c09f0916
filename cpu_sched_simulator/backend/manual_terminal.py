from __future__ import annotations

import shlex
from typing import List, Optional
from colorama import Fore, Style, init as colorama_init

from .core import Process, InvalidWorkloadError, SchedulingError
from .schedulers import Scheduler
from .runner import SimulationConfig, SimulationRunner, compare_policies
from .utils import format_trace, load_workload
from .visualizer import plot_gantt


class ManualTerminal:
    def __init__(self) -> None:
        colorama_init(autoreset=True)
        self.processes: List[Process] = []
        self.last_result = None

    def prompt(self) -> None:
        print(Fore.CYAN + "CPU scheduling terminal. Type 'help' for commands.")
        while True:
            try:
                raw = input(Fore.GREEN + "> ")
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not raw.strip():
                continue
            self.handle_command(raw)

    def handle_command(self, raw: str) -> None:
        try:
            parts = shlex.split(raw)
        except ValueError as e:
            print(Fore.RED + f"Parse error: {e}")
            return
        if not parts:
            return
        cmd, *args = parts
        cmd = cmd.lower()
        if cmd == "help":
            self._help()
        elif cmd == "add":
            self._add(args)
        elif cmd == "load":
            self._load(args)
        elif cmd == "list":
            self._list()
        elif cmd == "clear":
            self.processes = []
            self.last_result = None
            print(Fore.CYAN + "Workload cleared")
        elif cmd == "run":
            self._run(args)
        elif cmd == "compare":
            self._compare(args)
        elif cmd == "trace":
            self._trace()
        elif cmd == "stats":
            self._stats()
        elif cmd == "exit" or cmd == "quit":
            raise SystemExit(0)
        else:
            print(Fore.YELLOW + "Unknown command. Type 'help'.")

    def _help(self) -> None:
        print("Commands:")
        print("  add <arrival> <service>")
        print("  load <workload.csv|workload.json>")
        print("  list")
        print("  clear")
        print("  run [--policy RR|SPN|SRT|HRRN] [--quantum Q] [--preemptive] [--out path]")
        print("  compare [--quantum Q] [--preemptive]")
        print("  trace")
        print("  stats")
        print("  exit")

    def _add(self, args: List[str]) -> None:
        if len(args) < 2:
            print(Fore.RED + "Usage: add <arrival> <service>")
            return
        try:
            arrival = int(args[0])
            service = int(args[1])
        except ValueError:
            print(Fore.RED + "Invalid numeric values")
            return
        pid = len(self.processes)
        self.processes.append(Process(pid=pid, arrival_time=arrival, service_time=service))
        print(Fore.CYAN + f"Process P{pid} added: arrival={arrival}, service={service}")

    def _load(self, args: List[str]) -> None:
        if not args:
            print(Fore.RED + "Usage: load <path>")
            return
        try:
            self.processes = load_workload(args[0])
        except (OSError, InvalidWorkloadError) as e:
            print(Fore.RED + f"Could not load workload: {e}")
            return
        print(Fore.CYAN + f"Loaded {len(self.processes)} processes from {args[0]}")

    def _list(self) -> None:
        if not self.processes:
            print("No processes yet")
            return
        for p in self.processes:
            print(f"P{p.pid}: arrival={p.arrival_time}, service={p.service_time}")

    def _parse_config(self, args: List[str]) -> Optional[tuple[SimulationConfig, Optional[str]]]:
        """Parse run flags; prints the problem and returns None on a bad value."""
        config = SimulationConfig()
        out_path: Optional[str] = None
        it = iter(args)
        for token in it:
            if token == "--policy":
                config.policy = next(it, config.policy).upper()
            elif token == "--quantum":
                value = next(it, None)
                try:
                    config.time_quantum = int(value)
                except (TypeError, ValueError):
                    print(Fore.RED + f"Invalid quantum: {value}")
                    return None
            elif token == "--preemptive":
                config.preemptive_srt = True
            elif token == "--out":
                out_path = next(it, None)
        return config, out_path

    def _run(self, args: List[str]) -> None:
        parsed = self._parse_config(args)
        if parsed is None:
            return
        config, out_path = parsed
        if config.policy not in Scheduler.ALL:
            print(Fore.RED + f"Unknown policy {config.policy}")
            return
        try:
            result = SimulationRunner(config).run(self.processes)
        except (ValueError, SchedulingError) as e:
            print(Fore.RED + f"Simulation failed: {e}")
            return

        self.last_result = result
        print(Style.BRIGHT + f"{result.policy} finished at t={result.total_time}. Avg waiting: {result.avg_waiting_time:.2f}, Avg turnaround: {result.avg_turnaround_time:.2f}, Throughput: {result.throughput:.3f}")
        if out_path:
            plot_gantt(result.processes, result.logger, out_path)
            print(Fore.CYAN + f"Saved plot to {out_path}")

    def _compare(self, args: List[str]) -> None:
        parsed = self._parse_config(args)
        if parsed is None:
            return
        config, _ = parsed
        try:
            table = compare_policies(self.processes, config=config)
        except (ValueError, SchedulingError) as e:
            print(Fore.RED + f"Comparison failed: {e}")
            return
        print(table.to_string(float_format=lambda v: f"{v:.2f}"))

    def _trace(self) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        print(format_trace(self.last_result.schedule, self.last_result.processes))

    def _stats(self) -> None:
        if not self.last_result:
            print("No simulation yet")
            return
        r = self.last_result
        print(f"Policy: {r.policy}")
        print(f"Avg waiting time: {r.avg_waiting_time:.3f}")
        print(f"Avg turnaround time: {r.avg_turnaround_time:.3f}")
        print(f"Avg response time: {r.avg_response_time:.3f}")
        print(f"Throughput: {r.throughput:.3f} processes/tick")
        print(f"CPU utilization: {r.cpu_utilization:.1f}%")


def main() -> None:
    ManualTerminal().prompt()


if __name__ == "__main__":
    main()
