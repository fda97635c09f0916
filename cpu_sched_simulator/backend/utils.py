from __future__ import annotations

from typing import List, Dict, Optional, Any, Sequence
from pathlib import Path
import json
import csv
import random

import numpy as np
import pandas as pd

from .core import Process, InvalidWorkloadError


class EventLogger:
    """Structured record of one simulation run.

    Ticks passed to `log_tick` are merged into timeline slices: consecutive
    ticks of the same pid (or of idleness) extend the last slice.
    """

    def __init__(self) -> None:
        self.process_events: List[Dict[str, Any]] = []
        self.timeline: List[Dict[str, Any]] = []

    def log_process_event(self, time_s: int, pid: int, event: str) -> None:
        self.process_events.append({
            "time": time_s,
            "pid": pid,
            "event": event,
        })

    def log_timeline_slice(self, start: int, end: int, pid: Optional[int], policy: str, reason: Optional[str] = None) -> None:
        self.timeline.append({
            "start": start,
            "end": end,
            "pid": pid,
            "policy": policy,
            "reason": reason,
        })

    def log_tick(self, now: int, pid: Optional[int], policy: str) -> None:
        last = self.timeline[-1] if self.timeline else None
        if last is not None and last["end"] == now and last["pid"] == pid and last["policy"] == policy:
            last["end"] = now + 1
            return
        self.log_timeline_slice(now, now + 1, pid, policy, reason="idle" if pid is None else None)

    def events_for(self, pid: int) -> List[Dict[str, Any]]:
        return [e for e in self.process_events if e["pid"] == pid]

    def export_json(self, path: str) -> None:
        data = {
            "process_events": self.process_events,
            "timeline": self.timeline,
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def export_csv(self, base_path_no_ext: str) -> None:
        with open(f"{base_path_no_ext}_events.csv", "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["time", "pid", "event"])
            writer.writeheader()
            for row in self.process_events:
                writer.writerow(row)
        with open(f"{base_path_no_ext}_timeline.csv", "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=["start", "end", "pid", "policy", "reason"])
            writer.writeheader()
            for row in self.timeline:
                writer.writerow(row)


def compute_turnaround_times(processes: List[Process]) -> Dict[int, float]:
    tat: Dict[int, float] = {}
    for p in processes:
        if p.finish_time is None:
            continue
        tat[p.pid] = max(0.0, float(p.finish_time - p.arrival_time))
    return tat


def compute_waiting_times(processes: List[Process]) -> Dict[int, float]:
    waiting: Dict[int, float] = {}
    for p in processes:
        if p.finish_time is None:
            continue
        turnaround = p.finish_time - p.arrival_time
        waiting[p.pid] = max(0.0, float(turnaround - p.service_time))
    return waiting


def compute_response_times(processes: List[Process]) -> Dict[int, float]:
    response: Dict[int, float] = {}
    for p in processes:
        if p.start_time is None:
            continue
        response[p.pid] = float(p.start_time - p.arrival_time)
    return response


def compute_avg(values: List[float]) -> float:
    return float(np.mean(values)) if values else 0.0


def compute_throughput(processes: List[Process], total_time: float) -> float:
    if total_time <= 0:
        return 0.0
    completed = len([p for p in processes if p.is_done])
    return completed / total_time


def compute_cpu_utilization(total_time: float, idle_ticks: int) -> float:
    """Percentage of ticks the processor was busy."""
    if total_time <= 0:
        return 0.0
    return (total_time - idle_ticks) / total_time * 100


def summary_frame(processes: List[Process]) -> pd.DataFrame:
    """Per-process statistics table indexed by pid."""
    rows = []
    for p in processes:
        turnaround = None if p.finish_time is None else p.finish_time - p.arrival_time
        rows.append({
            "pid": p.pid,
            "arrival_time": p.arrival_time,
            "service_time": p.service_time,
            "start_time": p.start_time,
            "finish_time": p.finish_time,
            "turnaround_time": turnaround,
            "waiting_time": None if turnaround is None else turnaround - p.service_time,
            "response_time": None if p.start_time is None else p.start_time - p.arrival_time,
            "normalized_turnaround": None if turnaround is None else turnaround / p.service_time,
        })
    return pd.DataFrame(rows).set_index("pid")


def format_trace(schedule: Sequence[Optional[int]], processes: List[Process]) -> str:
    """Text Gantt chart: '#' ran, '.' waited after arrival, ' ' otherwise."""
    width = len(str(max(len(processes) - 1, 0)))
    lines = []
    for p in processes:
        cells = []
        for t, idx in enumerate(schedule):
            if idx == p.pid:
                cells.append("#")
            elif p.arrival_time <= t and (p.finish_time is None or t < p.finish_time):
                cells.append(".")
            else:
                cells.append(" ")
        lines.append(f"P{p.pid:<{width}} |{''.join(cells)}|")
    return "\n".join(lines)


def _processes_from_rows(rows: List[Dict[str, Any]]) -> List[Process]:
    procs: List[Process] = []
    for i, row in enumerate(rows):
        try:
            arrival = row["arrival_time"]
            service = row["service_time"]
        except KeyError as e:
            raise InvalidWorkloadError(f"row {i} is missing column {e}") from e
        try:
            whole_tick = float(arrival) == int(float(arrival))
            service = float(service)
        except (TypeError, ValueError) as e:
            raise InvalidWorkloadError(f"row {i} has a non-numeric value: {e}") from e
        if not whole_tick:
            raise InvalidWorkloadError(f"row {i} arrival time is not a whole tick: {arrival}")
        procs.append(Process(pid=i, arrival_time=int(float(arrival)), service_time=int(service) if service.is_integer() else service))
    return procs


def load_workload(path: str) -> List[Process]:
    """Read a workload from CSV or JSON; row order defines the pids."""
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise InvalidWorkloadError(f"{path}: expected a JSON list of processes")
        return _processes_from_rows(data)

    df = pd.read_csv(path, skipinitialspace=True)
    missing = {"arrival_time", "service_time"} - set(df.columns)
    if missing:
        raise InvalidWorkloadError(f"{path}: missing columns {sorted(missing)}")
    return _processes_from_rows(df[["arrival_time", "service_time"]].to_dict("records"))


def generate_workload(n: int, seed: int = 42, mean_service: float = 4.0, mean_interarrival: float = 1.5) -> List[Process]:
    """Synthetic integer workload with exponential service and gaps."""
    rng = random.Random(seed)
    procs: List[Process] = []
    time = 0.0
    for i in range(n):
        service = max(1, round(rng.expovariate(1 / mean_service)))
        procs.append(Process(pid=i, arrival_time=int(time), service_time=service))
        time += rng.expovariate(1 / mean_interarrival)
    return procs
