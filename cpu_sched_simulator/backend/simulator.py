from __future__ import annotations

from typing import List, Optional, Dict, Protocol
from dataclasses import dataclass
import math

from .core import IDLE, InvalidWorkloadError, Process, SchedulingError, all_done, validate_workload
from .schedulers import BaseScheduler, Scheduler, create_scheduler
from .utils import (
    EventLogger,
    compute_waiting_times,
    compute_turnaround_times,
    compute_response_times,
    compute_avg,
    compute_throughput,
    compute_cpu_utilization,
)


class Clock:
    """Discrete simulated clock; advances one whole tick at a time."""

    def __init__(self, start: int = 0) -> None:
        self.now = start

    def tick(self) -> int:
        self.now += 1
        return self.now


class ServiceApplier(Protocol):
    def apply(self, process: Process, now: int) -> bool: ...


class TickServiceApplier:
    """Gives the chosen process exactly one tick of service.

    Returns True when that tick exhausted the process's demand.
    """

    def __init__(self, amount: float = 1) -> None:
        self.amount = amount

    def apply(self, process: Process, now: int) -> bool:
        if process.start_time is None:
            process.start_time = now
        process.time_scheduled = min(process.service_time, process.time_scheduled + self.amount)
        if process.time_scheduled >= process.service_time:
            process.is_done = True
            process.finish_time = now + 1
            return True
        return False


@dataclass
class SimulationResult:
    processes: List[Process]
    policy: str
    total_time: int
    schedule: List[Optional[int]]
    waiting_times: Dict[int, float]
    turnaround_times: Dict[int, float]
    response_times: Dict[int, float]
    avg_waiting_time: float
    avg_turnaround_time: float
    avg_response_time: float
    throughput: float
    cpu_utilization: float
    idle_ticks: int
    logger: EventLogger


def _check_decision(idx: Optional[int], now: int, processes: List[Process], scheduler: BaseScheduler) -> None:
    if idx is IDLE:
        return
    if not isinstance(idx, int) or not 0 <= idx < len(processes):
        raise SchedulingError(f"{scheduler!r} returned invalid index {idx!r} at t={now}")
    proc = processes[idx]
    if proc.arrival_time > now:
        raise SchedulingError(f"{scheduler!r} selected process {idx} before its arrival at t={now}")
    if proc.is_done:
        raise SchedulingError(f"{scheduler!r} selected finished process {idx} at t={now}")


def default_tick_limit(processes: List[Process]) -> int:
    """Upper bound on ticks any work-conserving policy needs for this workload."""
    if not processes:
        return 0
    # each process occupies ceil(service) whole ticks
    return int(max(p.arrival_time for p in processes)) + sum(math.ceil(p.service_time) for p in processes) + 1


def simulate(
    processes: List[Process],
    policy: str = Scheduler.RR,
    time_quantum: int = 2,
    preemptive_srt: bool = False,
    max_ticks: Optional[int] = None,
    scheduler: Optional[BaseScheduler] = None,
    applier: Optional[ServiceApplier] = None,
    clock: Optional[Clock] = None,
) -> SimulationResult:
    """Drive one run tick by tick until every process is done.

    The process list is mutated in place. A fresh scheduler is built for
    `policy` unless one is passed in; a passed-in scheduler is reset first.
    """
    validate_workload(processes)
    if scheduler is None:
        scheduler = create_scheduler(policy, time_quantum=time_quantum, preemptive_srt=preemptive_srt)
    else:
        scheduler.reset()
    policy_name = scheduler.name or policy
    applier = applier or TickServiceApplier()
    clock = clock or Clock()
    limit = max_ticks if max_ticks is not None else default_tick_limit(processes)
    start = clock.now
    # admission is keyed on exact arrival ticks, so nothing may arrive before the first one
    early = [p.pid for p in processes if p.arrival_time < start]
    if early:
        raise InvalidWorkloadError(f"processes {early} arrive before the clock start t={start}")

    logger = EventLogger()
    schedule: List[Optional[int]] = []

    while not all_done(processes):
        now = clock.now
        if now - start >= limit:
            raise SchedulingError(f"{scheduler!r} did not finish the workload within {limit} ticks")

        for proc in processes:
            if proc.arrival_time == now:
                logger.log_process_event(now, proc.pid, "arrive")

        idx = scheduler.select(now, processes)
        _check_decision(idx, now, processes, scheduler)
        schedule.append(idx)

        if idx is IDLE:
            logger.log_tick(now, None, policy_name)
        else:
            proc = processes[idx]
            if proc.start_time is None:
                logger.log_process_event(now, proc.pid, "start")
            logger.log_tick(now, proc.pid, policy_name)
            if applier.apply(proc, now):
                logger.log_process_event(now + 1, proc.pid, "complete")

        clock.tick()

    total_time = clock.now - start
    waiting_times = compute_waiting_times(processes)
    turnaround_times = compute_turnaround_times(processes)
    response_times = compute_response_times(processes)
    idle_ticks = sum(1 for idx in schedule if idx is IDLE)

    return SimulationResult(
        processes=processes,
        policy=policy_name,
        total_time=total_time,
        schedule=schedule,
        waiting_times=waiting_times,
        turnaround_times=turnaround_times,
        response_times=response_times,
        avg_waiting_time=compute_avg(list(waiting_times.values())),
        avg_turnaround_time=compute_avg(list(turnaround_times.values())),
        avg_response_time=compute_avg(list(response_times.values())),
        throughput=compute_throughput(processes, total_time),
        cpu_utilization=compute_cpu_utilization(total_time, idle_ticks),
        idle_ticks=idle_ticks,
        logger=logger,
    )
