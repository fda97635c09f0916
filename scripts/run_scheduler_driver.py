from __future__ import annotations
import os, sys
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cpu_sched_simulator.backend.schedulers import (
    RoundRobinScheduler,
    ShortestProcessNextScheduler,
    ShortestRemainingTimeScheduler,
    HighestResponseRatioNextScheduler,
)
from cpu_sched_simulator.backend.core import IDLE, Process


def make_processes():
    return [
        Process(pid=0, arrival_time=0, service_time=3),
        Process(pid=1, arrival_time=2, service_time=6),
        Process(pid=2, arrival_time=4, service_time=4),
        Process(pid=3, arrival_time=6, service_time=5),
        Process(pid=4, arrival_time=8, service_time=2),
    ]


def run(scheduler):
    # hand-written driver: one select() per tick, one tick of service per decision
    procs = make_processes()
    t = 0
    picks = []
    while not all(p.is_done for p in procs):
        idx = scheduler.select(t, procs)
        picks.append('-' if idx is IDLE else str(idx))
        if idx is not IDLE:
            proc = procs[idx]
            proc.time_scheduled += 1
            if proc.time_scheduled >= proc.service_time:
                proc.is_done = True
                proc.finish_time = t + 1
        t += 1
    print(f'{type(scheduler).__name__:<36} {"".join(picks)}')
    for p in procs:
        print(f'  P{p.pid}: finish={p.finish_time}, turnaround={p.finish_time - p.arrival_time}')


if __name__ == '__main__':
    for scheduler in (
        RoundRobinScheduler(time_quantum=1),
        RoundRobinScheduler(time_quantum=4),
        ShortestProcessNextScheduler(),
        ShortestRemainingTimeScheduler(),
        ShortestRemainingTimeScheduler(preemptive=True),
        HighestResponseRatioNextScheduler(),
    ):
        run(scheduler)
