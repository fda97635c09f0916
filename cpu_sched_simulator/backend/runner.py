from __future__ import annotations

from typing import List, Optional, Sequence
from dataclasses import dataclass

import pandas as pd

from .core import Process
from .schedulers import Scheduler
from .simulator import simulate, SimulationResult


@dataclass
class SimulationConfig:
    policy: str = Scheduler.RR
    time_quantum: int = 2
    preemptive_srt: bool = False
    max_ticks: Optional[int] = None


class SimulationRunner:
    """Runs workloads under a fixed configuration.

    Each call works on a fresh copy of the workload with a freshly built
    scheduler, so no state leaks from one run into the next.
    """

    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()

    def run(self, processes: List[Process], policy: Optional[str] = None) -> SimulationResult:
        """Run the simulation; `policy` overrides the configured one."""
        return simulate(
            processes=[p.copy() for p in processes],
            policy=policy or self.config.policy,
            time_quantum=self.config.time_quantum,
            preemptive_srt=self.config.preemptive_srt,
            max_ticks=self.config.max_ticks,
        )


def compare_policies(
    processes: List[Process],
    policies: Sequence[str] = Scheduler.ALL,
    config: SimulationConfig | None = None,
) -> pd.DataFrame:
    """Aggregate metrics of every policy on the same workload, indexed by policy."""
    runner = SimulationRunner(config)
    rows = []
    for policy in policies:
        result = runner.run(processes, policy=policy)
        rows.append({
            "policy": policy,
            "total_time": result.total_time,
            "avg_waiting_time": result.avg_waiting_time,
            "avg_turnaround_time": result.avg_turnaround_time,
            "avg_response_time": result.avg_response_time,
            "throughput": result.throughput,
            "cpu_utilization": result.cpu_utilization,
        })
    return pd.DataFrame(rows).set_index("policy")
