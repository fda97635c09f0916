"""
Core data structures for the CPU scheduling simulator.
Includes the Process record, process states and workload validation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


# Returned by every policy when no process should occupy the processor.
IDLE: Optional[int] = None


class InvalidWorkloadError(ValueError):
    """Raised when a process list violates the driver preconditions."""


class SchedulingError(RuntimeError):
    """Raised by the driver when a policy breaks the selection contract."""


class ProcessState(Enum):
    """Process states in the system."""
    UNARRIVED = "UNARRIVED"
    ELIGIBLE = "ELIGIBLE"
    RUNNING = "RUNNING"
    WAITING = "WAITING"
    DONE = "DONE"


@dataclass
class Process:
    """A synthetic process. `pid` is its position in the process list."""
    pid: int
    arrival_time: int
    service_time: float
    time_scheduled: float = 0
    is_done: bool = False
    # driver bookkeeping
    start_time: Optional[int] = None
    finish_time: Optional[int] = None

    @property
    def remaining_time(self) -> float:
        return self.service_time - self.time_scheduled

    def is_eligible(self, now: int) -> bool:
        """Arrived and not yet finished."""
        return not self.is_done and self.arrival_time <= now

    def state(self, now: int, running: Optional[int] = IDLE) -> ProcessState:
        """Derive the lifecycle state at `now` given the index on the processor."""
        if self.is_done:
            return ProcessState.DONE
        if self.arrival_time > now:
            return ProcessState.UNARRIVED
        if running == self.pid:
            return ProcessState.RUNNING
        if self.start_time is None:
            return ProcessState.ELIGIBLE
        return ProcessState.WAITING

    def copy(self) -> "Process":
        """Fresh, unserviced copy of this process for another run."""
        return Process(pid=self.pid, arrival_time=self.arrival_time, service_time=self.service_time)


def all_done(processes: List[Process]) -> bool:
    return all(p.is_done for p in processes)


def eligible_indices(now: int, processes: List[Process]) -> List[int]:
    """Indices of arrived, incomplete processes in list order."""
    return [i for i, p in enumerate(processes) if p.is_eligible(now)]


def validate_workload(processes: List[Process]) -> None:
    """Check the preconditions a run relies on.

    Every pid must equal its list position, arrival times must be
    non-negative whole ticks, service demands strictly positive, and no
    process may carry service from an earlier run.
    """
    for position, proc in enumerate(processes):
        if proc.pid != position:
            raise InvalidWorkloadError(f"process at position {position} has pid {proc.pid}")
        if proc.arrival_time < 0:
            raise InvalidWorkloadError(f"process {proc.pid} arrives before tick 0: {proc.arrival_time}")
        if float(proc.arrival_time) != int(proc.arrival_time):
            raise InvalidWorkloadError(f"process {proc.pid} arrival time is not a whole tick: {proc.arrival_time}")
        if not proc.service_time > 0:
            raise InvalidWorkloadError(f"process {proc.pid} has non-positive service demand: {proc.service_time}")
        if proc.time_scheduled != 0 or proc.is_done:
            raise InvalidWorkloadError(f"process {proc.pid} has already been serviced")
