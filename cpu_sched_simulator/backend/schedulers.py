"""
Scheduling policies: Round Robin, SPN, SRT and HRRN.

Every policy answers one question per tick: which index of the process
list runs now, or IDLE. Policies only read the process records; the
driver owns all service accounting.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional
import math

from .core import IDLE, Process, all_done, eligible_indices


class Scheduler:
    """Scheduler type constants."""
    RR = "RR"
    SPN = "SPN"
    SRT = "SRT"
    HRRN = "HRRN"

    ALL = (RR, SPN, SRT, HRRN)


class BaseScheduler(ABC):
    """Abstract base class for all schedulers.

    An instance holds the state of exactly one simulation run. Call
    `reset()` (or build a new instance) before driving another workload.
    """

    name: str = ""

    def __init__(self):
        self.reset()

    @abstractmethod
    def reset(self) -> None:
        """Discard all per-run state."""

    @abstractmethod
    def select(self, current_time: int, processes: List[Process]) -> Optional[int]:
        """Return the index to run for this tick, or IDLE."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class RoundRobinScheduler(BaseScheduler):
    """Round Robin over an explicit FIFO ready queue of indices."""

    name = Scheduler.RR

    def __init__(self, time_quantum: int = 2):
        if time_quantum <= 0:
            raise ValueError(f"time quantum must be positive, got {time_quantum}")
        self.time_quantum = time_quantum
        super().__init__()

    def reset(self) -> None:
        self.ready: Deque[int] = deque()
        self.time_to_next_sched: int = self.time_quantum

    def select(self, current_time: int, processes: List[Process]) -> Optional[int]:
        # Admission is keyed on the exact arrival tick
        for idx, proc in enumerate(processes):
            if proc.arrival_time == current_time:
                self.ready.append(idx)

        # Retire the head when its slice is used up or it has finished
        if self.ready and (self.time_to_next_sched == 0 or processes[self.ready[0]].is_done):
            head = self.ready.popleft()
            if not processes[head].is_done:
                self.ready.append(head)
            self.time_to_next_sched = self.time_quantum

        if self.ready:
            self.time_to_next_sched -= 1
            return self.ready[0]

        # Nothing ready: re-evaluate on the very next call
        self.time_to_next_sched = 0
        return IDLE

    def __repr__(self) -> str:
        return f"RoundRobinScheduler(time_quantum={self.time_quantum})"


class RunToCompletionScheduler(BaseScheduler):
    """Shared shape of SPN, SRT and HRRN.

    A new candidate is only chosen when nothing is running, i.e. on the
    first eligible call or right after the incumbent completes. Subclasses
    supply the ranking through `_pick`.
    """

    def reset(self) -> None:
        self.index: Optional[int] = None
        self.run_length: int = 0

    def _should_rescan(self) -> bool:
        return self.run_length == 0

    @abstractmethod
    def _pick(self, current_time: int, processes: List[Process], candidates: List[int]) -> int:
        """Choose one of `candidates` (non-empty, in list order)."""

    def select(self, current_time: int, processes: List[Process]) -> Optional[int]:
        if all_done(processes):
            return IDLE

        if self.index is not None and processes[self.index].is_done:
            self.index = None
            self.run_length = 0

        if self.index is None or self._should_rescan():
            candidates = eligible_indices(current_time, processes)
            if not candidates:
                return IDLE
            self.index = self._pick(current_time, processes, candidates)

        self.run_length += 1
        return self.index


class ShortestProcessNextScheduler(RunToCompletionScheduler):
    """Non-preemptive; picks the smallest total service demand."""

    name = Scheduler.SPN

    def _pick(self, current_time: int, processes: List[Process], candidates: List[int]) -> int:
        # min() keeps the first of equal keys, so the lowest index wins ties
        return min(candidates, key=lambda i: processes[i].service_time)


class ShortestRemainingTimeScheduler(RunToCompletionScheduler):
    """Picks the smallest remaining service.

    By default the choice is only revisited when the incumbent completes,
    exactly like SPN. With `preemptive=True` every tick is a decision point,
    which is the textbook preemptive SRT.
    """

    name = Scheduler.SRT

    def __init__(self, preemptive: bool = False):
        self.preemptive = preemptive
        super().__init__()

    def _should_rescan(self) -> bool:
        return self.preemptive or self.run_length == 0

    def _pick(self, current_time: int, processes: List[Process], candidates: List[int]) -> int:
        return min(candidates, key=lambda i: processes[i].remaining_time)

    def __repr__(self) -> str:
        return f"ShortestRemainingTimeScheduler(preemptive={self.preemptive})"


def response_ratio(current_time: int, proc: Process) -> float:
    """(waiting + service) / service, with waiting = now - arrival - serviced."""
    if proc.service_time <= 0:
        return math.inf
    waiting = current_time - proc.arrival_time - proc.time_scheduled
    return (waiting + proc.service_time) / proc.service_time


class HighestResponseRatioNextScheduler(RunToCompletionScheduler):
    """Non-preemptive; picks the highest response ratio."""

    name = Scheduler.HRRN

    def _pick(self, current_time: int, processes: List[Process], candidates: List[int]) -> int:
        return max(candidates, key=lambda i: response_ratio(current_time, processes[i]))


_REGISTRY = {
    Scheduler.RR: RoundRobinScheduler,
    Scheduler.SPN: ShortestProcessNextScheduler,
    Scheduler.SRT: ShortestRemainingTimeScheduler,
    Scheduler.HRRN: HighestResponseRatioNextScheduler,
}


def create_scheduler(policy: str, time_quantum: int = 2, preemptive_srt: bool = False) -> BaseScheduler:
    """Build a fresh scheduler for `policy`.

    Only RR uses `time_quantum` and only SRT uses `preemptive_srt`; the
    other arguments are ignored for the remaining policies.
    """
    key = policy.upper() if isinstance(policy, str) else policy
    cls = _REGISTRY.get(key)
    if cls is None:
        raise ValueError(f"Unknown scheduling policy: {policy}")
    if cls is RoundRobinScheduler:
        return cls(time_quantum=time_quantum)
    if cls is ShortestRemainingTimeScheduler:
        return cls(preemptive=preemptive_srt)
    return cls()
