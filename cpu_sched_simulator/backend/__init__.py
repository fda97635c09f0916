"""
Backend package: process model, scheduling policies and the tick driver.
"""

from .core import IDLE, Process, ProcessState, InvalidWorkloadError, SchedulingError
from .schedulers import (
    Scheduler,
    RoundRobinScheduler,
    ShortestProcessNextScheduler,
    ShortestRemainingTimeScheduler,
    HighestResponseRatioNextScheduler,
    create_scheduler,
)
from .simulator import simulate, SimulationResult

__all__ = [
    'IDLE',
    'Process',
    'ProcessState',
    'InvalidWorkloadError',
    'SchedulingError',
    'Scheduler',
    'RoundRobinScheduler',
    'ShortestProcessNextScheduler',
    'ShortestRemainingTimeScheduler',
    'HighestResponseRatioNextScheduler',
    'create_scheduler',
    'simulate',
    'SimulationResult',
]
