import os
import sys

import pytest

# Headless plotting for visualizer tests
os.environ.setdefault("MPLBACKEND", "Agg")


def pytest_sessionstart(session):
    # Ensure repo root is on sys.path so 'cpu_sched_simulator' can be imported
    here = os.path.dirname(os.path.abspath(__file__))
    repo_root = os.path.abspath(os.path.join(here, os.pardir, os.pardir))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


@pytest.fixture
def make_procs():
    """Build a fresh process list from (arrival, service) pairs."""
    from cpu_sched_simulator.backend.core import Process

    def _make(*specs):
        return [Process(pid=i, arrival_time=a, service_time=s) for i, (a, s) in enumerate(specs)]

    return _make
