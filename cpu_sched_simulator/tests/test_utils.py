"""
Tests for trace recording, statistics and workload loading.
"""

import csv
import json

import pytest

from ..backend.core import InvalidWorkloadError, validate_workload
from ..backend.schedulers import Scheduler
from ..backend.simulator import simulate
from ..backend.utils import (
    EventLogger,
    format_trace,
    generate_workload,
    load_workload,
    summary_frame,
)
from ..backend.visualizer import plot_gantt


@pytest.fixture
def spn_result(make_procs):
    """SPN run of P0(0,4), P1(0,2)."""
    return simulate(make_procs((0, 4), (0, 2)), policy=Scheduler.SPN)


class TestEventLogger:
    """Test the event/timeline recorder."""

    def test_ticks_merge_into_slices(self, spn_result):
        slices = [(s["start"], s["end"], s["pid"]) for s in spn_result.logger.timeline]
        assert slices == [(0, 2, 1), (2, 6, 0)]

    def test_idle_slice(self, make_procs):
        result = simulate(make_procs((0, 1), (3, 1)), policy=Scheduler.SPN)
        timeline = result.logger.timeline
        assert [(s["start"], s["end"], s["pid"]) for s in timeline] == [(0, 1, 0), (1, 3, None), (3, 4, 1)]
        assert timeline[1]["reason"] == "idle"

    def test_process_events(self, spn_result):
        events = [(e["time"], e["event"]) for e in spn_result.logger.events_for(0)]
        assert events == [(0, "arrive"), (2, "start"), (6, "complete")]

    def test_export(self, spn_result, tmp_path):
        base = tmp_path / "run"
        spn_result.logger.export_json(str(base) + ".json")
        spn_result.logger.export_csv(str(base))

        with open(str(base) + ".json", encoding="utf-8") as f:
            data = json.load(f)
        assert len(data["timeline"]) == 2
        with open(str(base) + "_events.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert {r["event"] for r in rows} == {"arrive", "start", "complete"}
        assert (tmp_path / "run_timeline.csv").exists()

    def test_slices_split_on_policy(self):
        logger = EventLogger()
        logger.log_tick(0, 1, "RR")
        logger.log_tick(1, 1, "RR")
        logger.log_tick(2, 1, "SPN")
        assert [(s["start"], s["end"]) for s in logger.timeline] == [(0, 2), (2, 3)]


class TestStatistics:
    """Test per-process and aggregate statistics."""

    def test_aggregates(self, spn_result):
        assert spn_result.waiting_times == {0: 2.0, 1: 0.0}
        assert spn_result.turnaround_times == {0: 6.0, 1: 2.0}
        assert spn_result.response_times == {0: 2.0, 1: 0.0}
        assert spn_result.avg_waiting_time == pytest.approx(1.0)
        assert spn_result.avg_turnaround_time == pytest.approx(4.0)
        assert spn_result.throughput == pytest.approx(2 / 6)
        assert spn_result.cpu_utilization == pytest.approx(100.0)

    def test_summary_frame(self, spn_result):
        df = summary_frame(spn_result.processes)
        assert list(df.index) == [0, 1]
        assert df.loc[0, "waiting_time"] == 2
        assert df.loc[0, "normalized_turnaround"] == pytest.approx(1.5)
        assert df.loc[1, "response_time"] == 0


def test_format_trace(spn_result):
    trace = format_trace(spn_result.schedule, spn_result.processes)
    assert trace.splitlines() == [
        "P0 |..####|",
        "P1 |##    |",
    ]


def test_load_csv_workload(tmp_path):
    path = tmp_path / "workload.csv"
    path.write_text("arrival_time,service_time\n0,4\n2,3\n", encoding="utf-8")
    procs = load_workload(str(path))
    assert [(p.pid, p.arrival_time, p.service_time) for p in procs] == [(0, 0, 4), (1, 2, 3)]
    validate_workload(procs)


def test_load_json_workload(tmp_path):
    path = tmp_path / "workload.json"
    path.write_text(json.dumps([{"arrival_time": 1, "service_time": 2}]), encoding="utf-8")
    procs = load_workload(str(path))
    assert procs[0].arrival_time == 1 and procs[0].service_time == 2


def test_load_workload_missing_column(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("arrival_time\n0\n", encoding="utf-8")
    with pytest.raises(InvalidWorkloadError):
        load_workload(str(path))


def test_generate_workload_is_valid_and_seeded():
    a = generate_workload(20, seed=11)
    b = generate_workload(20, seed=11)
    assert [(p.arrival_time, p.service_time) for p in a] == [(p.arrival_time, p.service_time) for p in b]
    assert [p.arrival_time for p in a] == sorted(p.arrival_time for p in a)
    validate_workload(a)


def test_plot_gantt_writes_file(spn_result, tmp_path):
    out = tmp_path / "plots" / "gantt.png"
    plot_gantt(spn_result.processes, spn_result.logger, str(out))
    assert out.exists()
