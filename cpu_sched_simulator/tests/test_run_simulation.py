import importlib.util
import os
import sys

import pytest


SCRIPT = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, "scripts", "run_simulation.py")


@pytest.fixture
def run_simulation():
    """Load the CLI script as a module."""
    spec = importlib.util.spec_from_file_location("run_simulation", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_compare_reports_invalid_workload(run_simulation, tmp_path, monkeypatch, capsys):
    path = tmp_path / "workload.csv"
    path.write_text("arrival_time,service_time\n-1,2\n0,3\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["run_simulation.py", "--workload", str(path), "--compare"])

    with pytest.raises(SystemExit) as exc:
        run_simulation.main()
    assert exc.value.code == 1
    assert "Comparison failed" in capsys.readouterr().out


def test_compare_prints_table(run_simulation, tmp_path, monkeypatch, capsys):
    path = tmp_path / "workload.csv"
    path.write_text("arrival_time,service_time\n0,4\n0,2\n", encoding="utf-8")
    monkeypatch.setattr(sys, "argv", ["run_simulation.py", "--workload", str(path), "--compare"])

    run_simulation.main()
    out = capsys.readouterr().out
    for policy in ("RR", "SPN", "SRT", "HRRN"):
        assert policy in out
