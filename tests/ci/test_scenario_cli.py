from __future__ import annotations

import json
import subprocess
import sys


def test_lifecycle_scenario_runs_clean() -> None:
    cmd = [sys.executable, "apps/run_scenario.py", "apps/scenarios/lifecycle.json", "--events"]
    result = subprocess.run(cmd, check=False, capture_output=True, text=True)
    assert result.returncode == 0, result.stdout + result.stderr
    assert "UNEXPECTED" not in result.stdout
    assert "[step 3] deposit ok: minted=20.000000" in result.stdout
    assert "=== Snapshots ===" in result.stdout
    assert "=== Events ===" in result.stdout


def test_failed_expectation_sets_exit_code(tmp_path) -> None:
    scenario = {
        "steps": [
            {"op": "faucet", "holder": "alice", "amount": "1"},
            {"op": "deposit", "holder": "alice", "amount": "1"},
            {"op": "redeem", "holder": "alice", "amount": "10"},
        ]
    }
    path = tmp_path / "early_redeem.json"
    path.write_text(json.dumps(scenario), encoding="utf-8")
    cmd = [sys.executable, "apps/run_scenario.py", str(path), "--quiet"]
    result = subprocess.run(cmd, check=False, capture_output=True, text=True)
    assert result.returncode == 1
    assert "NotMatured" in result.stdout
    assert "did not match expectations" in result.stderr


def test_events_csv_written(tmp_path) -> None:
    out = tmp_path / "events.csv"
    cmd = [sys.executable, "apps/run_scenario.py", "apps/scenarios/lifecycle.json", "--quiet", "--events-csv", str(out)]
    result = subprocess.run(cmd, check=False, capture_output=True, text=True)
    assert result.returncode == 0, result.stderr
    header = out.read_text(encoding="utf-8").splitlines()[0]
    assert header.startswith("event,timestamp")
