import csv
import json

from flotilla.app.headless import run_headless


def _read_csv(path):
    with path.open(newline="") as handle:
        return list(csv.reader(handle))


def test_headless_log_has_a_row_per_agent_per_tick(tmp_path):
    log_path = tmp_path / "run.csv"
    run_headless(steps=3, seed=1, log_path=log_path, behavior="pursuit-improved")
    rows = _read_csv(log_path)
    assert rows[0] == ["tick", "agent", "behavior", "x", "y", "vx", "vy", "speed", "heading", "wrapped", "conditions"]
    assert len(rows) == 1 + 3 * 2
    assert {row[1] for row in rows[1:]} == {"primary", "secondary"}
    assert {row[2] for row in rows[1:] if row[1] == "secondary"} == {"flee"}


def test_headless_is_deterministic(tmp_path):
    first = tmp_path / "a.csv"
    second = tmp_path / "b.csv"
    run_headless(steps=40, seed=9, log_path=first, behavior="wander")
    run_headless(steps=40, seed=9, log_path=second, behavior="wander")
    assert _read_csv(first) == _read_csv(second)


def test_headless_summary_output(tmp_path):
    summary_path = tmp_path / "summary.json"
    run_headless(
        steps=40,
        seed=3,
        log_path=None,
        behavior="seek-basic",
        target=(3.0, 0.0),
        summary_path=summary_path,
    )
    payload = json.loads(summary_path.read_text())
    assert payload["steps"] == 40
    assert payload["seed"] == 3
    assert payload["behavior"] == "seek-basic"
    assert abs(payload["distance"]["primary"] - 3.0) < 1e-6
    assert payload["final"][0]["x"] == 3.0


def test_headless_reads_yaml_config(tmp_path):
    config_path = tmp_path / "solo.yaml"
    config_path.write_text("two_agents: false\n")
    scene = run_headless(steps=2, seed=None, log_path=None, behavior="evade", config_path=config_path)
    assert len(scene.engines) == 1
