import json

from twamm_sim.main import run
from twamm_sim.persistence.summary_logger import SummaryLogger


def test_single_run_appends_summary(isolated_env, monkeypatch):
    monkeypatch.setenv("DURATION_INTERVALS", "0")
    out = isolated_env / "results"
    assert run(["--results-dir", str(out), "--skip-duplicates"]) == 0
    assert run(["--results-dir", str(out), "--skip-duplicates"]) == 0
    rows = SummaryLogger(str(out / "summary.csv")).load()
    assert len(rows) == 1
    assert rows[0]["durationInt"] == "0"


def test_no_persist_and_metrics_file(isolated_env, monkeypatch):
    monkeypatch.setenv("DURATION_INTERVALS", "0")
    metrics_path = isolated_env / "metrics.prom"
    assert run(["--no-persist", "--verbose-blocks", "--metrics-file", str(metrics_path)]) == 0
    assert not (isolated_env / "simulations").exists()
    assert metrics_path.exists()


def test_sweep_run(isolated_env):
    manifest = isolated_env / "sweep.json"
    manifest.write_text(json.dumps({"defaults": {"duration_intervals": 0}, "runs": [{}, {"arbitrage_cost_usd": "5"}]}))
    out = isolated_env / "results"
    assert run(["--sweep", str(manifest), "--results-dir", str(out)]) == 0
    assert len(SummaryLogger(str(out / "summary.csv")).load()) == 2


def test_invalid_parameters_return_error_code(isolated_env, monkeypatch):
    monkeypatch.setenv("LT_TRADE_USD", "-1")
    assert run(["--no-persist"]) == 2


def test_malformed_environment_returns_error_code(isolated_env, monkeypatch):
    monkeypatch.setenv("DURATION_INTERVALS", "abc")
    assert run(["--no-persist"]) == 2
