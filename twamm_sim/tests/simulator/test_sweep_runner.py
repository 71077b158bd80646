from decimal import Decimal

from twamm_sim.common.models import Parameters
from twamm_sim.persistence.summary_logger import SummaryLogger
from twamm_sim.simulator.sweep_runner import SweepRunner


def test_sweep_runs_each_parameter_set(tmp_path):
    runs = [
        Parameters(duration_intervals=0),
        Parameters(duration_intervals=0, arbitrage_cost_usd="1000000"),
    ]
    logger = SummaryLogger(str(tmp_path / "out" / "summary.csv"))
    rows = SweepRunner(runs, logger).run()
    assert len(rows) == 2
    assert rows[1]["arbs"] == "0"
    assert int(rows[0]["arbs"]) > 0
    stored = logger.load()
    assert [r["dataId"] for r in stored] == [r["dataId"] for r in rows]
    assert Decimal(stored[1]["arbCost"]) == Decimal("1000000")


def test_sweep_without_logger_returns_records():
    rows = SweepRunner([Parameters(duration_intervals=0)]).run()
    assert len(rows) == 1
    assert "dataId" not in rows[0]
    assert rows[0]["ltUnsold"] == "0"


def test_skipped_duplicates_still_carry_data_id(tmp_path):
    runs = [Parameters(duration_intervals=0), Parameters(duration_intervals=0)]
    logger = SummaryLogger(str(tmp_path / "summary.csv"), skip_duplicates=True)
    rows = SweepRunner(runs, logger).run()
    assert len(logger.load()) == 1
    assert rows[0]["dataId"] == rows[1]["dataId"]
    assert rows[1]["dataId"] == logger.load()[0]["dataId"]
