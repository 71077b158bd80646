import sys
from pathlib import Path

import pytest

# Ensure repository root is importable for `import twamm_sim.*`
ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """Run with no simulator env vars and no .env file in the cwd."""
    for key in (
        "LIQUIDITY_USD",
        "LT_TRADE_USD",
        "DURATION_INTERVALS",
        "SWAP_FEE",
        "LT_SWAP_FEE",
        "ARB_COST_USD",
        "ARB_THRESHOLD_USD",
        "RESULTS_DIR",
        "RESULTS_SUMMARY_CSV",
        "METRICS_FILE",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
