"""Prometheus metrics for the simulator."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# Counters
SIM_RUNS = Counter("twamm_sim_runs_total", "Completed simulation runs")
SIM_FAILURES = Counter("twamm_sim_failures_total", "Runs aborted by an error", ["type"])
BLOCK_DECISIONS = Counter("twamm_sim_blocks_total", "Blocks evaluated by decision", ["decision"])
ARB_COMMITS = Counter("twamm_sim_arbitrage_commits_total", "Committed arbitrage swaps")
RESULTS_WRITTEN = Counter("twamm_sim_results_written_total", "Summary rows appended", ["status"])

# Gauges
LAST_TRADE_COST = Gauge("twamm_sim_trade_cost_percent", "Trade cost of the last run (%)")
LAST_ARB_COUNT = Gauge("twamm_sim_arbitrage_count", "Arbitrage swaps in the last run")
LAST_ARB_PROFIT = Gauge("twamm_sim_arbitrage_profit_usd", "Arbitrage net profit in the last run")
LAST_LT_FEES = Gauge("twamm_sim_lt_fees_paid", "Long-term fees paid in the last run")
POOL_RESERVE = Gauge("twamm_sim_pool_reserve", "Final pool reserve", ["token"])

# Histograms
RUN_DURATION_SECONDS = Histogram(
    "twamm_sim_run_duration_seconds",
    "Wall time of one simulation run",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
ARB_GROSS_PROFIT = Histogram(
    "twamm_sim_arbitrage_gross_profit_usd",
    "Gross profit of committed arbitrage swaps",
    buckets=(0.5, 1, 2, 5, 10, 25, 50, 100, 500),
)


__all__ = [
    "SIM_RUNS",
    "SIM_FAILURES",
    "BLOCK_DECISIONS",
    "ARB_COMMITS",
    "RESULTS_WRITTEN",
    "LAST_TRADE_COST",
    "LAST_ARB_COUNT",
    "LAST_ARB_PROFIT",
    "LAST_LT_FEES",
    "POOL_RESERVE",
    "RUN_DURATION_SECONDS",
    "ARB_GROSS_PROFIT",
]
