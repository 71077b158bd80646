"""Metrics export helpers."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, write_to_textfile

from twamm_sim.common import metrics
from twamm_sim.simulator.engine import SimulationResult


def publish_result(result: SimulationResult) -> None:
    stats = result.context.stats
    pool = result.context.pool
    metrics.LAST_TRADE_COST.set(float(result.trade_cost_percent))
    metrics.LAST_ARB_COUNT.set(stats.arbitrage.swaps)
    metrics.LAST_ARB_PROFIT.set(float(stats.arbitrage.net_profit_usd))
    metrics.LAST_LT_FEES.set(float(stats.x_fees_lt))
    metrics.POOL_RESERVE.labels(result.parameters.token_x.symbol).set(float(pool.reserve_x))
    metrics.POOL_RESERVE.labels(result.parameters.token_y.symbol).set(float(pool.reserve_y))


def write_metrics_file(path: str, registry: CollectorRegistry = REGISTRY) -> None:
    """Dump the registry in text format (node-exporter textfile collector)."""
    write_to_textfile(path, registry)


__all__ = ["publish_result", "write_metrics_file"]
