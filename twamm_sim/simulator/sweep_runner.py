"""Runs a batch of simulations and records each result."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from twamm_sim.common.models import Parameters
from twamm_sim.persistence.summary_logger import DATA_ID, SummaryLogger, content_hash
from twamm_sim.simulator.engine import SimulationResult, run_simulation

log = logging.getLogger(__name__)


class SweepRunner:
    def __init__(self, runs: List[Parameters], summary: Optional[SummaryLogger] = None) -> None:
        log.info("Sweep runner initialised with %d runs", len(runs))
        self.runs = runs
        self.summary = summary
        self.results: List[SimulationResult] = []

    def run(self) -> List[Dict[str, str]]:
        """Execute every run in order; returns the summary rows."""
        rows: List[Dict[str, str]] = []
        for i, params in enumerate(self.runs):
            log.info(
                "Sweep run %d/%d: liquidity=%s order=%s intervals=%d arb_cost=%s",
                i + 1,
                len(self.runs),
                params.total_liquidity_usd,
                params.lt_order_amount,
                params.duration_intervals,
                params.arbitrage_cost_usd,
            )
            # per-block outcomes are not needed for the summary
            result = run_simulation(params, keep_outcomes=False)
            self.results.append(result)
            record = result.to_record()
            if self.summary is not None:
                written = self.summary.append(record)
                # duplicates are not rewritten but still carry their id
                record = written if written is not None else {**record, DATA_ID: content_hash(record)}
            rows.append(record)
        return rows


__all__ = ["SweepRunner"]
