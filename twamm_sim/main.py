"""Entry point: run one simulation (or a sweep) and record the results."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from twamm_sim.common.config import Settings
from twamm_sim.common.errors import SimulationError
from twamm_sim.persistence.summary_logger import SummaryLogger
from twamm_sim.simulator.engine import TwammSimulation
from twamm_sim.simulator.sweep_runner import SweepRunner
from twamm_sim.visibility.metrics_exporter import publish_result, write_metrics_file
from twamm_sim.visibility.report import (
    format_block_outcome,
    format_pool_details,
    format_trade_details,
    format_trade_result,
)

log = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a long-term order against a constant-product pool with arbitrage")
    parser.add_argument("--sweep", help="JSON sweep manifest; runs every entry instead of a single simulation")
    parser.add_argument("--results-dir", default=settings.results_dir, help=f"Summary CSV directory (default {settings.results_dir})")
    parser.add_argument("--no-persist", action="store_true", help="Do not append results to the summary CSV")
    parser.add_argument("--skip-duplicates", action="store_true", help="Do not append a row whose dataId is already logged")
    parser.add_argument("--verbose-blocks", action="store_true", help="Log iteration details for every committed block")
    parser.add_argument("--metrics-file", default=settings.metrics_file, help="Write Prometheus metrics to this file at exit")
    return parser


def run(args: Optional[List[str]] = None) -> int:
    try:
        settings = Settings()
    except ValidationError as exc:
        _configure_logging("INFO")
        log.error("Invalid configuration: %s", exc)
        return 2
    _configure_logging(settings.log_level)
    parsed = build_parser(settings).parse_args(args)

    summary = None
    if not parsed.no_persist:
        summary = SummaryLogger(
            str(Path(parsed.results_dir) / settings.results_summary_csv),
            skip_duplicates=parsed.skip_duplicates,
        )

    try:
        if parsed.sweep:
            rows = SweepRunner(settings.load_sweep(parsed.sweep), summary).run()
            log.info("Sweep finished: %d runs", len(rows))
        else:
            params = settings.to_parameters()
            sim = TwammSimulation(params)
            log.info("\n%s", format_pool_details(params))
            log.info("\n%s", format_trade_details(params, sim.schedule))
            result = sim.run()
            if parsed.verbose_blocks:
                for outcome in result.outcomes:
                    if outcome.mutated_state:
                        log.info("\n%s", format_block_outcome(outcome, params.token_x.symbol, params.token_y.symbol))
            publish_result(result)
            if summary is not None:
                summary.append(result.to_record())
            log.info("\n%s", format_trade_result(result))
    except SimulationError as exc:
        log.error("Simulation aborted: %s", exc)
        return 2
    finally:
        if parsed.metrics_file:
            write_metrics_file(parsed.metrics_file)
    return 0


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
