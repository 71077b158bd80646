"""Block-stepped simulation of a long-term order interleaved with arbitrage.

Each block the engine:

1. computes the virtual execution of the order since the last commit;
2. sizes the best arbitrage against the resulting hypothetical pool;
3. commits both when the arbitrage clears ``cost + threshold``, otherwise
   leaves every piece of state untouched;
4. on the order's final block, settles the order alone if nothing committed,
   so the last slice is always realized.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from twamm_sim.common import metrics
from twamm_sim.common.errors import SimulationError
from twamm_sim.common.models import OrderSchedule, Parameters
from twamm_sim.common.numeric import Arithmetic, format_decimal
from twamm_sim.simulator.arbitrage import ArbitrageQuote, quote_arbitrage
from twamm_sim.simulator.interface import OperationRecord, PoolOperation
from twamm_sim.simulator.pool import OrderProgress, PoolState, SimulationContext
from twamm_sim.simulator.stats import trade_cost_percent
from twamm_sim.simulator.virtual_orders import VirtualExecution, execute_virtual_orders

log = logging.getLogger(__name__)


class BlockDecision(str, Enum):
    NO_ARB_CANDIDATE = "no_arb_candidate"
    CANDIDATE_EVALUATED = "candidate_evaluated"
    COMMITTED = "committed"
    TERMINAL_SETTLEMENT = "terminal_settlement"


@dataclass(frozen=True)
class BlockOutcome:
    block_number: int
    block_time: int
    decision: BlockDecision
    execution: VirtualExecution
    quote: Optional[ArbitrageQuote]
    net_profit: Optional[Decimal]
    remaining_to_sell: Decimal
    proceeds_received: Decimal
    reserve_x: Decimal
    reserve_y: Decimal

    @property
    def mutated_state(self) -> bool:
        return self.decision in (BlockDecision.COMMITTED, BlockDecision.TERMINAL_SETTLEMENT)

    def operations(self, token_x: str, token_y: str) -> List[OperationRecord]:
        """Pool operations this block committed, in execution order."""
        if not self.mutated_state:
            return []
        ex = self.execution
        ops = [
            OperationRecord(
                kind=PoolOperation.LONG_TERM_SWAP,
                token_in=token_x,
                token_out=token_y,
                amount_in=ex.sell_amount,
                amount_out=ex.buy_amount,
                fee=ex.fee_amount,
            )
        ]
        if self.decision is BlockDecision.COMMITTED and self.quote is not None:
            ops.append(
                OperationRecord(
                    kind=PoolOperation.SWAP,
                    token_in=token_y,
                    token_out=token_x,
                    amount_in=self.quote.sell_amount,
                    amount_out=self.quote.buy_amount,
                    fee=self.quote.fee_amount,
                )
            )
        return ops


@dataclass
class SimulationResult:
    parameters: Parameters
    schedule: OrderSchedule
    context: SimulationContext
    initial_liquidity: Decimal
    outcomes: List[BlockOutcome] = field(default_factory=list)

    @property
    def trade_cost_percent(self) -> Decimal:
        return trade_cost_percent(
            self.schedule.actual_order_amount,
            self.context.order.proceeds_received,
            self.parameters.arithmetic(),
        )

    def decisions(self) -> Dict[BlockDecision, int]:
        counts = {d: 0 for d in BlockDecision}
        for outcome in self.outcomes:
            counts[outcome.decision] += 1
        return counts

    def to_record(self) -> Dict[str, str]:
        """Flat, ordered summary of the run (parameters and results)."""
        p = self.parameters
        s = self.schedule
        order = self.context.order
        stats = self.context.stats
        arb = stats.arbitrage
        values = {
            "stFee": p.short_term_fee_rate,
            "ltFee": p.long_term_fee_rate,
            "arbThreshold": p.arbitrage_profit_threshold_usd,
            "arbCost": p.arbitrage_cost_usd,
            "arbEvoGasUsd": p.evo_gas_usd,
            "initialLiquidityUsd": self.initial_liquidity,
            "finalLiquidityUsd": self.context.pool.liquidity,
            "ltSellSpecified": p.lt_order_amount,
            "ltSellActual": s.actual_order_amount,
            "durationInt": p.duration_intervals,
            "durationSec": s.order_length_seconds,
            "salesRate": s.sales_rate,
            "ltSold": s.actual_order_amount - order.remaining_to_sell,
            "ltUnsold": order.remaining_to_sell,
            "ltBought": order.proceeds_received,
            "ltFeesPaid": stats.x_fees_lt,
            "ltTradeCost": self.trade_cost_percent,
            "arbs": arb.swaps,
            "arbTotalSold": arb.y_sold,
            "arbTotalBought": arb.x_received,
            "arbFees": arb.y_fees,
            "arbGas": arb.gas_usd,
            "arbProfit": arb.net_profit_usd,
        }
        return {key: format_decimal(Decimal(value)) for key, value in values.items()}


class TwammSimulation:
    """Owns the mutable context for one run and steps it block by block."""

    def __init__(self, parameters: Parameters, keep_outcomes: bool = True) -> None:
        self.parameters = parameters
        self.arith: Arithmetic = parameters.arithmetic()
        self.schedule = parameters.schedule()
        reserve_x, reserve_y = parameters.initial_reserves()
        self.initial_liquidity = reserve_x + reserve_y
        self.context = SimulationContext(
            pool=PoolState(reserve_x=reserve_x, reserve_y=reserve_y),
            order=OrderProgress(
                remaining_to_sell=self.schedule.actual_order_amount,
                last_virtual_execution_time=self.schedule.start_time,
            ),
        )
        self.keep_outcomes = keep_outcomes
        self.outcomes: List[BlockOutcome] = []
        self.finished = False
        self.context.pool.require_liquidity()

    # ------------------------------------------------------------------ #
    def block_time(self, block_number: int) -> int:
        return self.schedule.start_time + block_number * self.parameters.block_length_seconds

    def evaluate(self, block_number: int) -> tuple[VirtualExecution, Optional[ArbitrageQuote]]:
        """Hypothetical LT execution and arbitrage at a block; no mutation."""
        p = self.parameters
        ctx = self.context
        execution = execute_virtual_orders(
            ctx.pool,
            ctx.order.last_virtual_execution_time,
            self.block_time(block_number),
            self.schedule.sales_rate,
            p.long_term_fee_rate,
            self.arith,
            p.token_x.decimals,
            p.token_y.decimals,
        )
        quote = quote_arbitrage(
            execution.reserve_x,
            execution.reserve_y,
            p.short_term_fee_rate,
            self.arith,
            p.token_x.decimals,
            p.token_y.decimals,
        )
        return execution, quote

    def step(self, block_number: int) -> BlockOutcome:
        p = self.parameters
        ctx = self.context
        execution, quote = self.evaluate(block_number)

        net_profit: Optional[Decimal] = None
        if quote is None:
            decision = BlockDecision.NO_ARB_CANDIDATE
        else:
            net_profit = quote.net_profit(p.arbitrage_cost_usd)
            decision = BlockDecision.CANDIDATE_EVALUATED

        if net_profit is not None and net_profit > p.arbitrage_profit_threshold_usd:
            decision = BlockDecision.COMMITTED
            ctx.stats.record_long_term(execution.buy_amount, execution.fee_amount)
            ctx.stats.record_arbitrage(
                y_sold=quote.sell_amount,
                y_fee=quote.fee_amount,
                x_received=quote.buy_amount,
                net_profit_usd=net_profit,
                gas_usd=p.arbitrage_cost_usd,
            )
            ctx.order.settle(execution.block_time, execution.sell_amount, execution.buy_amount)
            ctx.pool.apply(quote.reserve_x, quote.reserve_y)
            metrics.ARB_COMMITS.inc()
            metrics.ARB_GROSS_PROFIT.observe(float(quote.gross_profit))
        elif block_number == self.schedule.order_length_blocks:
            decision = BlockDecision.TERMINAL_SETTLEMENT
            ctx.stats.record_long_term(execution.buy_amount, execution.fee_amount)
            ctx.order.settle(execution.block_time, execution.sell_amount, execution.buy_amount)
            ctx.pool.apply(execution.reserve_x, execution.reserve_y)
            log.debug("terminal settlement at block %d sold=%s", block_number, execution.sell_amount)

        metrics.BLOCK_DECISIONS.labels(decision=decision.value).inc()
        outcome = BlockOutcome(
            block_number=block_number,
            block_time=execution.block_time,
            decision=decision,
            execution=execution,
            quote=quote,
            net_profit=net_profit,
            remaining_to_sell=ctx.order.remaining_to_sell,
            proceeds_received=ctx.order.proceeds_received,
            reserve_x=ctx.pool.reserve_x,
            reserve_y=ctx.pool.reserve_y,
        )
        if self.keep_outcomes:
            self.outcomes.append(outcome)
        return outcome

    def run(self) -> SimulationResult:
        """Step every block once; a simulation can only be run a single time."""
        if self.finished:
            raise SimulationError("simulation already ran; build a new TwammSimulation")
        self.finished = True
        started = time.perf_counter()
        log.info(
            "Simulating %s %s over %ds (%d blocks), liquidity=%s",
            format_decimal(self.schedule.actual_order_amount),
            self.parameters.token_x.symbol,
            self.schedule.order_length_seconds,
            self.schedule.order_length_blocks,
            format_decimal(self.initial_liquidity),
        )
        try:
            for block_number in range(self.schedule.order_length_blocks + 1):
                self.step(block_number)
        except Exception as exc:
            metrics.SIM_FAILURES.labels(type=type(exc).__name__).inc()
            raise
        result = SimulationResult(
            parameters=self.parameters,
            schedule=self.schedule,
            context=self.context,
            initial_liquidity=self.initial_liquidity,
            outcomes=list(self.outcomes),
        )
        metrics.SIM_RUNS.inc()
        metrics.RUN_DURATION_SECONDS.observe(time.perf_counter() - started)
        log.info(
            "Run complete: arbs=%d trade_cost=%s%% unsold=%s",
            self.context.stats.arbitrage.swaps,
            format_decimal(result.trade_cost_percent),
            format_decimal(self.context.order.remaining_to_sell),
        )
        return result


def run_simulation(parameters: Parameters, keep_outcomes: bool = True) -> SimulationResult:
    """Run one simulation to completion."""
    return TwammSimulation(parameters, keep_outcomes=keep_outcomes).run()


__all__ = [
    "BlockDecision",
    "BlockOutcome",
    "SimulationResult",
    "TwammSimulation",
    "run_simulation",
]
