"""Running totals accumulated over a simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from twamm_sim.common.numeric import ZERO, Arithmetic


@dataclass
class ArbitrageStats:
    swaps: int = 0
    y_sold: Decimal = ZERO
    x_received: Decimal = ZERO
    y_fees: Decimal = ZERO
    net_profit_usd: Decimal = ZERO
    gas_usd: Decimal = ZERO


@dataclass
class SimulationStats:
    """Passive sink; the decision policy is the only writer."""

    y_proceeds_lt: Decimal = ZERO
    x_fees_lt: Decimal = ZERO
    arbitrage: ArbitrageStats = field(default_factory=ArbitrageStats)

    def record_long_term(self, proceeds: Decimal, fee: Decimal) -> None:
        self.y_proceeds_lt += proceeds
        self.x_fees_lt += fee

    def record_arbitrage(
        self,
        y_sold: Decimal,
        y_fee: Decimal,
        x_received: Decimal,
        net_profit_usd: Decimal,
        gas_usd: Decimal,
    ) -> None:
        arb = self.arbitrage
        arb.swaps += 1
        arb.y_sold += y_sold
        arb.y_fees += y_fee
        arb.x_received += x_received
        arb.net_profit_usd += net_profit_usd
        arb.gas_usd += gas_usd


def trade_cost_percent(actual_amount: Decimal, proceeds: Decimal, arith: Arithmetic) -> Decimal:
    """Share of the order value lost to fees and price impact, in percent."""
    return arith.div(Decimal(100) * (actual_amount - proceeds), actual_amount)


__all__ = ["ArbitrageStats", "SimulationStats", "trade_cost_percent"]
