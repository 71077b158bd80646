"""Mutable simulation state: pool reserves and long-term order progress."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal

from twamm_sim.common.errors import DegenerateArithmeticError
from twamm_sim.common.numeric import ZERO
from twamm_sim.simulator.stats import SimulationStats


@dataclass
class PoolState:
    """Reserves of a two-asset constant-product pool.

    ``k`` is derived from the current reserves every time it is read; fees
    reinjected into the reserves change it between steps.
    """

    reserve_x: Decimal
    reserve_y: Decimal

    @property
    def k(self) -> Decimal:
        return self.reserve_x * self.reserve_y

    @property
    def liquidity(self) -> Decimal:
        return self.reserve_x + self.reserve_y

    def require_liquidity(self) -> None:
        if self.reserve_x <= 0 or self.reserve_y <= 0:
            raise DegenerateArithmeticError(
                f"pool has no liquidity on one side (x={self.reserve_x}, y={self.reserve_y})"
            )

    def apply(self, reserve_x: Decimal, reserve_y: Decimal) -> None:
        if reserve_x < 0 or reserve_y < 0:
            raise DegenerateArithmeticError(f"negative reserves x={reserve_x} y={reserve_y}")
        self.reserve_x = reserve_x
        self.reserve_y = reserve_y

    def snapshot(self) -> "PoolState":
        return replace(self)


@dataclass
class OrderProgress:
    """Bookkeeping for the single long-term order being executed."""

    remaining_to_sell: Decimal
    proceeds_received: Decimal = ZERO
    last_virtual_execution_time: int = 0

    def settle(self, block_time: int, sold: Decimal, bought: Decimal) -> None:
        self.last_virtual_execution_time = block_time
        self.remaining_to_sell -= sold
        self.proceeds_received += bought


@dataclass
class SimulationContext:
    """Everything the decision policy mutates; owned by one simulation."""

    pool: PoolState
    order: OrderProgress
    stats: SimulationStats = field(default_factory=SimulationStats)


__all__ = ["PoolState", "OrderProgress", "SimulationContext"]
