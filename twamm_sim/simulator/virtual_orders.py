"""Lazy execution of the long-term order against a constant-product pool.

The order sells ``sales_rate`` units of X per second. Nothing is executed
until a block commits; at that point everything accumulated since the last
committed execution is sold as one virtual trade:

    sell     = sales_rate * (t - last_execution)
    fee      = sell * lt_fee
    k        = x * y                    (current reserves, recomputed)
    next_x   = x + (sell - fee)
    next_y   = k / next_x
    buy      = y - next_y
    next_x  += fee                      (fee stays with the LPs)

Every intermediate value is fixed to the token's decimals before it is used
again.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from twamm_sim.common.errors import DegenerateArithmeticError
from twamm_sim.common.numeric import Arithmetic
from twamm_sim.simulator.pool import PoolState


@dataclass(frozen=True)
class VirtualExecution:
    """Hypothetical result of executing the order up to ``block_time``."""

    block_time: int
    elapsed_seconds: int
    sell_amount: Decimal
    fee_amount: Decimal
    sell_amount_net: Decimal
    buy_amount: Decimal
    effective_price: Optional[Decimal]
    reserve_x: Decimal
    reserve_y: Decimal
    pool_price: Decimal

    @property
    def k(self) -> Decimal:
        return self.reserve_x * self.reserve_y


def execute_virtual_orders(
    pool: PoolState,
    last_execution_time: int,
    block_time: int,
    sales_rate: Decimal,
    fee_rate: Decimal,
    arith: Arithmetic,
    decimals_x: int,
    decimals_y: int,
) -> VirtualExecution:
    """Compute the order's effect on ``pool`` without mutating it."""
    pool.require_liquidity()
    if sales_rate <= 0:
        raise DegenerateArithmeticError("sales rate must be positive")
    elapsed = block_time - last_execution_time
    if elapsed < 0:
        raise ValueError(f"block time {block_time} precedes last execution {last_execution_time}")

    k = pool.k
    sell = arith.fix(sales_rate * elapsed, decimals_x)
    fee = arith.fix(sell * fee_rate, decimals_x)
    sell_net = arith.fix(sell - fee, decimals_x)
    next_x = pool.reserve_x + sell_net
    next_y = arith.div(k, next_x)
    buy = arith.fix(pool.reserve_y - next_y, decimals_y)
    effective_price = arith.fix(arith.div(sell, buy), decimals_x) if buy > 0 else None

    next_x = next_x + fee
    pool_price = arith.fix(arith.div(next_x, next_y), decimals_x)
    return VirtualExecution(
        block_time=block_time,
        elapsed_seconds=elapsed,
        sell_amount=sell,
        fee_amount=fee,
        sell_amount_net=sell_net,
        buy_amount=buy,
        effective_price=effective_price,
        reserve_x=next_x,
        reserve_y=next_y,
        pool_price=pool_price,
    )


__all__ = ["VirtualExecution", "execute_virtual_orders"]
