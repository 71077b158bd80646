"""Closed-form profit-maximizing arbitrage against a constant-product pool.

An arbitrageur sells ``y`` of asset Y into the pool and receives ``x`` of
asset X. With ``m = 1 - fee`` and ``k = old_x * old_y``:

    x(y) = old_x - k / (old_y + m*y)
    p(y) = x(y) - y = old_x - (m*y^2 + old_y*y + k) / (old_y + m*y)

Setting dp/dy = 0 and dropping the (positive) denominator leaves

    m^2*y^2 + 2*old_y*m*y + old_y^2 - k*m = 0

which is solved with the quadratic formula. The larger root is the candidate
sell amount; a non-positive root means the pool offers no profitable trade.

Profit is measured by treating X and Y as equal in value, which only holds
for pegged pairs (e.g. the same stablecoin on two chains). Unpegged pairs
need an external price term that this model does not have.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from twamm_sim.common.numeric import ONE, Arithmetic

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuadraticRoots:
    plus: Decimal
    minus: Decimal

    @property
    def larger(self) -> Decimal:
        return max(self.plus, self.minus)


@dataclass(frozen=True)
class ArbitrageQuote:
    """Profit-maximizing Y->X trade and the reserves it would leave behind."""

    roots: QuadraticRoots
    sell_amount: Decimal
    fee_amount: Decimal
    sell_amount_net: Decimal
    buy_amount: Decimal
    effective_price: Optional[Decimal]
    gross_profit: Decimal
    reserve_x: Decimal
    reserve_y: Decimal
    pool_price: Decimal

    def net_profit(self, cost_usd: Decimal) -> Decimal:
        return self.gross_profit - cost_usd


def quadratic_formula(a: Decimal, b: Decimal, c: Decimal, arith: Arithmetic) -> Optional[QuadraticRoots]:
    """Real roots of ``a*y^2 + b*y + c``; None when there are none."""
    if a == 0:
        return None
    discriminant = b * b - Decimal(4) * a * c
    if discriminant < 0:
        return None
    sqrt_term = arith.sqrt(discriminant)
    two_a = Decimal(2) * a
    return QuadraticRoots(
        plus=arith.div(-b + sqrt_term, two_a),
        minus=arith.div(-b - sqrt_term, two_a),
    )


def optimal_sell_amount(
    old_x: Decimal,
    old_y: Decimal,
    fee: Decimal,
    arith: Arithmetic,
    decimals_y: int,
) -> tuple[Optional[QuadraticRoots], Decimal]:
    """Return the roots and the candidate Y sell amount (may be <= 0)."""
    m = ONE - fee
    k = old_x * old_y
    a = m * m
    b = Decimal(2) * old_y * m
    c = old_y * old_y - k * m
    roots = quadratic_formula(a, b, c, arith)
    if roots is None:
        return None, Decimal(0)
    return roots, arith.fix(roots.larger, decimals_y)


def quote_arbitrage(
    old_x: Decimal,
    old_y: Decimal,
    fee: Decimal,
    arith: Arithmetic,
    decimals_x: int,
    decimals_y: int,
) -> Optional[ArbitrageQuote]:
    """Size and price the best arbitrage against reserves ``(old_x, old_y)``.

    Returns None when no positive sell amount exists.
    """
    roots, y_sell = optimal_sell_amount(old_x, old_y, fee, arith, decimals_y)
    if roots is None or y_sell <= 0:
        return None

    k = old_x * old_y
    y_fee = arith.fix(y_sell * fee, decimals_y)
    y_sell_net = arith.fix(y_sell - y_fee, decimals_y)
    next_y = old_y + y_sell_net
    next_x = arith.div(k, next_y)
    x_buy = arith.fix(old_x - next_x, decimals_x)
    gross_profit = arith.fix(x_buy - y_sell, decimals_x)
    effective_price = arith.fix(arith.div(y_sell, x_buy), decimals_y) if x_buy > 0 else None

    next_y = next_y + y_fee
    pool_price = arith.fix(arith.div(next_x, next_y), decimals_x)
    log.debug("arb candidate y=%s x=%s gross=%s", y_sell, x_buy, gross_profit)
    return ArbitrageQuote(
        roots=roots,
        sell_amount=y_sell,
        fee_amount=y_fee,
        sell_amount_net=y_sell_net,
        buy_amount=x_buy,
        effective_price=effective_price,
        gross_profit=gross_profit,
        reserve_x=next_x,
        reserve_y=next_y,
        pool_price=pool_price,
    )


__all__ = [
    "QuadraticRoots",
    "ArbitrageQuote",
    "quadratic_formula",
    "optimal_sell_amount",
    "quote_arbitrage",
]
