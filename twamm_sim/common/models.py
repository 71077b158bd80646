"""Validated run configuration for the long-term order simulator.

These Pydantic models are the contract between the configuration layer and
the simulation core. They are frozen: a run's parameters never change once
the block loop starts.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from twamm_sim.common.errors import DegenerateArithmeticError
from twamm_sim.common.numeric import DECIMAL_PLACES, ROUND_HALF_CEIL, ROUNDING_MODES, Arithmetic, to_fixed

GWEI_PER_ETH = Decimal("1e9")


class Token(BaseModel):
    """Asset held by the pool."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Ticker, e.g. USDC-X")
    description: str = ""
    decimals: int = Field(18, ge=0, le=36, description="Decimal places amounts are fixed to")

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, v: str) -> str:
        if not v or not v.isascii():
            raise ValueError("symbol required and must be ASCII")
        return v.upper()


USDC_X = Token(symbol="USDC-X", description="USDC on Chain X", decimals=18)
USDC_Y = Token(symbol="USDC-Y", description="USDC on Chain Y", decimals=18)


class DexTradeCost(BaseModel):
    """Observed USD cost of a plain DEX trade on the target chain."""

    model_config = ConfigDict(frozen=True)

    high: Decimal = Decimal("0.237")
    avg: Decimal = Decimal("0.124")
    low: Decimal = Decimal("0.0728")


class GasCostModel(BaseModel):
    """Static estimate of what one arbitrage costs to land on chain.

    The virtual-order execution gas (``est_evo_gas``) does not yet include the
    interval state write.
    """

    model_config = ConfigDict(frozen=True)

    est_evo_gas: Decimal = Field(Decimal("219806"), ge=0)
    usd_per_eth: Decimal = Field(Decimal("1879.75"), ge=0)
    gwei_base_fee: Decimal = Field(Decimal("0.0837"), ge=0)
    gwei_priority_fee: Decimal = Field(Decimal("0.1080"), ge=0)
    dex_trade: DexTradeCost = Field(default_factory=DexTradeCost)
    # arbitrage = two DEX trades at 1.5x the average trade gas
    trade_gas_multiplier: Decimal = Field(Decimal("1.5"), ge=0)
    trades_per_arbitrage: int = Field(2, ge=1)

    @property
    def gwei_per_gas(self) -> Decimal:
        return self.gwei_base_fee + self.gwei_priority_fee

    @property
    def est_evo_usd(self) -> Decimal:
        return self.est_evo_gas * self.gwei_per_gas * self.usd_per_eth / GWEI_PER_ETH

    def arbitrage_cost_usd(self) -> Decimal:
        return self.dex_trade.avg * self.trade_gas_multiplier * self.trades_per_arbitrage


DEFAULT_ARBITRAGE_COST_USD = GasCostModel().arbitrage_cost_usd()
DEFAULT_EVO_GAS_USD = GasCostModel().est_evo_usd


class OrderSchedule(BaseModel):
    """Timing and sales rate derived once per run."""

    model_config = ConfigDict(frozen=True)

    start_time: int
    last_interval_boundary: int
    order_expiry_time: int
    order_length_seconds: int
    order_length_blocks: int
    sales_rate: Decimal
    actual_order_amount: Decimal


class Parameters(BaseModel):
    """Immutable configuration of one simulation run."""

    model_config = ConfigDict(frozen=True)

    total_liquidity_usd: Decimal = Field(Decimal("20000000"), gt=0)
    lt_order_amount: Decimal = Field(Decimal("1000000"), gt=0)
    duration_intervals: int = Field(2, ge=0, description="Intervals after the implicit protection interval")
    short_term_fee_rate: Decimal = Field(Decimal("0.00005"), ge=0, lt=1)
    long_term_fee_rate: Decimal = Field(Decimal("0.0001"), ge=0, lt=1)
    arbitrage_cost_usd: Decimal = Field(DEFAULT_ARBITRAGE_COST_USD, ge=0)
    arbitrage_profit_threshold_usd: Decimal = Decimal("1")
    # reported alongside arbitrage cost; not charged to the arbitrageur
    evo_gas_usd: Decimal = Field(DEFAULT_EVO_GAS_USD, ge=0, description="USD gas of one virtual-order execution")
    block_length_seconds: int = Field(2, gt=0)
    interval_length_seconds: int = Field(300, gt=0)
    start_time_seconds: int = Field(0, ge=0)
    token_x: Token = USDC_X
    token_y: Token = USDC_Y
    decimal_places: int = Field(DECIMAL_PLACES, ge=0, le=36)
    rounding_mode: str = ROUND_HALF_CEIL

    @field_validator("rounding_mode")
    @classmethod
    def _known_rounding(cls, v: str) -> str:
        if v not in ROUNDING_MODES:
            raise ValueError(f"rounding_mode must be one of {sorted(ROUNDING_MODES)}")
        return v

    @model_validator(mode="after")
    def _blocks_fit_intervals(self) -> "Parameters":
        if self.interval_length_seconds % self.block_length_seconds:
            raise ValueError("interval_length_seconds must be a multiple of block_length_seconds")
        if self.start_time_seconds % self.block_length_seconds:
            raise ValueError("start_time_seconds must fall on a block boundary")
        return self

    # ------------------------------------------------------------------ #
    def arithmetic(self) -> Arithmetic:
        return Arithmetic(places=self.decimal_places, rounding=self.rounding_mode)

    def initial_reserves(self) -> tuple[Decimal, Decimal]:
        """Split the liquidity evenly between the two sides of the pool."""
        half = self.arithmetic().div(self.total_liquidity_usd, Decimal(2))
        return half, half

    def schedule(self) -> OrderSchedule:
        """Compute the order expiry, length and sales rate.

        The order always runs one extra interval past ``duration_intervals``
        so a zero-interval order still has a non-zero length.
        """
        arith = self.arithmetic()
        start = self.start_time_seconds
        interval = self.interval_length_seconds
        last_boundary = start - (start % interval)
        expiry = (self.duration_intervals + 1) * interval + last_boundary
        length = expiry - start
        # truncated so the order never sells more than was requested
        sales_rate = to_fixed(self.lt_order_amount / Decimal(length), self.token_x.decimals, ROUND_DOWN)
        if sales_rate <= 0:
            raise DegenerateArithmeticError(
                f"sales rate rounds to zero: {self.lt_order_amount} over {length}s at {self.token_x.decimals} decimals"
            )
        actual = arith.fix(sales_rate * length, self.token_x.decimals)
        return OrderSchedule(
            start_time=start,
            last_interval_boundary=last_boundary,
            order_expiry_time=expiry,
            order_length_seconds=length,
            order_length_blocks=length // self.block_length_seconds,
            sales_rate=sales_rate,
            actual_order_amount=actual,
        )


__all__ = [
    "Token",
    "USDC_X",
    "USDC_Y",
    "DexTradeCost",
    "GasCostModel",
    "DEFAULT_ARBITRAGE_COST_USD",
    "DEFAULT_EVO_GAS_USD",
    "OrderSchedule",
    "Parameters",
]
