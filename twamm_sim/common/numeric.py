"""Fixed-precision Decimal helpers.

Every quantity in the simulator is a ``Decimal``. Additions, subtractions and
multiplications run at the module's working precision (effectively exact for
pool-sized values); divisions and square roots are rounded to a fixed number
of decimal places, and intermediate amounts are re-fixed to the traded
token's decimals before being reused. The order in which values are fixed
changes the numeric results, so callers fix exactly where the simulation
does and nowhere else.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import (
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
    Decimal,
    getcontext,
)

from twamm_sim.common.errors import DegenerateArithmeticError

getcontext().prec = 80

DECIMAL_PLACES = 18
ZERO = Decimal(0)
ONE = Decimal(1)

# Ties toward +infinity / -infinity; not provided by the decimal module.
ROUND_HALF_CEIL = "ROUND_HALF_CEIL"
ROUND_HALF_FLOOR = "ROUND_HALF_FLOOR"

ROUNDING_MODES = frozenset(
    {
        ROUND_HALF_CEIL,
        ROUND_HALF_FLOOR,
        ROUND_CEILING,
        ROUND_DOWN,
        ROUND_FLOOR,
        ROUND_HALF_DOWN,
        ROUND_HALF_EVEN,
        ROUND_HALF_UP,
        ROUND_UP,
    }
)


def _decimal_rounding(mode: str, value: Decimal) -> str:
    if mode == ROUND_HALF_CEIL:
        return ROUND_HALF_UP if value >= 0 else ROUND_HALF_DOWN
    if mode == ROUND_HALF_FLOOR:
        return ROUND_HALF_DOWN if value >= 0 else ROUND_HALF_UP
    return mode


def to_fixed(value: Decimal, places: int = DECIMAL_PLACES, rounding: str = ROUND_HALF_CEIL) -> Decimal:
    """Round ``value`` to ``places`` decimal places."""
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"unknown rounding mode {rounding!r}")
    exponent = Decimal(1).scaleb(-places)
    return Decimal(value).quantize(exponent, rounding=_decimal_rounding(rounding, Decimal(value)))


def format_decimal(value: Decimal) -> str:
    """Plain string without trailing zeros or exponent (``1.50`` -> ``1.5``)."""
    value = Decimal(value)
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


@dataclass(frozen=True)
class Arithmetic:
    """Rounding settings shared by every component of one run.

    ``places`` bounds the result of divisions and square roots; ``fix`` rounds
    to ``places`` unless a token's decimal count is passed explicitly.
    """

    places: int = DECIMAL_PLACES
    rounding: str = ROUND_HALF_CEIL

    def __post_init__(self) -> None:
        if self.rounding not in ROUNDING_MODES:
            raise ValueError(f"unknown rounding mode {self.rounding!r}")
        if self.places < 0:
            raise ValueError("places must be >= 0")

    def fix(self, value: Decimal, places: int | None = None) -> Decimal:
        return to_fixed(value, self.places if places is None else places, self.rounding)

    def div(self, numerator: Decimal, denominator: Decimal) -> Decimal:
        if denominator == 0:
            raise DegenerateArithmeticError(f"division by zero: {numerator} / {denominator}")
        return self.fix(Decimal(numerator) / Decimal(denominator))

    def sqrt(self, value: Decimal) -> Decimal:
        if value < 0:
            raise DegenerateArithmeticError(f"square root of negative value {value}")
        return self.fix(Decimal(value).sqrt())


__all__ = [
    "DECIMAL_PLACES",
    "ZERO",
    "ONE",
    "ROUND_HALF_CEIL",
    "ROUND_HALF_FLOOR",
    "ROUNDING_MODES",
    "Arithmetic",
    "to_fixed",
    "format_decimal",
]
