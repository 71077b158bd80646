"""Operation vocabulary for a full TWAMM pool.

The simulator only ever performs two of these (an arbitrage ``SWAP`` and the
``LONG_TERM_SWAP`` virtual execution). ``TwammPool`` is the interface a
complete pool model would implement.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class PoolOperation(str, Enum):
    MINT = "mint"
    BURN = "burn"
    SWAP = "swap"
    LONG_TERM_SWAP = "long_term_swap"
    WITHDRAW = "withdraw"
    CANCEL = "cancel"


@dataclass(frozen=True)
class OperationRecord:
    """One committed effect on the pool."""

    kind: PoolOperation
    token_in: str
    token_out: str
    amount_in: Decimal
    amount_out: Decimal
    fee: Decimal


class TwammPool(abc.ABC):
    @abc.abstractmethod
    def mint(self, amount_x: Decimal, amount_y: Decimal) -> Decimal:
        """Add liquidity; return LP units issued."""
        raise NotImplementedError

    @abc.abstractmethod
    def burn(self, units: Decimal) -> tuple[Decimal, Decimal]:
        """Remove liquidity; return the reserves released."""
        raise NotImplementedError

    @abc.abstractmethod
    def swap(self, token_in: str, amount_in: Decimal) -> OperationRecord:
        raise NotImplementedError

    @abc.abstractmethod
    def long_term_swap(self, token_in: str, amount_in: Decimal, intervals: int) -> int:
        """Place a long-term order; return its order id."""
        raise NotImplementedError

    @abc.abstractmethod
    def withdraw(self, order_id: int) -> OperationRecord:
        raise NotImplementedError

    @abc.abstractmethod
    def cancel(self, order_id: int) -> OperationRecord:
        raise NotImplementedError

    @abc.abstractmethod
    def execute_virtual_orders(self, block_time: int) -> None:
        raise NotImplementedError


__all__ = ["PoolOperation", "OperationRecord", "TwammPool"]
