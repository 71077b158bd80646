"""Error taxonomy for the simulator.

Rounding to fixed decimal places is expected and never raised as an error.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for failures that abort a simulation run."""


class InvalidParameterError(SimulationError, ValueError):
    """Run parameters were rejected before the block loop started."""


class DegenerateArithmeticError(SimulationError, ArithmeticError):
    """A computation would divide by zero or work on an empty pool."""


__all__ = [
    "SimulationError",
    "InvalidParameterError",
    "DegenerateArithmeticError",
]
