"""
Residual and sensitivity calculators used by the calibration repository.

Provides:
- ParSpreadMarketQuoteCalculator: model quote minus market quote (default residual)
- PresentValueCalculator: instrument value at the market quote
- FiniteDifferenceSensitivityCalculator: Jacobian of any vector function by bumping
"""

from typing import Callable

import numpy as np

from ..instruments.derivatives import InstrumentDerivative


class ParSpreadMarketQuoteCalculator:
    """Residual = par spread in quote units; zero when the curves reprice the quote."""

    name = "par_spread_market_quote"

    def __call__(self, derivative: InstrumentDerivative, provider) -> float:
        return derivative.par_spread(provider)


class PresentValueCalculator:
    """Residual = present value at the market quote."""

    name = "present_value"

    def __call__(self, derivative: InstrumentDerivative, provider) -> float:
        return derivative.present_value(provider)


class FiniteDifferenceSensitivityCalculator:
    """
    Jacobian by finite differences.

    Attributes:
        shift: Absolute parameter bump
        method: "central" or "forward"
    """

    def __init__(self, shift: float = 1e-6, method: str = "central"):
        if shift <= 0:
            raise ValueError(f"Shift must be positive, got {shift}")
        if method not in ("central", "forward"):
            raise ValueError(f"Unknown finite difference method: {method}")
        self.shift = shift
        self.method = method

    def jacobian(self, function: Callable[[np.ndarray], np.ndarray], x: np.ndarray) -> np.ndarray:
        """
        d function / d x.

        Args:
            function: Vector function of the parameter vector
            x: Point of evaluation

        Returns:
            Matrix with one row per function output and one column per parameter
        """
        x = np.asarray(x, dtype=np.float64)
        base = np.asarray(function(x), dtype=np.float64) if self.method == "forward" else None
        columns = []
        for j in range(len(x)):
            up = x.copy()
            up[j] += self.shift
            if self.method == "forward":
                columns.append((np.asarray(function(up)) - base) / self.shift)
            else:
                down = x.copy()
                down[j] -= self.shift
                columns.append((np.asarray(function(up)) - np.asarray(function(down))) / (2 * self.shift))
        if not columns:
            return np.zeros((len(np.asarray(function(x))), 0))
        return np.column_stack(columns)


__all__ = [
    "ParSpreadMarketQuoteCalculator",
    "PresentValueCalculator",
    "FiniteDifferenceSensitivityCalculator",
]
