"""
Newton root finder for vector functions.

All iteration state (current point, residual, Jacobian) lives in local
variables of ``find_root``, so one finder can serve concurrent calibrations.
"""

from dataclasses import dataclass
from typing import Callable, Sequence
import logging

import numpy as np
from scipy import linalg

from ..errors import CalibrationDidNotConvergeError

logger = logging.getLogger(__name__)


@dataclass
class RootResult:
    """Result of a root search."""
    x: np.ndarray
    iterations: int
    residual_norm: float


class NewtonVectorRootFinder:
    """
    Newton iteration x <- x - J(x)^-1 f(x).

    Converged only when ||f(x)|| <= absolute_tolerance. A step of at most
    relative_tolerance * (1 + ||x||) that no longer reduces the residual
    means the iteration has stalled, which is a failure.

    Attributes:
        absolute_tolerance: Residual norm target
        relative_tolerance: Step size target relative to the point
        max_iterations: Newton steps allowed
    """

    def __init__(
        self,
        absolute_tolerance: float = 1e-10,
        relative_tolerance: float = 1e-10,
        max_iterations: int = 100
    ):
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")
        self.absolute_tolerance = absolute_tolerance
        self.relative_tolerance = relative_tolerance
        self.max_iterations = max_iterations

    def find_root(
        self,
        function: Callable[[np.ndarray], np.ndarray],
        jacobian: Callable[[np.ndarray], np.ndarray],
        start: np.ndarray,
        names: Sequence[str] = ()
    ) -> RootResult:
        """
        Solve function(x) = 0 from ``start``.

        Args:
            function: Residual vector function
            jacobian: Jacobian of ``function``
            start: Initial point
            names: Curve names, for error messages

        Returns:
            RootResult with the root, Newton steps taken and final residual norm

        Raises:
            CalibrationDidNotConvergeError: If the iteration stalls above the
                residual tolerance or max_iterations steps do not reach it
        """
        x = np.array(start, dtype=np.float64)
        residual = np.asarray(function(x), dtype=np.float64)
        norm = float(np.linalg.norm(residual))

        for iteration in range(1, self.max_iterations + 1):
            if norm <= self.absolute_tolerance:
                return RootResult(x, iteration - 1, norm)

            step = self._solve(np.asarray(jacobian(x), dtype=np.float64), -residual)
            x = x + step
            previous_norm = norm
            residual = np.asarray(function(x), dtype=np.float64)
            norm = float(np.linalg.norm(residual))
            logger.debug("Newton iteration %d: residual norm %.3e, step norm %.3e",
                         iteration, norm, np.linalg.norm(step))

            small_step = np.linalg.norm(step) <= self.relative_tolerance * (1.0 + np.linalg.norm(x))
            if small_step and norm > self.absolute_tolerance and norm >= previous_norm:
                logger.warning("Newton iteration stalled at residual norm %.3e", norm)
                raise CalibrationDidNotConvergeError(iteration, norm, names)

        if norm <= self.absolute_tolerance:
            return RootResult(x, self.max_iterations, norm)
        raise CalibrationDidNotConvergeError(self.max_iterations, norm, names)

    @staticmethod
    def _solve(matrix: np.ndarray, rhs: np.ndarray) -> np.ndarray:
        if matrix.shape[0] != matrix.shape[1]:
            raise ValueError(f"Jacobian must be square, got shape {matrix.shape}")
        try:
            return linalg.solve(matrix, rhs)
        except linalg.LinAlgError:
            logger.warning("Singular Jacobian, using least squares step")
            return linalg.lstsq(matrix, rhs)[0]


__all__ = ["NewtonVectorRootFinder", "RootResult"]
