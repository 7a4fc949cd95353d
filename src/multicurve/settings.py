"""
Calibration settings.

One dataclass holds every tunable of a calibration run: Newton tolerances
and iteration limit, the finite-difference scheme for Jacobians and the
initial guesses of the curve generators.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict


@dataclass(frozen=True)
class CalibrationSettings:
    """
    Calibration tunables.

    Attributes:
        absolute_tolerance: Residual norm below which Newton stops
        relative_tolerance: Step size (relative to 1 + |x|) below which Newton stops
        max_iterations: Maximum Newton steps per curve group
        finite_difference_shift: Parameter bump for Jacobians
        finite_difference_method: "central" or "forward"
        initial_rate: Starting zero rate for yield curve parameters
        initial_price_index: Starting level for price index curve parameters
    """
    absolute_tolerance: float = 1e-10
    relative_tolerance: float = 1e-10
    max_iterations: int = 100
    finite_difference_shift: float = 1e-6
    finite_difference_method: str = "central"
    initial_rate: float = 0.01
    initial_price_index: float = 100.0

    def __post_init__(self):
        if self.absolute_tolerance <= 0 or self.relative_tolerance <= 0:
            raise ValueError("Tolerances must be positive")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if self.finite_difference_method not in ("central", "forward"):
            raise ValueError(f"Unknown finite difference method: {self.finite_difference_method}")

    @classmethod
    def default(cls) -> "CalibrationSettings":
        """Settings used when none are given."""
        return cls()

    @classmethod
    def strict(cls) -> "CalibrationSettings":
        """
        Tight tolerances for regression runs.

        Returns:
            CalibrationSettings with 1e-12 tolerances and central differences
        """
        return cls(
            absolute_tolerance=1e-12,
            relative_tolerance=1e-12,
            max_iterations=200,
            finite_difference_shift=1e-7,
        )

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CalibrationSettings":
        """Create from a dictionary; unknown keys raise ValueError."""
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown calibration settings: {sorted(unknown)}")
        return cls(**d)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["CalibrationSettings"]
