"""
Calibrated curve representations.

Curves are immutable once built: the interpolator is fitted in the
constructor and every query is a pure function of time. All times are year
fractions (ACT/365) from the valuation date.

Provides:
- YieldCurve: common discount-factor based API (zero, forward, instantaneous forward)
- InterpolatedYieldCurve: continuously compounded zero rates interpolated on node times
- DiscountFactorCurve: discount factors interpolated on node times
- ConstantYieldCurve: one continuously compounded rate
- PriceIndexCurve: interpolated price index levels
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

import numpy as np

from ..conventions import CompoundingConvention
from .interpolation import Interpolator, LinearInterpolator


class YieldCurve(ABC):
    """
    Discounting curve.

    Attributes:
        name: Curve name, unique within a provider

    Conventions:
        - Zero rates are continuously compounded
        - Discount factor at t<=0 is 1.0
    """

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def discount_factor(self, t: float) -> float:
        """Discount factor P(0,t)."""

    @property
    @abstractmethod
    def parameters(self) -> np.ndarray:
        """Values the curve was built from."""

    @property
    def parameter_count(self) -> int:
        return len(self.parameters)

    def zero_rate(
        self,
        t: float,
        compounding: CompoundingConvention = CompoundingConvention.CONTINUOUS
    ) -> float:
        """
        Get zero rate z(t).

        Args:
            t: Year fraction
            compounding: Compounding convention for output

        Returns:
            Zero rate (default continuously compounded)
        """
        if t <= 0:
            t = 1e-6
        zr_cont = -np.log(self.discount_factor(t)) / t
        return float(convert_continuous_rate(zr_cont, t, compounding))

    def forward_rate(
        self,
        t1: float,
        t2: float,
        accrual: Optional[float] = None,
        compounding: CompoundingConvention = CompoundingConvention.SIMPLE
    ) -> float:
        """
        Get forward rate f(t1, t2).

        Args:
            t1: Start time
            t2: End time
            accrual: Accrual factor of the period; defaults to t2 - t1
            compounding: SIMPLE or CONTINUOUS

        Returns:
            Forward rate between t1 and t2
        """
        if t2 <= t1:
            raise ValueError("t2 must be greater than t1")

        df1 = self.discount_factor(t1)
        df2 = self.discount_factor(t2)

        if compounding == CompoundingConvention.CONTINUOUS:
            return float(-np.log(df2 / df1) / (t2 - t1))
        delta = accrual if accrual is not None else t2 - t1
        return float((df1 / df2 - 1) / delta)

    def instantaneous_forward(self, t: float, dt: float = 1e-5) -> float:
        """Instantaneous forward rate f(t) = -d/dt log P(0,t)."""
        t = max(t, dt)
        return float(-(np.log(self.discount_factor(t + dt)) - np.log(self.discount_factor(t - dt))) / (2 * dt))


class _InterpolatedCurve(YieldCurve):
    """Shared storage for curves defined by node times and node values."""

    def __init__(self, name: str, times, values, interpolator: Interpolator):
        super().__init__(name)
        self._times = np.asarray(times, dtype=np.float64)
        self._values = np.asarray(values, dtype=np.float64)
        self._interpolator = interpolator
        self._interpolator.fit(self._times, self._values)

    @property
    def parameters(self) -> np.ndarray:
        return self._values.copy()

    @property
    def node_times(self) -> np.ndarray:
        return self._times.copy()

    @property
    def interpolator(self) -> Interpolator:
        return self._interpolator

    def get_nodes(self) -> List[Tuple[float, float]]:
        """List of (time, value) node pairs."""
        return list(zip(self._times.tolist(), self._values.tolist()))

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(name={self.name!r}, nodes={len(self._times)}, "
                f"interpolator={self._interpolator.name!r})")


class InterpolatedYieldCurve(_InterpolatedCurve):
    """
    Yield curve from continuously compounded zero rates at node times.

    DF(t) = exp(-z(t) * t) with z interpolated (and extrapolated) by the
    supplied interpolator.
    """

    def discount_factor(self, t: float) -> float:
        if t <= 0:
            return 1.0
        return float(np.exp(-self._interpolator.interpolate(t) * t))

    def zero_rate(self, t, compounding=CompoundingConvention.CONTINUOUS):
        zr_cont = self._interpolator.interpolate(max(t, 0.0))
        if t <= 0:
            return float(zr_cont)
        return float(convert_continuous_rate(zr_cont, t, compounding))


class DiscountFactorCurve(_InterpolatedCurve):
    """Yield curve interpolating discount factors directly."""

    def discount_factor(self, t: float) -> float:
        if t <= 0:
            return 1.0
        return float(self._interpolator.interpolate(t))


class ConstantYieldCurve(YieldCurve):
    """Flat continuously compounded rate."""

    def __init__(self, name: str, rate: float):
        super().__init__(name)
        self.rate = float(rate)

    def discount_factor(self, t: float) -> float:
        if t <= 0:
            return 1.0
        return float(np.exp(-self.rate * t))

    @property
    def parameters(self) -> np.ndarray:
        return np.array([self.rate])

    def __repr__(self) -> str:
        return f"ConstantYieldCurve(name={self.name!r}, rate={self.rate})"


class PriceIndexCurve:
    """
    Price index levels interpolated on node times.

    Attributes:
        name: Curve name
    """

    def __init__(self, name: str, times, values, interpolator: Interpolator):
        self.name = name
        self._times = np.asarray(times, dtype=np.float64)
        self._values = np.asarray(values, dtype=np.float64)
        self._interpolator = interpolator
        self._interpolator.fit(self._times, self._values)

    def price_index(self, t: float) -> float:
        return float(self._interpolator.interpolate(t))

    @property
    def parameters(self) -> np.ndarray:
        return self._values.copy()

    @property
    def parameter_count(self) -> int:
        return len(self._values)

    @property
    def node_times(self) -> np.ndarray:
        return self._times.copy()

    def __repr__(self) -> str:
        return f"PriceIndexCurve(name={self.name!r}, nodes={len(self._times)})"


def convert_continuous_rate(rate: float, t: float, compounding: CompoundingConvention) -> float:
    """Convert a continuously compounded zero rate to another compounding convention."""
    if compounding == CompoundingConvention.CONTINUOUS:
        return rate
    if compounding == CompoundingConvention.SIMPLE:
        return (np.exp(rate * t) - 1) / t
    n = compounding.periods_per_year
    return n * (np.exp(rate / n) - 1)


def to_continuous_rate(rate: float, t: float, compounding: CompoundingConvention) -> float:
    """Inverse of convert_continuous_rate."""
    if compounding == CompoundingConvention.CONTINUOUS:
        return rate
    if compounding == CompoundingConvention.SIMPLE:
        return np.log(1 + rate * t) / t
    n = compounding.periods_per_year
    return n * np.log(1 + rate / n)


def create_flat_curve(
    name: str,
    rate: float,
    max_tenor_years: float = 30.0
) -> InterpolatedYieldCurve:
    """
    Create a flat yield curve.

    Args:
        name: Curve name
        rate: Flat continuously compounded rate
        max_tenor_years: Maximum tenor in years

    Returns:
        Flat curve
    """
    times = [t for t in (0.25, 0.5, 1, 2, 5, 10, 20) if t < max_tenor_years] + [max_tenor_years]
    return InterpolatedYieldCurve(name, times, [rate] * len(times), LinearInterpolator())


__all__ = [
    "YieldCurve",
    "InterpolatedYieldCurve",
    "DiscountFactorCurve",
    "ConstantYieldCurve",
    "PriceIndexCurve",
    "convert_continuous_rate",
    "to_continuous_rate",
    "create_flat_curve",
]
