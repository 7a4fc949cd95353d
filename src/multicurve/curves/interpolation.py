"""
Interpolation and extrapolation methods for curves.

Provides:
- LinearInterpolator: Linear interpolation
- LogLinearInterpolator: Linear interpolation of log values (positive data)
- CubicSplineInterpolator: Natural cubic spline
- StepInterpolator: Piecewise constant, value of the node on the left
- FlatExtrapolator, LinearExtrapolator, LogLinearExtrapolator,
  QuadraticLeftExtrapolator: behaviour outside the node range
- CombinedInterpolatorExtrapolator: interpolator with independent left and
  right extrapolators

All interpolators work with year fractions as x-coordinates. On their own
they extrapolate flat; wrap them in CombinedInterpolatorExtrapolator for any
other behaviour. ``node_sensitivity(t)`` returns the derivative of the
interpolated value with respect to each node value.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import numpy as np


class Interpolator(ABC):
    """Abstract base class for curve interpolation."""

    NAME = "Interpolator"
    supports_extrapolation = True

    def __init__(self):
        self.times: Optional[np.ndarray] = None
        self.values: Optional[np.ndarray] = None

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        """
        Fit the interpolator to data points.

        Args:
            times: Array of year fractions
            values: Array of node values
        """
        times = np.asarray(times, dtype=np.float64)
        values = np.asarray(values, dtype=np.float64)
        if len(times) != len(values):
            raise ValueError("Times and values must have same length")
        if len(times) < 1:
            raise ValueError("Need at least 1 point for interpolation")

        idx = np.argsort(times)
        self.times = times[idx]
        self.values = values[idx]
        if np.any(np.diff(self.times) <= 0):
            raise ValueError(f"Node times must be distinct, got {self.times}")
        self._fit()

    def _fit(self) -> None:
        """Hook for precomputation after the nodes are stored."""

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def size(self) -> int:
        self._check_fitted()
        return len(self.times)

    def _check_fitted(self) -> None:
        if self.times is None:
            raise RuntimeError("Interpolator not fitted")

    def _bracket(self, t: float) -> int:
        idx = int(np.searchsorted(self.times, t, side='right')) - 1
        return max(0, min(idx, len(self.times) - 2))

    def interpolate(self, t: float) -> float:
        """
        Interpolate at a single point, flat outside the node range.

        Args:
            t: Year fraction

        Returns:
            Interpolated value
        """
        self._check_fitted()
        if t <= self.times[0]:
            return float(self.values[0])
        if t >= self.times[-1]:
            return float(self.values[-1])
        return self._inner_value(t)

    def __call__(self, t: float) -> float:
        """Convenience method to call interpolate."""
        return self.interpolate(t)

    def derivative(self, t: float) -> float:
        """First derivative at t (zero in the flat extrapolated region)."""
        self._check_fitted()
        if t <= self.times[0] or t >= self.times[-1]:
            return 0.0
        return self._inner_derivative(t)

    def node_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of the value at t to each node value."""
        self._check_fitted()
        n = len(self.times)
        if t <= self.times[0] or t >= self.times[-1]:
            sens = np.zeros(n)
            sens[0 if t <= self.times[0] else -1] = 1.0
            return sens
        return self._inner_sensitivity(t)

    def edge_value(self, left: bool) -> float:
        self._check_fitted()
        return float(self.values[0 if left else -1])

    def edge_time(self, left: bool) -> float:
        self._check_fitted()
        return float(self.times[0 if left else -1])

    def edge_derivative(self, left: bool) -> float:
        """One-sided derivative at the first (left) or last node."""
        self._check_fitted()
        if len(self.times) < 2:
            return 0.0
        return self._inner_derivative(self.edge_time(left))

    def edge_derivative_sensitivity(self, left: bool) -> np.ndarray:
        """Sensitivity of ``edge_derivative`` to each node value."""
        return self._numerical_sensitivity(lambda interp: interp.edge_derivative(left))

    @abstractmethod
    def _inner_value(self, t: float) -> float:
        pass

    @abstractmethod
    def _inner_derivative(self, t: float) -> float:
        pass

    def _inner_sensitivity(self, t: float) -> np.ndarray:
        return self._numerical_sensitivity(lambda interp: interp._inner_value(t))

    def _numerical_sensitivity(self, fn: Callable[["Interpolator"], float], eps: float = 1e-7) -> np.ndarray:
        self._check_fitted()
        sens = np.zeros(len(self.times))
        for i in range(len(self.times)):
            h = eps * max(1.0, abs(self.values[i]))
            up, down = self.values.copy(), self.values.copy()
            up[i] += h
            down[i] -= h
            sens[i] = (fn(self._refit(up)) - fn(self._refit(down))) / (2 * h)
        return sens

    def _refit(self, values: np.ndarray) -> "Interpolator":
        clone = type(self)()
        clone.fit(self.times, values)
        return clone

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LinearInterpolator(Interpolator):
    """
    Linear interpolation.

    Simple linear interpolation between knot points.
    Extrapolates flat beyond boundaries.
    """

    NAME = "Linear"

    def _weights(self, t: float):
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        return idx, (t - t0) / (t1 - t0)

    def _inner_value(self, t: float) -> float:
        if len(self.times) == 1:
            return float(self.values[0])
        idx, w = self._weights(t)
        return float(self.values[idx] + w * (self.values[idx + 1] - self.values[idx]))

    def _inner_derivative(self, t: float) -> float:
        if len(self.times) == 1:
            return 0.0
        idx = self._bracket(t)
        return float((self.values[idx + 1] - self.values[idx]) / (self.times[idx + 1] - self.times[idx]))

    def _inner_sensitivity(self, t: float) -> np.ndarray:
        sens = np.zeros(len(self.times))
        idx, w = self._weights(t)
        sens[idx] = 1.0 - w
        sens[idx + 1] = w
        return sens

    def edge_derivative_sensitivity(self, left: bool) -> np.ndarray:
        n = len(self.times)
        sens = np.zeros(n)
        if n < 2:
            return sens
        i = 0 if left else n - 2
        h = self.times[i + 1] - self.times[i]
        sens[i] = -1.0 / h
        sens[i + 1] = 1.0 / h
        return sens


class LogLinearInterpolator(Interpolator):
    """
    Log-linear interpolation.

    Interpolates linearly in log space; on discount factors this
    corresponds to piecewise constant forward rates. Values must be positive.
    """

    NAME = "Log Linear"

    def _fit(self) -> None:
        if np.any(self.values <= 0):
            raise ValueError("Log-linear interpolation needs positive values")
        self.log_values = np.log(self.values)

    def _inner_value(self, t: float) -> float:
        if len(self.times) == 1:
            return float(self.values[0])
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        w = (t - t0) / (t1 - t0)
        return float(np.exp(self.log_values[idx] + w * (self.log_values[idx + 1] - self.log_values[idx])))

    def _inner_derivative(self, t: float) -> float:
        if len(self.times) == 1:
            return 0.0
        idx = self._bracket(t)
        slope = (self.log_values[idx + 1] - self.log_values[idx]) / (self.times[idx + 1] - self.times[idx])
        return float(self._inner_value(t) * slope)

    def _inner_sensitivity(self, t: float) -> np.ndarray:
        sens = np.zeros(len(self.times))
        idx = self._bracket(t)
        t0, t1 = self.times[idx], self.times[idx + 1]
        w = (t - t0) / (t1 - t0)
        value = self._inner_value(t)
        sens[idx] = value * (1.0 - w) / self.values[idx]
        sens[idx + 1] = value * w / self.values[idx + 1]
        return sens


class CubicSplineInterpolator(Interpolator):
    """
    Cubic spline interpolation.

    Uses natural cubic splines (second derivative = 0 at boundaries).
    Provides smooth first and second derivatives. The spline is linear in
    the node values, so node sensitivities are exact.
    """

    NAME = "Natural Cubic Spline"

    def _fit(self) -> None:
        n = len(self.times)
        if n < 3:
            # second derivatives vanish: degenerates to linear
            self._m_sens = np.zeros((n, n))
            return

        h = np.diff(self.times)

        # Natural spline: M[0] = M[n-1] = 0, M = A^-1 B y
        A = np.zeros((n, n))
        B = np.zeros((n, n))
        A[0, 0] = 1.0
        A[n-1, n-1] = 1.0
        for i in range(1, n-1):
            A[i, i-1] = h[i-1]
            A[i, i] = 2 * (h[i-1] + h[i])
            A[i, i+1] = h[i]
            B[i, i-1] = 6.0 / h[i-1]
            B[i, i] = -6.0 / h[i-1] - 6.0 / h[i]
            B[i, i+1] = 6.0 / h[i]

        self._m_sens = np.linalg.solve(A, B)

    def _segment(self, t: float):
        idx = self._bracket(t)
        h = self.times[idx + 1] - self.times[idx]
        dx = t - self.times[idx]
        return idx, h, dx

    def _value_weights(self, t: float) -> np.ndarray:
        """Row vector w with S(t) = w . y."""
        n = len(self.times)
        weights = np.zeros(n)
        if n == 1:
            weights[0] = 1.0
            return weights
        idx, h, dx = self._segment(t)
        e0 = np.zeros(n)
        e1 = np.zeros(n)
        e0[idx] = 1.0
        e1[idx + 1] = 1.0
        m0 = self._m_sens[idx]
        m1 = self._m_sens[idx + 1]
        b = (e1 - e0) / h - h * (m1 + 2 * m0) / 6.0
        return e0 + b * dx + (m0 / 2.0) * dx**2 + ((m1 - m0) / (6.0 * h)) * dx**3

    def _derivative_weights(self, t: float) -> np.ndarray:
        n = len(self.times)
        if n == 1:
            return np.zeros(n)
        idx, h, dx = self._segment(t)
        e0 = np.zeros(n)
        e1 = np.zeros(n)
        e0[idx] = 1.0
        e1[idx + 1] = 1.0
        m0 = self._m_sens[idx]
        m1 = self._m_sens[idx + 1]
        b = (e1 - e0) / h - h * (m1 + 2 * m0) / 6.0
        return b + m0 * dx + ((m1 - m0) / (2.0 * h)) * dx**2

    def _inner_value(self, t: float) -> float:
        return float(self._value_weights(t) @ self.values)

    def _inner_derivative(self, t: float) -> float:
        return float(self._derivative_weights(t) @ self.values)

    def _inner_sensitivity(self, t: float) -> np.ndarray:
        return self._value_weights(t)

    def edge_derivative_sensitivity(self, left: bool) -> np.ndarray:
        return self._derivative_weights(self.edge_time(left))

    def second_derivative(self, t: float) -> float:
        """Second derivative of cubic spline at point t."""
        self._check_fitted()
        if len(self.times) < 2 or t <= self.times[0] or t >= self.times[-1]:
            return 0.0
        idx, h, dx = self._segment(t)
        m = self._m_sens @ self.values
        return float(m[idx] + (m[idx + 1] - m[idx]) * dx / h)


class StepInterpolator(Interpolator):
    """Piecewise constant interpolation taking the value of the node on the left."""

    NAME = "Step"
    supports_extrapolation = False

    def _inner_value(self, t: float) -> float:
        idx = int(np.searchsorted(self.times, t, side='right')) - 1
        return float(self.values[max(idx, 0)])

    def _inner_derivative(self, t: float) -> float:
        return 0.0

    def _inner_sensitivity(self, t: float) -> np.ndarray:
        sens = np.zeros(len(self.times))
        idx = int(np.searchsorted(self.times, t, side='right')) - 1
        sens[max(idx, 0)] = 1.0
        return sens

    def edge_derivative_sensitivity(self, left: bool) -> np.ndarray:
        return np.zeros(len(self.times))


class Extrapolator(ABC):
    """Behaviour of a fitted interpolator outside its node range."""

    NAME = "Extrapolator"
    left_only = False

    @abstractmethod
    def extrapolate(self, interpolator: Interpolator, t: float, left: bool) -> float:
        pass

    @abstractmethod
    def derivative(self, interpolator: Interpolator, t: float, left: bool) -> float:
        pass

    @abstractmethod
    def node_sensitivity(self, interpolator: Interpolator, t: float, left: bool) -> np.ndarray:
        pass

    @property
    def name(self) -> str:
        return self.NAME

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FlatExtrapolator(Extrapolator):
    """Holds the edge node value."""

    NAME = "Flat Extrapolator"

    def extrapolate(self, interpolator, t, left):
        return interpolator.edge_value(left)

    def derivative(self, interpolator, t, left):
        return 0.0

    def node_sensitivity(self, interpolator, t, left):
        sens = np.zeros(interpolator.size)
        sens[0 if left else -1] = 1.0
        return sens


class LinearExtrapolator(Extrapolator):
    """Continues the edge value along the interpolator's edge slope."""

    NAME = "Linear Extrapolator"

    def extrapolate(self, interpolator, t, left):
        dt = t - interpolator.edge_time(left)
        return interpolator.edge_value(left) + interpolator.edge_derivative(left) * dt

    def derivative(self, interpolator, t, left):
        return interpolator.edge_derivative(left)

    def node_sensitivity(self, interpolator, t, left):
        dt = t - interpolator.edge_time(left)
        sens = interpolator.edge_derivative_sensitivity(left) * dt
        sens[0 if left else -1] += 1.0
        return sens


class LogLinearExtrapolator(Extrapolator):
    """Continues the edge value with a constant log-slope; needs a positive edge value."""

    NAME = "Log Linear Extrapolator"

    def _log_slope(self, interpolator, left):
        value = interpolator.edge_value(left)
        if value <= 0:
            raise ValueError("Log-linear extrapolation needs a positive edge value")
        return interpolator.edge_derivative(left) / value

    def extrapolate(self, interpolator, t, left):
        dt = t - interpolator.edge_time(left)
        return interpolator.edge_value(left) * float(np.exp(self._log_slope(interpolator, left) * dt))

    def derivative(self, interpolator, t, left):
        return self.extrapolate(interpolator, t, left) * self._log_slope(interpolator, left)

    def node_sensitivity(self, interpolator, t, left):
        dt = t - interpolator.edge_time(left)
        value = interpolator.edge_value(left)
        result = self.extrapolate(interpolator, t, left)
        # d result = result * (d value / value + dt * d slope), slope = g / value
        edge = np.zeros(interpolator.size)
        edge[0 if left else -1] = 1.0
        slope_sens = interpolator.edge_derivative_sensitivity(left) / value - \
            interpolator.edge_derivative(left) * edge / value**2
        return result * (edge / value + dt * slope_sens)


class QuadraticLeftExtrapolator(Extrapolator):
    """
    Left extrapolation by the quadratic through the origin that matches the
    value and slope at the first node. Only valid on the left side.
    """

    NAME = "Quadratic Left Extrapolator"
    left_only = True

    def _coefficients(self, interpolator):
        x0 = interpolator.edge_time(True)
        if x0 <= 0:
            raise ValueError("Quadratic left extrapolation needs a positive first node time")
        y0 = interpolator.edge_value(True)
        d0 = interpolator.edge_derivative(True)
        a = (d0 * x0 - y0) / x0**2
        b = (2 * y0 - d0 * x0) / x0
        return a, b, x0

    def extrapolate(self, interpolator, t, left):
        self._check_side(left)
        a, b, _ = self._coefficients(interpolator)
        return a * t**2 + b * t

    def derivative(self, interpolator, t, left):
        self._check_side(left)
        a, b, _ = self._coefficients(interpolator)
        return 2 * a * t + b

    def node_sensitivity(self, interpolator, t, left):
        self._check_side(left)
        x0 = interpolator.edge_time(True)
        dy0 = np.zeros(interpolator.size)
        dy0[0] = 1.0
        dd0 = interpolator.edge_derivative_sensitivity(True)
        da = (dd0 * x0 - dy0) / x0**2
        db = (2 * dy0 - dd0 * x0) / x0
        return da * t**2 + db * t

    def _check_side(self, left):
        if not left:
            raise ValueError(f"{self.NAME} can only extrapolate to the left")


class CombinedInterpolatorExtrapolator(Interpolator):
    """
    An interpolator with independently chosen left and right extrapolators.

    Inside the node range every call is delegated to the wrapped
    interpolator; outside, to the extrapolator of that side.

    Attributes:
        interpolator: Inner interpolator
        left_extrapolator: Behaviour before the first node
        right_extrapolator: Behaviour after the last node
    """

    def __init__(
        self,
        interpolator: Interpolator,
        left_extrapolator: Optional[Extrapolator] = None,
        right_extrapolator: Optional[Extrapolator] = None
    ):
        super().__init__()
        self.interpolator = interpolator
        self.left_extrapolator = left_extrapolator or FlatExtrapolator()
        self.right_extrapolator = right_extrapolator or FlatExtrapolator()
        if self.right_extrapolator.left_only:
            raise ValueError(f"{self.right_extrapolator.name} cannot be used as a right extrapolator")

    @property
    def name(self) -> str:
        left, right = self.left_extrapolator.name, self.right_extrapolator.name
        if left == right:
            return f"{left}[{self.interpolator.name}]"
        return f"{self.interpolator.name}({left}, {right})"

    @property
    def supports_extrapolation(self) -> bool:
        return self.interpolator.supports_extrapolation

    def fit(self, times: np.ndarray, values: np.ndarray) -> None:
        self.interpolator.fit(times, values)
        self.times = self.interpolator.times
        self.values = self.interpolator.values

    def interpolate(self, t: float) -> float:
        self._check_fitted()
        if t < self.times[0]:
            return float(self.left_extrapolator.extrapolate(self.interpolator, t, True))
        if t > self.times[-1]:
            return float(self.right_extrapolator.extrapolate(self.interpolator, t, False))
        return self.interpolator.interpolate(t)

    def derivative(self, t: float) -> float:
        self._check_fitted()
        if t < self.times[0]:
            return float(self.left_extrapolator.derivative(self.interpolator, t, True))
        if t > self.times[-1]:
            return float(self.right_extrapolator.derivative(self.interpolator, t, False))
        return self.interpolator.derivative(t)

    def node_sensitivity(self, t: float) -> np.ndarray:
        self._check_fitted()
        if t < self.times[0]:
            return self.left_extrapolator.node_sensitivity(self.interpolator, t, True)
        if t > self.times[-1]:
            return self.right_extrapolator.node_sensitivity(self.interpolator, t, False)
        return self.interpolator.node_sensitivity(t)

    def edge_derivative(self, left: bool) -> float:
        return self.interpolator.edge_derivative(left)

    def edge_derivative_sensitivity(self, left: bool) -> np.ndarray:
        return self.interpolator.edge_derivative_sensitivity(left)

    def _inner_value(self, t: float) -> float:
        return self.interpolator._inner_value(t)

    def _inner_derivative(self, t: float) -> float:
        return self.interpolator._inner_derivative(t)

    def _refit(self, values: np.ndarray) -> Interpolator:
        clone = CombinedInterpolatorExtrapolator(
            type(self.interpolator)(), self.left_extrapolator, self.right_extrapolator
        )
        clone.fit(self.times, values)
        return clone

    def __eq__(self, other) -> bool:
        if not isinstance(other, CombinedInterpolatorExtrapolator):
            return False
        return (self.interpolator == other.interpolator
                and self.left_extrapolator == other.left_extrapolator
                and self.right_extrapolator == other.right_extrapolator)

    def __hash__(self) -> int:
        return hash((self.interpolator, self.left_extrapolator, self.right_extrapolator))

    def __repr__(self) -> str:
        return (f"CombinedInterpolatorExtrapolator({self.interpolator!r}, "
                f"{self.left_extrapolator!r}, {self.right_extrapolator!r})")


__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "CubicSplineInterpolator",
    "StepInterpolator",
    "Extrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "LogLinearExtrapolator",
    "QuadraticLeftExtrapolator",
    "CombinedInterpolatorExtrapolator",
]
