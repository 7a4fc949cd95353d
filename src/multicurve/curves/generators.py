"""
Curve generators: parameter vector -> curve.

The calibration repository only sees generators. Each generator knows how
many parameters it takes and how to build an immutable curve from them, so
the solver can rebuild trial curves at every Newton step without sharing
state between steps.
"""

from abc import ABC, abstractmethod
from typing import Callable, Sequence

import numpy as np

from .curve import (
    ConstantYieldCurve,
    DiscountFactorCurve,
    InterpolatedYieldCurve,
    PriceIndexCurve,
)
from .interpolation import Interpolator

InterpolatorFactory = Callable[[], Interpolator]


class CurveGenerator(ABC):
    """Builds a curve from a parameter vector."""

    #: True when the generated curve is a price index curve rather than a yield curve
    price_index = False

    @property
    @abstractmethod
    def parameter_count(self) -> int:
        pass

    @abstractmethod
    def generate(self, name: str, parameters: np.ndarray):
        pass

    @abstractmethod
    def initial_guess(self) -> np.ndarray:
        pass


class _InterpolatedGenerator(CurveGenerator):

    def __init__(self, node_times: Sequence[float], interpolator_factory: InterpolatorFactory):
        times = np.asarray(node_times, dtype=np.float64)
        if len(times) == 0:
            raise ValueError("Generator needs at least one node time")
        if np.any(np.diff(times) <= 0):
            raise ValueError(f"Node times must be strictly increasing: {times.tolist()}")
        self.node_times = times
        self.interpolator_factory = interpolator_factory

    @property
    def parameter_count(self) -> int:
        return len(self.node_times)

    def _check(self, parameters) -> np.ndarray:
        parameters = np.asarray(parameters, dtype=np.float64)
        if len(parameters) != self.parameter_count:
            raise ValueError(
                f"Expected {self.parameter_count} parameters, got {len(parameters)}"
            )
        return parameters


class GeneratorYieldCurveInterpolated(_InterpolatedGenerator):
    """Continuously compounded zero rates at the node times."""

    def __init__(self, node_times, interpolator_factory, initial_rate: float = 0.01):
        super().__init__(node_times, interpolator_factory)
        self.initial_rate = initial_rate

    def generate(self, name, parameters):
        return InterpolatedYieldCurve(name, self.node_times, self._check(parameters), self.interpolator_factory())

    def initial_guess(self):
        return np.full(self.parameter_count, self.initial_rate)


class GeneratorDiscountFactorInterpolated(_InterpolatedGenerator):
    """Discount factors at the node times."""

    def __init__(self, node_times, interpolator_factory, initial_rate: float = 0.01):
        super().__init__(node_times, interpolator_factory)
        self.initial_rate = initial_rate

    def generate(self, name, parameters):
        return DiscountFactorCurve(name, self.node_times, self._check(parameters), self.interpolator_factory())

    def initial_guess(self):
        return np.exp(-self.initial_rate * self.node_times)


class GeneratorPriceIndexInterpolated(_InterpolatedGenerator):
    """Price index levels at the node times."""

    price_index = True

    def __init__(self, node_times, interpolator_factory, base_level: float = 100.0):
        super().__init__(node_times, interpolator_factory)
        self.base_level = base_level

    def generate(self, name, parameters):
        return PriceIndexCurve(name, self.node_times, self._check(parameters), self.interpolator_factory())

    def initial_guess(self):
        return np.full(self.parameter_count, self.base_level)


class GeneratorYieldCurveConstant(CurveGenerator):
    """One continuously compounded rate."""

    def __init__(self, initial_rate: float = 0.01):
        self.initial_rate = initial_rate

    @property
    def parameter_count(self) -> int:
        return 1

    def generate(self, name, parameters):
        parameters = np.asarray(parameters, dtype=np.float64)
        if len(parameters) != 1:
            raise ValueError(f"Constant curve takes one parameter, got {len(parameters)}")
        return ConstantYieldCurve(name, parameters[0])

    def initial_guess(self):
        return np.array([self.initial_rate])


__all__ = [
    "CurveGenerator",
    "GeneratorYieldCurveInterpolated",
    "GeneratorDiscountFactorInterpolated",
    "GeneratorPriceIndexInterpolated",
    "GeneratorYieldCurveConstant",
]
