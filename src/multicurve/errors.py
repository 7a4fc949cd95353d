"""
Error types raised by curve construction.

Lookup failures, conversion failures and calibration failures each have
their own type so callers can tell a missing quote from a solver that did
not converge.
"""

from typing import Any, Optional


class MulticurveError(Exception):
    """Base class for all curve construction errors."""


class ConventionNotFoundError(MulticurveError, LookupError):
    """No convention is registered for an identifier."""

    def __init__(self, identifier: Any, kind: Optional[type] = None):
        self.identifier = identifier
        self.kind = kind
        kind_name = kind.__name__ if kind is not None else "convention"
        super().__init__(f"Could not get {kind_name} with id {identifier}")


class SecurityNotFoundError(MulticurveError, LookupError):
    """No security is registered for an identifier bundle."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"Could not get security with id {identifier}")


class UnresolvedNodeConventionError(MulticurveError):
    """
    A node's convention could not be resolved directly or through a security.

    The original not-found error is available as ``__cause__``.
    """

    def __init__(self, node: Any, identifier: Any):
        self.node = node
        self.identifier = identifier
        super().__init__(
            f"Could not resolve convention {identifier} for node {node!r}"
        )


class MissingMarketDataError(MulticurveError, LookupError):
    """A quote is absent for a required market data identifier."""

    def __init__(self, identifier: Any):
        self.identifier = identifier
        super().__init__(f"Could not get market data for {identifier}")


class UnsupportedNodeTypeError(MulticurveError, ValueError):
    """A node or leg reached a converter without a handler for it."""


class ConfigurationNotFoundError(MulticurveError, LookupError):
    """A named configuration or curve definition is not available."""

    def __init__(self, name: str, what: str = "curve construction configuration"):
        self.name = name
        super().__init__(f"Could not get {what} called {name}")


class CyclicConfigurationError(MulticurveError, ValueError):
    """Exogenous configuration references form a cycle."""

    def __init__(self, cycle):
        self.cycle = list(cycle)
        super().__init__(
            "Cyclic exogenous configuration references: " + " -> ".join(self.cycle)
        )


class CalibrationDidNotConvergeError(MulticurveError, RuntimeError):
    """The root finder reached its iteration limit without converging."""

    def __init__(self, iterations: int, residual_norm: float, curves=()):
        self.iterations = iterations
        self.residual_norm = residual_norm
        self.curves = tuple(curves)
        names = ", ".join(self.curves) if self.curves else "<unnamed>"
        super().__init__(
            f"Calibration of [{names}] did not converge after {iterations} "
            f"iterations (residual norm {residual_norm:.3e})"
        )


class UnknownInterpolatorError(MulticurveError, KeyError):
    """No interpolator or extrapolator is registered under a name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not get interpolator called {name}")

    def __str__(self) -> str:
        return self.args[0]


__all__ = [
    "MulticurveError",
    "ConventionNotFoundError",
    "SecurityNotFoundError",
    "UnresolvedNodeConventionError",
    "MissingMarketDataError",
    "UnsupportedNodeTypeError",
    "ConfigurationNotFoundError",
    "CyclicConfigurationError",
    "CalibrationDidNotConvergeError",
    "UnknownInterpolatorError",
]
