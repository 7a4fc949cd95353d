"""
Multi-curve provider.

The provider is the calibrated market: curves by name plus the role maps
that say which curve discounts a currency, projects an index, discounts an
issuer or gives a price index. Providers are never mutated; ``with_curves``
and ``merged`` return new providers.

Provides:
- FXMatrix: spot FX rates with inversion and triangulation
- CurveRoles: curve name -> roles, as configured
- MulticurveProvider: the query API used by instrument pricing
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from ..instruments.indices import IborIndex, OvernightIndex, PriceIndex


class FXMatrix:
    """
    Spot FX rates.

    ``fx_rate(c1, c2)`` is the number of units of c2 per unit of c1. Rates
    are found directly, by inversion or through one intermediate currency.
    """

    def __init__(self, rates: Optional[Mapping[Tuple[str, str], float]] = None):
        self._rates: Dict[Tuple[str, str], float] = {}
        for (c1, c2), rate in (rates or {}).items():
            if rate <= 0:
                raise ValueError(f"FX rate {c1}/{c2} must be positive, got {rate}")
            self._rates[(c1, c2)] = float(rate)

    @property
    def currencies(self) -> frozenset:
        return frozenset(c for pair in self._rates for c in pair)

    def with_rate(self, currency1: str, currency2: str, rate: float) -> "FXMatrix":
        rates = dict(self._rates)
        rates[(currency1, currency2)] = rate
        return FXMatrix(rates)

    def merged(self, other: "FXMatrix") -> "FXMatrix":
        """Union of both matrices; rates of ``other`` win."""
        rates = dict(self._rates)
        rates.update(other._rates)
        return FXMatrix(rates)

    def _direct(self, c1: str, c2: str) -> Optional[float]:
        if c1 == c2:
            return 1.0
        if (c1, c2) in self._rates:
            return self._rates[(c1, c2)]
        if (c2, c1) in self._rates:
            return 1.0 / self._rates[(c2, c1)]
        return None

    def fx_rate(self, currency1: str, currency2: str) -> float:
        """
        Units of currency2 per unit of currency1.

        Raises:
            ValueError: If no direct, inverse or one-step cross rate exists
        """
        direct = self._direct(currency1, currency2)
        if direct is not None:
            return direct
        for via in sorted(self.currencies):
            first = self._direct(currency1, via)
            second = self._direct(via, currency2)
            if first is not None and second is not None:
                return first * second
        raise ValueError(f"No FX rate available for {currency1}/{currency2}")

    def __contains__(self, pair: Tuple[str, str]) -> bool:
        try:
            self.fx_rate(*pair)
        except ValueError:
            return False
        return True

    def __repr__(self) -> str:
        return f"FXMatrix({self._rates})"


@dataclass(frozen=True)
class CurveRoles:
    """
    Roles of the curves in a calibration, keyed by curve name.

    Attributes:
        discounting: Curve name -> currency discounted
        forward_ibor: Curve name -> ibor indices projected
        forward_overnight: Curve name -> overnight indices projected
        issuer: Curve name -> (issuer, currency) pairs discounted
        price_index: Curve name -> price indices
    """
    discounting: Mapping[str, str] = field(default_factory=dict)
    forward_ibor: Mapping[str, Sequence[IborIndex]] = field(default_factory=dict)
    forward_overnight: Mapping[str, Sequence[OvernightIndex]] = field(default_factory=dict)
    issuer: Mapping[str, Sequence[Tuple[str, str]]] = field(default_factory=dict)
    price_index: Mapping[str, Sequence[PriceIndex]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "discounting", MappingProxyType(dict(self.discounting)))
        for name in ("forward_ibor", "forward_overnight", "issuer", "price_index"):
            mapping = {curve: tuple(keys) for curve, keys in getattr(self, name).items()}
            object.__setattr__(self, name, MappingProxyType(mapping))

    def restricted_to(self, curve_names: Iterable[str]) -> "CurveRoles":
        names = set(curve_names)
        return CurveRoles(
            {k: v for k, v in self.discounting.items() if k in names},
            {k: v for k, v in self.forward_ibor.items() if k in names},
            {k: v for k, v in self.forward_overnight.items() if k in names},
            {k: v for k, v in self.issuer.items() if k in names},
            {k: v for k, v in self.price_index.items() if k in names},
        )


class MulticurveProvider:
    """
    Calibrated curves and the roles they play.

    Attributes:
        curves: Curve name -> curve (yield curve or price index curve)
        fx_matrix: Spot FX rates
    """

    def __init__(
        self,
        curves: Optional[Mapping[str, object]] = None,
        roles: Optional[CurveRoles] = None,
        fx_matrix: Optional[FXMatrix] = None
    ):
        self._curves = dict(curves or {})
        self._roles = roles or CurveRoles()
        self.fx_matrix = fx_matrix or FXMatrix()

        self._discounting: Dict[str, str] = {}
        self._ibor: Dict[IborIndex, str] = {}
        self._overnight: Dict[OvernightIndex, str] = {}
        self._issuer: Dict[Tuple[str, str], str] = {}
        self._price_index: Dict[PriceIndex, str] = {}
        for name, currency in self._roles.discounting.items():
            self._assign(self._discounting, currency, name, "discounting curve")
        for target, source in ((self._ibor, self._roles.forward_ibor),
                               (self._overnight, self._roles.forward_overnight),
                               (self._issuer, self._roles.issuer),
                               (self._price_index, self._roles.price_index)):
            for name, keys in source.items():
                for key in keys:
                    self._assign(target, key, name, "curve")

    def _assign(self, target: Dict, key, name: str, what: str) -> None:
        if name not in self._curves:
            raise ValueError(f"Role {key} refers to unknown curve {name}")
        if key in target and target[key] != name:
            raise ValueError(f"Two {what}s for {key}: {target[key]} and {name}")
        target[key] = name

    @property
    def curves(self) -> Mapping[str, object]:
        return MappingProxyType(self._curves)

    @property
    def roles(self) -> CurveRoles:
        return self._roles

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(self._curves)

    def __len__(self) -> int:
        return len(self._curves)

    def __contains__(self, name: str) -> bool:
        return name in self._curves

    def curve(self, name: str):
        if name not in self._curves:
            raise ValueError(f"No curve called {name}")
        return self._curves[name]

    def discount_factor(self, currency: str, t: float) -> float:
        if currency not in self._discounting:
            raise ValueError(f"No discounting curve for {currency}")
        return self._curves[self._discounting[currency]].discount_factor(t)

    def forward_rate(self, index: IborIndex, t1: float, t2: float, accrual_factor: float) -> float:
        if index not in self._ibor:
            raise ValueError(f"No forward curve for ibor index {index}")
        return self._curves[self._ibor[index]].forward_rate(t1, t2, accrual_factor)

    def overnight_forward_rate(self, index: OvernightIndex, t1: float, t2: float, accrual_factor: float) -> float:
        if index not in self._overnight:
            raise ValueError(f"No forward curve for overnight index {index}")
        return self._curves[self._overnight[index]].forward_rate(t1, t2, accrual_factor)

    def issuer_discount_factor(self, issuer: str, currency: str, t: float) -> float:
        key = (issuer, currency)
        if key not in self._issuer:
            raise ValueError(f"No issuer curve for {issuer} in {currency}")
        return self._curves[self._issuer[key]].discount_factor(t)

    def price_index(self, index: PriceIndex, t: float) -> float:
        if index not in self._price_index:
            raise ValueError(f"No price index curve for {index}")
        return self._curves[self._price_index[index]].price_index(t)

    def fx_rate(self, currency1: str, currency2: str) -> float:
        return self.fx_matrix.fx_rate(currency1, currency2)

    def with_curves(self, curves: Mapping[str, object], roles: CurveRoles) -> "MulticurveProvider":
        """New provider with extra curves (replacing same-named ones) and their roles."""
        all_curves = dict(self._curves)
        all_curves.update(curves)
        return MulticurveProvider(all_curves, _merge_roles(self._roles, roles), self.fx_matrix)

    def merged(self, other: "MulticurveProvider") -> "MulticurveProvider":
        """Union of two providers; curves and FX rates of ``other`` win."""
        provider = self.with_curves(other._curves, other._roles)
        return MulticurveProvider(provider._curves, provider._roles, self.fx_matrix.merged(other.fx_matrix))

    def with_fx_matrix(self, fx_matrix: FXMatrix) -> "MulticurveProvider":
        return MulticurveProvider(self._curves, self._roles, fx_matrix)

    def __repr__(self) -> str:
        return f"MulticurveProvider(curves={list(self._curves)})"


def _merge_roles(first: CurveRoles, second: CurveRoles) -> CurveRoles:
    """Roles of both; a curve named in ``second`` takes its roles from there only."""
    replaced = set(second.discounting) | set(second.forward_ibor) | set(second.forward_overnight) \
        | set(second.issuer) | set(second.price_index)

    def combine(a, b):
        merged = {k: v for k, v in a.items() if k not in replaced}
        merged.update(b)
        return merged

    return CurveRoles(
        combine(first.discounting, second.discounting),
        combine(first.forward_ibor, second.forward_ibor),
        combine(first.forward_overnight, second.forward_overnight),
        combine(first.issuer, second.issuer),
        combine(first.price_index, second.price_index),
    )


__all__ = ["FXMatrix", "CurveRoles", "MulticurveProvider"]
