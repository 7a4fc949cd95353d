"""
Named interpolator registry.

Interpolators and extrapolators are registered as factories under a
canonical name plus aliases. ``resolve`` always returns a fresh, unfitted
instance, so curves never share interpolator state.

For every interpolator that supports extrapolation, the registry also
exposes the extrapolated composites ``"Linear Extrapolator[<name>]"``,
``"Log Linear Extrapolator[<name>]"`` and
``"Quadratic Left Extrapolator[<name>]"``, where ``<name>`` is the
canonical name or any alias. The quadratic composite is quadratic on the
left and linear on the right.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..errors import UnknownInterpolatorError
from .interpolation import (
    CombinedInterpolatorExtrapolator,
    CubicSplineInterpolator,
    Extrapolator,
    FlatExtrapolator,
    Interpolator,
    LinearExtrapolator,
    LinearInterpolator,
    LogLinearExtrapolator,
    LogLinearInterpolator,
    QuadraticLeftExtrapolator,
    StepInterpolator,
)


InterpolatorFactory = Callable[[], Interpolator]
ExtrapolatorFactory = Callable[[], Extrapolator]

# (extrapolator used in the composite name, left factory, right factory)
_CANONICAL_COMPOSITES: Tuple[Tuple[str, ExtrapolatorFactory, ExtrapolatorFactory], ...] = (
    (LinearExtrapolator.NAME, LinearExtrapolator, LinearExtrapolator),
    (LogLinearExtrapolator.NAME, LogLinearExtrapolator, LogLinearExtrapolator),
    (QuadraticLeftExtrapolator.NAME, QuadraticLeftExtrapolator, LinearExtrapolator),
)


@dataclass(frozen=True)
class _Entry:
    name: str
    factory: Callable
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InterpolatorRegistry:
    """
    Immutable lookup from names to interpolator and extrapolator factories.

    Build one at startup (usually ``InterpolatorRegistry.default()``) and pass
    it to curve generators and the calibrator.

    Attributes:
        interpolators: Interpolator factories by canonical name or alias
        extrapolators: Extrapolator factories by canonical name or alias
    """
    interpolators: Mapping[str, _Entry] = field(default_factory=dict)
    extrapolators: Mapping[str, _Entry] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "interpolators", MappingProxyType(dict(self.interpolators)))
        object.__setattr__(self, "extrapolators", MappingProxyType(dict(self.extrapolators)))

    @classmethod
    def default(cls) -> "InterpolatorRegistry":
        """Registry with the built-in interpolators, extrapolators and composites."""
        registry = cls()
        registry = registry.with_extrapolator(FlatExtrapolator.NAME, FlatExtrapolator, ["FlatExtrapolator"])
        registry = registry.with_extrapolator(LinearExtrapolator.NAME, LinearExtrapolator, ["LinearExtrapolator"])
        registry = registry.with_extrapolator(
            LogLinearExtrapolator.NAME, LogLinearExtrapolator, ["LogLinearExtrapolator", "Log-Linear Extrapolator"]
        )
        registry = registry.with_extrapolator(
            QuadraticLeftExtrapolator.NAME, QuadraticLeftExtrapolator, ["QuadraticLeftExtrapolator"]
        )
        registry = registry.with_interpolator(
            LinearInterpolator.NAME, LinearInterpolator, ["Linear Interpolator", "LinearInterpolator"]
        )
        registry = registry.with_interpolator(
            LogLinearInterpolator.NAME, LogLinearInterpolator, ["LogLinear", "Log Linear Interpolator"]
        )
        registry = registry.with_interpolator(
            CubicSplineInterpolator.NAME, CubicSplineInterpolator, ["NaturalCubicSpline", "Cubic Spline"]
        )
        registry = registry.with_interpolator(
            StepInterpolator.NAME, StepInterpolator, ["Step Interpolator", "StepInterpolator"]
        )
        return registry

    def with_interpolator(
        self,
        name: str,
        factory: InterpolatorFactory,
        aliases: Iterable[str] = ()
    ) -> "InterpolatorRegistry":
        """
        Return a copy with an interpolator (and its extrapolated composites) added.

        Raises:
            ValueError: If the name or an alias is already registered
        """
        aliases = tuple(aliases)
        entries = dict(self.interpolators)
        self._check_free(entries, (name,) + aliases)
        entry = _Entry(name, factory, aliases)
        for key in (name,) + aliases:
            entries[key] = entry

        if getattr(factory(), "supports_extrapolation", False):
            for extrapolator_name, left, right in _CANONICAL_COMPOSITES:
                composite = f"{extrapolator_name}[{name}]"
                composite_aliases = tuple(f"{extrapolator_name}[{alias}]" for alias in aliases)
                self._check_free(entries, (composite,) + composite_aliases)
                composite_entry = _Entry(composite, _composite_factory(factory, left, right), composite_aliases)
                for key in (composite,) + composite_aliases:
                    entries[key] = composite_entry

        return InterpolatorRegistry(entries, self.extrapolators)

    def with_extrapolator(
        self,
        name: str,
        factory: ExtrapolatorFactory,
        aliases: Iterable[str] = ()
    ) -> "InterpolatorRegistry":
        """Return a copy with an extrapolator added."""
        aliases = tuple(aliases)
        entries = dict(self.extrapolators)
        self._check_free(entries, (name,) + aliases)
        entry = _Entry(name, factory, aliases)
        for key in (name,) + aliases:
            entries[key] = entry
        return InterpolatorRegistry(self.interpolators, entries)

    @staticmethod
    def _check_free(entries: Dict[str, _Entry], names: Iterable[str]) -> None:
        for key in names:
            if key in entries:
                raise ValueError(f"Name {key} is already registered to {entries[key].name}")

    def resolve(
        self,
        name: str,
        left_extrapolator_name: Optional[str] = None,
        right_extrapolator_name: Optional[str] = None
    ) -> Interpolator:
        """
        Resolve an interpolator by name or alias.

        With extrapolator names, the interpolator is wrapped in a
        CombinedInterpolatorExtrapolator; a missing side defaults to flat.

        Raises:
            UnknownInterpolatorError: If any name is not registered
        """
        if name not in self.interpolators:
            raise UnknownInterpolatorError(name)
        interpolator = self.interpolators[name].factory()
        if left_extrapolator_name is None and right_extrapolator_name is None:
            return interpolator
        if isinstance(interpolator, CombinedInterpolatorExtrapolator):
            interpolator = interpolator.interpolator
        return CombinedInterpolatorExtrapolator(
            interpolator,
            self.resolve_extrapolator(left_extrapolator_name) if left_extrapolator_name else None,
            self.resolve_extrapolator(right_extrapolator_name) if right_extrapolator_name else None,
        )

    def resolve_extrapolator(self, name: str) -> Extrapolator:
        if name not in self.extrapolators:
            raise UnknownInterpolatorError(name)
        return self.extrapolators[name].factory()

    def canonical_name(self, name: str) -> str:
        if name in self.interpolators:
            return self.interpolators[name].name
        if name in self.extrapolators:
            return self.extrapolators[name].name
        raise UnknownInterpolatorError(name)

    def aliases(self, name: str) -> Tuple[str, ...]:
        if name not in self.interpolators:
            raise UnknownInterpolatorError(name)
        return self.interpolators[name].aliases

    def names(self) -> Tuple[str, ...]:
        """Canonical interpolator names, composites included."""
        return tuple(sorted({entry.name for entry in self.interpolators.values()}))

    def __contains__(self, name: str) -> bool:
        return name in self.interpolators or name in self.extrapolators


def _composite_factory(
    factory: InterpolatorFactory,
    left: ExtrapolatorFactory,
    right: ExtrapolatorFactory
) -> InterpolatorFactory:
    def build() -> Interpolator:
        return CombinedInterpolatorExtrapolator(factory(), left(), right())
    return build


__all__ = ["InterpolatorRegistry"]
