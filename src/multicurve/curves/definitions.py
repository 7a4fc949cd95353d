"""
Curve definitions and curve construction configurations.

Provides:
- InterpolatedCurveDefinition: nodes plus interpolator/extrapolator names
- ConstantCurveDefinition: a single quote used as a flat rate
- Curve type roles: discounting, ibor, overnight, issuer, inflation
- CurveGroupConfiguration: curves calibrated together, with their roles
- CurveConstructionConfiguration: ordered groups plus exogenous configuration names
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Optional, Sequence, Tuple

from ..dates import Tenor
from ..reference.identifiers import ExternalId
from .nodes import CurveNode


@dataclass(frozen=True)
class AbstractCurveDefinition:
    name: str


@dataclass(frozen=True)
class InterpolatedCurveDefinition(AbstractCurveDefinition):
    """
    Curve calibrated on its nodes.

    The nodes carry their market data ids, so this definition is also the
    dated description of the curve.

    Attributes:
        name: Curve name
        nodes: Calibration nodes
        interpolator_name: Registry name of the interpolator
        right_extrapolator_name: Registry name of the right extrapolator, if any
        left_extrapolator_name: Registry name of the left extrapolator, if any
    """
    nodes: Tuple[CurveNode, ...] = ()
    interpolator_name: str = "Linear"
    right_extrapolator_name: Optional[str] = None
    left_extrapolator_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))
        if not self.nodes:
            raise ValueError(f"Curve {self.name} has no nodes")
        ids = [node.market_data_id for node in self.nodes]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Curve {self.name} has duplicate market data ids")


@dataclass(frozen=True)
class ConstantCurveDefinition(AbstractCurveDefinition):
    """Flat continuously compounded curve read from one quote."""
    market_data_id: Optional[ExternalId] = None

    def __post_init__(self):
        if self.market_data_id is None:
            raise ValueError(f"Constant curve {self.name} needs a market data id")


@dataclass(frozen=True)
class CurveTypeConfiguration:
    """Base for the roles a curve plays in a group."""


@dataclass(frozen=True)
class DiscountingCurveTypeConfiguration(CurveTypeConfiguration):
    """Discounting curve for a currency."""
    reference: str


@dataclass(frozen=True)
class IborCurveTypeConfiguration(CurveTypeConfiguration):
    """Forward curve of an ibor index of the given tenor."""
    convention_id: ExternalId
    tenor: Tenor


@dataclass(frozen=True)
class OvernightCurveTypeConfiguration(CurveTypeConfiguration):
    """Forward curve of an overnight index."""
    convention_id: ExternalId


@dataclass(frozen=True)
class IssuerCurveTypeConfiguration(CurveTypeConfiguration):
    """Discounting curve for an issuer's securities in a currency."""
    issuer: str
    currency: str


@dataclass(frozen=True)
class InflationCurveTypeConfiguration(CurveTypeConfiguration):
    """Price index curve; ``price_index_id`` is a price index convention or security."""
    price_index_id: ExternalId


@dataclass(frozen=True, eq=False)
class CurveGroupConfiguration:
    """
    Curves calibrated simultaneously.

    Attributes:
        order: Declaration position within the configuration
        type_definitions: Curve name -> roles, in declaration order
    """
    order: int
    type_definitions: Mapping[str, Tuple[CurveTypeConfiguration, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self,
            "type_definitions",
            {name: tuple(types) for name, types in self.type_definitions.items()}
        )

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(self.type_definitions)

    def __iter__(self) -> Iterator[Tuple[str, Tuple[CurveTypeConfiguration, ...]]]:
        return iter(self.type_definitions.items())


@dataclass(frozen=True, eq=False)
class CurveConstructionConfiguration:
    """
    Named set of curve groups plus the configurations they depend on.

    Attributes:
        name: Configuration name
        curve_groups: Groups in calibration order
        exogenous_configurations: Configurations calibrated first and used as known data

    Raises:
        ValueError: If a curve name appears in more than one group
    """
    name: str
    curve_groups: Sequence[CurveGroupConfiguration] = ()
    exogenous_configurations: Sequence[str] = ()

    def __post_init__(self):
        object.__setattr__(self, "curve_groups", tuple(self.curve_groups))
        object.__setattr__(self, "exogenous_configurations", tuple(self.exogenous_configurations))
        seen: Dict[str, int] = {}
        for group in self.curve_groups:
            for curve_name in group.curve_names:
                if curve_name in seen:
                    raise ValueError(
                        f"Curve {curve_name} appears twice in configuration {self.name}"
                    )
                seen[curve_name] = group.order

    @property
    def curve_names(self) -> Tuple[str, ...]:
        return tuple(name for group in self.curve_groups for name in group.curve_names)


__all__ = [
    "AbstractCurveDefinition",
    "InterpolatedCurveDefinition",
    "ConstantCurveDefinition",
    "CurveTypeConfiguration",
    "DiscountingCurveTypeConfiguration",
    "IborCurveTypeConfiguration",
    "OvernightCurveTypeConfiguration",
    "IssuerCurveTypeConfiguration",
    "InflationCurveTypeConfiguration",
    "CurveGroupConfiguration",
    "CurveConstructionConfiguration",
]
