"""
Multi-curve calibration repository.

Calibrates groups of curves simultaneously:

1. The unknowns of a group are the concatenated parameter vectors of its
   curves; the residuals are the calculator values (par spreads by default)
   of its instruments against a trial provider built from the parameters
   plus the known data.
2. The system is solved by Newton iteration with a finite-difference
   Jacobian.
3. Groups are calibrated in order; every later group sees the curves of the
   earlier ones as known data.
4. After each group, the Jacobian of every instrument calibrated so far with
   respect to every parameter calibrated so far is inverted; the rows of a
   curve's parameters form its building block.

Known building blocks (from exogenous configurations) are merged in by
curve name; blocks computed here override them.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
import logging

import numpy as np
from scipy import linalg

from ..curves.generators import CurveGenerator
from ..instruments.derivatives import InstrumentDerivative
from ..instruments.indices import IborIndex, OvernightIndex, PriceIndex
from .blocks import CurveBuildingBlock, CurveBuildingBlockBundle
from .calculators import FiniteDifferenceSensitivityCalculator, ParSpreadMarketQuoteCalculator
from .provider import CurveRoles, MulticurveProvider
from .solver import NewtonVectorRootFinder

logger = logging.getLogger(__name__)


@dataclass
class SingleCurveBundle:
    """
    One curve to calibrate.

    Attributes:
        curve_name: Curve name
        derivatives: Calibration instruments, one per parameter
        start_point: Initial parameter vector
        generator: Parameter vector -> curve
    """
    curve_name: str
    derivatives: Sequence[InstrumentDerivative]
    start_point: np.ndarray
    generator: CurveGenerator

    def __post_init__(self):
        self.derivatives = tuple(self.derivatives)
        self.start_point = np.asarray(self.start_point, dtype=np.float64)
        if len(self.start_point) != self.generator.parameter_count:
            raise ValueError(
                f"Curve {self.curve_name}: start point has {len(self.start_point)} values, "
                f"generator takes {self.generator.parameter_count}"
            )

    @property
    def parameter_count(self) -> int:
        return self.generator.parameter_count


@dataclass
class GroupCalibration:
    """
    Result of calibrating one group.

    Attributes:
        provider: Known data plus the group's curves
        parameters: Curve name -> calibrated parameters
        iterations: Newton steps taken
        residual_norm: Final residual norm
    """
    provider: MulticurveProvider
    parameters: Dict[str, np.ndarray]
    iterations: int
    residual_norm: float


def _split(bundles: Sequence[SingleCurveBundle], x: np.ndarray) -> Dict[str, np.ndarray]:
    parameters = {}
    start = 0
    for bundle in bundles:
        parameters[bundle.curve_name] = x[start:start + bundle.parameter_count]
        start += bundle.parameter_count
    return parameters


def _build_provider(
    base: MulticurveProvider,
    bundles: Sequence[SingleCurveBundle],
    x: np.ndarray,
    roles: CurveRoles
) -> MulticurveProvider:
    curves = {
        bundle.curve_name: bundle.generator.generate(bundle.curve_name, parameters)
        for bundle, parameters in zip(bundles, _split(bundles, x).values())
    }
    return base.with_curves(curves, roles.restricted_to(curves))


class MulticurveBuildingRepository:
    """
    Simultaneous calibration of curve groups.

    Attributes:
        root_finder: Newton solver
        calculator: Default residual calculator
        sensitivity_calculator: Default Jacobian calculator
    """

    def __init__(
        self,
        root_finder: Optional[NewtonVectorRootFinder] = None,
        calculator=None,
        sensitivity_calculator: Optional[FiniteDifferenceSensitivityCalculator] = None
    ):
        self.root_finder = root_finder or NewtonVectorRootFinder()
        self.calculator = calculator or ParSpreadMarketQuoteCalculator()
        self.sensitivity_calculator = sensitivity_calculator or FiniteDifferenceSensitivityCalculator()

    def calibrate_group(
        self,
        group: Sequence[SingleCurveBundle],
        known_data: MulticurveProvider,
        roles: CurveRoles,
        calculator=None,
        sensitivity_calculator: Optional[FiniteDifferenceSensitivityCalculator] = None
    ) -> GroupCalibration:
        """
        Calibrate the curves of one group simultaneously.

        Raises:
            ValueError: If the group is empty, repeats a curve or is not square
            CalibrationDidNotConvergeError: If Newton iteration fails
        """
        calculator = calculator or self.calculator
        sensitivity_calculator = sensitivity_calculator or self.sensitivity_calculator
        group = list(group)
        names = [bundle.curve_name for bundle in group]
        if not group:
            raise ValueError("Cannot calibrate an empty curve group")
        if len(set(names)) != len(names):
            raise ValueError(f"Curve group repeats a curve name: {names}")

        derivatives = [d for bundle in group for d in bundle.derivatives]
        start = np.concatenate([bundle.start_point for bundle in group])
        if len(derivatives) != len(start):
            raise ValueError(
                f"Curve group [{', '.join(names)}] has {len(derivatives)} instruments "
                f"for {len(start)} parameters"
            )

        def residuals(x: np.ndarray) -> np.ndarray:
            provider = _build_provider(known_data, group, x, roles)
            return np.array([calculator(d, provider) for d in derivatives])

        root = self.root_finder.find_root(
            residuals,
            lambda x: sensitivity_calculator.jacobian(residuals, x),
            start,
            names
        )
        logger.info(
            "Calibrated curve group [%s] in %d iterations, residual norm %.3e",
            ", ".join(names), root.iterations, root.residual_norm
        )
        return GroupCalibration(
            provider=_build_provider(known_data, group, root.x, roles),
            parameters={name: p.copy() for name, p in _split(group, root.x).items()},
            iterations=root.iterations,
            residual_norm=root.residual_norm,
        )

    def make_curves_from_derivatives(
        self,
        groups: Sequence[Sequence[SingleCurveBundle]],
        known_data: Optional[MulticurveProvider] = None,
        known_blocks: Optional[CurveBuildingBlockBundle] = None,
        discounting: Optional[Mapping[str, str]] = None,
        forward_ibor: Optional[Mapping[str, Sequence[IborIndex]]] = None,
        forward_overnight: Optional[Mapping[str, Sequence[OvernightIndex]]] = None,
        issuer: Optional[Mapping[str, Sequence[Tuple[str, str]]]] = None,
        price_index: Optional[Mapping[str, Sequence[PriceIndex]]] = None,
        calculator=None,
        sensitivity_calculator: Optional[FiniteDifferenceSensitivityCalculator] = None
    ) -> Tuple[MulticurveProvider, CurveBuildingBlockBundle]:
        """
        Calibrate groups in order and compute building blocks.

        Args:
            groups: Curve groups in calibration order
            known_data: Provider with previously calibrated curves and the FX matrix
            known_blocks: Building blocks of the known curves
            discounting: Curve name -> discounted currency
            forward_ibor: Curve name -> projected ibor indices
            forward_overnight: Curve name -> projected overnight indices
            issuer: Curve name -> (issuer, currency) pairs
            price_index: Curve name -> price indices
            calculator: Residual calculator (defaults to par spread)
            sensitivity_calculator: Jacobian calculator

        Returns:
            Tuple of (provider with known and calibrated curves, building block bundle)
        """
        calculator = calculator or self.calculator
        sensitivity_calculator = sensitivity_calculator or self.sensitivity_calculator
        roles = CurveRoles(
            discounting or {}, forward_ibor or {}, forward_overnight or {}, issuer or {}, price_index or {}
        )
        base = known_data or MulticurveProvider()
        provider = base

        calibrated: List[SingleCurveBundle] = []
        parameters: List[np.ndarray] = []
        blocks: Dict[str, Tuple[CurveBuildingBlock, np.ndarray]] = {}

        for group in groups:
            result = self.calibrate_group(group, provider, roles, calculator, sensitivity_calculator)
            provider = result.provider
            calibrated.extend(group)
            parameters.extend(result.parameters[bundle.curve_name] for bundle in group)
            blocks.update(self._building_blocks(
                base, calibrated, np.concatenate(parameters), [b.curve_name for b in group],
                roles, calculator, sensitivity_calculator
            ))

        bundle = CurveBuildingBlockBundle(blocks)
        if known_blocks is not None:
            bundle = known_blocks.merge(bundle)
        return provider, bundle

    @staticmethod
    def _building_blocks(
        base: MulticurveProvider,
        calibrated: Sequence[SingleCurveBundle],
        x: np.ndarray,
        curve_names: Sequence[str],
        roles: CurveRoles,
        calculator,
        sensitivity_calculator
    ) -> Dict[str, Tuple[CurveBuildingBlock, np.ndarray]]:
        derivatives = [d for bundle in calibrated for d in bundle.derivatives]

        def residuals(x_all: np.ndarray) -> np.ndarray:
            provider = _build_provider(base, calibrated, x_all, roles)
            return np.array([calculator(d, provider) for d in derivatives])

        jacobian = sensitivity_calculator.jacobian(residuals, x)
        inverse = linalg.inv(jacobian)

        unit_map = {}
        start = 0
        for bundle in calibrated:
            unit_map[bundle.curve_name] = (start, bundle.parameter_count)
            start += bundle.parameter_count
        block = CurveBuildingBlock(unit_map)

        return {
            name: (block, inverse[unit_map[name][0]:unit_map[name][0] + unit_map[name][1], :])
            for name in curve_names
        }


__all__ = [
    "SingleCurveBundle",
    "GroupCalibration",
    "MulticurveBuildingRepository",
]
