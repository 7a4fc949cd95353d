"""
Calibration entry points.

MulticurveCalibrator turns a configuration name, a valuation time and a
market data snapshot into a calibrated provider and its building block
bundle:

1. Order the configuration and its exogenous configurations, dependencies first.
2. For every configuration in that order, fetch every quote and convert every
   node. Nothing is solved until all of this has succeeded, so a missing
   quote fails the whole call before any curve exists.
3. Calibrate the configurations in order. Each one receives the providers and
   building blocks of its exogenous configurations as known data.

Constant curve definitions become constant yield curves read straight from
market data; they have no building block.
"""

from dataclasses import dataclass, field
from datetime import datetime
from functools import partial
from typing import Dict, FrozenSet, List, Optional, Tuple
import logging

import numpy as np

from ..converters.base import ConversionContext
from ..converters.currencies import CurveNodeCurrencyVisitor
from ..converters.dispatcher import CurveNodeConverter
from ..curves.curve import ConstantYieldCurve
from ..curves.definitions import (
    ConstantCurveDefinition,
    CurveConstructionConfiguration,
    DiscountingCurveTypeConfiguration,
    IborCurveTypeConfiguration,
    InflationCurveTypeConfiguration,
    InterpolatedCurveDefinition,
    IssuerCurveTypeConfiguration,
    OvernightCurveTypeConfiguration,
)
from ..curves.generators import GeneratorPriceIndexInterpolated, GeneratorYieldCurveInterpolated
from ..curves.registry import InterpolatorRegistry
from ..errors import UnsupportedNodeTypeError
from ..instruments.definitions import CurvePointDefinition
from ..instruments.derivatives import Cash, DepositIbor, ForwardRateAgreement, ZeroCouponInflationSwap
from ..instruments.indices import IborIndex, OvernightIndex, PriceIndex
from ..reference.conventions import IborIndexConvention, OvernightIndexConvention, PriceIndexConvention
from ..reference.resolver import ConventionResolver
from ..reference.sources import (
    ConfigurationSource,
    ConventionSource,
    HolidaySource,
    MarketDataSource,
    SecuritySource,
)
from ..settings import CalibrationSettings
from .blocks import CurveBuildingBlockBundle
from .calculators import FiniteDifferenceSensitivityCalculator, ParSpreadMarketQuoteCalculator
from .configuration import CurveConstructionConfigurationResolver
from .provider import CurveRoles, FXMatrix, MulticurveProvider
from .repository import MulticurveBuildingRepository, SingleCurveBundle
from .solver import NewtonVectorRootFinder

logger = logging.getLogger(__name__)


def initial_zero_rates(derivatives, default_rate: float) -> np.ndarray:
    """
    Start point for a zero rate curve read off the node quotes.

    A deposit or FRA quoting simple rate r over accrual a between s and e
    starts at the continuously compounded rate log(1 + r * a) / (e - s).
    Other instruments start at ``default_rate``.
    """
    rates = []
    for derivative in derivatives:
        if isinstance(derivative, (Cash, DepositIbor)):
            period = (derivative.start_time, derivative.end_time, derivative.accrual_factor)
        elif isinstance(derivative, ForwardRateAgreement):
            period = (
                derivative.fixing_period_start_time,
                derivative.fixing_period_end_time,
                derivative.fixing_accrual_factor,
            )
        else:
            rates.append(default_rate)
            continue
        start, end, accrual = period
        growth = 1.0 + derivative.rate * accrual
        rates.append(np.log(growth) / (end - start) if growth > 0.0 and end > start else default_rate)
    return np.array(rates, dtype=np.float64)


@dataclass
class _PreparedConfiguration:
    """Everything a configuration needs from market data, ready to solve."""
    configuration: CurveConstructionConfiguration
    roles: CurveRoles
    groups: List[List[SingleCurveBundle]] = field(default_factory=list)
    constants: Dict[str, ConstantYieldCurve] = field(default_factory=dict)


class MulticurveCalibrator:
    """
    Calibrate curve construction configurations.

    Attributes:
        registry: Interpolator registry used for every curve
        settings: Calibration settings
        converter: Curve node converter
        currency_visitor: Node currency visitor
        configuration_resolver: Configuration resolver
        repository: Calibration repository
    """

    def __init__(
        self,
        configurations: ConfigurationSource,
        conventions: ConventionSource,
        securities: SecuritySource,
        holidays: HolidaySource,
        registry: Optional[InterpolatorRegistry] = None,
        settings: Optional[CalibrationSettings] = None,
        as_of: Optional[datetime] = None
    ):
        self.registry = registry or InterpolatorRegistry.default()
        self.settings = settings or CalibrationSettings.default()
        resolver = ConventionResolver(conventions, securities, as_of)
        self.context = ConversionContext(resolver, securities, holidays)
        self.converter = CurveNodeConverter(self.context)
        self.currency_visitor = CurveNodeCurrencyVisitor(resolver, securities)
        self.configuration_resolver = CurveConstructionConfigurationResolver(configurations, self.currency_visitor)
        self.repository = MulticurveBuildingRepository(
            NewtonVectorRootFinder(
                self.settings.absolute_tolerance,
                self.settings.relative_tolerance,
                self.settings.max_iterations,
            ),
            ParSpreadMarketQuoteCalculator(),
            FiniteDifferenceSensitivityCalculator(
                self.settings.finite_difference_shift,
                self.settings.finite_difference_method,
            ),
        )

    def required_currencies(self, configuration_name: str) -> FrozenSet[str]:
        """Currencies needed by a configuration and its exogenous configurations."""
        return self.configuration_resolver.currencies_of(configuration_name)

    def calibrate(
        self,
        configuration_name: str,
        valuation_time,
        market_data: MarketDataSource,
        fx_matrix: Optional[FXMatrix] = None
    ) -> Tuple[MulticurveProvider, CurveBuildingBlockBundle]:
        """
        Calibrate a configuration and its exogenous configurations.

        Args:
            configuration_name: Name of the configuration to calibrate
            valuation_time: Valuation date or datetime
            market_data: Quotes by market data id
            fx_matrix: Spot FX rates for cross-currency instruments

        Returns:
            Tuple of (provider, building block bundle)

        Raises:
            ConfigurationNotFoundError: If a configuration or curve definition is missing
            CyclicConfigurationError: If exogenous references form a cycle
            MissingMarketDataError: If a quote is missing
            CalibrationDidNotConvergeError: If a curve group does not converge
        """
        order = self.configuration_resolver.calibration_order(configuration_name)
        prepared = [self._prepare(name, valuation_time, market_data) for name in order]

        results: Dict[str, Tuple[MulticurveProvider, CurveBuildingBlockBundle]] = {}
        for item in prepared:
            results[item.configuration.name] = self._solve(item, results, fx_matrix or FXMatrix())
        return results[configuration_name]

    def _prepare(self, name: str, valuation_time, market_data: MarketDataSource) -> _PreparedConfiguration:
        configuration = self.configuration_resolver.resolve(name)
        definitions = self.configuration_resolver.definitions_for(configuration)
        prepared = _PreparedConfiguration(configuration, self._roles(configuration))

        for group in configuration.curve_groups:
            bundles = []
            for curve_name in group.curve_names:
                definition = definitions[curve_name]
                if isinstance(definition, ConstantCurveDefinition):
                    rate = market_data.get_quote(definition.market_data_id)
                    prepared.constants[curve_name] = ConstantYieldCurve(curve_name, rate)
                elif isinstance(definition, InterpolatedCurveDefinition):
                    bundles.append(self._curve_bundle(
                        curve_name, definition, prepared.roles, valuation_time, market_data
                    ))
                else:
                    raise UnsupportedNodeTypeError(
                        f"Cannot calibrate curve definition {type(definition).__name__} for {curve_name}"
                    )
            if bundles:
                prepared.groups.append(bundles)
        return prepared

    def _curve_bundle(
        self,
        curve_name: str,
        definition: InterpolatedCurveDefinition,
        roles: CurveRoles,
        valuation_time,
        market_data: MarketDataSource
    ) -> SingleCurveBundle:
        pairs = []
        for node in definition.nodes:
            instrument = self.converter.definition_for(node, market_data, valuation_time)
            if isinstance(instrument, CurvePointDefinition):
                instrument = instrument.for_curve(curve_name)
            pairs.append((instrument.to_derivative(valuation_time), node.market_data_id))
        pairs.sort(key=lambda pair: pair[0].maturity_time)
        for (first, first_id), (second, second_id) in zip(pairs, pairs[1:]):
            if first.maturity_time == second.maturity_time:
                raise ValueError(
                    f"Curve {curve_name} has nodes with the same maturity "
                    f"{first.maturity_time:.6f}: {first_id} and {second_id}"
                )
        derivatives = [derivative for derivative, _ in pairs]

        factory = partial(
            self.registry.resolve,
            definition.interpolator_name,
            definition.left_extrapolator_name,
            definition.right_extrapolator_name,
        )
        factory()
        node_times = [d.maturity_time for d in derivatives]
        if curve_name in roles.price_index:
            generator = GeneratorPriceIndexInterpolated(node_times, factory, self.settings.initial_price_index)
            start = np.array([
                d.index_start_value * (1.0 + d.fixed_rate) ** d.years
                if isinstance(d, ZeroCouponInflationSwap) else self.settings.initial_price_index
                for d in derivatives
            ])
        else:
            generator = GeneratorYieldCurveInterpolated(node_times, factory, self.settings.initial_rate)
            start = initial_zero_rates(derivatives, self.settings.initial_rate)
        return SingleCurveBundle(curve_name, derivatives, start, generator)

    def _roles(self, configuration: CurveConstructionConfiguration) -> CurveRoles:
        discounting: Dict[str, str] = {}
        ibor: Dict[str, List[IborIndex]] = {}
        overnight: Dict[str, List[OvernightIndex]] = {}
        issuer: Dict[str, List[Tuple[str, str]]] = {}
        price_index: Dict[str, List[PriceIndex]] = {}

        for group in configuration.curve_groups:
            for curve_name, types in group:
                for curve_type in types:
                    if isinstance(curve_type, DiscountingCurveTypeConfiguration):
                        discounting[curve_name] = curve_type.reference
                    elif isinstance(curve_type, IborCurveTypeConfiguration):
                        convention = self.context.resolve(curve_type, curve_type.convention_id, IborIndexConvention)
                        ibor.setdefault(curve_name, []).append(IborIndex.from_convention(convention, curve_type.tenor))
                    elif isinstance(curve_type, OvernightCurveTypeConfiguration):
                        convention = self.context.resolve(
                            curve_type, curve_type.convention_id, OvernightIndexConvention
                        )
                        overnight.setdefault(curve_name, []).append(OvernightIndex.from_convention(convention))
                    elif isinstance(curve_type, IssuerCurveTypeConfiguration):
                        issuer.setdefault(curve_name, []).append((curve_type.issuer, curve_type.currency))
                    elif isinstance(curve_type, InflationCurveTypeConfiguration):
                        convention = self.context.resolve(curve_type, curve_type.price_index_id, PriceIndexConvention)
                        price_index.setdefault(curve_name, []).append(PriceIndex.from_convention(convention))
                    else:
                        raise UnsupportedNodeTypeError(f"Unknown curve type {type(curve_type).__name__}")
        return CurveRoles(discounting, ibor, overnight, issuer, price_index)

    def _solve(
        self,
        prepared: _PreparedConfiguration,
        results: Dict[str, Tuple[MulticurveProvider, CurveBuildingBlockBundle]],
        fx_matrix: FXMatrix
    ) -> Tuple[MulticurveProvider, CurveBuildingBlockBundle]:
        configuration = prepared.configuration
        known = MulticurveProvider(fx_matrix=fx_matrix)
        known_blocks = CurveBuildingBlockBundle()
        for exogenous in configuration.exogenous_configurations:
            provider, bundle = results[exogenous]
            known = known.merged(provider)
            known_blocks = known_blocks.merge(bundle)

        if prepared.constants:
            known = known.with_curves(prepared.constants, prepared.roles.restricted_to(prepared.constants))

        roles = prepared.roles
        provider, bundle = self.repository.make_curves_from_derivatives(
            prepared.groups,
            known,
            known_blocks,
            roles.discounting,
            roles.forward_ibor,
            roles.forward_overnight,
            roles.issuer,
            roles.price_index,
        )
        logger.info(
            "Calibrated configuration %s: %d curves, %d building blocks",
            configuration.name, len(provider), len(bundle)
        )
        return provider, bundle


__all__ = ["MulticurveCalibrator", "initial_zero_rates"]
