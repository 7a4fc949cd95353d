"""
Curve construction configuration resolution.

Expands a configuration name into the calibration order of itself and its
exogenous configurations (dependencies first), detecting cycles, and
collects the curve definitions and currencies a configuration needs.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple, Union
import logging

from ..converters.currencies import CurveNodeCurrencyVisitor
from ..curves.definitions import (
    AbstractCurveDefinition,
    CurveConstructionConfiguration,
    InterpolatedCurveDefinition,
)
from ..errors import CyclicConfigurationError
from ..reference.sources import ConfigurationSource

logger = logging.getLogger(__name__)

ConfigurationLike = Union[str, CurveConstructionConfiguration]

_VISITING = 1
_DONE = 2


class CurveConstructionConfigurationResolver:
    """
    Resolve configurations and their exogenous dependencies.

    Attributes:
        configurations: Configuration and curve definition source
        currency_visitor: Node currency visitor, needed only for ``currencies_of``
    """

    def __init__(
        self,
        configurations: ConfigurationSource,
        currency_visitor: Optional[CurveNodeCurrencyVisitor] = None
    ):
        self.configurations = configurations
        self.currency_visitor = currency_visitor

    def resolve(self, name: str) -> CurveConstructionConfiguration:
        """
        Raises:
            ConfigurationNotFoundError: If no configuration has this name
        """
        return self.configurations.get_configuration(name)

    def _configuration(self, configuration: ConfigurationLike) -> CurveConstructionConfiguration:
        if isinstance(configuration, CurveConstructionConfiguration):
            return configuration
        return self.resolve(configuration)

    def calibration_order(self, name: str) -> List[str]:
        """
        Configuration names in calibration order: every exogenous
        configuration comes before the configurations that use it, and
        ``name`` comes last.

        Raises:
            ConfigurationNotFoundError: If any configuration in the graph is missing
            CyclicConfigurationError: If exogenous references form a cycle
        """
        state: Dict[str, int] = {}
        order: List[str] = []
        path: List[str] = []

        def visit(current: str) -> None:
            if state.get(current) == _DONE:
                return
            if state.get(current) == _VISITING:
                raise CyclicConfigurationError(path[path.index(current):] + [current])
            state[current] = _VISITING
            path.append(current)
            for exogenous in self.resolve(current).exogenous_configurations:
                visit(exogenous)
            path.pop()
            state[current] = _DONE
            order.append(current)

        visit(name)
        logger.debug("Calibration order for %s: %s", name, order)
        return order

    def curve_names(self, configuration: ConfigurationLike) -> Tuple[str, ...]:
        return self._configuration(configuration).curve_names

    def definitions_for(self, configuration: ConfigurationLike) -> Dict[str, AbstractCurveDefinition]:
        """
        Curve definitions of a configuration, by curve name.

        Raises:
            ConfigurationNotFoundError: If a curve has no definition
        """
        return {
            name: self.configurations.get_curve_definition(name)
            for name in self.curve_names(configuration)
        }

    def currencies_of(self, configuration: ConfigurationLike) -> FrozenSet[str]:
        """
        Currencies of every interpolated curve node of a configuration and,
        transitively, of its exogenous configurations.

        Constant curve definitions contribute nothing.
        """
        if self.currency_visitor is None:
            raise ValueError("A currency visitor is needed to compute currencies")
        configuration = self._configuration(configuration)
        names = [configuration.name]
        if configuration.exogenous_configurations:
            names = self.calibration_order(configuration.name)

        currencies = set()
        for name in names:
            current = configuration if name == configuration.name else self.resolve(name)
            for definition in self.definitions_for(current).values():
                if isinstance(definition, InterpolatedCurveDefinition):
                    for node in definition.nodes:
                        currencies |= self.currency_visitor.required_currencies(node)
        return frozenset(currencies)


__all__ = ["CurveConstructionConfigurationResolver"]
