"""
Node type dispatch.

CurveNodeConverter merges the handler registries of the node converters
into one mapping keyed on node type. A node whose type has no handler is a
hard failure (UnsupportedNodeTypeError), never a silent skip.
"""

from datetime import datetime
from typing import Dict, Iterable, Optional
import logging

from ..errors import UnsupportedNodeTypeError
from ..curves.nodes import CurveNode
from ..instruments.definitions import InstrumentDefinition
from ..reference.resolver import ConventionResolver
from ..reference.sources import ConventionSource, HolidaySource, MarketDataSource, SecuritySource
from .base import ConversionContext, Handler, NodeConverter
from .cash import CashNodeConverter
from .fra import FRANodeConverter
from .futures import RateFutureNodeConverter
from .fx_forward import FXForwardNodeConverter
from .inflation import InflationNodeConverter
from .rates import CurvePointNodeConverter
from .roll_dates import RollDateNodeConverter
from .securities import SecurityNodeConverter
from .swap import SwapNodeConverter

logger = logging.getLogger(__name__)

DEFAULT_CONVERTERS = (
    CashNodeConverter,
    FRANodeConverter,
    SwapNodeConverter,
    FXForwardNodeConverter,
    RateFutureNodeConverter,
    SecurityNodeConverter,
    InflationNodeConverter,
    CurvePointNodeConverter,
    RollDateNodeConverter,
)


class CurveNodeConverter:
    """
    Convert any curve node plus its quote into an instrument definition.

    Attributes:
        context: Lookups shared by the converters
    """

    def __init__(self, context: ConversionContext, converters: Optional[Iterable[NodeConverter]] = None):
        self.context = context
        if converters is None:
            converters = [converter(context) for converter in DEFAULT_CONVERTERS]
        self._handlers: Dict[type, Handler] = {}
        for converter in converters:
            for node_type, handler in converter.handlers().items():
                if node_type in self._handlers:
                    raise ValueError(f"Two converters handle {node_type.__name__}")
                self._handlers[node_type] = handler

    @classmethod
    def from_sources(
        cls,
        conventions: ConventionSource,
        securities: SecuritySource,
        holidays: HolidaySource,
        as_of: Optional[datetime] = None
    ) -> "CurveNodeConverter":
        resolver = ConventionResolver(conventions, securities, as_of)
        return cls(ConversionContext(resolver, securities, holidays))

    def supports(self, node: CurveNode) -> bool:
        return type(node) in self._handlers

    @property
    def node_types(self):
        return tuple(self._handlers)

    def convert(
        self,
        node: CurveNode,
        quote: float,
        valuation_time,
        market_data: Optional[MarketDataSource] = None
    ) -> InstrumentDefinition:
        """
        Convert a node with a known quote.

        Args:
            node: Curve node
            quote: Market quote of the node
            valuation_time: Valuation date or datetime
            market_data: Additional quotes some nodes need (inflation base fixings)

        Raises:
            UnsupportedNodeTypeError: If no handler is registered for the node type
            UnresolvedNodeConventionError: If a convention the node needs cannot be resolved
        """
        handler = self._handlers.get(type(node))
        if handler is None:
            raise UnsupportedNodeTypeError(f"No converter registered for {type(node).__name__}")
        return handler(node, quote, valuation_time, market_data)

    def definition_for(self, node: CurveNode, market_data: MarketDataSource, valuation_time) -> InstrumentDefinition:
        """
        Fetch the node's quote and convert.

        Raises:
            MissingMarketDataError: If the quote is absent, naming the node's identifier
        """
        quote = market_data.get_quote(node.market_data_id)
        logger.debug("Converting %s with quote %s", node.label, quote)
        return self.convert(node, quote, valuation_time, market_data)


__all__ = ["CurveNodeConverter", "DEFAULT_CONVERTERS"]
