"""
Currency requirements of curve nodes.

The visitor walks a node's convention graph to find the currencies it
touches, which tells a caller which FX rates to fetch before calibrating.
Index references are resolved with the same convention -> security
fallback as the converters.
"""

from typing import Callable, Dict, FrozenSet, Optional
import logging

from ..curves.nodes import (
    BillNode,
    BondNode,
    CashNode,
    ContinuouslyCompoundedRateNode,
    CreditSpreadNode,
    CurveNode,
    DiscountFactorNode,
    FRANode,
    FXForwardNode,
    PeriodicallyCompoundedRateNode,
    RateFutureNode,
    RollDateFRANode,
    RollDateSwapNode,
    SwapNode,
    ThreeLegBasisSwapNode,
    ZeroCouponInflationNode,
)
from ..errors import UnresolvedNodeConventionError, UnsupportedNodeTypeError
from ..reference.conventions import (
    CMSLegConvention,
    CompoundingIborLegConvention,
    DepositConvention,
    FederalFundsFutureConvention,
    FinancialConvention,
    FixedLegConvention,
    FXForwardAndSwapConvention,
    FXSpotConvention,
    IborIndexConvention,
    InflationLegConvention,
    InterestRateFutureConvention,
    OISLegConvention,
    OvernightIndexConvention,
    PriceIndexConvention,
    RollDateFRAConvention,
    RollDateSwapConvention,
    SwapConvention,
    SwapIndexConvention,
    VanillaIborLegConvention,
)
from ..reference.identifiers import ExternalId
from ..reference.resolver import ConventionResolver
from ..reference.sources import SecuritySource

logger = logging.getLogger(__name__)

Currencies = FrozenSet[str]
_NONE: Currencies = frozenset()


class CurveNodeCurrencyVisitor:
    """
    Currencies required by curve nodes.

    Attributes:
        resolver: Convention resolver with security fallback
        securities: Security source for bill and bond nodes
    """

    def __init__(self, resolver: ConventionResolver, securities: SecuritySource):
        self.resolver = resolver
        self.securities = securities
        self._nodes: Dict[type, Callable[[CurveNode], Currencies]] = {
            CashNode: lambda n: self._convention(n, n.convention_id),
            FRANode: lambda n: self._convention(n, n.convention_id),
            RateFutureNode: lambda n: (self._convention(n, n.future_convention_id)
                                       | self._convention(n, n.underlying_convention_id)),
            RollDateFRANode: lambda n: self._convention(n, n.roll_date_fra_convention_id),
            RollDateSwapNode: lambda n: self._convention(n, n.roll_date_swap_convention_id),
            SwapNode: lambda n: (self._convention(n, n.pay_leg_convention_id)
                                 | self._convention(n, n.receive_leg_convention_id)),
            ThreeLegBasisSwapNode: lambda n: (self._convention(n, n.pay_leg_convention_id)
                                              | self._convention(n, n.receive_leg_convention_id)
                                              | self._convention(n, n.spread_leg_convention_id)),
            ZeroCouponInflationNode: lambda n: (self._convention(n, n.inflation_leg_convention_id)
                                                | self._convention(n, n.fixed_leg_convention_id)),
            FXForwardNode: lambda n: frozenset({n.pay_currency, n.receive_currency}),
            BillNode: self._security,
            BondNode: self._security,
            DiscountFactorNode: lambda n: _NONE,
            ContinuouslyCompoundedRateNode: lambda n: _NONE,
            PeriodicallyCompoundedRateNode: lambda n: _NONE,
            CreditSpreadNode: lambda n: _NONE,
        }
        self._conventions: Dict[type, Callable[[CurveNode, FinancialConvention], Currencies]] = {
            DepositConvention: _own_currency,
            IborIndexConvention: _own_currency,
            OvernightIndexConvention: _own_currency,
            FixedLegConvention: _own_currency,
            PriceIndexConvention: _own_currency,
            VanillaIborLegConvention: lambda n, c: self._convention(n, c.ibor_index_convention_id),
            CompoundingIborLegConvention: lambda n, c: self._convention(n, c.ibor_index_convention_id),
            OISLegConvention: lambda n, c: self._convention(n, c.overnight_index_convention_id),
            SwapConvention: lambda n, c: (self._convention(n, c.pay_leg_convention_id)
                                          | self._convention(n, c.receive_leg_convention_id)),
            RollDateSwapConvention: lambda n, c: (self._convention(n, c.pay_leg_convention_id)
                                                  | self._convention(n, c.receive_leg_convention_id)),
            SwapIndexConvention: lambda n, c: self._convention(n, c.swap_convention_id),
            CMSLegConvention: lambda n, c: self._convention(n, c.swap_index_convention_id),
            InflationLegConvention: lambda n, c: self._convention(n, c.price_index_convention_id),
            InterestRateFutureConvention: lambda n, c: self._convention(n, c.index_convention_id),
            FederalFundsFutureConvention: lambda n, c: self._convention(n, c.index_convention_id),
            RollDateFRAConvention: lambda n, c: self._convention(n, c.index_convention_id),
            FXSpotConvention: lambda n, c: _NONE,
            FXForwardAndSwapConvention: lambda n, c: _NONE,
        }

    def required_currencies(self, node: CurveNode) -> Currencies:
        """
        Currencies a node needs.

        Raises:
            UnsupportedNodeTypeError: If the node type is unknown
            UnresolvedNodeConventionError: If a referenced convention cannot be resolved
        """
        handler = self._nodes.get(type(node))
        if handler is None:
            raise UnsupportedNodeTypeError(f"No currency handler registered for {type(node).__name__}")
        return handler(node)

    def convention_currencies(self, identifier: ExternalId, node: Optional[CurveNode] = None) -> Currencies:
        """Currencies of a convention, following its index and leg references."""
        return self._convention(node, identifier)

    def _convention(self, node, identifier: ExternalId) -> Currencies:
        resolution = self.resolver.resolve(identifier)
        if not resolution.ok:
            raise UnresolvedNodeConventionError(node, identifier) from resolution.primary_error
        convention = resolution.convention
        for kind, handler in self._conventions.items():
            if isinstance(convention, kind):
                return handler(node, convention)
        raise UnsupportedNodeTypeError(f"No currency handler registered for {type(convention).__name__}")

    def _security(self, node) -> Currencies:
        return frozenset({self.securities.get_security(node.security_id).currency})


def _own_currency(node, convention) -> Currencies:
    return frozenset({convention.currency})


__all__ = ["CurveNodeCurrencyVisitor"]
