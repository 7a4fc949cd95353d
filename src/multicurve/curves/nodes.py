"""
Curve node variants.

A node is one calibration point on a curve: the market data identifier of
its quote plus the tenors and convention references needed to turn the
quote into an instrument. Nodes are plain immutable records; conversion is
done by ``multicurve.converters``, which dispatches on the node type.

Provides:
- CashNode, FRANode, SwapNode, ThreeLegBasisSwapNode
- FXForwardNode, RateFutureNode
- BillNode, BondNode, ZeroCouponInflationNode
- RollDateFRANode, RollDateSwapNode
- DiscountFactorNode, ContinuouslyCompoundedRateNode, PeriodicallyCompoundedRateNode
- CreditSpreadNode
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..dates import Tenor
from ..reference.identifiers import ExternalId


class InflationNodeType(Enum):
    """How the reference index of a zero-coupon inflation swap is observed."""
    MONTHLY = "MONTHLY"
    INTERPOLATED = "INTERPOLATED"


@dataclass(frozen=True)
class CurveNode:
    """
    Base for all curve nodes.

    Attributes:
        market_data_id: Identifier of the node's quote
    """
    market_data_id: ExternalId

    @property
    def label(self) -> str:
        return f"{type(self).__name__}[{self.market_data_id}]"


@dataclass(frozen=True)
class CashNode(CurveNode):
    """
    Deposit, ibor fixing or overnight rate.

    The convention may be a deposit, ibor index or overnight index
    convention (or an index security standing in for one).
    """
    start_tenor: Tenor
    maturity_tenor: Tenor
    convention_id: ExternalId


@dataclass(frozen=True)
class FRANode(CurveNode):
    """FRA over [spot + fixing_start, spot + fixing_end] on an ibor index convention."""
    fixing_start: Tenor
    fixing_end: Tenor
    convention_id: ExternalId


@dataclass(frozen=True)
class SwapNode(CurveNode):
    """Two-leg swap; the legs are described by leg conventions."""
    start_tenor: Tenor
    maturity_tenor: Tenor
    pay_leg_convention_id: ExternalId
    receive_leg_convention_id: ExternalId


@dataclass(frozen=True)
class ThreeLegBasisSwapNode(CurveNode):
    """Basis swap with a separate spread leg carrying the quote."""
    start_tenor: Tenor
    maturity_tenor: Tenor
    pay_leg_convention_id: ExternalId
    receive_leg_convention_id: ExternalId
    spread_leg_convention_id: ExternalId


@dataclass(frozen=True)
class FXForwardNode(CurveNode):
    """
    FX forward quoted as the outright forward rate.

    Attributes:
        fx_forward_convention_id: FX forward and swap convention
        pay_currency: Currency paid (currency of the unit amount)
        receive_currency: Currency received
    """
    start_tenor: Tenor
    maturity_tenor: Tenor
    fx_forward_convention_id: ExternalId
    pay_currency: str
    receive_currency: str


@dataclass(frozen=True)
class RateFutureNode(CurveNode):
    """
    Interest rate or federal funds future.

    Attributes:
        future_number: Which future after valuation + start_tenor (1 = front)
        future_tenor: Roll period: 3M for quarterly IMM, 1M for monthly
        underlying_tenor: Tenor of the underlying ibor index
        future_convention_id: Future convention
        underlying_convention_id: Index convention of the underlying
    """
    future_number: int
    start_tenor: Tenor
    future_tenor: Tenor
    underlying_tenor: Tenor
    future_convention_id: ExternalId
    underlying_convention_id: ExternalId


@dataclass(frozen=True)
class BillNode(CurveNode):
    """Bill quoted on yield; the security is looked up by ``security_id``."""
    maturity_tenor: Tenor
    security_id: ExternalId


@dataclass(frozen=True)
class BondNode(CurveNode):
    """Bond quoted on yield; the security is looked up by ``security_id``."""
    maturity_tenor: Tenor
    security_id: ExternalId


@dataclass(frozen=True)
class ZeroCouponInflationNode(CurveNode):
    """Zero-coupon inflation swap against a fixed leg."""
    tenor: Tenor
    inflation_leg_convention_id: ExternalId
    fixed_leg_convention_id: ExternalId
    inflation_node_type: InflationNodeType = InflationNodeType.MONTHLY


@dataclass(frozen=True)
class RollDateFRANode(CurveNode):
    """FRA between the n-th and m-th quarterly roll dates after valuation + start tenor."""
    start_tenor: Tenor
    roll_date_start_number: int
    roll_date_end_number: int
    roll_date_fra_convention_id: ExternalId


@dataclass(frozen=True)
class RollDateSwapNode(CurveNode):
    """Swap between the n-th and m-th quarterly roll dates after valuation + start tenor."""
    start_tenor: Tenor
    roll_date_start_number: int
    roll_date_end_number: int
    roll_date_swap_convention_id: ExternalId


@dataclass(frozen=True)
class DiscountFactorNode(CurveNode):
    """Quoted discount factor at valuation + tenor."""
    tenor: Tenor
    currency: Optional[str] = None


@dataclass(frozen=True)
class ContinuouslyCompoundedRateNode(CurveNode):
    """Quoted continuously compounded zero rate at valuation + tenor."""
    tenor: Tenor
    currency: Optional[str] = None


@dataclass(frozen=True)
class PeriodicallyCompoundedRateNode(CurveNode):
    """Quoted zero rate compounded ``compounding_periods`` times a year."""
    tenor: Tenor
    compounding_periods: int
    currency: Optional[str] = None


@dataclass(frozen=True)
class CreditSpreadNode(CurveNode):
    """Credit spread quote; carried in definitions but not calibrated here."""
    tenor: Tenor


__all__ = [
    "InflationNodeType",
    "CurveNode",
    "CashNode",
    "FRANode",
    "SwapNode",
    "ThreeLegBasisSwapNode",
    "FXForwardNode",
    "RateFutureNode",
    "BillNode",
    "BondNode",
    "ZeroCouponInflationNode",
    "RollDateFRANode",
    "RollDateSwapNode",
    "DiscountFactorNode",
    "ContinuouslyCompoundedRateNode",
    "PeriodicallyCompoundedRateNode",
    "CreditSpreadNode",
]
