"""
Swap node conversion.

Legs are built from leg conventions:
- FixedLegConvention: fixed coupons
- VanillaIborLegConvention: one ibor fixing per reset period
- OISLegConvention: compounded overnight coupons
- CompoundingIborLegConvention: ibor fixings compounded over each payment period

Pay legs carry notional -1. The market quote goes on the fixed leg(s) as
the coupon; in a float-float swap it is a spread on the pay leg; in a
three-leg basis swap the spread leg carries it. CMS and inflation legs
cannot be calibration swap legs.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..conventions import year_fraction
from ..curves.nodes import SwapNode, ThreeLegBasisSwapNode
from ..dates import DateUtils, generate_accrual_schedule
from ..errors import UnsupportedNodeTypeError
from ..instruments.definitions import (
    AnnuityDefinition,
    CouponFixedDefinition,
    CouponIborCompoundingDefinition,
    CouponIborDefinition,
    CouponOvernightDefinition,
    SwapDefinition,
)
from ..instruments.indices import IborIndex, OvernightIndex
from ..reference.conventions import (
    CMSLegConvention,
    CompoundingIborLegConvention,
    FixedLegConvention,
    IborIndexConvention,
    InflationLegConvention,
    OISLegConvention,
    OvernightIndexConvention,
    VanillaIborLegConvention,
)
from ..reference.identifiers import ExternalId
from .base import ConversionContext, NodeConverter, SettlementRule


@dataclass(frozen=True)
class LegRequest:
    """
    What a leg builder needs beyond the leg convention.

    Attributes:
        start_tenor: Start tenor from spot (ignored when ``dates`` is set)
        maturity_tenor: Tenor from start to maturity (ignored when ``dates`` is set)
        notional: +1 receive, -1 pay
        quote: Fixed rate or spread, when this leg carries the quote
        dates: Explicit (start, unadjusted end), used by roll-date swaps
    """
    start_tenor: object
    maturity_tenor: object
    notional: float
    quote: Optional[float] = None
    dates: Optional[Tuple[date, date]] = None

    @property
    def carries_quote(self) -> bool:
        return self.quote is not None

    @property
    def rate(self) -> float:
        return self.quote if self.quote is not None else 0.0


class SwapLegBuilder:
    """Build leg definitions from leg conventions."""

    def __init__(self, context: ConversionContext):
        self.context = context

    def is_fixed(self, node, convention_id: ExternalId) -> bool:
        return isinstance(self.context.resolve(node, convention_id), FixedLegConvention)

    def build(self, node, convention_id: ExternalId, request: LegRequest, valuation_time) -> AnnuityDefinition:
        convention = self.context.resolve(node, convention_id)
        if isinstance(convention, (CMSLegConvention, InflationLegConvention)):
            raise UnsupportedNodeTypeError(
                f"{type(convention).__name__} {convention.name} cannot be used in a calibration swap"
            )
        handler = NodeConverter._dispatch_convention(node, convention, {
            FixedLegConvention: self._fixed,
            VanillaIborLegConvention: self._ibor,
            OISLegConvention: self._overnight,
            CompoundingIborLegConvention: self._compounding,
        })
        return handler(node, convention, request, valuation_time)

    @staticmethod
    def _period(rule: SettlementRule, request: LegRequest, valuation_time) -> Tuple[date, date]:
        if request.dates is not None:
            return request.dates
        start = rule.shift(rule.spot(valuation_time), request.start_tenor)
        return start, DateUtils.add_tenor(start, request.maturity_tenor)

    def _fixed(self, node, convention: FixedLegConvention, request, valuation_time):
        calendar = self.context.calendar(convention.region_calendar)
        rule = SettlementRule(convention.settlement_days, convention.business_day_convention, convention.is_eom, calendar)
        start, end = self._period(rule, request, valuation_time)
        schedule = generate_accrual_schedule(
            start, end, convention.payment_tenor, convention.day_count,
            convention.business_day_convention, calendar, convention.is_eom, convention.payment_lag
        )
        coupons = tuple(
            CouponFixedDefinition(pay, s, e, yf, request.rate)
            for pay, s, e, yf in zip(schedule.payment_dates, schedule.accrual_starts,
                                     schedule.accrual_ends, schedule.year_fractions)
        )
        return AnnuityDefinition(convention.currency, coupons, request.notional, request.carries_quote)

    def _ibor(self, node, convention: VanillaIborLegConvention, request, valuation_time):
        index_convention = self.context.resolve(node, convention.ibor_index_convention_id, IborIndexConvention)
        index = IborIndex.from_convention(index_convention, convention.reset_tenor)
        calendar = self.context.calendar(index_convention.region_calendar)
        rule = SettlementRule(convention.settlement_days, index.business_day_convention, convention.is_eom, calendar)
        start, end = self._period(rule, request, valuation_time)
        schedule = generate_accrual_schedule(
            start, end, convention.reset_tenor, index.day_count,
            index.business_day_convention, calendar, convention.is_eom, convention.payment_lag
        )
        coupons = []
        for pay, s, e, yf in zip(schedule.payment_dates, schedule.accrual_starts,
                                 schedule.accrual_ends, schedule.year_fractions):
            fixing_end = DateUtils.adjust_by_tenor(s, index.tenor, index.business_day_convention, calendar, index.is_eom)
            coupons.append(CouponIborDefinition(
                pay, s, e, yf, index, s, fixing_end,
                year_fraction(s, fixing_end, index.day_count), request.rate
            ))
        return AnnuityDefinition(index.currency, tuple(coupons), request.notional, request.carries_quote)

    def _overnight(self, node, convention: OISLegConvention, request, valuation_time):
        index_convention = self.context.resolve(node, convention.overnight_index_convention_id, OvernightIndexConvention)
        index = OvernightIndex.from_convention(index_convention)
        calendar = self.context.calendar(index_convention.region_calendar)
        rule = SettlementRule(convention.settlement_days, convention.business_day_convention, convention.is_eom, calendar)
        start, end = self._period(rule, request, valuation_time)
        schedule = generate_accrual_schedule(
            start, end, convention.payment_tenor, index.day_count,
            convention.business_day_convention, calendar, convention.is_eom, convention.payment_lag
        )
        coupons = tuple(
            CouponOvernightDefinition(pay, s, e, yf, index, yf, request.rate)
            for pay, s, e, yf in zip(schedule.payment_dates, schedule.accrual_starts,
                                     schedule.accrual_ends, schedule.year_fractions)
        )
        return AnnuityDefinition(index.currency, coupons, request.notional, request.carries_quote)

    def _compounding(self, node, convention: CompoundingIborLegConvention, request, valuation_time):
        index_convention = self.context.resolve(node, convention.ibor_index_convention_id, IborIndexConvention)
        index = IborIndex.from_convention(index_convention, convention.composition_tenor)
        calendar = self.context.calendar(index_convention.region_calendar)
        bdc = index.business_day_convention
        rule = SettlementRule(convention.settlement_days, bdc, convention.is_eom, calendar)
        start, end = self._period(rule, request, valuation_time)
        schedule = generate_accrual_schedule(
            start, end, convention.payment_tenor, index.day_count,
            bdc, calendar, convention.is_eom, convention.payment_lag
        )
        coupons = []
        for pay, s, e, yf in zip(schedule.payment_dates, schedule.accrual_starts,
                                 schedule.accrual_ends, schedule.year_fractions):
            sub_ends = DateUtils.generate_schedule(s, e, convention.composition_tenor, bdc, calendar, convention.is_eom)
            sub_periods = []
            for sub_start, sub_end in zip([s] + sub_ends[:-1], sub_ends):
                fixing_end = DateUtils.adjust_by_tenor(sub_start, index.tenor, bdc, calendar, index.is_eom)
                sub_periods.append((
                    sub_start,
                    fixing_end,
                    year_fraction(sub_start, fixing_end, index.day_count),
                    year_fraction(sub_start, sub_end, index.day_count),
                ))
            coupons.append(CouponIborCompoundingDefinition(pay, s, e, yf, index, tuple(sub_periods), request.rate))
        return AnnuityDefinition(index.currency, tuple(coupons), request.notional, request.carries_quote)


def quoted_legs(builder: SwapLegBuilder, node, pay_id: ExternalId, receive_id: ExternalId):
    """(pay carries quote, receive carries quote) for a two-leg swap."""
    pay_fixed = builder.is_fixed(node, pay_id)
    receive_fixed = builder.is_fixed(node, receive_id)
    if pay_fixed or receive_fixed:
        return pay_fixed, receive_fixed
    return True, False


class SwapNodeConverter(NodeConverter):

    def __init__(self, context: ConversionContext):
        super().__init__(context)
        self.legs = SwapLegBuilder(context)

    def handlers(self):
        return {
            SwapNode: self.convert_swap,
            ThreeLegBasisSwapNode: self.convert_three_leg_basis_swap,
        }

    def convert_swap(self, node: SwapNode, quote: float, valuation_time, market_data=None) -> SwapDefinition:
        pay_quoted, receive_quoted = quoted_legs(
            self.legs, node, node.pay_leg_convention_id, node.receive_leg_convention_id
        )
        pay = self.legs.build(node, node.pay_leg_convention_id, LegRequest(
            node.start_tenor, node.maturity_tenor, -1.0, quote if pay_quoted else None
        ), valuation_time)
        receive = self.legs.build(node, node.receive_leg_convention_id, LegRequest(
            node.start_tenor, node.maturity_tenor, 1.0, quote if receive_quoted else None
        ), valuation_time)
        return SwapDefinition((pay, receive))

    def convert_three_leg_basis_swap(self, node: ThreeLegBasisSwapNode, quote: float, valuation_time, market_data=None):
        pay = self.legs.build(node, node.pay_leg_convention_id, LegRequest(
            node.start_tenor, node.maturity_tenor, -1.0
        ), valuation_time)
        receive = self.legs.build(node, node.receive_leg_convention_id, LegRequest(
            node.start_tenor, node.maturity_tenor, 1.0
        ), valuation_time)
        spread = self.legs.build(node, node.spread_leg_convention_id, LegRequest(
            node.start_tenor, node.maturity_tenor, -1.0, quote
        ), valuation_time)
        return SwapDefinition((pay, receive, spread))


__all__ = ["LegRequest", "SwapLegBuilder", "SwapNodeConverter", "quoted_legs"]
