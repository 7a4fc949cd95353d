"""
Zero-coupon inflation node conversion.

The inflation leg convention gives the observation lag, settlement lag and
the market data id of the base index fixing; the fixed leg convention gives
the calendar. The reference date is maturity minus the month lag, taken at
the start of the month for monthly nodes.
"""

from datetime import date

from ..curves.nodes import InflationNodeType, ZeroCouponInflationNode
from ..dates import DateUtils, Tenor
from ..instruments.definitions import ZeroCouponInflationSwapDefinition
from ..instruments.indices import PriceIndex
from ..reference.conventions import FixedLegConvention, InflationLegConvention, PriceIndexConvention
from .base import NodeConverter, SettlementRule


class InflationNodeConverter(NodeConverter):

    def handlers(self):
        return {ZeroCouponInflationNode: self.convert}

    def convert(self, node: ZeroCouponInflationNode, quote: float, valuation_time, market_data=None):
        if market_data is None:
            raise ValueError("Zero-coupon inflation nodes need market data for the base index fixing")
        leg = self.context.resolve(node, node.inflation_leg_convention_id, InflationLegConvention)
        fixed = self.context.resolve(node, node.fixed_leg_convention_id, FixedLegConvention)
        index_convention = self.context.resolve(node, leg.price_index_convention_id, PriceIndexConvention)

        tenor = Tenor.parse(node.tenor)
        if tenor.total_months is None or tenor.total_months % 12:
            raise ValueError(f"Zero-coupon inflation tenor must be whole years, got {tenor}")

        rule = SettlementRule(
            leg.spot_lag, leg.business_day_convention, leg.is_eom,
            self.context.calendar(fixed.region_calendar),
        )
        start = rule.spot(valuation_time)
        maturity = rule.shift(start, tenor)
        reference = DateUtils.subtract_tenor(maturity, Tenor.of_months(leg.month_lag))
        if node.inflation_node_type == InflationNodeType.MONTHLY:
            reference = date(reference.year, reference.month, 1)

        return ZeroCouponInflationSwapDefinition(
            fixed.currency,
            PriceIndex.from_convention(index_convention),
            start,
            maturity,
            reference,
            market_data.get_quote(leg.fixing_id),
            quote,
            tenor.total_months // 12,
        )


__all__ = ["InflationNodeConverter"]
