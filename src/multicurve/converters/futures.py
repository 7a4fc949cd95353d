"""
Rate future node conversion.

Interest rate futures fix on the n-th quarterly IMM date after
valuation + start tenor; federal funds futures average the overnight rate
over the n-th calendar month after it. Both are quoted on price
(1 - rate).
"""

from ..curves.nodes import RateFutureNode
from ..dates import DateUtils, to_date
from ..instruments.definitions import FederalFundsFutureDefinition, InterestRateFutureDefinition
from ..instruments.indices import IborIndex, OvernightIndex
from ..reference.conventions import (
    FederalFundsFutureConvention,
    IborIndexConvention,
    InterestRateFutureConvention,
    OvernightIndexConvention,
)
from .base import NodeConverter, accrual, subtract_business_days


class RateFutureNodeConverter(NodeConverter):

    def handlers(self):
        return {RateFutureNode: self.convert}

    def convert(self, node: RateFutureNode, quote: float, valuation_time, market_data=None):
        convention = self.context.resolve(node, node.future_convention_id)
        handler = self._dispatch_convention(node, convention, {
            InterestRateFutureConvention: self._interest_rate_future,
            FederalFundsFutureConvention: self._federal_funds_future,
        })
        return handler(node, convention, quote, valuation_time)

    def _interest_rate_future(self, node, convention: InterestRateFutureConvention, quote, valuation_time):
        index_convention = self.context.resolve(node, node.underlying_convention_id, IborIndexConvention)
        index = IborIndex.from_convention(index_convention, node.underlying_tenor)
        calendar = self.context.calendar(index_convention.region_calendar)
        exchange = self.context.calendar(convention.exchange_calendar)

        reference = DateUtils.add_tenor(to_date(valuation_time), node.start_tenor)
        start = DateUtils.nth_imm_date(reference, node.future_number)
        end = DateUtils.adjust_by_tenor(start, index.tenor, index.business_day_convention, calendar, index.is_eom)
        last_trading = subtract_business_days(start, convention.last_trade_lag, exchange)
        return InterestRateFutureDefinition(
            index.currency, last_trading, start, end, accrual(start, end, index.day_count), quote, index
        )

    def _federal_funds_future(self, node, convention: FederalFundsFutureConvention, quote, valuation_time):
        index_convention = self.context.resolve(node, node.underlying_convention_id, OvernightIndexConvention)
        index = OvernightIndex.from_convention(index_convention)

        reference = DateUtils.add_tenor(to_date(valuation_time), node.start_tenor)
        start = DateUtils.nth_month_start(reference, node.future_number)
        end = DateUtils.nth_month_start(start, 1)
        return FederalFundsFutureDefinition(
            index.currency, start, end, accrual(start, end, index.day_count), quote, index
        )


__all__ = ["RateFutureNodeConverter"]
