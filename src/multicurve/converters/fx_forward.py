"""
FX forward node conversion.

Two settlement modes, chosen by the FX spot convention:

Legacy (``use_intermediate_us_holidays`` unset)
    Spot is counted on the spot convention's settlement region calendar;
    delivery is spot + tenor adjusted on the forward convention's
    settlement region calendar.

Currency pair (``use_intermediate_us_holidays`` set)
    Spot is counted on the calendars of both currencies (plus USD when the
    flag is true). Delivery is spot + tenor rolled with the forward
    convention's rule to a good business day in both currencies and USD.
    When the flag is true (Latin-American pairs), each USD holiday strictly
    between spot and delivery pushes delivery by one more good business day.
"""

from datetime import date
import logging

from ..curves.nodes import FXForwardNode
from ..dates import HolidayCalendar, combine_calendars
from ..instruments.definitions import ForexDefinition
from ..reference.conventions import FXForwardAndSwapConvention, FXSpotConvention
from .base import NodeConverter, SettlementRule

logger = logging.getLogger(__name__)

USD = "USD"


class FXForwardNodeConverter(NodeConverter):

    def handlers(self):
        return {FXForwardNode: self.convert}

    def convert(self, node: FXForwardNode, quote: float, valuation_time, market_data=None):
        forward = self.context.resolve(node, node.fx_forward_convention_id, FXForwardAndSwapConvention)
        spot = self.context.resolve(node, forward.spot_convention_id, FXSpotConvention)
        if spot.uses_currency_pair_rules:
            delivery = self.currency_pair_delivery_date(node, spot, forward, valuation_time)
        else:
            delivery = self.legacy_delivery_date(node, spot, forward, valuation_time)
        return ForexDefinition.from_forward_rate(node.pay_currency, node.receive_currency, delivery, quote)

    def legacy_delivery_date(
        self,
        node: FXForwardNode,
        spot: FXSpotConvention,
        forward: FXForwardAndSwapConvention,
        valuation_time
    ) -> date:
        spot_rule = SettlementRule(
            spot.settlement_days, forward.business_day_convention, False,
            self.context.calendar(spot.settlement_region),
        )
        forward_rule = SettlementRule(
            0, forward.business_day_convention, forward.is_eom,
            self.context.calendar(forward.settlement_region),
        )
        return forward_rule.shift(spot_rule.spot(valuation_time), node.maturity_tenor)

    def currency_pair_delivery_date(
        self,
        node: FXForwardNode,
        spot: FXSpotConvention,
        forward: FXForwardAndSwapConvention,
        valuation_time
    ) -> date:
        latin_american = bool(spot.use_intermediate_us_holidays)
        pair = self._pair_calendar(node)
        usd = self.context.holidays.currency_calendar(USD)
        with_usd = combine_calendars([pair, usd])

        spot_calendar = with_usd if latin_american else pair
        spot_date = SettlementRule(spot.settlement_days, forward.business_day_convention, False, spot_calendar).spot(
            valuation_time
        )
        delivery = SettlementRule(0, forward.business_day_convention, forward.is_eom, with_usd).shift(
            spot_date, node.maturity_tenor
        )
        if latin_american:
            for holiday in usd.holidays_between(spot_date, delivery):
                delivery = with_usd.add_business_days(delivery, 1)
                logger.debug("USD holiday %s between spot and delivery, delivery moved to %s", holiday, delivery)
        return delivery

    def _pair_calendar(self, node: FXForwardNode) -> HolidayCalendar:
        return combine_calendars([
            self.context.holidays.currency_calendar(node.pay_currency),
            self.context.holidays.currency_calendar(node.receive_currency),
        ])


__all__ = ["FXForwardNodeConverter"]
