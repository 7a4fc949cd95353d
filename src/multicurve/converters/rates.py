"""
Direct curve point nodes: discount factors and zero rates.

These nodes observe the calibrated curve itself at valuation + tenor. The
curve name is attached by the calibrator, which knows which curve the node
belongs to.
"""

from ..curves.nodes import (
    ContinuouslyCompoundedRateNode,
    DiscountFactorNode,
    PeriodicallyCompoundedRateNode,
)
from ..dates import DateUtils, to_date
from ..instruments.definitions import CurvePointDefinition
from .base import NodeConverter


class CurvePointNodeConverter(NodeConverter):

    def handlers(self):
        return {
            DiscountFactorNode: self.convert_discount_factor,
            ContinuouslyCompoundedRateNode: self.convert_continuous_rate,
            PeriodicallyCompoundedRateNode: self.convert_periodic_rate,
        }

    @staticmethod
    def _date(node, valuation_time):
        return DateUtils.add_tenor(to_date(valuation_time), node.tenor)

    def convert_discount_factor(self, node: DiscountFactorNode, quote, valuation_time, market_data=None):
        return CurvePointDefinition(node.currency, self._date(node, valuation_time), quote, "DISCOUNT_FACTOR")

    def convert_continuous_rate(self, node: ContinuouslyCompoundedRateNode, quote, valuation_time, market_data=None):
        return CurvePointDefinition(node.currency, self._date(node, valuation_time), quote, "CONTINUOUS")

    def convert_periodic_rate(self, node: PeriodicallyCompoundedRateNode, quote, valuation_time, market_data=None):
        return CurvePointDefinition(
            node.currency, self._date(node, valuation_time), quote, "PERIODIC", node.compounding_periods
        )


__all__ = ["CurvePointNodeConverter"]
