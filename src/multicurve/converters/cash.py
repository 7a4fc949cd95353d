"""
Cash node conversion.

Depending on the convention the node refers to, a cash node becomes a
deposit (deposit convention), an ibor fixing (ibor index convention, with
the index tenor equal to the node's maturity tenor) or an overnight deposit
(overnight index convention, settled same day with following and no
end-of-month rule whatever the convention says).
"""

import logging

from ..curves.nodes import CashNode
from ..instruments.definitions import CashDefinition, DepositIborDefinition
from ..instruments.indices import IborIndex
from ..reference.conventions import (
    DepositConvention,
    IborIndexConvention,
    OvernightIndexConvention,
)
from .base import NodeConverter, SettlementRule, accrual

logger = logging.getLogger(__name__)


class CashNodeConverter(NodeConverter):

    def handlers(self):
        return {CashNode: self.convert}

    def convert(self, node: CashNode, quote: float, valuation_time, market_data=None):
        convention = self.context.resolve(node, node.convention_id)
        handler = self._dispatch_convention(node, convention, {
            DepositConvention: self._deposit,
            IborIndexConvention: self._ibor,
            OvernightIndexConvention: self._overnight,
        })
        return handler(node, convention, quote, valuation_time)

    def _deposit(self, node, convention: DepositConvention, quote, valuation_time):
        rule = SettlementRule(
            convention.settlement_days,
            convention.business_day_convention,
            convention.is_eom,
            self.context.calendar(convention.region_calendar),
        )
        start, end = rule.start_end(valuation_time, node.start_tenor, node.maturity_tenor)
        return CashDefinition(convention.currency, start, end, accrual(start, end, convention.day_count), quote)

    def _ibor(self, node, convention: IborIndexConvention, quote, valuation_time):
        index = IborIndex.from_convention(convention, node.maturity_tenor)
        rule = SettlementRule(
            convention.settlement_days,
            convention.business_day_convention,
            convention.is_eom,
            self.context.calendar(convention.region_calendar),
        )
        start, end = rule.start_end(valuation_time, node.start_tenor, node.maturity_tenor)
        return DepositIborDefinition(
            convention.currency, start, end, accrual(start, end, convention.day_count), quote, index
        )

    def _overnight(self, node, convention: OvernightIndexConvention, quote, valuation_time):
        rule = SettlementRule.overnight(self.context.calendar(convention.region_calendar))
        start, end = rule.start_end(valuation_time, node.start_tenor, node.maturity_tenor)
        logger.debug("Overnight cash node %s: %s to %s", node.market_data_id, start, end)
        return CashDefinition(convention.currency, start, end, accrual(start, end, convention.day_count), quote)


__all__ = ["CashNodeConverter"]
