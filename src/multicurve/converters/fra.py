"""FRA node conversion."""

from ..curves.nodes import FRANode
from ..dates import Tenor
from ..instruments.definitions import ForwardRateAgreementDefinition
from ..instruments.indices import IborIndex
from ..reference.conventions import IborIndexConvention
from .base import NodeConverter, SettlementRule, accrual


def period_tenor(start: Tenor, end: Tenor) -> Tenor:
    """Length of the period between two tenors from the same date."""
    start, end = Tenor.parse(start), Tenor.parse(end)
    if start.total_months is not None and end.total_months is not None:
        return Tenor.of_months(end.total_months - start.total_months)
    return Tenor.of_days(int(round(end.approximate_days - start.approximate_days)))


class FRANodeConverter(NodeConverter):
    """
    FRA over [spot + fixing start, spot + fixing end].

    Both period dates are shifted from spot with the index convention's
    business day convention and end-of-month rule.
    """

    def handlers(self):
        return {FRANode: self.convert}

    def convert(self, node: FRANode, quote: float, valuation_time, market_data=None):
        convention = self.context.resolve(node, node.convention_id, IborIndexConvention)
        index = IborIndex.from_convention(convention, period_tenor(node.fixing_start, node.fixing_end))
        rule = SettlementRule(
            convention.settlement_days,
            convention.business_day_convention,
            convention.is_eom,
            self.context.calendar(convention.region_calendar),
        )
        spot = rule.spot(valuation_time)
        start = rule.shift(spot, node.fixing_start)
        end = rule.shift(spot, node.fixing_end)
        return ForwardRateAgreementDefinition(
            convention.currency, start, start, end, accrual(start, end, convention.day_count), quote, index
        )


__all__ = ["FRANodeConverter", "period_tenor"]
