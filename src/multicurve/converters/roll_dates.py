"""
Roll-date FRA and swap conversion.

Start and end fall on the n-th and m-th quarterly IMM dates after
valuation + start tenor.
"""

from ..curves.nodes import RollDateFRANode, RollDateSwapNode
from ..dates import DateUtils, Tenor, to_date
from ..instruments.definitions import ForwardRateAgreementDefinition, SwapDefinition
from ..instruments.indices import IborIndex
from ..reference.conventions import IborIndexConvention, RollDateFRAConvention, RollDateSwapConvention
from .base import ConversionContext, NodeConverter, accrual
from .swap import LegRequest, SwapLegBuilder, quoted_legs


def roll_dates(node, valuation_time):
    if node.roll_date_end_number <= node.roll_date_start_number:
        raise ValueError(
            f"Roll date end number {node.roll_date_end_number} must exceed start number {node.roll_date_start_number}"
        )
    reference = DateUtils.add_tenor(to_date(valuation_time), node.start_tenor)
    return (
        DateUtils.nth_imm_date(reference, node.roll_date_start_number),
        DateUtils.nth_imm_date(reference, node.roll_date_end_number),
    )


class RollDateNodeConverter(NodeConverter):

    def __init__(self, context: ConversionContext):
        super().__init__(context)
        self.legs = SwapLegBuilder(context)

    def handlers(self):
        return {RollDateFRANode: self.convert_fra, RollDateSwapNode: self.convert_swap}

    def convert_fra(self, node: RollDateFRANode, quote: float, valuation_time, market_data=None):
        convention = self.context.resolve(node, node.roll_date_fra_convention_id, RollDateFRAConvention)
        index_convention = self.context.resolve(node, convention.index_convention_id, IborIndexConvention)
        months = 3 * (node.roll_date_end_number - node.roll_date_start_number)
        index = IborIndex.from_convention(index_convention, Tenor.of_months(months))
        start, end = roll_dates(node, valuation_time)
        return ForwardRateAgreementDefinition(
            index.currency, start, start, end, accrual(start, end, index.day_count), quote, index
        )

    def convert_swap(self, node: RollDateSwapNode, quote: float, valuation_time, market_data=None):
        convention = self.context.resolve(node, node.roll_date_swap_convention_id, RollDateSwapConvention)
        dates = roll_dates(node, valuation_time)
        pay_quoted, receive_quoted = quoted_legs(
            self.legs, node, convention.pay_leg_convention_id, convention.receive_leg_convention_id
        )
        pay = self.legs.build(node, convention.pay_leg_convention_id, LegRequest(
            None, None, -1.0, quote if pay_quoted else None, dates
        ), valuation_time)
        receive = self.legs.build(node, convention.receive_leg_convention_id, LegRequest(
            None, None, 1.0, quote if receive_quoted else None, dates
        ), valuation_time)
        return SwapDefinition((pay, receive))


__all__ = ["RollDateNodeConverter"]
