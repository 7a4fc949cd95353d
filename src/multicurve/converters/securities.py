"""
Bill and bond node conversion.

The node names the security; currency, issuer, day count, calendar and
settlement lag come from the security record. Quotes are yields.
"""

from ..curves.nodes import BillNode, BondNode
from ..conventions import year_fraction
from ..dates import DateUtils, Tenor, generate_accrual_schedule
from ..errors import UnsupportedNodeTypeError
from ..instruments.definitions import BillDefinition, BondFixedDefinition
from ..reference.securities import BillSecurity, BondSecurity
from .base import NodeConverter


class SecurityNodeConverter(NodeConverter):

    def handlers(self):
        return {BillNode: self.convert_bill, BondNode: self.convert_bond}

    def _security(self, node, kind):
        security = self.context.securities.get_security(node.security_id)
        if not isinstance(security, kind):
            raise UnsupportedNodeTypeError(
                f"{type(node).__name__} needs a {kind.__name__}, got {type(security).__name__} for {node.security_id}"
            )
        return security

    def convert_bill(self, node: BillNode, quote: float, valuation_time, market_data=None):
        bill = self._security(node, BillSecurity)
        calendar = self.context.calendar(bill.region_calendar)
        settlement = DateUtils.spot_date(valuation_time, bill.settlement_days, calendar)
        return BillDefinition(
            bill.currency,
            bill.issuer,
            settlement,
            bill.maturity,
            year_fraction(settlement, bill.maturity, bill.day_count),
            quote,
            bill.yield_convention,
        )

    def convert_bond(self, node: BondNode, quote: float, valuation_time, market_data=None):
        bond = self._security(node, BondSecurity)
        calendar = self.context.calendar(bond.region_calendar)
        settlement = DateUtils.spot_date(valuation_time, bond.settlement_days, calendar)
        if bond.coupon_frequency <= 0 or 12 % bond.coupon_frequency:
            raise ValueError(f"Unsupported coupon frequency {bond.coupon_frequency} for {bond.name}")

        schedule = generate_accrual_schedule(
            bond.first_accrual_date,
            bond.maturity,
            Tenor.of_months(12 // bond.coupon_frequency),
            bond.day_count,
            bond.business_day_convention,
            calendar,
        )
        remaining = [i for i, d in enumerate(schedule.payment_dates) if d > settlement]
        if not remaining:
            raise ValueError(f"Bond {bond.name} has matured before settlement {settlement}")

        first = remaining[0]
        period_start = schedule.accrual_starts[first]
        period_end = schedule.accrual_ends[first]
        accrued_fraction = 0.0
        if settlement > period_start:
            accrued_fraction = (year_fraction(period_start, settlement, bond.day_count)
                                / year_fraction(period_start, period_end, bond.day_count))

        return BondFixedDefinition(
            bond.currency,
            bond.issuer,
            settlement,
            tuple(schedule.payment_dates[i] for i in remaining),
            tuple(schedule.year_fractions[i] for i in remaining),
            bond.coupon,
            bond.coupon_frequency,
            accrued_fraction,
            quote,
        )


__all__ = ["SecurityNodeConverter"]
