"""
Shared pieces of the curve node converters.

Provides:
- ConversionContext: the lookups every converter needs
- SettlementRule: spot, start and end date arithmetic for one convention
- NodeConverter: base class with a per-converter handler registry
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Optional, Type, Union

from ..conventions import BusinessDayConvention, DayCount, year_fraction
from ..dates import DateUtils, HolidayCalendar, Tenor, WEEKEND_CALENDAR
from ..errors import UnresolvedNodeConventionError, UnsupportedNodeTypeError
from ..reference.conventions import FinancialConvention
from ..reference.identifiers import ExternalId
from ..reference.resolver import C, ConventionResolver
from ..reference.sources import HolidaySource, MarketDataSource, SecuritySource

ValuationTime = Union[date, datetime]


@dataclass(frozen=True)
class ConversionContext:
    """
    Lookups shared by all converters.

    Attributes:
        resolver: Convention resolver with security fallback
        securities: Security source (bills, bonds)
        holidays: Holiday calendars by region and currency
    """
    resolver: ConventionResolver
    securities: SecuritySource
    holidays: HolidaySource

    def resolve(self, node, identifier: ExternalId, kind: Type[C] = FinancialConvention) -> C:
        """
        Resolve a convention a node refers to.

        Raises:
            UnresolvedNodeConventionError: If neither the convention nor an
                index security for it is available. The original not-found
                error is the cause.
        """
        resolution = self.resolver.resolve(identifier, kind)
        if not resolution.ok:
            raise UnresolvedNodeConventionError(node, identifier) from resolution.primary_error
        return resolution.convention

    def calendar(self, region: Optional[ExternalId]) -> HolidayCalendar:
        if region is None:
            return WEEKEND_CALENDAR
        return self.holidays.region_calendar(region)


@dataclass(frozen=True)
class SettlementRule:
    """
    Date rules of one convention.

    Attributes:
        settlement_days: Business days from valuation to spot
        business_day_convention: Adjustment of start and end dates
        is_eom: End-of-month rule
        calendar: Holiday calendar
    """
    settlement_days: int
    business_day_convention: BusinessDayConvention
    is_eom: bool
    calendar: HolidayCalendar = WEEKEND_CALENDAR

    @classmethod
    def overnight(cls, calendar: HolidayCalendar) -> "SettlementRule":
        """Overnight instruments: same-day settlement, following, no end-of-month rule."""
        return cls(0, BusinessDayConvention.FOLLOWING, False, calendar)

    def spot(self, valuation_time: ValuationTime) -> date:
        return DateUtils.spot_date(valuation_time, self.settlement_days, self.calendar)

    def shift(self, d: date, tenor: Union[str, Tenor]) -> date:
        return DateUtils.adjust_by_tenor(d, tenor, self.business_day_convention, self.calendar, self.is_eom)

    def start_end(self, valuation_time: ValuationTime, start_tenor, maturity_tenor):
        """(start, end): start = spot + start tenor, end = start + maturity tenor."""
        start = self.shift(self.spot(valuation_time), start_tenor)
        return start, self.shift(start, maturity_tenor)


def accrual(start: date, end: date, day_count: DayCount) -> float:
    return year_fraction(start, end, day_count)


def subtract_business_days(d: date, n: int, calendar: HolidayCalendar) -> date:
    result = d
    removed = 0
    while removed < n:
        result -= timedelta(days=1)
        if calendar.is_business_day(result):
            removed += 1
    return result


Handler = Callable[..., object]


class NodeConverter(ABC):
    """
    Converter for one family of nodes.

    Subclasses return their node handlers from ``handlers``; the dispatcher
    merges these into one registry keyed on node type.
    """

    def __init__(self, context: ConversionContext):
        self.context = context

    @abstractmethod
    def handlers(self) -> Dict[type, Handler]:
        """Node type -> handler(node, quote, valuation_time, market_data)."""

    @staticmethod
    def _dispatch_convention(node, convention, table: Dict[type, Handler]) -> Handler:
        for kind, handler in table.items():
            if isinstance(convention, kind):
                return handler
        raise UnsupportedNodeTypeError(
            f"Cannot handle convention {type(convention).__name__} for {type(node).__name__}"
        )


__all__ = [
    "ConversionContext",
    "SettlementRule",
    "NodeConverter",
    "accrual",
    "subtract_business_days",
]
