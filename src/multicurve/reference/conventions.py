"""
Financial convention records.

Each convention is an immutable, named record of the market rules for one
instrument family: day count, business day convention, calendar region,
settlement lag, end-of-month rule and, where relevant, the index or legs it
refers to. Conventions refer to each other (and to index securities) by
ExternalId only; resolution happens through the convention and security
sources.
"""

from dataclasses import dataclass
from typing import Optional

from ..conventions import BusinessDayConvention, DayCount
from ..dates import Tenor
from .identifiers import ExternalId, ExternalIdBundle


@dataclass(frozen=True)
class FinancialConvention:
    """
    Base for all conventions.

    Attributes:
        name: Display name
        external_ids: Identifiers under which the convention is registered
    """
    name: str
    external_ids: ExternalIdBundle


@dataclass(frozen=True)
class DepositConvention(FinancialConvention):
    """Money market deposit."""
    day_count: DayCount
    business_day_convention: BusinessDayConvention
    settlement_days: int
    is_eom: bool
    currency: str
    region_calendar: ExternalId


@dataclass(frozen=True)
class IborIndexConvention(FinancialConvention):
    """Ibor-type index; the index tenor comes from the node or the index security."""
    day_count: DayCount
    business_day_convention: BusinessDayConvention
    settlement_days: int
    is_eom: bool
    currency: str
    region_calendar: ExternalId
    fixing_calendar: Optional[ExternalId] = None
    fixing_page: str = ""


@dataclass(frozen=True)
class OvernightIndexConvention(FinancialConvention):
    """Overnight index. Overnight instruments settle same day, following, no EOM."""
    day_count: DayCount
    publication_lag: int
    currency: str
    region_calendar: ExternalId


@dataclass(frozen=True)
class PriceIndexConvention(FinancialConvention):
    """Consumer price index."""
    currency: str
    region: ExternalId
    price_index_id: ExternalId


@dataclass(frozen=True)
class FXSpotConvention(FinancialConvention):
    """
    FX spot settlement.

    When ``use_intermediate_us_holidays`` is None the legacy rule applies:
    spot is counted on the settlement region calendar. Otherwise spot and
    delivery dates are computed on the currency pair calendars, and USD
    holidays between spot and delivery are honoured only when the flag is true
    (Latin-American pairs).
    """
    settlement_days: int
    settlement_region: Optional[ExternalId] = None
    use_intermediate_us_holidays: Optional[bool] = None

    @property
    def uses_currency_pair_rules(self) -> bool:
        return self.use_intermediate_us_holidays is not None


@dataclass(frozen=True)
class FXForwardAndSwapConvention(FinancialConvention):
    """FX forward and swap delivery rules, referencing an FX spot convention."""
    spot_convention_id: ExternalId
    business_day_convention: BusinessDayConvention
    is_eom: bool
    settlement_region: Optional[ExternalId] = None


@dataclass(frozen=True)
class FixedLegConvention(FinancialConvention):
    """Fixed leg of a swap."""
    payment_tenor: Tenor
    day_count: DayCount
    business_day_convention: BusinessDayConvention
    currency: str
    region_calendar: ExternalId
    settlement_days: int
    is_eom: bool
    payment_lag: int = 0


@dataclass(frozen=True)
class VanillaIborLegConvention(FinancialConvention):
    """Floating leg paying an ibor index each reset period."""
    ibor_index_convention_id: ExternalId
    is_advance_fixing: bool
    reset_tenor: Tenor
    settlement_days: int
    is_eom: bool
    payment_lag: int = 0


@dataclass(frozen=True)
class OISLegConvention(FinancialConvention):
    """Floating leg paying a compounded overnight rate each payment period."""
    overnight_index_convention_id: ExternalId
    payment_tenor: Tenor
    business_day_convention: BusinessDayConvention
    settlement_days: int
    is_eom: bool
    payment_lag: int = 0


@dataclass(frozen=True)
class CompoundingIborLegConvention(FinancialConvention):
    """Floating leg compounding several ibor fixings into each payment."""
    ibor_index_convention_id: ExternalId
    payment_tenor: Tenor
    composition_tenor: Tenor
    settlement_days: int
    is_eom: bool
    payment_lag: int = 0


@dataclass(frozen=True)
class SwapConvention(FinancialConvention):
    """Swap as a pair of leg conventions."""
    pay_leg_convention_id: ExternalId
    receive_leg_convention_id: ExternalId


@dataclass(frozen=True)
class SwapIndexConvention(FinancialConvention):
    """Swap rate index (CMS underlying)."""
    swap_convention_id: ExternalId
    fixing_time: str = "11:00"


@dataclass(frozen=True)
class CMSLegConvention(FinancialConvention):
    """Leg paying a swap index rate."""
    swap_index_convention_id: ExternalId
    payment_tenor: Tenor
    is_advance_fixing: bool = True


@dataclass(frozen=True)
class InflationLegConvention(FinancialConvention):
    """
    Zero-coupon inflation leg.

    Attributes:
        month_lag: Observation lag in months for the reference index
        spot_lag: Settlement days
        price_index_convention_id: Price index convention (or index security)
        fixing_id: Market data id holding the base index level
    """
    business_day_convention: BusinessDayConvention
    day_count: DayCount
    is_eom: bool
    month_lag: int
    spot_lag: int
    price_index_convention_id: ExternalId
    fixing_id: ExternalId


@dataclass(frozen=True)
class InterestRateFutureConvention(FinancialConvention):
    """Quarterly (IMM) interest rate future on an ibor index."""
    index_convention_id: ExternalId
    exchange_calendar: ExternalId
    last_trade_lag: int = 2


@dataclass(frozen=True)
class FederalFundsFutureConvention(FinancialConvention):
    """Monthly future on the average overnight rate."""
    index_convention_id: ExternalId
    exchange_calendar: ExternalId


@dataclass(frozen=True)
class RollDateFRAConvention(FinancialConvention):
    """FRA whose accrual dates fall on quarterly IMM roll dates."""
    index_convention_id: ExternalId


@dataclass(frozen=True)
class RollDateSwapConvention(FinancialConvention):
    """Swap whose start and end fall on quarterly IMM roll dates."""
    pay_leg_convention_id: ExternalId
    receive_leg_convention_id: ExternalId


__all__ = [
    "FinancialConvention",
    "DepositConvention",
    "IborIndexConvention",
    "OvernightIndexConvention",
    "PriceIndexConvention",
    "FXSpotConvention",
    "FXForwardAndSwapConvention",
    "FixedLegConvention",
    "VanillaIborLegConvention",
    "OISLegConvention",
    "CompoundingIborLegConvention",
    "SwapConvention",
    "SwapIndexConvention",
    "CMSLegConvention",
    "InflationLegConvention",
    "InterestRateFutureConvention",
    "FederalFundsFutureConvention",
    "RollDateFRAConvention",
    "RollDateSwapConvention",
]
