"""
Trade-dated instrument definitions.

Converters produce definitions from a curve node and its quote. A
definition carries real dates; ``to_derivative(valuation_time)`` turns it
into the time-relative instrument of ``instruments.derivatives`` that the
solver prices. Times are ACT/365 from the valuation date.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Tuple, Union

from ..dates import time_between
from .derivatives import (
    Annuity,
    Bill,
    Cash,
    CouponFixed,
    CouponIbor,
    CouponIborCompounding,
    CouponOvernight,
    CurvePoint,
    DepositIbor,
    FederalFundsFuture,
    FixedCouponBond,
    ForexForward,
    ForwardRateAgreement,
    InstrumentDerivative,
    InterestRateFuture,
    Swap,
    ZeroCouponInflationSwap,
)
from .indices import IborIndex, OvernightIndex, PriceIndex

ValuationTime = Union[date, datetime]


class InstrumentDefinition(ABC):
    """A dated calibration instrument."""

    @property
    @abstractmethod
    def currency(self) -> str:
        pass

    @abstractmethod
    def to_derivative(self, valuation_time: ValuationTime) -> InstrumentDerivative:
        pass


@dataclass(frozen=True)
class CashDefinition(InstrumentDefinition):
    """Deposit from start to end at a fixed rate."""
    ccy: str
    start_date: date
    end_date: date
    accrual_factor: float
    rate: float
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return Cash(
            self.ccy,
            time_between(valuation_time, self.start_date),
            time_between(valuation_time, self.end_date),
            self.accrual_factor,
            self.rate,
            self.notional,
        )


@dataclass(frozen=True)
class DepositIborDefinition(InstrumentDefinition):
    """Ibor fixing over the index period starting at spot."""
    ccy: str
    start_date: date
    end_date: date
    accrual_factor: float
    rate: float
    index: IborIndex
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return DepositIbor(
            self.ccy,
            time_between(valuation_time, self.start_date),
            time_between(valuation_time, self.end_date),
            self.accrual_factor,
            self.rate,
            self.index,
            self.notional,
        )


@dataclass(frozen=True)
class ForwardRateAgreementDefinition(InstrumentDefinition):
    """
    FRA on an ibor index.

    Attributes:
        payment_date: Settlement date (start of the fixing period)
        fixing_period_start: Start of the index period
        fixing_period_end: End of the index period
        fixing_accrual_factor: Index day count fraction of the period
        rate: Contract rate
    """
    ccy: str
    payment_date: date
    fixing_period_start: date
    fixing_period_end: date
    fixing_accrual_factor: float
    rate: float
    index: IborIndex
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return ForwardRateAgreement(
            self.ccy,
            time_between(valuation_time, self.payment_date),
            time_between(valuation_time, self.fixing_period_start),
            time_between(valuation_time, self.fixing_period_end),
            self.fixing_accrual_factor,
            self.rate,
            self.index,
            self.notional,
        )


@dataclass(frozen=True)
class CouponFixedDefinition:
    payment_date: date
    accrual_start: date
    accrual_end: date
    accrual_factor: float
    rate: float

    def to_derivative(self, valuation_time) -> CouponFixed:
        return CouponFixed(time_between(valuation_time, self.payment_date), self.accrual_factor, self.rate)


@dataclass(frozen=True)
class CouponIborDefinition:
    payment_date: date
    accrual_start: date
    accrual_end: date
    accrual_factor: float
    index: IborIndex
    fixing_period_start: date
    fixing_period_end: date
    fixing_accrual_factor: float
    spread: float = 0.0

    def to_derivative(self, valuation_time) -> CouponIbor:
        return CouponIbor(
            time_between(valuation_time, self.payment_date),
            self.accrual_factor,
            self.index,
            time_between(valuation_time, self.fixing_period_start),
            time_between(valuation_time, self.fixing_period_end),
            self.fixing_accrual_factor,
            self.spread,
        )


@dataclass(frozen=True)
class CouponOvernightDefinition:
    payment_date: date
    accrual_start: date
    accrual_end: date
    accrual_factor: float
    index: OvernightIndex
    fixing_accrual_factor: float
    spread: float = 0.0

    def to_derivative(self, valuation_time) -> CouponOvernight:
        return CouponOvernight(
            time_between(valuation_time, self.payment_date),
            self.accrual_factor,
            self.index,
            time_between(valuation_time, self.accrual_start),
            time_between(valuation_time, self.accrual_end),
            self.fixing_accrual_factor,
            self.spread,
        )


@dataclass(frozen=True)
class CouponIborCompoundingDefinition:
    """
    Compounded ibor coupon.

    Attributes:
        sub_periods: (fixing start, fixing end, fixing accrual, accrual factor) per sub-period
    """
    payment_date: date
    accrual_start: date
    accrual_end: date
    accrual_factor: float
    index: IborIndex
    sub_periods: Tuple[Tuple[date, date, float, float], ...]
    spread: float = 0.0

    def to_derivative(self, valuation_time) -> CouponIborCompounding:
        sub_periods = tuple(
            (time_between(valuation_time, s), time_between(valuation_time, e), fixing_accrual, accrual)
            for s, e, fixing_accrual, accrual in self.sub_periods
        )
        return CouponIborCompounding(
            time_between(valuation_time, self.payment_date),
            self.accrual_factor,
            self.index,
            sub_periods,
            self.spread,
        )


@dataclass(frozen=True)
class AnnuityDefinition:
    """
    Swap leg definition.

    Attributes:
        ccy: Leg currency
        coupons: Coupon definitions in payment order
        notional: +1 receive, -1 pay
        carries_quote: The market quote is this leg's fixed rate or spread
    """
    ccy: str
    coupons: Tuple
    notional: float = 1.0
    carries_quote: bool = False

    @property
    def maturity_date(self) -> date:
        return max(c.payment_date for c in self.coupons)

    def to_derivative(self, valuation_time) -> Annuity:
        return Annuity(
            self.ccy,
            tuple(c.to_derivative(valuation_time) for c in self.coupons),
            self.notional,
            self.carries_quote,
        )


@dataclass(frozen=True)
class SwapDefinition(InstrumentDefinition):
    """Swap made of two (or, for basis swaps, three) legs."""
    legs: Tuple[AnnuityDefinition, ...]

    @property
    def currency(self) -> str:
        return self.legs[0].ccy

    @property
    def maturity_date(self) -> date:
        return max(leg.maturity_date for leg in self.legs)

    def to_derivative(self, valuation_time):
        return Swap(tuple(leg.to_derivative(valuation_time) for leg in self.legs))


@dataclass(frozen=True)
class ForexDefinition(InstrumentDefinition):
    """
    Exchange of ``amount1`` of currency1 for ``amount2`` of currency2 on the exchange date.

    Calibration forwards pay 1 of currency1 and receive ``-quote`` of currency2.
    """
    currency1: str
    currency2: str
    exchange_date: date
    amount1: float
    amount2: float

    @classmethod
    def from_forward_rate(cls, currency1: str, currency2: str, exchange_date: date, forward: float):
        return cls(currency1, currency2, exchange_date, 1.0, -forward)

    @property
    def currency(self) -> str:
        return self.currency2

    def to_derivative(self, valuation_time):
        return ForexForward(
            self.currency1,
            self.currency2,
            time_between(valuation_time, self.exchange_date),
            self.amount1,
            self.amount2,
        )


@dataclass(frozen=True)
class InterestRateFutureDefinition(InstrumentDefinition):
    ccy: str
    last_trading_date: date
    fixing_period_start: date
    fixing_period_end: date
    fixing_accrual_factor: float
    price: float
    index: IborIndex

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return InterestRateFuture(
            self.ccy,
            time_between(valuation_time, self.last_trading_date),
            time_between(valuation_time, self.fixing_period_start),
            time_between(valuation_time, self.fixing_period_end),
            self.fixing_accrual_factor,
            self.price,
            self.index,
        )


@dataclass(frozen=True)
class FederalFundsFutureDefinition(InstrumentDefinition):
    ccy: str
    fixing_period_start: date
    fixing_period_end: date
    fixing_accrual_factor: float
    price: float
    index: OvernightIndex

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return FederalFundsFuture(
            self.ccy,
            time_between(valuation_time, self.fixing_period_start),
            time_between(valuation_time, self.fixing_period_end),
            self.fixing_accrual_factor,
            self.price,
            self.index,
        )


@dataclass(frozen=True)
class BillDefinition(InstrumentDefinition):
    ccy: str
    issuer: str
    settlement_date: date
    maturity_date: date
    accrual_factor: float
    quoted_yield: float
    yield_convention: str = "DISCOUNT"

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return Bill(
            self.ccy,
            self.issuer,
            time_between(valuation_time, self.settlement_date),
            time_between(valuation_time, self.maturity_date),
            self.accrual_factor,
            self.quoted_yield,
            self.yield_convention,
        )


@dataclass(frozen=True)
class BondFixedDefinition(InstrumentDefinition):
    """
    Fixed coupon bond settled on the settlement date.

    Attributes:
        payment_dates: Remaining coupon payment dates after settlement
        accrual_factors: Accrual factor of each remaining coupon
        accrued_fraction: Share of the current coupon period accrued at settlement
    """
    ccy: str
    issuer: str
    settlement_date: date
    payment_dates: Tuple[date, ...]
    accrual_factors: Tuple[float, ...]
    coupon_rate: float
    coupon_frequency: int
    accrued_fraction: float
    quoted_yield: float

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return FixedCouponBond(
            self.ccy,
            self.issuer,
            time_between(valuation_time, self.settlement_date),
            tuple(time_between(valuation_time, d) for d in self.payment_dates),
            tuple(self.accrual_factors),
            self.coupon_rate,
            self.coupon_frequency,
            self.accrued_fraction,
            self.quoted_yield,
        )


@dataclass(frozen=True)
class ZeroCouponInflationSwapDefinition(InstrumentDefinition):
    """
    Zero-coupon inflation swap.

    Attributes:
        reference_date: Date the final index level is observed for (maturity minus the month lag)
        index_start_value: Base index fixing read from market data
    """
    ccy: str
    price_index: PriceIndex
    start_date: date
    payment_date: date
    reference_date: date
    index_start_value: float
    fixed_rate: float
    years: int

    @property
    def currency(self) -> str:
        return self.ccy

    def to_derivative(self, valuation_time):
        return ZeroCouponInflationSwap(
            self.ccy,
            self.price_index,
            time_between(valuation_time, self.payment_date),
            time_between(valuation_time, self.reference_date),
            self.index_start_value,
            self.fixed_rate,
            self.years,
        )


@dataclass(frozen=True)
class CurvePointDefinition(InstrumentDefinition):
    """Direct observation of the calibrated curve's discount factor or zero rate at a date."""
    ccy: str
    point_date: date
    value: float
    kind: str
    periods_per_year: int = 1
    curve_name: Optional[str] = None

    @property
    def currency(self) -> str:
        return self.ccy

    def for_curve(self, curve_name: str) -> "CurvePointDefinition":
        return replace(self, curve_name=curve_name)

    def to_derivative(self, valuation_time):
        return CurvePoint(
            self.ccy,
            time_between(valuation_time, self.point_date),
            self.value,
            self.kind,
            self.curve_name,
            self.periods_per_year,
        )


__all__ = [
    "InstrumentDefinition",
    "CashDefinition",
    "DepositIborDefinition",
    "ForwardRateAgreementDefinition",
    "CouponFixedDefinition",
    "CouponIborDefinition",
    "CouponOvernightDefinition",
    "CouponIborCompoundingDefinition",
    "AnnuityDefinition",
    "SwapDefinition",
    "ForexDefinition",
    "InterestRateFutureDefinition",
    "FederalFundsFutureDefinition",
    "BillDefinition",
    "BondFixedDefinition",
    "ZeroCouponInflationSwapDefinition",
    "CurvePointDefinition",
]
