"""
Calibration instruments in time-relative form.

Every derivative is expressed in year fractions from the valuation date and
prices itself against a MulticurveProvider:

- ``par_spread(provider)``: model-implied quote minus market quote, in the
  units of the quote (rate, price, yield or forward). Zero at calibration.
- ``present_value(provider)``: value of the instrument at the quoted level,
  in its own currency, per unit notional.
- ``maturity_time``: the time used to place the curve node the instrument
  calibrates.

Instruments:
- Cash, DepositIbor, ForwardRateAgreement
- Swap built from Annuity legs of fixed, ibor, overnight and compounded ibor coupons
- ForexForward
- InterestRateFuture, FederalFundsFuture
- Bill, FixedCouponBond
- ZeroCouponInflationSwap
- CurvePoint (direct observation of a curve value)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

import numpy as np
from scipy.optimize import brentq

from .indices import IborIndex, OvernightIndex, PriceIndex

if TYPE_CHECKING:
    from ..calibration.provider import MulticurveProvider


class InstrumentDerivative(ABC):
    """Abstract base for calibration instruments."""

    @property
    @abstractmethod
    def currency(self) -> str:
        pass

    @property
    @abstractmethod
    def maturity_time(self) -> float:
        pass

    @abstractmethod
    def par_spread(self, provider: "MulticurveProvider") -> float:
        pass

    @abstractmethod
    def present_value(self, provider: "MulticurveProvider") -> float:
        pass


@dataclass(frozen=True)
class Cash(InstrumentDerivative):
    """
    Money market deposit on the discounting curve.

    Lend 1 at start, receive 1 + rate * accrual at end.
    """
    ccy: str
    start_time: float
    end_time: float
    accrual_factor: float
    rate: float
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.end_time

    def par_spread(self, provider):
        df_start = provider.discount_factor(self.ccy, self.start_time)
        df_end = provider.discount_factor(self.ccy, self.end_time)
        return (df_start / df_end - 1.0) / self.accrual_factor - self.rate

    def present_value(self, provider):
        df_start = provider.discount_factor(self.ccy, self.start_time)
        df_end = provider.discount_factor(self.ccy, self.end_time)
        return self.notional * ((1.0 + self.rate * self.accrual_factor) * df_end - df_start)


@dataclass(frozen=True)
class DepositIbor(InstrumentDerivative):
    """Ibor fixing quote; calibrates the index forward curve."""
    ccy: str
    start_time: float
    end_time: float
    accrual_factor: float
    rate: float
    index: IborIndex
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.end_time

    def par_spread(self, provider):
        forward = provider.forward_rate(self.index, self.start_time, self.end_time, self.accrual_factor)
        return forward - self.rate

    def present_value(self, provider):
        df_end = provider.discount_factor(self.ccy, self.end_time)
        return -self.notional * self.par_spread(provider) * self.accrual_factor * df_end


@dataclass(frozen=True)
class ForwardRateAgreement(InstrumentDerivative):
    """FRA settled at the start of the fixing period."""
    ccy: str
    payment_time: float
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    rate: float
    index: IborIndex
    notional: float = 1.0

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.fixing_period_end_time

    def _forward(self, provider):
        return provider.forward_rate(
            self.index, self.fixing_period_start_time, self.fixing_period_end_time, self.fixing_accrual_factor
        )

    def par_spread(self, provider):
        return self._forward(provider) - self.rate

    def present_value(self, provider):
        forward = self._forward(provider)
        df = provider.discount_factor(self.ccy, self.payment_time)
        tau = self.fixing_accrual_factor
        return self.notional * tau * (forward - self.rate) / (1.0 + tau * forward) * df


@dataclass(frozen=True)
class CouponFixed:
    payment_time: float
    accrual_factor: float
    rate: float

    def amount(self, provider, ccy) -> float:
        return self.rate * self.accrual_factor


@dataclass(frozen=True)
class CouponIbor:
    payment_time: float
    accrual_factor: float
    index: IborIndex
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    spread: float = 0.0

    def amount(self, provider, ccy) -> float:
        forward = provider.forward_rate(
            self.index, self.fixing_period_start_time, self.fixing_period_end_time, self.fixing_accrual_factor
        )
        return (forward + self.spread) * self.accrual_factor


@dataclass(frozen=True)
class CouponOvernight:
    """Compounded overnight coupon; the compounded rate telescopes to a ratio of forward-curve discount factors."""
    payment_time: float
    accrual_factor: float
    index: OvernightIndex
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    spread: float = 0.0

    def amount(self, provider, ccy) -> float:
        forward = provider.overnight_forward_rate(
            self.index, self.fixing_period_start_time, self.fixing_period_end_time, self.fixing_accrual_factor
        )
        return (forward + self.spread) * self.accrual_factor


@dataclass(frozen=True)
class CouponIborCompounding:
    """
    Ibor coupon compounded over sub-periods.

    ``sub_periods`` holds (fixing start, fixing end, fixing accrual, accrual)
    per sub-period. The spread is simple (not compounded).
    """
    payment_time: float
    accrual_factor: float
    index: IborIndex
    sub_periods: Tuple[Tuple[float, float, float, float], ...]
    spread: float = 0.0

    def amount(self, provider, ccy) -> float:
        growth = 1.0
        for start, end, fixing_accrual, accrual in self.sub_periods:
            forward = provider.forward_rate(self.index, start, end, fixing_accrual)
            growth *= 1.0 + forward * accrual
        return growth - 1.0 + self.spread * self.accrual_factor


@dataclass(frozen=True)
class Annuity:
    """
    A swap leg.

    Attributes:
        ccy: Leg currency
        coupons: Coupons in payment order
        notional: +1 for a receive leg, -1 for a pay leg
        carries_quote: The market quote is this leg's fixed rate or spread
    """
    ccy: str
    coupons: Tuple
    notional: float = 1.0
    carries_quote: bool = False

    @property
    def maturity_time(self) -> float:
        return max(c.payment_time for c in self.coupons)

    def present_value(self, provider) -> float:
        return self.notional * sum(
            c.amount(provider, self.ccy) * provider.discount_factor(self.ccy, c.payment_time)
            for c in self.coupons
        )

    def quote_sensitivity(self, provider) -> float:
        """Derivative of the leg value with respect to its fixed rate or spread."""
        return self.notional * sum(
            c.accrual_factor * provider.discount_factor(self.ccy, c.payment_time) for c in self.coupons
        )


@dataclass(frozen=True)
class Swap(InstrumentDerivative):
    """
    Swap of two or more legs.

    Par spread is the change in the quoted fixed rate or spread that sets the
    value to zero: -PV / (dPV / dquote).
    """
    legs: Tuple[Annuity, ...]

    @property
    def currency(self) -> str:
        return self.legs[0].ccy

    @property
    def maturity_time(self) -> float:
        return max(leg.maturity_time for leg in self.legs)

    def present_value(self, provider):
        return sum(leg.present_value(provider) for leg in self.legs)

    def par_spread(self, provider):
        sensitivity = sum(leg.quote_sensitivity(provider) for leg in self.legs if leg.carries_quote)
        if sensitivity == 0.0:
            raise ValueError("Swap has no leg carrying the market quote")
        return -self.present_value(provider) / sensitivity


@dataclass(frozen=True)
class ForexForward(InstrumentDerivative):
    """
    FX forward exchanging ``amount1`` of currency1 against ``amount2`` of currency2.

    Quoted as the outright forward rate (units of currency2 per currency1).
    """
    currency1: str
    currency2: str
    payment_time: float
    amount1: float
    amount2: float

    @property
    def currency(self) -> str:
        return self.currency2

    @property
    def maturity_time(self) -> float:
        return self.payment_time

    @property
    def forward_rate(self) -> float:
        return -self.amount2 / self.amount1

    def implied_forward(self, provider) -> float:
        spot = provider.fx_rate(self.currency1, self.currency2)
        df1 = provider.discount_factor(self.currency1, self.payment_time)
        df2 = provider.discount_factor(self.currency2, self.payment_time)
        return spot * df1 / df2

    def par_spread(self, provider):
        return self.implied_forward(provider) - self.forward_rate

    def present_value(self, provider):
        spot = provider.fx_rate(self.currency1, self.currency2)
        df1 = provider.discount_factor(self.currency1, self.payment_time)
        df2 = provider.discount_factor(self.currency2, self.payment_time)
        return self.amount1 * df1 * spot + self.amount2 * df2


@dataclass(frozen=True)
class InterestRateFuture(InstrumentDerivative):
    """Ibor future quoted on price (1 - rate); no convexity adjustment."""
    ccy: str
    last_trading_time: float
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    price: float
    index: IborIndex

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.fixing_period_end_time

    def par_spread(self, provider):
        forward = provider.forward_rate(
            self.index, self.fixing_period_start_time, self.fixing_period_end_time, self.fixing_accrual_factor
        )
        return (1.0 - forward) - self.price

    def present_value(self, provider):
        return self.par_spread(provider) * self.fixing_accrual_factor


@dataclass(frozen=True)
class FederalFundsFuture(InstrumentDerivative):
    """Monthly average overnight rate future quoted on price."""
    ccy: str
    fixing_period_start_time: float
    fixing_period_end_time: float
    fixing_accrual_factor: float
    price: float
    index: OvernightIndex

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.fixing_period_end_time

    def par_spread(self, provider):
        forward = provider.overnight_forward_rate(
            self.index, self.fixing_period_start_time, self.fixing_period_end_time, self.fixing_accrual_factor
        )
        return (1.0 - forward) - self.price

    def present_value(self, provider):
        return self.par_spread(provider) * self.fixing_accrual_factor


@dataclass(frozen=True)
class Bill(InstrumentDerivative):
    """
    Discount bill quoted on yield, discounted on the issuer curve.

    Attributes:
        yield_convention: "DISCOUNT" (price = 1 - y * accrual) or
            "INTEREST_AT_MTY" (price = 1 / (1 + y * accrual))
    """
    ccy: str
    issuer: str
    settlement_time: float
    end_time: float
    accrual_factor: float
    quoted_yield: float
    yield_convention: str = "DISCOUNT"

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.end_time

    def implied_price(self, provider) -> float:
        df_settle = provider.issuer_discount_factor(self.issuer, self.ccy, self.settlement_time)
        df_end = provider.issuer_discount_factor(self.issuer, self.ccy, self.end_time)
        return df_end / df_settle

    def price_from_yield(self, y: float) -> float:
        if self.yield_convention == "DISCOUNT":
            return 1.0 - y * self.accrual_factor
        if self.yield_convention == "INTEREST_AT_MTY":
            return 1.0 / (1.0 + y * self.accrual_factor)
        raise ValueError(f"Unknown bill yield convention: {self.yield_convention}")

    def yield_from_price(self, price: float) -> float:
        if self.yield_convention == "DISCOUNT":
            return (1.0 - price) / self.accrual_factor
        if self.yield_convention == "INTEREST_AT_MTY":
            return (1.0 / price - 1.0) / self.accrual_factor
        raise ValueError(f"Unknown bill yield convention: {self.yield_convention}")

    def par_spread(self, provider):
        return self.yield_from_price(self.implied_price(provider)) - self.quoted_yield

    def present_value(self, provider):
        df_settle = provider.issuer_discount_factor(self.issuer, self.ccy, self.settlement_time)
        return (self.implied_price(provider) - self.price_from_yield(self.quoted_yield)) * df_settle


@dataclass(frozen=True)
class FixedCouponBond(InstrumentDerivative):
    """
    Fixed coupon bond quoted on street yield, discounted on the issuer curve.

    Attributes:
        coupon_times: Payment times of the remaining coupons
        coupon_accruals: Accrual factors of those coupons
        accrued_fraction: Fraction of the current coupon period already accrued at settlement
    """
    ccy: str
    issuer: str
    settlement_time: float
    coupon_times: Tuple[float, ...]
    coupon_accruals: Tuple[float, ...]
    coupon_rate: float
    coupon_frequency: int
    accrued_fraction: float
    quoted_yield: float

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.coupon_times[-1]

    def _cash_flows(self) -> np.ndarray:
        flows = np.array([self.coupon_rate * a for a in self.coupon_accruals])
        flows[-1] += 1.0
        return flows

    def dirty_price_from_curves(self, provider) -> float:
        df_settle = provider.issuer_discount_factor(self.issuer, self.ccy, self.settlement_time)
        dfs = np.array([provider.issuer_discount_factor(self.issuer, self.ccy, t) for t in self.coupon_times])
        return float(self._cash_flows() @ dfs / df_settle)

    def dirty_price_from_yield(self, y: float) -> float:
        f = self.coupon_frequency
        periods = np.arange(len(self.coupon_times)) + (1.0 - self.accrued_fraction)
        return float(self._cash_flows() @ (1.0 + y / f) ** (-periods))

    def yield_from_dirty_price(self, price: float) -> float:
        return brentq(lambda y: self.dirty_price_from_yield(y) - price, -0.5, 2.0, xtol=1e-14)

    def par_spread(self, provider):
        return self.yield_from_dirty_price(self.dirty_price_from_curves(provider)) - self.quoted_yield

    def present_value(self, provider):
        df_settle = provider.issuer_discount_factor(self.issuer, self.ccy, self.settlement_time)
        return (self.dirty_price_from_curves(provider) - self.dirty_price_from_yield(self.quoted_yield)) * df_settle


@dataclass(frozen=True)
class ZeroCouponInflationSwap(InstrumentDerivative):
    """
    Zero-coupon inflation swap: I(T_ref) / I_0 - 1 against (1 + K)^n - 1 at T.

    Par spread is in rate terms: (I(T_ref) / I_0)^(1/n) - 1 - K.
    """
    ccy: str
    price_index: PriceIndex
    payment_time: float
    reference_time: float
    index_start_value: float
    fixed_rate: float
    years: int

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.reference_time

    def _ratio(self, provider) -> float:
        return provider.price_index(self.price_index, self.reference_time) / self.index_start_value

    def par_spread(self, provider):
        return self._ratio(provider) ** (1.0 / self.years) - 1.0 - self.fixed_rate

    def present_value(self, provider):
        df = provider.discount_factor(self.ccy, self.payment_time)
        return (self._ratio(provider) - (1.0 + self.fixed_rate) ** self.years) * df


@dataclass(frozen=True)
class CurvePoint(InstrumentDerivative):
    """
    Direct observation of a curve value at a time.

    Attributes:
        curve_name: Curve observed; filled in by the calibrator when built from a node
        kind: "DISCOUNT_FACTOR", "CONTINUOUS" or "PERIODIC"
        periods_per_year: Compounding frequency for "PERIODIC"
    """
    ccy: str
    time: float
    value: float
    kind: str
    curve_name: Optional[str] = None
    periods_per_year: int = 1

    @property
    def currency(self) -> str:
        return self.ccy

    @property
    def maturity_time(self) -> float:
        return self.time

    def model_value(self, provider) -> float:
        if self.curve_name is None:
            raise ValueError("Curve point is not attached to a curve")
        df = provider.curve(self.curve_name).discount_factor(self.time)
        if self.kind == "DISCOUNT_FACTOR":
            return df
        if self.kind == "CONTINUOUS":
            return -np.log(df) / self.time
        if self.kind == "PERIODIC":
            n = self.periods_per_year
            return n * (df ** (-1.0 / (n * self.time)) - 1.0)
        raise ValueError(f"Unknown curve point kind: {self.kind}")

    def par_spread(self, provider):
        return self.model_value(provider) - self.value

    def present_value(self, provider):
        return self.par_spread(provider)


__all__ = [
    "InstrumentDerivative",
    "Cash",
    "DepositIbor",
    "ForwardRateAgreement",
    "CouponFixed",
    "CouponIbor",
    "CouponOvernight",
    "CouponIborCompounding",
    "Annuity",
    "Swap",
    "ForexForward",
    "InterestRateFuture",
    "FederalFundsFuture",
    "Bill",
    "FixedCouponBond",
    "ZeroCouponInflationSwap",
    "CurvePoint",
]
