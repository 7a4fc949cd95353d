"""Calibration instruments: indices, dated definitions and time-based derivatives."""

from .indices import IborIndex, OvernightIndex, PriceIndex
from .definitions import (
    InstrumentDefinition,
    CashDefinition,
    DepositIborDefinition,
    ForwardRateAgreementDefinition,
    CouponFixedDefinition,
    CouponIborDefinition,
    CouponOvernightDefinition,
    CouponIborCompoundingDefinition,
    AnnuityDefinition,
    SwapDefinition,
    ForexDefinition,
    InterestRateFutureDefinition,
    FederalFundsFutureDefinition,
    BillDefinition,
    BondFixedDefinition,
    ZeroCouponInflationSwapDefinition,
    CurvePointDefinition,
)
from .derivatives import (
    InstrumentDerivative,
    Cash,
    DepositIbor,
    ForwardRateAgreement,
    Annuity,
    Swap,
    ForexForward,
    InterestRateFuture,
    FederalFundsFuture,
    Bill,
    FixedCouponBond,
    ZeroCouponInflationSwap,
    CurvePoint,
)

__all__ = [
    "IborIndex",
    "OvernightIndex",
    "PriceIndex",
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
    "InstrumentDerivative",
    "Cash",
    "DepositIbor",
    "ForwardRateAgreement",
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
