"""
Index objects used by instruments and provider role maps.

Indices are value objects: two indices built from the same convention and
tenor compare equal, which is how an instrument finds the curve a
configuration assigned to its index.
"""

from dataclasses import dataclass

from ..conventions import BusinessDayConvention, DayCount
from ..dates import Tenor
from ..reference.conventions import (
    IborIndexConvention,
    OvernightIndexConvention,
    PriceIndexConvention,
)


@dataclass(frozen=True)
class IborIndex:
    """
    Ibor-type index.

    Attributes:
        name: Index name (the convention name)
        currency: Currency code
        tenor: Index tenor
        day_count: Accrual day count
        business_day_convention: Period end adjustment
        spot_lag: Fixing to start lag in business days
        is_eom: End-of-month rule
    """
    name: str
    currency: str
    tenor: Tenor
    day_count: DayCount
    business_day_convention: BusinessDayConvention
    spot_lag: int
    is_eom: bool

    @classmethod
    def from_convention(cls, convention: IborIndexConvention, tenor: Tenor) -> "IborIndex":
        return cls(
            name=convention.name,
            currency=convention.currency,
            tenor=Tenor.parse(tenor),
            day_count=convention.day_count,
            business_day_convention=convention.business_day_convention,
            spot_lag=convention.settlement_days,
            is_eom=convention.is_eom,
        )

    def __str__(self) -> str:
        return f"{self.name} {self.tenor}"


@dataclass(frozen=True)
class OvernightIndex:
    """Overnight index."""
    name: str
    currency: str
    day_count: DayCount
    publication_lag: int

    @classmethod
    def from_convention(cls, convention: OvernightIndexConvention) -> "OvernightIndex":
        return cls(
            name=convention.name,
            currency=convention.currency,
            day_count=convention.day_count,
            publication_lag=convention.publication_lag,
        )

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PriceIndex:
    """Consumer price index."""
    name: str
    currency: str

    @classmethod
    def from_convention(cls, convention: PriceIndexConvention) -> "PriceIndex":
        return cls(name=convention.name, currency=convention.currency)

    def __str__(self) -> str:
        return self.name


__all__ = ["IborIndex", "OvernightIndex", "PriceIndex"]
