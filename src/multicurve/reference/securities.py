"""
Security records referenced by curve nodes.

Index securities embed the identifier of the convention that describes
them; this is what the convention resolver falls back to when only the
security has been registered.
"""

from dataclasses import dataclass
from datetime import date

from ..conventions import BusinessDayConvention, DayCount
from ..dates import Tenor
from .identifiers import ExternalId, ExternalIdBundle


@dataclass(frozen=True)
class Security:
    """
    Base for all securities.

    Attributes:
        name: Display name
        external_ids: Identifiers of the security
    """
    name: str
    external_ids: ExternalIdBundle


@dataclass(frozen=True)
class IndexSecurity(Security):
    """A security describing an index; ``convention_id`` points at its convention."""
    convention_id: ExternalId


@dataclass(frozen=True)
class IborIndexSecurity(IndexSecurity):
    tenor: Tenor


@dataclass(frozen=True)
class OvernightIndexSecurity(IndexSecurity):
    pass


@dataclass(frozen=True)
class PriceIndexSecurity(IndexSecurity):
    pass


@dataclass(frozen=True)
class BillSecurity(Security):
    """
    Zero-coupon discount bill.

    Attributes:
        yield_convention: "DISCOUNT" (bank discount) or "INTEREST_AT_MTY"
    """
    currency: str
    maturity: date
    day_count: DayCount
    issuer: str
    region_calendar: ExternalId
    settlement_days: int
    yield_convention: str = "DISCOUNT"


@dataclass(frozen=True)
class BondSecurity(Security):
    """Fixed coupon bond quoted on yield to maturity."""
    currency: str
    coupon: float
    coupon_frequency: int
    first_accrual_date: date
    maturity: date
    day_count: DayCount
    issuer: str
    region_calendar: ExternalId
    settlement_days: int
    business_day_convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING
    face_value: float = 1.0


__all__ = [
    "Security",
    "IndexSecurity",
    "IborIndexSecurity",
    "OvernightIndexSecurity",
    "PriceIndexSecurity",
    "BillSecurity",
    "BondSecurity",
]
