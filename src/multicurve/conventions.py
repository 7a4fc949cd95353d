"""
Day count conventions and business day adjustments.

Supported Day Counts:
- ACT/360: Actual days / 360 (money markets, OIS)
- ACT/365: Actual days / 365 fixed
- ACT/ACT: Actual days / actual days in year (ISDA)
- 30/360: 30 days per month / 360 (bond basis)

Business Day Conventions:
- Modified Following: Move to next business day, unless it falls in next month (then previous)
- Following: Move to next business day
- Preceding: Move to previous business day
- Modified Preceding: Move to previous business day, unless it falls in previous month
"""

from datetime import date, timedelta
from enum import Enum
from typing import Container, Optional
import calendar


class DayCount(Enum):
    """Day count convention enumeration."""
    ACT_360 = "ACT/360"
    ACT_365 = "ACT/365"
    ACT_ACT = "ACT/ACT"
    THIRTY_360 = "30/360"

    @classmethod
    def from_string(cls, s: str) -> "DayCount":
        """Parse day count from string representation."""
        mapping = {
            "ACT/360": cls.ACT_360,
            "ACT360": cls.ACT_360,
            "ACT/365": cls.ACT_365,
            "ACT365": cls.ACT_365,
            "ACT/365F": cls.ACT_365,
            "ACT/365FIXED": cls.ACT_365,
            "ACT/ACT": cls.ACT_ACT,
            "ACTACT": cls.ACT_ACT,
            "ACT/ACTISDA": cls.ACT_ACT,
            "30/360": cls.THIRTY_360,
            "30360": cls.THIRTY_360,
            "30U/360": cls.THIRTY_360,
        }
        key = s.upper().replace(" ", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown day count convention: {s}")


class BusinessDayConvention(Enum):
    """Business day adjustment convention."""
    MODIFIED_FOLLOWING = "ModifiedFollowing"
    FOLLOWING = "Following"
    PRECEDING = "Preceding"
    MODIFIED_PRECEDING = "ModifiedPreceding"
    UNADJUSTED = "Unadjusted"

    @classmethod
    def from_string(cls, s: str) -> "BusinessDayConvention":
        """Parse a business day convention, ignoring case and separators."""
        key = s.upper().replace(" ", "").replace("_", "").replace("-", "")
        for member in cls:
            if member.value.upper() == key:
                return member
        raise ValueError(f"Unknown business day convention: {s}")


class CompoundingConvention(Enum):
    """Interest rate compounding convention."""
    CONTINUOUS = "Continuous"
    ANNUAL = "Annual"
    SEMI_ANNUAL = "SemiAnnual"
    QUARTERLY = "Quarterly"
    MONTHLY = "Monthly"
    SIMPLE = "Simple"

    @property
    def periods_per_year(self) -> int:
        """Compounding periods per year; 0 for continuous and simple."""
        return {
            CompoundingConvention.ANNUAL: 1,
            CompoundingConvention.SEMI_ANNUAL: 2,
            CompoundingConvention.QUARTERLY: 4,
            CompoundingConvention.MONTHLY: 12,
        }.get(self, 0)


def year_fraction(start: date, end: date, day_count: DayCount) -> float:
    """
    Calculate year fraction between two dates using specified day count convention.

    Args:
        start: Start date
        end: End date
        day_count: Day count convention

    Returns:
        Year fraction as float (0.0 when end is not after start)

    Conventions:
        ACT/360: (end - start).days / 360
        ACT/365: (end - start).days / 365
        ACT/ACT: Actual days / actual days in period's year(s)
        30/360: Assumes 30 days per month, 360 days per year
    """
    if start >= end:
        return 0.0

    actual_days = (end - start).days

    if day_count == DayCount.ACT_360:
        return actual_days / 360.0

    elif day_count == DayCount.ACT_365:
        return actual_days / 365.0

    elif day_count == DayCount.ACT_ACT:
        # ISDA: each calendar year contributes days / days in that year
        total = 0.0
        current = start
        while current < end:
            next_year = date(current.year + 1, 1, 1)
            period_end = min(next_year, end)
            days_in_year = 366 if calendar.isleap(current.year) else 365
            total += (period_end - current).days / days_in_year
            current = period_end
        return total

    elif day_count == DayCount.THIRTY_360:
        d1 = min(start.day, 30)
        d2 = end.day
        if d2 == 31 and d1 == 30:
            d2 = 30
        return (360 * (end.year - start.year) + 30 * (end.month - start.month) + (d2 - d1)) / 360.0

    else:
        raise ValueError(f"Unknown day count: {day_count}")


def is_business_day(d: date, holidays: Optional[Container[date]] = None) -> bool:
    """
    Check if a date is a business day.

    Saturday and Sunday are never business days.

    Args:
        d: Date to check
        holidays: Optional holiday container (a set of dates or a HolidayCalendar)

    Returns:
        True if business day, False otherwise
    """
    if d.weekday() >= 5:
        return False

    if holidays is not None and d in holidays:
        return False

    return True


def _roll(d: date, step: int, holidays: Optional[Container[date]]) -> date:
    adjusted = d
    while not is_business_day(adjusted, holidays):
        adjusted += timedelta(days=step)
    return adjusted


def adjust_business_day(
    d: date,
    convention: BusinessDayConvention,
    holidays: Optional[Container[date]] = None
) -> date:
    """
    Adjust a date according to business day convention.

    Args:
        d: Date to adjust
        convention: Business day adjustment rule
        holidays: Optional holiday container

    Returns:
        Adjusted date
    """
    if convention == BusinessDayConvention.UNADJUSTED or is_business_day(d, holidays):
        return d

    if convention == BusinessDayConvention.FOLLOWING:
        return _roll(d, 1, holidays)

    if convention == BusinessDayConvention.PRECEDING:
        return _roll(d, -1, holidays)

    if convention == BusinessDayConvention.MODIFIED_FOLLOWING:
        adjusted = _roll(d, 1, holidays)
        if adjusted.month != d.month:
            adjusted = _roll(d, -1, holidays)
        return adjusted

    if convention == BusinessDayConvention.MODIFIED_PRECEDING:
        adjusted = _roll(d, -1, holidays)
        if adjusted.month != d.month:
            adjusted = _roll(d, 1, holidays)
        return adjusted

    raise ValueError(f"Unknown business day convention: {convention}")


__all__ = [
    "DayCount",
    "BusinessDayConvention",
    "CompoundingConvention",
    "year_fraction",
    "is_business_day",
    "adjust_business_day",
]
