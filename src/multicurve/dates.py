"""
Date utilities for curve construction.

Provides:
- Tenor value type (calendar periods and ON/TN/SN business-day tenors)
- Holiday calendars and calendar combination
- Spot date and tenor adjustment rules used by the node converters
- Schedule generation for swap legs and bonds
- Quarterly IMM and monthly roll dates
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from functools import total_ordering
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union
import re

from .conventions import (
    BusinessDayConvention,
    DayCount,
    adjust_business_day,
    is_business_day,
    year_fraction,
)

DAYS_PER_MONTH = 365.25 / 12.0

_BUSINESS_DAY_TENORS = {"ON": 1, "TN": 2, "SN": 3}
_BUSINESS_DAY_NAMES = {v: k for k, v in _BUSINESS_DAY_TENORS.items()}


@total_ordering
@dataclass(frozen=True, eq=False)
class Tenor:
    """
    A relative time span.

    Calendar tenors use units D, W, M or Y. Business-day tenors (unit B) are
    the overnight (ON), tom-next (TN) and spot-next (SN) offsets, counted in
    good business days.

    Equality compares normalised periods (12M == 1Y, 1W == 7D); ordering is by
    approximate length in days.

    Attributes:
        amount: Number of units
        unit: One of D, W, M, Y, B
    """
    amount: int
    unit: str

    TENOR_PATTERN = re.compile(r'^P?(\d+)([DWMY])$', re.IGNORECASE)

    def __post_init__(self):
        if self.unit not in ("D", "W", "M", "Y", "B"):
            raise ValueError(f"Unknown tenor unit: {self.unit}")
        if self.amount < 0:
            raise ValueError(f"Tenor amount must be non-negative, got {self.amount}")

    @classmethod
    def parse(cls, tenor: Union[str, "Tenor"]) -> "Tenor":
        """
        Parse a tenor string.

        Args:
            tenor: Tenor string like "1D", "3M", "2Y", "P6M" or "ON"

        Returns:
            Tenor

        Raises:
            ValueError: If tenor format is invalid
        """
        if isinstance(tenor, Tenor):
            return tenor
        text = tenor.upper().strip()
        if text in _BUSINESS_DAY_TENORS:
            return cls(_BUSINESS_DAY_TENORS[text], "B")
        match = cls.TENOR_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid tenor format: {tenor}. Expected format like '3M', '2Y', 'ON'")
        return cls(int(match.group(1)), match.group(2).upper())

    @classmethod
    def of_days(cls, n: int) -> "Tenor":
        return cls(n, "D")

    @classmethod
    def of_months(cls, n: int) -> "Tenor":
        return cls(n, "M")

    @classmethod
    def of_years(cls, n: int) -> "Tenor":
        return cls(n, "Y")

    @property
    def is_business_day_tenor(self) -> bool:
        return self.unit == "B"

    @property
    def total_months(self) -> Optional[int]:
        """Length in months for M/Y tenors, None otherwise."""
        if self.unit == "M":
            return self.amount
        if self.unit == "Y":
            return 12 * self.amount
        return None

    @property
    def approximate_days(self) -> float:
        if self.unit in ("D", "B"):
            return float(self.amount)
        if self.unit == "W":
            return 7.0 * self.amount
        return self.total_months * DAYS_PER_MONTH

    def to_years(self) -> float:
        """Approximate year fraction of the tenor."""
        if self.unit in ("D", "B"):
            return self.amount / 365.0
        if self.unit == "W":
            return self.amount * 7 / 365.0
        return self.total_months / 12.0

    def multiplied(self, factor: int) -> "Tenor":
        if self.unit == "B":
            raise ValueError(f"Cannot multiply business-day tenor {self}")
        return Tenor(self.amount * factor, self.unit)

    def _key(self) -> Tuple[str, int]:
        if self.unit == "B":
            return ("B", self.amount)
        if self.unit in ("D", "W"):
            return ("D", self.amount * (7 if self.unit == "W" else 1))
        return ("M", self.total_months)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tenor):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __lt__(self, other: "Tenor") -> bool:
        if not isinstance(other, Tenor):
            return NotImplemented
        return self.approximate_days < other.approximate_days

    def __str__(self) -> str:
        if self.unit == "B":
            return _BUSINESS_DAY_NAMES.get(self.amount, f"{self.amount}B")
        return f"{self.amount}{self.unit}"

    def __repr__(self) -> str:
        return f"Tenor({self})"


@dataclass(frozen=True)
class HolidayCalendar:
    """
    Weekend (Saturday/Sunday) calendar with an additional holiday set.

    Attributes:
        name: Calendar name, usually a region or currency code
        holidays: Non-weekend holiday dates
    """
    name: str = "WEEKEND"
    holidays: FrozenSet[date] = field(default_factory=frozenset)

    def __contains__(self, d: date) -> bool:
        return d in self.holidays

    def is_business_day(self, d: date) -> bool:
        return is_business_day(d, self.holidays)

    def combine(self, *others: "HolidayCalendar") -> "HolidayCalendar":
        """Calendar whose holidays are the union of this and the others."""
        holidays = set(self.holidays)
        names = [self.name]
        for other in others:
            holidays.update(other.holidays)
            names.append(other.name)
        return HolidayCalendar("+".join(names), frozenset(holidays))

    def next_business_day(self, d: date) -> date:
        """First business day on or after d."""
        return adjust_business_day(d, BusinessDayConvention.FOLLOWING, self.holidays)

    def add_business_days(self, d: date, n: int) -> date:
        """Move forward n business days (zero leaves d unchanged)."""
        result = d
        added = 0
        while added < n:
            result += timedelta(days=1)
            if self.is_business_day(result):
                added += 1
        return result

    def business_days_between(self, start: date, end: date) -> List[date]:
        """Business days strictly between start and end."""
        days = []
        current = start + timedelta(days=1)
        while current < end:
            if self.is_business_day(current):
                days.append(current)
            current += timedelta(days=1)
        return days

    def holidays_between(self, start: date, end: date) -> List[date]:
        """Holiday weekdays strictly between start and end."""
        return sorted(h for h in self.holidays if start < h < end and h.weekday() < 5)


WEEKEND_CALENDAR = HolidayCalendar()


def to_date(value: Union[date, datetime]) -> date:
    """Strip the time component of a valuation time."""
    if isinstance(value, datetime):
        return value.date()
    return value


def time_between(valuation_date: Union[date, datetime], d: date) -> float:
    """Signed ACT/365 time from the valuation date, used by all instrument derivatives."""
    return (d - to_date(valuation_date)).days / 365.0


class DateUtils:
    """Utility class for date manipulation in rates contexts."""

    @staticmethod
    def parse_tenor(tenor: Union[str, Tenor]) -> Tenor:
        return Tenor.parse(tenor)

    @staticmethod
    def add_tenor(start: date, tenor: Union[str, Tenor], calendar: HolidayCalendar = WEEKEND_CALENDAR) -> date:
        """
        Add a tenor to a date without business day adjustment.

        Calendar tenors shift calendar days or months (clamping the day of
        month); ON/TN/SN move forward the given number of business days.

        Args:
            start: Starting date
            tenor: Tenor string or Tenor
            calendar: Calendar used for business-day tenors

        Returns:
            End date
        """
        tenor = Tenor.parse(tenor)

        if tenor.unit == "B":
            return calendar.add_business_days(start, tenor.amount)
        if tenor.unit == "D":
            return start + timedelta(days=tenor.amount)
        if tenor.unit == "W":
            return start + timedelta(weeks=tenor.amount)

        months = tenor.total_months
        year = start.year + (start.month + months - 1) // 12
        month = (start.month + months - 1) % 12 + 1
        day = min(start.day, _days_in_month(year, month))
        return date(year, month, day)

    @staticmethod
    def subtract_tenor(d: date, tenor: Union[str, Tenor]) -> date:
        """Move a date back by a calendar tenor, clamping the day of month."""
        return _subtract(d, Tenor.parse(tenor))

    @staticmethod
    def adjust_by_tenor(
        start: date,
        tenor: Union[str, Tenor],
        convention: BusinessDayConvention,
        calendar: HolidayCalendar = WEEKEND_CALENDAR,
        end_of_month: bool = False
    ) -> date:
        """
        Shift a date by a tenor and apply the business day convention.

        With the end-of-month flag, a start on the last business day of its
        month maps to the last business day of the target month for month and
        year tenors.
        """
        tenor = Tenor.parse(tenor)
        if tenor.unit == "B":
            return calendar.add_business_days(start, tenor.amount)
        if end_of_month and tenor.total_months is not None and _is_last_business_day(start, calendar):
            shifted = DateUtils.add_tenor(start, tenor)
            month_end = date(shifted.year, shifted.month, _days_in_month(shifted.year, shifted.month))
            return adjust_business_day(month_end, BusinessDayConvention.PRECEDING, calendar)
        return adjust_business_day(DateUtils.add_tenor(start, tenor), convention, calendar)

    @staticmethod
    def spot_date(valuation: Union[date, datetime], settlement_days: int, calendar: HolidayCalendar = WEEKEND_CALENDAR) -> date:
        """Roll the valuation date to a business day, then add the settlement days."""
        rolled = calendar.next_business_day(to_date(valuation))
        return calendar.add_business_days(rolled, settlement_days)

    @staticmethod
    def generate_schedule(
        start: date,
        end: date,
        payment_tenor: Union[str, Tenor],
        convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
        calendar: HolidayCalendar = WEEKEND_CALENDAR,
        end_of_month: bool = False
    ) -> List[date]:
        """
        Generate adjusted period end dates between start and end.

        Dates are rolled backward from the unadjusted end in whole multiples
        of the payment tenor, leaving any stub at the front.

        Args:
            start: Schedule start (accrual start)
            end: Schedule end (unadjusted maturity)
            payment_tenor: Period length
            convention: Business day adjustment
            calendar: Holiday calendar
            end_of_month: Apply the end-of-month rule to every period end

        Returns:
            List of adjusted period end dates, the last one being maturity
        """
        tenor = Tenor.parse(payment_tenor)
        if tenor.unit == "B" or tenor.amount == 0:
            raise ValueError(f"Invalid payment tenor: {tenor}")

        unadjusted = [end]
        k = 1
        while True:
            previous = _subtract(end, tenor.multiplied(k))
            if previous <= start:
                break
            unadjusted.insert(0, previous)
            k += 1

        if end_of_month and tenor.total_months is not None and _is_last_business_day(start, calendar):
            unadjusted = [date(d.year, d.month, _days_in_month(d.year, d.month)) for d in unadjusted]
            return [adjust_business_day(d, BusinessDayConvention.PRECEDING, calendar) for d in unadjusted]

        return [adjust_business_day(d, convention, calendar) for d in unadjusted]

    @staticmethod
    def third_wednesday(year: int, month: int) -> date:
        first = date(year, month, 1)
        offset = (2 - first.weekday()) % 7
        return first + timedelta(days=offset + 14)

    @staticmethod
    def nth_imm_date(d: date, n: int) -> date:
        """
        The n-th quarterly IMM date (third Wednesday of Mar/Jun/Sep/Dec) after d.

        n = 0 returns d itself if it is an IMM date, otherwise the next one.
        """
        if n < 0:
            raise ValueError("IMM date number must be non-negative")
        year, month = d.year, d.month
        candidate = None
        while candidate is None:
            if month % 3 == 0:
                wednesday = DateUtils.third_wednesday(year, month)
                if wednesday > d or (n == 0 and wednesday == d):
                    candidate = wednesday
                    break
            month += 1
            if month > 12:
                month, year = 1, year + 1
        if n <= 1:
            return candidate
        months = 3 * (n - 1)
        year = candidate.year + (candidate.month + months - 1) // 12
        month = (candidate.month + months - 1) % 12 + 1
        return DateUtils.third_wednesday(year, month)

    @staticmethod
    def nth_month_start(d: date, n: int) -> date:
        """First calendar day of the n-th month after the month containing d."""
        year = d.year + (d.month + n - 1) // 12
        month = (d.month + n - 1) % 12 + 1
        return date(year, month, 1)


@dataclass
class ScheduleInfo:
    """Container for schedule with accrual information."""
    payment_dates: List[date]
    accrual_starts: List[date]
    accrual_ends: List[date]
    year_fractions: List[float]
    day_count: DayCount


def generate_accrual_schedule(
    start: date,
    end: date,
    payment_tenor: Union[str, Tenor],
    day_count: DayCount,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    calendar: HolidayCalendar = WEEKEND_CALENDAR,
    end_of_month: bool = False,
    payment_lag: int = 0
) -> ScheduleInfo:
    """
    Generate accrual periods for a swap leg or a bond.

    Args:
        start: Accrual start (adjusted)
        end: Unadjusted maturity
        payment_tenor: Period length
        day_count: Day count for accrual fractions
        convention: Business day adjustment
        calendar: Holiday calendar
        end_of_month: End-of-month rule
        payment_lag: Business days between accrual end and payment

    Returns:
        ScheduleInfo with payment dates and accrual fractions
    """
    ends = DateUtils.generate_schedule(start, end, payment_tenor, convention, calendar, end_of_month)
    starts = [start] + ends[:-1]
    payments = [calendar.add_business_days(d, payment_lag) for d in ends]
    return ScheduleInfo(
        payment_dates=payments,
        accrual_starts=starts,
        accrual_ends=ends,
        year_fractions=[year_fraction(s, e, day_count) for s, e in zip(starts, ends)],
        day_count=day_count
    )


def _subtract(d: date, tenor: Tenor) -> date:
    if tenor.unit == "D":
        return d - timedelta(days=tenor.amount)
    if tenor.unit == "W":
        return d - timedelta(weeks=tenor.amount)
    months = tenor.total_months
    year = d.year + (d.month - months - 1) // 12
    month = (d.month - months - 1) % 12 + 1
    return date(year, month, min(d.day, _days_in_month(year, month)))


def _is_last_business_day(d: date, calendar: HolidayCalendar) -> bool:
    month_end = date(d.year, d.month, _days_in_month(d.year, d.month))
    return adjust_business_day(month_end, BusinessDayConvention.PRECEDING, calendar) == d


def _days_in_month(year: int, month: int) -> int:
    """Return number of days in a month."""
    if month in (1, 3, 5, 7, 8, 10, 12):
        return 31
    elif month in (4, 6, 9, 11):
        return 30
    elif month == 2:
        if (year % 4 == 0 and year % 100 != 0) or (year % 400 == 0):
            return 29
        return 28
    raise ValueError(f"Invalid month: {month}")


def combine_calendars(calendars: Iterable[HolidayCalendar]) -> HolidayCalendar:
    calendars = list(calendars)
    if not calendars:
        return WEEKEND_CALENDAR
    return calendars[0].combine(*calendars[1:])


__all__ = [
    "Tenor",
    "HolidayCalendar",
    "WEEKEND_CALENDAR",
    "DateUtils",
    "ScheduleInfo",
    "generate_accrual_schedule",
    "combine_calendars",
    "time_between",
    "to_date",
]
