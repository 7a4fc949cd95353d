"""
Unit tests for conventions module.
"""

from datetime import date
import pytest

from multicurve.conventions import (
    DayCount,
    BusinessDayConvention,
    CompoundingConvention,
    year_fraction,
    is_business_day,
    adjust_business_day,
)


class TestDayCount:
    """Tests for day count conventions."""

    def test_act_360(self):
        """Test ACT/360 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 91 days

        yf = year_fraction(start, end, DayCount.ACT_360)
        expected = 91 / 360

        assert abs(yf - expected) < 1e-10

    def test_act_365(self):
        """Test ACT/365 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 91 days

        yf = year_fraction(start, end, DayCount.ACT_365)
        expected = 91 / 365

        assert abs(yf - expected) < 1e-10

    def test_act_act_splits_calendar_years(self):
        """Test ACT/ACT ISDA weights each calendar year by its own length."""
        start = date(2024, 1, 15)
        end = date(2025, 1, 15)

        yf = year_fraction(start, end, DayCount.ACT_ACT)
        expected = 352 / 366 + 14 / 365

        assert abs(yf - expected) < 1e-10

    def test_thirty_360(self):
        """Test 30/360 day count."""
        start = date(2024, 1, 15)
        end = date(2024, 4, 15)  # 3 months

        yf = year_fraction(start, end, DayCount.THIRTY_360)
        expected = 90 / 360  # 3 months * 30 days

        assert abs(yf - expected) < 1e-10

    def test_thirty_360_month_ends(self):
        """Test 30/360 caps the 31st when the start is on the 30th or 31st."""
        yf = year_fraction(date(2024, 1, 31), date(2024, 3, 31), DayCount.THIRTY_360)
        assert abs(yf - 60 / 360) < 1e-10

    def test_year_fraction_same_date(self):
        """Test year fraction for same date returns 0."""
        d = date(2024, 1, 15)
        yf = year_fraction(d, d, DayCount.ACT_360)
        assert yf == 0.0

    def test_from_string(self):
        """Test parsing day count names."""
        assert DayCount.from_string("act/360") == DayCount.ACT_360
        assert DayCount.from_string("ACT/365F") == DayCount.ACT_365
        assert DayCount.from_string("30U/360") == DayCount.THIRTY_360
        with pytest.raises(ValueError):
            DayCount.from_string("BUS/252")


class TestBusinessDayConvention:
    """Tests for business day adjustment."""

    def test_weekend_is_not_business_day(self):
        """Test Saturday and Sunday are holidays."""
        assert not is_business_day(date(2024, 6, 15))
        assert not is_business_day(date(2024, 6, 16))
        assert is_business_day(date(2024, 6, 17))

    def test_holiday_set(self):
        """Test extra holidays are honoured."""
        july_4 = date(2024, 7, 4)
        assert not is_business_day(july_4, {july_4})
        result = adjust_business_day(july_4, BusinessDayConvention.FOLLOWING, {july_4})
        assert result == date(2024, 7, 5)

    def test_following_and_preceding(self):
        """Test plain following and preceding rolls."""
        saturday = date(2024, 6, 15)
        assert adjust_business_day(saturday, BusinessDayConvention.FOLLOWING) == date(2024, 6, 17)
        assert adjust_business_day(saturday, BusinessDayConvention.PRECEDING) == date(2024, 6, 14)

    def test_modified_following_stays_in_month(self):
        """Test modified following rolls back at month end."""
        result = adjust_business_day(date(2024, 8, 31), BusinessDayConvention.MODIFIED_FOLLOWING)
        assert result == date(2024, 8, 30)

    def test_modified_preceding_stays_in_month(self):
        """Test modified preceding rolls forward at month start."""
        result = adjust_business_day(date(2024, 6, 1), BusinessDayConvention.MODIFIED_PRECEDING)
        assert result == date(2024, 6, 3)

    def test_unadjusted(self):
        """Test unadjusted leaves weekends alone."""
        saturday = date(2024, 6, 15)
        assert adjust_business_day(saturday, BusinessDayConvention.UNADJUSTED) == saturday

    def test_from_string(self):
        """Test parsing convention names ignoring case and separators."""
        assert BusinessDayConvention.from_string("modified following") == BusinessDayConvention.MODIFIED_FOLLOWING
        assert BusinessDayConvention.from_string("Following") == BusinessDayConvention.FOLLOWING
        with pytest.raises(ValueError):
            BusinessDayConvention.from_string("Nearest")


class TestCompounding:
    """Tests for compounding conventions."""

    def test_periods_per_year(self):
        """Test compounding frequencies."""
        assert CompoundingConvention.ANNUAL.periods_per_year == 1
        assert CompoundingConvention.SEMI_ANNUAL.periods_per_year == 2
        assert CompoundingConvention.QUARTERLY.periods_per_year == 4
        assert CompoundingConvention.CONTINUOUS.periods_per_year == 0
