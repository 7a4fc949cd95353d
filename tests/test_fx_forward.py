"""
Unit tests for FX forward node conversion and settlement dates.
"""

from datetime import date

import pytest

from multicurve.conventions import BusinessDayConvention
from multicurve.converters import ConversionContext, CurveNodeConverter
from multicurve.curves.nodes import FXForwardNode
from multicurve.dates import Tenor
from multicurve.instruments.definitions import ForexDefinition
from multicurve.reference import (
    ExternalId,
    ExternalIdBundle,
    FXForwardAndSwapConvention,
    FXSpotConvention,
    InMemoryConventionSource,
    InMemoryHolidaySource,
    InMemorySecuritySource,
)
from multicurve.reference.resolver import ConventionResolver

US = ExternalId("FINANCIAL_REGION", "US")
FOLLOWING = BusinessDayConvention.FOLLOWING


def cid(name):
    return ExternalId("CONVENTION", name)


def fx_conventions():
    spots = [
        FXSpotConvention("Legacy Spot", ExternalIdBundle.of(cid("Legacy Spot")), 2, settlement_region=US),
        FXSpotConvention("Pair Spot", ExternalIdBundle.of(cid("Pair Spot")), 2, use_intermediate_us_holidays=False),
        FXSpotConvention("LatAm Spot", ExternalIdBundle.of(cid("LatAm Spot")), 2, use_intermediate_us_holidays=True),
    ]
    forwards = [
        FXForwardAndSwapConvention(
            name.replace("Spot", "Forward"),
            ExternalIdBundle.of(cid(name.replace("Spot", "Forward"))),
            cid(name),
            FOLLOWING,
            False,
            US,
        )
        for name in ("Legacy Spot", "Pair Spot", "LatAm Spot")
    ]
    return spots + forwards


def make_converter(regions=None, currencies=None):
    conventions = InMemoryConventionSource(fx_conventions())
    securities = InMemorySecuritySource()
    holidays = InMemoryHolidaySource(regions=regions, currencies=currencies)
    return CurveNodeConverter(ConversionContext(ConventionResolver(conventions, securities), securities, holidays))


def fx_node(mode, tenor="7D", pay="EUR", receive="GBP"):
    return FXForwardNode(
        ExternalId("TICKER", f"{pay}{receive}{tenor}"),
        Tenor.parse("0D"),
        Tenor.parse(tenor),
        cid(f"{mode} Forward"),
        pay,
        receive,
    )


def delivery(converter, node, valuation):
    return converter.convert(node, 1.25, valuation).exchange_date


class TestForexDefinition:
    """Tests for the forward instrument."""

    def test_amounts(self):
        """Test pay one unit, receive minus the forward rate."""
        definition = make_converter().convert(fx_node("Legacy"), 0.86, date(2015, 5, 4))

        assert isinstance(definition, ForexDefinition)
        assert definition.currency1 == "EUR"
        assert definition.currency2 == "GBP"
        assert definition.amount1 == 1.0
        assert definition.amount2 == -0.86


class TestLegacySettlement:
    """Tests for the settlement region rule."""

    def test_one_week(self):
        """Test spot plus seven days."""
        assert delivery(make_converter(), fx_node("Legacy"), date(2015, 5, 4)) == date(2015, 5, 13)

    def test_valuation_on_friday(self):
        """Test spot skips the weekend."""
        assert delivery(make_converter(), fx_node("Legacy"), date(2015, 5, 1)) == date(2015, 5, 12)

    def test_weekend_valuation_one_month(self):
        """Test a Saturday valuation rolls before counting spot."""
        node = fx_node("Legacy", "1M")
        assert delivery(make_converter(), node, date(2015, 1, 31)) == date(2015, 3, 4)

    def test_region_holiday_moves_delivery(self):
        """Test a holiday in the settlement region."""
        converter = make_converter(regions={US: [date(2015, 5, 13)]})
        assert delivery(converter, fx_node("Legacy"), date(2015, 5, 4)) == date(2015, 5, 14)

    def test_currency_holidays_ignored(self):
        """Test currency calendars play no part in the legacy rule."""
        converter = make_converter(currencies={"USD": [date(2015, 5, 13)]})
        assert delivery(converter, fx_node("Legacy"), date(2015, 5, 4)) == date(2015, 5, 13)

    def test_latin_american_pair_legacy(self):
        """Test the legacy rule adds no day for USD holidays."""
        converter = make_converter(currencies={"USD": [date(2015, 5, 21)]})
        node = fx_node("Legacy", pay="USD", receive="MXN")
        assert delivery(converter, node, date(2015, 5, 13)) == date(2015, 5, 22)


class TestCurrencyPairSettlement:
    """Tests for the currency pair rule."""

    def test_one_week(self):
        """Test spot plus seven days without holidays."""
        assert delivery(make_converter(), fx_node("Pair"), date(2015, 5, 4)) == date(2015, 5, 13)

    def test_pair_holiday(self):
        """Test a holiday in either currency of the pair."""
        converter = make_converter(currencies={"EUR": [date(2015, 5, 13)]})
        assert delivery(converter, fx_node("Pair"), date(2015, 5, 4)) == date(2015, 5, 14)

    def test_usd_holiday_on_delivery(self):
        """Test delivery must be a good USD business day even for a non-USD pair."""
        converter = make_converter(currencies={"USD": [date(2015, 5, 13)]})
        assert delivery(converter, fx_node("Pair"), date(2015, 5, 4)) == date(2015, 5, 14)

    def test_intermediate_usd_holiday_ignored(self):
        """Test a USD holiday between spot and delivery adds nothing without the flag."""
        converter = make_converter(currencies={"USD": [date(2015, 5, 21)]})
        node = fx_node("Pair", pay="USD", receive="GBP")
        assert delivery(converter, node, date(2015, 5, 13)) == date(2015, 5, 22)

    def test_intermediate_usd_holiday_counted(self):
        """Test a USD holiday between spot and delivery pushes delivery one business day."""
        converter = make_converter(currencies={"USD": [date(2015, 5, 21)]})
        node = fx_node("LatAm", pay="USD", receive="MXN")
        assert delivery(converter, node, date(2015, 5, 13)) == date(2015, 5, 25)

    @pytest.mark.parametrize("valuation, expected", [
        (date(2015, 5, 4), date(2015, 5, 13)),
        (date(2015, 5, 1), date(2015, 5, 12)),
    ])
    def test_matches_legacy_without_holidays(self, valuation, expected):
        """Test both rules agree when no calendar has holidays."""
        converter = make_converter()
        assert delivery(converter, fx_node("Pair"), valuation) == expected
        assert delivery(converter, fx_node("Legacy"), valuation) == expected
