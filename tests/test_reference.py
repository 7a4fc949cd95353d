"""
Unit tests for reference data: identifiers, sources and convention resolution.
"""

from datetime import date, datetime
import logging

import pandas as pd
import pytest

from multicurve.conventions import BusinessDayConvention, DayCount
from multicurve.dates import Tenor
from multicurve.errors import (
    ConfigurationNotFoundError,
    ConventionNotFoundError,
    MissingMarketDataError,
    SecurityNotFoundError,
)
from multicurve.reference import (
    DepositConvention,
    ExternalId,
    ExternalIdBundle,
    IborIndexConvention,
    IborIndexSecurity,
    InMemoryConfigurationSource,
    InMemoryConventionSource,
    InMemoryHolidaySource,
    InMemoryMarketDataSnapshot,
    InMemorySecuritySource,
)
from multicurve.reference.resolver import ConventionResolver

US = ExternalId("FINANCIAL_REGION", "US")
LIBOR_CONVENTION = ExternalId("CONVENTION", "USD LIBOR")
LIBOR_3M = ExternalId("BLOOMBERG_TICKER", "US0003M Index")


def libor_convention(day_count=DayCount.ACT_360):
    return IborIndexConvention(
        "USD LIBOR",
        ExternalIdBundle.of(LIBOR_CONVENTION),
        day_count,
        BusinessDayConvention.MODIFIED_FOLLOWING,
        2,
        True,
        "USD",
        US,
    )


@pytest.fixture
def resolver():
    conventions = InMemoryConventionSource([libor_convention()])
    securities = InMemorySecuritySource([
        IborIndexSecurity("USD LIBOR 3M", ExternalIdBundle.of(LIBOR_3M), LIBOR_CONVENTION, Tenor.parse("3M")),
    ])
    return ConventionResolver(conventions, securities)


class TestExternalId:
    """Tests for identifiers."""

    def test_parse_and_format(self):
        """Test the scheme~value text form."""
        eid = ExternalId.parse("TICKER~USD3M")
        assert eid == ExternalId.of("TICKER", "USD3M")
        assert str(eid) == "TICKER~USD3M"

    def test_parse_invalid(self):
        """Test ids need a scheme and a value."""
        with pytest.raises(ValueError):
            ExternalId.parse("USD3M")
        with pytest.raises(ValueError):
            ExternalId.parse("~USD3M")

    def test_bundle_is_a_set(self):
        """Test bundles ignore order and duplicates."""
        a = ExternalId("A", "1")
        b = ExternalId("B", "2")
        assert ExternalIdBundle.of(a, b, a) == ExternalIdBundle.of(b, a)
        assert len(ExternalIdBundle.of([a, b])) == 2
        assert a in a.to_bundle()


class TestSources:
    """Tests for in-memory sources."""

    def test_convention_lookup_by_kind(self):
        """Test a convention of the wrong kind is not found."""
        source = InMemoryConventionSource([libor_convention()])
        assert source.get_convention(LIBOR_CONVENTION, IborIndexConvention).name == "USD LIBOR"
        with pytest.raises(ConventionNotFoundError):
            source.get_convention(LIBOR_CONVENTION, DepositConvention)

    def test_convention_versions(self):
        """Test the latest version valid at the lookup date wins."""
        source = InMemoryConventionSource()
        source.add(libor_convention(DayCount.ACT_360), datetime(2010, 1, 1))
        source.add(libor_convention(DayCount.ACT_365), datetime(2020, 1, 1))

        assert source.get_convention(LIBOR_CONVENTION, as_of=datetime(2015, 1, 1)).day_count == DayCount.ACT_360
        assert source.get_convention(LIBOR_CONVENTION, as_of=datetime(2021, 1, 1)).day_count == DayCount.ACT_365
        assert source.get_convention(LIBOR_CONVENTION).day_count == DayCount.ACT_365
        with pytest.raises(ConventionNotFoundError):
            source.get_convention(LIBOR_CONVENTION, as_of=datetime(2005, 1, 1))

    def test_security_lookup(self):
        """Test securities by any of their ids."""
        source = InMemorySecuritySource()
        with pytest.raises(SecurityNotFoundError):
            source.get_security(LIBOR_3M)

    def test_holiday_source(self):
        """Test region and currency calendars, unknown ones are weekends only."""
        source = InMemoryHolidaySource(regions={US: [date(2024, 7, 4)]}, currencies={"USD": [date(2024, 7, 4)]})
        assert not source.region_calendar(US).is_business_day(date(2024, 7, 4))
        assert not source.currency_calendar("USD").is_business_day(date(2024, 7, 4))
        assert source.currency_calendar("EUR").is_business_day(date(2024, 7, 4))
        assert source.region_calendar(None).holidays == frozenset()

    def test_configuration_source(self):
        """Test missing configurations and definitions."""
        source = InMemoryConfigurationSource()
        with pytest.raises(ConfigurationNotFoundError):
            source.get_configuration("USD")
        with pytest.raises(ConfigurationNotFoundError):
            source.get_curve_definition("USD-OIS")


class TestMarketDataSnapshot:
    """Tests for market data snapshots."""

    def test_missing_quote_names_the_id(self):
        """Test the error carries the missing identifier."""
        snapshot = InMemoryMarketDataSnapshot({ExternalId("TICKER", "USD1M"): 0.05})
        missing = ExternalId("TICKER", "USD3M")
        with pytest.raises(MissingMarketDataError) as excinfo:
            snapshot.get_quote(missing)
        assert excinfo.value.identifier == missing
        assert "TICKER~USD3M" in str(excinfo.value)

    def test_from_frame_with_scheme_columns(self):
        """Test loading quotes from scheme/value columns."""
        frame = pd.DataFrame({
            "scheme": ["TICKER", "TICKER"],
            "value": ["USD1M", "USD3M"],
            "quote": [0.05, 0.051],
        })
        snapshot = InMemoryMarketDataSnapshot.from_frame(frame)
        assert len(snapshot) == 2
        assert abs(snapshot.get_quote(ExternalId("TICKER", "USD3M")) - 0.051) < 1e-12

    def test_from_frame_with_id_column(self):
        """Test loading quotes from scheme~value strings."""
        frame = pd.DataFrame({"id": ["TICKER~USD1M"], "quote": ["0.05"]})
        snapshot = InMemoryMarketDataSnapshot.from_frame(frame)
        assert snapshot.get_quote(ExternalId("TICKER", "USD1M")) == 0.05

    def test_from_csv(self, tmp_path):
        """Test loading quotes from a CSV file written by to_frame."""
        snapshot = InMemoryMarketDataSnapshot({
            ExternalId("TICKER", "USD1M"): 0.05,
            ExternalId("TICKER", "USD3M"): 0.051,
        })
        path = tmp_path / "quotes.csv"
        snapshot.to_frame().to_csv(path, index=False)

        loaded = InMemoryMarketDataSnapshot.from_csv(path)
        assert len(loaded) == 2
        assert abs(loaded.get_quote(ExternalId("TICKER", "USD3M")) - 0.051) < 1e-12

    def test_from_frame_bad_columns(self):
        """Test frames without id columns are rejected."""
        with pytest.raises(ValueError):
            InMemoryMarketDataSnapshot.from_frame(pd.DataFrame({"ticker": ["USD1M"], "quote": [0.05]}))

    def test_snapshots_are_immutable(self):
        """Test with_quotes and without return new snapshots."""
        usd1m = ExternalId("TICKER", "USD1M")
        snapshot = InMemoryMarketDataSnapshot({usd1m: 0.05})

        bumped = snapshot.with_quotes({usd1m: 0.06})
        removed = snapshot.without(usd1m)

        assert snapshot.get_quote(usd1m) == 0.05
        assert bumped.get_quote(usd1m) == 0.06
        assert usd1m not in removed

    def test_to_frame(self):
        """Test export to a DataFrame."""
        snapshot = InMemoryMarketDataSnapshot({ExternalId("TICKER", "USD1M"): 0.05})
        frame = snapshot.to_frame()
        assert list(frame.columns) == ["scheme", "value", "quote"]
        assert frame.iloc[0]["value"] == "USD1M"


class TestConventionResolver:
    """Tests for convention resolution with index security fallback."""

    def test_primary_hit(self, resolver):
        """Test a direct convention lookup."""
        resolution = resolver.resolve(LIBOR_CONVENTION, IborIndexConvention)
        assert resolution.ok
        assert not resolution.via_security
        assert resolution.primary_error is None

    def test_fallback_through_security(self, resolver, caplog):
        """Test an index security id resolves to its convention."""
        with caplog.at_level(logging.INFO, logger="multicurve.reference.resolver"):
            resolution = resolver.resolve(LIBOR_3M, IborIndexConvention)

        assert resolution.ok
        assert resolution.via_security
        assert resolution.security.tenor == Tenor.parse("3M")
        assert isinstance(resolution.primary_error, ConventionNotFoundError)
        assert resolution.unwrap().name == "USD LIBOR"
        assert "through security" in caplog.text

    def test_both_lookups_fail(self, resolver):
        """Test the failure keeps both errors and unwrap chains the original."""
        unknown = ExternalId("CONVENTION", "GBP LIBOR")
        resolution = resolver.resolve(unknown, IborIndexConvention)

        assert not resolution.ok
        assert isinstance(resolution.fallback_error, SecurityNotFoundError)
        with pytest.raises(ConventionNotFoundError) as excinfo:
            resolution.unwrap()
        assert excinfo.value.__cause__ is resolution.primary_error

    def test_security_convention_of_wrong_kind(self, resolver):
        """Test the fallback fails when the security's convention has another kind."""
        resolution = resolver.resolve(LIBOR_3M, DepositConvention)
        assert not resolution.ok
        assert isinstance(resolution.fallback_error, ConventionNotFoundError)
        with pytest.raises(ConventionNotFoundError):
            resolver.resolve_convention(LIBOR_3M, DepositConvention)
