"""
Unit tests for curve construction configuration resolution.
"""

import pytest

from multicurve.calibration import CurveConstructionConfigurationResolver
from multicurve.converters import CurveNodeCurrencyVisitor
from multicurve.curves.definitions import (
    ConstantCurveDefinition,
    CurveConstructionConfiguration,
    CurveGroupConfiguration,
    DiscountingCurveTypeConfiguration,
    InterpolatedCurveDefinition,
)
from multicurve.curves.nodes import CashNode, FXForwardNode
from multicurve.dates import Tenor
from multicurve.errors import ConfigurationNotFoundError, CyclicConfigurationError
from multicurve.reference import ExternalId, InMemoryConfigurationSource

from conftest import DEPOSIT


def configuration(name, exogenous=(), curves=()):
    groups = [CurveGroupConfiguration(0, {curve: [] for curve in curves})] if curves else []
    return CurveConstructionConfiguration(name, groups, exogenous)


def resolver_for(*configurations, definitions=(), visitor=None):
    return CurveConstructionConfigurationResolver(InMemoryConfigurationSource(configurations, definitions), visitor)


class TestCalibrationOrder:
    """Tests for dependency ordering."""

    def test_single_configuration(self):
        """Test a configuration without dependencies."""
        resolver = resolver_for(configuration("USD"))
        assert resolver.calibration_order("USD") == ["USD"]

    def test_dependencies_first(self):
        """Test exogenous configurations come before their users."""
        resolver = resolver_for(
            configuration("A", ["B", "C"]),
            configuration("B", ["C"]),
            configuration("C"),
        )
        assert resolver.calibration_order("A") == ["C", "B", "A"]

    def test_diamond_visits_once(self):
        """Test a shared dependency appears once."""
        resolver = resolver_for(
            configuration("TOP", ["LEFT", "RIGHT"]),
            configuration("LEFT", ["BASE"]),
            configuration("RIGHT", ["BASE"]),
            configuration("BASE"),
        )
        order = resolver.calibration_order("TOP")
        assert order == ["BASE", "LEFT", "RIGHT", "TOP"]

    def test_cycle_detected(self):
        """Test a two-configuration cycle names its members."""
        resolver = resolver_for(configuration("A", ["B"]), configuration("B", ["A"]))
        with pytest.raises(CyclicConfigurationError) as excinfo:
            resolver.calibration_order("A")
        assert excinfo.value.cycle == ["A", "B", "A"]

    def test_self_reference(self):
        """Test a configuration depending on itself."""
        resolver = resolver_for(configuration("A", ["A"]))
        with pytest.raises(CyclicConfigurationError):
            resolver.calibration_order("A")

    def test_missing_exogenous(self):
        """Test a dependency that does not exist."""
        resolver = resolver_for(configuration("A", ["MISSING"]))
        with pytest.raises(ConfigurationNotFoundError):
            resolver.calibration_order("A")

    def test_missing_configuration(self):
        """Test resolving an unknown name."""
        with pytest.raises(ConfigurationNotFoundError):
            resolver_for().resolve("USD")


class TestDefinitionsAndCurrencies:
    """Tests for curve definitions and currencies of a configuration."""

    @pytest.fixture
    def usd_definition(self):
        return InterpolatedCurveDefinition("USD-DEP", [
            CashNode(ExternalId("TICKER", "USDDEP3M"), Tenor.parse("0D"), Tenor.parse("3M"), DEPOSIT),
        ])

    @pytest.fixture
    def fx_definition(self):
        return InterpolatedCurveDefinition("EUR-FX", [
            FXForwardNode(
                ExternalId("TICKER", "EURUSD1M"), Tenor.parse("0D"), Tenor.parse("1M"),
                ExternalId("CONVENTION", "EUR/USD Forward"), "EUR", "USD"
            ),
        ])

    def test_definitions_for(self, usd_definition):
        """Test definitions are collected by curve name."""
        resolver = resolver_for(configuration("USD", curves=["USD-DEP"]), definitions=[usd_definition])
        assert resolver.definitions_for("USD") == {"USD-DEP": usd_definition}
        assert resolver.curve_names("USD") == ("USD-DEP",)

    def test_missing_definition(self):
        """Test a curve without a definition."""
        resolver = resolver_for(configuration("USD", curves=["USD-DEP"]))
        with pytest.raises(ConfigurationNotFoundError):
            resolver.definitions_for("USD")

    def test_currencies_include_exogenous(self, resolver, securities, usd_definition, fx_definition):
        """Test currencies are gathered transitively and constants add nothing."""
        visitor = CurveNodeCurrencyVisitor(resolver, securities)
        constant = ConstantCurveDefinition("JPY-CONST", ExternalId("TICKER", "JPYRATE"))
        config_resolver = resolver_for(
            CurveConstructionConfiguration(
                "EUR",
                [CurveGroupConfiguration(0, {
                    "EUR-FX": [DiscountingCurveTypeConfiguration("EUR")],
                    "JPY-CONST": [],
                })],
                ["USD"],
            ),
            configuration("USD", curves=["USD-DEP"]),
            definitions=[usd_definition, fx_definition, constant],
            visitor=visitor,
        )
        assert config_resolver.currencies_of("EUR") == frozenset({"EUR", "USD"})
        assert config_resolver.currencies_of("USD") == frozenset({"USD"})

    def test_currencies_need_visitor(self, usd_definition):
        """Test currencies cannot be computed without a visitor."""
        resolver = resolver_for(configuration("USD", curves=["USD-DEP"]), definitions=[usd_definition])
        with pytest.raises(ValueError):
            resolver.currencies_of("USD")
