"""
Unit tests for curves, generators and curve definitions.
"""

import numpy as np
import pytest

from multicurve.conventions import CompoundingConvention
from multicurve.curves.curve import (
    ConstantYieldCurve,
    DiscountFactorCurve,
    InterpolatedYieldCurve,
    PriceIndexCurve,
    convert_continuous_rate,
    create_flat_curve,
    to_continuous_rate,
)
from multicurve.curves.definitions import (
    ConstantCurveDefinition,
    CurveConstructionConfiguration,
    CurveGroupConfiguration,
    DiscountingCurveTypeConfiguration,
    InterpolatedCurveDefinition,
)
from multicurve.curves.generators import (
    GeneratorDiscountFactorInterpolated,
    GeneratorPriceIndexInterpolated,
    GeneratorYieldCurveConstant,
    GeneratorYieldCurveInterpolated,
)
from multicurve.curves.interpolation import LinearInterpolator
from multicurve.curves.nodes import CashNode
from multicurve.dates import Tenor
from multicurve.reference.identifiers import ExternalId


def cash_node(ticker, tenor):
    return CashNode(
        ExternalId("TICKER", ticker),
        Tenor.parse("0D"),
        Tenor.parse(tenor),
        ExternalId("CONVENTION", "USD Deposit"),
    )


class TestInterpolatedYieldCurve:
    """Tests for zero-rate curves."""

    @pytest.fixture
    def flat_curve(self):
        return InterpolatedYieldCurve("USD-OIS", [0.5, 1.0, 5.0], [0.05, 0.05, 0.05], LinearInterpolator())

    def test_discount_factor(self, flat_curve):
        """Test discount factors from a flat zero curve."""
        assert flat_curve.discount_factor(0.0) == 1.0
        assert abs(flat_curve.discount_factor(2.0) - np.exp(-0.1)) < 1e-12

    def test_zero_rate_compounding(self, flat_curve):
        """Test zero rate conversion to annual compounding."""
        assert abs(flat_curve.zero_rate(3.0) - 0.05) < 1e-12
        annual = flat_curve.zero_rate(3.0, CompoundingConvention.ANNUAL)
        assert abs(annual - (np.exp(0.05) - 1)) < 1e-12

    def test_forward_rate(self, flat_curve):
        """Test simple and continuous forwards on a flat curve."""
        simple = flat_curve.forward_rate(1.0, 2.0)
        assert abs(simple - (np.exp(0.05) - 1)) < 1e-12

        continuous = flat_curve.forward_rate(1.0, 2.0, compounding=CompoundingConvention.CONTINUOUS)
        assert abs(continuous - 0.05) < 1e-12

        with_accrual = flat_curve.forward_rate(1.0, 2.0, accrual=0.5)
        assert abs(with_accrual - 2 * simple) < 1e-12

    def test_forward_rate_order(self, flat_curve):
        """Test a forward needs t2 after t1."""
        with pytest.raises(ValueError):
            flat_curve.forward_rate(2.0, 1.0)

    def test_instantaneous_forward(self, flat_curve):
        """Test instantaneous forward equals the flat rate."""
        assert abs(flat_curve.instantaneous_forward(2.0) - 0.05) < 1e-8

    def test_nodes(self, flat_curve):
        """Test node accessors."""
        assert flat_curve.parameter_count == 3
        assert flat_curve.get_nodes()[1] == (1.0, 0.05)

    def test_create_flat_curve(self):
        """Test the flat curve helper."""
        curve = create_flat_curve("FLAT", 0.03, max_tenor_years=10.0)
        assert curve.node_times[-1] == 10.0
        assert abs(curve.zero_rate(7.0) - 0.03) < 1e-12


class TestOtherCurves:
    """Tests for discount factor, constant and price index curves."""

    def test_discount_factor_curve(self):
        """Test discount factors are interpolated directly."""
        curve = DiscountFactorCurve("DF", [1.0, 2.0], [0.95, 0.9], LinearInterpolator())
        assert abs(curve.discount_factor(1.5) - 0.925) < 1e-12
        assert curve.discount_factor(-1.0) == 1.0

    def test_constant_curve(self):
        """Test the constant curve."""
        curve = ConstantYieldCurve("CONST", 0.02)
        assert abs(curve.discount_factor(3.0) - np.exp(-0.06)) < 1e-12
        assert curve.parameter_count == 1
        assert abs(curve.zero_rate(10.0) - 0.02) < 1e-12

    def test_price_index_curve(self):
        """Test price index interpolation."""
        curve = PriceIndexCurve("CPI", [1.0, 2.0], [102.0, 104.0], LinearInterpolator())
        assert abs(curve.price_index(1.5) - 103.0) < 1e-12
        assert curve.parameter_count == 2

    def test_rate_conversion_inverse(self):
        """Test converting a continuous rate to annual and back."""
        annual = convert_continuous_rate(0.04, 2.0, CompoundingConvention.ANNUAL)
        back = to_continuous_rate(annual, 2.0, CompoundingConvention.ANNUAL)
        assert abs(back - 0.04) < 1e-12


class TestGenerators:
    """Tests for curve generators."""

    def test_interpolated_generator(self):
        """Test zero-rate generator guess and output."""
        generator = GeneratorYieldCurveInterpolated([1.0, 2.0, 5.0], LinearInterpolator, initial_rate=0.02)
        assert generator.parameter_count == 3
        assert np.allclose(generator.initial_guess(), [0.02, 0.02, 0.02])

        curve = generator.generate("USD-3M", np.array([0.01, 0.02, 0.03]))
        assert curve.name == "USD-3M"
        assert abs(curve.zero_rate(1.5) - 0.015) < 1e-12

    def test_generated_curves_do_not_share_interpolators(self):
        """Test each generated curve has its own interpolator."""
        generator = GeneratorYieldCurveInterpolated([1.0, 2.0], LinearInterpolator)
        first = generator.generate("A", [0.01, 0.02])
        second = generator.generate("A", [0.03, 0.04])
        assert first.interpolator is not second.interpolator
        assert abs(first.zero_rate(1.0) - 0.01) < 1e-12

    def test_wrong_parameter_count(self):
        """Test generation with the wrong number of parameters."""
        generator = GeneratorYieldCurveInterpolated([1.0, 2.0], LinearInterpolator)
        with pytest.raises(ValueError):
            generator.generate("A", [0.01])

    def test_node_times_must_increase(self):
        """Test unsorted or empty node times are rejected."""
        with pytest.raises(ValueError):
            GeneratorYieldCurveInterpolated([2.0, 1.0], LinearInterpolator)
        with pytest.raises(ValueError):
            GeneratorYieldCurveInterpolated([], LinearInterpolator)

    def test_discount_factor_generator(self):
        """Test discount factor generator guess."""
        generator = GeneratorDiscountFactorInterpolated([1.0, 2.0], LinearInterpolator, initial_rate=0.05)
        assert np.allclose(generator.initial_guess(), np.exp(-0.05 * np.array([1.0, 2.0])))
        assert isinstance(generator.generate("DF", [0.95, 0.9]), DiscountFactorCurve)

    def test_price_index_generator(self):
        """Test price index generator."""
        generator = GeneratorPriceIndexInterpolated([1.0, 2.0], LinearInterpolator, base_level=250.0)
        assert generator.price_index
        assert np.allclose(generator.initial_guess(), [250.0, 250.0])
        assert isinstance(generator.generate("CPI", [251.0, 255.0]), PriceIndexCurve)

    def test_constant_generator(self):
        """Test the single-parameter generator."""
        generator = GeneratorYieldCurveConstant(0.03)
        assert generator.parameter_count == 1
        assert isinstance(generator.generate("C", [0.03]), ConstantYieldCurve)
        with pytest.raises(ValueError):
            generator.generate("C", [0.03, 0.04])


class TestDefinitions:
    """Tests for curve definitions and configurations."""

    def test_interpolated_definition(self):
        """Test nodes are stored as a tuple with default interpolator."""
        definition = InterpolatedCurveDefinition("USD-OIS", [cash_node("USD1M", "1M"), cash_node("USD3M", "3M")])
        assert isinstance(definition.nodes, tuple)
        assert definition.interpolator_name == "Linear"
        assert definition.nodes[0].label == "CashNode[TICKER~USD1M]"

    def test_duplicate_market_data_ids(self):
        """Test two nodes cannot share a quote."""
        with pytest.raises(ValueError):
            InterpolatedCurveDefinition("USD-OIS", [cash_node("USD1M", "1M"), cash_node("USD1M", "3M")])

    def test_empty_definition(self):
        """Test a curve needs nodes."""
        with pytest.raises(ValueError):
            InterpolatedCurveDefinition("USD-OIS", [])

    def test_constant_definition_needs_id(self):
        """Test constant curves need a quote id."""
        with pytest.raises(ValueError):
            ConstantCurveDefinition("CONST")

    def test_configuration_curve_names(self):
        """Test curve names follow group declaration order."""
        discounting = DiscountingCurveTypeConfiguration("USD")
        config = CurveConstructionConfiguration(
            "USD",
            [
                CurveGroupConfiguration(0, {"USD-OIS": [discounting]}),
                CurveGroupConfiguration(1, {"USD-3M": [], "USD-6M": []}),
            ],
            ["FX"],
        )
        assert config.curve_names == ("USD-OIS", "USD-3M", "USD-6M")
        assert config.exogenous_configurations == ("FX",)
        assert dict(config.curve_groups[0])["USD-OIS"] == (discounting,)

    def test_duplicate_curve_across_groups(self):
        """Test a curve name may appear in only one group."""
        with pytest.raises(ValueError):
            CurveConstructionConfiguration(
                "USD",
                [
                    CurveGroupConfiguration(0, {"USD-OIS": []}),
                    CurveGroupConfiguration(1, {"USD-OIS": []}),
                ],
            )
