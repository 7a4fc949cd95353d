"""
Unit tests for curve node converters.
"""

from dataclasses import dataclass
from datetime import date

import pytest

from multicurve.converters import CashNodeConverter, CurveNodeConverter
from multicurve.curves.nodes import (
    BillNode,
    BondNode,
    CashNode,
    CreditSpreadNode,
    CurveNode,
    DiscountFactorNode,
    FRANode,
    InflationNodeType,
    PeriodicallyCompoundedRateNode,
    RateFutureNode,
    RollDateFRANode,
    RollDateSwapNode,
    SwapNode,
    ThreeLegBasisSwapNode,
    ZeroCouponInflationNode,
)
from multicurve.dates import Tenor
from multicurve.errors import (
    ConventionNotFoundError,
    MissingMarketDataError,
    UnresolvedNodeConventionError,
    UnsupportedNodeTypeError,
)
from multicurve.instruments.definitions import (
    BillDefinition,
    BondFixedDefinition,
    CashDefinition,
    CurvePointDefinition,
    DepositIborDefinition,
    FederalFundsFutureDefinition,
    ForwardRateAgreementDefinition,
    InterestRateFutureDefinition,
    SwapDefinition,
    ZeroCouponInflationSwapDefinition,
)
from multicurve.reference import ExternalId, InMemoryMarketDataSnapshot

from conftest import (
    BILL,
    BOND,
    CMS_LEG,
    CPI_FIXING,
    DEPOSIT,
    ED_FUTURE,
    FF_FUTURE,
    FIXED_6M,
    IMM_FRA,
    IMM_SWAP,
    LIBOR,
    LIBOR_3M_LEG,
    LIBOR_3M_SECURITY,
    LIBOR_6M_LEG,
    OVERNIGHT,
    VALUATION,
    ZC_INFLATION,
)


def ticker(value):
    return ExternalId("TICKER", value)


def tenor(text):
    return Tenor.parse(text)


class TestCashConversion:
    """Tests for cash nodes."""

    def test_deposit(self, converter):
        """Test a deposit starts at spot and accrues ACT/360."""
        node = CashNode(ticker("USDDEP3M"), tenor("0D"), tenor("3M"), DEPOSIT)
        definition = converter.convert(node, 0.053, VALUATION)

        assert isinstance(definition, CashDefinition)
        assert definition.start_date == date(2024, 1, 12)
        assert definition.end_date == date(2024, 4, 12)
        assert abs(definition.accrual_factor - 91 / 360) < 1e-12
        assert definition.rate == 0.053
        assert definition.currency == "USD"

    def test_conversion_is_deterministic(self, converter):
        """Test converting the same node twice gives equal definitions."""
        node = CashNode(ticker("USDDEP3M"), tenor("0D"), tenor("3M"), DEPOSIT)
        assert converter.convert(node, 0.053, VALUATION) == converter.convert(node, 0.053, VALUATION)

    def test_ibor_fixing(self, converter):
        """Test an ibor convention gives a fixing with the node's tenor as index tenor."""
        node = CashNode(ticker("US0003M"), tenor("0D"), tenor("3M"), LIBOR)
        definition = converter.convert(node, 0.055, VALUATION)

        assert isinstance(definition, DepositIborDefinition)
        assert definition.index.tenor == tenor("3M")
        assert definition.index.name == "USD LIBOR"
        assert definition.end_date == date(2024, 4, 12)

    def test_ibor_fixing_through_index_security(self, converter):
        """Test an index security id resolves to its convention."""
        node = CashNode(ticker("US0003M"), tenor("0D"), tenor("3M"), LIBOR_3M_SECURITY)
        definition = converter.convert(node, 0.055, VALUATION)
        assert isinstance(definition, DepositIborDefinition)
        assert definition.index.day_count.value == "ACT/360"

    def test_overnight_settles_same_day(self, converter):
        """Test overnight cash ignores settlement days and starts on the valuation date."""
        node = CashNode(ticker("SOFR"), tenor("0D"), tenor("ON"), OVERNIGHT)
        definition = converter.convert(node, 0.0531, VALUATION)

        assert isinstance(definition, CashDefinition)
        assert definition.start_date == VALUATION
        assert definition.end_date == date(2024, 1, 11)
        assert abs(definition.accrual_factor - 1 / 360) < 1e-12

    def test_overnight_on_weekend_rolls_following(self, converter):
        """Test a Saturday valuation rolls forward to Monday."""
        node = CashNode(ticker("SOFR"), tenor("0D"), tenor("ON"), OVERNIGHT)
        definition = converter.convert(node, 0.0531, date(2024, 1, 13))
        assert definition.start_date == date(2024, 1, 15)
        assert definition.end_date == date(2024, 1, 16)

    def test_tom_next(self, converter):
        """Test a TN start."""
        node = CashNode(ticker("SOFRTN"), tenor("TN"), tenor("ON"), OVERNIGHT)
        definition = converter.convert(node, 0.0531, VALUATION)
        assert definition.start_date == date(2024, 1, 12)
        assert definition.end_date == date(2024, 1, 15)

    def test_unsupported_convention(self, converter):
        """Test a cash node on a leg convention."""
        node = CashNode(ticker("BAD"), tenor("0D"), tenor("3M"), FIXED_6M)
        with pytest.raises(UnsupportedNodeTypeError):
            converter.convert(node, 0.05, VALUATION)

    def test_unresolved_convention(self, converter):
        """Test an unknown convention keeps the original error as cause."""
        node = CashNode(ticker("GBP3M"), tenor("0D"), tenor("3M"), ExternalId("CONVENTION", "GBP Deposit"))
        with pytest.raises(UnresolvedNodeConventionError) as excinfo:
            converter.convert(node, 0.05, VALUATION)
        assert isinstance(excinfo.value.__cause__, ConventionNotFoundError)
        assert excinfo.value.identifier == ExternalId("CONVENTION", "GBP Deposit")


class TestFRAConversion:
    """Tests for FRA nodes."""

    def test_fra_3x6(self, converter):
        """Test a 3x6 FRA period and index."""
        node = FRANode(ticker("USD3X6"), tenor("3M"), tenor("6M"), LIBOR)
        definition = converter.convert(node, 0.052, VALUATION)

        assert isinstance(definition, ForwardRateAgreementDefinition)
        assert definition.fixing_period_start == date(2024, 4, 12)
        assert definition.fixing_period_end == date(2024, 7, 12)
        assert definition.payment_date == definition.fixing_period_start
        assert definition.index.tenor == tenor("3M")
        assert abs(definition.fixing_accrual_factor - 91 / 360) < 1e-12


class TestSwapConversion:
    """Tests for swap nodes."""

    def test_fixed_float_swap(self, converter):
        """Test the pay fixed leg carries the quote with notional -1."""
        node = SwapNode(ticker("USDSW2Y"), tenor("0D"), tenor("2Y"), FIXED_6M, LIBOR_3M_LEG)
        definition = converter.convert(node, 0.045, VALUATION)

        assert isinstance(definition, SwapDefinition)
        pay, receive = definition.legs
        assert pay.notional == -1.0
        assert pay.carries_quote
        assert all(c.rate == 0.045 for c in pay.coupons)
        assert [c.payment_date for c in pay.coupons] == [
            date(2024, 7, 12), date(2025, 1, 13), date(2025, 7, 14), date(2026, 1, 12)
        ]

        assert receive.notional == 1.0
        assert not receive.carries_quote
        assert len(receive.coupons) == 8
        assert receive.coupons[0].index.tenor == tenor("3M")
        assert all(c.spread == 0.0 for c in receive.coupons)

    def test_receive_fixed(self, converter):
        """Test the fixed leg carries the quote on the receive side too."""
        node = SwapNode(ticker("USDSW2Y"), tenor("0D"), tenor("2Y"), LIBOR_3M_LEG, FIXED_6M)
        pay, receive = converter.convert(node, 0.045, VALUATION).legs
        assert not pay.carries_quote
        assert receive.carries_quote
        assert receive.coupons[0].rate == 0.045

    def test_float_float_spread_on_pay_leg(self, converter):
        """Test a basis swap quote is a spread on the pay leg."""
        node = SwapNode(ticker("USDBS3S6S"), tenor("0D"), tenor("1Y"), LIBOR_3M_LEG, LIBOR_6M_LEG)
        pay, receive = converter.convert(node, 0.001, VALUATION).legs

        assert pay.carries_quote
        assert all(c.spread == 0.001 for c in pay.coupons)
        assert all(c.spread == 0.0 for c in receive.coupons)
        assert len(pay.coupons) == 4
        assert len(receive.coupons) == 2

    def test_three_leg_basis_swap(self, converter):
        """Test the spread leg of a three-leg swap carries the quote."""
        node = ThreeLegBasisSwapNode(
            ticker("USD3LEG"), tenor("0D"), tenor("1Y"), LIBOR_3M_LEG, LIBOR_6M_LEG, FIXED_6M
        )
        pay, receive, spread = converter.convert(node, 0.0012, VALUATION).legs

        assert not pay.carries_quote
        assert not receive.carries_quote
        assert spread.carries_quote
        assert spread.notional == -1.0
        assert spread.coupons[0].rate == 0.0012

    def test_cms_leg_unsupported(self, converter):
        """Test CMS legs cannot be calibration legs."""
        node = SwapNode(ticker("USDCMS"), tenor("0D"), tenor("2Y"), CMS_LEG, FIXED_6M)
        with pytest.raises(UnsupportedNodeTypeError):
            converter.convert(node, 0.045, VALUATION)


class TestFutureConversion:
    """Tests for rate future nodes."""

    def test_interest_rate_future(self, converter):
        """Test the front quarterly future fixes on the next IMM date."""
        node = RateFutureNode(ticker("EDH4"), 1, tenor("0D"), tenor("3M"), tenor("3M"), ED_FUTURE, LIBOR)
        definition = converter.convert(node, 0.9475, VALUATION)

        assert isinstance(definition, InterestRateFutureDefinition)
        assert definition.fixing_period_start == date(2024, 3, 20)
        assert definition.fixing_period_end == date(2024, 6, 20)
        assert definition.last_trading_date == date(2024, 3, 18)
        assert abs(definition.fixing_accrual_factor - 92 / 360) < 1e-12
        assert definition.price == 0.9475

    def test_federal_funds_future(self, converter):
        """Test the front fed funds future covers the next calendar month."""
        node = RateFutureNode(ticker("FFG4"), 1, tenor("0D"), tenor("1M"), tenor("1M"), FF_FUTURE, OVERNIGHT)
        definition = converter.convert(node, 0.9467, VALUATION)

        assert isinstance(definition, FederalFundsFutureDefinition)
        assert definition.fixing_period_start == date(2024, 2, 1)
        assert definition.fixing_period_end == date(2024, 3, 1)
        assert abs(definition.fixing_accrual_factor - 29 / 360) < 1e-12


class TestRollDateConversion:
    """Tests for roll-date FRA and swap nodes."""

    def test_roll_date_fra(self, converter):
        """Test an IMM FRA between the first and second IMM dates."""
        node = RollDateFRANode(ticker("IMMFRA1"), tenor("0D"), 1, 2, IMM_FRA)
        definition = converter.convert(node, 0.052, VALUATION)

        assert definition.fixing_period_start == date(2024, 3, 20)
        assert definition.fixing_period_end == date(2024, 6, 19)
        assert definition.index.tenor == tenor("3M")
        assert abs(definition.fixing_accrual_factor - 91 / 360) < 1e-12

    def test_roll_date_swap(self, converter):
        """Test an IMM swap runs between IMM dates with the fixed leg carrying the quote."""
        node = RollDateSwapNode(ticker("IMMSW1Y"), tenor("0D"), 1, 5, IMM_SWAP)
        pay, receive = converter.convert(node, 0.047, VALUATION).legs

        assert pay.carries_quote
        assert pay.coupons[0].accrual_start == date(2024, 3, 20)
        assert pay.coupons[-1].accrual_end == date(2025, 3, 19)
        assert len(pay.coupons) == 2
        assert len(receive.coupons) == 4

    def test_roll_date_numbers_must_increase(self, converter):
        """Test end number must exceed start number."""
        node = RollDateFRANode(ticker("IMMFRA0"), tenor("0D"), 2, 2, IMM_FRA)
        with pytest.raises(ValueError):
            converter.convert(node, 0.052, VALUATION)


class TestSecurityConversion:
    """Tests for bill and bond nodes."""

    def test_bill(self, converter):
        """Test a bill settles after its settlement lag."""
        definition = converter.convert(BillNode(ticker("B6M"), tenor("6M"), BILL), 0.051, VALUATION)

        assert isinstance(definition, BillDefinition)
        assert definition.settlement_date == date(2024, 1, 11)
        assert definition.maturity_date == date(2024, 7, 11)
        assert abs(definition.accrual_factor - 182 / 360) < 1e-12
        assert definition.issuer == "US GOVT"

    def test_bond(self, converter):
        """Test remaining coupons and accrued fraction of a bond."""
        definition = converter.convert(BondNode(ticker("T2Y"), tenor("2Y"), BOND), 0.045, VALUATION)

        assert isinstance(definition, BondFixedDefinition)
        assert definition.payment_dates == (
            date(2024, 1, 15), date(2024, 7, 15), date(2025, 1, 15), date(2025, 7, 15)
        )
        assert abs(definition.accrued_fraction - 176 / 180) < 1e-12
        assert definition.coupon_rate == 0.04

    def test_bond_node_on_bill_security(self, converter):
        """Test a bond node cannot use a bill."""
        with pytest.raises(UnsupportedNodeTypeError):
            converter.convert(BondNode(ticker("T2Y"), tenor("2Y"), BILL), 0.045, VALUATION)


class TestInflationConversion:
    """Tests for zero-coupon inflation nodes."""

    @pytest.fixture
    def market_data(self):
        return InMemoryMarketDataSnapshot({CPI_FIXING: 308.417})

    def test_zero_coupon_inflation_swap(self, converter, market_data):
        """Test reference date, base fixing and whole years."""
        node = ZeroCouponInflationNode(ticker("USSWIT5"), tenor("5Y"), ZC_INFLATION, FIXED_6M)
        definition = converter.convert(node, 0.025, VALUATION, market_data)

        assert isinstance(definition, ZeroCouponInflationSwapDefinition)
        assert definition.start_date == date(2024, 1, 12)
        assert definition.payment_date == date(2029, 1, 12)
        assert definition.reference_date == date(2028, 10, 1)
        assert definition.index_start_value == 308.417
        assert definition.years == 5
        assert definition.price_index.name == "US CPI"

    def test_interpolated_reference_date(self, converter, market_data):
        """Test interpolated nodes keep the day of month."""
        node = ZeroCouponInflationNode(
            ticker("USSWIT5"), tenor("5Y"), ZC_INFLATION, FIXED_6M, InflationNodeType.INTERPOLATED
        )
        definition = converter.convert(node, 0.025, VALUATION, market_data)
        assert definition.reference_date == date(2028, 10, 12)

    def test_needs_market_data(self, converter):
        """Test the base fixing must be available."""
        node = ZeroCouponInflationNode(ticker("USSWIT5"), tenor("5Y"), ZC_INFLATION, FIXED_6M)
        with pytest.raises(ValueError):
            converter.convert(node, 0.025, VALUATION)
        with pytest.raises(MissingMarketDataError):
            converter.convert(node, 0.025, VALUATION, InMemoryMarketDataSnapshot())


class TestCurvePointConversion:
    """Tests for direct curve point nodes."""

    def test_discount_factor_node(self, converter):
        """Test a discount factor point one year out."""
        definition = converter.convert(DiscountFactorNode(ticker("DF1Y"), tenor("1Y"), "USD"), 0.95, VALUATION)
        assert isinstance(definition, CurvePointDefinition)
        assert definition.point_date == date(2025, 1, 10)
        assert definition.kind == "DISCOUNT_FACTOR"
        assert definition.for_curve("USD-OIS").curve_name == "USD-OIS"

    def test_periodic_rate_node(self, converter):
        """Test the compounding frequency is carried."""
        node = PeriodicallyCompoundedRateNode(ticker("Z2Y"), tenor("2Y"), 2, "USD")
        definition = converter.convert(node, 0.04, VALUATION)
        assert definition.kind == "PERIODIC"
        assert definition.periods_per_year == 2


class TestDispatch:
    """Tests for node type dispatch."""

    def test_unsupported_node_type(self, converter):
        """Test nodes without a converter fail loudly."""
        node = CreditSpreadNode(ticker("CDS5Y"), tenor("5Y"))
        assert not converter.supports(node)
        with pytest.raises(UnsupportedNodeTypeError):
            converter.convert(node, 0.01, VALUATION)

    def test_unknown_subclass(self, converter):
        """Test dispatch is on the exact node type."""

        @dataclass(frozen=True)
        class CustomNode(CurveNode):
            pass

        with pytest.raises(UnsupportedNodeTypeError):
            converter.convert(CustomNode(ticker("X")), 0.01, VALUATION)

    def test_missing_market_data_names_the_id(self, converter):
        """Test a missing quote raises with the node's identifier."""
        node = CashNode(ticker("USDDEP3M"), tenor("0D"), tenor("3M"), DEPOSIT)
        with pytest.raises(MissingMarketDataError) as excinfo:
            converter.definition_for(node, InMemoryMarketDataSnapshot(), VALUATION)
        assert excinfo.value.identifier == ticker("USDDEP3M")

    def test_definition_for_reads_the_quote(self, converter):
        """Test the quote is taken from market data."""
        node = CashNode(ticker("USDDEP3M"), tenor("0D"), tenor("3M"), DEPOSIT)
        snapshot = InMemoryMarketDataSnapshot({ticker("USDDEP3M"): 0.053})
        assert converter.definition_for(node, snapshot, VALUATION).rate == 0.053

    def test_duplicate_handlers_rejected(self, context):
        """Test two converters cannot claim the same node type."""
        with pytest.raises(ValueError):
            CurveNodeConverter(context, [CashNodeConverter(context), CashNodeConverter(context)])
