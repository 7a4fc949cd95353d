"""
Shared USD reference data for converter and calibration tests.
"""

from datetime import date

import pytest

from multicurve.conventions import BusinessDayConvention, DayCount
from multicurve.converters import ConversionContext, CurveNodeConverter
from multicurve.dates import Tenor
from multicurve.reference import (
    BillSecurity,
    BondSecurity,
    CMSLegConvention,
    DepositConvention,
    ExternalId,
    ExternalIdBundle,
    FederalFundsFutureConvention,
    FixedLegConvention,
    IborIndexConvention,
    IborIndexSecurity,
    InflationLegConvention,
    InMemoryConventionSource,
    InMemoryHolidaySource,
    InMemorySecuritySource,
    InterestRateFutureConvention,
    OISLegConvention,
    OvernightIndexConvention,
    PriceIndexConvention,
    RollDateFRAConvention,
    RollDateSwapConvention,
    VanillaIborLegConvention,
)
from multicurve.reference.resolver import ConventionResolver

MF = BusinessDayConvention.MODIFIED_FOLLOWING
US = ExternalId("FINANCIAL_REGION", "US")
CME = ExternalId("FINANCIAL_REGION", "CME")


def convention_id(name):
    return ExternalId("CONVENTION", name)


def ids(name):
    return ExternalIdBundle.of(convention_id(name))


DEPOSIT = convention_id("USD Deposit")
LIBOR = convention_id("USD LIBOR")
OVERNIGHT = convention_id("USD Overnight")
FIXED_6M = convention_id("USD Fixed 6M")
LIBOR_3M_LEG = convention_id("USD 3M LIBOR Leg")
LIBOR_6M_LEG = convention_id("USD 6M LIBOR Leg")
OIS_LEG = convention_id("USD OIS Leg")
CMS_LEG = convention_id("USD CMS Leg")
ED_FUTURE = convention_id("ED Future")
FF_FUTURE = convention_id("FF Future")
IMM_FRA = convention_id("USD IMM FRA")
IMM_SWAP = convention_id("USD IMM Swap")
CPI = convention_id("US CPI")
ZC_INFLATION = convention_id("USD ZC Inflation")

LIBOR_3M_SECURITY = ExternalId("BLOOMBERG_TICKER", "US0003M Index")
CPI_FIXING = ExternalId("BLOOMBERG_TICKER", "CPURNSA Index")
BILL = ExternalId("ISIN", "US912796ZZ01")
BOND = ExternalId("ISIN", "US91282CZZ02")

VALUATION = date(2024, 1, 10)


def usd_conventions():
    return [
        DepositConvention("USD Deposit", ids("USD Deposit"), DayCount.ACT_360, MF, 2, False, "USD", US),
        IborIndexConvention("USD LIBOR", ids("USD LIBOR"), DayCount.ACT_360, MF, 2, True, "USD", US),
        OvernightIndexConvention("USD Overnight", ids("USD Overnight"), DayCount.ACT_360, 1, "USD", US),
        FixedLegConvention(
            "USD Fixed 6M", ids("USD Fixed 6M"), Tenor.parse("6M"), DayCount.THIRTY_360, MF, "USD", US, 2, False
        ),
        VanillaIborLegConvention("USD 3M LIBOR Leg", ids("USD 3M LIBOR Leg"), LIBOR, True, Tenor.parse("3M"), 2, False),
        VanillaIborLegConvention("USD 6M LIBOR Leg", ids("USD 6M LIBOR Leg"), LIBOR, True, Tenor.parse("6M"), 2, False),
        OISLegConvention("USD OIS Leg", ids("USD OIS Leg"), OVERNIGHT, Tenor.parse("1Y"), MF, 2, False, 2),
        CMSLegConvention("USD CMS Leg", ids("USD CMS Leg"), convention_id("USD Swap Index"), Tenor.parse("6M")),
        InterestRateFutureConvention("ED Future", ids("ED Future"), LIBOR, CME),
        FederalFundsFutureConvention("FF Future", ids("FF Future"), OVERNIGHT, CME),
        RollDateFRAConvention("USD IMM FRA", ids("USD IMM FRA"), LIBOR),
        RollDateSwapConvention("USD IMM Swap", ids("USD IMM Swap"), FIXED_6M, LIBOR_3M_LEG),
        PriceIndexConvention("US CPI", ids("US CPI"), "USD", US, CPI_FIXING),
        InflationLegConvention(
            "USD ZC Inflation", ids("USD ZC Inflation"), MF, DayCount.ACT_ACT, False, 3, 2, CPI, CPI_FIXING
        ),
    ]


def usd_securities():
    return [
        IborIndexSecurity("USD LIBOR 3M", ExternalIdBundle.of(LIBOR_3M_SECURITY), LIBOR, Tenor.parse("3M")),
        BillSecurity("UST Bill", ExternalIdBundle.of(BILL), "USD", date(2024, 7, 11), DayCount.ACT_360, "US GOVT", US, 1),
        BondSecurity(
            "UST 4% 2025", ExternalIdBundle.of(BOND), "USD", 0.04, 2, date(2023, 7, 15), date(2025, 7, 15),
            DayCount.THIRTY_360, "US GOVT", US, 1
        ),
    ]


@pytest.fixture
def conventions():
    return InMemoryConventionSource(usd_conventions())


@pytest.fixture
def securities():
    return InMemorySecuritySource(usd_securities())


@pytest.fixture
def holidays():
    return InMemoryHolidaySource()


@pytest.fixture
def resolver(conventions, securities):
    return ConventionResolver(conventions, securities)


@pytest.fixture
def context(resolver, securities, holidays):
    return ConversionContext(resolver, securities, holidays)


@pytest.fixture
def converter(context):
    return CurveNodeConverter(context)
