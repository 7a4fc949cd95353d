"""
Reference data package - identifiers, conventions, securities and lookups.

Provides:
- ExternalId / ExternalIdBundle identifiers
- Convention and security records
- Lookup interfaces with in-memory implementations
- ConventionResolver with index security fallback
"""

from .identifiers import ExternalId, ExternalIdBundle
from .conventions import (
    FinancialConvention,
    DepositConvention,
    IborIndexConvention,
    OvernightIndexConvention,
    PriceIndexConvention,
    FXSpotConvention,
    FXForwardAndSwapConvention,
    FixedLegConvention,
    VanillaIborLegConvention,
    OISLegConvention,
    CompoundingIborLegConvention,
    SwapConvention,
    SwapIndexConvention,
    CMSLegConvention,
    InflationLegConvention,
    InterestRateFutureConvention,
    FederalFundsFutureConvention,
    RollDateFRAConvention,
    RollDateSwapConvention,
)
from .securities import (
    Security,
    IndexSecurity,
    IborIndexSecurity,
    OvernightIndexSecurity,
    PriceIndexSecurity,
    BillSecurity,
    BondSecurity,
)
from .sources import (
    ConventionSource,
    SecuritySource,
    HolidaySource,
    MarketDataSource,
    ConfigurationSource,
    InMemoryConventionSource,
    InMemorySecuritySource,
    InMemoryHolidaySource,
    InMemoryMarketDataSnapshot,
    InMemoryConfigurationSource,
)
from .resolver import ConventionResolution, ConventionResolver

__all__ = [
    "ExternalId",
    "ExternalIdBundle",
    "FinancialConvention",
    "DepositConvention",
    "IborIndexConvention",
    "OvernightIndexConvention",
    "PriceIndexConvention",
    "FXSpotConvention",
    "FXForwardAndSwapConvention",
    "FixedLegConvention",
    "VanillaIborLegConvention",
    "OISLegConvention",
    "CompoundingIborLegConvention",
    "SwapConvention",
    "SwapIndexConvention",
    "CMSLegConvention",
    "InflationLegConvention",
    "InterestRateFutureConvention",
    "FederalFundsFutureConvention",
    "RollDateFRAConvention",
    "RollDateSwapConvention",
    "Security",
    "IndexSecurity",
    "IborIndexSecurity",
    "OvernightIndexSecurity",
    "PriceIndexSecurity",
    "BillSecurity",
    "BondSecurity",
    "ConventionSource",
    "SecuritySource",
    "HolidaySource",
    "MarketDataSource",
    "ConfigurationSource",
    "InMemoryConventionSource",
    "InMemorySecuritySource",
    "InMemoryHolidaySource",
    "InMemoryMarketDataSnapshot",
    "InMemoryConfigurationSource",
    "ConventionResolution",
    "ConventionResolver",
]
