"""
Multicurve: multi-curve construction and calibration library

A modular library for:
- Resolving instrument conventions and securities, with index security fallback
- Converting curve nodes and market quotes into calibration instruments
- Ordering curve construction configurations and their exogenous dependencies
- Calibrating curve groups simultaneously by Newton iteration
- Producing curve building blocks (parameter sensitivities to market quotes)

Entry points: MulticurveCalibrator.calibrate and
MulticurveCalibrator.required_currencies.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import DayCount, BusinessDayConvention, CompoundingConvention, year_fraction
from .dates import DateUtils, HolidayCalendar, Tenor
from .errors import (
    MulticurveError,
    ConventionNotFoundError,
    SecurityNotFoundError,
    UnresolvedNodeConventionError,
    MissingMarketDataError,
    UnsupportedNodeTypeError,
    ConfigurationNotFoundError,
    CyclicConfigurationError,
    CalibrationDidNotConvergeError,
    UnknownInterpolatorError,
)
from .settings import CalibrationSettings

# Reference data
from .reference import (
    ExternalId,
    ExternalIdBundle,
    ConventionResolver,
    InMemoryConventionSource,
    InMemorySecuritySource,
    InMemoryHolidaySource,
    InMemoryMarketDataSnapshot,
    InMemoryConfigurationSource,
)

# Curves
from .curves import (
    InterpolatorRegistry,
    InterpolatedCurveDefinition,
    ConstantCurveDefinition,
    CurveGroupConfiguration,
    CurveConstructionConfiguration,
)

# Conversion
from .converters import CurveNodeConverter, CurveNodeCurrencyVisitor

# Calibration
from .calibration import (
    FXMatrix,
    MulticurveProvider,
    CurveBuildingBlock,
    CurveBuildingBlockBundle,
    MulticurveBuildingRepository,
    CurveConstructionConfigurationResolver,
    MulticurveCalibrator,
)

__all__ = [
    "__version__",
    "DayCount",
    "BusinessDayConvention",
    "CompoundingConvention",
    "year_fraction",
    "DateUtils",
    "HolidayCalendar",
    "Tenor",
    "MulticurveError",
    "ConventionNotFoundError",
    "SecurityNotFoundError",
    "UnresolvedNodeConventionError",
    "MissingMarketDataError",
    "UnsupportedNodeTypeError",
    "ConfigurationNotFoundError",
    "CyclicConfigurationError",
    "CalibrationDidNotConvergeError",
    "UnknownInterpolatorError",
    "CalibrationSettings",
    "ExternalId",
    "ExternalIdBundle",
    "ConventionResolver",
    "InMemoryConventionSource",
    "InMemorySecuritySource",
    "InMemoryHolidaySource",
    "InMemoryMarketDataSnapshot",
    "InMemoryConfigurationSource",
    "InterpolatorRegistry",
    "InterpolatedCurveDefinition",
    "ConstantCurveDefinition",
    "CurveGroupConfiguration",
    "CurveConstructionConfiguration",
    "CurveNodeConverter",
    "CurveNodeCurrencyVisitor",
    "FXMatrix",
    "MulticurveProvider",
    "CurveBuildingBlock",
    "CurveBuildingBlockBundle",
    "MulticurveBuildingRepository",
    "CurveConstructionConfigurationResolver",
    "MulticurveCalibrator",
]
