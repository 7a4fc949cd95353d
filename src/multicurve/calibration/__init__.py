"""
Calibration package - providers, solving and the calibration entry points.

Provides:
- FXMatrix, CurveRoles and MulticurveProvider
- Par spread, present value and finite-difference calculators
- NewtonVectorRootFinder
- Curve building blocks and bundles
- MulticurveBuildingRepository for simultaneous group calibration
- CurveConstructionConfigurationResolver for ordering configurations
- MulticurveCalibrator with calibrate and required_currencies
"""

from .provider import FXMatrix, CurveRoles, MulticurveProvider
from .calculators import (
    ParSpreadMarketQuoteCalculator,
    PresentValueCalculator,
    FiniteDifferenceSensitivityCalculator,
)
from .solver import NewtonVectorRootFinder, RootResult
from .blocks import CurveBuildingBlock, CurveBuildingBlockBundle
from .repository import GroupCalibration, MulticurveBuildingRepository, SingleCurveBundle
from .configuration import CurveConstructionConfigurationResolver
from .engine import MulticurveCalibrator

__all__ = [
    "FXMatrix",
    "CurveRoles",
    "MulticurveProvider",
    "ParSpreadMarketQuoteCalculator",
    "PresentValueCalculator",
    "FiniteDifferenceSensitivityCalculator",
    "NewtonVectorRootFinder",
    "RootResult",
    "CurveBuildingBlock",
    "CurveBuildingBlockBundle",
    "GroupCalibration",
    "MulticurveBuildingRepository",
    "SingleCurveBundle",
    "CurveConstructionConfigurationResolver",
    "MulticurveCalibrator",
]
