"""
Curves package - interpolation, curve objects, nodes and definitions.

Provides:
- Interpolators, extrapolators and the named InterpolatorRegistry
- Immutable yield, discount factor, constant and price index curves
- Curve generators used by the calibration repository
- Curve nodes, curve definitions and construction configurations
"""

from .interpolation import (
    Interpolator,
    LinearInterpolator,
    LogLinearInterpolator,
    CubicSplineInterpolator,
    StepInterpolator,
    Extrapolator,
    FlatExtrapolator,
    LinearExtrapolator,
    LogLinearExtrapolator,
    QuadraticLeftExtrapolator,
    CombinedInterpolatorExtrapolator,
)
from .registry import InterpolatorRegistry
from .curve import (
    YieldCurve,
    InterpolatedYieldCurve,
    DiscountFactorCurve,
    ConstantYieldCurve,
    PriceIndexCurve,
    create_flat_curve,
)
from .generators import (
    CurveGenerator,
    GeneratorYieldCurveInterpolated,
    GeneratorDiscountFactorInterpolated,
    GeneratorPriceIndexInterpolated,
    GeneratorYieldCurveConstant,
)
from .nodes import (
    InflationNodeType,
    CurveNode,
    CashNode,
    FRANode,
    SwapNode,
    ThreeLegBasisSwapNode,
    FXForwardNode,
    RateFutureNode,
    BillNode,
    BondNode,
    ZeroCouponInflationNode,
    RollDateFRANode,
    RollDateSwapNode,
    DiscountFactorNode,
    ContinuouslyCompoundedRateNode,
    PeriodicallyCompoundedRateNode,
    CreditSpreadNode,
)
from .definitions import (
    AbstractCurveDefinition,
    InterpolatedCurveDefinition,
    ConstantCurveDefinition,
    CurveTypeConfiguration,
    DiscountingCurveTypeConfiguration,
    IborCurveTypeConfiguration,
    OvernightCurveTypeConfiguration,
    IssuerCurveTypeConfiguration,
    InflationCurveTypeConfiguration,
    CurveGroupConfiguration,
    CurveConstructionConfiguration,
)

__all__ = [
    "Interpolator",
    "LinearInterpolator",
    "LogLinearInterpolator",
    "CubicSplineInterpolator",
    "StepInterpolator",
    "Extrapolator",
    "FlatExtrapolator",
    "LinearExtrapolator",
    "LogLinearExtrapolator",
    "QuadraticLeftExtrapolator",
    "CombinedInterpolatorExtrapolator",
    "InterpolatorRegistry",
    "YieldCurve",
    "InterpolatedYieldCurve",
    "DiscountFactorCurve",
    "ConstantYieldCurve",
    "PriceIndexCurve",
    "create_flat_curve",
    "CurveGenerator",
    "GeneratorYieldCurveInterpolated",
    "GeneratorDiscountFactorInterpolated",
    "GeneratorPriceIndexInterpolated",
    "GeneratorYieldCurveConstant",
    "InflationNodeType",
    "CurveNode",
    "CashNode",
    "FRANode",
    "SwapNode",
    "ThreeLegBasisSwapNode",
    "FXForwardNode",
    "RateFutureNode",
    "BillNode",
    "BondNode",
    "ZeroCouponInflationNode",
    "RollDateFRANode",
    "RollDateSwapNode",
    "DiscountFactorNode",
    "ContinuouslyCompoundedRateNode",
    "PeriodicallyCompoundedRateNode",
    "CreditSpreadNode",
    "AbstractCurveDefinition",
    "InterpolatedCurveDefinition",
    "ConstantCurveDefinition",
    "CurveTypeConfiguration",
    "DiscountingCurveTypeConfiguration",
    "IborCurveTypeConfiguration",
    "OvernightCurveTypeConfiguration",
    "IssuerCurveTypeConfiguration",
    "InflationCurveTypeConfiguration",
    "CurveGroupConfiguration",
    "CurveConstructionConfiguration",
]
