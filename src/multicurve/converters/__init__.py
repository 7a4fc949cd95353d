"""
Curve node converters.

Provides:
- CurveNodeConverter: node type dispatch to the per-family converters
- ConversionContext and SettlementRule: shared lookups and date rules
- CurveNodeCurrencyVisitor: currencies required by a node
"""

from .base import ConversionContext, NodeConverter, SettlementRule
from .cash import CashNodeConverter
from .fra import FRANodeConverter
from .swap import SwapLegBuilder, SwapNodeConverter
from .fx_forward import FXForwardNodeConverter
from .futures import RateFutureNodeConverter
from .securities import SecurityNodeConverter
from .inflation import InflationNodeConverter
from .rates import CurvePointNodeConverter
from .roll_dates import RollDateNodeConverter
from .dispatcher import CurveNodeConverter
from .currencies import CurveNodeCurrencyVisitor

__all__ = [
    "ConversionContext",
    "NodeConverter",
    "SettlementRule",
    "CashNodeConverter",
    "FRANodeConverter",
    "SwapLegBuilder",
    "SwapNodeConverter",
    "FXForwardNodeConverter",
    "RateFutureNodeConverter",
    "SecurityNodeConverter",
    "InflationNodeConverter",
    "CurvePointNodeConverter",
    "RollDateNodeConverter",
    "CurveNodeConverter",
    "CurveNodeCurrencyVisitor",
]
