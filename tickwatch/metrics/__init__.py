"""Indicator calculations and support/resistance tracking"""

from .indicators import (
    IndicatorEngine,
    IndicatorSnapshot,
    calculate_sma,
    calculate_trend_strength,
    calculate_volatility,
)
from .levels import LevelTracker, LevelUpdate

__all__ = [
    "IndicatorEngine",
    "IndicatorSnapshot",
    "LevelTracker",
    "LevelUpdate",
    "calculate_sma",
    "calculate_trend_strength",
    "calculate_volatility",
]
