"""Volatility and trend strength over the recent price window"""

import math
from dataclasses import dataclass
from typing import Sequence

INDICATOR_WINDOW = 10
SUPPORT_MULTIPLIER = 1.2
RESISTANCE_MULTIPLIER = -1.2


def calculate_sma(prices: Sequence[float]) -> float:
    """
    Simple moving average of ``prices``.

    Returns:
        Mean of the prices, 0.0 for an empty sequence
    """
    if not prices:
        return 0.0
    return sum(prices) / len(prices)


def calculate_volatility(prices: Sequence[float]) -> float:
    """
    Population standard deviation of ``prices``

    A single price has zero volatility; an empty sequence falls back to 0.0.

    Args:
        prices: Recent prices, oldest first

    Returns:
        Standard deviation
    """
    if not prices:
        return 0.0

    mean = calculate_sma(prices)
    variance = sum((price - mean) ** 2 for price in prices) / len(prices)
    return math.sqrt(variance)


def calculate_trend_strength(
    price: float,
    prices: Sequence[float],
    support: Sequence[float] = (),
    resistance: Sequence[float] = (),
    support_multiplier: float = SUPPORT_MULTIPLIER,
    resistance_multiplier: float = RESISTANCE_MULTIPLIER,
) -> float:
    """
    Distance of ``price`` from the SMA of ``prices``, adjusted for levels

    At or below the lowest support the strength is amplified; at or above
    the highest resistance it is inverted. An empty level set never matches.

    Returns:
        Trend strength, 0.0 when there are no prices
    """
    if not prices:
        return 0.0

    strength = price - calculate_sma(prices)

    if support and price <= min(support):
        return strength * support_multiplier
    if resistance and price >= max(resistance):
        return strength * resistance_multiplier

    return strength


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Indicator readings for one sample"""
    volatility: float
    trend_strength: float
    sma: float
    window_size: int

    def to_dict(self) -> dict:
        return {
            "volatility": self.volatility,
            "trend_strength": self.trend_strength,
            "sma": self.sma,
            "window_size": self.window_size,
        }


class IndicatorEngine:
    """Computes indicator snapshots over the most recent ``window`` prices"""

    def __init__(
        self,
        window: int = INDICATOR_WINDOW,
        support_multiplier: float = SUPPORT_MULTIPLIER,
        resistance_multiplier: float = RESISTANCE_MULTIPLIER,
    ):
        self.window = window
        self.support_multiplier = support_multiplier
        self.resistance_multiplier = resistance_multiplier

    def volatility(self, prices: Sequence[float]) -> float:
        return calculate_volatility(list(prices)[-self.window:])

    def trend_strength(
        self,
        price: float,
        prices: Sequence[float],
        support: Sequence[float] = (),
        resistance: Sequence[float] = (),
    ) -> float:
        return calculate_trend_strength(
            price,
            list(prices)[-self.window:],
            support,
            resistance,
            self.support_multiplier,
            self.resistance_multiplier,
        )

    def compute(
        self,
        price: float,
        prices: Sequence[float],
        support: Sequence[float] = (),
        resistance: Sequence[float] = (),
    ) -> IndicatorSnapshot:
        """
        Compute all indicators for the latest price

        Args:
            price: Latest price
            prices: Recent prices including ``price``, oldest first
            support: Known support levels
            resistance: Known resistance levels

        Returns:
            IndicatorSnapshot
        """
        recent = list(prices)[-self.window:]
        return IndicatorSnapshot(
            volatility=calculate_volatility(recent),
            trend_strength=calculate_trend_strength(
                price, recent, support, resistance,
                self.support_multiplier, self.resistance_multiplier,
            ),
            sma=calculate_sma(recent),
            window_size=len(recent),
        )
