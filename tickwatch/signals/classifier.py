"""
BUY/SELL/NEUTRAL classification.

The thresholds are heuristics, not derived values. With population standard
deviation over ten prices, no single price can sit more than three standard
deviations from the mean, so the default pair (volatility below 0.02 and
|trend strength| above 0.5) rarely fires on real data. Both are exposed so
they can be tuned per ticker.
"""

from dataclasses import dataclass

from ..data.models import Signal

MAX_VOLATILITY = 0.02
MIN_TREND_STRENGTH = 0.5


@dataclass(frozen=True)
class ClassifierThresholds:
    """Thresholds applied by :func:`classify`."""
    max_volatility: float = MAX_VOLATILITY
    min_trend_strength: float = MIN_TREND_STRENGTH


DEFAULT_THRESHOLDS = ClassifierThresholds()


def classify(
    price_change: float,
    volatility: float,
    trend_strength: float,
    near_support: bool,
    near_resistance: bool,
    thresholds: ClassifierThresholds = DEFAULT_THRESHOLDS,
) -> Signal:
    """
    Classify the latest sample.

    BUY needs a rising price, calm volatility, a strong positive trend and no
    resistance overhead. SELL mirrors it with no support underneath.

    Args:
        price_change: Current price minus previous price
        volatility: Standard deviation of recent prices
        trend_strength: Level-adjusted distance from the SMA
        near_support: Price is within the proximity band above a support level
        near_resistance: Price is within the proximity band below a resistance level
        thresholds: Volatility ceiling and trend floor

    Returns:
        Signal
    """
    calm = volatility < thresholds.max_volatility

    if (price_change > 0 and calm
            and trend_strength > thresholds.min_trend_strength
            and not near_resistance):
        return Signal.BUY

    if (price_change < 0 and calm
            and trend_strength < -thresholds.min_trend_strength
            and not near_support):
        return Signal.SELL

    return Signal.NEUTRAL
