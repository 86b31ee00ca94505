"""
Trend direction state machine.

Two transitions are evaluated for every accepted sample, in order:

1. Break of structure (BOS): a price above every price in the prior window
   sets UP, a price below every one of them sets DOWN.
2. Change of character (COC): an UP trend followed by a falling price, or a
   DOWN trend followed by a rising price, resets to NEUTRAL.

Every function is pure; the only state is the TrendDirection passed in.
"""

from typing import Optional, Sequence

from .models import TrendDirection, TrendTransition

INITIAL_DIRECTION = TrendDirection.NEUTRAL


def detect_bos(price: float, prior_window: Sequence[float]) -> Optional[TrendDirection]:
    """
    Detect a break of structure.

    Args:
        price: Current price
        prior_window: Recent prices excluding the current sample

    Returns:
        UP or DOWN on a break, None otherwise (including an empty window)
    """
    if not prior_window:
        return None

    if price > max(prior_window):
        return TrendDirection.UP
    if price < min(prior_window):
        return TrendDirection.DOWN

    return None


def detect_coc(
    direction: TrendDirection,
    price: float,
    previous_price: Optional[float],
) -> bool:
    """
    Detect a change of character against the current direction.

    Returns:
        True if the trend should reset to NEUTRAL
    """
    if previous_price is None:
        return False

    if direction == TrendDirection.UP and price < previous_price:
        return True
    if direction == TrendDirection.DOWN and price > previous_price:
        return True

    return False


def step_trend(
    direction: TrendDirection,
    price: float,
    previous_price: Optional[float],
    prior_window: Sequence[float],
) -> TrendTransition:
    """
    Apply BOS then COC for a single sample.

    Args:
        direction: Trend direction before the sample
        price: Current price
        previous_price: Price of the preceding sample, if any
        prior_window: Recent prices excluding the current sample

    Returns:
        TrendTransition describing what fired and the resulting direction
    """
    bos = detect_bos(price, prior_window)
    after_bos = bos if bos is not None else direction

    coc = detect_coc(after_bos, price, previous_price)
    final = TrendDirection.NEUTRAL if coc else after_bos

    return TrendTransition(
        from_direction=direction,
        to_direction=final,
        bos=bos,
        coc=coc,
    )


def replay_trend(
    prices: Sequence[float],
    window: int = 10,
    initial: TrendDirection = INITIAL_DIRECTION,
) -> TrendDirection:
    """
    Fold :func:`step_trend` over a price sequence.

    Useful for reconstructing the trend from a recorded history.
    """
    direction = initial
    previous = None
    for index, price in enumerate(prices):
        prior = prices[max(0, index - window):index]
        direction = step_trend(direction, price, previous, prior).to_direction
        previous = price
    return direction
