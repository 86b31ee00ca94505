#!/usr/bin/env python3
"""
Trend Replay Demo - tickwatch trend state machine

Walks a price path through the BOS/COC trend machine one sample at a time
and prints every transition:
- NEUTRAL → UP on a break above the prior window
- UP → NEUTRAL on the first lower price (change of character)
- NEUTRAL → DOWN on a break below the prior window

Run: python examples/trend_replay.py
"""

from typing import List, Optional, Sequence

from tickwatch.state.machine import INITIAL_DIRECTION, replay_trend, step_trend
from tickwatch.state.models import TrendDirection, TrendTransition

BOS_WINDOW = 10


class TransitionTracker:
    """Tracks trend transitions for demonstration."""

    def __init__(self):
        self.transitions: List[tuple[int, float, TrendTransition]] = []

    def track(self, index: int, price: float, transition: TrendTransition) -> None:
        if transition.changed or transition.bos is not None:
            self.transitions.append((index, price, transition))

    def print_summary(self) -> None:
        print("📊 TREND TRANSITION SUMMARY")
        print("=" * 50)
        for index, price, transition in self.transitions:
            trigger = "COC" if transition.coc else "BOS"
            print(f"  #{index:2d} price={price:<7} {trigger}: "
                  f"{transition.from_direction.value} → {transition.to_direction.value}")


def run(prices: Sequence[float]) -> TrendDirection:
    tracker = TransitionTracker()
    direction = INITIAL_DIRECTION
    previous: Optional[float] = None

    for index, price in enumerate(prices):
        prior = prices[max(0, index - BOS_WINDOW):index]
        transition = step_trend(direction, price, previous, prior)
        tracker.track(index, price, transition)
        direction = transition.to_direction
        previous = price

    tracker.print_summary()
    return direction


def main() -> None:
    path = [100.0, 100.5, 100.2, 101.0, 101.5, 101.2, 100.8, 99.5, 99.0, 99.4, 98.0]

    print("🎯 Replaying price path:")
    print(f"   {path}\n")

    final = run(path)

    # replay_trend folds the same steps without the bookkeeping
    assert final == replay_trend(path, window=BOS_WINDOW)
    print(f"\nFinal trend: {final.value}")


if __name__ == "__main__":
    main()
