#!/usr/bin/env python3
"""
Basic Usage Example - tickwatch signal engine

Feeds a synthetic price path into a ticker without any network access and
prints the resulting signal, trend and levels. It shows how to:
- Create a ticker with tuned classifier thresholds
- Subscribe to structured events
- Accept samples and read snapshots
- See a malformed sample rejected without touching state

Run: python examples/basic_usage.py
"""

import json
from datetime import datetime, timedelta, timezone

from tickwatch.config.defaults import ClassifierParams
from tickwatch.errors import DataQualityError
from tickwatch.logging.config import configure_logging
from tickwatch.signals.events import TickerEvent
from tickwatch.ticker import Ticker


def main() -> None:
    configure_logging(level="WARNING")

    # Default thresholds almost never leave NEUTRAL on ten-sample windows;
    # loosen the volatility ceiling so the demo produces signals.
    ticker = Ticker("XAU", classifier=ClassifierParams(max_volatility=1.0))

    def print_event(event: TickerEvent) -> None:
        print(f"  event: {event.kind.value:<16} {json.dumps(event.data)}")

    ticker.subscribe(print_event)

    start = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)
    path = [20.0] + [10.0] * 9 + [11.0, 10.5, 9.0]

    for minute, price in enumerate(path):
        print(f"Sample {minute:2d}: price={price}")
        state = ticker.accept_sample(price, start + timedelta(minutes=minute))
        print(f"  signal={state.signal.value} trend={state.trend.value}")

    print("\nRejecting an empty payload:")
    before = ticker.get_state()
    try:
        ticker.accept_sample("", start + timedelta(minutes=len(path)))
    except DataQualityError as e:
        print(f"  rejected: {type(e).__name__}: {e}")
    assert ticker.get_state() == before

    state = ticker.get_state()
    print("\nFinal snapshot:")
    print(f"  support levels:    {list(state.support_levels)}")
    print(f"  resistance levels: {list(state.resistance_levels)}")
    print(f"  day low/high:      {state.day_low} / {state.day_high}")
    print(f"  last 5 prices:     {list(ticker.get_history(5))}")


if __name__ == "__main__":
    main()
