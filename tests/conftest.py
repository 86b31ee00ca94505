"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from tickwatch.config.defaults import ClassifierParams, HistoryParams, SessionParams
from tickwatch.signals.events import TickerEvent
from tickwatch.ticker import Ticker


BASE_TIME = datetime(2024, 3, 4, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time() -> datetime:
    """Start of a synthetic trading session."""
    return BASE_TIME


@pytest.fixture
def make_ticker() -> Callable[..., Ticker]:
    """Factory for tickers with optional parameter overrides."""
    def _make(
        symbol: str = "XAU",
        history: Optional[HistoryParams] = None,
        classifier: Optional[ClassifierParams] = None,
        session: Optional[SessionParams] = None,
    ) -> Ticker:
        return Ticker(symbol, history=history, classifier=classifier, session=session)
    return _make


@pytest.fixture
def feed() -> Callable[..., None]:
    """Feed prices one minute apart, continuing after the ticker's last sample."""
    def _feed(ticker: Ticker, prices: List[float], start: Optional[datetime] = None) -> None:
        state = ticker.get_state()
        if start is None:
            start = state.timestamp + timedelta(minutes=1) if state.timestamp else BASE_TIME
        for offset, price in enumerate(prices):
            ticker.accept_sample(price, start + timedelta(minutes=offset))
    return _feed


@pytest.fixture
def recorded_events():
    """Handler that records every event it receives."""
    events: List[TickerEvent] = []

    def handler(event: TickerEvent) -> None:
        events.append(event)

    handler.events = events
    return handler


@pytest.fixture
def spot_payload() -> list:
    """goldprice.org style spot quote."""
    return ["1709542800000,2083.45,2083.95,2082.10"]


@pytest.fixture
def history_payload() -> dict:
    """investing.com style daily chart payload (ts_ms, o, h, l, c, v)."""
    day_ms = 86_400_000
    start_ms = 1709251200000  # 2024-03-01T00:00:00Z
    closes = [2040.0, 2050.5, 2045.0, 2060.25]
    return {
        "data": [
            [start_ms + i * day_ms, close - 5, close + 5, close - 10, close, 1000]
            for i, close in enumerate(closes)
        ]
    }
