"""
State data models for the trend machine and ticker snapshots.

All structures here are frozen; a ticker replaces its snapshot wholesale on
every accepted sample.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..data.models import Sample, Signal, SignalRecord
from ..utils.time import format_market_time


class TrendDirection(str, Enum):
    """Persistent trend direction."""
    UP = "UP"
    DOWN = "DOWN"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class TrendTransition:
    """Outcome of evaluating one sample against the trend machine."""

    from_direction: TrendDirection
    to_direction: TrendDirection

    # Direction set by break of structure, None when no break occurred
    bos: Optional[TrendDirection] = None

    # True when change of character reset the trend to NEUTRAL
    coc: bool = False

    @property
    def changed(self) -> bool:
        return self.from_direction != self.to_direction


@dataclass(frozen=True)
class TickerState:
    """Read-only snapshot of one instrument."""

    symbol: str
    currency: str

    price: Optional[float] = None
    previous_price: Optional[float] = None
    timestamp: Optional[datetime] = None

    signal: Signal = Signal.NEUTRAL
    trend: TrendDirection = TrendDirection.NEUTRAL

    # None until the first sample of the day
    day_low: Optional[float] = None
    day_high: Optional[float] = None

    price_history: tuple[Sample, ...] = ()
    signal_history: tuple[SignalRecord, ...] = ()
    support_levels: tuple[float, ...] = ()
    resistance_levels: tuple[float, ...] = ()

    @property
    def initialized(self) -> bool:
        return self.price is not None

    def to_dict(self) -> dict[str, Any]:
        """Structured document served to external consumers."""
        return {
            "symbol": self.symbol,
            "currency": self.currency,
            "price": self.price,
            "previous_price": self.previous_price,
            "date": format_market_time(self.timestamp),
            "signal": self.signal.value,
            "trend_direction": self.trend.value,
            "day_low": self.day_low,
            "day_high": self.day_high,
            "price_history": [sample.to_dict() for sample in self.price_history],
            "signal_history": [record.to_dict() for record in self.signal_history],
            "support_levels": list(self.support_levels),
            "resistance_levels": list(self.resistance_levels),
        }
