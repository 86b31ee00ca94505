"""
Canonical data models for price samples.

Samples are immutable once recorded; the history buffer stores them in
arrival order.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Signal(str, Enum):
    """Discrete trading signal."""
    BUY = "BUY"
    SELL = "SELL"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class Sample:
    """A single observed price."""
    price: float
    timestamp: datetime

    def to_dict(self) -> dict:
        return {"price": self.price, "timestamp": self.timestamp.isoformat()}


@dataclass(frozen=True)
class SignalRecord:
    """Signal computed for the sample accepted at ``timestamp``."""
    signal: Signal
    timestamp: datetime

    def to_dict(self) -> dict:
        return {"signal": self.signal.value, "timestamp": self.timestamp.isoformat()}
