"""Support and resistance level tracking"""

from dataclasses import dataclass
from typing import Optional, Sequence

SUPPORT_PROXIMITY_PCT = 0.01
RESISTANCE_PROXIMITY_PCT = 0.01


@dataclass(frozen=True)
class LevelUpdate:
    """Levels added by a single update (None when nothing was added)."""
    support: Optional[float] = None
    resistance: Optional[float] = None

    @property
    def changed(self) -> bool:
        return self.support is not None or self.resistance is not None


class LevelTracker:
    """
    Discovered support and resistance levels.

    A price becomes support when it equals the minimum of the recent window
    and resistance when it equals the maximum. Comparison is exact; levels
    are kept in discovery order and are never removed, so both sets only
    grow over the life of a ticker.
    """

    def __init__(
        self,
        support_proximity_pct: float = SUPPORT_PROXIMITY_PCT,
        resistance_proximity_pct: float = RESISTANCE_PROXIMITY_PCT,
    ):
        self.support_proximity_pct = support_proximity_pct
        self.resistance_proximity_pct = resistance_proximity_pct
        self._support: list[float] = []
        self._resistance: list[float] = []

    @property
    def support(self) -> tuple[float, ...]:
        return tuple(self._support)

    @property
    def resistance(self) -> tuple[float, ...]:
        return tuple(self._resistance)

    def update(self, window: Sequence[float], price: float) -> LevelUpdate:
        """
        Record ``price`` as a level if it is an extreme of ``window``.

        Args:
            window: Recent prices, normally including ``price`` itself
            price: Latest price

        Returns:
            Which levels were added
        """
        if not window:
            return LevelUpdate()

        added_support = None
        added_resistance = None

        if price == min(window) and price not in self._support:
            self._support.append(price)
            added_support = price

        if price == max(window) and price not in self._resistance:
            self._resistance.append(price)
            added_resistance = price

        return LevelUpdate(support=added_support, resistance=added_resistance)

    def near_support(self, price: float) -> bool:
        """True if price is at most ``support_proximity_pct`` above any support level."""
        return any(price <= level * (1 + self.support_proximity_pct) for level in self._support)

    def near_resistance(self, price: float) -> bool:
        """True if price is at most ``resistance_proximity_pct`` below any resistance level."""
        return any(price >= level * (1 - self.resistance_proximity_pct) for level in self._resistance)

    def copy(self) -> "LevelTracker":
        clone = LevelTracker(self.support_proximity_pct, self.resistance_proximity_pct)
        clone._support = list(self._support)
        clone._resistance = list(self._resistance)
        return clone
