"""Base class for price sources."""

from abc import ABC, abstractmethod

import structlog

from ..data.models import Sample


class PriceSource(ABC):
    """Fetches prices for a single symbol."""

    def __init__(self, symbol: str):
        self.symbol = symbol.upper()
        self.logger = structlog.get_logger(f"tickwatch.sources.{self.symbol}")
        self._fetch_count = 0
        self._error_count = 0

    @abstractmethod
    def fetch_spot(self) -> float:
        """
        Fetch the current price.

        Raises:
            PriceSourceError: If the source cannot be reached
            DataQualityError: If the response cannot be parsed
        """

    @abstractmethod
    def fetch_history(self) -> list[Sample]:
        """
        Fetch daily history bars, oldest first.

        Raises:
            PriceSourceError: If the source cannot be reached
            DataQualityError: If the response cannot be parsed
        """

    @property
    def supports_history(self) -> bool:
        return True

    def get_stats(self) -> dict:
        return {
            "symbol": self.symbol,
            "fetch_count": self._fetch_count,
            "error_count": self._error_count,
            "error_rate": self._error_count / max(self._fetch_count, 1),
        }
