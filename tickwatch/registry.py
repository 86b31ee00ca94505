"""
Ticker registry.

Keeps one ticker (and optionally its poller) per symbol and builds
configured tickers from the YAML configuration.
"""

from typing import Any, Optional

import structlog

from .config.defaults import PollingParams
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .errors import ConfigurationError, DuplicateTickerError, UnknownTickerError
from .scheduling.poller import TickerPoller
from .scheduling.schedules import build_poll_schedule, build_refill_schedule
from .signals.events import EventEmitter
from .sources.base import PriceSource
from .sources.http_source import HttpPriceSource
from .state.models import TickerState
from .ticker import Ticker

logger = structlog.get_logger(__name__)


def normalize_symbol(symbol: str) -> str:
    if not isinstance(symbol, str) or not symbol.strip():
        raise ValueError("Symbol is required and must be a string")
    return symbol.strip().upper()


def load_ticker_config(
    symbol: str,
    loader: Optional[ConfigLoader] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """
    Merge and validate configuration for ``symbol``.

    Raises:
        ConfigurationError: If any merged value is invalid
    """
    loader = loader or ConfigLoader.create()
    config = loader.merge_config(normalize_symbol(symbol), overrides)

    errors = ConfigValidator.validate_config(config)
    if errors:
        error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
        logger.error(
            "Ticker configuration validation failed",
            symbol=symbol,
            errors=error_msgs
        )
        raise ConfigurationError(
            f"Invalid configuration for {symbol}: {'; '.join(error_msgs)}",
            errors=errors,
            context={"symbol": symbol}
        )

    return config


def create_ticker(
    symbol: str,
    loader: Optional[ConfigLoader] = None,
    overrides: Optional[dict[str, Any]] = None,
    emitter: Optional[EventEmitter] = None,
) -> Ticker:
    """Build a ticker from validated configuration."""
    config = load_ticker_config(symbol, loader, overrides)
    return Ticker.from_config(normalize_symbol(symbol), config, emitter=emitter)


def create_poller(
    ticker: Ticker,
    config: dict[str, Any],
    source: Optional[PriceSource] = None,
) -> TickerPoller:
    """Build a poller for ``ticker`` with schedules taken from ``config``."""
    polling = PollingParams(**config.get('polling', {}))
    source = source or HttpPriceSource.from_config(ticker.symbol, config)

    return TickerPoller(
        ticker=ticker,
        source=source,
        schedule=build_poll_schedule(polling),
        refill_schedule=build_refill_schedule(polling) if source.supports_history else None,
    )


class TickerRegistry:
    """Symbol-keyed collection of tickers."""

    def __init__(self):
        self.logger = logger
        self._tickers: dict[str, Ticker] = {}
        self._pollers: dict[str, TickerPoller] = {}

    def add(self, ticker: Ticker, poller: Optional[TickerPoller] = None) -> Ticker:
        """
        Register a ticker.

        Raises:
            DuplicateTickerError: If the symbol is already registered
        """
        symbol = ticker.symbol
        if symbol in self._tickers:
            raise DuplicateTickerError(
                "Ticker already exists in the registry", symbol=symbol
            )

        self._tickers[symbol] = ticker
        if poller is not None:
            self._pollers[symbol] = poller

        self.logger.info("Added ticker to registry", symbol=symbol, polled=poller is not None)
        return ticker

    def watch(
        self,
        symbol: str,
        loader: Optional[ConfigLoader] = None,
        overrides: Optional[dict[str, Any]] = None,
        source: Optional[PriceSource] = None,
        start: bool = True,
    ) -> Ticker:
        """Create, register and (optionally) start polling a configured ticker."""
        symbol = normalize_symbol(symbol)
        if symbol in self._tickers:
            raise DuplicateTickerError(
                "Ticker already exists in the registry", symbol=symbol
            )

        config = load_ticker_config(symbol, loader, overrides)
        ticker = Ticker.from_config(symbol, config)
        poller = create_poller(ticker, config, source)
        self.add(ticker, poller)

        if start:
            poller.start()
        return ticker

    def get(self, symbol: str) -> Optional[Ticker]:
        return self._tickers.get(normalize_symbol(symbol))

    def require(self, symbol: str) -> Ticker:
        """
        Raises:
            UnknownTickerError: If no ticker is registered for ``symbol``
        """
        ticker = self.get(symbol)
        if ticker is None:
            raise UnknownTickerError("Ticker not found", symbol=normalize_symbol(symbol))
        return ticker

    def get_poller(self, symbol: str) -> Optional[TickerPoller]:
        return self._pollers.get(normalize_symbol(symbol))

    def remove(self, symbol: str) -> Ticker:
        """Unregister a ticker, stopping its poller first."""
        ticker = self.require(symbol)
        poller = self._pollers.pop(ticker.symbol, None)
        if poller is not None:
            poller.stop()
        del self._tickers[ticker.symbol]

        self.logger.info("Removed ticker from registry", symbol=ticker.symbol)
        return ticker

    def symbols(self) -> list[str]:
        return list(self._tickers)

    def get_state(self, symbol: str) -> TickerState:
        return self.require(symbol).get_state()

    def get_state_document(self, symbol: str) -> dict[str, Any]:
        """Snapshot of ``symbol`` as a JSON-serializable document."""
        return self.get_state(symbol).to_dict()

    def start_all(self) -> None:
        for poller in self._pollers.values():
            if not poller.is_running:
                poller.start()

    def stop_all(self) -> None:
        for poller in self._pollers.values():
            poller.stop()

    def get_runtime_stats(self) -> dict[str, Any]:
        return {
            "tickers": len(self._tickers),
            "polled_tickers": len(self._pollers),
            "pollers": [poller.get_stats() for poller in self._pollers.values()],
        }

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and bool(symbol.strip()) \
            and normalize_symbol(symbol) in self._tickers

    def __len__(self) -> int:
        return len(self._tickers)
