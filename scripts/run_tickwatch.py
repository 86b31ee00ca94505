#!/usr/bin/env python3
"""
Poll every configured ticker and log signals until interrupted.

Usage:
    python scripts/run_tickwatch.py [--json] [--level DEBUG] [SYMBOL ...]
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tickwatch.config.loader import ConfigLoader
from tickwatch.errors import ConfigurationError, DuplicateTickerError
from tickwatch.logging.config import configure_logging, get_logger
from tickwatch.registry import TickerRegistry
from tickwatch.signals.events import EventKind, TickerEvent


def main() -> int:
    parser = argparse.ArgumentParser(description="Run tickwatch pollers")
    parser.add_argument("symbols", nargs="*", help="Symbols to watch (default: all configured)")
    parser.add_argument("--config-dir", type=Path, default=None)
    parser.add_argument("--json", action="store_true", help="Emit JSON logs")
    parser.add_argument("--level", default="INFO")
    args = parser.parse_args()

    configure_logging(level=args.level, format_json=args.json)
    logger = get_logger("tickwatch.run")

    loader = ConfigLoader.create(args.config_dir)
    symbols = args.symbols or loader.list_symbols()
    if not symbols:
        logger.error("No symbols given and none configured", config_dir=str(loader.config_dir))
        return 1

    def on_event(event: TickerEvent) -> None:
        logger.info("Ticker event", **event.to_dict())

    registry = TickerRegistry()
    for symbol in symbols:
        try:
            ticker = registry.watch(symbol, loader=loader, start=False)
        except (ConfigurationError, DuplicateTickerError) as e:
            logger.error("Skipping ticker", symbol=symbol, error=str(e))
            continue
        ticker.subscribe(on_event, {EventKind.SIGNAL_CHANGED, EventKind.BOS_DETECTED,
                                    EventKind.COC_DETECTED})

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    registry.start_all()
    logger.info("Watching tickers", symbols=registry.symbols())
    stop.wait()

    registry.stop_all()
    logger.info("Shutdown complete", stats=registry.get_runtime_stats())
    return 0


if __name__ == "__main__":
    sys.exit(main())
