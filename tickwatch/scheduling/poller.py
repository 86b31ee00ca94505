"""
Background poller driving one ticker.

Each ticker gets exactly one poller, so its state only ever has a single
writer. Polls run on a daemon thread that sleeps on a stop event between
ticks; the optional history refill runs on a second thread.
"""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from ..errors import DataQualityError, PriceSourceError
from ..sources.base import PriceSource
from ..state.models import TickerState
from ..ticker import Ticker
from .schedules import PollSchedule

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TickerPoller:
    """Fetches prices for a ticker on a schedule."""

    def __init__(
        self,
        ticker: Ticker,
        source: PriceSource,
        schedule: PollSchedule,
        refill_schedule: Optional[PollSchedule] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.ticker = ticker
        self.source = source
        self.schedule = schedule
        self.refill_schedule = refill_schedule
        self.clock = clock
        self.logger = logger.bind(symbol=ticker.symbol)

        self._stop_event = threading.Event()
        self._threads: list[threading.Thread] = []

        # Statistics
        self.polls = 0
        self.accepted = 0
        self.failures = 0
        self.last_error: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def poll_once(self) -> Optional[TickerState]:
        """
        Fetch one spot price and hand it to the ticker.

        Failures are logged and swallowed so the schedule keeps running.

        Returns:
            The new ticker state, or None if this tick produced no sample
        """
        self.polls += 1
        try:
            price = self.source.fetch_spot()
            timestamp = self.clock()

            if not self.ticker.is_fresh(timestamp):
                self.logger.info(
                    "Dropping stale sample",
                    timestamp=timestamp.isoformat()
                )
                return None

            state = self.ticker.accept_sample(price, timestamp)
            self.accepted += 1
            return state

        except DataQualityError as e:
            self._record_failure(e, "Price sample rejected")
            return None

        except PriceSourceError as e:
            self._record_failure(e, "Price source unavailable")
            return None

    def refill_history(self) -> int:
        """
        Load daily bars into the ticker.

        Returns:
            Number of bars applied (0 on failure)
        """
        if not self.source.supports_history:
            return 0

        try:
            samples = self.source.fetch_history()
        except (DataQualityError, PriceSourceError) as e:
            self._record_failure(e, "History refill failed")
            return 0

        return self.ticker.load_history(samples)

    def start(self, run_immediately: bool = True) -> None:
        """Start the polling (and refill) threads."""
        if self.is_running:
            self.logger.warning("Poller already running")
            return

        self._stop_event.clear()
        self._threads = [
            threading.Thread(
                target=self._run_loop,
                args=("poll", self.poll_once, self.schedule, run_immediately),
                name=f"poll-{self.ticker.symbol}",
                daemon=True,
            )
        ]
        if self.refill_schedule is not None:
            self._threads.append(threading.Thread(
                target=self._run_loop,
                args=("refill", self.refill_history, self.refill_schedule, run_immediately),
                name=f"refill-{self.ticker.symbol}",
                daemon=True,
            ))

        for thread in self._threads:
            thread.start()

        self.logger.info(
            "Poller started",
            schedule=repr(self.schedule),
            refill_schedule=repr(self.refill_schedule)
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Signal the threads to stop and wait for them."""
        self._stop_event.set()
        for thread in self._threads:
            if thread is not threading.current_thread():
                thread.join(timeout=timeout)
        self._threads = []
        self.logger.info("Poller stopped", polls=self.polls, accepted=self.accepted)

    def _run_loop(
        self,
        name: str,
        action: Callable[[], object],
        schedule: PollSchedule,
        run_immediately: bool,
    ) -> None:
        if run_immediately:
            self._run_action(name, action)

        while not self._stop_event.is_set():
            delay = schedule.seconds_until_next(self.clock())
            if self._stop_event.wait(timeout=delay):
                break
            self._run_action(name, action)

    def _run_action(self, name: str, action: Callable[[], object]) -> None:
        try:
            action()
        except Exception as e:
            self.failures += 1
            self.last_error = str(e)
            self.logger.error(
                "Unexpected error in poller loop",
                loop=name,
                error=str(e),
                error_type=type(e).__name__
            )

    def _record_failure(self, error: Exception, message: str) -> None:
        self.failures += 1
        self.last_error = str(error)
        self.logger.warning(
            message,
            error=str(error),
            error_type=type(error).__name__,
            context=getattr(error, 'context', {})
        )

    def get_stats(self) -> dict:
        return {
            "symbol": self.ticker.symbol,
            "polls": self.polls,
            "accepted": self.accepted,
            "failures": self.failures,
            "last_error": self.last_error,
            "running": self.is_running,
        }
