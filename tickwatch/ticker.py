"""
Per-instrument ticker orchestrator.

Owns one instrument's rolling history, support/resistance levels, signal and
trend state, and applies each accepted price sample as a single atomic
update:

Sample → Validation → History/Levels → Indicators → Classifier → Trend Machine → Snapshot
"""

import threading
from dataclasses import replace
from datetime import datetime
from typing import Any, Iterable, Optional

import structlog

from .config.defaults import ClassifierParams, HistoryParams, SessionParams
from .data.buffer import HistoryBuffer, RingBuffer
from .data.models import Sample, Signal, SignalRecord
from .data.validators import validate_price, validate_timestamp
from .errors import DataQualityError, InsufficientDataError, TemporalDataError
from .logging.config import (
    get_signal_logger,
    get_state_logger,
    log_signal_decision,
    log_trend_transition,
)
from .metrics.indicators import IndicatorEngine, IndicatorSnapshot
from .metrics.levels import LevelTracker, LevelUpdate
from .signals.classifier import ClassifierThresholds, classify
from .signals.events import EventEmitter, EventHandler, EventKind, TickerEvent
from .state.machine import step_trend
from .state.models import TickerState, TrendDirection, TrendTransition
from .utils.time import format_market_time, is_new_day, is_newer

logger = structlog.get_logger(__name__)
signal_logger = get_signal_logger(__name__)
state_logger = get_state_logger(__name__)


class Ticker:
    """
    Signal engine for a single instrument.

    A ticker is written by exactly one poller. Mutation and snapshot reads
    share a lock so that readers on other threads only ever see the state
    before or after a whole sample.
    """

    def __init__(
        self,
        symbol: str,
        currency: str = "USD",
        history: Optional[HistoryParams] = None,
        classifier: Optional[ClassifierParams] = None,
        session: Optional[SessionParams] = None,
        emitter: Optional[EventEmitter] = None,
    ) -> None:
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValueError("Ticker symbol must be a non-empty string")

        self.logger = logger.bind(symbol=symbol.strip().upper())

        self.history_params = history or HistoryParams()
        self.classifier_params = classifier or ClassifierParams()
        self.session_params = session or SessionParams()

        self.thresholds = ClassifierThresholds(
            max_volatility=self.classifier_params.max_volatility,
            min_trend_strength=self.classifier_params.min_trend_strength,
        )
        self.indicator_engine = IndicatorEngine(
            window=self.history_params.indicator_window,
            support_multiplier=self.classifier_params.support_multiplier,
            resistance_multiplier=self.classifier_params.resistance_multiplier,
        )
        self.events = emitter or EventEmitter()

        self._lock = threading.Lock()
        self._history = HistoryBuffer(self.history_params.capacity)
        self._signals: RingBuffer[SignalRecord] = RingBuffer(self.history_params.capacity)
        self._levels = LevelTracker(
            support_proximity_pct=self.classifier_params.support_proximity_pct,
            resistance_proximity_pct=self.classifier_params.resistance_proximity_pct,
        )
        self._indicators: Optional[IndicatorSnapshot] = None
        self._state = TickerState(symbol=symbol.strip().upper(), currency=currency)

        self.logger.info(
            "Ticker initialized",
            currency=currency,
            capacity=self.history_params.capacity
        )

    @classmethod
    def from_config(
        cls,
        symbol: str,
        config: dict[str, Any],
        emitter: Optional[EventEmitter] = None,
    ) -> "Ticker":
        """Build a ticker from a merged configuration dictionary that has passed validation."""
        return cls(
            symbol=symbol,
            currency=config.get('source', {}).get('currency', "USD"),
            history=HistoryParams(**config.get('history', {})),
            classifier=ClassifierParams(**config.get('classifier', {})),
            session=SessionParams(**config.get('session', {})),
            emitter=emitter,
        )

    @property
    def symbol(self) -> str:
        return self._state.symbol

    def subscribe(self, handler: EventHandler, kinds: Optional[set[EventKind]] = None) -> None:
        """Subscribe to this ticker's events."""
        self.events.subscribe(handler, kinds)

    def get_state(self) -> TickerState:
        """Return the last fully consistent snapshot."""
        with self._lock:
            return self._state

    def get_history(self, n: int) -> tuple[float, ...]:
        """Last ``n`` prices, oldest first."""
        with self._lock:
            return self._history.window(n)

    def current_indicators(self) -> IndicatorSnapshot:
        """
        Indicator readings behind the current signal.

        Raises:
            InsufficientDataError: If no sample has been accepted yet
        """
        with self._lock:
            if self._indicators is None:
                raise InsufficientDataError(
                    f"Ticker {self.symbol} has no accepted samples yet",
                    required_count=1,
                    available_count=0
                )
            return self._indicators

    def is_fresh(self, timestamp: datetime) -> bool:
        """True if ``timestamp`` is strictly newer than anything recorded."""
        timestamp = validate_timestamp(timestamp)
        with self._lock:
            return is_newer(timestamp, self._last_timestamp())

    def accept_sample(self, price: Any, timestamp: Any) -> TickerState:
        """
        Apply a new price sample.

        Args:
            price: Raw price (number or numeric string)
            timestamp: Sample time as datetime

        Returns:
            The new snapshot

        Raises:
            DataQualityError: If the sample is malformed, missing or stale.
                State is left exactly as it was.
        """
        try:
            clean_price = validate_price(price)
            clean_timestamp = validate_timestamp(timestamp)

            with self._lock:
                previous_state = self._state
                new_state, level_update, transition = self._apply_sample(
                    clean_price, clean_timestamp
                )

        except DataQualityError as e:
            self.logger.warning(
                "Rejected price sample",
                error=str(e),
                error_type=type(e).__name__,
                raw_price=str(price)[:50],
                context=getattr(e, 'context', {})
            )
            self.events.emit(TickerEvent(
                kind=EventKind.SAMPLE_REJECTED,
                symbol=self.symbol,
                timestamp=timestamp if isinstance(timestamp, datetime) else None,
                data={"error": str(e), "error_type": type(e).__name__}
            ))
            raise

        self._publish(previous_state, new_state, level_update, transition)
        return new_state

    def load_history(self, samples: Iterable[Sample]) -> int:
        """
        Seed history and levels from bulk bars.

        Price, signal and trend are left untouched. Samples that fail price
        or timestamp validation are skipped and counted, as are samples not
        strictly newer than the last recorded one.

        Returns:
            Number of samples applied
        """
        clean_samples: list[Sample] = []
        invalid = 0
        for sample in samples:
            try:
                clean_samples.append(Sample(
                    price=validate_price(sample.price),
                    timestamp=validate_timestamp(sample.timestamp),
                ))
            except DataQualityError as e:
                invalid += 1
                self.logger.debug(
                    "Skipping invalid history sample",
                    error=str(e),
                    error_type=type(e).__name__
                )

        if invalid:
            self.logger.warning("Skipped invalid history samples", skipped=invalid)

        added_levels: list[LevelUpdate] = []
        applied = 0

        with self._lock:
            history = self._history.copy()
            levels = self._levels.copy()
            last_timestamp = self._last_timestamp()

            for sample in sorted(clean_samples, key=lambda s: s.timestamp):
                if not is_newer(sample.timestamp, last_timestamp):
                    continue
                history.push(sample)
                update = levels.update(
                    history.window(self.history_params.level_window), sample.price
                )
                if update.changed:
                    added_levels.append(update)
                last_timestamp = sample.timestamp
                applied += 1

            self._history = history
            self._levels = levels
            self._state = replace(
                self._state,
                price_history=history.snapshot(),
                support_levels=levels.support,
                resistance_levels=levels.resistance,
            )

        self.logger.info(
            "Loaded price history",
            applied=applied,
            history_size=len(self._history),
            support_levels=len(self._levels.support),
            resistance_levels=len(self._levels.resistance)
        )

        for update in added_levels:
            self._emit_level_event(update, last_timestamp)
        self.events.emit(TickerEvent(
            kind=EventKind.HISTORY_LOADED,
            symbol=self.symbol,
            timestamp=last_timestamp,
            data={"applied": applied}
        ))

        return applied

    def _last_timestamp(self) -> Optional[datetime]:
        latest = self._history.latest()
        return latest.timestamp if latest is not None else None

    def _apply_sample(
        self,
        price: float,
        timestamp: datetime,
    ) -> tuple[TickerState, LevelUpdate, TrendTransition]:
        """Compute and commit the next snapshot. Caller holds the lock."""
        state = self._state
        last_timestamp = self._last_timestamp()

        if self.session_params.drop_stale_samples and not is_newer(timestamp, last_timestamp):
            raise TemporalDataError(
                f"Stale sample for {state.symbol}: {timestamp.isoformat()} "
                f"is not after {format_market_time(last_timestamp)}",
                timestamp=timestamp,
                last_timestamp=last_timestamp,
                context={"symbol": state.symbol}
            )

        # Work on copies so nothing is visible until the final commit
        history = self._history.copy()
        signals = self._signals.copy()
        levels = self._levels.copy()

        previous_price = state.price

        day_low, day_high = state.day_low, state.day_high
        if is_new_day(state.timestamp, timestamp, self.session_params.day_boundary):
            day_low, day_high = None, None
        day_low = price if day_low is None or price < day_low else day_low
        day_high = price if day_high is None or price > day_high else day_high

        history.push(Sample(price=price, timestamp=timestamp))
        level_update = levels.update(
            history.window(self.history_params.level_window), price
        )

        indicators = self.indicator_engine.compute(
            price,
            history.window(self.history_params.indicator_window),
            levels.support,
            levels.resistance,
        )
        price_change = price - previous_price if previous_price is not None else 0.0
        signal = classify(
            price_change,
            indicators.volatility,
            indicators.trend_strength,
            levels.near_support(price),
            levels.near_resistance(price),
            self.thresholds,
        )
        signals.push(SignalRecord(signal=signal, timestamp=timestamp))

        transition = step_trend(
            state.trend,
            price,
            previous_price,
            history.prior_window(self.history_params.bos_window),
        )

        new_state = replace(
            state,
            price=price,
            previous_price=previous_price,
            timestamp=timestamp,
            signal=signal,
            trend=transition.to_direction,
            day_low=day_low,
            day_high=day_high,
            price_history=history.snapshot(),
            signal_history=signals.snapshot(),
            support_levels=levels.support,
            resistance_levels=levels.resistance,
        )

        self._history = history
        self._signals = signals
        self._levels = levels
        self._indicators = indicators
        self._state = new_state

        log_signal_decision(
            signal_logger,
            symbol=state.symbol,
            signal=signal.value,
            previous_signal=state.signal.value,
            context={
                "price": price,
                "price_change": price_change,
                **indicators.to_dict(),
            }
        )

        return new_state, level_update, transition

    def _publish(
        self,
        previous_state: TickerState,
        new_state: TickerState,
        level_update: LevelUpdate,
        transition: TrendTransition,
    ) -> None:
        """Log and emit events for a committed sample."""
        timestamp = new_state.timestamp

        if transition.bos is not None:
            self.events.emit(TickerEvent(
                kind=EventKind.BOS_DETECTED,
                symbol=new_state.symbol,
                timestamp=timestamp,
                data={"direction": transition.bos.value, "price": new_state.price}
            ))

        if transition.coc:
            after_bos = transition.bos or transition.from_direction
            self.events.emit(TickerEvent(
                kind=EventKind.COC_DETECTED,
                symbol=new_state.symbol,
                timestamp=timestamp,
                data={
                    "from_direction": after_bos.value,
                    "price": new_state.price,
                    "previous_price": new_state.previous_price,
                }
            ))

        if transition.changed:
            log_trend_transition(
                state_logger,
                symbol=new_state.symbol,
                from_state=transition.from_direction.value,
                to_state=transition.to_direction.value,
                trigger="coc" if transition.coc else "bos",
                context={
                    "price": new_state.price,
                    "previous_price": new_state.previous_price,
                    "timestamp": format_market_time(timestamp),
                }
            )

        self._emit_level_event(level_update, timestamp)

        if new_state.signal != previous_state.signal:
            self.events.emit(TickerEvent(
                kind=EventKind.SIGNAL_CHANGED,
                symbol=new_state.symbol,
                timestamp=timestamp,
                data={
                    "from_signal": previous_state.signal.value,
                    "to_signal": new_state.signal.value,
                    "price": new_state.price,
                }
            ))

        self.events.emit(TickerEvent(
            kind=EventKind.SAMPLE_ACCEPTED,
            symbol=new_state.symbol,
            timestamp=timestamp,
            data={
                "price": new_state.price,
                "signal": new_state.signal.value,
                "trend": new_state.trend.value,
            }
        ))

    def _emit_level_event(self, update: LevelUpdate, timestamp: Optional[datetime]) -> None:
        if update.support is not None:
            self.events.emit(TickerEvent(
                kind=EventKind.LEVEL_ADDED,
                symbol=self.symbol,
                timestamp=timestamp,
                data={"level_type": "support", "level": update.support}
            ))
        if update.resistance is not None:
            self.events.emit(TickerEvent(
                kind=EventKind.LEVEL_ADDED,
                symbol=self.symbol,
                timestamp=timestamp,
                data={"level_type": "resistance", "level": update.resistance}
            ))

    def __repr__(self) -> str:
        state = self._state
        return (f"Ticker(symbol={state.symbol!r}, price={state.price}, "
                f"signal={state.signal.value}, trend={state.trend.value})")


__all__ = ["Ticker", "Signal", "TrendDirection"]
