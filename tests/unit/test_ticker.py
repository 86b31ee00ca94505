"""Tests for the per-instrument ticker orchestrator."""

import pytest
from datetime import datetime, timedelta, timezone

from tickwatch.config.defaults import ClassifierParams, HistoryParams, SessionParams
from tickwatch.data.models import Sample, Signal
from tickwatch.errors import (
    DataQualityError,
    InsufficientDataError,
    MalformedDataError,
    MissingDataError,
    TemporalDataError,
)
from tickwatch.signals.events import EventKind
from tickwatch.state.models import TrendDirection
from tickwatch.ticker import Ticker


TUNED = ClassifierParams(max_volatility=1.0)


class TestTickerCreation:
    """Test ticker construction."""

    def test_symbol_normalized(self):
        """Test that symbols are stripped and upper-cased."""
        ticker = Ticker(" xau ")

        assert ticker.symbol == "XAU"
        assert ticker.get_state().symbol == "XAU"
        assert ticker.get_state().currency == "USD"

    @pytest.mark.parametrize("symbol", ["", "   ", None])
    def test_empty_symbol_rejected(self, symbol):
        """Test that blank or missing symbols are rejected."""
        with pytest.raises(ValueError):
            Ticker(symbol)

    def test_initial_state(self, make_ticker):
        """Test that a new ticker starts neutral with no levels."""
        state = make_ticker().get_state()

        assert not state.initialized
        assert state.signal == Signal.NEUTRAL
        assert state.trend == TrendDirection.NEUTRAL
        assert state.support_levels == ()
        assert state.resistance_levels == ()

    def test_from_config(self):
        """Test building a ticker from a merged configuration dict."""
        config = {
            "history": {"capacity": 50},
            "classifier": {"max_volatility": 0.5},
            "session": {"day_boundary": "day_of_month"},
            "source": {"currency": "EUR"},
        }

        ticker = Ticker.from_config("XAG", config)

        assert ticker.get_state().currency == "EUR"
        assert ticker.history_params.capacity == 50
        assert ticker.thresholds.max_volatility == 0.5
        assert ticker.session_params.day_boundary == "day_of_month"

    def test_current_indicators_before_first_sample(self, make_ticker):
        """Test that indicators are unavailable before any sample."""
        with pytest.raises(InsufficientDataError):
            make_ticker().current_indicators()


class TestAcceptSample:
    """Test applying accepted samples."""

    def test_first_sample(self, make_ticker, base_time):
        """Test the snapshot produced by the very first sample."""
        ticker = make_ticker()

        state = ticker.accept_sample(2083.45, base_time)

        assert state is ticker.get_state()
        assert state.price == 2083.45
        assert state.previous_price is None
        assert state.timestamp == base_time
        assert state.signal == Signal.NEUTRAL
        assert state.trend == TrendDirection.NEUTRAL
        assert state.day_low == state.day_high == 2083.45
        assert state.support_levels == (2083.45,)
        assert state.resistance_levels == (2083.45,)
        assert len(state.price_history) == 1
        assert len(state.signal_history) == 1

    def test_numeric_string_price(self, make_ticker, base_time):
        """Test that numeric strings are accepted as prices."""
        state = make_ticker().accept_sample("2083.45", base_time)

        assert state.price == 2083.45

    def test_naive_timestamp_treated_as_utc(self, make_ticker):
        """Test that naive timestamps are stored as UTC."""
        state = make_ticker().accept_sample(10.0, datetime(2024, 3, 4, 9, 0))

        assert state.timestamp == datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)

    def test_previous_price_tracked(self, make_ticker, feed):
        """Test that the prior accepted price is kept."""
        ticker = make_ticker()
        feed(ticker, [10.0, 10.5, 10.2])

        state = ticker.get_state()
        assert state.price == 10.2
        assert state.previous_price == 10.5

    def test_get_state_is_idempotent(self, make_ticker, feed):
        """Test that repeated reads return the same snapshot."""
        ticker = make_ticker()
        feed(ticker, [10.0, 11.0])

        first = ticker.get_state()
        second = ticker.get_state()

        assert first is second
        assert first == second

    def test_history_bounded_by_capacity(self, make_ticker, feed):
        """Test that price and signal history never exceed capacity."""
        ticker = make_ticker(history=HistoryParams(capacity=5))

        feed(ticker, [float(p) for p in range(1, 13)])

        state = ticker.get_state()
        assert len(state.price_history) == 5
        assert len(state.signal_history) == 5
        assert [s.price for s in state.price_history] == [8.0, 9.0, 10.0, 11.0, 12.0]
        assert ticker.get_history(3) == (10.0, 11.0, 12.0)

    def test_levels_grow_monotonically(self, make_ticker, feed, base_time):
        """Test that support and resistance sets only ever grow."""
        ticker = make_ticker()
        previous = ticker.get_state()

        for offset, price in enumerate([10.0, 12.0, 9.0, 11.0, 13.0, 8.0, 10.0]):
            state = ticker.accept_sample(price, base_time + timedelta(minutes=offset))
            assert set(previous.support_levels) <= set(state.support_levels)
            assert set(previous.resistance_levels) <= set(state.resistance_levels)
            previous = state

        assert previous.support_levels == (10.0, 9.0, 8.0)
        assert previous.resistance_levels == (10.0, 12.0, 13.0)

    def test_current_indicators_after_sample(self, make_ticker, feed):
        """Test that indicator readings match the committed window."""
        ticker = make_ticker()
        feed(ticker, [10.0] * 9 + [11.0])

        indicators = ticker.current_indicators()

        assert indicators.window_size == 10
        assert indicators.volatility == pytest.approx(0.3)


class TestClassification:
    """Test BUY/SELL/NEUTRAL through the full pipeline."""

    def test_default_thresholds_stay_neutral_on_breakout(self, make_ticker, feed):
        """Test that default thresholds keep a noisy breakout neutral."""
        ticker = make_ticker()

        feed(ticker, [10.0] * 9 + [11.0])

        # 11.0 is a fresh resistance level and volatility is 0.3
        assert ticker.get_state().signal == Signal.NEUTRAL

    def test_buy_with_tuned_volatility(self, make_ticker, feed):
        """Test a BUY once the volatility ceiling is raised."""
        ticker = make_ticker(classifier=TUNED)

        feed(ticker, [20.0] + [10.0] * 9 + [11.0])

        assert ticker.get_state().signal == Signal.BUY
        assert ticker.current_indicators().trend_strength == pytest.approx(0.9)

    def test_sell_with_tuned_volatility(self, make_ticker, feed):
        """Test a SELL once the volatility ceiling is raised."""
        ticker = make_ticker(classifier=TUNED)

        feed(ticker, [5.0] + [10.0] * 9 + [9.0])

        assert ticker.get_state().signal == Signal.SELL
        assert ticker.current_indicators().trend_strength == pytest.approx(-0.9)

    def test_signal_history_records_each_sample(self, make_ticker, feed):
        """Test that one signal record is kept per accepted sample."""
        ticker = make_ticker(classifier=TUNED)

        feed(ticker, [20.0] + [10.0] * 9 + [11.0])

        signals = [r.signal for r in ticker.get_state().signal_history]
        assert len(signals) == 11
        assert signals[-1] == Signal.BUY
        assert all(s == Signal.NEUTRAL for s in signals[:-1])


class TestTrend:
    """Test trend transitions through the ticker."""

    def test_break_of_structure_sets_up(self, make_ticker, feed):
        """Test that a break above the prior window turns the trend UP."""
        ticker = make_ticker()

        feed(ticker, [10.0, 10.0, 10.0, 11.0])

        assert ticker.get_state().trend == TrendDirection.UP

    def test_falling_price_after_up_resets(self, make_ticker, feed):
        """Test that a lower price in an UP trend resets to NEUTRAL."""
        ticker = make_ticker()

        feed(ticker, [10.0, 10.0, 10.0, 11.0, 10.5])

        assert ticker.get_state().trend == TrendDirection.NEUTRAL

    def test_break_of_structure_sets_down(self, make_ticker, feed):
        """Test that a break below the prior window turns the trend DOWN."""
        ticker = make_ticker()

        feed(ticker, [10.0, 10.0, 10.0, 9.0])

        assert ticker.get_state().trend == TrendDirection.DOWN

    def test_bos_window_excludes_older_prices(self, make_ticker, feed):
        """Test that only the configured window is used for BOS."""
        ticker = make_ticker(history=HistoryParams(bos_window=2))

        feed(ticker, [20.0, 10.0, 10.0, 12.0])

        assert ticker.get_state().trend == TrendDirection.UP


class TestRejection:
    """Test that rejected samples leave state untouched."""

    @pytest.mark.parametrize("price, error", [
        ("", MissingDataError),
        (None, MissingDataError),
        ("abc", MalformedDataError),
        (-1.0, MalformedDataError),
        (float("nan"), MalformedDataError),
    ])
    def test_bad_price(self, make_ticker, feed, base_time, price, error):
        """Test that invalid prices raise and leave state untouched."""
        ticker = make_ticker()
        feed(ticker, [10.0, 11.0])
        before = ticker.get_state()

        with pytest.raises(error):
            ticker.accept_sample(price, base_time + timedelta(hours=1))

        assert ticker.get_state() is before

    def test_bad_timestamp(self, make_ticker, feed):
        """Test that non-datetime timestamps raise and leave state untouched."""
        ticker = make_ticker()
        feed(ticker, [10.0])
        before = ticker.get_state()

        with pytest.raises(DataQualityError):
            ticker.accept_sample(10.5, "2024-03-04")

        assert ticker.get_state() is before

    def test_stale_sample(self, make_ticker, base_time):
        """Test that samples not newer than the last one are rejected."""
        ticker = make_ticker()
        ticker.accept_sample(10.0, base_time)
        before = ticker.get_state()

        with pytest.raises(TemporalDataError):
            ticker.accept_sample(11.0, base_time)
        with pytest.raises(TemporalDataError):
            ticker.accept_sample(11.0, base_time - timedelta(minutes=1))

        assert ticker.get_state() is before

    def test_stale_sample_allowed_when_disabled(self, make_ticker, base_time):
        """Test that stale samples pass when dropping is disabled."""
        ticker = make_ticker(session=SessionParams(drop_stale_samples=False))
        ticker.accept_sample(10.0, base_time)

        state = ticker.accept_sample(11.0, base_time)

        assert state.price == 11.0

    def test_rejection_emits_event(self, make_ticker, base_time, recorded_events):
        """Test that a rejected sample publishes SAMPLE_REJECTED."""
        ticker = make_ticker()
        ticker.subscribe(recorded_events)

        with pytest.raises(MissingDataError):
            ticker.accept_sample("", base_time)

        assert [e.kind for e in recorded_events.events] == [EventKind.SAMPLE_REJECTED]
        assert recorded_events.events[0].data["error_type"] == "MissingDataError"

    def test_is_fresh(self, make_ticker, base_time):
        """Test freshness against the last recorded timestamp."""
        ticker = make_ticker()
        assert ticker.is_fresh(base_time)

        ticker.accept_sample(10.0, base_time)

        assert not ticker.is_fresh(base_time)
        assert ticker.is_fresh(base_time + timedelta(seconds=1))


class TestDayRange:
    """Test day low/high tracking."""

    def test_tracks_low_and_high(self, make_ticker, feed):
        """Test day low and high within one day."""
        ticker = make_ticker()

        feed(ticker, [10.0, 12.0, 8.0, 11.0])

        state = ticker.get_state()
        assert state.day_low == 8.0
        assert state.day_high == 12.0

    def test_resets_on_new_day(self, make_ticker, feed, base_time):
        """Test that day low and high reset on the next date."""
        ticker = make_ticker()
        feed(ticker, [10.0, 12.0, 8.0])

        ticker.accept_sample(11.0, base_time + timedelta(days=1))

        state = ticker.get_state()
        assert state.day_low == 11.0
        assert state.day_high == 11.0

    def test_resets_across_month_with_same_day_number(self, make_ticker):
        """Test that Jan 5 to Feb 5 counts as a new day."""
        ticker = make_ticker()
        ticker.accept_sample(10.0, datetime(2024, 1, 5, 12, tzinfo=timezone.utc))

        ticker.accept_sample(15.0, datetime(2024, 2, 5, 12, tzinfo=timezone.utc))

        assert ticker.get_state().day_low == 15.0

    def test_legacy_day_of_month_boundary(self, make_ticker):
        """Test that day_of_month mode ignores month changes."""
        ticker = make_ticker(session=SessionParams(day_boundary="day_of_month"))
        ticker.accept_sample(10.0, datetime(2024, 1, 5, 12, tzinfo=timezone.utc))

        ticker.accept_sample(15.0, datetime(2024, 2, 5, 12, tzinfo=timezone.utc))

        state = ticker.get_state()
        assert state.day_low == 10.0
        assert state.day_high == 15.0


class TestEvents:
    """Test events published after each commit."""

    def test_first_sample_events(self, make_ticker, base_time, recorded_events):
        """Test event order for the first accepted sample."""
        ticker = make_ticker()
        ticker.subscribe(recorded_events)

        ticker.accept_sample(10.0, base_time)

        kinds = [e.kind for e in recorded_events.events]
        assert kinds == [EventKind.LEVEL_ADDED, EventKind.LEVEL_ADDED, EventKind.SAMPLE_ACCEPTED]

    def test_bos_and_coc_events(self, make_ticker, feed, recorded_events):
        """Test BOS and COC events through an up-then-down sequence."""
        ticker = make_ticker()
        feed(ticker, [10.0, 10.0, 10.0])
        ticker.subscribe(recorded_events, kinds={EventKind.BOS_DETECTED, EventKind.COC_DETECTED})

        feed(ticker, [11.0, 10.5])

        events = recorded_events.events
        assert [e.kind for e in events] == [EventKind.BOS_DETECTED, EventKind.COC_DETECTED]
        assert events[0].data["direction"] == "UP"
        assert events[1].data["from_direction"] == "UP"

    def test_signal_changed_event(self, make_ticker, feed, recorded_events):
        """Test the payload of SIGNAL_CHANGED."""
        ticker = make_ticker(classifier=TUNED)
        ticker.subscribe(recorded_events, kinds={EventKind.SIGNAL_CHANGED})

        feed(ticker, [20.0] + [10.0] * 9 + [11.0])

        assert len(recorded_events.events) == 1
        assert recorded_events.events[0].data == {
            "from_signal": "NEUTRAL",
            "to_signal": "BUY",
            "price": 11.0,
        }

    def test_handlers_see_committed_state(self, make_ticker, base_time):
        """Test that handlers run after the new state is visible."""
        ticker = make_ticker()
        seen = []
        ticker.subscribe(lambda event: seen.append(ticker.get_state().price),
                         kinds={EventKind.SAMPLE_ACCEPTED})

        ticker.accept_sample(10.0, base_time)

        assert seen == [10.0]

    def test_failing_handler_does_not_break_ticker(self, make_ticker, base_time):
        """Test that a raising handler does not fail the sample."""
        ticker = make_ticker()

        def broken(event):
            raise RuntimeError("boom")

        ticker.subscribe(broken)

        state = ticker.accept_sample(10.0, base_time)

        assert state.price == 10.0


class TestLoadHistory:
    """Test bulk history refill."""

    def make_samples(self, prices, start):
        return [Sample(price=p, timestamp=start + timedelta(days=i)) for i, p in enumerate(prices)]

    def test_seeds_history_and_levels(self, make_ticker, base_time):
        """Test that bulk bars seed history and levels."""
        ticker = make_ticker()
        samples = self.make_samples([2040.0, 2050.5, 2045.0, 2060.25], base_time - timedelta(days=10))

        applied = ticker.load_history(samples)

        state = ticker.get_state()
        assert applied == 4
        assert ticker.get_history(10) == (2040.0, 2050.5, 2045.0, 2060.25)
        assert state.support_levels == (2040.0,)
        assert state.resistance_levels == (2040.0, 2050.5, 2060.25)

    def test_leaves_price_signal_and_trend(self, make_ticker, base_time):
        """Test that bulk bars leave price, signal and trend alone."""
        ticker = make_ticker()
        ticker.load_history(self.make_samples([1.0, 2.0, 3.0], base_time - timedelta(days=5)))

        state = ticker.get_state()
        assert state.price is None
        assert state.signal == Signal.NEUTRAL
        assert state.trend == TrendDirection.NEUTRAL
        assert state.signal_history == ()

    def test_skips_samples_not_newer(self, make_ticker, base_time):
        """Test that bars at or before the last sample are skipped."""
        ticker = make_ticker()
        ticker.accept_sample(10.0, base_time)

        applied = ticker.load_history(self.make_samples([1.0, 2.0, 3.0], base_time - timedelta(hours=1)))

        assert applied == 2
        assert ticker.get_history(10) == (10.0, 2.0, 3.0)

    def test_unsorted_input(self, make_ticker, base_time):
        """Test that bars are applied in timestamp order."""
        ticker = make_ticker()
        samples = self.make_samples([1.0, 2.0, 3.0], base_time)

        ticker.load_history(list(reversed(samples)))

        assert ticker.get_history(10) == (1.0, 2.0, 3.0)

    def test_live_samples_continue_after_history(self, make_ticker, base_time):
        """Test that live samples build on loaded history."""
        ticker = make_ticker()
        ticker.load_history(self.make_samples([10.0, 10.0, 10.0], base_time - timedelta(days=3)))

        ticker.accept_sample(11.0, base_time)

        state = ticker.get_state()
        assert state.trend == TrendDirection.UP
        assert state.previous_price is None

    def test_emits_history_loaded(self, make_ticker, base_time, recorded_events):
        """Test the HISTORY_LOADED event payload."""
        ticker = make_ticker()
        ticker.subscribe(recorded_events, kinds={EventKind.HISTORY_LOADED})

        ticker.load_history(self.make_samples([1.0], base_time))

        assert recorded_events.events[0].data == {"applied": 1}

    def test_naive_history_timestamps_stored_as_utc(self, make_ticker):
        """Test that naive bar timestamps are normalized before storage."""
        ticker = make_ticker()
        ticker.load_history([Sample(price=10.0, timestamp=datetime(2024, 1, 1, 12))])

        state = ticker.accept_sample(11.0, datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc))

        assert state.price == 11.0
        assert state.price_history[0].timestamp == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_invalid_bars_skipped(self, make_ticker, base_time):
        """Test that bars failing price or timestamp checks are skipped."""
        ticker = make_ticker()
        samples = [
            Sample(price=10.0, timestamp=base_time),
            Sample(price=float("nan"), timestamp=base_time + timedelta(days=1)),
            Sample(price=-1.0, timestamp=base_time + timedelta(days=2)),
            Sample(price=None, timestamp=base_time + timedelta(days=3)),
            Sample(price=11.0, timestamp=None),
            Sample(price="12.5", timestamp=base_time + timedelta(days=4)),
        ]

        applied = ticker.load_history(samples)

        assert applied == 2
        assert ticker.get_history(10) == (10.0, 12.5)
        assert ticker.get_state().resistance_levels == (10.0, 12.5)
