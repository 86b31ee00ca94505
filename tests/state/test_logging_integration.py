"""Tests for structured logging of signal decisions and trend transitions."""

from unittest.mock import Mock, patch

from tickwatch.logging.config import (
    configure_logging,
    get_signal_logger,
    get_state_logger,
    log_signal_decision,
    log_trend_transition,
)


class TestLoggingHelpers:
    """Test the standardized logging helpers."""

    def setup_method(self):
        """Set up a mock logger that records bind calls."""
        self.logger = Mock()
        self.bound = self.logger.bind.return_value
        self.with_context = self.bound.bind.return_value

    def test_signal_change_logged_at_info(self):
        """Test that a changed signal is logged at INFO."""
        log_signal_decision(self.logger, "XAU", "BUY", "NEUTRAL", context={"price": 11.0})

        kwargs = self.logger.bind.call_args[1]
        assert kwargs["symbol"] == "XAU"
        assert kwargs["signal"] == "BUY"
        assert kwargs["previous_signal"] == "NEUTRAL"
        self.bound.bind.assert_called_once_with(context={"price": 11.0})
        self.with_context.info.assert_called_once()
        self.with_context.debug.assert_not_called()

    def test_unchanged_signal_logged_at_debug(self):
        """Test that a repeated signal is logged at DEBUG."""
        log_signal_decision(self.logger, "XAU", "NEUTRAL", "NEUTRAL")

        self.bound.debug.assert_called_once()
        self.bound.info.assert_not_called()

    def test_trend_transition(self):
        """Test trend transition fields."""
        log_trend_transition(self.logger, "XAU", "NEUTRAL", "UP", "bos")

        kwargs = self.logger.bind.call_args[1]
        assert kwargs["from_state"] == "NEUTRAL"
        assert kwargs["to_state"] == "UP"
        assert kwargs["trigger"] == "bos"
        self.bound.info.assert_called_once()


class TestTickerLogging:
    """Test that the ticker routes decisions through the helpers."""

    def test_configure_logging_json(self):
        """Test that JSON configuration does not break loggers."""
        configure_logging(level="DEBUG", format_json=True)

        assert get_signal_logger("test") is not None
        assert get_state_logger("test") is not None

    def test_trend_transitions_logged(self, make_ticker, feed):
        """Test that BOS and COC are logged with their trigger."""
        ticker = make_ticker()

        with patch('tickwatch.ticker.log_trend_transition') as mock_log:
            feed(ticker, [10.0, 10.0, 10.0, 11.0, 10.5])

        triggers = [c[1]["trigger"] for c in mock_log.call_args_list]
        transitions = [(c[1]["from_state"], c[1]["to_state"]) for c in mock_log.call_args_list]
        assert triggers == ["bos", "coc"]
        assert transitions == [("NEUTRAL", "UP"), ("UP", "NEUTRAL")]

    def test_every_sample_logs_a_decision(self, make_ticker, feed):
        """Test one signal decision per accepted sample."""
        ticker = make_ticker()

        with patch('tickwatch.ticker.log_signal_decision') as mock_log:
            feed(ticker, [10.0, 10.5, 11.0])

        assert mock_log.call_count == 3
        assert mock_log.call_args[1]["symbol"] == "XAU"
        assert "volatility" in mock_log.call_args[1]["context"]
