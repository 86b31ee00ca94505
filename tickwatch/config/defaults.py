"""Default configuration parameters for the ticker signal engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryParams:
    """Rolling history and window sizes."""
    capacity: int = 100                # Samples kept per ticker (price and signal history)
    indicator_window: int = 10         # Prices used for volatility / SMA
    level_window: int = 20             # Prices scanned for support/resistance extremes
    bos_window: int = 10               # Prior prices checked for break of structure


@dataclass(frozen=True)
class ClassifierParams:
    """BUY/SELL/NEUTRAL thresholds and level proximity."""
    max_volatility: float = 0.02              # Std-dev ceiling for any directional signal
    min_trend_strength: float = 0.5           # |trend strength| floor for BUY/SELL
    support_proximity_pct: float = 0.01       # "Near support" band above a level
    resistance_proximity_pct: float = 0.01    # "Near resistance" band below a level
    support_multiplier: float = 1.2           # Trend amplification at/below lowest support
    resistance_multiplier: float = -1.2       # Trend inversion at/above highest resistance


@dataclass(frozen=True)
class SessionParams:
    """Day boundary and sample ordering rules."""
    day_boundary: str = "calendar_date"       # "calendar_date" or legacy "day_of_month"
    drop_stale_samples: bool = True           # Reject samples not newer than the last one


@dataclass(frozen=True)
class PollingParams:
    """Price source polling cadence."""
    interval_seconds: int = 60
    align_to_minute: bool = True              # Fire on wall-clock minute boundaries
    history_refill_hour: int = 2              # Daily bulk history refill (hour in the poller clock, UTC)
    history_refill_minute: int = 0
    history_points: int = 160                 # Daily bars requested per refill
    request_timeout_seconds: float = 10.0


@dataclass(frozen=True)
class SourceParams:
    """Price source endpoints."""
    currency: str = "USD"
    spot_url: str = "https://data-asg.goldprice.org/GetData/{currency}-{symbol}/1"
    history_url: str = (
        "https://api.investing.com/api/financialdata/{instrument_id}"
        "/historical/chart/?interval=P1D&pointscount={points}"
    )
    instrument_id: int = 0                    # Investing.com id; 0 disables history refill


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    history: HistoryParams
    classifier: ClassifierParams
    session: SessionParams
    polling: PollingParams
    source: SourceParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        history=HistoryParams(),
        classifier=ClassifierParams(),
        session=SessionParams(),
        polling=PollingParams(),
        source=SourceParams(),
    )
