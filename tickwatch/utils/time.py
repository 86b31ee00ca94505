"""
Time semantics utilities for sample timestamps and day boundaries.
"""

from datetime import datetime
from typing import Optional

CALENDAR_DATE = "calendar_date"
DAY_OF_MONTH = "day_of_month"


def is_new_day(previous_ts: Optional[datetime], current_ts: datetime,
               day_boundary: str = CALENDAR_DATE) -> bool:
    """
    Decide whether ``current_ts`` starts a new trading day.

    ``calendar_date`` compares full dates. ``day_of_month`` compares only the
    day number, which misses rollovers such as Jan 5 -> Feb 5; it is kept
    for parity with older deployments.

    Args:
        previous_ts: Timestamp of the previously accepted sample, if any
        current_ts: Timestamp of the incoming sample
        day_boundary: ``calendar_date`` or ``day_of_month``

    Returns:
        True when day low/high must be reset
    """
    if previous_ts is None:
        return True

    if day_boundary == DAY_OF_MONTH:
        return previous_ts.day != current_ts.day

    if day_boundary != CALENDAR_DATE:
        raise ValueError(f"Unknown day boundary: {day_boundary}")

    return previous_ts.date() != current_ts.date()


def is_newer(timestamp: datetime, last_timestamp: Optional[datetime]) -> bool:
    """True if ``timestamp`` is strictly after ``last_timestamp`` (or nothing came before)."""
    if last_timestamp is None:
        return True
    return timestamp > last_timestamp


def format_market_time(market_ts: Optional[datetime]) -> Optional[str]:
    """
    Format a timestamp for state documents and logging.

    Returns:
        ISO8601 formatted string, or None when no timestamp is set
    """
    return market_ts.isoformat() if market_ts is not None else None
