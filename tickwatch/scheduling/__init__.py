"""
Poll scheduling.

A ticker never knows how often it is polled; the poller is handed a
:class:`PollSchedule` strategy instead.
"""

from .poller import TickerPoller
from .schedules import (
    DailySchedule,
    IntervalSchedule,
    MinuteSchedule,
    PollSchedule,
    build_poll_schedule,
    build_refill_schedule,
)

__all__ = [
    "DailySchedule",
    "IntervalSchedule",
    "MinuteSchedule",
    "PollSchedule",
    "TickerPoller",
    "build_poll_schedule",
    "build_refill_schedule",
]
