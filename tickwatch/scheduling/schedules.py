"""Schedule strategies deciding when the next poll fires."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from ..config.defaults import PollingParams


class PollSchedule(ABC):
    """Strategy returning the delay until the next run."""

    @abstractmethod
    def seconds_until_next(self, now: datetime) -> float:
        """Seconds from ``now`` until the next run (always > 0)."""


class IntervalSchedule(PollSchedule):
    """Fixed delay between runs."""

    def __init__(self, seconds: float):
        if seconds <= 0:
            raise ValueError(f"Interval must be positive, got {seconds}")
        self.seconds = float(seconds)

    def seconds_until_next(self, now: datetime) -> float:
        return self.seconds

    def __repr__(self) -> str:
        return f"IntervalSchedule(seconds={self.seconds})"


class MinuteSchedule(PollSchedule):
    """
    Runs at second 0 of every minute whose minute-of-hour is divisible by
    ``every_minutes``, like the cron expression ``*/n * * * *``.
    """

    def __init__(self, every_minutes: int = 1):
        if not 1 <= every_minutes <= 60:
            raise ValueError(f"every_minutes must be between 1 and 60, got {every_minutes}")
        self.every_minutes = every_minutes

    def seconds_until_next(self, now: datetime) -> float:
        candidate = now.replace(second=0, microsecond=0) + timedelta(minutes=1)
        while candidate.minute % self.every_minutes != 0:
            candidate += timedelta(minutes=1)
        return (candidate - now).total_seconds()

    def __repr__(self) -> str:
        return f"MinuteSchedule(every_minutes={self.every_minutes})"


class DailySchedule(PollSchedule):
    """Runs once a day at ``hour:minute`` in the timezone of ``now``."""

    def __init__(self, hour: int = 2, minute: int = 0):
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise ValueError(f"Invalid time of day {hour:02d}:{minute:02d}")
        self.hour = hour
        self.minute = minute

    def seconds_until_next(self, now: datetime) -> float:
        candidate = now.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)
        if candidate <= now:
            candidate += timedelta(days=1)
        return (candidate - now).total_seconds()

    def __repr__(self) -> str:
        return f"DailySchedule(hour={self.hour}, minute={self.minute})"


def build_poll_schedule(polling: PollingParams) -> PollSchedule:
    """Minute-aligned schedule for whole-minute intervals, fixed interval otherwise."""
    if polling.align_to_minute and polling.interval_seconds % 60 == 0 \
            and polling.interval_seconds // 60 <= 60:
        return MinuteSchedule(polling.interval_seconds // 60)
    return IntervalSchedule(polling.interval_seconds)


def build_refill_schedule(polling: PollingParams) -> DailySchedule:
    return DailySchedule(polling.history_refill_hour, polling.history_refill_minute)
