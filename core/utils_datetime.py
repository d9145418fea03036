"""
DateTime utilities and clock abstraction.
All "today"/"now" lookups in the domain go through a Clock so that past-date
validation stays deterministic under test.
"""
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol

import pytz

from core.config import settings


# Timezone configuration
TIMEZONE = pytz.timezone(settings.restaurant_timezone)


def get_current_datetime() -> datetime:
    """Get current datetime in the restaurant timezone."""
    return datetime.now(TIMEZONE)


class Clock(Protocol):
    """Source of the current date and time."""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Clock backed by the wall clock in a fixed timezone."""

    def __init__(self, tz: Optional[pytz.BaseTzInfo] = None):
        self.tz = tz or TIMEZONE

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class FixedClock:
    """Clock frozen at a given instant. Used by tests and replays."""

    def __init__(self, current: datetime, tz: Optional[pytz.BaseTzInfo] = None):
        self.tz = tz or TIMEZONE
        if current.tzinfo is None:
            current = self.tz.localize(current)
        self._current = current

    @classmethod
    def on(cls, day: date, at: time = time(12, 0)) -> "FixedClock":
        """Build a clock frozen on ``day`` at ``at`` (noon by default)."""
        return cls(datetime.combine(day, at))

    def now(self) -> datetime:
        return self._current

    def today(self) -> date:
        return self._current.date()

    def advance(self, **kwargs) -> None:
        """Move the clock forward by a timedelta built from ``kwargs``."""
        self._current = self._current + timedelta(**kwargs)


_default_clock: Clock = SystemClock()


def get_clock(clock: Optional[Clock] = None) -> Clock:
    """Return ``clock`` if given, else the process-wide system clock."""
    return clock if clock is not None else _default_clock


def minutes_between(start: time, end: time) -> int:
    """Whole minutes from ``start`` to ``end`` on the same day (negative if end < start)."""
    start_dt = datetime.combine(date.min, start)
    end_dt = datetime.combine(date.min, end)
    return int((end_dt - start_dt).total_seconds() // 60)


def add_minutes(t: time, minutes: int) -> Optional[time]:
    """
    Add minutes to a time of day.

    Returns:
        The shifted time, or None if the result crosses midnight.
    """
    shifted = datetime.combine(date.min, t) + timedelta(minutes=minutes)
    if shifted.date() != date.min:
        return None
    return shifted.time()


def format_time(t: time) -> str:
    """Format a time as HH:MM."""
    return t.strftime('%H:%M')
