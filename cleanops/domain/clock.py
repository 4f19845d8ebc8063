"""
Injectable time source.

Use cases and services receive a Clock instead of calling datetime.now(), so
lifecycle timestamps and hourly durations can be pinned in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Abstract clock interface."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current timezone-aware UTC time."""
        pass


class SystemClock(Clock):
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock that only moves when told to."""

    def __init__(self, fixed_time: Optional[datetime] = None):
        self._time = ensure_utc(
            fixed_time or datetime(2025, 1, 6, 9, 0, 0, tzinfo=timezone.utc)
        )

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        self._time = ensure_utc(time)

    def advance(self, **delta) -> datetime:
        """Advance by a timedelta given as keyword arguments."""
        self._time = self._time + timedelta(**delta)
        return self._time


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (SQLite round trips) as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
