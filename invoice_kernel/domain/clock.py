"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock so that engine code never calls
    ``datetime.now()`` directly.  The status resolver and the portfolio
    reports take an explicit ``now``; when a caller omits it they read
    a ``Clock`` instead.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned boundary for wall-clock time).
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Source of the reference time for status and aging derivations."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as a timezone-aware ``datetime``."""
        ...


class SystemClock(Clock):
    """Production clock that returns actual system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock pinned to a fixed instant.

    ``now()`` returns the same value until ``advance()`` moves it; invoices
    age in whole days, so that is the usual step.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._now = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def advance(self, days: int = 0, seconds: int = 0) -> datetime:
        """Move the clock forward and return the new time."""
        self._now += timedelta(days=days, seconds=seconds)
        return self._now
