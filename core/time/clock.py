"""
BOS Core Time — Injectable Clock
==================================
Policies and the pipeline engine never call datetime.now() inline.
Pipeline completion stamps and date-sensitive policies (posting
horizons, return windows) read time through a Clock so tests can pin it.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Injectable time source."""

    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    """Real wall-clock time, UTC."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Pinned clock for tests.

    Usage:
        clock = FixedClock(datetime(2026, 3, 31, tzinfo=timezone.utc))
        policy = FutureDatePostingPolicy(max_future_days=60, clock=clock)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._fixed_dt = fixed_dt

    def now_utc(self) -> datetime:
        return self._fixed_dt

    def advance(self, **delta) -> None:
        """Move the pinned time forward, e.g. advance(days=1)."""
        self._fixed_dt = self._fixed_dt + timedelta(**delta)


# ══════════════════════════════════════════════════════════════
# DEFAULT CLOCK
# ══════════════════════════════════════════════════════════════

_default_clock: Clock = SystemClock()


def set_default_clock(clock: Clock) -> None:
    """Override the process-wide clock (testing only)."""
    global _default_clock
    _default_clock = clock


def get_default_clock() -> Clock:
    return _default_clock


def now_utc() -> datetime:
    return _default_clock.now_utc()


def today_utc(clock: Clock = None) -> date:
    """Current UTC calendar date from the given (or default) clock."""
    return (clock or _default_clock).now_utc().astimezone(timezone.utc).date()
