"""
BOS Core Time — Public API
============================
Injectable clock for the policy framework.
Doctrine: NO datetime.now() in policy or engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    now_utc,
    set_default_clock,
    today_utc,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "now_utc",
    "today_utc",
]
