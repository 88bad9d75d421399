"""
carbonmix/timeaxis.py

Time-axis construction for a requested range.

Responsibilities
----------------
- Define the closed set of range selectors (24h, 48h, 7d) and the span and
  sampling step each one implies.
- Build the ordered sequence of sample timestamps ending at a reference
  "now", which callers may inject for deterministic output.
- Provide small UTC helpers for ISO formatting/parsing and chart tick labels.

Conventions
-----------
- All timestamps are handled in UTC. Naive datetimes are taken to be UTC.
- The axis is closed at both ends: [now - span, now].
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum

from dateutil import parser as dtp


class RangeSelector(str, Enum):
    """Requested historical span."""

    LAST_24H = "24h"
    LAST_48H = "48h"
    LAST_7D = "7d"

    @classmethod
    def parse(cls, value: RangeSelector | str) -> RangeSelector:
        """Return the selector for ``value`` (e.g. ``"48h"``).

        Raises:
            ValueError: If ``value`` is not one of the known selectors.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown range {value!r}; expected one of: {choices}") from None


SPAN_HOURS = {
    RangeSelector.LAST_24H: 24,
    RangeSelector.LAST_48H: 48,
    RangeSelector.LAST_7D: 24 * 7,
}


def span_hours(rng: RangeSelector | str) -> int:
    return SPAN_HOURS[RangeSelector.parse(rng)]


def step_minutes(rng: RangeSelector | str) -> int:
    """Sampling step: half-hourly for a week, quarter-hourly otherwise."""
    return 30 if RangeSelector.parse(rng) is RangeSelector.LAST_7D else 15


def point_count(rng: RangeSelector | str) -> int:
    """Number of samples on the axis, counting both endpoints."""
    return (span_hours(rng) * 60) // step_minutes(rng) + 1


def as_utc(dt: datetime) -> datetime:
    """Return ``dt`` as an aware UTC datetime, treating naive values as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def window(rng: RangeSelector | str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return the ``(start, end)`` bounds of the range ending at ``now``."""
    end = as_utc(now) if now is not None else datetime.now(timezone.utc)
    return end - timedelta(hours=span_hours(rng)), end


def build_axis(rng: RangeSelector | str, now: datetime | None = None) -> list[datetime]:
    """Build the ordered sample timestamps for ``rng``.

    Args:
        rng: Range selector or its string value.
        now: Reference end of the window. Defaults to the current UTC time.

    Returns:
        list[datetime]: Strictly increasing aware UTC timestamps starting at
        ``now - span`` and ending at ``now``, spaced by the range's step.
    """
    start, _ = window(rng, now)
    step = timedelta(minutes=step_minutes(rng))
    return [start + i * step for i in range(point_count(rng))]


def iso(dt: datetime) -> str:
    """Return an ISO-8601 string in UTC for a given datetime."""
    return as_utc(dt).isoformat()


def parse_utc(s: str) -> datetime:
    """Parse an ISO-8601 string as a timezone-aware UTC datetime."""
    return as_utc(dtp.isoparse(s))


def format_tick_time(dt: datetime) -> str:
    """Return the ``HH:MM`` label used for chart ticks."""
    return as_utc(dt).strftime("%H:%M")
