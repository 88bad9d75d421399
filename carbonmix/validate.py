"""
carbonmix/validate.py

Validation and coercion layer for raw live-source payloads.

Responsibilities
----------------
- Provide ``validate_entry`` to turn one raw payload entry into a
  ``RawSample``:
  * Read the observation timestamp from ``"timestamp"`` or ``"time"``.
  * Coerce each source field and ``"total"`` to ``float``.
  * Discard unexpected keys.
- Provide ``validate_payload`` to check the payload as a whole and return the
  samples in time order.

Conventions
-----------
- Missing, blank, non-numeric, non-finite and negative numeric values become
  0.0, so every sample has the same seven-source non-negative shape the
  synthetic sampler produces.
- A missing timestamp takes the fetch time; an unparseable one makes the
  whole payload malformed.

Notes
-----
- This module only coerces. Normalization and intensity are applied later
  by the shared derivation step in ``carbonmix/series.py``.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any

from dateutil import parser as dtp
from pydantic import ValidationError, field_validator

from .errors import MalformedPayloadError
from .mix import SOURCE_NAMES, RawSample
from .timeaxis import as_utc

TIMESTAMP_KEYS = ("timestamp", "time")


class LiveSample(RawSample):
    """A ``RawSample`` whose timestamp may arrive as an ISO-8601 string."""

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_ts(cls, v):
        """Normalize ISO-8601 strings and datetimes into aware UTC datetimes."""
        if isinstance(v, str):
            return as_utc(dtp.isoparse(v))
        if isinstance(v, datetime):
            return as_utc(v)
        return v


def coerce_number(value: Any) -> float:
    """Return ``value`` as a finite non-negative float, or 0.0."""
    if value in (None, ""):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def validate_entry(entry: dict[str, Any], fetched_at: datetime) -> LiveSample:
    """Validate and coerce one raw payload entry.

    Args:
        entry: Raw entry as decoded from the live source's JSON.
        fetched_at: Timestamp used when the entry carries none.

    Returns:
        LiveSample: Sample with a UTC timestamp and all seven source weights.

    Raises:
        MalformedPayloadError: If ``entry`` is not an object or its timestamp
            cannot be parsed.
    """
    if not isinstance(entry, dict):
        raise MalformedPayloadError(f"Expected an object per entry, got {type(entry).__name__}")

    ts = next((entry[k] for k in TIMESTAMP_KEYS if entry.get(k) not in (None, "")), fetched_at)
    weights = {name: coerce_number(entry.get(name)) for name in SOURCE_NAMES}

    try:
        return LiveSample(timestamp=ts, weights=weights, total=coerce_number(entry.get("total")))
    except (ValidationError, ValueError, OverflowError) as exc:
        raise MalformedPayloadError(f"Invalid timestamp {ts!r}") from exc


def validate_payload(data: Any, fetched_at: datetime) -> list[LiveSample]:
    """Validate a decoded payload and return its samples ordered by time.

    Raises:
        MalformedPayloadError: If ``data`` is not a non-empty list, or any
            entry fails :func:`validate_entry`.
    """
    if not isinstance(data, list):
        raise MalformedPayloadError(f"Expected a JSON array, got {type(data).__name__}")
    if not data:
        raise MalformedPayloadError("Payload contained no entries")

    samples = [validate_entry(entry, fetched_at) for entry in data]
    return sorted(samples, key=lambda s: s.timestamp)
