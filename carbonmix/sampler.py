"""
carbonmix/sampler.py

Deterministic synthetic generation-mix sampler.

Responsibilities
----------------
- Compute raw per-source output fractions for a timestamp from closed-form
  periodic functions of time of day (wind, solar, gas) and of sample index
  (hydro, coal), modelling within-day and multi-day variation respectively.
- Run the sampler over a whole time axis, producing ``RawSample`` values for
  the shared derivation step.

Notes
-----
- Output is not normalized; the mix normalizer enforces the sum-to-1 rule.
- There is no random state: identical inputs always give identical output.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import datetime

from .mix import RawSample
from .timeaxis import as_utc

BIOMASS_SHARE = 0.05
# Wind + solar share below which gas ramps up to fill the gap.
RENEWABLE_BASELINE = 0.30


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def hour_of_day(timestamp: datetime) -> float:
    """Continuous UTC hour in [0, 24), e.g. 13:30 -> 13.5."""
    ts = as_utc(timestamp)
    return ts.hour + ts.minute / 60


def sample(timestamp: datetime, index: int, total_points: int) -> dict[str, float]:
    """Return raw generation fractions for one point of a series.

    Args:
        timestamp: Time of the sample.
        index: Ordinal position of the sample within its series.
        total_points: Length of the series; sets the period of the
            index-driven hydro and coal cycles.

    Returns:
        dict[str, float]: Non-negative fraction for each source name.

    Raises:
        ValueError: If ``total_points`` is less than 1.
    """
    if total_points < 1:
        raise ValueError(f"total_points must be >= 1, got {total_points}")

    hour = hour_of_day(timestamp)

    # Wind peaks overnight, troughs mid-afternoon.
    wind = clamp(0.35 + 0.20 * math.sin(2 * math.pi * (hour - 3) / 24), 0.10, 0.75)

    # Zero outside 06:00-18:00.
    solar_raw = max(0.0, math.sin(math.pi * (hour - 6) / 12))
    solar = clamp(0.18 * solar_raw, 0.0, 0.25)

    hydro = 0.05 + 0.02 * math.sin(2 * math.pi * index / (total_points / 7))
    coal = 0.04 + 0.01 * math.sin(2 * math.pi * index / (total_points / 3))
    biomass = BIOMASS_SHARE

    gas_raw = (
        0.40 + 0.10 * math.cos(2 * math.pi * hour / 24) - (wind + solar - RENEWABLE_BASELINE)
    )
    gas = clamp(gas_raw, 0.05, 0.70)

    imports = clamp(1 - (wind + solar + hydro + gas + coal + biomass), 0.02, 0.20)

    return {
        "wind": wind,
        "solar": solar,
        "hydro": hydro,
        "gas": gas,
        "coal": coal,
        "biomass": biomass,
        "imports": imports,
    }


def sample_axis(axis: Sequence[datetime]) -> list[RawSample]:
    """Sample every timestamp of ``axis`` in order."""
    total_points = len(axis)
    samples = []
    for i, ts in enumerate(axis):
        weights = sample(ts, i, total_points)
        samples.append(RawSample(timestamp=ts, weights=weights, total=sum(weights.values())))
    return samples
