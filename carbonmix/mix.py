"""
carbonmix/mix.py

Generation-mix types and the normalizer shared by every data path.

Responsibilities
----------------
- Define the closed set of source names tracked by the system.
- Define ``RawSample``, the un-normalized per-source weights at a timestamp,
  produced both by the synthetic sampler and by live payload validation.
- Define ``GenerationMix``, the normalized output model.
- Provide ``normalize_mix``, which rescales arbitrary non-negative weights
  into fractions summing to 1 with a fixed fallback for degenerate input.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType

from pydantic import BaseModel, Field

SOURCE_NAMES = ("wind", "solar", "hydro", "gas", "coal", "biomass", "imports")

# Returned when the raw weights carry no information (sum <= 0). Sums to 1.
FALLBACK_MIX = MappingProxyType(
    {
        "wind": 0.30,
        "solar": 0.05,
        "hydro": 0.05,
        "gas": 0.45,
        "coal": 0.05,
        "biomass": 0.05,
        "imports": 0.05,
    }
)


class RawSample(BaseModel):
    """Per-source weights at one timestamp, before normalization.

    Attributes:
        timestamp: Aware UTC timestamp of the sample.
        weights: Non-negative value for each of ``SOURCE_NAMES``.
        total: Sum reported alongside the weights. Informational only; the
            normalizer computes its own total.
    """

    timestamp: datetime
    weights: dict[str, float]
    total: float = 0.0


class GenerationMix(BaseModel):
    """Normalized fractional breakdown of output across all sources."""

    wind: float = Field(ge=0)
    solar: float = Field(ge=0)
    hydro: float = Field(ge=0)
    gas: float = Field(ge=0)
    coal: float = Field(ge=0)
    biomass: float = Field(ge=0)
    imports: float = Field(ge=0)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in SOURCE_NAMES}


def normalize_mix(raw: Mapping[str, float | None]) -> dict[str, float]:
    """Rescale per-source weights into fractions that sum to 1.

    Args:
        raw: Weights keyed by source name. Missing or ``None`` entries count
            as 0; keys outside ``SOURCE_NAMES`` are ignored.

    Returns:
        dict[str, float]: A value for every source name, in ``SOURCE_NAMES``
        order. If the weights sum to zero or less, or carry no finite total,
        a copy of ``FALLBACK_MIX``.
    """
    base = {name: raw.get(name) or 0.0 for name in SOURCE_NAMES}
    total = sum(base.values())
    if total == math.inf:
        # Finite weights whose sum overflows: rescale by the largest first.
        peak = max(base.values())
        base = {name: value / peak for name, value in base.items()}
        total = sum(base.values())
    if not total > 0 or not math.isfinite(total):
        return dict(FALLBACK_MIX)
    return {name: value / total for name, value in base.items()}
