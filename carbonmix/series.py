"""
carbonmix/series.py

Derivation of the two output series from raw samples.

Responsibilities
----------------
- Define the output point models (carbon intensity, generation mix) and the
  ``SeriesBundle`` returned by the source adapter.
- Turn a list of ``RawSample`` values into both series in one pass, so that
  they share exactly the same timestamps. This is the single place where the
  normalizer and the intensity calculator are applied, for synthetic and
  live data alike.
- Provide the synthetic generation path and a pandas export for consumers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

import pandas as pd
from pydantic import BaseModel

from .intensity import compute_intensity
from .mix import SOURCE_NAMES, GenerationMix, RawSample, normalize_mix
from .sampler import sample_axis
from .timeaxis import RangeSelector, build_axis, iso

if TYPE_CHECKING:
    from .sources import Source


class CarbonIntensityPoint(BaseModel):
    timestamp: datetime
    grams_co2_per_kwh: int


class GenerationMixPoint(BaseModel):
    timestamp: datetime
    mix: GenerationMix


@dataclass(frozen=True)
class SeriesBundle:
    """Result of one generation request.

    Attributes:
        intensity: Carbon intensity per timestamp.
        generation: Normalized generation mix per timestamp, same timestamps
            as ``intensity``.
        source: The source that was requested.
        simulated: True when the data came from the synthetic sampler,
            including after a live fetch fell back.
        fallback_error: The transient error that caused a fallback, if any.
    """

    intensity: list[CarbonIntensityPoint]
    generation: list[GenerationMixPoint]
    source: Source
    simulated: bool
    fallback_error: Exception | None = None

    def __len__(self) -> int:
        return len(self.intensity)

    @property
    def timestamps(self) -> list[datetime]:
        return [p.timestamp for p in self.intensity]

    def to_records(self) -> dict[str, list[dict[str, Any]]]:
        """Return both series as JSON-ready dicts for the charting layer."""
        return {
            "intensity": [
                {"timestamp": iso(p.timestamp), "gramsCO2PerKWh": p.grams_co2_per_kwh}
                for p in self.intensity
            ],
            "generation": [
                {"timestamp": iso(p.timestamp), "mix": p.mix.as_dict()} for p in self.generation
            ],
        }


def derive_series(
    samples: Iterable[RawSample],
) -> tuple[list[CarbonIntensityPoint], list[GenerationMixPoint]]:
    """Normalize each sample and compute its intensity.

    Returns:
        tuple: ``(intensity, generation)`` lists of equal length, in the order
        of ``samples``, both built from each sample's own timestamp.
    """
    intensity: list[CarbonIntensityPoint] = []
    generation: list[GenerationMixPoint] = []

    for s in samples:
        mix = normalize_mix(s.weights)
        intensity.append(
            CarbonIntensityPoint(timestamp=s.timestamp, grams_co2_per_kwh=compute_intensity(mix))
        )
        generation.append(GenerationMixPoint(timestamp=s.timestamp, mix=GenerationMix(**mix)))

    return intensity, generation


def generate_synthetic(
    rng: RangeSelector | str,
    now: datetime | None = None,
) -> tuple[list[CarbonIntensityPoint], list[GenerationMixPoint]]:
    """Build the time axis for ``rng`` and derive simulated series over it."""
    return derive_series(sample_axis(build_axis(rng, now)))


def to_frame(bundle: SeriesBundle) -> pd.DataFrame:
    """Return ``bundle`` as a DataFrame indexed by UTC timestamp.

    Columns are ``grams_co2_per_kwh`` followed by one fraction column per
    source name.
    """
    rows = [
        {"grams_co2_per_kwh": ci.grams_co2_per_kwh, **gm.mix.as_dict()}
        for ci, gm in zip(bundle.intensity, bundle.generation)
    ]
    index = pd.DatetimeIndex(bundle.timestamps, name="timestamp")
    return pd.DataFrame(rows, index=index, columns=["grams_co2_per_kwh", *SOURCE_NAMES])
