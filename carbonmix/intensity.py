"""
carbonmix/intensity.py

Carbon-intensity calculation from a normalized generation mix.

Emission factors are grams of CO2 per kWh for the all-island grid, based on
SEAI and EPA figures. Imports use an average of GB and continental Europe.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .mix import SOURCE_NAMES, GenerationMix

EMISSION_FACTORS = MappingProxyType(
    {
        "wind": 12,
        "solar": 50,
        "hydro": 24,
        "gas": 400,
        "coal": 900,
        "biomass": 230,
        "imports": 300,
    }
)


def compute_intensity(mix: Mapping[str, float] | GenerationMix) -> int:
    """Return the carbon intensity (gCO2/kWh) of ``mix``.

    The weighted sum of fractions and emission factors is rounded with
    Python's ``round`` (half-to-even). For a mix summing to 1 the result lies
    within the factor range, [12, 900].
    """
    if isinstance(mix, GenerationMix):
        mix = mix.as_dict()
    total = sum(mix.get(name, 0.0) * EMISSION_FACTORS[name] for name in SOURCE_NAMES)
    return round(total)
