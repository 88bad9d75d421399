"""Generation mix and carbon intensity series for the all-island grid."""

from . import client, config, errors, intensity, mix, run, sampler, series, sources, timeaxis, validate

__all__ = [
    "client",
    "config",
    "errors",
    "intensity",
    "mix",
    "run",
    "sampler",
    "series",
    "sources",
    "timeaxis",
    "validate",
]
