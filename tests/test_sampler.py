"""Tests for the synthetic generation-mix sampler."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from carbonmix import sampler
from carbonmix.mix import SOURCE_NAMES


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2024, 3, 10, hour, minute, tzinfo=timezone.utc)


def test_sample_covers_all_sources():
    """Every source name is present and non-negative."""

    out = sampler.sample(at(3), 0, 97)

    assert tuple(out) == SOURCE_NAMES
    assert all(v >= 0 for v in out.values())


def test_sample_is_deterministic():
    """Identical inputs give identical outputs."""

    assert sampler.sample(at(14, 45), 17, 193) == sampler.sample(at(14, 45), 17, 193)


@pytest.mark.parametrize("hour", [0, 3, 5, 6, 18, 19, 23])
def test_solar_is_zero_outside_daylight(hour):
    """Solar is exactly zero outside the (6, 18) window."""

    assert sampler.sample(at(hour), 0, 97)["solar"] == 0


def test_solar_positive_at_noon():
    """Solar peaks at midday at 0.18."""

    solar = sampler.sample(at(12), 0, 97)["solar"]

    assert solar > 0
    assert solar == pytest.approx(0.18)


def test_reference_values_at_midnight():
    """At 00:00 with index 0 the closed-form values are reproduced."""

    out = sampler.sample(at(0), 0, 97)

    wind = 0.35 + 0.20 * math.sin(2 * math.pi * -3 / 24)
    gas = 0.40 + 0.10 - (wind - 0.30)
    assert out["wind"] == pytest.approx(wind)
    assert out["solar"] == 0
    assert out["hydro"] == pytest.approx(0.05)
    assert out["coal"] == pytest.approx(0.04)
    assert out["biomass"] == 0.05
    assert out["gas"] == pytest.approx(gas)
    assert out["imports"] == pytest.approx(
        max(0.02, min(0.20, 1 - (wind + 0.05 + gas + 0.04 + 0.05)))
    )


def test_clamps_hold_across_the_day():
    """Wind, solar, gas and imports stay within their bounds."""

    for i in range(96):
        out = sampler.sample(at(i // 4, (i % 4) * 15), i, 97)
        assert 0.10 <= out["wind"] <= 0.75
        assert 0.0 <= out["solar"] <= 0.25
        assert 0.05 <= out["gas"] <= 0.70
        assert 0.02 <= out["imports"] <= 0.20


def test_index_drives_hydro_and_coal():
    """Hydro and coal vary with index, not with time of day."""

    a = sampler.sample(at(10), 0, 97)
    b = sampler.sample(at(10), 5, 97)

    assert a["wind"] == b["wind"]
    assert a["hydro"] != b["hydro"]
    assert a["coal"] != b["coal"]


def test_rejects_empty_series():
    """A total of zero points is a programming error."""

    with pytest.raises(ValueError):
        sampler.sample(at(0), 0, 0)


def test_hour_of_day_uses_utc():
    """Hour of day is computed on the UTC clock."""

    assert sampler.hour_of_day(at(13, 30)) == 13.5


def test_sample_axis_uses_series_length_and_index(now):
    """`sample_axis` passes each index and the axis length to the sampler."""

    axis = [at(1), at(2), at(3)]

    samples = sampler.sample_axis(axis)

    assert [s.timestamp for s in samples] == axis
    assert samples[2].weights == sampler.sample(at(3), 2, 3)
    assert samples[0].total == pytest.approx(sum(samples[0].weights.values()))
