"""Tests for the mix normalizer and carbon-intensity calculator."""

from __future__ import annotations

import pytest

from carbonmix import intensity, mix
from carbonmix.mix import SOURCE_NAMES, GenerationMix


def test_normalize_all_zero_returns_fallback():
    """Degenerate input returns the fixed fallback distribution."""

    out = mix.normalize_mix({name: 0 for name in SOURCE_NAMES})

    assert out == {
        "wind": 0.30,
        "solar": 0.05,
        "hydro": 0.05,
        "gas": 0.45,
        "coal": 0.05,
        "biomass": 0.05,
        "imports": 0.05,
    }


def test_normalize_empty_mapping_returns_fallback_copy():
    """Missing keys default to zero and the fallback is returned as a copy."""

    out = mix.normalize_mix({})
    out["wind"] = 1.0

    assert mix.FALLBACK_MIX["wind"] == 0.30


def test_normalize_scales_to_one():
    """Weights are divided by their total."""

    out = mix.normalize_mix({"wind": 2, "gas": 6, "solar": None, "nuclear": 100})

    assert out["wind"] == pytest.approx(0.25)
    assert out["gas"] == pytest.approx(0.75)
    assert out["solar"] == 0
    assert set(out) == set(SOURCE_NAMES)
    assert sum(out.values()) == pytest.approx(1.0, abs=1e-9)


def test_fallback_sums_to_one():
    assert sum(mix.FALLBACK_MIX.values()) == pytest.approx(1.0, abs=1e-12)


@pytest.mark.parametrize(
    "name, expected",
    [("wind", 12), ("solar", 50), ("hydro", 24), ("gas", 400), ("coal", 900),
     ("biomass", 230), ("imports", 300)],
)
def test_single_source_intensity_equals_factor(name, expected):
    """A mix entirely of one source has that source's emission factor."""

    assert intensity.compute_intensity({name: 1.0}) == expected


def test_intensity_of_fallback_mix():
    """0.3*12 + 0.05*50 + 0.05*24 + 0.45*400 + 0.05*(900+230+300) = 258.8."""

    assert intensity.compute_intensity(mix.FALLBACK_MIX) == 259


def test_intensity_accepts_model():
    """A GenerationMix model is accepted as well as a mapping."""

    model = GenerationMix(**mix.FALLBACK_MIX)

    assert intensity.compute_intensity(model) == intensity.compute_intensity(mix.FALLBACK_MIX)


def test_intensity_rounds_half_to_even():
    """Ties round to the even neighbour."""

    # 0.25 * 12 + 0.75 * 50 == 40.5 exactly
    assert intensity.compute_intensity({"wind": 0.25, "solar": 0.75}) == 40


def test_emission_factors_are_read_only():
    with pytest.raises(TypeError):
        intensity.EMISSION_FACTORS["coal"] = 0


def test_normalize_rescales_when_total_overflows():
    """Finite weights whose sum overflows still normalize to 1."""

    out = mix.normalize_mix({"wind": 1e308, "gas": 1e308})

    assert out["wind"] == pytest.approx(0.5)
    assert out["gas"] == pytest.approx(0.5)
    assert sum(out.values()) == pytest.approx(1.0, abs=1e-9)
    assert 12 <= intensity.compute_intensity(out) <= 900


def test_normalize_non_finite_weights_return_fallback():
    """Infinite or NaN weights cannot be scaled and take the fallback."""

    assert mix.normalize_mix({"wind": float("inf"), "gas": 1.0}) == dict(mix.FALLBACK_MIX)
    assert mix.normalize_mix({"wind": float("nan")}) == dict(mix.FALLBACK_MIX)
