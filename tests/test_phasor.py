"""Tests for phase mapping and phasor aggregation."""

import logging
import math

import numpy as np
import pytest

from leastpath import defaults
from leastpath.phasor import (
    aggregate,
    map_phases,
    phasor,
    relative_costs,
    safe_phase_scale,
    screen_pattern,
    two_path_intensity,
)
from leastpath.sampling import slit_positions
from leastpath.types import InterferenceParams, PhaseScaling


class TestMapPhases:
    """Cost to phase mapping."""

    def test_fixed_scale_relative_to_minimum(self):
        phases = map_phases([3.0, 1.0, 2.0], 0.5)
        np.testing.assert_allclose(phases, [4.0, 0.0, 2.0])

    def test_explicit_reference(self):
        phases = map_phases([3.0, 1.0], 1.0, reference=0.0)
        np.testing.assert_allclose(phases, [3.0, 1.0])

    def test_normalized_spans_fixed_angle(self):
        phases = map_phases([10.0, 20.0, 30.0], 123.0, scaling=PhaseScaling.NORMALIZED)
        np.testing.assert_allclose(phases, [0.0, 2 * math.pi, 4 * math.pi])

    def test_normalized_zero_spread(self):
        phases = map_phases([5.0, 5.0, 5.0], 0.0, scaling=PhaseScaling.NORMALIZED)
        np.testing.assert_array_equal(phases, [0.0, 0.0, 0.0])

    def test_zero_scale_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="leastpath.phasor"):
            phases = map_phases([1.0, 2.0], 0.0)
        np.testing.assert_allclose(phases, [0.0, 1.0 / defaults.FALLBACK_PHASE_SCALE])
        assert "falling back" in caplog.text

    def test_empty(self):
        assert map_phases([], 1.0).size == 0

    @pytest.mark.parametrize("scale", [0.0, -1.0, float("nan"), float("inf")])
    def test_safe_phase_scale(self, scale):
        assert safe_phase_scale(scale) == defaults.FALLBACK_PHASE_SCALE


class TestAggregate:
    """Phasor summation."""

    def test_empty_is_zero(self):
        result = aggregate([])
        assert result.re == 0.0 and result.im == 0.0
        assert result.count == 0
        assert result.magnitude == 0.0
        assert result.normalized_magnitude == 0.0

    def test_aligned_phasors_add(self):
        result = aggregate([phasor(0.0)] * 3)
        assert result.magnitude == pytest.approx(3.0)
        assert result.angle == pytest.approx(0.0)
        assert result.normalized_magnitude == pytest.approx(1.0)

    def test_opposite_phasors_cancel(self):
        result = aggregate([phasor(0.0), phasor(math.pi)])
        assert result.magnitude == pytest.approx(0.0, abs=1e-12)

    def test_chain_is_head_to_tail(self):
        phases = [0.0, math.pi / 2, math.pi]
        result = aggregate([phasor(p) for p in phases])
        assert result.chain.shape == (4, 2)
        np.testing.assert_allclose(result.chain[0], [0.0, 0.0])
        np.testing.assert_allclose(result.chain[-1], [result.re, result.im])
        np.testing.assert_allclose(result.chain[2], [1.0, 1.0], atol=1e-12)

    def test_intensity_is_squared_magnitude(self):
        result = aggregate([phasor(0.3), phasor(1.1)])
        assert result.intensity == pytest.approx(result.magnitude ** 2)

    def test_random_phases_cancel_with_count(self):
        rng = np.random.default_rng(7)
        means = []
        for n in (10, 100, 1000):
            mags = []
            for _ in range(200):
                costs = rng.uniform(0.0, 1000.0, n)
                result = aggregate(phasor(p) for p in map_phases(costs, 1.0))
                mags.append(result.normalized_magnitude)
            means.append(np.mean(mags))
        assert means[0] > means[1] > means[2]
        assert means[2] < 0.1

    def test_phasor_amplitude(self):
        sample = phasor(math.pi / 2)
        assert sample.amplitude == pytest.approx(1j)


class TestRelativeCosts:

    def test_ranks_between_min_and_max(self):
        np.testing.assert_allclose(relative_costs([2.0, 4.0, 3.0]), [0.0, 1.0, 0.5])

    def test_flat_costs(self):
        np.testing.assert_array_equal(relative_costs([1.0, 1.0]), [0.0, 0.0])

    def test_empty(self):
        assert relative_costs([]).size == 0


class TestTwoPathIntensity:

    @pytest.mark.parametrize("delta", np.linspace(-3 * math.pi, 3 * math.pi, 13))
    def test_two_plus_two_cos(self, delta):
        assert two_path_intensity(0.4 + delta, 0.4) == pytest.approx(2 + 2 * math.cos(delta), abs=1e-12)

    def test_screen_pattern_matches_two_path_law(self):
        params = InterferenceParams()
        source = (100.0, 300.0)
        slit_a, slit_b = slit_positions(params.center_y, params.barrier_x, params.slit_separation)
        ys, intensity = screen_pattern(source, slit_a, slit_b, params)
        assert ys.size == 250
        assert ys[0] == 50.0
        k = 2 * math.pi / params.wavelength_scaled
        for y, value in list(zip(ys, intensity))[::25]:
            la = math.hypot(*np.subtract(slit_a, source)) + math.hypot(params.screen_x - slit_a[0], y - slit_a[1])
            lb = math.hypot(*np.subtract(slit_b, source)) + math.hypot(params.screen_x - slit_b[0], y - slit_b[1])
            assert value == pytest.approx(2 + 2 * math.cos(k * (la - lb)), abs=1e-6)

    def test_central_maximum(self):
        params = InterferenceParams(screen_range=(300.0, 302.0), screen_step=2.0)
        slit_a, slit_b = slit_positions(params.center_y, params.barrier_x, params.slit_separation)
        ys, intensity = screen_pattern((100.0, 300.0), slit_a, slit_b, params)
        assert ys.tolist() == [300.0]
        assert intensity[0] == pytest.approx(4.0)

    def test_malformed_range(self):
        params = InterferenceParams(screen_range=(550.0, 50.0))
        ys, intensity = screen_pattern((100.0, 300.0), (350.0, 275.0), (350.0, 325.0), params)
        assert ys.size == 0 and intensity.size == 0
