"""Tests for the least-time and least-action solvers."""

import math

import numpy as np
import pytest

from leastpath.extremal import solve_interference, solve_mechanics, solve_refraction
from leastpath.functionals import action, snell_residual, travel_time_at
from leastpath.sampling import make_rng, resample_bezier, sample_curve_family
from leastpath.types import MechanicsParams, RefractionParams, SamplingMode, SceneBounds

REFRACTION_SOURCE = (150.0, 100.0)
REFRACTION_TARGET = (650.0, 500.0)
MECHANICS_SOURCE = (100.0, 500.0)
MECHANICS_TARGET = (700.0, 300.0)


# ---------------------------------------------------------------------------
# Refraction
# ---------------------------------------------------------------------------

class TestSolveRefraction:
    """Least-time crossing point."""

    @pytest.fixture
    def params(self):
        return RefractionParams(v1=299.792, v2=199.86, boundary_y=300.0, x_range=(100.0, 700.0), step=0.5)

    def test_sine_ratio_matches_speed_ratio(self, params):
        result = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params)
        ratio = math.sin(result.details["theta1"]) / math.sin(result.details["theta2"])
        assert abs(ratio - params.v1 / params.v2) < 0.05

    def test_is_grid_minimum(self, params):
        result = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params)
        xs = np.arange(100.0, 700.5, 0.5)
        times = travel_time_at(xs, REFRACTION_SOURCE, REFRACTION_TARGET, params)
        assert result.cost.value == pytest.approx(times.min())
        assert result.details["x"] == result.details["grid_x"]
        assert result.details["grid_points"] == 1201.0

    def test_path_crosses_at_optimum(self, params):
        result = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params)
        path = result.path
        assert path.source == REFRACTION_SOURCE
        assert path.target == REFRACTION_TARGET
        assert path.via == (result.details["x"], 300.0)

    def test_refine_improves_snell_agreement(self, params):
        coarse = RefractionParams(v1=params.v1, v2=params.v2, step=10.0)
        grid = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, coarse)
        refined = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, coarse, refine=True)
        assert refined.cost.value <= grid.cost.value
        assert abs(refined.details["x"] - grid.details["grid_x"]) <= 10.0
        residual = snell_residual(refined.details["x"], REFRACTION_SOURCE, REFRACTION_TARGET, coarse)
        assert abs(residual) < 1e-4

    def test_equal_media_goes_straight(self):
        params = RefractionParams(v1=1.0, v2=1.0, step=0.5)
        result = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params)
        # Straight line from source to target crosses y=300 at x=400
        assert result.details["x"] == pytest.approx(400.0)

    def test_empty_grid_returns_none(self):
        params = RefractionParams(x_range=(700.0, 100.0))
        assert solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params) is None

    def test_bounds_exclude_everything(self):
        bounds = SceneBounds(0.0, 0.0, 50.0, 600.0)
        assert solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, RefractionParams(), bounds=bounds) is None

    def test_details_are_read_only(self, params):
        result = solve_refraction(REFRACTION_SOURCE, REFRACTION_TARGET, params)
        with pytest.raises(TypeError):
            result.details["x"] = 0.0


# ---------------------------------------------------------------------------
# Mechanics
# ---------------------------------------------------------------------------

class TestSolveMechanics:
    """Closed-form classical trajectory."""

    def test_hits_both_endpoints(self):
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, MechanicsParams())
        assert result.path.source == MECHANICS_SOURCE
        assert result.path.target == MECHANICS_TARGET
        assert len(result.path.points) == MechanicsParams().num_segments + 1

    def test_uniform_horizontal_motion(self):
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, MechanicsParams())
        dx = np.diff(result.path.points[:, 0])
        np.testing.assert_allclose(dx, dx[0])

    def test_launch_velocity(self):
        params = MechanicsParams(total_time=1.2, gravity=9.8)
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        # 600 units = 12 m across, 200 units = 4 m up
        assert result.details["vx0"] == pytest.approx(12.0 / 1.2)
        assert result.details["vy0"] == pytest.approx((4.0 + 0.5 * 9.8 * 1.44) / 1.2)
        assert result.details["flight_time"] == 1.2

    def test_controls_reproduce_samples(self):
        params = MechanicsParams()
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        c1, c2 = result.path.controls
        pts = resample_bezier(MECHANICS_SOURCE, c1, c2, MECHANICS_TARGET, params.num_segments)
        np.testing.assert_allclose(pts, result.path.points, atol=1e-9)

    def test_cost_is_action(self):
        params = MechanicsParams()
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        assert result.cost.value == pytest.approx(action(result.path, params).value)

    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_local_minimality(self, seed):
        params = MechanicsParams()
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        paths = sample_curve_family(
            MECHANICS_SOURCE, MECHANICS_TARGET, SamplingMode.NEIGHBORHOOD, 50, result.path,
            rng=make_rng(seed), num_segments=params.num_segments,
            sigma_min=0.5, sigma_step=0.09,
        )
        assert max(p.deviation for p in paths) <= 5.0
        classical = result.cost.value
        tol = 1e-9 * abs(classical)
        not_below = sum(action(p, params).value >= classical - tol for p in paths)
        assert not_below / len(paths) >= 0.95

    @pytest.mark.parametrize("mode", [SamplingMode.SPRAY, SamplingMode.GRID])
    def test_classical_below_broad_families(self, mode):
        params = MechanicsParams()
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        paths = sample_curve_family(MECHANICS_SOURCE, MECHANICS_TARGET, mode, 30, rng=make_rng(0))
        assert all(action(p, params).value >= result.cost.value for p in paths)

    def test_zero_scale_is_finite(self):
        params = MechanicsParams(pixels_per_meter=0.0)
        result = solve_mechanics(MECHANICS_SOURCE, MECHANICS_TARGET, params)
        assert result.path.source == MECHANICS_SOURCE
        assert result.path.target == MECHANICS_TARGET
        assert np.all(np.isfinite(result.path.points))
        assert math.isfinite(result.details["vx0"])

    def test_coincident_endpoints_finite(self):
        params = MechanicsParams(total_time=None)
        result = solve_mechanics((300.0, 300.0), (300.0, 300.0), params)
        assert np.all(np.isfinite(result.path.points))
        assert math.isfinite(result.cost.value)
        assert result.details["vx0"] == 0.0


def test_interference_has_no_extremal():
    assert solve_interference() is None
