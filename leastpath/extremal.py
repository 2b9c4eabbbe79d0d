"""
Extremal (least time / least action) path solvers.

Each solver returns an ExtremalResult, or None when the search space is
empty; callers then show the raw candidates without a highlighted path.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

import numpy as np
from scipy.optimize import minimize_scalar

from leastpath import defaults
from leastpath.functionals import (
    action,
    flight_time_estimate,
    refraction_angles,
    travel_time_at,
)
from leastpath.sampling import boundary_grid, parabola_controls
from leastpath.types import (
    CostKind,
    CostResult,
    ExtremalResult,
    MechanicsParams,
    Path,
    Point,
    RefractionParams,
    SceneBounds,
)

logger = logging.getLogger(__name__)


def solve_refraction(
    source: Point,
    target: Point,
    params: RefractionParams,
    *,
    refine: bool | None = None,
    bounds: SceneBounds | None = None,
) -> ExtremalResult | None:
    """Grid search for the boundary crossing point of least travel time.

    Snell's law is not assumed anywhere; it shows up in the returned angles
    (``v2 sin(theta1) ~= v1 sin(theta2)`` to within the grid resolution).

    Args:
        source, target: Endpoints on either side of the boundary
        params: Media speeds, boundary line and grid
        refine: Polish the grid minimiser with a bounded scalar minimisation
            inside the neighbouring grid cells (defaults to ``params.refine``)
        bounds: Crossing points outside these bounds are not searched

    Returns:
        The least-time path, or None if the grid is empty
    """
    xs = boundary_grid(params.x_range, params.step)
    by = params.boundary_y
    if bounds is not None:
        xs = xs[(xs >= bounds.x_min) & (xs <= bounds.x_max)]
        by = min(max(by, bounds.y_min), bounds.y_max)
    if xs.size == 0:
        return None
    params_eff = params if by == params.boundary_y else replace(params, boundary_y=by)

    times = travel_time_at(xs, source, target, params_eff)
    best = int(np.argmin(times))
    grid_x = float(xs[best])
    x_opt, t_opt = grid_x, float(times[best])

    if params.refine if refine is None else refine:
        lo = max(float(xs[0]), grid_x - params.step)
        hi = min(float(xs[-1]), grid_x + params.step)
        if hi > lo:
            res = minimize_scalar(
                lambda x: float(travel_time_at(x, source, target, params_eff)),
                bounds=(lo, hi),
                method="bounded",
                options={"xatol": 1e-9},
            )
            if res.success and res.fun <= t_opt:
                x_opt, t_opt = float(res.x), float(res.fun)
            else:
                logger.debug("Refinement did not improve grid minimiser at x=%.3f", grid_x)

    theta1, theta2 = refraction_angles(x_opt, source, target, by)
    path = Path(points=[source, (x_opt, by), target], via=(x_opt, by))
    return ExtremalResult(
        path=path,
        cost=CostResult(t_opt, CostKind.TRAVEL_TIME),
        details={
            "x": x_opt,
            "grid_x": grid_x,
            "theta1": theta1,
            "theta2": theta2,
            "grid_points": float(xs.size),
        },
    )


def solve_mechanics(source: Point, target: Point, params: MechanicsParams) -> ExtremalResult:
    """Closed-form classical trajectory through both endpoints.

    With the flight time T fixed, the constant-acceleration equations
    ``dx = vx0 T`` and ``dh = vy0 T - g T^2 / 2`` give the launch velocity
    directly. The trajectory is sampled at N+1 uniform time steps; because it
    satisfies the discrete Euler-Lagrange equations exactly it is the global
    minimiser of the discretized action for fixed endpoints and duration.
    """
    T = flight_time_estimate(source, target, params)
    ppm = max(params.pixels_per_meter, defaults.MIN_SPEED)
    g = params.gravity
    sx, sy = source
    tx, ty = target

    vx0 = (tx - sx) / ppm / T
    vy0 = ((sy - ty) / ppm + 0.5 * g * T * T) / T

    n = max(int(params.num_segments), 1)
    t = np.linspace(0.0, T, n + 1)
    points = np.empty((n + 1, 2), dtype=np.float64)
    points[:, 0] = sx + ppm * vx0 * t
    points[:, 1] = sy - ppm * (vy0 * t - 0.5 * g * t * t)
    points[0] = source
    points[-1] = target

    quad_control = (sx + ppm * vx0 * T / 2.0, sy - ppm * vy0 * T / 2.0)
    path = Path(points=points, controls=parabola_controls(source, target, quad_control))
    return ExtremalResult(
        path=path,
        cost=action(path, params, T),
        details={
            "flight_time": T,
            "vx0": vx0,
            "vy0": vy0,
            "launch_speed": math.hypot(vx0, vy0),
            "launch_angle": math.atan2(vy0, vx0),
        },
    )


def solve_interference(*_args, **_kwargs) -> None:
    """Both slit paths contribute equally; there is nothing to extremize."""
    return None
