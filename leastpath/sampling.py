"""
Candidate path generation.

Every generator returns a list of Path objects sharing the same number of
samples, with the first and last samples pinned to the requested endpoints.
Randomized strategies draw exclusively from the numpy Generator handed to
them, so two calls with equally seeded generators produce identical paths.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from leastpath import defaults
from leastpath.types import Path, Point, SamplingMode, SceneBounds


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Build the generator used by one recomputation."""
    return np.random.default_rng(defaults.DEFAULT_SEED if seed is None else seed)


def boundary_grid(x_range: Sequence[float], step: float) -> np.ndarray:
    """Regular grid over ``[lo, hi]`` at resolution *step*, both ends included.

    Returns an empty array for a malformed range or a non-positive step.
    """
    try:
        lo, hi = float(x_range[0]), float(x_range[1])
        step = float(step)
    except (TypeError, ValueError, IndexError):
        return np.empty(0)
    if not (math.isfinite(lo) and math.isfinite(hi) and math.isfinite(step)):
        return np.empty(0)
    if step <= 0 or lo > hi:
        return np.empty(0)
    # Index-based so the upper end is hit exactly instead of drifting like np.arange
    n = int(math.floor((hi - lo) / step + 1e-9))
    return lo + step * np.arange(n + 1, dtype=np.float64)


def _pin(points: np.ndarray, source: Point, target: Point, bounds: SceneBounds | None) -> np.ndarray:
    if bounds is not None:
        points = bounds.clamp(points)
    points[0] = source
    points[-1] = target
    return points


def sample_two_segment(
    source: Point,
    target: Point,
    boundary_y: float,
    x_range: Sequence[float] = defaults.DEFAULT_BOUNDARY_X_RANGE,
    step: float = defaults.DEFAULT_GRID_STEP,
    bounds: SceneBounds | None = None,
) -> list[Path]:
    """One bent path per boundary crossing point on a dense grid.

    Crossing points outside *bounds* are rejected; the boundary line itself is
    clamped into the bounds.
    """
    xs = boundary_grid(x_range, step)
    by = float(boundary_y)
    if bounds is not None:
        xs = xs[(xs >= bounds.x_min) & (xs <= bounds.x_max)]
        by = min(max(by, bounds.y_min), bounds.y_max)
    if xs.size == 0:
        return []

    points = np.empty((xs.size, 3, 2), dtype=np.float64)
    points[:, 0] = source
    points[:, 1, 0] = xs
    points[:, 1, 1] = by
    points[:, 2] = target
    return [Path(points=pts, via=(float(x), by)) for pts, x in zip(points, xs)]


def cubic_bezier(p0, c1, c2, p1, t) -> np.ndarray:
    """Evaluate a cubic Bezier at parameter(s) *t*; returns ``(len(t), 2)``."""
    t = np.atleast_1d(np.asarray(t, dtype=np.float64))[:, None]
    mt = 1.0 - t
    p0, c1, c2, p1 = (np.asarray(p, dtype=np.float64) for p in (p0, c1, c2, p1))
    return mt**3 * p0 + 3.0 * mt**2 * t * c1 + 3.0 * mt * t**2 * c2 + t**3 * p1


def resample_bezier(p0, c1, c2, p1, num_segments: int) -> np.ndarray:
    """Sample a cubic Bezier at ``num_segments + 1`` uniform parameter steps.

    Uniform in the parameter (not arc length): consecutive samples are equally
    spaced in time, which the action functional relies on.
    """
    t = np.linspace(0.0, 1.0, max(int(num_segments), 1) + 1)
    return cubic_bezier(p0, c1, c2, p1, t)


def straight_controls(source: Point, target: Point) -> np.ndarray:
    """Control points that make the cubic a uniformly traversed straight line."""
    p0 = np.asarray(source, dtype=np.float64)
    p1 = np.asarray(target, dtype=np.float64)
    return np.stack([p0 + (p1 - p0) / 3.0, p0 + 2.0 * (p1 - p0) / 3.0])


def parabola_controls(source: Point, target: Point, quad_control: Point) -> np.ndarray:
    """Degree-elevate the quadratic Bezier ``(source, quad_control, target)`` to cubic controls.

    A constant-acceleration trajectory is exactly a quadratic Bezier in
    normalized time, so this represents the classical path without error.
    """
    p0 = np.asarray(source, dtype=np.float64)
    p1 = np.asarray(target, dtype=np.float64)
    q = np.asarray(quad_control, dtype=np.float64)
    return np.stack([p0 + 2.0 / 3.0 * (q - p0), p1 + 2.0 / 3.0 * (q - p1)])


def _spray_controls(source: Point, target: Point, count: int, rng: np.random.Generator) -> np.ndarray:
    sx, sy = source
    dx = target[0] - sx
    u = rng.random((count, 4))
    lift_lo, lift_hi = defaults.SPRAY_LIFT_RANGE
    (a1, b1), (a2, b2) = defaults.SPRAY_C1_X_RANGE, defaults.SPRAY_C2_X_RANGE

    controls = np.empty((count, 2, 2), dtype=np.float64)
    controls[:, 0, 0] = sx + dx * (a1 + u[:, 0] * (b1 - a1))
    controls[:, 0, 1] = sy - (lift_lo + u[:, 1] * (lift_hi - lift_lo))
    controls[:, 1, 0] = sx + dx * (a2 + u[:, 2] * (b2 - a2))
    controls[:, 1, 1] = sy - (lift_lo + u[:, 3] * (lift_hi - lift_lo))
    return controls


def _grid_controls(source: Point, target: Point, count: int) -> tuple[np.ndarray, list[tuple[int, int]]]:
    # Full square grid: count=30 gives a 6x6 sweep of 36 paths, not 30
    sx, sy = source
    dx = target[0] - sx
    size = math.ceil(math.sqrt(count))
    lift_lo, lift_hi = defaults.GRID_LIFT_RANGE
    (a1, b1), (a2, b2) = defaults.GRID_C1_X_RANGE, defaults.GRID_C2_X_RANGE

    controls = []
    indices = []
    for i in range(size):
        fi = i / size
        for j in range(size):
            fj = j / size
            lift = lift_lo + fj * (lift_hi - lift_lo)
            controls.append([
                [sx + dx * (a1 + fi * (b1 - a1)), sy - lift],
                [sx + dx * (a2 + fi * (b2 - a2)), sy - lift],
            ])
            indices.append((i, j))
    return np.asarray(controls, dtype=np.float64), indices


def sample_curve_family(
    source: Point,
    target: Point,
    mode: SamplingMode,
    count: int,
    reference: Path | None = None,
    *,
    rng: np.random.Generator | None = None,
    num_segments: int = defaults.DEFAULT_NUM_SEGMENTS,
    bounds: SceneBounds | None = None,
    sigma_min: float = defaults.NEIGHBORHOOD_SIGMA_MIN,
    sigma_step: float = defaults.NEIGHBORHOOD_SIGMA_STEP,
) -> list[Path]:
    """Generate cubic-curve candidates between fixed endpoints.

    Args:
        source, target: Pinned endpoints
        mode: SPRAY (broad uniform controls), NEIGHBORHOOD (noisy copies of
            *reference*, sigma growing with index) or GRID (regular
            ceil(sqrt(count))^2 sweep, full grid returned, so
            count=30 yields 36 paths)
        count: Requested number of paths; ``<= 0`` returns ``[]``
        reference: Path whose ``controls`` seed NEIGHBORHOOD sampling
            (straight line if missing)
        rng: Source of randomness; a default-seeded generator if omitted
        num_segments: Every curve is resampled to ``num_segments + 1`` points
        bounds: Scene region controls and samples are clamped into
        sigma_min, sigma_step: Noise sigma of the i-th neighborhood path is
            ``sigma_min + i * sigma_step``

    Returns:
        List of paths, in generation order
    """
    count = int(count)
    if count <= 0:
        return []
    mode = SamplingMode(mode)
    if rng is None:
        rng = make_rng()

    deviations: list[float | None] = [None] * count
    grid_indices: list[tuple[int, int] | None] = [None] * count

    if mode is SamplingMode.SPRAY:
        controls = _spray_controls(source, target, count, rng)
    elif mode is SamplingMode.NEIGHBORHOOD:
        if reference is not None and reference.controls is not None:
            base = np.asarray(reference.controls, dtype=np.float64)
        else:
            base = straight_controls(source, target)
        sigmas = sigma_min + sigma_step * np.arange(count, dtype=np.float64)
        noise = rng.standard_normal((count, 2, 2)) * sigmas[:, None, None]
        controls = base[None, :, :] + noise
        deviations = [float(s) for s in sigmas]
    else:
        controls, indices = _grid_controls(source, target, count)
        deviations = [None] * len(indices)
        grid_indices = list(indices)

    if bounds is not None:
        controls = bounds.clamp(controls)

    paths = []
    for k, (c1, c2) in enumerate(controls):
        points = _pin(resample_bezier(source, c1, c2, target, num_segments), source, target, bounds)
        paths.append(Path(
            points=points,
            controls=np.stack([c1, c2]),
            deviation=deviations[k],
            grid_index=grid_indices[k],
        ))
    return paths


def slit_positions(center_y: float, barrier_x: float, slit_separation: float) -> tuple[Point, Point]:
    """Slit centres for a separation given in mm."""
    half = slit_separation * defaults.SLIT_SCENE_SCALE / 2.0
    return (float(barrier_x), float(center_y - half)), (float(barrier_x), float(center_y + half))


def sample_two_fixed_paths(
    source: Point,
    target: Point,
    via_a: Point,
    via_b: Point,
    bounds: SceneBounds | None = None,
) -> list[Path]:
    """Exactly two straight two-segment paths, one through each slit."""
    paths = []
    for via in (via_a, via_b):
        points = np.array([source, via, target], dtype=np.float64)
        points = _pin(points, source, target, bounds)
        v = (float(points[1, 0]), float(points[1, 1]))
        paths.append(Path(points=points, via=v))
    return paths
