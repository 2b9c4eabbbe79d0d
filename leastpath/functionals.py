"""
Scalar functionals over discretized paths.

All functions are pure: they read a Path plus a parameter dataclass and return
a finite CostResult (or plain floats/arrays for the profile helpers).
Degenerate geometry is clamped rather than allowed to produce NaN or inf.
"""

from __future__ import annotations

import math

import numpy as np

from leastpath import defaults
from leastpath.types import (
    CostKind,
    CostResult,
    InterferenceParams,
    MechanicsParams,
    Path,
    Point,
    RefractionParams,
)


# ---------------------------------------------------------------------------
# Travel time (refraction)
# ---------------------------------------------------------------------------

def _speeds(params: RefractionParams) -> tuple[float, float]:
    return max(params.v1, defaults.MIN_SPEED), max(params.v2, defaults.MIN_SPEED)


def travel_time_at(x, source: Point, target: Point, params: RefractionParams):
    """T(x) = d1/v1 + d2/v2 for a crossing at ``(x, boundary_y)``; *x* may be an array."""
    v1, v2 = _speeds(params)
    by = params.boundary_y
    d1 = np.hypot(np.asarray(x) - source[0], by - source[1])
    d2 = np.hypot(target[0] - np.asarray(x), target[1] - by)
    return d1 / v1 + d2 / v2


def _crossing_index(path: Path, boundary_y: float) -> int:
    """Number of leading segments travelled before the path reaches the boundary.

    The path reaches the boundary at its ``via`` point when it has one,
    otherwise at the first sample that touches the line or lies past it.
    """
    pts = path.points
    if path.via is not None:
        hits = np.flatnonzero(np.all(pts[1:] == path.via, axis=1))
        if hits.size:
            return int(hits[0]) + 1
    side = np.sign(pts[:, 1] - boundary_y)
    contact = np.flatnonzero((side[1:] == 0) | (side[1:] == -side[0]))
    return int(contact[0]) + 1 if contact.size else len(pts) - 1


def travel_time(path: Path, params: RefractionParams) -> CostResult:
    """Travel time along a polyline from source to target.

    Segments up to the boundary crossing run at ``v1``, the rest at ``v2``,
    so a two-segment path costs ``d1/v1 + d2/v2`` whichever side of the
    boundary the target sits on.
    """
    v1, v2 = _speeds(params)
    if len(path.points) < 2:
        return CostResult(0.0, CostKind.TRAVEL_TIME)
    lengths = path.segment_lengths()
    in_medium_one = np.arange(lengths.size) < _crossing_index(path, params.boundary_y)
    total = np.where(in_medium_one, lengths / v1, lengths / v2).sum()
    return CostResult(float(total), CostKind.TRAVEL_TIME)


def travel_time_profile(
    source: Point,
    target: Point,
    params: RefractionParams,
    samples: int = defaults.TRAVEL_TIME_PROFILE_SAMPLES,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample T(x) over the boundary range for the travel-time graph."""
    lo, hi = params.x_range
    if samples < 1 or not lo <= hi:
        return np.empty(0), np.empty(0)
    xs = np.linspace(lo, hi, samples + 1)
    return xs, travel_time_at(xs, source, target, params)


def refraction_angles(x: float, source: Point, target: Point, boundary_y: float) -> tuple[float, float]:
    """Incidence and refraction angles (radians) measured from the boundary normal."""
    theta1 = math.atan2(abs(x - source[0]), abs(boundary_y - source[1]))
    theta2 = math.atan2(abs(target[0] - x), abs(target[1] - boundary_y))
    return theta1, theta2


def snell_residual(x: float, source: Point, target: Point, params: RefractionParams) -> float:
    """``n1 sin(theta1) - n2 sin(theta2)`` at crossing point *x*."""
    theta1, theta2 = refraction_angles(x, source, target, params.boundary_y)
    return params.n1 * math.sin(theta1) - params.n2 * math.sin(theta2)


# ---------------------------------------------------------------------------
# Action (mechanics)
# ---------------------------------------------------------------------------

def flight_time_estimate(source: Point, target: Point, params: MechanicsParams) -> float:
    """Duration used to time-stamp every path between *source* and *target*.

    The configured ``total_time`` wins when set; otherwise the free-fall time
    over the endpoint distance, ``sqrt(2 d / g)``. Either way the result is
    clamped to ``[MIN_FLIGHT_TIME, MAX_FLIGHT_TIME]``, which keeps coincident
    endpoints and vanishing gravity finite.
    """
    if params.total_time is not None and math.isfinite(params.total_time):
        estimate = params.total_time
    else:
        ppm = max(params.pixels_per_meter, defaults.MIN_SPEED)
        distance = math.hypot(target[0] - source[0], target[1] - source[1]) / ppm
        gravity = max(params.gravity, defaults.MIN_GRAVITY)
        estimate = math.sqrt(2.0 * distance / gravity)
    return min(max(estimate, defaults.MIN_FLIGHT_TIME), defaults.MAX_FLIGHT_TIME)


def action(path: Path, params: MechanicsParams, duration: float | None = None) -> CostResult:
    """Discretized Lagrangian action of a uniformly time-stamped path.

    S = sum_k [ 1/2 m |v_k|^2 - m g ybar_k ] dt, with v_k the finite-difference
    velocity of segment k, ybar_k its midpoint height above ``ground_y`` and
    dt = T / N. Positions are converted from scene units to metres with
    ``pixels_per_meter``; scene y grows downward so heights are flipped.
    """
    n = path.num_segments
    if n == 0:
        return CostResult(0.0, CostKind.ACTION)
    if duration is None:
        duration = flight_time_estimate(path.source, path.target, params)
    dt = max(duration, defaults.MIN_FLIGHT_TIME) / n
    ppm = max(params.pixels_per_meter, defaults.MIN_SPEED)

    x = path.points[:, 0] / ppm
    h = (params.ground_y - path.points[:, 1]) / ppm
    vx = np.diff(x) / dt
    vy = np.diff(h) / dt
    h_mid = 0.5 * (h[:-1] + h[1:])

    kinetic = 0.5 * params.mass * (vx * vx + vy * vy)
    potential = params.mass * params.gravity * h_mid
    return CostResult(float(((kinetic - potential) * dt).sum()), CostKind.ACTION)


# ---------------------------------------------------------------------------
# Optical path (interference)
# ---------------------------------------------------------------------------

def optical_length(path: Path) -> CostResult:
    return CostResult(path.length(), CostKind.OPTICAL_LENGTH)


def optical_phase(path: Path, params: InterferenceParams) -> float:
    """Phase 2 pi L / lambda accumulated along *path*."""
    wavelength = max(params.wavelength_scaled, defaults.SPREAD_EPSILON)
    return 2.0 * math.pi * path.length() / wavelength
