"""
Cost-to-phase mapping and phasor summation.

Every path contributes a unit phasor ``e^{i phi}`` with ``phi`` derived from
its cost; the sum of those phasors is what the demos draw as the resulting
amplitude. Paths near a stationary cost share nearly the same phase and add
up, paths far from it spin around the circle and cancel.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

import numpy as np

from leastpath import defaults
from leastpath.types import (
    InterferenceParams,
    InterferenceResult,
    PhaseScaling,
    PhasorSample,
    Point,
)

logger = logging.getLogger(__name__)


def safe_phase_scale(scale: float) -> float:
    """Return *scale*, or the constant fallback if it cannot be divided by."""
    if not math.isfinite(scale) or scale <= defaults.SPREAD_EPSILON:
        logger.warning("Phase scale %r unusable, falling back to %s", scale, defaults.FALLBACK_PHASE_SCALE)
        return defaults.FALLBACK_PHASE_SCALE
    return scale


def map_phases(
    costs: Sequence[float],
    phase_scale: float,
    *,
    reference: float | None = None,
    scaling: PhaseScaling = PhaseScaling.FIXED,
    span: float = defaults.NORMALIZED_PHASE_SPAN,
) -> np.ndarray:
    """Map costs to phase angles.

    Args:
        costs: One cost per path
        phase_scale: Divisor for FIXED scaling (hbar_eff or a wavelength constant)
        reference: Cost that maps to phase 0 (defaults to the minimum cost)
        scaling: FIXED divides by *phase_scale*; NORMALIZED stretches the cost
            spread over *span* radians. A zero spread maps every phase to 0.
        span: Angular range used by NORMALIZED scaling

    Returns:
        Array of phases (radians), same order as *costs*
    """
    c = np.asarray(costs, dtype=np.float64)
    if c.size == 0:
        return np.empty(0)
    ref = float(c.min()) if reference is None else float(reference)

    if PhaseScaling(scaling) is PhaseScaling.NORMALIZED:
        spread = float(c.max() - c.min())
        scale = spread / span if spread > defaults.SPREAD_EPSILON else defaults.FALLBACK_PHASE_SCALE
    else:
        scale = safe_phase_scale(phase_scale)
    return (c - ref) / scale


def phasor(phase: float) -> PhasorSample:
    return PhasorSample(phase=float(phase))


def aggregate(phasors: Iterable[PhasorSample]) -> InterferenceResult:
    """Sum unit phasors; an empty set gives the zero result."""
    phases = np.fromiter((p.phase for p in phasors), dtype=np.float64)
    if phases.size == 0:
        return InterferenceResult()
    steps = np.column_stack([np.cos(phases), np.sin(phases)])
    chain = np.vstack([np.zeros((1, 2)), np.cumsum(steps, axis=0)])
    re, im = chain[-1]
    return InterferenceResult(re=float(re), im=float(im), count=int(phases.size), chain=chain)


def relative_costs(costs: Sequence[float]) -> np.ndarray:
    """Rank costs into ``[0, 1]`` between the set's minimum and maximum."""
    c = np.asarray(costs, dtype=np.float64)
    if c.size == 0:
        return np.empty(0)
    spread = float(c.max() - c.min())
    if spread <= defaults.SPREAD_EPSILON:
        return np.zeros_like(c)
    return (c - c.min()) / spread


def two_path_intensity(phase_a, phase_b):
    """``|e^{i phase_a} + e^{i phase_b}|^2``; accepts scalars or arrays."""
    re = np.cos(phase_a) + np.cos(phase_b)
    im = np.sin(phase_a) + np.sin(phase_b)
    return re * re + im * im


def screen_pattern(
    source: Point,
    slit_a: Point,
    slit_b: Point,
    params: InterferenceParams,
) -> tuple[np.ndarray, np.ndarray]:
    """Two-slit intensity along the detection screen.

    Returns:
        (screen_y, intensity) arrays; empty for a malformed screen range
    """
    lo, hi = params.screen_range
    if params.screen_step <= 0 or not lo < hi:
        return np.empty(0), np.empty(0)
    ys = np.arange(lo, hi, params.screen_step, dtype=np.float64)
    k = 2.0 * math.pi / max(params.wavelength_scaled, defaults.SPREAD_EPSILON)

    def leg_lengths(slit: Point) -> np.ndarray:
        first = math.hypot(slit[0] - source[0], slit[1] - source[1])
        return first + np.hypot(params.screen_x - slit[0], ys - slit[1])

    intensity = two_path_intensity(k * leg_lengths(slit_a), k * leg_lengths(slit_b))
    return ys, intensity
