"""
Refraction domain (Fermat's principle of least time).

Light travels from a source in medium 1 to a target in medium 2, crossing the
horizontal boundary once. Every crossing point on a dense grid is a
candidate; the least-time crossing satisfies Snell's law.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from leastpath import defaults
from leastpath.extremal import solve_refraction
from leastpath.functionals import (
    refraction_angles,
    snell_residual,
    travel_time,
    travel_time_at,
    travel_time_profile,
)
from leastpath.phasor import map_phases
from leastpath.sampling import sample_two_segment
from leastpath.types import CostKind, RefractionParams

from .base import DomainDefinition, DomainOutput, score_extremal, score_paths

if TYPE_CHECKING:
    from leastpath.app.core import SimulationState


def refraction_phase_scale(params: RefractionParams) -> float:
    """Travel time per radian of a vacuum wave, so phase = 2 pi (optical path) / lambda."""
    return params.wavelength / (2.0 * math.pi * params.speed_of_light)


def _angle_readouts(prefix: str, x: float, state: "SimulationState") -> dict[str, float]:
    params = state.refraction
    theta1, theta2 = refraction_angles(x, state.source, state.target, params.boundary_y)
    residual = snell_residual(x, state.source, state.target, params)
    return {
        f"{prefix}x": float(x),
        f"{prefix}time": float(travel_time_at(x, state.source, state.target, params)),
        f"{prefix}theta1_deg": math.degrees(theta1),
        f"{prefix}theta2_deg": math.degrees(theta2),
        f"{prefix}snell_residual": residual,
        f"{prefix}snell_satisfied": float(abs(residual) < defaults.SNELL_TOLERANCE),
    }


def run_refraction(state: "SimulationState") -> DomainOutput:
    params = state.refraction
    paths = sample_two_segment(
        state.source, state.target, params.boundary_y, params.x_range, params.step, state.bounds,
    )
    costs = [travel_time(p, params).value for p in paths]
    result = solve_refraction(state.source, state.target, params, bounds=state.bounds)

    scale = refraction_phase_scale(params)
    reference = result.cost.value if result is not None else None
    phases = map_phases(costs, scale, reference=reference)
    output = DomainOutput(candidates=score_paths(paths, costs, phases, CostKind.TRAVEL_TIME))

    output.diagnostics["speed_ratio"] = params.v1 / max(params.v2, defaults.MIN_SPEED)
    output.diagnostics["n1"] = params.n1
    output.diagnostics["n2"] = params.n2
    if result is not None:
        output.extremal = score_extremal(result, 0.0, costs)
        output.diagnostics.update(_angle_readouts("optimal_", result.details["x"], state))
        theta1, theta2 = result.details["theta1"], result.details["theta2"]
        if math.sin(theta2) > 0:
            output.diagnostics["sine_ratio"] = math.sin(theta1) / math.sin(theta2)

    # The renderer's draggable crossing point defaults to the optimum
    current_x = state.current_x
    if current_x is None and result is not None:
        current_x = result.details["x"]
    if current_x is not None:
        output.diagnostics.update(_angle_readouts("current_", current_x, state))

    xs, times = travel_time_profile(state.source, state.target, params)
    output.profiles["travel_time_x"] = xs
    output.profiles["travel_time"] = times
    return output


REFRACTION_DOMAIN = DomainDefinition(
    name="refraction",
    display_name="Least Time (Refraction)",
    description="Light crossing between two media takes the path of least travel time.",
    cost_kind=CostKind.TRAVEL_TIME,
    run=run_refraction,
)
