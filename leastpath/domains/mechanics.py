"""
Mechanics domain (Hamilton's principle of least action).

A ball thrown from a shooter to a hoop in a fixed flight time. Candidate
trajectories are cubic curves through both endpoints; the classical parabola
is solved in closed form and carries phase 0.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from leastpath.extremal import solve_mechanics
from leastpath.functionals import action
from leastpath.phasor import map_phases
from leastpath.sampling import make_rng, sample_curve_family
from leastpath.types import CostKind, SamplingMode

from .base import DomainDefinition, DomainOutput, score_extremal, score_paths

if TYPE_CHECKING:
    from leastpath.app.core import SimulationState


def run_mechanics(state: "SimulationState") -> DomainOutput:
    params = state.mechanics
    result = solve_mechanics(state.source, state.target, params)
    duration = result.details["flight_time"]

    mode = SamplingMode(state.mode)
    paths = sample_curve_family(
        state.source,
        state.target,
        mode,
        state.count,
        reference=result.path,
        rng=make_rng(state.seed),
        num_segments=params.num_segments,
        bounds=state.bounds,
        sigma_min=params.sigma_min,
        sigma_step=params.sigma_step,
    )
    costs = [action(p, params, duration).value for p in paths]

    # Map candidates and the classical path together so NORMALIZED scaling
    # sees the full spread
    all_phases = map_phases(
        costs + [result.cost.value],
        params.hbar_eff,
        reference=result.cost.value,
        scaling=params.phase_scaling,
    )
    phases, classical_phase = all_phases[:-1], float(all_phases[-1])

    output = DomainOutput(
        candidates=score_paths(paths, costs, phases, CostKind.ACTION),
        extremal=score_extremal(result, classical_phase, costs),
    )
    if paths and params.include_extremal_phasor:
        output.extra_phasors.append(output.extremal.phasor)

    all_actions = costs + [result.cost.value]
    output.diagnostics.update({
        "optimal_action": result.cost.value,
        "flight_time": duration,
        "vx0": result.details["vx0"],
        "vy0": result.details["vy0"],
        "launch_speed": result.details["launch_speed"],
        "launch_angle_deg": math.degrees(result.details["launch_angle"]),
        "action_min": min(all_actions),
        "action_max": max(all_actions),
        "hbar_eff": params.hbar_eff,
    })

    if mode is SamplingMode.NEIGHBORHOOD and paths:
        # Generation order: sigma grows with index
        output.profiles["deviation"] = np.array([p.deviation for p in paths], dtype=np.float64)
        output.profiles["deviation_action"] = np.array(costs, dtype=np.float64)
        output.profiles["deviation_phase"] = np.asarray(phases, dtype=np.float64)
    return output


MECHANICS_DOMAIN = DomainDefinition(
    name="mechanics",
    display_name="Least Action (Projectile)",
    description="Among all trajectories with fixed endpoints and duration, the parabola minimizes the action.",
    cost_kind=CostKind.ACTION,
    run=run_mechanics,
    sampling_modes=[SamplingMode.SPRAY, SamplingMode.NEIGHBORHOOD, SamplingMode.GRID],
)
