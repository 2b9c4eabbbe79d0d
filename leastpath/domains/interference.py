"""
Interference domain (double slit, sum over two paths).

The only paths from source to detector go through one of the two slits; their
optical lengths set the phases, and the detector intensity is the squared
magnitude of the two-phasor sum.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from leastpath import defaults
from leastpath.functionals import optical_length
from leastpath.phasor import map_phases, screen_pattern, two_path_intensity
from leastpath.sampling import sample_two_fixed_paths, slit_positions
from leastpath.types import CostKind, InterferenceParams

from .base import DomainDefinition, DomainOutput, score_paths

if TYPE_CHECKING:
    from leastpath.app.core import SimulationState


def interference_phase_scale(params: InterferenceParams) -> float:
    """Optical length per radian: phase = 2 pi L / lambda."""
    return params.wavelength_scaled / (2.0 * math.pi)


def run_interference(state: "SimulationState") -> DomainOutput:
    params = state.interference
    slit_a, slit_b = slit_positions(params.center_y, params.barrier_x, params.slit_separation)
    paths = sample_two_fixed_paths(state.source, state.target, slit_a, slit_b, state.bounds)
    costs = [optical_length(p).value for p in paths]
    phases = map_phases(costs, interference_phase_scale(params), reference=0.0)

    output = DomainOutput(candidates=score_paths(paths, costs, phases, CostKind.OPTICAL_LENGTH))

    phase_a, phase_b = float(phases[0]), float(phases[1])
    output.diagnostics.update({
        "phase_a": phase_a,
        "phase_b": phase_b,
        "delta_phase": math.remainder(phase_a - phase_b, 2.0 * math.pi),
        "path_difference": abs(costs[0] - costs[1]),
        "intensity": float(two_path_intensity(phase_a, phase_b)),
        "detector_offset_mm": (state.target[1] - params.center_y) * defaults.DETECTOR_MM_PER_UNIT,
        "slit_a_y": paths[0].via[1],
        "slit_b_y": paths[1].via[1],
    })

    ys, intensity = screen_pattern(state.source, paths[0].via, paths[1].via, params)
    output.profiles["screen_y"] = ys
    output.profiles["screen_intensity"] = intensity
    return output


INTERFERENCE_DOMAIN = DomainDefinition(
    name="interference",
    display_name="Sum Over Paths (Double Slit)",
    description="Two equal-weight phasors through the slits interfere at the detector.",
    cost_kind=CostKind.OPTICAL_LENGTH,
    run=run_interference,
)
