"""
Base classes for domain definitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Sequence

import numpy as np

from leastpath.phasor import phasor, relative_costs
from leastpath.types import (
    CostKind,
    CostResult,
    ExtremalResult,
    Path,
    PhasorSample,
    SamplingMode,
    ScoredPath,
)

if TYPE_CHECKING:
    from leastpath.app.core import SimulationState


@dataclass
class DomainOutput:
    """Everything one domain pass produces before aggregation.

    Attributes:
        candidates: Scored candidate paths (any order; the engine sorts them)
        extremal: Highlighted least-cost path, None when not applicable
        extra_phasors: Phasors summed alongside the candidates' (e.g. the
            classical path in the mechanics demo)
        diagnostics: Finite scalar read-outs for the renderer
        profiles: Named 1-D arrays (curves, screen patterns)
    """
    candidates: list[ScoredPath] = field(default_factory=list)
    extremal: ScoredPath | None = None
    extra_phasors: list[PhasorSample] = field(default_factory=list)
    diagnostics: dict[str, float] = field(default_factory=dict)
    profiles: dict[str, np.ndarray] = field(default_factory=dict)


@dataclass
class DomainDefinition:
    """
    Definition of one demo domain for the engine.

    Each domain samples its candidates, scores them, finds its extremal path
    and maps costs to phases; aggregation and sorting are shared.
    """
    # Basic metadata
    name: str
    display_name: str
    description: str
    cost_kind: CostKind

    run: Callable[["SimulationState"], DomainOutput]
    """Run sampling, evaluation, extremal search and phase mapping for a state."""

    # Curve-family strategies the domain honours (empty = sampling is fixed)
    sampling_modes: list[SamplingMode] = field(default_factory=list)


def score_paths(paths: Sequence[Path], costs: Sequence[float], phases: Sequence[float], kind: CostKind) -> list[ScoredPath]:
    """Attach costs, phasors and relative cost ranks to *paths*."""
    ranks = relative_costs(costs)
    return [
        ScoredPath(path=p, cost=CostResult(float(c), kind), phasor=phasor(ph), relative_cost=float(r))
        for p, c, ph, r in zip(paths, costs, phases, ranks)
    ]


def score_extremal(result: ExtremalResult, phase: float, costs: Sequence[float]) -> ScoredPath:
    """Score the extremal path against the spread of the candidate set."""
    c = np.asarray(costs, dtype=np.float64)
    rank = 0.0
    if c.size:
        spread = float(c.max() - c.min())
        if spread > 0:
            rank = float(np.clip((result.cost.value - c.min()) / spread, 0.0, 1.0))
    return ScoredPath(path=result.path, cost=result.cost, phasor=phasor(phase), relative_cost=rank)
