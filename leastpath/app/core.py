"""Toolkit-neutral simulation state for the leastpath demos."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from leastpath import defaults
from leastpath.types import (
    Domain,
    InterferenceParams,
    MechanicsParams,
    Point,
    RefractionParams,
    SamplingMode,
    SceneBounds,
)

DEFAULT_ENDPOINTS: dict[Domain, tuple[Point, Point]] = {
    Domain.REFRACTION: (defaults.DEFAULT_REFRACTION_SOURCE, defaults.DEFAULT_REFRACTION_TARGET),
    Domain.MECHANICS: (defaults.DEFAULT_MECHANICS_SOURCE, defaults.DEFAULT_MECHANICS_TARGET),
    Domain.INTERFERENCE: (
        defaults.DEFAULT_INTERFERENCE_SOURCE,
        (defaults.DEFAULT_SCREEN_X, defaults.DEFAULT_SLIT_CENTER_Y),
    ),
}


@dataclass
class SimulationState:
    """Current parameters of one demo.

    Mutated only through StateManager.update(); every recomputation reads a
    copy, so the engine never sees a half-applied change.

    Attributes:
        domain: Which demo this state drives
        source, target: Pinned endpoints (for the double slit, target is the
            detector point on the screen)
        mode: Curve family strategy (mechanics only)
        count: Number of sampled candidates (mechanics only)
        seed: Seed of the generator built for each recomputation
        current_x: User-dragged boundary crossing point (refraction only;
            None follows the optimum)
    """

    domain: Domain = Domain.REFRACTION
    source: Point = defaults.DEFAULT_REFRACTION_SOURCE
    target: Point = defaults.DEFAULT_REFRACTION_TARGET
    mode: SamplingMode = SamplingMode.SPRAY
    count: int = defaults.DEFAULT_NUM_PATHS
    seed: int | None = defaults.DEFAULT_SEED
    refraction: RefractionParams = field(default_factory=RefractionParams)
    mechanics: MechanicsParams = field(default_factory=MechanicsParams)
    interference: InterferenceParams = field(default_factory=InterferenceParams)
    bounds: SceneBounds = field(default_factory=SceneBounds)
    current_x: float | None = None

    @classmethod
    def for_domain(cls, domain: Domain | str, **overrides) -> SimulationState:
        """State preloaded with the demo's default endpoints."""
        domain = Domain(domain)
        source, target = DEFAULT_ENDPOINTS[domain]
        values = {"domain": domain, "source": source, "target": target}
        values.update(overrides)
        return cls(**values)

    def copy(self) -> SimulationState:
        # Parameter blocks are frozen and points are tuples, so a shallow copy is independent
        return replace(self)
