"""Pure recomputation entry point - no UI or scheduling dependencies."""

from __future__ import annotations

import logging
import time

from leastpath.app.core import SimulationState
from leastpath.domains.registry import DomainRegistry
from leastpath.phasor import aggregate
from leastpath.serialization import compute_state_fingerprint
from leastpath.types import EngineSnapshot, SamplingMode

logger = logging.getLogger(__name__)


def recompute(state: SimulationState, *, generation: int = 0) -> EngineSnapshot:
    """Run the full pipeline for *state* and return a fresh snapshot.

    Sampling, evaluation, extremal search and aggregation all run to
    completion here; nothing from earlier runs is reused. The state is only
    read.

    Args:
        state: Parameters to compute from
        generation: Stamp copied into the snapshot so callers can order results

    Returns:
        Read-only EngineSnapshot with candidates sorted by cost ascending
    """
    t_start = time.time()
    definition = DomainRegistry.get(state.domain)
    if definition.sampling_modes and SamplingMode(state.mode) not in definition.sampling_modes:
        raise ValueError(
            f"Sampling mode {SamplingMode(state.mode).value!r} not supported by {definition.name}. "
            f"Available: {[m.value for m in definition.sampling_modes]}"
        )
    if not (state.bounds.contains(state.source) and state.bounds.contains(state.target)):
        logger.debug("Endpoints %s -> %s lie outside the scene bounds", state.source, state.target)
    output = definition.run(state)

    candidates = sorted(output.candidates, key=lambda s: s.cost.value)
    phasors = [s.phasor for s in candidates] + list(output.extra_phasors)

    snapshot = EngineSnapshot(
        domain=state.domain,
        candidates=tuple(candidates),
        extremal=output.extremal,
        interference=aggregate(phasors),
        diagnostics=output.diagnostics,
        profiles=output.profiles,
        generation=generation,
        fingerprint=compute_state_fingerprint(state),
    )
    logger.debug(
        "Recomputed %s: %d candidates, |sum|=%.3f in %.1f ms",
        definition.name,
        len(candidates),
        snapshot.interference.magnitude,
        (time.time() - t_start) * 1000.0,
    )
    return snapshot
