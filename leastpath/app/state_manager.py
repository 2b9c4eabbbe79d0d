"""Centralized state management for simulation parameters.

StateManager mediates all parameter mutations, providing:
- A single update path that always ends in a full recomputation
- Generation numbering with last-write-wins publishing (a recomputation
  overtaken by a newer update is discarded, never blended)
- Built-in debouncing of the recomputation for slider drags
- Per-key subscriber notifications and snapshot subscribers (outside the lock)
- A per-frame refresh flag for the host's animation loop
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

from leastpath import defaults
from leastpath.app.core import DEFAULT_ENDPOINTS, SimulationState
from leastpath.engine import recompute as engine_recompute
from leastpath.types import Domain, EngineSnapshot, PhaseScaling, SamplingMode


class StateKey(enum.Enum):
    """Keys for managed simulation parameters."""

    # SimulationState-level
    DOMAIN = "domain"
    SOURCE = "source"
    TARGET = "target"
    SAMPLING_MODE = "sampling_mode"
    SAMPLE_COUNT = "sample_count"
    SEED = "seed"
    CURRENT_X = "current_x"
    BOUNDS = "bounds"

    # RefractionParams
    V1 = "v1"
    V2 = "v2"
    REFRACTIVE_INDEX = "refractive_index"
    BOUNDARY_Y = "boundary_y"
    X_RANGE = "x_range"
    GRID_STEP = "grid_step"
    REFINE = "refine"

    # MechanicsParams
    MASS = "mass"
    GRAVITY = "gravity"
    TOTAL_TIME = "total_time"
    HBAR_EFF = "hbar_eff"
    NUM_SEGMENTS = "num_segments"
    PHASE_SCALING = "phase_scaling"

    # InterferenceParams
    WAVELENGTH = "wavelength"
    SLIT_SEPARATION = "slit_separation"


@dataclass
class _PendingEntry:
    """A deferred recomputation for a debounced update.

    State is mutated and subscribers notified immediately when ``update()``
    is called with ``debounce > 0``; only the recomputation waits.
    """

    timestamp: float
    delay: float


class StateManager:
    """Centralized mutation, recomputation and notification hub.

    All parameter changes flow through ``update()``. State is always mutated
    immediately; the recomputation runs right away, or for debounced updates
    once ``poll_debounce()`` finds the delay has elapsed.

    Recomputations run outside the lock on a copy of the state. Every
    mutation bumps the generation counter, and a finished recomputation is
    only published if no mutation happened while it ran.
    """

    # Maps StateKey -> SimulationState attribute name
    _STATE_MAP: dict[StateKey, str] = {
        StateKey.SOURCE: "source",
        StateKey.TARGET: "target",
        StateKey.SAMPLING_MODE: "mode",
        StateKey.SAMPLE_COUNT: "count",
        StateKey.SEED: "seed",
        StateKey.CURRENT_X: "current_x",
        StateKey.BOUNDS: "bounds",
    }

    # Maps StateKey -> (parameter block, field) on the frozen parameter dataclasses
    _PARAM_MAP: dict[StateKey, tuple[str, str]] = {
        StateKey.V1: ("refraction", "v1"),
        StateKey.V2: ("refraction", "v2"),
        StateKey.BOUNDARY_Y: ("refraction", "boundary_y"),
        StateKey.X_RANGE: ("refraction", "x_range"),
        StateKey.GRID_STEP: ("refraction", "step"),
        StateKey.REFINE: ("refraction", "refine"),
        StateKey.MASS: ("mechanics", "mass"),
        StateKey.GRAVITY: ("mechanics", "gravity"),
        StateKey.TOTAL_TIME: ("mechanics", "total_time"),
        StateKey.HBAR_EFF: ("mechanics", "hbar_eff"),
        StateKey.NUM_SEGMENTS: ("mechanics", "num_segments"),
        StateKey.PHASE_SCALING: ("mechanics", "phase_scaling"),
        StateKey.WAVELENGTH: ("interference", "wavelength"),
        StateKey.SLIT_SEPARATION: ("interference", "slit_separation"),
    }

    # Values coerced to their enum type on the way in
    _ENUM_KEYS: dict[StateKey, type[enum.Enum]] = {
        StateKey.DOMAIN: Domain,
        StateKey.SAMPLING_MODE: SamplingMode,
        StateKey.PHASE_SCALING: PhaseScaling,
    }

    _POINT_KEYS: frozenset[StateKey] = frozenset({StateKey.SOURCE, StateKey.TARGET})

    def __init__(
        self,
        state: SimulationState,
        lock: Optional[threading.RLock] = None,
        *,
        _clock: Callable[[], float] = time.monotonic,
        _recompute: Callable[..., EngineSnapshot] = engine_recompute,
    ) -> None:
        self._state = state
        self._lock = lock if lock is not None else threading.RLock()
        self._clock = _clock
        self._recompute = _recompute

        self._subscribers: dict[StateKey, list[Callable]] = {}
        self._snapshot_subscribers: list[Callable[[EngineSnapshot], None]] = []
        self._pending: dict[StateKey, _PendingEntry] = {}

        self._generation: int = 0
        self._snapshot: Optional[EngineSnapshot] = None
        self._needs_refresh: bool = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def generation(self) -> int:
        return self._generation

    def copy_state(self) -> SimulationState:
        """Consistent copy of the current parameters."""
        with self._lock:
            return self._state.copy()

    def update(
        self,
        key: StateKey,
        value: Any,
        *,
        debounce: float = 0.0,
    ) -> Optional[EngineSnapshot]:
        """Request a parameter change.

        Args:
            key: Which parameter to change.
            value: New value (assumed already validated by the controller).
            debounce: Seconds to defer the recomputation.  ``<= 0`` means
                immediate.  State is always mutated right away regardless
                of debounce.

        Returns:
            The published snapshot for an immediate update, else None.
        """
        return self.update_many({key: value}, debounce=debounce)

    def update_many(
        self,
        changes: dict[StateKey, Any],
        *,
        debounce: float = 0.0,
    ) -> Optional[EngineSnapshot]:
        """Apply several changes as one event (one generation, one recomputation)."""
        changes = {StateKey(key): value for key, value in changes.items()}
        with self._lock:
            for key, value in changes.items():
                self._apply_update(key, value)
            self._generation += 1
            if debounce > 0:
                now = self._clock()
                for key in changes:
                    self._pending[key] = _PendingEntry(timestamp=now, delay=debounce)

        for key, value in changes.items():
            self._notify(key, value)

        if debounce > 0:
            return None
        return self.recompute()

    def recompute(self) -> Optional[EngineSnapshot]:
        """Recompute from the current state and publish unless overtaken.

        Returns:
            The new snapshot, or None if a newer update arrived while it ran.
        """
        with self._lock:
            self._pending.clear()
            generation = self._generation
            state = self._state.copy()

        snapshot = self._recompute(state, generation=generation)

        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Discarding snapshot for generation %d (latest is %d)",
                    generation, self._generation,
                )
                return None
            self._snapshot = snapshot
            self._needs_refresh = True

        self._notify_snapshot(snapshot)
        return snapshot

    def current_snapshot(self) -> EngineSnapshot:
        """Latest published snapshot, computing the first one on demand.

        Animation ticks call this every frame; it never mutates parameters.
        """
        snapshot = self._snapshot
        while snapshot is None:
            snapshot = self.recompute() or self._snapshot
        return snapshot

    def poll_debounce(self) -> Optional[EngineSnapshot]:
        """Recompute if any debounced entry's delay has elapsed."""
        with self._lock:
            if not self._pending:
                return None
            now = self._clock()
            ready = any(
                now - entry.timestamp >= entry.delay for entry in self._pending.values()
            )
        if not ready:
            return None
        return self.recompute()

    def flush_pending(self) -> Optional[EngineSnapshot]:
        """Run any deferred recomputation immediately."""
        with self._lock:
            if not self._pending:
                return None
        return self.recompute()

    def has_pending(self) -> bool:
        return bool(self._pending)

    def subscribe(self, key: StateKey, callback: Callable) -> None:
        """Register *callback* for notifications when *key* changes.

        Callback signature: ``(key, value)``.
        """
        self._subscribers.setdefault(key, []).append(callback)

    def unsubscribe(self, key: StateKey, callback: Callable) -> None:
        """Remove a previously registered callback."""
        callbacks = self._subscribers.get(key)
        if callbacks:
            try:
                callbacks.remove(callback)
            except ValueError:
                pass

    def subscribe_snapshot(self, callback: Callable[[EngineSnapshot], None]) -> None:
        """Register *callback* to receive every published snapshot."""
        self._snapshot_subscribers.append(callback)

    def needs_refresh(self) -> bool:
        """Return whether a new snapshot was published since the last consume."""
        return self._needs_refresh

    def consume_refresh(self) -> Optional[EngineSnapshot]:
        """Reset the refresh flag and return the snapshot to display."""
        self._needs_refresh = False
        return self._snapshot

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply_update(self, key: StateKey, value: Any) -> None:
        """Mutate state; caller holds the lock."""
        enum_type = self._ENUM_KEYS.get(key)
        if enum_type is not None:
            value = enum_type(value)
        if key in self._POINT_KEYS:
            value = (float(value[0]), float(value[1]))

        if key is StateKey.DOMAIN:
            # Switching demo loads that demo's endpoints
            self._state.domain = value
            self._state.source, self._state.target = DEFAULT_ENDPOINTS[value]
        elif key is StateKey.REFRACTIVE_INDEX:
            params = self._state.refraction
            n2 = max(float(value), defaults.MIN_SPEED)
            self._state.refraction = replace(params, v2=params.speed_of_light / n2)
        elif key in self._STATE_MAP:
            setattr(self._state, self._STATE_MAP[key], value)
        elif key in self._PARAM_MAP:
            block, attr = self._PARAM_MAP[key]
            setattr(self._state, block, replace(getattr(self._state, block), **{attr: value}))
        else:
            raise ValueError(f"No SimulationState mapping for {key!r}")

    def _notify(self, key: StateKey, value: Any) -> None:
        """Call all subscribers registered for *key*, isolating exceptions."""
        callbacks = self._subscribers.get(key)
        if not callbacks:
            return
        for cb in list(callbacks):
            try:
                cb(key, value)
            except Exception:
                logger.warning(
                    "Subscriber %r raised for %s", cb, key, exc_info=True,
                )

    def _notify_snapshot(self, snapshot: EngineSnapshot) -> None:
        for cb in list(self._snapshot_subscribers):
            try:
                cb(snapshot)
            except Exception:
                logger.warning(
                    "Snapshot subscriber %r raised", cb, exc_info=True,
                )
