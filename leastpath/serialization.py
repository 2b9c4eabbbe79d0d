"""Snapshot export - plain JSON-compatible views of engine output."""

from __future__ import annotations

import enum
import hashlib
import json
from dataclasses import asdict
from typing import Any

import numpy as np

from leastpath.app.core import SimulationState
from leastpath.types import EngineSnapshot, InterferenceResult, ScoredPath

SCHEMA_VERSION = "1.0"


def state_to_dict(state: SimulationState) -> dict[str, Any]:
    """Flatten a SimulationState into JSON-compatible data."""
    return _jsonable(asdict(state))


def compute_state_fingerprint(state: SimulationState) -> str:
    """Compute hash of every property that affects recomputation.

    Returns:
        32-character MD5 hex string
    """
    combined = json.dumps(state_to_dict(state), sort_keys=True, separators=(",", ":"))
    return hashlib.md5(combined.encode()).hexdigest()


def snapshot_to_dict(snapshot: EngineSnapshot, include_candidates: bool = True) -> dict[str, Any]:
    """Convert a snapshot for a renderer living outside the Python process.

    Args:
        snapshot: Engine output
        include_candidates: Drop the (possibly large) candidate list when False

    Returns:
        Dict of lists, floats and strings only
    """
    data: dict[str, Any] = {
        "schema_version": SCHEMA_VERSION,
        "domain": snapshot.domain.value,
        "generation": snapshot.generation,
        "fingerprint": snapshot.fingerprint,
        "extremal": _scored_path_to_dict(snapshot.extremal) if snapshot.extremal is not None else None,
        "interference": _interference_to_dict(snapshot.interference),
        "diagnostics": {k: float(v) for k, v in snapshot.diagnostics.items()},
        "profiles": {k: v.tolist() for k, v in snapshot.profiles.items()},
        "candidate_count": len(snapshot.candidates),
    }
    if include_candidates:
        data["candidates"] = [_scored_path_to_dict(s) for s in snapshot.candidates]
    return data


def _scored_path_to_dict(scored: ScoredPath) -> dict[str, Any]:
    path = scored.path
    data: dict[str, Any] = {
        "points": path.points.tolist(),
        "cost": scored.cost.value,
        "cost_kind": scored.cost.kind.value,
        "phase": scored.phasor.phase,
        "relative_cost": scored.relative_cost,
    }
    if path.controls is not None:
        data["controls"] = path.controls.tolist()
    if path.deviation is not None:
        data["deviation"] = path.deviation
    if path.grid_index is not None:
        data["grid_index"] = list(path.grid_index)
    if path.via is not None:
        data["via"] = list(path.via)
    return data


def _interference_to_dict(result: InterferenceResult) -> dict[str, Any]:
    return {
        "re": result.re,
        "im": result.im,
        "count": result.count,
        "magnitude": result.magnitude,
        "angle": result.angle,
        "intensity": result.intensity,
        "chain": result.chain.tolist(),
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value
