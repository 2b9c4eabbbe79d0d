"""Core data types for leastpath - framework-agnostic."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

import numpy as np

from leastpath import defaults

Point = tuple[float, float]


class Domain(enum.Enum):
    """The three demos sharing the engine."""

    REFRACTION = "refraction"
    MECHANICS = "mechanics"
    INTERFERENCE = "interference"


class SamplingMode(enum.Enum):
    """Curve family strategies for the mechanics domain."""

    SPRAY = "spray"
    NEIGHBORHOOD = "neighborhood"
    GRID = "grid"


class CostKind(enum.Enum):
    TRAVEL_TIME = "travel_time"
    ACTION = "action"
    OPTICAL_LENGTH = "optical_length"


class PhaseScaling(enum.Enum):
    """How a cost spread is turned into phase angles.

    FIXED divides by a constant scale (hbar_eff, or a wavelength-derived
    constant). NORMALIZED stretches the cost spread over a fixed angular span,
    which keeps the phasor diagram readable whatever the magnitude of the
    actions.
    """

    FIXED = "fixed"
    NORMALIZED = "normalized"


def frozen_array(values, shape_tail: tuple[int, ...] | None = None) -> np.ndarray:
    """Copy *values* into a read-only float64 array."""
    arr = np.array(values, dtype=np.float64, copy=True)
    if shape_tail is not None and arr.size == 0:
        arr = arr.reshape((0,) + shape_tail)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True)
class SceneBounds:
    """Axis-aligned region generated coordinates are clamped into."""

    x_min: float = 0.0
    y_min: float = 0.0
    x_max: float = defaults.DEFAULT_SCENE_SIZE[0]
    y_max: float = defaults.DEFAULT_SCENE_SIZE[1]

    def contains(self, point: Point) -> bool:
        x, y = point
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max

    def clamp(self, points: np.ndarray) -> np.ndarray:
        """Return a clamped copy of an ``(..., 2)`` coordinate array."""
        pts = np.array(points, dtype=np.float64, copy=True)
        pts[..., 0] = np.clip(pts[..., 0], self.x_min, self.x_max)
        pts[..., 1] = np.clip(pts[..., 1], self.y_min, self.y_max)
        return pts


@dataclass(frozen=True, eq=False)
class Path:
    """Ordered samples between two pinned endpoints.

    Attributes:
        points: Read-only ``(N+1, 2)`` array; first and last rows are the endpoints
        controls: Cubic control points ``(2, 2)`` for curve-family paths
        deviation: Noise sigma used to perturb the reference curve (neighborhood mode)
        grid_index: ``(i, j)`` position in a grid sweep
        via: Interior point the path is bent through (boundary crossing or slit)
    """

    points: np.ndarray
    controls: np.ndarray | None = None
    deviation: float | None = None
    grid_index: tuple[int, int] | None = None
    via: Point | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", frozen_array(self.points, (2,)))
        if self.controls is not None:
            object.__setattr__(self, "controls", frozen_array(self.controls))

    @property
    def source(self) -> Point:
        return float(self.points[0, 0]), float(self.points[0, 1])

    @property
    def target(self) -> Point:
        return float(self.points[-1, 0]), float(self.points[-1, 1])

    @property
    def num_segments(self) -> int:
        return max(len(self.points) - 1, 0)

    def segment_lengths(self) -> np.ndarray:
        return np.hypot(*np.diff(self.points, axis=0).T)

    def length(self) -> float:
        return float(self.segment_lengths().sum())

    def point_at(self, fraction: float) -> Point:
        """Position after *fraction* of the path's duration (0 = source, 1 = target).

        Samples are uniform in the curve parameter, so this is also the
        position at that fraction of the flight time.
        """
        if len(self.points) == 1:
            return self.source
        f = min(max(float(fraction), 0.0), 1.0) * self.num_segments
        i = min(int(math.floor(f)), self.num_segments - 1)
        a = f - i
        p = (1.0 - a) * self.points[i] + a * self.points[i + 1]
        return float(p[0]), float(p[1])

    def __repr__(self) -> str:
        return f"Path(segments={self.num_segments}, source={self.source}, target={self.target})"


@dataclass(frozen=True)
class RefractionParams:
    """Two media separated by the horizontal line ``y = boundary_y``."""

    v1: float = defaults.SPEED_OF_LIGHT / defaults.DEFAULT_N1
    v2: float = defaults.SPEED_OF_LIGHT / defaults.DEFAULT_N2
    boundary_y: float = defaults.DEFAULT_BOUNDARY_Y
    x_range: tuple[float, float] = defaults.DEFAULT_BOUNDARY_X_RANGE
    step: float = defaults.DEFAULT_GRID_STEP
    wavelength: float = defaults.DEFAULT_REFRACTION_WAVELENGTH
    speed_of_light: float = defaults.SPEED_OF_LIGHT
    refine: bool = False

    @classmethod
    def from_indices(cls, n1: float, n2: float, **kwargs) -> RefractionParams:
        c = kwargs.get("speed_of_light", defaults.SPEED_OF_LIGHT)
        return cls(v1=c / n1, v2=c / n2, **kwargs)

    @property
    def n1(self) -> float:
        return self.speed_of_light / max(self.v1, defaults.MIN_SPEED)

    @property
    def n2(self) -> float:
        return self.speed_of_light / max(self.v2, defaults.MIN_SPEED)


@dataclass(frozen=True)
class MechanicsParams:
    """Projectile between two points under uniform gravity."""

    mass: float = defaults.DEFAULT_MASS
    gravity: float = defaults.DEFAULT_GRAVITY
    total_time: float | None = defaults.DEFAULT_TOTAL_TIME
    hbar_eff: float = defaults.DEFAULT_HBAR_EFF
    num_segments: int = defaults.DEFAULT_NUM_SEGMENTS
    pixels_per_meter: float = defaults.PIXELS_PER_METER
    ground_y: float = defaults.DEFAULT_GROUND_Y
    phase_scaling: PhaseScaling = PhaseScaling.FIXED
    include_extremal_phasor: bool = True
    sigma_min: float = defaults.NEIGHBORHOOD_SIGMA_MIN
    sigma_step: float = defaults.NEIGHBORHOOD_SIGMA_STEP


@dataclass(frozen=True)
class InterferenceParams:
    """Source, a two-slit barrier and a detection screen."""

    wavelength: float = defaults.DEFAULT_WAVELENGTH_NM
    slit_separation: float = defaults.DEFAULT_SLIT_SEPARATION
    barrier_x: float = defaults.DEFAULT_BARRIER_X
    screen_x: float = defaults.DEFAULT_SCREEN_X
    center_y: float = defaults.DEFAULT_SLIT_CENTER_Y
    screen_range: tuple[float, float] = defaults.DEFAULT_SCREEN_RANGE
    screen_step: float = defaults.DEFAULT_SCREEN_STEP

    @property
    def wavelength_scaled(self) -> float:
        return self.wavelength * defaults.WAVELENGTH_SCENE_SCALE


@dataclass(frozen=True)
class CostResult:
    value: float
    kind: CostKind


@dataclass(frozen=True)
class PhasorSample:
    """Unit amplitude ``e^{i phase}``."""

    phase: float

    @property
    def re(self) -> float:
        return math.cos(self.phase)

    @property
    def im(self) -> float:
        return math.sin(self.phase)

    @property
    def amplitude(self) -> complex:
        return complex(self.re, self.im)


@dataclass(frozen=True)
class ScoredPath:
    """A path with its cost, phasor and cost rank in ``[0, 1]`` within its set."""

    path: Path
    cost: CostResult
    phasor: PhasorSample
    relative_cost: float = 0.0


@dataclass(frozen=True, eq=False)
class InterferenceResult:
    """Vector sum of a set of phasors.

    ``chain`` holds the cumulative partial sums (starting at the origin) so a
    renderer can draw the phasors head to tail.
    """

    re: float = 0.0
    im: float = 0.0
    count: int = 0
    chain: np.ndarray = field(default_factory=lambda: np.zeros((1, 2)))

    def __post_init__(self) -> None:
        object.__setattr__(self, "chain", frozen_array(self.chain, (2,)))

    @property
    def magnitude(self) -> float:
        return math.hypot(self.re, self.im)

    @property
    def angle(self) -> float:
        return math.atan2(self.im, self.re)

    @property
    def intensity(self) -> float:
        return self.re * self.re + self.im * self.im

    @property
    def normalized_magnitude(self) -> float:
        return self.magnitude / self.count if self.count else 0.0


@dataclass(frozen=True)
class ExtremalResult:
    path: Path
    cost: CostResult
    details: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "details", MappingProxyType(dict(self.details)))


@dataclass(frozen=True, eq=False)
class EngineSnapshot:
    """Read-only output of one recomputation, safe to keep across frames."""

    domain: Domain
    candidates: tuple[ScoredPath, ...]
    extremal: ScoredPath | None
    interference: InterferenceResult
    diagnostics: Mapping[str, float] = field(default_factory=dict)
    profiles: Mapping[str, np.ndarray] = field(default_factory=dict)
    generation: int = 0
    fingerprint: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidates", tuple(self.candidates))
        object.__setattr__(self, "diagnostics", MappingProxyType(dict(self.diagnostics)))
        object.__setattr__(
            self,
            "profiles",
            MappingProxyType({k: frozen_array(v) for k, v in self.profiles.items()}),
        )

    def all_paths(self) -> list[ScoredPath]:
        paths = list(self.candidates)
        if self.extremal is not None:
            paths.append(self.extremal)
        return paths

    def is_finite(self) -> bool:
        """True when no numeric field holds NaN or infinity."""
        scalars = [self.interference.re, self.interference.im]
        scalars.extend(self.diagnostics.values())
        for scored in self.all_paths():
            scalars.extend((scored.cost.value, scored.phasor.phase, scored.relative_cost))
            if not np.all(np.isfinite(scored.path.points)):
                return False
        if not all(math.isfinite(v) for v in scalars):
            return False
        if not np.all(np.isfinite(self.interference.chain)):
            return False
        return all(np.all(np.isfinite(arr)) for arr in self.profiles.values())
