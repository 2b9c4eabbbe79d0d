"""Central place for leastpath default settings."""

import math

# Scene (canvas units, y grows downward)
DEFAULT_SCENE_SIZE: tuple[float, float] = (800.0, 600.0)

# Refraction / least time
DEFAULT_REFRACTION_SOURCE: tuple[float, float] = (150.0, 100.0)
DEFAULT_REFRACTION_TARGET: tuple[float, float] = (650.0, 500.0)
DEFAULT_BOUNDARY_Y: float = 300.0
DEFAULT_BOUNDARY_X_RANGE: tuple[float, float] = (100.0, 700.0)
DEFAULT_GRID_STEP: float = 0.5
SPEED_OF_LIGHT: float = 299.792  # mm/ns
DEFAULT_N1: float = 1.0
DEFAULT_N2: float = 1.5
DEFAULT_REFRACTION_WAVELENGTH: float = 0.55  # scene units (550 nm mapped like the slit demo)
TRAVEL_TIME_PROFILE_SAMPLES: int = 100
SNELL_TOLERANCE: float = 0.05
MIN_SPEED: float = 1e-6

# Mechanics / least action
DEFAULT_MECHANICS_SOURCE: tuple[float, float] = (100.0, 500.0)
DEFAULT_MECHANICS_TARGET: tuple[float, float] = (700.0, 300.0)
DEFAULT_GRAVITY: float = 9.8  # m/s^2
DEFAULT_MASS: float = 0.6  # kg
DEFAULT_TOTAL_TIME: float | None = 1.2  # s, None = estimate from geometry
DEFAULT_HBAR_EFF: float = 0.5
DEFAULT_NUM_SEGMENTS: int = 50
DEFAULT_NUM_PATHS: int = 30
PIXELS_PER_METER: float = 50.0
DEFAULT_GROUND_Y: float = 600.0
MIN_FLIGHT_TIME: float = 0.1
MAX_FLIGHT_TIME: float = 10.0
MIN_GRAVITY: float = 1e-3

# Curve family sampling extents (fractions of the horizontal span, heights in scene units)
SPRAY_C1_X_RANGE: tuple[float, float] = (0.2, 0.5)
SPRAY_C2_X_RANGE: tuple[float, float] = (0.5, 0.8)
SPRAY_LIFT_RANGE: tuple[float, float] = (50.0, 350.0)
GRID_C1_X_RANGE: tuple[float, float] = (0.15, 0.55)
GRID_C2_X_RANGE: tuple[float, float] = (0.45, 0.85)
GRID_LIFT_RANGE: tuple[float, float] = (50.0, 350.0)
NEIGHBORHOOD_SIGMA_MIN: float = 20.0
NEIGHBORHOOD_SIGMA_STEP: float = 3.0

# Double slit / sum over paths
DEFAULT_INTERFERENCE_SOURCE: tuple[float, float] = (100.0, 300.0)
DEFAULT_BARRIER_X: float = 350.0
DEFAULT_SCREEN_X: float = 700.0
DEFAULT_SLIT_CENTER_Y: float = 300.0
DEFAULT_SLIT_SEPARATION: float = 0.5  # mm
SLIT_SCENE_SCALE: float = 100.0  # scene units per mm of slit separation
DEFAULT_WAVELENGTH_NM: float = 550.0
WAVELENGTH_SCENE_SCALE: float = 1.0 / 1000.0  # nm -> scene units
DEFAULT_SCREEN_RANGE: tuple[float, float] = (50.0, 550.0)
DEFAULT_SCREEN_STEP: float = 2.0
DETECTOR_MM_PER_UNIT: float = 0.01

# Phasor aggregation
FALLBACK_PHASE_SCALE: float = 1.0
NORMALIZED_PHASE_SPAN: float = 4.0 * math.pi
SPREAD_EPSILON: float = 1e-12

# Randomness
DEFAULT_SEED: int = 0
