"""
Configuration
=============
Physical constants and the explicit run-time settings passed to the
integrator and the zero solver.

Every public computation takes its settings as an argument (defaulting to
the instances below); nothing reads mutable module state.
"""

from dataclasses import dataclass

from .exceptions import InvalidParameter


# ── Physical constants ────────────────────────────────────────────────────
GRAVITY               = 9.81        # m/s²
STANDARD_AIR_DENSITY  = 1.225       # kg/m³  (ICAO sea level, BC reference)

# ── Ballistic-coefficient model ───────────────────────────────────────────
BC_CONSTANT           = 7503.0      # fps² scaling of the G-function relation
FPS_TO_MPS            = 0.3048      # ft/s → m/s
JOULES_TO_FTLBF       = 0.737562

# ── Integration ───────────────────────────────────────────────────────────
TIME_STEP             = 0.001       # s
MAX_SIM_TIME          = 1000.0      # s  (safety cap)

# ── Zero search ───────────────────────────────────────────────────────────
ZERO_MIN_ANGLE        = -5.0        # deg
ZERO_INITIAL_MAX_ANGLE = 5.0        # deg
ZERO_MAX_ANGLE        = 45.0        # deg
ZERO_SCAN_STEP        = 2.0         # deg
ZERO_MAX_ITERATIONS   = 100
ZERO_HEIGHT_TOLERANCE = 0.001       # m
ZERO_ANGLE_TOLERANCE  = 1e-4        # deg


@dataclass(frozen=True)
class IntegratorConfig:
    """Fixed-step forward Euler settings."""
    time_step: float = TIME_STEP
    max_time: float = MAX_SIM_TIME
    gravity: float = GRAVITY

    def __post_init__(self):
        if not self.time_step > 0:
            raise InvalidParameter('time_step', self.time_step, "must be > 0")
        if not self.max_time > 0:
            raise InvalidParameter('max_time', self.max_time, "must be > 0")


@dataclass(frozen=True)
class ZeroConfig:
    """
    Bisection settings for the zero-angle search.

    The bracket starts at [min_angle, initial_max_angle]; the high bound
    doubles (capped at max_angle) while it still shoots low. If doubling
    never gets a shot above the target, the angles above initial_max_angle
    are sampled every scan_step degrees for one that does.
    """
    min_angle: float = ZERO_MIN_ANGLE
    initial_max_angle: float = ZERO_INITIAL_MAX_ANGLE
    max_angle: float = ZERO_MAX_ANGLE
    scan_step: float = ZERO_SCAN_STEP
    max_iterations: int = ZERO_MAX_ITERATIONS
    height_tolerance: float = ZERO_HEIGHT_TOLERANCE
    angle_tolerance: float = ZERO_ANGLE_TOLERANCE

    def __post_init__(self):
        if not self.min_angle < self.initial_max_angle <= self.max_angle:
            raise InvalidParameter(
                'bracket', (self.min_angle, self.initial_max_angle, self.max_angle),
                "need min_angle < initial_max_angle <= max_angle")
        if self.max_angle > 90.0:
            raise InvalidParameter('max_angle', self.max_angle, "must be <= 90")
        if not self.scan_step > 0:
            raise InvalidParameter('scan_step', self.scan_step, "must be > 0")
        if self.initial_max_angle <= 0:
            raise InvalidParameter('initial_max_angle', self.initial_max_angle,
                                   "must be > 0 so the bracket can expand")
        if self.max_iterations < 1:
            raise InvalidParameter('max_iterations', self.max_iterations, "must be >= 1")


DEFAULT_INTEGRATOR = IntegratorConfig()
DEFAULT_ZERO = ZeroConfig()
