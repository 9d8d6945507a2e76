"""
Ballistic Trajectory Calculator
===============================
External-ballistics trajectories for a projectile launched under gravity,
aerodynamic drag and horizontal wind:
  - Standard G1–G8 drag functions (ballistic coefficient) or an explicit
    drag coefficient with calibre
  - Moist-air density and speed of sound from station weather
  - Fixed-step forward Euler integration (1 ms)
  - Zero-angle search by bisection for a sight height at a zero distance
  - Energy, momentum, subsonic transition and range card

One deterministic trajectory per call, computed from a complete,
validated ``LaunchParameters`` record.
"""

from .atmosphere import (
    air_density, speed_of_sound, saturation_vapor_pressure,
    sea_level_pressure, density_ratio, mach_number,
    PressureReference, WeatherConditions,
)
from .config import IntegratorConfig, ZeroConfig
from .drag_model import DragTable, DRAG_TABLES, DRAG_FAMILIES, lookup
from .exceptions import (
    BallisticsError, InvalidParameter, SolverRuntimeError, UnreachableTarget,
)
from .projectile import LaunchParameters, DirectDrag, BallisticDrag
from .integrator import (
    TrajectoryPoint, TrajectoryResult, NoDragResult,
    compute_trajectory, calculate_no_drag,
)
from .zeroing import ZeroResult, compute_zero_angle
from .metrics import (
    energy, momentum, energy_ftlbf, subsonic_distance, range_card, RangeCardRow,
)
from .validation import validate_against_closed_form, run_all_validations
from .export import trajectory_table, save_csv

__version__ = "1.0.0"
__all__ = [
    'LaunchParameters', 'DirectDrag', 'BallisticDrag',
    'TrajectoryPoint', 'TrajectoryResult', 'NoDragResult',
    'compute_trajectory', 'calculate_no_drag',
    'ZeroResult', 'compute_zero_angle',
    'DragTable', 'DRAG_TABLES', 'DRAG_FAMILIES', 'lookup',
    'air_density', 'speed_of_sound', 'saturation_vapor_pressure',
    'sea_level_pressure', 'density_ratio', 'mach_number',
    'PressureReference', 'WeatherConditions',
    'IntegratorConfig', 'ZeroConfig',
    'BallisticsError', 'InvalidParameter', 'SolverRuntimeError', 'UnreachableTarget',
    'energy', 'momentum', 'energy_ftlbf', 'subsonic_distance',
    'range_card', 'RangeCardRow',
    'validate_against_closed_form', 'run_all_validations',
    'trajectory_table', 'save_csv',
]
