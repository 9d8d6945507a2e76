"""
Launch Parameters & Drag Specification
======================================
The validated input record for one trajectory computation, and the two
interchangeable drag models it can carry:

  - ``DirectDrag``     explicit drag coefficient + calibre
  - ``BallisticDrag``  ballistic coefficient + G-family drag function

Coordinate system (vertical plane):
  x = downrange (horizontal)
  y = height above the launch datum (up positive)

Wind is horizontal only. The along-track component follows the calculator
convention θ = windAngle − 90°, windVx = windSpeed·cos θ, so 90° pushes the
projectile downrange and 270° opposes it.
"""

import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .drag_model import (
    DRAG_TABLES, DragTable, normalize_family, reference_area,
    direct_drag_deceleration, ballistic_drag_deceleration,
)
from .exceptions import InvalidParameter


def _check_finite(name: str, value: float):
    try:
        finite = math.isfinite(value)
    except TypeError:
        finite = False
    if not finite:
        raise InvalidParameter(name, value, "must be a finite number")


@dataclass(frozen=True)
class DirectDrag:
    """Drag from an explicit coefficient: F = ½ Cd ρ A v²."""
    drag_coefficient: float
    diameter: float              # m

    def __post_init__(self):
        _check_finite('drag_coefficient', self.drag_coefficient)
        _check_finite('diameter', self.diameter)
        if self.drag_coefficient < 0:
            raise InvalidParameter('drag_coefficient', self.drag_coefficient, "must be >= 0")
        if self.diameter <= 0:
            raise InvalidParameter('diameter', self.diameter, "must be > 0")

    @property
    def area(self) -> float:
        """Reference cross-sectional area (m²)."""
        return reference_area(self.diameter)

    def deceleration(self, speed: float, air_density: float, mass: float,
                     speed_of_sound: Optional[float] = None) -> float:
        return direct_drag_deceleration(speed, air_density, self.drag_coefficient,
                                        self.area, mass)


@dataclass(frozen=True)
class BallisticDrag:
    """Drag from a ballistic coefficient referenced to a G-family table."""
    ballistic_coefficient: float
    family: str = 'G1'

    def __post_init__(self):
        try:
            positive = self.ballistic_coefficient > 0
        except TypeError:
            positive = False
        if not positive:
            raise InvalidParameter('ballistic_coefficient', self.ballistic_coefficient,
                                   "must be > 0")
        object.__setattr__(self, 'family', normalize_family(self.family))

    @property
    def table(self) -> DragTable:
        return DRAG_TABLES[self.family]

    def deceleration(self, speed: float, air_density: float, mass: float,
                     speed_of_sound: Optional[float] = None) -> float:
        return ballistic_drag_deceleration(speed, air_density, speed_of_sound,
                                           self.ballistic_coefficient, self.table)


DragSpec = Union[DirectDrag, BallisticDrag]


@dataclass(frozen=True)
class LaunchParameters:
    """
    Complete, immutable input for one trajectory.

    ``speed_of_sound`` is required with ``BallisticDrag`` (Mach lookup) and
    ignored by ``DirectDrag``.
    """
    velocity: float                       # m/s  muzzle velocity
    angle: float                          # degrees above horizontal
    mass: float                           # kg
    drag: DragSpec
    air_density: float = 1.225            # kg/m³
    speed_of_sound: Optional[float] = None  # m/s
    initial_height: float = 0.0           # m
    wind_speed: float = 0.0               # m/s
    wind_angle: float = 0.0               # degrees

    def __post_init__(self):
        for name in ('velocity', 'angle', 'mass', 'air_density',
                     'initial_height', 'wind_speed', 'wind_angle'):
            _check_finite(name, getattr(self, name))

        if self.velocity <= 0:
            raise InvalidParameter('velocity', self.velocity, "must be > 0")
        if self.mass <= 0:
            raise InvalidParameter('mass', self.mass, "must be > 0")
        if self.air_density <= 0:
            raise InvalidParameter('air_density', self.air_density, "must be > 0")
        if self.initial_height < 0:
            raise InvalidParameter('initial_height', self.initial_height, "must be >= 0")
        if self.wind_speed < 0:
            raise InvalidParameter('wind_speed', self.wind_speed, "must be >= 0")

        if not isinstance(self.drag, (DirectDrag, BallisticDrag)):
            raise InvalidParameter('drag', self.drag,
                                   "expected DirectDrag or BallisticDrag")
        if isinstance(self.drag, BallisticDrag):
            if self.speed_of_sound is None:
                raise InvalidParameter('speed_of_sound', None,
                                       "required for the ballistic-coefficient model")
            _check_finite('speed_of_sound', self.speed_of_sound)
            if self.speed_of_sound <= 0:
                raise InvalidParameter('speed_of_sound', self.speed_of_sound, "must be > 0")

    def with_angle(self, angle: float) -> 'LaunchParameters':
        """Copy with a different launch angle (degrees)."""
        return replace(self, angle=angle)

    def initial_velocity(self) -> Tuple[float, float]:
        """(vx, vy) at the muzzle."""
        a = math.radians(self.angle)
        return self.velocity * math.cos(a), self.velocity * math.sin(a)

    def wind_components(self) -> Tuple[float, float]:
        """(wind_vx, wind_vy) of the air mass; no vertical wind is modeled."""
        theta = math.radians(self.wind_angle - 90.0)
        return self.wind_speed * math.cos(theta), 0.0

    def drag_acceleration(self, vrel_x: float, vrel_y: float) -> Tuple[float, float]:
        """
        Drag acceleration (ax, ay) for an airspeed vector (m/s).

        Zero airspeed has no drag direction; the drag term is skipped.
        """
        speed = math.hypot(vrel_x, vrel_y)
        if speed == 0.0:
            return 0.0, 0.0
        decel = self.drag.deceleration(speed, self.air_density, self.mass,
                                       self.speed_of_sound)
        return -decel * vrel_x / speed, -decel * vrel_y / speed
