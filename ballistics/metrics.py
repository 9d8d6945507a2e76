"""
Derived Metrics
===============
Kinetic energy and momentum, plus reducers over a finished trajectory:
the subsonic transition distance and a range card at fixed distances.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import JOULES_TO_FTLBF
from .integrator import TrajectoryResult


def energy(mass: float, velocity: float) -> float:
    """Kinetic energy (J) = ½ m v²."""
    return 0.5 * mass * velocity * velocity


def momentum(mass: float, velocity: float) -> float:
    """Linear momentum (kg·m/s) = m v."""
    return mass * velocity


def energy_ftlbf(joules: float) -> float:
    """Energy in foot-pounds force."""
    return joules * JOULES_TO_FTLBF


def subsonic_distance(result: TrajectoryResult, speed_of_sound: float) -> Optional[float]:
    """
    Downrange distance (m) where the speed first drops below *speed_of_sound*,
    interpolated between the two bracketing points. None if it never does.
    """
    points = result.trajectory
    for p0, p1 in zip(points, points[1:]):
        v0, v1 = p0.speed, p1.speed
        if v0 >= speed_of_sound > v1:
            r = (speed_of_sound - v0) / (v1 - v0)
            return p0.x + r * (p1.x - p0.x)
    return None


@dataclass(frozen=True)
class RangeCardRow:
    distance: float     # m
    height: float       # m above the launch datum
    velocity: float     # m/s
    energy: float       # J
    deviation: float    # m relative to the zero height


def range_card(result: TrajectoryResult, mass: float,
               distances: Sequence[float] = (50, 100, 150, 200, 300),
               zero_height: Optional[float] = None) -> List[RangeCardRow]:
    """
    Height, speed, energy and deviation from the zero line at each of
    *distances*. Distances the projectile does not reach are left out.

    *zero_height* defaults to the launch height.
    """
    if zero_height is None:
        zero_height = result.params.initial_height

    rows = []
    for d in distances:
        point = result.point_at_distance(d)
        if point is None:
            continue
        v = math.hypot(point.vx, point.vy)
        rows.append(RangeCardRow(
            distance=float(d),
            height=point.y,
            velocity=v,
            energy=energy(mass, v),
            deviation=point.y - zero_height,
        ))
    return rows
