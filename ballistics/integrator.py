"""
Trajectory Integrator
=====================
Fixed-step forward Euler integration of a point-mass projectile under
gravity and aerodynamic drag, relative to a horizontal wind:

    v_{n+1} = v_n + (a_drag(v_n − w) − g·ŷ) · Δt
    x_{n+1} = x_n + v_{n+1} · Δt

The loop records the state *before* each step, so point 0 is the exact
launch condition, and stops at the first state below the launch datum
(or at the safety time cap).

Boundary convention: ``flight_time`` is the time of the last recorded
point (the last state at or above ground), ``impact_velocity`` is the speed
of the first state below ground, which is not part of ``trajectory``.

The hot loop works on plain floats; numpy arrays are only built on demand
from the finished point sequence.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .config import DEFAULT_INTEGRATOR, GRAVITY, IntegratorConfig
from .exceptions import InvalidParameter
from .logger import logger
from .projectile import BallisticDrag, LaunchParameters


@dataclass(frozen=True)
class TrajectoryPoint:
    """Snapshot of projectile state at one instant."""
    t: float      # s since launch
    x: float      # downrange (m)
    y: float      # height above the launch datum (m)
    vx: float     # m/s
    vy: float     # m/s

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)


@dataclass(frozen=True)
class TrajectoryResult:
    """Complete trajectory output."""
    params: LaunchParameters
    trajectory: Tuple[TrajectoryPoint, ...]
    max_height: float         # running maximum (m)
    max_range: float          # downrange distance of the last state at/above ground (m)
    flight_time: float        # time of the last recorded point (s)
    impact_velocity: float    # speed of the first state below ground (m/s)
    time_step: float
    cutoff: bool = False      # stopped by the safety time cap

    def __len__(self) -> int:
        return len(self.trajectory)

    # ── array views ───────────────────────────────────────────────────────
    def _column(self, attr: str) -> np.ndarray:
        return np.fromiter((getattr(p, attr) for p in self.trajectory),
                           dtype=float, count=len(self.trajectory))

    @property
    def t(self) -> np.ndarray:
        return self._column('t')

    @property
    def x(self) -> np.ndarray:
        return self._column('x')

    @property
    def y(self) -> np.ndarray:
        return self._column('y')

    @property
    def vx(self) -> np.ndarray:
        return self._column('vx')

    @property
    def vy(self) -> np.ndarray:
        return self._column('vy')

    @property
    def speed(self) -> np.ndarray:
        return np.hypot(self.vx, self.vy)

    @property
    def impact_angle_deg(self) -> float:
        """Angle of descent at the last recorded point (degrees below horizontal)."""
        last = self.trajectory[-1]
        return float(np.degrees(np.arctan2(-last.vy, last.vx)))

    def point_at_distance(self, distance: float) -> Optional[TrajectoryPoint]:
        """
        State at *distance* downrange, linearly interpolated between the first
        pair of points with x_i <= distance <= x_{i+1}; None if never reached.
        """
        points = self.trajectory
        for p0, p1 in zip(points, points[1:]):
            if p0.x <= distance <= p1.x:
                span = p1.x - p0.x
                r = (distance - p0.x) / span if span > 0 else 0.0
                return TrajectoryPoint(
                    t=p0.t + r * (p1.t - p0.t),
                    x=distance,
                    y=p0.y + r * (p1.y - p0.y),
                    vx=p0.vx + r * (p1.vx - p0.vx),
                    vy=p0.vy + r * (p1.vy - p0.vy),
                )
        return None

    def summary(self) -> str:
        """Human-readable summary string."""
        p = self.params
        if isinstance(p.drag, BallisticDrag):
            model = f"BC {p.drag.ballistic_coefficient:g} ({p.drag.family})"
        else:
            model = f"Cd {p.drag.drag_coefficient:g}, d={p.drag.diameter * 1000:g} mm"
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY{'':<34s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Drag model   : {model:<36s} ║",
            f"║  Timestep     : {self.time_step:<36.4f} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Launch vel   : {p.velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {p.angle:>10.3f} °{'':<24s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.max_range:>10.1f} m{'':<24s} ║",
            f"║  Max height   : {self.max_height:>10.2f} m{'':<24s} ║",
            f"║  Flight time  : {self.flight_time:>10.3f} s{'':<24s} ║",
            f"║  Impact vel   : {self.impact_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Impact angle : {self.impact_angle_deg:>10.1f} °{'':<24s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        if self.cutoff:
            lines.insert(-1, f"║  Safety cap   : {'reached, trajectory partial':<36s} ║")
        return '\n'.join(lines)


def compute_trajectory(params: LaunchParameters,
                       config: IntegratorConfig = DEFAULT_INTEGRATOR) -> TrajectoryResult:
    """
    Integrate one trajectory from launch until the projectile drops below
    the launch datum.

    Parameters
    ----------
    params : LaunchParameters
        Validated launch record (velocity, angle, mass, drag model, air, wind)
    config : IntegratorConfig
        Step size, safety time cap and gravity

    Returns
    -------
    TrajectoryResult
    """
    if not isinstance(params, LaunchParameters):
        raise InvalidParameter('params', params, "expected LaunchParameters")

    dt = config.time_step
    g = config.gravity
    wind_vx, wind_vy = params.wind_components()

    x, y = 0.0, float(params.initial_height)
    vx, vy = params.initial_velocity()
    t = 0.0
    step = 0
    max_height = y
    max_range = 0.0
    cutoff = False

    logger.debug("Trajectory start: v=%.2f m/s angle=%.4f° h0=%.3f m",
                 params.velocity, params.angle, y)

    points = []
    while y >= 0.0 or step == 0:
        points.append(TrajectoryPoint(t, x, y, vx, vy))

        ax, ay = params.drag_acceleration(vx - wind_vx, vy - wind_vy)

        vx += ax * dt
        vy += (ay - g) * dt
        x += vx * dt
        y += vy * dt
        step += 1
        t = step * dt

        if y > max_height:
            max_height = y
        if y >= 0.0:
            max_range = x

        if t > config.max_time:
            cutoff = True
            logger.warning("Trajectory stopped at the %.0f s safety cap "
                           "(x=%.1f m, y=%.1f m)", config.max_time, x, y)
            break

    result = TrajectoryResult(
        params=params,
        trajectory=tuple(points),
        max_height=max_height,
        max_range=max_range,
        flight_time=t - dt,
        impact_velocity=math.hypot(vx, vy),
        time_step=dt,
        cutoff=cutoff,
    )
    logger.debug("Trajectory end: %d points, range=%.2f m, tof=%.3f s",
                 len(points), max_range, result.flight_time)
    return result


@dataclass(frozen=True)
class NoDragResult:
    """Closed-form vacuum trajectory from ground level."""
    max_height: float
    max_range: float
    flight_time: float


def calculate_no_drag(velocity: float, angle: float,
                      gravity: float = GRAVITY) -> NoDragResult:
    """
    Vacuum trajectory in closed form:
    h = vy²/2g, T = 2·vy/g, R = vx·T.
    """
    a = math.radians(angle)
    vx = velocity * math.cos(a)
    vy = velocity * math.sin(a)
    flight_time = 2.0 * vy / gravity
    return NoDragResult(
        max_height=vy * vy / (2.0 * gravity),
        max_range=vx * flight_time,
        flight_time=flight_time,
    )
