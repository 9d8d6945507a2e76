"""
Zero-Angle Solver
=================
Finds the launch angle at which the trajectory passes through the sight
line height at a chosen distance, by bisection on

    error(angle) = height_at(zero_distance) − (initial_height + target_height)

Each candidate runs a full trajectory from t = 0. A candidate that never
reaches the zero distance counts as shooting low.

Bracket: [min_angle, initial_max_angle] to start; while the high bound
still shoots low it becomes the new low bound and the high bound doubles,
capped at max_angle. With drag, the angles that reach a distance close to
the maximum range form a narrow band that doubling can step over, so when
no doubled bound shoots high the search samples upward from
initial_max_angle every scan_step degrees and bisects between the last low
sample and the first high one.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .config import DEFAULT_INTEGRATOR, DEFAULT_ZERO, IntegratorConfig, ZeroConfig
from .exceptions import InvalidParameter, UnreachableTarget
from .integrator import TrajectoryResult, compute_trajectory
from .logger import logger
from .projectile import LaunchParameters


@dataclass(frozen=True)
class ZeroResult:
    """Best launch angle found by the zero search."""
    angle: float            # degrees
    converged: bool
    height_error: float     # m, height at zero distance minus target
    iterations: int         # trajectories evaluated


def height_at_distance(result: TrajectoryResult, distance: float) -> Optional[float]:
    """Interpolated height at *distance*, or None if the trajectory falls short."""
    point = result.point_at_distance(distance)
    return None if point is None else point.y


def _scan_for_bracket(evaluate: Callable[[float], Optional[float]],
                      config: ZeroConfig) -> Tuple[float, float, Optional[float]]:
    """
    Step upward from initial_max_angle until a shot lands above the target.

    Returns (low, high, error at high); error is None or negative when no
    sampled angle shoots high.
    """
    low = angle = config.initial_max_angle
    error = evaluate(angle)
    while angle < config.max_angle:
        angle = min(angle + config.scan_step, config.max_angle)
        error = evaluate(angle)
        if error is not None and error >= 0:
            return low, angle, error
        low = angle
    return low, angle, error


def compute_zero_angle(params: LaunchParameters, zero_distance: float,
                       target_height: float,
                       config: ZeroConfig = DEFAULT_ZERO,
                       integrator_config: IntegratorConfig = DEFAULT_INTEGRATOR) -> ZeroResult:
    """
    Launch angle that puts the projectile at the sight height at
    *zero_distance*.

    Parameters
    ----------
    params : LaunchParameters
        Base launch record; its angle is ignored
    zero_distance : float
        Downrange zero distance (m), > 0
    target_height : float
        Sight height above the bore (m)
    config : ZeroConfig
        Bracket, iteration budget and tolerances

    Returns
    -------
    ZeroResult
        ``converged`` is False when the budget ran out before the height or
        angle tolerance was met, or when no sampled angle landed above the
        target; ``angle`` is then the best candidate seen.

    Raises
    ------
    UnreachableTarget
        No evaluated angle carried the projectile to *zero_distance*.
    """
    for name, value in (('zero_distance', zero_distance), ('target_height', target_height)):
        if not math.isfinite(value):
            raise InvalidParameter(name, value, "must be finite")
    if zero_distance <= 0:
        raise InvalidParameter('zero_distance', zero_distance, "must be > 0")

    target_y = params.initial_height + target_height
    evaluations = 0
    farthest = 0.0
    best_angle: Optional[float] = None
    best_error = math.inf
    seen_high = seen_low = False

    cache = {}

    def evaluate(angle: float) -> Optional[float]:
        if angle not in cache:
            cache[angle] = run(angle)
        return cache[angle]

    def run(angle: float) -> Optional[float]:
        nonlocal evaluations, farthest, best_angle, best_error, seen_high, seen_low
        evaluations += 1
        result = compute_trajectory(params.with_angle(angle), integrator_config)
        farthest = max(farthest, result.max_range)
        height = height_at_distance(result, zero_distance)
        if height is None:
            logger.debug("zero #%d angle=%.6f°: falls short (range %.2f m)",
                         evaluations, angle, result.max_range)
            return None
        error = height - target_y
        logger.debug("zero #%d angle=%.6f°: error=%+.5f m", evaluations, angle, error)
        if abs(error) < abs(best_error):
            best_angle, best_error = angle, error
        if error > 0:
            seen_high = True
        else:
            seen_low = True
        return error

    low, high = config.min_angle, config.initial_max_angle

    # grow the bracket while the high bound still shoots low
    error_high = evaluate(high)
    while (error_high is None or error_high < 0) and high < config.max_angle:
        low = high
        high = min(high * 2.0, config.max_angle)
        error_high = evaluate(high)

    if error_high is None or error_high < 0:
        low, high, error_high = _scan_for_bracket(evaluate, config)

    bracketed = error_high is not None and error_high >= 0
    converged = bracketed and abs(error_high) < config.height_tolerance
    iterations = 0
    while bracketed and not converged and iterations < config.max_iterations:
        iterations += 1
        mid = (low + high) / 2.0
        error = evaluate(mid)

        if error is None or error < 0:
            low = mid
        else:
            high = mid

        if error is not None and abs(error) < config.height_tolerance:
            converged = True
        elif high - low < config.angle_tolerance:
            converged = seen_high and seen_low
            break

    if best_angle is None:
        raise UnreachableTarget(zero_distance, farthest)

    if not converged:
        logger.warning("Zero search did not converge after %d trajectories: "
                       "best angle %.4f° misses by %+.4f m at %.1f m",
                       evaluations, best_angle, best_error, zero_distance)

    return ZeroResult(
        angle=best_angle,
        converged=converged,
        height_error=best_error,
        iterations=evaluations,
    )
