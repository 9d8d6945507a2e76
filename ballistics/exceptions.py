"""
Exception Types
===============
Errors raised by the ballistics core.

    BallisticsError
    ├── InvalidParameter        (also a ValueError)
    └── SolverRuntimeError      (also a RuntimeError)
        └── UnreachableTarget

Numerical degeneracies inside the integration loop (zero relative airspeed)
are handled locally and never raised. Non-convergence of the zero search and
the simulation time cap are reported as result flags, not exceptions.
"""

from typing import Any, Optional


__all__ = (
    'BallisticsError',
    'InvalidParameter',
    'SolverRuntimeError',
    'UnreachableTarget',
)


class BallisticsError(Exception):
    """Base class for all ballistics errors."""


class InvalidParameter(BallisticsError, ValueError):
    """Non-physical input rejected before any computation starts."""

    def __init__(self, name: str, value: Any, reason: str = ""):
        self.name = name
        self.value = value
        self.reason = reason
        msg = f"Invalid {name}={value!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class SolverRuntimeError(BallisticsError, RuntimeError):
    """Solver error."""


class UnreachableTarget(SolverRuntimeError):
    """
    No launch angle in the search bracket carried the projectile as far
    as the requested zero distance.
    """

    def __init__(self, zero_distance: float, max_range: Optional[float] = None):
        self.zero_distance = zero_distance
        self.max_range = max_range
        msg = f"Zero distance {zero_distance:.2f} m is out of reach"
        if max_range is not None:
            msg += f" (farthest range observed {max_range:.2f} m)"
        super().__init__(msg)
