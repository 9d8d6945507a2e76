"""
Trajectory export as a numeric table / CSV file.
"""

import numpy as np

from .config import JOULES_TO_FTLBF
from .integrator import TrajectoryResult

CSV_HEADER = ('Time (s),Distance (m),Height (m),Velocity X (m/s),Velocity Y (m/s),'
              'Total Velocity (m/s),Energy (J),Energy (ft-lbf)')
CSV_FORMAT = ['%.3f', '%.2f', '%.3f', '%.2f', '%.2f', '%.2f', '%.1f', '%.1f']


def trajectory_table(result: TrajectoryResult, mass: float) -> np.ndarray:
    """
    (N, 8) array: time, distance, height, vx, vy, speed, energy J, energy ft-lbf.
    """
    speed = result.speed
    energy_j = 0.5 * mass * speed ** 2
    return np.column_stack([
        result.t, result.x, result.y, result.vx, result.vy,
        speed, energy_j, energy_j * JOULES_TO_FTLBF,
    ])


def save_csv(result: TrajectoryResult, mass: float, path: str) -> str:
    """Write the trajectory table to *path* as CSV and return the path."""
    np.savetxt(path, trajectory_table(result, mass), delimiter=',',
               header=CSV_HEADER, comments='', fmt=CSV_FORMAT)
    return path
