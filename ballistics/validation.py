"""
Validation Against Closed-Form Motion
=====================================
With drag switched off the integrator must reproduce vacuum ballistics:

    max height  = vy0² / 2g
    flight time = 2·vy0 / g
    range       = vx0 · flight time

This module runs drag-free trajectories over a set of elevations and
compares them with ``calculate_no_drag``. Forward Euler at Δt = 1 ms stays
well inside 1 % on all three quantities.
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from .config import DEFAULT_INTEGRATOR, IntegratorConfig
from .integrator import calculate_no_drag, compute_trajectory
from .projectile import DirectDrag, LaunchParameters


# (name, muzzle velocity m/s, elevations deg)
REFERENCE_VACUUM_300 = {
    'name': 'Vacuum 300 m/s',
    'velocity': 300.0,
    'angles': [15.0, 30.0, 45.0, 60.0, 75.0],
}

REFERENCE_VACUUM_100 = {
    'name': 'Vacuum 100 m/s',
    'velocity': 100.0,
    'angles': [10.0, 45.0, 80.0],
}


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    angle_deg: float
    ref_range: float
    sim_range: float
    range_error_pct: float
    ref_max_height: float
    sim_max_height: float
    height_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float


def _pct(sim: float, ref: float) -> float:
    return 100.0 * (sim - ref) / ref


def validate_against_closed_form(reference: dict,
                                 config: IntegratorConfig = DEFAULT_INTEGRATOR,
                                 verbose: bool = True) -> List[ValidationResult]:
    """
    Run a drag-free trajectory at each reference elevation and compare it
    with the closed-form vacuum solution.
    """
    no_drag = DirectDrag(drag_coefficient=0.0, diameter=0.01)
    results = []

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: {reference['name']}  (Δt = {config.time_step} s)")
        print(f"{'='*75}")
        print(f"{'Elev°':>6} {'Ref R (m)':>10} {'Sim R (m)':>10} {'Err %':>7} "
              f"{'Ref H':>9} {'Sim H':>9} {'Err %':>7} "
              f"{'Ref ToF':>8} {'Sim ToF':>8} {'Err %':>7}")
        print("-" * 75)

    for angle in reference['angles']:
        params = LaunchParameters(velocity=reference['velocity'], angle=angle,
                                  mass=1.0, drag=no_drag)
        sim = compute_trajectory(params, config)
        ref = calculate_no_drag(reference['velocity'], angle, config.gravity)

        vr = ValidationResult(
            angle_deg=angle,
            ref_range=ref.max_range,
            sim_range=sim.max_range,
            range_error_pct=_pct(sim.max_range, ref.max_range),
            ref_max_height=ref.max_height,
            sim_max_height=sim.max_height,
            height_error_pct=_pct(sim.max_height, ref.max_height),
            ref_tof=ref.flight_time,
            sim_tof=sim.flight_time,
            tof_error_pct=_pct(sim.flight_time, ref.flight_time),
        )
        results.append(vr)

        if verbose:
            print(f"{angle:>6.0f} {vr.ref_range:>10.1f} {vr.sim_range:>10.1f} "
                  f"{vr.range_error_pct:>+7.3f} "
                  f"{vr.ref_max_height:>9.1f} {vr.sim_max_height:>9.1f} {vr.height_error_pct:>+7.3f} "
                  f"{vr.ref_tof:>8.2f} {vr.sim_tof:>8.2f} {vr.tof_error_pct:>+7.3f}")

    if verbose:
        worst = max(max(abs(r.range_error_pct), abs(r.height_error_pct), abs(r.tof_error_pct))
                    for r in results)
        mean = np.mean([abs(r.range_error_pct) for r in results])
        print("-" * 75)
        print(f"  Mean |range error|: {mean:.3f}%   Worst error: {worst:.3f}%")
        status = "✓ PASS" if worst < 1.0 else "✗ CHECK TIME STEP"
        print(f"  Status: {status}")
        print(f"{'='*75}\n")

    return results


def run_all_validations(verbose: bool = True) -> Dict[str, List[ValidationResult]]:
    """Run validation against all reference cases."""
    all_results = {}
    for ref_data in [REFERENCE_VACUUM_300, REFERENCE_VACUUM_100]:
        all_results[ref_data['name']] = validate_against_closed_form(ref_data, verbose=verbose)
    return all_results


if __name__ == "__main__":
    run_all_validations(verbose=True)
