#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  BALLISTIC TRAJECTORY CALCULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes the complete calculation pipeline for a reference air rifle shot:
    1. Environment (air density, speed of sound)
    2. Drag function sample values
    3. Zero-angle search
    4. Trajectory at the zero angle
    5. Energy, momentum, subsonic transition, range card
    6. Closed-form validation of the integrator
    7. Charts
    8. CSV export

  All outputs saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip charts (faster)
═══════════════════════════════════════════════════════════════════════════════
"""

import os
import sys
import time

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from ballistics.atmosphere import WeatherConditions
from ballistics.drag_model import DRAG_FAMILIES, lookup
from ballistics.exceptions import UnreachableTarget
from ballistics.integrator import calculate_no_drag, compute_trajectory
from ballistics.metrics import energy, energy_ftlbf, momentum, range_card, subsonic_distance
from ballistics.projectile import BallisticDrag, LaunchParameters
from ballistics.validation import REFERENCE_VACUUM_300, validate_against_closed_form
from ballistics.zeroing import compute_zero_angle
from ballistics.export import save_csv
from ballistics.visualization import (
    plot_trajectory, plot_drag_tables, plot_air_density, plot_validation,
    ensure_output_dir,
)

import matplotlib.pyplot as plt


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     BALLISTIC TRAJECTORY CALCULATOR                                   ║
║     ─────────────────────────────────────────────────────             ║
║     Gravity · Drag G1–G8 / Cd · Moist Air · Wind                      ║
║     Forward Euler (Δt = 1 ms) │ Bisection zero search                 ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv

    banner()
    out = ensure_output_dir('outputs')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Environment
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Environment")
    weather = WeatherConditions(temperature_c=20.0, pressure_hpa=1008.0,
                                humidity_pct=60.0, altitude_m=50.0)
    rho = weather.air_density
    sos = weather.speed_of_sound
    print(f"  T={weather.temperature_c:.1f} °C  P={weather.pressure_hpa:.1f} hPa  "
          f"RH={weather.humidity_pct:.0f}%")
    print(f"  Air density    : {rho:.4f} kg/m³  (ratio {weather.density_ratio:.4f})")
    print(f"  Speed of sound : {sos:.1f} m/s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Drag Functions
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Drag Functions")
    for family in DRAG_FAMILIES:
        print(f"  {family}  i(M0.5)={lookup(0.5, family):.4f}  "
              f"i(M1.0)={lookup(1.0, family):.4f}  i(M2.0)={lookup(2.0, family):.4f}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Zero Angle
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Zero Angle (30 m, sight 45 mm above bore)")
    mass = 0.00103   # 15.9 gr pellet
    params = LaunchParameters(
        velocity=260.0, angle=0.0, mass=mass,
        drag=BallisticDrag(ballistic_coefficient=0.025, family='G1'),
        air_density=rho, speed_of_sound=sos,
        initial_height=1.5, wind_speed=3.0, wind_angle=270.0,
    )
    zero_distance, sight_height = 30.0, 0.045
    try:
        zero = compute_zero_angle(params, zero_distance, sight_height)
    except UnreachableTarget as err:
        print(f"  ✗ {err}")
        return
    status = "converged" if zero.converged else "NOT converged"
    print(f"  Angle: {zero.angle:.4f}°  ({status}, error {zero.height_error*1000:+.2f} mm, "
          f"{zero.iterations} trajectories)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Trajectory
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Trajectory")
    zeroed = params.with_angle(zero.angle)
    result = compute_trajectory(zeroed)
    print(result.summary())
    vacuum = calculate_no_drag(zeroed.velocity, zeroed.angle)
    print(f"  Vacuum reference from ground: range {vacuum.max_range:.1f} m, "
          f"height {vacuum.max_height:.2f} m, ToF {vacuum.flight_time:.2f} s")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Metrics
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 5: Energy, Momentum, Range Card")
    e0 = energy(mass, zeroed.velocity)
    print(f"  Muzzle energy   : {e0:.1f} J ({energy_ftlbf(e0):.1f} ft-lbf)")
    print(f"  Muzzle momentum : {momentum(mass, zeroed.velocity):.4f} kg·m/s")
    print(f"  Impact energy   : {energy(mass, result.impact_velocity):.1f} J")
    d_sub = subsonic_distance(result, sos)
    print(f"  Subsonic at     : {'n/a' if d_sub is None else f'{d_sub:.1f} m'}")

    zero_height = zeroed.initial_height + sight_height
    print(f"\n  {'Dist':>6} {'Height':>8} {'Speed':>8} {'Energy':>8} {'Dev':>8}")
    for row in range_card(result, mass, (10, 20, 30, 40, 50), zero_height):
        print(f"  {row.distance:>5.0f}m {row.height:>7.3f}m {row.velocity:>6.1f}/s "
              f"{row.energy:>7.1f}J {row.deviation*1000:>+6.0f}mm")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Validation — Drag-Free vs Closed Form")
    val_results = validate_against_closed_form(REFERENCE_VACUUM_300)

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 7: Charts
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 7: Charts")
        charts = [
            (plot_trajectory(result, mass=mass, speed_of_sound=sos,
                             zero_height=zero_height), '01_trajectory.png'),
            (plot_drag_tables(), '02_drag_functions.png'),
            (plot_air_density(weather.pressure_hpa), '03_air_density.png'),
            (plot_validation(val_results, REFERENCE_VACUUM_300), '04_validation.png'),
        ]
        for fig, name in charts:
            fig.savefig(f'{out}/{name}', dpi=150, bbox_inches='tight',
                        facecolor=fig.get_facecolor())
            plt.close(fig)
            print(f"  ✓ Saved: {out}/{name}")
    else:
        section("PHASE 7: Charts SKIPPED (--quick mode)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 8: CSV Export
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 8: CSV Export")
    path = save_csv(result, mass, f'{out}/trajectory.csv')
    print(f"  ✓ Saved: {path} ({len(result)} rows)")

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"  Total runtime: {elapsed:.1f} seconds")


if __name__ == "__main__":
    main()
