"""
Unit Tests for the Ballistic Trajectory Calculator
==================================================
Tests atmosphere, drag tables, launch parameters, the integrator and
derived metrics for correctness.
Run: python -m pytest tests/ -v
"""

import sys
import os
import logging
import math

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ballistics.atmosphere import (
    air_density, speed_of_sound, sea_level_pressure, saturation_vapor_pressure,
    mach_number,
    PressureReference, WeatherConditions,
)
from ballistics.config import GRAVITY, IntegratorConfig, ZeroConfig
from ballistics.drag_model import (
    DRAG_FAMILIES, DRAG_TABLES, lookup, ballistic_drag_deceleration,
    direct_drag_deceleration, reference_area,
)
from ballistics.exceptions import BallisticsError, InvalidParameter
from ballistics.export import CSV_HEADER, save_csv, trajectory_table
from ballistics.integrator import calculate_no_drag, compute_trajectory
from ballistics.metrics import energy, momentum, range_card, subsonic_distance
from ballistics.projectile import BallisticDrag, DirectDrag, LaunchParameters
from ballistics.validation import run_all_validations


NO_DRAG = DirectDrag(drag_coefficient=0.0, diameter=0.01)
PELLET = DirectDrag(drag_coefficient=0.3, diameter=0.00635)


def make_params(**overrides):
    base = dict(velocity=300.0, angle=45.0, mass=0.01, drag=NO_DRAG)
    base.update(overrides)
    return LaunchParameters(**base)


class TestAtmosphere:
    """Moist-air density and speed of sound."""

    def test_standard_density(self):
        """Dry air at 15 °C and 1013.25 hPa is the ICAO 1.225 kg/m³."""
        assert air_density(15.0, 1013.25, 0.0) == pytest.approx(1.225, abs=0.001)

    def test_humidity_lowers_density(self):
        """Water vapour is lighter than dry air."""
        dry = air_density(25.0, 1013.25, 0.0)
        humid = air_density(25.0, 1013.25, 100.0)
        assert humid < dry

    def test_density_decreases_with_temperature(self):
        assert air_density(30.0, 1013.25, 50.0) < air_density(0.0, 1013.25, 50.0)

    def test_humidity_clamped(self, caplog):
        with caplog.at_level(logging.WARNING, logger='ballistics'):
            over = air_density(20.0, 1000.0, 150.0)
        assert over == air_density(20.0, 1000.0, 100.0)
        assert air_density(20.0, 1000.0, -10.0) == air_density(20.0, 1000.0, 0.0)
        assert "clamped" in caplog.text

    def test_saturation_vapor_pressure(self):
        """Magnus formula: 6.1078 hPa at 0 °C, about 23.4 hPa at 20 °C."""
        assert saturation_vapor_pressure(0.0) == pytest.approx(6.1078)
        assert saturation_vapor_pressure(20.0) == pytest.approx(23.4, abs=0.1)

    def test_sea_level_reduction(self):
        station = air_density(15.0, 950.0, 50.0, altitude_m=500.0)
        reduced = air_density(15.0, 950.0, 50.0, altitude_m=500.0,
                              pressure_reference=PressureReference.SEA_LEVEL_REDUCED)
        assert reduced > station
        at_zero = air_density(15.0, 950.0, 50.0, altitude_m=0.0,
                              pressure_reference=PressureReference.SEA_LEVEL_REDUCED)
        assert at_zero == pytest.approx(air_density(15.0, 950.0, 50.0))

    def test_sea_level_pressure_out_of_range(self):
        with pytest.raises(InvalidParameter):
            sea_level_pressure(1000.0, 50000.0)

    def test_speed_of_sound(self):
        assert speed_of_sound(0.0) == pytest.approx(331.5)
        assert speed_of_sound(20.0) == pytest.approx(343.5)

    @pytest.mark.parametrize("args", [
        (15.0, 0.0, 50.0),
        (15.0, -5.0, 50.0),
        (-300.0, 1013.25, 50.0),
        (float('nan'), 1013.25, 50.0),
        (15.0, float('inf'), 50.0),
    ])
    def test_invalid_inputs(self, args):
        with pytest.raises(InvalidParameter):
            air_density(*args)

    def test_mach_number(self):
        assert mach_number(343.0, 343.0) == 1.0
        assert mach_number(-170.0, 340.0) == pytest.approx(0.5)
        for bad in (0.0, -340.0):
            with pytest.raises(InvalidParameter):
                mach_number(100.0, bad)

    def test_weather_conditions(self):
        w = WeatherConditions(temperature_c=15.0, pressure_hpa=1013.25, humidity_pct=0.0)
        assert w.temperature_k == pytest.approx(288.15)
        assert w.air_density == pytest.approx(1.225, abs=0.001)
        assert w.density_ratio == pytest.approx(1.0, abs=0.001)
        assert w.speed_of_sound == pytest.approx(340.5)


class TestDragTables:
    """Drag function lookup: clamping, exact rows, interpolation."""

    def test_all_families_exist(self):
        assert DRAG_FAMILIES == ('G1', 'G2', 'G3', 'G4', 'G5', 'G6', 'G7', 'G8')
        for family in DRAG_FAMILIES:
            assert len(DRAG_TABLES[family]) > 10

    def test_tables_sorted(self):
        for table in DRAG_TABLES.values():
            assert all(a < b for a, b in zip(table.mach, table.mach[1:]))

    def test_clamp_below_and_above(self):
        for family in DRAG_FAMILIES:
            table = DRAG_TABLES[family]
            assert lookup(-1.0, family) == table.cd[0]
            assert lookup(100.0, family) == table.cd[-1]

    def test_exact_row(self):
        table = DRAG_TABLES['G7']
        for i in (0, 5, len(table) // 2, len(table) - 1):
            assert lookup(table.mach[i], 'G7') == table.cd[i]

    def test_interior_interpolation(self):
        table = DRAG_TABLES['G1']
        m0, m1 = table.mach[10], table.mach[11]
        c0, c1 = table.cd[10], table.cd[11]
        m = m0 + 0.25 * (m1 - m0)
        assert lookup(m, 'G1') == pytest.approx(c0 + 0.25 * (c1 - c0))

    def test_family_case_insensitive(self):
        assert lookup(1.5, 'g7') == lookup(1.5, 'G7')

    def test_unknown_family(self):
        with pytest.raises(InvalidParameter):
            lookup(1.0, 'G9')

    def test_nan_mach(self):
        with pytest.raises(InvalidParameter):
            lookup(float('nan'), 'G1')

    def test_array_matches_scalar(self):
        machs = np.linspace(-0.5, 6.0, 97)
        for family in ('G1', 'G7'):
            table = DRAG_TABLES[family]
            expected = [table.lookup(m) for m in machs]
            np.testing.assert_allclose(table.lookup_array(machs), expected, rtol=1e-12)

    def test_g3_g4_share_g1_rows(self):
        assert DRAG_TABLES['G3'].cd == DRAG_TABLES['G1'].cd
        assert DRAG_TABLES['G4'].cd == DRAG_TABLES['G1'].cd

    def test_transonic_rise(self):
        """Drag rises sharply through Mach 1 for G1."""
        assert lookup(1.2, 'G1') > 1.5 * lookup(0.8, 'G1')

    def test_ballistic_deceleration_units(self):
        """fps form of the relation equals its SI form."""
        v, rho, sos, bc = 250.0, 1.1, 340.0, 0.2
        table = DRAG_TABLES['G1']
        i = table.lookup(v / sos)
        expected = (i / bc) * (rho / 1.225) * v * v / (7503.0 * 0.3048)
        assert ballistic_drag_deceleration(v, rho, sos, bc, table) == pytest.approx(expected, rel=1e-12)

    def test_direct_deceleration(self):
        area = reference_area(0.01)
        assert area == pytest.approx(math.pi * 0.005 ** 2)
        a = direct_drag_deceleration(100.0, 1.225, 0.5, area, 0.01)
        assert a == pytest.approx(0.5 * 0.5 * 1.225 * area * 100.0 ** 2 / 0.01)


class TestLaunchParameters:
    """Input validation before any computation starts."""

    @pytest.mark.parametrize("overrides", [
        {'velocity': 0.0},
        {'velocity': -10.0},
        {'mass': 0.0},
        {'air_density': 0.0},
        {'initial_height': -1.0},
        {'wind_speed': -1.0},
        {'angle': float('nan')},
        {'velocity': float('inf')},
        {'drag': 'G1'},
    ])
    def test_rejects_nonphysical(self, overrides):
        with pytest.raises(InvalidParameter):
            make_params(**overrides)

    def test_ballistic_drag_needs_sound_speed(self):
        with pytest.raises(InvalidParameter):
            make_params(drag=BallisticDrag(0.3))
        with pytest.raises(InvalidParameter):
            make_params(drag=BallisticDrag(0.3), speed_of_sound=0.0)

    @pytest.mark.parametrize("kwargs", [
        {'ballistic_coefficient': 0.0},
        {'ballistic_coefficient': -0.2},
        {'ballistic_coefficient': 0.3, 'family': 'G12'},
    ])
    def test_bad_ballistic_drag(self, kwargs):
        with pytest.raises(InvalidParameter):
            BallisticDrag(**kwargs)

    def test_bad_direct_drag(self):
        with pytest.raises(InvalidParameter):
            DirectDrag(drag_coefficient=-0.1, diameter=0.01)
        with pytest.raises(InvalidParameter):
            DirectDrag(drag_coefficient=0.3, diameter=0.0)

    def test_error_hierarchy(self):
        with pytest.raises(BallisticsError):
            make_params(mass=-1.0)
        with pytest.raises(ValueError):
            make_params(mass=-1.0)

    def test_family_normalized(self):
        assert BallisticDrag(0.3, 'g7').family == 'G7'

    def test_wind_components(self):
        p = make_params(wind_speed=5.0, wind_angle=90.0)
        assert p.wind_components()[0] == pytest.approx(5.0)
        p = make_params(wind_speed=5.0, wind_angle=270.0)
        assert p.wind_components()[0] == pytest.approx(-5.0)
        p = make_params(wind_speed=5.0, wind_angle=0.0)
        assert p.wind_components()[0] == pytest.approx(0.0, abs=1e-12)

    def test_config_validation(self):
        with pytest.raises(InvalidParameter):
            IntegratorConfig(time_step=0.0)
        with pytest.raises(InvalidParameter):
            ZeroConfig(min_angle=10.0, initial_max_angle=5.0)

    @pytest.mark.parametrize("kwargs", [
        {'max_angle': 120.0},
        {'max_angle': 90.5},
        {'scan_step': 0.0},
    ])
    def test_zero_config_limits(self, kwargs):
        with pytest.raises(InvalidParameter):
            ZeroConfig(**kwargs)

    def test_zero_config_allows_vertical(self):
        assert ZeroConfig(max_angle=90.0).max_angle == 90.0


class TestIntegrator:
    """Trajectory integration."""

    def test_first_point_is_launch_state(self):
        p = make_params(initial_height=1.6)
        r = compute_trajectory(p)
        first = r.trajectory[0]
        vx0, vy0 = p.initial_velocity()
        assert (first.t, first.x, first.y) == (0.0, 0.0, 1.6)
        assert (first.vx, first.vy) == (vx0, vy0)

    def test_no_drag_closed_form(self):
        """Without drag the result matches vacuum motion within 1%."""
        for angle in (20.0, 45.0, 70.0):
            r = compute_trajectory(make_params(velocity=150.0, angle=angle))
            ref = calculate_no_drag(150.0, angle)
            assert r.max_height == pytest.approx(ref.max_height, rel=0.01)
            assert r.max_range == pytest.approx(ref.max_range, rel=0.01)
            assert r.flight_time == pytest.approx(ref.flight_time, rel=0.01)

    def test_infinite_bc_is_drag_free(self):
        bc = make_params(drag=BallisticDrag(math.inf), speed_of_sound=340.0)
        r_bc = compute_trajectory(bc)
        r_cd = compute_trajectory(make_params())
        assert r_bc.max_range == pytest.approx(r_cd.max_range)

    def test_300_at_45_scenario(self):
        r = compute_trajectory(make_params(velocity=300.0, angle=45.0))
        assert r.max_height == pytest.approx(2293.6, rel=0.01)
        assert r.max_range == pytest.approx(9174.3, rel=0.01)
        assert r.flight_time == pytest.approx(43.25, rel=0.01)

    def test_vertical_shot(self):
        r = compute_trajectory(make_params(velocity=100.0, angle=90.0, drag=PELLET))
        assert r.max_range == pytest.approx(0.0, abs=1e-6)
        assert r.trajectory[0].vx == pytest.approx(0.0, abs=1e-9)

    def test_velocity_decays_with_drag(self):
        r = compute_trajectory(make_params(velocity=250.0, angle=0.0,
                                           initial_height=1.5, drag=PELLET))
        speed = r.speed
        assert speed[len(speed) // 2] < speed[0]
        assert speed[-1] < speed[0]
        assert r.impact_velocity < 250.0

    def test_initial_height(self):
        r = compute_trajectory(make_params(velocity=50.0, angle=10.0, initial_height=1.6))
        assert r.trajectory[0].y == 1.6
        assert r.max_height > 1.6
        assert all(p.y >= 0.0 for p in r.trajectory)

    def test_flat_shot_max_height_is_launch_height(self):
        r = compute_trajectory(make_params(velocity=100.0, angle=0.0,
                                           initial_height=2.0, drag=PELLET))
        assert r.max_height == pytest.approx(2.0)

    def test_low_bc_short_range(self):
        p = make_params(velocity=140.0, angle=45.0, mass=0.0005,
                        drag=BallisticDrag(0.01, 'G1'), speed_of_sound=340.0)
        assert compute_trajectory(p).max_range < 200.0

    def test_zero_airspeed_guard(self):
        """Projectile moving exactly with the wind: no drag direction, no NaN."""
        p = make_params(velocity=10.0, angle=0.0, initial_height=1.0,
                        wind_speed=10.0, wind_angle=90.0, drag=PELLET)
        r = compute_trajectory(p)
        assert len(r) > 1
        assert np.all(np.isfinite(r.x)) and np.all(np.isfinite(r.vy))
        assert math.isfinite(r.impact_velocity)

    def test_time_strictly_increasing(self):
        r = compute_trajectory(make_params(velocity=80.0, angle=30.0, drag=PELLET))
        assert np.all(np.diff(r.t) > 0)
        assert r.t[1] == pytest.approx(r.time_step)

    def test_boundary_convention(self):
        """flight_time is the last recorded point; impact_velocity is one step later."""
        r = compute_trajectory(make_params(velocity=100.0, angle=30.0))
        last = r.trajectory[-1]
        assert r.flight_time == pytest.approx(last.t, abs=1e-9)
        assert last.y >= 0.0
        expected = math.hypot(last.vx, last.vy - GRAVITY * r.time_step)
        assert r.impact_velocity == pytest.approx(expected, rel=1e-12)

    def test_safety_cutoff(self, caplog):
        config = IntegratorConfig(max_time=0.5)
        with caplog.at_level(logging.WARNING, logger='ballistics'):
            r = compute_trajectory(make_params(), config)
        assert r.cutoff
        assert r.trajectory[-1].t <= 0.5 + 1e-9
        assert "safety cap" in caplog.text

    def test_no_cutoff_by_default(self):
        assert not compute_trajectory(make_params(velocity=50.0)).cutoff

    def test_wind_direction(self):
        base = dict(velocity=100.0, angle=30.0, drag=PELLET)
        calm = compute_trajectory(make_params(**base)).max_range
        tail = compute_trajectory(make_params(wind_speed=10.0, wind_angle=90.0, **base)).max_range
        head = compute_trajectory(make_params(wind_speed=10.0, wind_angle=270.0, **base)).max_range
        assert head < calm < tail

    def test_point_at_distance(self):
        r = compute_trajectory(make_params(velocity=100.0, angle=10.0))
        p = r.point_at_distance(50.0)
        assert p.x == 50.0
        assert 0.0 < p.y < r.max_height
        assert r.point_at_distance(10_000.0) is None

    def test_summary(self):
        text = compute_trajectory(make_params(velocity=50.0)).summary()
        assert "TRAJECTORY SUMMARY" in text
        assert "Range" in text

    def test_rejects_wrong_type(self):
        with pytest.raises(InvalidParameter):
            compute_trajectory({'velocity': 100.0})


class TestMetrics:
    """Energy, momentum and trajectory reducers."""

    def test_energy_momentum(self):
        assert energy(1.0, 10.0) == 50.0
        assert momentum(1.0, 10.0) == 10.0

    def test_rifle_values(self):
        assert energy(0.032, 411.48) == pytest.approx(2709.05, abs=0.01)
        assert momentum(0.032, 411.48) == pytest.approx(13.167, abs=0.001)

    def test_subsonic_distance(self):
        r = compute_trajectory(make_params(velocity=400.0, angle=5.0, drag=PELLET))
        d = subsonic_distance(r, 343.0)
        assert d is not None
        assert 0.0 < d < r.max_range
        before = r.point_at_distance(d - 1.0)
        after = r.point_at_distance(d + 1.0)
        assert math.hypot(before.vx, before.vy) > 343.0 > math.hypot(after.vx, after.vy)

    def test_subsonic_never(self):
        r = compute_trajectory(make_params(velocity=200.0, angle=5.0, drag=PELLET))
        assert subsonic_distance(r, 343.0) is None

    def test_range_card(self):
        p = make_params(velocity=300.0, angle=2.0, initial_height=1.5, drag=PELLET)
        r = compute_trajectory(p)
        rows = range_card(r, p.mass, distances=(50, 100, 100_000))
        assert [row.distance for row in rows] == [50.0, 100.0]
        assert rows[0].velocity > rows[1].velocity
        assert rows[0].energy == pytest.approx(energy(p.mass, rows[0].velocity))
        assert rows[0].deviation == pytest.approx(rows[0].height - 1.5)


class TestExport:

    def test_table_columns(self):
        r = compute_trajectory(make_params(velocity=50.0))
        table = trajectory_table(r, 0.01)
        assert table.shape == (len(r), 8)
        np.testing.assert_allclose(table[:, 6], 0.5 * 0.01 * r.speed ** 2)

    def test_save_csv(self, tmp_path):
        r = compute_trajectory(make_params(velocity=30.0))
        path = save_csv(r, 0.01, str(tmp_path / 'trajectory.csv'))
        with open(path) as f:
            lines = f.read().splitlines()
        assert lines[0] == CSV_HEADER
        assert len(lines) == len(r) + 1


class TestValidation:
    """Drag-free runs against the closed form."""

    def test_errors_below_one_percent(self):
        for results in run_all_validations(verbose=False).values():
            for v in results:
                assert abs(v.range_error_pct) < 1.0
                assert abs(v.height_error_pct) < 1.0
                assert abs(v.tof_error_pct) < 1.0


class TestVisualization:

    def test_ensure_output_dir(self, tmp_path):
        from ballistics.visualization import ensure_output_dir

        target = tmp_path / 'charts' / 'run1'
        assert ensure_output_dir(str(target)) == str(target)
        assert target.is_dir()
        ensure_output_dir(str(target))

    def test_plots_render(self, tmp_path):
        import matplotlib.pyplot as plt
        from ballistics.visualization import plot_trajectory, plot_drag_tables

        r = compute_trajectory(make_params(velocity=400.0, angle=5.0, drag=PELLET))
        fig = plot_trajectory(r, mass=0.01, speed_of_sound=343.0, zero_height=0.0,
                              save_path=str(tmp_path / 'traj.png'))
        assert (tmp_path / 'traj.png').exists()
        plt.close(fig)
        plt.close(plot_drag_tables())
