"""
Visualization
=============
Charts for trajectory analysis:
  1. Trajectory (height vs distance) with speed and energy on a twin axis
  2. Drag function curves for all G families
  3. Air density vs temperature at several humidities
  4. Closed-form validation errors
"""

import os
from typing import List, Optional

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .atmosphere import air_density
from .drag_model import DRAG_FAMILIES, DRAG_TABLES
from .integrator import TrajectoryResult
from .metrics import subsonic_distance
from .validation import ValidationResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'font_family': 'monospace',
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def _legend(ax, **kwargs):
    ax.legend(facecolor='#1a1a1a', edgecolor='#444',
              labelcolor=STYLE['text_color'], **kwargs)


def _finish(fig, save_path: Optional[str], show: bool = False):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight',
                    facecolor=STYLE['bg_color'])
    if show:
        plt.show()
    return fig


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


# ══════════════════════════════════════════════════════════════════════════
#  1. Trajectory
# ══════════════════════════════════════════════════════════════════════════

def plot_trajectory(result: TrajectoryResult, mass: Optional[float] = None,
                    speed_of_sound: Optional[float] = None,
                    zero_height: Optional[float] = None,
                    save_path: str = None, show: bool = False) -> plt.Figure:
    """
    Height vs distance with speed (and energy when *mass* is given) on a
    second axis. Marks the apex, the zero line and the subsonic transition.
    """
    fig, ax = plt.subplots(figsize=(12, 6))
    _apply_dark_style(fig, ax)

    x, y, speed = result.x, result.y, result.speed

    ax.plot(x, y, color=STYLE['accent_colors'][0], linewidth=2.5, label='Height')
    idx_max = int(np.argmax(y))
    ax.plot(x[idx_max], y[idx_max], '^', color='#ffeb3b', markersize=10,
            label='Apex', zorder=5)
    if zero_height is not None:
        ax.axhline(y=zero_height, color='#888', linestyle='--', linewidth=1,
                   label='Zero line')
    ax.set_xlabel('Distance (m)', fontsize=12)
    ax.set_ylabel('Height (m)', fontsize=12)

    ax2 = ax.twinx()
    ax2.plot(x, speed, color=STYLE['accent_colors'][1], linewidth=1.8, label='Speed')
    ax2.set_ylabel('Speed (m/s)', color=STYLE['text_color'])
    ax2.tick_params(colors=STYLE['text_color'])
    if mass is not None:
        ax3 = ax.twinx()
        ax3.spines['right'].set_position(('outward', 60))
        ax3.plot(x, 0.5 * mass * speed ** 2, color=STYLE['accent_colors'][2],
                 linewidth=1.5, linestyle=':', label='Energy')
        ax3.set_ylabel('Energy (J)', color=STYLE['text_color'])
        ax3.tick_params(colors=STYLE['text_color'])

    if speed_of_sound is not None:
        d_sub = subsonic_distance(result, speed_of_sound)
        if d_sub is not None:
            ax.axvline(x=d_sub, color='#4444ff', linestyle='--', linewidth=2,
                       label=f'Subsonic {d_sub:.0f} m')

    p = result.params
    ax.set_title(f'Trajectory — v₀={p.velocity:.0f} m/s, θ={p.angle:.3f}°, '
                 f'range {result.max_range:.1f} m',
                 fontsize=13, fontweight='bold')
    _legend(ax, loc='upper right', fontsize=10)
    ax.set_xlim(left=0)

    return _finish(fig, save_path, show)


# ══════════════════════════════════════════════════════════════════════════
#  2. Drag Functions
# ══════════════════════════════════════════════════════════════════════════

def plot_drag_tables(save_path: str = None) -> plt.Figure:
    """Drag function value vs Mach for every G family."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    mach_range = np.linspace(0, 5.0, 500)
    for family in DRAG_FAMILIES:
        table = DRAG_TABLES[family]
        ax.plot(mach_range, table.lookup_array(mach_range), color=table.color,
                linewidth=2, label=f'{family} — {table.name}')

    ax.axvspan(0.8, 1.2, alpha=0.08, color='#ff5252')
    ax.text(1.0, 0.05, 'Transonic\nRegion', ha='center',
            color='#ff5252', fontsize=10, alpha=0.7)

    ax.set_xlabel('Mach Number', fontsize=12)
    ax.set_ylabel('Drag Function i(M)', fontsize=12)
    ax.set_title('Standard Drag Functions G1–G8', fontsize=14, fontweight='bold')
    _legend(ax, fontsize=9)
    ax.set_xlim(0, 5.0)
    ax.set_ylim(0, 0.5)

    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  3. Air Density
# ══════════════════════════════════════════════════════════════════════════

def plot_air_density(pressure_hpa: float = 1013.25,
                     humidities=(0.0, 50.0, 100.0),
                     save_path: str = None) -> plt.Figure:
    """Moist air density vs temperature at a fixed station pressure."""
    temps = np.linspace(-20.0, 40.0, 121)

    fig, ax = plt.subplots(figsize=(10, 6))
    _apply_dark_style(fig, ax)

    for rh, color in zip(humidities, STYLE['accent_colors']):
        rho = [air_density(t, pressure_hpa, rh) for t in temps]
        ax.plot(temps, rho, color=color, linewidth=2, label=f'RH {rh:.0f}%')

    ax.set_xlabel('Temperature (°C)', fontsize=12)
    ax.set_ylabel('Density (kg/m³)', fontsize=12)
    ax.set_title(f'Air Density at {pressure_hpa:.2f} hPa', fontsize=14, fontweight='bold')
    _legend(ax, fontsize=10)

    return _finish(fig, save_path)


# ══════════════════════════════════════════════════════════════════════════
#  4. Validation
# ══════════════════════════════════════════════════════════════════════════

def plot_validation(validation_results: List[ValidationResult], reference_data: dict,
                    save_path: str = None) -> plt.Figure:
    """Simulated vs closed-form range, and percentage errors per elevation."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    _apply_dark_style(fig, axes)

    angles = [v.angle_deg for v in validation_results]

    ax = axes[0]
    ax.plot(angles, [v.ref_range for v in validation_results], 'o-', color='#ffeb3b',
            linewidth=2, markersize=8, label='Closed form')
    ax.plot(angles, [v.sim_range for v in validation_results], 's--', color='#00d4ff',
            linewidth=2, markersize=8, label='Euler, no drag')
    ax.set_xlabel('Elevation Angle (°)')
    ax.set_ylabel('Range (m)')
    ax.set_title(f'Range Validation — {reference_data["name"]}', fontweight='bold')
    _legend(ax, fontsize=10)

    ax = axes[1]
    width = 1.5
    offsets = (-width, 0.0, width)
    series = (
        ('Range', [v.range_error_pct for v in validation_results], '#00d4ff'),
        ('Height', [v.height_error_pct for v in validation_results], '#00e676'),
        ('ToF', [v.tof_error_pct for v in validation_results], '#ff6b35'),
    )
    for off, (label, errors, color) in zip(offsets, series):
        ax.bar(np.array(angles) + off, errors, width=width, color=color,
               alpha=0.8, label=label)
    ax.axhline(y=0, color='#888', linewidth=0.5)
    ax.set_xlabel('Elevation Angle (°)')
    ax.set_ylabel('Error (%)')
    ax.set_title('Validation Error', fontweight='bold')
    _legend(ax, fontsize=10)

    return _finish(fig, save_path)
