"""
Moist-Air Atmosphere Model
==========================
Air density and speed of sound from station weather readings
(temperature, pressure, relative humidity, altitude).

Density follows the equation of state for a mixture of dry air and water
vapour, with the vapour pressure from the Magnus formula:

    Es = 6.1078 · 10^(7.5·T / (T + 237.3))          [hPa]
    ρ  = (Pd·M_dry + Pv·M_vapor) / (R · T_K)

Speed of sound uses the linear approximation 331.5 + 0.6·T, which stays
within a few percent of the adiabatic value between -20 °C and 40 °C.

The pressure input is interpreted according to ``PressureReference``; the
station reading (no correction) is the default.
"""

import math
from dataclasses import dataclass
from enum import Enum

from .config import STANDARD_AIR_DENSITY
from .exceptions import InvalidParameter
from .logger import logger


# ── Constants ─────────────────────────────────────────────────────────────
CELSIUS_TO_KELVIN    = 273.15
GAS_CONSTANT         = 8.314462618   # J/(mol·K)
MOLAR_MASS_DRY_AIR   = 0.0289644     # kg/mol
MOLAR_MASS_VAPOR     = 0.01801528    # kg/mol
LAPSE_RATE           = 0.0065        # K/m
SEA_LEVEL_TEMP       = 288.15        # K
BAROMETRIC_EXPONENT  = 5.255
SOUND_SPEED_BASE     = 331.5         # m/s at 0 °C
SOUND_SPEED_TEMP_COEFF = 0.6         # m/s per °C
HPA_TO_PA            = 100.0


class PressureReference(Enum):
    """How the pressure argument of ``air_density`` is interpreted."""
    STATION = 'station'
    SEA_LEVEL_REDUCED = 'sea_level_reduced'


def _require_finite(name: str, value: float) -> float:
    if not math.isfinite(value):
        raise InvalidParameter(name, value, "must be finite")
    return float(value)


def saturation_vapor_pressure(temperature_c: float) -> float:
    """Saturation vapour pressure (hPa) over water, Magnus formula."""
    t = _require_finite('temperature_c', temperature_c)
    return 6.1078 * 10.0 ** (7.5 * t / (t + 237.3))


def sea_level_pressure(pressure_hpa: float, altitude_m: float) -> float:
    """
    Reduce a station pressure (hPa) to sea level with the barometric formula.

    P_sl = P · (1 − 0.0065·h / 288.15)^(−5.255)
    """
    p = _require_finite('pressure_hpa', pressure_hpa)
    h = _require_finite('altitude_m', altitude_m)
    base = 1.0 - LAPSE_RATE * h / SEA_LEVEL_TEMP
    if base <= 0.0:
        raise InvalidParameter('altitude_m', altitude_m,
                               "above the range of the barometric formula")
    return p * base ** (-BAROMETRIC_EXPONENT)


def air_density(temperature_c: float, pressure_hpa: float,
                humidity_pct: float, altitude_m: float = 0.0,
                pressure_reference: PressureReference = PressureReference.STATION) -> float:
    """
    Moist air density (kg/m³).

    Parameters
    ----------
    temperature_c : float
        Air temperature (°C)
    pressure_hpa : float
        Pressure reading (hPa)
    humidity_pct : float
        Relative humidity (%), clamped to [0, 100]
    altitude_m : float
        Station altitude (m); only used for ``SEA_LEVEL_REDUCED``
    pressure_reference : PressureReference
        ``STATION`` uses the reading as is, ``SEA_LEVEL_REDUCED`` applies
        ``sea_level_pressure`` first
    """
    t = _require_finite('temperature_c', temperature_c)
    p = _require_finite('pressure_hpa', pressure_hpa)
    rh = _require_finite('humidity_pct', humidity_pct)
    _require_finite('altitude_m', altitude_m)

    t_k = t + CELSIUS_TO_KELVIN
    if t_k <= 0.0:
        raise InvalidParameter('temperature_c', temperature_c, "below absolute zero")
    if p <= 0.0:
        raise InvalidParameter('pressure_hpa', pressure_hpa, "must be > 0")

    if not 0.0 <= rh <= 100.0:
        clamped = min(max(rh, 0.0), 100.0)
        logger.warning("Relative humidity %.1f%% clamped to %.1f%%", rh, clamped)
        rh = clamped

    if pressure_reference is PressureReference.SEA_LEVEL_REDUCED:
        p = sea_level_pressure(p, altitude_m)

    es = saturation_vapor_pressure(t)
    e = (rh / 100.0) * es

    # partial pressures, hPa → Pa
    pd = (p - e) * HPA_TO_PA
    pv = e * HPA_TO_PA

    rho = (pd * MOLAR_MASS_DRY_AIR + pv * MOLAR_MASS_VAPOR) / (GAS_CONSTANT * t_k)
    if rho <= 0.0:
        raise InvalidParameter('pressure_hpa', pressure_hpa,
                               f"vapour pressure {e:.1f} hPa leaves no dry air")
    return rho


def speed_of_sound(temperature_c: float) -> float:
    """Speed of sound (m/s), linear in temperature: 331.5 + 0.6·T."""
    t = _require_finite('temperature_c', temperature_c)
    if t + CELSIUS_TO_KELVIN <= 0.0:
        raise InvalidParameter('temperature_c', temperature_c, "below absolute zero")
    return SOUND_SPEED_BASE + SOUND_SPEED_TEMP_COEFF * t


def density_ratio(rho: float) -> float:
    """Ratio of *rho* to the standard sea-level density."""
    return rho / STANDARD_AIR_DENSITY


def mach_number(velocity: float, sound_speed: float) -> float:
    """Mach number = |v| / a."""
    if not sound_speed > 0:
        raise InvalidParameter('sound_speed', sound_speed, "must be > 0")
    return abs(velocity) / sound_speed


@dataclass(frozen=True)
class WeatherConditions:
    """Weather readings at the firing point."""
    temperature_c: float = 15.0
    pressure_hpa: float = 1013.25
    humidity_pct: float = 50.0
    altitude_m: float = 0.0
    pressure_reference: PressureReference = PressureReference.STATION

    @property
    def temperature_k(self) -> float:
        return self.temperature_c + CELSIUS_TO_KELVIN

    @property
    def air_density(self) -> float:
        return air_density(self.temperature_c, self.pressure_hpa,
                           self.humidity_pct, self.altitude_m,
                           self.pressure_reference)

    @property
    def speed_of_sound(self) -> float:
        return speed_of_sound(self.temperature_c)

    @property
    def density_ratio(self) -> float:
        return density_ratio(self.air_density)
