"""
Standard Drag Functions
=======================
Mach-dependent drag function tables for the G-family reference projectiles
and the two deceleration models that consume them.

Tables (Mach, Cd) are the published standard drag functions:
- G1  Ingalls flat-base
- G2  Aberdeen J projectile
- G5  short 7.5° boat-tail, 6.19 calibre tangent ogive
- G6  flat-base, 6 calibre secant ogive
- G7  long 7.5° boat-tail, 10 calibre tangent ogive
- G8  flat-base, 10 calibre secant ogive

There is no published standard table for G3 and G4; both resolve to the
G1 function.

Lookups clamp to the first/last row outside the tabulated Mach range and
interpolate linearly in between. Tables are built once at import and are
read-only afterwards.
"""

import math
from bisect import bisect_right
from typing import Dict, Tuple

import numpy as np
from scipy.interpolate import interp1d

from .atmosphere import mach_number
from .config import BC_CONSTANT, FPS_TO_MPS, STANDARD_AIR_DENSITY
from .exceptions import InvalidParameter


# ══════════════════════════════════════════════════════════════════════════
#  Drag function tables: (Mach, Cd) rows, ascending Mach
# ══════════════════════════════════════════════════════════════════════════

G1_DATA = {
    'name': 'G1 Flat-Base',
    'color': '#e74c3c',
    'table': [
        (0.00, 0.2629), (0.05, 0.2558), (0.10, 0.2487), (0.15, 0.2413),
        (0.20, 0.2344), (0.25, 0.2278), (0.30, 0.2214), (0.35, 0.2155),
        (0.40, 0.2104), (0.45, 0.2061), (0.50, 0.2032), (0.55, 0.2020),
        (0.60, 0.2034), (0.65, 0.2165), (0.70, 0.2230), (0.75, 0.2313),
        (0.80, 0.2417), (0.85, 0.2546), (0.90, 0.2706), (0.925, 0.2838),
        (0.95, 0.3017), (0.975, 0.3237), (1.00, 0.3537), (1.025, 0.3860),
        (1.05, 0.4041), (1.075, 0.4147), (1.10, 0.4209), (1.125, 0.4248),
        (1.15, 0.4270), (1.175, 0.4280), (1.20, 0.4280), (1.25, 0.4263),
        (1.30, 0.4230), (1.35, 0.4183), (1.40, 0.4127), (1.45, 0.4068),
        (1.50, 0.4008), (1.55, 0.3947), (1.60, 0.3887), (1.65, 0.3828),
        (1.70, 0.3770), (1.75, 0.3715), (1.80, 0.3663), (1.85, 0.3612),
        (1.90, 0.3564), (1.95, 0.3518), (2.00, 0.3474), (2.05, 0.3432),
        (2.10, 0.3392), (2.15, 0.3354), (2.20, 0.3318), (2.25, 0.3284),
        (2.30, 0.3251), (2.35, 0.3219), (2.40, 0.3188), (2.45, 0.3159),
        (2.50, 0.3131), (2.60, 0.3078), (2.70, 0.3029), (2.80, 0.2984),
        (2.90, 0.2943), (3.00, 0.2906), (3.10, 0.2872), (3.20, 0.2842),
        (3.30, 0.2814), (3.40, 0.2788), (3.50, 0.2764), (3.60, 0.2742),
        (3.70, 0.2721), (3.80, 0.2702), (3.90, 0.2684), (4.00, 0.2668),
        (4.20, 0.2638), (4.40, 0.2614), (4.60, 0.2594), (4.80, 0.2577),
        (5.00, 0.2563),
    ],
}

G2_DATA = {
    'name': 'G2 Aberdeen J',
    'color': '#3498db',
    'table': [
        (0.00, 0.2303), (0.05, 0.2298), (0.10, 0.2287), (0.15, 0.2271),
        (0.20, 0.2251), (0.25, 0.2227), (0.30, 0.2196), (0.35, 0.2156),
        (0.40, 0.2107), (0.45, 0.2048), (0.50, 0.1980), (0.55, 0.1905),
        (0.60, 0.1828), (0.65, 0.1758), (0.70, 0.1702), (0.75, 0.1669),
        (0.775, 0.1664), (0.80, 0.1667), (0.825, 0.1682), (0.85, 0.1711),
        (0.875, 0.1761), (0.90, 0.1831), (0.925, 0.2004), (0.95, 0.2589),
        (0.975, 0.3492), (1.00, 0.3983), (1.025, 0.4075), (1.05, 0.4103),
        (1.075, 0.4114), (1.10, 0.4106), (1.125, 0.4089), (1.15, 0.4068),
        (1.175, 0.4046), (1.20, 0.4021), (1.25, 0.3966), (1.30, 0.3904),
        (1.35, 0.3835), (1.40, 0.3759), (1.45, 0.3678), (1.50, 0.3594),
        (1.55, 0.3508), (1.60, 0.3424), (1.65, 0.3343), (1.70, 0.3267),
        (1.75, 0.3195), (1.80, 0.3128), (1.85, 0.3065), (1.90, 0.3007),
        (1.95, 0.2951), (2.00, 0.2899), (2.05, 0.2850), (2.10, 0.2804),
        (2.15, 0.2761), (2.20, 0.2720), (2.25, 0.2681), (2.30, 0.2644),
        (2.35, 0.2609), (2.40, 0.2575), (2.45, 0.2543), (2.50, 0.2513),
        (2.55, 0.2484), (2.60, 0.2456), (2.65, 0.2430), (2.70, 0.2404),
        (2.75, 0.2380), (2.80, 0.2356), (2.85, 0.2333), (2.90, 0.2312),
        (2.95, 0.2291), (3.00, 0.2270), (3.10, 0.2232), (3.20, 0.2196),
        (3.30, 0.2163), (3.40, 0.2132), (3.50, 0.2102), (3.60, 0.2075),
        (3.70, 0.2049), (3.80, 0.2024), (3.90, 0.2001), (4.00, 0.1978),
        (4.20, 0.1935), (4.40, 0.1896), (4.60, 0.1860), (4.80, 0.1826),
        (5.00, 0.1795),
    ],
}

G5_DATA = {
    'name': 'G5 Short Boat-Tail',
    'color': '#2ecc71',
    'table': [
        (0.00, 0.1710), (0.05, 0.1719), (0.10, 0.1727), (0.15, 0.1732),
        (0.20, 0.1734), (0.25, 0.1730), (0.30, 0.1718), (0.35, 0.1696),
        (0.40, 0.1668), (0.45, 0.1637), (0.50, 0.1603), (0.55, 0.1566),
        (0.60, 0.1529), (0.65, 0.1497), (0.70, 0.1473), (0.75, 0.1463),
        (0.80, 0.1489), (0.85, 0.1583), (0.875, 0.1672), (0.90, 0.1815),
        (0.925, 0.2051), (0.95, 0.2413), (0.975, 0.2884), (1.00, 0.3379),
        (1.025, 0.3785), (1.05, 0.4032), (1.075, 0.4147), (1.10, 0.4201),
        (1.15, 0.4278), (1.20, 0.4338), (1.25, 0.4373), (1.30, 0.4392),
        (1.35, 0.4403), (1.40, 0.4406), (1.45, 0.4401), (1.50, 0.4386),
        (1.55, 0.4362), (1.60, 0.4328), (1.65, 0.4286), (1.70, 0.4237),
        (1.75, 0.4182), (1.80, 0.4121), (1.85, 0.4057), (1.90, 0.3991),
        (1.95, 0.3926), (2.00, 0.3861), (2.05, 0.3800), (2.10, 0.3741),
        (2.15, 0.3684), (2.20, 0.3630), (2.25, 0.3578), (2.30, 0.3529),
        (2.35, 0.3481), (2.40, 0.3435), (2.45, 0.3391), (2.50, 0.3349),
        (2.60, 0.3269), (2.70, 0.3194), (2.80, 0.3125), (2.90, 0.3060),
        (3.00, 0.2999), (3.10, 0.2942), (3.20, 0.2889), (3.30, 0.2838),
        (3.40, 0.2790), (3.50, 0.2745), (3.60, 0.2703), (3.70, 0.2662),
        (3.80, 0.2624), (3.90, 0.2588), (4.00, 0.2553), (4.20, 0.2488),
        (4.40, 0.2429), (4.60, 0.2376), (4.80, 0.2326), (5.00, 0.2280),
    ],
}

G6_DATA = {
    'name': 'G6 Flat-Base Secant Ogive',
    'color': '#9b59b6',
    'table': [
        (0.00, 0.2617), (0.05, 0.2553), (0.10, 0.2491), (0.15, 0.2432),
        (0.20, 0.2376), (0.25, 0.2324), (0.30, 0.2278), (0.35, 0.2238),
        (0.40, 0.2205), (0.45, 0.2177), (0.50, 0.2155), (0.55, 0.2138),
        (0.60, 0.2126), (0.65, 0.2121), (0.70, 0.2122), (0.75, 0.2132),
        (0.80, 0.2154), (0.85, 0.2194), (0.875, 0.2229), (0.90, 0.2297),
        (0.925, 0.2449), (0.95, 0.2732), (0.975, 0.3141), (1.00, 0.3597),
        (1.025, 0.3994), (1.05, 0.4261), (1.075, 0.4402), (1.10, 0.4465),
        (1.125, 0.4490), (1.15, 0.4497), (1.175, 0.4494), (1.20, 0.4482),
        (1.225, 0.4464), (1.25, 0.4441), (1.30, 0.4390), (1.35, 0.4336),
        (1.40, 0.4279), (1.45, 0.4221), (1.50, 0.4162), (1.55, 0.4102),
        (1.60, 0.4042), (1.65, 0.3981), (1.70, 0.3919), (1.75, 0.3855),
        (1.80, 0.3788), (1.85, 0.3721), (1.90, 0.3652), (1.95, 0.3583),
        (2.00, 0.3515), (2.05, 0.3447), (2.10, 0.3381), (2.15, 0.3314),
        (2.20, 0.3249), (2.25, 0.3185), (2.30, 0.3122), (2.35, 0.3060),
        (2.40, 0.3000), (2.45, 0.2941), (2.50, 0.2883), (2.60, 0.2772),
        (2.70, 0.2668), (2.80, 0.2574), (2.90, 0.2487), (3.00, 0.2407),
        (3.10, 0.2333), (3.20, 0.2265), (3.30, 0.2202), (3.40, 0.2144),
        (3.50, 0.2089), (3.60, 0.2039), (3.70, 0.1991), (3.80, 0.1947),
        (3.90, 0.1905), (4.00, 0.1866), (4.20, 0.1794), (4.40, 0.1730),
        (4.60, 0.1673), (4.80, 0.1621), (5.00, 0.1574),
    ],
}

G7_DATA = {
    'name': 'G7 Long Boat-Tail',
    'color': '#f39c12',
    'table': [
        (0.00, 0.1198), (0.05, 0.1197), (0.10, 0.1196), (0.15, 0.1194),
        (0.20, 0.1193), (0.25, 0.1194), (0.30, 0.1194), (0.35, 0.1194),
        (0.40, 0.1193), (0.45, 0.1193), (0.50, 0.1194), (0.55, 0.1193),
        (0.60, 0.1194), (0.65, 0.1197), (0.70, 0.1202), (0.725, 0.1207),
        (0.75, 0.1215), (0.775, 0.1226), (0.80, 0.1242), (0.825, 0.1266),
        (0.85, 0.1306), (0.875, 0.1368), (0.90, 0.1464), (0.925, 0.1660),
        (0.95, 0.2054), (0.975, 0.2993), (1.00, 0.3803), (1.025, 0.4015),
        (1.05, 0.4043), (1.075, 0.4034), (1.10, 0.4014), (1.125, 0.3987),
        (1.15, 0.3955), (1.20, 0.3884), (1.25, 0.3810), (1.30, 0.3732),
        (1.35, 0.3657), (1.40, 0.3580), (1.50, 0.3440), (1.55, 0.3376),
        (1.60, 0.3315), (1.65, 0.3260), (1.70, 0.3209), (1.75, 0.3160),
        (1.80, 0.3117), (1.85, 0.3078), (1.90, 0.3042), (1.95, 0.3010),
        (2.00, 0.2980), (2.05, 0.2951), (2.10, 0.2922), (2.15, 0.2892),
        (2.20, 0.2864), (2.25, 0.2835), (2.30, 0.2807), (2.35, 0.2779),
        (2.40, 0.2752), (2.45, 0.2725), (2.50, 0.2697), (2.55, 0.2670),
        (2.60, 0.2643), (2.65, 0.2615), (2.70, 0.2588), (2.75, 0.2561),
        (2.80, 0.2533), (2.85, 0.2506), (2.90, 0.2479), (2.95, 0.2451),
        (3.00, 0.2424), (3.10, 0.2368), (3.20, 0.2313), (3.30, 0.2258),
        (3.40, 0.2205), (3.50, 0.2154), (3.60, 0.2106), (3.70, 0.2060),
        (3.80, 0.2017), (3.90, 0.1975), (4.00, 0.1935), (4.20, 0.1861),
        (4.40, 0.1793), (4.60, 0.1730), (4.80, 0.1672), (5.00, 0.1618),
    ],
}

G8_DATA = {
    'name': 'G8 Flat-Base Long Secant',
    'color': '#1abc9c',
    'table': [
        (0.00, 0.2105), (0.05, 0.2105), (0.10, 0.2104), (0.15, 0.2104),
        (0.20, 0.2103), (0.25, 0.2103), (0.30, 0.2103), (0.35, 0.2103),
        (0.40, 0.2103), (0.45, 0.2102), (0.50, 0.2102), (0.55, 0.2102),
        (0.60, 0.2102), (0.65, 0.2102), (0.70, 0.2103), (0.75, 0.2104),
        (0.80, 0.2104), (0.825, 0.2104), (0.85, 0.2105), (0.875, 0.2106),
        (0.90, 0.2109), (0.925, 0.2183), (0.95, 0.2571), (0.975, 0.3358),
        (1.00, 0.4068), (1.025, 0.4378), (1.05, 0.4476), (1.075, 0.4493),
        (1.10, 0.4477), (1.125, 0.4450), (1.15, 0.4419), (1.20, 0.4353),
        (1.25, 0.4283), (1.30, 0.4208), (1.35, 0.4133), (1.40, 0.4059),
        (1.45, 0.3986), (1.50, 0.3915), (1.55, 0.3845), (1.60, 0.3777),
        (1.65, 0.3710), (1.70, 0.3645), (1.75, 0.3581), (1.80, 0.3519),
        (1.85, 0.3458), (1.90, 0.3400), (1.95, 0.3343), (2.00, 0.3288),
        (2.05, 0.3234), (2.10, 0.3182), (2.15, 0.3131), (2.20, 0.3081),
        (2.25, 0.3032), (2.30, 0.2983), (2.35, 0.2937), (2.40, 0.2891),
        (2.45, 0.2845), (2.50, 0.2802), (2.60, 0.2720), (2.70, 0.2642),
        (2.80, 0.2569), (2.90, 0.2499), (3.00, 0.2432), (3.10, 0.2368),
        (3.20, 0.2308), (3.30, 0.2251), (3.40, 0.2197), (3.50, 0.2147),
        (3.60, 0.2101), (3.70, 0.2058), (3.80, 0.2019), (3.90, 0.1983),
        (4.00, 0.1950), (4.20, 0.1890), (4.40, 0.1837), (4.60, 0.1791),
        (4.80, 0.1750), (5.00, 0.1713),
    ],
}

# G3 and G4 have no published standard table and share the G1 rows
G3_DATA = {'name': 'G3 (G1 rows)', 'color': '#95a5a6', 'table': G1_DATA['table']}
G4_DATA = {'name': 'G4 (G1 rows)', 'color': '#7f8c8d', 'table': G1_DATA['table']}

ALL_FAMILIES = {
    'G1': G1_DATA,
    'G2': G2_DATA,
    'G3': G3_DATA,
    'G4': G4_DATA,
    'G5': G5_DATA,
    'G6': G6_DATA,
    'G7': G7_DATA,
    'G8': G8_DATA,
}

DRAG_FAMILIES: Tuple[str, ...] = tuple(ALL_FAMILIES)


# ══════════════════════════════════════════════════════════════════════════
#  Table lookup
# ══════════════════════════════════════════════════════════════════════════

class DragTable:
    """
    Drag function table for one G family.

    ``lookup`` is the scalar path used inside the integration loop;
    ``lookup_array`` is the vectorized equivalent for plotting.
    """

    def __init__(self, family: str = 'G1'):
        key = normalize_family(family)
        data = ALL_FAMILIES[key]
        self.family = key
        self.name = data['name']
        self.color = data['color']

        mach, cd = zip(*data['table'])
        self.mach: Tuple[float, ...] = tuple(float(m) for m in mach)
        self.cd: Tuple[float, ...] = tuple(float(c) for c in cd)

        self._interp = interp1d(
            np.array(self.mach), np.array(self.cd),
            kind='linear',
            bounds_error=False,
            fill_value=(self.cd[0], self.cd[-1]),
            assume_sorted=True,
        )

    def __len__(self) -> int:
        return len(self.mach)

    def __repr__(self) -> str:
        return f"DragTable({self.family!r}, rows={len(self)})"

    def lookup(self, mach: float) -> float:
        """Drag function value at *mach*, clamped to the table boundaries."""
        if math.isnan(mach):
            raise InvalidParameter('mach', mach, "must be a number")
        if mach <= self.mach[0]:
            return self.cd[0]
        if mach >= self.mach[-1]:
            return self.cd[-1]

        i = bisect_right(self.mach, mach)
        m0, c0 = self.mach[i - 1], self.cd[i - 1]
        if mach == m0:
            return c0
        m1, c1 = self.mach[i], self.cd[i]
        return c0 + (c1 - c0) * (mach - m0) / (m1 - m0)

    def lookup_array(self, mach_array: np.ndarray) -> np.ndarray:
        """Vectorized lookup with the same clamping."""
        return np.asarray(self._interp(np.asarray(mach_array, dtype=float)), dtype=float)


def normalize_family(family: str) -> str:
    key = str(family).strip().upper()
    if key not in ALL_FAMILIES:
        raise InvalidParameter('family', family, f"expected one of {list(ALL_FAMILIES)}")
    return key


DRAG_TABLES: Dict[str, DragTable] = {key: DragTable(key) for key in DRAG_FAMILIES}


def lookup(mach: float, family: str) -> float:
    """Drag function value for *family* at *mach* (see ``DragTable.lookup``)."""
    return DRAG_TABLES[normalize_family(family)].lookup(mach)


# ══════════════════════════════════════════════════════════════════════════
#  Deceleration models
# ══════════════════════════════════════════════════════════════════════════

def reference_area(diameter: float) -> float:
    """Cross-sectional area (m²) of a round body of the given diameter (m)."""
    return math.pi * (diameter / 2.0) ** 2


def direct_drag_deceleration(speed: float, rho: float, cd: float,
                             area: float, mass: float) -> float:
    """
    Drag deceleration magnitude (m/s²) from an explicit drag coefficient.

    a = ½ ρ Cd A v² / m
    """
    return 0.5 * cd * rho * area * speed * speed / mass


def ballistic_drag_deceleration(speed: float, rho: float, speed_of_sound: float,
                                bc: float, table: DragTable) -> float:
    """
    Drag deceleration magnitude (m/s²) from a ballistic coefficient.

    The G-function relation is defined in feet per second:

        a_fps² = (i(M) / BC) · (ρ / ρ₀) · v_fps² / 7503

    so the airspeed is converted to ft/s on the way in and the result back
    to m/s² on the way out.

    Parameters
    ----------
    speed : float
        Airspeed relative to the air mass (m/s)
    rho : float
        Air density (kg/m³)
    speed_of_sound : float
        Local speed of sound (m/s)
    bc : float
        Ballistic coefficient for the table's family; ``math.inf`` disables drag
    table : DragTable
        Drag function of the reference projectile
    """
    i = table.lookup(mach_number(speed, speed_of_sound))
    v_fps = speed / FPS_TO_MPS
    decel_fps2 = (i / bc) * (rho / STANDARD_AIR_DENSITY) * v_fps * v_fps / BC_CONSTANT
    return decel_fps2 * FPS_TO_MPS

