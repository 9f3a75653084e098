"""Closed set of solar-system bodies and their per-body data tables.

Every table is keyed by BodyId and checked for totality at import, so a
lookup through body_physical() or body_visual() cannot silently miss.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from core.errors import UnknownBodyError

_JPL_SSD_PHYS_PAR = "https://ssd.jpl.nasa.gov/planets/phys_par.html"
_NASA_FACT_SHEET = "https://nssdc.gsfc.nasa.gov/planetary/factsheet/"


class BodyId(str, Enum):
    """Bodies rendered by the scene. The Moon is positioned relative to Earth."""

    SUN = "Sun"
    MERCURY = "Mercury"
    VENUS = "Venus"
    EARTH = "Earth"
    MOON = "Moon"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturn"
    URANUS = "Uranus"
    NEPTUNE = "Neptune"

    @classmethod
    def parse(cls, value: Union[str, "BodyId"]) -> "BodyId":
        """Resolve a BodyId from an instance or a case-insensitive name.

        Raises:
            UnknownBodyError: If the value names no body in the set.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for body in cls:
                if body.value.lower() == key:
                    return body
        raise UnknownBodyError(value)

    @property
    def is_geocentric(self) -> bool:
        return self is BodyId.MOON

    def __str__(self) -> str:
        return self.value


# Heliocentric bodies in outward order, excluding the Sun itself.
PLANET_IDS: tuple[BodyId, ...] = (
    BodyId.MERCURY,
    BodyId.VENUS,
    BodyId.EARTH,
    BodyId.MARS,
    BodyId.JUPITER,
    BodyId.SATURN,
    BodyId.URANUS,
    BodyId.NEPTUNE,
)


@dataclass(frozen=True, slots=True)
class BodyPhysical:
    """Physical properties of a body."""

    radius_mean_km: float
    radius_equatorial_km: float
    mass_kg: float
    gm_km3_s2: float
    density_g_cm3: float
    sidereal_rotation_hours: float  # negative for retrograde
    obliquity_deg: float
    source: str
    radius_polar_km: Optional[float] = None


@dataclass(frozen=True, slots=True)
class BodyVisual:
    """Display properties of a body."""

    color: str  # hex "#rrggbb"
    has_rings: bool = False


_PHYSICAL: dict[BodyId, BodyPhysical] = {
    BodyId.SUN: BodyPhysical(
        696_340.0, 696_340.0, 1.98892e30, 1.32712440018e11, 1.408,
        609.12, 7.25, _JPL_SSD_PHYS_PAR,
    ),
    BodyId.MERCURY: BodyPhysical(
        2_439.7, 2_440.5, 3.3011e23, 2.2032e4, 5.427,
        1407.6, 0.034, _JPL_SSD_PHYS_PAR, 2_438.3,
    ),
    BodyId.VENUS: BodyPhysical(
        6_051.8, 6_051.8, 4.8675e24, 3.24859e5, 5.243,
        -5832.5, 177.36, _JPL_SSD_PHYS_PAR,
    ),
    BodyId.EARTH: BodyPhysical(
        6_371.0, 6_378.137, 5.9722e24, 3.986004418e5, 5.514,
        23.9345, 23.4393, _JPL_SSD_PHYS_PAR, 6_356.752,
    ),
    BodyId.MOON: BodyPhysical(
        1_737.4, 1_738.1, 7.342e22, 4.9028695e3, 3.344,
        655.728, 6.68, _NASA_FACT_SHEET, 1_736.0,
    ),
    BodyId.MARS: BodyPhysical(
        3_389.5, 3_396.2, 6.4171e23, 4.282837e4, 3.933,
        24.6229, 25.19, _JPL_SSD_PHYS_PAR, 3_376.2,
    ),
    BodyId.JUPITER: BodyPhysical(
        69_911.0, 71_492.0, 1.8982e27, 1.26686534e8, 1.326,
        9.925, 3.13, _JPL_SSD_PHYS_PAR, 66_854.0,
    ),
    BodyId.SATURN: BodyPhysical(
        58_232.0, 60_268.0, 5.6834e26, 3.7931187e7, 0.687,
        10.656, 26.73, _JPL_SSD_PHYS_PAR, 54_364.0,
    ),
    BodyId.URANUS: BodyPhysical(
        25_362.0, 25_559.0, 8.681e25, 5.793939e6, 1.271,
        -17.24, 97.77, _JPL_SSD_PHYS_PAR, 24_973.0,
    ),
    BodyId.NEPTUNE: BodyPhysical(
        24_622.0, 24_764.0, 1.02413e26, 6.836529e6, 1.638,
        16.11, 28.32, _JPL_SSD_PHYS_PAR, 24_341.0,
    ),
}

_VISUAL: dict[BodyId, BodyVisual] = {
    BodyId.SUN: BodyVisual("#ffd27d"),
    BodyId.MERCURY: BodyVisual("#b5b5b5"),
    BodyId.VENUS: BodyVisual("#e6c87a"),
    BodyId.EARTH: BodyVisual("#6b93d6"),
    BodyId.MOON: BodyVisual("#aaaaaa"),
    BodyId.MARS: BodyVisual("#c1440e"),
    BodyId.JUPITER: BodyVisual("#d4a574", has_rings=True),
    BodyId.SATURN: BodyVisual("#f4d59e", has_rings=True),
    BodyId.URANUS: BodyVisual("#b5e3e3", has_rings=True),
    BodyId.NEPTUNE: BodyVisual("#5b7fde", has_rings=True),
}


def _check_total(name: str, table: Mapping[BodyId, object]) -> Mapping[BodyId, object]:
    missing = set(BodyId) - set(table)
    if missing:
        names = ", ".join(sorted(b.value for b in missing))
        raise RuntimeError(f"{name} is missing entries for: {names}")
    return MappingProxyType(table)


BODY_PHYSICAL: Mapping[BodyId, BodyPhysical] = _check_total("BODY_PHYSICAL", _PHYSICAL)
BODY_VISUAL: Mapping[BodyId, BodyVisual] = _check_total("BODY_VISUAL", _VISUAL)


def body_physical(body: Union[str, BodyId]) -> BodyPhysical:
    """Physical properties for a body. Raises UnknownBodyError on a miss."""
    return BODY_PHYSICAL[BodyId.parse(body)]


def body_visual(body: Union[str, BodyId]) -> BodyVisual:
    """Display properties for a body. Raises UnknownBodyError on a miss."""
    return BODY_VISUAL[BodyId.parse(body)]
