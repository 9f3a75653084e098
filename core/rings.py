"""Ring systems of the giant planets.

Radii are measured from the planet's centre in km. The ring plane is the
planet's equator, so the ring normal is the planet's north pole.

Source: PDS Ring-Moon Systems Node, https://pds-rings.seti.org
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Union

from core.bodies import BodyId, body_physical, body_visual
from core.errors import InvalidInputError

_PDS_RINGS = "https://pds-rings.seti.org"


@dataclass(frozen=True, slots=True)
class RingComponent:
    name: str
    inner_radius_km: float
    outer_radius_km: float
    optical_depth: float
    source: str


@dataclass(frozen=True, slots=True)
class RingSystem:
    body: BodyId
    components: tuple[RingComponent, ...]
    main_rings: tuple[str, ...]  # components drawn at a distance

    @property
    def inclination_deg(self) -> float:
        """Tilt of the ring plane from the orbit plane (the obliquity)."""
        return body_physical(self.body).obliquity_deg


def _components(
    body: str, rows: tuple[tuple[str, float, float, float], ...]
) -> tuple[RingComponent, ...]:
    source = f"{_PDS_RINGS}/{body}/{body}_rings_table.html"
    return tuple(
        RingComponent(name, inner, outer, tau, source)
        for name, inner, outer, tau in rows
    )


# (name, inner km, outer km, normal optical depth)
_SATURN = _components("saturn", (
    ("D Ring", 66_900.0, 74_510.0, 0.001),
    ("C Ring (Crepe Ring)", 74_658.0, 92_000.0, 0.1),
    ("B Ring", 92_000.0, 117_580.0, 1.5),
    ("Cassini Division", 117_580.0, 122_170.0, 0.1),
    ("A Ring", 122_170.0, 136_775.0, 0.5),
    ("Encke Gap", 133_589.0, 133_923.0, 0.0),
    ("F Ring", 140_180.0, 140_680.0, 0.1),
    ("G Ring", 166_000.0, 175_000.0, 0.000001),
    ("E Ring", 181_000.0, 483_000.0, 0.00001),
))

_JUPITER = _components("jupiter", (
    ("Halo Ring", 92_000.0, 122_500.0, 0.00001),
    ("Main Ring", 122_500.0, 129_000.0, 0.000003),
    ("Amalthea Gossamer Ring", 129_000.0, 182_000.0, 0.0000001),
    ("Thebe Gossamer Ring", 129_000.0, 226_000.0, 0.0000001),
))

_URANUS = _components("uranus", (
    ("Zeta Ring (1986U2R)", 37_000.0, 39_500.0, 0.0001),
    ("6 Ring", 41_837.0, 41_840.0, 0.3),
    ("5 Ring", 42_234.0, 42_237.0, 0.5),
    ("4 Ring", 42_570.0, 42_573.0, 0.3),
    ("Alpha Ring", 44_718.0, 44_728.0, 0.4),
    ("Beta Ring", 45_661.0, 45_672.0, 0.3),
    ("Eta Ring", 47_175.0, 47_177.0, 0.4),
    ("Gamma Ring", 47_627.0, 47_631.0, 0.7),
    ("Delta Ring", 48_300.0, 48_304.0, 0.5),
    ("Lambda Ring", 50_023.0, 50_025.0, 0.1),
    ("Epsilon Ring", 51_149.0, 51_158.0, 2.0),
))

_NEPTUNE = _components("neptune", (
    ("Galle Ring", 41_900.0, 42_900.0, 0.00008),
    ("Le Verrier Ring", 53_200.0, 53_300.0, 0.002),
    ("Lassell Ring", 53_200.0, 57_200.0, 0.00015),
    ("Arago Ring", 57_200.0, 57_400.0, 0.0001),
    ("Adams Ring", 62_932.0, 62_947.0, 0.004),
))

RING_SYSTEMS: Mapping[BodyId, RingSystem] = MappingProxyType({
    BodyId.JUPITER: RingSystem(BodyId.JUPITER, _JUPITER, ("Main Ring",)),
    BodyId.SATURN: RingSystem(
        BodyId.SATURN,
        _SATURN,
        ("C Ring (Crepe Ring)", "B Ring", "Cassini Division", "A Ring"),
    ),
    BodyId.URANUS: RingSystem(BodyId.URANUS, _URANUS, ("Epsilon Ring",)),
    BodyId.NEPTUNE: RingSystem(BodyId.NEPTUNE, _NEPTUNE, ("Adams Ring",)),
})

_flagged = {body for body in BodyId if body_visual(body).has_rings}
if _flagged != set(RING_SYSTEMS):
    raise RuntimeError("RING_SYSTEMS does not match BodyVisual.has_rings")


def ring_system(body: Union[str, BodyId]) -> RingSystem:
    """Ring system of ``body``.

    Raises:
        InvalidInputError: If the body has no rings.
    """
    body = BodyId.parse(body)
    if not body_visual(body).has_rings:
        raise InvalidInputError(f"{body} has no ring system")
    return RING_SYSTEMS[body]


def main_visible_rings(body: Union[str, BodyId]) -> tuple[RingComponent, ...]:
    """The prominent components worth drawing when viewed from afar."""
    system = ring_system(body)
    return tuple(c for c in system.components if c.name in system.main_rings)


def ring_extent_km(body: Union[str, BodyId]) -> tuple[float, float]:
    """Innermost and outermost ring radius in km."""
    components = ring_system(body).components
    return (
        min(c.inner_radius_km for c in components),
        max(c.outer_radius_km for c in components),
    )
