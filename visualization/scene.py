"""Scene position resolver.

Builds the scene for an epoch and render mapping: every body's position,
radius and orientation in scene units (y up). Positions are absolute
(Sun at the origin) until recentered on a focus body, after which the
focus body sits exactly at the origin.

Typical use:

    snapshot = absolute_scene(epoch, PresetName.SCHOOL_MODEL)
    view = recenter(snapshot, BodyId.JUPITER)

or in one call via resolve_scene().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterator, Optional, Union

import numpy as np

from core.bodies import PLANET_IDS, BodyId, body_visual
from core.coordinate_transforms import ecliptic_to_scene, normalize
from core.ephemeris import EphemerisProvider, default_provider
from core.orientation import BodyOrientation
from utils.constants import MIN_MOON_EARTH_RADIUS_RATIO
from utils.time_utils import DateLike, parse_date_input
from visualization.scale import (
    PresetName,
    RenderMapping,
    is_physical_mapping,
    map_distance,
    map_radius,
    needs_size_based_offset,
    resolve_mapping,
)

logger = logging.getLogger(__name__)


def _frozen(vec: np.ndarray) -> np.ndarray:
    arr = np.array(vec, dtype=np.float64)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class RenderedBody:
    """One body as the renderer should draw it.

    ``distance_au`` is heliocentric for the Sun and planets and geocentric
    for the Moon; ``distance_scene`` is the same distance after mapping.
    """

    body: BodyId
    position: np.ndarray  # scene units, y up
    radius_scene: float
    color: str
    distance_au: float
    distance_scene: float
    orientation: Optional[BodyOrientation] = None


@dataclass(frozen=True, slots=True)
class SceneSnapshot:
    """All rendered bodies for one epoch, mapping and focus."""

    epoch: datetime
    mapping: RenderMapping
    bodies: tuple[RenderedBody, ...]
    preset: Optional[PresetName] = None
    focus: Optional[BodyId] = None
    moon_phase: Optional[float] = None

    def body(self, body: Union[str, BodyId]) -> RenderedBody:
        body = BodyId.parse(body)
        for rendered in self.bodies:
            if rendered.body is body:
                return rendered
        raise KeyError(body)

    def position(self, body: Union[str, BodyId]) -> np.ndarray:
        return self.body(body).position

    @property
    def sun_position(self) -> np.ndarray:
        return self.position(BodyId.SUN)

    def __iter__(self) -> Iterator[RenderedBody]:
        return iter(self.bodies)

    def __len__(self) -> int:
        return len(self.bodies)


# =============================================================================
# Absolute Positions
# =============================================================================

def _orientation(
    provider: EphemerisProvider, body: BodyId, epoch: datetime, enabled: bool
) -> Optional[BodyOrientation]:
    return provider.get_body_orientation(body, epoch) if enabled else None


def moon_offset_scene(
    geocentric_au: np.ndarray, mapping: RenderMapping
) -> tuple[np.ndarray, float]:
    """Scene offset of the Moon from Earth and its mapped distance.

    Except on the true-physical pairing, the offset is pushed out to at
    least MIN_MOON_EARTH_RADIUS_RATIO x (Earth radius + Moon radius) so
    the Moon never renders inside Earth.
    """
    distance_au = float(np.linalg.norm(geocentric_au))
    distance_scene = map_distance(distance_au, mapping.distance_scale)

    if not is_physical_mapping(mapping):
        minimum = MIN_MOON_EARTH_RADIUS_RATIO * (
            map_radius(BodyId.EARTH, mapping.size_scale)
            + map_radius(BodyId.MOON, mapping.size_scale)
        )
        if distance_scene < minimum:
            logger.debug(
                "Moon offset %.4g below separation floor, raised to %.4g",
                distance_scene, minimum,
            )
            distance_scene = minimum

    offset = ecliptic_to_scene(normalize(geocentric_au) * distance_scene)
    return offset, distance_scene


def absolute_scene(
    epoch: DateLike,
    preset: Union[str, PresetName, RenderMapping],
    provider: Optional[EphemerisProvider] = None,
    include_orientation: bool = True,
) -> SceneSnapshot:
    """Absolute scene positions for every body, Sun at the origin.

    Planets are placed along their heliocentric direction at the mapped
    distance. When the mapping pairs exaggerated true-ratio sizes with a
    compressed distance scale, planets are stacked outward so that each
    clears its inner neighbour by the sum of their radii plus the mapped
    gap between their heliocentric distances.

    Args:
        epoch: Instant to resolve.
        preset: Preset name or an explicit RenderMapping.
        provider: Ephemeris source; defaults to the shared provider.
        include_orientation: Attach BodyOrientation to each body.

    Returns:
        A SceneSnapshot with no focus applied.
    """
    epoch = parse_date_input(epoch)
    mapping = resolve_mapping(preset)
    preset_name = None if isinstance(preset, RenderMapping) else PresetName(preset)
    provider = provider if provider is not None else default_provider()

    size = mapping.size_scale
    sun_radius = map_radius(BodyId.SUN, size)
    bodies = [
        RenderedBody(
            body=BodyId.SUN,
            position=_frozen(np.zeros(3)),
            radius_scene=sun_radius,
            color=body_visual(BodyId.SUN).color,
            distance_au=0.0,
            distance_scene=0.0,
            orientation=_orientation(provider, BodyId.SUN, epoch, include_orientation),
        )
    ]

    stacked = needs_size_based_offset(mapping)
    prev_orbit, prev_radius, prev_mapped = 0.0, sun_radius, 0.0
    earth_position = None

    for planet in PLANET_IDS:
        helio = provider.get_heliocentric_state(planet, epoch).position
        distance_au = float(np.linalg.norm(helio))
        mapped = map_distance(distance_au, mapping.distance_scale)
        radius = map_radius(planet, size)

        if stacked:
            distance_scene = prev_orbit + prev_radius + radius + (mapped - prev_mapped)
            prev_orbit, prev_radius, prev_mapped = distance_scene, radius, mapped
        else:
            distance_scene = mapped

        position = ecliptic_to_scene(normalize(helio) * distance_scene)
        if planet is BodyId.EARTH:
            earth_position = position
        bodies.append(
            RenderedBody(
                body=planet,
                position=_frozen(position),
                radius_scene=radius,
                color=body_visual(planet).color,
                distance_au=distance_au,
                distance_scene=distance_scene,
                orientation=_orientation(provider, planet, epoch, include_orientation),
            )
        )

    geo = provider.get_geocentric_state(BodyId.MOON, epoch).position
    offset, moon_distance = moon_offset_scene(geo, mapping)
    bodies.append(
        RenderedBody(
            body=BodyId.MOON,
            position=_frozen(earth_position + offset),
            radius_scene=map_radius(BodyId.MOON, size),
            color=body_visual(BodyId.MOON).color,
            distance_au=float(np.linalg.norm(geo)),
            distance_scene=moon_distance,
            orientation=_orientation(provider, BodyId.MOON, epoch, include_orientation),
        )
    )

    logger.debug(
        "Resolved %d bodies at %s (stacked=%s)", len(bodies), epoch.isoformat(), stacked
    )
    return SceneSnapshot(
        epoch=epoch,
        mapping=mapping,
        bodies=tuple(bodies),
        preset=preset_name,
        moon_phase=provider.moon_phase(epoch),
    )


# =============================================================================
# Floating Origin
# =============================================================================

def recenter(snapshot: SceneSnapshot, focus: Union[str, BodyId]) -> SceneSnapshot:
    """Shift every body so that ``focus`` sits exactly at the origin.

    Works on absolute or already recentered snapshots.
    """
    focus = BodyId.parse(focus)
    origin = snapshot.position(focus).copy()

    bodies = []
    for rendered in snapshot.bodies:
        if rendered.body is focus:
            position = np.zeros(3)
        else:
            position = rendered.position - origin
        bodies.append(replace(rendered, position=_frozen(position)))

    return replace(snapshot, bodies=tuple(bodies), focus=focus)


def resolve_scene(
    epoch: DateLike,
    preset: Union[str, PresetName, RenderMapping] = PresetName.SCHOOL_MODEL,
    focus: Union[str, BodyId] = BodyId.SUN,
    provider: Optional[EphemerisProvider] = None,
    include_orientation: bool = True,
) -> SceneSnapshot:
    """Scene for ``epoch`` under ``preset``, recentered on ``focus``."""
    snapshot = absolute_scene(epoch, preset, provider, include_orientation)
    return recenter(snapshot, focus)
