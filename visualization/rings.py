"""Ring systems mapped into scene units.

Ring radii follow the planet's rendered size: a ring at k planet radii
stays at k rendered radii under every size scale, so exaggerated planets
keep their rings outside the globe.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from core.bodies import BodyId, body_physical, body_visual
from core.rings import main_visible_rings, ring_extent_km, ring_system
from visualization.scale import PresetName, RenderMapping, map_radius, resolve_mapping
from visualization.scene import SceneSnapshot


@dataclass(frozen=True, slots=True)
class RenderedRing:
    name: str
    inner_radius_scene: float
    outer_radius_scene: float
    optical_depth: float


@dataclass(frozen=True, slots=True)
class RenderedRingSystem:
    body: BodyId
    rings: tuple[RenderedRing, ...]
    normal: Optional[np.ndarray] = None  # scene axes; None without orientation


def ring_scale_factor(
    body: Union[str, BodyId], preset: Union[str, PresetName, RenderMapping]
) -> float:
    """Scene units per km of ring radius for ``body`` under ``preset``."""
    size = resolve_mapping(preset).size_scale
    return map_radius(body, size) / body_physical(body).radius_mean_km


def mapped_rings(
    body: Union[str, BodyId],
    preset: Union[str, PresetName, RenderMapping],
    main_only: bool = False,
) -> tuple[RenderedRing, ...]:
    """Ring components of ``body`` with radii in scene units.

    Raises:
        InvalidInputError: If the body has no rings.
    """
    components = main_visible_rings(body) if main_only else ring_system(body).components
    factor = ring_scale_factor(body, preset)
    return tuple(
        RenderedRing(
            name=c.name,
            inner_radius_scene=c.inner_radius_km * factor,
            outer_radius_scene=c.outer_radius_km * factor,
            optical_depth=c.optical_depth,
        )
        for c in components
    )


def mapped_ring_extent(
    body: Union[str, BodyId], preset: Union[str, PresetName, RenderMapping]
) -> tuple[float, float]:
    """Innermost and outermost ring radius in scene units."""
    inner_km, outer_km = ring_extent_km(body)
    factor = ring_scale_factor(body, preset)
    return inner_km * factor, outer_km * factor


def scene_rings(
    snapshot: SceneSnapshot, main_only: bool = True
) -> dict[BodyId, RenderedRingSystem]:
    """Rings for every ringed body in a snapshot, keyed by BodyId."""
    systems = {}
    for rendered in snapshot:
        if not body_visual(rendered.body).has_rings:
            continue
        normal = None
        if rendered.orientation is not None:
            normal = rendered.orientation.north_pole_scene
        systems[rendered.body] = RenderedRingSystem(
            body=rendered.body,
            rings=mapped_rings(rendered.body, snapshot.mapping, main_only),
            normal=normal,
        )
    return systems
