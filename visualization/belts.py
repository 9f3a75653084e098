"""Asteroid and debris belts.

Belt extents are static data in AU. Point clouds are generated in scene
axes (y up) in AU and then pushed through a distance scale so the belts
line up with the planets under every preset.

Sources:
- Main belt: LPI, https://www.lpi.usra.edu/exploration/education/hsResearch/asteroid_101/
- Kuiper belt: NASA Science, https://science.nasa.gov/solar-system/kuiper-belt/facts/
- Jupiter Trojans: JPL Small-Body Database, https://ssd.jpl.nasa.gov/
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Union

import numpy as np

from core.errors import InvalidInputError
from visualization.scale import (
    DistanceScale,
    PresetName,
    RenderMapping,
    map_distance,
    resolve_mapping,
)

logger = logging.getLogger(__name__)

JUPITER_TROJAN_RADIUS_AU: float = 5.2
TROJAN_RADIAL_SPREAD_AU: float = 0.8
TROJAN_ANGULAR_SIGMA_RAD: float = math.pi / 6.0  # ~30 deg libration
TROJAN_INCLINATION_SPREAD_RAD: float = 0.3


@dataclass(frozen=True, slots=True)
class BeltDefinition:
    name: str
    inner_radius_au: float
    outer_radius_au: float
    thickness_au: float  # typical z-extent above/below the ecliptic
    inclination_spread_deg: float  # 1-sigma
    source: str


class LagrangePoint(str, Enum):
    L4 = "L4"  # leading, 60 deg ahead of Jupiter
    L5 = "L5"  # trailing, 60 deg behind


MAIN_ASTEROID_BELT = BeltDefinition(
    name="Main Asteroid Belt",
    inner_radius_au=2.06,
    outer_radius_au=3.27,
    thickness_au=0.5,
    inclination_spread_deg=20.0,
    source="https://www.lpi.usra.edu/exploration/education/hsResearch/asteroid_101/",
)

KUIPER_BELT = BeltDefinition(
    name="Kuiper Belt",
    inner_radius_au=30.0,
    outer_radius_au=50.0,
    thickness_au=10.0,
    inclination_spread_deg=15.0,
    source="https://science.nasa.gov/solar-system/kuiper-belt/facts/",
)

SCATTERED_DISC = BeltDefinition(
    name="Scattered Disc",
    inner_radius_au=30.0,
    outer_radius_au=100.0,
    thickness_au=30.0,
    inclination_spread_deg=30.0,
    source="https://science.nasa.gov/solar-system/kuiper-belt/",
)

JUPITER_TROJANS_L4 = BeltDefinition(
    name="Jupiter Trojans (L4 - Greek Camp)",
    inner_radius_au=5.0,
    outer_radius_au=5.4,
    thickness_au=0.3,
    inclination_spread_deg=15.0,
    source="https://ssd.jpl.nasa.gov/",
)

JUPITER_TROJANS_L5 = BeltDefinition(
    name="Jupiter Trojans (L5 - Trojan Camp)",
    inner_radius_au=5.0,
    outer_radius_au=5.4,
    thickness_au=0.3,
    inclination_spread_deg=15.0,
    source="https://ssd.jpl.nasa.gov/",
)

ALL_BELTS: tuple[BeltDefinition, ...] = (
    MAIN_ASTEROID_BELT,
    KUIPER_BELT,
    SCATTERED_DISC,
    JUPITER_TROJANS_L4,
    JUPITER_TROJANS_L5,
)


def _check_count(count: int) -> None:
    if count < 0:
        raise InvalidInputError(f"Point count must be >= 0, got {count}")


def generate_belt_points(
    belt: BeltDefinition, count: int, seed: int = 42
) -> np.ndarray:
    """Random belt points in AU, scene axes (y up), shape (count, 3).

    Radii are area-weighted so surface density is uniform across the
    annulus; inclinations are normally distributed with the belt's
    1-sigma spread. The same seed always yields the same points.
    """
    _check_count(count)
    rng = np.random.default_rng(seed)

    inner_sq = belt.inner_radius_au ** 2
    outer_sq = belt.outer_radius_au ** 2
    r = np.sqrt(inner_sq + rng.random(count) * (outer_sq - inner_sq))
    theta = rng.random(count) * 2.0 * np.pi
    inclination = rng.normal(0.0, np.radians(belt.inclination_spread_deg), count)

    return np.column_stack((
        r * np.cos(theta),
        r * np.sin(inclination),
        r * np.sin(theta),
    ))


def jupiter_angle(jupiter_position_scene: np.ndarray) -> float:
    """Jupiter's angle in the scene's horizontal (x, z) plane, radians."""
    return math.atan2(float(jupiter_position_scene[2]), float(jupiter_position_scene[0]))


def generate_trojan_points(
    jupiter_angle_rad: float,
    lagrange_point: Union[LagrangePoint, str],
    count: int,
    seed: int = 42,
) -> np.ndarray:
    """Trojan cloud around Jupiter's L4 or L5 point, AU in scene axes."""
    _check_count(count)
    point = LagrangePoint(lagrange_point)
    offset = math.pi / 3.0 if point is LagrangePoint.L4 else -math.pi / 3.0
    rng = np.random.default_rng(seed)

    angle = jupiter_angle_rad + offset + rng.normal(0.0, TROJAN_ANGULAR_SIGMA_RAD, count)
    r = JUPITER_TROJAN_RADIUS_AU + (rng.random(count) - 0.5) * TROJAN_RADIAL_SPREAD_AU
    inclination = (rng.random(count) - 0.5) * TROJAN_INCLINATION_SPREAD_RAD

    return np.column_stack((
        r * np.cos(angle),
        r * np.sin(inclination),
        r * np.sin(angle),
    ))


def map_belt_points(points_au: np.ndarray, scale: DistanceScale) -> np.ndarray:
    """Scale each point radially through ``scale``, keeping its direction."""
    points_au = np.asarray(points_au, dtype=np.float64)
    if points_au.size == 0:
        return np.empty((0, 3))
    radii = np.linalg.norm(points_au, axis=1)
    mapped = np.array([map_distance(r, scale) for r in radii])
    factors = np.divide(mapped, radii, out=np.zeros_like(radii), where=radii > 0)
    return points_au * factors[:, None]


def mapped_belt_radii(
    belt: BeltDefinition, preset: Union[str, PresetName, RenderMapping]
) -> tuple[float, float]:
    """Inner and outer belt radii in scene units under ``preset``."""
    scale = resolve_mapping(preset).distance_scale
    return (
        map_distance(belt.inner_radius_au, scale),
        map_distance(belt.outer_radius_au, scale),
    )


def belt_scene_points(
    belt: BeltDefinition,
    preset: Union[str, PresetName, RenderMapping],
    count: int,
    seed: int = 42,
) -> np.ndarray:
    """Belt point cloud in scene units under ``preset``."""
    points = generate_belt_points(belt, count, seed)
    logger.debug("Generated %d points for %s", count, belt.name)
    return map_belt_points(points, resolve_mapping(preset).distance_scale)
