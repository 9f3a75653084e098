"""Orbit rings and motion trails in scene space.

Rings are circles around the Sun's (recentered) position, or Earth's
for the Moon, that pass exactly through the body's current position.
They are visual guides, not Keplerian orbits: eccentricity and
inclination are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from core.bodies import BodyId
from core.coordinate_transforms import horizontal_basis
from core.errors import InvalidInputError
from utils.constants import (
    MOTION_TRAIL_LENGTH,
    MOTION_TRAIL_STEP_RAD,
    ORBIT_DEGENERATE_RADIUS,
    ORBIT_PATH_SEGMENTS,
)
from visualization.scene import SceneSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrailPoint:
    """One faded sample behind a body."""

    position: np.ndarray  # scene units
    opacity: float
    scale: float


def _ring_basis(
    body_position: np.ndarray, sun_position: np.ndarray
) -> Optional[tuple[np.ndarray, np.ndarray, float]]:
    """(u1, u2, r) for the ring through the body, or None if degenerate."""
    relative = np.asarray(body_position, dtype=np.float64) - np.asarray(
        sun_position, dtype=np.float64
    )
    r = float(np.linalg.norm(relative))
    if r <= ORBIT_DEGENERATE_RADIUS:
        logger.debug("Body within %.0e of the Sun, no orbit ring", ORBIT_DEGENERATE_RADIUS)
        return None
    u1 = relative / r
    return u1, horizontal_basis(u1), r


def reconstruct_orbit_path(
    body_position: np.ndarray,
    sun_position: np.ndarray,
    segments: int = ORBIT_PATH_SEGMENTS,
) -> np.ndarray:
    """Closed ring through ``body_position`` centred on ``sun_position``.

    Args:
        body_position: Body position in scene units, shape (3,).
        sun_position: Sun position in the same frame, shape (3,).
        segments: Number of ring segments.

    Returns:
        Array of shape (segments + 1, 3). Point 0 is exactly
        ``body_position`` and the last point closes the ring. Returns an
        empty (0, 3) array when the body coincides with the Sun.
    """
    if segments < 3:
        raise InvalidInputError(f"segments must be >= 3, got {segments}")

    basis = _ring_basis(body_position, sun_position)
    if basis is None:
        return np.empty((0, 3))
    u1, u2, r = basis

    theta = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    sun = np.asarray(sun_position, dtype=np.float64)
    points = (
        sun
        + np.outer(np.cos(theta) * r, u1)
        + np.outer(np.sin(theta) * r, u2)
    )
    points[0] = body_position
    return points


def motion_trail(
    body_position: np.ndarray,
    sun_position: np.ndarray,
    length: int = MOTION_TRAIL_LENGTH,
    step_rad: float = MOTION_TRAIL_STEP_RAD,
) -> list[TrailPoint]:
    """Fading samples behind a body along its orbit ring.

    Samples step backwards around the ring (negative angle), so the
    trail trails a counterclockwise orbit seen from above. Opacity falls
    from 0.6 towards 0.1 and scale from 1.0 towards 0.4.
    """
    basis = _ring_basis(body_position, sun_position)
    if basis is None:
        return []
    u1, u2, r = basis
    sun = np.asarray(sun_position, dtype=np.float64)

    trail = []
    for i in range(1, length + 1):
        theta = -i * step_rad
        fraction = i / length
        trail.append(
            TrailPoint(
                position=sun + r * (np.cos(theta) * u1 + np.sin(theta) * u2),
                opacity=0.6 - fraction * 0.5,
                scale=1.0 - fraction * 0.6,
            )
        )
    return trail


def scene_orbit_paths(
    snapshot: SceneSnapshot, segments: int = ORBIT_PATH_SEGMENTS
) -> dict[BodyId, np.ndarray]:
    """Orbit ring for every body in a snapshot except the Sun.

    Planet rings are centred on the Sun. The Moon's ring is centred on
    Earth and passes through the Moon's rendered position.

    Returns:
        dict mapping BodyId to an (N, 3) array; bodies whose ring is
        degenerate map to an empty array.
    """
    sun = snapshot.sun_position
    earth = snapshot.position(BodyId.EARTH)
    paths = {}
    for rendered in snapshot:
        if rendered.body is BodyId.SUN:
            continue
        centre = earth if rendered.body is BodyId.MOON else sun
        paths[rendered.body] = reconstruct_orbit_path(rendered.position, centre, segments)
    return paths
