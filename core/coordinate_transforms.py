"""Coordinate frame transformations for ephemeris and scene geometry.

Provides:
- WGS84 ellipsoid radii for an observer latitude
- EQJ (ICRS-aligned J2000 equatorial) <-> ECLIPJ2000 rotation
- ECLIPJ2000 <-> scene coordinates (y up, right-handed)
- Galactic (l, b) direction -> unit vector
- Small vector helpers over numpy arrays

All angles in radians internally unless suffixed with _deg.
"""

from __future__ import annotations

import logging

import erfa
import numpy as np

from utils.constants import (
    DEG_TO_RAD,
    ECCENTRICITY_SQ,
    J2000_JD,
    R_EARTH_EQUATORIAL,
)

logger = logging.getLogger(__name__)

# Fixed rotation EQJ -> ECLIPJ2000 (IAU 2006 obliquity at J2000.0).
ROT_EQJ_TO_ECL: np.ndarray = np.asarray(erfa.ecm06(J2000_JD, 0.0), dtype=np.float64)
ROT_ECL_TO_EQJ: np.ndarray = ROT_EQJ_TO_ECL.T.copy()

WORLD_UP: np.ndarray = np.array([0.0, 1.0, 0.0])
WORLD_X: np.ndarray = np.array([1.0, 0.0, 0.0])


# =============================================================================
# WGS84 Ellipsoid
# =============================================================================

def prime_vertical_radius(lat_rad: float) -> float:
    """Radius of curvature in the prime vertical, N(phi), in km."""
    sin_lat = np.sin(lat_rad)
    return float(R_EARTH_EQUATORIAL / np.sqrt(1.0 - ECCENTRICITY_SQ * sin_lat ** 2))


def parallel_radius(lat_deg: float) -> float:
    """Distance from the spin axis to the ellipsoid surface at a latitude.

    r(phi) = a cos(phi) / sqrt(1 - e^2 sin^2(phi)), in km. Exactly 0.0
    at the poles so that downstream products carry no sign noise.

    Args:
        lat_deg: geodetic latitude in degrees, already validated

    Returns:
        Parallel radius in km
    """
    if abs(lat_deg) == 90.0:
        return 0.0
    # r(phi) is even in phi; folding the sign keeps it bit-for-bit symmetric
    lat = abs(lat_deg) * DEG_TO_RAD
    return prime_vertical_radius(lat) * float(np.cos(lat))


def latitude_circumference(lat_deg: float) -> float:
    """Length of the circle of latitude in km."""
    return 2.0 * np.pi * parallel_radius(lat_deg)


# =============================================================================
# EQJ <-> ECLIPJ2000
# =============================================================================

def eqj_to_ecliptic(vec_eqj: np.ndarray) -> np.ndarray:
    """Rotate J2000 equatorial vector(s) into the J2000 ecliptic frame.

    Args:
        vec_eqj: shape (3,) or (N, 3)

    Returns:
        Same shape, ecliptic components
    """
    vec_eqj = np.asarray(vec_eqj, dtype=np.float64)
    return vec_eqj @ ROT_EQJ_TO_ECL.T


def ecliptic_to_eqj(vec_ecl: np.ndarray) -> np.ndarray:
    """Inverse of eqj_to_ecliptic."""
    vec_ecl = np.asarray(vec_ecl, dtype=np.float64)
    return vec_ecl @ ROT_ECL_TO_EQJ.T


def radec_to_unit_vector(ra_deg: float, dec_deg: float) -> np.ndarray:
    """Unit vector for a right ascension / declination pair (EQJ)."""
    ra = ra_deg * DEG_TO_RAD
    dec = dec_deg * DEG_TO_RAD
    return np.array([
        np.cos(dec) * np.cos(ra),
        np.cos(dec) * np.sin(ra),
        np.sin(dec),
    ])


def galactic_to_unit_vector(l_deg: float, b_deg: float) -> np.ndarray:
    """Unit vector for a galactic longitude / latitude pair (galactic frame)."""
    return radec_to_unit_vector(l_deg, b_deg)


# =============================================================================
# ECLIPJ2000 <-> Scene
# =============================================================================

def ecliptic_to_scene(vec_ecl: np.ndarray) -> np.ndarray:
    """Map ecliptic (x, y, z) to scene (x, z, -y).

    Keeps the frame right-handed with the north ecliptic pole as +y and
    the ecliptic plane as the scene xz-plane.
    """
    v = np.asarray(vec_ecl, dtype=np.float64)
    return np.stack([v[..., 0], v[..., 2], -v[..., 1]], axis=-1)


def scene_to_ecliptic(vec_scene: np.ndarray) -> np.ndarray:
    """Inverse of ecliptic_to_scene."""
    v = np.asarray(vec_scene, dtype=np.float64)
    return np.stack([v[..., 0], -v[..., 2], v[..., 1]], axis=-1)


# =============================================================================
# Vector Helpers
# =============================================================================

def magnitude(vec: np.ndarray) -> float:
    return float(np.linalg.norm(vec))


def normalize(vec: np.ndarray) -> np.ndarray:
    """Unit vector along ``vec``; the zero vector maps to itself."""
    vec = np.asarray(vec, dtype=np.float64)
    norm = np.linalg.norm(vec)
    if norm == 0.0:
        logger.debug("normalize() called on a zero vector")
        return np.zeros_like(vec)
    return vec / norm


# squared length of up x u1 below which u1 counts as parallel to up
_PARALLEL_EPS_SQ = 1e-4


def horizontal_basis(u1: np.ndarray, up: np.ndarray = WORLD_UP) -> np.ndarray:
    """Unit vector perpendicular to ``u1`` built from ``up x u1``.

    Falls back to ``x_hat x u1`` when ``u1`` is parallel to ``up``.
    """
    u2 = np.cross(up, u1)
    if float(np.dot(u2, u2)) < _PARALLEL_EPS_SQ:
        logger.debug("Direction parallel to world up, using x-axis fallback basis")
        u2 = np.cross(WORLD_X, u1)
    return u2 / np.linalg.norm(u2)


def ecliptic_longitude_deg(vec_ecl: np.ndarray) -> float:
    """Ecliptic longitude of a vector in degrees, [0, 360)."""
    lon = np.degrees(np.arctan2(vec_ecl[1], vec_ecl[0]))
    return float(lon % 360.0)
