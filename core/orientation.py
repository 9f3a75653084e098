"""Body orientation from IAU WGCCRE rotation models.

Each model gives the pole right ascension and declination (EQJ, degrees)
as linear functions of Julian centuries T since J2000.0, and the prime
meridian angle W as a linear function of days d since J2000.0, plus
periodic terms for Neptune and the Moon. Bodies without a model fall
back to an obliquity plus sidereal rotation-rate approximation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping, Optional, Union

import numpy as np

from core.bodies import BodyId, body_physical
from core.coordinate_transforms import (
    ecliptic_to_scene,
    eqj_to_ecliptic,
    normalize,
    radec_to_unit_vector,
)
from core.errors import InvalidInputError
from utils.constants import DEG_TO_RAD, RAD_TO_DEG
from utils.time_utils import datetime_to_gmst, days_since_j2000

logger = logging.getLogger(__name__)

# (d_ra, d_dec, d_w) in degrees as a function of days since J2000.0
PeriodicTerms = Callable[[float], tuple[float, float, float]]


@dataclass(frozen=True, slots=True)
class BodyOrientation:
    """Spin axis and prime-meridian angle of a body at an epoch.

    Attributes:
        north_pole: unit vector in the ecliptic J2000 frame
        rotation_angle_deg: prime meridian angle W in [0, 360)
        sidereal_period_hours: negative for retrograde rotation
    """

    north_pole: np.ndarray
    rotation_angle_deg: float
    sidereal_period_hours: float

    @property
    def north_pole_scene(self) -> np.ndarray:
        return ecliptic_to_scene(self.north_pole)


@dataclass(frozen=True, slots=True)
class IAURotationModel:
    """Linear IAU rotation elements, optionally with periodic terms."""

    ra0: float  # deg
    ra_rate: float  # deg / century
    dec0: float  # deg
    dec_rate: float  # deg / century
    w0: float  # deg
    w_rate: float  # deg / day
    periodic: Optional[PeriodicTerms] = None

    def evaluate(self, d: float) -> tuple[float, float, float]:
        """Pole (ra, dec) and W in degrees, d days after J2000.0."""
        t = d / 36525.0
        ra = self.ra0 + self.ra_rate * t
        dec = self.dec0 + self.dec_rate * t
        w = self.w0 + self.w_rate * d
        if self.periodic is not None:
            d_ra, d_dec, d_w = self.periodic(d)
            ra += d_ra
            dec += d_dec
            w += d_w
        return ra, dec, w


def _neptune_terms(d: float) -> tuple[float, float, float]:
    t = d / 36525.0
    n = (357.85 + 52.316 * t) * DEG_TO_RAD
    return 0.70 * math.sin(n), -0.51 * math.cos(n), -0.48 * math.sin(n)


# Lunar arguments E1..E13 as (E0 deg, rate deg/day).
_LUNAR_ARGUMENTS: tuple[tuple[float, float], ...] = (
    (125.045, -0.0529921),
    (250.089, -0.1059842),
    (260.008, 13.0120009),
    (176.625, 13.3407154),
    (357.529, 0.9856003),
    (311.589, 26.4057084),
    (134.963, 13.0649930),
    (276.617, 0.3287146),
    (34.226, 1.7484877),
    (15.134, -0.1589763),
    (119.743, 0.0036096),
    (239.961, 0.1643573),
    (25.053, 12.9590088),
)

# Coefficients per argument: (ra sin, dec cos, W sin).
_LUNAR_COEFFICIENTS: tuple[tuple[float, float, float], ...] = (
    (-3.8787, 1.5419, 3.5610),
    (-0.1204, 0.0239, 0.1208),
    (0.0700, -0.0278, -0.0642),
    (-0.0172, 0.0068, 0.0158),
    (0.0, 0.0, 0.0252),
    (0.0072, -0.0029, -0.0066),
    (0.0, 0.0009, -0.0047),
    (0.0, 0.0, -0.0046),
    (0.0, 0.0, 0.0028),
    (-0.0052, 0.0008, 0.0052),
    (0.0, 0.0, 0.0040),
    (0.0, 0.0, 0.0019),
    (0.0043, -0.0009, -0.0044),
)


def _moon_terms(d: float) -> tuple[float, float, float]:
    d_ra, d_dec = 0.0, 0.0
    d_w = -1.4e-12 * d * d
    for (e0, rate), (c_ra, c_dec, c_w) in zip(_LUNAR_ARGUMENTS, _LUNAR_COEFFICIENTS):
        e = (e0 + rate * d) * DEG_TO_RAD
        d_ra += c_ra * math.sin(e)
        d_dec += c_dec * math.cos(e)
        d_w += c_w * math.sin(e)
    return d_ra, d_dec, d_w


# Archinal et al. (2018), Report of the IAU WGCCRE: 2015.
IAU_ROTATION_MODELS: Mapping[BodyId, IAURotationModel] = {
    BodyId.SUN: IAURotationModel(286.13, 0.0, 63.87, 0.0, 84.176, 14.1844000),
    BodyId.MERCURY: IAURotationModel(
        281.0103, -0.0328, 61.4155, -0.0049, 329.5988, 6.1385108
    ),
    BodyId.VENUS: IAURotationModel(272.76, 0.0, 67.16, 0.0, 160.20, -1.4813688),
    BodyId.EARTH: IAURotationModel(0.00, -0.641, 90.00, -0.557, 190.147, 360.9856235),
    BodyId.MOON: IAURotationModel(
        269.9949, 0.0031, 66.5392, 0.0130, 38.3213, 13.17635815, periodic=_moon_terms
    ),
    BodyId.MARS: IAURotationModel(
        317.68143, -0.1061, 52.88650, -0.0609, 176.630, 350.89198226
    ),
    BodyId.JUPITER: IAURotationModel(
        268.056595, -0.006499, 64.495303, 0.002413, 284.95, 870.5360000
    ),
    BodyId.SATURN: IAURotationModel(40.589, -0.036, 83.537, -0.004, 38.90, 810.7939024),
    BodyId.URANUS: IAURotationModel(257.311, 0.0, -15.175, 0.0, 203.81, -501.1600928),
    BodyId.NEPTUNE: IAURotationModel(
        299.36, 0.0, 43.46, 0.0, 249.978, 541.1397757, periodic=_neptune_terms
    ),
}


def normalize_degrees(angle: float) -> float:
    """Wrap an angle into [0, 360)."""
    wrapped = angle % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    return 0.0 if wrapped >= 360.0 else wrapped


def earth_rotation_angle_deg(epoch: datetime) -> float:
    """Earth's prime-meridian angle W = GMST - 90 degrees."""
    gmst_deg = datetime_to_gmst(epoch) * RAD_TO_DEG
    return normalize_degrees(gmst_deg - 90.0)


def fallback_orientation(body: Union[str, BodyId], epoch: datetime) -> BodyOrientation:
    """Orientation from obliquity and sidereal period alone.

    The pole is tilted from the ecliptic north pole by the obliquity. For
    obliquities above 90 degrees the pole points below the ecliptic. W
    starts at 0 at J2000.0 and advances at 360 / |P| degrees per hour.
    """
    physical = body_physical(body)
    obliquity = physical.obliquity_deg
    if obliquity > 90.0:
        effective = (180.0 - obliquity) * DEG_TO_RAD
        north = np.array([0.0, math.sin(effective), -math.cos(effective)])
    else:
        tilt = obliquity * DEG_TO_RAD
        north = np.array([0.0, math.sin(tilt), math.cos(tilt)])

    period = physical.sidereal_rotation_hours
    rotation = 0.0
    if period != 0.0:
        rate_deg_per_day = 360.0 / abs(period) * 24.0
        rotation = normalize_degrees(rate_deg_per_day * days_since_j2000(epoch))

    return BodyOrientation(
        north_pole=normalize(north),
        rotation_angle_deg=rotation,
        sidereal_period_hours=period,
    )


def _pole_and_meridian(
    body: BodyId, epoch: datetime, models: Mapping[BodyId, IAURotationModel]
) -> Optional[tuple[float, float, float]]:
    model = models.get(body)
    if model is None:
        return None
    ra, dec, w = model.evaluate(days_since_j2000(epoch))
    if body is BodyId.EARTH:
        w = earth_rotation_angle_deg(epoch)
    return ra, dec, normalize_degrees(w)


def compute_body_orientation(
    body: Union[str, BodyId],
    epoch: datetime,
    models: Mapping[BodyId, IAURotationModel] = IAU_ROTATION_MODELS,
) -> BodyOrientation:
    """Orientation of ``body`` at ``epoch``.

    Raises:
        UnknownBodyError: If ``body`` is not a known body.
    """
    body = BodyId.parse(body)
    elements = _pole_and_meridian(body, epoch, models)
    if elements is None:
        logger.debug("No IAU rotation model for %s, using obliquity fallback", body)
        return fallback_orientation(body, epoch)

    ra, dec, w = elements
    north = eqj_to_ecliptic(radec_to_unit_vector(ra, dec))
    return BodyOrientation(
        north_pole=normalize(north),
        rotation_angle_deg=w,
        sidereal_period_hours=body_physical(body).sidereal_rotation_hours,
    )


def prime_meridian_direction(
    body: Union[str, BodyId],
    epoch: datetime,
    models: Mapping[BodyId, IAURotationModel] = IAU_ROTATION_MODELS,
) -> np.ndarray:
    """Unit vector from the body's centre through longitude 0, ecliptic J2000.

    W is measured eastward along the body's equator from the ascending
    node of that equator on the EQJ equator.

    Raises:
        InvalidInputError: If ``body`` has no IAU rotation model.
    """
    body = BodyId.parse(body)
    elements = _pole_and_meridian(body, epoch, models)
    if elements is None:
        raise InvalidInputError(f"No IAU rotation model for {body}")

    ra, dec, w = elements
    pole = radec_to_unit_vector(ra, dec)
    node = np.array([-math.sin(ra * DEG_TO_RAD), math.cos(ra * DEG_TO_RAD), 0.0])
    w_rad = w * DEG_TO_RAD
    meridian = math.cos(w_rad) * node + math.sin(w_rad) * np.cross(pole, node)
    return normalize(eqj_to_ecliptic(meridian))
